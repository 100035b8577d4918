from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List


@dataclass
class CategoryCount:
    label: str
    count: int
    percentage: int


@dataclass
class AmountBreakdown:
    label: str
    amount: Decimal
    percentage: int


@dataclass
class TrendPoint:
    period_label: str
    amount: Decimal


@dataclass
class FinancialSummary:
    total: Decimal = Decimal("0")
    average: Decimal = Decimal("0")
    count: int = 0
    by_type: List[AmountBreakdown] = field(default_factory=list)


@dataclass
class AttendancePoint:
    date_label: str
    total: int = 0
    members: int = 0
    visitors: int = 0


@dataclass
class ReportHeadline:
    total_members: int = 0
    total_donations: Decimal = Decimal("0")
    events_held: int = 0
    average_attendance: int = 0
    visitor_count: int = 0


@dataclass
class ReportData:
    """Everything the reporting view renders for one date window."""
    membership_stats: List[CategoryCount] = field(default_factory=list)
    donation_trends: List[TrendPoint] = field(default_factory=list)
    attendance_data: List[AttendancePoint] = field(default_factory=list)
    financial_summary: FinancialSummary = field(default_factory=FinancialSummary)
    event_stats: List[CategoryCount] = field(default_factory=list)
    headline: ReportHeadline = field(default_factory=ReportHeadline)
    notices: List[str] = field(default_factory=list)


@dataclass
class GivingTypeTotals:
    total: Decimal = Decimal("0")
    tithe: Decimal = Decimal("0")
    offering: Decimal = Decimal("0")
    missions: Decimal = Decimal("0")


@dataclass
class GivingStats:
    total_giving: Decimal = Decimal("0")
    this_month: Decimal = Decimal("0")
    member_count: int = 0
    notices: List[str] = field(default_factory=list)


@dataclass
class AdminOverview:
    total_members: int = 0
    total_events: int = 0
    total_donations: int = 0
    total_visitors: int = 0
    upcoming_events: int = 0
    monthly_donations: Decimal = Decimal("0")
    recent_members: List[Dict[str, Any]] = field(default_factory=list)
    recent_donations: List[Dict[str, Any]] = field(default_factory=list)
    notices: List[str] = field(default_factory=list)


@dataclass
class FinancialsView:
    totals: GivingTypeTotals = field(default_factory=GivingTypeTotals)
    summary: FinancialSummary = field(default_factory=FinancialSummary)
    donations: List[Dict[str, Any]] = field(default_factory=list)
    notices: List[str] = field(default_factory=list)


@dataclass
class MembersView:
    members: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    active: int = 0
    visitors: int = 0
    full_members: int = 0
    notices: List[str] = field(default_factory=list)
