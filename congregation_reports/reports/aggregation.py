# congregation_reports/reports/aggregation.py
"""
Aggregation over raw rows for the reporting and finance views.

Every function here is pure: it takes plain lists of records (dicts exactly as
the data store returned them) and builds the summary dataclasses the views
render. Nothing here fetches, filters by user choice, or caches; callers run
the filter stage first and call these on whatever survived.

Rows are loosely typed. A missing, null or empty category falls back to a
per-entity default, numeric fields that will not parse count as 0, and empty
inputs produce zero/empty results instead of dividing by zero.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from congregation_reports.utils.common import (
    ZERO,
    capitalize_label,
    day_label,
    month_label,
    parse_amount,
    parse_count,
    parse_record_date,
    round_half_up,
    to_cents,
    whole_percent,
)

from .models import (
    AmountBreakdown,
    AttendancePoint,
    CategoryCount,
    FinancialSummary,
    GivingStats,
    GivingTypeTotals,
    ReportHeadline,
    TrendPoint,
)

log = logging.getLogger(__name__)

# Per-entity fallbacks for absent categories
DEFAULT_MEMBERSHIP_TYPE = "visitor"
DEFAULT_DONATION_TYPE = "other"
DEFAULT_EVENT_TYPE = "other"

Record = Mapping[str, Any]


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return None


def _category_key(record: Any, field: str, default: str) -> str:
    raw = _field(record, field)
    if raw is None or raw == "":
        return default
    return str(raw)


def _amount(record: Any) -> Optional[Decimal]:
    return parse_amount(_field(record, "amount"))


# ─────────────────────────────
# Category breakdowns
# ─────────────────────────────
def category_breakdown(records: Sequence[Record], field: str, default: str) -> List[CategoryCount]:
    """
    Count records per category value and attach a whole-number percentage.

    Buckets keep first-seen order. Each percentage is rounded on its own, so
    the column does not necessarily add up to 100.
    """
    total = len(records)
    if total == 0:
        return []

    counts: Dict[str, int] = {}
    for record in records:
        key = _category_key(record, field, default)
        counts[key] = counts.get(key, 0) + 1

    return [
        CategoryCount(
            label=capitalize_label(key),
            count=count,
            percentage=whole_percent(count, total),
        )
        for key, count in counts.items()
    ]


def membership_breakdown(members: Sequence[Record]) -> List[CategoryCount]:
    return category_breakdown(members, "membership_type", DEFAULT_MEMBERSHIP_TYPE)


def event_type_counts(events: Sequence[Record]) -> List[CategoryCount]:
    return category_breakdown(events, "event_type", DEFAULT_EVENT_TYPE)


# ─────────────────────────────
# Donations
# ─────────────────────────────
def sum_amounts(donations: Iterable[Record]) -> Decimal:
    total = ZERO
    for d in donations:
        total += _amount(d) or ZERO
    return total


def monthly_donation_trend(donations: Sequence[Record]) -> List[TrendPoint]:
    """
    Sum donation amounts per calendar month ('Mar 2024').

    Months appear in the order they are first met while scanning the input,
    which is whatever order the store returned; they are not re-sorted.
    """
    monthly: Dict[str, Decimal] = {}
    for d in donations:
        label = month_label(parse_record_date(_field(d, "donation_date")))
        monthly[label] = monthly.get(label, ZERO) + (_amount(d) or ZERO)

    return [TrendPoint(period_label=label, amount=to_cents(amount)) for label, amount in monthly.items()]


def financial_summary(donations: Sequence[Record]) -> FinancialSummary:
    count = len(donations)
    if count == 0:
        return FinancialSummary()

    total = ZERO
    by_type: Dict[str, Decimal] = {}
    skipped = 0
    for d in donations:
        amount = _amount(d)
        if amount is None:
            skipped += 1
            amount = ZERO
        total += amount
        key = _category_key(d, "donation_type", DEFAULT_DONATION_TYPE)
        by_type[key] = by_type.get(key, ZERO) + amount

    if skipped:
        log.debug("[reports] financial summary: %s of %s donations had no usable amount", skipped, count)

    return FinancialSummary(
        total=total,
        average=total / count,
        count=count,
        by_type=[
            AmountBreakdown(
                label=capitalize_label(key),
                amount=amount,
                percentage=whole_percent(amount, total),
            )
            for key, amount in by_type.items()
        ],
    )


def giving_type_totals(donations: Sequence[Record]) -> GivingTypeTotals:
    """Finance cards: overall total plus the three headline funds."""
    out = GivingTypeTotals()
    for d in donations:
        amount = _amount(d) or ZERO
        out.total += amount
        kind = _field(d, "donation_type")
        if kind == "tithe":
            out.tithe += amount
        elif kind == "offering":
            out.offering += amount
        elif kind == "missions":
            out.missions += amount
    return out


def giving_stats(donations: Sequence[Record], today: date, member_count: int = 0) -> GivingStats:
    """Lifetime giving and giving within today's calendar month."""
    this_month = ZERO
    for d in donations:
        when = parse_record_date(_field(d, "donation_date"))
        if when is not None and (when.year, when.month) == (today.year, today.month):
            this_month += _amount(d) or ZERO
    return GivingStats(
        total_giving=sum_amounts(donations),
        this_month=this_month,
        member_count=member_count,
    )


# ─────────────────────────────
# Attendance / events
# ─────────────────────────────
def attendance_series(records: Sequence[Record]) -> List[AttendancePoint]:
    # one point per row, no grouping
    return [
        AttendancePoint(
            date_label=day_label(parse_record_date(_field(r, "attendance_date"))),
            total=parse_count(_field(r, "total_count")),
            members=parse_count(_field(r, "members_count")),
            visitors=parse_count(_field(r, "visitors_count")),
        )
        for r in records
    ]


def average_attendance(points: Sequence[AttendancePoint]) -> int:
    if not points:
        return 0
    return round_half_up(Decimal(sum(p.total for p in points)) / len(points))


def upcoming_event_count(events: Sequence[Record], today: date) -> int:
    upcoming = 0
    for e in events:
        when = parse_record_date(_field(e, "event_date"))
        if when is not None and when >= today:
            upcoming += 1
    return upcoming


def report_headline(
    membership_stats: Sequence[CategoryCount],
    summary: FinancialSummary,
    event_stats: Sequence[CategoryCount],
    attendance: Sequence[AttendancePoint],
    visitor_count: int = 0,
) -> ReportHeadline:
    """Summary cards shown above the report tabs."""
    return ReportHeadline(
        total_members=sum(s.count for s in membership_stats),
        total_donations=summary.total,
        events_held=sum(s.count for s in event_stats),
        average_attendance=average_attendance(attendance),
        visitor_count=visitor_count,
    )
