# dashboard/frames.py
"""
Report dataclasses -> pandas frames shaped for the altair widgets.

Kept free of streamlit so the shaping can be tested on its own. Row order is
the order the aggregation produced; each frame carries a `seq` column so
charts can keep it instead of sorting labels alphabetically.
"""
from __future__ import annotations

from decimal import Decimal
from typing import List, Sequence, Tuple

import pandas as pd

from congregation_reports.reports.models import (
    AttendancePoint,
    CategoryCount,
    FinancialSummary,
    ReportHeadline,
    TrendPoint,
)


def _money(value: Decimal) -> str:
    return f"${float(value):,.2f}"


def category_frame(stats: Sequence[CategoryCount]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"seq": i, "type": s.label, "count": s.count, "percentage": s.percentage} for i, s in enumerate(stats)],
        columns=["seq", "type", "count", "percentage"],
    )


def trend_frame(points: Sequence[TrendPoint]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"seq": i, "month": p.period_label, "amount": float(p.amount)} for i, p in enumerate(points)],
        columns=["seq", "month", "amount"],
    )


def by_type_frame(summary: FinancialSummary) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"seq": i, "type": b.label, "amount": float(b.amount), "percentage": b.percentage}
            for i, b in enumerate(summary.by_type)
        ],
        columns=["seq", "type", "amount", "percentage"],
    )


def attendance_frame(points: Sequence[AttendancePoint]) -> pd.DataFrame:
    """Long format (one row per date per series) for a stacked bar."""
    wide = pd.DataFrame(
        [
            {"seq": i, "date": p.date_label, "Members": p.members, "Visitors": p.visitors}
            for i, p in enumerate(points)
        ],
        columns=["seq", "date", "Members", "Visitors"],
    )
    return wide.melt(id_vars=["seq", "date"], var_name="series", value_name="count").sort_values(
        ["seq", "series"], kind="stable"
    ).reset_index(drop=True)


def headline_metrics(headline: ReportHeadline) -> List[Tuple[str, str]]:
    return [
        ("Total Members", f"{headline.total_members:,}"),
        ("Total Donations", _money(headline.total_donations)),
        ("Events Held", f"{headline.events_held:,}"),
        ("Avg. Attendance", f"{headline.average_attendance:,}"),
    ]


def summary_metrics(summary: FinancialSummary) -> List[Tuple[str, str]]:
    return [
        ("Total Donations", _money(summary.total)),
        ("Average Donation", _money(summary.average)),
        ("Donation Count", f"{summary.count:,}"),
    ]
