# congregation_reports/reports/filters.py
from __future__ import annotations

from datetime import date
from typing import Any, List, Mapping, Optional, Sequence, Union

from dateutil.relativedelta import relativedelta

from congregation_reports.utils.common import parse_record_date

ALL = "all"

Record = Mapping[str, Any]


def _get(record: Any, name: str) -> Any:
    return record.get(name) if isinstance(record, Mapping) else None


def filter_by_category(
    records: Sequence[Record], field: str, value: Optional[str], all_value: str = ALL
) -> List[Record]:
    """Keep rows whose `field` equals `value`; None or the 'all' sentinel keeps everything."""
    if value is None or value == all_value:
        return list(records)
    return [r for r in records if _get(r, field) == value]


def filter_by_date_range(
    records: Sequence[Record], field: str, start: Optional[date] = None, end: Optional[date] = None
) -> List[Record]:
    """
    Inclusive [start, end] on the row's calendar date.
    Rows without a usable date only survive when no bound is set.
    """
    if start is None and end is None:
        return list(records)
    out = []
    for r in records:
        when = parse_record_date(_get(r, field))
        if when is None:
            continue
        if start is not None and when < start:
            continue
        if end is not None and when > end:
            continue
        out.append(r)
    return out


def filter_by_month_offset(
    records: Sequence[Record], field: str, months_ago: Union[int, str, None], today: date
) -> List[Record]:
    """
    Keep rows dated in the calendar month `months_ago` months before `today`
    (0 = this month). None or 'all' keeps everything.
    """
    if months_ago is None or months_ago == ALL:
        return list(records)
    target = today - relativedelta(months=int(months_ago))
    out = []
    for r in records:
        when = parse_record_date(_get(r, field))
        if when is not None and (when.year, when.month) == (target.year, target.month):
            out.append(r)
    return out


def search_members(members: Sequence[Record], term: Optional[str]) -> List[Record]:
    """Name/email match is case-insensitive; phone numbers match as typed."""
    if not term:
        return list(members)
    needle = term.lower()
    out = []
    for m in members:
        full_name = f"{_get(m, 'first_name') or ''} {_get(m, 'last_name') or ''}".lower()
        email = str(_get(m, "email") or "").lower()
        phone = str(_get(m, "phone_number") or "")
        if needle in full_name or needle in email or term in phone:
            out.append(m)
    return out
