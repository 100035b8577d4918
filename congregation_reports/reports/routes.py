# congregation_reports/reports/routes.py
from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query

from congregation_reports.datastore import Session
from congregation_reports.deps import get_report_service, get_session

from .filters import ALL
from .service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


def _as_date(raw: Optional[str], name: str) -> Optional[date]:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{name} must be ISO format (YYYY-MM-DD)")


def _as_month_offset(raw: Optional[str]) -> Union[int, str]:
    if raw is None or raw == ALL:
        return ALL
    try:
        months = int(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="month must be 'all' or a whole number of months ago")
    if months < 0:
        raise HTTPException(status_code=400, detail="month must not be negative")
    return months


@router.get("")
def get_report(
    start: Optional[str] = Query(None, description="ISO date (YYYY-MM-DD). Defaults to the start of the rolling window."),
    end: Optional[str] = Query(None, description="ISO date (YYYY-MM-DD). Defaults to today."),
    session: Session = Depends(get_session),
    service: ReportService = Depends(get_report_service),
):
    """
    Membership / donation / attendance / event aggregates for a date window.
    Failed sub-fetches show up once in `notices`; the rest of the report is still returned.
    """
    d_start = _as_date(start, "start")
    d_end = _as_date(end, "end")
    if d_start and d_end and d_start > d_end:
        raise HTTPException(status_code=400, detail="start must be on or before end")
    return service.build_report(session, d_start, d_end)


@router.get("/financials")
def get_financials(
    type: str = Query(ALL, description="Donation type, or 'all'"),
    month: Optional[str] = Query(ALL, description="'all', or months ago (0 = this month)"),
    session: Session = Depends(get_session),
    service: ReportService = Depends(get_report_service),
):
    return service.financials(session, donation_type=type, month=_as_month_offset(month))


@router.get("/overview")
def get_overview(
    session: Session = Depends(get_session),
    service: ReportService = Depends(get_report_service),
):
    return service.admin_overview(session)


@router.get("/giving")
def get_giving(
    session: Session = Depends(get_session),
    service: ReportService = Depends(get_report_service),
):
    return service.giving(session)


@router.get("/members")
def get_members(
    search: Optional[str] = Query(None),
    status: str = Query(ALL, description="membership_status, or 'all'"),
    session: Session = Depends(get_session),
    service: ReportService = Depends(get_report_service),
):
    return service.members(session, search=search, status=status)
