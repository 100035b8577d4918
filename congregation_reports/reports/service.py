# congregation_reports/reports/service.py
from __future__ import annotations

import logging
import time
from datetime import date
from typing import List, Optional, Union

from congregation_reports.config import settings
from congregation_reports.datastore import DataStoreClient, Session

from . import aggregation as agg
from .fetch import (
    FetchResult,
    Notifier,
    ReportRequestTracker,
    default_window,
    fetch_all,
    overview_queries,
    report_queries,
)
from .filters import ALL, filter_by_category, filter_by_month_offset, search_members
from .models import AdminOverview, FinancialsView, GivingStats, MembersView, ReportData

log = logging.getLogger(__name__)


class _Notices:
    """Collects user-facing notices and forwards them to an optional sink."""

    def __init__(self, sink: Optional[Notifier] = None):
        self.items: List[str] = []
        self._sink = sink

    def __call__(self, message: str) -> None:
        self.items.append(message)
        if self._sink is not None:
            self._sink(message)


class ReportService:
    """
    Two stages per view: fetch raw rows, then aggregate them.

    The fetch stage talks to the store; everything after it is a pure function
    of the rows it returned.
    """

    def __init__(
        self,
        client: DataStoreClient,
        *,
        tracker: Optional[ReportRequestTracker[ReportData]] = None,
        max_workers: int = settings.FETCH_MAX_WORKERS,
        window_days: int = settings.REPORT_WINDOW_DAYS,
    ):
        self.client = client
        self.tracker = tracker
        self.max_workers = max_workers
        self.window_days = window_days

    def _fetch(self, queries, session: Session, notices: _Notices) -> FetchResult:
        return fetch_all(queries, session, notify=notices, max_workers=self.max_workers)

    # ---- Reports & analytics ------------------------------------------------
    def build_report(
        self,
        session: Session,
        start: Optional[date] = None,
        end: Optional[date] = None,
        *,
        notify: Optional[Notifier] = None,
        today: Optional[date] = None,
    ) -> Optional[ReportData]:
        """
        Fetch and aggregate the reporting view for [start, end].

        With a tracker attached, returns None when a newer build started while
        this one was fetching; the newer result is then `tracker.latest`.
        """
        default_start, default_end = default_window(today or date.today(), self.window_days)
        start = start or default_start
        end = end or default_end

        token = self.tracker.begin() if self.tracker is not None else None
        # tracked builds hold their notices until they know they are still current
        notices = _Notices(notify if token is None else None)
        t0 = time.perf_counter()

        rows = self._fetch(report_queries(self.client, start, end), session, notices)

        membership_stats = agg.membership_breakdown(rows.get("members"))
        summary = agg.financial_summary(rows.get("donations"))
        event_stats = agg.event_type_counts(rows.get("events"))
        attendance = agg.attendance_series(rows.get("attendance"))

        report = ReportData(
            membership_stats=membership_stats,
            donation_trends=agg.monthly_donation_trend(rows.get("donations")),
            attendance_data=attendance,
            financial_summary=summary,
            event_stats=event_stats,
            headline=agg.report_headline(
                membership_stats, summary, event_stats, attendance, len(rows.get("visitors"))
            ),
            notices=notices.items,
        )
        log.info(
            "[reports] report %s..%s members=%s donations=%s attendance=%s events=%s failed=%s in %.2fs",
            start, end, len(rows.get("members")), summary.count, len(attendance),
            len(rows.get("events")), sorted(rows.errors), time.perf_counter() - t0,
        )

        if token is not None:
            if not self.tracker.publish(token, report):
                return None
            if notify is not None:
                for message in notices.items:
                    notify(message)
        return report

    # ---- Financial management ----------------------------------------------
    def financials(
        self,
        session: Session,
        donation_type: Optional[str] = ALL,
        month: Union[int, str, None] = ALL,
        *,
        notify: Optional[Notifier] = None,
        today: Optional[date] = None,
    ) -> FinancialsView:
        notices = _Notices(notify)
        query = self.client.table("donations").select("*").order("created_at", ascending=False)
        donations = self._fetch({"donations": query}, session, notices).get("donations")

        filtered = filter_by_category(donations, "donation_type", donation_type)
        filtered = filter_by_month_offset(filtered, "donation_date", month, today or date.today())

        return FinancialsView(
            totals=agg.giving_type_totals(filtered),
            summary=agg.financial_summary(filtered),
            donations=filtered,
            notices=notices.items,
        )

    # ---- Admin dashboard ---------------------------------------------------
    def admin_overview(
        self, session: Session, *, notify: Optional[Notifier] = None, today: Optional[date] = None
    ) -> AdminOverview:
        today = today or date.today()
        notices = _Notices(notify)
        rows = self._fetch(overview_queries(self.client, today.replace(day=1)), session, notices)

        return AdminOverview(
            total_members=len(rows.get("members")),
            total_events=len(rows.get("events")),
            total_donations=len(rows.get("donations")),
            total_visitors=len(rows.get("visitors")),
            upcoming_events=agg.upcoming_event_count(rows.get("events"), today),
            monthly_donations=agg.sum_amounts(rows.get("month_donations")),
            recent_members=rows.get("recent_members"),
            recent_donations=rows.get("recent_donations"),
            notices=notices.items,
        )

    # ---- Member-facing giving ----------------------------------------------
    def giving(
        self, session: Session, *, notify: Optional[Notifier] = None, today: Optional[date] = None
    ) -> GivingStats:
        notices = _Notices(notify)
        rows = self._fetch(
            {
                "donations": self.client.table("donations").select("amount,donation_date"),
                "members": self.client.table("members").select("id"),
            },
            session,
            notices,
        )
        stats = agg.giving_stats(rows.get("donations"), today or date.today(), len(rows.get("members")))
        stats.notices = notices.items
        return stats

    # ---- Member directory --------------------------------------------------
    def members(
        self,
        session: Session,
        search: Optional[str] = None,
        status: Optional[str] = ALL,
        *,
        notify: Optional[Notifier] = None,
    ) -> MembersView:
        notices = _Notices(notify)
        query = self.client.table("members").select("*").order("created_at", ascending=False)
        members = self._fetch({"members": query}, session, notices).get("members")

        shown = filter_by_category(search_members(members, search), "membership_status", status)
        # cards count the whole directory, the list shows the filtered rows
        return MembersView(
            members=shown,
            total=len(members),
            active=len(filter_by_category(members, "membership_status", "active")),
            visitors=len(filter_by_category(members, "membership_type", "visitor")),
            full_members=len(filter_by_category(members, "membership_type", "member")),
            notices=notices.items,
        )
