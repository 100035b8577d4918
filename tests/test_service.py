from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

from congregation_reports.reports.fetch import FETCH_FAILED_MESSAGE, ReportRequestTracker
from congregation_reports.reports.models import CategoryCount, TrendPoint
from congregation_reports.reports.service import ReportService


def test_build_report_aggregates_all_views(fake_store, client, session, today):
    store = fake_store()
    report = ReportService(client).build_report(session, today=today)

    assert report.notices == []
    assert report.membership_stats[0] == CategoryCount(label="Member", count=2, percentage=50)
    assert report.donation_trends[0] == TrendPoint(period_label="Mar 2024", amount=Decimal("150.50"))
    assert report.financial_summary.total == Decimal("300.00")
    assert [p.date_label for p in report.attendance_data] == ["Mar 3", "Mar 10", "Mar 17"]
    assert [(s.label, s.count) for s in report.event_stats] == [("Service", 2), ("Other", 1)]
    assert report.headline.total_members == 4
    assert report.headline.visitor_count == 2
    assert report.headline.average_attendance == 84

    # default window: 30 days back from today
    assert ("donation_date", "gte.2024-02-19") in store.params_for("donations")[0]
    assert ("donation_date", "lte.2024-03-20") in store.params_for("donations")[0]


def test_build_report_uses_explicit_range(fake_store, client, session):
    store = fake_store()
    ReportService(client).build_report(session, date(2024, 1, 1), date(2024, 1, 31))
    assert store.params_for("visitors")[0][1:] == [("visit_date", "gte.2024-01-01"), ("visit_date", "lte.2024-01-31")]


def test_build_report_survives_a_failed_fetch(fake_store, client, session, today):
    fake_store(failing=("donations", "visitors"))
    notify = MagicMock()
    report = ReportService(client).build_report(session, notify=notify, today=today)

    notify.assert_called_once_with(FETCH_FAILED_MESSAGE)
    assert report.notices == [FETCH_FAILED_MESSAGE]
    assert report.donation_trends == []
    assert report.financial_summary.count == 0
    assert report.financial_summary.average == 0
    assert report.headline.total_members == 4


def test_build_report_when_every_fetch_fails(fake_store, client, session, today):
    fake_store(failing=("members", "donations", "event_attendance_counts", "events", "visitors"))
    report = ReportService(client).build_report(session, today=today)
    assert report.notices == [FETCH_FAILED_MESSAGE]
    assert report.membership_stats == []
    assert report.headline.average_attendance == 0


def _supersede_during_fetch(monkeypatch, service, session, start, end):
    """While the next build is fetching, start and finish a newer one."""
    real_fetch = service._fetch
    newer = []

    def fetch_then_supersede(queries, sess, notices):
        rows = real_fetch(queries, sess, notices)
        if not newer:
            newer.append(None)
            newer[0] = service.build_report(sess, start, end)
        return rows

    monkeypatch.setattr(service, "_fetch", fetch_then_supersede)
    return newer


def test_superseded_report_is_not_returned(monkeypatch, fake_store, client, session, today):
    fake_store()
    tracker = ReportRequestTracker()
    service = ReportService(client, tracker=tracker)
    newer = _supersede_during_fetch(monkeypatch, service, session, date(2024, 1, 1), date(2024, 1, 31))

    stale = service.build_report(session, today=today)

    assert stale is None
    assert newer[0] is not None
    assert tracker.latest is newer[0]


def test_superseded_report_does_not_notify(monkeypatch, fake_store, client, session, today):
    fake_store(failing=("donations",))
    service = ReportService(client, tracker=ReportRequestTracker())
    _supersede_during_fetch(monkeypatch, service, session, date(2024, 1, 1), date(2024, 1, 31))
    notify = MagicMock()

    assert service.build_report(session, notify=notify, today=today) is None
    notify.assert_not_called()


def test_current_tracked_report_is_returned_and_notifies(fake_store, client, session, today):
    fake_store(failing=("donations",))
    tracker = ReportRequestTracker()
    notify = MagicMock()

    report = ReportService(client, tracker=tracker).build_report(session, notify=notify, today=today)

    assert report is not None
    assert tracker.latest is report
    notify.assert_called_once_with(FETCH_FAILED_MESSAGE)


def test_financials_filters_before_aggregating(fake_store, client, session, today):
    store = fake_store()
    service = ReportService(client)

    tithe = service.financials(session, donation_type="tithe", today=today)
    assert tithe.totals.total == Decimal("120.50")
    assert tithe.totals.tithe == Decimal("120.50")
    assert tithe.summary.count == 1

    this_month = service.financials(session, month=0, today=today)
    assert [d["id"] for d in this_month.donations] == ["d1", "d2"]
    assert this_month.totals.total == Decimal("150.50")
    assert this_month.totals.offering == 30

    assert ("order", "created_at.desc") in store.params_for("donations")[0]


def test_admin_overview(fake_store, client, session, today):
    fake_store()
    overview = ReportService(client).admin_overview(session, today=today)
    assert overview.total_members == 4
    assert overview.total_events == 3
    assert overview.total_donations == 5
    assert overview.total_visitors == 2
    assert overview.upcoming_events == 2
    assert overview.monthly_donations == Decimal("300.00")
    assert len(overview.recent_donations) == 5
    assert overview.notices == []


def test_giving(fake_store, client, session, today):
    fake_store()
    stats = ReportService(client).giving(session, today=today)
    assert stats.total_giving == Decimal("300.00")
    assert stats.this_month == Decimal("150.50")
    assert stats.member_count == 4


def test_members_directory(fake_store, client, session):
    fake_store()
    view = ReportService(client).members(session, status="active")
    assert [m["id"] for m in view.members] == ["m1", "m3", "m4"]
    assert (view.total, view.active, view.visitors, view.full_members) == (4, 3, 0, 2)

    found = ReportService(client).members(session, search="boateng")
    assert [m["id"] for m in found.members] == ["m2"]
    assert found.total == 4
