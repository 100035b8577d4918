# congregation_reports/reports/fetch.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from congregation_reports.datastore import DataStoreClient, DataStoreError, Query, Session

log = logging.getLogger(__name__)

Notifier = Callable[[str], None]
T = TypeVar("T")

FETCH_FAILED_MESSAGE = "Failed to fetch report data"


@dataclass
class FetchResult:
    rows: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def get(self, key: str) -> List[Dict[str, Any]]:
        return self.rows.get(key, [])


def fetch_all(
    queries: Dict[str, Query],
    session: Session,
    *,
    notify: Optional[Notifier] = None,
    max_workers: int = 5,
) -> FetchResult:
    """
    Run every query side by side and wait for all of them.

    A failed query leaves [] under its key; the rest still come back. When
    anything failed, `notify` is called once for the whole batch. Nothing is
    retried.
    """
    result = FetchResult(rows={key: [] for key in queries})
    if not queries:
        return result

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(queries)))) as executor:
        future_to_key: Dict[Future, str] = {
            executor.submit(query.execute, session): key for key, query in queries.items()
        }
        for future in as_completed(future_to_key):
            key = future_to_key[future]
            try:
                result.rows[key] = future.result()
            except DataStoreError as e:
                log.warning("[reports] fetch %s failed: %s", key, e)
                result.errors[key] = str(e)

    if result.errors and notify is not None:
        notify(FETCH_FAILED_MESSAGE)
    return result


class ReportRequestTracker(Generic[T]):
    """
    Sequence-number guard for overlapping fetches.

    Each fetch takes a token from `begin()`. When it resolves, `publish()`
    stores its value only if no newer fetch has started since; a late answer
    to a superseded request is dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._issued = 0
        self._value: Optional[T] = None

    def begin(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._issued

    def publish(self, token: int, value: T) -> bool:
        with self._lock:
            if token != self._issued:
                log.info("[reports] dropping stale response token=%s latest=%s", token, self._issued)
                return False
            self._value = value
            return True

    @property
    def latest(self) -> Optional[T]:
        with self._lock:
            return self._value


def default_window(today: date, days: int) -> tuple[date, date]:
    return today - timedelta(days=days), today


def report_queries(client: DataStoreClient, start: date, end: date) -> Dict[str, Query]:
    """Raw-row queries behind the reporting view for [start, end]."""
    s, e = start.isoformat(), end.isoformat()
    return {
        "members": client.table("members").select("*"),
        "donations": client.table("donations").select("*").gte("donation_date", s).lte("donation_date", e),
        "attendance": (
            client.table("event_attendance_counts").select("*")
            .gte("attendance_date", s).lte("attendance_date", e)
        ),
        "events": client.table("events").select("*"),
        "visitors": client.table("visitors").select("*").gte("visit_date", s).lte("visit_date", e),
    }


def overview_queries(client: DataStoreClient, month_start: date) -> Dict[str, Query]:
    """Admin dashboard counts, this month's giving and the latest sign-ups/gifts."""
    return {
        "members": client.table("members").select("id"),
        "events": client.table("events").select("id,event_date"),
        "donations": client.table("donations").select("id"),
        "visitors": client.table("visitors").select("id"),
        "recent_members": (
            client.table("members").select("first_name,last_name,created_at,membership_type")
            .order("created_at", ascending=False).limit(5)
        ),
        "recent_donations": (
            client.table("donations").select("amount,donor_name,created_at,donation_type")
            .order("created_at", ascending=False).limit(5)
        ),
        "month_donations": client.table("donations").select("amount").gte("created_at", month_start.isoformat()),
    }
