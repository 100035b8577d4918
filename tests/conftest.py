from datetime import date
from typing import Any, Dict, Iterable, List
from urllib.parse import urlparse

import pytest
import requests

from congregation_reports.datastore import DataStoreClient, Session


TODAY = date(2024, 3, 20)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def session() -> Session:
    return Session(access_token="user-token", user_id="u-1", role="authenticated")


@pytest.fixture
def client() -> DataStoreClient:
    return DataStoreClient("https://store.test", "anon-key", timeout=5)


@pytest.fixture
def members() -> List[Dict[str, Any]]:
    return [
        {"id": "m1", "first_name": "Ama", "last_name": "Mensah", "email": "ama@example.com",
         "phone_number": "0244000001", "membership_type": "member", "membership_status": "active"},
        {"id": "m2", "first_name": "Kofi", "last_name": "Boateng", "email": "KOFI@example.com",
         "phone_number": "0244000002", "membership_type": "member", "membership_status": "inactive"},
        {"id": "m3", "first_name": "Esi", "last_name": "Owusu", "email": None,
         "phone_number": None, "membership_type": None, "membership_status": "active"},
        {"id": "m4", "first_name": "Yaw", "last_name": "Asante", "email": "yaw@example.com",
         "phone_number": "0201112222", "membership_type": "leader", "membership_status": "active"},
    ]


@pytest.fixture
def donations() -> List[Dict[str, Any]]:
    # reverse-chronological, as the store returns them
    return [
        {"id": "d1", "amount": "120.50", "donation_date": "2024-03-18", "donation_type": "tithe",
         "created_at": "2024-03-18T09:00:00+00:00"},
        {"id": "d2", "amount": 30, "donation_date": "2024-03-03", "donation_type": "offering",
         "created_at": "2024-03-03T10:00:00+00:00"},
        {"id": "d3", "amount": "49.50", "donation_date": "2024-02-11", "donation_type": "missions",
         "created_at": "2024-02-11T10:00:00+00:00"},
        {"id": "d4", "amount": "100", "donation_date": "2024-01-07", "donation_type": "building_fund",
         "created_at": "2024-01-07T10:00:00+00:00"},
        {"id": "d5", "amount": None, "donation_date": "2024-01-07", "donation_type": None,
         "created_at": "2024-01-07T11:00:00+00:00"},
    ]


@pytest.fixture
def attendance() -> List[Dict[str, Any]]:
    return [
        {"attendance_date": "2024-03-03", "total_count": 120, "members_count": 100, "visitors_count": 20},
        {"attendance_date": "2024-03-10", "total_count": 131, "members_count": 110, "visitors_count": 21},
        {"attendance_date": "2024-03-17"},
    ]


@pytest.fixture
def events() -> List[Dict[str, Any]]:
    return [
        {"id": "e1", "event_type": "service", "event_date": "2024-03-24"},
        {"id": "e2", "event_type": "service", "event_date": "2024-03-10"},
        {"id": "e3", "event_type": None, "event_date": "2024-04-02"},
    ]


def _table_from_url(url: str) -> str:
    return urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]


class FakeStore:
    """
    Stands in for the HTTP transport under DataStoreClient.
    Returns canned rows per table and records every call.
    """

    def __init__(self, tables: Dict[str, List[Dict[str, Any]]], failing: Iterable[str] = ()):
        self.tables = tables
        self.failing = set(failing)
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, method, url, *, headers=None, params=None, json_body=None, timeout=30, retries=0, backoff=0.6):
        table = _table_from_url(url)
        self.calls.append({"method": method, "table": table, "headers": headers, "params": params})
        if table in self.failing:
            raise requests.ConnectionError(f"{table} unreachable")
        return list(self.tables.get(table, []))

    def params_for(self, table: str) -> List[List[Any]]:
        return [c["params"] for c in self.calls if c["table"] == table]


@pytest.fixture
def fake_store(monkeypatch, members, donations, attendance, events):
    def install(tables=None, failing=()):
        store = FakeStore(
            tables if tables is not None else {
                "members": members,
                "donations": donations,
                "event_attendance_counts": attendance,
                "events": events,
                "visitors": [{"id": "v1"}, {"id": "v2"}],
            },
            failing=failing,
        )
        monkeypatch.setattr("congregation_reports.datastore.client.request_json", store)
        return store

    return install
