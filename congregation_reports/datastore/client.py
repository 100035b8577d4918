# congregation_reports/datastore/client.py
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import requests

from congregation_reports.config import DATASTORE_BASE_URL, settings
from congregation_reports.utils.common import auth_headers, request_json

from .session import Session

log = logging.getLogger(__name__)

REST_PATH = "/rest/v1"


class DataStoreError(RuntimeError):
    """A read against the hosted store failed (transport, HTTP status or payload)."""

    def __init__(self, table: str, message: str):
        super().__init__(f"{table}: {message}")
        self.table = table


class Query:
    """
    Read-only query against one table.

    Mirrors the store's REST dialect: every filter becomes a `column=op.value`
    pair, ordering is `order=column.asc|desc`. Builders return self so calls
    chain the same way the browser client did.
    """

    def __init__(self, client: "DataStoreClient", table: str):
        self._client = client
        self.table = table
        self._columns = "*"
        self._filters: List[Tuple[str, str]] = []
        self._order: Optional[str] = None
        self._limit: Optional[int] = None

    def select(self, columns: str = "*") -> "Query":
        self._columns = columns
        return self

    def eq(self, column: str, value: Any) -> "Query":
        self._filters.append((column, f"eq.{value}"))
        return self

    def gte(self, column: str, value: Any) -> "Query":
        self._filters.append((column, f"gte.{value}"))
        return self

    def lte(self, column: str, value: Any) -> "Query":
        self._filters.append((column, f"lte.{value}"))
        return self

    def order(self, column: str, *, ascending: bool = True) -> "Query":
        self._order = f"{column}.{'asc' if ascending else 'desc'}"
        return self

    def limit(self, n: int) -> "Query":
        self._limit = int(n)
        return self

    def params(self) -> List[Tuple[str, str]]:
        # list of pairs: the same column may carry both gte and lte
        out: List[Tuple[str, str]] = [("select", self._columns)]
        out.extend(self._filters)
        if self._order:
            out.append(("order", self._order))
        if self._limit is not None:
            out.append(("limit", str(self._limit)))
        return out

    def execute(self, session: Session) -> List[Dict[str, Any]]:
        return self._client.fetch(self, session)

    def __repr__(self) -> str:
        return f"Query({self.table!r}, {self.params()!r})"


class DataStoreClient:
    def __init__(self, base_url: str, api_key: str, *, timeout: int = 30):
        if not base_url:
            raise ValueError("DATASTORE_URL is required to query the data store.")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def table(self, name: str) -> Query:
        return Query(self, name)

    def fetch(self, query: Query, session: Session) -> List[Dict[str, Any]]:
        url = f"{self.base_url}{REST_PATH}/{query.table}"
        headers = auth_headers(self.api_key, session.access_token)
        t0 = time.perf_counter()
        try:
            payload = request_json("GET", url, headers=headers, params=query.params(), timeout=self.timeout)
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise DataStoreError(query.table, f"HTTP {status}") from e
        except (requests.RequestException, ValueError) as e:
            raise DataStoreError(query.table, str(e) or type(e).__name__) from e

        if not isinstance(payload, list):
            raise DataStoreError(query.table, f"expected a list of rows, got {type(payload).__name__}")

        log.debug("[datastore] %s rows=%s in %.3fs", query.table, len(payload), time.perf_counter() - t0)
        return payload


def build_client_from_settings() -> DataStoreClient:
    return DataStoreClient(
        DATASTORE_BASE_URL,
        settings.DATASTORE_ANON_KEY,
        timeout=settings.DATASTORE_TIMEOUT,
    )
