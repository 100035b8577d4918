"""
Thin read client for the hosted data store.

Only the query surface the reports need: select, eq/gte/lte filters,
ordering and limits. Auth is carried by an explicit ``Session``.
"""

from .client import DataStoreClient, DataStoreError, Query, build_client_from_settings  # noqa: F401
from .session import ANONYMOUS, Session, session_from_authorization  # noqa: F401
