# congregation_reports/deps.py
from typing import Optional

from fastapi import Depends, Header, HTTPException

from congregation_reports.datastore import DataStoreClient, Session, build_client_from_settings, session_from_authorization
from congregation_reports.reports.service import ReportService


def get_session(authorization: Optional[str] = Header(None)) -> Session:
    """
    FastAPI dependency: the caller's session from the Authorization header.
    Missing header -> anonymous session (row-level rules are enforced by the store).
    """
    return session_from_authorization(authorization)


def get_client() -> DataStoreClient:
    try:
        return build_client_from_settings()
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e))


def get_report_service(client: DataStoreClient = Depends(get_client)) -> ReportService:
    return ReportService(client)
