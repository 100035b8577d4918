# dashboard/data.py
import os
import streamlit as st
from dotenv import load_dotenv

from congregation_reports.datastore import DataStoreClient, Session, build_client_from_settings, session_from_authorization
from congregation_reports.reports.fetch import ReportRequestTracker
from congregation_reports.reports.service import ReportService

# Load env for local/dev; harmless in prod
load_dotenv()


@st.cache_resource
def get_client() -> DataStoreClient:
    # one HTTP client per server process; report data itself is never cached
    return build_client_from_settings()


def get_service() -> ReportService:
    """Per-browser-session service, so only this viewer's newer picks supersede a build."""
    if "report_service" not in st.session_state:
        st.session_state["report_service"] = ReportService(get_client(), tracker=ReportRequestTracker())
    return st.session_state["report_service"]


def current_session() -> Session:
    """Session for this run: a token pasted into the sidebar wins over DASHBOARD_ACCESS_TOKEN."""
    token = st.session_state.get("access_token") or os.getenv("DASHBOARD_ACCESS_TOKEN")
    return session_from_authorization(token)
