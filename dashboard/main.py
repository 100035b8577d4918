# dashboard/main.py
from dotenv import load_dotenv
load_dotenv()

from datetime import date, timedelta

import streamlit as st

# Project imports
from congregation_reports.config import settings
from data import get_service, current_session
from frames import (
    attendance_frame,
    by_type_frame,
    category_frame,
    headline_metrics,
    summary_metrics,
    trend_frame,
)
from widgets import (
    amount_bars,
    attendance_bars,
    breakdown_table,
    kpi_row,
    pie_chart,
    trend_line,
)

# ──────────────────────────────────────────────────────────────────────────────
st.set_page_config(page_title="Reports & Analytics", layout="wide", initial_sidebar_state="expanded")
st.title("📊 Reports & Analytics")
st.caption("Insights into church activities and growth")

# Sidebar: who is asking
with st.sidebar:
    st.text_input("Access token", type="password", key="access_token",
                  help="Signed-in token for the data store. Leave blank to read as anonymous.")

# Date range picker (defaults to the rolling window ending today)
default_end = date.today()
default_start = default_end - timedelta(days=settings.REPORT_WINDOW_DAYS)
picked = st.date_input("Date range", (default_start, default_end), key="report_range")

# Normalize inputs (tuple vs single date while the user is mid-selection)
if isinstance(picked, (list, tuple)):
    if len(picked) < 2:
        st.info("Pick an end date.")
        st.stop()
    start_date, end_date = picked[0], picked[1]
else:
    start_date, end_date = picked, picked

service = get_service()
report = service.build_report(current_session(), start_date, end_date, notify=st.error)
if report is None:
    # a newer range was picked while this one loaded; show only the current result
    report = service.tracker.latest
    if report is None:
        st.stop()

kpi_row(headline_metrics(report.headline))

tab_overview, tab_financial, tab_membership, tab_attendance = st.tabs(
    ["Overview", "Financial", "Membership", "Attendance"]
)

with tab_overview:
    left, right = st.columns(2)
    with left:
        trend_line(trend_frame(report.donation_trends), "Monthly Donations", "Donation trends over time")
    with right:
        pie_chart(category_frame(report.membership_stats), "Membership Distribution", "Breakdown by membership type")

with tab_financial:
    left, right = st.columns(2)
    with left:
        st.subheader("Financial Summary")
        for label, value in summary_metrics(report.financial_summary):
            st.metric(label, value)
    with right:
        amount_bars(by_type_frame(report.financial_summary), "Donations by Type", "Breakdown by donation category")

with tab_membership:
    breakdown_table(category_frame(report.membership_stats), "Membership Statistics")
    breakdown_table(category_frame(report.event_stats), "Events by Type")

with tab_attendance:
    attendance_bars(attendance_frame(report.attendance_data), "Attendance Trends")
