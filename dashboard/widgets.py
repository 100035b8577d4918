# dashboard/widgets.py
from __future__ import annotations
from typing import Sequence, Tuple
import pandas as pd
import streamlit as st
import altair as alt


def kpi_row(metrics: Sequence[Tuple[str, str]]):
    cols = st.columns(max(1, len(metrics)))
    for col, (label, value) in zip(cols, metrics):
        with col:
            st.metric(label, value)


def pie_chart(df: pd.DataFrame, title: str, caption: str = ""):
    st.subheader(title)
    if caption:
        st.caption(caption)
    if df is None or df.empty:
        st.info("No data.")
        return
    chart_df = df.assign(legend=df["type"] + " " + df["percentage"].astype(str) + "%")
    chart = (
        alt.Chart(chart_df)
        .mark_arc(outerRadius=110)
        .encode(
            theta=alt.Theta("count:Q"),
            color=alt.Color("legend:N", title=None, sort=chart_df["legend"].tolist()),
            order=alt.Order("seq:Q"),
            tooltip=["type:N", "count:Q", alt.Tooltip("percentage:Q", title="%")],
        )
        .properties(height=300)
    )
    st.altair_chart(chart, use_container_width=True)


def trend_line(df: pd.DataFrame, title: str, caption: str = ""):
    st.subheader(title)
    if caption:
        st.caption(caption)
    if df is None or df.empty:
        st.info("No donations in range.")
        return
    chart = (
        alt.Chart(df)
        .mark_line(interpolate="monotone", point=True)
        .encode(
            # keep the order the months were reported in
            x=alt.X("month:N", title=None, sort=df["month"].tolist()),
            y=alt.Y("amount:Q", title=None, axis=alt.Axis(format="$,.0f")),
            tooltip=["month:N", alt.Tooltip("amount:Q", title="Amount", format="$,.2f")],
        )
        .properties(height=300)
    )
    st.altair_chart(chart, use_container_width=True)


def amount_bars(df: pd.DataFrame, title: str, caption: str = ""):
    st.subheader(title)
    if caption:
        st.caption(caption)
    if df is None or df.empty:
        st.info("No donations in range.")
        return
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("type:N", title=None, sort=df["type"].tolist()),
            y=alt.Y("amount:Q", title=None, axis=alt.Axis(format="$,.0f")),
            tooltip=["type:N", alt.Tooltip("amount:Q", format="$,.2f"), alt.Tooltip("percentage:Q", title="%")],
        )
        .properties(height=300)
    )
    st.altair_chart(chart, use_container_width=True)


def attendance_bars(df: pd.DataFrame, title: str):
    st.subheader(title)
    if df is None or df.empty:
        st.info("No attendance recorded in range.")
        return
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("date:N", title=None, sort=list(dict.fromkeys(df["date"]))),
            y=alt.Y("count:Q", title=None, stack="zero"),
            color=alt.Color("series:N", title=None),
            tooltip=["date:N", "series:N", "count:Q"],
        )
        .properties(height=400)
    )
    st.altair_chart(chart, use_container_width=True)


def breakdown_table(df: pd.DataFrame, title: str):
    st.subheader(title)
    if df is None or df.empty:
        st.info("No data.")
        return
    display_df = df.drop(columns=["seq"]).rename(columns={"type": "Type", "count": "Count", "percentage": "%"})
    st.dataframe(display_df, use_container_width=True, hide_index=True)
