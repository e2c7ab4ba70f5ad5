import json
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

import altair as alt
import pandas as pd
import streamlit as st

from core.aggregator import compute_project_model, compute_skill_model, compute_xp_model, summarize_profile
from core.charts import project_donut_chart, skill_radar_chart, xp_line_chart
from core.data import MalformedRecordError, load_export
from core.filters import VIEW_MODES, normalize_filters
from core.time_window import DEFAULT_WINDOW, WINDOW_DAYS, WINDOW_LABELS

alt.data_transformers.disable_max_rows()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #374151;border-radius: 12px;padding: 16px;background: #1f2937;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #f9fafb;}
        .card-actions {font-size: 0.9rem;color: #9ca3af;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, actions: Optional[str] = None):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
            <div class="card-actions">{actions or ""}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


# ---------- UI setup ----------
st.set_page_config(page_title="Learning Progress Dashboard", layout="wide")
inject_base_styles()
st.title("Learning Progress Dashboard")
st.caption("XP progression, project results and skills from a GraphQL data export.")

with st.sidebar:
    st.markdown("### Data")
    uploaded = st.file_uploader("GraphQL data export (JSON)", type=["json"])

    st.markdown("---")
    st.markdown("### View")
    window_options = list(WINDOW_DAYS)
    if "time_window" not in st.session_state:
        st.session_state["time_window"] = DEFAULT_WINDOW
    time_window = st.selectbox(
        "XP growth for the",
        options=window_options,
        format_func=lambda w: WINDOW_LABELS[w],
        key="time_window",
    )
    view_mode = st.radio("Project results", options=list(VIEW_MODES), format_func=str.title, horizontal=True, key="view_mode")

if uploaded is None:
    st.info("Upload a JSON export with `user`, `transaction`, `progress` and `skills` to begin.")
    st.stop()

try:
    raw = json.load(uploaded)
except ValueError as exc:
    st.error(f"Could not read the export: {exc}")
    st.stop()

try:
    payload = load_export(raw)
except MalformedRecordError as exc:
    st.error(f"The export is malformed: {exc}")
    st.stop()

filters = normalize_filters({"time_window": time_window, "view_mode": view_mode})
# the page owns "now"; the core only ever receives it as a parameter
reference = datetime.now(timezone.utc)


def render_profile():
    summary = summarize_profile(payload.profile, payload.xp_history)
    if summary is None:
        st.info("No user profile in this export.")
        return
    st.subheader(f"Welcome, {summary.display_name}")
    cols = st.columns(3)
    with cols[0]:
        st.markdown(f"**Email:** {summary.email or 'N/A'}")
        st.markdown(f"**Login:** {summary.login}")
    with cols[1]:
        st.markdown(f"**ID:** {summary.id}")
        st.markdown(f"**Campus:** {summary.campus or 'N/A'}")
    with cols[2]:
        st.markdown(f"**Member Since:** {summary.member_since or 'N/A'}")
        st.metric("Audit ratio", summary.audit_ratio if summary.audit_ratio is not None else "N/A")
    xp_cols = st.columns(3)
    xp_cols[0].metric("Total XP", f"{summary.total_xp:,.0f}")
    xp_cols[1].metric("XP done (up)", f"{summary.total_up:,.0f}" if summary.total_up is not None else "N/A")
    xp_cols[2].metric("XP received (down)", f"{summary.total_down:,.0f}" if summary.total_down is not None else "N/A")


def render_xp():
    with card("XP Progression", WINDOW_LABELS.get(filters.time_window, "")):
        try:
            xp = compute_xp_model(payload.xp_history, filters, reference)
        except ValueError as exc:
            st.error(f"XP chart unavailable: {exc}")
            return
        chart = xp_line_chart(xp, filters.canvas)
        if chart is None:
            st.info("No XP in this window.")
            return
        st.altair_chart(chart, use_container_width=True)


def render_projects():
    with card("Project Results"):
        try:
            projects = compute_project_model(payload.project_results, filters)
        except ValueError as exc:
            st.error(f"Project chart unavailable: {exc}")
            return
        chart = project_donut_chart(projects)
        if chart is None:
            st.info("No finished projects to show.")
            return
        st.altair_chart(chart, use_container_width=True)
        st.metric(f"Avg Grade ({projects.view_mode})", f"{projects.average_grade:.2f}")
        table = pd.DataFrame(
            [{"project": r.subject_name, "grade": r.grade, "completed": r.completed_at.date()} for r in projects.results]
        )
        if not table.empty:
            st.dataframe(table.sort_values("completed", ascending=False), hide_index=True)


def render_skills():
    with card("Skills Overview"):
        try:
            skills = compute_skill_model(payload.skill_scores, filters)
        except ValueError as exc:
            st.error(f"Skills chart unavailable: {exc}")
            return
        chart = skill_radar_chart(skills)
        if chart is None:
            st.info("No skill data available.")
            return
        st.altair_chart(chart)


render_profile()
chart_cols = st.columns(3)
with chart_cols[0]:
    render_xp()
with chart_cols[1]:
    render_projects()
with chart_cols[2]:
    render_skills()
