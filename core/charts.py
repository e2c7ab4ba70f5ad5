from __future__ import annotations

from typing import Any, Dict, Optional

import altair as alt
import pandas as pd

from core.aggregator import ProjectModel, XpModel
from core.filters import CanvasSize
from core.pie import FAIL_LABEL, PASS_LABEL
from core.radar import RadarModel

alt.data_transformers.disable_max_rows()

PASS_COLOR = "#34D399"
FAIL_COLOR = "#F87171"
XP_COLOR = "#A78BFA"
GRID_COLOR = "#374151"
SKILL_COLOR = "#3B82F6"


def to_vega_spec(chart: Optional[alt.TopLevelMixin]) -> Optional[Dict[str, Any]]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    if chart is None:
        return None
    return chart.to_dict()


def xp_line_chart(xp: XpModel, canvas: CanvasSize) -> Optional[alt.Chart]:
    """XP per transaction over the selected window, plotted in canvas pixels."""
    series = xp.series
    if series.empty:
        return None
    df = pd.DataFrame(
        {
            "x": [p.x for p in series.points],
            "y": [p.y for p in series.points],
            "amount": [xp.events[p.source_index].amount for p in series.points],
            "date": [xp.events[p.source_index].timestamp.strftime("%b %d") for p in series.points],
        }
    )
    ticks = [t.position for t in series.x_ticks]
    tick_labels = {t.position: t.label for t in series.x_ticks}
    label_expr = " : ".join(f"datum.value == {pos!r} ? {label!r}" for pos, label in tick_labels.items()) + " : ''"
    return (
        alt.Chart(df)
        .mark_line(point={"filled": True, "size": 60, "color": XP_COLOR}, color=XP_COLOR, strokeWidth=2)
        .encode(
            x=alt.X(
                "x:Q",
                title=None,
                scale=alt.Scale(domain=[0, canvas.width]),
                axis=alt.Axis(values=ticks, labelExpr=label_expr, grid=False),
            ),
            y=alt.Y("y:Q", title=None, scale=alt.Scale(domain=[0, canvas.height], reverse=True), axis=None),
            tooltip=[alt.Tooltip("date:N", title="Date"), alt.Tooltip("amount:Q", title="XP", format=",")],
        )
        .properties(title=f"Total XP: {xp.window_xp:,.0f}", height=260)
    )


def project_donut_chart(projects: ProjectModel) -> Optional[alt.Chart]:
    if not projects.slices:
        return None
    df = pd.DataFrame(
        {
            "result": [s.label for s in projects.slices],
            "count": [s.count for s in projects.slices],
        }
    )
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("count:Q", stack=True),
            color=alt.Color(
                "result:N",
                title=None,
                scale=alt.Scale(domain=[PASS_LABEL, FAIL_LABEL], range=[PASS_COLOR, FAIL_COLOR]),
                legend=alt.Legend(orient="bottom"),
            ),
            tooltip=[alt.Tooltip("result:N", title="Result"), alt.Tooltip("count:Q", title="Projects")],
        )
        .properties(title=f"Total: {projects.total} Projects", height=300)
    )


def skill_radar_chart(skills: RadarModel) -> Optional[alt.LayerChart]:
    if skills.empty:
        return None
    size = 2 * skills.center_x, 2 * skills.center_y
    x_scale = alt.Scale(domain=[0, size[0]])
    y_scale = alt.Scale(domain=[0, size[1]], reverse=True)

    grid_rows = []
    for ring_idx, ring in enumerate(skills.grid):
        for order, v in enumerate(ring):
            grid_rows.append({"ring": ring_idx, "order": order, "x": v.x, "y": v.y})
    grid = (
        alt.Chart(pd.DataFrame(grid_rows))
        .mark_line(color=GRID_COLOR, strokeWidth=1)
        .encode(
            x=alt.X("x:Q", scale=x_scale, axis=None),
            y=alt.Y("y:Q", scale=y_scale, axis=None),
            detail="ring:N",
            order="order:O",
        )
    )

    spoke_df = pd.DataFrame(
        [
            {"x": skills.center_x, "y": skills.center_y, "x2": s.x, "y2": s.y, "label": s.label, "lx": s.label_x, "ly": s.label_y}
            for s in skills.axes
        ]
    )
    spokes = alt.Chart(spoke_df).mark_rule(color=GRID_COLOR).encode(
        x=alt.X("x:Q", scale=x_scale, axis=None),
        y=alt.Y("y:Q", scale=y_scale, axis=None),
        x2="x2:Q",
        y2="y2:Q",
    )
    labels = alt.Chart(spoke_df).mark_text(color="#D1D5DB", fontSize=12).encode(
        x=alt.X("lx:Q", scale=x_scale, axis=None),
        y=alt.Y("ly:Q", scale=y_scale, axis=None),
        text="label:N",
    )

    poly_df = pd.DataFrame(
        [
            {"order": i, "x": v.x, "y": v.y, "score": round(v.radius_fraction * 100, 1)}
            for i, v in enumerate(skills.data_polygon)
        ]
    )
    polygon = (
        alt.Chart(poly_df)
        .mark_line(color=SKILL_COLOR, point=True)
        .encode(
            x=alt.X("x:Q", scale=x_scale, axis=None),
            y=alt.Y("y:Q", scale=y_scale, axis=None),
            order="order:O",
            tooltip=[alt.Tooltip("score:Q", title="Score")],
        )
    )
    return alt.layer(grid, spokes, labels, polygon).properties(width=size[0], height=size[1])
