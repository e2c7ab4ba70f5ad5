"""XP time-series projection into plot (pixel) coordinates.

Screen convention: the origin is the top-left corner of the canvas, so larger
amounts map to smaller ``y`` values.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence

from core.data import TimedAmount

logger = logging.getLogger(__name__)

MAX_X_LABELS = 6
Y_TICK_COUNT = 5


@dataclass(frozen=True)
class PlotPoint:
    x: float
    y: float
    source_index: int


@dataclass(frozen=True)
class AxisTick:
    position: float
    value: float
    label: str


@dataclass(frozen=True)
class SeriesModel:
    points: List[PlotPoint] = field(default_factory=list)
    x_ticks: List[AxisTick] = field(default_factory=list)
    y_ticks: List[AxisTick] = field(default_factory=list)
    max_amount: float = 0.0

    @property
    def empty(self) -> bool:
        return not self.points


def _check_canvas(width: float, height: float, padding: float) -> None:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width and height must be positive")
    if padding < 0 or 2 * padding > min(width, height):
        raise ValueError("padding must be non-negative and leave room to draw")


def label_stride(n: int) -> int:
    """Every ``ceil(n / 6)``-th point gets an x-axis label."""
    return max(1, math.ceil(n / MAX_X_LABELS))


def short_date(event: TimedAmount) -> str:
    # "Jan 5"
    return f"{event.timestamp.strftime('%b')} {event.timestamp.day}"


def _format_amount(value: float) -> str:
    return f"{value:,.0f}"


def project_series(
    events: Sequence[TimedAmount],
    canvas_width: float,
    canvas_height: float,
    padding: float,
) -> SeriesModel:
    """Map already-ordered events onto the canvas.

    Points are spaced evenly along x (by index, not by time). A single event sits
    at ``x = padding``; an all-zero series lies flat on the baseline.
    """
    _check_canvas(canvas_width, canvas_height, padding)
    n = len(events)
    if n == 0:
        return SeriesModel()

    plot_w = canvas_width - 2 * padding
    plot_h = canvas_height - 2 * padding
    baseline = canvas_height - padding
    max_amount = max(e.amount for e in events)
    if max_amount == 0:
        logger.debug("all %d amounts are zero, drawing a flat baseline", n)

    points: List[PlotPoint] = []
    for i, e in enumerate(events):
        x = padding + i * plot_w / (n - 1) if n > 1 else padding
        y = baseline if max_amount == 0 else baseline - (e.amount / max_amount) * plot_h
        points.append(PlotPoint(x=x, y=y, source_index=i))

    stride = label_stride(n)
    x_ticks = [
        AxisTick(position=p.x, value=float(p.source_index), label=short_date(events[p.source_index]))
        for p in points
        if p.source_index % stride == 0
    ]

    y_ticks: List[AxisTick] = []
    for k in range(Y_TICK_COUNT):
        frac = k / (Y_TICK_COUNT - 1)
        value = max_amount * frac
        y_ticks.append(AxisTick(position=baseline - frac * plot_h if max_amount else baseline, value=value, label=_format_amount(value)))

    return SeriesModel(points=points, x_ticks=x_ticks, y_ticks=y_ticks, max_amount=max_amount)
