from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from core.time_window import DEFAULT_WINDOW

VIEW_MODES = ("all", "pass", "fail")


@dataclass(frozen=True)
class CanvasSize:
    width: float = 600.0
    height: float = 400.0
    padding: float = 40.0


@dataclass(frozen=True)
class DashboardFilters:
    time_window: str = DEFAULT_WINDOW
    view_mode: str = "all"
    canvas: CanvasSize = field(default_factory=CanvasSize)
    radar_canvas: CanvasSize = field(default_factory=lambda: CanvasSize(width=400.0, height=400.0, padding=40.0))
    pie_radius: float = 100.0
    ring_count: int = 5


def _as_float(value: object, default: float, *, low: float, high: float) -> float:
    try:
        out = float(value)  # type: ignore[arg-type]
    except Exception:
        return default
    if out != out:
        return default
    return max(low, min(high, out))


def _as_int(value: object, default: int, *, low: int, high: int) -> int:
    try:
        out = int(value)  # type: ignore[arg-type]
    except Exception:
        return default
    return max(low, min(high, out))


def _canvas_from_raw(raw: Optional[dict], default: CanvasSize) -> CanvasSize:
    c = raw or {}
    width = _as_float(c.get("width", default.width), default.width, low=50.0, high=4000.0)
    height = _as_float(c.get("height", default.height), default.height, low=50.0, high=4000.0)
    # padding must leave a drawable area on both axes
    max_padding = min(width, height) / 2 - 1
    padding = _as_float(c.get("padding", default.padding), default.padding, low=0.0, high=max_padding)
    return CanvasSize(width=width, height=height, padding=padding)


def normalize_filters(raw: Optional[dict]) -> DashboardFilters:
    raw = raw or {}
    defaults = DashboardFilters()

    time_window = str(raw.get("time_window") or defaults.time_window).strip()

    view_mode = str(raw.get("view_mode") or defaults.view_mode).strip().lower()
    if view_mode not in VIEW_MODES:
        view_mode = defaults.view_mode

    canvas = _canvas_from_raw(raw.get("canvas"), defaults.canvas)
    radar_canvas = _canvas_from_raw(raw.get("radar_canvas"), defaults.radar_canvas)
    pie_radius = _as_float(raw.get("pie_radius", defaults.pie_radius), defaults.pie_radius, low=1.0, high=2000.0)
    ring_count = _as_int(raw.get("ring_count", defaults.ring_count), defaults.ring_count, low=1, high=20)

    return DashboardFilters(
        time_window=time_window,
        view_mode=view_mode,
        canvas=canvas,
        radar_canvas=radar_canvas,
        pie_radius=pie_radius,
        ring_count=ring_count,
    )
