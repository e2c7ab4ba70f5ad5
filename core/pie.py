from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

FULL_CIRCLE = 360.0
PASS_LABEL = "Pass"
FAIL_LABEL = "Fail"


@dataclass(frozen=True)
class ArcSlice:
    start_angle_deg: float
    end_angle_deg: float
    path_command: str
    label: str
    count: int = 0

    @property
    def span_deg(self) -> float:
        return self.end_angle_deg - self.start_angle_deg


def polar_to_cartesian(center_x: float, center_y: float, radius: float, angle_deg: float) -> Tuple[float, float]:
    """0 degrees points up and angles grow clockwise, like a clock face."""
    rad = math.radians(angle_deg - 90.0)
    return center_x + radius * math.cos(rad), center_y + radius * math.sin(rad)


def _fmt(value: float) -> str:
    out = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if out == "-0" else out


def describe_arc(center_x: float, center_y: float, radius: float, start_deg: float, end_deg: float) -> str:
    """SVG path for a closed wedge: center, arc from start to end, back to center."""
    span = end_deg - start_deg
    if span >= FULL_CIRCLE:
        # a single arc whose endpoints coincide draws nothing, so split it in two
        top_x, top_y = polar_to_cartesian(center_x, center_y, radius, 0.0)
        bot_x, bot_y = polar_to_cartesian(center_x, center_y, radius, 180.0)
        r = _fmt(radius)
        return (
            f"M {_fmt(top_x)} {_fmt(top_y)} "
            f"A {r} {r} 0 1 1 {_fmt(bot_x)} {_fmt(bot_y)} "
            f"A {r} {r} 0 1 1 {_fmt(top_x)} {_fmt(top_y)} Z"
        )
    sx, sy = polar_to_cartesian(center_x, center_y, radius, start_deg)
    ex, ey = polar_to_cartesian(center_x, center_y, radius, end_deg)
    large_arc = 0 if span <= 180.0 else 1
    r = _fmt(radius)
    return (
        f"M {_fmt(center_x)} {_fmt(center_y)} "
        f"L {_fmt(sx)} {_fmt(sy)} "
        f"A {r} {r} 0 {large_arc} 1 {_fmt(ex)} {_fmt(ey)} Z"
    )


def compute_slices(
    pass_count: int,
    fail_count: int,
    *,
    center_x: float = 100.0,
    center_y: float = 100.0,
    radius: float = 100.0,
) -> List[ArcSlice]:
    if pass_count < 0 or fail_count < 0:
        raise ValueError("pass and fail counts must be non-negative")
    if radius <= 0:
        raise ValueError("radius must be positive")
    total = pass_count + fail_count
    if total == 0:
        return []

    def _slice(start: float, end: float, label: str, count: int) -> ArcSlice:
        return ArcSlice(
            start_angle_deg=start,
            end_angle_deg=end,
            path_command=describe_arc(center_x, center_y, radius, start, end),
            label=label,
            count=count,
        )

    if fail_count == 0:
        return [_slice(0.0, FULL_CIRCLE, PASS_LABEL, pass_count)]
    if pass_count == 0:
        return [_slice(0.0, FULL_CIRCLE, FAIL_LABEL, fail_count)]

    pass_angle = FULL_CIRCLE * pass_count / total
    return [
        _slice(0.0, pass_angle, PASS_LABEL, pass_count),
        _slice(pass_angle, FULL_CIRCLE, FAIL_LABEL, fail_count),
    ]
