"""Skill radar geometry.

Angles follow screen coordinates: angle 0 of the polar maths would point right,
so every vertex is rotated by -pi/2 and the first skill points up. Increasing
angles proceed clockwise because screen ``y`` grows downwards.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence

from core.data import SKILL_PREFIX, SkillScore

logger = logging.getLogger(__name__)

DEFAULT_RING_COUNT = 5
LABEL_OFFSET = 20.0
MAX_SCORE = 100.0


@dataclass(frozen=True)
class RadarVertex:
    angle_rad: float
    radius_fraction: float
    x: float
    y: float


@dataclass(frozen=True)
class RadarSpoke:
    skill_name: str
    label: str
    angle_rad: float
    x: float
    y: float
    label_x: float
    label_y: float


@dataclass(frozen=True)
class RadarModel:
    center_x: float = 0.0
    center_y: float = 0.0
    radius: float = 0.0
    grid: List[List[RadarVertex]] = field(default_factory=list)
    axes: List[RadarSpoke] = field(default_factory=list)
    data_polygon: List[RadarVertex] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.data_polygon


def skill_label(skill_name: str) -> str:
    """``"skill_go"`` -> ``"GO"``."""
    name = skill_name[len(SKILL_PREFIX):] if skill_name.startswith(SKILL_PREFIX) else skill_name
    return name.upper()


def clamp_fraction(amount: float) -> float:
    return max(0.0, min(1.0, amount / MAX_SCORE))


def _vertex(cx: float, cy: float, radius: float, angle: float, fraction: float) -> RadarVertex:
    return RadarVertex(
        angle_rad=angle,
        radius_fraction=fraction,
        x=cx + radius * fraction * math.cos(angle),
        y=cy + radius * fraction * math.sin(angle),
    )


def project_radar(
    skills: Sequence[SkillScore],
    ring_count: int = DEFAULT_RING_COUNT,
    *,
    canvas_width: float = 400.0,
    canvas_height: float = 400.0,
    padding: float = 40.0,
) -> RadarModel:
    """Grid rings, spokes and the closed data polygon for a set of skill scores.

    Ring polygons and the data polygon repeat their first vertex at the end.
    Scores are read on a 0-100 scale and clamped into it.
    """
    if ring_count < 1:
        raise ValueError("ring_count must be at least 1")
    cx = canvas_width / 2
    cy = canvas_height / 2
    radius = min(cx, cy) - padding
    if radius <= 0:
        raise ValueError("padding leaves no room for the radar")

    k = len(skills)
    if k == 0:
        return RadarModel(center_x=cx, center_y=cy, radius=radius)

    step = 2 * math.pi / k
    angles = [i * step - math.pi / 2 for i in range(k)]

    grid: List[List[RadarVertex]] = []
    for ring in range(1, ring_count + 1):
        fraction = ring / ring_count
        poly = [_vertex(cx, cy, radius, a, fraction) for a in angles]
        grid.append(poly + [poly[0]])

    axes: List[RadarSpoke] = []
    for skill, angle in zip(skills, angles):
        axes.append(
            RadarSpoke(
                skill_name=skill.skill_name,
                label=skill_label(skill.skill_name),
                angle_rad=angle,
                x=cx + radius * math.cos(angle),
                y=cy + radius * math.sin(angle),
                label_x=cx + (radius + LABEL_OFFSET) * math.cos(angle),
                label_y=cy + (radius + LABEL_OFFSET) * math.sin(angle),
            )
        )

    clamped = [s.skill_name for s in skills if not 0 <= s.amount <= MAX_SCORE]
    if clamped:
        logger.debug("clamped out-of-range skill scores: %s", ", ".join(clamped))
    polygon = [_vertex(cx, cy, radius, a, clamp_fraction(s.amount)) for s, a in zip(skills, angles)]
    polygon.append(polygon[0])

    return RadarModel(center_x=cx, center_y=cy, radius=radius, grid=grid, axes=axes, data_polygon=polygon)
