from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from core.data import (
    DashboardPayload,
    ProjectResult,
    SkillScore,
    TimedAmount,
    UserProfile,
    as_timestamp,
    round_half_up,
)
from core.filters import DashboardFilters
from core.pie import ArcSlice, compute_slices
from core.radar import RadarModel, project_radar
from core.series import SeriesModel, project_series
from core.time_window import filter_by_window, window_cutoff, window_days

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileSummary:
    id: str
    login: str
    display_name: str
    email: str
    campus: str
    member_since: Optional[str]
    audit_ratio: Optional[float]
    total_xp: float
    total_up: Optional[float] = None
    total_down: Optional[float] = None


@dataclass(frozen=True)
class XpModel:
    window: str
    window_days: int
    cutoff: datetime
    series: SeriesModel
    events: List[TimedAmount] = field(default_factory=list)
    window_xp: float = 0.0
    last_amount: float = 0.0


@dataclass(frozen=True)
class ProjectModel:
    view_mode: str
    slices: List[ArcSlice] = field(default_factory=list)
    pass_count: int = 0
    fail_count: int = 0
    results: List[ProjectResult] = field(default_factory=list)
    average_grade: float = 0.0

    @property
    def total(self) -> int:
        return self.pass_count + self.fail_count

    @property
    def pass_angle_deg(self) -> Optional[float]:
        if not self.total:
            return None
        return 360.0 * self.pass_count / self.total


@dataclass(frozen=True)
class DashboardModels:
    profile: Optional[ProfileSummary]
    xp: XpModel
    projects: ProjectModel
    skills: RadarModel


def summarize_profile(profile: Optional[UserProfile], xp_history: Sequence[TimedAmount]) -> Optional[ProfileSummary]:
    if profile is None:
        return None
    name = " ".join(p for p in (profile.first_name, profile.last_name) if p) or profile.login
    created = profile.created_at
    member_since = f"{created.strftime('%B')} {created.day}, {created.year}" if created is not None else None
    return ProfileSummary(
        id=profile.id,
        login=profile.login,
        display_name=name,
        email=profile.email,
        campus=profile.campus,
        member_since=member_since,
        audit_ratio=round_half_up(profile.audit_ratio, 1),
        total_xp=float(sum(e.amount for e in xp_history)),
        total_up=profile.total_up,
        total_down=profile.total_down,
    )


def compute_xp_model(xp_history: Sequence[TimedAmount], filters: DashboardFilters, reference: datetime) -> XpModel:
    ref = as_timestamp(reference)
    # the source order is not trusted; sorted() is stable and leaves the input alone
    ordered = sorted(xp_history, key=lambda e: e.timestamp)
    events = filter_by_window(ordered, filters.time_window, ref)
    c = filters.canvas
    series = project_series(events, c.width, c.height, c.padding)
    return XpModel(
        window=filters.time_window,
        window_days=window_days(filters.time_window),
        cutoff=window_cutoff(filters.time_window, ref),
        series=series,
        events=events,
        window_xp=float(sum(e.amount for e in events)),
        last_amount=events[-1].amount if events else 0.0,
    )


def compute_project_model(project_results: Sequence[ProjectResult], filters: DashboardFilters) -> ProjectModel:
    """Pass/fail split; the view mode picks which results are summarized, not the geometry."""
    mode = filters.view_mode
    passed = [r for r in project_results if r.passed]
    failed = [r for r in project_results if not r.passed]

    if mode == "pass":
        results = passed
    elif mode == "fail":
        results = failed
    else:
        results = list(project_results)

    average_grade = round_half_up(sum(r.grade for r in results) / len(results), 2) if results else 0.0

    r = filters.pie_radius
    slices = compute_slices(len(passed), len(failed), center_x=r, center_y=r, radius=r)
    return ProjectModel(
        view_mode=mode,
        slices=slices,
        pass_count=len(passed),
        fail_count=len(failed),
        results=results,
        average_grade=average_grade,
    )


def dedupe_skills(skill_scores: Sequence[SkillScore]) -> List[SkillScore]:
    """Keep the first score per skill name, in source order."""
    seen = set()
    out: List[SkillScore] = []
    for s in skill_scores:
        if s.skill_name in seen:
            continue
        seen.add(s.skill_name)
        out.append(s)
    if len(out) != len(skill_scores):
        logger.debug("dropped %d duplicate skill entries", len(skill_scores) - len(out))
    return out


def compute_skill_model(skill_scores: Sequence[SkillScore], filters: DashboardFilters) -> RadarModel:
    c = filters.radar_canvas
    return project_radar(
        dedupe_skills(skill_scores),
        filters.ring_count,
        canvas_width=c.width,
        canvas_height=c.height,
        padding=c.padding,
    )


def aggregate(
    user_profile: Optional[UserProfile],
    xp_history: Sequence[TimedAmount],
    project_results: Sequence[ProjectResult],
    skill_scores: Sequence[SkillScore],
    *,
    reference: datetime,
    filters: Optional[DashboardFilters] = None,
) -> DashboardModels:
    """Build the three render models plus the profile summary.

    ``reference`` is the "now" used for window filtering; it is never read from
    the clock here. Errors from the projectors propagate unchanged.
    """
    filters = filters or DashboardFilters()
    xp = compute_xp_model(xp_history, filters, reference)
    projects = compute_project_model(project_results, filters)
    skills = compute_skill_model(skill_scores, filters)
    logger.debug(
        "aggregated xp=%d points, projects=%d/%d, skills=%d",
        len(xp.series.points),
        projects.pass_count,
        projects.fail_count,
        len(skills.axes),
    )
    return DashboardModels(
        profile=summarize_profile(user_profile, xp_history),
        xp=xp,
        projects=projects,
        skills=skills,
    )


def aggregate_payload(payload: DashboardPayload, *, reference: datetime, filters: Optional[DashboardFilters] = None) -> DashboardModels:
    return aggregate(
        payload.profile,
        payload.xp_history,
        payload.project_results,
        payload.skill_scores,
        reference=reference,
        filters=filters,
    )


def compute_dashboard(filters: DashboardFilters, payload: DashboardPayload, *, reference: datetime) -> Dict[str, Any]:
    models = aggregate_payload(payload, reference=reference, filters=filters)
    projects = asdict(models.projects)
    projects.update(total=models.projects.total, pass_angle_deg=models.projects.pass_angle_deg)
    return {
        "filters": asdict(filters),
        "reference": as_timestamp(reference).isoformat(),
        "profile": asdict(models.profile) if models.profile is not None else None,
        "xp": asdict(models.xp),
        "projects": projects,
        "skills": asdict(models.skills),
    }
