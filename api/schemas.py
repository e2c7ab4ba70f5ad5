from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CanvasModel(BaseModel):
    width: float = 600.0
    height: float = 400.0
    padding: float = 40.0


class DashboardFiltersModel(BaseModel):
    time_window: str = "6m"
    view_mode: str = "all"
    canvas: CanvasModel = Field(default_factory=CanvasModel)
    radar_canvas: CanvasModel = Field(default_factory=lambda: CanvasModel(width=400.0, height=400.0, padding=40.0))
    pie_radius: float = 100.0
    ring_count: int = 5


class DashboardRequest(BaseModel):
    # raw GraphQL `data` object: user, transaction, progress, skills
    payload: Dict[str, Any] = Field(default_factory=dict)
    filters: DashboardFiltersModel = Field(default_factory=DashboardFiltersModel)
    reference: Optional[datetime] = None


class WindowOption(BaseModel):
    value: str
    label: str
    days: int


class MetaWindowsResponse(BaseModel):
    windows: List[WindowOption]
