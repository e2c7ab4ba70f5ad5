from __future__ import annotations

import logging
import math
import os
from datetime import datetime, timezone
from typing import Any, Callable, Dict

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import DashboardFiltersModel, DashboardRequest, MetaWindowsResponse, WindowOption
from core.aggregator import compute_dashboard, compute_project_model, compute_skill_model, compute_xp_model
from core.charts import project_donut_chart, skill_radar_chart, to_vega_spec, xp_line_chart
from core.data import MalformedRecordError, load_payload, payload_summary
from core.filters import DashboardFilters, normalize_filters
from core.time_window import WINDOW_DAYS, WINDOW_LABELS


DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"

app = FastAPI(title="Learning Progress Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.environ.get("DASHBOARD_CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: DashboardFiltersModel) -> DashboardFilters:
    raw = model.model_dump()
    return normalize_filters(raw)


def _reference(req: DashboardRequest) -> datetime:
    # the request boundary is the only place allowed to read the clock
    return req.reference or datetime.now(timezone.utc)


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NaT): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        ),
    )


def _malformed(exc: MalformedRecordError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": str(exc),
            "type": type(exc).__name__,
            "collection": exc.collection,
            "field": exc.field,
            "index": exc.index,
        },
    )


def _failure(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/windows")
def meta_windows():
    windows = [WindowOption(value=k, label=WINDOW_LABELS[k], days=d) for k, d in WINDOW_DAYS.items()]
    return _json(MetaWindowsResponse(windows=windows))


@app.post("/dashboard")
def dashboard(req: DashboardRequest):
    try:
        f = _filters_from_model(req.filters)
        payload = load_payload(req.payload)
        logger.debug("dashboard payload %s", payload_summary(payload))
        return _json(compute_dashboard(f, payload, reference=_reference(req)))
    except MalformedRecordError as exc:
        logger.warning("dashboard rejected malformed payload: %s", exc)
        return _malformed(exc)
    except Exception as exc:
        logger.exception("dashboard failed")
        return _failure(exc)


@app.post("/dashboard/charts")
def dashboard_charts(req: DashboardRequest):
    """Vega-Lite specs per chart; one failing chart does not blank the others."""
    try:
        f = _filters_from_model(req.filters)
        payload = load_payload(req.payload)
    except MalformedRecordError as exc:
        logger.warning("dashboard_charts rejected malformed payload: %s", exc)
        return _malformed(exc)
    except Exception as exc:
        logger.exception("dashboard_charts failed")
        return _failure(exc)

    reference = _reference(req)
    builders: Dict[str, Callable[[], Any]] = {
        "xp_progress": lambda: xp_line_chart(compute_xp_model(payload.xp_history, f, reference), f.canvas),
        "project_results": lambda: project_donut_chart(compute_project_model(payload.project_results, f)),
        "skills": lambda: skill_radar_chart(compute_skill_model(payload.skill_scores, f)),
    }
    charts: Dict[str, Any] = {}
    errors: Dict[str, Dict[str, str]] = {}
    for name, build in builders.items():
        try:
            charts[name] = to_vega_spec(build())
        except Exception as exc:
            logger.exception("chart %s failed", name)
            charts[name] = None
            errors[name] = {"error": str(exc), "type": type(exc).__name__}
    return _json({"charts": charts, "errors": errors})
