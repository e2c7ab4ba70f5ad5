"""Trailing time-window selection for the XP history."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Sequence

from core.data import TimedAmount, as_timestamp

logger = logging.getLogger(__name__)

WINDOW_DAYS = {
    "1m": 30,
    "3m": 90,
    "6m": 180,
    "1y": 365,
}
WINDOW_LABELS = {
    "1m": "last month",
    "3m": "last 3 months",
    "6m": "last 6 months",
    "1y": "last year",
}
DEFAULT_WINDOW = "6m"


def window_days(window: str) -> int:
    """Day count for a named window; unknown names use the 6-month span."""
    return WINDOW_DAYS.get(window, WINDOW_DAYS[DEFAULT_WINDOW])


def window_cutoff(window: str, reference: datetime) -> datetime:
    return as_timestamp(reference) - timedelta(days=window_days(window))


def filter_by_window(events: Sequence[TimedAmount], window: str, reference: datetime) -> List[TimedAmount]:
    """Return the events at or after ``reference - window``.

    Input order is preserved and the input sequence is left untouched. An empty
    result is a normal outcome, not an error.
    """
    if window not in WINDOW_DAYS:
        logger.debug("unknown window %r, using %s", window, DEFAULT_WINDOW)
    cutoff = window_cutoff(window, reference)
    out = [e for e in events if e.timestamp >= cutoff]
    logger.debug("window %s kept %d of %d events", window, len(out), len(events))
    return out
