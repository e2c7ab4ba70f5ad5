from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd


SKILL_PREFIX = "skill_"


class MalformedRecordError(ValueError):
    """An upstream record is missing a required field or carries an unusable value."""

    def __init__(self, collection: str, field: str, index: Optional[int], reason: str = "missing") -> None:
        self.collection = collection
        self.field = field
        self.index = index
        self.reason = reason
        where = f"{collection}[{index}]" if index is not None else collection
        super().__init__(f"{where}: field '{field}' is {reason}")


@dataclass(frozen=True)
class TimedAmount:
    timestamp: pd.Timestamp
    amount: float


@dataclass(frozen=True)
class ProjectResult:
    id: str
    grade: float
    completed_at: pd.Timestamp
    subject_name: str = ""

    @property
    def passed(self) -> bool:
        return self.grade >= 1


@dataclass(frozen=True)
class SkillScore:
    skill_name: str
    amount: float


@dataclass(frozen=True)
class UserProfile:
    id: str
    login: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    campus: str = ""
    created_at: Optional[pd.Timestamp] = None
    audit_ratio: Optional[float] = None
    total_up: Optional[float] = None
    total_down: Optional[float] = None


@dataclass(frozen=True)
class DashboardPayload:
    profile: Optional[UserProfile]
    xp_history: List[TimedAmount] = field(default_factory=list)
    project_results: List[ProjectResult] = field(default_factory=list)
    skill_scores: List[SkillScore] = field(default_factory=list)


def as_timestamp(value: object) -> pd.Timestamp:
    """Parse to a UTC timestamp. Naive values are taken as UTC."""
    ts = pd.Timestamp(value)
    if ts is pd.NaT or pd.isna(ts):
        raise ValueError(f"not a timestamp: {value!r}")
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def _require(row: Mapping[str, Any], key: str, collection: str, index: int) -> Any:
    if not isinstance(row, Mapping):
        raise MalformedRecordError(collection, key, index, reason="in a record that is not an object")
    value = row.get(key)
    if value is None and key not in row:
        raise MalformedRecordError(collection, key, index)
    if value is None:
        raise MalformedRecordError(collection, key, index, reason="null")
    return value


def _number(value: object, collection: str, key: str, index: int) -> float:
    if isinstance(value, bool):
        raise MalformedRecordError(collection, key, index, reason="not a number")
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise MalformedRecordError(collection, key, index, reason="not a number") from exc
    if math.isnan(out) or math.isinf(out):
        raise MalformedRecordError(collection, key, index, reason="not a finite number")
    return out


def _timestamp(value: object, collection: str, key: str, index: int) -> pd.Timestamp:
    try:
        return as_timestamp(value)
    except (TypeError, ValueError) as exc:
        raise MalformedRecordError(collection, key, index, reason="not a valid timestamp") from exc


def _optional_float(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return None if math.isnan(out) else out


def parse_user_profile(raw: object) -> Optional[UserProfile]:
    """The platform returns ``user`` as a one-element list; unwrap it."""
    if isinstance(raw, list):
        raw = raw[0] if raw else None
    if raw is None:
        return None
    user_id = _require(raw, "id", "user", 0)  # type: ignore[arg-type]
    login = _require(raw, "login", "user", 0)  # type: ignore[arg-type]

    created_at = None
    if raw.get("createdAt"):  # type: ignore[union-attr]
        created_at = _timestamp(raw["createdAt"], "user", "createdAt", 0)  # type: ignore[index]

    return UserProfile(
        id=str(user_id),
        login=str(login),
        first_name=str(raw.get("firstName") or ""),  # type: ignore[union-attr]
        last_name=str(raw.get("lastName") or ""),  # type: ignore[union-attr]
        email=str(raw.get("email") or ""),  # type: ignore[union-attr]
        campus=str(raw.get("campus") or ""),  # type: ignore[union-attr]
        created_at=created_at,
        audit_ratio=_optional_float(raw.get("auditRatio")),  # type: ignore[union-attr]
        total_up=_optional_float(raw.get("totalUp")),  # type: ignore[union-attr]
        total_down=_optional_float(raw.get("totalDown")),  # type: ignore[union-attr]
    )


def parse_xp_history(rows: Optional[Iterable[Mapping[str, Any]]]) -> List[TimedAmount]:
    events: List[TimedAmount] = []
    for i, row in enumerate(rows or []):
        amount = _number(_require(row, "amount", "transaction", i), "transaction", "amount", i)
        if amount < 0:
            raise MalformedRecordError("transaction", "amount", i, reason="negative")
        ts = _timestamp(_require(row, "createdAt", "transaction", i), "transaction", "createdAt", i)
        events.append(TimedAmount(timestamp=ts, amount=amount))
    # the source orders by createdAt already, but nothing guarantees it
    return sorted(events, key=lambda e: e.timestamp)


def parse_project_results(rows: Optional[Iterable[Mapping[str, Any]]]) -> List[ProjectResult]:
    """Rows with ``grade: null`` are projects still in progress and are skipped."""
    results: List[ProjectResult] = []
    for i, row in enumerate(rows or []):
        if not isinstance(row, Mapping) or "grade" not in row:
            raise MalformedRecordError("progress", "grade", i)
        if row["grade"] is None:
            continue
        grade = _number(row["grade"], "progress", "grade", i)
        completed_at = _timestamp(_require(row, "createdAt", "progress", i), "progress", "createdAt", i)
        obj = row.get("object") or {}
        results.append(
            ProjectResult(
                id=str(row.get("id", i)),
                grade=grade,
                completed_at=completed_at,
                subject_name=str(obj.get("name") or "") if isinstance(obj, Mapping) else "",
            )
        )
    return results


def parse_skill_scores(rows: Optional[Iterable[Mapping[str, Any]]]) -> List[SkillScore]:
    """One score per skill type, most recent first wins.

    Recency is ``createdAt`` when present; rows without it rank after dated ones
    and among themselves the earliest in source order wins, since the platform
    query lists each type newest first.
    """
    records = []
    for i, row in enumerate(rows or []):
        skill_type = _require(row, "type", "skills", i)
        if not isinstance(skill_type, str) or not skill_type.strip():
            raise MalformedRecordError("skills", "type", i, reason="not a skill name")
        amount = _number(_require(row, "amount", "skills", i), "skills", "amount", i)
        created_at = pd.NaT
        if row.get("createdAt") is not None:
            created_at = _timestamp(row["createdAt"], "skills", "createdAt", i)
        records.append({"type": skill_type.strip(), "amount": amount, "created_at": created_at, "order": i})

    if not records:
        return []

    df = pd.DataFrame.from_records(records)
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True)
    latest = (
        df.sort_values(["created_at", "order"], ascending=[False, True], na_position="last", kind="mergesort")
        .drop_duplicates(subset=["type"], keep="first")
        .sort_values("type", kind="mergesort")
    )
    return [SkillScore(skill_name=str(r["type"]), amount=float(r["amount"])) for r in latest.to_dict(orient="records")]


def _skill_rows(raw: object) -> Sequence[Mapping[str, Any]]:
    # the standalone skills query answers with {"transaction": [...]}
    if isinstance(raw, Mapping):
        return raw.get("transaction") or []
    return raw or []  # type: ignore[return-value]


def load_payload(raw: Optional[Mapping[str, Any]]) -> DashboardPayload:
    """Parse the GraphQL ``data`` object: user, transaction, progress, skills."""
    raw = raw or {}
    return DashboardPayload(
        profile=parse_user_profile(raw.get("user")),
        xp_history=parse_xp_history(raw.get("transaction")),
        project_results=parse_project_results(raw.get("progress")),
        skill_scores=parse_skill_scores(_skill_rows(raw.get("skills"))),
    )


def payload_summary(payload: DashboardPayload) -> Dict[str, int]:
    return {
        "xp_rows": len(payload.xp_history),
        "project_rows": len(payload.project_results),
        "skill_rows": len(payload.skill_scores),
    }


def load_export(raw: object) -> DashboardPayload:
    """Parse a saved GraphQL response, either the full ``{"data": ...}`` body or the bare ``data`` object."""
    if not isinstance(raw, Mapping):
        raise MalformedRecordError("export", "data", None, reason="not a JSON object")
    data = raw.get("data", raw)
    if not isinstance(data, Mapping):
        raise MalformedRecordError("export", "data", None, reason="not a JSON object")
    return load_payload(data)
