import pandas as pd
import pytest

from core.data import (
    MalformedRecordError,
    load_export,
    load_payload,
    parse_project_results,
    parse_skill_scores,
    parse_user_profile,
    parse_xp_history,
    round_half_up,
)

pytestmark = pytest.mark.unit


def test_parse_xp_history_sorts_by_timestamp():
    rows = [
        {"amount": 3, "createdAt": "2024-03-01T00:00:00Z"},
        {"amount": 1, "createdAt": "2024-01-01T00:00:00Z"},
        {"amount": 2, "createdAt": "2024-02-01T00:00:00+02:00"},
    ]
    history = parse_xp_history(rows)
    assert [e.amount for e in history] == [1.0, 2.0, 3.0]
    assert all(e.timestamp.tzinfo is not None for e in history)
    assert history[1].timestamp == pd.Timestamp("2024-01-31T22:00:00Z")


def test_parse_xp_history_empty_and_none():
    assert parse_xp_history([]) == []
    assert parse_xp_history(None) == []


@pytest.mark.parametrize(
    "row, field",
    [
        ({"createdAt": "2024-01-01"}, "amount"),
        ({"amount": 10}, "createdAt"),
        ({"amount": "lots", "createdAt": "2024-01-01"}, "amount"),
        ({"amount": 10, "createdAt": "not a date"}, "createdAt"),
        ({"amount": -5, "createdAt": "2024-01-01"}, "amount"),
    ],
)
def test_parse_xp_history_rejects_bad_rows_with_field_and_index(row, field):
    rows = [{"amount": 1, "createdAt": "2024-01-01"}, row]
    with pytest.raises(MalformedRecordError) as info:
        parse_xp_history(rows)
    assert info.value.field == field
    assert info.value.index == 1
    assert info.value.collection == "transaction"
    assert "transaction[1]" in str(info.value)


def test_parse_project_results_skips_in_progress_rows():
    rows = [
        {"id": "a", "grade": 1.5, "createdAt": "2024-01-01", "object": {"name": "forum"}},
        {"id": "b", "grade": None, "createdAt": "2024-01-02"},
    ]
    results = parse_project_results(rows)
    assert len(results) == 1
    assert results[0].subject_name == "forum"
    assert results[0].passed


def test_parse_project_results_requires_grade_key():
    with pytest.raises(MalformedRecordError, match="grade"):
        parse_project_results([{"id": "a", "createdAt": "2024-01-01"}])


def test_parse_skill_scores_keeps_first_row_per_type_in_source_order():
    rows = [
        {"type": "skill_go", "amount": 55},
        {"type": "skill_go", "amount": 40},
        {"type": "skill_css", "amount": 10},
    ]
    scores = parse_skill_scores(rows)
    assert [(s.skill_name, s.amount) for s in scores] == [("skill_css", 10.0), ("skill_go", 55.0)]


def test_parse_skill_scores_most_recent_wins_when_dated():
    rows = [
        {"type": "skill_go", "amount": 40, "createdAt": "2024-01-01T00:00:00Z"},
        {"type": "skill_go", "amount": 65, "createdAt": "2024-05-01T00:00:00Z"},
        {"type": "skill_js", "amount": 20, "createdAt": "2024-02-01T00:00:00Z"},
    ]
    scores = {s.skill_name: s.amount for s in parse_skill_scores(rows)}
    assert scores == {"skill_go": 65.0, "skill_js": 20.0}


def test_parse_skill_scores_requires_type():
    with pytest.raises(MalformedRecordError) as info:
        parse_skill_scores([{"amount": 10}])
    assert info.value.field == "type"
    assert info.value.index == 0


def test_parse_user_profile_unwraps_list():
    profile = parse_user_profile([{"id": 7, "login": "amal", "auditRatio": "1.5"}])
    assert profile.id == "7"
    assert profile.login == "amal"
    assert profile.audit_ratio == 1.5
    assert profile.created_at is None


def test_parse_user_profile_missing_login():
    with pytest.raises(MalformedRecordError, match="login"):
        parse_user_profile({"id": 7})


def test_parse_user_profile_absent():
    assert parse_user_profile([]) is None
    assert parse_user_profile(None) is None


def test_load_payload_reads_all_collections(raw_payload):
    payload = load_payload(raw_payload)
    assert payload.profile.first_name == "Jamie"
    assert len(payload.xp_history) == 4
    assert len(payload.project_results) == 3
    assert [s.skill_name for s in payload.skill_scores] == ["skill_go", "skill_js", "skill_unix"]


def test_round_half_up():
    assert round_half_up(1.25, 1) == 1.3
    assert round_half_up(None) is None


def test_load_export_accepts_full_response_body(raw_payload):
    payload = load_export({"data": raw_payload})
    assert payload.profile.login == "jdoe"


@pytest.mark.parametrize("raw", [[{"user": []}], "text", {"data": [1, 2]}])
def test_load_export_rejects_non_object_exports(raw):
    with pytest.raises(MalformedRecordError) as info:
        load_export(raw)
    assert info.value.collection == "export"
    assert info.value.index is None
