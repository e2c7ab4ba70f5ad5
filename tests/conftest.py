from datetime import datetime

import pytest

from tests.factories import REFERENCE


@pytest.fixture()
def reference() -> datetime:
    return REFERENCE


@pytest.fixture()
def raw_payload() -> dict:
    return {
        "user": [
            {
                "id": 42,
                "login": "jdoe",
                "firstName": "Jamie",
                "lastName": "Doe",
                "email": "jamie@example.com",
                "campus": "bahrain",
                "createdAt": "2023-09-04T08:00:00Z",
                "auditRatio": 1.2549,
                "totalUp": 1200000,
                "totalDown": 956000,
            }
        ],
        "transaction": [
            {"amount": 5000, "createdAt": "2024-06-20T10:00:00Z"},
            {"amount": 1000, "createdAt": "2024-02-01T10:00:00Z"},
            {"amount": 2500, "createdAt": "2024-05-15T10:00:00Z"},
            {"amount": 700, "createdAt": "2023-03-01T10:00:00Z"},
        ],
        "progress": [
            {"id": "p1", "grade": 1.2, "createdAt": "2024-02-10T10:00:00Z", "object": {"id": "o1", "name": "go-reloaded", "type": "project"}},
            {"id": "p2", "grade": 0.5, "createdAt": "2024-03-10T10:00:00Z", "object": {"id": "o2", "name": "ascii-art", "type": "project"}},
            {"id": "p3", "grade": 1.0, "createdAt": "2024-04-10T10:00:00Z", "object": {"id": "o3", "name": "forum", "type": "project"}},
            {"id": "p4", "grade": None, "createdAt": "2024-06-10T10:00:00Z", "object": {"id": "o4", "name": "graphql", "type": "project"}},
        ],
        "skills": {
            "transaction": [
                {"type": "skill_go", "amount": 55},
                {"type": "skill_go", "amount": 40},
                {"type": "skill_js", "amount": 30},
                {"type": "skill_unix", "amount": 120},
            ]
        },
    }
