"""
Test the timetable API with self-contained test data.
"""
import pytest
from fastapi.testclient import TestClient
from main import app


client = TestClient(app)

# 2024-09-16 is a Monday
MONDAY_0810 = "2024-09-16T08:10:00"


# Test data fixtures
def get_minimal_snapshot():
    """Return the two-period catalog with one lesson and one all-day duty."""
    return {
        "periods": [
            {"id": 1, "order": 1, "start_time": "08:00", "end_time": "08:40"},
            {"id": 2, "order": 2, "start_time": "08:50", "end_time": "09:30"}
        ],
        "teachers": [
            {"id": 1, "name": "Ayse", "surname": "Yilmaz", "branch": "Mathematics"}
        ],
        "classes": [
            {"id": 10, "name": "10/A"}
        ],
        "subjects": [
            {"id": 100, "name": "Mathematics"}
        ],
        "locations": [
            {"id": 5, "name": "Garden"}
        ],
        "schedules": [
            {"id": 1, "teacher_id": 1, "day_of_week": 1, "period_id": 1, "class_id": 10, "subject_id": 100}
        ],
        "duties": [
            {"id": 1, "teacher_id": 1, "day_of_week": 1, "location_id": 5, "period_id": None}
        ],
        "absences": [],
        "substitutions": []
    }


def get_medium_snapshot():
    """Return a snapshot with several teachers, classes, duty posts and an absence."""
    return {
        "periods": [
            {"id": 1, "order": 1, "start_time": "08:30", "end_time": "09:10"},
            {"id": 2, "order": 2, "start_time": "09:20", "end_time": "10:00"},
            {"id": 3, "order": 3, "start_time": "10:10", "end_time": "10:50"},
            {"id": 4, "order": 4, "start_time": "11:20", "end_time": "12:00"}
        ],
        "teachers": [
            {"id": 1, "name": "Ayse", "surname": "Yilmaz", "branch": "Mathematics"},
            {"id": 2, "name": "Mehmet", "surname": "Demir", "branch": "Physics"},
            {"id": 3, "name": "Elif", "surname": "Kaya", "branch": "Literature"}
        ],
        "classes": [
            {"id": 10, "name": "9/A"},
            {"id": 11, "name": "9/B"},
            {"id": 12, "name": "10/A"}
        ],
        "subjects": [
            {"id": 100, "name": "Mathematics"},
            {"id": 101, "name": "Physics"},
            {"id": 102, "name": "Literature"}
        ],
        "locations": [
            {"id": 5, "name": "Garden"},
            {"id": 6, "name": "Canteen"},
            {"id": 7, "name": "1st Floor"}
        ],
        "schedules": [
            {"id": 1, "teacher_id": 1, "day_of_week": 1, "period_id": 1, "class_id": 10, "subject_id": 100},
            {"id": 2, "teacher_id": 1, "day_of_week": 1, "period_id": 3, "class_id": 11, "subject_id": 100},
            {"id": 3, "teacher_id": 2, "day_of_week": 1, "period_id": 1, "class_id": 11, "subject_id": 101},
            {"id": 4, "teacher_id": 3, "day_of_week": 1, "period_id": 2, "class_id": 12, "subject_id": 102},
            {"id": 5, "teacher_id": 3, "day_of_week": 1, "period_id": 4, "class_id": 10, "subject_id": 102},
            {"id": 6, "teacher_id": 2, "day_of_week": 2, "period_id": 1, "class_id": 12, "subject_id": 101}
        ],
        "duties": [
            {"id": 1, "teacher_id": 2, "day_of_week": 1, "location_id": 5, "period_id": 2},
            {"id": 2, "teacher_id": 3, "day_of_week": 1, "location_id": 5, "period_id": None},
            {"id": 3, "teacher_id": 1, "day_of_week": 2, "location_id": 6, "period_id": None}
        ],
        "absences": [
            {"id": 1, "teacher_id": 1, "reason": "Conference", "start_date": "2024-09-16", "end_date": "2024-09-17"}
        ],
        "substitutions": [
            {"id": 1, "absent_teacher_id": 1, "substitute_teacher_id": 3, "schedule_id": 1, "date": "2024-09-16"}
        ]
    }


def test_root_endpoint():
    """Test root endpoint is accessible."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "service" in data
    assert "status" in data
    assert data["status"] == "healthy"


def test_health_endpoint():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_current_period_endpoint():
    """Test /v1/periods/current resolves the containing period."""
    request_data = {"periods": get_minimal_snapshot()["periods"], "time": "08:10"}

    response = client.post("/api/v1/periods/current", json=request_data)

    assert response.status_code == 200
    data = response.json()
    assert data["time"] == "08:10"
    assert data["current_period"]["order"] == 1


def test_current_period_outside_class_hours():
    """No active period is a normal response, not an error."""
    request_data = {"periods": get_minimal_snapshot()["periods"], "time": "08:45"}

    response = client.post("/api/v1/periods/current", json=request_data)

    assert response.status_code == 200
    assert response.json()["current_period"] is None


def test_availability_endpoint_lesson_and_duty():
    """Test the example scenario through the API."""
    base = {"snapshot": get_minimal_snapshot(), "teacher_id": 1, "day_of_week": 1, "reference_date": "2024-09-16"}

    response = client.post("/api/v1/availability", json={**base, "period_id": 1})
    assert response.status_code == 200
    assert response.json() == {"available": False, "reason": "lesson"}

    response = client.post("/api/v1/availability", json={**base, "period_id": 2})
    assert response.status_code == 200
    assert response.json() == {"available": False, "reason": "duty"}


def test_availability_endpoint_absent_and_free():
    request_data = {
        "snapshot": get_medium_snapshot(),
        "teacher_id": 1,
        "day_of_week": 1,
        "period_id": 2,
        "reference_date": "2024-09-16"
    }

    response = client.post("/api/v1/availability", json=request_data)
    assert response.json() == {"available": False, "reason": "absent"}

    request_data["reference_date"] = "2024-09-18"
    response = client.post("/api/v1/availability", json=request_data)
    assert response.json() == {"available": True, "reason": None}


def test_conflicts_endpoint():
    """The lesson and the all-day duty collide in period 1 only."""
    response = client.post("/api/v1/conflicts", json={"snapshot": get_minimal_snapshot()})

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    conflict = data["conflicts"][0]
    assert (conflict["teacher_id"], conflict["day_of_week"], conflict["period_id"]) == (1, 1, 1)
    assert [c["kind"] for c in conflict["commitments"]] == ["lesson", "duty"]


def test_conflicts_endpoint_none():
    snapshot = get_minimal_snapshot()
    snapshot["duties"] = []

    response = client.post("/api/v1/conflicts", json={"snapshot": snapshot})

    assert response.json() == {"count": 0, "conflicts": []}


def test_active_classes_endpoint():
    """Every class appears once, with or without a lesson."""
    response = client.post(
        "/api/v1/dashboard/active-classes",
        json={"snapshot": get_medium_snapshot(), "now": "2024-09-16T08:45:00"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["day_of_week"] == 1
    assert data["current_period"]["order"] == 1

    rows = {row["class_id"]: row for row in data["rows"]}
    assert sorted(rows) == [10, 11, 12]
    assert rows[10]["teacher_name"] == "Ayse Yilmaz"
    assert rows[11]["subject_name"] == "Physics"
    assert rows[12]["has_lesson"] is False


def test_active_classes_outside_class_hours():
    response = client.post(
        "/api/v1/dashboard/active-classes",
        json={"snapshot": get_medium_snapshot(), "now": "2024-09-16T13:00:00"}
    )

    data = response.json()
    assert data["current_period"] is None
    assert len(data["rows"]) == 3
    assert all(not row["has_lesson"] for row in data["rows"])


def test_duty_roster_endpoint():
    response = client.post(
        "/api/v1/dashboard/duty-roster",
        json={"snapshot": get_medium_snapshot(), "now": "2024-09-16T09:30:00"}
    )

    assert response.status_code == 200
    roster = response.json()["roster"]

    # JSON object keys are strings
    assert list(roster.keys()) == ["5", "6", "7"]
    assert roster["6"] == []
    entries = {entry["duty_id"]: entry for entry in roster["5"]}
    assert entries[1]["active"] is True
    assert entries[1]["teacher_name"] == "Mehmet Demir"
    assert entries[2]["all_day"] is True
    assert entries[2]["active"] is True


def test_itinerary_endpoint():
    response = client.post(
        "/api/v1/teachers/3/itinerary",
        json={"snapshot": get_medium_snapshot(), "now": "2024-09-16T11:30:00"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["teacher_id"] == 3
    assert [e["period_order"] for e in data["entries"]] == [2, 4]
    assert [e["is_current"] for e in data["entries"]] == [False, True]
    assert data["entries"][0]["class_name"] == "10/A"


def test_itinerary_endpoint_unknown_teacher_is_empty():
    response = client.post(
        "/api/v1/teachers/99/itinerary",
        json={"snapshot": get_medium_snapshot(), "now": MONDAY_0810}
    )

    assert response.status_code == 200
    assert response.json()["entries"] == []


def test_substitution_candidates_endpoint():
    request_data = {
        "snapshot": get_medium_snapshot(),
        "day_of_week": 1,
        "period_id": 3,
        "reference_date": "2024-09-16"
    }

    response = client.post("/api/v1/substitutions/candidates", json=request_data)

    assert response.status_code == 200
    candidates = response.json()["candidates"]
    assert [c["teacher_id"] for c in candidates] == [2, 1, 3]
    assert candidates[0]["available"] is True
    assert candidates[1]["reason"] == "lesson"
    assert candidates[2]["reason"] == "duty"


def test_substitution_candidates_endpoint_marks_substituting_teacher():
    """Teacher 3 already covers schedule 1 in period 1 on this date."""
    snapshot = get_medium_snapshot()
    snapshot["duties"] = [d for d in snapshot["duties"] if d["id"] != 2]
    request_data = {
        "snapshot": snapshot,
        "day_of_week": 1,
        "period_id": 1,
        "reference_date": "2024-09-16"
    }

    response = client.post("/api/v1/substitutions/candidates", json=request_data)

    assert response.status_code == 200
    reasons = {c["teacher_id"]: c["reason"] for c in response.json()["candidates"]}
    assert reasons == {1: "lesson", 2: "lesson", 3: "substituting"}


def test_uncovered_lessons_endpoint():
    """Schedule 1 already has a substitute, schedule 2 does not."""
    response = client.post(
        "/api/v1/substitutions/uncovered",
        json={"snapshot": get_medium_snapshot(), "now": MONDAY_0810}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["date"] == "2024-09-16"
    assert [l["schedule_id"] for l in data["lessons"]] == [2]


def test_absent_teachers_endpoint():
    response = client.post(
        "/api/v1/dashboard/absent-teachers",
        json={"snapshot": get_medium_snapshot(), "now": MONDAY_0810}
    )

    assert response.status_code == 200
    absent = response.json()["absent_teachers"]
    assert len(absent) == 1
    assert absent[0]["full_name"] == "Ayse Yilmaz"
    assert absent[0]["lessons_missed"] == 2


def test_current_day_endpoint():
    response = client.post(
        "/api/v1/dashboard/current-day",
        json={"snapshot": get_medium_snapshot(), "now": MONDAY_0810}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["date"] == "2024-09-16"
    assert data["day_of_week"] == 1
    assert data["time"] == "08:10"
    assert data["current_period"] is None
    assert len(data["active_classes"]) == 3
    assert len(data["absent_teachers"]) == 1
    # Teacher 3 has an all-day duty on top of two lessons
    assert data["conflict_count"] == 2


def test_current_day_endpoint_without_now():
    """Omitting now falls back to the server clock; the shape is the same."""
    response = client.post("/api/v1/dashboard/current-day", json={"snapshot": get_minimal_snapshot()})

    assert response.status_code == 200
    data = response.json()
    assert 1 <= data["day_of_week"] <= 7
    assert len(data["active_classes"]) == 1


def test_validation_error_format():
    """Test that validation errors return human-friendly format."""
    invalid_request = {"periods": [], "time": "8:10"}

    response = client.post("/api/v1/periods/current", json=invalid_request)

    assert response.status_code == 422
    data = response.json()
    assert "errors" in data
    assert isinstance(data["errors"], dict)
    assert data["errors"]["Time"] == ["Time must be in HH:MM format (e.g., '08:30')."]


def test_validation_error_day_of_week_range():
    request_data = {
        "snapshot": get_minimal_snapshot(),
        "teacher_id": 1,
        "day_of_week": 0,
        "period_id": 1,
        "reference_date": "2024-09-16"
    }

    response = client.post("/api/v1/availability", json=request_data)

    assert response.status_code == 422
    messages = response.json()["errors"]["Day Of Week"]
    assert "between 1 (Monday) and 7 (Sunday)" in messages[0]


def test_validation_error_missing_field():
    response = client.post("/api/v1/availability", json={"snapshot": get_minimal_snapshot()})

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert errors["Teacher Id"] == ["Teacher Id is required."]
    for field, messages in errors.items():
        assert isinstance(messages, list)
        assert len(messages) > 0
        assert isinstance(messages[0], str)


def test_validation_error_bad_period_time_in_snapshot():
    snapshot = get_minimal_snapshot()
    snapshot["periods"][0]["start_time"] = "8:00"

    response = client.post("/api/v1/conflicts", json={"snapshot": snapshot})

    assert response.status_code == 422
    assert "Snapshot -> Periods -> 0 -> Start Time" in response.json()["errors"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
