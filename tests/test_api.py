import sqlite3

import pytest
from fastapi.testclient import TestClient

from api.main import app
from core import config
from scripts.init_db import create_database

API_KEY = "test-key"


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "db" / "requests.db"
    monkeypatch.setattr(config, "DB_PATH", path)
    return path


@pytest.fixture
def client(db_path, monkeypatch):
    monkeypatch.setattr(config, "CALENDAR_API_KEY", API_KEY)
    create_database(db_path)
    return TestClient(app)


def logged_requests(db_path):
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute(
            "SELECT endpoint, status_code, events_returned, reference_date FROM api_requests"
        ).fetchall()
    finally:
        conn.close()


# =============================================================================
# HEALTH
# =============================================================================


def test_health_reports_healthy_with_request_log(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["request_log_available"] is True
    assert body["version"] == config.API_VERSION


def test_health_unhealthy_without_request_log(db_path):
    response = TestClient(app).get("/health")
    assert response.status_code == 503
    assert response.json()["request_log_available"] is False


# =============================================================================
# CALENDAR EVENTS
# =============================================================================


def test_calendar_events(client, db_path, sample_payload):
    response = client.post("/v1/calendar/events", json=sample_payload, headers={"X-API-Key": API_KEY})
    assert response.status_code == 200
    body = response.json()
    assert body["referenceDate"] == "2024-06-05"
    assert body["windowStart"] == "2024-06-02"
    assert body["windowEnd"] == "2024-07-06"

    events = {event["id"]: event for event in body["events"]}
    # 35 lunches + allocation + entry + call
    assert len(body["events"]) == 38

    call = events["call-31"]
    assert call["title"] == "📞 Kickoff (45min)"
    assert call["start"] == "2024-06-03T10:00:00"
    assert call["end"] == "2024-06-03T10:45:00"
    assert call["resource"] == {"type": "call", "callId": 31, "callType": "Phone", "durationMinutes": 45}

    entry = events["entry-21"]
    assert entry["start"] == "2024-06-03T11:00:00"
    assert entry["end"] == "2024-06-03T12:30:00"
    assert entry["resource"]["type"] == "timeEntry"
    assert entry["resource"]["packed"] is True
    assert entry["resource"]["workDate"] == "2024-06-03"

    assert events["allocation-11"]["resource"]["projectId"] == 7
    assert events["lunch-2024-06-03"]["resource"] == {"type": "lunch"}

    assert logged_requests(db_path) == [("/v1/calendar/events", 200, 38, "2024-06-05")]


def test_calendar_events_defaults_today_to_server_date(client, db_path):
    response = client.post("/v1/calendar/events", json={}, headers={"X-API-Key": API_KEY})
    assert response.status_code == 200
    assert len(response.json()["events"]) == 35

    conn = sqlite3.connect(db_path)
    try:
        details = conn.execute("SELECT detail_type FROM api_request_details").fetchall()
    finally:
        conn.close()
    assert details == [("warning",)]


def test_calendar_events_rejects_wrong_key(client, sample_payload):
    response = client.post("/v1/calendar/events", json=sample_payload, headers={"X-API-Key": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "UNAUTHORIZED"


def test_calendar_events_without_server_key(client, monkeypatch, sample_payload):
    monkeypatch.setattr(config, "CALENDAR_API_KEY", "")
    response = client.post("/v1/calendar/events", json=sample_payload, headers={"X-API-Key": API_KEY})
    assert response.status_code == 500
    assert response.json()["detail"]["code"] == "INTERNAL_ERROR"


def test_calendar_events_rejects_record_without_id(client, sample_payload):
    sample_payload["timeEntries"].append({"WorkDate": "2024-06-04", "Hours": 1})
    response = client.post("/v1/calendar/events", json=sample_payload, headers={"X-API-Key": API_KEY})
    assert response.status_code == 422


def test_malformed_call_and_lunch_fields_still_render(client, sample_payload):
    sample_payload["callRecords"].append(
        {"Id": 32, "CallDate": "2024-06-04", "StartTime": "11:00", "DurationMinutes": ""}
    )
    sample_payload["callRecords"].append(
        {"Id": 33, "CallDate": "2024-06-04", "StartTime": "14:00", "DurationMinutes": 45.5}
    )
    sample_payload["lunch"] = {"LunchTime": None, "LunchDurationMinutes": 60}
    response = client.post("/v1/calendar/events", json=sample_payload, headers={"X-API-Key": API_KEY})
    assert response.status_code == 200

    events = {event["id"]: event for event in response.json()["events"]}
    assert events["call-32"]["end"] == "2024-06-04T11:30:00"
    assert events["call-33"]["resource"]["durationMinutes"] == 46
    assert events["lunch-2024-06-04"]["start"] == "2024-06-04T12:00:00"


def test_request_log_counts_processed_days(client, db_path, sample_payload):
    sample_payload["lunch"] = {"LunchDurationMinutes": 0}
    response = client.post("/v1/calendar/events", json=sample_payload, headers={"X-API-Key": API_KEY})
    assert response.status_code == 200
    assert len(response.json()["events"]) == 3

    conn = sqlite3.connect(db_path)
    try:
        row = conn.execute(
            "SELECT days_processed, entries_packed, first_day, last_day FROM api_requests"
        ).fetchone()
    finally:
        conn.close()
    assert row == (35, 1, "2024-06-02", "2024-07-06")


def test_request_succeeds_when_request_log_is_missing(db_path, monkeypatch, sample_payload):
    monkeypatch.setattr(config, "CALENDAR_API_KEY", API_KEY)
    response = TestClient(app).post("/v1/calendar/events", json=sample_payload, headers={"X-API-Key": API_KEY})
    assert response.status_code == 200


# =============================================================================
# SLOTS
# =============================================================================


def test_slot_selection(client):
    response = client.post(
        "/v1/calendar/slots",
        json={"start": "2024-06-03T10:00:00", "end": "2024-06-03T11:30:00"},
        headers={"X-API-Key": API_KEY},
    )
    assert response.status_code == 200
    assert response.json() == {
        "start": "2024-06-03T10:00:00",
        "end": "2024-06-03T11:30:00",
        "workDate": "2024-06-03",
        "startTime": "10:00",
        "endTime": "11:30",
        "hours": 1.5,
        "durationMinutes": 90,
    }


def test_slot_selection_rejects_reversed_slot(client, db_path):
    response = client.post(
        "/v1/calendar/slots",
        json={"start": "2024-06-03T11:00:00", "end": "2024-06-03T10:00:00"},
        headers={"X-API-Key": API_KEY},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "VALIDATION_ERROR"
    assert logged_requests(db_path) == [("/v1/calendar/slots", 422, None, "2024-06-03")]
