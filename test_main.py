# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for the Meal Signup Service HTTP layer.
Each test gets an empty database seeded with the default Downtown and
Northside teams by the application lifespan.
"""

import asyncio
import json
import logging
from datetime import date
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from main import app
from mealsignup.core import dependencies
from mealsignup.core.config import settings
from mealsignup.core.database import drop_schema, engine
from mealsignup.core.errors import SLOT_UNAVAILABLE_MESSAGE
from mealsignup.core.logging import JSONFormatter
from mealsignup.middleware import normalize_path

ALICE = {"X-User-Id": "user-alice", "X-User-Name": "Alice Host", "X-User-Email": "alice@example.com"}
BOB = {"X-User-Id": "user-bob", "X-User-Name": "Bob Host"}
ADMIN = {"X-User-Id": "user-admin", "X-User-Role": "admin"}

MARCH_WEEK = {"start": "2024-03-01", "end": "2024-03-07"}


# ============================================
# Fixtures
# ============================================
@pytest.fixture
def client():
    """Fresh schema per test; the lifespan recreates it and seeds default teams."""
    asyncio.run(drop_schema(engine))
    with TestClient(app) as test_client:
        yield test_client


def sign_up(client, team_id="downtown", meal_date="2024-03-05", headers=ALICE, **extra):
    return client.post(
        "/api/v1/commitments",
        json={"team_id": team_id, "meal_date": meal_date, **extra},
        headers=headers,
    )


# ============================================
# Health & Metrics
# ============================================
class TestHealth:
    def test_health_returns_ok(self, client):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert data["service"] == settings.SERVICE_NAME
        assert data["version"] == settings.SERVICE_VERSION
        assert "timestamp" in data

    def test_readiness_checks_store(self, client):
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    def test_readiness_store_down(self, client):
        failure = OperationalError("SELECT 1", {}, Exception("db down"))
        with patch.object(dependencies.get_commitment_repo(), "ping", AsyncMock(side_effect=failure)):
            response = client.get("/health/ready")
        assert response.status_code == 503
        assert response.json()["error"] == "store_unavailable"

    def test_metrics_exposed(self, client):
        sign_up(client)
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "mealsignup_commitments_created_total" in response.text
        assert "mealsignup_requests_total" in response.text


class TestRequestID:
    def test_generated_when_missing(self, client):
        assert client.get("/health").headers["X-Request-ID"]

    def test_propagated_when_given(self, client):
        response = client.get("/health", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"

    def test_error_body_carries_request_id(self, client):
        response = client.get(
            "/api/v1/teams/nowhere", headers={"X-Request-ID": "trace-404"}
        )
        assert response.status_code == 404
        assert response.json()["request_id"] == "trace-404"

    def test_path_normalisation(self):
        assert normalize_path("/api/v1/teams/downtown/slots/2024-03-05") == (
            "/api/v1/teams/{id}/slots/{date}"
        )
        assert normalize_path("/api/v1/teams/northside/slots") == "/api/v1/teams/{id}/slots"
        assert normalize_path("/api/v1/calendar/month/2024/3") == "/api/v1/calendar/month/{n}/{n}"
        assert normalize_path("/") == "/"


# ============================================
# Structured logging
# ============================================
class TestLogging:
    def _format(self, **extra):
        record = logging.LogRecord(
            "mealsignup.services.commitment_service", logging.INFO, __file__, 1,
            "Slot unavailable: team=%s", ("downtown",), None,
        )
        record.__dict__.update(extra)
        return json.loads(JSONFormatter().format(record))

    def test_slot_context_fields(self):
        line = self._format(team_id="downtown", meal_date=date(2024, 3, 5), reason="taken")
        assert line["message"] == "Slot unavailable: team=downtown"
        assert line["logger"] == "mealsignup.services.commitment_service"
        assert line["team_id"] == "downtown"
        assert line["meal_date"] == "2024-03-05"
        assert line["reason"] == "taken"

    def test_absent_fields_omitted(self):
        line = self._format(request_id="trace-1")
        assert line["request_id"] == "trace-1"
        assert "commitment_id" not in line
        assert "meal_date" not in line


# ============================================
# Calendar
# ============================================
class TestCalendar:
    def test_period_grid(self, client):
        response = client.get("/api/v1/calendar", params=MARCH_WEEK)
        assert response.status_code == 200
        days = response.json()["days"]
        assert days[0]["date"] == "2024-02-25"
        assert days[-1]["date"] == "2024-03-09"
        sunday = next(d for d in days if d["date"] == "2024-03-03")
        assert [s["team"]["team_id"] for s in sunday["slots"]] == ["northside"]
        padding = next(d for d in days if d["date"] == "2024-02-27")
        assert padding["is_in_requested_period"] is False
        assert padding["slots"] == []

    def test_taken_slot_shows_commitment(self, client):
        created = sign_up(client).json()
        days = client.get("/api/v1/calendar", params={**MARCH_WEEK, "team_id": "downtown"}).json()["days"]
        tuesday = next(d for d in days if d["date"] == "2024-03-05")
        slot = tuesday["slots"][0]["slot"]
        assert slot["status"] == "taken"
        assert slot["commitment"]["id"] == created["id"]
        assert tuesday["slots"][0]["team"]["display_name"] == "Elder Johnson & Elder Smith"

    def test_month(self, client):
        data = client.get("/api/v1/calendar/month/2024/3").json()
        assert len(data["days"]) == 42
        assert data["start"] == "2024-03-01"
        assert data["end"] == "2024-03-31"

    def test_bad_month(self, client):
        response = client.get("/api/v1/calendar/month/2024/13")
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_window"

    def test_week(self, client):
        data = client.get("/api/v1/calendar/week", params={"date": "2024-03-06"}).json()
        assert data["start"] == "2024-03-03"
        assert [d["date"] for d in data["days"]][-1] == "2024-03-09"

    def test_reversed_window(self, client):
        response = client.get("/api/v1/calendar", params={"start": "2024-03-07", "end": "2024-03-01"})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_window"

    def test_missing_params(self, client):
        response = client.get("/api/v1/calendar")
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_unknown_team_scope(self, client):
        response = client.get("/api/v1/calendar", params={**MARCH_WEEK, "team_id": "nowhere"})
        assert response.status_code == 404

    def test_store_failure_maps_to_503(self, client):
        failure = OperationalError("SELECT", {}, Exception("db down"))
        repo = dependencies.get_commitment_repo()
        with patch.object(repo, "query_by_date_range", AsyncMock(side_effect=failure)):
            response = client.get("/api/v1/calendar", params=MARCH_WEEK)
        assert response.status_code == 503
        assert response.json()["error"] == "store_unavailable"

    def test_unexpected_failure_maps_to_500(self, client):
        repo = dependencies.get_commitment_repo()
        quiet_client = TestClient(app, raise_server_exceptions=False)
        with patch.object(repo, "query_by_date_range", AsyncMock(side_effect=RuntimeError("boom"))):
            response = quiet_client.get("/api/v1/calendar", params=MARCH_WEEK)
        assert response.status_code == 500
        assert response.json()["error"] == "internal_server_error"


class TestSlots:
    def test_team_slots(self, client):
        sign_up(client)
        data = client.get("/api/v1/teams/downtown/slots", params=MARCH_WEEK).json()
        assert data["total"] == 6
        available = client.get(
            "/api/v1/teams/downtown/slots", params={**MARCH_WEEK, "available_only": "true"}
        ).json()
        assert available["total"] == 5
        assert "2024-03-05" not in [s["meal_date"] for s in available["slots"]]

    def test_single_slot(self, client):
        data = client.get("/api/v1/teams/downtown/slots/2024-03-05").json()
        assert data["status"] == "available"
        assert data["day_of_week"] == "Tuesday"
        assert data["guest_count"] == 2

    def test_unscheduled_day(self, client):
        response = client.get("/api/v1/teams/downtown/slots/2024-03-03")
        assert response.status_code == 404
        assert response.json()["error"] == "not_scheduled"

    def test_unknown_team(self, client):
        response = client.get("/api/v1/teams/nowhere/slots/2024-03-05")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


# ============================================
# Commitments
# ============================================
class TestCommitments:
    def test_create(self, client):
        response = sign_up(client, notes="Lasagna", contact_preference="phone")
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "confirmed"
        assert data["user_id"] == "user-alice"
        assert data["user_name"] == "Alice Host"
        assert data["meal_date"] == "2024-03-05"
        assert data["contact_preference"] == "phone"

    def test_requires_identity(self, client):
        response = sign_up(client, headers={})
        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_rejects_unknown_role(self, client):
        response = sign_up(client, headers={**ALICE, "X-User-Role": "root"})
        assert response.status_code == 400

    def test_taken_slot_message(self, client):
        sign_up(client)
        response = sign_up(client, headers=BOB)
        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "slot_unavailable"
        assert body["detail"] == SLOT_UNAVAILABLE_MESSAGE
        assert body["reason"] == "taken"

    def test_unscheduled_day_message(self, client):
        response = sign_up(client, meal_date="2024-03-03")
        assert response.status_code == 409
        assert response.json()["detail"] == SLOT_UNAVAILABLE_MESSAGE
        assert response.json()["reason"] == "not_scheduled"

    def test_invalid_payload(self, client):
        response = sign_up(client, meal_date="someday")
        assert response.status_code == 422

    def test_list_mine(self, client):
        sign_up(client, meal_date="2024-03-04")
        sign_up(client, meal_date="2024-03-06")
        sign_up(client, meal_date="2024-03-05", headers=BOB)
        data = client.get("/api/v1/commitments", headers=ALICE).json()
        assert data["user_id"] == "user-alice"
        assert [c["meal_date"] for c in data["commitments"]] == ["2024-03-06", "2024-03-04"]

    def test_list_other_user(self, client):
        sign_up(client)
        assert client.get(
            "/api/v1/commitments", params={"user_id": "user-alice"}, headers=BOB
        ).status_code == 403
        data = client.get(
            "/api/v1/commitments", params={"user_id": "user-alice"}, headers=ADMIN
        ).json()
        assert data["total"] == 1

    def test_get_owner_only(self, client):
        created = sign_up(client).json()
        assert client.get(f"/api/v1/commitments/{created['id']}", headers=ALICE).status_code == 200
        assert client.get(f"/api/v1/commitments/{created['id']}", headers=BOB).status_code == 403
        assert client.get("/api/v1/commitments/missing", headers=ALICE).status_code == 404

    def test_patch(self, client):
        created = sign_up(client).json()
        response = client.patch(
            f"/api/v1/commitments/{created['id']}",
            json={"notes": "Tacos", "user_phone": "555-0100"},
            headers=ALICE,
        )
        assert response.status_code == 200
        assert response.json()["notes"] == "Tacos"
        assert response.json()["meal_date"] == "2024-03-05"

    def test_cancel_then_recreate(self, client):
        created = sign_up(client).json()
        response = client.post(f"/api/v1/commitments/{created['id']}/cancel", headers=ALICE)
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert sign_up(client, headers=BOB).status_code == 201

    def test_patch_cancelled_conflicts(self, client):
        created = sign_up(client).json()
        client.post(f"/api/v1/commitments/{created['id']}/cancel", headers=ALICE)
        response = client.patch(
            f"/api/v1/commitments/{created['id']}", json={"notes": "late"}, headers=ALICE
        )
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_transition"


# ============================================
# Directory
# ============================================
class TestDirectory:
    def test_seeded_teams(self, client):
        teams = client.get("/api/v1/teams").json()
        assert {t["id"] for t in teams} == {"downtown", "northside"}

    def test_get_team(self, client):
        team = client.get("/api/v1/teams/downtown").json()
        assert team["days_of_week"] == [1, 2, 3, 4, 5, 6]

    def test_put_team_admin_only(self, client):
        payload = {"area": "Eastside", "days_of_week": [2, 4]}
        assert client.put("/api/v1/teams/eastside", json=payload, headers=ALICE).status_code == 403
        response = client.put("/api/v1/teams/eastside", json=payload, headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["days_of_week"] == [2, 4]

    def test_put_team_default_days(self, client):
        response = client.put("/api/v1/teams/westside", json={"area": "Westside"}, headers=ADMIN)
        assert response.json()["days_of_week"] == [1, 2, 3, 4, 5, 6]

    def test_put_team_rejects_bad_weekday(self, client):
        response = client.put(
            "/api/v1/teams/westside", json={"area": "Westside", "days_of_week": [7]}, headers=ADMIN
        )
        assert response.status_code == 422

    def test_members(self, client):
        members = client.get("/api/v1/members").json()
        assert "Elder Smith" in [m["name"] for m in members]
        response = client.put(
            "/api/v1/members/elder-new", json={"name": "Elder New", "allergies": ["Dairy"]}, headers=ADMIN
        )
        assert response.status_code == 200
        assert client.get("/api/v1/members/elder-new").json()["allergies"] == ["Dairy"]
        assert client.get("/api/v1/members/nobody").status_code == 404


# ============================================
# Stats
# ============================================
class TestStats:
    def test_admin_only(self, client):
        assert client.get("/api/v1/stats/teams", headers=ALICE).status_code == 403

    def test_team_stats(self, client):
        sign_up(client, meal_date="2024-03-11")
        rows = client.get(
            "/api/v1/stats/teams", params={"reference_date": "2024-03-13"}, headers=ADMIN
        ).json()
        assert rows[0]["team_id"] == "downtown"
        assert rows[0]["meals_this_week"] == 1
        assert rows[0]["last_meal_date"] == "2024-03-11"

    def test_weekday_patterns(self, client):
        sign_up(client, meal_date="2024-03-11")
        rows = client.get(
            "/api/v1/stats/weekdays",
            params={"start": "2024-03-01", "end": "2024-03-31"},
            headers=ADMIN,
        ).json()
        assert len(rows) == 7
        assert rows[1]["signup_count"] == 1
        assert rows[1]["percentage"] == 100.0
