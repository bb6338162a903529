"""
Tests for the REST API.
"""

import pytest
from fastapi.testclient import TestClient

from business_day_calculator import api as api_module
from business_day_calculator.api import app
from business_day_calculator.data.schemas import Config


@pytest.fixture
def client():
    return TestClient(app)


class TestEndpoints:
    """Tests for the API endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_range(self, client):
        response = client.post(
            "/range",
            json={"anchor_date": "2024-03-15", "auto_start_time": "06:00"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["start"] == "2024-03-15T06:00:00"
        assert body["end"] == "2024-03-16T06:00:59.999000"

    def test_bucket(self, client):
        response = client.post(
            "/bucket",
            json={"timestamp": "2024-03-15T02:30:00", "auto_start_time": "06:00"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["business_day"] == "2024-03-14T06:00:00"
        assert body["window"]["start"] == "2024-03-14T06:00:00"

    def test_days(self, client):
        response = client.post(
            "/days",
            json={
                "start_date": "2024-03-15",
                "end_date": "2024-03-17",
                "auto_start_time": "22:00",
                "business_day_end_hour": "05:00",
            },
        )

        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_days_reversed(self, client):
        response = client.post(
            "/days",
            json={"start_date": "2024-03-17", "end_date": "2024-03-15"},
        )

        assert response.status_code == 400

    def test_hours(self, client):
        response = client.post(
            "/hours",
            json={"auto_start_time": "22:00", "business_day_end_hour": "05:00"},
        )

        assert response.status_code == 200
        assert response.json()["hours"] == 7

    def test_strict_rejects_bad_time(self, client):
        response = client.post(
            "/hours",
            json={"auto_start_time": "25:99", "strict": True},
        )

        assert response.status_code == 400

    def test_summary(self, client):
        response = client.post(
            "/summary",
            json={
                "auto_start_time": "22:00",
                "business_day_end_hour": "05:00",
                "transactions": [
                    {"createdAt": "2024-03-15T23:00:00", "total": 10.0, "paymentMethod": "Cash"},
                    {"createdAt": "2024-03-16T02:00:00", "total": 5.0, "paymentMethod": "Card"},
                    {"createdAt": "2024-03-16T23:00:00", "total": 7.0, "paymentMethod": "Cash"},
                ],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 2
        assert body[0]["business_day"] == "2024-03-15T22:00:00"
        assert body[0]["summary"]["transactions"] == 2
        assert body[0]["summary"]["total_sales"] == pytest.approx(15.0)

    def test_closing_window(self, client):
        response = client.post(
            "/closing-window",
            json={
                "auto_start_time": "22:00",
                "business_day_end_hour": "05:00",
                "closed_at": "2024-03-16T05:00:00",
            },
        )

        assert response.status_code == 200
        assert response.json()["start"] == "2024-03-15T22:00:00"

    def test_next_close(self, client):
        response = client.get("/scheduler/next-close")

        assert response.status_code == 200
        assert "auto_close_enabled" in response.json()


@pytest.fixture
def berlin_config(monkeypatch):
    """Overnight venue in Berlin with a configured end hour."""
    cfg = Config(
        auto_start_time="22:00",
        business_day_end_hour="05:00",
        timezone="Europe/Berlin",
    )
    monkeypatch.setattr(api_module, "config", cfg)
    return cfg


class TestVenueSettings:
    """Tests for requests relying on the loaded config."""

    def test_bucket_utc_timestamp(self, client, berlin_config):
        response = client.post(
            "/bucket",
            json={"timestamp": "2024-03-15T22:30:00Z", "auto_start_time": "23:00"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["timestamp"] == "2024-03-15T23:30:00"
        assert body["business_day"] == "2024-03-15T23:00:00"

    def test_summary_mixed_utc_and_local(self, client, berlin_config):
        response = client.post(
            "/summary",
            json={
                "transactions": [
                    {"createdAt": "2024-03-15T23:00:00", "total": 10.0, "paymentMethod": "Cash"},
                    {"createdAt": "2024-03-16T01:00:00Z", "total": 5.0, "paymentMethod": "Card"},
                ],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["summary"]["transactions"] == 2

    def test_closing_window_utc_instant(self, client, berlin_config):
        response = client.post("/closing-window", json={"closed_at": "2024-03-16T04:00:00Z"})

        assert response.status_code == 200
        assert response.json() == {
            "start": "2024-03-15T22:00:00",
            "end": "2024-03-16T05:00:00",
        }

    def test_configured_end_hour_used_by_default(self, client, berlin_config):
        response = client.post("/hours", json={})
        assert response.json()["hours"] == 7

    def test_explicit_null_clears_end_hour(self, client, berlin_config):
        response = client.post("/hours", json={"business_day_end_hour": None})

        assert response.status_code == 200
        assert response.json()["hours"] == 24
        assert response.json()["business_day_end_hour"] == "22:00"


class TestScheduler:
    """Tests for the automatic closing scheduler endpoints."""

    def test_status_while_running(self):
        with TestClient(app) as client:
            response = client.get("/scheduler/status")

        assert response.status_code == 200
        assert response.json()["is_running"] is True
        assert response.json()["is_closing_in_progress"] is False

    def test_stopped_after_shutdown(self):
        with TestClient(app):
            pass

        assert api_module.scheduler.is_running is False

    def test_next_close_when_enabled(self, monkeypatch):
        monkeypatch.setattr(
            api_module,
            "config",
            Config(auto_start_time="22:00", business_day_end_hour="05:00", auto_close_enabled=True),
        )

        with TestClient(app) as client:
            body = client.get("/scheduler/next-close").json()

        assert body["auto_close_enabled"] is True
        assert body["business_day_end_hour"] == "05:00"
        assert body["next_scheduled_close"].endswith("T05:00:00")

    def test_force_close(self, client, berlin_config):
        response = client.post("/scheduler/force-close")

        assert response.status_code == 200
        assert api_module.scheduler.last_close_time is not None
