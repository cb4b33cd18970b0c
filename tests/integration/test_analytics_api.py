# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the dashboard and analytics API endpoints.

Services are replaced through dependency overrides, so these tests cover
routing, identity, query validation and the response envelope.
"""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import get_analytics_service, get_dashboard_service
from src.domains.analytics import FetchError
from src.domains.analytics.activity import RecentActivity
from src.domains.analytics.heatmap import HeatmapDay
from src.domains.analytics.insights import ProgressPoint
from src.domains.analytics.service import DashboardStats

USER_ID = "550e8400-e29b-41d4-a716-446655440001"
HEADERS = {"X-User-Id": USER_ID}


@pytest.fixture
def dashboard_service() -> MagicMock:
    """Create a mock dashboard service."""
    service = MagicMock()
    service.get_dashboard_stats = AsyncMock(
        return_value=DashboardStats(total_quizzes=3, average_score=67, study_streak=2)
    )
    service.get_recent_activity = AsyncMock(
        return_value=[
            RecentActivity(
                id="create_quiz-1",
                title='Created "Fractions" quiz',
                completed_at=datetime(2025, 3, 14, 9, 0, tzinfo=timezone.utc),
            )
        ]
    )
    service.get_topic_progress = AsyncMock(return_value=[])
    service.get_all_topic_progress = AsyncMock(return_value=[])
    service.get_all_dashboard_data = AsyncMock(
        side_effect=FetchError("quizzes", "Failed to fetch quizzes", RuntimeError("down"))
    )
    return service


@pytest.fixture
def analytics_service() -> MagicMock:
    """Create a mock analytics service."""
    service = MagicMock()
    service.get_progress_over_time = AsyncMock(
        return_value=[ProgressPoint(day=date(2025, 3, 1), total_questions=4, correct_answers=3)]
    )
    service.get_activity_heatmap = AsyncMock(
        return_value=[HeatmapDay(day=date(2025, 3, 1), activity_count=5)]
    )
    service.get_total_study_time = AsyncMock(return_value=360)
    return service


@pytest.fixture
def app(dashboard_service: MagicMock, analytics_service: MagicMock) -> FastAPI:
    """Create the application with services overridden."""
    app = create_app()
    app.dependency_overrides[get_dashboard_service] = lambda: dashboard_service
    app.dependency_overrides[get_analytics_service] = lambda: analytics_service
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)


class TestRoutes:
    """Tests for route registration."""

    def test_routes_registered(self, app):
        """Test that dashboard and analytics routes are registered."""
        routes = [route.path for route in app.routes]

        assert "/api/v1/dashboard/stats" in routes
        assert "/api/v1/dashboard/activity" in routes
        assert "/api/v1/dashboard/progress" in routes
        assert "/api/v1/dashboard/progress/all" in routes
        assert "/api/v1/dashboard/all" in routes
        assert "/api/v1/analytics/progress-over-time" in routes
        assert "/api/v1/analytics/activity-heatmap" in routes
        assert "/api/v1/analytics/accuracy-breakdown" in routes
        assert "/api/v1/analytics/quiz-performance-trend" in routes
        assert "/api/v1/analytics/flashcard-analytics" in routes
        assert "/api/v1/analytics/best-worst-topics" in routes
        assert "/api/v1/analytics/study-time" in routes
        assert "/api/v1/analytics/comprehensive" in routes
        assert "/health" in routes
        assert "/ready" in routes


class TestIdentity:
    """Tests for the X-User-Id requirement."""

    def test_missing_user_id_is_unauthorized(self, client):
        response = client.get("/api/v1/dashboard/stats")

        assert response.status_code == 401
        assert response.json() == {"success": False, "data": None, "error": "Not authenticated"}

    def test_malformed_user_id_is_unauthorized(self, client, dashboard_service):
        response = client.get("/api/v1/dashboard/stats", headers={"X-User-Id": "not-a-uuid"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid user identity"
        dashboard_service.get_dashboard_stats.assert_not_called()

    def test_user_id_is_canonicalized(self, client, dashboard_service):
        client.get("/api/v1/dashboard/stats", headers={"X-User-Id": USER_ID.upper()})

        dashboard_service.get_dashboard_stats.assert_awaited_once_with(USER_ID)


class TestDashboardEndpoints:
    """Tests for dashboard endpoints."""

    def test_stats_envelope(self, client):
        response = client.get("/api/v1/dashboard/stats", headers=HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["error"] is None
        assert body["data"]["totalQuizzes"] == 3
        assert body["data"]["averageScore"] == 67
        assert body["data"]["studyStreak"] == 2

    def test_activity_passes_limit(self, client, dashboard_service):
        response = client.get("/api/v1/dashboard/activity?limit=5", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["data"][0]["id"] == "create_quiz-1"
        dashboard_service.get_recent_activity.assert_awaited_once_with(USER_ID, limit=5)

    def test_activity_rejects_invalid_limit(self, client, dashboard_service):
        response = client.get("/api/v1/dashboard/activity?limit=0", headers=HEADERS)

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert "limit" in body["error"]
        dashboard_service.get_recent_activity.assert_not_called()

    def test_bundle_failure_is_service_unavailable(self, client):
        response = client.get("/api/v1/dashboard/all", headers=HEADERS)

        assert response.status_code == 503
        assert response.json() == {
            "success": False,
            "data": None,
            "error": "Failed to fetch quizzes: down",
        }

    def test_unexpected_error_is_enveloped(self, app, dashboard_service):
        dashboard_service.get_dashboard_stats.side_effect = RuntimeError("boom")
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/v1/dashboard/stats", headers=HEADERS)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "data": None,
            "error": "Internal server error",
        }

    def test_response_carries_request_id(self, client):
        response = client.get(
            "/api/v1/dashboard/progress",
            headers={**HEADERS, "X-Request-ID": "req-123"},
        )

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.headers["X-Request-ID"] == "req-123"


class TestAnalyticsEndpoints:
    """Tests for analytics endpoints."""

    def test_progress_over_time_range(self, client, analytics_service):
        response = client.get(
            "/api/v1/analytics/progress-over-time?from=2025-03-01&to=2025-03-31",
            headers=HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["data"][0]["accuracy_percentage"] == 75
        analytics_service.get_progress_over_time.assert_awaited_once_with(
            USER_ID, date_from=date(2025, 3, 1), date_to=date(2025, 3, 31)
        )

    def test_progress_over_time_rejects_inverted_range(self, client, analytics_service):
        response = client.get(
            "/api/v1/analytics/progress-over-time?from=2025-03-31&to=2025-03-01",
            headers=HEADERS,
        )

        assert response.status_code == 422
        assert response.json()["success"] is False
        analytics_service.get_progress_over_time.assert_not_called()

    def test_activity_heatmap_year(self, client, analytics_service):
        response = client.get("/api/v1/analytics/activity-heatmap?year=2025", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["data"] == [{"date": "2025-03-01", "activity_count": 5}]
        analytics_service.get_activity_heatmap.assert_awaited_once_with(USER_ID, year=2025)

    def test_activity_heatmap_rejects_bad_year(self, client):
        response = client.get("/api/v1/analytics/activity-heatmap?year=abc", headers=HEADERS)

        assert response.status_code == 422
        assert "year" in response.json()["error"]

    def test_study_time(self, client):
        response = client.get("/api/v1/analytics/study-time", headers=HEADERS)

        assert response.json()["data"] == {"total_study_time_seconds": 360}


class TestHealthEndpoints:
    """Tests for health endpoints."""

    def test_health_degraded_without_database(self, client):
        with patch(
            "src.api.routes.health.check_database_connection",
            AsyncMock(return_value=False),
        ):
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"]["status"] == "unhealthy"

    def test_ready_with_database(self, client):
        with patch(
            "src.api.routes.health.check_database_connection",
            AsyncMock(return_value=True),
        ):
            response = client.get("/ready")

        assert response.json()["ready"] is True
