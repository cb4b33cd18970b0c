# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from datetime import date, datetime, timezone

import pytest

from src.core.config import AnalyticsSettings, clear_settings_cache


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Ensure every test starts from freshly loaded settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (API routes, stubbed services)"
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_user_id() -> str:
    """Provide a sample user ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"


@pytest.fixture
def today() -> date:
    """Provide a fixed UTC date that anchors streaks and heatmaps."""
    return date(2025, 3, 15)


@pytest.fixture
def fixed_clock(today: date):
    """Provide a clock frozen at noon UTC on `today`."""
    frozen = datetime(today.year, today.month, today.day, 12, 0, tzinfo=timezone.utc)
    return lambda: frozen


@pytest.fixture
def analytics_settings() -> AnalyticsSettings:
    """Provide default analytics settings."""
    return AnalyticsSettings()
