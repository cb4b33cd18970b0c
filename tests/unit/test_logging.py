# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for structured logging."""

import json
import logging

import pytest
import structlog

from src.core.config.settings import Settings
from src.utils.logging import (
    SERVICE_NAME,
    bind_context,
    clear_context,
    get_logger,
    setup_logging,
)


@pytest.fixture
def restore_structlog():
    """Restore structlog defaults after a test reconfigures it."""
    yield
    clear_context()
    structlog.reset_defaults()
    logging.getLogger("src").setLevel(logging.NOTSET)


class TestGetLogger:
    """Tests for get_logger."""

    def test_module_logger_can_log_before_setup(self, restore_structlog) -> None:
        """Test that a module-level logger works with default configuration."""
        logger = get_logger(__name__)

        logger.info("store_query_failed", operation="answers")
        logger.warning("enrichment_skipped", enrichment="topic_names")

    def test_module_logger_can_bind(self, restore_structlog) -> None:
        """Test that bound loggers keep working."""
        get_logger(__name__).bind(user_id="user-1").debug("recent_activity_assembled", entries=3)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_events_carry_logger_and_service(self, restore_structlog, caplog) -> None:
        """Test that JSON events name their module and service."""
        setup_logging(Settings(environment="staging", debug=False, log_level="INFO"))
        caplog.set_level(logging.INFO)

        get_logger("src.domains.analytics.store").error(
            "store_query_failed", operation="answers"
        )

        record = caplog.records[-1]
        payload = json.loads(record.getMessage())
        assert record.name == "src.domains.analytics.store"
        assert payload["event"] == "store_query_failed"
        assert payload["operation"] == "answers"
        assert payload["logger"] == "src.domains.analytics.store"
        assert payload["service"] == SERVICE_NAME
        assert payload["environment"] == "staging"
        assert payload["level"] == "error"

    def test_bound_context_is_merged(self, restore_structlog, caplog) -> None:
        """Test that request context reaches every event."""
        setup_logging(Settings(environment="staging", debug=False, log_level="INFO"))
        caplog.set_level(logging.INFO)

        bind_context(request_id="req-1", user_id="user-1")
        get_logger("src.domains.analytics.service").info("dashboard_bundle_computed")

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["request_id"] == "req-1"
        assert payload["user_id"] == "user-1"

    def test_level_filtering(self, restore_structlog, caplog) -> None:
        """Test that events below the configured level are dropped."""
        setup_logging(Settings(environment="staging", debug=False, log_level="WARNING"))
        caplog.set_level(logging.DEBUG)

        get_logger("src.domains.analytics.service").info("dashboard_stats_computed")

        assert not [r for r in caplog.records if "dashboard_stats_computed" in r.getMessage()]
