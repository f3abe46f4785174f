"""
Unit Tests for Logging Module

Tests logger creation, stream context, processors and log_stage.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from src.core.config.constants import Stage
from src.core.logging.logger import (
    add_log_level_name,
    add_stream_id,
    add_timestamp,
    clear_stream_id,
    get_logger,
    get_stream_id,
    log_stage,
    redact_secrets,
    set_stream_id,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_stream_context():
    clear_stream_id()
    yield
    clear_stream_id()


@pytest.mark.unit
class TestLoggerCreation:
    def test_get_logger_has_logging_methods(self):
        logger = get_logger(__name__)
        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")

    def test_setup_logging_accepts_both_formats(self):
        setup_logging(log_level="DEBUG", log_format="console")
        setup_logging(log_level="INFO", log_format="json")
        get_logger("test").info("configured")


@pytest.mark.unit
class TestStreamContext:
    def test_set_and_get(self):
        set_stream_id("iss-position")
        assert get_stream_id() == "iss-position"

    def test_clear(self):
        set_stream_id("iss-position")
        clear_stream_id()
        assert get_stream_id() is None

    @pytest.mark.asyncio
    async def test_context_is_per_task(self):
        async def worker(stream_id):
            set_stream_id(stream_id)
            await asyncio.sleep(0)
            return get_stream_id()

        results = await asyncio.gather(worker("a"), worker("b"))
        assert results == ["a", "b"]
        assert get_stream_id() is None


@pytest.mark.unit
class TestProcessors:
    def test_add_stream_id_from_context(self):
        set_stream_id("apod")
        assert add_stream_id(None, "info", {"event": "x"})["stream_id"] == "apod"

    def test_add_stream_id_keeps_explicit_value(self):
        set_stream_id("apod")
        event = add_stream_id(None, "info", {"event": "x", "stream_id": "iss-position"})
        assert event["stream_id"] == "iss-position"

    def test_add_stream_id_without_context(self):
        assert "stream_id" not in add_stream_id(None, "info", {"event": "x"})

    def test_add_timestamp_is_utc_iso(self):
        event = add_timestamp(None, "info", {"event": "x"})
        assert event["timestamp"].endswith("Z")

    def test_level_name_uppercased(self):
        assert add_log_level_name(None, "info", {"level": "warning"})["level"] == "WARNING"

    def test_redacts_api_keys(self):
        event = redact_secrets(
            None,
            "info",
            {
                "event": "GET /positions/25544?apiKey=SECRET123",
                "url": "https://api.nasa.gov/planetary/apod?api_key=DEMO_KEY&date=today",
                "count": 3,
            },
        )

        assert "SECRET123" not in event["event"]
        assert "apiKey=[REDACTED]" in event["event"]
        assert event["url"] == "https://api.nasa.gov/planetary/apod?api_key=[REDACTED]&date=today"
        assert event["count"] == 3


@pytest.mark.unit
class TestLogStage:
    def test_uses_enum_value(self):
        logger = MagicMock()
        log_stage(logger, Stage.FETCH, "Fetched", stream_id="apod")

        logger.info.assert_called_once_with("Fetched", stage="3.0_UPSTREAM_FETCH", stream_id="apod")

    def test_accepts_plain_string_and_level(self):
        logger = MagicMock()
        log_stage(logger, "CUSTOM", "Careful", level="WARNING")

        logger.warning.assert_called_once_with("Careful", stage="CUSTOM")
