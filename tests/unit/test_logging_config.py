import json
import logging
import sys

import pytest

from querydesk.common.logger import (
    JsonFormatter,
    TraceContextFilter,
    configure_logging,
    get_logger,
    trace_context,
)
from querydesk.common.settings import settings


@pytest.fixture
def restore_logging():
    yield
    configure_logging(level=settings.log_level, json_format=settings.log_json)


class TestStructuredLogging:

    def test_json_formatter_includes_trace_and_extras(self, restore_logging):
        configure_logging(json_format=True)
        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, JsonFormatter)

        record = logging.LogRecord("dispatcher", logging.INFO, "path", 1, "Dispatching query", {}, None)
        record.target = "warehouse"
        with trace_context("trace-123"):
            handler.filter(record)
            data = json.loads(handler.formatter.format(record))

        assert data["message"] == "Dispatching query"
        assert data["trace_id"] == "trace-123"
        assert data["level"] == "INFO"
        assert data["target"] == "warehouse"

    def test_json_formatter_renders_exceptions(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            record = get_logger("t").makeRecord("t", logging.ERROR, "path", 1, "failed", (), sys.exc_info())
        data = json.loads(JsonFormatter().format(record))
        assert "ValueError: bad value" in data["exc_info"]

    def test_text_format(self, restore_logging):
        configure_logging(level="debug", json_format=False)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert "%(trace_id)s" in root.handlers[0].formatter._fmt
        assert logging.getLogger("snowflake.connector").level == logging.WARNING

    def test_trace_context_generates_and_resets(self):
        trace_filter = TraceContextFilter()
        inside = logging.LogRecord("t", logging.INFO, "path", 1, "in", {}, None)
        outside = logging.LogRecord("t", logging.INFO, "path", 1, "out", {}, None)

        with trace_context() as trace_id:
            trace_filter.filter(inside)
        trace_filter.filter(outside)

        assert trace_id
        assert inside.trace_id == trace_id
        assert outside.trace_id is None
