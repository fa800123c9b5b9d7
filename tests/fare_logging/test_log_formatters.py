"""Tests for JSON and development log formatters."""

import json
import logging
import sys

import pytest

from fare_engine.fare_logging import DevFormatter, JSONFormatter, RideContextFilter, log_ride_context


def make_record(message: str = "Fare finalized", **fields) -> logging.LogRecord:
    record = logging.LogRecord(
        name="fare_engine.engine",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in fields.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestJSONFormatter:
    def test_basic_fields(self):
        output = json.loads(JSONFormatter("production").format(make_record()))

        assert output["level"] == "INFO"
        assert output["logger"] == "fare_engine.engine"
        assert output["message"] == "Fare finalized"
        assert output["env"] == "production"
        assert "timestamp" in output

    def test_includes_ride_fields(self):
        record = make_record(
            ride_id="R100",
            ride_class="standard",
            correlation_id="R100",
            error_kind="InvalidRequest",
        )
        output = json.loads(JSONFormatter().format(record))

        assert output["ride_id"] == "R100"
        assert output["ride_class"] == "standard"
        assert output["correlation_id"] == "R100"
        assert output["error_kind"] == "InvalidRequest"

    def test_omits_placeholders_outside_a_ride(self):
        record = make_record()
        RideContextFilter().filter(record)

        output = json.loads(JSONFormatter().format(record))

        assert "ride_id" not in output
        assert "correlation_id" not in output

    def test_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        output = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in output["exception"]


@pytest.mark.unit
class TestDevFormatter:
    def test_shows_active_ride(self):
        record = make_record()
        with log_ride_context("R100"):
            RideContextFilter().filter(record)

        output = DevFormatter().format(record)

        assert "[    INFO]" in output
        assert "[ride=R100]" in output
        assert "fare_engine.engine: Fare finalized" in output

    def test_placeholder_outside_a_ride(self):
        record = make_record()
        RideContextFilter().filter(record)

        assert "[ride=-]" in DevFormatter().format(record)
