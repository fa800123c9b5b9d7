"""Tests for the ride logging context."""

import logging

import pytest

from fare_engine.fare_logging import RideContextFilter, current_ride_fields, log_ride_context


@pytest.mark.unit
class TestRideLogContext:
    """Tests for log_ride_context and RideContextFilter."""

    @pytest.fixture
    def logger(self):
        logger = logging.getLogger("test.fare.context")
        logger.setLevel(logging.DEBUG)
        return logger

    @pytest.fixture
    def captured_records(self, logger):
        """Capture log records for inspection."""
        records: list[logging.LogRecord] = []

        class RecordCapture(logging.Handler):
            def emit(self, record: logging.LogRecord) -> None:
                records.append(record)

        handler = RecordCapture()
        handler.addFilter(RideContextFilter())
        logger.addHandler(handler)
        yield records
        logger.removeHandler(handler)

    def test_tags_records_with_ride(self, logger, captured_records):
        with log_ride_context("R101", ride_class="premium"):
            logger.info("pricing")

        record = captured_records[0]
        assert record.ride_id == "R101"
        assert record.ride_class == "premium"

    def test_correlation_id_defaults_to_ride_id(self, logger, captured_records):
        with log_ride_context("R101"):
            logger.info("pricing")

        assert captured_records[0].correlation_id == "R101"

    def test_explicit_correlation_id(self, logger, captured_records):
        with log_ride_context("R101", correlation_id="batch-7"):
            logger.info("pricing")

        assert captured_records[0].correlation_id == "batch-7"

    def test_placeholders_outside_a_ride(self, logger, captured_records):
        logger.info("startup")

        record = captured_records[0]
        assert record.ride_id == "-"
        assert record.correlation_id == "-"
        assert not hasattr(record, "ride_class")

    def test_context_cleared_on_exit(self, logger, captured_records):
        with log_ride_context("R100", ride_class="standard"):
            pass
        logger.info("after")

        assert captured_records[0].ride_id == "-"
        assert current_ride_fields() == {}

    def test_nested_rides_restore_outer(self, logger, captured_records):
        with log_ride_context("outer", correlation_id="batch-1"):
            with log_ride_context("inner"):
                logger.info("inner")
            logger.info("outer")

        assert [r.ride_id for r in captured_records] == ["inner", "outer"]
        assert [r.correlation_id for r in captured_records] == ["inner", "batch-1"]

    def test_explicit_extra_wins_over_context(self, logger, captured_records):
        with log_ride_context("R100"):
            logger.info("explicit", extra={"ride_id": "R999"})

        assert captured_records[0].ride_id == "R999"

    def test_context_cleared_after_exception(self):
        with pytest.raises(RuntimeError):
            with log_ride_context("R100"):
                raise RuntimeError("boom")

        assert current_ride_fields() == {}
