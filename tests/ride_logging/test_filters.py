"""Tests for logging filters."""

import logging

import pytest

from ridebook.ride_logging import CorrelationFilter, RedactionFilter, current_correlation_id


def make_record(msg: str, args: tuple = ()) -> logging.LogRecord:
    return logging.LogRecord(
        name="ridebook.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=args,
        exc_info=None,
    )


@pytest.mark.unit
class TestRedactionFilter:
    def test_masks_email_and_phone(self):
        record = make_record("Rider jane@example.com called 845-555-1234")
        RedactionFilter().filter(record)

        assert record.getMessage() == "Rider [EMAIL] called [PHONE]"

    def test_masks_values_passed_as_args(self):
        record = make_record("Profile phone %s", ("(845) 555-1234",))
        RedactionFilter().filter(record)

        assert record.getMessage() == "Profile phone [PHONE]"

    def test_masks_provider_api_key(self):
        key = "AIza" + "x" * 35
        record = make_record(f"Calling routes with key {key}")
        RedactionFilter().filter(record)

        assert key not in record.getMessage()
        assert "[API_KEY]" in record.getMessage()

    @pytest.mark.parametrize(
        "message",
        [
            "Fare 72.00 for generic trip",
            "Ride scheduled for 2026-03-10T09:00:00-04:00",
            "Round trip 158.00 + 158.00 = 316.00",
        ],
    )
    def test_leaves_fares_and_dates_alone(self, message):
        record = make_record(message)
        RedactionFilter().filter(record)
        assert record.getMessage() == message


@pytest.mark.unit
class TestCorrelationFilter:
    def test_defaults_to_dash_outside_request(self):
        record = make_record("hello")
        CorrelationFilter().filter(record)
        assert record.correlation_id == "-"

    def test_uses_current_correlation_id(self):
        token = current_correlation_id.set("req-123")
        try:
            record = make_record("hello")
            CorrelationFilter().filter(record)
        finally:
            current_correlation_id.reset(token)
        assert record.correlation_id == "req-123"

    def test_existing_value_is_kept(self):
        record = make_record("hello")
        record.correlation_id = "ride-1"
        CorrelationFilter().filter(record)
        assert record.correlation_id == "ride-1"
