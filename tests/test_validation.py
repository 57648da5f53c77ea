"""Unit tests for booking submission preconditions."""

from datetime import datetime, time

import pytest

from rydeit.domain.enums import HandoverMethod
from rydeit.domain.validation import (
    BookingValidationError,
    parse_hhmm,
    validate_submission,
    within_operating_window,
)

OPEN, CLOSE = time(6, 0), time(22, 0)


def submit(**overrides):
    fields = dict(
        pickup_at=datetime(2024, 1, 1, 10, 0),
        drop_at=datetime(2024, 1, 1, 18, 0),
        pickup_method=HandoverMethod.GARAGE,
        drop_method=HandoverMethod.GARAGE,
        address=None,
        accepted_terms=True,
        operating_open=OPEN,
        operating_close=CLOSE,
    )
    fields.update(overrides)
    validate_submission(**fields)


class TestOperatingWindow:
    def test_parse_hhmm(self):
        assert parse_hhmm("06:00") == time(6, 0)
        assert parse_hhmm("22:30") == time(22, 30)

    @pytest.mark.parametrize(
        "moment, expected",
        [
            (time(5, 59), False),
            (time(6, 0), True),
            (time(22, 0), True),
            (time(22, 0, 30), True),
            (time(22, 1), False),
        ],
    )
    def test_bounds_are_inclusive(self, moment, expected):
        assert within_operating_window(moment, OPEN, CLOSE) is expected


class TestValidateSubmission:
    def test_valid_form_passes(self):
        submit()

    def test_terms_must_be_accepted(self):
        with pytest.raises(BookingValidationError, match="terms"):
            submit(accepted_terms=False)

    def test_pickup_outside_hours(self):
        with pytest.raises(BookingValidationError, match="06:00 and 22:00"):
            submit(pickup_at=datetime(2024, 1, 1, 5, 30))

    def test_drop_outside_hours(self):
        with pytest.raises(BookingValidationError, match="operate"):
            submit(drop_at=datetime(2024, 1, 1, 23, 0))

    def test_drop_before_pickup(self):
        with pytest.raises(BookingValidationError, match="before pickup"):
            submit(drop_at=datetime(2024, 1, 1, 9, 0))

    def test_drop_equal_to_pickup(self):
        with pytest.raises(BookingValidationError):
            submit(drop_at=datetime(2024, 1, 1, 10, 0))

    @pytest.mark.parametrize("address", [None, "", "   "])
    def test_home_handover_needs_address(self, address):
        with pytest.raises(BookingValidationError, match="address"):
            submit(drop_method=HandoverMethod.HOME, address=address)

    def test_home_handover_with_address(self):
        submit(pickup_method=HandoverMethod.HOME, address="12 Park Street")

    def test_terms_checked_first(self):
        with pytest.raises(BookingValidationError, match="terms"):
            submit(accepted_terms=False, pickup_at=datetime(2024, 1, 1, 4, 0))
