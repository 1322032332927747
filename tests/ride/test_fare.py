"""Tests for fare estimation."""

import pytest

from ridelink.exceptions import ValidationError
from ridelink.services.fare import RideType, estimate_fare


class TestFareEstimate:
    """Test class for the fare formula."""

    def test_basic_fare(self):
        # 1000 base + 4 km * 500 + 10 min * 100
        assert estimate_fare(4, 10) == 4000

    @pytest.mark.parametrize("ride_type,expected", [
        ("basic", 4000),
        ("pool", 3000),
        ("premium", 6000),
        (RideType.PREMIUM, 6000),
        ("PoOl", 3000),
    ])
    def test_ride_types(self, ride_type, expected):
        assert estimate_fare(4, 10, ride_type) == expected

    def test_zero_trip_costs_base_fare(self):
        assert estimate_fare(0, 0) == 1000

    def test_rounds_to_whole_units(self):
        assert estimate_fare(1.25, 3, "pool") == int(round((1000 + 625 + 300) * 0.75))

    @pytest.mark.parametrize("distance,duration", [(None, 1), (1, None), (-1, 1), (1, -1)])
    def test_invalid_inputs(self, distance, duration):
        with pytest.raises(ValidationError):
            estimate_fare(distance, duration)

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            estimate_fare(1, 1, "helicopter")
