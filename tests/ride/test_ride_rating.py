"""Tests for ride rating."""

import pytest

from ridelink.exceptions import NotFoundError, ValidationError


class TestRideRating:
    """Test class for rating rides."""

    def test_rate_ride(self, services, book_ride):
        ride = book_ride()

        rated = services.rides.rate(ride.id, 5, "Smooth trip")

        assert rated.rating == 5
        assert rated.comment == "Smooth trip"

    def test_rating_can_be_changed(self, services, book_ride):
        ride = book_ride()
        services.rides.rate(ride.id, 2)

        rated = services.rides.rate(ride.id, 4, None)

        assert rated.rating == 4
        assert rated.comment is None

    def test_rating_does_not_change_status(self, services, book_ride):
        ride = book_ride()

        assert services.rides.rate(ride.id, 3).status == ride.status

    @pytest.mark.parametrize("rating", [0, 6, -1, True, 4.5, "5", None])
    def test_invalid_rating(self, services, book_ride, rating):
        ride = book_ride()

        with pytest.raises(ValidationError) as excinfo:
            services.rides.rate(ride.id, rating)

        assert "Rating must be between 1 and 5 stars." in str(excinfo.value)
        assert services.rides.rides.find_by_id(ride.id).rating is None

    def test_rate_unknown_ride(self, services):
        with pytest.raises(NotFoundError):
            services.rides.rate(999, 5)
