"""Tests for ride history, active ride, open rides and search."""

from datetime import datetime, timedelta

import pytest

from ridelink.exceptions import InvalidRoleError, NotFoundError, ValidationError
from ridelink.models import Ride, RideStatus

T0 = datetime(2024, 1, 1, 8, 0)


@pytest.fixture
def undated_ride(services, rider):
    """A ride stored without a booking time, as older records may be."""
    return services.rides.rides.save(Ride(
        rider_id=rider["user"]["id"],
        pickup_location="Old Airport",
        dropoff_location="Merkato",
        estimated_fare=3000,
        distance=3,
        duration=8,
        status=RideStatus.COMPLETED,
    ))


class TestHistory:
    """Test class for ride history."""

    def test_rider_history_newest_first(self, services, book_ride, rider):
        oldest = book_ride(booked_at=T0)
        newest = book_ride(booked_at=T0 + timedelta(hours=2))
        middle = book_ride(booked_at=T0 + timedelta(hours=1))

        views = services.queries.history("rider", rider["user"]["id"])

        assert [v.ride.id for v in views] == [newest.id, middle.id, oldest.id]

    def test_undated_rides_come_last(self, services, book_ride, rider, undated_ride):
        dated = book_ride(booked_at=T0)

        views = services.queries.history("RIDER", rider["user"]["id"])

        assert [v.ride.id for v in views] == [dated.id, undated_ride.id]

    def test_driver_history(self, services, book_ride, driver):
        driver_id = driver["driver"]["id"]
        mine = book_ride()
        book_ride()
        services.rides.accept(mine.id, driver_id)

        views = services.queries.history("driver", driver_id)

        assert [v.ride.id for v in views] == [mine.id]
        assert views[0].driver.name == "Dan Driver"
        assert views[0].rider.name == "Rita Rider"

    def test_history_pages(self, services, book_ride, rider):
        rides = [book_ride(booked_at=T0 + timedelta(minutes=i)) for i in range(5)]

        page = services.queries.history("rider", rider["user"]["id"], page=1, size=2)

        assert [v.ride.id for v in page] == [rides[2].id, rides[1].id]

    def test_history_bad_page(self, services, rider):
        with pytest.raises(ValidationError):
            services.queries.history("rider", rider["user"]["id"], page=-1, size=2)
        with pytest.raises(ValidationError):
            services.queries.history("rider", rider["user"]["id"], size=0)

    def test_invalid_role(self, services, rider):
        with pytest.raises(InvalidRoleError):
            services.queries.history("admin", rider["user"]["id"])

    def test_history_empty(self, services):
        assert services.queries.history("rider", 999) == []

    def test_view_hides_version_and_password(self, services, book_ride, rider):
        book_ride()

        data = services.queries.history("rider", rider["user"]["id"])[0].to_dict()

        assert "version" not in data
        assert data["driver"] is None
        assert "password" not in data["rider"]


class TestActiveRide:
    """Test class for active ride lookup."""

    def test_rider_active_includes_pending(self, services, book_ride, rider):
        ride = book_ride()

        assert services.queries.active_ride("rider", rider["user"]["id"]).ride.id == ride.id

    def test_driver_active_excludes_pending(self, services, book_ride, driver):
        driver_id = driver["driver"]["id"]
        ride = book_ride()

        assert services.queries.active_ride("driver", driver_id) is None

        services.rides.accept(ride.id, driver_id)
        assert services.queries.active_ride("driver", driver_id).ride.id == ride.id

    def test_no_active_after_completion(self, services, book_ride, rider, driver):
        ride = book_ride()
        services.rides.accept(ride.id, driver["driver"]["id"])
        services.rides.start(ride.id)
        services.rides.complete(ride.id)

        assert services.queries.active_ride("rider", rider["user"]["id"]) is None
        assert services.queries.active_ride("driver", driver["driver"]["id"]) is None

    def test_most_recent_active_wins(self, services, book_ride, rider):
        book_ride(booked_at=T0)
        latest = book_ride(booked_at=T0 + timedelta(hours=1))

        assert services.queries.active_ride("rider", rider["user"]["id"]).ride.id == latest.id


class TestAvailableRides:
    """Test class for the open ride list."""

    def test_only_pending_oldest_first(self, services, book_ride, driver):
        second = book_ride(booked_at=T0 + timedelta(minutes=5))
        first = book_ride(booked_at=T0)
        taken = book_ride(booked_at=T0 - timedelta(minutes=5))
        cancelled = book_ride(booked_at=T0 - timedelta(minutes=10))
        services.rides.accept(taken.id, driver["driver"]["id"])
        services.rides.cancel(cancelled.id)

        views = services.queries.available_rides()

        assert [v.ride.id for v in views] == [first.id, second.id]
        assert all(v.ride.status == RideStatus.PENDING for v in views)


class TestSearch:
    """Test class for location search."""

    def test_search_matches_pickup_or_dropoff(self, services, book_ride):
        a = book_ride(pickup="Bole Airport", dropoff="Piassa")
        b = book_ride(pickup="Kazanchis", dropoff="bole medhanialem")
        book_ride(pickup="Megenagna", dropoff="Sarbet")

        found = {v.ride.id for v in services.queries.search("BOLE")}

        assert found == {a.id, b.id}

    def test_search_no_match(self, services, book_ride):
        book_ride()

        assert services.queries.search("Gondar") == []


class TestLookups:
    """Test class for single-record lookups and admin passthroughs."""

    def test_get_ride(self, services, book_ride):
        ride = book_ride()

        assert services.queries.get_ride(ride.id).ride.id == ride.id

    def test_get_missing_ride(self, services):
        with pytest.raises(NotFoundError):
            services.queries.get_ride(404)

    def test_get_driver(self, services, driver):
        assert services.queries.get_driver(driver["driver"]["id"]).name == "Dan Driver"

    def test_get_missing_driver(self, services):
        with pytest.raises(NotFoundError) as excinfo:
            services.queries.get_driver(404)

        assert "Driver not found" in str(excinfo.value)

    def test_admin_passthroughs(self, services, book_ride):
        ride = book_ride()

        assert [r.id for r in services.queries.all_rides()] == [ride.id]
        assert services.queries.ride_by_id(ride.id).id == ride.id
        assert services.queries.delete_ride(ride.id) is True
        assert services.queries.ride_by_id(ride.id) is None
        assert services.queries.delete_ride(ride.id) is False
