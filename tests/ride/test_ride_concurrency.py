"""Tests for concurrent ride transitions."""

import threading
from unittest.mock import patch

import pytest

from ridelink.exceptions import ConflictError, InvalidTransitionError
from ridelink.models import RideStatus
from ridelink.storage.base import StaleRecordError


def run_together(count, target):
    """Start count threads at the same moment and collect their outcomes."""
    barrier = threading.Barrier(count)
    results = [None] * count

    def worker(i):
        barrier.wait()
        try:
            results[i] = target(i)
        except Exception as e:
            results[i] = e

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results


class TestConcurrentTransitions:
    """Test class for races between ride transitions."""

    def test_exactly_one_driver_wins(self, services, book_ride):
        ride = book_ride()
        drivers = [
            services.auth.register(f"d{i}@example.com", "pw", f"Driver {i}", f"555-9{i}", "driver")
            for i in range(8)
        ]

        results = run_together(8, lambda i: services.rides.accept(ride.id, drivers[i]["driver"]["id"]))

        winners = [r for r in results if not isinstance(r, Exception)]
        losers = [r for r in results if isinstance(r, Exception)]
        assert len(winners) == 1
        assert all(isinstance(e, ConflictError) for e in losers)

        stored = services.rides.rides.find_by_id(ride.id)
        assert stored.status == RideStatus.ACCEPTED
        assert stored.driver_id == winners[0].driver_id

    def test_cancel_and_accept_race(self, services, book_ride, driver):
        ride = book_ride()
        actions = [
            lambda: services.rides.accept(ride.id, driver["driver"]["id"]),
            lambda: services.rides.cancel(ride.id),
        ]

        run_together(2, lambda i: actions[i]())

        stored = services.rides.rides.find_by_id(ride.id)
        assert stored.status in (RideStatus.ACCEPTED, RideStatus.CANCELLED)
        assert stored.status == RideStatus.CANCELLED or stored.driver_id == driver["driver"]["id"]

    def test_losing_write_rechecks_state(self, services, book_ride, driver):
        """A write that lost a race is retried against the fresh record."""
        ride = book_ride()
        original_save = services.rides.rides.save
        calls = []

        def save_after_competitor(entity):
            if not calls:
                calls.append(entity)
                services.rides.cancel(ride.id)
                raise StaleRecordError("lost")
            return original_save(entity)

        with patch.object(services.rides.rides, "save", side_effect=save_after_competitor):
            with pytest.raises(InvalidTransitionError):
                services.rides.accept(ride.id, driver["driver"]["id"])

        assert services.rides.rides.find_by_id(ride.id).status == RideStatus.CANCELLED

    def test_gives_up_after_retries(self, services, book_ride, driver):
        ride = book_ride()

        with patch.object(services.rides.rides, "save", side_effect=StaleRecordError("busy")):
            with pytest.raises(ConflictError):
                services.rides.accept(ride.id, driver["driver"]["id"])
