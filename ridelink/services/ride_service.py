"""Ride lifecycle for the RideLink application."""

import logging
from dataclasses import replace
from typing import Any, Callable, Optional

from ridelink.clock import Clock
from ridelink.exceptions import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from ridelink.models import Driver, Ride, RideStatus
from ridelink.models.ride import DRIVER_ACTIVE_STATUSES
from ridelink.services.driver_service import DriverAvailabilityRegistry
from ridelink.storage.base import StaleRecordError
from ridelink.storage.repositories import RideRepository

logger = logging.getLogger(__name__)

REQUIRED_BOOKING_FIELDS = (
    ("rider_id", "Rider ID is required"),
    ("estimated_fare", "Estimated fare is required"),
    ("distance", "Distance is required"),
    ("duration", "Duration is required"),
)


class RideLifecycleManager:
    """
    Owns the ride state machine.

    PENDING -> ACCEPTED -> STARTED -> COMPLETED, and CANCELLED from any of
    the first three. Every transition re-reads the ride, checks where it is,
    and writes back only if nobody else wrote in between.
    """

    def __init__(self, rides: RideRepository, registry: DriverAvailabilityRegistry,
                 clock: Optional[Clock] = None, max_retries: int = 5):
        self.rides = rides
        self.registry = registry
        self.clock = clock or Clock()
        self.max_retries = max_retries

    def book(self, ride: Ride) -> Ride:
        """
        Book a new ride.

        Args:
            ride: Ride details. Status and booking time default to PENDING and now.

        Returns:
            Ride: The stored ride

        Raises:
            ValidationError: If a required field is missing
        """
        for field_name, message in REQUIRED_BOOKING_FIELDS:
            if getattr(ride, field_name) is None:
                raise ValidationError(message)

        if ride.status is not None:
            try:
                status = RideStatus(ride.status)
            except ValueError:
                raise ValidationError(f"Unknown ride status: {ride.status}")
            if status != RideStatus.PENDING:
                raise ValidationError(f"A new ride cannot start as {status.value}")
        if ride.driver_id is not None:
            raise ValidationError("A driver is assigned by accepting the ride, not at booking")

        new_ride = replace(
            ride,
            id=None,
            version=None,
            status=RideStatus.PENDING,
            booked_at=ride.booked_at or self.clock.now(),
        )
        saved = self.rides.save(new_ride)
        logger.info(f"Ride {saved.id} booked by rider {saved.rider_id}")
        return saved

    def accept(self, ride_id: Any, driver_id: Any) -> Ride:
        """
        Assign a driver to a pending ride.

        Exactly one of several concurrent callers wins; the others see the
        ride already accepted and get a ConflictError.

        Raises:
            NotFoundError: If the ride does not exist
            ConflictError: If the ride is no longer pending
        """
        if driver_id is None:
            raise ValidationError("Driver ID is required")

        def assign(ride: Ride) -> bool:
            self._require(ride, RideStatus.ACCEPTED)
            ride.driver_id = driver_id
            ride.status = RideStatus.ACCEPTED
            return True

        ride = self._transition(ride_id, assign)
        self.registry.engage(driver_id)
        return ride

    def start(self, ride_id: Any) -> Ride:
        """Start an accepted ride."""
        def begin(ride: Ride) -> bool:
            self._require(ride, RideStatus.STARTED)
            ride.status = RideStatus.STARTED
            ride.started_at = self.clock.now()
            return True

        return self._transition(ride_id, begin)

    def complete(self, ride_id: Any) -> Ride:
        """Complete a started ride and free its driver."""
        def finish(ride: Ride) -> bool:
            self._require(ride, RideStatus.COMPLETED)
            ride.status = RideStatus.COMPLETED
            ride.completed_at = self.clock.now()
            return True

        ride = self._transition(ride_id, finish)
        self._release_driver(ride)
        return ride

    def cancel(self, ride_id: Any) -> Ride:
        """
        Cancel a ride.

        Cancelling an already cancelled ride returns it unchanged.

        Raises:
            NotFoundError: If the ride does not exist
            InvalidTransitionError: If the ride is already completed
        """
        changed = False

        def drop(ride: Ride) -> bool:
            nonlocal changed
            changed = ride.status != RideStatus.CANCELLED
            if not changed:
                return False
            self._require(ride, RideStatus.CANCELLED)
            ride.status = RideStatus.CANCELLED
            return True

        ride = self._transition(ride_id, drop)
        if changed:
            self._release_driver(ride)
        return ride

    def rate(self, ride_id: Any, rating: int, comment: Optional[str] = None) -> Ride:
        """
        Attach a rating and comment to a ride.

        Raises:
            ValidationError: If the rating is not an integer from 1 to 5
            NotFoundError: If the ride does not exist
        """
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5 stars.")

        def attach(ride: Ride) -> bool:
            ride.rating = rating
            ride.comment = comment
            return True

        return self._transition(ride_id, attach)

    def set_driver_availability(self, driver_id: Any, available: bool) -> Driver:
        """Open or close a driver for assignment."""
        return self.registry.set_availability(driver_id, available)

    def _release_driver(self, ride: Ride) -> None:
        """Put the driver of a finished ride back on the market unless they still drive another."""
        if ride.driver_id is None:
            return
        busy = [
            other for other in self.rides.find_by_driver_id(ride.driver_id)
            if other.id != ride.id and other.status in DRIVER_ACTIVE_STATUSES
        ]
        if busy:
            logger.info(f"Driver {ride.driver_id} still has {len(busy)} active ride(s), staying engaged")
            return
        self.registry.release(ride.driver_id)

    def _load(self, ride_id: Any) -> Ride:
        ride = self.rides.find_by_id(ride_id)
        if ride is None:
            raise NotFoundError(f"Ride with ID {ride_id} not found")
        return ride

    @staticmethod
    def _require(ride: Ride, target: RideStatus) -> None:
        if not ride.can_move_to(target):
            current = ride.status.value if ride.status else "UNKNOWN"
            raise InvalidTransitionError(
                f"Cannot move ride {ride.id} from {current} to {target.value}")

    def _transition(self, ride_id: Any, mutate: Callable[[Ride], bool]) -> Ride:
        """Read, mutate and conditionally write a ride, retrying lost races."""
        for _ in range(self.max_retries):
            ride = self._load(ride_id)
            previous = ride.status
            if not mutate(ride):
                return ride
            try:
                saved = self.rides.save(ride)
            except StaleRecordError:
                logger.info(f"Ride {ride_id} changed concurrently, re-checking")
                continue
            if saved.status != previous:
                logger.info(f"Ride {ride_id}: {previous.value if previous else None} -> {saved.status.value}")
            return saved

        raise ConflictError(f"Ride {ride_id} is being updated by someone else, try again")
