"""Read paths over rides."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ridelink.exceptions import InvalidRoleError, NotFoundError, ValidationError
from ridelink.models import Driver, Ride, RideStatus, User
from ridelink.models.ride import DRIVER_ACTIVE_STATUSES, RIDER_ACTIVE_STATUSES
from ridelink.storage.repositories import DriverRepository, RideRepository, UserRepository

logger = logging.getLogger(__name__)

RIDER = "rider"
DRIVER = "driver"


@dataclass
class RideView:
    """A ride together with the driver and rider records it points at."""
    ride: Ride
    driver: Optional[Driver] = None
    rider: Optional[User] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.ride.to_dict()
        del data["version"]
        data["driver"] = self.driver.to_public_dict() if self.driver else None
        data["rider"] = self.rider.to_public_dict() if self.rider else None
        return data


class RideQueryService:
    """History, active ride, open rides and search."""

    def __init__(self, rides: RideRepository, drivers: DriverRepository, users: UserRepository):
        self.rides = rides
        self.drivers = drivers
        self.users = users

    def history(self, role: str, user_id: Any, page: Optional[int] = None,
                size: Optional[int] = None) -> List[RideView]:
        """
        Rides of a rider or driver, newest booking first.

        Rides without a booking time come last.

        Args:
            role: "rider" or "driver", any case
            user_id: Rider ID or driver ID depending on role
            page: Zero-based page number, requires size
            size: Page size

        Raises:
            InvalidRoleError: If role is neither rider nor driver
        """
        ordered = _newest_first(self._rides_for(role, user_id))

        if size is not None:
            if size <= 0 or (page is not None and page < 0):
                raise ValidationError("Page must be >= 0 and size > 0")
            start = (page or 0) * size
            ordered = ordered[start:start + size]

        return self._enrich(ordered)

    def active_ride(self, role: str, user_id: Any) -> Optional[RideView]:
        """The most recently booked ride still in progress for this rider or driver."""
        statuses = RIDER_ACTIVE_STATUSES if _normalize_role(role) == RIDER else DRIVER_ACTIVE_STATUSES
        active = [r for r in self._rides_for(role, user_id) if r.status in statuses]
        if not active:
            return None
        return self._enrich(_newest_first(active)[:1])[0]

    def available_rides(self) -> List[RideView]:
        """Pending rides, oldest first (first come, first served)."""
        pending = self.rides.find_by_status(RideStatus.PENDING)
        dated = sorted((r for r in pending if r.booked_at is not None), key=lambda r: r.booked_at)
        return self._enrich(dated + [r for r in pending if r.booked_at is None])

    def search(self, query: str) -> List[RideView]:
        """Rides whose pickup or dropoff location contains the query, ignoring case."""
        needle = (query or "").lower()
        found = [
            ride for ride in self.rides.find_all()
            if needle in ride.pickup_location.lower() or needle in ride.dropoff_location.lower()
        ]
        return self._enrich(found)

    def get_ride(self, ride_id: Any) -> RideView:
        ride = self.rides.find_by_id(ride_id)
        if ride is None:
            raise NotFoundError(f"Ride with ID {ride_id} not found")
        return self._enrich([ride])[0]

    def get_driver(self, driver_id: Any) -> Driver:
        driver = self.drivers.find_by_id(driver_id)
        if driver is None:
            raise NotFoundError("Driver not found")
        return driver

    # Admin passthroughs

    def all_rides(self) -> List[Ride]:
        return self.rides.find_all()

    def ride_by_id(self, ride_id: Any) -> Optional[Ride]:
        return self.rides.find_by_id(ride_id)

    def delete_ride(self, ride_id: Any) -> bool:
        deleted = self.rides.delete_by_id(ride_id)
        if deleted:
            logger.info(f"Ride {ride_id} deleted")
        return deleted

    def _rides_for(self, role: str, user_id: Any) -> List[Ride]:
        if _normalize_role(role) == RIDER:
            return self.rides.find_by_rider_id(user_id)
        return self.rides.find_by_driver_id(user_id)

    def _enrich(self, rides: Iterable[Ride]) -> List[RideView]:
        drivers: Dict[Any, Optional[Driver]] = {}
        riders: Dict[Any, Optional[User]] = {}
        views = []
        for ride in rides:
            if ride.driver_id is not None and ride.driver_id not in drivers:
                drivers[ride.driver_id] = self.drivers.find_by_id(ride.driver_id)
            if ride.rider_id is not None and ride.rider_id not in riders:
                riders[ride.rider_id] = self.users.find_by_id(ride.rider_id)
            views.append(RideView(
                ride=ride,
                driver=drivers.get(ride.driver_id),
                rider=riders.get(ride.rider_id),
            ))
        return views


def _newest_first(rides: List[Ride]) -> List[Ride]:
    """Sort by booking time descending, rides without one last."""
    dated = sorted((r for r in rides if r.booked_at is not None),
                   key=lambda r: r.booked_at, reverse=True)
    return dated + [r for r in rides if r.booked_at is None]


def _normalize_role(role: str) -> str:
    normalized = (role or "").strip().lower()
    if normalized not in (RIDER, DRIVER):
        raise InvalidRoleError(f"Invalid role: {role}")
    return normalized
