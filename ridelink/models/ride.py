"""Ride entity for the RideLink application."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ridelink.models.fields import from_iso, to_iso


class RideStatus(Enum):
    """Possible statuses for a ride."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Statuses a ride may move to from each status
TRANSITIONS = {
    RideStatus.PENDING: {RideStatus.ACCEPTED, RideStatus.CANCELLED},
    RideStatus.ACCEPTED: {RideStatus.STARTED, RideStatus.CANCELLED},
    RideStatus.STARTED: {RideStatus.COMPLETED, RideStatus.CANCELLED},
    RideStatus.COMPLETED: set(),
    RideStatus.CANCELLED: set(),
}

RIDER_ACTIVE_STATUSES = (RideStatus.PENDING, RideStatus.ACCEPTED, RideStatus.STARTED)
DRIVER_ACTIVE_STATUSES = (RideStatus.ACCEPTED, RideStatus.STARTED)


@dataclass
class Ride:
    """
    Represents a ride in the ride-hailing system.

    Attributes:
        rider_id: ID of the user who booked the ride
        pickup_location: Free-text pickup location
        dropoff_location: Free-text dropoff location
        estimated_fare: Estimated fare for the ride
        distance: Distance of the ride in kilometers
        duration: Duration of the ride in minutes
        id: Unique identifier, assigned on first save
        driver_id: ID of the driver, set once when the ride is accepted
        status: Current status of the ride
        booked_at: When the ride was booked
        started_at: When the ride started
        completed_at: When the ride ended
        rating: Rating given by the rider (1-5)
        comment: Optional comment from the rider
        version: Optimistic concurrency counter managed by storage
    """
    rider_id: Optional[int]
    pickup_location: str = ""
    dropoff_location: str = ""
    estimated_fare: Optional[float] = None
    distance: Optional[float] = None
    duration: Optional[int] = None
    id: Optional[int] = None
    driver_id: Optional[int] = None
    status: Optional[RideStatus] = None
    booked_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    rating: Optional[int] = None
    comment: Optional[str] = None
    version: Optional[int] = None

    def can_move_to(self, target: RideStatus) -> bool:
        return target in TRANSITIONS.get(self.status, set())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "rider_id": self.rider_id,
            "driver_id": self.driver_id,
            "status": self.status.value if self.status else None,
            "pickup_location": self.pickup_location,
            "dropoff_location": self.dropoff_location,
            "estimated_fare": self.estimated_fare,
            "distance": self.distance,
            "duration": self.duration,
            "booked_at": to_iso(self.booked_at),
            "started_at": to_iso(self.started_at),
            "completed_at": to_iso(self.completed_at),
            "rating": self.rating,
            "comment": self.comment,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ride":
        status = data.get("status")
        return cls(
            id=data.get("id"),
            rider_id=data.get("rider_id"),
            driver_id=data.get("driver_id"),
            status=RideStatus(status) if status else None,
            pickup_location=data.get("pickup_location") or "",
            dropoff_location=data.get("dropoff_location") or "",
            estimated_fare=data.get("estimated_fare"),
            distance=data.get("distance"),
            duration=data.get("duration"),
            booked_at=from_iso(data.get("booked_at")),
            started_at=from_iso(data.get("started_at")),
            completed_at=from_iso(data.get("completed_at")),
            rating=data.get("rating"),
            comment=data.get("comment"),
            version=data.get("version"),
        )
