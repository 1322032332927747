"""Fare estimation for ride bookings."""

from enum import Enum

from ridelink.exceptions import ValidationError

BASE_FARE = 1000
PER_KM = 500
PER_MINUTE = 100


class RideType(Enum):
    """Ride classes and their fare multipliers."""
    BASIC = 1.0
    POOL = 0.75
    PREMIUM = 1.5

    @classmethod
    def parse(cls, value) -> "RideType":
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValidationError(f"Unknown ride type: {value}")


def estimate_fare(distance_km: float, duration_min: float, ride_type="basic") -> int:
    """
    Estimate the fare of a ride.

    Args:
        distance_km: Trip distance in kilometers
        duration_min: Trip duration in minutes
        ride_type: basic, pool or premium

    Returns:
        int: Rounded fare
    """
    if distance_km is None or duration_min is None:
        raise ValidationError("Distance and duration are required")
    if distance_km < 0 or duration_min < 0:
        raise ValidationError("Distance and duration must not be negative")

    multiplier = RideType.parse(ride_type).value
    fare = BASE_FARE + distance_km * PER_KM + duration_min * PER_MINUTE
    return int(round(fare * multiplier))
