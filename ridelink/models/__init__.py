"""Entity models for the RideLink application."""
from ridelink.models.user import User, Role
from ridelink.models.driver import Driver
from ridelink.models.ride import Ride, RideStatus
from ridelink.models.tokens import OtpToken, PasswordResetToken, Session


__all__ = [
    'User',
    'Role',
    'Driver',
    'Ride',
    'RideStatus',
    'OtpToken',
    'PasswordResetToken',
    'Session',
]
