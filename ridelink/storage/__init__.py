"""Storage backends and repositories."""
from ridelink.storage.base import PersistenceGateway, StaleRecordError
from ridelink.storage.memory import InMemoryGateway
from ridelink.storage.json_server import JsonServerGateway
from ridelink.storage.repositories import (
    DriverRepository,
    OtpTokenRepository,
    PasswordResetTokenRepository,
    RideRepository,
    SessionRepository,
    UserRepository,
)


__all__ = [
    'PersistenceGateway',
    'StaleRecordError',
    'InMemoryGateway',
    'JsonServerGateway',
    'UserRepository',
    'DriverRepository',
    'RideRepository',
    'OtpTokenRepository',
    'PasswordResetTokenRepository',
    'SessionRepository',
]
