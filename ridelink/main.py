"""Wiring of the RideLink services."""

from dataclasses import dataclass
from typing import Optional

from ridelink import config
from ridelink.clock import Clock
from ridelink.services.auth_service import AuthSessionManager
from ridelink.services.credentials import BcryptHasher
from ridelink.services.driver_service import DriverAvailabilityRegistry
from ridelink.services.notifier import Notifier, build_notifier
from ridelink.services.otp_service import OtpIssuer
from ridelink.services.ride_query_service import RideQueryService
from ridelink.services.ride_service import RideLifecycleManager
from ridelink.services.session_store import GatewaySessionStore, InMemorySessionStore, SessionStore
from ridelink.storage.base import PersistenceGateway
from ridelink.storage.json_server import JsonServerGateway
from ridelink.storage.memory import InMemoryGateway
from ridelink.storage.repositories import (
    DriverRepository,
    OtpTokenRepository,
    PasswordResetTokenRepository,
    RideRepository,
    UserRepository,
)


@dataclass
class Services:
    """Everything a caller needs, built over one gateway."""
    gateway: PersistenceGateway
    auth: AuthSessionManager
    rides: RideLifecycleManager
    queries: RideQueryService
    drivers: DriverAvailabilityRegistry
    notifier: Notifier


def build_gateway(backend: Optional[str] = None) -> PersistenceGateway:
    backend = (backend or config.STORAGE_BACKEND).lower()
    if backend == "memory":
        return InMemoryGateway()
    if backend == "json-server":
        return JsonServerGateway()
    raise ValueError(f"Unknown storage backend: {backend}")


def build_services(gateway: Optional[PersistenceGateway] = None,
                   notifier: Optional[Notifier] = None,
                   clock: Optional[Clock] = None,
                   hasher: Optional[BcryptHasher] = None,
                   session_store: Optional[SessionStore] = None) -> Services:
    """
    Build the services from configuration, overriding any collaborator given.

    Sessions live in the shared store unless the store is process-local.
    """
    gateway = gateway or build_gateway()
    notifier = notifier or build_notifier()
    clock = clock or Clock()
    hasher = hasher or BcryptHasher()
    if session_store is None:
        session_store = InMemorySessionStore() if isinstance(gateway, InMemoryGateway) \
            else GatewaySessionStore(gateway)

    users = UserRepository(gateway)
    drivers = DriverRepository(gateway)
    rides = RideRepository(gateway)
    registry = DriverAvailabilityRegistry(drivers)

    auth = AuthSessionManager(
        users=users,
        registry=registry,
        otp_tokens=OtpTokenRepository(gateway),
        reset_tokens=PasswordResetTokenRepository(gateway),
        sessions=session_store,
        hasher=hasher,
        otp_issuer=OtpIssuer(notifier),
        notifier=notifier,
        clock=clock,
    )

    return Services(
        gateway=gateway,
        auth=auth,
        rides=RideLifecycleManager(rides, registry, clock=clock),
        queries=RideQueryService(rides, drivers, users),
        drivers=registry,
        notifier=notifier,
    )
