"""Shared fixtures for the RideLink tests."""

import re
import threading

import pytest

from ridelink.clock import FixedClock
from ridelink.main import build_services
from ridelink.models import Ride
from ridelink.services.credentials import BcryptHasher
from ridelink.services.notifier import Notifier
from ridelink.storage.memory import InMemoryGateway

OTP_PATTERN = re.compile(r"(\d{6})")


class RecordingNotifier(Notifier):
    """Notifier that keeps every message it is asked to send."""

    def __init__(self, fail=False):
        self.fail = fail
        self.messages = []
        self._lock = threading.Lock()

    def send(self, to_address, subject, body):
        with self._lock:
            self.messages.append((to_address, subject, body))
        if self.fail:
            raise ConnectionError("mail relay down")

    def last_otp(self, email):
        for to_address, subject, body in reversed(self.messages):
            if to_address == email and subject == "Your OTP Code":
                return OTP_PATTERN.search(body).group(1)
        return None

    def last_reset_token(self, email):
        for to_address, subject, body in reversed(self.messages):
            if to_address == email and subject == "Password Reset":
                return body.split("token=", 1)[1]
        return None


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def services(gateway, notifier, clock):
    """Services over an in-memory store with a fast hasher and a fixed clock."""
    return build_services(
        gateway=gateway,
        notifier=notifier,
        clock=clock,
        hasher=BcryptHasher(rounds=4),
    )


@pytest.fixture
def rider(services):
    return services.auth.register("rider@example.com", "secret", "Rita Rider", "555-0100", "rider")


@pytest.fixture
def driver(services):
    return services.auth.register("driver@example.com", "secret", "Dan Driver", "555-0200", "driver")


@pytest.fixture
def book_ride(services, rider):
    """Factory booking a ride for the default rider."""
    def _book(pickup="Bole", dropoff="Piassa", **overrides):
        fields = dict(
            rider_id=rider["user"]["id"],
            pickup_location=pickup,
            dropoff_location=dropoff,
            estimated_fare=4500,
            distance=5.0,
            duration=10,
        )
        fields.update(overrides)
        return services.rides.book(Ride(**fields))
    return _book


@pytest.fixture
def sign_in(services, notifier):
    """Run the full password + OTP login and return the session token."""
    def _sign_in(email, password="secret"):
        services.auth.login(email, password)
        return services.auth.verify_otp(email, notifier.last_otp(email))["token"]
    return _sign_in
