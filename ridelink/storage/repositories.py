"""Typed repositories over a PersistenceGateway."""

from typing import Any, Generic, List, Optional, Type, TypeVar

from ridelink.models import Driver, OtpToken, PasswordResetToken, Ride, RideStatus, Session, User
from ridelink.storage.base import PersistenceGateway

T = TypeVar("T")


class Repository(Generic[T]):
    """Maps one collection to one model class."""

    collection: str = ""
    model: Type[T]

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def _load(self, data) -> Optional[T]:
        return self.model.from_dict(data) if data is not None else None

    def _load_all(self, rows) -> List[T]:
        return [self.model.from_dict(row) for row in rows]

    def find_by_id(self, record_id: Any) -> Optional[T]:
        return self._load(self.gateway.find_by_id(self.collection, record_id))

    def find_all(self) -> List[T]:
        return self._load_all(self.gateway.find_all(self.collection))

    def find_first(self, **criteria: Any) -> Optional[T]:
        rows = self.gateway.find_by(self.collection, **criteria)
        return self._load(rows[0]) if rows else None

    def save(self, entity: T) -> T:
        """Persist an entity. Raises StaleRecordError if it lost a race."""
        return self.model.from_dict(self.gateway.save(self.collection, entity.to_dict()))

    def delete_by_id(self, record_id: Any) -> bool:
        return self.gateway.delete_by_id(self.collection, record_id)


class UserRepository(Repository[User]):
    collection = "users"
    model = User

    def find_by_email(self, email: str) -> Optional[User]:
        return self.find_first(email=email)

    def find_by_phone(self, phone: str) -> Optional[User]:
        return self.find_first(phone=phone)


class DriverRepository(Repository[Driver]):
    collection = "drivers"
    model = Driver

    def find_by_phone(self, phone: str) -> Optional[Driver]:
        return self.find_first(phone=phone)

    def find_by_user_id(self, user_id: Any) -> Optional[Driver]:
        return self.find_first(user_id=user_id)

    def find_available(self) -> List[Driver]:
        return self._load_all(self.gateway.find_by(self.collection, available=True))


class RideRepository(Repository[Ride]):
    collection = "rides"
    model = Ride

    def find_by_status(self, status: RideStatus) -> List[Ride]:
        return self._load_all(self.gateway.find_by(self.collection, status=status.value))

    def find_by_rider_id(self, rider_id: Any) -> List[Ride]:
        return self._load_all(self.gateway.find_by(self.collection, rider_id=rider_id))

    def find_by_driver_id(self, driver_id: Any) -> List[Ride]:
        return self._load_all(self.gateway.find_by(self.collection, driver_id=driver_id))


class OtpTokenRepository(Repository[OtpToken]):
    collection = "otp_tokens"
    model = OtpToken

    def find_by_user_email(self, email: str) -> Optional[OtpToken]:
        return self.find_first(user_email=email)


class PasswordResetTokenRepository(Repository[PasswordResetToken]):
    collection = "password_reset_tokens"
    model = PasswordResetToken

    def find_by_token(self, token: str) -> Optional[PasswordResetToken]:
        return self.find_first(token=token)


class SessionRepository(Repository[Session]):
    collection = "sessions"
    model = Session
