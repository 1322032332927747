"""Driver entity for the RideLink application."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class Driver:
    """
    Represents a driver in the ride-hailing system.

    Attributes:
        name: Driver's name
        phone: Driver's phone number, matches the owning user's phone
        available: Whether the driver is open for assignment
        user_id: ID of the user account this driver belongs to
        id: Unique identifier, assigned on first save
        version: Optimistic concurrency counter managed by storage
    """
    name: str
    phone: str
    available: bool = False
    user_id: Optional[int] = None
    id: Optional[int] = None
    version: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "available": self.available,
            "user_id": self.user_id,
            "version": self.version,
        }

    def to_public_dict(self) -> Dict[str, Any]:
        data = self.to_dict()
        del data["version"]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Driver":
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            available=bool(data.get("available", False)),
            user_id=data.get("user_id"),
            version=data.get("version"),
        )
