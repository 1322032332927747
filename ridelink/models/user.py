"""User entity for the RideLink application."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ridelink.models.fields import from_iso, to_iso


class Role(Enum):
    """Types of users in the system."""
    RIDER = "RIDER"
    DRIVER = "DRIVER"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value) -> "Role":
        """Resolve a role from a case-insensitive string or a Role."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown role: {value}")


@dataclass
class User:
    """
    Represents a user in the ride-hailing system.

    Attributes:
        email: User's email address, unique across users
        password: Hashed password
        name: Display name
        phone: Phone number, unique across users
        role: Rider, driver or admin
        id: Unique identifier, assigned on first save
        created_at: When the account was created
        version: Optimistic concurrency counter managed by storage
    """
    email: str
    password: str
    name: str
    phone: str
    role: Role = Role.RIDER
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    version: Optional[int] = None

    @property
    def is_driver(self) -> bool:
        """Check if user is a driver."""
        return self.role == Role.DRIVER

    @property
    def is_admin(self) -> bool:
        """Check if user is an admin."""
        return self.role == Role.ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "password": self.password,
            "name": self.name,
            "phone": self.phone,
            "role": self.role.value,
            "created_at": to_iso(self.created_at),
            "version": self.version,
        }

    def to_public_dict(self) -> Dict[str, Any]:
        """User data safe to hand back to callers (no password)."""
        data = self.to_dict()
        del data["password"]
        del data["version"]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data.get("id"),
            email=data["email"],
            password=data.get("password", ""),
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            role=Role.parse(data.get("role", Role.RIDER.value)),
            created_at=from_iso(data.get("created_at")),
            version=data.get("version"),
        )
