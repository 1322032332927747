"""Helpers for converting model fields to and from stored records."""

from datetime import datetime
from typing import Any, Optional


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Format a datetime for storage."""
    if value is None:
        return None
    return value.isoformat()


def from_iso(value: Any) -> Optional[datetime]:
    """Parse a stored datetime. Accepts datetimes unchanged."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
