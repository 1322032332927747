"""Persistence contract shared by every storage backend."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class StaleRecordError(Exception):
    """
    Raised when a write loses a race.

    Either the stored version no longer matches the version the caller read,
    or an insert used an ID that is already taken.
    """
    pass


class PersistenceGateway(ABC):
    """
    Record store over named collections.

    Records are JSON-compatible dicts with an ``id`` and a ``version``.
    ``save`` follows three rules:

    - no ``id``: the store assigns the next integer ID and version 1;
    - ``id`` but no ``version``: insert under that ID, StaleRecordError if taken;
    - ``id`` and ``version``: update only if the stored version matches,
      bumping it by one, StaleRecordError otherwise.
    """

    @abstractmethod
    def find_by_id(self, collection: str, record_id: Any) -> Optional[Dict[str, Any]]:
        """Return the record with the given ID, or None."""

    @abstractmethod
    def find_by(self, collection: str, **criteria: Any) -> List[Dict[str, Any]]:
        """Return records whose fields equal every given value."""

    @abstractmethod
    def find_all(self, collection: str) -> List[Dict[str, Any]]:
        """Return every record in the collection."""

    @abstractmethod
    def save(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert or conditionally update a record and return what was stored."""

    @abstractmethod
    def delete_by_id(self, collection: str, record_id: Any) -> bool:
        """Delete a record. Returns False if there was nothing to delete."""


def matches(record: Dict[str, Any], criteria: Dict[str, Any]) -> bool:
    """Field equality the way the data server compares query parameters."""
    for key, value in criteria.items():
        if key not in record or str(record[key]) != str(value):
            return False
    return True
