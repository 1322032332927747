"""Process-local storage backend."""

import copy
import threading
from typing import Any, Dict, List, Optional

from ridelink.storage.base import PersistenceGateway, StaleRecordError, matches


class InMemoryGateway(PersistenceGateway):
    """Thread-safe dict-backed store. Every read and write returns copies."""

    def __init__(self):
        self._lock = threading.RLock()
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._counters: Dict[str, int] = {}

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def find_by_id(self, collection: str, record_id: Any) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._collection(collection).get(str(record_id))
            return copy.deepcopy(record) if record is not None else None

    def find_by(self, collection: str, **criteria: Any) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(record)
                for record in self._collection(collection).values()
                if matches(record, criteria)
            ]

    def find_all(self, collection: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(record) for record in self._collection(collection).values()]

    def save(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        record = copy.deepcopy(record)
        with self._lock:
            items = self._collection(collection)
            record_id = record.get("id")

            if record_id is None:
                record_id = self._next_id(collection)
                record["id"] = record_id
                record["version"] = 1
            elif record.get("version") is None:
                if str(record_id) in items:
                    raise StaleRecordError(f"{collection}/{record_id} already exists")
                self._bump_counter(collection, record_id)
                record["version"] = 1
            else:
                current = items.get(str(record_id))
                if current is None or current.get("version") != record["version"]:
                    raise StaleRecordError(f"{collection}/{record_id} was modified concurrently")
                record["version"] = record["version"] + 1

            items[str(record_id)] = record
            return copy.deepcopy(record)

    def delete_by_id(self, collection: str, record_id: Any) -> bool:
        with self._lock:
            return self._collection(collection).pop(str(record_id), None) is not None

    def _next_id(self, collection: str) -> int:
        self._counters[collection] = self._counters.get(collection, 0) + 1
        return self._counters[collection]

    def _bump_counter(self, collection: str, record_id: Any) -> None:
        # Keep generated IDs clear of explicitly chosen integer IDs
        if isinstance(record_id, int) and record_id > self._counters.get(collection, 0):
            self._counters[collection] = record_id
