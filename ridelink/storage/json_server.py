"""Storage backend that talks to the RideLink JSON data server."""

import logging
from typing import Any, Dict, List, Optional

import requests

from ridelink import config
from ridelink.exceptions import StorageError
from ridelink.storage.base import PersistenceGateway, StaleRecordError

logger = logging.getLogger(__name__)


class JsonServerGateway(PersistenceGateway):
    """
    Gateway over the data server's REST collections.

    Conditional updates send the version the caller read in an ``If-Match``
    header; the server answers 409 when it no longer matches.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or config.BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT

    def find_by_id(self, collection: str, record_id: Any) -> Optional[Dict[str, Any]]:
        try:
            response = requests.get(f"{self.base_url}/{collection}/{record_id}", timeout=self.timeout)

            if response.status_code == 404:
                return None

            response.raise_for_status()
            return response.json()

        except requests.RequestException as e:
            raise StorageError(f"Failed to load {collection}/{record_id}: {str(e)}")

    def find_by(self, collection: str, **criteria: Any) -> List[Dict[str, Any]]:
        try:
            response = requests.get(
                f"{self.base_url}/{collection}/query", params=criteria, timeout=self.timeout)

            if response.status_code == 404:
                # Collection not found, nothing stored yet
                return []

            response.raise_for_status()
            return response.json()

        except requests.RequestException as e:
            raise StorageError(f"Failed to query {collection}: {str(e)}")

    def find_all(self, collection: str) -> List[Dict[str, Any]]:
        try:
            response = requests.get(f"{self.base_url}/{collection}", timeout=self.timeout)

            if response.status_code == 404:
                return []

            response.raise_for_status()
            return response.json()

        except requests.RequestException as e:
            raise StorageError(f"Failed to list {collection}: {str(e)}")

    def save(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        record_id = record.get("id")
        version = record.get("version")

        try:
            if record_id is None or version is None:
                response = requests.post(
                    f"{self.base_url}/{collection}", json=record, timeout=self.timeout)
            else:
                response = requests.put(
                    f"{self.base_url}/{collection}/{record_id}",
                    json=record,
                    headers={"If-Match": str(version)},
                    timeout=self.timeout,
                )

            if response.status_code in (404, 409, 412) and record_id is not None:
                logger.info(f"Stale write rejected for {collection}/{record_id}")
                raise StaleRecordError(f"{collection}/{record_id} was modified concurrently")

            response.raise_for_status()
            return response.json()

        except requests.RequestException as e:
            raise StorageError(f"Failed to save to {collection}: {str(e)}")

    def delete_by_id(self, collection: str, record_id: Any) -> bool:
        try:
            response = requests.delete(f"{self.base_url}/{collection}/{record_id}", timeout=self.timeout)

            if response.status_code == 404:
                return False

            response.raise_for_status()
            return True

        except requests.RequestException as e:
            raise StorageError(f"Failed to delete {collection}/{record_id}: {str(e)}")
