"""Driver availability tracking for RideLink."""

import logging
from typing import Any, List, Optional

from ridelink.exceptions import ConflictError, NotFoundError
from ridelink.models import Driver, User
from ridelink.storage.base import StaleRecordError
from ridelink.storage.repositories import DriverRepository

logger = logging.getLogger(__name__)


class DriverAvailabilityRegistry:
    """Tracks which drivers are open for assignment."""

    def __init__(self, drivers: DriverRepository, max_retries: int = 5):
        self.drivers = drivers
        self.max_retries = max_retries

    def get_driver(self, driver_id: Any) -> Driver:
        driver = self.drivers.find_by_id(driver_id)
        if driver is None:
            raise NotFoundError(f"Driver with ID {driver_id} not found")
        return driver

    def driver_for_user(self, user: User) -> Optional[Driver]:
        """Driver profile of a user: by user ID first, then by matching phone."""
        if user.id is not None:
            driver = self.drivers.find_by_user_id(user.id)
            if driver is not None:
                return driver
        if user.phone:
            return self.drivers.find_by_phone(user.phone)
        return None

    def available_drivers(self) -> List[Driver]:
        return self.drivers.find_available()

    def is_available(self, driver_id: Any) -> bool:
        driver = self.drivers.find_by_id(driver_id)
        return bool(driver and driver.available)

    def set_availability(self, driver_id: Any, available: bool) -> Driver:
        """
        Set a driver's availability flag.

        Args:
            driver_id: ID of the driver
            available: Whether the driver is open for assignment

        Returns:
            Driver: The stored driver

        Raises:
            NotFoundError: If the driver does not exist
            ConflictError: If the driver kept changing underneath us
        """
        for _ in range(self.max_retries):
            driver = self.get_driver(driver_id)
            if driver.available == available:
                return driver

            driver.available = available
            try:
                saved = self.drivers.save(driver)
            except StaleRecordError:
                logger.info(f"Driver {driver_id} changed concurrently, retrying")
                continue

            logger.info(f"Driver {driver_id} is now {'available' if available else 'unavailable'}")
            return saved

        raise ConflictError(f"Could not update availability of driver {driver_id}")

    def engage(self, driver_id: Any) -> None:
        """Take a driver off the market after a ride assignment."""
        self._update_quietly(driver_id, False)

    def release(self, driver_id: Any) -> None:
        """Put a driver back on the market after a ride ends."""
        self._update_quietly(driver_id, True)

    def _update_quietly(self, driver_id: Any, available: bool) -> None:
        # Ride transitions must not fail because of the driver record
        if driver_id is None:
            return
        try:
            self.set_availability(driver_id, available)
        except NotFoundError:
            logger.debug(f"No driver record for {driver_id}, availability not tracked")
        except ConflictError as e:
            logger.warning(str(e))
