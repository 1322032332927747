"""Services of the RideLink application."""
from ridelink.services.auth_service import AuthSessionManager, Principal
from ridelink.services.driver_service import DriverAvailabilityRegistry
from ridelink.services.ride_service import RideLifecycleManager
from ridelink.services.ride_query_service import RideQueryService, RideView


__all__ = [
    'AuthSessionManager',
    'Principal',
    'DriverAvailabilityRegistry',
    'RideLifecycleManager',
    'RideQueryService',
    'RideView',
]
