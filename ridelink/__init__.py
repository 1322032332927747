"""RideLink ride-hailing coordination service."""

__version__ = "0.1.0"
