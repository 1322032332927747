"""Utility functions for the CLI interface."""

from functools import wraps
import json
import os
from datetime import datetime
from typing import Iterable, List, Optional

import click
from tabulate import tabulate

from ridelink import config
from ridelink.exceptions import AuthError, RideLinkError
from ridelink.main import Services, build_services

_services: Optional[Services] = None


def get_services() -> Services:
    """Services shared by every command of this process."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def set_services(services: Optional[Services]) -> None:
    """Replace the shared services (None rebuilds from configuration on next use)."""
    global _services
    _services = services


def save_token(token: str) -> None:
    """Save session token to config file."""
    if not os.path.exists(config.CONFIG_DIR):
        os.makedirs(config.CONFIG_DIR)

    with open(config.CONFIG_FILE, 'w') as f:
        json.dump({"token": token}, f)


def get_token() -> Optional[str]:
    """Get session token from config file."""
    if not os.path.exists(config.CONFIG_FILE):
        return None

    try:
        with open(config.CONFIG_FILE, 'r') as f:
            return json.load(f).get("token")
    except json.JSONDecodeError:
        return None


def clear_token() -> bool:
    """Remove the saved session. Returns False if there was none."""
    if os.path.exists(config.CONFIG_FILE):
        os.remove(config.CONFIG_FILE)
        return True
    return False


def require_role(roles: List[str]):
    """
    Decorator that resolves the signed-in user and checks their role.

    The wrapped command receives the Principal as its first argument.
    """
    def decorator(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            token = get_token()
            if not token:
                click.echo("You are not signed in. Please sign in first.", err=True)
                return

            try:
                principal = get_services().auth.current_user(token)
            except AuthError as e:
                click.echo(f"Access denied: {str(e)}", err=True)
                return
            except RideLinkError as e:
                click.echo(f"Error: {str(e)}", err=True)
                return

            if principal.user.role.value not in roles:
                allowed = ", ".join(r.lower() for r in roles)
                click.echo(f"Access denied. This action requires one of these roles: {allowed}", err=True)
                return

            return f(principal, *args, **kwargs)
        return wrapped
    return decorator


def format_time(value: Optional[datetime]) -> str:
    return value.strftime('%Y-%m-%d %H:%M') if value else "-"


def rides_table(views: Iterable) -> str:
    """Render ride views as a table."""
    rows = []
    for view in views:
        ride = view.ride
        rows.append([
            ride.id,
            ride.status.value if ride.status else "-",
            ride.pickup_location,
            ride.dropoff_location,
            ride.estimated_fare,
            view.driver.name if view.driver else "-",
            format_time(ride.booked_at),
        ])
    headers = ["ID", "Status", "Pickup", "Dropoff", "Fare", "Driver", "Booked"]
    return tabulate(rows, headers=headers, tablefmt="simple")


def echo_ride(view) -> None:
    """Print the details of one ride view."""
    ride = view.ride
    click.echo(f"Ride ID: {ride.id}")
    click.echo(f"Status: {ride.status.value if ride.status else '-'}")
    click.echo(f"Pickup: {ride.pickup_location}")
    click.echo(f"Dropoff: {ride.dropoff_location}")
    click.echo(f"Distance: {ride.distance} km")
    click.echo(f"Duration: {ride.duration} minutes")
    click.echo(f"Estimated Fare: {ride.estimated_fare}")
    click.echo(f"Booked: {format_time(ride.booked_at)}")
    if view.rider:
        click.echo(f"Rider: {view.rider.name} ({view.rider.phone})")
    if view.driver:
        click.echo(f"Driver: {view.driver.name} ({view.driver.phone})")
    if ride.started_at:
        click.echo(f"Started: {format_time(ride.started_at)}")
    if ride.completed_at:
        click.echo(f"Completed: {format_time(ride.completed_at)}")
    if ride.rating is not None:
        click.echo(f"Rating: {ride.rating}/5" + (f" - {ride.comment}" if ride.comment else ""))
