"""Driver-specific commands for the RideLink CLI."""

import click

from ridelink.exceptions import RideLinkError
from ridelink.models import Role
from ridelink.cli_module.utils import echo_ride, get_services, require_role, rides_table


@click.group(name="driver")
def driver_group():
    """Driver specific commands."""
    pass


def _driver_id(principal):
    if principal.driver is None:
        click.echo("No driver profile is linked to your account.", err=True)
        return None
    return principal.driver.id


@driver_group.command(name="availability", help="Set your availability status to accept or decline ride requests.")
@click.option("--status", type=click.Choice(['available', 'unavailable']), required=True,
              help="Set your availability status")
@require_role([Role.DRIVER.value])
def availability(principal, status):
    """Set your availability to accept ride requests."""
    driver_id = _driver_id(principal)
    if driver_id is None:
        return

    try:
        is_available = (status == 'available')
        get_services().rides.set_driver_availability(driver_id, is_available)
        click.echo(f"You are now {'available' if is_available else 'unavailable'} for ride requests.")
    except RideLinkError as e:
        click.echo(f"Error setting availability: {str(e)}", err=True)


@driver_group.command(name="status", help="Show whether you are open for ride requests.")
@require_role([Role.DRIVER.value])
def status(principal):
    """Show your current availability."""
    driver_id = _driver_id(principal)
    if driver_id is None:
        return

    try:
        if get_services().drivers.is_available(driver_id):
            click.echo("You are available for ride requests.")
        else:
            click.echo("You are not available for ride requests.")
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@driver_group.command(name="rides", help="View ride requests waiting for a driver.")
@require_role([Role.DRIVER.value])
def available_rides(principal):
    """View pending rides you can accept."""
    try:
        views = get_services().queries.available_rides()
        if not views:
            click.echo("There are no available ride requests at this time.")
            return
        click.echo(rides_table(views))
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@driver_group.command(name="accept")
@click.argument("ride_id", type=int)
@require_role([Role.DRIVER.value])
def accept(principal, ride_id):
    """Accept a pending ride."""
    driver_id = _driver_id(principal)
    if driver_id is None:
        return

    try:
        ride = get_services().rides.accept(ride_id, driver_id)
        click.echo(f"You accepted ride {ride.id}. Head to {ride.pickup_location}.")
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


def _advance(principal, ride_id, action, done_message):
    driver_id = _driver_id(principal)
    if driver_id is None:
        return

    services = get_services()
    try:
        ride = services.queries.get_ride(ride_id).ride
        if ride.driver_id != driver_id:
            click.echo("You are not the driver of this ride.", err=True)
            return
        ride = action(services.rides, ride_id)
        click.echo(done_message.format(id=ride.id))
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@driver_group.command(name="start")
@click.argument("ride_id", type=int)
@require_role([Role.DRIVER.value])
def start(principal, ride_id):
    """Start a ride you accepted."""
    _advance(principal, ride_id, lambda rides, rid: rides.start(rid), "Ride {id} started.")


@driver_group.command(name="complete")
@click.argument("ride_id", type=int)
@require_role([Role.DRIVER.value])
def complete(principal, ride_id):
    """Complete a ride in progress."""
    _advance(principal, ride_id, lambda rides, rid: rides.complete(rid), "Ride {id} completed.")


@driver_group.command(name="history")
@require_role([Role.DRIVER.value])
def history(principal):
    """View rides you have driven."""
    driver_id = _driver_id(principal)
    if driver_id is None:
        return

    try:
        views = get_services().queries.history("driver", driver_id)
        if not views:
            click.echo("You have no rides yet.")
            return
        click.echo(rides_table(views))
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@driver_group.command(name="active")
@require_role([Role.DRIVER.value])
def active(principal):
    """Show the ride you are currently driving."""
    driver_id = _driver_id(principal)
    if driver_id is None:
        return

    try:
        view = get_services().queries.active_ride("driver", driver_id)
        if view is None:
            click.echo("You have no active ride.")
            return
        echo_ride(view)
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)
