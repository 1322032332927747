"""Admin-specific commands for the RideLink CLI."""

import click
from tabulate import tabulate

from ridelink.exceptions import RideLinkError
from ridelink.models import Role
from ridelink.services.ride_query_service import RideView
from ridelink.cli_module.utils import echo_ride, get_services, require_role, rides_table


@click.group(name="admin", help="Admin specific commands for system management")
def admin_group():
    """Admin specific commands for system management."""
    pass


@admin_group.command(name="rides", help="List every ride in the system.")
@require_role([Role.ADMIN.value])
def list_rides(principal):
    """List every ride, as stored."""
    try:
        rides = get_services().queries.all_rides()
        if not rides:
            click.echo("No rides found.")
            return
        click.echo(rides_table(RideView(ride) for ride in rides))
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@admin_group.command(name="ride", help="Show a ride by its ID.")
@click.argument("ride_id", type=int, metavar="RIDE_ID")
@require_role([Role.ADMIN.value])
def show_ride(principal, ride_id):
    """
    Show a stored ride.

    RIDE_ID: The ID of the ride to show.
    """
    try:
        ride = get_services().queries.ride_by_id(ride_id)
        if ride is None:
            click.echo(f"No ride found with ID {ride_id}", err=True)
            return
        echo_ride(RideView(ride))
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@admin_group.command(name="delete-ride", help="Delete a ride by its ID.")
@click.argument("ride_id", type=int, metavar="RIDE_ID")
@click.confirmation_option(prompt="Are you sure you want to delete this ride?")
@require_role([Role.ADMIN.value])
def delete_ride(principal, ride_id):
    """
    Delete a ride record.

    RIDE_ID: The ID of the ride to delete.
    """
    try:
        if get_services().queries.delete_ride(ride_id):
            click.echo(f"Ride {ride_id} deleted.")
        else:
            click.echo(f"No ride found with ID {ride_id}", err=True)
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@admin_group.command(name="drivers", help="List drivers that are available for rides.")
@require_role([Role.ADMIN.value])
def available_drivers(principal):
    """List available drivers."""
    try:
        drivers = get_services().drivers.available_drivers()
        if not drivers:
            click.echo("No drivers are available right now.")
            return
        rows = [[d.id, d.name, d.phone] for d in drivers]
        click.echo(tabulate(rows, headers=["ID", "Name", "Phone"], tablefmt="simple"))
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)
