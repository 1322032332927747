"""Ride commands for the RideLink CLI."""

import click

from ridelink.exceptions import RideLinkError
from ridelink.models import Ride, Role
from ridelink.services.fare import RideType, estimate_fare
from ridelink.cli_module.utils import echo_ride, get_services, require_role, rides_table

RIDE_TYPES = [t.name.lower() for t in RideType]


@click.group(name="ride")
def ride_group():
    """Ride management commands."""
    pass


@ride_group.command(name="estimate")
@click.option("--distance", type=float, required=True, help="Distance in kilometers")
@click.option("--duration", type=int, required=True, help="Duration in minutes")
@click.option("--type", "ride_type", type=click.Choice(RIDE_TYPES), default="basic", help="Ride type")
def estimate(distance, duration, ride_type):
    """Estimate the fare of a ride."""
    try:
        click.echo(f"Estimated fare: {estimate_fare(distance, duration, ride_type)}")
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="book")
@click.option("--pickup", prompt="Pickup location", help="Pickup location")
@click.option("--dropoff", prompt="Dropoff location", help="Dropoff location")
@click.option("--distance", type=float, prompt=True, help="Distance in kilometers")
@click.option("--duration", type=int, prompt=True, help="Duration in minutes")
@click.option("--fare", type=float, default=None, help="Agreed fare; estimated when omitted")
@click.option("--type", "ride_type", type=click.Choice(RIDE_TYPES), default="basic", help="Ride type")
@require_role([Role.RIDER.value])
def book(principal, pickup, dropoff, distance, duration, fare, ride_type):
    """Book a new ride."""
    try:
        if fare is None:
            fare = estimate_fare(distance, duration, ride_type)

        ride = get_services().rides.book(Ride(
            rider_id=principal.user.id,
            pickup_location=pickup,
            dropoff_location=dropoff,
            estimated_fare=fare,
            distance=distance,
            duration=duration,
        ))
        click.echo("Ride booked successfully!")
        click.echo(f"Ride ID: {ride.id}")
        click.echo(f"Status: {ride.status.value}")
        click.echo(f"Estimated Fare: {ride.estimated_fare}")
        click.echo("We're looking for a driver to accept your ride...")
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="cancel")
@click.argument("ride_id", type=int)
@require_role([Role.RIDER.value, Role.DRIVER.value])
def cancel(principal, ride_id):
    """Cancel a ride you booked or drive."""
    services = get_services()
    try:
        ride = services.queries.get_ride(ride_id).ride
        driver_id = principal.driver.id if principal.driver else None
        if ride.rider_id != principal.user.id and (driver_id is None or ride.driver_id != driver_id):
            click.echo("You do not have permission to cancel this ride.", err=True)
            return

        ride = services.rides.cancel(ride_id)
        click.echo(f"Ride {ride.id} is {ride.status.value}.")
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="rate")
@click.argument("ride_id", type=int)
@click.option("--rating", type=int, prompt="Rating (1-5)", help="Rating from 1 to 5")
@click.option("--comment", default=None, help="Optional comment")
@require_role([Role.RIDER.value])
def rate(principal, ride_id, rating, comment):
    """Rate a ride you took."""
    services = get_services()
    try:
        ride = services.queries.get_ride(ride_id).ride
        if ride.rider_id != principal.user.id:
            click.echo("You can only rate your own rides.", err=True)
            return

        ride = services.rides.rate(ride_id, rating, comment)
        click.echo(f"Thanks! You rated ride {ride.id} {ride.rating}/5.")
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="show")
@click.argument("ride_id", type=int)
@require_role([Role.RIDER.value, Role.DRIVER.value, Role.ADMIN.value])
def show(principal, ride_id):
    """Show the details of a ride."""
    try:
        echo_ride(get_services().queries.get_ride(ride_id))
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="history")
@click.option("--page", type=int, default=None, help="Zero-based page number")
@click.option("--size", type=int, default=None, help="Rides per page")
@require_role([Role.RIDER.value])
def history(principal, page, size):
    """View your ride history."""
    try:
        views = get_services().queries.history("rider", principal.user.id, page=page, size=size)
        if not views:
            click.echo("You have no rides.")
            return
        click.echo(rides_table(views))
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="active")
@require_role([Role.RIDER.value])
def active(principal):
    """Show your ride in progress."""
    try:
        view = get_services().queries.active_ride("rider", principal.user.id)
        if view is None:
            click.echo("You have no active ride.")
            return
        echo_ride(view)
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@ride_group.command(name="search")
@click.argument("query")
@require_role([Role.RIDER.value, Role.DRIVER.value, Role.ADMIN.value])
def search(principal, query):
    """Search rides by pickup or dropoff location."""
    try:
        views = get_services().queries.search(query)
        if not views:
            click.echo(f"No rides match '{query}'.")
            return
        click.echo(rides_table(views))
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)
