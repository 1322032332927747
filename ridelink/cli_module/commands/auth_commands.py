"""Authentication commands for the RideLink CLI."""

import click

from ridelink.exceptions import AuthError, RideLinkError
from ridelink.cli_module.utils import clear_token, get_services, get_token, save_token


@click.group(name="auth")
def auth_group():
    """Authentication commands."""
    pass


@auth_group.command()
@click.option("--email", prompt=True, help="Your email address")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Your password")
@click.option("--name", prompt=True, help="Your name")
@click.option("--phone", prompt=True, help="Your phone number")
@click.option("--role", type=click.Choice(["rider", "driver", "admin"], case_sensitive=False),
              default="rider", help="Account type")
def register(email, password, name, phone, role):
    """Register a new account."""
    try:
        result = get_services().auth.register(email, password, name, phone, role)
        click.echo(f"{role.capitalize()} {name} registered successfully!")
        click.echo(f"Email: {result['user']['email']}")
        if "driver" in result:
            click.echo(f"Driver ID: {result['driver']['id']}")
            click.echo("You are offline. Use 'ridelink driver availability --status available' to go online.")
        click.echo("Use 'ridelink auth signin' to sign in.")
    except RideLinkError as e:
        click.echo(f"Error during registration: {str(e)}", err=True)


@auth_group.command()
@click.option("--email", prompt=True, help="Your email address")
@click.option("--password", prompt=True, hide_input=True, help="Your password")
def signin(email, password):
    """Check your password and receive a one-time code."""
    try:
        get_services().auth.login(email, password)
        click.echo(f"A verification code has been sent to {email}.")
        click.echo("Use 'ridelink auth verify' to finish signing in.")
    except RideLinkError as e:
        click.echo(f"Error during signin: {str(e)}", err=True)


@auth_group.command()
@click.option("--email", prompt=True, help="Your email address")
@click.option("--code", prompt="Verification code", help="The 6-digit code you received")
def verify(email, code):
    """Finish signing in with your one-time code."""
    try:
        result = get_services().auth.verify_otp(email, code)
        save_token(result["token"])
        user = result["user"]
        click.echo(f"Welcome back, {user['name']}!")
        if "driver" in result:
            status = "available" if result["driver"]["available"] else "not available"
            click.echo(f"You are logged in as a driver. Status: {status} for rides.")
        else:
            click.echo(f"You are logged in as a {user['role'].lower()}.")
    except RideLinkError as e:
        click.echo(f"Error during verification: {str(e)}", err=True)


@auth_group.command()
def signout():
    """Log out from the application."""
    token = get_token()
    if token:
        try:
            get_services().auth.logout(token)
        except AuthError:
            pass  # Session already gone server-side

    if clear_token():
        click.echo("You have been signed out.")
    else:
        click.echo("You were not signed in.")


@auth_group.command()
def whoami():
    """Show current user information."""
    token = get_token()

    if not token:
        click.echo("You are not signed in.", err=True)
        return

    try:
        principal = get_services().auth.current_user(token)
        user = principal.user
        click.echo(f"Signed in as: {user.name}")
        click.echo(f"Email: {user.email}")
        click.echo(f"Phone: {user.phone}")
        click.echo(f"Role: {user.role.value.capitalize()}")
        if principal.driver:
            click.echo(f"Driver ID: {principal.driver.id}")
            click.echo(f"Availability: {'Available' if principal.driver.available else 'Not available'} for rides")
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@auth_group.command(name="forgot-password")
@click.option("--email", prompt=True, help="Your email address")
def forgot_password(email):
    """Request a password reset link."""
    try:
        get_services().auth.forgot_password(email)
        click.echo("Password reset email sent.")
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)


@auth_group.command(name="reset-password")
@click.option("--token", prompt=True, help="Token from the reset link")
@click.option("--password", prompt="New password", hide_input=True, confirmation_prompt=True,
              help="Your new password")
def reset_password(token, password):
    """Set a new password with a reset token."""
    try:
        get_services().auth.reset_password(token, password)
        click.echo("Your password has been reset. Please sign in again.")
    except RideLinkError as e:
        click.echo(f"Error: {str(e)}", err=True)
