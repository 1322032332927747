"""Main CLI entry point for the RideLink application."""

import logging

import click

from ridelink import config

# Set context settings to properly display help for all commands
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
    "show_default": True
}

from ridelink.cli_module.commands.auth_commands import auth_group
from ridelink.cli_module.commands.ride_commands import ride_group
from ridelink.cli_module.commands.driver_commands import driver_group
from ridelink.cli_module.commands.admin_commands import admin_group


@click.group(context_settings=CONTEXT_SETTINGS)
def cli():
    """RideLink CLI application for ride-hailing services."""
    pass


cli.add_command(auth_group)
cli.add_command(ride_group)
cli.add_command(driver_group)
cli.add_command(admin_group)


def main():
    """Entry point for the application."""
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cli()


if __name__ == '__main__':
    main()
