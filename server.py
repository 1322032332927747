#!/usr/bin/env python3
"""
Management script for the RideLink data server.
"""

import logging
import os
import shutil

import click

from ridelink import config
from ridelink.data_server import create_app, init_db


@click.group()
def cli():
    """RideLink data server management CLI."""
    pass


@cli.command()
@click.option('--port', default=3000, help='Port to run the server on')
@click.option('--host', default='0.0.0.0', help='Interface to bind')
@click.option('--db', 'db_path', default=None, help='Path to the database file')
def run(port, host, db_path):
    """Run the data server in the foreground."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    db_path = db_path or config.DB_FILE

    click.echo(f"Starting data server on port {port}...")
    click.echo(f"Using database: {db_path}")
    click.echo(f"Server accessible at: http://localhost:{port}")

    app = create_app(db_path)
    app.run(host=host, port=port, threaded=True)


@cli.command()
@click.option('--db', 'db_path', default=None, help='Path to the database file')
def reset(db_path):
    """Reset the database to empty state."""
    db_path = db_path or config.DB_FILE

    if not os.path.exists(db_path):
        init_db(db_path)
        click.echo(f"Database file not found, created an empty one at {db_path}")
        return

    try:
        backup_path = f"{db_path}.bak"
        shutil.copyfile(db_path, backup_path)
        init_db(db_path, reset=True)
        click.echo(f"Database reset. Backup created at {backup_path}")
    except OSError as e:
        click.echo(f"Error resetting database: {str(e)}", err=True)


if __name__ == '__main__':
    cli()
