"""
CLI commands for running the API server and managing the schema.
"""

import logging
import os
import click
import uvicorn

from tracker_backend.settings import settings


@click.command()
@click.option('--host', default=None, help='Interface to bind (defaults to SERVER_HOST)')
@click.option('--port', default=None, type=int, help='Port to bind (defaults to SERVER_PORT)')
@click.option('--reload', is_flag=True, default=False, help='Reload on code changes')
def server(host: str, port: int, reload: bool):
    """
    Run the task tracker API with uvicorn.

    Examples:
        tracker server
        tracker server --port 8080 --reload
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    host = host or settings.SERVER_HOST
    port = port or settings.SERVER_PORT

    click.echo(f"Starting task tracker API on {host}:{port}")
    uvicorn.run(
        "tracker_backend.server:app",
        host=host,
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
        reload=reload,
        workers=1
    )


@click.command("init-db")
def init_db_command():
    """Create all missing tables directly from the models."""
    from tracker_backend.database import init_db

    init_db()
    click.echo("Database tables created")


@click.command()
@click.option('--revision', default='head', help='Target revision')
def migrate(revision: str):
    """Apply alembic migrations to the configured database."""
    from alembic import command
    from alembic.config import Config

    config = Config(os.path.join(os.path.dirname(os.path.dirname(__file__)), "alembic.ini"))
    config.set_main_option("script_location", os.path.join(os.path.dirname(os.path.dirname(__file__)), "alembic"))

    command.upgrade(config, revision)
    click.echo(f"Database migrated to {revision}")
