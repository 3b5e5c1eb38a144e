"""Command-line entry point: config scaffolding, schema setup, server and status."""
import asyncio
import sys
from pathlib import Path

import click
import uvicorn

from . import __version__
from .core.config import PRReviewerConfig, configure_logging, init_config

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML configuration file (default: search prreviewer.yaml, then env)",
)


def _load_config(config_path: str | None) -> PRReviewerConfig:
    app_config = init_config(config_path)
    configure_logging(app_config)
    return app_config


def _open_db(app_config: PRReviewerConfig):
    from .core.storage import init_db

    return init_db(
        app_config.get_database_url(),
        pool_size=app_config.pool_size,
        max_overflow=app_config.max_overflow,
        pool_timeout=app_config.pool_timeout,
        echo=app_config.echo_sql,
    )


def _fail(action: str, error: Exception) -> None:
    click.echo(f"Error {action}: {error}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def cli():
    """prreviewer - reviewer assignment for pull requests."""


@cli.command()
@click.option(
    "--config-path",
    "-c",
    type=click.Path(dir_okay=False),
    default="prreviewer.yaml",
    show_default=True,
    help="Where to write the configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file")
def init(config_path: str, force: bool):
    """Write a configuration file with default settings."""
    target = Path(config_path)
    if target.exists() and not force:
        click.echo(f"Configuration file already exists: {target} (use --force to overwrite)")
        return

    try:
        defaults = PRReviewerConfig.create_default_config(target)
    except (OSError, ValueError) as e:
        _fail("creating configuration", e)
        return

    click.echo(f"Created configuration file: {target}")
    click.echo(f"  listen:  {defaults.api_host}:{defaults.api_port}")
    click.echo(f"  store:   {defaults.get_database_url()}")
    click.echo(f"  retries: {defaults.retry_attempts} x {defaults.retry_base_delay}s")


@cli.command()
@config_option
@click.option("--host", help="Override api_host")
@click.option("--port", type=int, help="Override api_port")
def start(config_path: str | None, host: str | None, port: int | None):
    """Run the HTTP API under uvicorn."""
    try:
        app_config = _load_config(config_path)
    except (OSError, ValueError) as e:
        _fail("loading configuration", e)
        return

    if host:
        app_config.api_host = host
    if port:
        app_config.api_port = port

    click.echo(f"Serving prreviewer on http://{app_config.api_host}:{app_config.api_port}")
    try:
        uvicorn.run(
            "prreviewer.api:app",
            host=app_config.api_host,
            port=app_config.api_port,
            log_level=app_config.log_level.lower(),
        )
    except KeyboardInterrupt:
        click.echo("Stopped")


@cli.command()
@config_option
def initdb(config_path: str | None):
    """Create tables in the configured store."""

    async def create(db):
        try:
            await db.create_tables()
        finally:
            await db.close()

    try:
        app_config = _load_config(config_path)
        asyncio.run(create(_open_db(app_config)))
    except Exception as e:
        _fail("creating schema", e)
        return

    click.echo(f"Schema ready at {app_config.get_database_url()}")


@cli.command()
@config_option
@click.option("--top", default=5, show_default=True, help="Busiest reviewers to list")
def status(config_path: str | None, top: int):
    """Print store location and assignment statistics."""
    from .core.queries import ReviewQueries

    async def collect(db):
        try:
            return await ReviewQueries(db).stats()
        finally:
            await db.close()

    try:
        app_config = _load_config(config_path)
        stats = asyncio.run(collect(_open_db(app_config)))
    except Exception as e:
        _fail("checking status", e)
        return

    click.echo(f"Store: {app_config.get_database_url()}")
    click.echo(f"Pull requests: {stats.open_prs} open, {stats.merged_prs} merged")
    click.echo(f"Users: {len(stats.assignments_per_user)}")

    busiest = sorted(stats.assignments_per_user.items(), key=lambda item: (-item[1], item[0]))
    for user_id, count in busiest[:top]:
        click.echo(f"  {user_id}: {count} assignments")


if __name__ == "__main__":
    cli()
