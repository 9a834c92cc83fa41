"""Command-line interface for ShelfBase.

This module provides the CLI commands for running and managing
the ShelfBase application.
"""

import asyncio
from typing import NoReturn

import click

from shelfbase.core.config import get_settings
from shelfbase.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="ShelfBase")
def cli() -> None:
    """ShelfBase - Self-hosted backend for user-owned collections.

    Settings are read from SHELFBASE_* environment variables and .env.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the ShelfBase server."""
    import uvicorn

    settings = get_settings()
    bind_host = host or settings.host
    bind_port = port or settings.port

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting ShelfBase server",
        host=bind_host,
        port=bind_port,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "shelfbase.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else settings.workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def init_db(force: bool) -> None:
    """Initialize the database.

    Creates all database tables and seeds the default topics. Use this only
    in development. In production, use migrations instead.
    """
    from shelfbase.infrastructure.persistence.database import get_db_manager, init_database

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        try:
            await init_database()
            click.echo("Database initialized successfully.")
        finally:
            await get_db_manager().disconnect()

    asyncio.run(initialize())


@cli.command()
@click.option("--revision", default="head", show_default=True, help="Target revision")
@click.option("--config", "config_path", default="alembic.ini", show_default=True)
def migrate(revision: str, config_path: str) -> None:
    """Apply Alembic migrations to the database."""
    from alembic import command
    from alembic.config import Config

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    alembic_cfg = Config(config_path)
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(alembic_cfg, revision)
    logger.info("Migrations applied", revision=revision)
    click.echo(f"Database upgraded to {revision}.")


@cli.command()
@click.option("--username", prompt=True, help="Unique handle")
@click.option("--email", prompt=True, help="Email address")
@click.option("--fullname", default="", help="Display name")
@click.option("--admin", is_flag=True, help="Grant admin rights")
def create_user(username: str, email: str, fullname: str, admin: bool) -> None:
    """Create a user. ShelfBase has no sign-up endpoint."""
    from shelfbase.domain.entities import is_failure
    from shelfbase.domain.services.user_service import UserService
    from shelfbase.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    if "@" not in email or "." not in email.split("@")[-1]:
        click.echo("Error: Invalid email format", err=True)
        raise SystemExit(1)

    async def create():
        db = get_db_manager()
        try:
            async with db.session() as session:
                return await UserService(session, store_timeout_seconds=settings.store_timeout_seconds).create(
                    username=username, email=email, fullname=fullname, is_admin=admin
                )
        finally:
            await db.disconnect()

    result = asyncio.run(create())
    if is_failure(result):
        click.echo(f"Error: {result.message}", err=True)
        raise SystemExit(1)
    click.echo(
        f"\nUser created successfully!\n"
        f"  User ID:  {result.id}\n"
        f"  Username: {result.username}\n"
        f"  Admin:    {result.is_admin}\n"
    )


@cli.command()
@click.argument("username")
@click.option("--expires-minutes", type=int, default=None, help="Token lifetime")
def issue_token(username: str, expires_minutes: int | None) -> None:
    """Print a bearer access token for USERNAME."""
    from datetime import timedelta

    from shelfbase.infrastructure.auth import jwt_service
    from shelfbase.infrastructure.persistence.database import get_db_manager
    from shelfbase.infrastructure.persistence.repositories import UserRepository

    configure_logging(get_settings())

    async def lookup():
        db = get_db_manager()
        try:
            async with db.session() as session:
                return await UserRepository(session).get_by_username(username)
        finally:
            await db.disconnect()

    user = asyncio.run(lookup())
    if user is None:
        click.echo(f"Error: No user named '{username}'", err=True)
        raise SystemExit(1)

    expires = timedelta(minutes=expires_minutes) if expires_minutes else None
    click.echo(jwt_service.create_access_token(user.id, expires_delta=expires))


@cli.command()
def reindex() -> None:
    """Rebuild the search indexes from the database."""
    from shelfbase.infrastructure.persistence.database import get_db_manager
    from shelfbase.infrastructure.search import SearchIndexSynchronizer, SqliteSearchEngine

    settings = get_settings()
    configure_logging(settings)

    async def rebuild() -> dict[str, int]:
        db = get_db_manager()
        engine = SqliteSearchEngine(
            settings.search_database_url,
            timeout_seconds=settings.search_timeout_seconds,
        )
        try:
            await engine.connect()
            async with db.session() as session:
                return await SearchIndexSynchronizer(engine).reindex(session)
        finally:
            await engine.close()
            await db.disconnect()

    counts = asyncio.run(rebuild())
    for index, count in counts.items():
        click.echo(f"  {index:<12} {count} documents")
    click.echo("Search indexes rebuilt.")


@cli.command()
def info() -> None:
    """Display ShelfBase configuration and system information."""
    settings = get_settings()

    click.echo(f"""
ShelfBase v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Timeout:      {settings.store_timeout_seconds}s

Search:
  URL:          {settings.search_database_url}
  Timeout:      {settings.search_timeout_seconds}s
  Result Limit: {settings.search_result_limit}

Security:
  Token Expire: {settings.access_token_expire_minutes} minutes

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `shelfbase` command is run
    or when using `python -m shelfbase`.
    """
    cli()


if __name__ == "__main__":
    main()
