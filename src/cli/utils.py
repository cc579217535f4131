"""Shared utilities for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from src.leadsite.core.services import DbSessionService
from src.leadsite.entities.core.user import UserRepository
from src.leadsite.runtime.config.config_data import ConfigData, DatabaseConfig
from src.leadsite.runtime.context import get_config, merge_configs

# Initialize Rich console for colored output
console = Console()

DATABASE_URL_OPTION = typer.Option(
    None,
    "--database-url",
    help="Database URL (defaults to the configured DATABASE_URL)",
)


def cli_config(database_url: str | None = None) -> ConfigData:
    """Current configuration, with the database URL replaced when given."""
    config = get_config()
    if database_url:
        config = merge_configs(
            config, ConfigData(database=DatabaseConfig(url=database_url))
        )
    return config


def connection_hint(exc: BaseException) -> str | None:
    """Suggest a fix for the common ways a local PostgreSQL connection fails."""
    original = getattr(exc, "orig", None) or exc
    code = getattr(original, "pgcode", None)
    text = str(original).lower()

    if "connection refused" in text or "could not connect" in text:
        return "Make sure PostgreSQL is running: sudo service postgresql status"
    if code == "28P01" or "password authentication failed" in text:
        return "Authentication failed. Check your database credentials."
    if code == "3D000" or ("database" in text and "does not exist" in text):
        return "Database does not exist. Check the database name in DATABASE_URL."
    return None


def fail(message: str, exc: BaseException) -> None:
    """Print ``message`` with the error and any hint, then exit with code 1."""
    console.print(f"[red]❌ {message}:[/red] {exc}")
    hint = connection_hint(exc)
    if hint:
        console.print(f"\n[yellow]💡 {hint}[/yellow]")
    raise typer.Exit(code=1) from exc


@contextmanager
def database_service(database_url: str | None = None) -> Iterator[DbSessionService]:
    """A service for the lifetime of one command; its pool is closed on exit."""
    service = DbSessionService(cli_config(database_url))
    try:
        yield service
    finally:
        service.close()


@contextmanager
def open_repository(database_url: str | None = None) -> Iterator[UserRepository]:
    """Repository over a fresh session; store errors end the command with exit 1."""
    with database_service(database_url) as service:
        session = service.get_session()
        try:
            yield UserRepository(session)
        except SQLAlchemyError as exc:
            fail("Error reading users from database", exc)
        finally:
            session.close()
