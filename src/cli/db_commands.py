"""Database maintenance CLI commands."""

import typer
from rich.panel import Panel

from src.leadsite.core.services import check_database_health
from src.leadsite.entities.core.user import UserRepository

from .utils import DATABASE_URL_OPTION, cli_config, console, database_service

db_app = typer.Typer(help="🗄️  Database maintenance commands")


@db_app.command("init")
def init_db(database_url: str | None = DATABASE_URL_OPTION) -> None:
    """Create the users table and its indexes if they do not exist."""
    console.print(
        Panel.fit(
            f"[bold cyan]Initializing {cli_config(database_url).database.masked_url}[/bold cyan]",
            border_style="cyan",
        )
    )
    with database_service(database_url) as service:
        if not service.initialize_schema():
            console.print("[red]❌ Database initialization failed, see the log above[/red]")
            raise typer.Exit(code=1)
    console.print("[green]✅ Database initialized[/green]")


@db_app.command("status")
def db_status(database_url: str | None = DATABASE_URL_OPTION) -> None:
    """Check connectivity and report the number of stored leads."""
    with database_service(database_url) as service:
        with service.get_session() as session:
            health = check_database_health(UserRepository(session))

    if health.status != "healthy":
        console.print(f"[red]❌ {health.message}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✅ {health.message}[/green] ({health.user_count} users)")
