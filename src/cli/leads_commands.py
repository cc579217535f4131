"""Lead inspection CLI commands."""

import json
from enum import Enum

import typer
from rich.prompt import Confirm
from rich.table import Table

from src.leadsite.entities.core.user import User

from .utils import DATABASE_URL_OPTION, cli_config, console, open_repository

leads_app = typer.Typer(help="📇 Read and maintain registered leads")


class OutputFormat(str, Enum):
    table = "table"
    json = "json"


def _user_json(user: User) -> dict:
    return {
        "id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "email": user.email,
        "company": user.company,
        "phone": user.phone,
        "message": user.message,
        "createdAt": user.created_at.isoformat(),
        "updatedAt": user.updated_at.isoformat(),
    }


def _users_table(users: list[User]) -> Table:
    table = Table(title=f"Found {len(users)} user(s)")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="green")
    table.add_column("Email", style="blue")
    table.add_column("Company", style="magenta")
    table.add_column("Phone")
    table.add_column("Message", overflow="fold")
    table.add_column("Created", style="yellow")

    for user in users:
        table.add_row(
            str(user.id),
            user.full_name,
            user.email,
            user.company,
            user.phone,
            user.message or "(empty)",
            user.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    return table


def _masked(database_url: str | None) -> str:
    return cli_config(database_url).database.masked_url


@leads_app.command("list")
def list_leads(
    recent: int | None = typer.Option(
        None, "--recent", "-r", min=1, help="Only leads created in the last N days"
    ),
    search: str | None = typer.Option(
        None, "--search", "-s", help="Search by name, email or company"
    ),
    company: str | None = typer.Option(
        None, "--company", "-c", help="Only leads from this exact company"
    ),
    limit: int | None = typer.Option(
        None, "--limit", "-l", min=1, help="Maximum number of leads to show"
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.table, "--format", "-f", help="Output format"
    ),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """List registered leads, newest first.

    ``--search`` wins over ``--company``, which wins over ``--recent``.
    """
    if output is OutputFormat.table:
        console.print(f"[blue]Connection:[/blue] {_masked(database_url)}")

    with open_repository(database_url) as repository:
        if search:
            users = repository.search(search)
            heading = f'Search results for: "{search}"'
        elif company:
            users = repository.list_by_company(company)
            heading = f'Users from company: "{company}"'
        elif recent is not None:
            users = repository.list_recent(recent)
            heading = f"Showing users from last {recent} days"
        else:
            users = repository.list_all()
            heading = "All users"
        total = repository.count()

    if limit is not None:
        users = users[:limit]

    if output is OutputFormat.json:
        typer.echo(json.dumps([_user_json(user) for user in users], indent=2))
        return

    console.print(f"[green]Total users in database: {total}[/green]")
    console.print(heading)
    if not users:
        console.print("[yellow]No users found.[/yellow]")
        return
    console.print(_users_table(users))


@leads_app.command("count")
def count_leads(database_url: str | None = DATABASE_URL_OPTION) -> None:
    """Print the number of registered leads."""
    with open_repository(database_url) as repository:
        total = repository.count()
    typer.echo(total)


@leads_app.command("delete")
def delete_lead(
    user_id: int = typer.Argument(..., min=1, help="ID of the lead to delete"),
    force: bool = typer.Option(False, "--force", help="Skip confirmation prompt"),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Hard-delete a lead by id."""
    with open_repository(database_url) as repository:
        user = repository.get_by_id(user_id)
        if user is None:
            console.print(f"[red]❌ User {user_id} not found[/red]")
            raise typer.Exit(code=1)

        if not force and not Confirm.ask(
            f"Are you sure you want to delete {user.full_name} <{user.email}>?"
        ):
            console.print("[yellow]Deletion cancelled[/yellow]")
            return

        repository.delete(user_id)

    console.print(f"[green]✅ Deleted user {user_id}[/green]")
