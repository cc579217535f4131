"""Main CLI application module."""

import typer

from .db_commands import db_app
from .leads_commands import leads_app

# Create the main CLI application
app = typer.Typer(
    help="🛠️  Lead Site CLI - inspect and maintain the lead database",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(leads_app, name="leads")
app.add_typer(db_app, name="db")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
