"""AutoModel CLI - Main entry point."""

import logging

import typer
from rich.console import Console
from .commands import generate, runs
from .config import settings

app = typer.Typer(
    name="automodel",
    help="Generate Sequelize models from existing database schemas",
    add_completion=False,
)

# Add subcommands
app.command("generate")(generate.generate)
app.add_typer(runs.app, name="runs")

console = Console()


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Dialect: {settings.db_dialect or 'Not set'}")
    console.print(f"  Host: {settings.db_host}")
    console.print(f"  Port: {settings.db_port or 'Engine default'}")
    console.print(f"  Database: {settings.db_name or 'Not set'}")
    console.print(f"  Database file: {settings.db_path or 'Not set'}")
    console.print(f"  User: {settings.db_user or 'Not set'}")
    console.print(f"  Password: {'Configured' if settings.db_password else 'Not set'}")
    console.print(f"  Output directory: {settings.output_directory}")
    console.print(f"  Indentation: {settings.indentation} {'space(s)' if settings.spaces else 'tab(s)'}")
    console.print(f"  File extension: {settings.file_extension}")
    console.print(f"  Run history: {'Enabled' if settings.history_enabled else 'Disabled'}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """
    AutoModel CLI - Generate Sequelize ModelBuilder models from a database.

    Examples:

        automodel generate sqlite --path ./app.db -o ./models

        automodel generate postgres -d shop -u admin --dry-run

        automodel runs list
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
