"""Model generation command - writes one Sequelize model per database table."""

import asyncio
import typer
from typing import Any, Dict, List, Optional
from typing_extensions import Annotated
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..config import GeneratorOptions, settings
from ..database import create_client
from ..errors import AutoModelError, GenerationError
from ..history import get_recorder
from ..sequelize import GenerationResult, ModelGenerator

console = Console()

_LITERALS = {"true": True, "false": False, "null": None}


def parse_additional(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """Parse repeated ``key=value`` options into an ordered mapping.

    ``true``, ``false`` and ``null`` become their Python values and integers
    are converted; anything else is kept as text and emitted verbatim.

    Raises:
        GenerationError: If a pair has no ``=`` or an empty key
    """
    additional: Dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise GenerationError(
                f"Invalid model option '{pair}', expected key=value",
                details={"option": pair},
            )
        raw = raw.strip()
        if raw.lower() in _LITERALS:
            value = _LITERALS[raw.lower()]
        else:
            try:
                value = int(raw)
            except ValueError:
                value = raw
        additional[key] = value
    return additional


def _show_result(result: GenerationResult, dry_run: bool) -> None:
    if dry_run:
        for table, text in result.models.items():
            console.rule(f"[cyan]{table}[/cyan]")
            typer.echo(text, nl=False)
    else:
        files = Table(title="Generated Models")
        files.add_column("Table", style="cyan")
        files.add_column("File", style="green")
        for table, path in zip(result.models, result.paths):
            files.add_row(table, str(path))
        console.print(files)

    console.print(
        f"\n[bold]Total: {result.tables_count} models, "
        f"{result.columns_count} columns, {result.references_count} references[/bold]"
    )


def generate(
    dialect: Optional[str] = typer.Argument(
        None, help="Database engine: sqlite, postgres, mysql, mssql or duckdb (or DB_DIALECT env)"
    ),
    database: Optional[str] = typer.Option(None, "--database", "-d", help="Database name (or DB_NAME env)"),
    host: Optional[str] = typer.Option(None, "--host", help="Database host (or DB_HOST env)"),
    port: Optional[int] = typer.Option(None, "--port", help="Database port (or DB_PORT env)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Database user (or DB_USER env)"),
    password: Optional[str] = typer.Option(None, "--password", help="Database password (or DB_PASSWORD env)"),
    path: Optional[str] = typer.Option(None, "--path", help="Database file for sqlite and duckdb (or DB_PATH env)"),
    output_dir: Optional[str] = typer.Option(None, "--output", "-o", help="Directory to write models to"),
    indentation: Optional[int] = typer.Option(None, "--indentation", "-i", min=0, help="Indent units per nesting level"),
    spaces: Optional[bool] = typer.Option(None, "--spaces/--tabs", help="Indent with spaces or tabs"),
    tables: Annotated[Optional[List[str]], typer.Option(
        "--table", "-t",
        help="Only generate this table. Can be specified multiple times."
    )] = None,
    additional: Annotated[Optional[List[str]], typer.Option(
        "--additional", "-a",
        help="Extra model option as key=value (use name=true for singular/plural naming). Can be specified multiple times."
    )] = None,
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the models instead of writing them"),
):
    """
    Generate Sequelize ModelBuilder models from a database schema.

    Examples:
        automodel generate sqlite --path ./app.db
        automodel generate postgres -d shop -u admin -o ./models --spaces -i 2
        automodel generate mysql -d shop -t users -t orders -a timestamps=false
        DB_DIALECT=sqlite DB_PATH=./app.db automodel generate
    """
    dialect = dialect or settings.db_dialect
    if not dialect:
        console.print("[red]No database engine given. Pass DIALECT or set DB_DIALECT.[/red]")
        raise typer.Exit(1)

    try:
        options = GeneratorOptions.from_settings(
            settings,
            directory=output_dir,
            indentation=indentation,
            spaces=spaces,
            tables=tables or None,
            additional=parse_additional(additional),
        )
        client = create_client(
            dialect,
            database=database or settings.db_name,
            host=host or settings.db_host,
            port=port or settings.db_port,
            user=user or settings.db_user,
            password=password or settings.db_password,
            path=path or settings.db_path,
            schema=settings.db_schema,
        )
    except AutoModelError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    console.print(Panel(
        f"[bold blue]Generating Sequelize models from {client.dialect}[/bold blue]\n"
        f"Database: {client.database_name}\n"
        f"Tables: {', '.join(options.tables) if options.tables else 'All tables'}\n"
        f"Output: {'stdout (dry run)' if dry_run else options.directory}",
        title="AutoModel Generator"
    ))

    try:
        with get_recorder().record(
            client.dialect,
            client.database_name,
            output_directory=None if dry_run else options.directory,
            tables=options.tables,
            dry_run=dry_run,
        ) as run:
            with client, Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task("Introspecting tables and generating models...", total=None)
                generator = ModelGenerator(client, options)
                result = asyncio.run(generator.run(write=not dry_run))

            run.record(result)

    except ImportError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except AutoModelError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error generating models: {e}[/red]")
        raise typer.Exit(1)

    if result.tables_count == 0:
        console.print("[yellow]No tables found in the specified database[/yellow]")
        return

    _show_result(result, dry_run)
