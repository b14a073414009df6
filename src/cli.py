"""CLI interface for medcms."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from medcms.config import CMSConfig, load_config, merge_cli_overrides
from medcms.content.models import ContentRecord, UpdateRequest
from medcms.content.repository import ContentRepository
from medcms.content.storage import JsonFileStorage
from medcms.content.validation import validate as validate_candidate
from medcms.shared.errors import CMSError
from medcms.shared.timing import LoggingTimer

app = typer.Typer(
    name="medcms",
    help="Manage a local repository of medical-reference content.",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from medcms import __version__

        console.print(f"medcms {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", "-d", help="Directory holding the storage slots."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to a .medcms.toml file."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log repository activity to stderr."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """medcms - medical-reference content repository."""
    config = merge_cli_overrides(
        load_config(config_path),
        data_dir=data_dir,
        log_level="DEBUG" if verbose else None,
    )
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    ctx.obj = config


def _open_repository(ctx: typer.Context, allow_error: bool = False) -> ContentRepository:
    config: CMSConfig = ctx.obj
    repo = ContentRepository(
        JsonFileStorage(config.data_path),
        timer=LoggingTimer(),
        exported_by=config.export.exported_by,
    )
    asyncio.run(repo.load())
    if repo.error and not allow_error:
        console.print(f"[red]Error:[/red] {repo.error}")
        raise typer.Exit(1)
    return repo


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        console.print(f"[red]Error:[/red] Could not read {path}: {exc}")
        raise typer.Exit(1)
    if not isinstance(data, dict):
        console.print(f"[red]Error:[/red] {path} must contain a JSON object")
        raise typer.Exit(1)
    return data


def _fail(exc: CMSError) -> typer.Exit:
    console.print(f"[red]Error:[/red] {exc}")
    return typer.Exit(1)


def _print_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


def _confirm_warnings(warnings: list[str], assume_yes: bool) -> None:
    """Show warnings and stop unless the user chooses to continue."""
    if not warnings:
        return
    _print_warnings(warnings)
    if not assume_yes and not typer.confirm("Continue anyway?"):
        raise typer.Exit(1)


def _records_table(records: list[ContentRecord]) -> Table:
    table = Table(show_lines=False)
    table.add_column("ID", style="dim")
    table.add_column("Type")
    table.add_column("Title", style="bold")
    table.add_column("Urgency")
    table.add_column("Category")
    table.add_column("Status")
    table.add_column("Ver", justify="right")
    table.add_column("Updated")
    for r in records:
        meta = r.metadata
        table.add_row(
            r.id,
            r.content_type.value,
            r.title,
            meta.urgency.value if meta.urgency else "-",
            meta.category or "-",
            meta.status.value,
            str(meta.version),
            meta.last_updated.strftime("%Y-%m-%d %H:%M"),
        )
    return table


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    search: Annotated[str, typer.Option("--search", "-s", help="Substring to search for.")] = "",
    content_type: Annotated[str, typer.Option("--type", "-t", help="Content type or 'all'.")] = "all",
    urgency: Annotated[str, typer.Option("--urgency", "-u", help="Urgency or 'all'.")] = "all",
    status: Annotated[str, typer.Option("--status", help="Status or 'all'.")] = "all",
    sort_by: Annotated[
        str,
        typer.Option("--sort", help="title, lastUpdated, urgency or category."),
    ] = "lastUpdated",
    order: Annotated[str, typer.Option("--order", help="asc or desc.")] = "desc",
) -> None:
    """List records matching the given search and filters."""
    repo = _open_repository(ctx)
    try:
        repo.search(search)
        repo.set_filters(filter_type=content_type, filter_urgency=urgency, filter_status=status)
        repo.set_sorting(sort_by, order)  # type: ignore[arg-type]
    except ValueError as exc:
        console.print(f"[red]Error:[/red] Invalid filter or sort option: {exc}")
        raise typer.Exit(1)

    results = repo.filtered_content
    if not results:
        console.print("[yellow]No matching content.[/yellow]")
        return
    console.print(_records_table(results))
    console.print(f"{len(results)} of {len(repo.records)} record(s)")


@app.command()
def show(ctx: typer.Context, record_id: Annotated[str, typer.Argument(help="Record id.")]) -> None:
    """Print one record as JSON."""
    repo = _open_repository(ctx)
    record = repo.get(record_id)
    if record is None:
        console.print(f"[red]Error:[/red] No record with id {record_id}")
        raise typer.Exit(1)
    console.print_json(json.dumps(record.to_wire(), ensure_ascii=False))


@app.command()
def add(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="JSON file holding the new record.")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Proceed despite warnings.")] = False,
) -> None:
    """Add a record from a JSON file."""
    repo = _open_repository(ctx)
    payload = _read_json(file)
    result = repo.validate(payload)
    if result.is_valid:
        _confirm_warnings(result.warnings, yes)
    try:
        record = repo.add(payload)
    except CMSError as exc:
        raise _fail(exc) from exc
    console.print(f"[green]Added[/green] {record.id}: {record.title}")


@app.command()
def update(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="Record id.")],
    file: Annotated[Path, typer.Argument(help="JSON file holding the fields to change.")],
) -> None:
    """Update a record from a JSON file of changed fields."""
    repo = _open_repository(ctx)
    try:
        request = UpdateRequest.model_validate(_read_json(file))
    except ValueError as exc:
        console.print(f"[red]Error:[/red] Invalid update: {exc}")
        raise typer.Exit(1)
    try:
        record = repo.update(record_id, request)
    except KeyError:
        console.print(f"[red]Error:[/red] No record with id {record_id}")
        raise typer.Exit(1)
    except CMSError as exc:
        raise _fail(exc) from exc
    _print_warnings(repo.last_warnings)
    console.print(f"[green]Updated[/green] {record.id} to version {record.metadata.version}")


@app.command()
def delete(ctx: typer.Context, record_id: Annotated[str, typer.Argument(help="Record id.")]) -> None:
    """Delete a record."""
    repo = _open_repository(ctx)
    existed = repo.get(record_id) is not None
    repo.delete(record_id)
    if existed:
        console.print(f"[green]Deleted[/green] {record_id}")
    else:
        console.print(f"[yellow]No record with id {record_id}[/yellow]")


@app.command()
def duplicate(
    ctx: typer.Context, record_id: Annotated[str, typer.Argument(help="Record id.")]
) -> None:
    """Copy a record as a new draft."""
    repo = _open_repository(ctx)
    try:
        copy = repo.duplicate(record_id)
    except CMSError as exc:
        raise _fail(exc) from exc
    if copy is None:
        console.print(f"[red]Error:[/red] No record with id {record_id}")
        raise typer.Exit(1)
    console.print(f"[green]Duplicated[/green] {record_id} as {copy.id}: {copy.title}")


@app.command()
def stats(ctx: typer.Context) -> None:
    """Show aggregate statistics."""
    repo = _open_repository(ctx)
    s = repo.stats

    console.print(f"[bold]Total content:[/bold] {s.total_content}")
    for label, counts in (
        ("By type", s.by_type),
        ("By urgency", s.by_urgency),
        ("By status", s.by_status),
    ):
        table = Table(title=label)
        table.add_column("Value")
        table.add_column("Count", justify="right")
        for key, count in sorted(counts.items()):
            table.add_row(key, str(count))
        console.print(table)

    console.print("[bold]Recently updated:[/bold]")
    for r in s.recently_updated:
        console.print(f"  - {r.title} ({r.metadata.last_updated.isoformat()})")
    console.print(f"[bold]Needs review:[/bold] {len(s.needs_review)}")
    for r in s.needs_review:
        console.print(f"  - {r.id}: {r.title}")


@app.command()
def export(
    ctx: typer.Context,
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Directory for the export file."),
    ] = None,
    fmt: Annotated[str, typer.Option("--format", "-f", help="Export format.")] = "json",
) -> None:
    """Export the whole collection to a dated JSON file."""
    repo = _open_repository(ctx)
    config: CMSConfig = ctx.obj
    try:
        path = repo.export_to(out or config.export_path, fmt)
    except CMSError as exc:
        raise _fail(exc) from exc
    console.print(f"[green]Exported[/green] {len(repo.records)} record(s) to {path}")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="JSON export or bare list of records.")],
) -> None:
    """Append every record in an import file to the collection."""
    repo = _open_repository(ctx)
    try:
        count = asyncio.run(repo.import_file(file))
    except CMSError as exc:
        raise _fail(exc) from exc
    console.print(f"[green]Imported[/green] {count} record(s)")


@app.command()
def validate(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="JSON file holding a candidate record.")],
) -> None:
    """Check a candidate record without storing it."""
    result = validate_candidate(_read_json(file))
    for error in result.errors:
        console.print(f"[red]Error:[/red] {error}")
    _print_warnings(result.warnings)
    if not result.is_valid:
        raise typer.Exit(1)
    console.print("[green]Valid[/green]")


@app.command("restore-backup")
def restore_backup(ctx: typer.Context) -> None:
    """Replace the collection with the last backup snapshot."""
    repo = _open_repository(ctx, allow_error=True)
    try:
        count = repo.restore_backup()
    except CMSError as exc:
        raise _fail(exc) from exc
    console.print(f"[green]Restored[/green] {count} record(s) from backup")


if __name__ == "__main__":
    app()
