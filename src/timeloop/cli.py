"""CLI interface for Timeloop."""

import asyncio
import logging
import re
from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timeloop.config import configure_logging, get_settings
from timeloop.database import Database
from timeloop.durations import DurationError, DurationMode, format_duration, parse_duration
from timeloop.periods import DateRange, Period, resolve_period
from timeloop.schemas.category import HEX_COLOR_PATTERN
from timeloop.services.tracking_service import (
    CategoryService,
    EntryService,
    TimeRecordService,
)
from timeloop.services.totals_service import TotalsService, filter_totals, sum_durations

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="timeloop",
    help="Timeloop - log time against activities and see where it went.",
    no_args_is_help=True,
)
category_app = typer.Typer(help="Manage categories.", no_args_is_help=True)
app.add_typer(category_app, name="category")

console = Console()


def run_async(coro):
    """Run async function in sync context, reporting store failures."""
    try:
        return asyncio.run(coro)
    except SQLAlchemyError:
        logger.exception("Store error")
        console.print("[red]Unable to perform action.[/red]")
        raise typer.Exit(1)


@asynccontextmanager
async def open_store():
    """Open the configured store and yield one transactional session."""
    settings = get_settings()
    configure_logging(settings, settings.cli_log_level)
    database = Database(settings.database_url, echo=settings.debug)
    await database.open()
    try:
        await database.create_all()
        async with database.transaction() as session:
            yield session
    finally:
        await database.close()


def parse_date(value: Optional[str], label: str = "date") -> Optional[date]:
    """Parse a YYYY-MM-DD option, exiting on bad input."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Invalid {label}: {value}[/red]")
        console.print("Use format: YYYY-MM-DD")
        raise typer.Exit(1)


def parse_window(period: Period, start: Optional[str], end: Optional[str]) -> Optional[DateRange]:
    """Resolve period options, exiting on bad input."""
    try:
        return resolve_period(
            period,
            start=parse_date(start, "start date"),
            end=parse_date(end, "end date"),
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def check_color(color: Optional[str]) -> None:
    """Exit unless color is empty or a #RRGGBB hex value."""
    if color and not re.fullmatch(HEX_COLOR_PATTERN, color):
        console.print(f"[red]Invalid color: {color}[/red]")
        console.print("Use a hex color like #22c55e")
        raise typer.Exit(1)


def describe_window(window: Optional[DateRange]) -> str:
    if window is None:
        return "all time"
    return f"{window.start.isoformat()} to {window.end.isoformat()}"


async def resolve_category(session: AsyncSession, name: str, create: bool = False) -> Optional[int]:
    """Find a category by name, optionally creating it."""
    service = CategoryService(session)
    category = await service.get_by_name(name)
    if category is None and create:
        category = await service.create(name=name.strip(), color=get_settings().default_category_color)
    return category.id if category else None


async def require_category(session: AsyncSession, name: str) -> int:
    """Resolve an existing category by name, exiting if there is none."""
    category_id = await resolve_category(session, name)
    if category_id is None:
        console.print(f"[red]Category not found: {name}[/red]")
        raise typer.Exit(1)
    return category_id


@app.command()
def track(
    title: str = typer.Argument(..., help="Entry title (created if new)"),
    duration: str = typer.Argument(..., help="Minutes, hours or HH:MM-HH:MM depending on --mode"),
    mode: DurationMode = typer.Option(DurationMode.MINUTES, "--mode", "-m", help="How to read DURATION"),
    on: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD), default today"),
    note: Optional[str] = typer.Option(None, "--note", "-n", help="Free-text note"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category for a new entry"),
):
    """Log time against an entry, creating the entry if needed."""
    title = title.strip()
    if not title:
        console.print("[red]Title must not be empty.[/red]")
        raise typer.Exit(1)
    try:
        minutes = parse_duration(duration, mode)
    except DurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    day = parse_date(on) or date.today()

    async def _track():
        async with open_store() as session:
            entry_service = EntryService(session)
            entry = await entry_service.get_by_title(title)
            if entry is None:
                category_id = None
                if category:
                    category_id = await resolve_category(session, category, create=True)
                entry = await entry_service.create(title, category_id)
                console.print(f"[dim]New entry #{entry.id}[/dim]")
            elif category:
                console.print(
                    "[yellow]Existing entry keeps its category; "
                    "use 'assign' to change it.[/yellow]"
                )

            await TimeRecordService(session).create(
                entry_id=entry.id,
                duration=minutes,
                date=day,
                note=(note or "").strip() or None,
            )

            console.print(Panel(
                f"[green]Logged:[/green] {format_duration(minutes)} on {entry.title}\n"
                f"[dim]{day.isoformat()}[/dim]",
                title="Time Tracked",
            ))

    run_async(_track())


@app.command("entries")
def list_entries(
    period: Period = typer.Option(Period.ALL, "--period", "-p", help="Only entries with time in this period"),
    start: Optional[str] = typer.Option(None, "--start", help="Custom period start (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", help="Custom period end (YYYY-MM-DD)"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Title contains"),
):
    """List entries."""
    window = parse_window(period, start, end)

    async def _list():
        async with open_store() as session:
            entries = await EntryService(session).get_all(window)
            if search:
                needle = search.strip().lower()
                entries = [e for e in entries if needle in e.title.lower()]

            if not entries:
                console.print("[dim]No entries found.[/dim]")
                return

            table = Table(title=f"Entries ({len(entries)})")
            table.add_column("ID", style="dim", justify="right")
            table.add_column("Title", style="bold")
            table.add_column("Category", style="cyan")

            for entry in entries:
                table.add_row(str(entry.id), entry.title, entry.category_name or "")

            console.print(table)

    run_async(_list())


@app.command("log")
def recent_log(
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, help="Rows to show"),
    offset: int = typer.Option(0, "--offset", min=0, help="Rows to skip"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only entries in this category"),
):
    """Show recently logged time across all entries."""

    async def _log():
        async with open_store() as session:
            category_id = await require_category(session, category) if category else None
            records = await TimeRecordService(session).get_recent(
                limit=limit or get_settings().recent_records_limit,
                offset=offset,
                category_id=category_id,
            )

            if not records:
                console.print("[dim]No time logged yet.[/dim]")
                return

            table = Table(title="Recent Time")
            table.add_column("ID", style="dim", justify="right")
            table.add_column("Date", width=10)
            table.add_column("Entry", style="bold")
            table.add_column("Time", justify="right", style="green")
            table.add_column("Note")

            for record in records:
                table.add_row(
                    str(record.id),
                    record.date.isoformat(),
                    record.entry_title,
                    format_duration(record.duration),
                    record.note or "",
                )

            console.print(table)

    run_async(_log())


@app.command()
def history(
    entry_id: int = typer.Argument(..., help="Entry ID"),
):
    """Show every time record of one entry."""

    async def _history():
        async with open_store() as session:
            entry = await EntryService(session).get_by_id(entry_id)
            if not entry:
                console.print(f"[red]Entry not found: {entry_id}[/red]")
                raise typer.Exit(1)

            records = await TimeRecordService(session).get_for_entry(entry_id)
            total = sum(r.duration for r in records)

            table = Table(title=f"{entry.title} ({format_duration(total)})")
            table.add_column("ID", style="dim", justify="right")
            table.add_column("Date", width=10)
            table.add_column("Time", justify="right", style="green")
            table.add_column("Note")

            for record in records:
                table.add_row(
                    str(record.id),
                    record.date.isoformat(),
                    format_duration(record.duration),
                    record.note or "",
                )

            console.print(table)

    run_async(_history())


@app.command()
def totals(
    period: Period = typer.Option(Period.LAST_30_DAYS, "--period", "-p", help="Period to total"),
    start: Optional[str] = typer.Option(None, "--start", help="Custom period start (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", help="Custom period end (YYYY-MM-DD)"),
    include_empty: bool = typer.Option(False, "--include-empty", help="Also list entries without time"),
    search: str = typer.Option("", "--search", "-s", help="Title contains"),
    select: Optional[List[int]] = typer.Option(None, "--select", help="Entry ID to sum (repeatable)"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only entries in this category"),
):
    """Show time per entry for a period."""
    window = parse_window(period, start, end)
    selected = set(select or [])

    async def _totals():
        async with open_store() as session:
            category_id = await require_category(session, category) if category else None
            service = TotalsService(session)
            rows = await service.get_entry_totals(
                window,
                include_empty=include_empty,
                category_id=category_id,
            )
            rows = filter_totals(rows, search, selected)

            if not rows:
                console.print(f"[dim]No time logged for {describe_window(window)}.[/dim]")
                return

            table = Table(title=f"Totals, {describe_window(window)}")
            table.add_column("", width=1)
            table.add_column("ID", style="dim", justify="right")
            table.add_column("Entry", style="bold")
            table.add_column("Category", style="cyan")
            table.add_column("Time", justify="right", style="green")
            table.add_column("Records", justify="right")
            table.add_column("Last", width=10)

            for row in rows:
                table.add_row(
                    "*" if row.id in selected else "",
                    str(row.id),
                    row.title,
                    row.category_name or "",
                    format_duration(row.total_duration),
                    str(row.entry_count),
                    row.last_date.isoformat() if row.last_date else "",
                )

            console.print(table)
            console.print(f"Total: [bold]{format_duration(sum_durations(rows))}[/bold]")

            if selected:
                picked = await service.calculate_total(selected, window)
                console.print(f"Selected: [bold green]{format_duration(picked)}[/bold green]")

    run_async(_totals())


@app.command("edit-record")
def edit_record(
    record_id: int = typer.Argument(..., help="Time record ID"),
    duration: Optional[str] = typer.Option(None, "--duration", help="New duration"),
    mode: DurationMode = typer.Option(DurationMode.MINUTES, "--mode", "-m", help="How to read --duration"),
    on: Optional[str] = typer.Option(None, "--date", "-d", help="New date (YYYY-MM-DD)"),
    note: Optional[str] = typer.Option(None, "--note", "-n", help="New note ('' clears it)"),
):
    """Change a logged time record."""
    minutes = None
    if duration is not None:
        try:
            minutes = parse_duration(duration, mode)
        except DurationError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
    day = parse_date(on)

    async def _edit():
        async with open_store() as session:
            service = TimeRecordService(session)
            record = await service.get_by_id(record_id)
            if not record:
                console.print(f"[red]Time record not found: {record_id}[/red]")
                raise typer.Exit(1)

            await service.update(
                record_id,
                duration=minutes if minutes is not None else record.duration,
                date=day or record.date,
                note=record.note if note is None else (note.strip() or None),
            )
            console.print(f"[green]Updated:[/green] record {record_id}")

    run_async(_edit())


@app.command("delete-record")
def delete_record(
    record_id: int = typer.Argument(..., help="Time record ID"),
):
    """Delete a logged time record."""

    async def _delete():
        async with open_store() as session:
            await TimeRecordService(session).delete(record_id)
            console.print(f"[red]Deleted:[/red] record {record_id}")

    run_async(_delete())


@app.command()
def rename(
    entry_id: int = typer.Argument(..., help="Entry ID"),
    title: str = typer.Argument(..., help="New title"),
):
    """Rename an entry."""
    title = title.strip()
    if not title:
        console.print("[red]Title must not be empty.[/red]")
        raise typer.Exit(1)

    async def _rename():
        async with open_store() as session:
            service = EntryService(session)
            entry = await service.get_by_id(entry_id)
            if not entry:
                console.print(f"[red]Entry not found: {entry_id}[/red]")
                raise typer.Exit(1)
            await service.update(entry_id, title, entry.category_id)
            console.print(f"[green]Renamed:[/green] {entry_id} -> {title}")

    run_async(_rename())


@app.command()
def assign(
    entry_ids: List[int] = typer.Argument(..., help="Entry IDs"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category name"),
    clear: bool = typer.Option(False, "--none", help="Remove the category instead"),
):
    """Put several entries in a category."""
    if not clear and not category:
        console.print("[red]Give --category NAME or --none.[/red]")
        raise typer.Exit(1)

    async def _assign():
        async with open_store() as session:
            category_id = None
            if not clear:
                category_id = await require_category(session, category)
            await EntryService(session).assign_category(entry_ids, category_id)
            console.print(f"[green]Updated {len(entry_ids)} entries.[/green]")

    run_async(_assign())


@app.command()
def delete(
    entry_ids: List[int] = typer.Argument(..., help="Entry IDs"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete entries together with all their logged time."""
    if not force:
        confirm = typer.confirm(f"Delete {len(entry_ids)} entries and all their time?")
        if not confirm:
            raise typer.Abort()

    async def _delete():
        async with open_store() as session:
            await EntryService(session).delete_many(entry_ids)
            console.print(f"[red]Deleted {len(entry_ids)} entries.[/red]")

    run_async(_delete())


@category_app.command("list")
def list_categories():
    """List all categories."""

    async def _categories():
        async with open_store() as session:
            cats = await CategoryService(session).get_all()

            if not cats:
                console.print("[dim]No categories found.[/dim]")
                return

            table = Table(title="Categories")
            table.add_column("ID", style="dim", justify="right")
            table.add_column("Name", style="bold")
            table.add_column("Color")

            for cat in cats:
                table.add_row(str(cat.id), cat.name, cat.color)

            console.print(table)

    run_async(_categories())


@category_app.command("add")
def add_category(
    name: str = typer.Argument(..., help="Category name"),
    color: Optional[str] = typer.Option(None, "--color", help="Hex color like #22c55e"),
):
    """Create a category."""
    name = name.strip()
    if not name:
        console.print("[red]Name must not be empty.[/red]")
        raise typer.Exit(1)
    check_color(color)

    async def _add():
        async with open_store() as session:
            cat = await CategoryService(session).create(
                name=name,
                color=color or get_settings().default_category_color,
            )
            console.print(f"[green]Created:[/green] {cat.name} [dim](ID: {cat.id})[/dim]")

    run_async(_add())


@category_app.command("edit")
def edit_category(
    category_id: int = typer.Argument(..., help="Category ID"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    color: Optional[str] = typer.Option(None, "--color", help="New hex color"),
):
    """Rename or recolor a category."""
    check_color(color)

    async def _edit():
        async with open_store() as session:
            service = CategoryService(session)
            cat = await service.get_by_id(category_id)
            if not cat:
                console.print(f"[red]Category not found: {category_id}[/red]")
                raise typer.Exit(1)
            await service.update(
                category_id,
                name=(name or "").strip() or cat.name,
                color=color or cat.color,
            )
            console.print(f"[green]Updated:[/green] category {category_id}")

    run_async(_edit())


@category_app.command("delete")
def delete_category(
    category_id: int = typer.Argument(..., help="Category ID"),
):
    """Delete a category. Its entries are kept, uncategorized."""

    async def _delete():
        async with open_store() as session:
            await CategoryService(session).delete(category_id)
            console.print(f"[red]Deleted:[/red] category {category_id}")

    run_async(_delete())


@app.command()
def server(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind to"),
):
    """Start the API server."""
    from timeloop.main import run_server

    settings = get_settings()
    console.print(
        f"[green]Starting Timeloop server at "
        f"http://{host or settings.api_host}:{port or settings.api_port}[/green]"
    )
    console.print("[dim]Press Ctrl+C to stop[/dim]")
    run_server(host=host, port=port)


if __name__ == "__main__":
    app()
