"""
reflect: command line interface for the Reflect knowledge base

Usage:
    reflect serve                         # Run the REST API
    reflect list vim                      # List a collection
    reflect search notes "visual"         # One-shot tag filter
    reflect browse vim                    # Interactive, debounced tag filter
    reflect import-vim inventory/vim.json # Load the legacy vim inventory
"""

import asyncio
import json
from pathlib import Path

import click
from pymongo.errors import PyMongoError

from . import __version__
from ._logging import configure_logging
from .config import COLLECTIONS, ConfigurationError, get_filter_delay_ms
from .inventory import InventoryError, load_vim_inventory
from .models import to_document
from .search import FilterController, filter_records
from .store import CollectionStore, StoreError

# Columns shown in table output, per collection
LIST_COLUMNS = {
    "notes": ["_id", "title", "search"],
    "report": ["_id", "date", "done"],
    "vim": ["_id", "title", "keyBinding", "action"],
}


# ─────────────────────────────────────────────────────────────────────────────
# Output Formatting
# ─────────────────────────────────────────────────────────────────────────────


def _cell(value) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return "" if value is None else str(value)


def format_table(rows: list[dict], columns: list[str], max_widths: dict | None = None) -> str:
    """Format rows as a simple table."""
    if not rows:
        return ""

    max_widths = max_widths or {}

    def clip(col: str, row: dict) -> str:
        val = _cell(row.get(col))
        limit = max_widths.get(col, 50)
        if len(val) > limit:
            val = val[: limit - 3] + "..."
        return val

    widths = {col: len(col) for col in columns}
    for row in rows:
        for col in columns:
            widths[col] = max(widths[col], len(clip(col, row)))

    header = "  ".join(col.upper().ljust(widths[col]) for col in columns)
    separator = "  ".join("-" * widths[col] for col in columns)

    lines = [header, separator]
    for row in rows:
        lines.append("  ".join(clip(col, row).ljust(widths[col]) for col in columns))

    return "\n".join(lines).rstrip()


def output_entries(collection: str, entries: list[dict], as_json: bool) -> None:
    """Print entries as JSON or as a table."""
    if as_json:
        click.echo(json.dumps(entries, indent=2, default=str))
    elif not entries:
        click.echo("No entries found.")
    else:
        click.echo(format_table(entries, LIST_COLUMNS[collection], {"_id": 24}))


def _entry_label(entry: dict) -> str:
    return str(entry.get("title") or entry.get("date") or entry.get("_id", "?"))


def _open_store(collection: str) -> CollectionStore:
    from .db import get_database

    try:
        return CollectionStore(get_database(), collection)
    except ConfigurationError as e:
        raise click.ClickException(str(e))


def _load_entries(collection: str) -> list[dict]:
    try:
        return _open_store(collection).list_all()
    except PyMongoError as e:
        raise click.ClickException(f"Database error: {e}")


# ─────────────────────────────────────────────────────────────────────────────
# Main CLI Group
# ─────────────────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=__version__, prog_name="reflect")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
def cli(verbose: bool):
    """reflect: vim commands, daily reports and notes.

    \b
    Quick start:
      reflect serve                 # Start the API on port 5000
      reflect search vim movement   # Filter vim commands by tag
    """
    configure_logging("DEBUG" if verbose else None)


collection_argument = click.argument("collection", type=click.Choice(COLLECTIONS))


@cli.command()
@click.option("--host", default=None, help="Bind address (default: $HOST or 0.0.0.0)")
@click.option("--port", "-p", type=int, default=None, help="Port (default: $PORT or 5000)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the REST API server."""
    from .webapp.api import main

    try:
        main(host=host, port=port, reload=reload)
    except ConfigurationError as e:
        raise click.ClickException(str(e))


@cli.command("list")
@collection_argument
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_cmd(collection: str, as_json: bool):
    """List every entry in a collection."""
    entries = _load_entries(collection)
    output_entries(collection, entries, as_json)


@cli.command()
@collection_argument
@click.argument("term")
@click.option("--ignore-case", "-i", is_flag=True, help="Case-insensitive match")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search(collection: str, term: str, ignore_case: bool, as_json: bool):
    """Show entries with a search tag containing TERM.

    \b
    Examples:
      reflect search vim defin
      reflect search notes VISUAL -i
    """
    entries = _load_entries(collection)
    matched = filter_records(term, entries, case_sensitive=not ignore_case)
    output_entries(collection, matched, as_json)


async def _browse(entries: list[dict], delay_ms: int, case_sensitive: bool) -> None:
    loop = asyncio.get_running_loop()
    stdin = click.get_text_stream("stdin")

    def render(filtered: list[dict]) -> None:
        click.echo(f"-- {len(filtered)} of {len(entries)} entries")
        for entry in filtered:
            click.echo(f"  {_entry_label(entry)}")

    with FilterController(
        entries, delay_ms, case_sensitive=case_sensitive, on_change=render
    ) as controller:
        render(controller.filtered)
        while True:
            line = await loop.run_in_executor(None, stdin.readline)
            if not line:
                controller.flush()
                break
            controller.on_search_term_change(line.rstrip("\r\n"))


@cli.command()
@collection_argument
@click.option("--delay-ms", type=click.IntRange(min=0), default=None,
              help="Quiet period before filtering (default: $REFLECT_FILTER_DELAY_MS or 1000)")
@click.option("--ignore-case", "-i", is_flag=True, help="Case-insensitive match")
def browse(collection: str, delay_ms: int | None, ignore_case: bool):
    """Filter a collection interactively.

    Each line read from stdin replaces the search term. Results are printed
    once typing pauses; an empty line shows everything again. Ctrl-D exits.
    """
    if delay_ms is None:
        try:
            delay_ms = get_filter_delay_ms()
        except ConfigurationError as e:
            raise click.ClickException(str(e))
    entries = _load_entries(collection)
    asyncio.run(_browse(entries, delay_ms, case_sensitive=not ignore_case))


@cli.command("import-vim")
@click.argument("inventory", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Validate and report without inserting")
def import_vim(inventory: Path, dry_run: bool):
    """Import vim commands from a legacy inventory JSON file."""
    try:
        commands = load_vim_inventory(inventory)
    except InventoryError as e:
        raise click.ClickException(str(e))

    if dry_run:
        click.echo(f"Would import {len(commands)} vim commands:")
        for command in commands:
            click.echo(f"  {command.title}")
        return

    try:
        ids = _open_store("vim").insert_many([to_document(c) for c in commands])
    except (StoreError, PyMongoError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Imported {len(ids)} vim commands.")


if __name__ == "__main__":
    cli()
