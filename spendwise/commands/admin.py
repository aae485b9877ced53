"""Admin commands for init, backup, export, import and clearing data."""

import json
import shutil
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

import typer

from spendwise.commands.common import console, open_ledger, report_error
from spendwise.config import create_default_config, get_config_path, get_db_path_override, load_config_or_default
from spendwise.errors import SpendwiseError
from spendwise.store.schema import database_exists, get_db_path, init_database


def resolve_db_path() -> Path:
    """Database path from config, falling back to the XDG default."""
    return get_db_path_override(load_config_or_default()) or get_db_path()


def init_command(force: bool = False) -> None:
    """Initialize spendwise database and configuration."""
    config_path = get_config_path()
    config_exists = config_path.exists()

    try:
        if config_exists and not force:
            console.print("[red]Initialization failed:[/red]", style="bold")
            console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'spendwise init --force' to overwrite[/yellow]")
            sys.exit(1)

        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

        db_path = resolve_db_path()
        console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
        init_database(db_path)
        console.print("[green]✓[/green] Database initialized")

        console.print("\n[green]Initialization complete![/green]", style="bold")
        console.print(f"[dim]Database: {db_path}[/dim]")
        console.print(f"[dim]Config: {config_path}[/dim]")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def backup_command(output_dir: str | None = None) -> None:
    """Backup database and configuration files."""
    db_path = resolve_db_path()
    config_path = get_config_path()

    if not database_exists(db_path):
        console.print("[red]Database not found. Run 'spendwise init' first.[/red]", style="bold")
        sys.exit(1)

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = db_path.parent / "backups"

    backup_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    try:
        db_backup = backup_dir / f"spendwise_{timestamp}.db"
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        if config_path.exists():
            config_backup = backup_dir / f"config_{timestamp}.toml"
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)


def export_command(output: str = "spendwise-backup.json") -> None:
    """Write all transactions and settings to a JSON file."""
    ledger = open_ledger()
    document = ledger.export_data()
    output_path = Path(output).expanduser()

    try:
        output_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Exported {len(document['transactions'])} transactions to {output_path}")


def import_command(input_path: str, yes: bool = False) -> None:
    """Replace all transactions (and settings, if present) with a JSON export."""
    path = Path(input_path).expanduser()

    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        console.print(f"[red]Could not read {path}: {e}[/red]", style="bold")
        sys.exit(1)
    except json.JSONDecodeError as e:
        console.print(f"[red]{path} is not valid JSON: {e}[/red]", style="bold")
        sys.exit(1)

    ledger = open_ledger()
    if not yes and not typer.confirm("Importing replaces all current transactions. Continue?", default=False):
        console.print("[dim]Cancelled[/dim]")
        return

    try:
        payload = ledger.import_data(document)
    except SpendwiseError as e:
        report_error(e)

    console.print(f"[green]✓[/green] Imported {len(payload.transactions)} transactions")
    if payload.settings is not None:
        console.print("[green]✓[/green] Settings replaced")


def clear_command(yes: bool = False) -> None:
    """Erase all transactions and settings."""
    ledger = open_ledger()
    if not yes and not typer.confirm("Delete ALL transactions and settings?", default=False):
        console.print("[dim]Cancelled[/dim]")
        return

    try:
        ledger.clear_all()
    except SpendwiseError as e:
        report_error(e)

    console.print("[green]✓[/green] All data cleared")
