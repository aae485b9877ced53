"""Database location and the documents table."""

import os
import sqlite3
from pathlib import Path

APP_DIR = "spendwise"
DB_FILENAME = "spendwise.db"

DOCUMENTS_TABLE = """
    CREATE TABLE IF NOT EXISTS documents (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
"""


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    return Path(os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share")


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / APP_DIR / DB_FILENAME


def database_exists(db_path: Path | None = None) -> bool:
    """Report whether the database file is already on disk."""
    return (db_path or get_db_path()).exists()


def init_database(db_path: Path | None = None) -> None:
    """Create the database file and the documents table if missing.

    Each document row holds one JSON value keyed by name, e.g. the
    transaction list or the settings object.

    Args:
        db_path: Database file. Defaults to the XDG location.

    Raises:
        sqlite3.Error: If the table cannot be created.
        OSError: If the parent directory cannot be created.
    """
    db_path = db_path or get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    try:
        conn.execute(DOCUMENTS_TABLE)
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
