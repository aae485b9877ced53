"""SQL for reading and writing named JSON documents.

Values are stored as raw JSON text; encoding and decoding happen in
``spendwise.store.documents``.
"""

import sqlite3
from collections.abc import Iterable, Mapping
from pathlib import Path

from spendwise.store.schema import get_db_path


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Open the database with rows addressable by column name."""
    conn = sqlite3.connect(db_path or get_db_path())
    conn.row_factory = sqlite3.Row
    return conn


def get_document(key: str, db_path: Path | None = None) -> str | None:
    """Get the JSON text stored under key.

    Returns:
        Stored JSON text, or None if there is no such document.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        row = conn.execute("SELECT value FROM documents WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None


def put_documents(documents: Mapping[str, str], db_path: Path | None = None) -> None:
    """Insert or replace several documents in one transaction.

    Args:
        documents: Document name to JSON text.
        db_path: Database file. Defaults to the XDG location.

    Raises:
        sqlite3.Error: If database operation fails. Nothing is written then.
    """
    with _connect(db_path) as conn:
        try:
            conn.executemany(
                "INSERT OR REPLACE INTO documents (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)",
                list(documents.items()),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def delete_documents(keys: Iterable[str], db_path: Path | None = None) -> int:
    """Delete documents by name, ignoring names that are not stored.

    Returns:
        Number of documents deleted.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            cursor = conn.executemany("DELETE FROM documents WHERE key = ?", [(key,) for key in keys])
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        return cursor.rowcount

