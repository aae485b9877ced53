"""Persistence adapter storing JSON-serializable documents in sqlite.

Failures of the underlying store are re-raised as PersistenceError so the
ledger can surface them without knowing about sqlite.
"""

import json
import sqlite3
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from spendwise.errors import PersistenceError
from spendwise.logging_setup import get_logger
from spendwise.store.queries import delete_documents, get_document, put_documents
from spendwise.store.schema import get_db_path, init_database

logger = get_logger(__name__)


class SqliteDocumentStore:
    """Load, save and erase named JSON documents in a sqlite database."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or get_db_path()
        try:
            init_database(self.db_path)
        except (sqlite3.Error, OSError) as e:
            logger.error("Could not open database %s: %s", self.db_path, e)
            raise PersistenceError(f"Could not open database {self.db_path}: {e}") from e

    def load(self, key: str, default: Any) -> Any:
        """Return the decoded document stored under key, or default if absent.

        Raises:
            PersistenceError: If the read fails or the stored text is not valid JSON.
        """
        try:
            raw = get_document(key, self.db_path)
        except sqlite3.Error as e:
            logger.error("Reading document %s failed: %s", key, e)
            raise PersistenceError(f"Could not read '{key}': {e}") from e

        if raw is None:
            logger.debug("Document %s not found, using default", key)
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Document %s is corrupt: %s", key, e)
            raise PersistenceError(f"Stored document '{key}' is not valid JSON: {e}") from e

    def save(self, documents: Mapping[str, Any]) -> None:
        """Write one or more documents atomically.

        Raises:
            PersistenceError: If the write fails; no document is written then.
        """
        encoded = {key: json.dumps(value) for key, value in documents.items()}
        try:
            put_documents(encoded, self.db_path)
        except sqlite3.Error as e:
            logger.error("Writing documents %s failed: %s", ", ".join(encoded), e)
            raise PersistenceError(f"Could not save {', '.join(encoded)}: {e}") from e
        logger.debug("Saved documents %s", ", ".join(encoded))

    def erase(self, keys: Iterable[str]) -> None:
        """Delete documents; absent keys are ignored.

        Raises:
            PersistenceError: If the delete fails.
        """
        keys = list(keys)
        try:
            deleted = delete_documents(keys, self.db_path)
        except sqlite3.Error as e:
            logger.error("Erasing documents %s failed: %s", ", ".join(keys), e)
            raise PersistenceError(f"Could not erase {', '.join(keys)}: {e}") from e
        logger.debug("Erased %d documents", deleted)
