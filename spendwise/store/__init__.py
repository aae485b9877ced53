"""Database store layer - provides persistence for the application.

This module re-exports the public persistence API for easy importing.
"""

from spendwise.store.documents import SqliteDocumentStore
from spendwise.store.queries import delete_documents, get_document, put_documents
from spendwise.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Adapter
    "SqliteDocumentStore",
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "delete_documents",
    "get_document",
    "put_documents",
]
