"""
Persistence adapters.

These modules encapsulate how collections are stored/retrieved (flat JSON
file or SQL database). Services depend on the RecordStore interface rather
than touching the JSON file or the session directly.
"""

from __future__ import annotations

from gateway.core.config import Settings
from gateway.repositories.base import RecordStore


def open_store(settings: Settings) -> RecordStore:
    """Build the store selected by STORAGE_BACKEND and declare the default collections."""
    if settings.storage_backend == "sql":
        from gateway.db.create_tables import create_all
        from gateway.repositories.sql_repository import SQLRecordStore

        create_all()
        store: RecordStore = SQLRecordStore()
        store.ensure_collections(settings.default_collections)
        return store

    from gateway.repositories.json_storage import JsonDocumentStore

    return JsonDocumentStore(settings.data_file, settings.default_collections)
