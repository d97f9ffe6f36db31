"""
Flat-file JSON persistence adapter.

The whole document ({"<collection>": [record, ...], ...}) is kept in memory
and rewritten on every mutation, so the file on disk always matches what
the API returned.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from pathlib import Path
from typing import Iterable, Optional

from gateway.domain.errors import (
    RecordNotFoundError,
    StorageError,
    StorageWriteError,
    UnknownCollectionError,
)

logger = logging.getLogger(__name__)


class JsonDocumentStore:
    """Record store backed by a single JSON document."""

    backend = "json"

    def __init__(self, path: str | Path, default_collections: Iterable[str] = ()) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()
        self._db = self._load()
        self.ensure_collections(default_collections)

    # -------------------------- io --------------------------
    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                db = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"{self.path}: {exc}") from exc
        if not isinstance(db, dict):
            raise StorageError(f"{self.path}: documento raiz deve ser um objeto JSON")
        for name, items in db.items():
            if not isinstance(items, list):
                raise StorageError(f"{self.path}: colecao '{name}' deve ser uma lista")
        return db

    def write(self) -> None:
        """Flush the document to disk atomically (temp file + rename)."""
        with self._lock:
            tmp = self.path.with_name(self.path.name + ".tmp")
            try:
                if self.path.parent and not self.path.parent.exists():
                    self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp.write_text(json.dumps(self._db, ensure_ascii=False, indent=2), encoding="utf-8")
                os.replace(tmp, self.path)
            except (OSError, TypeError, ValueError) as exc:
                logger.error("Falha ao gravar %s: %s", self.path, exc)
                raise StorageWriteError(str(exc)) from exc

    # -------------------------- collections --------------------------
    def collection_names(self) -> list[str]:
        with self._lock:
            return list(self._db.keys())

    def has_collection(self, name: str) -> bool:
        with self._lock:
            return name in self._db

    def create_collection(self, name: str) -> None:
        self.ensure_collections([name])

    def ensure_collections(self, names: Iterable[str]) -> None:
        with self._lock:
            missing = [n for n in names if n and n not in self._db]
            if not missing and self.path.exists():
                return
            for name in missing:
                self._db[name] = []
            try:
                self.write()
            except StorageWriteError:
                for name in missing:
                    self._db.pop(name, None)
                raise

    def _items(self, name: str) -> list:
        items = self._db.get(name)
        if items is None:
            raise UnknownCollectionError(name)
        return items

    @staticmethod
    def _index_of(items: list, record_id: int) -> int:
        for idx, item in enumerate(items):
            value = item.get("id") if isinstance(item, dict) else None
            if not isinstance(value, bool) and value == record_id:
                return idx
        return -1

    # -------------------------- records --------------------------
    def records(self, name: str) -> list[dict]:
        with self._lock:
            return copy.deepcopy(self._items(name))

    def find(self, name: str, record_id: int) -> Optional[dict]:
        with self._lock:
            items = self._items(name)
            idx = self._index_of(items, record_id)
            return copy.deepcopy(items[idx]) if idx >= 0 else None

    def push(self, name: str, record: dict) -> dict:
        with self._lock:
            items = self._items(name)
            items.append(copy.deepcopy(record))
            try:
                self.write()
            except StorageWriteError:
                items.pop()
                raise
            return copy.deepcopy(record)

    def assign(self, name: str, record_id: int, record: dict) -> dict:
        with self._lock:
            items = self._items(name)
            idx = self._index_of(items, record_id)
            if idx < 0:
                raise RecordNotFoundError(name, record_id)
            previous = items[idx]
            items[idx] = copy.deepcopy(record)
            try:
                self.write()
            except StorageWriteError:
                items[idx] = previous
                raise
            return copy.deepcopy(record)

    def remove(self, name: str, record_id: int) -> bool:
        with self._lock:
            items = self._items(name)
            idx = self._index_of(items, record_id)
            if idx < 0:
                return False
            removed = items.pop(idx)
            try:
                self.write()
            except StorageWriteError:
                items.insert(idx, removed)
                raise
            return True
