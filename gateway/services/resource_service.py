"""Generic CRUD use cases over named collections."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Mapping, Optional

from gateway.domain.errors import FileCleanupError, RecordNotFoundError, UnknownCollectionError
from gateway.domain.records import build_record, merge_patch, next_id, parse_record_id
from gateway.repositories.base import RecordStore
from gateway.services.upload_service import remove_upload

logger = logging.getLogger(__name__)

DELETE_MESSAGE = "Registro excluído com sucesso"


class ResourceService:
    """
    Create/update/delete records in a RecordStore.

    Ids are assigned here (max + 1). Mutations on the same collection are
    serialised by a per-collection lock so two creates never get the same id.
    Files named by the collection's file fields are removed from the upload
    directory once their record is deleted.
    """

    def __init__(
        self,
        store: RecordStore,
        upload_dir: str | Path,
        file_fields: Optional[Mapping[str, tuple[str, ...]]] = None,
    ) -> None:
        self.store = store
        self.upload_dir = Path(upload_dir)
        self.file_fields = {name: tuple(fields) for name, fields in (file_fields or {}).items()}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, collection: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(collection)
            if lock is None:
                lock = self._locks[collection] = threading.Lock()
            return lock

    def fields_for(self, collection: str) -> tuple[str, ...]:
        return self.file_fields.get(collection, ())

    def ensure_collection(self, collection: str) -> None:
        if not self.store.has_collection(collection):
            raise UnknownCollectionError(collection)

    def _find_or_raise(self, collection: str, record_id: Any) -> tuple[int, dict]:
        parsed = parse_record_id(record_id)
        if parsed is None:
            self.ensure_collection(collection)
            raise RecordNotFoundError(collection, record_id)
        record = self.store.find(collection, parsed)
        if record is None:
            raise RecordNotFoundError(collection, parsed)
        return parsed, record

    # -------------------------- reads --------------------------
    def list_records(self, collection: str) -> list[dict]:
        return self.store.records(collection)

    def get(self, collection: str, record_id: Any) -> dict:
        return self._find_or_raise(collection, record_id)[1]

    # -------------------------- writes --------------------------
    def create(
        self,
        collection: str,
        payload: Optional[Mapping[str, Any]],
        uploaded_files: Optional[Mapping[str, str | None]] = None,
    ) -> dict:
        with self._lock_for(collection):
            new_id = next_id(self.store.records(collection))
            record = build_record(new_id, payload, self.fields_for(collection), uploaded_files)
            created = self.store.push(collection, record)
        logger.info("Registro criado: %s/%s", collection, new_id)
        return created

    def update(self, collection: str, record_id: Any, patch: Optional[Mapping[str, Any]]) -> dict:
        with self._lock_for(collection):
            parsed, current = self._find_or_raise(collection, record_id)
            merged = merge_patch(current, patch)
            updated = self.store.assign(collection, parsed, merged)
        logger.info("Registro atualizado: %s/%s", collection, parsed)
        return updated

    def delete(self, collection: str, record_id: Any) -> dict:
        with self._lock_for(collection):
            parsed, record = self._find_or_raise(collection, record_id)
            if not self.store.remove(collection, parsed):
                raise RecordNotFoundError(collection, parsed)
        logger.info("Registro excluido: %s/%s", collection, parsed)
        self._cleanup_files(collection, record)
        return {"success": True, "message": DELETE_MESSAGE}

    def _cleanup_files(self, collection: str, record: Mapping[str, Any]) -> None:
        for field in self.fields_for(collection):
            filename = record.get(field)
            if not filename:
                continue
            if not isinstance(filename, str):
                logger.warning("Campo %s de %s/%s nao e um nome de arquivo: %r",
                               field, collection, record.get("id"), filename)
                continue
            try:
                if not remove_upload(self.upload_dir, filename):
                    logger.warning("Arquivo ja ausente: %s", filename)
            except FileCleanupError as exc:
                logger.warning("Falha ao remover %s: %s", exc.filename, exc.details)
