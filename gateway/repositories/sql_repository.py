"""Record store backed by SQLAlchemy (Postgres in production, SQLite in tests)."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError

from gateway.db.models import Collection, Record
from gateway.db.session import get_session
from gateway.domain.errors import RecordNotFoundError, StorageWriteError, UnknownCollectionError

logger = logging.getLogger(__name__)


def _payload(record: dict) -> dict:
    return {k: v for k, v in record.items() if k != "id"}


class SQLRecordStore:
    """CRUD helpers wrapping the SQLAlchemy session; every mutation commits."""

    backend = "sql"

    def _commit(self, session) -> None:
        try:
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Falha ao gravar no banco: %s", exc)
            raise StorageWriteError(str(exc)) from exc

    def _require_collection(self, session, name: str) -> None:
        if session.get(Collection, name) is None:
            raise UnknownCollectionError(name)

    # -------------------------- collections --------------------------
    def collection_names(self) -> list[str]:
        with get_session() as session:
            return list(session.execute(select(Collection.name).order_by(Collection.name)).scalars().all())

    def has_collection(self, name: str) -> bool:
        with get_session() as session:
            return session.get(Collection, name) is not None

    def create_collection(self, name: str) -> None:
        self.ensure_collections([name])

    def ensure_collections(self, names: Iterable[str]) -> None:
        with get_session() as session:
            added = False
            for name in names:
                if name and session.get(Collection, name) is None:
                    session.add(Collection(name=name))
                    added = True
            if added:
                self._commit(session)

    # -------------------------- records --------------------------
    def records(self, name: str) -> list[dict]:
        with get_session() as session:
            self._require_collection(session, name)
            stmt = select(Record).where(Record.collection == name).order_by(Record.record_id)
            return [entity.to_dict() for entity in session.execute(stmt).scalars().all()]

    def find(self, name: str, record_id: int) -> Optional[dict]:
        with get_session() as session:
            self._require_collection(session, name)
            entity = session.get(Record, (name, record_id))
            return entity.to_dict() if entity else None

    def push(self, name: str, record: dict) -> dict:
        now = datetime.now(timezone.utc)
        with get_session() as session:
            self._require_collection(session, name)
            entity = Record(
                collection=name,
                record_id=record["id"],
                data=_payload(record),
                created_at=now,
                updated_at=now,
            )
            session.add(entity)
            self._commit(session)
            return entity.to_dict()

    def assign(self, name: str, record_id: int, record: dict) -> dict:
        with get_session() as session:
            self._require_collection(session, name)
            entity = session.get(Record, (name, record_id))
            if not entity:
                raise RecordNotFoundError(name, record_id)
            entity.data = _payload(record)
            entity.updated_at = datetime.now(timezone.utc)
            self._commit(session)
            return entity.to_dict()

    def remove(self, name: str, record_id: int) -> bool:
        with get_session() as session:
            self._require_collection(session, name)
            result = session.execute(
                delete(Record).where(Record.collection == name, Record.record_id == record_id)
            )
            self._commit(session)
            return bool(result.rowcount)

    def write(self) -> None:
        """Nothing buffered: each mutation already committed."""
        return None
