"""Create the SQL schema and declare the configured default collections."""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata


def create_all() -> None:
    engine = get_engine()
    Base.metadata.create_all(bind=engine)


def bootstrap() -> list[str]:
    """create_all() + default collections; returns the collection names now present."""
    from gateway.core.config import get_settings
    from gateway.repositories.sql_repository import SQLRecordStore

    create_all()
    store = SQLRecordStore()
    store.ensure_collections(get_settings().default_collections)
    return store.collection_names()


if __name__ == "__main__":
    try:
        names = bootstrap()
        print(f"Database ready. Collections: {', '.join(names) or '(none)'}")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
