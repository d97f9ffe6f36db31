from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Garante que o pacote gateway e os scripts sejam importáveis durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
for extra in (ROOT, ROOT / "scripts"):
    if str(extra) not in sys.path:
        sys.path.insert(0, str(extra))

from gateway.core import config as core_config  # noqa: E402
from gateway.db import session as db_session  # noqa: E402
from gateway.repositories.sql_repository import SQLRecordStore  # noqa: E402
import migrate_to_sql  # noqa: E402


@pytest.fixture()
def sql_env(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    core_config.get_settings.cache_clear()
    db_session.reset_engine()
    yield
    db_session.reset_engine()
    core_config.get_settings.cache_clear()


def test_migration_keeps_ids_and_is_rerunnable(tmp_path, sql_env):
    source = tmp_path / "db.json"
    source.write_text(
        json.dumps({
            "downloads": [{"id": 3, "title": "c"}, {"id": 1, "title": "a"}],
            "aplicativos": [{"id": 1, "name": "App", "arquivo": "1_app.apk", "filename": None}],
            "users": [],
        }),
        encoding="utf-8",
    )

    copied = migrate_to_sql.migrate(source)
    assert copied == {"downloads": 2, "aplicativos": 1, "users": 0}

    store = SQLRecordStore()
    assert [r["id"] for r in store.records("downloads")] == [1, 3]
    assert store.find("aplicativos", 1)["arquivo"] == "1_app.apk"
    assert store.has_collection("users")

    assert migrate_to_sql.migrate(source) == {"downloads": 0, "aplicativos": 0, "users": 0}


def test_migration_rejects_invalid_ids(tmp_path, sql_env):
    from gateway.domain.errors import InvalidRecordError

    source = tmp_path / "db.json"
    source.write_text(json.dumps({"downloads": [{"title": "sem id"}]}), encoding="utf-8")
    with pytest.raises(InvalidRecordError):
        migrate_to_sql.migrate(source)
