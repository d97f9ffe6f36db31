"""
HTTP tests for the generic resource routes.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Garante que o pacote gateway seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gateway.app import create_app
from gateway.core.config import Settings
from gateway.domain.errors import StorageWriteError


def _settings(tmp_path: Path) -> Settings:
    return Settings(
        app_env="test",
        storage_backend="json",
        data_file=str(tmp_path / "db.json"),
        database_url="",
        upload_dir=str(tmp_path / "arquivos"),
        cors_origins=("*",),
        default_collections=("downloads", "aplicativos", "publicidadesdb"),
        log_level="WARNING",
        port=3000,
        file_fields={"aplicativos": ("arquivo", "filename"), "publicidadesdb": ("filename",)},
    )


@pytest.fixture()
def settings(tmp_path):
    return _settings(tmp_path)


@pytest.fixture()
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


def test_health(client):
    assert client.get("/health").json() == {"ok": True, "backend": "json"}


def test_list_empty_collection_is_404(client):
    resp = client.get("/downloads")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Nenhum dado encontrado"}


def test_unknown_collection_is_404(client):
    resp = client.get("/nada")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Coleção não encontrada"
    assert client.post("/nada", json={"a": 1}).status_code == 404


def test_json_crud_flow(client):
    resp = client.post("/downloads", json={"title": "x"})
    assert resp.status_code == 201
    assert resp.json() == {"id": 1, "title": "x"}
    assert client.post("/downloads", json={"title": "y", "id": 77}).json()["id"] == 2

    assert [r["id"] for r in client.get("/downloads").json()] == [1, 2]
    assert client.get("/downloads/2").json() == {"id": 2, "title": "y"}

    resp = client.patch("/downloads/2", json={"title": "Y", "size": 10})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": {"id": 2, "title": "Y", "size": 10}}

    resp = client.delete("/downloads/1")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Registro excluído com sucesso"}
    assert [r["id"] for r in client.get("/downloads").json()] == [2]


def test_urlencoded_create(client):
    resp = client.post("/downloads", data={"title": "form"})
    assert resp.status_code == 201
    assert resp.json() == {"id": 1, "title": "form"}


def test_missing_record_responses(client):
    client.post("/downloads", json={"title": "x"})
    assert client.get("/downloads/9").status_code == 404
    assert client.get("/downloads/abc").status_code == 404
    resp = client.patch("/downloads/9", json={"title": "y"})
    assert resp.status_code == 404
    assert resp.json()["error"] == "Registro não encontrado"
    assert client.delete("/downloads/9").status_code == 404
    assert len(client.get("/downloads").json()) == 1


@pytest.mark.parametrize("body", ["[1, 2]", "{quebrado"])
def test_invalid_json_body(client, body):
    resp = client.post("/downloads", content=body, headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Corpo da requisição inválido"


def test_multipart_upload_and_cleanup(client, settings):
    resp = client.post(
        "/aplicativos",
        data={"name": "App"},
        files={"arquivo": ("app.apk", b"binario", "application/vnd.android.package-archive")},
    )
    assert resp.status_code == 201
    record = resp.json()
    assert record["id"] == 1
    assert record["name"] == "App"
    assert record["filename"] is None
    assert record["arquivo"].endswith("_app.apk")
    stored = Path(settings.upload_dir) / record["arquivo"]
    assert stored.read_bytes() == b"binario"

    # servido estaticamente
    assert client.get(f"/arquivos/{record['arquivo']}").content == b"binario"

    assert client.delete("/aplicativos/1").status_code == 200
    assert not stored.exists()


def test_uploads_for_unconfigured_fields_are_ignored(client, settings):
    resp = client.post(
        "/publicidadesdb",
        data={"titulo": "Promo"},
        files={
            "filename": ("banner.png", b"png", "image/png"),
            "arquivo": ("extra.bin", b"bin", "application/octet-stream"),
        },
    )
    assert resp.status_code == 201
    record = resp.json()
    assert set(record) == {"id", "titulo", "filename"}
    assert [p.name for p in Path(settings.upload_dir).iterdir()] == [record["filename"]]


def test_saved_uploads_are_discarded_when_create_fails(client, settings, monkeypatch):
    svc = client.app.state.resource_service

    def boom():
        raise StorageWriteError("disco cheio")

    monkeypatch.setattr(svc.store, "write", boom)
    resp = client.post(
        "/aplicativos",
        data={"name": "App"},
        files={"arquivo": ("app.apk", b"binario", "application/octet-stream")},
    )
    assert resp.status_code == 500
    assert resp.json()["error"] == "Erro ao gravar dados"
    assert list(Path(settings.upload_dir).iterdir()) == []


def test_cors_headers(client):
    resp = client.get("/health", headers={"Origin": "http://exemplo.test"})
    assert resp.headers.get("access-control-allow-origin") == "*"


def test_delete_succeeds_when_upload_already_gone(client, settings):
    resp = client.post(
        "/aplicativos",
        data={"name": "App"},
        files={"filename": ("icone.png", b"png", "image/png")},
    )
    record = resp.json()
    (Path(settings.upload_dir) / record["filename"]).unlink()
    assert client.delete(f"/aplicativos/{record['id']}").status_code == 200
    assert client.get("/aplicativos").status_code == 404


def test_sql_backend_flow(tmp_path, monkeypatch):
    from dataclasses import replace

    from gateway.core import config as core_config
    from gateway.db import session as db_session

    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    core_config.get_settings.cache_clear()
    db_session.reset_engine()
    try:
        settings = replace(_settings(tmp_path), storage_backend="sql", database_url=f"sqlite:///{tmp_path / 'test.db'}")
        with TestClient(create_app(settings)) as client:
            assert client.get("/health").json()["backend"] == "sql"
            assert client.post("/downloads", json={"title": "x"}).json() == {"id": 1, "title": "x"}
            assert client.post("/downloads", json={"title": "y"}).json()["id"] == 2
            assert client.patch("/downloads/1", json={"size": 3}).json()["data"] == {"id": 1, "title": "x", "size": 3}
            assert client.delete("/downloads/1").status_code == 200
            assert client.get("/downloads").json() == [{"id": 2, "title": "y"}]
            assert client.patch("/downloads/1", json={"size": 4}).status_code == 404
    finally:
        db_session.reset_engine()
        core_config.get_settings.cache_clear()
