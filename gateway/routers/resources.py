from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from gateway.domain.errors import InvalidPayloadError, ResourceError
from gateway.services.resource_service import ResourceService
from gateway.services.upload_service import discard_uploads, save_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["resources"])

FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _get_service(request: Request) -> ResourceService:
    svc = getattr(getattr(request.app, "state", None), "resource_service", None)
    if not svc:
        raise RuntimeError("ResourceService nao configurado")
    return svc


def _error_response(err: ResourceError) -> JSONResponse:
    body = {"error": err.message}
    if err.details:
        body["details"] = err.details
    return JSONResponse(body, status_code=err.status_code)


async def _read_payload(request: Request) -> tuple[dict, dict[str, UploadFile]]:
    """Return (fields, files) from a JSON, urlencoded or multipart body."""
    content_type = (request.headers.get("content-type") or "").lower()
    if content_type.startswith(FORM_TYPES):
        form = await request.form()
        fields: dict = {}
        files: dict[str, UploadFile] = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                # campo de arquivo enviado vazio pelo navegador
                if value.filename:
                    files.setdefault(key, value)
            else:
                fields[key] = value
        return fields, files
    raw = await request.body()
    if not raw.strip():
        return {}, {}
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise InvalidPayloadError(str(exc)) from exc
    if not isinstance(data, dict):
        raise InvalidPayloadError("esperado um objeto JSON")
    return data, {}


def _create_with_uploads(svc: ResourceService, collection: str, fields: dict, files: dict[str, UploadFile]) -> dict:
    svc.ensure_collection(collection)
    saved: dict[str, str] = {}
    try:
        for name in svc.fields_for(collection):
            upload = files.get(name)
            if upload is not None:
                saved[name] = save_upload(svc.upload_dir, upload.filename, upload.file)
        return svc.create(collection, fields, saved)
    except Exception:
        discard_uploads(svc.upload_dir, saved.values())
        raise


@router.get("/health")
def health(request: Request):
    svc = _get_service(request)
    return {"ok": True, "backend": svc.store.backend}


@router.get("/{collection}")
def list_records(collection: str, request: Request):
    svc = _get_service(request)
    try:
        data = svc.list_records(collection)
    except ResourceError as exc:
        return _error_response(exc)
    if not data:
        return JSONResponse({"error": "Nenhum dado encontrado"}, status_code=404)
    return data


@router.get("/{collection}/{record_id}")
def get_record(collection: str, record_id: str, request: Request):
    svc = _get_service(request)
    try:
        return svc.get(collection, record_id)
    except ResourceError as exc:
        return _error_response(exc)


@router.post("/{collection}", status_code=201)
async def create_record(collection: str, request: Request):
    svc = _get_service(request)
    try:
        fields, files = await _read_payload(request)
        record = await run_in_threadpool(_create_with_uploads, svc, collection, fields, files)
    except ResourceError as exc:
        return _error_response(exc)
    return JSONResponse(record, status_code=201)


@router.patch("/{collection}/{record_id}")
async def update_record(collection: str, record_id: str, request: Request):
    svc = _get_service(request)
    try:
        fields, files = await _read_payload(request)
        if files:
            logger.info("Arquivos ignorados na atualizacao de %s/%s: %s", collection, record_id, sorted(files))
        record = await run_in_threadpool(svc.update, collection, record_id, fields)
    except ResourceError as exc:
        return _error_response(exc)
    return {"success": True, "data": record}


@router.delete("/{collection}/{record_id}")
def delete_record(collection: str, record_id: str, request: Request):
    svc = _get_service(request)
    try:
        return svc.delete(collection, record_id)
    except ResourceError as exc:
        return _error_response(exc)
