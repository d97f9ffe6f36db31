from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from gateway.core.config import Settings, get_settings
from gateway.core.log import configure_logging
from gateway.repositories import open_store
from gateway.repositories.base import RecordStore
from gateway.routers import resources as resources_router
from gateway.services.resource_service import ResourceService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[RecordStore] = None) -> FastAPI:
    """Factory compatível com uvicorn (--factory) e com os testes."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    store = store if store is not None else open_store(settings)
    os.makedirs(settings.upload_dir, exist_ok=True)

    app = FastAPI(title="Resource Gateway")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
    )
    # antes do router generico, senao "/arquivos/..." cairia em /{collection}/{id}
    app.mount("/arquivos", StaticFiles(directory=settings.upload_dir), name="arquivos")

    app.state.settings = settings
    app.state.resource_service = ResourceService(store, settings.upload_dir, settings.file_fields)
    app.include_router(resources_router.router)

    logger.info(
        "Gateway pronto: backend=%s colecoes=%s uploads=%s",
        store.backend,
        ", ".join(store.collection_names()),
        settings.upload_dir,
    )
    return app
