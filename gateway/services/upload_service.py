"""Upload helpers: persist multipart attachments and remove them later."""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import BinaryIO, Iterable

from gateway.domain.errors import FileCleanupError
from gateway.domain.uploads import stored_filename, upload_path

logger = logging.getLogger(__name__)


def save_upload(upload_dir: str | Path, original_name: str | None, stream: BinaryIO) -> str:
    """Copy an uploaded stream into the upload directory and return the generated filename."""
    base = Path(upload_dir)
    base.mkdir(parents=True, exist_ok=True)
    filename = stored_filename(original_name)
    dest = upload_path(base, filename)
    with dest.open("wb") as f:
        shutil.copyfileobj(stream, f)
    logger.info("Arquivo salvo: %s", filename)
    return filename


def remove_upload(upload_dir: str | Path, filename: str) -> bool:
    """
    Remove a stored upload. Returns False when the file was already gone.
    Any other failure is raised as FileCleanupError.
    """
    try:
        path = upload_path(upload_dir, filename)
    except ValueError as exc:
        raise FileCleanupError(filename, str(exc)) from exc
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise FileCleanupError(filename, str(exc)) from exc
    logger.info("Arquivo removido: %s", filename)
    return True


def discard_uploads(upload_dir: str | Path, filenames: Iterable[str]) -> None:
    """Best-effort removal of files saved for a request that did not create a record."""
    for filename in filenames:
        try:
            remove_upload(upload_dir, filename)
        except FileCleanupError as exc:
            logger.warning("Nao foi possivel descartar %s: %s", filename, exc.details)
