"""Naming rules for uploaded files."""
from __future__ import annotations

import time
from pathlib import Path, PurePosixPath, PureWindowsPath


def _basename(original: str | None) -> str:
    # Clientes Windows podem mandar "C:\\pasta\\foto.png"
    name = PureWindowsPath(PurePosixPath(original or "").name).name
    return name.strip() or "arquivo"


def stored_filename(original: str | None, now: float | None = None) -> str:
    """Return "<epoch-millis>_<original-name>" for an uploaded file."""
    millis = int((time.time() if now is None else now) * 1000)
    return f"{millis}_{_basename(original)}"


def upload_path(upload_dir: str | Path, filename: str) -> Path:
    """Resolve a stored filename inside the upload directory."""
    base = Path(upload_dir).resolve()
    target = (base / filename).resolve()
    if target.parent != base:
        raise ValueError(f"Nome de arquivo fora do diretorio de uploads: {filename!r}")
    return target
