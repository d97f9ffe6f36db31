"""
Configuration helpers for the resource gateway.

Settings are read once from environment variables so that routers/services
do not fetch os.environ directly. Tests call get_settings.cache_clear()
after changing the environment.
"""

from dataclasses import dataclass, field
from functools import lru_cache
import os

DEFAULT_FILE_FIELDS = "aplicativos=arquivo,filename;publicidadesdb=filename"
DEFAULT_COLLECTIONS = "users,downloads,aplicativos,publicidadesdb"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    storage_backend: str
    data_file: str
    database_url: str
    upload_dir: str
    cors_origins: tuple[str, ...]
    default_collections: tuple[str, ...]
    log_level: str
    port: int
    file_fields: dict[str, tuple[str, ...]] = field(default_factory=dict)


def _split(value: str | None, sep: str = ",") -> tuple[str, ...]:
    return tuple(part.strip() for part in (value or "").split(sep) if part.strip())


def parse_file_fields(value: str | None) -> dict[str, tuple[str, ...]]:
    """
    Converte "aplicativos=arquivo,filename;publicidadesdb=filename" em
    {"aplicativos": ("arquivo", "filename"), "publicidadesdb": ("filename",)}.
    """
    table: dict[str, tuple[str, ...]] = {}
    for entry in _split(value, ";"):
        name, _, fields = entry.partition("=")
        name = name.strip()
        if not name:
            continue
        table[name] = _split(fields)
    return table


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    backend = (os.getenv("STORAGE_BACKEND") or "json").strip().lower()
    if backend not in {"json", "sql"}:
        raise RuntimeError(f"STORAGE_BACKEND invalido: {backend!r} (use 'json' ou 'sql')")

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        storage_backend=backend,
        data_file=os.getenv("DATA_FILE", "db.json"),
        database_url=os.getenv("DATABASE_URL", ""),
        upload_dir=os.getenv("UPLOAD_DIR", os.path.join("public", "arquivos")),
        cors_origins=_split(os.getenv("CORS_ORIGINS", "*")) or ("*",),
        default_collections=_split(os.getenv("DEFAULT_COLLECTIONS", DEFAULT_COLLECTIONS)),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        port=_int(os.getenv("PORT", "3000"), 3000),
        file_fields=parse_file_fields(os.getenv("FILE_FIELDS", DEFAULT_FILE_FIELDS)),
    )
