"""Error taxonomy shared by repositories, services and routers."""
from __future__ import annotations


class ResourceError(Exception):
    """Base error carrying the HTTP mapping used by the routers."""

    def __init__(self, message: str, code: str = "invalid", status_code: int = 400, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details


class UnknownCollectionError(ResourceError):
    def __init__(self, collection: str):
        super().__init__("Coleção não encontrada", "unknown_collection", 404, details=collection)
        self.collection = collection


class RecordNotFoundError(ResourceError):
    def __init__(self, collection: str, record_id):
        super().__init__("Registro não encontrado", "not_found", 404, details=f"{collection}/{record_id}")
        self.collection = collection
        self.record_id = record_id


class InvalidPayloadError(ResourceError):
    def __init__(self, details: str | None = None):
        super().__init__("Corpo da requisição inválido", "invalid_payload", 400, details=details)


class InvalidRecordError(ResourceError):
    """A stored record without a usable integer id."""

    def __init__(self, details: str | None = None):
        super().__init__("Registro com identificador inválido", "invalid_record", 500, details=details)


class StorageError(ResourceError):
    """Backing store could not be opened or is malformed."""

    def __init__(self, details: str | None = None):
        super().__init__("Erro ao acessar armazenamento", "storage_error", 500, details=details)


class StorageWriteError(ResourceError):
    def __init__(self, details: str | None = None):
        super().__init__("Erro ao gravar dados", "storage_write_failure", 500, details=details)


class FileCleanupError(ResourceError):
    """Upload removal failed. Logged by the service, never returned to clients."""

    def __init__(self, filename: str, details: str | None = None):
        super().__init__("Falha ao remover arquivo", "file_cleanup_failure", 500, details=details)
        self.filename = filename
