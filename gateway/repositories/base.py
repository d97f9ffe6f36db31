"""Interface shared by the JSON and SQL record stores."""
from __future__ import annotations

from typing import Iterable, Optional, Protocol


class RecordStore(Protocol):
    """
    Document-collection API consumed by ResourceService.

    Mutating calls are write-through: when they return, the change is on
    durable storage. Unknown collections raise UnknownCollectionError and
    persistence failures raise StorageWriteError with nothing left applied.
    """

    backend: str

    def collection_names(self) -> list[str]: ...

    def has_collection(self, name: str) -> bool: ...

    def create_collection(self, name: str) -> None: ...

    def ensure_collections(self, names: Iterable[str]) -> None: ...

    def records(self, name: str) -> list[dict]: ...

    def find(self, name: str, record_id: int) -> Optional[dict]: ...

    def push(self, name: str, record: dict) -> dict: ...

    def assign(self, name: str, record_id: int, record: dict) -> dict: ...

    def remove(self, name: str, record_id: int) -> bool: ...

    def write(self) -> None: ...
