"""Domain helpers for record identifiers and shallow merges."""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from gateway.domain.errors import InvalidRecordError

ID_FIELD = "id"
RESERVED_FIELDS = frozenset({ID_FIELD})


def _record_id(record: Mapping[str, Any]) -> int:
    value = record.get(ID_FIELD) if isinstance(record, Mapping) else None
    # bool is an int subclass; True must not pass as id 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRecordError(f"id ausente ou nao numerico: {value!r}")
    return value


def next_id(records: Iterable[Mapping[str, Any]]) -> int:
    """Return 1 for an empty collection, else 1 + the highest id present."""
    highest = 0
    for record in records:
        highest = max(highest, _record_id(record))
    return highest + 1


def strip_reserved(payload: Mapping[str, Any] | None) -> dict:
    return {key: value for key, value in (payload or {}).items() if key not in RESERVED_FIELDS}


def merge_patch(record: Mapping[str, Any], patch: Mapping[str, Any] | None) -> dict:
    """
    Shallow merge: campos do patch sobrescrevem, os demais ficam.
    Reserved keys in the patch are ignored and nested values are replaced whole.
    """
    merged = dict(record)
    merged.update(strip_reserved(patch))
    return merged


def build_record(
    record_id: int,
    payload: Mapping[str, Any] | None,
    file_fields: Iterable[str] = (),
    uploaded: Mapping[str, str | None] | None = None,
) -> dict:
    """Compose a new record: caller fields, the assigned id and one entry per file field."""
    uploaded = uploaded or {}
    record = {ID_FIELD: record_id}
    record.update(strip_reserved(payload))
    for name in file_fields:
        record[name] = uploaded.get(name) or None
    return record


def parse_record_id(value: Any) -> int | None:
    """Route ids arrive as text; anything but a positive integer matches no record."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    text = str(value or "").strip()
    if not (text.isascii() and text.isdigit()):
        return None
    number = int(text)
    return number if number > 0 else None
