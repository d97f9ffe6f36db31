"""One-off migration script: JSON document (db.json) -> SQL database."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

# Garantir que o pacote gateway seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gateway.core.config import get_settings
from gateway.db.create_tables import create_all
from gateway.domain.records import next_id
from gateway.repositories.sql_repository import SQLRecordStore


def _load_json(path: Path) -> dict:
    if not path.exists():
        raise SystemExit(f"Arquivo nao encontrado: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise SystemExit(f"Documento invalido (esperado objeto JSON): {path}")
    return data


def migrate(source: Path, store: SQLRecordStore | None = None) -> dict[str, int]:
    """Copy every collection, keeping ids. Records already present are left alone."""
    create_all()
    store = store or SQLRecordStore()
    db = _load_json(source)
    store.ensure_collections(db.keys())
    copied: dict[str, int] = {}
    for name, items in db.items():
        # valida ids antes de gravar qualquer coisa
        next_id(items)
        count = 0
        for item in items:
            if store.find(name, item["id"]) is None:
                store.push(name, item)
                count += 1
        copied[name] = count
    return copied


def main() -> None:
    ap = argparse.ArgumentParser(description="Migrar documento JSON para o banco SQL")
    ap.add_argument("--source", help="Arquivo JSON (default: DATA_FILE)")
    args = ap.parse_args()
    source = Path(args.source or get_settings().data_file)
    copied = migrate(source)
    for name, count in copied.items():
        print(f"  {name}: {count} registro(s)")
    print("JSON data migrated to SQL successfully.")


if __name__ == "__main__":
    main()
