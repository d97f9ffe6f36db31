#!/usr/bin/env python3
"""
Declarar uma nova colecao no armazenamento configurado (JSON ou SQL).

Uso:
  python scripts/add_collection.py produtos [clientes ...]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Garantir que o pacote gateway seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gateway.core.config import get_settings
from gateway.repositories import open_store


def main() -> None:
    ap = argparse.ArgumentParser(description="Declarar colecoes no armazenamento")
    ap.add_argument("names", nargs="+", help="Nome(s) da colecao (ex.: downloads)")
    args = ap.parse_args()

    names = [(n or "").strip() for n in args.names]
    if any(not n or "/" in n for n in names):
        raise SystemExit("Nome de colecao invalido")

    settings = get_settings()
    store = open_store(settings)
    existing = set(store.collection_names())
    store.ensure_collections(names)
    for name in names:
        status = "ja existia" if name in existing else "criada"
        print(f"OK: {name} ({status}) [{store.backend}]")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - uso CLI
        sys.stderr.write(f"Erro: {exc}\n")
        raise SystemExit(1)
