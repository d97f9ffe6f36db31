"""Run the gateway with uvicorn: python -m gateway [--host H] [--port P]."""
from __future__ import annotations

import argparse

import uvicorn

from gateway.core.config import get_settings


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Resource gateway (REST sobre colecoes JSON/SQL)")
    ap.add_argument("--host", default="0.0.0.0")
    ap.add_argument("--port", type=int, default=settings.port)
    ap.add_argument("--reload", action="store_true", help="Recarregar ao alterar o codigo (dev)")
    args = ap.parse_args()
    uvicorn.run("gateway.app:create_app", factory=True, host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
