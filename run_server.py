"""Launch the Portal Hub API under Uvicorn.

``PORTAL_HUB_HOST``/``PORTAL_HUB_PORT`` pick the bind address, ``UVICORN_RELOAD``
toggles the auto-reloader and ``PORTAL_HUB_LOG_LEVEL`` feeds uvicorn's logging.
"""
from __future__ import annotations

import os

import uvicorn


def _flag(name: str, default: str) -> bool:
  return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def main() -> None:
  uvicorn.run(
    "portalhub.main:app",
    host=os.getenv("PORTAL_HUB_HOST", "0.0.0.0"),
    port=int(os.getenv("PORTAL_HUB_PORT", "8000")),
    reload=_flag("UVICORN_RELOAD", "false"),
    log_level=os.getenv("PORTAL_HUB_LOG_LEVEL", "info").lower(),
    proxy_headers=True,
  )


if __name__ == "__main__":
  main()
