"""
Serverless entrypoint.

Resolves the application once per cold start and exposes both the Lambda-style
`handler` and the ASGI `app`. When the application cannot be loaded or wrapped,
both answer every request with a generic 500 while the cause goes to the logs.
"""

import os
from pathlib import Path
import sys

backend_root = Path(__file__).resolve().parents[1]
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))

from coldstart.config import get_settings
from coldstart.guard import process_state
from coldstart.log import configure_logging


def _log_level() -> str:
    try:
        return get_settings().log_level
    except Exception:
        # Invalid settings are reported by the guard; only the log level falls back here.
        return os.getenv("LOG_LEVEL", "INFO")


configure_logging(_log_level())

state = process_state.get()
handler = state.handler


def __getattr__(name: str):
    # `app` is built on first access so Lambda cold starts never construct the degraded ASGI app.
    if name == "app":
        return state.app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(set(globals()) | {"app"})


__all__ = ["app", "handler"]
