"""Root-level entrypoint for platforms that look for `main.py`."""

from pathlib import Path
import sys

backend_root = Path(__file__).resolve().parent
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))

import api.index as entrypoint
from api.index import handler


def __getattr__(name: str):
    if name == "app":
        return entrypoint.app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(set(globals()) | {"app"})
