from __future__ import annotations

import json
import logging


logger = logging.getLogger("coldstart")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    # Serverless runtimes capture stdout/stderr, so a plain root handler is enough.
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def log_json(event: str, level: int = logging.INFO, **fields: object) -> None:
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, separators=(",", ":"), default=str))
