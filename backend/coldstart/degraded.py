from __future__ import annotations

import logging
from functools import cached_property
from typing import Any

from coldstart.config import DEFAULT_DEGRADED_MESSAGE, DEFAULT_DEGRADED_STATUS
from coldstart.errors import root_cause
from coldstart.log import log_json
from coldstart.models import DegradedResponse


class DegradedHandler:
    """Answers every invocation with the same failure after a failed cold start.

    The captured error is only ever written to the logs; callers get a fixed
    status and a generic message.
    """

    def __init__(
        self,
        error: BaseException,
        status_code: int = DEFAULT_DEGRADED_STATUS,
        message: str = DEFAULT_DEGRADED_MESSAGE,
    ) -> None:
        self._error = error
        self._status_code = status_code
        self._body = DegradedResponse(message=message)

    @property
    def error(self) -> BaseException:
        return self._error

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def body(self) -> DegradedResponse:
        return self._body

    def report(self, **fields: object) -> None:
        cause = root_cause(self._error)
        log_json(
            "degraded_invocation",
            level=logging.ERROR,
            status_code=self._status_code,
            error_type=type(self._error).__name__,
            error=str(self._error),
            root_cause=f"{type(cause).__name__}: {cause}",
            **fields,
        )

    def __call__(self, event: Any, context: Any = None) -> dict[str, Any]:
        self.report(request_id=getattr(context, "aws_request_id", None))
        return {
            "statusCode": self._status_code,
            "headers": {"content-type": "application/json"},
            "multiValueHeaders": {},
            "body": self._body.model_dump_json(),
            "isBase64Encoded": False,
        }

    @cached_property
    def app(self):
        # Only runtimes that serve ASGI directly need this, so FastAPI stays off the Lambda path.
        from coldstart.asgi import build_degraded_app

        return build_degraded_app(self)
