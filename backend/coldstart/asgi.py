from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

if TYPE_CHECKING:
    from coldstart.degraded import DegradedHandler


ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-Id"] = request_id
        return response


def build_degraded_app(degraded: DegradedHandler) -> FastAPI:
    app = FastAPI(title="Degraded Application", docs_url=None, redoc_url=None, openapi_url=None)
    app.add_middleware(RequestContextMiddleware)

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def degraded_catchall(request: Request) -> JSONResponse:
        degraded.report(
            request_id=getattr(request.state, "request_id", ""),
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(status_code=degraded.status_code, content=degraded.body.model_dump())

    return app
