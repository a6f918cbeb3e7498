"""One-shot initialization of the process-wide invocation handler.

The guard runs the resolver once per process, wraps the resolved application
with the request/response adapter, and installs a :class:`DegradedHandler`
instead whenever anything on that path fails. The result never changes for
the lifetime of the process.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

from coldstart.config import Settings, get_settings
from coldstart.degraded import DegradedHandler
from coldstart.errors import AdapterConstructionFailure, ResolutionExhausted, describe_error
from coldstart.log import log_json
from coldstart.services.loader import ModuleLoader, ensure_importable
from coldstart.services.resolver import Exhausted, Failed, Loader, resolve


Adapter = Callable[[Any], Callable[..., Any]]


@dataclass(frozen=True)
class HandlerState:
    handler: Callable[..., Any]
    resolved: Any = None
    location: str | None = None
    failures: tuple[Failed, ...] = field(default_factory=tuple)
    degraded: DegradedHandler | None = None

    @property
    def is_degraded(self) -> bool:
        return self.degraded is not None

    @property
    def app(self) -> Any:
        if self.degraded is not None:
            return self.degraded.app
        return self.resolved


def mangum_adapter(settings: Settings) -> Adapter:
    def build(application: Any):
        # Imported here so a broken adapter install degrades instead of failing the import.
        from mangum import Mangum

        # Mangum needs an event loop to exist when it is constructed.
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            asyncio.set_event_loop(asyncio.new_event_loop())
        return Mangum(
            application,
            lifespan=settings.lifespan,
            api_gateway_base_path=settings.api_gateway_base_path,
        )

    return build


def _degrade(exc: BaseException, settings: Settings | None) -> HandlerState:
    log_json("initialization_failed", level=logging.ERROR, **describe_error(exc))
    if settings is None:
        degraded = DegradedHandler(exc)
    else:
        degraded = DegradedHandler(exc, status_code=settings.degraded_status_code, message=settings.degraded_message)
    return HandlerState(handler=degraded, degraded=degraded)


def initialize(
    settings: Settings | None = None,
    loader: Loader | None = None,
    adapter: Adapter | None = None,
) -> HandlerState:
    """Resolve and wrap the application, degrading on any failure. Never raises."""
    if settings is None:
        try:
            settings = get_settings()
        except Exception as exc:
            return _degrade(exc, None)

    try:
        root = settings.root_dir
        ensure_importable(root)
        outcome = resolve(settings.candidates_list, loader or ModuleLoader(root), export_name=settings.export_name)
        if isinstance(outcome, Exhausted):
            raise ResolutionExhausted(outcome.failures)

        if not callable(outcome.handler):
            log_json(
                "handler_not_callable",
                level=logging.WARNING,
                candidate=outcome.location,
                handler_type=type(outcome.handler).__name__,
            )

        build = adapter or mangum_adapter(settings)
        try:
            handler = build(outcome.handler)
        except Exception as exc:
            raise AdapterConstructionFailure(outcome.location) from exc
    except Exception as exc:
        return _degrade(exc, settings)

    return HandlerState(
        handler=handler,
        resolved=outcome.handler,
        location=outcome.location,
        failures=outcome.failures,
    )


class ProcessHandlerState:
    """Construct-once holder for the handler installed at cold start."""

    def __init__(self, factory: Callable[[], HandlerState] = initialize) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._state: HandlerState | None = None

    @property
    def initialized(self) -> bool:
        return self._state is not None

    def get(self) -> HandlerState:
        state = self._state
        if state is None:
            with self._lock:
                if self._state is None:
                    self._state = self._factory()
                state = self._state
        return state


process_state = ProcessHandlerState()