"""Bootstrap error taxonomy and helpers for rendering captured errors into logs."""

from __future__ import annotations

import traceback
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from coldstart.services.resolver import Failed


class BootstrapError(Exception):
    """Base class for failures raised while bringing the handler up."""


class CandidateLoadFailure(BootstrapError):
    """A single candidate location could not be loaded.

    Recovered by the resolver; it only ever reaches the logs.
    """

    def __init__(self, location: str, detail: str) -> None:
        self.location = location
        self.detail = detail
        super().__init__(f"{location}: {detail}")


class ResolutionExhausted(BootstrapError):
    """No candidate location produced a loadable application entry."""

    def __init__(self, failures: Sequence["Failed"]) -> None:
        self.failures = tuple(failures)
        if self.failures:
            tried = "; ".join(f"{failure.location} ({failure.reason})" for failure in self.failures)
            message = f"No compiled application entry found. Tried {len(self.failures)} candidate(s): {tried}"
        else:
            message = "No compiled application entry found. No candidate locations were configured."
        super().__init__(message)


class AdapterConstructionFailure(BootstrapError):
    """The resolved application could not be wrapped into the invocation signature."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Could not build the invocation adapter for the application loaded from {location}.")


def cause_chain(exc: BaseException) -> list[BaseException]:
    chain: list[BaseException] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        chain.append(current)
        current = current.__cause__ or current.__context__
    return chain


def root_cause(exc: BaseException) -> BaseException:
    return cause_chain(exc)[-1]


def describe_error(exc: BaseException) -> dict[str, object]:
    """Collect everything needed to diagnose ``exc`` from a single log entry."""
    return {
        "error_type": type(exc).__name__,
        "error": str(exc),
        "causes": [f"{type(item).__name__}: {item}" for item in cause_chain(exc)[1:]],
        "traceback": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    }
