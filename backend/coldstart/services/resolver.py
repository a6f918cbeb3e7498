from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence, Union

from coldstart.errors import CandidateLoadFailure
from coldstart.log import log_json


@dataclass(frozen=True)
class Loaded:
    location: str
    value: Any


@dataclass(frozen=True)
class Failed:
    location: str
    error: BaseException

    @property
    def reason(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"


LoadResult = Union[Loaded, Failed]
Loader = Callable[[str], LoadResult]


@dataclass(frozen=True)
class Resolved:
    location: str
    handler: Any
    failures: tuple[Failed, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Exhausted:
    failures: tuple[Failed, ...] = field(default_factory=tuple)


def split_candidate(candidate: str) -> tuple[str, str | None]:
    """Split ``target:attribute`` into its parts.

    Only the last colon counts, and only when what follows it looks like an
    identifier, so Windows drive letters (``C:\\app\\main.py``) stay intact.
    """
    target, sep, attribute = candidate.rpartition(":")
    if sep and target and attribute.isidentifier():
        return target, attribute
    return candidate, None


def extract_handler(result: Loaded, attribute: str | None, export_name: str) -> LoadResult:
    module = result.value
    if attribute is not None:
        if not hasattr(module, attribute):
            return Failed(
                result.location,
                CandidateLoadFailure(result.location, f"module has no attribute {attribute!r}"),
            )
        return Loaded(result.location, getattr(module, attribute))
    return Loaded(result.location, getattr(module, export_name, module))


def _attempt(candidate: str, loader: Loader, export_name: str) -> LoadResult:
    target, attribute = split_candidate(candidate)
    # Attribute lookups can run module code too (module __getattr__, lazy exports).
    try:
        result = loader(target)
        if isinstance(result, Failed):
            return Failed(candidate, result.error)
        return extract_handler(Loaded(candidate, result.value), attribute, export_name)
    except (Exception, SystemExit) as exc:
        return Failed(candidate, exc)


def resolve(candidates: Sequence[str], loader: Loader, export_name: str = "app") -> Resolved | Exhausted:
    """Return the handler from the first loadable candidate, in order.

    Candidates after the first success are never attempted. Each failure is
    logged and kept for diagnostics; when every candidate fails the result is
    an :class:`Exhausted` carrying one entry per candidate.
    """
    failures: list[Failed] = []
    for candidate in candidates:
        result = _attempt(candidate, loader, export_name)
        if isinstance(result, Loaded):
            log_json("candidate_resolved", candidate=candidate, skipped=len(failures))
            return Resolved(location=candidate, handler=result.value, failures=tuple(failures))

        failures.append(result)
        log_json(
            "candidate_load_failed",
            level=logging.INFO,
            candidate=candidate,
            reason=result.reason,
        )
    return Exhausted(failures=tuple(failures))
