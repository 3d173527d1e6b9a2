"""Timing spans for ``--verbose`` runs.

A ``@traced`` service call opens a root span; ``trace_span`` blocks inside
it (including backend sends on settle tasks, which inherit the context)
add children. When the call returns a :class:`ServiceResult`, the span
tree lands in ``result.meta["telemetry"]``. With telemetry off every hook
is a single ``ContextVar.get``.
"""

from __future__ import annotations

import functools
import inspect
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

import structlog

from prioctl.services.result import ServiceResult

log = structlog.get_logger(__name__)

_enabled: ContextVar[bool] = ContextVar("prioctl_telemetry", default=False)
_current_span: ContextVar[Span | None] = ContextVar("prioctl_span", default=None)


@dataclass
class Span:
    name: str
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        """Elapsed milliseconds; 0.0 until the span is finished."""
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def child(self, name: str) -> Span:
        span = Span(name)
        self.children.append(span)
        return span

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def finish(self) -> None:
        self.finished = time.perf_counter()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.children:
            data["children"] = [span.to_dict() for span in self.children]
        return data


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.finish()
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a block under the active span; yields None outside a traced call."""
    parent = _current_span.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    with _activate(parent.child(name)) as span:
        yield span


def _attach(span: Span, result: Any) -> Any:
    log.debug("span.finished", span=span.name, duration_ms=round(span.duration_ms, 2))
    if not isinstance(result, ServiceResult):
        return result
    return result.model_copy(update={"meta": {**(result.meta or {}), "telemetry": span.to_dict()}})


def traced(func: Callable[..., Any]) -> Callable[..., Any]:
    """Record a root span for *func* and attach it to its ServiceResult."""
    name = func.__qualname__

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def run_async(*args: Any, **kwargs: Any) -> Any:
            if not _enabled.get():
                return await func(*args, **kwargs)
            with _activate(Span(name)) as span:
                result = await func(*args, **kwargs)
            return _attach(span, result)

        return run_async

    @functools.wraps(func)
    def run(*args: Any, **kwargs: Any) -> Any:
        if not _enabled.get():
            return func(*args, **kwargs)
        with _activate(Span(name)) as span:
            result = func(*args, **kwargs)
        return _attach(span, result)

    return run


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
