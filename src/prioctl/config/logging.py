"""structlog setup for prioctl.

Logs always go to stderr so stdout carries only command results. Human
mode renders key/value lines; ``--log-json`` emits one JSON object per
line. Move lifecycle events (``move.applied``, ``move.confirmed``,
``move.rolled_back`` ...) lead with the fields needed to follow one move
through the queue.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

MOVE_EVENT_FIELDS = ("move_id", "item_id", "container_id", "insert_at", "order", "code")

_QUIET_LOGGERS = ("sqlalchemy", "sqlalchemy.engine", "pluggy", "asyncio")


class _LiveStderrHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Write to whatever ``sys.stderr`` is at emit time.

    Click's test runner and pytest's capture swap ``sys.stderr`` after the
    handler is installed.
    """

    def __init__(self) -> None:
        super().__init__()

    @property
    def stream(self) -> TextIO:  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, _value: TextIO) -> None:
        pass


def _order_move_fields(
    _logger: Any, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    event = event_dict.get("event")
    if not isinstance(event, str) or not event.startswith("move."):
        return event_dict
    ordered: structlog.types.EventDict = {"event": event}
    for key in MOVE_EVENT_FIELDS:
        if key in event_dict:
            ordered[key] = event_dict[key]
    for key, value in event_dict.items():
        ordered.setdefault(key, value)
    return ordered


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    ``verbose`` lowers the ``prioctl`` loggers to DEBUG; third-party
    loggers stay at WARNING either way.
    """
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _order_move_fields,
    ]

    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), sort_keys=False)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = _LiveStderrHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("prioctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
