"""Result envelope returned by every board and move operation.

A move ends in one of three outcomes, reported through ``data["status"]``:
``moved`` (backend confirmed), ``noop`` (nothing to do, with a ``reason``)
or a failure whose error code says whether the optimistic state was rolled
back. Commands and the output layer branch on these, never on exceptions.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(StrEnum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_CONTAINER = "INVALID_CONTAINER"
    NO_BOARD = "NO_BOARD"
    BACKEND_REJECTED = "BACKEND_REJECTED"
    BACKEND_TIMEOUT = "BACKEND_TIMEOUT"
    BACKEND_CANCELLED = "BACKEND_CANCELLED"


class MoveOutcome(StrEnum):
    MOVED = "moved"
    NOOP = "noop"


# Failures raised after the cache was already updated optimistically.
ROLLBACK_CODES = frozenset(
    {ErrorCode.BACKEND_REJECTED, ErrorCode.BACKEND_TIMEOUT, ErrorCode.BACKEND_CANCELLED}
)


class ServiceError(BaseModel):
    """Error payload: a stable ``code``, a human message, and lookup keys."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @property
    def rolled_back(self) -> bool:
        return self.code in ROLLBACK_CODES


class ServiceResult(BaseModel):
    """Outcome of one operation.

    Attributes:
        ok: False only for errors; a no-op move is still ``ok``.
        op: Operation name (``"move_item"``, ``"show"``, ...).
        data: Operation payload. Present on failures too when the caller
            needs to know what was reverted.
        warnings: Non-fatal problems (plugin failures, existing config).
        error: Set when ``ok`` is False.
        meta: Telemetry span tree when ``-v`` is active.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(
        cls,
        op: str,
        data: dict[str, Any] | None = None,
        *,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        return cls(ok=True, op=op, data=data or {}, warnings=warnings or [])

    @classmethod
    def failure(
        cls,
        op: str,
        code: ErrorCode | str,
        message: str,
        *,
        data: dict[str, Any] | None = None,
        **detail: Any,
    ) -> ServiceResult:
        """Build an ``ok=False`` result; keyword arguments become ``error.detail``."""
        return cls(
            ok=False,
            op=op,
            data=data or {},
            error=ServiceError(code=str(code), message=message, detail=detail),
        )

    @property
    def status(self) -> str | None:
        """Move outcome (``moved``/``noop``), or None for other operations."""
        value = self.data.get("status")
        return None if value is None else str(value)

    @property
    def rolled_back(self) -> bool:
        return self.error is not None and self.error.rolled_back
