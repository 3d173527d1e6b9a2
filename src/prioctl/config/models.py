"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, prioctl.toml only contains
overrides. A fresh board needs only ``[board] name``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from prioctl.domain.drag import DEFAULT_MOVE_THRESHOLD
from prioctl.domain.order_keys import DEFAULT_GAP


class BoardConfig(BaseModel):
    """[board] section."""

    model_config = {"frozen": True}

    name: str = "my-board"


class OrderingConfig(BaseModel):
    """[ordering] section."""

    model_config = {"frozen": True}

    default_gap: int = Field(default=DEFAULT_GAP, ge=2)


class GestureConfig(BaseModel):
    """[gesture] section."""

    model_config = {"frozen": True}

    long_press_ms: int = Field(default=500, ge=0)
    move_threshold_px: float = Field(default=DEFAULT_MOVE_THRESHOLD, ge=0)

    @property
    def long_press_delay(self) -> float:
        """Long-press delay in seconds."""
        return self.long_press_ms / 1000


class SyncConfig(BaseModel):
    """[sync] section."""

    model_config = {"frozen": True}

    move_timeout_s: float | None = Field(default=10.0, gt=0)
    refresh_after_move: bool = True
