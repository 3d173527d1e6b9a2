"""Locating prioctl.toml and writing the default one.

The finder walks up from a start directory the way git looks for
``.git/``. ``PRIOCTL_CONFIG`` overrides the walk.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "prioctl.toml"
CONFIG_ENV_VAR = "PRIOCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for prioctl.toml.

    Checks PRIOCTL_CONFIG first; a path there that is not a file means
    no config.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def render_default_config(board_name: str) -> str:
    """Sparse prioctl.toml written by ``prioctl init``."""
    return f'[board]\nname = "{board_name}"\n'
