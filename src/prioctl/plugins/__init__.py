"""Plugins observe confirmed moves, rollbacks and renumbering.

INVARIANT: A failing plugin never changes the outcome of a move.
"""

from prioctl.plugins.manager import PluginManager

__all__ = ["PluginManager"]
