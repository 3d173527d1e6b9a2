"""Plugin registry for ordering events.

Plugins come from the ``prioctl.plugins`` entry-point group or are
registered directly. Each hook implementation runs on its own, so one
failing plugin neither stops the others nor the move that fired it.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

import pluggy

from prioctl.plugins.hookspecs import PrioctlHookSpec

PROJECT_NAME = "prioctl"
ENTRY_POINT_GROUP = "prioctl.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PrioctlHookSpec)
        self.entry_points_loaded = False

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    @property
    def names(self) -> list[str]:
        return [name for name, _plugin in self._pm.list_name_plugin()]

    def register(self, plugin: object, name: str | None = None) -> str:
        """Register *plugin*; the name defaults to its class name."""
        name = name or type(plugin).__name__
        self._pm.register(plugin, name=name)
        logger.debug("Registered plugin %s", name)
        return name

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def load_entry_points(self) -> list[str]:
        """Load the ``prioctl.plugins`` group and return all plugin names.

        An entry point may name a plugin class; it is replaced by an
        instance. Classes that fail to construct are dropped with a warning.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        for name, plugin in self._pm.list_name_plugin():
            if not inspect.isclass(plugin):
                continue
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Could not instantiate plugin %s", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)
        self.entry_points_loaded = True
        return self.names

    def dispatch(self, hook_name: str, **payload: Any) -> list[str]:
        """Call every implementation of *hook_name*.

        Returns the names of the plugins that raised; their errors are
        logged, never propagated.
        """
        caller = getattr(self._pm.hook, hook_name, None)
        if caller is None:
            return []
        failed: list[str] = []
        for impl in caller.get_hookimpls():
            try:
                impl.function(**{arg: payload[arg] for arg in impl.argnames})
            except Exception:
                logger.warning("Plugin %s failed in %s", impl.plugin_name, hook_name, exc_info=True)
                failed.append(impl.plugin_name)
        return failed
