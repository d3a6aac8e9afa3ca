"""
Plugin Loader

Builds the application's HookRegistry and attaches the plugins named in
``settings.plugins``. Each entry is a ``"package.module:ClassName"`` path.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable

from resource_hub.plugins.base import PluginBase
from resource_hub.plugins.hooks import ALL_HOOKS
from resource_hub.plugins.registry import HookRegistry

logger = logging.getLogger(__name__)


def create_hook_registry() -> HookRegistry:
    """A registry with every built-in extension point defined and no handlers."""
    return HookRegistry(ALL_HOOKS)


def load_plugin_class(path: str) -> type[PluginBase]:
    """Import ``"package.module:ClassName"`` and check it is a PluginBase subclass."""
    module_name, _, class_name = path.partition(":")
    if not module_name or not class_name:
        raise ValueError(f"Plugin path must look like 'package.module:ClassName', got {path!r}")

    module = importlib.import_module(module_name)
    plugin_class = getattr(module, class_name)
    if not (isinstance(plugin_class, type) and issubclass(plugin_class, PluginBase)):
        raise TypeError(f"{path} is not a PluginBase subclass")
    return plugin_class


def initialize_plugins(registry: HookRegistry, plugin_paths: Iterable[str]) -> list[PluginBase]:
    """
    Instantiate and register each configured plugin.

    Called from main.py lifespan(). Import and registration errors propagate:
    a misconfigured plugin stops start-up.
    """
    loaded: list[PluginBase] = []
    for path in plugin_paths:
        plugin = load_plugin_class(path)()
        plugin.register(registry)
        loaded.append(plugin)
        logger.info("Plugin registered: %s v%s", plugin.meta.name, plugin.meta.version)

    logger.info("Plugin initialisation complete, %d plugins loaded", len(loaded))
    return loaded
