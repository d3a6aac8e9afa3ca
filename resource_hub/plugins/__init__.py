"""
Resource Hub extension points.

Public API:
    HookRegistry          registry of extension points and handlers
    PluginMeta            plugin metadata dataclass
    PluginBase            abstract base class for plugins
    create_hook_registry  registry with all built-in points defined
    initialize_plugins    load plugins named in settings
"""

from .base import PluginBase, PluginMeta
from .loader import create_hook_registry, initialize_plugins
from .registry import HookRegistry

__all__ = ["HookRegistry", "PluginBase", "PluginMeta", "create_hook_registry", "initialize_plugins"]
