"""
Plugin Base Classes

PluginMeta: declarative metadata for a plugin (name, version, hooks).
PluginBase: abstract base class all plugins must subclass.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from resource_hub.plugins.registry import HookRegistry


@dataclass
class PluginMeta:
    """
    Declarative metadata describing a plugin.

    Attributes:
        name:        Machine-readable slug, e.g. "reading-badges".
        version:     Semver string, e.g. "1.0.0".
        description: Human-readable description.
        author:      Plugin author.
        hooks:       Extension points the plugin attaches handlers to.
    """

    name: str
    version: str
    description: str = ""
    author: str = "Resource Hub"
    hooks: list[str] = field(default_factory=list)


class PluginBase(ABC):
    """
    Abstract base class for Resource Hub plugins.

    Subclasses implement ``meta`` and ``register``; the loader instantiates
    each configured plugin once and calls ``register`` with the app's
    registry.
    """

    @property
    @abstractmethod
    def meta(self) -> PluginMeta:
        """Return the plugin's metadata."""
        ...

    @abstractmethod
    def register(self, hooks: HookRegistry) -> None:
        """Attach this plugin's filters and vetoes to ``hooks``."""
        ...
