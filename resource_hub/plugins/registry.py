"""
Hook Registry

HookRegistry: stores the handlers registered against each extension point and
folds payloads through them.

Points must be defined before anything can be registered on them; a typo in
a plugin's hook name fails loudly at start-up rather than silently never
firing. Handlers run synchronously in registration order. A handler that
raises is logged and skipped, and the payload carries on unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from resource_hub.exceptions import UnknownExtensionPointError

logger = logging.getLogger(__name__)

FilterHandler = Callable[..., Any]
VetoHandler = Callable[..., bool]


class HookRegistry:
    """
    Registry of extension points and their handlers.

    One instance lives on ``app.state.hooks``; it is written during start-up
    and only read while serving requests.
    """

    def __init__(self, points: Iterable[str] = ()) -> None:
        self._filters: dict[str, list[FilterHandler]] = {}
        self._vetoes: dict[str, list[VetoHandler]] = {}
        for name in points:
            self.define_point(name)

    # ── Definition ────────────────────────────────────────────────────────────

    def define_point(self, name: str) -> None:
        """Declare an extension point. Defining a point twice is a no-op."""
        self._filters.setdefault(name, [])
        self._vetoes.setdefault(name, [])

    def is_defined(self, name: str) -> bool:
        return name in self._filters

    @property
    def points(self) -> list[str]:
        return list(self._filters)

    def _require(self, name: str) -> None:
        if name not in self._filters:
            raise UnknownExtensionPointError(name)

    # ── Registration ──────────────────────────────────────────────────────────

    def add_filter(self, name: str, handler: FilterHandler) -> None:
        """Append a payload transformer to ``name``."""
        self._require(name)
        self._filters[name].append(handler)
        logger.debug("Filter registered on %s: %s", name, getattr(handler, "__qualname__", handler))

    def add_veto(self, name: str, handler: VetoHandler) -> None:
        """Append a predicate to ``name``; any False answer vetoes the point."""
        self._require(name)
        self._vetoes[name].append(handler)
        logger.debug("Veto registered on %s: %s", name, getattr(handler, "__qualname__", handler))

    # ── Dispatch ──────────────────────────────────────────────────────────────

    def invoke(self, name: str, payload: Any, *context: Any) -> Any:
        """
        Fold ``payload`` through every filter on ``name``.

        Args:
            name:     Hook constant from resource_hub.plugins.hooks.
            payload:  Initial value handed to the first filter.
            *context: Extra read-only arguments passed to every filter.

        Returns:
            The value returned by the last filter, or ``payload`` when none
            are registered.
        """
        self._require(name)
        for handler in self._filters[name]:
            try:
                payload = handler(payload, *context)
            except Exception as exc:
                logger.warning("Filter %r on %s raised: %s", handler, name, exc)
        return payload

    def invoke_veto(self, name: str, *context: Any) -> bool:
        """Return False as soon as one predicate on ``name`` answers False."""
        self._require(name)
        for handler in self._vetoes[name]:
            try:
                if handler(*context) is False:
                    return False
            except Exception as exc:
                logger.warning("Veto %r on %s raised: %s", handler, name, exc)
        return True
