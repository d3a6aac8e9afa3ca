"""
Extension point names.

Every point the resolver and renderer invoke is listed here and defined on
the registry at start-up. Names follow the ``subject.action`` convention.

Three shapes of point exist:

- filters fold a payload through each handler (``handler(payload, *context)``
  returns the new payload);
- vetoes ask each handler ``handler(*context) -> bool`` and stop at the first
  ``False``;
- injections are filters over an HTML fragment string, starting from ``""``.
"""

from __future__ import annotations

# ── Resolver ──────────────────────────────────────────────────────────────────
HOOK_RESOURCE_FIELDS = "resource.fields"
HOOK_COLLECTION_RESOURCES = "collection.resources"
HOOK_REST_RESOURCE_META = "rest.resource_meta"

# ── Resource rendering ────────────────────────────────────────────────────────
HOOK_RESOURCE_PRE_RENDER = "resource.pre_render"
HOOK_RESOURCE_RENDER = "resource.render"
HOOK_RESOURCE_CUSTOM_TYPE = "resource.custom_type"
HOOK_RESOURCE_DISPLAY_META = "resource.display_meta"
HOOK_RESOURCE_META_ITEMS = "resource.meta_items"
HOOK_RESOURCE_DISPLAY_FOOTER = "resource.display_footer"
HOOK_RESOURCE_FOOTER_START = "resource.footer_start"
HOOK_RESOURCE_RELATED = "resource.related"
HOOK_RESOURCE_FOOTER_END = "resource.footer_end"

# ── Master list ───────────────────────────────────────────────────────────────
ALL_HOOKS: list[str] = [
    HOOK_RESOURCE_FIELDS,
    HOOK_COLLECTION_RESOURCES,
    HOOK_REST_RESOURCE_META,
    HOOK_RESOURCE_PRE_RENDER,
    HOOK_RESOURCE_RENDER,
    HOOK_RESOURCE_CUSTOM_TYPE,
    HOOK_RESOURCE_DISPLAY_META,
    HOOK_RESOURCE_META_ITEMS,
    HOOK_RESOURCE_DISPLAY_FOOTER,
    HOOK_RESOURCE_FOOTER_START,
    HOOK_RESOURCE_RELATED,
    HOOK_RESOURCE_FOOTER_END,
]
