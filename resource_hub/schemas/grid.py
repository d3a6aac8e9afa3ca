"""
Request and response bodies for the grid filter endpoint.
"""

from typing import Any

from pydantic import BaseModel, Field

# Sort dropdown values and the (orderby, order) pair each one stands for.
SORT_SHORTCUTS: dict[str, tuple[str, str]] = {
    "date": ("date", "DESC"),
    "title-asc": ("title", "ASC"),
    "title-desc": ("title", "DESC"),
    "modified": ("modified", "DESC"),
}


class GridFilterRequest(BaseModel):
    """
    A toolbar interaction on a rendered grid.

    ``atts`` echoes the grid's original attributes (the container's
    ``data-atts``); the remaining fields override them. None means "leave
    as is", an empty string clears the filter.
    """

    atts: dict[str, Any] = Field(default_factory=dict)
    type: str | None = None
    topic: str | None = None
    audience: str | None = None
    duration: str | None = None
    sort: str | None = None
    search: str | None = None
    paged: int = Field(1, ge=1)

    def merged_attributes(self) -> dict[str, Any]:
        """The grid attributes with every override applied."""
        attributes = dict(self.atts)
        for key in ("type", "topic", "audience", "duration", "search"):
            value = getattr(self, key)
            if value is not None:
                attributes[key] = value.strip()

        if self.sort is not None:
            orderby, order = SORT_SHORTCUTS.get(self.sort, (self.sort, "DESC"))
            attributes["orderby"] = orderby
            attributes["order"] = order

        attributes["page"] = self.paged
        attributes.pop("paged", None)
        return attributes


class GridFilterResult(BaseModel):
    html: str
    pagination: str
    found: int
    max_pages: int
