"""
Pagination Utilities

Offset/limit arithmetic for page-numbered listings.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PageWindow:
    """One page of a page-numbered listing."""

    page: int
    limit: int
    total: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def max_pages(self) -> int:
        if self.total <= 0 or self.limit <= 0:
            return 0
        return -(-self.total // self.limit)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.max_pages


def page_offset(page: int, limit: int) -> int:
    """Offset of the first row on ``page`` (1-based)."""
    return (max(1, page) - 1) * max(1, limit)
