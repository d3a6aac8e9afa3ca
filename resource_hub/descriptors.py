"""
Resource and collection descriptors.

A descriptor is the immutable snapshot a view is projected from. The resolver
builds one per request from storage; nothing keeps it beyond a single render.

The resource type is a closed set. ``ResourceType.parse`` maps a stored type
tag onto it and returns ``None`` for anything it does not recognise, which is
the "unknown" variant: a descriptor with no metadata fields.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


class ResourceType(str, enum.Enum):
    """Closed classification of a resource."""

    VIDEO = "video"
    PDF = "pdf"
    DOWNLOAD = "download"
    EXTERNAL_LINK = "external-link"
    INTERNAL_CONTENT = "internal-content"

    @classmethod
    def parse(cls, tag: str | None) -> ResourceType | None:
        """Return the member for ``tag``, or None when the tag is not one of ours."""
        if not tag:
            return None
        try:
            return cls(tag)
        except ValueError:
            return None


class FieldKind(str, enum.Enum):
    """Semantic kind of a type-specific metadata field."""

    TEXT = "text"
    URL = "url"
    NUMBER = "number"
    BOOLEAN = "boolean"
    FILE = "file"
    SIZE = "size"
    CHOICE = "choice"
    DURATION = "duration"


TYPE_FIELD_SCHEMA: Mapping[ResourceType, tuple[tuple[str, FieldKind], ...]] = MappingProxyType(
    {
        ResourceType.VIDEO: (
            ("video_provider", FieldKind.CHOICE),
            ("video_url", FieldKind.URL),
            ("video_id", FieldKind.TEXT),
            ("video_duration", FieldKind.DURATION),
        ),
        ResourceType.PDF: (
            ("pdf_file", FieldKind.FILE),
            ("pdf_file_size", FieldKind.SIZE),
            ("pdf_page_count", FieldKind.NUMBER),
            ("pdf_viewer_mode", FieldKind.CHOICE),
        ),
        ResourceType.DOWNLOAD: (
            ("download_file", FieldKind.FILE),
            ("download_file_size", FieldKind.SIZE),
            ("download_version", FieldKind.TEXT),
        ),
        ResourceType.EXTERNAL_LINK: (
            ("external_url", FieldKind.URL),
            ("open_new_tab", FieldKind.BOOLEAN),
        ),
        ResourceType.INTERNAL_CONTENT: (
            ("summary", FieldKind.TEXT),
            ("reading_time", FieldKind.NUMBER),
            ("show_toc", FieldKind.BOOLEAN),
            ("show_related", FieldKind.BOOLEAN),
        ),
    }
)

# Every member must have exactly one schema entry.
if set(TYPE_FIELD_SCHEMA) != set(ResourceType):
    raise RuntimeError("TYPE_FIELD_SCHEMA is out of sync with ResourceType")


TYPE_LABELS: Mapping[ResourceType, tuple[str, str]] = MappingProxyType(
    {
        ResourceType.VIDEO: ("Video", "dashicons-video-alt3"),
        ResourceType.PDF: ("PDF", "dashicons-pdf"),
        ResourceType.DOWNLOAD: ("Download", "dashicons-download"),
        ResourceType.EXTERNAL_LINK: ("External Link", "dashicons-external"),
        ResourceType.INTERNAL_CONTENT: ("Internal Content", "dashicons-text-page"),
    }
)

DEFAULT_TYPE_ICON = "dashicons-media-default"


def field_names(resource_type: ResourceType | None) -> tuple[str, ...]:
    """Field names for a type, in schema order. Unknown types have none."""
    if resource_type is None:
        return ()
    return tuple(name for name, _ in TYPE_FIELD_SCHEMA[resource_type])


@dataclass(frozen=True)
class ResourceDescriptor:
    """Read-only snapshot of a resource and its type-specific metadata."""

    id: int
    type_tag: str
    title: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    slug: str = ""
    excerpt: str = ""
    body: str = ""
    thumbnail_url: str | None = None
    type_name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def resource_type(self) -> ResourceType | None:
        return ResourceType.parse(self.type_tag)

    @property
    def type_icon(self) -> str:
        resource_type = self.resource_type
        if resource_type is None:
            return DEFAULT_TYPE_ICON
        return TYPE_LABELS[resource_type][1]

    @property
    def type_label(self) -> str:
        """Display name of the type: the term name, else the built-in label."""
        if self.type_name:
            return self.type_name
        resource_type = self.resource_type
        return TYPE_LABELS[resource_type][0] if resource_type else ""

    def get(self, name: str, default: Any = None) -> Any:
        value = self.fields.get(name)
        return default if value is None else value


@dataclass(frozen=True)
class CollectionDescriptor:
    """Read-only snapshot of a collection: ordered member ids plus display settings."""

    id: int
    title: str
    description: str = ""
    member_ids: tuple[int, ...] = ()
    progress: float | None = None
    slug: str = ""
    display_style: str = "list"
    show_progress: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "member_ids", tuple(self.member_ids))
        if self.progress is not None:
            object.__setattr__(self, "progress", min(100.0, max(0.0, float(self.progress))))
