"""
Block and shortcode attribute schemas.

Each renderable kind has one options model. The model is the single source
of truth: ``get_schema`` lists its attributes (name, type, default) for the
editor, and ``fill_defaults`` validates an incoming attribute dict into it.

Blocks send camelCase attribute names with real JSON types; shortcodes send
snake_case names with string values ("true", "12"). Both spellings are
accepted and unknown keys are dropped.
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from resource_hub.config import settings
from resource_hub.exceptions import UnknownBlockKindError

_TRUTHY = {"1", "true", "on", "yes"}

SORT_FIELDS = ("date", "title", "modified", "menu_order")
RESOURCE_DISPLAYS = ("full", "card", "embed", "link")
COLLECTION_LAYOUTS = ("list", "grid", "playlist")


def _to_bool(value: Any) -> Any:
    """Shortcode-style boolean: only 1/true/on/yes are true, anything else is false."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def _to_optional_bool(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _to_bool(value)


def _to_str(value: Any) -> Any:
    return value if isinstance(value, str) else str(value)


def _to_int(value: Any) -> Any:
    """Whole number from a JSON number or a shortcode string; anything unparsable is 0."""
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


AttrBool = Annotated[bool, BeforeValidator(_to_bool)]
OptionalAttrBool = Annotated[Union[bool, None], BeforeValidator(_to_optional_bool)]
AttrInt = Annotated[int, BeforeValidator(_to_int)]
AttrStr = Annotated[str, BeforeValidator(_to_str)]


def attr(default: Any, block_name: str, shortcode_name: str | None = None) -> Any:
    """Declare an attribute known as ``block_name`` in blocks and ``shortcode_name`` in shortcodes."""
    choices = [block_name]
    if shortcode_name and shortcode_name != block_name:
        choices.append(shortcode_name)
    return Field(default, validation_alias=AliasChoices(*choices), serialization_alias=block_name)


class ViewOptions(BaseModel):
    """Base for all display option records: every option has a default, unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # A null attribute means "not set": the option keeps its default.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @classmethod
    def parse_attributes(cls, attributes: dict[str, Any] | None) -> ViewOptions:
        return cls.model_validate(attributes or {})


class GridOptions(ViewOptions):
    layout: AttrStr = attr(settings.grid_default_layout, "layout")
    columns: AttrInt = attr(3, "columns")
    limit: AttrInt = attr(settings.grid_default_limit, "limit")
    type: AttrStr = attr("", "type")
    topic: AttrStr = attr("", "topic")
    audience: AttrStr = attr("", "audience")
    orderby: AttrStr = attr(settings.grid_default_orderby, "orderby")
    order: AttrStr = attr("DESC", "order")
    show_filters: AttrBool = attr(True, "showFilters", "show_filters")
    show_type_filter: AttrBool = attr(True, "showTypeFilter", "show_type_filter")
    show_topic_filter: AttrBool = attr(True, "showTopicFilter", "show_topic_filter")
    show_audience_filter: AttrBool = attr(True, "showAudienceFilter", "show_audience_filter")
    show_search: AttrBool = attr(True, "showSearch", "show_search")
    show_pagination: AttrBool = attr(True, "showPagination", "show_pagination")
    featured_only: AttrBool = attr(False, "featuredOnly", "featured_only")
    class_name: AttrStr = attr("", "className", "class")

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: int) -> int:
        return max(1, min(value, settings.grid_max_limit))

    @field_validator("columns")
    @classmethod
    def _clamp_columns(cls, value: int) -> int:
        return max(1, min(value, 6))

    @field_validator("order")
    @classmethod
    def _normalize_order(cls, value: str) -> str:
        value = value.strip().upper()
        return value if value in ("ASC", "DESC") else "DESC"

    @field_validator("orderby")
    @classmethod
    def _normalize_orderby(cls, value: str) -> str:
        value = value.strip().lower()
        return value if value in SORT_FIELDS else "date"

    @property
    def type_slugs(self) -> list[str]:
        return _split_slugs(self.type)

    @property
    def topic_slugs(self) -> list[str]:
        return _split_slugs(self.topic)

    @property
    def audience_slugs(self) -> list[str]:
        return _split_slugs(self.audience)


class GridShortcodeOptions(GridOptions):
    """The ``[resources]`` shortcode: the grid block plus toolbar and query extras."""

    show_duration_filter: AttrBool = attr(True, "showDurationFilter", "show_duration_filter")
    show_sort_filter: AttrBool = attr(True, "showSortFilter", "show_sort_filter")
    show_layout_toggle: AttrBool = attr(True, "showLayoutToggle", "show_layout_toggle")
    include: AttrStr = attr("", "include")
    exclude: AttrStr = attr("", "exclude")
    search: AttrStr = attr("", "search")
    duration: AttrStr = attr("", "duration")
    page: AttrInt = attr(1, "page", "paged")
    instance_id: AttrStr = attr("", "id")

    @field_validator("page")
    @classmethod
    def _clamp_page(cls, value: int) -> int:
        return max(1, value)

    @property
    def include_ids(self) -> list[int]:
        return _split_ids(self.include)

    @property
    def exclude_ids(self) -> list[int]:
        return _split_ids(self.exclude)


class ResourceViewOptions(ViewOptions):
    resource_id: AttrInt = attr(0, "resourceId", "id")
    slug: AttrStr = attr("", "slug")
    display: AttrStr = attr("card", "display")
    show_title: AttrBool = attr(True, "showTitle", "show_title")
    show_meta: AttrBool = attr(True, "showMeta", "show_meta")
    show_image: AttrBool = attr(True, "showImage", "show_image")
    class_name: AttrStr = attr("", "className", "class")

    @field_validator("display")
    @classmethod
    def _normalize_display(cls, value: str) -> str:
        value = value.strip().lower()
        return value if value in RESOURCE_DISPLAYS else "full"


class ResourceShortcodeOptions(ResourceViewOptions):
    display: AttrStr = attr("full", "display")


class CollectionViewOptions(ViewOptions):
    collection_id: AttrInt = attr(0, "collectionId", "id")
    slug: AttrStr = attr("", "slug")
    layout: AttrStr = attr("", "layout")
    show_title: AttrBool = attr(True, "showTitle", "show_title")
    show_description: AttrBool = attr(True, "showDescription", "show_description")
    show_progress: OptionalAttrBool = attr(False, "showProgress", "show_progress")
    show_count: AttrBool = attr(True, "showCount", "show_count")
    class_name: AttrStr = attr("", "className", "class")

    @field_validator("layout")
    @classmethod
    def _normalize_layout(cls, value: str) -> str:
        value = value.strip().lower()
        return value if value in COLLECTION_LAYOUTS else ""


class CollectionShortcodeOptions(CollectionViewOptions):
    # None defers to the collection's own setting.
    show_progress: OptionalAttrBool = attr(None, "showProgress", "show_progress")


class VideoPlayerOptions(ViewOptions):
    """The ``[video]`` shortcode: a click-to-play player for one video resource."""

    resource_id: AttrInt = attr(0, "resourceId", "id")
    slug: AttrStr = attr("", "slug")
    class_name: AttrStr = attr("", "className", "class")


def _split_slugs(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _split_ids(value: str) -> list[int]:
    return [int(part) for part in _split_slugs(value) if part.isdigit() and int(part) > 0]


# ── Registry ──────────────────────────────────────────────────────────────────

BLOCK_KINDS: dict[str, type[ViewOptions]] = {
    "resources-grid": GridOptions,
    "resource": ResourceViewOptions,
    "collection": CollectionViewOptions,
}

SHORTCODE_TAGS: dict[str, type[ViewOptions]] = {
    "resources": GridShortcodeOptions,
    "resource": ResourceShortcodeOptions,
    "resource_collection": CollectionShortcodeOptions,
    "video": VideoPlayerOptions,
}


@dataclass(frozen=True)
class BlockAttribute:
    name: str
    type: str
    default: Any


def _type_name(annotation: Any) -> str:
    if get_origin(annotation) in (Union, types.UnionType):
        annotation = next(arg for arg in get_args(annotation) if arg is not type(None))
    if annotation is bool:
        return "boolean"
    if annotation in (int, float):
        return "number"
    return "string"


def _schema_for(model: type[ViewOptions]) -> list[BlockAttribute]:
    return [
        BlockAttribute(name=info.serialization_alias or name, type=_type_name(info.annotation), default=info.default)
        for name, info in model.model_fields.items()
    ]


def get_schema(block_kind: str) -> list[BlockAttribute]:
    """Ordered attribute list for a block kind; unknown kinds have none."""
    model = BLOCK_KINDS.get(block_kind)
    return _schema_for(model) if model else []


def get_shortcode_schema(tag: str) -> list[BlockAttribute]:
    model = SHORTCODE_TAGS.get(tag)
    return _schema_for(model) if model else []


def options_model(kind: str, shortcode: bool = False) -> type[ViewOptions]:
    registry = SHORTCODE_TAGS if shortcode else BLOCK_KINDS
    try:
        return registry[kind]
    except KeyError:
        raise UnknownBlockKindError(kind, sorted(registry)) from None


def fill_defaults(kind: str, attributes: dict[str, Any] | None, shortcode: bool = False) -> ViewOptions:
    """Validate incoming attributes for ``kind`` and fill every missing option with its default."""
    return options_model(kind, shortcode).parse_attributes(attributes)
