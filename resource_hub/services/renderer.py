"""
View Renderer

Projects descriptors into HTML fragments for the render entry points
(single resource, collection, resources grid, video player) plus the grid's
AJAX filter.

The renderer never raises for missing content: a zero id yields the editor
placeholder, an unknown id yields a fixed "not found" fragment and an empty
query yields the "no results" indicator.

All markup comes from Jinja2 templates under ``resource_hub/templates`` with
autoescaping on. Article bodies go through bleach before they are marked
safe; fragments returned by extension point handlers are trusted as-is.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from resource_hub.config import settings
from resource_hub.descriptors import DEFAULT_TYPE_ICON, TYPE_LABELS, ResourceDescriptor, ResourceType
from resource_hub.models.taxonomy import Taxonomy
from resource_hub.plugins.hooks import (
    HOOK_RESOURCE_CUSTOM_TYPE,
    HOOK_RESOURCE_DISPLAY_FOOTER,
    HOOK_RESOURCE_DISPLAY_META,
    HOOK_RESOURCE_FOOTER_END,
    HOOK_RESOURCE_FOOTER_START,
    HOOK_RESOURCE_META_ITEMS,
    HOOK_RESOURCE_PRE_RENDER,
    HOOK_RESOURCE_RELATED,
    HOOK_RESOURCE_RENDER,
)
from resource_hub.plugins.registry import HookRegistry
from resource_hub.schemas.blocks import (
    COLLECTION_LAYOUTS,
    CollectionShortcodeOptions,
    CollectionViewOptions,
    GridOptions,
    GridShortcodeOptions,
    ResourceShortcodeOptions,
    ResourceViewOptions,
    VideoPlayerOptions,
    fill_defaults,
)
from resource_hub.schemas.grid import SORT_SHORTCUTS, GridFilterRequest, GridFilterResult
from resource_hub.services.resolver import ResourceResolver
from resource_hub.services.store import ResourceQuery, ResourceRecord, ResourceStore
from resource_hub.utils.media import (
    detect_provider,
    extract_video_id,
    format_file_size,
    get_video_embed_url,
    get_video_thumbnail_url,
)
from resource_hub.utils.pagination import PageWindow, page_offset
from resource_hub.utils.sanitize import sanitize_rich_content, sanitize_url, word_excerpt
from resource_hub.utils.toc import generate_toc

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

template_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

_TRUTHY = {"1", "true", "on", "yes"}

TYPE_TEMPLATES = {
    ResourceType.VIDEO: "types/video.html",
    ResourceType.PDF: "types/pdf.html",
    ResourceType.DOWNLOAD: "types/download.html",
    ResourceType.EXTERNAL_LINK: "types/external_link.html",
    ResourceType.INTERNAL_CONTENT: "types/internal_content.html",
}

DURATION_OPTIONS = [
    ("", "All Durations"),
    ("0-5", "Under 5 minutes"),
    ("5-15", "5-15 minutes"),
    ("15-30", "15-30 minutes"),
    ("30+", "30+ minutes"),
]

SORT_LABELS = {
    "date": "Newest First",
    "title-asc": "Title (A-Z)",
    "title-desc": "Title (Z-A)",
    "modified": "Recently Updated",
}

TAXONOMY_FILTERS = {
    "type": (Taxonomy.TYPE, "All Types"),
    "topic": (Taxonomy.TOPIC, "All Topics"),
    "audience": (Taxonomy.AUDIENCE, "All Audiences"),
}


# ── Small helpers ─────────────────────────────────────────────────────────────


def is_enabled(value: Any) -> bool:
    """Truthiness of a stored flag, which may be a bool, a number or a "1"/"true" string."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def reading_time_minutes(descriptor: ResourceDescriptor) -> int | None:
    """
    Minutes to show as reading time, or None when nothing should be shown.

    Only internal-content resources have a reading time, and only when the
    stored value is a positive number.
    """
    if descriptor.resource_type is not ResourceType.INTERNAL_CONTENT:
        return None
    value = descriptor.get("reading_time")
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            return None
        value = int(value)
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    return None


def resource_url(slug: str) -> str:
    return f"{settings.resource_base_url.rstrip('/')}/{slug}/"


def collection_url(slug: str) -> str:
    return f"{settings.collection_base_url.rstrip('/')}/{slug}/"


def term_url(taxonomy: str, slug: str) -> str:
    short = taxonomy.removeprefix("resource_")
    return f"{settings.resource_base_url.rstrip('/')}/{short}/{slug}/"


def pluralize(count: int, singular: str, plural: str) -> str:
    return (singular if count == 1 else plural) % count


@dataclass(frozen=True)
class MetaFact:
    """One type-specific fact in the meta row, e.g. a page count."""

    css_class: str
    icon: str
    text: str


def type_facts(descriptor: ResourceDescriptor) -> list[MetaFact]:
    """Facts worth showing for the descriptor's type; empty fields are skipped."""
    facts: list[MetaFact] = []
    resource_type = descriptor.resource_type

    if resource_type is ResourceType.VIDEO:
        if descriptor.get("video_duration"):
            facts.append(MetaFact("wprh-meta-duration", "dashicons-clock", str(descriptor.get("video_duration"))))
    elif resource_type is ResourceType.PDF:
        size = format_file_size(descriptor.get("pdf_file_size"))
        if size:
            facts.append(MetaFact("wprh-meta-size", "dashicons-media-document", size))
        pages = _positive_int(descriptor.get("pdf_page_count"))
        if pages:
            facts.append(MetaFact("wprh-meta-pages", "dashicons-media-text", pluralize(pages, "%d page", "%d pages")))
    elif resource_type is ResourceType.DOWNLOAD:
        size = format_file_size(descriptor.get("download_file_size"))
        if size:
            facts.append(MetaFact("wprh-meta-size", "dashicons-media-archive", size))
        if descriptor.get("download_version"):
            facts.append(MetaFact("wprh-meta-version", "dashicons-tag", f"Version {descriptor.get('download_version')}"))
    return facts


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _record_type(record: ResourceRecord) -> tuple[str, str, str]:
    """(slug, label, icon) for a storage record's type term."""
    if record.type_term is None:
        return "", "", DEFAULT_TYPE_ICON
    resource_type = ResourceType.parse(record.type_term.slug)
    icon = TYPE_LABELS[resource_type][1] if resource_type else DEFAULT_TYPE_ICON
    return record.type_term.slug, record.type_term.name, icon


# ── Renderer ──────────────────────────────────────────────────────────────────


class ViewRenderer:
    """Renders blocks and shortcodes for one request."""

    def __init__(self, store: ResourceStore, hooks: HookRegistry, resolver: ResourceResolver | None = None):
        self.store = store
        self.hooks = hooks
        self.resolver = resolver or ResourceResolver(store, hooks)
        self.env = template_env

    def _render(self, template_name: str, **context: Any) -> Markup:
        return Markup(self.env.get_template(template_name).render(**context))

    def _message(self, css_class: str, message: str) -> Markup:
        return self._render("partials/message.html", css_class=css_class, message=message)

    # ── Entry points ──────────────────────────────────────────────────────────

    async def render_block(self, kind: str, attributes: dict[str, Any] | None) -> str:
        """Render a block kind from its raw attributes."""
        return await self._dispatch(fill_defaults(kind, attributes))

    async def render_shortcode(self, tag: str, attributes: dict[str, Any] | None) -> str:
        """Render a shortcode tag from its raw attributes."""
        return await self._dispatch(fill_defaults(tag, attributes, shortcode=True))

    async def _dispatch(self, options: Any) -> str:
        if isinstance(options, VideoPlayerOptions):
            return await self.render_video_player(options)
        if isinstance(options, GridOptions):
            return await self.render_grid(options)
        if isinstance(options, ResourceViewOptions):
            return await self.render_resource(options)
        return await self.render_collection(options)

    # ── Single resource ───────────────────────────────────────────────────────

    async def render_resource(self, options: ResourceViewOptions) -> str:
        """
        Render one resource in the requested display mode.

        A zero id renders the selection placeholder. Shortcodes may select by
        slug instead; blocks always select by id.
        """
        by_slug = isinstance(options, ResourceShortcodeOptions) and bool(options.slug)
        if not options.resource_id and not by_slug:
            return self._message("wprh-block-placeholder", "Please select a resource.")

        descriptor = None
        if options.resource_id:
            descriptor = await self.resolver.resolve(options.resource_id)
        if descriptor is None and by_slug:
            descriptor = await self.resolver.resolve_by_slug(options.slug)
        if descriptor is None:
            logger.debug("Resource not found for id=%s slug=%r", options.resource_id, options.slug)
            return self._message("wprh-resource-error", "Resource not found.")

        return await self.render_descriptor(descriptor, options)

    async def render_descriptor(self, descriptor: ResourceDescriptor, options: ResourceViewOptions) -> str:
        """Render an already-resolved descriptor."""
        context = {
            "resource": descriptor,
            "options": options,
            "url": resource_url(descriptor.slug),
            "type_slug": descriptor.type_tag,
            "type_label": descriptor.type_label,
            "type_icon": descriptor.type_icon,
            "thumbnail_url": sanitize_url(descriptor.thumbnail_url),
        }

        if options.display == "link":
            return self._render("blocks/resource_link.html", **context)

        if options.display == "card":
            excerpt = word_excerpt(descriptor.excerpt or descriptor.body, settings.excerpt_words)
            meta = self.render_meta(descriptor) if options.show_meta else Markup("")
            return self._render("blocks/resource_card.html", excerpt=excerpt, meta=meta, **context)

        body = self.render_type_body(descriptor)
        if options.display == "embed":
            return self._render("blocks/resource_embed.html", body=body, **context)

        meta = self.render_meta(descriptor) if options.show_meta else Markup("")
        footer = await self.render_footer(descriptor)
        return self._render("blocks/resource_full.html", body=body, meta=meta, footer=footer, **context)

    def render_type_body(self, descriptor: ResourceDescriptor) -> Markup:
        """
        The type-specific body of a resource.

        ``resource.pre_render`` may return markup that replaces the body
        entirely; otherwise the body is rendered from the type's template and
        passed through ``resource.render``. Tags outside the built-in types get
        the default body, which ``resource.custom_type`` may replace.
        """
        tag = descriptor.type_tag
        if not tag:
            return self._render("types/default.html", body=Markup(sanitize_rich_content(descriptor.body)))

        replacement = self.hooks.invoke(HOOK_RESOURCE_PRE_RENDER, "", tag, descriptor)
        if replacement:
            return Markup(replacement)

        # Handlers receive plain str so their concatenations are not escaped.
        resource_type = descriptor.resource_type
        if resource_type is None:
            default = self._render("types/default.html", body=Markup(sanitize_rich_content(descriptor.body)))
            content = self.hooks.invoke(HOOK_RESOURCE_CUSTOM_TYPE, str(default), tag, descriptor)
        else:
            content = str(getattr(self, f"_{resource_type.name.lower()}_body")(descriptor))

        return Markup(self.hooks.invoke(HOOK_RESOURCE_RENDER, content, tag, descriptor))

    def _description(self, descriptor: ResourceDescriptor) -> Markup:
        return Markup(sanitize_rich_content(descriptor.body))

    def _video_body(self, descriptor: ResourceDescriptor) -> Markup:
        video_url = sanitize_url(descriptor.get("video_url"))
        provider = descriptor.get("video_provider") or detect_provider(video_url)
        video_id = descriptor.get("video_id") or extract_video_id(video_url, provider)

        if not video_url and not video_id:
            return self._message("wprh-notice wprh-notice-warning", "No video has been configured for this resource.")

        embed_url = get_video_embed_url(video_id, provider) if video_id and provider else None
        return self._render(
            TYPE_TEMPLATES[ResourceType.VIDEO],
            resource=descriptor,
            embed_url=embed_url,
            local_url=video_url if provider == "local" else None,
            duration=descriptor.get("video_duration"),
            description=self._description(descriptor),
        )

    def _pdf_body(self, descriptor: ResourceDescriptor) -> Markup:
        pdf_url = sanitize_url(descriptor.get("pdf_file"))
        if not pdf_url:
            return self._message("wprh-notice wprh-notice-warning", "No PDF file has been uploaded for this resource.")

        pages = _positive_int(descriptor.get("pdf_page_count"))
        viewer_mode = descriptor.get("pdf_viewer_mode", "embedded")
        return self._render(
            TYPE_TEMPLATES[ResourceType.PDF],
            resource=descriptor,
            pdf_url=pdf_url,
            size=format_file_size(descriptor.get("pdf_file_size")),
            pages=pluralize(pages, "%d page", "%d pages") if pages else "",
            show_viewer=viewer_mode in ("embedded", "inline"),
            description=self._description(descriptor),
        )

    def _download_body(self, descriptor: ResourceDescriptor) -> Markup:
        download_url = sanitize_url(descriptor.get("download_file"))
        if not download_url:
            return self._message(
                "wprh-notice wprh-notice-warning", "No download file has been uploaded for this resource."
            )

        filename = Path(urlparse(download_url).path).name or download_url
        return self._render(
            TYPE_TEMPLATES[ResourceType.DOWNLOAD],
            download_url=download_url,
            filename=filename,
            size=format_file_size(descriptor.get("download_file_size")),
            version=descriptor.get("download_version"),
            description=self._description(descriptor),
        )

    def _external_link_body(self, descriptor: ResourceDescriptor) -> Markup:
        external_url = sanitize_url(descriptor.get("external_url"))
        if not external_url:
            return self._message(
                "wprh-notice wprh-notice-warning", "No external URL has been configured for this resource."
            )

        new_tab = is_enabled(descriptor.get("open_new_tab"))
        return self._render(
            TYPE_TEMPLATES[ResourceType.EXTERNAL_LINK],
            external_url=external_url,
            target="_blank" if new_tab else "_self",
            rel="noopener noreferrer" if new_tab else "",
            description=self._description(descriptor),
        )

    def _internal_content_body(self, descriptor: ResourceDescriptor) -> Markup:
        body = sanitize_rich_content(descriptor.body)
        toc = []
        if is_enabled(descriptor.get("show_toc")) and body:
            toc, body = generate_toc(body)

        minutes = reading_time_minutes(descriptor)
        return self._render(
            TYPE_TEMPLATES[ResourceType.INTERNAL_CONTENT],
            reading_time=f"{minutes} minute read" if minutes else "",
            toc=toc,
            body=Markup(body),
        )

    # ── Meta and footer ───────────────────────────────────────────────────────

    def render_meta(self, descriptor: ResourceDescriptor) -> Markup:
        """The meta row: type label, type facts, reading time and injected items."""
        if not self.hooks.invoke_veto(HOOK_RESOURCE_DISPLAY_META, descriptor):
            return Markup("")

        minutes = reading_time_minutes(descriptor)
        extra = self.hooks.invoke(HOOK_RESOURCE_META_ITEMS, "", descriptor)
        return self._render(
            "partials/meta.html",
            type_label=descriptor.type_label,
            type_icon=descriptor.type_icon,
            facts=type_facts(descriptor),
            reading_time=f"{minutes} min read" if minutes else "",
            extra=Markup(extra or ""),
        )

    async def render_footer(self, descriptor: ResourceDescriptor) -> Markup:
        """
        Footer sequence: footer_start, then related resources when the
        resource asks for them, then footer_end. The whole footer can be
        vetoed.
        """
        if not self.hooks.invoke_veto(HOOK_RESOURCE_DISPLAY_FOOTER, descriptor):
            return Markup("")

        start = self.hooks.invoke(HOOK_RESOURCE_FOOTER_START, "", descriptor)

        related: list[ResourceRecord] = []
        if is_enabled(descriptor.get("show_related")):
            related = await self.store.get_related(descriptor.id, settings.related_limit)
            if related:
                related = self.hooks.invoke(HOOK_RESOURCE_RELATED, related, descriptor)

        end = self.hooks.invoke(HOOK_RESOURCE_FOOTER_END, "", descriptor)
        return self._render(
            "partials/footer.html",
            start=Markup(start or ""),
            related=[{"title": r.title, "url": resource_url(r.slug)} for r in related],
            end=Markup(end or ""),
        )

    # ── Video player ──────────────────────────────────────────────────────────

    async def render_video_player(self, options: VideoPlayerOptions) -> str:
        """
        Click-to-play player for a video resource.

        Renders nothing when no resource is selected or the resource has no
        YouTube/Vimeo video to embed. Without a stored thumbnail the
        provider's own thumbnail is used.
        """
        descriptor = None
        if options.resource_id:
            descriptor = await self.resolver.resolve(options.resource_id)
        if descriptor is None and options.slug:
            descriptor = await self.resolver.resolve_by_slug(options.slug)
        if descriptor is None:
            return ""

        video_url = sanitize_url(descriptor.get("video_url"))
        provider = descriptor.get("video_provider") or detect_provider(video_url)
        video_id = descriptor.get("video_id") or extract_video_id(video_url, provider)
        embed_url = get_video_embed_url(video_id, provider) if video_id and provider else None
        if not embed_url:
            return ""

        thumbnail_url = sanitize_url(descriptor.thumbnail_url) or get_video_thumbnail_url(
            video_id, provider, "maxresdefault"
        )
        return self._render(
            "blocks/video_player.html",
            resource=descriptor,
            options=options,
            embed_url=embed_url,
            thumbnail_url=thumbnail_url,
            duration=descriptor.get("video_duration"),
        )

    # ── Collections ───────────────────────────────────────────────────────────

    async def render_collection(self, options: CollectionViewOptions) -> str:
        """
        Render a collection in list, grid or playlist layout.

        An empty layout falls back to the collection's own display style, and
        an unset show_progress to the collection's own flag.
        """
        by_slug = isinstance(options, CollectionShortcodeOptions) and bool(options.slug)
        if not options.collection_id and not by_slug:
            return self._message("wprh-block-placeholder", "Please select a collection.")

        collection = None
        if options.collection_id:
            collection = await self.resolver.resolve_collection(options.collection_id)
        if collection is None and by_slug:
            collection = await self.resolver.resolve_collection_by_slug(options.slug)
        if collection is None:
            return self._message("wprh-collection-error", "Collection not found.")

        layout = options.layout or collection.display_style
        if layout not in COLLECTION_LAYOUTS:
            layout = "list"
        show_progress = collection.show_progress if options.show_progress is None else options.show_progress

        records = await self.store.get_resources(collection.member_ids)
        items = []
        for record in records:
            if record.status != "publish":
                continue
            type_slug, type_label, type_icon = _record_type(record)
            items.append(
                {
                    "index": len(items) + 1,
                    "id": record.id,
                    "title": record.title,
                    "url": resource_url(record.slug),
                    "excerpt": word_excerpt(record.excerpt, 15) if record.excerpt else "",
                    "thumbnail_url": sanitize_url(record.thumbnail_url),
                    "type_slug": type_slug,
                    "type_label": type_label,
                    "type_icon": type_icon,
                }
            )

        total = len(collection.member_ids)
        percent = collection.progress or 0.0
        return self._render(
            "blocks/collection.html",
            collection=collection,
            options=options,
            url=collection_url(collection.slug),
            layout=layout,
            count_label=pluralize(total, "%d resource", "%d resources"),
            show_progress=show_progress,
            progress_percent=round(percent),
            progress_done=round(percent * total / 100),
            total=total,
            items=items,
        )

    # ── Grid ──────────────────────────────────────────────────────────────────

    def _grid_query(self, options: GridShortcodeOptions) -> ResourceQuery:
        query = ResourceQuery(
            type_slugs=options.type_slugs,
            topic_slugs=options.topic_slugs,
            audience_slugs=options.audience_slugs,
            featured_only=options.featured_only,
            search=options.search.strip(),
            include_ids=options.include_ids,
            exclude_ids=options.exclude_ids,
            orderby=options.orderby,
            order=options.order,
            limit=options.limit,
            offset=page_offset(options.page, options.limit),
        )
        if options.duration:
            # Duration only applies to videos that have one.
            if not options.type_slugs or ResourceType.VIDEO.value in options.type_slugs:
                query.restrict_type_slugs = [ResourceType.VIDEO.value]
            query.require_meta = ["video_duration"]
        return query

    async def _grid_cards(self, records: list[ResourceRecord], options: GridShortcodeOptions) -> Markup:
        if not records:
            return self._message("wprh-no-resources", "No resources found.")

        descriptors = await self.resolver.resolve_many(records)
        cards = []
        for descriptor in descriptors:
            video_embed = None
            if descriptor.resource_type is ResourceType.VIDEO:
                provider = descriptor.get("video_provider") or detect_provider(descriptor.get("video_url"))
                video_id = descriptor.get("video_id") or extract_video_id(descriptor.get("video_url"), provider)
                video_embed = get_video_embed_url(video_id, provider) if video_id and provider else ""
            topics = await self.store.get_resource_terms(descriptor.id, Taxonomy.TOPIC.value)
            audiences = await self.store.get_resource_terms(descriptor.id, Taxonomy.AUDIENCE.value)
            cards.append(
                {
                    "resource": descriptor,
                    "url": resource_url(descriptor.slug),
                    "thumbnail_url": sanitize_url(descriptor.thumbnail_url),
                    "excerpt": word_excerpt(descriptor.excerpt or descriptor.body, settings.excerpt_words),
                    "video_embed": video_embed,
                    "duration": descriptor.get("video_duration") if video_embed is not None else None,
                    "pills": [
                        {"css": "wprh-pill-topic", "name": t.name, "url": term_url(t.taxonomy, t.slug)}
                        for t in topics
                    ]
                    + [
                        {"css": "wprh-pill-audience", "name": t.name, "url": term_url(t.taxonomy, t.slug)}
                        for t in audiences
                    ],
                }
            )
        return self._render("partials/grid_cards.html", cards=cards, options=options)

    def _pagination(self, window: PageWindow) -> Markup:
        if window.max_pages <= 1:
            return Markup("")
        return self._render("partials/pagination.html", window=window)

    async def _toolbar(self, options: GridShortcodeOptions) -> list[Markup]:
        entries: list[Markup] = []
        for key in settings.filter_order:
            if key == "search":
                if options.show_search:
                    entries.append(self._render("partials/search.html", value=options.search))
                continue
            if not options.show_filters:
                continue

            if key in TAXONOMY_FILTERS and getattr(options, f"show_{key}_filter"):
                taxonomy, all_label = TAXONOMY_FILTERS[key]
                terms = await self.store.list_terms(taxonomy.value, hide_empty=True)
                if not terms:
                    continue
                selected = getattr(options, key)
                dropdown_options = [{"value": "", "label": all_label, "count": 0, "depth": 0}]
                dropdown_options.extend(_term_options(terms))
                entries.append(self._dropdown(key, dropdown_options, selected, all_label))
            elif key == "duration" and options.show_duration_filter:
                dropdown_options = [{"value": v, "label": label, "count": 0, "depth": 0} for v, label in DURATION_OPTIONS]
                entries.append(self._dropdown("duration", dropdown_options, options.duration, DURATION_OPTIONS[0][1]))
            elif key == "sort" and options.show_sort_filter:
                current = _sort_value(options.orderby, options.order)
                dropdown_options = [
                    {"value": v, "label": label, "count": 0, "depth": 0} for v, label in SORT_LABELS.items()
                ]
                entries.append(self._dropdown("sort", dropdown_options, current, SORT_LABELS["date"]))
            elif key == "layout_toggle" and options.show_layout_toggle:
                entries.append(self._render("partials/layout_toggle.html", layout=options.layout))
        return entries

    def _dropdown(self, key: str, dropdown_options: list[dict], selected: str, fallback_label: str) -> Markup:
        selected_label = next(
            (o["label"] for o in dropdown_options if o["value"] and o["value"] == selected), fallback_label
        )
        return self._render(
            "partials/dropdown.html",
            key=key,
            options=dropdown_options,
            selected=selected,
            selected_label=selected_label,
        )

    async def render_grid(self, options: GridOptions) -> str:
        """Render the resources grid: toolbar, one page of cards, pagination."""
        options = _as_shortcode_grid(options)
        query = self._grid_query(options)
        page = await self.store.query_resources(query)
        window = PageWindow(page=options.page, limit=options.limit, total=page.total)

        toolbar = await self._toolbar(options) if (options.show_filters or options.show_search) else []
        cards = await self._grid_cards(page.items, options)
        pagination = self._pagination(window) if options.show_pagination else Markup("")

        logger.debug("Grid rendered: %d of %d resources, page %d", len(page.items), page.total, options.page)
        return self._render(
            "blocks/grid.html",
            options=options,
            instance_id=options.instance_id or f"wprh-resources-{uuid.uuid4().hex[:8]}",
            atts=options.model_dump(mode="json"),
            toolbar=toolbar,
            cards=cards,
            pagination=pagination,
        )

    async def filter_grid(self, request: GridFilterRequest) -> GridFilterResult:
        """Re-run a grid's query with toolbar overrides and return the pieces to swap in."""
        options = GridShortcodeOptions.parse_attributes(request.merged_attributes())
        page = await self.store.query_resources(self._grid_query(options))
        window = PageWindow(page=options.page, limit=options.limit, total=page.total)
        return GridFilterResult(
            html=str(await self._grid_cards(page.items, options)),
            pagination=str(self._pagination(window)),
            found=page.total,
            max_pages=window.max_pages,
        )


def _as_shortcode_grid(options: GridOptions) -> GridShortcodeOptions:
    """Blocks render through the shortcode: carry the block options across."""
    if isinstance(options, GridShortcodeOptions):
        return options
    return GridShortcodeOptions.model_validate(options.model_dump())


def _sort_value(orderby: str, order: str) -> str:
    for value, pair in SORT_SHORTCUTS.items():
        if pair == (orderby, order):
            return value
    return orderby if orderby in SORT_LABELS else "date"


def _term_options(terms) -> list[dict]:
    """Dropdown options for terms, children indented under their parents."""
    by_parent: dict[int | None, list] = {}
    ids = {t.id for t in terms}
    for term in terms:
        parent = term.parent_id if term.parent_id in ids else None
        by_parent.setdefault(parent, []).append(term)

    options: list[dict] = []

    def _walk(parent: int | None, depth: int) -> None:
        for term in by_parent.get(parent, []):
            options.append({"value": term.slug, "label": term.name, "count": term.count, "depth": depth})
            _walk(term.id, depth + 1)

    _walk(None, 0)
    return options
