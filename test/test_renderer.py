"""
Tests for the view renderer: single resources, collections, the resources
grid and the grid filter.
"""

import itertools
import re

import pytest

from resource_hub.descriptors import ResourceDescriptor
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
from resource_hub.schemas.blocks import fill_defaults
from resource_hub.schemas.grid import GridFilterRequest
from resource_hub.services.renderer import ViewRenderer, reading_time_minutes, type_facts
from resource_hub.services.store import TermRecord

RESOURCE_PLACEHOLDER = '<div class="wprh-block-placeholder">Please select a resource.</div>'
COLLECTION_PLACEHOLDER = '<div class="wprh-block-placeholder">Please select a collection.</div>'


@pytest.fixture
def renderer(store, hooks):
    return ViewRenderer(store, hooks)


def card_ids(html: str) -> list[int]:
    return [int(i) for i in re.findall(r'data-id="(\d+)"', html)]


# ── Single resource ───────────────────────────────────────────────────────────


class TestResourcePlaceholder:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "display,show_title,show_meta,show_image",
        list(itertools.product(["full", "card", "embed", "link"], [True, False], [True, False], [True, False])),
    )
    async def test_zero_id_renders_placeholder(self, renderer, display, show_title, show_meta, show_image):
        html = await renderer.render_block(
            "resource",
            {
                "resourceId": 0,
                "display": display,
                "showTitle": show_title,
                "showMeta": show_meta,
                "showImage": show_image,
                "className": "extra",
            },
        )
        assert html == RESOURCE_PLACEHOLDER

    @pytest.mark.asyncio
    @pytest.mark.parametrize("option", ["slug", "display", "className"])
    @pytest.mark.parametrize("value", [None, 5, 2.5, True])
    async def test_zero_id_with_odd_option_values(self, renderer, option, value):
        html = await renderer.render_block("resource", {"resourceId": 0, option: value})
        assert html == RESOURCE_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_null_id_renders_placeholder(self, renderer):
        assert await renderer.render_block("resource", {"resourceId": None, "display": None}) == RESOURCE_PLACEHOLDER
        assert await renderer.render_shortcode("resource", {"id": None, "slug": None}) == RESOURCE_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_missing_attributes_render_placeholder(self, renderer):
        assert await renderer.render_block("resource", None) == RESOURCE_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_block_ignores_slug(self, store, renderer):
        store.add_resource(4, "Guide", "pdf", slug="guide")
        assert await renderer.render_block("resource", {"slug": "guide"}) == RESOURCE_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_unknown_id_renders_not_found(self, renderer):
        html = await renderer.render_block("resource", {"resourceId": 999})
        assert html == '<div class="wprh-resource-error">Resource not found.</div>'

    @pytest.mark.asyncio
    async def test_shortcode_selects_by_slug(self, store, renderer):
        store.add_resource(4, "Guide", "pdf", slug="guide", meta={"pdf_file": "/files/guide.pdf"})
        html = await renderer.render_shortcode("resource", {"slug": "guide"})
        assert "wprh-resource-single" in html
        assert "/files/guide.pdf" in html


class TestResourceDisplayModes:
    @pytest.mark.asyncio
    async def test_pdf_card_example(self, store, renderer):
        store.add_resource(
            42,
            "Style Guide",
            "pdf",
            meta={"pdf_file": "a.pdf", "pdf_file_size": "2MB", "pdf_page_count": 10, "pdf_viewer_mode": "inline"},
        )

        html = await renderer.render_block("resource", {"resourceId": 42, "display": "card", "showMeta": True})

        assert "wprh-resource-card" in html
        assert "10 pages" in html
        assert "2MB" in html
        assert "wprh-meta-duration" not in html
        assert "wprh-video" not in html
        assert "Version" not in html
        assert "wprh-download" not in html

    @pytest.mark.asyncio
    async def test_card_without_meta(self, store, renderer):
        store.add_resource(42, "Style Guide", "pdf", meta={"pdf_page_count": 10})
        html = await renderer.render_block("resource", {"resourceId": 42, "showMeta": False})
        assert "10 pages" not in html
        assert "wprh-resource-meta" not in html

    @pytest.mark.asyncio
    async def test_link_mode(self, store, renderer):
        store.add_resource(3, "<b>Bold</b> Move", "video", slug="bold-move")
        html = await renderer.render_block("resource", {"resourceId": 3, "display": "link"})
        assert html.startswith('<a href="/resources/bold-move/" class="wprh-resource-link')
        assert "&lt;b&gt;Bold&lt;/b&gt; Move" in html
        assert "<b>" not in html

    @pytest.mark.asyncio
    async def test_embed_mode_has_body_but_no_meta(self, store, renderer):
        store.add_resource(3, "Clip", "video", meta={"video_url": "https://www.youtube.com/watch?v=abc123"})
        html = await renderer.render_block("resource", {"resourceId": 3, "display": "embed"})
        assert "wprh-resource-embed" in html
        assert 'src="https://www.youtube.com/embed/abc123"' in html
        assert "wprh-resource-meta" not in html

    @pytest.mark.asyncio
    async def test_hidden_title_and_image(self, store, renderer):
        store.add_resource(3, "Clip Title", "video", thumbnail_url="/thumb.jpg")
        html = await renderer.render_block(
            "resource", {"resourceId": 3, "display": "full", "showTitle": False, "showImage": False}
        )
        assert "Clip Title" not in html
        assert "/thumb.jpg" not in html

    @pytest.mark.asyncio
    async def test_unsafe_thumbnail_is_dropped(self, store, renderer):
        store.add_resource(3, "Clip", "video", thumbnail_url="javascript:alert(1)")
        html = await renderer.render_block("resource", {"resourceId": 3, "display": "card"})
        assert "javascript:" not in html
        assert "wprh-card-placeholder" in html

    @pytest.mark.asyncio
    async def test_unknown_type_renders_default_body(self, store, renderer):
        store.add_resource(8, "Episode", "podcast", body="<p>Show notes</p>")
        html = await renderer.render_block("resource", {"resourceId": 8, "display": "full"})
        assert "wprh-resource-default" in html
        assert "<p>Show notes</p>" in html

    @pytest.mark.asyncio
    async def test_meta_row_without_content_is_omitted(self, store, renderer):
        store.add_resource(9, "Loose", "", body="<p>Notes</p>")
        html = await renderer.render_block("resource", {"resourceId": 9, "display": "full", "showMeta": True})
        assert "<p>Notes</p>" in html
        assert "wprh-resource-meta" not in html


class TestTypeBodies:
    @pytest.mark.asyncio
    async def test_vimeo_embed(self, store, renderer):
        store.add_resource(1, "Clip", "video", meta={"video_url": "https://vimeo.com/123456", "video_duration": "4:05"})
        html = await renderer.render_shortcode("resource", {"id": "1"})
        assert 'src="https://player.vimeo.com/video/123456"' in html
        assert "4:05" in html

    @pytest.mark.asyncio
    async def test_local_video(self, store, renderer):
        store.add_resource(1, "Clip", "video", meta={"video_provider": "local", "video_url": "/media/clip.mp4"})
        html = await renderer.render_shortcode("resource", {"id": "1"})
        assert '<source src="/media/clip.mp4">' in html

    @pytest.mark.asyncio
    async def test_video_without_source_shows_notice(self, store, renderer):
        store.add_resource(1, "Clip", "video")
        html = await renderer.render_shortcode("resource", {"id": "1"})
        assert "No video has been configured for this resource." in html
        assert "<iframe" not in html

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode,viewer", [("inline", True), ("embedded", True), (None, True), ("download", False)])
    async def test_pdf_viewer_mode(self, store, renderer, mode, viewer):
        store.add_resource(1, "Guide", "pdf", meta={"pdf_file": "/files/guide.pdf", "pdf_viewer_mode": mode})
        html = await renderer.render_shortcode("resource", {"id": "1"})
        assert ("wprh-pdf-viewer" in html) is viewer
        assert 'href="/files/guide.pdf"' in html

    @pytest.mark.asyncio
    async def test_pdf_without_file_shows_notice(self, store, renderer):
        store.add_resource(1, "Guide", "pdf", meta={"pdf_page_count": 3})
        html = await renderer.render_shortcode("resource", {"id": "1"})
        assert "No PDF file has been uploaded for this resource." in html

    @pytest.mark.asyncio
    async def test_download(self, store, renderer):
        store.add_resource(
            1,
            "Kit",
            "download",
            meta={"download_file": "https://cdn.example.com/kit-v2.zip", "download_file_size": 2097152, "download_version": "2.1"},
        )
        html = await renderer.render_shortcode("resource", {"id": "1"})
        assert "kit-v2.zip" in html
        assert "2 MB" in html
        assert "Version 2.1" in html

    @pytest.mark.asyncio
    async def test_download_without_version_omits_element(self, store, renderer):
        store.add_resource(1, "Kit", "download", meta={"download_file": "/kit.zip"})
        html = await renderer.render_shortcode("resource", {"id": "1"})
        assert "wprh-download-version" not in html
        assert "wprh-download-size" not in html

    @pytest.mark.asyncio
    @pytest.mark.parametrize("flag,target", [(True, "_blank"), ("1", "_blank"), (False, "_self"), (None, "_self")])
    async def test_external_link_target(self, store, renderer, flag, target):
        store.add_resource(1, "Docs", "external-link", meta={"external_url": "https://example.com", "open_new_tab": flag})
        html = await renderer.render_shortcode("resource", {"id": "1"})
        assert f'target="{target}"' in html
        assert ('rel="noopener noreferrer"' in html) is (target == "_blank")

    @pytest.mark.asyncio
    async def test_external_link_rejects_javascript_url(self, store, renderer):
        store.add_resource(1, "Docs", "external-link", meta={"external_url": "javascript:alert(1)"})
        html = await renderer.render_shortcode("resource", {"id": "1"})
        assert "javascript:" not in html
        assert "No external URL has been configured for this resource." in html

    @pytest.mark.asyncio
    async def test_internal_content_toc(self, store, renderer):
        store.add_resource(
            1,
            "Forms",
            "internal-content",
            meta={"show_toc": True},
            body="<h2>Labels</h2><p>Text</p><h3>Errors</h3><script>alert(1)</script>",
        )
        html = await renderer.render_shortcode("resource", {"id": "1"})
        assert "Table of Contents" in html
        assert 'href="#labels-1"' in html
        assert '<h2 id="labels-1">Labels</h2>' in html
        assert '<h3 id="errors-2">Errors</h3>' in html
        assert "<script>" not in html

    @pytest.mark.asyncio
    async def test_internal_content_without_toc(self, store, renderer):
        store.add_resource(1, "Forms", "internal-content", meta={"show_toc": False}, body="<h2>Labels</h2>")
        html = await renderer.render_shortcode("resource", {"id": "1"})
        assert "Table of Contents" not in html
        assert "<h2>Labels</h2>" in html


# ── Meta and reading time ─────────────────────────────────────────────────────


class TestReadingTime:
    @pytest.mark.parametrize("value,expected", [(5, 5), ("12", 12), (7.0, 7), (0, None), (-3, None), ("abc", None), (True, None), (None, None)])
    def test_internal_content_values(self, value, expected):
        descriptor = ResourceDescriptor(id=1, type_tag="internal-content", title="T", fields={"reading_time": value})
        assert reading_time_minutes(descriptor) == expected

    @pytest.mark.parametrize("tag", ["video", "pdf", "download", "external-link", "podcast", ""])
    def test_other_types_never_have_reading_time(self, tag):
        descriptor = ResourceDescriptor(id=1, type_tag=tag, title="T", fields={"reading_time": 5})
        assert reading_time_minutes(descriptor) is None

    def test_video_meta_renders_no_reading_time(self, renderer):
        descriptor = ResourceDescriptor(id=1, type_tag="video", title="T", fields={"reading_time": 5})
        html = renderer.render_meta(descriptor)
        assert "min read" not in html
        assert "wprh-meta-reading-time" not in html

    def test_internal_content_meta_renders_reading_time(self, renderer):
        descriptor = ResourceDescriptor(id=1, type_tag="internal-content", title="T", fields={"reading_time": 5})
        assert "5 min read" in renderer.render_meta(descriptor)

    def test_zero_reading_time_is_omitted(self, renderer):
        descriptor = ResourceDescriptor(id=1, type_tag="internal-content", title="T", fields={"reading_time": 0})
        assert "wprh-meta-reading-time" not in renderer.render_meta(descriptor)


class TestTypeFacts:
    def test_pdf_facts(self):
        descriptor = ResourceDescriptor(
            id=1, type_tag="pdf", title="T", fields={"pdf_file_size": 1048576, "pdf_page_count": 1}
        )
        assert [f.text for f in type_facts(descriptor)] == ["1 MB", "1 page"]

    def test_empty_fields_produce_no_facts(self):
        descriptor = ResourceDescriptor(
            id=1, type_tag="download", title="T", fields={"download_file_size": "", "download_version": None}
        )
        assert type_facts(descriptor) == []

    def test_video_duration_fact(self):
        descriptor = ResourceDescriptor(id=1, type_tag="video", title="T", fields={"video_duration": "3:15"})
        assert [f.css_class for f in type_facts(descriptor)] == ["wprh-meta-duration"]


# ── Extension points around meta and footer ──────────────────────────────────


class TestRenderHooks:
    @pytest.mark.asyncio
    async def test_meta_veto_omits_meta_block(self, store, hooks, renderer):
        store.add_resource(1, "Forms", "internal-content", meta={"reading_time": 5})
        hooks.add_veto(HOOK_RESOURCE_DISPLAY_META, lambda descriptor: False)

        html = await renderer.render_shortcode("resource", {"id": "1"})

        assert "wprh-resource-meta" not in html
        assert "5 min read" not in html

    @pytest.mark.asyncio
    async def test_meta_veto_short_circuits(self, store, hooks, renderer):
        store.add_resource(1, "Forms", "internal-content")
        calls = []
        hooks.add_veto(HOOK_RESOURCE_DISPLAY_META, lambda d: calls.append("first") or False)
        hooks.add_veto(HOOK_RESOURCE_DISPLAY_META, lambda d: calls.append("second") or True)

        await renderer.render_shortcode("resource", {"id": "1"})

        assert calls == ["first"]

    @pytest.mark.asyncio
    async def test_meta_items_injection(self, store, hooks, renderer):
        store.add_resource(1, "Forms", "internal-content")
        hooks.add_filter(HOOK_RESOURCE_META_ITEMS, lambda html, d: html + '<span class="wprh-meta-author">Ada</span>')

        html = await renderer.render_shortcode("resource", {"id": "1"})

        assert '<span class="wprh-meta-author">Ada</span>' in html

    @pytest.mark.asyncio
    async def test_footer_order(self, store, hooks, renderer):
        store.add_resource(1, "Forms", "internal-content", meta={"show_related": True})
        store.add_resource(2, "Tables", "internal-content", slug="tables")
        store.related[1] = [2]
        hooks.add_filter(HOOK_RESOURCE_FOOTER_START, lambda html, d: html + "<p>START</p>")
        hooks.add_filter(HOOK_RESOURCE_FOOTER_END, lambda html, d: html + "<p>END</p>")

        html = await renderer.render_shortcode("resource", {"id": "1"})

        start = html.index("<p>START</p>")
        related = html.index("Related Resources")
        end = html.index("<p>END</p>")
        assert start < related < end
        assert 'href="/resources/tables/"' in html

    @pytest.mark.asyncio
    async def test_related_only_when_requested(self, store, renderer):
        store.add_resource(1, "Forms", "internal-content", meta={"show_related": False})
        store.add_resource(2, "Tables", "internal-content")
        store.related[1] = [2]

        html = await renderer.render_shortcode("resource", {"id": "1"})

        assert "Related Resources" not in html

    @pytest.mark.asyncio
    async def test_related_filter(self, store, hooks, renderer):
        store.add_resource(1, "Forms", "internal-content", meta={"show_related": True})
        store.add_resource(2, "Tables", "internal-content")
        store.add_resource(3, "Charts", "internal-content")
        store.related[1] = [2, 3]
        hooks.add_filter(HOOK_RESOURCE_RELATED, lambda related, d: [r for r in related if r.id != 2])

        html = await renderer.render_shortcode("resource", {"id": "1"})

        assert "Charts" in html
        assert "Tables" not in html

    @pytest.mark.asyncio
    async def test_related_capped_at_three(self, store, renderer):
        store.add_resource(1, "Forms", "internal-content", meta={"show_related": True})
        for i in range(2, 8):
            store.add_resource(i, f"Related {i}", "internal-content")
        store.related[1] = list(range(2, 8))

        html = await renderer.render_shortcode("resource", {"id": "1"})

        assert html.count("wprh-related-item") == 3

    @pytest.mark.asyncio
    async def test_footer_veto(self, store, hooks, renderer):
        store.add_resource(1, "Forms", "internal-content")
        hooks.add_veto(HOOK_RESOURCE_DISPLAY_FOOTER, lambda d: False)
        hooks.add_filter(HOOK_RESOURCE_FOOTER_START, lambda html, d: html + "<p>START</p>")

        html = await renderer.render_shortcode("resource", {"id": "1"})

        assert "<p>START</p>" not in html

    @pytest.mark.asyncio
    async def test_footer_only_in_full_mode(self, store, hooks, renderer):
        store.add_resource(1, "Forms", "internal-content")
        hooks.add_filter(HOOK_RESOURCE_FOOTER_END, lambda html, d: html + "<p>END</p>")

        html = await renderer.render_block("resource", {"resourceId": 1, "display": "card"})

        assert "<p>END</p>" not in html

    @pytest.mark.asyncio
    async def test_pre_render_short_circuits_body(self, store, hooks, renderer):
        store.add_resource(1, "Clip", "video", meta={"video_url": "https://youtu.be/abc123"})
        hooks.add_filter(HOOK_RESOURCE_PRE_RENDER, lambda html, tag, d: "<div>members only</div>")
        hooks.add_filter(HOOK_RESOURCE_RENDER, lambda html, tag, d: html + "<p>AFTER</p>")

        html = await renderer.render_block("resource", {"resourceId": 1, "display": "embed"})

        assert "<div>members only</div>" in html
        assert "<iframe" not in html
        assert "<p>AFTER</p>" not in html

    @pytest.mark.asyncio
    async def test_render_filter_wraps_body(self, store, hooks, renderer):
        store.add_resource(1, "Clip", "video", meta={"video_url": "https://youtu.be/abc123"})
        seen = []
        hooks.add_filter(HOOK_RESOURCE_RENDER, lambda html, tag, d: seen.append(tag) or html + "<p>AFTER</p>")

        html = await renderer.render_block("resource", {"resourceId": 1, "display": "embed"})

        assert "<iframe" in html
        assert "<p>AFTER</p>" in html
        assert seen == ["video"]

    @pytest.mark.asyncio
    async def test_custom_type_filter_replaces_default_body(self, store, hooks, renderer):
        store.add_resource(8, "Episode", "podcast", body="<p>Show notes</p>")
        seen = []
        hooks.add_filter(
            HOOK_RESOURCE_CUSTOM_TYPE, lambda html, tag, d: seen.append(tag) or f'<audio src="/{d.slug}.mp3"></audio>'
        )
        hooks.add_filter(HOOK_RESOURCE_RENDER, lambda html, tag, d: html + "<p>AFTER</p>")

        html = await renderer.render_block("resource", {"resourceId": 8, "display": "embed"})

        assert '<audio src="/resource-8.mp3"></audio><p>AFTER</p>' in html
        assert "Show notes" not in html
        assert seen == ["podcast"]

    @pytest.mark.asyncio
    async def test_custom_type_filter_not_used_for_known_types(self, store, hooks, renderer):
        store.add_resource(1, "Clip", "video", meta={"video_url": "https://youtu.be/abc123"})
        hooks.add_filter(HOOK_RESOURCE_CUSTOM_TYPE, lambda html, tag, d: "<div>custom</div>")

        html = await renderer.render_block("resource", {"resourceId": 1, "display": "embed"})

        assert "<iframe" in html
        assert "custom" not in html

    @pytest.mark.asyncio
    async def test_untyped_resource_skips_body_hooks(self, store, hooks, renderer):
        store.add_resource(1, "Loose", "", body="<p>Notes</p>")
        hooks.add_filter(HOOK_RESOURCE_PRE_RENDER, lambda html, tag, d: "<div>replaced</div>")

        html = await renderer.render_block("resource", {"resourceId": 1, "display": "embed"})

        assert "<p>Notes</p>" in html
        assert "replaced" not in html


# ── Video player ──────────────────────────────────────────────────────────────


class TestVideoPlayer:
    @pytest.mark.asyncio
    async def test_player_with_provider_thumbnail(self, store, renderer):
        store.add_resource(
            1, "Intro", "video", meta={"video_url": "https://youtu.be/abc123", "video_duration": "12:30"}
        )

        html = await renderer.render_shortcode("video", {"id": "1", "class": "hero"})

        assert 'class="wprh-video-player hero"' in html
        assert 'data-embed-url="https://www.youtube.com/embed/abc123"' in html
        assert 'src="https://img.youtube.com/vi/abc123/maxresdefault.jpg"' in html
        assert 'alt="Intro"' in html
        assert '<span class="wprh-video-player-duration">12:30</span>' in html

    @pytest.mark.asyncio
    async def test_stored_thumbnail_wins(self, store, renderer):
        store.add_resource(1, "Intro", "video", meta={"video_url": "https://youtu.be/abc123"}, thumbnail_url="/t.jpg")
        html = await renderer.render_shortcode("video", {"id": 1})
        assert 'src="/t.jpg"' in html
        assert "img.youtube.com" not in html

    @pytest.mark.asyncio
    async def test_vimeo_has_placeholder_instead_of_thumbnail(self, store, renderer):
        store.add_resource(2, "Talk", "video", slug="talk", meta={"video_url": "https://vimeo.com/76979871"})
        html = await renderer.render_shortcode("video", {"slug": "talk"})
        assert 'data-embed-url="https://player.vimeo.com/video/76979871"' in html
        assert "wprh-video-player-placeholder" in html
        assert "wprh-video-player-duration" not in html

    @pytest.mark.asyncio
    async def test_nothing_to_play_renders_nothing(self, store, renderer):
        store.add_resource(3, "Local", "video", meta={"video_url": "/files/clip.mp4", "video_provider": "local"})
        store.add_resource(4, "Guide", "pdf", meta={"pdf_file": "/a.pdf"})
        assert await renderer.render_shortcode("video", {"id": 3}) == ""
        assert await renderer.render_shortcode("video", {"id": 4}) == ""
        assert await renderer.render_shortcode("video", {"id": 99}) == ""
        assert await renderer.render_shortcode("video", {}) == ""


# ── Collections ───────────────────────────────────────────────────────────────


class TestCollection:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "layout,show_progress,show_count",
        list(itertools.product(["", "list", "grid", "playlist"], [True, False], [True, False])),
    )
    async def test_zero_id_renders_placeholder(self, renderer, layout, show_progress, show_count):
        html = await renderer.render_block(
            "collection", {"collectionId": 0, "layout": layout, "showProgress": show_progress, "showCount": show_count}
        )
        assert html == COLLECTION_PLACEHOLDER

    @pytest.mark.asyncio
    @pytest.mark.parametrize("option", ["slug", "layout", "className"])
    @pytest.mark.parametrize("value", [None, 5, 2.5, False])
    async def test_zero_id_with_odd_option_values(self, renderer, option, value):
        html = await renderer.render_block("collection", {"collectionId": 0, option: value})
        assert html == COLLECTION_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_unknown_collection(self, renderer):
        html = await renderer.render_block("collection", {"collectionId": 77})
        assert html == '<div class="wprh-collection-error">Collection not found.</div>'

    @pytest.mark.asyncio
    async def test_empty_collection(self, store, renderer):
        store.add_collection(1, "Empty")
        html = await renderer.render_block("collection", {"collectionId": 1})
        assert "This collection has no resources yet." in html
        assert "0 resources" in html

    @pytest.mark.asyncio
    async def test_members_in_order_and_drafts_skipped(self, store, renderer):
        store.add_resource(1, "First", "pdf")
        store.add_resource(2, "Hidden", "pdf", status="draft")
        store.add_resource(3, "Second", "video")
        store.add_collection(1, "Start", [3, 2, 1])

        html = await renderer.render_block("collection", {"collectionId": 1, "layout": "list"})

        assert html.index("Second") < html.index("First")
        assert "Hidden" not in html
        assert "3 resources" in html

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "layout,marker", [("list", "wprh-list-item"), ("grid", "wprh-collection-card"), ("playlist", "wprh-playlist-item")]
    )
    async def test_layouts(self, store, renderer, layout, marker):
        store.add_resource(1, "First", "pdf")
        store.add_collection(1, "Start", [1])
        html = await renderer.render_block("collection", {"collectionId": 1, "layout": layout})
        assert marker in html
        assert f"wprh-collection-{layout}" in html

    @pytest.mark.asyncio
    async def test_empty_layout_uses_collection_style(self, store, renderer):
        store.add_resource(1, "First", "pdf")
        store.add_collection(1, "Start", [1], display_style="playlist")
        html = await renderer.render_block("collection", {"collectionId": 1})
        assert "wprh-playlist-item" in html

    @pytest.mark.asyncio
    async def test_progress(self, store, renderer):
        for i in range(1, 5):
            store.add_resource(i, f"Part {i}", "pdf")
        store.add_collection(1, "Course", [1, 2, 3, 4], progress=50)

        html = await renderer.render_block("collection", {"collectionId": 1, "showProgress": True})

        assert "width: 50%;" in html
        assert "2 / 4" in html

    @pytest.mark.asyncio
    async def test_block_progress_off_by_default(self, store, renderer):
        store.add_resource(1, "Part", "pdf")
        store.add_collection(1, "Course", [1], progress=50, show_progress=True)
        html = await renderer.render_block("collection", {"collectionId": 1})
        assert "wprh-collection-progress" not in html

    @pytest.mark.asyncio
    async def test_shortcode_progress_defers_to_collection(self, store, renderer):
        store.add_resource(1, "Part", "pdf")
        store.add_collection(1, "Course", [1], progress=100, show_progress=True, slug="course")
        html = await renderer.render_shortcode("resource_collection", {"slug": "course"})
        assert "wprh-collection-progress" in html
        assert "1 / 1" in html

    @pytest.mark.asyncio
    async def test_hidden_header_parts(self, store, renderer):
        store.add_resource(1, "Part", "pdf")
        store.add_collection(1, "Course Title", [1], description="About the course")
        html = await renderer.render_block(
            "collection", {"collectionId": 1, "showTitle": False, "showDescription": False, "showCount": False}
        )
        assert "Course Title" not in html
        assert "About the course" not in html
        assert "wprh-collection-header" not in html


# ── Grid ──────────────────────────────────────────────────────────────────────


class TestGrid:
    @pytest.fixture
    def library(self, store):
        for i in range(1, 31):
            store.add_resource(i, f"Resource {i:02d}", "video" if i % 2 else "pdf", topics=["design"])
        return store

    @pytest.mark.asyncio
    async def test_never_more_than_limit(self, library, renderer):
        html = await renderer.render_block("resources-grid", {"limit": 12})
        assert len(card_ids(html)) == 12

    @pytest.mark.asyncio
    async def test_page_two_excludes_page_one(self, library, renderer):
        first = card_ids(await renderer.render_shortcode("resources", {"limit": "12", "paged": "1"}))
        second = card_ids(await renderer.render_shortcode("resources", {"limit": "12", "paged": "2"}))
        assert len(first) == 12
        assert len(second) == 12
        assert not set(first) & set(second)
        assert library.queries[-1].offset == 12

    @pytest.mark.asyncio
    async def test_pagination_controls(self, library, renderer):
        html = await renderer.render_shortcode("resources", {"limit": "12", "paged": "3"})
        assert "Page 3 of 3" in html
        assert len(card_ids(html)) == 6

    @pytest.mark.asyncio
    async def test_no_pagination_for_single_page(self, library, renderer):
        html = await renderer.render_block("resources-grid", {"limit": 50})
        assert "wprh-pagination" not in html

    @pytest.mark.asyncio
    async def test_pagination_can_be_hidden(self, library, renderer):
        html = await renderer.render_block("resources-grid", {"limit": 5, "showPagination": False})
        assert "wprh-pagination" not in html

    @pytest.mark.asyncio
    async def test_empty_result(self, store, renderer):
        html = await renderer.render_block("resources-grid", {})
        assert '<div class="wprh-no-resources">No resources found.</div>' in html

    @pytest.mark.asyncio
    async def test_query_carries_filters(self, store, renderer):
        await renderer.render_block(
            "resources-grid",
            {"type": "video,pdf", "topic": "design", "audience": "editors", "orderby": "title", "order": "ASC", "featuredOnly": True},
        )
        query = store.queries[-1]
        assert query.type_slugs == ["video", "pdf"]
        assert query.topic_slugs == ["design"]
        assert query.audience_slugs == ["editors"]
        assert (query.orderby, query.order) == ("title", "ASC")
        assert query.featured_only is True

    @pytest.mark.asyncio
    async def test_duration_restricts_to_videos_with_duration(self, store, renderer):
        store.add_resource(1, "Short clip", "video", meta={"video_duration": "3:00"})
        store.add_resource(2, "Clip without duration", "video")
        store.add_resource(3, "Guide", "pdf")

        html = await renderer.render_shortcode("resources", {"duration": "0-5"})

        assert card_ids(html) == [1]
        assert store.queries[-1].restrict_type_slugs == ["video"]

    @pytest.mark.asyncio
    async def test_video_cards_carry_embed_url(self, store, renderer):
        store.add_resource(1, "Clip", "video", meta={"video_url": "https://youtu.be/abc123", "video_duration": "2:00"})
        html = await renderer.render_block("resources-grid", {})
        assert 'data-video-url="https://www.youtube.com/embed/abc123"' in html
        assert "wprh-video-duration-badge" in html

    @pytest.mark.asyncio
    async def test_topic_pills(self, library, renderer):
        html = await renderer.render_block("resources-grid", {"limit": 1})
        assert 'href="/resources/topic/design/"' in html

    @pytest.mark.asyncio
    async def test_toolbar_order_and_counts(self, store, renderer):
        store.add_resource(1, "Clip", "video")
        store.terms["resource_type"] = [
            TermRecord(id=1, taxonomy="resource_type", slug="video", name="Video", count=4),
            TermRecord(id=2, taxonomy="resource_type", slug="download", name="Download", count=0),
        ]
        store.terms["resource_topic"] = [
            TermRecord(id=3, taxonomy="resource_topic", slug="design", name="Design", count=2),
            TermRecord(id=4, taxonomy="resource_topic", slug="ux", name="UX", count=1, parent_id=3),
        ]

        html = await renderer.render_block("resources-grid", {})

        assert html.index("wprh-search-input") < html.index('data-filter="type"') < html.index('data-filter="topic"')
        assert html.index('data-filter="topic"') < html.index('data-filter="sort"') < html.index("wprh-layout-toggle")
        assert 'data-filter="audience"' not in html
        assert '<span class="wprh-dropdown-count">4</span>' in html
        assert 'data-value="download"' not in html
        assert "wprh-dropdown-depth-1" in html

    @pytest.mark.asyncio
    async def test_filters_hidden(self, store, renderer):
        store.add_resource(1, "Clip", "video")
        html = await renderer.render_block("resources-grid", {"showFilters": False, "showSearch": False})
        assert "wprh-resources-toolbar" not in html

    @pytest.mark.asyncio
    async def test_container_carries_attributes(self, store, renderer):
        html = await renderer.render_shortcode("resources", {"id": "library", "class": "wide", "limit": "6"})
        assert 'id="library"' in html
        assert 'class="wprh-resources-container wide"' in html
        assert '"limit": 6' in html

    @pytest.mark.asyncio
    async def test_layout_and_columns_classes(self, library, renderer):
        html = await renderer.render_block("resources-grid", {"layout": "list", "columns": 2})
        assert "wprh-layout-list wprh-columns-2" in html


class TestFilterGrid:
    @pytest.mark.asyncio
    async def test_filter_overrides_attributes(self, store, renderer):
        for i in range(1, 8):
            store.add_resource(i, f"Item {i}", "video" if i <= 5 else "pdf")

        result = await renderer.filter_grid(GridFilterRequest(atts={"limit": 2}, type="video", paged=2))

        assert result.found == 5
        assert result.max_pages == 3
        assert card_ids(result.html) == [3, 4]
        assert "Page 2 of 3" in result.pagination

    @pytest.mark.asyncio
    async def test_sort_shortcut(self, store, renderer):
        await renderer.filter_grid(GridFilterRequest(sort="title-asc"))
        query = store.queries[-1]
        assert (query.orderby, query.order) == ("title", "ASC")

    @pytest.mark.asyncio
    async def test_empty_filter_result(self, store, renderer):
        result = await renderer.filter_grid(GridFilterRequest(search="nothing"))
        assert result.found == 0
        assert result.max_pages == 0
        assert result.pagination == ""
        assert "No resources found." in result.html

    def test_merged_attributes(self):
        request = GridFilterRequest(atts={"topic": "design", "paged": 4, "limit": 3}, topic="", search=" forms ", paged=2)
        merged = request.merged_attributes()
        assert merged["topic"] == ""
        assert merged["search"] == "forms"
        assert merged["page"] == 2
        assert "paged" not in merged
        assert merged["limit"] == 3
        assert fill_defaults("resources", merged, shortcode=True).page == 2
