"""
Block and Shortcode Routes

POST /api/v1/blocks/{kind}/render      → render a block from its attributes
GET  /api/v1/blocks/{kind}/schema      → attribute schema of a block kind
POST /api/v1/shortcodes/{tag}/render   → render a shortcode from its attributes
GET  /api/v1/shortcodes/{tag}/schema   → attribute schema of a shortcode

Render endpoints answer with an HTML fragment. Missing resources and
collections still render (as placeholder or "not found" fragments); only an
unknown kind is an error.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import HTMLResponse

from resource_hub.exceptions import UnknownBlockKindError
from resource_hub.routes.dependencies import get_renderer
from resource_hub.schemas.blocks import BLOCK_KINDS, SHORTCODE_TAGS, get_schema, get_shortcode_schema
from resource_hub.schemas.resources import BlockAttributeResponse, BlockSchemaResponse
from resource_hub.services.renderer import ViewRenderer

router = APIRouter(tags=["Blocks"])
logger = logging.getLogger(__name__)


def _schema_response(kind: str, attributes) -> BlockSchemaResponse:
    return BlockSchemaResponse(
        kind=kind,
        attributes=[BlockAttributeResponse(name=a.name, type=a.type, default=a.default) for a in attributes],
    )


@router.post("/blocks/{kind}/render", response_class=HTMLResponse)
async def render_block(
    kind: str,
    attributes: dict[str, Any] | None = Body(default=None),
    renderer: ViewRenderer = Depends(get_renderer),
):
    html = await renderer.render_block(kind, attributes)
    logger.debug("Rendered block %s", kind, extra={"block_kind": kind})
    return HTMLResponse(html)


@router.get("/blocks/{kind}/schema", response_model=BlockSchemaResponse)
async def block_schema(kind: str):
    if kind not in BLOCK_KINDS:
        raise UnknownBlockKindError(kind, sorted(BLOCK_KINDS))
    return _schema_response(kind, get_schema(kind))


@router.post("/shortcodes/{tag}/render", response_class=HTMLResponse)
async def render_shortcode(
    tag: str,
    attributes: dict[str, Any] | None = Body(default=None),
    renderer: ViewRenderer = Depends(get_renderer),
):
    html = await renderer.render_shortcode(tag, attributes)
    logger.debug("Rendered shortcode %s", tag, extra={"block_kind": tag})
    return HTMLResponse(html)


@router.get("/shortcodes/{tag}/schema", response_model=BlockSchemaResponse)
async def shortcode_schema(tag: str):
    if tag not in SHORTCODE_TAGS:
        raise UnknownBlockKindError(tag, sorted(SHORTCODE_TAGS))
    return _schema_response(tag, get_shortcode_schema(tag))
