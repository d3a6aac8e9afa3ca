"""
Resource Routes

GET  /api/v1/resources/{resource_id}/meta  → flat metadata export
POST /api/v1/resources/filter              → grid toolbar filter
GET  /api/v1/editor-data                   → editor picker data
"""

from typing import Any

from fastapi import APIRouter, Depends

from resource_hub.exceptions import ResourceNotFoundError
from resource_hub.routes.dependencies import get_editor_data_service, get_renderer, get_resolver
from resource_hub.schemas.editor import EditorData
from resource_hub.schemas.grid import GridFilterRequest, GridFilterResult
from resource_hub.services.editor_data import EditorDataService
from resource_hub.services.renderer import ViewRenderer
from resource_hub.services.resolver import ResourceResolver

router = APIRouter(tags=["Resources"])


@router.get("/resources/{resource_id}/meta", response_model=dict[str, Any])
async def get_resource_meta(resource_id: int, resolver: ResourceResolver = Depends(get_resolver)):
    meta = await resolver.export_meta(resource_id)
    if meta is None:
        raise ResourceNotFoundError(resource_id)
    return meta


@router.post("/resources/filter", response_model=GridFilterResult)
async def filter_resources(request: GridFilterRequest, renderer: ViewRenderer = Depends(get_renderer)):
    return await renderer.filter_grid(request)


@router.get("/editor-data", response_model=EditorData)
async def get_editor_data(service: EditorDataService = Depends(get_editor_data_service)):
    return await service.get_editor_data()
