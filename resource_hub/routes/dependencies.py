"""
Request-scoped dependencies.

The hook registry is built once at start-up and lives on ``app.state``;
everything else is created per request around that request's session.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from resource_hub.database import get_db
from resource_hub.plugins.registry import HookRegistry
from resource_hub.services.editor_data import EditorDataService
from resource_hub.services.renderer import ViewRenderer
from resource_hub.services.resolver import ResourceResolver
from resource_hub.services.store import ResourceStore, SQLResourceStore


def get_hooks(request: Request) -> HookRegistry:
    return request.app.state.hooks


def get_store(db: AsyncSession = Depends(get_db)) -> ResourceStore:
    return SQLResourceStore(db)


def get_resolver(
    store: ResourceStore = Depends(get_store),
    hooks: HookRegistry = Depends(get_hooks),
) -> ResourceResolver:
    return ResourceResolver(store, hooks)


def get_renderer(
    store: ResourceStore = Depends(get_store),
    hooks: HookRegistry = Depends(get_hooks),
    resolver: ResourceResolver = Depends(get_resolver),
) -> ViewRenderer:
    return ViewRenderer(store, hooks, resolver)


def get_editor_data_service(store: ResourceStore = Depends(get_store)) -> EditorDataService:
    return EditorDataService(store)
