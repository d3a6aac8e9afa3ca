"""
Resource Descriptor Resolver

Turns stored resources and collections into descriptors, and descriptors
into the flat metadata mapping served by the REST export.

Read only: the resolver never writes to the store.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from resource_hub.descriptors import CollectionDescriptor, ResourceDescriptor, ResourceType, field_names
from resource_hub.plugins.hooks import (
    HOOK_COLLECTION_RESOURCES,
    HOOK_REST_RESOURCE_META,
    HOOK_RESOURCE_FIELDS,
)
from resource_hub.plugins.registry import HookRegistry
from resource_hub.services.store import CollectionRecord, ResourceRecord, ResourceStore

logger = logging.getLogger(__name__)


class ResourceResolver:
    """Builds descriptors from a ResourceStore, applying the resolver extension points."""

    def __init__(self, store: ResourceStore, hooks: HookRegistry):
        self.store = store
        self.hooks = hooks

    async def resolve(self, resource_id: int) -> ResourceDescriptor | None:
        """
        Descriptor for ``resource_id``, or None when no such resource exists.

        The field mapping holds exactly the fields of the resource's type;
        fields missing from storage are present with value None. A resource
        whose type tag is unknown or empty gets an empty mapping.
        """
        if resource_id <= 0:
            return None
        record = await self.store.get_resource(resource_id)
        if record is None:
            return None
        return await self._build(record)

    async def resolve_by_slug(self, slug: str) -> ResourceDescriptor | None:
        if not slug:
            return None
        record = await self.store.get_resource_by_slug(slug)
        if record is None:
            return None
        return await self._build(record)

    async def resolve_many(self, records: list[ResourceRecord]) -> list[ResourceDescriptor]:
        """Descriptors for already-loaded records, in the same order."""
        return [await self._build(record) for record in records]

    async def _build(self, record: ResourceRecord) -> ResourceDescriptor:
        tag = record.type_slug
        names = field_names(ResourceType.parse(tag))
        stored = await self.store.get_meta(record.id, names) if names else {}
        fields: dict[str, Any] = {name: stored.get(name) for name in names}

        descriptor = ResourceDescriptor(
            id=record.id,
            type_tag=tag,
            title=record.title,
            fields=fields,
            slug=record.slug,
            excerpt=record.excerpt,
            body=record.body,
            thumbnail_url=record.thumbnail_url,
            type_name=record.type_term.name if record.type_term else "",
        )

        filtered = self.hooks.invoke(HOOK_RESOURCE_FIELDS, dict(fields), descriptor)
        if filtered != fields:
            descriptor = replace(descriptor, fields=filtered)

        if tag and descriptor.resource_type is None:
            logger.debug("Resource %s has unknown type tag %r", record.id, tag)
        return descriptor

    # ── Collections ───────────────────────────────────────────────────────────

    async def resolve_collection(self, collection_id: int) -> CollectionDescriptor | None:
        if collection_id <= 0:
            return None
        record = await self.store.get_collection(collection_id)
        if record is None:
            return None
        return await self._build_collection(record)

    async def resolve_collection_by_slug(self, slug: str) -> CollectionDescriptor | None:
        if not slug:
            return None
        record = await self.store.get_collection_by_slug(slug)
        if record is None:
            return None
        return await self._build_collection(record)

    async def _build_collection(self, record: CollectionRecord) -> CollectionDescriptor:
        member_ids = await self.store.get_collection_members(record.id)
        member_ids = self.hooks.invoke(HOOK_COLLECTION_RESOURCES, list(member_ids), record.id)
        return CollectionDescriptor(
            id=record.id,
            title=record.title,
            description=record.description,
            member_ids=tuple(member_ids),
            progress=record.progress,
            slug=record.slug,
            display_style=record.display_style,
            show_progress=record.show_progress,
        )

    # ── REST export ───────────────────────────────────────────────────────────

    async def export_meta(self, resource_id: int) -> dict[str, Any] | None:
        """
        Flat metadata for the REST API: the type tag under ``resource_type``
        followed by every field of the descriptor. None when the resource
        does not exist.
        """
        descriptor = await self.resolve(resource_id)
        if descriptor is None:
            return None
        meta: dict[str, Any] = {"resource_type": descriptor.type_tag}
        meta.update(descriptor.fields)
        return self.hooks.invoke(HOOK_REST_RESOURCE_META, meta, descriptor)
