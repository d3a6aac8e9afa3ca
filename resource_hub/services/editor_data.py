"""
Editor Data Service

Feeds the block editor's pickers: published resources and collections by
title, and the full term lists of the three taxonomies.
"""

import logging

from resource_hub.config import settings
from resource_hub.models.taxonomy import Taxonomy
from resource_hub.schemas.editor import EditorData, EditorItem, EditorTerm
from resource_hub.services.store import ResourceStore

logger = logging.getLogger(__name__)


class EditorDataService:
    def __init__(self, store: ResourceStore):
        self.store = store

    async def _terms(self, taxonomy: Taxonomy) -> list[EditorTerm]:
        terms = await self.store.list_terms(taxonomy.value, hide_empty=False)
        return [EditorTerm(slug=t.slug, name=t.name, count=t.count) for t in terms]

    async def get_editor_data(self) -> EditorData:
        """Up to ``editor_list_limit`` resources and collections, plus every term."""
        limit = settings.editor_list_limit
        resources = await self.store.list_resources(limit)
        collections = await self.store.list_collections(limit)

        data = EditorData(
            resources=[EditorItem(id=r.id, title=r.title) for r in resources],
            collections=[EditorItem(id=c.id, title=c.title) for c in collections],
            types=await self._terms(Taxonomy.TYPE),
            topics=await self._terms(Taxonomy.TOPIC),
            audiences=await self._terms(Taxonomy.AUDIENCE),
        )
        logger.debug("Editor data: %d resources, %d collections", len(data.resources), len(data.collections))
        return data
