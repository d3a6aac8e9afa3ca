"""
Resource storage port and its SQLAlchemy adapter.

The resolver, renderer and editor feed depend on ``ResourceStore`` only, so
they can be exercised against an in-memory fake. ``SQLResourceStore`` is the
production implementation over an ``AsyncSession``.

Records returned by the port are plain dataclasses: nothing outside this
module touches ORM objects.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import and_, asc, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from resource_hub.models import (
    Collection,
    CollectionItem,
    PublishStatus,
    Resource,
    ResourceMeta,
    Taxonomy,
    Term,
    resource_terms,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class TermRecord:
    id: int
    taxonomy: str
    slug: str
    name: str
    count: int = 0
    parent_id: int | None = None
    icon: str | None = None


@dataclass(frozen=True)
class ResourceRecord:
    id: int
    title: str
    slug: str = ""
    excerpt: str = ""
    body: str = ""
    status: str = PublishStatus.PUBLISH.value
    featured: bool = False
    thumbnail_url: str | None = None
    type_term: TermRecord | None = None

    @property
    def type_slug(self) -> str:
        return self.type_term.slug if self.type_term else ""


@dataclass(frozen=True)
class CollectionRecord:
    id: int
    title: str
    slug: str = ""
    description: str = ""
    status: str = PublishStatus.PUBLISH.value
    display_style: str = "list"
    show_progress: bool = False
    progress: float | None = None


@dataclass
class ResourceQuery:
    """Filtered, sorted, paginated listing request."""

    type_slugs: list[str] = field(default_factory=list)
    topic_slugs: list[str] = field(default_factory=list)
    audience_slugs: list[str] = field(default_factory=list)
    featured_only: bool = False
    search: str = ""
    include_ids: list[int] = field(default_factory=list)
    exclude_ids: list[int] = field(default_factory=list)
    restrict_type_slugs: list[str] = field(default_factory=list)
    require_meta: list[str] = field(default_factory=list)
    orderby: str = "date"
    order: str = "DESC"
    limit: int = 12
    offset: int = 0


@dataclass(frozen=True)
class ResourcePage:
    items: list[ResourceRecord]
    total: int


# =============================================================================
# Port
# =============================================================================


@runtime_checkable
class ResourceStore(Protocol):
    """Read-only access to resources, their metadata, terms and collections."""

    async def get_resource(self, resource_id: int) -> ResourceRecord | None: ...

    async def get_resource_by_slug(self, slug: str) -> ResourceRecord | None: ...

    async def get_meta(self, resource_id: int, keys: Iterable[str]) -> dict[str, Any]: ...

    async def query_resources(self, query: ResourceQuery) -> ResourcePage: ...

    async def get_resources(self, resource_ids: Iterable[int]) -> list[ResourceRecord]: ...

    async def get_related(self, resource_id: int, limit: int) -> list[ResourceRecord]: ...

    async def get_resource_terms(self, resource_id: int, taxonomy: str) -> list[TermRecord]: ...

    async def list_terms(self, taxonomy: str, hide_empty: bool = False) -> list[TermRecord]: ...

    async def list_resources(self, limit: int) -> list[ResourceRecord]: ...

    async def get_collection(self, collection_id: int) -> CollectionRecord | None: ...

    async def get_collection_by_slug(self, slug: str) -> CollectionRecord | None: ...

    async def get_collection_members(self, collection_id: int) -> list[int]: ...

    async def list_collections(self, limit: int) -> list[CollectionRecord]: ...


# =============================================================================
# SQLAlchemy adapter
# =============================================================================

_ORDER_COLUMNS = {
    "date": Resource.created_at,
    "title": Resource.title,
    "modified": Resource.updated_at,
    "menu_order": Resource.menu_order,
}


def _term_record(term: Term, count: int = 0) -> TermRecord:
    return TermRecord(
        id=term.id,
        taxonomy=term.taxonomy.value if isinstance(term.taxonomy, Taxonomy) else str(term.taxonomy),
        slug=term.slug,
        name=term.name,
        count=count,
        parent_id=term.parent_id,
        icon=term.icon,
    )


def _resource_record(resource: Resource) -> ResourceRecord:
    type_term = next((t for t in resource.terms if t.taxonomy == Taxonomy.TYPE), None)
    return ResourceRecord(
        id=resource.id,
        title=resource.title,
        slug=resource.slug,
        excerpt=resource.excerpt or "",
        body=resource.body or "",
        status=resource.status.value if isinstance(resource.status, PublishStatus) else str(resource.status),
        featured=bool(resource.featured),
        thumbnail_url=resource.thumbnail_url,
        type_term=_term_record(type_term) if type_term else None,
    )


def _collection_record(collection: Collection) -> CollectionRecord:
    return CollectionRecord(
        id=collection.id,
        title=collection.title,
        slug=collection.slug,
        description=collection.description or "",
        status=collection.status.value if isinstance(collection.status, PublishStatus) else str(collection.status),
        display_style=collection.display_style or "list",
        show_progress=bool(collection.show_progress),
        progress=collection.progress,
    )


def _escape_like(text: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _has_term(taxonomy: Taxonomy, slugs: list[str]):
    """EXISTS clause: the resource carries at least one of ``slugs`` in ``taxonomy``."""
    return Resource.terms.any(and_(Term.taxonomy == taxonomy, Term.slug.in_(slugs)))


class SQLResourceStore:
    """ResourceStore over an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _resource_select(self):
        return select(Resource).options(selectinload(Resource.terms))

    async def get_resource(self, resource_id: int) -> ResourceRecord | None:
        result = await self.db.execute(self._resource_select().where(Resource.id == resource_id))
        resource = result.scalar_one_or_none()
        return _resource_record(resource) if resource else None

    async def get_resource_by_slug(self, slug: str) -> ResourceRecord | None:
        result = await self.db.execute(
            self._resource_select().where(Resource.slug == slug, Resource.status == PublishStatus.PUBLISH)
        )
        resource = result.scalar_one_or_none()
        return _resource_record(resource) if resource else None

    async def get_meta(self, resource_id: int, keys: Iterable[str]) -> dict[str, Any]:
        keys = list(keys)
        if not keys:
            return {}
        result = await self.db.execute(
            select(ResourceMeta.meta_key, ResourceMeta.meta_value).where(
                ResourceMeta.resource_id == resource_id,
                ResourceMeta.meta_key.in_(keys),
            )
        )
        return {key: value for key, value in result.all()}

    async def query_resources(self, query: ResourceQuery) -> ResourcePage:
        conditions = [Resource.status == PublishStatus.PUBLISH]

        if query.type_slugs:
            conditions.append(_has_term(Taxonomy.TYPE, query.type_slugs))
        if query.topic_slugs:
            conditions.append(_has_term(Taxonomy.TOPIC, query.topic_slugs))
        if query.audience_slugs:
            conditions.append(_has_term(Taxonomy.AUDIENCE, query.audience_slugs))
        if query.restrict_type_slugs:
            conditions.append(_has_term(Taxonomy.TYPE, query.restrict_type_slugs))
        if query.featured_only:
            conditions.append(Resource.featured.is_(True))
        if query.search:
            pattern = f"%{_escape_like(query.search)}%"
            conditions.append(
                or_(Resource.title.ilike(pattern, escape="\\"), Resource.body.ilike(pattern, escape="\\"))
            )
        if query.include_ids:
            conditions.append(Resource.id.in_(query.include_ids))
        if query.exclude_ids:
            conditions.append(Resource.id.notin_(query.exclude_ids))
        for key in query.require_meta:
            conditions.append(Resource.meta.any(ResourceMeta.meta_key == key))

        total = await self.db.scalar(select(func.count(Resource.id)).where(*conditions))

        order_func = asc if query.order == "ASC" else desc
        column = _ORDER_COLUMNS.get(query.orderby, Resource.created_at)
        stmt = (
            self._resource_select()
            .where(*conditions)
            .order_by(order_func(column), order_func(Resource.id))
            .offset(query.offset)
            .limit(query.limit)
        )
        result = await self.db.execute(stmt)
        items = [_resource_record(r) for r in result.scalars().all()]

        logger.debug("Resource query matched %d (returned %d)", total or 0, len(items))
        return ResourcePage(items=items, total=total or 0)

    async def get_resources(self, resource_ids: Iterable[int]) -> list[ResourceRecord]:
        ids = list(resource_ids)
        if not ids:
            return []
        result = await self.db.execute(self._resource_select().where(Resource.id.in_(ids)))
        by_id = {r.id: _resource_record(r) for r in result.scalars().all()}
        return [by_id[i] for i in ids if i in by_id]

    async def get_related(self, resource_id: int, limit: int) -> list[ResourceRecord]:
        topic_ids = select(resource_terms.c.term_id).join(Term, Term.id == resource_terms.c.term_id).where(
            resource_terms.c.resource_id == resource_id,
            Term.taxonomy == Taxonomy.TOPIC,
        )
        stmt = (
            self._resource_select()
            .where(
                Resource.id != resource_id,
                Resource.status == PublishStatus.PUBLISH,
                Resource.terms.any(Term.id.in_(topic_ids)),
            )
            .order_by(Resource.created_at.desc(), Resource.id.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [_resource_record(r) for r in result.scalars().all()]

    async def get_resource_terms(self, resource_id: int, taxonomy: str) -> list[TermRecord]:
        result = await self.db.execute(
            select(Term)
            .join(resource_terms, resource_terms.c.term_id == Term.id)
            .where(resource_terms.c.resource_id == resource_id, Term.taxonomy == Taxonomy(taxonomy))
            .order_by(Term.name)
        )
        return [_term_record(t) for t in result.scalars().all()]

    async def list_terms(self, taxonomy: str, hide_empty: bool = False) -> list[TermRecord]:
        count = (
            select(func.count(resource_terms.c.resource_id))
            .join(Resource, Resource.id == resource_terms.c.resource_id)
            .where(resource_terms.c.term_id == Term.id, Resource.status == PublishStatus.PUBLISH)
            .correlate(Term)
            .scalar_subquery()
        )
        result = await self.db.execute(
            select(Term, count.label("count")).where(Term.taxonomy == Taxonomy(taxonomy)).order_by(Term.name)
        )
        terms = [_term_record(term, term_count or 0) for term, term_count in result.all()]
        if hide_empty:
            terms = [t for t in terms if t.count > 0]
        return terms

    async def list_resources(self, limit: int) -> list[ResourceRecord]:
        result = await self.db.execute(
            self._resource_select()
            .where(Resource.status == PublishStatus.PUBLISH)
            .order_by(Resource.title.asc())
            .limit(limit)
        )
        return [_resource_record(r) for r in result.scalars().all()]

    async def get_collection(self, collection_id: int) -> CollectionRecord | None:
        collection = await self.db.get(Collection, collection_id)
        return _collection_record(collection) if collection else None

    async def get_collection_by_slug(self, slug: str) -> CollectionRecord | None:
        result = await self.db.execute(
            select(Collection).where(Collection.slug == slug, Collection.status == PublishStatus.PUBLISH)
        )
        collection = result.scalar_one_or_none()
        return _collection_record(collection) if collection else None

    async def get_collection_members(self, collection_id: int) -> list[int]:
        result = await self.db.execute(
            select(CollectionItem.resource_id)
            .where(CollectionItem.collection_id == collection_id)
            .order_by(CollectionItem.order, CollectionItem.id)
        )
        return list(result.scalars().all())

    async def list_collections(self, limit: int) -> list[CollectionRecord]:
        result = await self.db.execute(
            select(Collection)
            .where(Collection.status == PublishStatus.PUBLISH)
            .order_by(Collection.title.asc())
            .limit(limit)
        )
        return [_collection_record(c) for c in result.scalars().all()]
