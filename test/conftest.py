"""
Pytest configuration and fixtures for Resource Hub tests
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fakes import FakeResourceStore
from resource_hub.database import Base, get_db
from resource_hub.models import (
    Collection,
    CollectionItem,
    PublishStatus,
    Resource,
    ResourceMeta,
    Taxonomy,
    Term,
)
from resource_hub.plugins import create_hook_registry

# Test database URL (SQLite in-memory, one shared connection)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

BASE_DATE = datetime(2024, 1, 1, 9, 0, 0)


@pytest.fixture(scope="function")
async def setup_test_database():
    """Create a fresh schema for each test function that needs one."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="function")
async def test_db(setup_test_database) -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionLocal() as session:
        yield session


@pytest.fixture
def hooks():
    return create_hook_registry()


@pytest.fixture
def store():
    return FakeResourceStore()


# ── Seeding helpers ───────────────────────────────────────────────────────────


async def add_term(session: AsyncSession, taxonomy: Taxonomy, slug: str, name: str, parent: Term | None = None) -> Term:
    term = Term(taxonomy=taxonomy, slug=slug, name=name, parent_id=parent.id if parent else None)
    session.add(term)
    await session.flush()
    return term


async def add_resource(
    session: AsyncSession,
    title: str,
    slug: str,
    terms: list[Term] | None = None,
    meta: dict | None = None,
    days: int = 0,
    **kwargs,
) -> Resource:
    """Insert a resource created ``days`` after BASE_DATE with the given terms and metadata."""
    created = BASE_DATE + timedelta(days=days)
    resource = Resource(
        title=title,
        slug=slug,
        body=kwargs.pop("body", ""),
        created_at=created,
        updated_at=kwargs.pop("updated_at", created),
        terms=list(terms or []),
        meta=[ResourceMeta(meta_key=key, meta_value=value) for key, value in (meta or {}).items()],
        **kwargs,
    )
    session.add(resource)
    await session.flush()
    return resource


async def add_collection(session: AsyncSession, title: str, slug: str, members: list[Resource], **kwargs) -> Collection:
    collection = Collection(
        title=title,
        slug=slug,
        items=[CollectionItem(resource_id=r.id, order=i) for i, r in enumerate(members)],
        **kwargs,
    )
    session.add(collection)
    await session.flush()
    return collection


@pytest.fixture
async def seeded_db(test_db: AsyncSession) -> dict:
    """
    A small library: three types, two topics, one audience, five resources
    (one of them a draft) and one collection.
    """
    video = await add_term(test_db, Taxonomy.TYPE, "video", "Video")
    pdf = await add_term(test_db, Taxonomy.TYPE, "pdf", "PDF")
    internal = await add_term(test_db, Taxonomy.TYPE, "internal-content", "Internal Content")
    await add_term(test_db, Taxonomy.TYPE, "download", "Download")
    design = await add_term(test_db, Taxonomy.TOPIC, "design", "Design")
    ux = await add_term(test_db, Taxonomy.TOPIC, "ux", "UX", parent=design)
    editors = await add_term(test_db, Taxonomy.AUDIENCE, "editors", "Editors")

    intro = await add_resource(
        test_db,
        "Intro Video",
        "intro-video",
        terms=[video, design],
        meta={"video_url": "https://youtu.be/abc123", "video_duration": "12:30"},
        days=1,
        featured=True,
    )
    guide = await add_resource(
        test_db,
        "Style Guide",
        "style-guide",
        terms=[pdf, design, editors],
        meta={"pdf_file": "a.pdf", "pdf_file_size": "2MB", "pdf_page_count": 10, "pdf_viewer_mode": "inline"},
        days=2,
    )
    article = await add_resource(
        test_db,
        "Accessible Forms",
        "accessible-forms",
        terms=[internal, ux],
        meta={"reading_time": 7, "show_related": True},
        days=3,
        body="<h2>Labels</h2><p>Every input needs a label.</p>",
    )
    untyped = await add_resource(test_db, "Loose Notes", "loose-notes", days=4)
    draft = await add_resource(
        test_db, "Unreleased Talk", "unreleased-talk", terms=[video, design], days=5, status=PublishStatus.DRAFT
    )
    collection = await add_collection(
        test_db,
        "Getting Started",
        "getting-started",
        [guide, intro, draft],
        description="Start here.",
        display_style="playlist",
        show_progress=True,
        progress=50.0,
    )
    await test_db.commit()

    return {
        "intro": intro,
        "guide": guide,
        "article": article,
        "untyped": untyped,
        "draft": draft,
        "collection": collection,
    }


@pytest.fixture
async def client(seeded_db) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the full application with the test database swapped in."""
    from main import create_app

    app = create_app()

    async def override_get_db():
        async with TestSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
