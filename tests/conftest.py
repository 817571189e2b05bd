"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import aclosing

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

import mathfoundry.db.models  # noqa: F401  registers tables on Base.metadata
from mathfoundry.achievements.seed import seed_badges
from mathfoundry.config import get_settings
from mathfoundry.database import close_db, get_engine, get_session, init_db
from mathfoundry.db.base import Base
from mathfoundry.db.models import Child, User, UserSubscription
from mathfoundry.features.policy_store import FeaturePolicyStore
from mathfoundry.features.seed import seed_feature_catalog
from mathfoundry.features.service import (
    close_policy_store,
    fetch_tier_features_from_pool,
    init_policy_store,
)
from mathfoundry.main import create_app


@pytest_asyncio.fixture
async def db_engine(tmp_path, monkeypatch) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh sqlite database with every table created."""
    monkeypatch.setenv("MF_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'mathfoundry.db'}")
    monkeypatch.setenv("MF_ENVIRONMENT", "test")
    monkeypatch.setenv("MF_LOG_FORMAT", "console")
    monkeypatch.delenv("MF_DEV_TIER_OVERRIDE", raising=False)
    monkeypatch.delenv("MF_UNLOCK_BUFFER", raising=False)
    get_settings.cache_clear()

    await init_db(get_settings().database_url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield get_engine()

    await close_db()
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for setup and assertions."""
    async with aclosing(get_session()) as sessions:
        async for session in sessions:
            yield session
            break


@pytest_asyncio.fixture
async def seeded_db(db_session: AsyncSession) -> AsyncSession:
    """Session with the feature catalog and badge definitions seeded."""
    await seed_feature_catalog(db_session)
    await seed_badges(db_session)
    return db_session


@pytest_asyncio.fixture
async def policy_store(seeded_db: AsyncSession) -> AsyncGenerator[FeaturePolicyStore, None]:
    """Loaded process-wide policy store backed by the test database."""
    store = FeaturePolicyStore(fetch_tier_features_from_pool, timeout_seconds=5.0)
    init_policy_store(store)
    await store.load()
    yield store
    close_policy_store()


@pytest_asyncio.fixture
async def client(policy_store: FeaturePolicyStore) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client against a seeded sqlite database."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def make_family(db_session: AsyncSession):
    """Factory creating a parent with one child per level and an optional subscription."""

    async def _make(
        levels: list[str],
        *,
        email: str = "parent@example.com",
        status: str | None = None,
        tier: str | None = None,
    ) -> tuple[User, list[Child]]:
        return await _create_family(db_session, levels, email=email, status=status, tier=tier)

    return _make


async def _create_family(
    db: AsyncSession,
    levels: list[str],
    *,
    email: str = "parent@example.com",
    status: str | None = None,
    tier: str | None = None,
) -> tuple[User, list[Child]]:
    """Create a parent with one child per level and an optional subscription."""
    user = User(email=email, display_name="Parent")
    db.add(user)
    await db.flush()

    children = []
    for i, level in enumerate(levels):
        child = Child(
            user_id=user.id,
            name=f"Child {i + 1}",
            current_level=level,
            total_problems=0,
            total_correct=0,
            streak=0,
        )
        db.add(child)
        children.append(child)

    if status is not None:
        db.add(UserSubscription(user_id=user.id, status=status, tier=tier))

    await db.commit()
    return user, children
