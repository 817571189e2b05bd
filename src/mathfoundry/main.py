"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mathfoundry.achievements.router import router as achievements_router
from mathfoundry.achievements.seed import seed_badges
from mathfoundry.config import get_settings
from mathfoundry.curriculum.router import router as curriculum_router
from mathfoundry.database import close_db, get_session, init_db
from mathfoundry.features.policy_store import FeaturePolicyStore
from mathfoundry.features.router import router as features_router
from mathfoundry.features.seed import seed_feature_catalog
from mathfoundry.features.service import (
    close_policy_store,
    fetch_tier_features_from_pool,
    init_policy_store,
)
from mathfoundry.health.router import router as health_router
from mathfoundry.middleware import setup_middleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)

    # Seed reference data (idempotent)
    try:
        async for db in get_session():
            await seed_feature_catalog(db)
            await seed_badges(db)
            break
    except Exception:
        logger.warning("Seeding failed (tables may not exist yet)", exc_info=True)

    store = FeaturePolicyStore(
        fetch_tier_features_from_pool,
        timeout_seconds=settings.policy_fetch_timeout_seconds,
    )
    init_policy_store(store)
    await store.load()

    yield

    close_policy_store()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Math Foundry API",
        description="Curriculum unlocks and subscription feature access for the Math Foundry apps",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(curriculum_router)
    app.include_router(features_router)
    app.include_router(achievements_router)

    return app


app = create_app()
