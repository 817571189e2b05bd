"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from mathfoundry.config import get_settings
from mathfoundry.database import get_session
from mathfoundry.features.policy_store import FeaturePolicyStore, PolicyLoadState
from mathfoundry.features.service import get_policy_store

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe — returns 200 if the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    db: AsyncSession = Depends(get_session),  # noqa: B008
    store: FeaturePolicyStore = Depends(get_policy_store),  # noqa: B008
) -> dict[str, object]:
    """Readiness probe — database connectivity and feature policy state."""
    checks: dict[str, object] = {}

    try:
        result = await db.execute(text("SELECT 1"))
        result.scalar()
        checks["database"] = "ok"
    except Exception as exc:
        checks["database"] = f"error: {exc}"

    # An errored policy load still serves the hardcoded defaults
    if store.state is PolicyLoadState.RESOLVED:
        checks["feature_policy"] = "ok"
    else:
        checks["feature_policy"] = store.state.value

    all_ok = all(v == "ok" for v in checks.values())
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    """Return API version and environment."""
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
