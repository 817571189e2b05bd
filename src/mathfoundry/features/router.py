"""Feature access API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mathfoundry.config import get_settings
from mathfoundry.database import get_session
from mathfoundry.features.catalog import (
    ALL_FEATURE_IDS,
    FEATURE_CATEGORIES,
    FEATURE_METADATA,
    default_required_tier,
)
from mathfoundry.features.gate import select_gate_branch, upgrade_badge
from mathfoundry.features.policy_store import FeaturePolicyStore, PolicyLoadState
from mathfoundry.features.schemas import (
    CategoryFeatureEntry,
    FeatureAccessResponse,
    FeatureActiveUpdate,
    FeatureAdminResponse,
    FeatureCatalogResponse,
    FeatureEntry,
    PolicyStatusResponse,
    TierMappingUpdate,
    UserFeaturesResponse,
)
from mathfoundry.features.service import (
    FeatureAccessService,
    get_policy_store,
    set_feature_active,
    set_tier_mapping,
)
from mathfoundry.features.tiers import TIER_NAMES

router = APIRouter(prefix="/api/v1", tags=["Features"])


def _policy_status(store: FeaturePolicyStore) -> PolicyStatusResponse:
    return PolicyStatusResponse(state=store.state, rows=len(store.rows), error=store.error)


@router.get("/features", response_model=FeatureCatalogResponse)
async def list_features():
    """Feature catalogue with the fallback tier for each feature."""
    entries = []
    for feature_id in ALL_FEATURE_IDS:
        m = FEATURE_METADATA[feature_id]
        entries.append(FeatureEntry(
            feature_id=feature_id,
            name=m.name,
            description=m.description,
            category=m.category,
            icon=m.icon,
            preview_available=m.preview_available,
            default_tier=default_required_tier(feature_id),
        ))
    return FeatureCatalogResponse(
        features=entries,
        tiers={tier.value: name for tier, name in TIER_NAMES.items()},
        categories=FEATURE_CATEGORIES,
    )


@router.get("/features/policy", response_model=PolicyStatusResponse)
async def policy_status(store: FeaturePolicyStore = Depends(get_policy_store)):
    return _policy_status(store)


@router.post("/features/policy/reload", response_model=PolicyStatusResponse)
async def reload_policy(store: FeaturePolicyStore = Depends(get_policy_store)):
    """Re-fetch the policy table after an admin edit; the latest load wins."""
    await store.load()
    return _policy_status(store)


@router.get("/users/{user_id}/features", response_model=UserFeaturesResponse)
async def user_features(
    user_id: int,
    db: AsyncSession = Depends(get_session),
    store: FeaturePolicyStore = Depends(get_policy_store),
):
    settings = get_settings()
    service = FeatureAccessService(db, store, settings)
    exists, tier = await service.effective_tier(user_id)
    if not exists:
        raise HTTPException(status_code=404, detail="User not found")

    response = UserFeaturesResponse(
        user_id=user_id,
        effective_tier=tier,
        effective_tier_name=TIER_NAMES[tier] if tier else None,
        is_dev_override=settings.effective_dev_override is not None,
        policy_state=store.state,
        available_features=[],
        features_by_category={},
    )
    # Nothing is available until the policy table is in
    if store.state is PolicyLoadState.LOADING:
        return response

    resolver = store.resolver(tier)
    response.available_features = resolver.available_features()
    response.features_by_category = {
        category: [CategoryFeatureEntry(**item) for item in items]
        for category, items in resolver.features_by_category().items()
    }
    return response


@router.get("/users/{user_id}/features/{feature_id}", response_model=FeatureAccessResponse)
async def feature_access(
    user_id: int,
    feature_id: str,
    show_upgrade: bool = Query(False),
    show_preview: bool = Query(False),
    db: AsyncSession = Depends(get_session),
    store: FeaturePolicyStore = Depends(get_policy_store),
):
    """Access decision for one feature plus the render branch the client should take."""
    service = FeatureAccessService(db, store)
    decision = await service.check(feature_id, user_id)
    if decision is None:
        raise HTTPException(status_code=404, detail="User not found")

    if decision.result is None:
        return FeatureAccessResponse(user_id=user_id, feature_id=feature_id, status=decision.status)

    result = decision.result
    return FeatureAccessResponse(
        user_id=user_id,
        feature_id=feature_id,
        status=decision.status,
        result=result,
        branch=select_gate_branch(result, show_upgrade=show_upgrade, show_preview=show_preview),
        upgrade_badge=upgrade_badge(result.required_tier) if result.required_tier else None,
    )


# --- Admin feature management ---


@router.put("/admin/features/{feature_id}", response_model=FeatureAdminResponse)
async def update_feature_active(
    feature_id: str,
    body: FeatureActiveUpdate,
    db: AsyncSession = Depends(get_session),
    store: FeaturePolicyStore = Depends(get_policy_store),
):
    """Switch a feature on or off for every tier, then reload the policy table."""
    feature = await set_feature_active(db, feature_id, body.is_active)
    if feature is None:
        raise HTTPException(status_code=404, detail="Feature not found")
    await store.load()
    return FeatureAdminResponse(feature_id=feature_id, is_active=body.is_active, policy=_policy_status(store))


@router.put("/admin/features/{feature_id}/tiers/{tier_id}", response_model=FeatureAdminResponse)
async def update_tier_mapping(
    feature_id: str,
    tier_id: str,
    body: TierMappingUpdate,
    db: AsyncSession = Depends(get_session),
    store: FeaturePolicyStore = Depends(get_policy_store),
):
    """Enable or disable a feature for one tier, then reload the policy table."""
    mapping = await set_tier_mapping(db, feature_id, tier_id, body.is_enabled)
    if mapping is None:
        raise HTTPException(status_code=404, detail="Feature or tier not found")
    await store.load()
    return FeatureAdminResponse(
        feature_id=feature_id,
        tier_id=tier_id,
        is_enabled=body.is_enabled,
        policy=_policy_status(store),
    )
