"""Feature access service — policy table queries and per-user checks."""

from __future__ import annotations

import logging
from contextlib import aclosing

from sqlalchemy import and_, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from mathfoundry.config import Settings, get_settings
from mathfoundry.database import get_session
from mathfoundry.db.models import (
    Feature,
    FeatureTierMapping,
    SubscriptionTierRow,
    User,
    UserSubscription,
)
from mathfoundry.features.policy_store import AccessDecision, FeaturePolicyStore
from mathfoundry.features.resolution import (
    SubscriptionSnapshot,
    TierFeature,
    resolve_effective_tier,
    snapshot_from_status,
)
from mathfoundry.features.tiers import SubscriptionTier, parse_tier

logger = logging.getLogger(__name__)

_store: FeaturePolicyStore | None = None


async def fetch_tier_features(db: AsyncSession) -> list[TierFeature]:
    """Every enabled tier x every feature, with the per-tier switch.

    Missing mappings read as disabled. Ordered by tier then feature display order.
    """
    result = await db.execute(
        select(
            SubscriptionTierRow,
            Feature,
            FeatureTierMapping.is_enabled,
            FeatureTierMapping.usage_limit,
            FeatureTierMapping.limit_period,
        )
        .select_from(SubscriptionTierRow)
        .join(Feature, true())
        .outerjoin(
            FeatureTierMapping,
            and_(
                FeatureTierMapping.tier_id == SubscriptionTierRow.id,
                FeatureTierMapping.feature_id == Feature.id,
            ),
        )
        .where(SubscriptionTierRow.enabled.is_(True))
        .order_by(SubscriptionTierRow.display_order, Feature.display_order)
    )

    rows: list[TierFeature] = []
    for tier_row, feature, is_enabled, usage_limit, limit_period in result.all():
        tier = parse_tier(tier_row.id)
        if tier is None:
            logger.warning("Skipping policy rows for unknown tier %s", tier_row.id)
            continue
        rows.append(TierFeature(
            feature_id=feature.id,
            tier_id=tier,
            is_enabled=bool(is_enabled),
            feature_active=feature.is_active,
            preview_available=feature.preview_available,
            display_order=feature.display_order,
            tier_name=tier_row.name,
            feature_name=feature.name,
            category=feature.category,
            icon=feature.icon,
            usage_limit=usage_limit,
            limit_period=limit_period,
        ))
    return rows


async def fetch_tier_features_from_pool() -> list[TierFeature]:
    """Policy fetcher that opens its own session."""
    async with aclosing(get_session()) as sessions:
        async for db in sessions:
            return await fetch_tier_features(db)
    return []


async def get_subscription_snapshot(db: AsyncSession, user_id: int) -> SubscriptionSnapshot | None:
    """Subscription snapshot for a user, or None if the user does not exist."""
    user = await db.get(User, user_id)
    if user is None:
        return None
    subscription = await db.get(UserSubscription, user_id)
    if subscription is None:
        return snapshot_from_status(None, None)
    return snapshot_from_status(subscription.status, subscription.tier)


# --- Admin edits ---


async def set_feature_active(db: AsyncSession, feature_id: str, is_active: bool) -> Feature | None:
    """Flip a feature's global switch. Returns None for an unknown feature."""
    feature = await db.get(Feature, feature_id)
    if feature is None:
        return None
    feature.is_active = is_active
    await db.commit()
    logger.info("Feature %s is_active=%s", feature_id, is_active)
    return feature


async def set_tier_mapping(
    db: AsyncSession,
    feature_id: str,
    tier_id: str,
    is_enabled: bool,
) -> FeatureTierMapping | None:
    """Upsert the (feature, tier) switch. Returns None if either side is unknown."""
    if await db.get(Feature, feature_id) is None or await db.get(SubscriptionTierRow, tier_id) is None:
        return None

    result = await db.execute(
        select(FeatureTierMapping).where(
            FeatureTierMapping.feature_id == feature_id,
            FeatureTierMapping.tier_id == tier_id,
        )
    )
    mapping = result.scalar_one_or_none()
    if mapping is None:
        mapping = FeatureTierMapping(feature_id=feature_id, tier_id=tier_id, is_enabled=is_enabled)
        db.add(mapping)
    else:
        mapping.is_enabled = is_enabled
    await db.commit()
    logger.info("Feature %s on tier %s is_enabled=%s", feature_id, tier_id, is_enabled)
    return mapping


# --- Process-wide policy store ---


def init_policy_store(store: FeaturePolicyStore) -> None:
    global _store  # noqa: PLW0603
    _store = store


def close_policy_store() -> None:
    global _store  # noqa: PLW0603
    _store = None


def get_policy_store() -> FeaturePolicyStore:
    """Get the shared policy store (FastAPI dependency)."""
    if _store is None:
        msg = "Policy store not initialized. Call init_policy_store() first."
        raise RuntimeError(msg)
    return _store


class FeatureAccessService:
    """Per-user feature checks against the shared policy store."""

    def __init__(
        self,
        db: AsyncSession,
        store: FeaturePolicyStore,
        settings: Settings | None = None,
    ) -> None:
        self.db = db
        self.store = store
        self.settings = settings or get_settings()

    async def effective_tier(self, user_id: int) -> tuple[bool, SubscriptionTier | None]:
        """(user_exists, effective tier)."""
        snapshot = await get_subscription_snapshot(self.db, user_id)
        if snapshot is None:
            return False, None
        return True, resolve_effective_tier(snapshot, self.settings.effective_dev_override)

    async def check(self, feature_id: str, user_id: int) -> AccessDecision | None:
        """Access to ``feature_id`` for a user, or None if the user does not exist.

        Stays ``loading`` (never granted) until the policy table has been fetched.
        """
        exists, tier = await self.effective_tier(user_id)
        if not exists:
            return None
        return self.store.decide(feature_id, tier)
