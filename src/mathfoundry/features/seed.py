"""Seed data for tiers, features and default feature-tier mappings."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mathfoundry.db.models import Feature, FeatureTierMapping, SubscriptionTierRow
from mathfoundry.features.catalog import FEATURE_METADATA
from mathfoundry.features.tiers import TIER_LEVELS, TIER_NAMES, SubscriptionTier

logger = logging.getLogger(__name__)

# Globally switched off until they ship
INACTIVE_AT_LAUNCH = frozenset({"ai_problem_generator", "offline_mode"})

_CATEGORY_ORDER = {"core": 0, "ai": 100, "premium": 200, "support": 250, "general": 300}

# Which feature categories each tier gets by default
TIER_CATEGORIES: dict[SubscriptionTier, frozenset[str] | None] = {
    SubscriptionTier.FOUNDATION: frozenset({"core"}),
    SubscriptionTier.FOUNDATION_AI: frozenset({"core", "ai"}),
    SubscriptionTier.VIP: None,  # every active feature
}


def _feature_seed_rows() -> list[dict]:
    rows = []
    counters: dict[str, int] = {}
    for metadata in FEATURE_METADATA.values():
        position = counters.get(metadata.category, 0) + 1
        counters[metadata.category] = position
        rows.append({
            "id": metadata.id,
            "name": metadata.name,
            "description": metadata.description,
            "category": metadata.category,
            "icon": metadata.icon,
            "is_active": metadata.id not in INACTIVE_AT_LAUNCH,
            "preview_available": metadata.preview_available,
            "display_order": _CATEGORY_ORDER.get(metadata.category, 300) + position * 10,
        })
    return rows


async def seed_feature_catalog(db: AsyncSession) -> int:
    """Insert missing tiers, features and mappings. Returns mappings created."""
    existing_tiers = set((await db.execute(select(SubscriptionTierRow.id))).scalars())
    for tier in SubscriptionTier:
        if tier.value not in existing_tiers:
            db.add(SubscriptionTierRow(
                id=tier.value,
                name=TIER_NAMES[tier],
                enabled=True,
                display_order=TIER_LEVELS[tier],
            ))

    existing_features = set((await db.execute(select(Feature.id))).scalars())
    seed_rows = _feature_seed_rows()
    for row in seed_rows:
        if row["id"] not in existing_features:
            db.add(Feature(**row))
    await db.flush()

    mapping_rows = await db.execute(select(FeatureTierMapping.feature_id, FeatureTierMapping.tier_id))
    existing_mappings = {(feature_id, tier_id) for feature_id, tier_id in mapping_rows.all()}
    created = 0
    for tier, categories in TIER_CATEGORIES.items():
        for row in seed_rows:
            if not row["is_active"]:
                continue
            if categories is not None and row["category"] not in categories:
                continue
            if (row["id"], tier.value) in existing_mappings:
                continue
            db.add(FeatureTierMapping(feature_id=row["id"], tier_id=tier.value, is_enabled=True))
            created += 1

    await db.commit()
    logger.info("Seeded feature catalog (%d new mappings)", created)
    return created
