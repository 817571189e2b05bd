"""Subscription tier hierarchy.

Tiers are ranked; a tier grants every feature whose required tier ranks at
or below it.
"""

from __future__ import annotations

from enum import Enum


class SubscriptionTier(str, Enum):
    """Paid subscription tiers, lowest first."""

    FOUNDATION = "foundation"
    FOUNDATION_AI = "foundation_ai"
    VIP = "vip"


TIER_LEVELS: dict[SubscriptionTier, int] = {
    SubscriptionTier.FOUNDATION: 1,
    SubscriptionTier.FOUNDATION_AI: 2,
    SubscriptionTier.VIP: 3,
}

TIER_NAMES: dict[SubscriptionTier, str] = {
    SubscriptionTier.FOUNDATION: "Foundation",
    SubscriptionTier.FOUNDATION_AI: "Foundation AI",
    SubscriptionTier.VIP: "VIP",
}

LOWEST_PAID_TIER = min(TIER_LEVELS, key=TIER_LEVELS.__getitem__)
HIGHEST_TIER = max(TIER_LEVELS, key=TIER_LEVELS.__getitem__)


def parse_tier(value: str | None) -> SubscriptionTier | None:
    """Tier for a stored id, or None when empty or unrecognised."""
    if not value:
        return None
    try:
        return SubscriptionTier(value)
    except ValueError:
        return None


def tier_rank(tier: SubscriptionTier) -> int:
    return TIER_LEVELS[tier]


def tier_includes_feature(user_tier: SubscriptionTier, required_tier: SubscriptionTier) -> bool:
    """True if ``user_tier`` ranks at or above ``required_tier``."""
    return TIER_LEVELS[user_tier] >= TIER_LEVELS[required_tier]
