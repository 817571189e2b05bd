"""Effective-tier resolution and per-feature access checks.

Two ordered sources decide what a feature requires:

1. the admin-managed policy table (``TierFeature`` rows, one per
   feature x tier), consulted whenever it has any row for the feature;
2. the hardcoded ``DEFAULT_FEATURE_TIERS`` map otherwise.

A feature switched off globally (``feature_active=False``) is denied for
every tier, whatever its per-tier rows say.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict

from mathfoundry.features.catalog import (
    ALL_FEATURE_IDS,
    DEFAULT_FEATURE_TIERS,
    FEATURE_METADATA,
)
from mathfoundry.features.tiers import (
    HIGHEST_TIER,
    LOWEST_PAID_TIER,
    SubscriptionTier,
    parse_tier,
    tier_includes_feature,
    tier_rank,
)


class AccessReason(str, Enum):
    NOT_AUTHENTICATED = "not_authenticated"
    FEATURE_DISABLED = "feature_disabled"
    TIER_REQUIRED = "tier_required"
    GRANTED = "granted"


class TierFeature(BaseModel):
    """One row of the feature policy table."""

    model_config = ConfigDict(frozen=True)

    feature_id: str
    tier_id: SubscriptionTier
    is_enabled: bool
    feature_active: bool = True
    preview_available: bool = False
    display_order: int = 0
    tier_name: str | None = None
    feature_name: str | None = None
    category: str | None = None
    icon: str | None = None
    # Carried through for clients; checks do not meter usage
    usage_limit: int | None = None
    limit_period: str | None = None


class AccessResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    has_access: bool
    reason: AccessReason
    required_tier: SubscriptionTier | None = None
    preview_available: bool | None = None


class SubscriptionSnapshot(BaseModel):
    """Subscription state as seen by access checks."""

    model_config = ConfigDict(frozen=True)

    is_active: bool = False
    is_in_free_period: bool = False
    is_in_grace_period: bool = False
    tier: SubscriptionTier | None = None


def snapshot_from_status(status: str | None, tier: str | None) -> SubscriptionSnapshot:
    """Map a stored subscription status onto a snapshot.

    A user with no subscription record at all starts in the free period.
    """
    if status is None:
        return SubscriptionSnapshot(is_in_free_period=True)
    return SubscriptionSnapshot(
        is_active=status == "active",
        is_in_free_period=status == "free_period",
        is_in_grace_period=status == "grace_period",
        tier=parse_tier(tier),
    )


def resolve_effective_tier(
    snapshot: SubscriptionSnapshot,
    dev_override: SubscriptionTier | None = None,
) -> SubscriptionTier | None:
    """Tier actually applied to a user.

    Priority: dev override, active paid tier, free/grace default, nothing.
    Callers pass ``dev_override`` only in non-production builds.
    """
    if dev_override is not None:
        return dev_override
    if snapshot.is_active and snapshot.tier is not None:
        return snapshot.tier
    if snapshot.is_in_free_period or snapshot.is_in_grace_period:
        return LOWEST_PAID_TIER
    return None


def _lowest_enabled_tier(rows: Iterable[TierFeature]) -> SubscriptionTier | None:
    enabled = sorted((r.tier_id for r in rows if r.is_enabled), key=tier_rank)
    return enabled[0] if enabled else None


class FeatureAccessResolver:
    """Resolves feature access for one effective tier against a policy table."""

    def __init__(
        self,
        effective_tier: SubscriptionTier | None,
        policy_rows: Iterable[TierFeature] = (),
    ) -> None:
        self.effective_tier = effective_tier
        self._rows_by_feature: dict[str, list[TierFeature]] = {}
        for row in policy_rows:
            self._rows_by_feature.setdefault(row.feature_id, []).append(row)

    def _rows_for(self, feature_id: str) -> list[TierFeature]:
        return self._rows_by_feature.get(feature_id, [])

    def check_feature_access(self, feature_id: str) -> AccessResult:
        tier = self.effective_tier
        if tier is None:
            return AccessResult(has_access=False, reason=AccessReason.NOT_AUTHENTICATED)

        rows = self._rows_for(feature_id)
        if rows:
            return self._check_policy_rows(tier, rows)

        required = DEFAULT_FEATURE_TIERS.get(feature_id)
        if required is None:
            return AccessResult(has_access=False, reason=AccessReason.FEATURE_DISABLED)
        if tier_includes_feature(tier, required):
            return AccessResult(has_access=True, reason=AccessReason.GRANTED)

        metadata = FEATURE_METADATA.get(feature_id)
        return AccessResult(
            has_access=False,
            reason=AccessReason.TIER_REQUIRED,
            required_tier=required,
            preview_available=metadata.preview_available if metadata else False,
        )

    @staticmethod
    def _check_policy_rows(tier: SubscriptionTier, rows: list[TierFeature]) -> AccessResult:
        first = rows[0]
        if not first.feature_active:
            return AccessResult(has_access=False, reason=AccessReason.FEATURE_DISABLED)

        if any(r.tier_id == tier and r.is_enabled for r in rows):
            return AccessResult(has_access=True, reason=AccessReason.GRANTED)

        return AccessResult(
            has_access=False,
            reason=AccessReason.TIER_REQUIRED,
            required_tier=_lowest_enabled_tier(rows) or HIGHEST_TIER,
            preview_available=first.preview_available,
        )

    def has_feature(self, feature_id: str) -> bool:
        return self.check_feature_access(feature_id).has_access

    def required_tier(self, feature_id: str) -> SubscriptionTier:
        """Minimum tier that unlocks a feature (policy table, then defaults, then VIP)."""
        lowest = _lowest_enabled_tier(self._rows_for(feature_id))
        if lowest is not None:
            return lowest
        return DEFAULT_FEATURE_TIERS.get(feature_id, HIGHEST_TIER)

    def available_features(self) -> list[str]:
        if self.effective_tier is None:
            return []
        return [f for f in ALL_FEATURE_IDS if self.has_feature(f)]

    def features_by_category(self) -> dict[str, list[dict[str, object]]]:
        categories: dict[str, list[dict[str, object]]] = {}
        for feature_id in ALL_FEATURE_IDS:
            metadata = FEATURE_METADATA.get(feature_id)
            if metadata is None:
                continue
            categories.setdefault(metadata.category, []).append({
                "feature_id": feature_id,
                "has_access": self.has_feature(feature_id),
                "required_tier": self.required_tier(feature_id),
            })
        return categories
