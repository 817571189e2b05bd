"""Pydantic response models for feature access endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from mathfoundry.features.gate import RenderBranch
from mathfoundry.features.policy_store import AccessStatus, PolicyLoadState
from mathfoundry.features.resolution import AccessResult
from mathfoundry.features.tiers import SubscriptionTier


class FeatureEntry(BaseModel):
    feature_id: str
    name: str
    description: str
    category: str
    icon: str
    preview_available: bool
    default_tier: SubscriptionTier


class FeatureCatalogResponse(BaseModel):
    features: list[FeatureEntry]
    tiers: dict[str, str]
    categories: dict[str, dict[str, str]]


class PolicyStatusResponse(BaseModel):
    state: PolicyLoadState
    rows: int
    error: str | None = None


class CategoryFeatureEntry(BaseModel):
    feature_id: str
    has_access: bool
    required_tier: SubscriptionTier


class UserFeaturesResponse(BaseModel):
    user_id: int
    effective_tier: SubscriptionTier | None = None
    effective_tier_name: str | None = None
    is_dev_override: bool = False
    policy_state: PolicyLoadState
    available_features: list[str]
    features_by_category: dict[str, list[CategoryFeatureEntry]]


class FeatureAccessResponse(BaseModel):
    user_id: int
    feature_id: str
    status: AccessStatus
    result: AccessResult | None = None
    branch: RenderBranch | None = None
    upgrade_badge: dict[str, str] | None = None


# --- Admin ---


class FeatureActiveUpdate(BaseModel):
    is_active: bool


class TierMappingUpdate(BaseModel):
    is_enabled: bool


class FeatureAdminResponse(BaseModel):
    feature_id: str
    tier_id: str | None = None
    is_active: bool | None = None
    is_enabled: bool | None = None
    policy: PolicyStatusResponse
