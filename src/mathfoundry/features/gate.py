"""Turns an access result into exactly one render branch.

Branch precedence:

1. access granted -> protected content
2. preview requested, allowed, required tier known -> blurred preview + CTA
3. upgrade prompt requested, required tier known -> upgrade prompt
4. anything else -> caller's fallback (default: nothing)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from mathfoundry.features.catalog import FEATURE_METADATA
from mathfoundry.features.resolution import AccessResult
from mathfoundry.features.tiers import TIER_NAMES, SubscriptionTier


class RenderBranch(str, Enum):
    CONTENT = "content"
    PREVIEW = "preview"
    UPGRADE_PROMPT = "upgrade_prompt"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class UpgradePrompt:
    feature_id: str
    title: str
    description: str
    icon: str
    tier_name: str
    availability: str
    cta: str


@dataclass(frozen=True)
class PreviewOverlay:
    feature_id: str
    title: str
    subtitle: str
    icon: str
    cta: str = "Upgrade Now"


@dataclass(frozen=True)
class GateDecision:
    branch: RenderBranch
    payload: Any = None


def select_gate_branch(
    result: AccessResult,
    *,
    show_upgrade: bool = False,
    show_preview: bool = False,
) -> RenderBranch:
    if result.has_access:
        return RenderBranch.CONTENT
    if show_preview and result.preview_available and result.required_tier is not None:
        return RenderBranch.PREVIEW
    if show_upgrade and result.required_tier is not None:
        return RenderBranch.UPGRADE_PROMPT
    return RenderBranch.FALLBACK


def default_upgrade_prompt(feature_id: str, required_tier: SubscriptionTier) -> UpgradePrompt:
    metadata = FEATURE_METADATA.get(feature_id)
    tier_name = TIER_NAMES[required_tier]
    return UpgradePrompt(
        feature_id=feature_id,
        title=metadata.name if metadata else "Premium Feature",
        description=(
            metadata.description if metadata else "This feature requires an upgraded subscription."
        ),
        icon=metadata.icon if metadata else "\U0001f512",
        tier_name=tier_name,
        availability=f"Available with {tier_name} and above",
        cta=f"Upgrade to {tier_name}",
    )


def preview_overlay(feature_id: str, required_tier: SubscriptionTier) -> PreviewOverlay:
    metadata = FEATURE_METADATA.get(feature_id)
    name = metadata.name if metadata else feature_id
    return PreviewOverlay(
        feature_id=feature_id,
        title=f"Preview: {name}",
        subtitle=f"Upgrade to {TIER_NAMES[required_tier]} to unlock",
        icon=metadata.icon if metadata else "\U0001f512",
    )


def upgrade_badge(required_tier: SubscriptionTier) -> dict[str, str]:
    """Compact inline lock badge naming the tier to upgrade to."""
    return {"icon": "\U0001f512", "label": TIER_NAMES[required_tier]}


def render_gate(
    feature_id: str,
    result: AccessResult,
    content: Any,
    *,
    show_upgrade: bool = False,
    show_preview: bool = False,
    upgrade_prompt: Any = None,
    fallback: Any = None,
) -> GateDecision:
    """Pick the branch and the payload the caller should render for it.

    The preview payload is ``(content, overlay)`` since the protected content
    is still shown underneath the blur.
    """
    branch = select_gate_branch(result, show_upgrade=show_upgrade, show_preview=show_preview)
    if branch is RenderBranch.CONTENT:
        return GateDecision(branch, content)
    if branch is RenderBranch.PREVIEW:
        return GateDecision(branch, (content, preview_overlay(feature_id, result.required_tier)))
    if branch is RenderBranch.UPGRADE_PROMPT:
        if upgrade_prompt is not None:
            return GateDecision(branch, upgrade_prompt)
        return GateDecision(branch, default_upgrade_prompt(feature_id, result.required_tier))
    return GateDecision(branch, fallback)
