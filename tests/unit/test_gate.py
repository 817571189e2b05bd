"""Access gate tests."""

import pytest

from mathfoundry.features.gate import (
    PreviewOverlay,
    RenderBranch,
    UpgradePrompt,
    default_upgrade_prompt,
    render_gate,
    select_gate_branch,
    upgrade_badge,
)
from mathfoundry.features.resolution import AccessReason, AccessResult
from mathfoundry.features.tiers import SubscriptionTier

GRANTED = AccessResult(has_access=True, reason=AccessReason.GRANTED)
NEEDS_AI_WITH_PREVIEW = AccessResult(
    has_access=False,
    reason=AccessReason.TIER_REQUIRED,
    required_tier=SubscriptionTier.FOUNDATION_AI,
    preview_available=True,
)
NEEDS_VIP = AccessResult(
    has_access=False,
    reason=AccessReason.TIER_REQUIRED,
    required_tier=SubscriptionTier.VIP,
    preview_available=False,
)
DISABLED = AccessResult(has_access=False, reason=AccessReason.FEATURE_DISABLED)


class TestSelectGateBranch:
    @pytest.mark.parametrize("show_upgrade", [True, False])
    @pytest.mark.parametrize("show_preview", [True, False])
    def test_granted_always_shows_content(self, show_upgrade, show_preview):
        branch = select_gate_branch(GRANTED, show_upgrade=show_upgrade, show_preview=show_preview)
        assert branch is RenderBranch.CONTENT

    def test_preview_beats_upgrade(self):
        branch = select_gate_branch(NEEDS_AI_WITH_PREVIEW, show_upgrade=True, show_preview=True)
        assert branch is RenderBranch.PREVIEW

    def test_preview_needs_preview_allowed(self):
        branch = select_gate_branch(NEEDS_VIP, show_upgrade=True, show_preview=True)
        assert branch is RenderBranch.UPGRADE_PROMPT

    def test_upgrade_only_when_requested(self):
        assert select_gate_branch(NEEDS_VIP) is RenderBranch.FALLBACK
        assert select_gate_branch(NEEDS_VIP, show_upgrade=True) is RenderBranch.UPGRADE_PROMPT

    def test_no_required_tier_falls_back(self):
        branch = select_gate_branch(DISABLED, show_upgrade=True, show_preview=True)
        assert branch is RenderBranch.FALLBACK


class TestRenderGate:
    def test_content(self):
        decision = render_gate("ai_hints", GRANTED, "secret")
        assert decision.branch is RenderBranch.CONTENT
        assert decision.payload == "secret"

    def test_preview_keeps_content_under_overlay(self):
        decision = render_gate("ai_hints", NEEDS_AI_WITH_PREVIEW, "secret", show_preview=True)
        content, overlay = decision.payload
        assert content == "secret"
        assert isinstance(overlay, PreviewOverlay)
        assert overlay.title == "Preview: AI Hints"
        assert overlay.subtitle == "Upgrade to Foundation AI to unlock"

    def test_default_upgrade_prompt(self):
        decision = render_gate("live_tutor", NEEDS_VIP, "secret", show_upgrade=True)
        assert isinstance(decision.payload, UpgradePrompt)
        assert decision.payload.cta == "Upgrade to VIP"
        assert decision.payload.availability == "Available with VIP and above"

    def test_custom_upgrade_prompt(self):
        decision = render_gate("live_tutor", NEEDS_VIP, "secret", show_upgrade=True, upgrade_prompt="custom")
        assert decision.payload == "custom"

    def test_empty_upgrade_prompt_kept(self):
        decision = render_gate("live_tutor", NEEDS_VIP, "secret", show_upgrade=True, upgrade_prompt="")
        assert decision.branch is RenderBranch.UPGRADE_PROMPT
        assert decision.payload == ""

    def test_fallback_defaults_to_nothing(self):
        decision = render_gate("live_tutor", NEEDS_VIP, "secret")
        assert decision.branch is RenderBranch.FALLBACK
        assert decision.payload is None

    def test_explicit_fallback(self):
        decision = render_gate("live_tutor", DISABLED, "secret", fallback="soon")
        assert decision.payload == "soon"


class TestPromptHelpers:
    def test_unknown_feature_prompt(self):
        prompt = default_upgrade_prompt("mystery", SubscriptionTier.VIP)
        assert prompt.title == "Premium Feature"
        assert prompt.tier_name == "VIP"

    def test_upgrade_badge(self):
        assert upgrade_badge(SubscriptionTier.FOUNDATION_AI)["label"] == "Foundation AI"
