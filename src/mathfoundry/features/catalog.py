"""Feature ids, hardcoded tier requirements and display metadata.

The authoritative feature-to-tier mapping lives in the database and can be
edited by admins. ``DEFAULT_FEATURE_TIERS`` is the fallback used whenever
the database table is unavailable or has no rows for a feature.
"""

from __future__ import annotations

from dataclasses import dataclass

from mathfoundry.features.tiers import SubscriptionTier, tier_includes_feature


class FEATURES:
    # Core (Foundation, included in all tiers)
    BASIC_HINTS = "basic_hints"
    PROGRESS_TRACKING = "progress_tracking"
    ANIMATIONS = "animations"
    PARENT_DASHBOARD = "parent_dashboard"
    VIDEO_LESSONS = "video_lessons"

    # AI (Foundation AI)
    AI_HINTS = "ai_hints"
    AI_EXPLANATIONS = "ai_explanations"
    VOICE_ASSISTANT = "voice_assistant"
    PERSONALIZED_PATH = "personalized_path"
    AI_PROBLEM_GENERATOR = "ai_problem_generator"

    # Premium (VIP)
    LIVE_TUTOR = "live_tutor"
    PRIORITY_SUPPORT = "priority_support"
    CUSTOM_CURRICULUM = "custom_curriculum"
    ADVANCED_ANALYTICS = "advanced_analytics"
    OFFLINE_MODE = "offline_mode"


ALL_FEATURE_IDS: tuple[str, ...] = tuple(
    value for name, value in vars(FEATURES).items() if name.isupper()
)

FEATURE_CATEGORIES: dict[str, dict[str, str]] = {
    "core": {"name": "Core Features", "description": "Essential features included in all plans", "icon": "\U0001f3af"},
    "ai": {"name": "AI Features", "description": "AI-powered learning enhancements", "icon": "\U0001f916"},
    "premium": {
        "name": "Premium Features",
        "description": "Advanced features for premium subscribers",
        "icon": "⭐",
    },
    "support": {"name": "Support Features", "description": "Support and assistance options", "icon": "\U0001f6df"},
    "general": {"name": "General Features", "description": "Other platform features", "icon": "\U0001f4e6"},
}

_F = SubscriptionTier.FOUNDATION
_AI = SubscriptionTier.FOUNDATION_AI
_VIP = SubscriptionTier.VIP

DEFAULT_FEATURE_TIERS: dict[str, SubscriptionTier] = {
    FEATURES.BASIC_HINTS: _F,
    FEATURES.PROGRESS_TRACKING: _F,
    FEATURES.ANIMATIONS: _F,
    FEATURES.PARENT_DASHBOARD: _F,
    FEATURES.VIDEO_LESSONS: _F,
    FEATURES.AI_HINTS: _AI,
    FEATURES.AI_EXPLANATIONS: _AI,
    FEATURES.VOICE_ASSISTANT: _AI,
    FEATURES.PERSONALIZED_PATH: _AI,
    FEATURES.AI_PROBLEM_GENERATOR: _AI,
    FEATURES.LIVE_TUTOR: _VIP,
    FEATURES.PRIORITY_SUPPORT: _VIP,
    FEATURES.CUSTOM_CURRICULUM: _VIP,
    FEATURES.ADVANCED_ANALYTICS: _VIP,
    FEATURES.OFFLINE_MODE: _VIP,
}


@dataclass(frozen=True)
class FeatureMetadata:
    id: str
    name: str
    description: str
    category: str
    icon: str
    preview_available: bool = False


FEATURE_METADATA: dict[str, FeatureMetadata] = {
    m.id: m
    for m in (
        FeatureMetadata(FEATURES.BASIC_HINTS, "Basic Hints", "Static hint cards for problem solving", "core", "\U0001f4a1"),
        FeatureMetadata(
            FEATURES.PROGRESS_TRACKING, "Progress Tracking",
            "Track learning progress and worksheet completion", "core", "\U0001f4ca",
        ),
        FeatureMetadata(FEATURES.ANIMATIONS, "Animations", "Visual animations for math concepts", "core", "\U0001f3ac"),
        FeatureMetadata(
            FEATURES.PARENT_DASHBOARD, "Parent Dashboard",
            "Dashboard for parents to monitor progress", "core", "\U0001f46a",
        ),
        FeatureMetadata(FEATURES.VIDEO_LESSONS, "Video Lessons", "Pre-recorded instructional videos", "core", "\U0001f3a5"),
        FeatureMetadata(
            FEATURES.AI_HINTS, "AI Hints",
            "AI-generated contextual hints based on specific mistakes", "ai", "\U0001f916",
            preview_available=True,
        ),
        FeatureMetadata(
            FEATURES.AI_EXPLANATIONS, "AI Explanations",
            "AI explains why an answer is wrong and how to fix it", "ai", "\U0001f9e0",
            preview_available=True,
        ),
        FeatureMetadata(
            FEATURES.VOICE_ASSISTANT, "Voice Assistant",
            "Voice-based help for reading problems and hints", "ai", "\U0001f3a4",
        ),
        FeatureMetadata(
            FEATURES.PERSONALIZED_PATH, "Personalized Learning",
            "AI adjusts difficulty based on performance", "ai", "\U0001f3af",
        ),
        FeatureMetadata(
            FEATURES.AI_PROBLEM_GENERATOR, "AI Problem Generator", "Generate custom practice problems", "ai", "✨",
        ),
        FeatureMetadata(
            FEATURES.LIVE_TUTOR, "Live Tutor", "Access to human tutors via chat or video", "premium", "\U0001f9d1‍\U0001f3eb",
        ),
        FeatureMetadata(
            FEATURES.PRIORITY_SUPPORT, "Priority Support", "Fast response times for support requests", "support", "⚡",
        ),
        FeatureMetadata(
            FEATURES.CUSTOM_CURRICULUM, "Custom Curriculum",
            "Create custom problem sets and learning paths", "premium", "\U0001f4dd",
        ),
        FeatureMetadata(
            FEATURES.ADVANCED_ANALYTICS, "Advanced Analytics",
            "Detailed performance analytics and reports", "premium", "\U0001f4c8",
        ),
        FeatureMetadata(FEATURES.OFFLINE_MODE, "Offline Mode", "Download content for offline learning", "premium", "\U0001f4f1"),
    )
}


def default_required_tier(feature_id: str) -> SubscriptionTier | None:
    return DEFAULT_FEATURE_TIERS.get(feature_id)


def features_by_tier(tier: SubscriptionTier) -> list[str]:
    """Features a tier grants according to the hardcoded map."""
    return [
        feature_id
        for feature_id, required in DEFAULT_FEATURE_TIERS.items()
        if tier_includes_feature(tier, required)
    ]


def feature_metadata_by_category(category: str) -> list[FeatureMetadata]:
    return [m for m in FEATURE_METADATA.values() if m.category == category]
