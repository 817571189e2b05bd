"""ORM models for children, subscriptions, feature policy and badges.

The feature policy tables mirror the admin-managed schema: a master
``features`` list, the enabled ``subscription_tiers`` and the
``feature_tier_mappings`` join carrying the per-tier switch.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mathfoundry.db.base import Base


# ---------------------------------------------------------------------------
# Users & children
# ---------------------------------------------------------------------------


class User(Base):
    """Parent account. Owns children and a subscription."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=True
    )

    children: Mapped[list[Child]] = relationship("Child", back_populates="parent")
    subscription: Mapped[UserSubscription | None] = relationship(
        "UserSubscription", back_populates="user", uselist=False
    )


class Child(Base):
    """A learner. ``current_level`` is read by the unlock engine."""

    __tablename__ = "children"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    current_level: Mapped[str] = mapped_column(String(4), nullable=False, server_default="7A")
    total_problems: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    total_correct: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    streak: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=True
    )

    parent: Mapped[User] = relationship("User", back_populates="children")


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------


class UserSubscription(Base):
    """Subscription status per user.

    status: free_period | grace_period | active | cancelled | expired
    """

    __tablename__ = "user_subscriptions"

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default="free_period")
    tier: Mapped[str | None] = mapped_column(String(32), ForeignKey("subscription_tiers.id"), nullable=True)
    free_period_ends_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    grace_period_ends_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    current_period_ends_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped[User] = relationship("User", back_populates="subscription")


class SubscriptionTierRow(Base):
    __tablename__ = "subscription_tiers"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="1")
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")


# ---------------------------------------------------------------------------
# Feature management
# ---------------------------------------------------------------------------


class Feature(Base):
    """Master list of gated features. ``is_active`` is the global switch."""

    __tablename__ = "features"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(16), nullable=False, server_default="general")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="1")
    preview_available: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="0")
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    icon: Mapped[str | None] = mapped_column(String(16), nullable=True)


class FeatureTierMapping(Base):
    """Per-tier switch for a feature — UNIQUE(feature_id, tier_id)."""

    __tablename__ = "feature_tier_mappings"
    __table_args__ = (
        UniqueConstraint("feature_id", "tier_id", name="feature_tier_mappings_feature_id_tier_id_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    feature_id: Mapped[str] = mapped_column(String(64), ForeignKey("features.id", ondelete="CASCADE"), nullable=False)
    tier_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("subscription_tiers.id", ondelete="CASCADE"), nullable=False
    )
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="1")
    usage_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    limit_period: Mapped[str | None] = mapped_column(String(16), nullable=True)


# ---------------------------------------------------------------------------
# Badges
# ---------------------------------------------------------------------------


class BadgeDefinition(Base):
    """Level and milestone badge definitions, seeded on startup."""

    __tablename__ = "badges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str] = mapped_column(String(16), nullable=False)
    badge_type: Mapped[str] = mapped_column(String(16), nullable=False)
    level_range_start: Mapped[str | None] = mapped_column(String(4), nullable=True)
    level_range_end: Mapped[str | None] = mapped_column(String(4), nullable=True)
    milestone_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    milestone_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    color: Mapped[str] = mapped_column(String(16), nullable=False)
    tier: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")


class ChildBadge(Base):
    """Badges earned by children — UNIQUE(child_id, badge_id) prevents duplicates."""

    __tablename__ = "child_badges"
    __table_args__ = (
        UniqueConstraint("child_id", "badge_id", name="child_badges_child_id_badge_id_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    child_id: Mapped[int] = mapped_column(Integer, ForeignKey("children.id", ondelete="CASCADE"), nullable=False)
    badge_id: Mapped[int] = mapped_column(Integer, ForeignKey("badges.id", ondelete="CASCADE"), nullable=False)
    earned_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=True
    )

    badge: Mapped[BadgeDefinition] = relationship("BadgeDefinition")
