"""Pydantic response models for badge endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class BadgeResponse(BaseModel):
    name: str
    display_name: str
    description: str | None = None
    icon: str | None = None
    badge_type: str
    level_range_start: str | None = None
    level_range_end: str | None = None
    milestone_type: str | None = None
    milestone_value: int | None = None
    color: str
    tier: int

    @classmethod
    def from_row(cls, badge) -> BadgeResponse:
        return cls(
            name=badge.name,
            display_name=badge.display_name,
            description=badge.description,
            icon=badge.icon,
            badge_type=badge.badge_type,
            level_range_start=badge.level_range_start,
            level_range_end=badge.level_range_end,
            milestone_type=badge.milestone_type,
            milestone_value=badge.milestone_value,
            color=badge.color,
            tier=badge.tier,
        )


class AllBadgesResponse(BaseModel):
    badges: list[BadgeResponse]


class EarnedBadgeResponse(BaseModel):
    badge: BadgeResponse
    earned_at: datetime | None = None


class ChildBadgesResponse(BaseModel):
    child_id: int
    level_color: str
    highest_color: str | None = None
    earned: list[EarnedBadgeResponse]
    total_available: int
    total_earned: int


class BadgeAwardResponse(BaseModel):
    child_id: int
    awarded: list[EarnedBadgeResponse]
