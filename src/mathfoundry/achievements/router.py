"""Badge API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from mathfoundry.achievements import badge_service
from mathfoundry.achievements.rules import highest_badge_color, level_badge_color
from mathfoundry.achievements.schemas import (
    AllBadgesResponse,
    BadgeAwardResponse,
    BadgeResponse,
    ChildBadgesResponse,
    EarnedBadgeResponse,
)
from mathfoundry.curriculum.service import get_child
from mathfoundry.database import get_session

router = APIRouter(prefix="/api/v1", tags=["Achievements"])


@router.get("/badges", response_model=AllBadgesResponse)
async def list_badges(db: AsyncSession = Depends(get_session)):
    """All badge definitions, grouped by type then tier."""
    badges = await badge_service.list_badges(db)
    return AllBadgesResponse(badges=[BadgeResponse.from_row(b) for b in badges])


@router.get("/children/{child_id}/badges", response_model=ChildBadgesResponse)
async def child_badges(child_id: int, db: AsyncSession = Depends(get_session)):
    child = await get_child(db, child_id)
    if child is None:
        raise HTTPException(status_code=404, detail="Child not found")

    held = await badge_service.get_child_badges(db, child_id)
    available = await badge_service.list_badges(db)
    return ChildBadgesResponse(
        child_id=child_id,
        level_color=level_badge_color(child.current_level),
        highest_color=highest_badge_color(badge for badge, _ in held),
        earned=[
            EarnedBadgeResponse(badge=BadgeResponse.from_row(badge), earned_at=earned_at)
            for badge, earned_at in held
        ],
        total_available=len(available),
        total_earned=len(held),
    )


@router.post("/children/{child_id}/badges/evaluate", response_model=BadgeAwardResponse)
async def evaluate_child_badges(child_id: int, db: AsyncSession = Depends(get_session)):
    """Award every badge the child's current stats qualify for."""
    child = await get_child(db, child_id)
    if child is None:
        raise HTTPException(status_code=404, detail="Child not found")

    awarded = await badge_service.award_badges(db, child)
    return BadgeAwardResponse(
        child_id=child_id,
        awarded=[
            EarnedBadgeResponse(badge=BadgeResponse.from_row(badge), earned_at=earned_at)
            for badge, earned_at in awarded
        ],
    )
