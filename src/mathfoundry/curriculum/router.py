"""Curriculum and unlock API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mathfoundry.achievements.rules import level_badge_color
from mathfoundry.config import get_settings
from mathfoundry.curriculum.categories import VIDEO_CATEGORIES
from mathfoundry.curriculum.delta import on_level_advance
from mathfoundry.curriculum.levels import ELECTIVE_LEVELS, LEVEL_GRADES, LEVEL_ORDER, level_index
from mathfoundry.curriculum.schemas import (
    AllCategoriesResponse,
    AllLevelsResponse,
    CategoryResponse,
    CategoryStatus,
    LevelEntry,
    UnlockDeltaResponse,
    UnlockStateResponse,
    VideoUnlockResponse,
)
from mathfoundry.curriculum.service import get_child, get_parent_level, resolve_unlock_state
from mathfoundry.curriculum.unlock import (
    category_unlock_requirement,
    category_unlock_stats,
    is_almost_unlocked,
    is_category_almost_unlocked,
    is_video_unlocked,
    levels_until_unlock,
    unlock_message,
    unlock_requirement,
)
from mathfoundry.database import get_session

router = APIRouter(prefix="/api/v1", tags=["Curriculum"])


def _unlock_state_response(child_level: str) -> UnlockStateResponse:
    buffer = get_settings().unlock_buffer
    state = resolve_unlock_state(child_level, buffer=buffer)
    unlocked_ids = {c.id for c in state.unlocked_categories}

    statuses = []
    for category in VIDEO_CATEGORIES:
        stats = category_unlock_stats(category.levels, child_level, buffer=buffer)
        statuses.append(CategoryStatus(
            id=category.id,
            label=category.label,
            unlocked=category.id in unlocked_ids,
            almost_unlocked=is_category_almost_unlocked(category, child_level, buffer=buffer),
            unlock_requirement=category_unlock_requirement(category, child_level, buffer=buffer),
            unlocked_levels=stats["unlocked"],
            total_levels=stats["total"],
        ))

    return UnlockStateResponse(
        child_level=child_level,
        unlocked_levels=list(state.unlocked_levels),
        unlocked_categories=[c.id for c in state.unlocked_categories],
        locked_categories=[c.id for c in state.locked_categories],
        categories=statuses,
    )


# ── Static configuration ──


@router.get("/curriculum/levels", response_model=AllLevelsResponse)
async def list_levels():
    """Main progression in order, plus electives."""
    def entry(level: str) -> LevelEntry:
        return LevelEntry(
            level=level,
            index=level_index(level),
            grade=LEVEL_GRADES.get(level),
            badge_color=level_badge_color(level),
        )

    return AllLevelsResponse(
        levels=[entry(level) for level in LEVEL_ORDER],
        electives=[entry(level) for level in ELECTIVE_LEVELS],
        unlock_buffer=get_settings().unlock_buffer,
    )


@router.get("/curriculum/categories", response_model=AllCategoriesResponse)
async def list_categories():
    return AllCategoriesResponse(
        categories=[CategoryResponse.from_category(c) for c in VIDEO_CATEGORIES],
    )


# ── Unlock queries ──


@router.get("/unlocks/advance", response_model=UnlockDeltaResponse)
async def level_advance(
    old_level: str = Query(..., max_length=4),
    new_level: str = Query(..., max_length=4),
):
    """What advancing from ``old_level`` to ``new_level`` unlocks."""
    delta = on_level_advance(old_level, new_level, buffer=get_settings().unlock_buffer)
    return UnlockDeltaResponse(
        old_level=old_level,
        new_level=new_level,
        has_new_unlocks=delta.has_new_unlocks,
        newly_unlocked_levels=list(delta.newly_unlocked_levels),
        newly_unlocked_categories=[
            CategoryResponse.from_category(c) for c in delta.newly_unlocked_categories
        ],
    )


@router.get("/unlocks/{level}", response_model=UnlockStateResponse)
async def unlocks_for_level(level: str):
    return _unlock_state_response(level)


@router.get("/unlocks/{level}/videos/{video_level}", response_model=VideoUnlockResponse)
async def video_unlock_status(level: str, video_level: str):
    buffer = get_settings().unlock_buffer
    return VideoUnlockResponse(
        video_level=video_level,
        child_level=level,
        unlocked=is_video_unlocked(video_level, level, buffer=buffer),
        almost_unlocked=is_almost_unlocked(video_level, level, buffer=buffer),
        levels_until_unlock=levels_until_unlock(video_level, level, buffer=buffer),
        unlock_requirement=unlock_requirement(video_level, level, buffer=buffer),
        message=unlock_message(video_level, level, buffer=buffer),
    )


@router.get("/children/{child_id}/unlocks", response_model=UnlockStateResponse)
async def child_unlocks(child_id: int, db: AsyncSession = Depends(get_session)):
    child = await get_child(db, child_id)
    if child is None:
        raise HTTPException(status_code=404, detail="Child not found")
    return _unlock_state_response(child.current_level)


@router.get("/parents/{user_id}/unlocks", response_model=UnlockStateResponse)
async def parent_unlocks(user_id: int, db: AsyncSession = Depends(get_session)):
    """Parent view: unlocks follow the most advanced child."""
    level = await get_parent_level(db, user_id)
    if level is None:
        raise HTTPException(status_code=404, detail="User not found")
    return _unlock_state_response(level)
