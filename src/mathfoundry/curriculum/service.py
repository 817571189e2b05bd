"""Unlock state queries for the video library and dashboards."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mathfoundry.curriculum.categories import VIDEO_CATEGORIES, VideoCategory
from mathfoundry.curriculum.unlock import (
    UNLOCK_BUFFER,
    highest_child_level,
    locked_categories,
    unlocked_categories,
    unlocked_levels,
)
from mathfoundry.db.models import Child, User


@dataclass(frozen=True)
class UnlockState:
    child_level: str
    unlocked_levels: tuple[str, ...]
    unlocked_categories: tuple[VideoCategory, ...]
    locked_categories: tuple[VideoCategory, ...]


def resolve_unlock_state(
    child_level: str,
    categories: Iterable[VideoCategory] = VIDEO_CATEGORIES,
    *,
    buffer: int = UNLOCK_BUFFER,
) -> UnlockState:
    categories = tuple(categories)
    return UnlockState(
        child_level=child_level,
        unlocked_levels=tuple(unlocked_levels(child_level, buffer=buffer)),
        unlocked_categories=tuple(unlocked_categories(child_level, categories, buffer=buffer)),
        locked_categories=tuple(locked_categories(child_level, categories, buffer=buffer)),
    )


async def get_child(db: AsyncSession, child_id: int) -> Child | None:
    return await db.get(Child, child_id)


async def get_parent_level(db: AsyncSession, user_id: int) -> str | None:
    """Level used for a parent's view: the most advanced child's level.

    None if the user does not exist.
    """
    if await db.get(User, user_id) is None:
        return None
    result = await db.execute(
        select(Child.current_level).where(Child.user_id == user_id).order_by(Child.id)
    )
    return highest_child_level(result.scalars().all())
