"""Unlock deltas on level advancement, used to drive unlock celebrations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from mathfoundry.curriculum.categories import VIDEO_CATEGORIES, VideoCategory
from mathfoundry.curriculum.unlock import UNLOCK_BUFFER, unlocked_categories, unlocked_levels


@dataclass(frozen=True)
class UnlockDelta:
    old_level: str
    new_level: str
    newly_unlocked_levels: tuple[str, ...]
    newly_unlocked_categories: tuple[VideoCategory, ...]

    @property
    def has_new_unlocks(self) -> bool:
        return bool(self.newly_unlocked_levels)


def newly_unlocked_levels(old_level: str, new_level: str, *, buffer: int = UNLOCK_BUFFER) -> list[str]:
    """Levels unlocked at ``new_level`` but not at ``old_level``, in progression order."""
    before = set(unlocked_levels(old_level, buffer=buffer))
    return [level for level in unlocked_levels(new_level, buffer=buffer) if level not in before]


def newly_unlocked_categories(
    old_level: str,
    new_level: str,
    categories: Iterable[VideoCategory] = VIDEO_CATEGORIES,
    *,
    buffer: int = UNLOCK_BUFFER,
) -> list[VideoCategory]:
    categories = tuple(categories)
    before = {c.id for c in unlocked_categories(old_level, categories, buffer=buffer)}
    return [c for c in unlocked_categories(new_level, categories, buffer=buffer) if c.id not in before]


def has_new_unlocks(old_level: str, new_level: str, *, buffer: int = UNLOCK_BUFFER) -> bool:
    return len(newly_unlocked_levels(old_level, new_level, buffer=buffer)) > 0


def on_level_advance(
    old_level: str,
    new_level: str,
    categories: Iterable[VideoCategory] = VIDEO_CATEGORIES,
    *,
    buffer: int = UNLOCK_BUFFER,
) -> UnlockDelta:
    """Everything a level change unlocks, for the celebration UI."""
    return UnlockDelta(
        old_level=old_level,
        new_level=new_level,
        newly_unlocked_levels=tuple(newly_unlocked_levels(old_level, new_level, buffer=buffer)),
        newly_unlocked_categories=tuple(
            newly_unlocked_categories(old_level, new_level, categories, buffer=buffer)
        ),
    )
