"""Progressive unlock policy for levels, videos and video categories.

A child sees everything up to their current level plus ``UNLOCK_BUFFER``
levels ahead. Unlocking is always a prefix of the main progression, so a
higher level can never be unlocked without every level below it.

Nothing here raises for unknown or elective levels: distance queries return
the ``NOT_IN_PROGRESSION`` sentinel and set queries fall back to the level
itself.
"""

from __future__ import annotations

from collections.abc import Iterable

from mathfoundry.curriculum.categories import VIDEO_CATEGORIES, VideoCategory
from mathfoundry.curriculum.levels import (
    LEVEL_ORDER,
    friendly_level_name,
    level_index,
)

UNLOCK_BUFFER = 1
NOT_IN_PROGRESSION = 999


# --- Levels & videos ---


def unlocked_levels(child_level: str, *, buffer: int = UNLOCK_BUFFER) -> list[str]:
    """Levels visible to a child at ``child_level``, in progression order."""
    if buffer < 0:
        msg = f"buffer must be >= 0, got {buffer}"
        raise ValueError(msg)
    current = level_index(child_level)
    if current == -1:
        # Electives unlock only themselves
        return [child_level]
    end = min(current + buffer + 1, len(LEVEL_ORDER))
    return list(LEVEL_ORDER[:end])


def is_level_unlocked(target: str, child_level: str, *, buffer: int = UNLOCK_BUFFER) -> bool:
    return target in unlocked_levels(child_level, buffer=buffer)


def is_video_unlocked(video_level: str, child_level: str, *, buffer: int = UNLOCK_BUFFER) -> bool:
    return is_level_unlocked(video_level, child_level, buffer=buffer)


def unlock_requirement(target: str, child_level: str, *, buffer: int = UNLOCK_BUFFER) -> str | None:
    """Level the child must reach to unlock ``target``; None if already unlocked."""
    if is_level_unlocked(target, child_level, buffer=buffer):
        return None
    required = max(0, level_index(target) - buffer)
    return LEVEL_ORDER[required]


def is_almost_unlocked(target: str, child_level: str, *, buffer: int = UNLOCK_BUFFER) -> bool:
    """True when one more level advancement brings ``target`` into range."""
    if is_level_unlocked(target, child_level, buffer=buffer):
        return False
    child_idx = level_index(child_level)
    target_idx = level_index(target)
    if child_idx == -1 or target_idx == -1:
        return False
    return target_idx - child_idx - buffer == 1


def levels_until_unlock(target: str, child_level: str, *, buffer: int = UNLOCK_BUFFER) -> int:
    """Advancements still needed before ``target`` unlocks (0 if unlocked)."""
    if is_level_unlocked(target, child_level, buffer=buffer):
        return 0
    child_idx = level_index(child_level)
    target_idx = level_index(target)
    if child_idx == -1 or target_idx == -1:
        return NOT_IN_PROGRESSION
    return max(0, target_idx - child_idx - buffer)


def unlock_message(video_level: str, child_level: str, *, buffer: int = UNLOCK_BUFFER) -> str:
    requirement = unlock_requirement(video_level, child_level, buffer=buffer)
    if requirement is None:
        return "This video is unlocked!"
    if is_almost_unlocked(video_level, child_level, buffer=buffer):
        return f"Almost there! Reach {friendly_level_name(requirement)} to unlock!"
    return f"Keep practicing to reach {friendly_level_name(requirement)} and unlock it!"


# --- Parent view ---


def highest_child_level(levels: Iterable[str]) -> str:
    """Most advanced level among a parent's children.

    Unknown and elective levels never win; with no rankable level the lowest
    level is returned. The first maximum found wins.
    """
    highest = 0
    for level in levels:
        idx = level_index(level)
        if idx > highest:
            highest = idx
    return LEVEL_ORDER[highest]


# --- Categories ---


def is_category_unlocked(category: VideoCategory, child_level: str, *, buffer: int = UNLOCK_BUFFER) -> bool:
    """A category opens as soon as any one of its levels is reachable."""
    unlocked = set(unlocked_levels(child_level, buffer=buffer))
    return any(level in unlocked for level in category.levels)


def is_category_almost_unlocked(
    category: VideoCategory, child_level: str, *, buffer: int = UNLOCK_BUFFER
) -> bool:
    if is_category_unlocked(category, child_level, buffer=buffer):
        return False
    return is_almost_unlocked(category.anchor_level, child_level, buffer=buffer)


def category_unlock_requirement(
    category: VideoCategory, child_level: str, *, buffer: int = UNLOCK_BUFFER
) -> str | None:
    if is_category_unlocked(category, child_level, buffer=buffer):
        return None
    return unlock_requirement(category.anchor_level, child_level, buffer=buffer)


def unlocked_categories(
    child_level: str,
    categories: Iterable[VideoCategory] = VIDEO_CATEGORIES,
    *,
    buffer: int = UNLOCK_BUFFER,
) -> list[VideoCategory]:
    return [c for c in categories if is_category_unlocked(c, child_level, buffer=buffer)]


def locked_categories(
    child_level: str,
    categories: Iterable[VideoCategory] = VIDEO_CATEGORIES,
    *,
    buffer: int = UNLOCK_BUFFER,
) -> list[VideoCategory]:
    return [c for c in categories if not is_category_unlocked(c, child_level, buffer=buffer)]


def category_unlock_stats(
    category_levels: Iterable[str], child_level: str, *, buffer: int = UNLOCK_BUFFER
) -> dict[str, int]:
    """Count of unlocked vs total levels within a category."""
    unlocked = set(unlocked_levels(child_level, buffer=buffer))
    levels = list(category_levels)
    return {
        "unlocked": sum(1 for level in levels if level in unlocked),
        "total": len(levels),
    }
