"""Pure evaluation of child stats against badge definitions.

Level badges are earned once a child's level reaches the badge's starting
level. Milestone badges track problems solved, practice streak and accuracy.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from mathfoundry.curriculum.levels import level_index

BADGE_COLORS: tuple[str, ...] = ("bronze", "silver", "gold", "platinum", "diamond")


@dataclass(frozen=True)
class ChildStats:
    current_level: str
    total_problems: int = 0
    total_correct: int = 0
    streak: int = 0


def level_badge_color(level: str) -> str:
    """Badge colour band for a level; unknown levels are bronze."""
    index = level_index(level)
    if index <= 2:
        return "bronze"  # 7A-5A, or not in the main progression
    if index <= 5:
        return "silver"  # 4A-2A
    if index <= 8:
        return "gold"  # A-C
    if index <= 11:
        return "platinum"  # D-F
    return "diamond"  # G+


def accuracy_min_problems(target: int) -> int:
    """Problems a child must have solved before an accuracy badge can count."""
    if target >= 95:
        return 200
    if target >= 90:
        return 100
    return 50


def _level_rule(badge: Any, stats: ChildStats) -> bool:
    current = level_index(stats.current_level)
    start = level_index(badge.level_range_start or "")
    return current >= 0 and start >= 0 and current >= start


def _problems_rule(badge: Any, stats: ChildStats) -> bool:
    return stats.total_problems >= (badge.milestone_value or 0)


def _streak_rule(badge: Any, stats: ChildStats) -> bool:
    return stats.streak >= (badge.milestone_value or 0)


def _accuracy_rule(badge: Any, stats: ChildStats) -> bool:
    target = badge.milestone_value or 0
    if stats.total_problems < accuracy_min_problems(target):
        return False
    accuracy = stats.total_correct / stats.total_problems * 100
    return accuracy >= target


BadgeRule = Callable[[Any, ChildStats], bool]

# (badge_type, milestone_type) -> rule
BADGE_RULES: dict[tuple[str, str | None], BadgeRule] = {
    ("level", None): _level_rule,
    ("milestone", "problems"): _problems_rule,
    ("milestone", "streak"): _streak_rule,
    ("milestone", "accuracy"): _accuracy_rule,
}


def is_badge_earned(badge: Any, stats: ChildStats) -> bool:
    """Check one badge definition (ORM row or anything with the same attributes)."""
    milestone = badge.milestone_type if badge.badge_type == "milestone" else None
    rule = BADGE_RULES.get((badge.badge_type, milestone))
    if rule is None:
        return False
    return rule(badge, stats)


def evaluate_badges(
    stats: ChildStats,
    definitions: Iterable[Any],
    earned_ids: Iterable[int] = (),
) -> list[Any]:
    """Definitions newly earned by ``stats``, skipping ones already held."""
    already = set(earned_ids)
    return [b for b in definitions if b.id not in already and is_badge_earned(b, stats)]


def highest_badge_color(badges: Iterable[Any]) -> str | None:
    """Colour of the highest-tier badge (first wins on ties); None without badges."""
    best = None
    for badge in badges:
        if best is None or badge.tier > best.tier:
            best = badge
    return best.color if best is not None else None
