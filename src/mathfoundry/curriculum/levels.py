"""Kumon level ordering table.

The main progression is a fixed total order. Electives (XV, XM, XP, XS) are
valid levels but sit outside it and cannot be compared by position.
"""

from __future__ import annotations

LEVEL_ORDER: tuple[str, ...] = (
    "7A", "6A", "5A", "4A", "3A", "2A",
    "A", "B", "C", "D", "E", "F",
    "G", "H", "I", "J", "K",
    "L", "M", "N", "O",
)

ELECTIVE_LEVELS: tuple[str, ...] = ("XV", "XM", "XP", "XS")

ALL_LEVELS: tuple[str, ...] = LEVEL_ORDER + ELECTIVE_LEVELS

LEVEL_GRADES: dict[str, str] = {
    "7A": "Pre-K (3-4)", "6A": "Pre-K (4-5)", "5A": "Pre-K/K (4-5)", "4A": "K (5-6)",
    "3A": "K-1 (5-6)", "2A": "1 (6-7)", "A": "1-2 (6-7)", "B": "2 (7-8)",
    "C": "3 (8-9)", "D": "4 (9-10)", "E": "5 (10-11)", "F": "6 (11-12)",
    "G": "7 (12-13)", "H": "8 (13-14)", "I": "9 (14-15)",
    "J": "10 (15-16)", "K": "10-11 (15-17)",
    "L": "11 (16-17)", "M": "11-12 (16-18)", "N": "12 (17-18)", "O": "12+ (17-18+)",
    "XV": "Elective", "XM": "Elective", "XP": "Elective", "XS": "Elective",
}

_INDEX: dict[str, int] = {level: i for i, level in enumerate(LEVEL_ORDER)}


def validate_level_order(order: tuple[str, ...] = LEVEL_ORDER) -> None:
    """Raise ValueError if the ordering table is malformed."""
    if not order:
        msg = "Level order must not be empty"
        raise ValueError(msg)
    if len(set(order)) != len(order):
        msg = "Level order contains duplicate levels"
        raise ValueError(msg)
    overlap = set(order) & set(ELECTIVE_LEVELS)
    if overlap:
        msg = f"Electives cannot be part of the main progression: {sorted(overlap)}"
        raise ValueError(msg)


validate_level_order()


def level_index(level: str) -> int:
    """Position of ``level`` in the main progression, or -1."""
    return _INDEX.get(level, -1)


def is_main_progression(level: str) -> bool:
    return level in _INDEX


def lowest_level() -> str:
    return LEVEL_ORDER[0]


def friendly_level_name(level: str) -> str:
    """``"4A"`` -> ``"Level 4A"``."""
    return f"Level {level}"
