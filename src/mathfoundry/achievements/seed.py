"""Badge seed data: level bands plus problem, streak and accuracy milestones."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mathfoundry.db.models import BadgeDefinition

logger = logging.getLogger(__name__)


def _level(name, display_name, description, icon, start, end, color, tier) -> dict:
    return {
        "name": name,
        "display_name": display_name,
        "description": description,
        "icon": icon,
        "badge_type": "level",
        "level_range_start": start,
        "level_range_end": end,
        "color": color,
        "tier": tier,
    }


def _milestone(name, display_name, description, icon, kind, value, color, tier) -> dict:
    return {
        "name": name,
        "display_name": display_name,
        "description": description,
        "icon": icon,
        "badge_type": "milestone",
        "milestone_type": kind,
        "milestone_value": value,
        "color": color,
        "tier": tier,
    }


BADGE_SEED_DATA: list[dict] = [
    # Level bands
    _level("level_bronze", "Bronze Scholar", "Reached levels 7A-5A", "\U0001f949", "7A", "5A", "bronze", 1),
    _level("level_silver", "Silver Scholar", "Reached levels 4A-2A", "\U0001f948", "4A", "2A", "silver", 2),
    _level("level_gold", "Gold Scholar", "Reached levels A-C", "\U0001f947", "A", "C", "gold", 3),
    _level("level_platinum", "Platinum Scholar", "Reached levels D-F", "\U0001f3c6", "D", "F", "platinum", 4),
    _level("level_diamond", "Diamond Scholar", "Reached level G and beyond", "\U0001f48e", "G", "O", "diamond", 5),
    # Problems solved
    _milestone("problems_100", "Problem Solver", "Solved 100 problems", "\U0001f4af", "problems", 100, "bronze", 1),
    _milestone("problems_500", "Math Warrior", "Solved 500 problems", "⚔️", "problems", 500, "silver", 2),
    _milestone("problems_1000", "Math Master", "Solved 1000 problems", "\U0001f9d9", "problems", 1000, "gold", 3),
    _milestone("problems_5000", "Math Legend", "Solved 5000 problems", "\U0001f451", "problems", 5000, "platinum", 4),
    # Streaks
    _milestone("streak_7", "Week Warrior", "7-day practice streak", "\U0001f525", "streak", 7, "bronze", 1),
    _milestone("streak_14", "Fortnight Fighter", "14-day practice streak", "⚡", "streak", 14, "silver", 2),
    _milestone("streak_30", "Month Master", "30-day practice streak", "\U0001f31f", "streak", 30, "gold", 3),
    _milestone("streak_100", "Century Champion", "100-day practice streak", "\U0001f3c5", "streak", 100, "diamond", 4),
    # Accuracy
    _milestone(
        "accuracy_80", "Focused Mind", "80% accuracy (min 50 problems)", "\U0001f3af", "accuracy", 80, "bronze", 1,
    ),
    _milestone(
        "accuracy_90", "Sharp Mind", "90% accuracy (min 100 problems)", "\U0001f9e0", "accuracy", 90, "silver", 2,
    ),
    _milestone(
        "accuracy_95", "Brilliant Mind", "95% accuracy (min 200 problems)", "✨", "accuracy", 95, "gold", 3,
    ),
]


async def seed_badges(db: AsyncSession) -> int:
    """Insert badge definitions that do not exist yet. Returns number inserted."""
    existing = set((await db.execute(select(BadgeDefinition.name))).scalars())
    seeded = 0
    for badge_data in BADGE_SEED_DATA:
        if badge_data["name"] in existing:
            continue
        db.add(BadgeDefinition(**badge_data))
        seeded += 1

    await db.commit()
    logger.info("Seeded %d badge definitions", seeded)
    return seeded
