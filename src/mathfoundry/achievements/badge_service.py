"""Badge award service with duplicate prevention."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mathfoundry.achievements.rules import ChildStats, evaluate_badges
from mathfoundry.db.models import BadgeDefinition, Child, ChildBadge

logger = logging.getLogger(__name__)


def stats_for_child(child: Child) -> ChildStats:
    return ChildStats(
        current_level=child.current_level,
        total_problems=child.total_problems,
        total_correct=child.total_correct,
        streak=child.streak,
    )


async def list_badges(db: AsyncSession) -> list[BadgeDefinition]:
    result = await db.execute(
        select(BadgeDefinition).order_by(BadgeDefinition.badge_type, BadgeDefinition.tier, BadgeDefinition.id)
    )
    return list(result.scalars().all())


async def get_child_badges(db: AsyncSession, child_id: int) -> list[tuple[BadgeDefinition, datetime | None]]:
    """Badges a child holds, most recent first."""
    result = await db.execute(
        select(BadgeDefinition, ChildBadge.earned_at)
        .join(ChildBadge, ChildBadge.badge_id == BadgeDefinition.id)
        .where(ChildBadge.child_id == child_id)
        .order_by(ChildBadge.earned_at.desc(), ChildBadge.id.desc())
    )
    return [(row[0], row[1]) for row in result.all()]


async def award_badges(db: AsyncSession, child: Child) -> list[tuple[BadgeDefinition, datetime]]:
    """Evaluate a child's stats and persist newly earned badges.

    Returns the badges awarded by this call. A badge already held (including
    one awarded concurrently) is skipped.
    """
    child_id = child.id
    definitions = await list_badges(db)
    held = await db.execute(select(ChildBadge.badge_id).where(ChildBadge.child_id == child_id))
    earned = evaluate_badges(stats_for_child(child), definitions, held.scalars().all())

    # Detach so a rollback below does not expire the definitions we return
    for badge in earned:
        db.expunge(badge)

    awarded: list[tuple[BadgeDefinition, datetime]] = []
    for badge in earned:
        now = datetime.now(timezone.utc)
        db.add(ChildBadge(child_id=child_id, badge_id=badge.id, earned_at=now))
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            continue  # Race condition: badge already awarded
        logger.info("Badge awarded: %s to child %s", badge.display_name, child_id)
        awarded.append((badge, now))

    return awarded
