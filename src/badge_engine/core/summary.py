"""
User level and aggregate badge summary.
"""

from datetime import datetime
from typing import Final, Iterable

from .config import BADGE_TIERS
from .models import BadgeProgress, BadgeSummary, UserLevel

# Levels in ascending order of min_points
USER_LEVELS: Final[tuple[UserLevel, ...]] = (
    UserLevel("novice", "Novice", 0),
    UserLevel("apprentice", "Apprentice", 50),
    UserLevel("athlete", "Athlete", 150),
    UserLevel("warrior", "Warrior", 400),
    UserLevel("champion", "Champion", 800),
    UserLevel("master", "Master", 1500),
    UserLevel("legend", "Legend", 3000),
    UserLevel("titan", "Titan", 5000),
)

RECENT_UNLOCKS_LIMIT: Final[int] = 3


def level_for_points(points: int) -> tuple[UserLevel, UserLevel | None]:
    """
    Current and next user level for a point total.

    Returns:
        (current level, next level or None at the top)
    """
    current = USER_LEVELS[0]
    for level in USER_LEVELS:
        if points >= level.min_points:
            current = level
    index = USER_LEVELS.index(current)
    next_level = USER_LEVELS[index + 1] if index + 1 < len(USER_LEVELS) else None
    return current, next_level


def _unlock_time(progress: BadgeProgress) -> datetime:
    try:
        moment = datetime.fromisoformat(progress.unlocked_at or "")
    except ValueError:
        return datetime.min
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def summarize_badges(progress: Iterable[BadgeProgress]) -> BadgeSummary:
    """
    Aggregate a progress list into level, points and per-group counts.

    Args:
        progress: Output of evaluate_all_badges

    Returns:
        BadgeSummary
    """
    records = list(progress)
    unlocked = [p for p in records if p.is_unlocked]
    points = sum(p.badge.points for p in unlocked)
    level, next_level = level_for_points(points)

    by_tier = {tier: 0 for tier in BADGE_TIERS}
    by_category: dict[str, int] = {}
    for p in unlocked:
        by_tier[p.badge.tier] += 1
        by_category[p.badge.category] = by_category.get(p.badge.category, 0) + 1

    recent = sorted(
        (p for p in unlocked if p.unlocked_at),
        key=_unlock_time,
        reverse=True,
    )[:RECENT_UNLOCKS_LIMIT]

    # Closest to unlock, ignoring untouched badges
    locked = [p for p in records if not p.is_unlocked and p.progress_percent > 0]
    next_badge = max(locked, key=lambda p: p.progress_percent, default=None)

    return BadgeSummary(
        total_badges=len(unlocked),
        total_points=points,
        level=level,
        next_level=next_level,
        points_to_next_level=next_level.min_points - points if next_level else 0,
        available_badges=len(records),
        badges_by_tier=by_tier,
        badges_by_category=by_category,
        recent_unlocks=recent,
        next_badge=next_badge,
    )
