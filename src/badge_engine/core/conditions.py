"""
Condition evaluation.

Each condition type maps to one extractor that reads the stats bundle and
returns the badge's current numeric progress. Evaluation never raises:
unknown condition types and missing or unrecognised condition_extra values
evaluate to 0.
"""

from enum import Enum
from typing import AbstractSet, Callable

from .config import BOOLEAN_CONDITIONS, DEFERRED_CONDITIONS, META_CONDITION
from .models import Badge
from .muscles import resolve_muscle_value
from .stats import BadgeStats


class ConditionType(str, Enum):
    """Closed vocabulary of badge condition types."""

    # Volume / consistency
    VOLUME_TONS = "volume_tons"
    SESSIONS_COUNT = "sessions_count"
    STREAK_DAYS = "streak_days"
    WEEK_GOAL_HIT = "week_goal_hit"
    WEEK_STREAK = "week_streak"
    WEEKEND_STREAK = "weekend_streak"

    # Strength
    PRS_COUNT = "prs_count"
    PR_INCREASE_PCT = "pr_increase_pct"

    # Muscles
    MUSCLE_VOLUME = "muscle_volume"
    MUSCLE_SETS = "muscle_sets"
    ALL_MUSCLES_TRAINED = "all_muscles_trained"
    BALANCED_TRAINING = "balanced_training"

    # Equipment / variety
    EQUIPMENT_SETS = "equipment_sets"
    UNIQUE_EQUIPMENT = "unique_equipment"
    UNIQUE_EXERCISES = "unique_exercises"
    BODYWEIGHT_SESSIONS = "bodyweight_sessions"
    EQUIPMENT_WEEK = "equipment_week"
    VARIED_WEEKS = "varied_weeks"

    # Timing
    ACCOUNT_CREATED_BEFORE = "account_created_before"
    WORKOUT_HOUR_BEFORE = "workout_hour_before"
    WORKOUT_HOUR_AFTER = "workout_hour_after"
    WORKOUT_DATE = "workout_date"
    DAILY_DURATION_HOURS = "daily_duration_hours"
    SESSION_DURATION_HOURS = "session_duration_hours"

    # Science
    DELOAD_COMPLETED = "deload_completed"
    FREQUENCY_STREAK = "frequency_streak"
    OPTIMAL_VOLUME_WEEKS = "optimal_volume_weeks"
    RIR_SETS = "rir_sets"
    READINESS_CHECKS = "readiness_checks"
    FEEDBACK_SESSIONS = "feedback_sessions"

    # Meta
    BADGES_UNLOCKED = "badges_unlocked"

    # Deferred (resolved by a backend)
    FRIENDS_COUNT = "friends_count"
    REACTIONS_GIVEN = "reactions_given"
    POSTS_COUNT = "posts_count"
    REACTIONS_RECEIVED = "reactions_received"
    AI_RECOMMENDATIONS = "ai_recommendations"
    CHECKINS_COUNT = "checkins_count"
    AI_GOALS_ACHIEVED = "ai_goals_achieved"


Extractor = Callable[[Badge, BadgeStats, AbstractSet[str]], float]


def _flag(condition: bool) -> float:
    return 1.0 if condition else 0.0


def _muscle(badge: Badge, data: dict) -> float:
    muscle = badge.extra("muscle")
    if not isinstance(muscle, str) or not muscle:
        return 0.0
    return float(resolve_muscle_value(muscle, data))


def _muscle_weeks(badge: Badge, stats: BadgeStats, _: AbstractSet[str]) -> float:
    # Week counts are not additive across members; composites are precomputed.
    muscle = badge.extra("muscle")
    if not isinstance(muscle, str) or not muscle:
        return 0.0
    return float(stats.optimal_volume_weeks.get(muscle, 0))


def _equipment_sets(badge: Badge, stats: BadgeStats, _: AbstractSet[str]) -> float:
    equipment = badge.extra("equipment")
    if not isinstance(equipment, str) or not equipment:
        return 0.0
    return float(stats.equipment_sets.get(equipment, 0))


def _badges_unlocked(badge: Badge, _: BadgeStats, unlocked_ids: AbstractSet[str]) -> float:
    required = badge.extra("badges")
    if not isinstance(required, (list, tuple)):
        return 0.0
    return float(sum(1 for badge_id in required if badge_id in unlocked_ids))


def _deferred(*_: object) -> float:
    return 0.0


_EXTRACTORS: dict[ConditionType, Extractor] = {
    ConditionType.VOLUME_TONS: lambda b, s, u: s.total_volume_kg / 1000,
    ConditionType.SESSIONS_COUNT: lambda b, s, u: s.sessions_count,
    ConditionType.STREAK_DAYS: lambda b, s, u: s.day_streak,
    ConditionType.WEEK_GOAL_HIT: lambda b, s, u: s.week_goal_count,
    ConditionType.WEEK_STREAK: lambda b, s, u: s.week_goal_streak,
    ConditionType.WEEKEND_STREAK: lambda b, s, u: s.weekend_streak_weeks,
    ConditionType.PRS_COUNT: lambda b, s, u: s.total_prs,
    ConditionType.PR_INCREASE_PCT: lambda b, s, u: s.max_pr_increase_pct,
    ConditionType.MUSCLE_VOLUME: lambda b, s, u: _muscle(b, s.muscle_volume_kg),
    ConditionType.MUSCLE_SETS: lambda b, s, u: _muscle(b, s.muscle_sets),
    ConditionType.ALL_MUSCLES_TRAINED: lambda b, s, u: s.all_muscles_trained_count,
    ConditionType.BALANCED_TRAINING: lambda b, s, u: s.balanced_days,
    ConditionType.EQUIPMENT_SETS: _equipment_sets,
    ConditionType.UNIQUE_EQUIPMENT: lambda b, s, u: s.unique_equipment_count,
    ConditionType.UNIQUE_EXERCISES: lambda b, s, u: s.unique_exercise_count,
    ConditionType.BODYWEIGHT_SESSIONS: lambda b, s, u: s.bodyweight_session_count,
    ConditionType.EQUIPMENT_WEEK: lambda b, s, u: s.max_equipment_in_week,
    ConditionType.VARIED_WEEKS: lambda b, s, u: s.varied_weeks_streak,
    ConditionType.ACCOUNT_CREATED_BEFORE: lambda b, s, u: _flag(
        s.earliest_session_ms <= b.condition_value
    ),
    ConditionType.WORKOUT_HOUR_BEFORE: lambda b, s, u: _flag(
        any(h < b.condition_value for h in s.workout_hours)
    ),
    ConditionType.WORKOUT_HOUR_AFTER: lambda b, s, u: _flag(
        any(h >= b.condition_value for h in s.workout_hours)
    ),
    ConditionType.WORKOUT_DATE: lambda b, s, u: _flag(int(b.condition_value) in s.workout_dates),
    ConditionType.DAILY_DURATION_HOURS: lambda b, s, u: s.max_daily_duration_hours,
    ConditionType.SESSION_DURATION_HOURS: lambda b, s, u: s.max_session_duration_hours,
    ConditionType.DELOAD_COMPLETED: lambda b, s, u: s.deload_weeks,
    ConditionType.FREQUENCY_STREAK: lambda b, s, u: s.frequency_streak,
    ConditionType.OPTIMAL_VOLUME_WEEKS: _muscle_weeks,
    ConditionType.RIR_SETS: lambda b, s, u: s.rir_sets,
    ConditionType.READINESS_CHECKS: lambda b, s, u: s.readiness_checks,
    ConditionType.FEEDBACK_SESSIONS: lambda b, s, u: s.feedback_sessions,
    ConditionType.BADGES_UNLOCKED: _badges_unlocked,
}
for _tag in DEFERRED_CONDITIONS:
    _EXTRACTORS[ConditionType(_tag)] = _deferred

_missing = set(ConditionType) - set(_EXTRACTORS)
if _missing:
    raise RuntimeError(
        f"No extractor for condition types: {sorted(t.value for t in _missing)}"
    )


def is_deferred(badge: Badge) -> bool:
    """True for conditions that can only be resolved by a backend."""
    return badge.condition_type in DEFERRED_CONDITIONS


def is_boolean(badge: Badge) -> bool:
    """True for 0/1 conditions."""
    return badge.condition_type in BOOLEAN_CONDITIONS


def is_meta(badge: Badge) -> bool:
    """True for conditions that depend on other badges."""
    return badge.condition_type == META_CONDITION


def target_value(badge: Badge) -> float:
    """Unlock threshold. Boolean conditions always target 1."""
    return 1.0 if is_boolean(badge) else float(badge.condition_value)


def evaluate_condition(
    badge: Badge,
    stats: BadgeStats,
    unlocked_ids: AbstractSet[str] = frozenset(),
) -> float:
    """
    Current progress value of a badge.

    Args:
        badge: Badge definition
        stats: Stats bundle for the history being evaluated
        unlocked_ids: Badge ids known to be unlocked; only meta conditions
            read it, and callers may pass a set that grows between calls

    Returns:
        Current value (0 for unknown condition types)
    """
    try:
        condition = ConditionType(badge.condition_type)
    except ValueError:
        return 0.0
    return float(_EXTRACTORS[condition](badge, stats, unlocked_ids))
