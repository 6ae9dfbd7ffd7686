"""
The stats bundle.

compute_stats runs the Volume/PR scan and the calendar aggregations once
and freezes the result. It is the only place history is read: condition
evaluation and badge resolution work on the bundle alone, so a cached or
incremental variant can replace this function without touching them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping

from .config import DELOAD_BASELINE_WEEKS, ROLLING_LOOKBACK_WEEKS
from .models import Exercise, WorkoutSession
from .scanner import scan_history
from .temporal import (
    WeekVolume,
    balanced_days,
    count_deload_weeks,
    day_streak,
    ended_sessions,
    frequency_streak,
    goal_weeks,
    optimal_volume_weeks,
    recent_muscles,
    resolve_now,
    rolling_muscle_history,
    varied_weeks_streak,
    week_streak,
)


@dataclass(frozen=True)
class BadgeStats:
    """
    Everything the condition evaluators need, computed from one history.

    Lives for the duration of a single evaluation call and is never
    mutated. Freezing only covers the attributes: the mapping fields (and
    the sets/zones of each WeekVolume) are plain dicts built fresh by
    compute_stats for each call, and callers treat them as read-only.
    """

    # Volume
    total_volume_kg: float = 0.0
    sessions_count: int = 0
    muscle_volume_kg: dict[str, float] = field(default_factory=dict)
    muscle_sets: dict[str, int] = field(default_factory=dict)
    equipment_sets: dict[str, int] = field(default_factory=dict)

    # Consistency
    day_streak: int = 0
    week_goal_count: int = 0
    week_goal_streak: int = 0
    weekend_streak_weeks: int = 0

    # Strength
    weight_prs: int = 0
    volume_prs: int = 0
    max_pr_increase_pct: float = 0.0

    # Variety / equipment
    unique_exercise_count: int = 0
    unique_equipment_count: int = 0
    bodyweight_session_count: int = 0
    max_equipment_in_week: int = 0
    varied_weeks_streak: int = 0

    # Muscles
    all_muscles_trained_count: int = 0
    balanced_days: int = 0

    # Timing
    earliest_session_ms: int = 0
    workout_hours: tuple[int, ...] = ()
    workout_dates: frozenset[int] = frozenset()
    max_session_duration_hours: float = 0.0
    max_daily_duration_hours: float = 0.0

    # Science
    deload_weeks: int = 0
    frequency_streak: int = 0
    optimal_volume_weeks: dict[str, int] = field(default_factory=dict)
    rir_sets: int = 0
    readiness_checks: int = 0
    feedback_sessions: int = 0
    rolling_history: tuple[WeekVolume, ...] = ()

    @property
    def total_prs(self) -> int:
        return self.weight_prs + self.volume_prs


def compute_stats(
    history: Iterable[WorkoutSession],
    exercises: Mapping[str, Exercise] | None = None,
    now: datetime | None = None,
) -> BadgeStats:
    """
    Compute the stats bundle from scratch.

    Args:
        history: Session history in any order (not mutated)
        exercises: Exercise catalog (default: bundled catalog)
        now: Reference time for streaks and windows (default: now)

    Returns:
        Frozen BadgeStats
    """
    if exercises is None:
        from .catalog import EXERCISE_CATALOG

        exercises = EXERCISE_CATALOG

    reference = resolve_now(now)
    sessions = ended_sessions(history)
    scan = scan_history(sessions, exercises)

    # Two extra leading weeks give the first weeks of the window a deload baseline
    weekly = rolling_muscle_history(
        sessions, exercises, ROLLING_LOOKBACK_WEEKS + DELOAD_BASELINE_WEEKS, reference
    )
    window = weekly[DELOAD_BASELINE_WEEKS:]
    qualifying = goal_weeks(scan.sessions_per_week)

    earliest = scan.earliest_start if scan.earliest_start is not None else reference

    return BadgeStats(
        total_volume_kg=scan.total_volume_kg,
        sessions_count=scan.sessions_count,
        muscle_volume_kg=dict(scan.muscle_volume_kg),
        muscle_sets=dict(scan.muscle_sets),
        equipment_sets=dict(scan.equipment_sets),
        day_streak=day_streak(scan.workout_days, reference),
        week_goal_count=len(qualifying),
        week_goal_streak=week_streak(qualifying, reference),
        weekend_streak_weeks=week_streak(scan.weekend_weeks, reference),
        weight_prs=scan.weight_prs,
        volume_prs=scan.volume_prs,
        max_pr_increase_pct=scan.max_pr_increase_pct,
        unique_exercise_count=len(scan.unique_exercise_ids),
        unique_equipment_count=len(scan.unique_equipment),
        bodyweight_session_count=scan.bodyweight_session_count,
        max_equipment_in_week=scan.max_equipment_in_week,
        varied_weeks_streak=varied_weeks_streak(scan.exercises_by_week),
        all_muscles_trained_count=len(recent_muscles(sessions, exercises, reference)),
        balanced_days=balanced_days(sessions, exercises, reference),
        earliest_session_ms=int(earliest.timestamp() * 1000),
        workout_hours=tuple(scan.workout_hours),
        workout_dates=frozenset(scan.workout_dates),
        max_session_duration_hours=scan.max_session_duration_hours,
        max_daily_duration_hours=scan.max_daily_duration_hours,
        deload_weeks=count_deload_weeks([w.total_sets for w in weekly]),
        frequency_streak=frequency_streak(sessions, exercises, reference),
        optimal_volume_weeks=optimal_volume_weeks(window),
        rir_sets=scan.rir_sets,
        readiness_checks=scan.readiness_checks,
        feedback_sessions=scan.feedback_sessions,
        rolling_history=tuple(window),
    )
