"""
Single chronological pass over session history.

Accumulates tonnage, per-muscle and per-equipment totals, variety sets,
timing facts and personal records. Sessions are processed oldest first:
a PR is defined against everything logged before it, so out-of-order
processing would corrupt the PR count.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Mapping

from .config import BODYWEIGHT_EQUIPMENT, WEEKEND_DAYS
from .models import Exercise, WorkoutSession
from .muscles import muscle_for_target
from .temporal import ended_sessions, monday_of


@dataclass
class RunningBest:
    """Best weight and best single-session volume seen so far for one exercise."""

    best_weight: float = 0.0
    best_volume: float = 0.0


@dataclass
class ScanResult:
    """
    Raw accumulators filled by scan_history.

    Keys of the *_by_week maps are the Monday of each calendar week.
    """

    sessions_count: int = 0
    total_volume_kg: float = 0.0
    muscle_volume_kg: dict[str, float] = field(default_factory=dict)
    muscle_sets: dict[str, int] = field(default_factory=dict)
    equipment_sets: dict[str, int] = field(default_factory=dict)
    unique_exercise_ids: set[str] = field(default_factory=set)
    unique_equipment: set[str] = field(default_factory=set)
    bodyweight_session_count: int = 0

    workout_days: set[date] = field(default_factory=set)
    sessions_per_week: dict[date, int] = field(default_factory=dict)
    weekend_weeks: set[date] = field(default_factory=set)
    equipment_by_week: dict[date, set[str]] = field(default_factory=dict)
    exercises_by_week: dict[date, set[str]] = field(default_factory=dict)

    earliest_start: datetime | None = None
    workout_hours: list[int] = field(default_factory=list)
    workout_dates: set[int] = field(default_factory=set)  # month * 100 + day
    max_session_duration_seconds: int = 0
    daily_duration_seconds: dict[date, int] = field(default_factory=dict)

    weight_prs: int = 0
    volume_prs: int = 0
    first_weight: dict[str, float] = field(default_factory=dict)
    best_weight: dict[str, float] = field(default_factory=dict)

    rir_sets: int = 0
    readiness_checks: int = 0
    feedback_sessions: int = 0

    @property
    def total_prs(self) -> int:
        return self.weight_prs + self.volume_prs

    @property
    def max_pr_increase_pct(self) -> float:
        """
        Largest (best - first) / first × 100 over all exercises.

        Only exercises whose best weight improved on their first recorded
        weight contribute.
        """
        best_pct = 0.0
        for exercise_id, first in self.first_weight.items():
            best = self.best_weight.get(exercise_id, 0.0)
            if first > 0 and best > first:
                best_pct = max(best_pct, (best - first) / first * 100)
        return best_pct

    @property
    def max_equipment_in_week(self) -> int:
        return max((len(s) for s in self.equipment_by_week.values()), default=0)

    @property
    def max_session_duration_hours(self) -> float:
        return self.max_session_duration_seconds / 3600

    @property
    def max_daily_duration_hours(self) -> float:
        return max(self.daily_duration_seconds.values(), default=0) / 3600


def scan_history(
    history: Iterable[WorkoutSession],
    exercises: Mapping[str, Exercise],
) -> ScanResult:
    """
    Scan ended sessions oldest first and return the accumulators.

    Args:
        history: Sessions in any order; in-progress sessions are ignored
        exercises: Exercise catalog used to resolve muscles and equipment

    Returns:
        Filled ScanResult
    """
    result = ScanResult()
    running: dict[str, RunningBest] = {}

    for session in ended_sessions(history):
        _scan_session(session, exercises, result, running)

    return result


def _scan_session(
    session: WorkoutSession,
    exercises: Mapping[str, Exercise],
    result: ScanResult,
    running: dict[str, RunningBest],
) -> None:
    start = session.start_time
    day = start.date()
    week = monday_of(day)

    result.sessions_count += 1
    if result.earliest_start is None or start < result.earliest_start:
        result.earliest_start = start
    result.workout_days.add(day)
    result.workout_hours.append(start.hour)
    result.workout_dates.add(start.month * 100 + start.day)
    result.sessions_per_week[week] = result.sessions_per_week.get(week, 0) + 1
    if day.weekday() in WEEKEND_DAYS:
        result.weekend_weeks.add(week)

    result.max_session_duration_seconds = max(
        result.max_session_duration_seconds, session.duration_seconds
    )
    result.daily_duration_seconds[day] = (
        result.daily_duration_seconds.get(day, 0) + session.duration_seconds
    )

    if session.readiness is not None:
        result.readiness_checks += 1
    if session.feedback is not None:
        result.feedback_sessions += 1

    week_equipment = result.equipment_by_week.setdefault(week, set())
    week_exercises = result.exercises_by_week.setdefault(week, set())

    # Per-exercise best weight and volume for this session
    session_best: dict[str, float] = {}
    session_volume: dict[str, float] = {}
    known_exercises = 0
    bodyweight_only = True

    for comp_ex in session.completed_exercises:
        exercise = exercises.get(comp_ex.exercise_id)
        if exercise is None:
            continue
        known_exercises += 1

        result.unique_exercise_ids.add(exercise.exercise_id)
        result.unique_equipment.add(exercise.equipment)
        week_equipment.add(exercise.equipment)
        week_exercises.add(exercise.exercise_id)
        if exercise.equipment != BODYWEIGHT_EQUIPMENT:
            bodyweight_only = False

        muscle = muscle_for_target(exercise.target)
        ex_best = session_best.get(exercise.exercise_id, 0.0)
        ex_volume = session_volume.get(exercise.exercise_id, 0.0)

        for s in comp_ex.completed_sets():
            load = s.load_kg
            volume = load * s.reps
            result.total_volume_kg += volume
            ex_volume += volume
            ex_best = max(ex_best, load)
            if s.rir is not None:
                result.rir_sets += 1
            if muscle is not None:
                result.muscle_volume_kg[muscle] = result.muscle_volume_kg.get(muscle, 0.0) + volume
                result.muscle_sets[muscle] = result.muscle_sets.get(muscle, 0) + 1
            result.equipment_sets[exercise.equipment] = (
                result.equipment_sets.get(exercise.equipment, 0) + 1
            )

        session_best[exercise.exercise_id] = ex_best
        session_volume[exercise.exercise_id] = ex_volume

    if known_exercises > 0 and bodyweight_only:
        result.bodyweight_session_count += 1

    for exercise_id, weight in session_best.items():
        volume = session_volume[exercise_id]

        if weight > 0:
            result.first_weight.setdefault(exercise_id, weight)
            if weight > result.best_weight.get(exercise_id, 0.0):
                result.best_weight[exercise_id] = weight

        best = running.setdefault(exercise_id, RunningBest())
        if weight > 0 and weight > best.best_weight:
            result.weight_prs += 1
            best.best_weight = weight
        if volume > 0 and volume > best.best_volume:
            result.volume_prs += 1
            best.best_volume = volume
