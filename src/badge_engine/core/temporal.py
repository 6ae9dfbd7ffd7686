"""
Calendar windows and streaks.

Every statistic here is anchored to "now" (wall clock at call time, or an
explicit ``now`` argument) and uses calendar-local days and Monday-Sunday
weeks rather than rolling 24h windows. Weeks are identified by the date of
their Monday.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterable, Mapping

from .config import (
    BALANCE_MIN_TOTAL_SETS,
    BALANCE_SHARE_MAX,
    BALANCE_SHARE_MIN,
    BALANCE_WINDOW_DAYS,
    DELOAD_BASELINE_WEEKS,
    DELOAD_RATIO,
    FREQUENCY_MIN_SESSIONS,
    LEG_MUSCLES,
    MAJOR_MUSCLES,
    OVERREACH_ALERT_WEEKS,
    OVERREACH_CHECK_WEEKS,
    OVERREACH_URGENT_WEEKS,
    PULL_MUSCLES,
    PUSH_MUSCLES,
    RECENT_MUSCLES_DAYS,
    ROLLING_LOOKBACK_WEEKS,
    VARIED_WEEK_MAX_OVERLAP,
    WEEK_GOAL_SESSIONS,
)
from .landmarks import VOLUME_LANDMARKS, VolumeZone, zone_for_muscle
from .models import Exercise, WorkoutSession
from .muscles import MUSCLE_COMPOSITES, muscle_for_target

_END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class WeekVolume:
    """
    Completed sets per muscle for one calendar week.

    week_offset is 0 for the current week, -1 for the previous one, etc.
    """

    week_offset: int
    week_start: date  # Monday
    sets: dict[str, int] = field(default_factory=dict)
    zones: dict[str, VolumeZone] = field(default_factory=dict)

    @property
    def total_sets(self) -> int:
        return sum(self.sets.values())


@dataclass(frozen=True)
class OverreachingMuscle:
    """A muscle trained above its MRV for consecutive recent weeks."""

    muscle: str
    weeks_above_mrv: int
    current_sets: int
    mrv: int


def resolve_now(now: datetime | None) -> datetime:
    """Return now, or the current local time when None."""
    return now if now is not None else datetime.now()


def monday_of(d: date) -> date:
    """Monday of the calendar week containing d."""
    return d - timedelta(days=d.weekday())


def week_bounds(week_offset: int = 0, now: datetime | None = None) -> tuple[datetime, datetime]:
    """
    Return Monday 00:00:00.000 → Sunday 23:59:59.999 for a week offset.

    Args:
        week_offset: 0 = current week, -1 = last week, ...
        now: Reference time (default: current local time)

    Returns:
        (start, end) datetimes, both inclusive
    """
    monday = monday_of(resolve_now(now).date()) + timedelta(weeks=week_offset)
    start = datetime.combine(monday, time.min)
    end = datetime.combine(monday + timedelta(days=6), _END_OF_DAY)
    return start, end


def ended_sessions(history: Iterable[WorkoutSession]) -> list[WorkoutSession]:
    """Ended sessions sorted oldest first. Input order is never trusted."""
    return sorted((s for s in history if s.is_ended), key=lambda s: s.start_time)


def session_muscle_sets(
    session: WorkoutSession,
    exercises: Mapping[str, Exercise],
) -> dict[str, int]:
    """
    Completed sets per canonical muscle in one session.

    Unknown exercise ids and unmapped targets are skipped.
    """
    result: dict[str, int] = {}
    for comp_ex in session.completed_exercises:
        exercise = exercises.get(comp_ex.exercise_id)
        if exercise is None:
            continue
        muscle = muscle_for_target(exercise.target)
        if muscle is None:
            continue
        result[muscle] = result.get(muscle, 0) + len(comp_ex.completed_sets())
    return result


# =============================================================================
# STREAKS
# =============================================================================


def day_streak(workout_days: set[date], now: datetime | None = None) -> int:
    """
    Consecutive calendar days with an ended session.

    The streak must end today or yesterday: not having trained yet today
    does not break a streak that is still alive.
    """
    if not workout_days:
        return 0

    today = resolve_now(now).date()
    if today in workout_days:
        check = today
    elif today - timedelta(days=1) in workout_days:
        check = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while check in workout_days:
        streak += 1
        check -= timedelta(days=1)
    return streak


def week_streak(qualifying_weeks: set[date], now: datetime | None = None) -> int:
    """
    Consecutive qualifying weeks ending at the current or previous week.

    Args:
        qualifying_weeks: Mondays of the weeks that qualify
        now: Reference time

    Returns:
        Streak length in weeks
    """
    if not qualifying_weeks:
        return 0

    current = monday_of(resolve_now(now).date())
    if current in qualifying_weeks:
        check = current
    elif current - timedelta(weeks=1) in qualifying_weeks:
        check = current - timedelta(weeks=1)
    else:
        return 0

    streak = 0
    while check in qualifying_weeks:
        streak += 1
        check -= timedelta(weeks=1)
    return streak


def goal_weeks(sessions_per_week: Mapping[date, int]) -> set[date]:
    """Weeks with at least WEEK_GOAL_SESSIONS ended sessions."""
    return {week for week, count in sessions_per_week.items() if count >= WEEK_GOAL_SESSIONS}


def varied_weeks_streak(exercises_by_week: Mapping[date, set[str]]) -> int:
    """
    Consecutive recent weeks whose exercise selection changed.

    Walking from the most recent logged week backward, each week is compared
    with the logged week before it; the pair counts while the overlap is
    below VARIED_WEEK_MAX_OVERLAP of the larger week.
    """
    weeks = sorted(exercises_by_week, reverse=True)
    streak = 0
    for this_key, prev_key in zip(weeks, weeks[1:]):
        this_week = exercises_by_week[this_key]
        prev_week = exercises_by_week[prev_key]
        largest = max(len(this_week), len(prev_week))
        overlap = len(this_week & prev_week) / largest if largest > 0 else 1.0
        if overlap < VARIED_WEEK_MAX_OVERLAP:
            streak += 1
        else:
            break
    return streak


# =============================================================================
# WEEKLY MUSCLE VOLUME
# =============================================================================


def muscle_sets_by_week(
    history: Iterable[WorkoutSession],
    exercises: Mapping[str, Exercise],
) -> dict[date, dict[str, int]]:
    """Completed sets per muscle, grouped by the Monday of each week."""
    weekly: dict[date, dict[str, int]] = {}
    for session in history:
        if not session.is_ended:
            continue
        week = weekly.setdefault(monday_of(session.start_time.date()), {})
        for muscle, sets in session_muscle_sets(session, exercises).items():
            week[muscle] = week.get(muscle, 0) + sets
    return weekly


def sets_for_week(
    history: Iterable[WorkoutSession],
    week_offset: int,
    exercises: Mapping[str, Exercise],
    now: datetime | None = None,
) -> dict[str, int]:
    """Completed sets per muscle within one calendar week."""
    start, end = week_bounds(week_offset, now)
    result: dict[str, int] = {}
    for session in history:
        if not session.is_ended or not start <= session.start_time <= end:
            continue
        for muscle, sets in session_muscle_sets(session, exercises).items():
            result[muscle] = result.get(muscle, 0) + sets
    return result


def rolling_muscle_history(
    history: Iterable[WorkoutSession],
    exercises: Mapping[str, Exercise],
    weeks: int = ROLLING_LOOKBACK_WEEKS,
    now: datetime | None = None,
) -> list[WeekVolume]:
    """
    Per-week muscle volume for the last ``weeks`` weeks, oldest first.

    The current week is the last entry. Every muscle with landmarks gets a
    zone; muscles without landmarks keep their set count only.
    """
    weekly = muscle_sets_by_week(history, exercises)
    current = monday_of(resolve_now(now).date())

    result: list[WeekVolume] = []
    for offset in range(-(weeks - 1), 1):
        monday = current + timedelta(weeks=offset)
        sets = dict(weekly.get(monday, {}))
        zones: dict[str, VolumeZone] = {}
        for muscle, count in sets.items():
            zone = zone_for_muscle(muscle, count)
            if zone is not None:
                zones[muscle] = zone
        result.append(WeekVolume(week_offset=offset, week_start=monday, sets=sets, zones=zones))
    return result


def count_deload_weeks(weekly_totals: list[int]) -> int:
    """
    Count deload weeks in a series of weekly set totals (oldest first).

    A week is a deload when it has sets but fewer than DELOAD_RATIO times
    the mean of the DELOAD_BASELINE_WEEKS weeks before it. The first
    baseline weeks of the series only serve as baseline.

    Example: totals [20, 20, 8] → 8 < 0.6 × 20 → 1 deload.
    """
    count = 0
    for i in range(DELOAD_BASELINE_WEEKS, len(weekly_totals)):
        total = weekly_totals[i]
        baseline = weekly_totals[i - DELOAD_BASELINE_WEEKS:i]
        avg = sum(baseline) / DELOAD_BASELINE_WEEKS
        if 0 < total < DELOAD_RATIO * avg:
            count += 1
    return count


def optimal_volume_weeks(weeks: Iterable[WeekVolume]) -> dict[str, int]:
    """
    Number of weeks each muscle spent in the MEV-MAV zone.

    Composite keys (e.g. "back") count a week once when any member is in
    the zone, so no key can exceed the number of weeks given.
    """
    result: dict[str, int] = {}
    for week in weeks:
        optimal = {m for m, zone in week.zones.items() if zone == "mev_mav"}
        for muscle in optimal:
            result[muscle] = result.get(muscle, 0) + 1
        for composite, members in MUSCLE_COMPOSITES.items():
            if optimal.intersection(members):
                result[composite] = result.get(composite, 0) + 1
    return result


def overreaching_muscles(weeks: list[WeekVolume]) -> list[OverreachingMuscle]:
    """
    Muscles above MRV for enough consecutive weeks to warrant a deload.

    Weeks are counted back from the newest entry, over at most
    OVERREACH_CHECK_WEEKS weeks. One or two weeks above MRV is tolerated
    overreach; OVERREACH_ALERT_WEEKS or more is flagged.

    Args:
        weeks: Rolling muscle history, oldest first (current week last)

    Returns:
        Flagged muscles, longest run first
    """
    recent = weeks[-OVERREACH_CHECK_WEEKS:]
    if not recent:
        return []
    current = recent[-1]

    flagged: list[OverreachingMuscle] = []
    for muscle, landmark in VOLUME_LANDMARKS.items():
        run = 0
        for week in reversed(recent):
            if week.zones.get(muscle) != "above_mrv":
                break
            run += 1
        if run >= OVERREACH_ALERT_WEEKS:
            flagged.append(
                OverreachingMuscle(
                    muscle=muscle,
                    weeks_above_mrv=run,
                    current_sets=current.sets.get(muscle, 0),
                    mrv=landmark.mrv,
                )
            )

    flagged.sort(key=lambda m: m.weeks_above_mrv, reverse=True)
    return flagged


def deload_severity(flagged: list[OverreachingMuscle]) -> str:
    """"none", "warning" or "urgent" for a list of flagged muscles."""
    if not flagged:
        return "none"
    longest = max(m.weeks_above_mrv for m in flagged)
    return "urgent" if longest >= OVERREACH_URGENT_WEEKS else "warning"


def frequency_streak(
    history: Iterable[WorkoutSession],
    exercises: Mapping[str, Exercise],
    now: datetime | None = None,
    max_weeks: int = ROLLING_LOOKBACK_WEEKS,
) -> int:
    """
    Consecutive weeks, from the current one backward, in which every major
    muscle was trained in at least FREQUENCY_MIN_SESSIONS distinct sessions.

    Stops at the first failing week, including the current one.
    """
    sessions_by_week: dict[date, dict[str, set[str]]] = {}
    for session in history:
        if not session.is_ended:
            continue
        week = sessions_by_week.setdefault(monday_of(session.start_time.date()), {})
        for muscle, sets in session_muscle_sets(session, exercises).items():
            if sets > 0:
                week.setdefault(muscle, set()).add(session.session_id)

    current = monday_of(resolve_now(now).date())
    streak = 0
    for offset in range(max_weeks):
        week = sessions_by_week.get(current - timedelta(weeks=offset), {})
        if all(len(week.get(m, ())) >= FREQUENCY_MIN_SESSIONS for m in MAJOR_MUSCLES):
            streak += 1
        else:
            break
    return streak


def recent_muscles(
    history: Iterable[WorkoutSession],
    exercises: Mapping[str, Exercise],
    now: datetime | None = None,
    days: int = RECENT_MUSCLES_DAYS,
) -> set[str]:
    """Distinct canonical muscles trained in the last ``days`` days."""
    cutoff = resolve_now(now) - timedelta(days=days)
    muscles: set[str] = set()
    for session in history:
        if not session.is_ended or session.start_time < cutoff:
            continue
        for comp_ex in session.completed_exercises:
            exercise = exercises.get(comp_ex.exercise_id)
            if exercise is None:
                continue
            muscle = muscle_for_target(exercise.target)
            if muscle is not None:
                muscles.add(muscle)
    return muscles


def balanced_days(
    history: Iterable[WorkoutSession],
    exercises: Mapping[str, Exercise],
    now: datetime | None = None,
) -> int:
    """
    Span in days of balanced push/pull/legs training over the last 90 days.

    Completed sets are bucketed into push, pull and legs. When the total
    exceeds BALANCE_MIN_TOTAL_SETS and each bucket holds between 22% and
    45% of it, returns the day span between the oldest and newest session
    in the window (rounded up); otherwise 0.
    """
    reference = resolve_now(now)
    cutoff = reference - timedelta(days=BALANCE_WINDOW_DAYS)
    push = pull = legs = 0
    oldest: datetime | None = None
    newest: datetime | None = None

    for session in history:
        if not session.is_ended or session.start_time < cutoff:
            continue
        if oldest is None or session.start_time < oldest:
            oldest = session.start_time
        if newest is None or session.start_time > newest:
            newest = session.start_time
        for muscle, sets in session_muscle_sets(session, exercises).items():
            if muscle in PUSH_MUSCLES:
                push += sets
            elif muscle in PULL_MUSCLES:
                pull += sets
            elif muscle in LEG_MUSCLES:
                legs += sets

    total = push + pull + legs
    if total <= BALANCE_MIN_TOTAL_SETS or oldest is None or newest is None:
        return 0
    shares = (push / total, pull / total, legs / total)
    if not all(BALANCE_SHARE_MIN <= share <= BALANCE_SHARE_MAX for share in shares):
        return 0
    return math.ceil((newest - oldest).total_seconds() / 86400)
