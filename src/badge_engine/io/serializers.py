"""
JSON serialization for session history and unlock records.

Handles conversion between dataclasses and JSON-compatible dicts.
"""

import json
from dataclasses import fields
from datetime import datetime
from typing import Any

from ..core.models import (
    BadgeProgress,
    CompletedExercise,
    CompletedSet,
    ReadinessCheck,
    SessionFeedback,
    UnlockedBadge,
    WorkoutSession,
)
from ..core.stats import BadgeStats
from ..core.temporal import OverreachingMuscle, WeekVolume


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_timestamp(value: Any, name: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into a naive local datetime.

    Timezone-aware values are converted to the local wall clock so that all
    calendar logic sees the user's day and hour.

    Args:
        value: ISO timestamp string
        name: Field name for error messages

    Returns:
        Naive local datetime

    Raises:
        ValidationError: If the value is not a valid ISO timestamp
    """
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be an ISO timestamp string, got {value!r}")
    # fromisoformat only accepts a "Z" suffix from Python 3.11 on
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        moment = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValidationError(f"Invalid {name}: {value}") from e
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_scale(value: Any, name: str, low: int, high: int) -> int:
    """
    Validate an integer self-report score within [low, high].

    Raises:
        ValidationError: If value is not an integer in range
    """
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise ValidationError(f"{name} must be an integer between {low} and {high}, got {value!r}")
    return value


def completed_set_to_dict(s: CompletedSet) -> dict[str, Any]:
    """Compact serializer for a set: optional fields only when present."""
    d: dict[str, Any] = {"reps": s.reps}
    if s.weight_kg is not None:
        d["weight_kg"] = s.weight_kg
    if not s.completed:
        d["completed"] = False
    if s.rir is not None:
        d["rir"] = s.rir
    if s.side is not None:
        d["side"] = s.side
    return d


def dict_to_completed_set(data: dict[str, Any]) -> CompletedSet:
    """
    Convert dict to CompletedSet.

    Raises:
        ValidationError: If data is invalid
    """
    if "reps" not in data:
        raise ValidationError("Set is missing 'reps'")
    reps = validate_non_negative(int(data["reps"]), "reps")

    weight = data.get("weight_kg")
    if weight is not None:
        weight = float(validate_non_negative(float(weight), "weight_kg"))

    rir = data.get("rir")
    if rir is not None:
        rir = validate_scale(rir, "rir", 0, 5)

    side = data.get("side")
    if side not in (None, "left", "right"):
        raise ValidationError(f"Invalid side: {side!r}. Must be 'left' or 'right'")

    return CompletedSet(
        reps=int(reps),
        weight_kg=weight,
        completed=bool(data.get("completed", True)),
        rir=rir,
        side=side,
    )


def dict_to_completed_exercise(data: dict[str, Any]) -> CompletedExercise:
    """
    Convert dict to CompletedExercise.

    Raises:
        ValidationError: If data is invalid
    """
    exercise_id = data.get("exercise_id")
    if not isinstance(exercise_id, str) or not exercise_id.strip():
        raise ValidationError(f"Invalid exercise_id: {exercise_id!r}")
    return CompletedExercise(
        exercise_id=exercise_id,
        sets=[dict_to_completed_set(s) for s in data.get("sets", [])],
    )


def dict_to_readiness(data: dict[str, Any]) -> ReadinessCheck:
    """Convert dict to ReadinessCheck (scores 1-5)."""
    return ReadinessCheck(
        sleep=validate_scale(data.get("sleep"), "readiness.sleep", 1, 5),
        energy=validate_scale(data.get("energy"), "readiness.energy", 1, 5),
        soreness=validate_scale(data.get("soreness"), "readiness.soreness", 1, 5),
    )


def dict_to_feedback(data: dict[str, Any]) -> SessionFeedback:
    """Convert dict to SessionFeedback (scores 1-3)."""
    return SessionFeedback(
        pump=validate_scale(data.get("pump"), "feedback.pump", 1, 3),
        soreness=validate_scale(data.get("soreness"), "feedback.soreness", 1, 3),
        performance=validate_scale(data.get("performance"), "feedback.performance", 1, 3),
        joint_pain=bool(data.get("joint_pain", False)),
    )


def session_to_dict(session: WorkoutSession) -> dict[str, Any]:
    """
    Convert WorkoutSession to JSON-compatible dict.

    Args:
        session: WorkoutSession to convert

    Returns:
        Dict representation
    """
    d: dict[str, Any] = {
        "session_id": session.session_id,
        "start_time": session.start_time.isoformat(),
        "end_time": session.end_time.isoformat() if session.end_time else None,
        "duration_seconds": session.duration_seconds,
        "exercises": [
            {
                "exercise_id": ex.exercise_id,
                "sets": [completed_set_to_dict(s) for s in ex.sets],
            }
            for ex in session.completed_exercises
        ],
    }
    if session.workout_id is not None:
        d["workout_id"] = session.workout_id
    if session.workout_name is not None:
        d["workout_name"] = session.workout_name
    if session.readiness is not None:
        d["readiness"] = {
            "sleep": session.readiness.sleep,
            "energy": session.readiness.energy,
            "soreness": session.readiness.soreness,
        }
    if session.feedback is not None:
        d["feedback"] = {
            "pump": session.feedback.pump,
            "soreness": session.feedback.soreness,
            "performance": session.feedback.performance,
            "joint_pain": session.feedback.joint_pain,
        }
    return d


def dict_to_session(data: dict[str, Any]) -> WorkoutSession:
    """
    Convert dict to WorkoutSession.

    A missing or null end_time yields an in-progress session. When
    duration_seconds is absent it is derived from the two timestamps.

    Args:
        data: Dict representation

    Returns:
        WorkoutSession instance

    Raises:
        ValidationError: If data is invalid
    """
    session_id = data.get("session_id")
    if not isinstance(session_id, str) or not session_id:
        raise ValidationError(f"Invalid session_id: {session_id!r}")

    start = validate_timestamp(data.get("start_time"), "start_time")
    end_raw = data.get("end_time")
    end = validate_timestamp(end_raw, "end_time") if end_raw is not None else None

    if "duration_seconds" in data:
        duration = int(validate_non_negative(int(data["duration_seconds"]), "duration_seconds"))
    elif end is not None:
        duration = max(0, int((end - start).total_seconds()))
    else:
        duration = 0

    readiness = data.get("readiness")
    feedback = data.get("feedback")

    return WorkoutSession(
        session_id=session_id,
        start_time=start,
        end_time=end,
        duration_seconds=duration,
        completed_exercises=[dict_to_completed_exercise(e) for e in data.get("exercises", [])],
        workout_id=data.get("workout_id"),
        workout_name=data.get("workout_name"),
        readiness=dict_to_readiness(readiness) if readiness else None,
        feedback=dict_to_feedback(feedback) if feedback else None,
    )


def session_to_json_line(session: WorkoutSession) -> str:
    """Serialize a session to a single JSONL line."""
    return json.dumps(session_to_dict(session), separators=(",", ":"))


def progress_to_dict(p: BadgeProgress) -> dict[str, Any]:
    """Convert BadgeProgress to a JSON-compatible dict for machine output."""
    return {
        "badge_id": p.badge.badge_id,
        "name": p.badge.name,
        "category": p.badge.category,
        "tier": p.badge.tier,
        "points": p.badge.points,
        "condition_type": p.badge.condition_type,
        "is_unlocked": p.is_unlocked,
        "unlocked_at": p.unlocked_at,
        "current_value": round(p.current_value, 4),
        "target_value": p.target_value,
        "progress_percent": round(p.progress_percent, 2),
    }


def week_volume_to_dict(week: WeekVolume) -> dict[str, Any]:
    """Convert one week of rolling muscle volume to a JSON-compatible dict."""
    return {
        "week_offset": week.week_offset,
        "week_start": week.week_start.isoformat(),
        "total_sets": week.total_sets,
        "sets": dict(week.sets),
        "zones": dict(week.zones),
    }


def overreaching_to_dict(m: OverreachingMuscle) -> dict[str, Any]:
    """Convert a flagged muscle to a JSON-compatible dict."""
    return {
        "muscle": m.muscle,
        "weeks_above_mrv": m.weeks_above_mrv,
        "current_sets": m.current_sets,
        "mrv": m.mrv,
    }


def stats_to_dict(stats: BadgeStats) -> dict[str, Any]:
    """
    Convert the stats bundle to a JSON-compatible dict.

    The rolling history is left out; the volume command reports it.
    """
    d: dict[str, Any] = {}
    for f in fields(stats):
        if f.name == "rolling_history":
            continue
        value = getattr(stats, f.name)
        if isinstance(value, frozenset):
            value = sorted(value)
        elif isinstance(value, tuple):
            value = list(value)
        elif isinstance(value, float):
            value = round(value, 4)
        d[f.name] = value
    d["total_prs"] = stats.total_prs
    return d


def unlocked_to_dict(unlocked: dict[str, UnlockedBadge]) -> dict[str, Any]:
    """Convert unlock records to a JSON-compatible dict keyed by badge id."""
    return {badge_id: {"unlocked_at": u.unlocked_at} for badge_id, u in unlocked.items()}


def dict_to_unlocked(data: dict[str, Any]) -> dict[str, UnlockedBadge]:
    """
    Convert a dict keyed by badge id to unlock records.

    Raises:
        ValidationError: If an entry has no unlocked_at timestamp
    """
    if not isinstance(data, dict):
        raise ValidationError("Unlocked badges must be a JSON object keyed by badge id")
    result: dict[str, UnlockedBadge] = {}
    for badge_id, entry in data.items():
        unlocked_at = entry.get("unlocked_at") if isinstance(entry, dict) else None
        if not isinstance(unlocked_at, str):
            raise ValidationError(f"Badge {badge_id!r} is missing 'unlocked_at'")
        validate_timestamp(unlocked_at, f"{badge_id}.unlocked_at")
        result[badge_id] = UnlockedBadge(unlocked_at=unlocked_at)
    return result
