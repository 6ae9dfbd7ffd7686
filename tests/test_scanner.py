"""
Volume/PR scanner tests.

Covers tonnage, per-muscle and per-equipment aggregation, personal record
chronology and the timing accumulators.
"""

from datetime import datetime, timedelta

import pytest

from badge_engine.core.models import CompletedExercise, CompletedSet, Exercise, WorkoutSession
from badge_engine.core.muscles import muscle_label, resolve_muscle_value
from badge_engine.core.scanner import scan_history

EXERCISES: dict[str, Exercise] = {
    "bench": Exercise("bench", "Bench Press", "pecs", "barbell"),
    "row": Exercise("row", "Barbell Row", "upper back", "barbell"),
    "pulldown": Exercise("pulldown", "Lat Pulldown", "lats", "cable"),
    "deadlift": Exercise("deadlift", "Deadlift", "lower back", "barbell"),
    "pushup": Exercise("pushup", "Push-Up", "pecs", "body weight"),
    "pullup": Exercise("pullup", "Pull-Up", "lats", "body weight"),
    "swing": Exercise("swing", "Kettlebell Swing", "glutes", "kettlebell"),
}


def _set(reps: int, weight: float | None = None, *, completed: bool = True, rir: int | None = None) -> CompletedSet:
    return CompletedSet(reps=reps, weight_kg=weight, completed=completed, rir=rir)


def _session(
    sid: str,
    start: datetime,
    exercises: list[tuple[str, list[CompletedSet]]],
    *,
    minutes: int = 60,
) -> WorkoutSession:
    return WorkoutSession(
        session_id=sid,
        start_time=start,
        end_time=start + timedelta(minutes=minutes),
        duration_seconds=minutes * 60,
        completed_exercises=[CompletedExercise(ex_id, sets) for ex_id, sets in exercises],
    )


# ---------------------------------------------------------------------------
# Personal records
# ---------------------------------------------------------------------------


class TestPersonalRecords:
    def test_pr_chronology_50_45_55(self):
        """50 kg (PR vs 0), 45 kg (no), 55 kg (PR vs 50) → 2 weight PRs."""
        s1 = _session("s1", datetime(2024, 3, 1, 18), [("bench", [_set(5, 50.0)])])
        s2 = _session("s2", datetime(2024, 3, 3, 18), [("bench", [_set(5, 45.0)])])
        s3 = _session("s3", datetime(2024, 3, 5, 18), [("bench", [_set(5, 55.0)])])

        result = scan_history([s1, s2, s3], EXERCISES)
        assert result.weight_prs == 2

    def test_history_order_is_not_trusted(self):
        s1 = _session("s1", datetime(2024, 3, 1, 18), [("bench", [_set(5, 50.0)])])
        s2 = _session("s2", datetime(2024, 3, 3, 18), [("bench", [_set(5, 45.0)])])
        s3 = _session("s3", datetime(2024, 3, 5, 18), [("bench", [_set(5, 55.0)])])

        result = scan_history([s3, s1, s2], EXERCISES)
        assert result.weight_prs == 2
        # Session volumes 250, 225, 275 → 2 volume PRs
        assert result.volume_prs == 2
        assert result.total_prs == 4

    def test_max_pr_increase_pct(self):
        """First 50 kg, best 55 kg → 10 %."""
        history = [
            _session("s1", datetime(2024, 3, 1), [("bench", [_set(5, 50.0)])]),
            _session("s2", datetime(2024, 3, 8), [("bench", [_set(5, 55.0)])]),
            _session("s3", datetime(2024, 3, 2), [("row", [_set(5, 60.0)])]),
        ]
        assert scan_history(history, EXERCISES).max_pr_increase_pct == pytest.approx(10.0)

    def test_session_best_uses_heaviest_set(self):
        s1 = _session("s1", datetime(2024, 3, 1), [("bench", [_set(5, 40.0), _set(3, 60.0)])])
        s2 = _session("s2", datetime(2024, 3, 2), [("bench", [_set(5, 50.0), _set(5, 50.0)])])
        result = scan_history([s1, s2], EXERCISES)
        # Weight: 60 (PR), 50 (no). Volume: 380 (PR), 500 (PR).
        assert result.weight_prs == 1
        assert result.volume_prs == 2

    def test_bodyweight_sets_never_set_weight_prs(self):
        s1 = _session("s1", datetime(2024, 3, 1), [("pullup", [_set(10), _set(12)])])
        result = scan_history([s1], EXERCISES)
        assert result.weight_prs == 0
        assert result.volume_prs == 0


# ---------------------------------------------------------------------------
# Completed-set exclusivity
# ---------------------------------------------------------------------------


class TestCompletedSets:
    def test_incomplete_set_ignored_everywhere(self):
        s1 = _session(
            "s1",
            datetime(2024, 3, 1),
            [("bench", [_set(5, 100.0, completed=False), _set(5, 50.0)])],
        )
        result = scan_history([s1], EXERCISES)

        assert result.total_volume_kg == pytest.approx(250.0)
        assert result.muscle_sets == {"chest": 1}
        assert result.equipment_sets == {"barbell": 1}
        assert result.best_weight == {"bench": 50.0}

    def test_incomplete_heavy_set_does_not_raise_the_running_best(self):
        s1 = _session("s1", datetime(2024, 3, 1), [("bench", [_set(5, 100.0, completed=False), _set(5, 50.0)])])
        s2 = _session("s2", datetime(2024, 3, 2), [("bench", [_set(5, 60.0)])])
        assert scan_history([s1, s2], EXERCISES).weight_prs == 2

    def test_rir_counted_on_completed_sets_only(self):
        s1 = _session(
            "s1",
            datetime(2024, 3, 1),
            [("bench", [_set(5, 50.0, rir=2), _set(5, 50.0, rir=1, completed=False), _set(5, 50.0)])],
        )
        assert scan_history([s1], EXERCISES).rir_sets == 1


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


class TestAggregates:
    def test_unknown_exercise_skipped(self):
        s1 = _session(
            "s1",
            datetime(2024, 3, 1),
            [("mystery", [_set(10, 200.0)] * 3), ("bench", [_set(10, 40.0)])],
        )
        result = scan_history([s1], EXERCISES)

        assert result.sessions_count == 1
        assert result.total_volume_kg == pytest.approx(400.0)
        assert result.unique_exercise_ids == {"bench"}

    def test_composite_back_sums_three_regions(self):
        s1 = _session(
            "s1",
            datetime(2024, 3, 1),
            [
                ("row", [_set(10, 40.0)] * 2),
                ("pulldown", [_set(10, 50.0)] * 3),
                ("deadlift", [_set(5, 100.0)]),
            ],
        )
        result = scan_history([s1], EXERCISES)

        assert resolve_muscle_value("back", result.muscle_sets) == 6
        # 800 + 1500 + 500
        assert resolve_muscle_value("back", result.muscle_volume_kg) == pytest.approx(2800.0)
        assert resolve_muscle_value("lats", result.muscle_sets) == 3
        assert resolve_muscle_value("wings", result.muscle_sets) == 0

    def test_bodyweight_only_sessions(self):
        history = [
            _session("bw", datetime(2024, 3, 1), [("pushup", [_set(20)]), ("pullup", [_set(8)])]),
            _session("mixed", datetime(2024, 3, 2), [("pushup", [_set(20)]), ("bench", [_set(5, 60.0)])]),
            _session("unknown", datetime(2024, 3, 3), [("mystery", [_set(5)])]),
            _session("empty", datetime(2024, 3, 4), []),
        ]
        assert scan_history(history, EXERCISES).bodyweight_session_count == 1

    def test_equipment_variety(self):
        history = [
            _session("a", datetime(2024, 3, 4), [("bench", [_set(5, 60.0)]), ("pulldown", [_set(10, 40.0)])]),
            _session("b", datetime(2024, 3, 6), [("swing", [_set(15, 16.0)]), ("pushup", [_set(20)])]),
            _session("c", datetime(2024, 3, 12), [("bench", [_set(5, 60.0)])]),
        ]
        result = scan_history(history, EXERCISES)

        assert result.unique_equipment == {"barbell", "cable", "kettlebell", "body weight"}
        assert result.max_equipment_in_week == 4
        assert result.equipment_sets == {"barbell": 2, "cable": 1, "kettlebell": 1, "body weight": 1}

    def test_in_progress_sessions_ignored(self):
        live = WorkoutSession(
            session_id="live",
            start_time=datetime(2024, 3, 1, 10),
            completed_exercises=[CompletedExercise("bench", [_set(5, 100.0)])],
        )
        result = scan_history([live], EXERCISES)
        assert result.sessions_count == 0
        assert result.total_volume_kg == 0.0


# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------


class TestTiming:
    def test_durations_hours_and_dates(self):
        history = [
            _session("morning", datetime(2024, 1, 1, 5, 30), [], minutes=60),
            _session("evening", datetime(2024, 1, 1, 22, 15), [], minutes=90),
            _session("next", datetime(2024, 1, 2, 12, 0), [], minutes=120),
        ]
        result = scan_history(history, EXERCISES)

        assert result.workout_hours == [5, 22, 12]
        assert result.workout_dates == {101, 102}
        assert result.earliest_start == datetime(2024, 1, 1, 5, 30)
        assert result.max_session_duration_hours == pytest.approx(2.0)
        assert result.max_daily_duration_hours == pytest.approx(2.5)


class TestMuscleLabels:
    def test_known_composite_and_fallback(self):
        assert muscle_label("upper back") == "Upper back"
        assert muscle_label("back") == "Back"
        assert muscle_label("hip_flexors") == "Hip flexors"
