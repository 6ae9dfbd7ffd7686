"""
Calendar window and streak tests.

Reference week used throughout (2024):
    Mon 02-19 ... Sun 02-25   (W-2)
    Mon 02-26 ... Sun 03-03   (W-1)
    Mon 03-04 ... Sun 03-10   (W)

Values are hand-computed so the tests read as worked examples.
"""

from datetime import date, datetime, timedelta

import pytest

from badge_engine.cli.views import ZONE_STYLES
from badge_engine.core.landmarks import VOLUME_LANDMARKS, VOLUME_ZONES, get_volume_zone
from badge_engine.core.models import CompletedExercise, CompletedSet, Exercise, WorkoutSession
from badge_engine.core.stats import compute_stats
from badge_engine.core.temporal import (
    WeekVolume,
    balanced_days,
    count_deload_weeks,
    day_streak,
    deload_severity,
    frequency_streak,
    optimal_volume_weeks,
    overreaching_muscles,
    recent_muscles,
    rolling_muscle_history,
    sets_for_week,
    varied_weeks_streak,
    week_bounds,
    week_streak,
)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

EXERCISES: dict[str, Exercise] = {
    "bench": Exercise("bench", "Bench Press", "pecs", "barbell"),
    "row": Exercise("row", "Barbell Row", "upper back", "barbell"),
    "pulldown": Exercise("pulldown", "Lat Pulldown", "lats", "cable"),
    "ohp": Exercise("ohp", "Overhead Press", "delts", "barbell"),
    "squat": Exercise("squat", "Back Squat", "quads", "barbell"),
    "rdl": Exercise("rdl", "Romanian Deadlift", "hamstrings", "barbell"),
    "thrust": Exercise("thrust", "Hip Thrust", "glutes", "barbell"),
    "walk": Exercise("walk", "Band Lateral Walk", "abductors", "resistance band"),
}

FULL_BODY = ("bench", "pulldown", "ohp", "squat", "rdl", "thrust")

WED = datetime(2024, 3, 6, 15, 0)


def _sets(n: int, weight: float = 40.0, reps: int = 10) -> list[CompletedSet]:
    return [CompletedSet(reps=reps, weight_kg=weight) for _ in range(n)]


def _session(
    sid: str,
    start: datetime,
    exercises: dict[str, int] | None = None,
    *,
    minutes: int = 60,
) -> WorkoutSession:
    """Ended session; exercises maps exercise id → number of completed sets."""
    return WorkoutSession(
        session_id=sid,
        start_time=start,
        end_time=start + timedelta(minutes=minutes),
        duration_seconds=minutes * 60,
        completed_exercises=[
            CompletedExercise(ex_id, _sets(n)) for ex_id, n in (exercises or {}).items()
        ],
    )


# ---------------------------------------------------------------------------
# Week bounds
# ---------------------------------------------------------------------------


class TestWeekBounds:
    def test_current_week_monday_to_sunday(self):
        start, end = week_bounds(0, WED)
        assert start == datetime(2024, 3, 4, 0, 0, 0)
        assert end == datetime(2024, 3, 10, 23, 59, 59, 999000)

    def test_previous_week(self):
        start, end = week_bounds(-1, WED)
        assert start == datetime(2024, 2, 26)
        assert end.date() == date(2024, 3, 3)

    def test_sunday_belongs_to_the_week_that_started_monday(self):
        start, _ = week_bounds(0, datetime(2024, 3, 10, 22, 0))
        assert start == datetime(2024, 3, 4)


# ---------------------------------------------------------------------------
# Day streak
# ---------------------------------------------------------------------------


class TestDayStreak:
    DAYS = {date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 3)}

    def test_streak_ending_today(self):
        assert day_streak(self.DAYS, datetime(2024, 3, 3, 20, 0)) == 3

    def test_streak_ending_yesterday_is_alive(self):
        assert day_streak(self.DAYS, datetime(2024, 3, 4, 8, 0)) == 3

    def test_two_missed_days_break_the_streak(self):
        assert day_streak(self.DAYS, datetime(2024, 3, 5, 8, 0)) == 0

    def test_gap_stops_the_count(self):
        days = {date(2024, 2, 28), date(2024, 3, 2), date(2024, 3, 3)}
        assert day_streak(days, datetime(2024, 3, 3)) == 2

    def test_empty(self):
        assert day_streak(set(), WED) == 0

    def test_from_sessions(self):
        history = [
            _session("s1", datetime(2024, 3, 1, 18, 0)),
            _session("s2", datetime(2024, 3, 2, 9, 0)),
            _session("s3", datetime(2024, 3, 3, 11, 0)),
        ]
        assert compute_stats(history, EXERCISES, datetime(2024, 3, 3, 20, 0)).day_streak == 3
        assert compute_stats(history, EXERCISES, datetime(2024, 3, 5, 8, 0)).day_streak == 0

    def test_in_progress_session_does_not_count(self):
        live = WorkoutSession(session_id="live", start_time=datetime(2024, 3, 3, 10, 0))
        history = [_session("s1", datetime(2024, 3, 2, 9, 0)), live]
        assert compute_stats(history, EXERCISES, datetime(2024, 3, 3, 20, 0)).day_streak == 1


# ---------------------------------------------------------------------------
# Week goal and weekend streaks
# ---------------------------------------------------------------------------


class TestWeekStreaks:
    def test_week_goal_streak_three_three_two(self):
        """3 sessions in W, 3 in W-1, 2 in W-2 → streak 2."""
        starts = [
            # W
            datetime(2024, 3, 4, 18), datetime(2024, 3, 5, 18), datetime(2024, 3, 6, 8),
            # W-1
            datetime(2024, 2, 26, 18), datetime(2024, 2, 28, 18), datetime(2024, 3, 1, 18),
            # W-2
            datetime(2024, 2, 20, 18), datetime(2024, 2, 22, 18),
        ]
        history = [_session(f"s{i}", s) for i, s in enumerate(starts)]
        stats = compute_stats(history, EXERCISES, WED)
        assert stats.week_goal_streak == 2
        assert stats.week_goal_count == 2

    def test_week_streak_counts_from_previous_week(self):
        weeks = {date(2024, 2, 26), date(2024, 2, 19)}
        assert week_streak(weeks, WED) == 2

    def test_week_streak_broken_two_weeks_back(self):
        assert week_streak({date(2024, 2, 19)}, WED) == 0

    def test_weekend_streak(self):
        """Sat 03-02 (W-1), Sun 02-25 (W-2), Sat 02-10 (W-4) → 2."""
        history = [
            _session("sat", datetime(2024, 3, 2, 10)),
            _session("sun", datetime(2024, 2, 25, 10)),
            _session("old", datetime(2024, 2, 10, 10)),
            _session("weekday", datetime(2024, 2, 14, 10)),
        ]
        assert compute_stats(history, EXERCISES, WED).weekend_streak_weeks == 2


# ---------------------------------------------------------------------------
# Weekly muscle volume
# ---------------------------------------------------------------------------


class TestWeeklyVolume:
    def test_sets_for_week_counts_completed_sets_only(self):
        session = _session("s1", datetime(2024, 3, 5, 18), {"bench": 2})
        session.completed_exercises[0].sets.append(
            CompletedSet(reps=10, weight_kg=40.0, completed=False)
        )
        assert sets_for_week([session], 0, EXERCISES, WED) == {"chest": 2}
        assert sets_for_week([session], -1, EXERCISES, WED) == {}

    def test_unmapped_target_excluded(self):
        session = _session("s1", datetime(2024, 3, 5, 18), {"walk": 3, "squat": 1})
        assert sets_for_week([session], 0, EXERCISES, WED) == {"quads": 1}

    def test_rolling_history_oldest_first_with_zones(self):
        history = [
            _session("s1", datetime(2024, 3, 5, 18), {"bench": 12}),
            _session("s2", datetime(2024, 2, 27, 18), {"bench": 4}),
        ]
        rolling = rolling_muscle_history(history, EXERCISES, 3, WED)

        assert [w.week_offset for w in rolling] == [-2, -1, 0]
        assert [w.week_start for w in rolling] == [
            date(2024, 2, 19), date(2024, 2, 26), date(2024, 3, 4)
        ]
        assert rolling[0].sets == {}
        assert rolling[1].zones == {"chest": "below_mv"}
        assert rolling[2].zones == {"chest": "mev_mav"}
        assert rolling[2].total_sets == 12

    def test_optimal_volume_weeks(self):
        weeks = [
            WeekVolume(0, date(2024, 3, 4), {"chest": 12}, {"chest": "mev_mav"}),
            WeekVolume(-1, date(2024, 2, 26), {"chest": 24}, {"chest": "above_mrv"}),
            WeekVolume(-2, date(2024, 2, 19), {"chest": 10, "quads": 10},
                       {"chest": "mev_mav", "quads": "mev_mav"}),
        ]
        assert optimal_volume_weeks(weeks) == {"chest": 2, "quads": 1}

    def test_optimal_volume_weeks_composite_counts_week_once(self):
        weeks = [
            WeekVolume(0, date(2024, 3, 4), {"upper back": 6, "lats": 10},
                       {"upper back": "mev_mav", "lats": "mev_mav"}),
            WeekVolume(-1, date(2024, 2, 26), {"lats": 4}, {"lats": "below_mv"}),
        ]
        result = optimal_volume_weeks(weeks)
        assert result["back"] == 1
        assert result["back"] <= len(weeks)


# ---------------------------------------------------------------------------
# Deload detection
# ---------------------------------------------------------------------------


class TestDeload:
    def test_deload_below_sixty_percent(self):
        """Baseline mean 20, current 8 < 12 → 1."""
        assert count_deload_weeks([20, 20, 8]) == 1

    def test_exactly_sixty_percent_is_not_deload(self):
        assert count_deload_weeks([20, 20, 12]) == 0

    def test_empty_week_is_not_deload(self):
        assert count_deload_weeks([20, 20, 0]) == 0

    def test_baseline_weeks_never_counted(self):
        assert count_deload_weeks([5, 1]) == 0

    def test_uneven_baseline(self):
        """Baseline (10 + 30) / 2 = 20; 11 < 12 → 1."""
        assert count_deload_weeks([10, 30, 11]) == 1

    def test_from_sessions(self):
        history = [
            _session("w2", datetime(2024, 2, 20, 18), {"bench": 20}),
            _session("w1", datetime(2024, 2, 27, 18), {"bench": 20}),
            _session("w0", datetime(2024, 3, 5, 18), {"bench": 8}),
        ]
        assert compute_stats(history, EXERCISES, WED).deload_weeks == 1


def _above(offset: int, **sets: int) -> WeekVolume:
    muscles = {m.replace("_", " "): n for m, n in sets.items()}
    zones = {m: get_volume_zone(n, VOLUME_LANDMARKS[m]) for m, n in muscles.items()}
    return WeekVolume(offset, date(2024, 3, 4) + timedelta(weeks=offset), muscles, zones)


class TestOverreaching:
    def test_three_and_four_week_runs_flagged(self):
        """Chest over MRV (22) for 3 weeks, quads (20) for 4, lats (20) for 2."""
        weeks = [
            _above(-3, chest=10, quads=25, lats=10),
            _above(-2, chest=23, quads=25, lats=10),
            _above(-1, chest=24, quads=25, lats=21),
            _above(0, chest=26, quads=21, lats=21),
        ]
        flagged = overreaching_muscles(weeks)

        assert [(m.muscle, m.weeks_above_mrv) for m in flagged] == [("quads", 4), ("chest", 3)]
        assert flagged[1].current_sets == 26
        assert flagged[1].mrv == 22
        assert deload_severity(flagged) == "urgent"

    def test_run_must_reach_current_week(self):
        weeks = [
            _above(-3, chest=30),
            _above(-2, chest=30),
            _above(-1, chest=30),
            _above(0, chest=12),
        ]
        assert overreaching_muscles(weeks) == []
        assert deload_severity([]) == "none"

    def test_only_recent_weeks_inspected(self):
        """Six weeks above MRV still report at most four."""
        weeks = [_above(offset, chest=30) for offset in range(-5, 1)]
        (chest,) = overreaching_muscles(weeks)
        assert chest.weeks_above_mrv == 4

    def test_warning_at_three_weeks(self):
        weeks = [_above(-3, chest=12)] + [_above(o, chest=30) for o in (-2, -1, 0)]
        assert deload_severity(overreaching_muscles(weeks)) == "warning"


# ---------------------------------------------------------------------------
# Balance, frequency, variety, recency
# ---------------------------------------------------------------------------


class TestBalancedDays:
    def test_balanced_span_in_days(self):
        """8/8/8 then 1/1/1 → total 27, each share 1/3; span 50 days."""
        now = datetime(2024, 6, 1, 12, 0)
        history = [
            _session("a", now - timedelta(days=60), {"bench": 8, "row": 8, "squat": 8}),
            _session("b", now - timedelta(days=10), {"bench": 1, "row": 1, "squat": 1}),
        ]
        assert balanced_days(history, EXERCISES, now) == 50

    def test_partial_day_rounds_up(self):
        now = datetime(2024, 6, 1, 12, 0)
        history = [
            _session("a", now - timedelta(days=30), {"bench": 8, "row": 8, "squat": 8}),
            _session("b", now - timedelta(days=20, hours=12), {"bench": 1}),
        ]
        # 9/8/8 of 25 → 0.36/0.32/0.32; span 9.5 days → 10
        assert balanced_days(history, EXERCISES, now) == 10

    def test_missing_pull_bucket(self):
        now = datetime(2024, 6, 1)
        history = [_session("a", now - timedelta(days=5), {"bench": 12, "squat": 12})]
        assert balanced_days(history, EXERCISES, now) == 0

    def test_total_must_exceed_floor(self):
        now = datetime(2024, 6, 1)
        history = [
            _session("a", now - timedelta(days=20), {"bench": 6, "row": 7, "squat": 7}),
            _session("b", now - timedelta(days=5)),
        ]
        assert balanced_days(history, EXERCISES, now) == 0

    def test_sessions_outside_window_ignored(self):
        now = datetime(2024, 6, 1)
        history = [
            _session("old", now - timedelta(days=120), {"bench": 30, "row": 30, "squat": 30}),
        ]
        assert balanced_days(history, EXERCISES, now) == 0


class TestFrequencyStreak:
    def test_two_full_weeks(self):
        history = [
            _session("w0a", datetime(2024, 3, 4, 18), dict.fromkeys(FULL_BODY, 1)),
            _session("w0b", datetime(2024, 3, 6, 8), dict.fromkeys(FULL_BODY, 1)),
            _session("w1a", datetime(2024, 2, 27, 18), dict.fromkeys(FULL_BODY, 1)),
            _session("w1b", datetime(2024, 2, 29, 18), dict.fromkeys(FULL_BODY, 1)),
        ]
        assert frequency_streak(history, EXERCISES, WED) == 2

    def test_current_week_short_stops_at_zero(self):
        history = [
            _session("w0a", datetime(2024, 3, 4, 18), dict.fromkeys(FULL_BODY, 1)),
            _session("w1a", datetime(2024, 2, 27, 18), dict.fromkeys(FULL_BODY, 1)),
            _session("w1b", datetime(2024, 2, 29, 18), dict.fromkeys(FULL_BODY, 1)),
        ]
        assert frequency_streak(history, EXERCISES, WED) == 0

    def test_one_missing_major_muscle(self):
        no_glutes = dict.fromkeys(FULL_BODY[:-1], 1)
        history = [
            _session("a", datetime(2024, 3, 4, 18), no_glutes),
            _session("b", datetime(2024, 3, 5, 18), no_glutes),
        ]
        assert frequency_streak(history, EXERCISES, WED) == 0


class TestVariety:
    def test_varied_weeks_streak(self):
        weeks = {
            date(2024, 3, 4): {"a", "b", "c"},
            date(2024, 2, 26): {"d", "e", "f"},
            date(2024, 2, 19): {"a", "b", "c"},
            date(2024, 2, 12): {"a", "b", "c"},
        }
        assert varied_weeks_streak(weeks) == 2

    def test_overlap_at_threshold_breaks(self):
        """7 of 10 shared → overlap 0.70, not strictly below."""
        this_week = set("abcdefghij")
        prev_week = set("abcdefg") | {"x", "y", "z"}
        weeks = {date(2024, 3, 4): this_week, date(2024, 2, 26): prev_week}
        assert varied_weeks_streak(weeks) == 0

    def test_single_week(self):
        assert varied_weeks_streak({date(2024, 3, 4): {"a"}}) == 0

    def test_recent_muscles_window(self):
        history = [
            _session("old", WED - timedelta(days=40), {"squat": 3}),
            _session("new", WED - timedelta(days=5), {"bench": 3, "walk": 2}),
        ]
        assert recent_muscles(history, EXERCISES, WED) == {"chest"}


@pytest.mark.parametrize(
    "sets, expected",
    [(0, "below_mv"), (9, "mv_mev"), (10, "mev_mav"), (20, "mev_mav"), (22, "mav_mrv"), (23, "above_mrv")],
)
def test_chest_zone_boundaries(sets, expected):
    assert get_volume_zone(sets, VOLUME_LANDMARKS["chest"]) == expected


def test_zones_are_ordered_and_styled():
    landmark = VOLUME_LANDMARKS["chest"]
    zones = [get_volume_zone(s, landmark) for s in (0, 8, 12, 21, 30)]
    assert zones == list(VOLUME_ZONES)
    assert set(ZONE_STYLES) == set(VOLUME_ZONES)
