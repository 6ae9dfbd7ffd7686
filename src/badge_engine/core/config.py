"""
Configuration constants for the badge evaluation engine.

All adjustable thresholds are centralized here for easy tuning.
"""

from typing import Final

# =============================================================================
# WEEK GOAL / STREAKS
# =============================================================================

WEEK_GOAL_SESSIONS: Final[int] = 3  # Ended sessions needed for a week to qualify
WEEKEND_DAYS: Final[frozenset[int]] = frozenset({5, 6})  # date.weekday(): Sat, Sun

# =============================================================================
# ROLLING WINDOWS
# =============================================================================

ROLLING_LOOKBACK_WEEKS: Final[int] = 24  # Longest rolling muscle-volume history
RECENT_MUSCLES_DAYS: Final[int] = 30  # Window for "all muscles trained"

# =============================================================================
# BALANCED TRAINING (push / pull / legs)
# =============================================================================

BALANCE_WINDOW_DAYS: Final[int] = 90
BALANCE_MIN_TOTAL_SETS: Final[int] = 20  # Total must exceed this floor
BALANCE_SHARE_MIN: Final[float] = 0.22
BALANCE_SHARE_MAX: Final[float] = 0.45

PUSH_MUSCLES: Final[tuple[str, ...]] = ("chest", "shoulders", "triceps")
PULL_MUSCLES: Final[tuple[str, ...]] = ("upper back", "lats", "biceps")
LEG_MUSCLES: Final[tuple[str, ...]] = ("quads", "hamstrings", "glutes", "calves")

# =============================================================================
# DELOAD DETECTION
# =============================================================================

DELOAD_RATIO: Final[float] = 0.60  # Week total below this fraction of the baseline
DELOAD_BASELINE_WEEKS: Final[int] = 2  # Preceding weeks averaged into the baseline

# Overreaching: a muscle above MRV for several consecutive weeks needs a deload
OVERREACH_CHECK_WEEKS: Final[int] = 4  # Most recent weeks inspected
OVERREACH_ALERT_WEEKS: Final[int] = 3  # Consecutive weeks above MRV to flag
OVERREACH_URGENT_WEEKS: Final[int] = 4

# =============================================================================
# FREQUENCY (every major muscle twice a week)
# =============================================================================

MAJOR_MUSCLES: Final[tuple[str, ...]] = (
    "chest",
    "lats",
    "shoulders",
    "quads",
    "hamstrings",
    "glutes",
)
FREQUENCY_MIN_SESSIONS: Final[int] = 2

# =============================================================================
# VARIETY
# =============================================================================

VARIED_WEEK_MAX_OVERLAP: Final[float] = 0.70  # Overlap must stay strictly below

# =============================================================================
# EQUIPMENT
# =============================================================================

BODYWEIGHT_EQUIPMENT: Final[str] = "body weight"

# =============================================================================
# CONDITION FAMILIES
# =============================================================================

# Social and AI conditions need a backend; they never unlock locally.
DEFERRED_CONDITIONS: Final[frozenset[str]] = frozenset(
    {
        "friends_count",
        "reactions_given",
        "posts_count",
        "reactions_received",
        "ai_recommendations",
        "checkins_count",
        "ai_goals_achieved",
    }
)

# Conditions whose value is 0 or 1; their target is always 1.
BOOLEAN_CONDITIONS: Final[frozenset[str]] = frozenset(
    {
        "account_created_before",
        "workout_hour_before",
        "workout_hour_after",
        "workout_date",
    }
)

META_CONDITION: Final[str] = "badges_unlocked"

BADGE_TIERS: Final[tuple[str, ...]] = ("bronze", "silver", "gold", "platinum")
