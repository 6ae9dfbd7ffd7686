"""
Data models for badge-engine.

Session history, badge definitions, catalog entries and the progress
records the engine emits. Timestamps are naive local datetimes: all
calendar logic (days, Monday-Sunday weeks, start hours) works on the
user's wall clock.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from .config import BADGE_TIERS

BadgeTier = Literal["bronze", "silver", "gold", "platinum"]
Side = Literal["left", "right"]


@dataclass
class CompletedSet:
    """
    A single logged set.

    Only sets with completed=True count toward volume, set totals and
    personal records, whatever reps/weight they carry.
    """

    reps: int
    weight_kg: float | None = None  # None or 0 = bodyweight
    completed: bool = True
    rir: int | None = None  # reps in reserve, 0 (failure) to 5
    side: Side | None = None  # unilateral exercises only

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.weight_kg is not None and self.weight_kg < 0:
            raise ValueError("weight_kg must be non-negative")
        if self.rir is not None and not 0 <= self.rir <= 5:
            raise ValueError(f"rir must be between 0 and 5, got {self.rir}")

    @property
    def load_kg(self) -> float:
        """External load in kg (0 for bodyweight sets)."""
        return self.weight_kg or 0.0


@dataclass
class CompletedExercise:
    """One exercise performed in a session, with its sets in order."""

    exercise_id: str
    sets: list[CompletedSet] = field(default_factory=list)

    def completed_sets(self) -> list[CompletedSet]:
        """Sets that were actually completed."""
        return [s for s in self.sets if s.completed]


@dataclass
class ReadinessCheck:
    """Pre-session self report, each score on a 1-5 scale."""

    sleep: int
    energy: int
    soreness: int

    def __post_init__(self) -> None:
        for name in ("sleep", "energy", "soreness"):
            value = getattr(self, name)
            if not 1 <= value <= 5:
                raise ValueError(f"{name} must be between 1 and 5, got {value}")


@dataclass
class SessionFeedback:
    """Post-session feedback, each score on a 1-3 scale."""

    pump: int
    soreness: int
    performance: int
    joint_pain: bool = False

    def __post_init__(self) -> None:
        for name in ("pump", "soreness", "performance"):
            value = getattr(self, name)
            if not 1 <= value <= 3:
                raise ValueError(f"{name} must be between 1 and 3, got {value}")


@dataclass
class WorkoutSession:
    """
    A workout session.

    end_time=None means the session is still in progress; such sessions
    are ignored by every statistic.
    """

    session_id: str
    start_time: datetime
    end_time: datetime | None = None
    duration_seconds: int = 0
    completed_exercises: list[CompletedExercise] = field(default_factory=list)
    workout_id: str | None = None
    workout_name: str | None = None
    readiness: ReadinessCheck | None = None
    feedback: SessionFeedback | None = None

    def __post_init__(self) -> None:
        """Validate session data."""
        if self.duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")

    @property
    def is_ended(self) -> bool:
        """True once the session has an end time."""
        return self.end_time is not None


@dataclass(frozen=True)
class Exercise:
    """
    Exercise catalog entry.

    Only target and equipment matter to the engine: target resolves to a
    canonical muscle, equipment feeds the equipment badges.
    """

    exercise_id: str
    name: str
    target: str  # free text, e.g. "pecs", "middle back"
    equipment: str  # e.g. "barbell", "body weight"
    body_part: str = ""


@dataclass(frozen=True)
class Badge:
    """
    Static badge definition from the catalog.

    condition_type selects the evaluator; condition_value is the unlock
    threshold; condition_extra carries arguments such as the muscle, the
    equipment or the list of prerequisite badge ids.
    """

    badge_id: str
    name: str
    category: str
    tier: BadgeTier
    condition_type: str
    condition_value: float
    condition_extra: dict[str, Any] | None = None
    points: int = 0
    description: str = ""
    is_secret: bool = False

    def __post_init__(self) -> None:
        """Validate badge definition."""
        if self.tier not in BADGE_TIERS:
            raise ValueError(f"Invalid tier: {self.tier}")
        if self.points < 0:
            raise ValueError("points must be non-negative")

    def extra(self, key: str) -> Any:
        """Return condition_extra[key], or None when absent."""
        if not self.condition_extra:
            return None
        return self.condition_extra.get(key)


@dataclass
class UnlockedBadge:
    """Persisted unlock record. The timestamp is never recomputed."""

    unlocked_at: str  # ISO timestamp


@dataclass
class BadgeProgress:
    """
    Progress of one badge for display.
    """

    badge: Badge
    is_unlocked: bool
    current_value: float
    target_value: float
    progress_percent: float  # 0-100
    unlocked_at: str | None = None


@dataclass(frozen=True)
class UserLevel:
    """A user level reached once total badge points pass min_points."""

    level_id: str
    name: str
    min_points: int


@dataclass
class BadgeSummary:
    """
    Aggregate view over a progress list.
    """

    total_badges: int
    total_points: int
    level: UserLevel
    next_level: UserLevel | None
    points_to_next_level: int
    available_badges: int = 0
    badges_by_tier: dict[str, int] = field(default_factory=dict)
    badges_by_category: dict[str, int] = field(default_factory=dict)
    recent_unlocks: list[BadgeProgress] = field(default_factory=list)  # newest first
    next_badge: BadgeProgress | None = None  # closest locked badge
