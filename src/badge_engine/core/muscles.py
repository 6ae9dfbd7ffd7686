"""
Muscle resolution.

Maps an exercise's free-text target to a canonical muscle key (the keys of
VOLUME_LANDMARKS) and expands composite keys such as "back" into the sum of
their canonical members. Unmapped targets resolve to None and are left out
of muscle statistics.
"""

from typing import Final, Mapping

TARGET_TO_MUSCLE: Final[dict[str, str]] = {
    # Chest
    "pecs": "chest",
    "upper chest": "chest",
    "lower chest": "chest",
    # Back
    "lats": "lats",
    "upper back": "upper back",
    "middle back": "upper back",
    "lower back": "lower back",
    "rear delts": "shoulders",
    # Shoulders
    "delts": "shoulders",
    "front delts": "shoulders",
    "lateral delts": "shoulders",
    "traps": "shoulders",
    # Arms
    "biceps": "biceps",
    "brachialis": "biceps",
    "triceps": "triceps",
    "forearm flexors": "forearms",
    "forearm extensors": "forearms",
    "brachioradialis": "forearms",
    "grip": "forearms",
    # Legs
    "quads": "quads",
    "hamstrings": "hamstrings",
    "glutes": "glutes",
    "calves": "calves",
    "gastrocnemius": "calves",
    "soleus": "calves",
    # Core
    "abs": "abs",
    "lower abs": "abs",
    "core stability": "abs",
    "obliques": "obliques",
}

MUSCLE_COMPOSITES: Final[dict[str, tuple[str, ...]]] = {
    "back": ("upper back", "lats", "lower back"),
}

MUSCLE_LABELS: Final[dict[str, str]] = {
    "chest": "Chest",
    "upper back": "Upper back",
    "lats": "Lats",
    "lower back": "Lower back",
    "shoulders": "Shoulders",
    "biceps": "Biceps",
    "triceps": "Triceps",
    "forearms": "Forearms",
    "quads": "Quads",
    "hamstrings": "Hamstrings",
    "glutes": "Glutes",
    "calves": "Calves",
    "abs": "Abs",
    "obliques": "Obliques",
}

COMPOSITE_LABELS: Final[dict[str, str]] = {
    "back": "Back",
}


def muscle_for_target(target: str | None) -> str | None:
    """Canonical muscle key for an exercise target, or None if unmapped."""
    if not target:
        return None
    return TARGET_TO_MUSCLE.get(target.strip().lower())


def expand_muscle(muscle: str) -> tuple[str, ...]:
    """Canonical members of a muscle key (the key itself if not composite)."""
    return MUSCLE_COMPOSITES.get(muscle, (muscle,))


def resolve_muscle_value(muscle: str, data: Mapping[str, float]) -> float:
    """
    Contribution of a muscle key to an aggregate map.

    Composite keys sum their members; unknown keys yield 0.

    Args:
        muscle: Canonical or composite muscle key
        data: Aggregate keyed by canonical muscle (sets, volume, ...)

    Returns:
        Aggregated value
    """
    return sum(data.get(m, 0) for m in expand_muscle(muscle))


def muscle_label(muscle: str) -> str:
    """
    Display label for any muscle key.

    Falls back to the composite labels, then to the capitalized key, so
    keys missing from the static tables still get a readable label.
    """
    if muscle in MUSCLE_LABELS:
        return MUSCLE_LABELS[muscle]
    if muscle in COMPOSITE_LABELS:
        return COMPOSITE_LABELS[muscle]
    return muscle.replace("_", " ").strip().capitalize() or "?"
