"""
Badge and exercise registries.

Both catalogs are loaded from YAML at import time. If either comes back
empty a RuntimeError is raised: the engine cannot evaluate anything
without reference data. The registries are read-only after import.
"""

from ..models import Badge, Exercise


def _build_badge_catalog() -> tuple[Badge, ...]:
    from .loader import load_badges_from_yaml

    loaded = load_badges_from_yaml()
    if not loaded:
        raise RuntimeError(
            "badge-engine: no badge definitions could be loaded from YAML. "
            "Check that src/badge_engine/data/badges.yaml is present and valid."
        )
    return tuple(loaded)


def _build_exercise_catalog() -> dict[str, Exercise]:
    from .loader import load_exercises_from_yaml

    loaded = load_exercises_from_yaml()
    if not loaded:
        raise RuntimeError(
            "badge-engine: no exercise definitions could be loaded from YAML. "
            "Check that src/badge_engine/data/exercises.yaml is present and valid."
        )
    return loaded


BADGE_CATALOG: tuple[Badge, ...] = _build_badge_catalog()
EXERCISE_CATALOG: dict[str, Exercise] = _build_exercise_catalog()


def get_badge(badge_id: str) -> Badge:
    """
    Return the Badge with the given id.

    Raises:
        ValueError: If badge_id is not in the catalog
    """
    for badge in BADGE_CATALOG:
        if badge.badge_id == badge_id:
            return badge
    raise ValueError(f"Unknown badge '{badge_id}'")


def get_exercise(exercise_id: str) -> Exercise:
    """
    Return the Exercise for the given exercise_id.

    Raises:
        ValueError: If exercise_id is not in the catalog
    """
    if exercise_id not in EXERCISE_CATALOG:
        raise ValueError(f"Unknown exercise '{exercise_id}'")
    return EXERCISE_CATALOG[exercise_id]
