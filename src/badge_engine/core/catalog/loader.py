"""
YAML → catalog loader.

Loads the badge catalog and the exercise catalog from YAML files bundled in
``src/badge_engine/data/``. Each file is a mapping keyed by id, so a user
override file can change any field of one entry by listing only that key.

User overrides: place ``badges.yaml`` or ``exercises.yaml`` in
``~/.badge-engine/``. The user file is deep-merged over the bundled one;
ids absent from the bundled file are added as new entries.

Usage (internal, called by registry.py):
    from .loader import load_badges_from_yaml, load_exercises_from_yaml
    badges = load_badges_from_yaml()
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import BADGE_TIERS
from ..models import Badge, Exercise

_REQUIRED_BADGE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "category",
        "tier",
        "condition_type",
        "condition_value",
    }
)

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "target",
        "equipment",
    }
)


def badge_from_dict(badge_id: str, d: dict) -> Badge:
    """Convert a raw dict (from YAML) to a Badge.

    Raises ValueError if any required field is absent or invalid.
    """
    missing = _REQUIRED_BADGE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Badge missing fields: {sorted(missing)}")
    if d["tier"] not in BADGE_TIERS:
        raise ValueError(f"invalid tier {d['tier']!r}")

    extra_raw = d.get("condition_extra")
    if extra_raw is not None and not isinstance(extra_raw, dict):
        raise ValueError("condition_extra must be a mapping")
    extra: dict[str, Any] | None = None
    if extra_raw:
        extra = {
            k: list(v) if isinstance(v, (list, tuple)) else v
            for k, v in extra_raw.items()
        }

    return Badge(
        badge_id=str(badge_id),
        name=str(d["name"]),
        category=str(d["category"]),
        tier=d["tier"],
        condition_type=str(d["condition_type"]),
        condition_value=float(d["condition_value"]),
        condition_extra=extra,
        points=int(d.get("points", 0)),
        description=str(d.get("description", "")),
        is_secret=bool(d.get("is_secret", False)),
    )


def exercise_from_dict(exercise_id: str, d: dict) -> Exercise:
    """Convert a raw dict (from YAML) to an Exercise.

    Raises ValueError if any required field is absent.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Exercise missing fields: {sorted(missing)}")
    return Exercise(
        exercise_id=str(exercise_id),
        name=str(d["name"]),
        target=str(d["target"]),
        equipment=str(d["equipment"]),
        body_part=str(d.get("body_part", "")),
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML mapping; warn and return {} if the file cannot be parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"badge-engine: ignoring {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_data_dir() -> Path:
    """Return the bundled data/ directory."""
    # loader.py lives at src/badge_engine/core/catalog/loader.py
    # three levels up → src/badge_engine/
    return Path(__file__).parent.parent.parent / "data"


def get_user_data_dir() -> Path | None:
    """Return ~/.badge-engine/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".badge-engine"
    return p if p.is_dir() else None


def _load_merged(filename: str, data_dir: Path | None, user_dir: Path | None) -> dict:
    raw: dict = {}
    if data_dir is not None and (data_dir / filename).exists():
        raw = _load_yaml_file(data_dir / filename)
    if user_dir is not None and (user_dir / filename).exists():
        user_raw = _load_yaml_file(user_dir / filename)
        if user_raw:
            raw = _deep_merge(raw, user_raw)
    return raw


def load_badges_from_yaml(
    data_dir: Path | None = None,
    user_dir: Path | None = None,
) -> list[Badge]:
    """Return the badge catalog in file order.

    Entries that fail validation are skipped with a warning.

    Args:
        data_dir: Directory holding badges.yaml (default: bundled data/)
        user_dir: Override directory (default: ~/.badge-engine/ if present)
    """
    if data_dir is None:
        data_dir = get_bundled_data_dir()
    if user_dir is None:
        user_dir = get_user_data_dir()

    badges: list[Badge] = []
    for badge_id, entry in _load_merged("badges.yaml", data_dir, user_dir).items():
        if not isinstance(entry, dict):
            warnings.warn(f"badge-engine: skipping badge '{badge_id}': not a mapping", stacklevel=2)
            continue
        try:
            badges.append(badge_from_dict(badge_id, entry))
        except (ValueError, TypeError) as exc:
            warnings.warn(f"badge-engine: skipping badge '{badge_id}': {exc}", stacklevel=2)
    return badges


def load_exercises_from_yaml(
    data_dir: Path | None = None,
    user_dir: Path | None = None,
) -> dict[str, Exercise]:
    """Return {exercise_id: Exercise} from exercises.yaml.

    Entries that fail validation are skipped with a warning.
    """
    if data_dir is None:
        data_dir = get_bundled_data_dir()
    if user_dir is None:
        user_dir = get_user_data_dir()

    result: dict[str, Exercise] = {}
    for exercise_id, entry in _load_merged("exercises.yaml", data_dir, user_dir).items():
        if not isinstance(entry, dict):
            warnings.warn(
                f"badge-engine: skipping exercise '{exercise_id}': not a mapping", stacklevel=2
            )
            continue
        try:
            ex = exercise_from_dict(exercise_id, entry)
        except ValueError as exc:
            warnings.warn(f"badge-engine: skipping exercise '{exercise_id}': {exc}", stacklevel=2)
            continue
        result[ex.exercise_id] = ex
    return result
