"""
Badge resolution.

Two entry points share one stats computation per call:

- evaluate_all_badges: progress of every badge, for display
- get_newly_unlocked_badges: ids that cross their threshold now, for
  celebration triggers and persistence

Neither mutates its inputs.
"""

from datetime import datetime
from typing import AbstractSet, Iterable, Mapping, Sequence

from .conditions import evaluate_condition, is_deferred, is_meta, target_value
from .models import Badge, BadgeProgress, Exercise, UnlockedBadge, WorkoutSession
from .stats import BadgeStats, compute_stats


def _default_badges() -> Sequence[Badge]:
    from .catalog import BADGE_CATALOG

    return BADGE_CATALOG


def progress_percent(current: float, target: float, unlocked: bool) -> float:
    """
    Progress as a percentage clamped to [0, 100].

    A non-positive target has no meaningful ratio: 100 when unlocked,
    otherwise 0.
    """
    if target <= 0:
        return 100.0 if unlocked else 0.0
    return max(0.0, min(100.0, current / target * 100))


def _progress(badge: Badge, stats: BadgeStats, unlocked_ids: AbstractSet[str]) -> BadgeProgress:
    target = target_value(badge)
    current = evaluate_condition(badge, stats, unlocked_ids)
    unlocked = current >= target
    return BadgeProgress(
        badge=badge,
        is_unlocked=unlocked,
        current_value=current,
        target_value=target,
        progress_percent=progress_percent(current, target, unlocked),
    )


def evaluate_all_badges(
    history: Iterable[WorkoutSession],
    unlocked_badges: Mapping[str, UnlockedBadge],
    *,
    badges: Sequence[Badge] | None = None,
    exercises: Mapping[str, Exercise] | None = None,
    now: datetime | None = None,
) -> list[BadgeProgress]:
    """
    Full progress for every badge in catalog order.

    Already unlocked badges report 100% with their persisted timestamp and
    are not re-evaluated. Deferred badges report 0% without evaluation.

    Args:
        history: Session history in any order
        unlocked_badges: Persisted unlocks keyed by badge id
        badges: Badge catalog (default: bundled catalog)
        exercises: Exercise catalog (default: bundled catalog)
        now: Reference time (default: current local time)

    Returns:
        One BadgeProgress per badge
    """
    catalog = badges if badges is not None else _default_badges()
    stats = compute_stats(history, exercises, now)
    unlocked_ids = frozenset(unlocked_badges)

    result: list[BadgeProgress] = []
    for badge in catalog:
        target = target_value(badge)
        record = unlocked_badges.get(badge.badge_id)

        if record is not None:
            result.append(
                BadgeProgress(
                    badge=badge,
                    is_unlocked=True,
                    current_value=target,
                    target_value=target,
                    progress_percent=100.0,
                    unlocked_at=record.unlocked_at,
                )
            )
        elif is_deferred(badge):
            result.append(
                BadgeProgress(
                    badge=badge,
                    is_unlocked=False,
                    current_value=0.0,
                    target_value=target,
                    progress_percent=0.0,
                )
            )
        else:
            result.append(_progress(badge, stats, unlocked_ids))

    return result


def get_newly_unlocked_badges(
    history: Iterable[WorkoutSession],
    unlocked_ids: AbstractSet[str],
    *,
    badges: Sequence[Badge] | None = None,
    exercises: Mapping[str, Exercise] | None = None,
    now: datetime | None = None,
) -> list[str]:
    """
    Ids of badges that qualify now but are not yet unlocked.

    Ordinary badges are resolved first against a working set that grows as
    they unlock. Meta badges are then resolved against that set, repeating
    the meta pass until it adds nothing so badges that depend on other meta
    badges also unlock in the same call.

    Args:
        history: Session history in any order
        unlocked_ids: Ids already unlocked (not mutated)
        badges: Badge catalog (default: bundled catalog)
        exercises: Exercise catalog (default: bundled catalog)
        now: Reference time (default: current local time)

    Returns:
        Newly unlocked ids in unlock order
    """
    catalog = badges if badges is not None else _default_badges()
    stats = compute_stats(history, exercises, now)
    working = set(unlocked_ids)
    newly: list[str] = []

    def _try_unlock(badge: Badge) -> bool:
        if badge.badge_id in working:
            return False
        if evaluate_condition(badge, stats, working) >= target_value(badge):
            working.add(badge.badge_id)
            newly.append(badge.badge_id)
            return True
        return False

    candidates = [b for b in catalog if not is_deferred(b)]

    # Pass 1: ordinary conditions
    for badge in candidates:
        if not is_meta(badge):
            _try_unlock(badge)

    # Pass 2: meta conditions, to a fixed point
    meta_badges = [b for b in candidates if is_meta(b)]
    for _ in range(len(meta_badges)):
        added = False
        for badge in meta_badges:
            added = _try_unlock(badge) or added
        if not added:
            break

    return newly
