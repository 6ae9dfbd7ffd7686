"""
Weekly volume landmarks per muscle group.

MV  = Maintenance Volume (keep what you have)
MEV = Minimum Effective Volume (start growing)
MAV = Maximum Adaptive Volume (optimal growth band, low..high)
MRV = Maximum Recoverable Volume (overreaching above this)

Values are completed hard sets per week.
"""

from dataclasses import dataclass
from typing import Final, Literal

VolumeZone = Literal["below_mv", "mv_mev", "mev_mav", "mav_mrv", "above_mrv"]

VOLUME_ZONES: Final[tuple[VolumeZone, ...]] = (
    "below_mv",
    "mv_mev",
    "mev_mav",
    "mav_mrv",
    "above_mrv",
)


@dataclass(frozen=True)
class VolumeLandmark:
    """Ascending weekly set thresholds for one muscle."""

    mv: int
    mev: int
    mav_low: int
    mav_high: int
    mrv: int

    def __post_init__(self) -> None:
        values = (self.mv, self.mev, self.mav_low, self.mav_high, self.mrv)
        if any(b < a for a, b in zip(values, values[1:])):
            raise ValueError(f"Landmarks must be ascending, got {values}")


VOLUME_LANDMARKS: Final[dict[str, VolumeLandmark]] = {
    "chest":      VolumeLandmark(mv=8, mev=10, mav_low=12, mav_high=20, mrv=22),
    "upper back": VolumeLandmark(mv=4, mev=5, mav_low=6, mav_high=10, mrv=12),
    "lats":       VolumeLandmark(mv=6, mev=8, mav_low=10, mav_high=16, mrv=20),
    "lower back": VolumeLandmark(mv=2, mev=3, mav_low=4, mav_high=8, mrv=10),
    "shoulders":  VolumeLandmark(mv=6, mev=8, mav_low=16, mav_high=22, mrv=26),
    "biceps":     VolumeLandmark(mv=4, mev=6, mav_low=10, mav_high=14, mrv=20),
    "triceps":    VolumeLandmark(mv=4, mev=6, mav_low=10, mav_high=14, mrv=18),
    "forearms":   VolumeLandmark(mv=2, mev=4, mav_low=6, mav_high=10, mrv=14),
    "quads":      VolumeLandmark(mv=6, mev=8, mav_low=12, mav_high=18, mrv=20),
    "hamstrings": VolumeLandmark(mv=4, mev=6, mav_low=10, mav_high=16, mrv=20),
    "glutes":     VolumeLandmark(mv=0, mev=0, mav_low=4, mav_high=12, mrv=16),
    "calves":     VolumeLandmark(mv=4, mev=6, mav_low=8, mav_high=16, mrv=20),
    "abs":        VolumeLandmark(mv=0, mev=0, mav_low=8, mav_high=16, mrv=20),
    "obliques":   VolumeLandmark(mv=0, mev=0, mav_low=4, mav_high=10, mrv=14),
}


def get_volume_zone(sets: float, landmark: VolumeLandmark) -> VolumeZone:
    """
    Classify a weekly set count against a muscle's landmarks.

    Args:
        sets: Completed sets this week
        landmark: Thresholds for the muscle

    Returns:
        One of the five ordinal zones
    """
    if sets < landmark.mv:
        return "below_mv"
    if sets < landmark.mev:
        return "mv_mev"
    if sets <= landmark.mav_high:
        return "mev_mav"
    if sets <= landmark.mrv:
        return "mav_mrv"
    return "above_mrv"


def zone_for_muscle(muscle: str, sets: float) -> VolumeZone | None:
    """Zone for a canonical muscle, or None if it has no landmarks."""
    landmark = VOLUME_LANDMARKS.get(muscle)
    if landmark is None:
        return None
    return get_volume_zone(sets, landmark)
