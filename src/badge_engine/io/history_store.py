"""
JSONL-based history storage for workout sessions and unlocked badges.

Handles reading, writing, and managing the history file and the unlock
records kept next to it.
"""

import json
from datetime import datetime
from pathlib import Path

from ..core.engine import get_newly_unlocked_badges
from ..core.models import Badge, Exercise, UnlockedBadge, WorkoutSession
from .serializers import (
    ValidationError,
    dict_to_session,
    dict_to_unlocked,
    session_to_json_line,
    unlocked_to_dict,
)


class HistoryStore:
    """
    Manages workout history stored in JSONL format.

    The history file contains one session object per line. A separate
    badges.json file stores unlock records keyed by badge id:

        {"vol_ton_1": {"unlocked_at": "2024-03-02T18:10:00"}}
    """

    def __init__(self, history_path: str | Path):
        """
        Initialize the history store.

        Args:
            history_path: Path to the JSONL history file
        """
        self.history_path = Path(history_path)
        self.badges_path = self.history_path.parent / "badges.json"

    def exists(self) -> bool:
        """Check if the history file exists."""
        return self.history_path.exists()

    def init(self) -> None:
        """
        Initialize empty history and badge files if they don't exist.

        Creates parent directories if needed.
        """
        self.history_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.history_path.exists():
            self.history_path.touch()
        if not self.badges_path.exists():
            self.save_unlocked({})

    def load_history(self) -> list[WorkoutSession]:
        """
        Load all sessions from the history file.

        Returns:
            List of WorkoutSession, sorted by start time

        Raises:
            FileNotFoundError: If history file doesn't exist
            ValidationError: If a line cannot be parsed
        """
        if not self.history_path.exists():
            raise FileNotFoundError(
                f"History file not found: {self.history_path}. Run 'init' first."
            )

        sessions: list[WorkoutSession] = []

        with open(self.history_path, "r") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    sessions.append(dict_to_session(json.loads(line)))
                except (ValidationError, ValueError, TypeError, AttributeError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e

        sessions.sort(key=lambda s: s.start_time)

        return sessions

    def append_session(self, session: WorkoutSession) -> None:
        """
        Add a session to the history file.

        A session with an id already present replaces the stored one;
        chronological order is kept.

        Args:
            session: Session to add
        """
        sessions = [s for s in self.load_history() if s.session_id != session.session_id]
        sessions.append(session)
        sessions.sort(key=lambda s: s.start_time)
        self._write_sessions(sessions)

    def _write_sessions(self, sessions: list[WorkoutSession]) -> None:
        """
        Write all sessions to the history file.

        Args:
            sessions: Sessions to write
        """
        with open(self.history_path, "w") as f:
            for session in sessions:
                f.write(session_to_json_line(session) + "\n")

    def load_unlocked(self) -> dict[str, UnlockedBadge]:
        """
        Load unlock records from badges.json.

        Returns:
            Records keyed by badge id (empty if the file does not exist)

        Raises:
            ValidationError: If the file is not valid
        """
        if not self.badges_path.exists():
            return {}

        try:
            with open(self.badges_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.badges_path}: {e}") from e

        return dict_to_unlocked(data)

    def save_unlocked(self, unlocked: dict[str, UnlockedBadge]) -> None:
        """
        Save unlock records to badges.json.

        Args:
            unlocked: Records keyed by badge id
        """
        self.badges_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.badges_path, "w") as f:
            json.dump(unlocked_to_dict(unlocked), f, indent=2)

    def check_badges(
        self,
        now: datetime | None = None,
        badges: list[Badge] | None = None,
        exercises: dict[str, Exercise] | None = None,
    ) -> list[str]:
        """
        Detect newly unlocked badges and persist them.

        Existing unlock timestamps are never overwritten; new ids are
        stamped with ``now``.

        Args:
            now: Reference time and unlock timestamp (default: current time)
            badges: Badge catalog (default: bundled catalog)
            exercises: Exercise catalog (default: bundled catalog)

        Returns:
            Newly unlocked ids in unlock order
        """
        moment = now if now is not None else datetime.now()
        history = self.load_history()
        unlocked = self.load_unlocked()

        new_ids = get_newly_unlocked_badges(
            history,
            frozenset(unlocked),
            badges=badges,
            exercises=exercises,
            now=moment,
        )
        if new_ids:
            stamp = moment.isoformat(timespec="seconds")
            for badge_id in new_ids:
                unlocked[badge_id] = UnlockedBadge(unlocked_at=stamp)
            self.save_unlocked(unlocked)

        return new_ids


def get_default_history_path() -> Path:
    """
    Get the default history file path.

    Returns:
        ~/.badge-engine/history.jsonl
    """
    return Path.home() / ".badge-engine" / "history.jsonl"
