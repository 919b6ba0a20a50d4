"""Sparse dose log: (day, medication) -> taken. Absence means not taken."""

from datetime import date, datetime
from typing import Iterable

from src.engine.clock import as_day


def log_key(day: date | datetime | str, medication_id: str) -> str:
    return f"{as_day(day).isoformat()}|{medication_id}"


def split_key(key: str) -> tuple[date, str]:
    day, _, medication_id = key.partition("|")
    return date.fromisoformat(day), medication_id


class DoseLogStore:
    """In-memory point-in-time view of which doses were taken."""

    def __init__(self, entries: Iterable[tuple[date | str, str]] = ()):
        self._taken: set[str] = set()
        for day, medication_id in entries:
            self._taken.add(log_key(day, medication_id))

    def __len__(self) -> int:
        return len(self._taken)

    def __contains__(self, key: object) -> bool:
        return key in self._taken

    def is_taken(self, day: date | datetime | str, medication_id: str) -> bool:
        return log_key(day, medication_id) in self._taken

    def set_taken(self, day: date | datetime | str, medication_id: str, taken: bool) -> bool:
        """Insert or remove the fact. Returns True if the log changed."""
        key = log_key(day, medication_id)
        if taken:
            if key in self._taken:
                return False
            self._taken.add(key)
            return True
        if key not in self._taken:
            return False
        self._taken.discard(key)
        return True

    def toggle(self, day: date | datetime | str, medication_id: str) -> bool:
        """Flip the fact and return the new state."""
        taken = not self.is_taken(day, medication_id)
        self.set_taken(day, medication_id, taken)
        return taken

    def taken_on(self, day: date | datetime | str) -> set[str]:
        prefix = f"{as_day(day).isoformat()}|"
        return {key[len(prefix):] for key in self._taken if key.startswith(prefix)}

    def remove_medication(self, medication_id: str) -> int:
        doomed = {key for key in self._taken if split_key(key)[1] == medication_id}
        self._taken -= doomed
        return len(doomed)

    def keys(self) -> list[str]:
        return sorted(self._taken)

    def entries(self) -> list[tuple[date, str]]:
        return [split_key(key) for key in self.keys()]

    def copy(self) -> "DoseLogStore":
        clone = DoseLogStore()
        clone._taken = set(self._taken)
        return clone
