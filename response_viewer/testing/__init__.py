"""Test doubles for the record store."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..shared.models import Entry
from ..store import PersistError


class MemoryPersister:
    """Keeps every saved snapshot in memory instead of writing a file."""

    def __init__(self, fail_with: Optional[str] = None) -> None:
        self.snapshots: List[Tuple[Entry, ...]] = []
        self.fail_with = fail_with

    @property
    def save_count(self) -> int:
        return len(self.snapshots)

    @property
    def last(self) -> Optional[Tuple[Entry, ...]]:
        return self.snapshots[-1] if self.snapshots else None

    def save(self, entries: Sequence[Entry]) -> None:
        if self.fail_with is not None:
            raise PersistError("<memory>", self.fail_with)
        self.snapshots.append(tuple(entries))


__all__ = ["MemoryPersister"]
