"""Navigation and annotation state machine.

:func:`transition` is a pure function over :class:`ViewerState`.  The
:class:`Controller` wraps it and hands the full entry list to a
:class:`~response_viewer.store.Persister` after every mutating intent.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence, Tuple, Union

from .shared.models import CodesKind, Entry
from .store import Persister

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Retreat:
    pass


@dataclass(frozen=True)
class SetMatches:
    value: bool


@dataclass(frozen=True)
class ToggleMatches:
    pass


@dataclass(frozen=True)
class SetCode:
    tag: str
    present: bool


@dataclass(frozen=True)
class SetCodeText:
    text: str


@dataclass(frozen=True)
class Noop:
    pass


Intent = Union[Advance, Retreat, SetMatches, ToggleMatches, SetCode, SetCodeText, Noop]

KEY_INTENTS = {
    "right": Advance(),
    "left": Retreat(),
    "space": ToggleMatches(),
}


def decode_key(key_name: str) -> Intent:
    """Map a key name from a front end to an intent."""
    return KEY_INTENTS.get(str(key_name).lower(), Noop())


@dataclass(frozen=True)
class ViewerState:
    entries: Tuple[Entry, ...]
    kind: CodesKind
    idx: int = 0

    def __post_init__(self) -> None:
        if not self.entries:
            raise ValueError("ViewerState requires at least one entry")
        if not 0 <= self.idx < len(self.entries):
            raise ValueError(f"idx {self.idx} out of range for {len(self.entries)} entries")

    @classmethod
    def from_entries(cls, entries: Sequence[Entry], kind: CodesKind) -> "ViewerState":
        return cls(entries=tuple(entries), kind=kind)

    @property
    def current(self) -> Entry:
        return self.entries[self.idx]


def _replace_current(state: ViewerState, entry: Entry) -> ViewerState:
    entries = state.entries[: state.idx] + (entry,) + state.entries[state.idx + 1 :]
    return replace(state, entries=entries)


def transition(state: ViewerState, intent: Intent) -> ViewerState:
    """Return the state after ``intent``.

    Navigation keeps the same ``entries`` tuple; annotation returns a new one.
    Intents that do not apply to the dataset's codes variant are no-ops.
    """
    if isinstance(intent, Advance):
        return replace(state, idx=min(state.idx + 1, len(state.entries) - 1))
    if isinstance(intent, Retreat):
        return replace(state, idx=max(state.idx - 1, 0))

    current = state.current
    if isinstance(intent, SetMatches):
        return _replace_current(state, current.with_matches(intent.value))
    if isinstance(intent, ToggleMatches):
        return _replace_current(state, current.with_matches(not (current.matches or False)))
    if isinstance(intent, SetCode):
        if state.kind is not CodesKind.TAGS:
            LOG.warning("Ignoring tag change on a free-text dataset: %s", intent.tag)
            return state
        tags = frozenset(current.codes)
        tags = tags | {intent.tag} if intent.present else tags - {intent.tag}
        return _replace_current(state, current.with_codes(tags))
    if isinstance(intent, SetCodeText):
        if state.kind is not CodesKind.TEXT:
            LOG.warning("Ignoring codes text on a tagged dataset")
            return state
        return _replace_current(state, current.with_codes(intent.text))
    return state


class Controller:
    """Applies intents and saves the entry list after each mutation."""

    def __init__(self, state: ViewerState, persister: Persister) -> None:
        self.state = state
        self.persister = persister

    @property
    def current(self) -> Entry:
        return self.state.current

    def dispatch(self, intent: Intent) -> ViewerState:
        previous = self.state
        self.state = transition(previous, intent)
        if self.state.entries is not previous.entries:
            # PersistError propagates; the new state is kept
            self.persister.save(self.state.entries)
        return self.state
