"""Resolve positional paths and open an annotation session."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .config import ViewerConfig
from .controller import Controller, ViewerState
from .shared.models import CodesKind, Vocabulary
from .store import JsonFilePersister, load_entries, load_vocabulary

USAGE = "ENTRIES [VOCABULARY] OUTPUT"


class UsageError(ValueError):
    """Wrong number of positional paths."""


@dataclass
class SessionPaths:
    entries: Path
    output: Path
    vocabulary: Optional[Path] = None

    @property
    def kind(self) -> CodesKind:
        return CodesKind.TAGS if self.vocabulary is not None else CodesKind.TEXT


def build_session_paths(paths: Sequence[Path | str]) -> SessionPaths:
    """Three paths select tagged coding, two select free-text coding."""
    resolved = [Path(p) for p in paths]
    if len(resolved) == 3:
        return SessionPaths(entries=resolved[0], vocabulary=resolved[1], output=resolved[2])
    if len(resolved) == 2:
        return SessionPaths(entries=resolved[0], output=resolved[1])
    raise UsageError(f"expected 2 or 3 paths ({USAGE}), got {len(resolved)}")


@dataclass
class Session:
    paths: SessionPaths
    controller: Controller
    vocabulary: Optional[Vocabulary]
    config: ViewerConfig


def open_session(paths: SessionPaths, config: Optional[ViewerConfig] = None) -> Session:
    """Load entries (and the vocabulary, when given); raises ``StoreError`` on failure."""
    cfg = config or ViewerConfig()
    entries = load_entries(paths.entries, paths.kind)
    vocabulary = None
    if paths.vocabulary is not None:
        vocabulary = load_vocabulary(paths.vocabulary, strict=cfg.strict_vocabulary)
    persister = JsonFilePersister(paths.output, pretty=cfg.pretty)
    controller = Controller(ViewerState.from_entries(entries, paths.kind), persister)
    return Session(paths=paths, controller=controller, vocabulary=vocabulary, config=cfg)
