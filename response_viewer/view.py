"""Front-end independent description of what to show for the current entry."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .controller import ViewerState
from .shared.models import CodesKind, Vocabulary

WINDOW_TITLE_PREFIX = "Response Viewer"
THEMES_PER_ROW = 5


@dataclass(frozen=True)
class CodeOption:
    tag: str
    label: str
    checked: bool


@dataclass(frozen=True)
class ThemeColumn:
    theme: str
    options: Tuple[CodeOption, ...]


@dataclass(frozen=True)
class EntryView:
    window_title: str
    header: str
    ratings: Tuple[str, ...]
    response: str
    matches_checked: bool
    position: str
    kind: CodesKind
    code_rows: Tuple[Tuple[ThemeColumn, ...], ...] = ()
    code_text: str = ""


def window_title(state: ViewerState) -> str:
    entry = state.current
    return f"{WINDOW_TITLE_PREFIX} - {entry.lab}, {entry.group}, #{entry.index}"


def chunk_themes(themes: List[str], per_row: int = THEMES_PER_ROW) -> List[List[str]]:
    if per_row < 1:
        raise ValueError("per_row must be positive")
    return [themes[start : start + per_row] for start in range(0, len(themes), per_row)]


def render(
    state: ViewerState,
    vocabulary: Optional[Vocabulary] = None,
    themes_per_row: int = THEMES_PER_ROW,
) -> EntryView:
    entry = state.current
    code_rows: Tuple[Tuple[ThemeColumn, ...], ...] = ()
    code_text = ""
    if state.kind is CodesKind.TAGS:
        selected = entry.codes if isinstance(entry.codes, frozenset) else frozenset()
        vocab = vocabulary or Vocabulary()
        code_rows = tuple(
            tuple(
                ThemeColumn(
                    theme=theme,
                    options=tuple(
                        CodeOption(tag=code.tag, label=code.code, checked=code.tag in selected)
                        for code in vocab.codes_for_theme(theme)
                    ),
                )
                for theme in row
            )
            for row in chunk_themes(vocab.themes, themes_per_row)
        )
    else:
        code_text = str(entry.codes)

    return EntryView(
        window_title=window_title(state),
        header=f"{entry.lab}, {entry.group}, {entry.index}",
        ratings=entry.ratings,
        response=entry.response,
        matches_checked=bool(entry.matches),
        position=f"{state.idx + 1} / {len(state.entries)}",
        kind=state.kind,
        code_rows=code_rows,
        code_text=code_text,
    )
