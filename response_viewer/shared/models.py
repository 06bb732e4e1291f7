"""Dataclass records for annotatable entries and the code vocabulary.

Entries are immutable; annotation produces a new :class:`Entry` through
:meth:`Entry.with_matches` or :meth:`Entry.with_codes`.  The ``codes`` field is
a tagged variant: a ``frozenset`` of tags for controlled-vocabulary datasets or
a single string for free-text datasets (see :class:`CodesKind`).
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple, Union

Codes = Union[FrozenSet[str], str]

REQUIRED_FIELDS = ("index", "lab", "group", "response", "ratings")
MAX_INDEX = 0xFFFFFFFF
VOCABULARY_COLUMNS = ("theme", "tag", "code")


class CodesKind(str, enum.Enum):
    TAGS = "tags"
    TEXT = "text"

    def empty(self) -> Codes:
        return frozenset() if self is CodesKind.TAGS else ""


class EntryFormatError(ValueError):
    """Raised when a serialized entry does not match the entry schema."""


def _check_text(value: str, key: str) -> str:
    # lone surrogates survive json.loads but cannot be written back as UTF-8
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise EntryFormatError(f"field '{key}' is not valid Unicode text ({exc.reason})") from exc
    return value


def _require_str(payload: Mapping[str, object], key: str) -> str:
    value = payload[key]
    if not isinstance(value, str):
        raise EntryFormatError(f"field '{key}' must be a string, got {type(value).__name__}")
    return _check_text(value, key)


@dataclass(frozen=True)
class Entry:
    index: int
    lab: str
    group: str
    response: str
    ratings: Tuple[str, ...] = ()
    matches: Optional[bool] = None
    codes: Codes = frozenset()

    @property
    def kind(self) -> CodesKind:
        return CodesKind.TEXT if isinstance(self.codes, str) else CodesKind.TAGS

    def with_matches(self, value: bool) -> "Entry":
        return replace(self, matches=bool(value))

    def with_codes(self, codes: Codes) -> "Entry":
        return replace(self, codes=codes)

    @classmethod
    def from_dict(cls, payload: Mapping[str, object], kind: CodesKind) -> "Entry":
        if not isinstance(payload, Mapping):
            raise EntryFormatError(f"entry must be an object, got {type(payload).__name__}")
        missing = [key for key in REQUIRED_FIELDS if key not in payload]
        if missing:
            raise EntryFormatError(f"missing field(s): {', '.join(missing)}")

        index = payload["index"]
        # bool is an int subclass; a typed reader would reject it
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= MAX_INDEX:
            raise EntryFormatError(f"field 'index' must be an integer between 0 and {MAX_INDEX}, got {index!r}")

        ratings_raw = payload["ratings"]
        if not isinstance(ratings_raw, list) or not all(isinstance(r, str) for r in ratings_raw):
            raise EntryFormatError("field 'ratings' must be a list of strings")

        matches = payload.get("matches")
        if matches is not None and not isinstance(matches, bool):
            raise EntryFormatError(f"field 'matches' must be a boolean or null, got {matches!r}")

        return cls(
            index=index,
            lab=_require_str(payload, "lab"),
            group=_require_str(payload, "group"),
            response=_require_str(payload, "response"),
            ratings=tuple(_check_text(rating, "ratings") for rating in ratings_raw),
            matches=matches,
            codes=_parse_codes(payload.get("codes"), kind),
        )

    def to_dict(self) -> Dict[str, object]:
        codes: object = self.codes if isinstance(self.codes, str) else sorted(self.codes)
        return {
            "index": self.index,
            "lab": self.lab,
            "group": self.group,
            "response": self.response,
            "ratings": list(self.ratings),
            "matches": self.matches,
            "codes": codes,
        }


def _parse_codes(value: object, kind: CodesKind) -> Codes:
    if value is None:
        return kind.empty()
    if kind is CodesKind.TEXT:
        if not isinstance(value, str):
            raise EntryFormatError("field 'codes' must be a string for free-text datasets")
        return _check_text(value, "codes")
    if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
        raise EntryFormatError("field 'codes' must be a list of strings for tagged datasets")
    return frozenset(_check_text(tag, "codes") for tag in value)


@dataclass(frozen=True)
class Code:
    theme: str
    tag: str
    code: str

    @classmethod
    def from_row(cls, row: Mapping[str, Optional[str]]) -> "Code":
        values = []
        for column in VOCABULARY_COLUMNS:
            value = row.get(column)
            if value is None:
                raise KeyError(column)
            values.append(value)
        return cls(*values)


@dataclass
class Vocabulary:
    codes: List[Code] = field(default_factory=list)
    themes: List[str] = field(init=False)

    def __post_init__(self) -> None:
        self.themes = sorted({code.theme for code in self.codes})

    def __len__(self) -> int:
        return len(self.codes)

    def codes_for_theme(self, theme: str) -> List[Code]:
        return [code for code in self.codes if code.theme == theme]

    def label_for(self, tag: str) -> Optional[str]:
        for code in self.codes:
            if code.tag == tag:
                return code.code
        return None

    def tags(self) -> Sequence[str]:
        return [code.tag for code in self.codes]
