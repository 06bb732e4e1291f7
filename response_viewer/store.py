"""Record store: loading entries and the code vocabulary, persisting edits."""
from __future__ import annotations

import csv
import json
import logging
import os
from pathlib import Path
from typing import List, Protocol, Sequence

from .shared.models import VOCABULARY_COLUMNS, Code, CodesKind, Entry, EntryFormatError, Vocabulary

LOG = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Base class for record store failures."""

    def __init__(self, path: os.PathLike[str] | str, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")


class StoreLoadError(StoreError):
    """The entries file could not be read or decoded."""


class VocabularyError(StoreError):
    """The vocabulary file could not be read, or a row failed in strict mode."""


class PersistError(StoreError):
    """Writing the output file failed."""


class Persister(Protocol):
    def save(self, entries: Sequence[Entry]) -> None:
        ...


def _read_json(p: Path) -> object:
    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except OSError as exc:
        raise StoreLoadError(p, f"could not open file ({exc.strerror or exc})") from exc
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise StoreLoadError(p, f"could not parse JSON ({exc})") from exc


def load_entries(path: os.PathLike[str] | str, kind: CodesKind) -> List[Entry]:
    """Load the full entry list, failing on the first problem."""
    p = Path(path)
    payload = _read_json(p)
    if not isinstance(payload, list):
        raise StoreLoadError(p, "expected a JSON array of entries")
    if not payload:
        raise StoreLoadError(p, "no entries to annotate")

    entries: List[Entry] = []
    for position, item in enumerate(payload):
        try:
            entries.append(Entry.from_dict(item, kind))
        except EntryFormatError as exc:
            raise StoreLoadError(p, f"entry {position}: {exc}") from exc
    LOG.info("Loaded %d entries from %s", len(entries), p)
    return entries


def _undecodable(cell: str) -> bool:
    # surrogateescape maps each invalid byte to U+DC80..U+DCFF
    return any("\udc80" <= char <= "\udcff" for char in cell)


def load_vocabulary(path: os.PathLike[str] | str, strict: bool = False) -> Vocabulary:
    """Load ``theme,tag,code`` rows.

    Rows that do not decode are dropped unless ``strict`` is set, in which case
    the first bad row raises :class:`VocabularyError`.
    """
    p = Path(path)
    codes: List[Code] = []
    dropped = 0
    try:
        with p.open("r", encoding="utf-8-sig", errors="surrogateescape", newline="") as fh:
            reader = csv.reader(fh)
            header = next(reader, None) or []
            if strict:
                absent = [column for column in VOCABULARY_COLUMNS if column not in header]
                if absent:
                    raise VocabularyError(p, f"header is missing column(s): {', '.join(absent)}")
            for row in reader:
                if not row:
                    continue
                try:
                    if len(row) != len(header):
                        raise ValueError(f"expected {len(header)} fields, found {len(row)}")
                    if any(_undecodable(cell) for cell in row):
                        raise ValueError("row is not valid UTF-8")
                    codes.append(Code.from_row(dict(zip(header, row))))
                except (KeyError, ValueError) as exc:
                    if strict:
                        raise VocabularyError(p, f"line {reader.line_num}: {exc}") from exc
                    dropped += 1
                    LOG.debug("Dropping vocabulary line %d in %s: %s", reader.line_num, p, exc)
    except OSError as exc:
        raise VocabularyError(p, f"could not open codes file ({exc.strerror or exc})") from exc
    except csv.Error as exc:
        raise VocabularyError(p, f"could not parse CSV ({exc})") from exc

    vocabulary = Vocabulary(codes)
    LOG.info(
        "Loaded %d codes in %d themes from %s",
        len(vocabulary),
        len(vocabulary.themes),
        p,
        extra={"dropped_rows": dropped},
    )
    return vocabulary


def dump_entries(entries: Sequence[Entry], pretty: bool = True) -> str:
    rows = [entry.to_dict() for entry in entries]
    if pretty:
        return json.dumps(rows, indent=2, ensure_ascii=False)
    return json.dumps(rows, separators=(",", ":"), ensure_ascii=False)


def save_entries(path: os.PathLike[str] | str, entries: Sequence[Entry], pretty: bool = True) -> None:
    """Rewrite ``path`` with the whole entry list."""
    p = Path(path)
    try:
        data = dump_entries(entries, pretty=pretty).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise PersistError(p, f"could not serialize entries ({exc})") from exc
    try:
        with p.open("wb") as fh:
            fh.write(data)
    except OSError as exc:
        raise PersistError(p, f"could not write file ({exc.strerror or exc})") from exc
    LOG.debug("Saved %d entries to %s", len(entries), p)


class JsonFilePersister:
    """Full-snapshot JSON persistence to a single output file."""

    def __init__(self, path: os.PathLike[str] | str, pretty: bool = True) -> None:
        self.path = Path(path)
        self.pretty = pretty
        self.save_count = 0

    def save(self, entries: Sequence[Entry]) -> None:
        save_entries(self.path, entries, pretty=self.pretty)
        self.save_count += 1


def sniff_codes_kind(path: os.PathLike[str] | str) -> CodesKind:
    """Guess the codes variant from the first entry that carries ``codes``."""
    p = Path(path)
    payload = _read_json(p)
    for item in payload if isinstance(payload, list) else []:
        if isinstance(item, dict) and item.get("codes") is not None:
            return CodesKind.TEXT if isinstance(item["codes"], str) else CodesKind.TAGS
    return CodesKind.TAGS
