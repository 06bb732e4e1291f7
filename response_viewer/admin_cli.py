"""Command-line tools for exporting and summarising coded entries."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd
import typer
from rich import print
from rich.table import Table

from .runtime import setup_logging
from .shared.models import CodesKind, Entry, Vocabulary
from .store import StoreError, load_entries, load_vocabulary, sniff_codes_kind
from .utils import write_table

LOG = logging.getLogger(__name__)

app = typer.Typer(help="Response viewer admin CLI", add_completion=False)

RATINGS_SEPARATOR = " | "
TAGS_SEPARATOR = ";"


def entries_frame(entries: Sequence[Entry]) -> pd.DataFrame:
    """Flatten entries into one row each; tags are joined with ``;``."""
    rows = []
    for entry in entries:
        codes = entry.codes if isinstance(entry.codes, str) else TAGS_SEPARATOR.join(sorted(entry.codes))
        rows.append(
            {
                "index": entry.index,
                "lab": entry.lab,
                "group": entry.group,
                "response": entry.response,
                "ratings": RATINGS_SEPARATOR.join(entry.ratings),
                "matches": entry.matches,
                "codes": codes,
            }
        )
    columns = ["index", "lab", "group", "response", "ratings", "matches", "codes"]
    return pd.DataFrame(rows, columns=columns)


def matches_counts(entries: Sequence[Entry]) -> pd.Series:
    labels = pd.Series(
        ["absent" if entry.matches is None else str(entry.matches).lower() for entry in entries],
        dtype="object",
    )
    counts = labels.value_counts()
    return counts.reindex(["true", "false", "absent"], fill_value=0)


def tag_counts(entries: Sequence[Entry], vocabulary: Optional[Vocabulary] = None) -> pd.DataFrame:
    """Per-tag usage; vocabulary tags with no uses are listed with a zero count."""
    used = pd.Series(
        [tag for entry in entries if isinstance(entry.codes, frozenset) for tag in entry.codes],
        dtype="object",
    )
    counts = used.value_counts()
    frame = pd.DataFrame({"tag": counts.index.astype(str), "entries": counts.values.astype(int)})
    if vocabulary is not None:
        vocab_frame = pd.DataFrame(
            [{"theme": code.theme, "tag": code.tag, "code": code.code} for code in vocabulary.codes],
            columns=["theme", "tag", "code"],
        ).drop_duplicates(subset="tag")
        frame = vocab_frame.merge(frame, on="tag", how="outer")
        frame["entries"] = frame["entries"].fillna(0).astype(int)
        frame[["theme", "code"]] = frame[["theme", "code"]].fillna("")
    return frame.sort_values(["entries", "tag"], ascending=[False, True]).reset_index(drop=True)


def _load(entries_path: Path) -> list[Entry]:
    try:
        return load_entries(entries_path, sniff_codes_kind(entries_path))
    except StoreError as exc:
        LOG.error("Could not load entries: %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.callback()
def _configure(log_level: str = typer.Option("WARNING", help="Logging level")) -> None:
    setup_logging(log_level)


@app.command()
def export(
    entries_path: Path = typer.Argument(..., help="Coded entries JSON file"),
    destination: Path = typer.Argument(..., help="Output table (.csv, .tsv or .jsonl)"),
) -> None:
    """Write entries as a flat table."""
    frame = entries_frame(_load(entries_path))
    try:
        target = write_table(frame, destination)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="DESTINATION") from exc
    print(f"Exported {len(frame)} entries to {target}")


@app.command()
def stats(
    entries_path: Path = typer.Argument(..., help="Coded entries JSON file"),
    vocabulary_path: Optional[Path] = typer.Option(None, "--vocabulary", help="Vocabulary CSV (theme,tag,code)"),
) -> None:
    """Summarise matches and code usage."""
    entries = _load(entries_path)
    vocabulary = None
    if vocabulary_path is not None:
        try:
            vocabulary = load_vocabulary(vocabulary_path)
        except StoreError as exc:
            LOG.error("Could not load vocabulary: %s", exc)
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1) from exc

    matches_table = Table(title=f"Matches ({len(entries)} entries)")
    matches_table.add_column("Value")
    matches_table.add_column("Entries", justify="right")
    for value, count in matches_counts(entries).items():
        matches_table.add_row(str(value), str(int(count)))
    print(matches_table)

    if entries[0].kind is CodesKind.TEXT:
        coded = sum(1 for entry in entries if str(entry.codes).strip())
        print(f"Entries with codes text: {coded}/{len(entries)}")
        return

    tags_table = Table(title="Code usage")
    if vocabulary is not None:
        tags_table.add_column("Theme")
    tags_table.add_column("Tag")
    if vocabulary is not None:
        tags_table.add_column("Code")
    tags_table.add_column("Entries", justify="right")
    for row in tag_counts(entries, vocabulary).itertuples(index=False):
        if vocabulary is not None:
            tags_table.add_row(str(row.theme), str(row.tag), str(row.code), str(row.entries))
        else:
            tags_table.add_row(str(row.tag), str(row.entries))
    print(tags_table)


if __name__ == "__main__":
    app()
