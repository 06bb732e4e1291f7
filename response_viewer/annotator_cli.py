"""Console-based annotator driving the same controller as the desktop window."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from .cli import build_config, load_session
from .controller import (
    Advance,
    Controller,
    Intent,
    Noop,
    Retreat,
    SetCode,
    SetCodeText,
    SetMatches,
    ToggleMatches,
)
from .runtime import setup_logging
from .shared.models import CodesKind, Vocabulary
from .store import PersistError
from .view import EntryView, render

LOG = logging.getLogger(__name__)

app = typer.Typer(help="Lightweight console annotator", add_completion=False)

HELP_TEXT = (
    "n/next, p/prev, m (toggle matches), y/no (set matches), "
    "c TAG (toggle tag), t TEXT (set codes), q (quit)"
)


class Quit:
    pass


def decode_command(line: str, controller: Controller) -> Union[Intent, Quit]:
    """Translate one console command into an intent."""
    command, _, argument = line.strip().partition(" ")
    command = command.lower()
    argument = argument.strip()
    if command in {"q", "quit", "exit"}:
        return Quit()
    if command in {"n", "next"}:
        return Advance()
    if command in {"p", "prev"}:
        return Retreat()
    if command in {"m", "toggle"}:
        return ToggleMatches()
    if command in {"y", "yes"}:
        return SetMatches(True)
    if command == "no":
        return SetMatches(False)
    if command == "c" and argument:
        codes = controller.current.codes
        present = isinstance(codes, frozenset) and argument in codes
        return SetCode(argument, not present)
    if command == "t":
        return SetCodeText(argument)
    return Noop()


def describe_code_change(intent: SetCode, vocabulary: Optional[Vocabulary]) -> str:
    """One-line echo for a tag toggle, naming the code label when the tag is known."""
    verb = "added" if intent.present else "removed"
    if vocabulary is None:
        return f"{verb} {intent.tag}"
    label = vocabulary.label_for(intent.tag)
    if label is None:
        return f"{verb} {intent.tag} (not in the vocabulary)"
    return f"{verb} {intent.tag} ({label})"


def render_entry(console: Console, view: EntryView, vocabulary: Optional[Vocabulary]) -> None:
    body = Table.grid(padding=(0, 1))
    body.add_column(style="bold")
    body.add_column()
    for rating in view.ratings:
        body.add_row("rating", Text(rating))
    body.add_row("matches", "yes" if view.matches_checked else "no")
    if view.kind is CodesKind.TAGS:
        selected = [
            f"{option.tag} ({option.label})"
            for row in view.code_rows
            for column in row
            for option in column.options
            if option.checked
        ]
        body.add_row("codes", Text(", ".join(selected) or "-"))
    else:
        body.add_row("codes", Text(view.code_text or "-"))
    body.add_row("response", Text(view.response))
    console.print(Panel(body, title=escape(view.header), subtitle=view.position))
    if vocabulary is not None and view.kind is CodesKind.TAGS:
        console.print(Text(f"tags: {', '.join(vocabulary.tags())}", style="dim"))


@app.command()
def open_entries(
    paths: List[Path] = typer.Argument(..., help="ENTRIES [VOCABULARY] OUTPUT", show_default=False),
    compact: Optional[bool] = typer.Option(None, "--compact/--pretty", help="Write compact or indented JSON"),
    strict_vocabulary: Optional[bool] = typer.Option(
        None,
        "--strict-vocabulary/--lenient-vocabulary",
        help="Fail on malformed vocabulary rows instead of dropping them",
    ),
    log_level: Optional[str] = typer.Option(None, help="Logging level"),
) -> None:
    """Interactive loop for coding entries."""
    config = build_config(compact, strict_vocabulary, log_level, None)
    setup_logging(config.log_level, json_format=config.log_json)
    session = load_session(paths, config)
    controller = session.controller
    console = Console()
    console.print(f"[dim]{HELP_TEXT}[/dim]")
    while True:
        render_entry(
            console,
            render(controller.state, session.vocabulary, config.themes_per_row),
            session.vocabulary,
        )
        intent = decode_command(Prompt.ask("command", default="n", console=console), controller)
        if isinstance(intent, Quit):
            break
        if isinstance(intent, Noop):
            console.print(f"[yellow]Unknown command.[/yellow] {HELP_TEXT}")
            continue
        try:
            controller.dispatch(intent)
        except PersistError as exc:
            LOG.error("Saving entries failed: %s", exc)
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1) from exc
        if isinstance(intent, SetCode) and controller.state.kind is CodesKind.TAGS:
            console.print(Text(describe_code_change(intent, session.vocabulary), style="dim"))
    typer.echo(f"Session closed; output at {session.paths.output}")


if __name__ == "__main__":
    app()
