"""Desktop entry point: ``response-viewer ENTRIES [VOCABULARY] OUTPUT``."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from . import __version__
from .config import ViewerConfig
from .runtime import setup_logging
from .session import Session, UsageError, build_session_paths, open_session
from .store import StoreError

LOG = logging.getLogger(__name__)

app = typer.Typer(help="Page through responses and code them", add_completion=False)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"response-viewer {__version__}")
        raise typer.Exit()


def load_session(
    paths: List[Path],
    config: ViewerConfig,
) -> Session:
    """Resolve positional paths and load the session, exiting on failure."""
    try:
        session_paths = build_session_paths(paths)
    except UsageError as exc:
        raise typer.BadParameter(str(exc), param_hint="PATHS") from exc
    try:
        return open_session(session_paths, config)
    except StoreError as exc:
        LOG.error("Could not open session: %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def build_config(
    compact: Optional[bool],
    strict_vocabulary: Optional[bool],
    log_level: Optional[str],
    log_json: Optional[bool],
    font_size: Optional[int] = None,
) -> ViewerConfig:
    return ViewerConfig().with_overrides(
        pretty=None if compact is None else not compact,
        strict_vocabulary=strict_vocabulary,
        log_level=log_level,
        log_json=log_json,
        font_size=font_size,
    )


@app.command()
def main(
    paths: List[Path] = typer.Argument(..., help="ENTRIES [VOCABULARY] OUTPUT", show_default=False),
    compact: Optional[bool] = typer.Option(None, "--compact/--pretty", help="Write compact or indented JSON"),
    strict_vocabulary: Optional[bool] = typer.Option(
        None,
        "--strict-vocabulary/--lenient-vocabulary",
        help="Fail on malformed vocabulary rows instead of dropping them",
    ),
    log_level: Optional[str] = typer.Option(None, help="Logging level"),
    log_json: Optional[bool] = typer.Option(None, "--log-json/--log-plain", help="Structured JSON log lines"),
    font_size: Optional[int] = typer.Option(None, min=6, max=48, help="Base font size in points"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True),
) -> None:
    """Open the response viewer window."""
    config = build_config(compact, strict_vocabulary, log_level, log_json, font_size)
    setup_logging(config.log_level, json_format=config.log_json)
    session = load_session(paths, config)

    from .ClientApp.main import run

    status = run(session)
    if status:
        raise typer.Exit(code=status)


if __name__ == "__main__":  # pragma: no cover
    app()
