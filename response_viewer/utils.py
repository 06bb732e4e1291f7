"""Utility helpers for the response viewer."""
from __future__ import annotations

import os
from pathlib import Path

import pandas as pd


def ensure_dir(path: os.PathLike[str] | str) -> Path:
    """Ensure directory exists and return its :class:`Path`."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def write_table(df: pd.DataFrame, path: os.PathLike[str] | str) -> Path:
    p = Path(path)
    ext = p.suffix.lower().lstrip(".")
    if ext not in ("csv", "tsv", "jsonl"):
        raise ValueError(f"Unsupported table extension: {p}")
    ensure_dir(p.parent)
    if ext == "csv":
        df.to_csv(p, index=False)
    elif ext == "tsv":
        df.to_csv(p, sep="\t", index=False)
    else:
        df.to_json(p, lines=True, orient="records", force_ascii=False)
    return p
