#!/usr/bin/env python
"""Write a small demo dataset for trying out the viewer."""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path
from typing import Dict, List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from response_viewer.shared.models import Code, CodesKind, Entry
from response_viewer.store import save_entries
from response_viewer.utils import ensure_dir

RESPONSES: List[Dict[str, object]] = [
    {"lab": "Lab North", "group": "control", "response": "The task felt routine and I finished quickly.", "ratings": ["2", "3"]},
    {"lab": "Lab North", "group": "treatment", "response": "I was frustrated by the noise but kept going.", "ratings": ["4", "4"]},
    {"lab": "Lab South", "group": "control", "response": "Honestly I don't remember much about it.", "ratings": ["1"]},
    {"lab": "Lab South", "group": "treatment", "response": "It was hard, and I felt proud when I solved it.", "ratings": ["5", "4", "5"]},
    {"lab": "Lab East", "group": "treatment", "response": "Boring. The instructions were unclear.", "ratings": ["2", "1"]},
]

VOCABULARY: List[Code] = [
    Code("affect", "pos", "Positive"),
    Code("affect", "neg", "Negative"),
    Code("affect", "pride", "Pride"),
    Code("effort", "hard", "Difficult"),
    Code("effort", "easy", "Easy"),
    Code("task", "unclear", "Unclear instructions"),
    Code("task", "distraction", "Distraction"),
    Code("memory", "forgot", "Does not recall"),
]


def build_entries(kind: CodesKind) -> List[Entry]:
    return [
        Entry(
            index=(position + 1) * 10,
            lab=str(item["lab"]),
            group=str(item["group"]),
            response=str(item["response"]),
            ratings=tuple(item["ratings"]),  # type: ignore[arg-type]
            codes=kind.empty(),
        )
        for position, item in enumerate(RESPONSES)
    ]


def write_vocabulary(path: Path) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=["theme", "tag", "code"])
        writer.writeheader()
        for code in VOCABULARY:
            writer.writerow({"theme": code.theme, "tag": code.tag, "code": code.code})


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo entries and a code vocabulary")
    parser.add_argument("--outdir", default="demo", help="Directory relative to the repository root")
    args = parser.parse_args()

    outdir = ensure_dir((REPO_ROOT / args.outdir).resolve())
    save_entries(outdir / "entries_tags.json", build_entries(CodesKind.TAGS))
    save_entries(outdir / "entries_text.json", build_entries(CodesKind.TEXT))
    write_vocabulary(outdir / "codes.csv")

    print(f"Seeded demo data at {outdir}")
    print(f"  response-viewer {outdir / 'entries_tags.json'} {outdir / 'codes.csv'} {outdir / 'coded.json'}")
    print(f"  response-viewer {outdir / 'entries_text.json'} {outdir / 'coded_text.json'}")


if __name__ == "__main__":
    main()
