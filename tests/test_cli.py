import json
import subprocess
import sys
from pathlib import Path

import pandas as pd
import pytest
from typer.testing import CliRunner

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from response_viewer import admin_cli, annotator_cli, cli
from response_viewer.controller import Advance, Controller, Noop, SetCode, SetMatches, ViewerState
from response_viewer.session import UsageError, build_session_paths
from response_viewer.shared.models import Code, CodesKind, Entry, Vocabulary
from response_viewer.testing import MemoryPersister

runner = CliRunner()


def _write_inputs(tmp_path: Path) -> tuple[Path, Path]:
    entries = tmp_path / "entries.json"
    entries.write_text(
        json.dumps(
            [
                {"index": 1, "lab": "L", "group": "g", "response": "one", "ratings": [], "codes": []},
                {"index": 2, "lab": "L", "group": "g", "response": "two", "ratings": ["x"], "codes": ["pos"]},
            ]
        ),
        encoding="utf-8",
    )
    vocabulary = tmp_path / "codes.csv"
    vocabulary.write_text("theme,tag,code\ntone,pos,Positive\ntone,neg,Negative\nbroken\n", encoding="utf-8")
    return entries, vocabulary


def test_session_paths_select_variant(tmp_path: Path) -> None:
    tagged = build_session_paths(["in.json", "codes.csv", "out.json"])
    assert tagged.kind is CodesKind.TAGS
    assert tagged.vocabulary == Path("codes.csv")
    text = build_session_paths(["in.json", "out.json"])
    assert text.kind is CodesKind.TEXT
    assert text.output == Path("out.json")
    with pytest.raises(UsageError):
        build_session_paths(["in.json"])
    with pytest.raises(UsageError):
        build_session_paths(["a", "b", "c", "d"])


@pytest.mark.parametrize("args", [["only.json"], ["a", "b", "c", "d"]])
def test_wrong_path_count_is_usage_error(args) -> None:
    result = runner.invoke(cli.app, args)
    assert result.exit_code == 2


def test_unreadable_entries_exit_with_status_one(tmp_path: Path) -> None:
    result = runner.invoke(cli.app, [str(tmp_path / "missing.json"), str(tmp_path / "out.json")])
    assert result.exit_code == 1
    assert not (tmp_path / "out.json").exists()


def test_strict_vocabulary_rejects_bad_row(tmp_path: Path) -> None:
    entries, vocabulary = _write_inputs(tmp_path)
    result = runner.invoke(
        cli.app,
        ["--strict-vocabulary", str(entries), str(vocabulary), str(tmp_path / "out.json")],
    )
    assert result.exit_code == 1


def test_console_annotator_saves_after_each_change(tmp_path: Path) -> None:
    entries, vocabulary = _write_inputs(tmp_path)
    out = tmp_path / "out.json"
    result = runner.invoke(
        annotator_cli.app,
        [str(entries), str(vocabulary), str(out)],
        input="y\nn\nc neg\nwhat\nq\n",
    )
    assert result.exit_code == 0, result.output
    saved = json.loads(out.read_text(encoding="utf-8"))
    assert saved[0]["matches"] is True
    assert saved[1]["matches"] is None
    assert saved[1]["codes"] == ["neg", "pos"]


def test_console_annotator_without_changes_writes_nothing(tmp_path: Path) -> None:
    entries, _ = _write_inputs(tmp_path)
    out = tmp_path / "out.json"
    payload = json.loads(entries.read_text(encoding="utf-8"))
    for item in payload:
        item["codes"] = ""
    entries.write_text(json.dumps(payload), encoding="utf-8")
    result = runner.invoke(annotator_cli.app, [str(entries), str(out)], input="n\np\nq\n")
    assert result.exit_code == 0, result.output
    assert not out.exists()


def test_decode_command_toggles_tags() -> None:
    entries = [Entry(index=0, lab="l", group="g", response="r", codes=frozenset({"pos"}))]
    controller = Controller(ViewerState.from_entries(entries, CodesKind.TAGS), MemoryPersister())
    assert annotator_cli.decode_command("c pos", controller) == SetCode("pos", False)
    assert annotator_cli.decode_command("c neg", controller) == SetCode("neg", True)
    assert annotator_cli.decode_command("NEXT", controller) == Advance()
    assert annotator_cli.decode_command("no", controller) == SetMatches(False)
    assert annotator_cli.decode_command("c", controller) == Noop()
    assert isinstance(annotator_cli.decode_command("q", controller), annotator_cli.Quit)


def test_describe_code_change_names_vocabulary_label() -> None:
    vocabulary = Vocabulary([Code("tone", "pos", "Positive")])
    assert annotator_cli.describe_code_change(SetCode("pos", True), vocabulary) == "added pos (Positive)"
    assert annotator_cli.describe_code_change(SetCode("pos", False), vocabulary) == "removed pos (Positive)"
    assert annotator_cli.describe_code_change(SetCode("odd", True), vocabulary) == "added odd (not in the vocabulary)"
    assert annotator_cli.describe_code_change(SetCode("pos", True), None) == "added pos"


def test_console_annotator_echoes_code_label(tmp_path: Path) -> None:
    entries, vocabulary = _write_inputs(tmp_path)
    result = runner.invoke(
        annotator_cli.app,
        [str(entries), str(vocabulary), str(tmp_path / "out.json")],
        input="c neg\nq\n",
    )
    assert result.exit_code == 0, result.output
    assert "added neg (Negative)" in result.output


def test_admin_export_writes_flat_table(tmp_path: Path) -> None:
    entries, _ = _write_inputs(tmp_path)
    destination = tmp_path / "reports" / "entries.csv"
    result = runner.invoke(admin_cli.app, ["export", str(entries), str(destination)])
    assert result.exit_code == 0, result.output
    frame = pd.read_csv(destination, keep_default_na=False)
    assert list(frame["index"]) == [1, 2]
    assert list(frame["codes"]) == ["", "pos"]
    assert list(frame["ratings"]) == ["", "x"]


def test_admin_export_rejects_unknown_extension(tmp_path: Path) -> None:
    entries, _ = _write_inputs(tmp_path)
    result = runner.invoke(admin_cli.app, ["export", str(entries), str(tmp_path / "out.xlsx")])
    assert result.exit_code == 2


def test_admin_stats_counts_tags(tmp_path: Path) -> None:
    entries, vocabulary = _write_inputs(tmp_path)
    result = runner.invoke(admin_cli.app, ["stats", str(entries), "--vocabulary", str(vocabulary)])
    assert result.exit_code == 0, result.output
    assert "Positive" in result.output
    assert "Negative" in result.output

    frame = admin_cli.tag_counts(
        [Entry(index=0, lab="l", group="g", response="r", codes=frozenset({"pos", "other"}))],
    )
    assert set(frame["tag"]) == {"pos", "other"}
    assert list(frame["entries"]) == [1, 1]


def test_admin_matches_counts() -> None:
    entries = [
        Entry(index=0, lab="l", group="g", response="r", matches=True),
        Entry(index=1, lab="l", group="g", response="r"),
        Entry(index=2, lab="l", group="g", response="r", matches=True),
    ]
    counts = admin_cli.matches_counts(entries)
    assert counts.to_dict() == {"true": 2, "false": 0, "absent": 1}


def test_admin_cli_module_smoke(tmp_path: Path) -> None:
    entries, _ = _write_inputs(tmp_path)
    cmd = [sys.executable, "-m", "response_viewer.admin_cli", "stats", str(entries)]
    result = subprocess.run(cmd, check=True, capture_output=True, text=True, cwd=str(ROOT))
    assert "pos" in result.stdout
