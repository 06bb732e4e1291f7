import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from response_viewer.shared.models import MAX_INDEX, Code, CodesKind, Entry, EntryFormatError, Vocabulary


def _payload(**overrides):
    payload = {
        "index": 7,
        "lab": "Lab A",
        "group": "control",
        "response": "It was fine.",
        "ratings": ["3", "4"],
        "codes": ["pos"],
    }
    payload.update(overrides)
    return payload


def test_missing_matches_is_absent_and_null_is_absent() -> None:
    entry = Entry.from_dict(_payload(), CodesKind.TAGS)
    assert entry.matches is None
    assert Entry.from_dict(_payload(matches=None), CodesKind.TAGS).matches is None
    assert Entry.from_dict(_payload(matches=False), CodesKind.TAGS).matches is False


def test_tag_codes_become_frozenset() -> None:
    entry = Entry.from_dict(_payload(codes=["b", "a", "b"]), CodesKind.TAGS)
    assert entry.codes == frozenset({"a", "b"})
    assert entry.kind is CodesKind.TAGS
    assert entry.ratings == ("3", "4")


def test_missing_codes_default_per_kind() -> None:
    payload = _payload()
    del payload["codes"]
    assert Entry.from_dict(payload, CodesKind.TAGS).codes == frozenset()
    assert Entry.from_dict(payload, CodesKind.TEXT).codes == ""


def test_codes_type_must_match_kind() -> None:
    with pytest.raises(EntryFormatError):
        Entry.from_dict(_payload(codes="free text"), CodesKind.TAGS)
    with pytest.raises(EntryFormatError):
        Entry.from_dict(_payload(codes=["pos"]), CodesKind.TEXT)


@pytest.mark.parametrize(
    "overrides",
    [
        {"index": -1},
        {"index": True},
        {"index": "7"},
        {"index": 0xFFFFFFFF + 1},
        {"lab": 3},
        {"ratings": "3"},
        {"ratings": [3]},
        {"matches": "yes"},
        {"response": "\ud800"},
        {"ratings": ["ok", "\udc80"]},
        {"codes": ["\ud800"]},
    ],
)
def test_wrongly_typed_fields_are_rejected(overrides) -> None:
    with pytest.raises(EntryFormatError):
        Entry.from_dict(_payload(**overrides), CodesKind.TAGS)


def test_index_accepts_full_unsigned_32_bit_range() -> None:
    assert Entry.from_dict(_payload(index=0), CodesKind.TAGS).index == 0
    assert Entry.from_dict(_payload(index=MAX_INDEX), CodesKind.TAGS).index == 0xFFFFFFFF
    with pytest.raises(EntryFormatError, match="index"):
        Entry.from_dict(_payload(index=MAX_INDEX + 1), CodesKind.TAGS)


def test_lone_surrogate_in_free_text_codes_is_rejected() -> None:
    with pytest.raises(EntryFormatError, match="codes"):
        Entry.from_dict(_payload(codes="a\udcff"), CodesKind.TEXT)


def test_missing_required_field_is_named() -> None:
    payload = _payload()
    del payload["response"]
    with pytest.raises(EntryFormatError, match="response"):
        Entry.from_dict(payload, CodesKind.TAGS)


def test_to_dict_sorts_tags_and_writes_null_matches() -> None:
    entry = Entry.from_dict(_payload(codes=["z", "a"]), CodesKind.TAGS)
    data = entry.to_dict()
    assert data["codes"] == ["a", "z"]
    assert data["matches"] is None
    assert list(data) == ["index", "lab", "group", "response", "ratings", "matches", "codes"]


def test_with_matches_returns_new_entry() -> None:
    entry = Entry.from_dict(_payload(), CodesKind.TAGS)
    updated = entry.with_matches(True)
    assert updated.matches is True
    assert entry.matches is None


def test_vocabulary_themes_are_sorted_and_unique() -> None:
    vocabulary = Vocabulary(
        [
            Code("tone", "pos", "Positive"),
            Code("effort", "hard", "Hard"),
            Code("tone", "neg", "Negative"),
        ]
    )
    assert vocabulary.themes == ["effort", "tone"]
    assert [code.tag for code in vocabulary.codes_for_theme("tone")] == ["pos", "neg"]
    assert vocabulary.label_for("neg") == "Negative"
    assert vocabulary.label_for("missing") is None
    assert len(vocabulary) == 3
