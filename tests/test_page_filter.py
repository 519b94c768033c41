"""Tests for page_filter: page range parsing and script filtering."""
from __future__ import annotations

import copy

import pytest

from models import DialogueLine, DialoguePart, Location, LocationKind, SceneDirectionPart
from page_filter import filter_script, parse_page_range


def _script():
    return [
        [
            Location(LocationKind.EXTERNAL, "PARK", [
                SceneDirectionPart("A dog runs.", page=1),
                DialoguePart("ALICE", page=2, lines=[DialogueLine("speech", "Hello!")]),
            ]),
            Location(LocationKind.INTERNAL, "CAR", [SceneDirectionPart("Driving.", page=2)]),
        ],
        [
            Location(LocationKind.INTERNAL, "KITCHEN", [SceneDirectionPart("Dinner.", page=3)]),
        ],
    ]


class TestParsePageRange:
    @pytest.mark.parametrize("value, expected", [
        ("42", (42, 42)),
        ("3-15", (3, 15)),
        (" 7 ", (7, 7)),
        ("foo", None),
        ("3-", None),
        ("-3", None),
        ("1-2-3", None),
        ("", None),
        ("\u00b2", None),
        ("1-\u00b2", None),
        ("\u0663", None),
    ])
    def test_parse(self, value: str, expected) -> None:
        assert parse_page_range(value) == expected


class TestFilterScript:
    def test_unrestricted_range_is_identity(self) -> None:
        script = _script()
        assert filter_script(script, 0, 2**32 - 1) == script

    def test_single_page(self) -> None:
        filtered = filter_script(_script(), 2, 2)
        assert len(filtered) == 1
        assert [loc.name for loc in filtered[0]] == ["PARK", "CAR"]
        assert [part.page for part in filtered[0][0].parts] == [2]

    def test_drops_empty_scenes_and_locations(self) -> None:
        filtered = filter_script(_script(), 3, 10)
        assert filtered == [[
            Location(LocationKind.INTERNAL, "KITCHEN", [SceneDirectionPart("Dinner.", page=3)])
        ]]

    def test_range_outside_document(self) -> None:
        assert filter_script(_script(), 50, 60) == []

    def test_idempotent(self) -> None:
        once = filter_script(_script(), 2, 3)
        assert filter_script(once, 2, 3) == once

    def test_input_not_modified(self) -> None:
        script = _script()
        original = copy.deepcopy(script)
        filtered = filter_script(script, 1, 1)
        filtered[0][0].parts[0].text = "changed"
        assert script == original
