"""Tests for script_extractor: the full conversion pipeline."""
from __future__ import annotations

import fitz  # PyMuPDF
import pytest

from models import (
    AmbiguousLayoutError,
    DialogueLine,
    DialoguePart,
    LocationKind,
    PositionedLine,
    SceneDirectionPart,
)
from script_extractor import convert_lines, count_parts, extract_script, parse_script


def _line(top: int, left: int, text: str, page: int = 1) -> PositionedLine:
    return PositionedLine(top=top, left=left, height=17, page=page, text=text)


class TestParseScript:
    def test_park_example(self) -> None:
        script, layout = parse_script([
            _line(10, 100, "EXT. PARK - DAY"),
            _line(20, 100, "A dog runs."),
            _line(30, 300, "ALICE"),
            _line(40, 200, "Hello!"),
        ])
        assert (layout.direction_x, layout.dialogue_x, layout.speaker_x) == (100, 200, 300)
        assert len(script) == 1
        assert len(script[0]) == 1
        location = script[0][0]
        assert location.kind == LocationKind.EXTERNAL
        assert location.name == "PARK - DAY"
        assert location.parts == [
            SceneDirectionPart(text="A dog runs.", page=1),
            DialoguePart(speaker="ALICE", page=1, lines=[DialogueLine("speech", "Hello!")]),
        ]

    def test_ambiguous_layout(self) -> None:
        with pytest.raises(AmbiguousLayoutError):
            parse_script([_line(10, 100, "A"), _line(20, 200, "B"), _line(30, 100, "C")])

    def test_fixture_screenplay(self, screenplay_lines) -> None:
        script, _ = parse_script(screenplay_lines)
        assert len(script) == 2

        park = script[0][0]
        assert (park.kind, park.name) == (LocationKind.EXTERNAL, "PARK - DAY")
        assert [type(p) for p in park.parts] == [SceneDirectionPart, DialoguePart, DialoguePart]
        assert park.parts[1].lines == [
            DialogueLine("direction", "(smiling)"),
            DialogueLine("speech", "Hello there, little one!"),
        ]
        assert park.parts[2].speaker == "BOB"

        kitchen = script[1][0]
        assert (kitchen.kind, kitchen.name) == (LocationKind.INTERNAL, "ALICE'S KITCHEN - NIGHT")
        assert [p.page for p in kitchen.parts] == [2, 2]


class TestConvertLines:
    def test_result_metadata(self, screenplay_lines) -> None:
        result = convert_lines(screenplay_lines)
        assert result.total_lines == len(screenplay_lines)
        assert result.total_pages == 2
        assert result.page_range is None
        assert result.warnings == []

    def test_page_range(self, screenplay_lines) -> None:
        result = convert_lines(screenplay_lines, page_range=(2, 2))
        assert len(result.script) == 1
        assert result.script[0][0].name == "ALICE'S KITCHEN - NIGHT"
        assert result.page_range == (2, 2)

    def test_empty_range_warns(self, screenplay_lines) -> None:
        result = convert_lines(screenplay_lines, page_range=(9, 9))
        assert result.script == []
        assert "No scenes found" in result.warnings

    def test_missing_parenthetical_column_warns(self) -> None:
        result = convert_lines([
            _line(10, 100, "A dog runs."),
            _line(20, 300, "ALICE"),
            _line(30, 200, "Hello!"),
        ])
        assert any("parenthetical" in w for w in result.warnings)

    def test_wide_line_spacing_warns(self) -> None:
        result = convert_lines([
            _line(30, 100, "A"),
            _line(60, 300, "B"),
            _line(90, 200, "C"),
        ])
        assert result.layout.paragraph_line_height == 30
        assert any("section gap" in w for w in result.warnings)

    def test_section_gap_override(self) -> None:
        lines = [
            _line(30, 100, "A dog"),
            _line(60, 100, "runs."),
            _line(90, 300, "ALICE"),
            _line(120, 200, "Hi."),
        ]
        assert count_parts(convert_lines(lines).script)["directions"] == 2
        assert count_parts(convert_lines(lines, section_gap=30).script)["directions"] == 1


class TestExtractScript:
    def test_from_xml_file(self, tmp_path) -> None:
        path = tmp_path / "script.xml"
        path.write_bytes(
            b'<pdf2xml><page number="1">'
            b'<text top="10" left="100" height="17">EXT. PARK - DAY</text>'
            b'<text top="20" left="100" height="17">A dog runs.</text>'
            b'<text top="30" left="300" height="17">ALICE</text>'
            b'<text top="40" left="200" height="17">Hello!</text>'
            b'</page></pdf2xml>'
        )
        result = extract_script(str(path))
        assert result.script[0][0].name == "PARK - DAY"
        assert len(result.script[0][0].parts) == 2

    def test_from_pdf_file(self, tmp_path) -> None:
        path = tmp_path / "script.pdf"
        doc = fitz.open()
        page = doc.new_page()
        rows = [
            (72, 72, "EXT. PARK - DAY"),
            (72, 96, "A dog runs"),
            (72, 107, "across the grass."),
            (252, 131, "ALICE"),
            (180, 142, "Hello"),
            (180, 153, "there!"),
            (252, 177, "BOB"),
            (216, 188, "(waving)"),
            (180, 199, "Hi."),
            (72, 223, "The dog barks."),
        ]
        for x, y, text in rows:
            page.insert_text((x, y), text, fontname="cour", fontsize=12)
        doc.save(str(path))
        doc.close()

        result = extract_script(str(path))
        assert result.layout.direction_x == round(72 * 1.5)
        location = result.script[0][0]
        assert location.name == "PARK - DAY"
        assert [type(p) for p in location.parts] == [
            SceneDirectionPart, DialoguePart, DialoguePart, SceneDirectionPart
        ]
        assert location.parts[0].text == "A dog runs across the grass."
        assert location.parts[1].lines == [DialogueLine("speech", "Hello there!")]
        assert location.parts[2].lines[0] == DialogueLine("direction", "(waving)")


def test_count_parts(screenplay_lines) -> None:
    result = convert_lines(screenplay_lines)
    assert count_parts(result.script) == {
        "scenes": 2, "locations": 2, "directions": 2, "dialogues": 3,
    }
