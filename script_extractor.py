"""
Script Extractor - structured screenplays from positioned text.

Infers the column layout from the whole document first, then parses the
lines into scenes, locations, directions and dialogues.
"""
from typing import Optional, Sequence

from models import ConversionResult, LayoutModel, PositionedLine, SceneDirectionPart, Script
from pdf_extractor import extract_lines
from layout_inferencer import infer_layout
from script_parser import SECTION_GAP_THRESHOLD, extract_tokens
from scene_folder import fold_scenes
from page_filter import filter_script


def parse_script(
    lines: Sequence[PositionedLine],
    *,
    section_gap: int = SECTION_GAP_THRESHOLD
) -> tuple[Script, LayoutModel]:
    """
    Parse a line sequence into a Script.

    Args:
        lines: All lines of the document in page-then-top order
        section_gap: Largest vertical delta that still continues a section

    Returns:
        Tuple of (script, inferred layout)

    Raises:
        AmbiguousLayoutError: if the column layout cannot be inferred
    """
    layout = infer_layout(lines)
    tokens = extract_tokens(lines, layout, section_gap=section_gap)
    return fold_scenes(tokens), layout


def extract_script(
    input_path: str,
    *,
    page_range: Optional[tuple[int, int]] = None,
    section_gap: int = SECTION_GAP_THRESHOLD
) -> ConversionResult:
    """
    Convert a pdftohtml XML file or a PDF into a structured script.

    Args:
        input_path: XML or PDF path, or '-' for XML on stdin
        page_range: Inclusive (first, last) pages to keep (default all)
        section_gap: Largest vertical delta that still continues a section

    Returns:
        ConversionResult with the script and metadata

    Raises:
        AmbiguousLayoutError: if the column layout cannot be inferred
        MalformedInputError: if a line has no usable position
    """
    lines = extract_lines(input_path)
    return convert_lines(lines, page_range=page_range, section_gap=section_gap)


def convert_lines(
    lines: Sequence[PositionedLine],
    *,
    page_range: Optional[tuple[int, int]] = None,
    section_gap: int = SECTION_GAP_THRESHOLD
) -> ConversionResult:
    """Run the pipeline on lines that were already collected."""
    warnings: list[str] = []

    script, layout = parse_script(lines, section_gap=section_gap)

    if layout.speaker_direction_x == 0:
        warnings.append("No parenthetical column found between dialogue and speaker")
    if layout.paragraph_line_height > section_gap:
        warnings.append(
            f"Most common line spacing ({layout.paragraph_line_height}) is larger "
            f"than the section gap ({section_gap}); every line becomes its own section"
        )

    if page_range is not None:
        script = filter_script(script, *page_range)

    if not script:
        warnings.append("No scenes found")

    return ConversionResult(
        script=script,
        layout=layout,
        total_lines=len(lines),
        total_pages=len({line.page for line in lines}),
        page_range=page_range,
        warnings=warnings
    )


def count_parts(script: Script) -> dict:
    """Count locations, directions and dialogues in a script."""
    counts = {"scenes": len(script), "locations": 0, "directions": 0, "dialogues": 0}
    for scene in script:
        counts["locations"] += len(scene)
        for location in scene:
            for part in location.parts:
                key = "directions" if isinstance(part, SceneDirectionPart) else "dialogues"
                counts[key] += 1
    return counts
