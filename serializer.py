"""
Serializes scripts to XML, JSON and Markdown.
"""
import json
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import BinaryIO

from models import ConversionResult, Location, SceneDirectionPart, ScenePart, Script
from script_extractor import count_parts

# characters XML 1.0 does not allow, e.g. form feeds from PDF text
XML_INVALID_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _part_to_dict(part: ScenePart) -> dict:
    if isinstance(part, SceneDirectionPart):
        return {"type": "direction", "page": part.page, "text": part.text}
    return {
        "type": "dialogue",
        "page": part.page,
        "speaker": part.speaker,
        "lines": [{"kind": line.kind, "text": line.text} for line in part.lines]
    }


def _location_to_dict(location: Location) -> dict:
    return {
        "kind": location.kind.value,
        "name": location.name,
        "parts": [_part_to_dict(part) for part in location.parts]
    }


def script_to_dict(script: Script) -> dict:
    """Plain dict/list form of a script, suitable for json.dumps."""
    return {
        "scenes": [
            {"locations": [_location_to_dict(location) for location in scene]}
            for scene in script
        ]
    }


def format_json(script: Script, indent: int = 2) -> str:
    return json.dumps(script_to_dict(script), indent=indent, ensure_ascii=False)


def _xml_text(text: str) -> str:
    return XML_INVALID_CHARS.sub("", text)


def build_xml(script: Script) -> ET.Element:
    """
    Build the XML tree for a script.

    <script>
      <scene>
        <location type="external" name="PARK - DAY">
          <direction page="1">A dog runs.</direction>
          <dialog page="1" speaker="ALICE">
            <direction>(smiling)</direction>
            <speech>Hello!</speech>
          </dialog>
        </location>
      </scene>
    </script>
    """
    root = ET.Element("script")
    for scene in script:
        scene_elem = ET.SubElement(root, "scene")
        for location in scene:
            location_elem = ET.SubElement(scene_elem, "location", {
                "type": location.kind.value,
                "name": _xml_text(location.name),
            })
            for part in location.parts:
                if isinstance(part, SceneDirectionPart):
                    part_elem = ET.SubElement(location_elem, "direction", {"page": str(part.page)})
                    part_elem.text = _xml_text(part.text)
                else:
                    part_elem = ET.SubElement(location_elem, "dialog", {
                        "page": str(part.page),
                        "speaker": _xml_text(part.speaker),
                    })
                    for line in part.lines:
                        tag = "direction" if line.kind == "direction" else "speech"
                        ET.SubElement(part_elem, tag).text = _xml_text(line.text)
    return root


def format_xml(script: Script) -> str:
    root = build_xml(script)
    ET.indent(root)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True).decode("utf-8") + "\n"


def write_xml(script: Script, stream: BinaryIO) -> None:
    """Write the script as UTF-8 XML to a binary stream."""
    root = build_xml(script)
    ET.indent(root)
    ET.ElementTree(root).write(stream, encoding="utf-8", xml_declaration=True)


def _markdown_part(part: ScenePart) -> list[str]:
    if isinstance(part, SceneDirectionPart):
        return [part.text, ""]
    lines = [f"**{part.speaker}**"]
    for line in part.lines:
        lines.append(f"_{line.text}_" if line.kind == "direction" else f"> {line.text}")
    lines.append("")
    return lines


def write_markdown_files(
    script: Script,
    output_dir: str,
    filename_template: str = "scene_{index:03d}.md"
) -> list[str]:
    """
    Create one markdown file per scene.

    Args:
        script: Script to write
        output_dir: Directory for output files
        filename_template: Template for output filenames

    Returns:
        List of created file paths
    """
    Path(output_dir).mkdir(parents=True, exist_ok=True)
    output_files = []

    for index, scene in enumerate(script, start=1):
        pages = [part.page for location in scene for part in location.parts]
        lines = [
            f"# Scene {index}: Pages {min(pages)}-{max(pages)}",
            "",
        ]

        for location in scene:
            if location.name:
                lines.append(f"## {location.name} ({location.kind.value})")
                lines.append("")
            for part in location.parts:
                lines.extend(_markdown_part(part))

        output_path = Path(output_dir) / filename_template.format(index=index)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(lines))

        output_files.append(str(output_path))

    return output_files


def write_summary(
    result: ConversionResult,
    output_dir: str,
    source: str
) -> str:
    """
    Write a human-readable summary file.

    Args:
        result: ConversionResult from extract_script()
        output_dir: Directory for output
        source: Original input path

    Returns:
        Path to summary file
    """
    Path(output_dir).mkdir(parents=True, exist_ok=True)
    summary_path = Path(output_dir) / "extract_summary.txt"
    layout = result.layout
    counts = count_parts(result.script)

    lines = [
        "Script Extraction Summary",
        "=" * 50,
        f"Source: {source}",
        f"Total pages: {result.total_pages}",
        f"Total lines: {result.total_lines}",
    ]
    if result.page_range:
        lines.append(f"Page range: {result.page_range[0]}-{result.page_range[1]}")
    lines.extend([
        "",
        "Layout:",
        f"  Direction column: {layout.direction_x}",
        f"  Dialogue column: {layout.dialogue_x}",
        f"  Speaker column: {layout.speaker_x}",
        f"  Parenthetical column: {layout.speaker_direction_x or 'none'}",
        f"  Paragraph line height: {layout.paragraph_line_height}",
        "",
        f"Scenes: {counts['scenes']}",
        f"Locations: {counts['locations']}",
        f"Directions: {counts['directions']}",
        f"Dialogues: {counts['dialogues']}",
        "",
    ])

    if result.warnings:
        lines.append("Warnings:")
        for w in result.warnings:
            lines.append(f"  - {w}")
        lines.append("")

    lines.append("Scenes:")
    lines.append("-" * 50)
    for index, scene in enumerate(result.script, start=1):
        names = [location.name for location in scene if location.name]
        heading = ", ".join(names) if names else "(no location)"
        heading_preview = heading[:60] + "..." if len(heading) > 60 else heading
        lines.append(f"  {index}. {heading_preview}")

    with open(summary_path, 'w', encoding='utf-8') as f:
        f.write('\n'.join(lines))

    return str(summary_path)
