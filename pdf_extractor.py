"""
Positioned line extraction from pdftohtml XML or directly from PDF.
"""
import sys
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import BinaryIO, Union

import fitz  # PyMuPDF

from models import MalformedInputError, PositionedLine

# pdftohtml renders at 1.5x by default; PDF coordinates are scaled to match
PDFTOHTML_ZOOM = 1.5


def _collapse(pieces) -> str:
    """Join text pieces with single spaces."""
    return ' '.join(' '.join(pieces).split())


def extract_lines_from_xml(source: Union[str, Path, BinaryIO]) -> list[PositionedLine]:
    """
    Read positioned lines from poppler's `pdftohtml -xml` output.

    Args:
        source: Path to the XML file or a binary file object

    Returns:
        Lines in document order, one per <text> element

    Raises:
        MalformedInputError: if the XML is invalid or a line lacks a position
    """
    lines: list[PositionedLine] = []
    page_count = 0
    current_page = 0

    try:
        for event, elem in ET.iterparse(source, events=("start", "end")):
            if event == "start" and elem.tag == "page":
                page_count += 1
                number = elem.get("number")
                if number is None:
                    current_page = page_count
                else:
                    try:
                        current_page = int(number)
                    except ValueError:
                        raise MalformedInputError(
                            f"Page {page_count} has a non-integer number: {number!r}"
                        ) from None
            elif event == "end" and elem.tag == "text":
                lines.append(PositionedLine.from_attributes(
                    elem.attrib,
                    page=current_page,
                    text=_collapse(piece.strip() for piece in elem.itertext())
                ))
                elem.clear()
    except ET.ParseError as e:
        raise MalformedInputError(f"Invalid pdftohtml XML: {e}") from e

    return lines


def extract_lines_from_pdf(pdf_path: str) -> list[PositionedLine]:
    """
    Read positioned lines straight from a PDF using PyMuPDF.

    Coordinates are scaled by PDFTOHTML_ZOOM and rounded so they live in the
    same units as pdftohtml output.

    Args:
        pdf_path: Path to the PDF file

    Returns:
        Lines in page-then-top order
    """
    try:
        doc = fitz.open(pdf_path)
    except RuntimeError as e:
        raise MalformedInputError(f"Cannot read PDF {pdf_path}: {e}") from e
    lines: list[PositionedLine] = []

    with doc:
        for page_num in range(len(doc)):
            page_lines = [
                _pdf_line(line, page_num + 1)  # 1-indexed
                for block in doc[page_num].get_text("dict")["blocks"]
                if block.get("type") == 0  # skip images
                for line in block.get("lines", [])
            ]
            page_lines.sort(key=lambda l: (l.top, l.left))
            lines.extend(page_lines)

    return lines


def _pdf_line(line: dict, page: int) -> PositionedLine:
    """Convert a PyMuPDF line dict to pdftohtml units."""
    x0, y0, x1, y1 = line["bbox"]
    return PositionedLine(
        top=round(y0 * PDFTOHTML_ZOOM),
        left=round(x0 * PDFTOHTML_ZOOM),
        height=round((y1 - y0) * PDFTOHTML_ZOOM),
        page=page,
        text=_collapse(span.get("text", "") for span in line.get("spans", []))
    )


def extract_lines(input_path: str) -> list[PositionedLine]:
    """
    Pick a collector for the input: PDF by suffix, otherwise pdftohtml XML.

    '-' reads XML from stdin.
    """
    if input_path == "-":
        return extract_lines_from_xml(sys.stdin.buffer)
    if Path(input_path).suffix.lower() == '.pdf':
        return extract_lines_from_pdf(input_path)
    return extract_lines_from_xml(input_path)

