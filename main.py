"""
Script Extractor - CLI Interface

Parse movie scripts into a structured format. Input is poppler's
`pdftohtml -xml` output or a PDF; XML is read from stdin if no file
or '-' is given.

Usage:
    python main.py [input] [-p PAGES] [-f xml|json|markdown] [-o OUTPUT] [-v]
"""
import argparse
import sys
from pathlib import Path

from tqdm import tqdm

from models import ScriptExtractorError
from pdf_extractor import extract_lines
from page_filter import parse_page_range
from script_parser import SECTION_GAP_THRESHOLD
from script_extractor import convert_lines, count_parts
from serializer import format_json, write_markdown_files, write_summary, write_xml


def _page_range(value: str) -> tuple[int, int]:
    page_range = parse_page_range(value)
    if page_range is None:
        raise argparse.ArgumentTypeError(f"Invalid page range '{value}'")
    return page_range


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Parse movie scripts into a structured format",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input has to be in the format generated by poppler's 'pdftohtml -xml',
or a PDF file.

Examples:
    pdftohtml -xml -stdout script.pdf | python main.py    # XML to stdout
    python main.py script.xml -p 3-15 -o scenes.xml       # Pages 3 to 15
    python main.py script.pdf -f json -o script.json      # Read PDF directly
    python main.py script.xml -f markdown -o scenes/      # One file per scene
        """
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Input file in poppler's xml format or a PDF (default: stdin)"
    )
    parser.add_argument(
        "-p", "--pages",
        type=_page_range,
        help="Single page or range of pages to extract: '42' or '3-15'"
    )
    parser.add_argument(
        "-f", "--format",
        choices=["xml", "json", "markdown"],
        default="xml",
        help="Output format (default: xml)"
    )
    parser.add_argument(
        "-o", "--output",
        help="Output file, or directory for markdown (default: stdout)"
    )
    parser.add_argument(
        "--section-gap",
        type=int,
        default=SECTION_GAP_THRESHOLD,
        help=f"Vertical gap that starts a new section (default: {SECTION_GAP_THRESHOLD})"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed output"
    )

    args = parser.parse_args(argv)

    if args.format == "markdown" and not args.output:
        parser.error("markdown output needs an output directory (-o)")
    if args.format == "markdown" and Path(args.output).exists() and not Path(args.output).is_dir():
        print(f"Error: Output is not a directory: {args.output}", file=sys.stderr)
        sys.exit(1)

    # Validate input file
    if args.input != "-":
        input_path = Path(args.input)
        if not input_path.is_file():
            print(f"Error: File not found: {args.input}", file=sys.stderr)
            sys.exit(1)

    source_name = "stdin" if args.input == "-" else Path(args.input).name
    if args.verbose:
        print(f"Processing: {source_name}", file=sys.stderr)

    try:
        with tqdm(total=3, desc="Progress", disable=not sys.stderr.isatty()) as pbar:
            pbar.set_description("Reading lines")
            lines = extract_lines(args.input)
            pbar.update(1)

            pbar.set_description("Parsing script")
            result = convert_lines(
                lines,
                page_range=args.pages,
                section_gap=args.section_gap
            )
            pbar.update(1)

            pbar.set_description("Writing output")
            written = _write_output(result, args)
            pbar.update(1)
    except ScriptExtractorError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.verbose:
        layout = result.layout
        counts = count_parts(result.script)
        print(f"\n{'='*50}", file=sys.stderr)
        print(f"Total pages: {result.total_pages}", file=sys.stderr)
        print(f"Total lines: {result.total_lines}", file=sys.stderr)
        print(f"Columns: direction={layout.direction_x} dialogue={layout.dialogue_x} "
              f"speaker={layout.speaker_x} parenthetical={layout.speaker_direction_x}",
              file=sys.stderr)
        print(f"Scenes: {counts['scenes']}, locations: {counts['locations']}, "
              f"directions: {counts['directions']}, dialogues: {counts['dialogues']}",
              file=sys.stderr)
        print(f"{'='*50}", file=sys.stderr)

        if result.warnings:
            print("\nWarnings:", file=sys.stderr)
            for w in result.warnings:
                print(f"  - {w}", file=sys.stderr)

        for path in written:
            print(f"  - {path}", file=sys.stderr)


def _write_output(result, args) -> list[str]:
    """Write the script in the requested format; returns created paths."""
    if args.format == "markdown":
        files = write_markdown_files(result.script, args.output)
        files.append(write_summary(result, args.output, args.input))
        return files

    if args.format == "json":
        text = format_json(result.script) + "\n"
        if args.output:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(text)
            return [args.output]
        sys.stdout.write(text)
        return []

    if args.output:
        with open(args.output, 'wb') as f:
            write_xml(result.script, f)
        return [args.output]
    write_xml(result.script, sys.stdout.buffer)
    sys.stdout.buffer.write(b"\n")
    return []


if __name__ == "__main__":
    main()
