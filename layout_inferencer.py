"""
Infers column roles from the positional statistics of a screenplay.

Screenplays use a handful of fixed indents. The three most used horizontal
offsets are scene direction (flush left), dialogue (indented) and the
speaker name (indented furthest), in that left-to-right order.
"""
from collections import Counter
from typing import Sequence

from models import AmbiguousLayoutError, LayoutModel, PositionedLine

MIN_LAYOUT_COLUMNS = 3


def count_positions(
    lines: Sequence[PositionedLine]
) -> tuple[Counter, Counter]:
    """
    Count how often each horizontal offset and each vertical delta is used.

    The vertical delta is measured against the previous line on the same
    page; the first line of a page is measured from 0.

    Returns:
        Tuple of (offset usage counts, line height usage counts)
    """
    position_uses: Counter = Counter()
    line_height_uses: Counter = Counter()
    previous_top = 0
    previous_page = None

    for line in lines:
        if line.page != previous_page:
            previous_top = 0
            previous_page = line.page
        position_uses[line.left] += 1
        line_height_uses[line.top - previous_top] += 1
        previous_top = line.top

    return position_uses, line_height_uses


def infer_layout(lines: Sequence[PositionedLine]) -> LayoutModel:
    """
    Assign semantic roles to the offsets used in a document.

    Args:
        lines: The full line sequence in document order

    Returns:
        LayoutModel for the document

    Raises:
        AmbiguousLayoutError: if fewer than 3 distinct offsets are used
    """
    position_uses, line_height_uses = count_positions(lines)

    if len(position_uses) < MIN_LAYOUT_COLUMNS:
        raise AmbiguousLayoutError(len(position_uses))

    # most_common keeps first-seen order among equal counts
    ranked = [position for position, _ in position_uses.most_common()]
    direction_x, dialogue_x, speaker_x = sorted(ranked[:MIN_LAYOUT_COLUMNS])

    return LayoutModel(
        direction_x=direction_x,
        dialogue_x=dialogue_x,
        speaker_x=speaker_x,
        speaker_direction_x=_find_speaker_direction(
            ranked[MIN_LAYOUT_COLUMNS:], dialogue_x, speaker_x
        ),
        paragraph_line_height=_most_used_line_height(line_height_uses)
    )


def _find_speaker_direction(candidates: list[int], dialogue_x: int, speaker_x: int) -> int:
    """First remaining offset between dialogue and speaker, or 0."""
    for position in candidates:
        if dialogue_x < position < speaker_x:
            return position
    return 0


def _most_used_line_height(line_height_uses: Counter) -> int:
    """Most used vertical delta; the smallest delta wins a tie."""
    best_height = 0
    best_uses = 0
    for height in sorted(line_height_uses):
        if line_height_uses[height] > best_uses:
            best_height = height
            best_uses = line_height_uses[height]
    return best_height
