"""
Classifies positioned lines by column and merges them into script tokens.
"""
from typing import Optional, Sequence

from models import (
    DialogueLine,
    DialoguePart,
    LayoutModel,
    LocationChange,
    PositionedLine,
    SceneChange,
    SceneDirectionPart,
    Separator,
    Token,
)

# A vertical jump larger than this starts a new section
SECTION_GAP_THRESHOLD = 18

LOCATION_CHANGE_PREFIXES = ("INT.", "EXT.")
SCENE_CHANGE_PREFIX = "CUT TO"


def is_location_change(text: str) -> bool:
    """Scene headings start with INT. or EXT."""
    return text.startswith(LOCATION_CHANGE_PREFIXES)


def is_scene_change(text: str) -> bool:
    return text.startswith(SCENE_CHANGE_PREFIX)


def _append(existing: str, text: str) -> str:
    return f"{existing} {text}" if existing else text


class TokenBuilder:
    """
    Builds the token sequence, holding the part that is still being merged
    in a separate open slot.

    A SceneDirectionPart or DialoguePart stays open while following lines
    continue it. Any other token closes it first.
    """

    def __init__(self):
        self.tokens: list[Token] = []
        self._open: Optional[Token] = None

    def close(self) -> None:
        if self._open is not None:
            self.tokens.append(self._open)
            self._open = None

    def push(self, token: Token) -> None:
        self.close()
        self.tokens.append(token)

    def add_direction(self, text: str, page: int) -> None:
        if not isinstance(self._open, SceneDirectionPart):
            self.close()
            self._open = SceneDirectionPart(text="", page=page)
        self._open.text = _append(self._open.text, text)

    def _open_dialogue(self, page: int) -> DialoguePart:
        if not isinstance(self._open, DialoguePart):
            self.close()
            self._open = DialoguePart(speaker="", page=page)
        return self._open

    def add_speaker(self, text: str, page: int) -> None:
        dialogue = self._open_dialogue(page)
        dialogue.speaker += text

    def add_dialogue_line(self, kind: str, text: str, page: int) -> None:
        dialogue = self._open_dialogue(page)
        if dialogue.lines and dialogue.lines[-1].kind == kind:
            dialogue.lines[-1].text = _append(dialogue.lines[-1].text, text)
        else:
            dialogue.lines.append(DialogueLine(kind=kind, text=text))

    def finish(self) -> list[Token]:
        self.close()
        return self.tokens


def extract_tokens(
    lines: Sequence[PositionedLine],
    layout: LayoutModel,
    *,
    section_gap: int = SECTION_GAP_THRESHOLD
) -> list[Token]:
    """
    Turn the line sequence into a token sequence.

    Args:
        lines: Lines in document order
        layout: Column roles from infer_layout()
        section_gap: Largest vertical delta that still continues a section

    Returns:
        Tokens in document order; Separators mark section boundaries
    """
    builder = TokenBuilder()
    last_top = 0

    for line in lines:
        if not line.text:
            continue

        delta = line.top - last_top
        if delta > section_gap or delta < 0:
            builder.push(Separator())

        if line.left == layout.direction_x:
            if is_location_change(line.text):
                builder.push(LocationChange(raw=line.text))
            else:
                builder.add_direction(line.text, line.page)
        elif line.left == layout.speaker_x:
            builder.add_speaker(line.text, line.page)
        elif layout.speaker_direction_x and line.left == layout.speaker_direction_x:
            # 0 means no parenthetical column was found
            builder.add_dialogue_line("direction", line.text, line.page)
        elif line.left == layout.dialogue_x:
            builder.add_dialogue_line("speech", line.text, line.page)
        elif is_scene_change(line.text):
            builder.push(SceneChange())
        # anything else is a page number or margin artifact

        last_top = line.top

    return builder.finish()
