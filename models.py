"""
Data models for screenplay structure extraction.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional, Union


class ScriptExtractorError(Exception):
    """Base class for fatal conversion errors."""


class AmbiguousLayoutError(ScriptExtractorError):
    """Raised when the column structure of a document cannot be inferred."""

    def __init__(self, column_count: int):
        super().__init__(
            f"Script uses an ambiguous layout: found {column_count} distinct "
            f"horizontal offset(s), need at least 3"
        )
        self.column_count = column_count


class MalformedInputError(ScriptExtractorError):
    """Raised when a line is missing a positional attribute or cannot be read."""


@dataclass(frozen=True)
class PositionedLine:
    """A single physical line of text with its position on the page."""
    top: int                  # Vertical offset from the top of the page
    left: int                 # Horizontal offset from the left margin
    height: int               # Glyph height
    page: int                 # 1-indexed
    text: str                 # Trimmed, whitespace-collapsed

    @classmethod
    def from_attributes(cls, attributes: dict, page: int, text: str) -> "PositionedLine":
        """
        Build a line from raw string attributes (e.g. pdftohtml XML).

        Raises:
            MalformedInputError: if top, left or height is missing or not an integer
        """
        values = {}
        for name in ("top", "left", "height"):
            raw = attributes.get(name)
            if raw is None:
                raise MalformedInputError(
                    f"Line on page {page} is missing the '{name}' attribute"
                )
            try:
                values[name] = int(raw)
            except (TypeError, ValueError):
                raise MalformedInputError(
                    f"Line on page {page} has a non-integer '{name}' attribute: {raw!r}"
                ) from None
        return cls(page=page, text=text, **values)


@dataclass(frozen=True)
class LayoutModel:
    """Column roles inferred from the positional statistics of a document."""
    direction_x: int
    dialogue_x: int
    speaker_x: int
    speaker_direction_x: int  # 0 when no parenthetical column was found
    paragraph_line_height: int


@dataclass
class DialogueLine:
    """One entry of a dialogue: a parenthetical direction or spoken text."""
    kind: Literal["direction", "speech"]
    text: str


@dataclass
class SceneDirectionPart:
    """Narrative/action text."""
    text: str
    page: int


@dataclass
class DialoguePart:
    """A speaker with the lines they say."""
    speaker: str
    page: int
    lines: list[DialogueLine] = field(default_factory=list)


ScenePart = Union[SceneDirectionPart, DialoguePart]


@dataclass(frozen=True)
class Separator:
    """Marks a vertical gap or page reset between two text runs."""


@dataclass(frozen=True)
class LocationChange:
    """A scene heading such as 'INT. KITCHEN - DAY'."""
    raw: str


@dataclass(frozen=True)
class SceneChange:
    """A transition such as 'CUT TO:'."""


Token = Union[Separator, SceneDirectionPart, DialoguePart, LocationChange, SceneChange]


class LocationKind(str, Enum):
    """Kind of a location, taken from its scene heading marker."""
    UNDEFINED = "undefined"
    INTERNAL = "internal"
    EXTERNAL = "external"
    INTERNAL_EXTERNAL = "internal_external"


@dataclass
class Location:
    """A place in which part of a scene takes place."""
    kind: LocationKind = LocationKind.UNDEFINED
    name: str = ""
    parts: list[ScenePart] = field(default_factory=list)


Scene = list[Location]
Script = list[Scene]


@dataclass
class ConversionResult:
    """Result of converting one document."""
    script: Script
    layout: LayoutModel
    total_lines: int
    total_pages: int
    page_range: Optional[tuple[int, int]] = None
    warnings: list[str] = field(default_factory=list)
