"""
Folds the token sequence into scenes and locations.
"""
import re
from typing import Sequence

from models import (
    DialoguePart,
    Location,
    LocationChange,
    LocationKind,
    SceneChange,
    SceneDirectionPart,
    Script,
    Token,
)

LOCATION_PATTERN = re.compile(r'^(?:(INT\.|EXT\.|INT\./EXT\.)\s+)?(.+)$')

LOCATION_KINDS = {
    "INT.": LocationKind.INTERNAL,
    "EXT.": LocationKind.EXTERNAL,
    "INT./EXT.": LocationKind.INTERNAL_EXTERNAL,
}


def parse_location(raw: str) -> Location:
    """
    Parse a scene heading into a Location with no parts.

    'EXT. PARK - DAY' -> Location(EXTERNAL, 'PARK - DAY')
    """
    match = LOCATION_PATTERN.match(raw.strip())
    if not match:
        return Location(name=raw)
    marker, name = match.groups()
    return Location(
        kind=LOCATION_KINDS.get(marker, LocationKind.UNDEFINED),
        name=name.strip()
    )


class ScriptBuilder:
    """
    Cursor over the script being built.

    Locations live in a flat list; each scene is a list of indices into it.
    The current scene is the last one and its current location is the last
    index of that scene.
    """

    def __init__(self):
        self._locations: list[Location] = []
        self._scenes: list[list[int]] = []
        self.new_scene()

    def _add_location(self, location: Location) -> None:
        self._locations.append(location)
        self._scenes[-1].append(len(self._locations) - 1)

    def current_scene(self) -> list[int]:
        return self._scenes[-1]

    def current_location(self) -> Location:
        return self._locations[self.current_scene()[-1]]

    def new_scene(self) -> None:
        """Start a scene seeded with an empty default location."""
        self._scenes.append([])
        self._add_location(Location())

    def change_scene(self) -> None:
        # consecutive transitions reuse the empty scene
        if self.current_location().parts:
            self.new_scene()

    def change_location(self, location: Location) -> None:
        if not self.current_location().parts:
            self.current_scene().pop()
        self._add_location(location)

    def add_part(self, part) -> None:
        self.current_location().parts.append(part)

    def build(self) -> Script:
        """Assemble the script, leaving out empty locations and scenes."""
        script: Script = []
        for scene_indices in self._scenes:
            scene = [self._locations[i] for i in scene_indices if self._locations[i].parts]
            if scene:
                script.append(scene)
        return script


def fold_scenes(tokens: Sequence[Token]) -> Script:
    """
    Build the scene/location tree from tokens.

    Args:
        tokens: Output of extract_tokens()

    Returns:
        Script where every scene has a location and every location has parts
    """
    builder = ScriptBuilder()

    for token in tokens:
        if isinstance(token, SceneChange):
            builder.change_scene()
        elif isinstance(token, LocationChange):
            builder.change_location(parse_location(token.raw))
        elif isinstance(token, (SceneDirectionPart, DialoguePart)):
            builder.add_part(token)
        # Separators only matter while merging lines

    return builder.build()
