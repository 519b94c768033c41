"""
Restricts a script to a range of pages.
"""
import copy
import re
from dataclasses import replace
from typing import Optional

from models import Script

PAGE_PATTERN = re.compile(r'^(\d+)$', re.ASCII)
PAGE_RANGE_PATTERN = re.compile(r'^(\d+)-(\d+)$', re.ASCII)


def parse_page_range(range_string: str) -> Optional[tuple[int, int]]:
    """
    Parse a --pages argument.

    '42' -> (42, 42), '3-15' -> (3, 15), anything else -> None
    """
    range_string = range_string.strip()
    match = PAGE_PATTERN.match(range_string)
    if match:
        page = int(match.group(1))
        return page, page
    match = PAGE_RANGE_PATTERN.match(range_string)
    if match:
        return int(match.group(1)), int(match.group(2))
    return None


def filter_script(script: Script, lower: int, upper: int) -> Script:
    """
    Keep only the scene parts on pages lower..upper (inclusive).

    Locations left without parts and scenes left without locations are
    dropped. The input script is not modified.
    """
    filtered: Script = []
    for scene in script:
        filtered_scene = []
        for location in scene:
            parts = [
                copy.deepcopy(part) for part in location.parts
                if lower <= part.page <= upper
            ]
            if parts:
                filtered_scene.append(replace(location, parts=parts))
        if filtered_scene:
            filtered.append(filtered_scene)
    return filtered
