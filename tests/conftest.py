"""Shared fixtures: a small screenplay laid out in pdftohtml units."""
from __future__ import annotations

import pytest

from models import LayoutModel, PositionedLine
from screenplay_columns import DIALOGUE_X, DIRECTION_X, SPEAKER_DIRECTION_X, SPEAKER_X


@pytest.fixture
def layout() -> LayoutModel:
    return LayoutModel(
        direction_x=DIRECTION_X,
        dialogue_x=DIALOGUE_X,
        speaker_x=SPEAKER_X,
        speaker_direction_x=SPEAKER_DIRECTION_X,
        paragraph_line_height=18,
    )


@pytest.fixture
def screenplay_lines() -> list[PositionedLine]:
    """Two pages: a heading, action, two dialogues, a transition and a new scene."""
    rows = [
        # (page, top, left, text)
        (1, 90, DIRECTION_X, "EXT. PARK - DAY"),
        (1, 126, DIRECTION_X, "A dog runs across the grass."),
        (1, 144, DIRECTION_X, "It stops at a bench."),
        (1, 180, SPEAKER_X, "ALICE"),
        (1, 198, SPEAKER_DIRECTION_X, "(smiling)"),
        (1, 216, DIALOGUE_X, "Hello there,"),
        (1, 234, DIALOGUE_X, "little one!"),
        (1, 270, SPEAKER_X, "BOB"),
        (1, 288, DIALOGUE_X, "Is he yours?"),
        (1, 324, 500, "CUT TO:"),
        (1, 1000, 450, "1."),
        (2, 90, DIRECTION_X, "INT. ALICE'S KITCHEN - NIGHT"),
        (2, 126, DIRECTION_X, "Alice feeds the dog."),
        (2, 162, SPEAKER_X, "ALICE"),
        (2, 180, DIALOGUE_X, "Good boy."),
    ]
    return [
        PositionedLine(top=top, left=left, height=17, page=page, text=text)
        for page, top, left, text in rows
    ]
