"""
Shared fixtures: hand-built boards and a scripted random generator.
"""

import pytest

from camel_race.board import Board
from camel_race.constants import CamelColor, CrazyCamelColor

BLUE, GREEN, RED, YELLOW, PURPLE = CamelColor
BLACK, WHITE = CrazyCamelColor


class ScriptedRng:
    """
    Stand-in for numpy's Generator that replays queued outcomes.

    Pyramid rolls call integers() to pick the die, choice() for the value
    and random() for the crazy camel's color.
    """

    def __init__(self, integers=(), choices=(), randoms=()):
        self._integers = list(integers)
        self._choices = list(choices)
        self._randoms = list(randoms)

    def integers(self, *args, **kwargs):
        return self._integers.pop(0)

    def choice(self, values):
        return self._choices.pop(0)

    def random(self):
        return self._randoms.pop(0)

    def shuffle(self, values):
        pass


@pytest.fixture
def make_board():
    """Build a Board from {space: [camels bottom to top]}."""
    def _make(layout):
        board = Board()
        for space, stack in layout.items():
            for camel in stack:
                board.place_camel(camel, space)
        return board
    return _make


@pytest.fixture
def standard_board(make_board):
    """Every camel placed: Blue leads on space 5, crazy camels near the finish."""
    return make_board({
        0: [PURPLE],
        1: [YELLOW, RED],
        3: [GREEN],
        4: [BLUE],
        13: [BLACK],
        14: [WHITE],
    })
