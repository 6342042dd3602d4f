"""
Unit tests for camel ranking and board invariants.
"""

import numpy as np
import pytest

from camel_race.board import Board
from camel_race.constants import CAMELS, CamelColor, CrazyCamelColor

BLUE, GREEN, RED, YELLOW, PURPLE = CamelColor
BLACK, WHITE = CrazyCamelColor


class TestRankings:
    """Tests for get_rankings()."""

    def test_furthest_camel_leads(self, standard_board):
        """Ranking follows space first, then stack height."""
        assert standard_board.get_rankings() == [BLUE, GREEN, RED, YELLOW, PURPLE]

    def test_top_of_stack_is_ahead(self, make_board):
        """On a shared space the higher camel ranks first."""
        board = make_board({
            5: [GREEN, BLUE, RED, YELLOW, PURPLE],
            13: [BLACK],
            14: [WHITE],
        })

        assert board.get_rankings() == [PURPLE, YELLOW, RED, BLUE, GREEN]

    def test_crazy_camels_never_ranked(self, make_board):
        """A crazy camel in front does not appear in the rankings."""
        board = make_board({
            2: [BLUE, GREEN, RED, YELLOW, PURPLE, WHITE],
            15: [BLACK],
        })

        rankings = board.get_rankings()

        assert rankings == [PURPLE, YELLOW, RED, GREEN, BLUE]
        assert board.leader() == PURPLE
        assert board.last_place() == BLUE

    def test_crazy_camel_between_racers_keeps_order(self, make_board):
        """A crazy camel in the middle of a stack does not change racing order."""
        board = make_board({
            3: [BLUE, BLACK, GREEN],
            1: [RED, YELLOW, PURPLE],
            14: [WHITE],
        })

        assert board.get_rankings() == [GREEN, BLUE, PURPLE, YELLOW, RED]


class TestSetup:
    """Tests for random starting positions."""

    @pytest.mark.parametrize("seed", [0, 1, 2, 42, 1234])
    def test_random_start_places_every_camel(self, seed):
        """All seven camels are on the board once each."""
        board = Board.create_random_start(np.random.default_rng(seed))

        board.check_invariants()

    @pytest.mark.parametrize("seed", [0, 5, 99])
    def test_start_spaces(self, seed):
        """Racing camels start on spaces 1-3, crazy camels on 14-16."""
        board = Board.create_random_start(np.random.default_rng(seed))

        for camel in CAMELS:
            assert board.get_camel_position(camel)[0] in (0, 1, 2)
        for camel in CrazyCamelColor:
            assert board.get_camel_position(camel)[0] in (13, 14, 15)


class TestInvariants:
    """Tests for check_invariants()."""

    def test_missing_camel_fails(self, make_board):
        """A board missing a camel is rejected."""
        board = make_board({0: [BLUE, GREEN, RED, YELLOW], 13: [BLACK], 14: [WHITE]})

        with pytest.raises(AssertionError, match="Purple"):
            board.check_invariants()

    def test_duplicate_camel_fails(self, standard_board):
        """A camel on two spaces is rejected."""
        standard_board.place_camel(BLUE, 8)

        with pytest.raises(AssertionError, match="Blue"):
            standard_board.check_invariants()
