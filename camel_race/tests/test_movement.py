"""
Unit tests for camel movement, stacking and desert tiles.
"""

import pytest

from camel_race.board import Board, DesertTiles
from camel_race.constants import CamelColor, CrazyCamelColor
from camel_race.movement import apply_roll, move_camel, move_crazy_camel
from camel_race.players import PlayerData, Players
from camel_race.pyramid import RollResult

BLUE, GREEN, RED, YELLOW, PURPLE = CamelColor
BLACK, WHITE = CrazyCamelColor


class TestSingleCamelMove:
    """Tests for basic single camel movement."""

    def test_single_camel_move_to_empty_space(self, make_board):
        """Camel moves to an empty space."""
        board = make_board({0: [BLUE]})

        result = move_camel(board, BLUE, 2)

        assert board.stacks[0] == []
        assert board.stacks[2] == [BLUE]
        assert result.start_space == 0
        assert result.end_space == 2
        assert not result.crossed_finish

    def test_move_past_finish_crosses_and_caps(self, make_board):
        """A camel on space 14 rolling 3 crosses the line and sits on space 16."""
        board = make_board({13: [RED]})

        result = move_camel(board, RED, 3)

        assert result.crossed_finish
        assert board.stacks[15] == [RED]

    def test_exact_last_space_does_not_cross(self, make_board):
        """Landing on space 16 itself is not a finish."""
        board = make_board({13: [RED]})

        result = move_camel(board, RED, 2)

        assert not result.crossed_finish
        assert board.stacks[15] == [RED]


class TestStacking:
    """Tests for carrying and landing on stacks."""

    def test_camel_lands_on_stack_goes_on_top(self, make_board):
        """Camel landing on occupied space goes on top of stack."""
        board = make_board({3: [BLUE], 0: [GREEN]})

        move_camel(board, GREEN, 3)

        assert board.stacks[3] == [BLUE, GREEN]

    def test_camel_carries_camels_above(self, make_board):
        """Moving camel takes everything above it, in order."""
        board = make_board({2: [BLUE, GREEN, RED]})

        result = move_camel(board, GREEN, 1)

        assert board.stacks[2] == [BLUE]
        assert board.stacks[3] == [GREEN, RED]
        assert result.moved == (GREEN, RED)

    def test_bottom_camel_moves_whole_stack(self, make_board):
        """The bottom camel carries the entire stack onto another stack."""
        board = make_board({2: [BLUE, GREEN], 4: [YELLOW]})

        move_camel(board, BLUE, 2)

        assert board.stacks[2] == []
        assert board.stacks[4] == [YELLOW, BLUE, GREEN]

    def test_racing_camel_carries_crazy_camel(self, make_board):
        """Crazy camels riding on top move forward with the group."""
        board = make_board({5: [PURPLE, BLACK]})

        move_camel(board, PURPLE, 1)

        assert board.stacks[6] == [PURPLE, BLACK]


class TestDesertTiles:
    """Tests for oasis and mirage tiles."""

    def _players(self):
        return Players([PlayerData(id=0, name="A"), PlayerData(id=1, name="B")])

    def test_oasis_pushes_forward_and_lands_on_top(self, make_board):
        """An oasis adds one space and the group lands on top; owner earns a coin."""
        board = make_board({2: [BLUE], 4: [GREEN]})
        tiles = DesertTiles()
        tiles.place_tile(3, owner_id=1, is_oasis=True)
        players = self._players()

        result = move_camel(board, BLUE, 1, tiles, players)

        assert board.stacks[4] == [GREEN, BLUE]
        assert result.end_space == 4
        assert result.desert_tile is not None
        assert players.get(1).money == 4
        assert players.get(0).money == 3

    def test_mirage_pulls_back_and_lands_underneath(self, make_board):
        """A mirage subtracts one space and the group slides under the stack."""
        board = make_board({2: [BLUE, RED], 4: [GREEN]})
        tiles = DesertTiles()
        tiles.place_tile(5, owner_id=0, is_oasis=False)
        players = self._players()

        result = move_camel(board, BLUE, 3, tiles, players)

        assert board.stacks[4] == [BLUE, RED, GREEN]
        assert result.landed_underneath
        assert players.get(0).money == 4

    def test_mirage_on_space_one_floors_at_zero(self, make_board):
        """A mirage cannot push a camel behind the start."""
        board = make_board({0: [BLUE, YELLOW]})
        tiles = DesertTiles()
        tiles.place_tile(1, owner_id=0, is_oasis=False)

        move_camel(board, YELLOW, 1, tiles)

        assert board.stacks[0] == [YELLOW, BLUE]

    def test_oasis_on_last_space_crosses_finish(self, make_board):
        """An oasis on space 16 pushes the group over the line."""
        board = make_board({13: [RED]})
        tiles = DesertTiles()
        tiles.place_tile(15, owner_id=0, is_oasis=True)

        result = move_camel(board, RED, 2, tiles)

        assert result.crossed_finish
        assert board.stacks[15] == [RED]

    def test_tile_ignored_when_passing_over(self, make_board):
        """Only the landing space matters."""
        board = make_board({2: [BLUE]})
        tiles = DesertTiles()
        tiles.place_tile(3, owner_id=0, is_oasis=True)
        players = self._players()

        move_camel(board, BLUE, 2, tiles, players)

        assert board.stacks[4] == [BLUE]
        assert players.get(0).money == 3


class TestCrazyCamels:
    """Tests for backwards-running crazy camels."""

    def test_crazy_camel_moves_backwards(self, make_board):
        """Crazy camel moves back by the die value."""
        board = make_board({14: [WHITE]})

        result = move_crazy_camel(board, WHITE, 2)

        assert board.stacks[12] == [WHITE]
        assert not result.crossed_finish

    def test_crazy_camel_stops_at_start(self, make_board):
        """Crazy camel never goes below space 1."""
        board = make_board({1: [BLACK]})

        move_crazy_camel(board, BLACK, 3)

        assert board.stacks[0] == [BLACK]

    def test_crazy_camel_carries_and_lands_on_top(self, make_board):
        """Racing camels riding a crazy camel travel backwards with it, onto the top."""
        board = make_board({6: [BLACK, BLUE], 4: [GREEN]})

        move_crazy_camel(board, BLACK, 2)

        assert board.stacks[6] == []
        assert board.stacks[4] == [GREEN, BLACK, BLUE]

    def test_crazy_camel_ignores_desert_tiles(self, make_board):
        """apply_roll never diverts a crazy camel."""
        board = make_board({10: [WHITE]})
        tiles = DesertTiles()
        tiles.place_tile(9, owner_id=0, is_oasis=False)

        apply_roll(board, RollResult(WHITE, 1), tiles)

        assert board.stacks[9] == [WHITE]


class TestBoardQueries:
    """Tests for board helpers."""

    def test_unknown_camel_raises(self):
        """Looking up a camel that is not on the board fails."""
        board = Board()

        with pytest.raises(ValueError, match="Blue"):
            board.get_camel_position(BLUE)

    def test_has_camel_counts_crazy_camels(self, make_board):
        """Crazy camels occupy spaces too."""
        board = make_board({7: [BLACK]})

        assert board.has_camel(7)
        assert not board.has_camel(8)
