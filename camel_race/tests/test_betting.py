"""
Unit tests for the leg and race betting ledgers.
"""

from camel_race.betting import LegBettingTiles, LegBetTile, PlayerLegBets, RaceBets
from camel_race.constants import CAMELS, CamelColor

BLUE, GREEN, RED, YELLOW, PURPLE = CamelColor


class TestLegBetTiles:
    """Tests for taking leg betting tiles."""

    def test_take_first_tile_returns_5(self):
        """First tile taken from a camel is worth 5."""
        tiles = LegBettingTiles()

        assert tiles.take_tile(BLUE).value == 5

    def test_take_tiles_in_order(self):
        """Tiles come off in order 5, 3, 2, then nothing."""
        tiles = LegBettingTiles()

        assert tiles.take_tile(BLUE).value == 5
        assert tiles.take_tile(BLUE).value == 3
        assert tiles.take_tile(BLUE).value == 2
        assert tiles.take_tile(BLUE) is None

    def test_top_tile_peeks_without_taking(self):
        """top_tile does not change the stack."""
        tiles = LegBettingTiles()

        assert tiles.top_tile(GREEN).value == 5
        assert tiles.top_tile(GREEN).value == 5
        assert tiles.available_values(GREEN) == [5, 3, 2]

    def test_colors_are_independent(self):
        """Taking one color's tile leaves the others alone."""
        tiles = LegBettingTiles()

        tiles.take_tile(RED)

        assert tiles.available_values(RED) == [3, 2]
        for color in CAMELS:
            if color != RED:
                assert tiles.available_values(color) == [5, 3, 2]

    def test_empty_stack_top_tile_is_none(self):
        """An exhausted color has no top tile."""
        tiles = LegBettingTiles()
        for _ in range(3):
            tiles.take_tile(YELLOW)

        assert tiles.top_tile(YELLOW) is None
        assert tiles.available_values(YELLOW) == []

    def test_reset_restores_tiles(self):
        """Reset gives every color 5, 3, 2 again."""
        tiles = LegBettingTiles()
        tiles.take_tile(PURPLE)
        tiles.take_tile(PURPLE)

        tiles.reset()

        assert all(tiles.available_values(c) == [5, 3, 2] for c in CAMELS)


class TestPlayerLegBets:
    """Tests for the per-player leg bet store."""

    def test_bets_recorded_per_player(self):
        """Each player sees only their own tiles, in claim order."""
        bets = PlayerLegBets()
        bets.add_bet(0, LegBetTile(BLUE, 5))
        bets.add_bet(1, LegBetTile(BLUE, 3))
        bets.add_bet(0, LegBetTile(GREEN, 5))

        assert bets.for_player(0) == [LegBetTile(BLUE, 5), LegBetTile(GREEN, 5)]
        assert bets.for_player(1) == [LegBetTile(BLUE, 3)]
        assert bets.for_player(2) == []

    def test_clear_all(self):
        """Clearing empties every player's bets."""
        bets = PlayerLegBets()
        bets.add_bet(0, LegBetTile(BLUE, 5))

        bets.clear_all()

        assert bets.for_player(0) == []


class TestRaceBets:
    """Tests for the race betting ledger."""

    def test_bets_keep_submission_order(self):
        """Winner and loser bets are stored in the order placed."""
        bets = RaceBets()
        bets.place_winner_bet(BLUE, 2)
        bets.place_winner_bet(BLUE, 0)
        bets.place_loser_bet(RED, 1)

        assert [(b.color, b.player_id) for b in bets.winner_bets] == [(BLUE, 2), (BLUE, 0)]
        assert [(b.color, b.player_id) for b in bets.loser_bets] == [(RED, 1)]

    def test_copy_is_independent(self):
        """Copies do not share lists."""
        bets = RaceBets()
        clone = bets.copy()

        clone.place_winner_bet(GREEN, 0)

        assert bets.winner_bets == []
