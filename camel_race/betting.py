"""
Leg betting tiles and race (winner/loser) bets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .constants import CAMELS, LEG_BET_TILE_VALUES, CamelColor


@dataclass(frozen=True)
class LegBetTile:
    """Wager on a camel leading the current leg."""
    color: CamelColor
    value: int


class LegBettingTiles:
    """
    One stack of tiles per camel color.

    Each stack is stored bottom to top ([2, 3, 5]) so claims pop the
    5 first, then the 3, then the 2.
    """

    def __init__(self) -> None:
        self.stacks: dict[CamelColor, list[LegBetTile]] = {}
        self.reset()

    def top_tile(self, color: CamelColor) -> Optional[LegBetTile]:
        """Peek at the next tile for ``color`` without taking it."""
        stack = self.stacks[color]
        return stack[-1] if stack else None

    def take_tile(self, color: CamelColor) -> Optional[LegBetTile]:
        """
        Pop the top tile for ``color``.

        Returns:
            The tile, or None once the color's stack is empty.

        Example:
            >>> tiles = LegBettingTiles()
            >>> [tiles.take_tile(CamelColor.BLUE).value for _ in range(3)]
            [5, 3, 2]
            >>> tiles.take_tile(CamelColor.BLUE) is None
            True
        """
        stack = self.stacks[color]
        return stack.pop() if stack else None

    def available_values(self, color: CamelColor) -> list[int]:
        """Tile values still on the stack, top first."""
        return [tile.value for tile in reversed(self.stacks[color])]

    def reset(self) -> None:
        """Restore all three tiles for every color."""
        self.stacks = {
            color: [LegBetTile(color, v) for v in reversed(LEG_BET_TILE_VALUES)]
            for color in CAMELS
        }

    def copy(self) -> LegBettingTiles:
        clone = LegBettingTiles()
        clone.stacks = {c: list(stack) for c, stack in self.stacks.items()}
        return clone


@dataclass
class PlayerLegBets:
    """Tiles each player has claimed this leg, keyed by player id."""

    bets: dict[int, list[LegBetTile]] = field(default_factory=dict)

    def add_bet(self, player_id: int, tile: LegBetTile) -> None:
        self.bets.setdefault(player_id, []).append(tile)

    def for_player(self, player_id: int) -> list[LegBetTile]:
        return list(self.bets.get(player_id, []))

    def clear_all(self) -> None:
        self.bets = {}

    def copy(self) -> PlayerLegBets:
        return PlayerLegBets(bets={p: list(t) for p, t in self.bets.items()})


@dataclass(frozen=True)
class RaceBet:
    """A face-down race card played on the overall winner or loser."""
    color: CamelColor
    player_id: int


@dataclass
class RaceBets:
    """
    Winner and loser bets in the order they were placed.

    Submission order decides payouts, so both lists are append-only.
    """

    winner_bets: list[RaceBet] = field(default_factory=list)
    loser_bets: list[RaceBet] = field(default_factory=list)

    def place_winner_bet(self, color: CamelColor, player_id: int) -> None:
        self.winner_bets.append(RaceBet(color, player_id))

    def place_loser_bet(self, color: CamelColor, player_id: int) -> None:
        self.loser_bets.append(RaceBet(color, player_id))

    def copy(self) -> RaceBets:
        return RaceBets(winner_bets=list(self.winner_bets), loser_bets=list(self.loser_bets))
