"""
Player records and turn order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import CAMELS, STARTING_MONEY, CamelColor


@dataclass
class PlayerData:
    """
    One seat at the table.

    Attributes:
        id: Seat index, also the turn-order position.
        name: Display name.
        money: Coins held. Never negative.
        has_desert_tile: True while the player's desert tile is in hand.
        available_race_cards: Colors the player can still bet on to win/lose.
        is_ai: Whether the AI policy plays this seat.
    """

    id: int
    name: str
    money: int = STARTING_MONEY
    has_desert_tile: bool = True
    available_race_cards: set[CamelColor] = field(default_factory=lambda: set(CAMELS))
    is_ai: bool = False


class Players:
    """Ordered player list with the index of the player to act."""

    def __init__(self, players: list[PlayerData]) -> None:
        if not players:
            raise ValueError("A match needs at least one player")
        self.players = players
        self.current_player_index = 0

    def __len__(self) -> int:
        return len(self.players)

    def __iter__(self):
        return iter(self.players)

    def get(self, player_id: int) -> PlayerData:
        for player in self.players:
            if player.id == player_id:
                return player
        raise KeyError(f"No player with id {player_id}")

    def current_player(self) -> PlayerData:
        return self.players[self.current_player_index]

    def advance_turn(self) -> None:
        self.current_player_index = (self.current_player_index + 1) % len(self.players)

    def pay(self, player_id: int, amount: int) -> None:
        self.get(player_id).money += amount

    def charge(self, player_id: int, amount: int) -> None:
        """Take coins from a player, flooring their money at 0."""
        player = self.get(player_id)
        player.money = max(0, player.money - amount)

    def standings(self) -> list[PlayerData]:
        """Players sorted by money, richest first (stable on ties)."""
        return sorted(self.players, key=lambda p: p.money, reverse=True)

    def winners(self) -> list[PlayerData]:
        """Every player tied for the most money."""
        top = max(p.money for p in self.players)
        return [p for p in self.players if p.money == top]

    def copy(self) -> Players:
        clone = Players([
            PlayerData(
                id=p.id,
                name=p.name,
                money=p.money,
                has_desert_tile=p.has_desert_tile,
                available_race_cards=set(p.available_race_cards),
                is_ai=p.is_ai,
            )
            for p in self.players
        ])
        clone.current_player_index = self.current_player_index
        return clone
