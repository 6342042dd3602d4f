"""
Intents accepted by the engine and events it emits.

Intents are suggestions: the engine validates each one against the turn
state and the ledgers, and silently drops those that fail.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from .constants import CamelColor, CrazyCamelColor
from .movement import MoveResult


# =============================================================================
# Intents
# =============================================================================

@dataclass(frozen=True)
class RollPyramid:
    """Draw and roll a die from the pyramid (+1 coin)."""


@dataclass(frozen=True)
class TakeLegBet:
    """Claim the top leg betting tile of ``color``."""
    color: CamelColor


@dataclass(frozen=True)
class PlaceRaceBet:
    """Play a race card on ``color`` to win (or lose) the whole race."""
    color: CamelColor
    is_winner: bool


@dataclass(frozen=True)
class PlaceDesertTile:
    """Put the player's desert tile on ``space`` as an oasis or a mirage."""
    space: int
    is_oasis: bool


Intent = Union[RollPyramid, TakeLegBet, PlaceRaceBet, PlaceDesertTile]


def describe_intent(intent: Intent) -> str:
    """Short human-readable label, used by logs and renderers."""
    if isinstance(intent, RollPyramid):
        return "Roll pyramid"
    if isinstance(intent, TakeLegBet):
        return f"Leg bet on {intent.color.value}"
    if isinstance(intent, PlaceRaceBet):
        kind = "winner" if intent.is_winner else "loser"
        return f"Race {kind} bet on {intent.color.value}"
    if isinstance(intent, PlaceDesertTile):
        kind = "oasis" if intent.is_oasis else "mirage"
        return f"Place {kind} on space {intent.space + 1}"
    raise ValueError(f"Unknown intent: {intent!r}")


# =============================================================================
# Events
# =============================================================================

@dataclass(frozen=True)
class PyramidRollResult:
    """A racing camel's die came out of the pyramid."""
    player_id: int
    color: CamelColor
    value: int


@dataclass(frozen=True)
class CrazyRollResult:
    """The grey die came out of the pyramid."""
    player_id: int
    color: CrazyCamelColor
    value: int


@dataclass(frozen=True)
class MovementComplete:
    """A camel group finished moving."""
    crossed_finish: bool
    result: Optional[MoveResult] = None


@dataclass(frozen=True)
class LegBetTaken:
    player_id: int
    color: CamelColor
    value: int


@dataclass(frozen=True)
class RaceBetPlaced:
    player_id: int
    color: CamelColor
    is_winner: bool


@dataclass(frozen=True)
class DesertTilePlaced:
    player_id: int
    space: int
    is_oasis: bool


@dataclass(frozen=True)
class TurnAdvanced:
    player_id: int


@dataclass(frozen=True)
class LegScored:
    """
    Leg-end payouts.

    Attributes:
        leg_number: The leg that just ended.
        first: Camel in 1st place.
        second: Camel in 2nd place.
        deltas: Net coin change per player id, before the 0 floor.
    """
    leg_number: int
    first: CamelColor
    second: CamelColor
    deltas: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class RaceBetPayout:
    """One revealed race card."""
    player_id: int
    color: CamelColor
    is_winner: bool
    amount: int  # Positive payout, or -penalty


@dataclass(frozen=True)
class GameOver:
    """
    The race is over and every bet has been paid.

    Attributes:
        winner: Camel in 1st place.
        loser: Camel in last place.
        payouts: Race card reveals in submission order (winners, then losers).
        standings: Player ids sorted by final money, richest first.
        winning_players: Ids of every player tied for the most money.
    """
    winner: CamelColor
    loser: CamelColor
    payouts: tuple[RaceBetPayout, ...] = ()
    standings: tuple[int, ...] = ()
    winning_players: tuple[int, ...] = ()


Event = Union[
    PyramidRollResult,
    CrazyRollResult,
    MovementComplete,
    LegBetTaken,
    RaceBetPlaced,
    DesertTilePlaced,
    TurnAdvanced,
    LegScored,
    GameOver,
]
