"""
Leg-end and game-end scoring.
"""

from __future__ import annotations

import logging

from .actions import RaceBetPayout
from .betting import PlayerLegBets, RaceBet, RaceBets
from .board import Board
from .constants import (
    LEG_SECOND_PLACE_PAYOUT,
    LEG_WRONG_BET_PENALTY,
    RACE_BET_OVERFLOW_PAYOUT,
    RACE_BET_PAYOUTS,
    RACE_BET_PENALTY,
    CamelColor,
)
from .players import Players

logger = logging.getLogger(__name__)


def race_bet_payout(correct_index: int) -> int:
    """Payout for the n-th correct race bet (0-based): 8, 5, 3, 2, 1, 1, ..."""
    if correct_index < len(RACE_BET_PAYOUTS):
        return RACE_BET_PAYOUTS[correct_index]
    return RACE_BET_OVERFLOW_PAYOUT


def score_leg(board: Board, leg_bets: PlayerLegBets, players: Players) -> dict[int, int]:
    """
    Pay out every leg betting tile at the end of a leg.

    Per tile:
    - Camel in 1st place: +tile value
    - Camel in 2nd place: +1
    - Otherwise: -1

    Each player's net change is applied at once and money is floored at 0.

    Returns:
        Dict mapping player id to net coin change (before flooring).

    Example:
        >>> # Player 0 holds Blue@5 and Green@3; Blue wins, Green is 3rd
        >>> score_leg(board, leg_bets, players)[0]
        4
    """
    rankings = board.get_rankings()
    first_place, second_place = rankings[0], rankings[1]

    deltas: dict[int, int] = {p.id: 0 for p in players}

    for player in players:
        for tile in leg_bets.for_player(player.id):
            if tile.color == first_place:
                deltas[player.id] += tile.value
            elif tile.color == second_place:
                deltas[player.id] += LEG_SECOND_PLACE_PAYOUT
            else:
                deltas[player.id] -= LEG_WRONG_BET_PENALTY

    for player_id, delta in deltas.items():
        if delta >= 0:
            players.pay(player_id, delta)
        else:
            players.charge(player_id, -delta)

    logger.info("Leg scoring: 1st %s, 2nd %s, deltas %s",
                first_place.value, second_place.value, deltas)
    return deltas


def _score_race_list(
    bets: list[RaceBet],
    target: CamelColor,
    is_winner: bool,
    players: Players,
) -> list[RaceBetPayout]:
    payouts = []
    correct_index = 0
    for bet in bets:
        if bet.color == target:
            amount = race_bet_payout(correct_index)
            correct_index += 1
            players.pay(bet.player_id, amount)
        else:
            amount = -RACE_BET_PENALTY
            players.charge(bet.player_id, RACE_BET_PENALTY)
        payouts.append(RaceBetPayout(bet.player_id, bet.color, is_winner, amount))
    return payouts


def score_race_bets(board: Board, race_bets: RaceBets, players: Players) -> list[RaceBetPayout]:
    """
    Reveal race cards at the end of the game.

    Winner and loser bets are scored independently, each in the order the
    cards were played: the first correct bettor gets 8, the second 5, then
    3, 2, 1 and 1 for everyone after that. A wrong card costs 1 coin
    (money floored at 0).

    Returns:
        One RaceBetPayout per card, winner cards first.
    """
    rankings = board.get_rankings()
    winner, loser = rankings[0], rankings[-1]

    payouts = _score_race_list(race_bets.winner_bets, winner, True, players)
    payouts += _score_race_list(race_bets.loser_bets, loser, False, players)

    for payout in payouts:
        kind = "winner" if payout.is_winner else "loser"
        logger.info("Player %d %s bet on %s: %+d",
                    payout.player_id, kind, payout.color.value, payout.amount)
    return payouts
