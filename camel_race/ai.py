"""
AI policies for Camel Up.

Three tiers pick from the engine's legal actions:
- Random: uniform over legal actions.
- Basic: grab the leader's tiles, late winner bets, otherwise roll.
- Smart: table-driven leg bet EV, race bets on clear leaders/laggards,
  oasis in front of the leader, otherwise roll.

Also provides a Monte Carlo estimator of leg and race outcomes that
completes the current leg with the real pyramid (crazy die included).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

import numpy as np

from .actions import Intent, PlaceDesertTile, PlaceRaceBet, RollPyramid, TakeLegBet
from .board import Board
from .constants import (
    AI_THINK_DELAY,
    BASIC_AI_LATE_LEG_DICE,
    BASIC_AI_LEADER_BET_CHANCE,
    BASIC_AI_WINNER_BET_CHANCE,
    CAMELS,
    DICE_PER_LEG,
    LEG_BET_TILE_VALUES,
    LEG_SECOND_PLACE_PAYOUT,
    LEG_WRONG_BET_PENALTY,
    SMART_AI_CONSIDER_EV,
    SMART_AI_DESERT_CHANCE,
    SMART_AI_DESERT_LOOKAHEAD,
    SMART_AI_LEG_ODDS,
    SMART_AI_LOSER_BET_CHANCE,
    SMART_AI_MIN_GAP,
    SMART_AI_RACE_BET_PROGRESS,
    SMART_AI_TAKE_EV,
    SMART_AI_WINNER_BET_CHANCE,
    TRACK_LENGTH,
    AiDifficulty,
    CamelColor,
)
from .movement import apply_roll
from .pyramid import Pyramid

if TYPE_CHECKING:
    from .game_state import CamelUpGame


# =============================================================================
# Probability estimates
# =============================================================================

def estimate_leg_probabilities(
    board: Board,
    pyramid: Pyramid,
    simulations: int = 1000,
    rng: Optional[np.random.Generator] = None,
) -> dict[CamelColor, tuple[float, float]]:
    """
    Estimate P(1st) and P(2nd) at the end of the current leg for each camel.

    Desert tiles are ignored. If the leg is already over the current
    rankings are returned as certainties.

    Args:
        board: Current track (not modified).
        pyramid: Current pyramid (not modified).
        simulations: Number of random leg completions.
        rng: Random generator for reproducibility.

    Returns:
        Dict mapping each racing camel to (P(1st), P(2nd)).
    """
    if pyramid.all_dice_rolled():
        rankings = board.get_rankings()
        return {
            c: (1.0, 0.0) if c == rankings[0] else (0.0, 1.0) if c == rankings[1] else (0.0, 0.0)
            for c in CAMELS
        }

    if rng is None:
        rng = np.random.default_rng()

    win_counts = {c: 0 for c in CAMELS}
    second_counts = {c: 0 for c in CAMELS}

    for _ in range(simulations):
        sim_board = board.copy()
        sim_pyramid = pyramid.copy()
        while not sim_pyramid.all_dice_rolled():
            roll = sim_pyramid.roll_random_die(rng)
            if apply_roll(sim_board, roll).crossed_finish:
                break
        rankings = sim_board.get_rankings()
        win_counts[rankings[0]] += 1
        second_counts[rankings[1]] += 1

    return {c: (win_counts[c] / simulations, second_counts[c] / simulations) for c in CAMELS}


def estimate_race_probabilities(
    board: Board,
    pyramid: Pyramid,
    simulations: int = 500,
    rng: Optional[np.random.Generator] = None,
    max_legs: int = 50,
) -> tuple[dict[CamelColor, float], dict[CamelColor, float]]:
    """
    Estimate each camel's chance of winning and of losing the whole race.

    Returns:
        Tuple of (P(win), P(lose)) dicts keyed by racing camel.
    """
    if rng is None:
        rng = np.random.default_rng()

    win_counts = {c: 0 for c in CAMELS}
    lose_counts = {c: 0 for c in CAMELS}

    for _ in range(simulations):
        sim_board = board.copy()
        sim_pyramid = pyramid.copy()
        for _ in range(max_legs * DICE_PER_LEG):
            if sim_pyramid.all_dice_rolled():
                sim_pyramid.reset()
            roll = sim_pyramid.roll_random_die(rng)
            if apply_roll(sim_board, roll).crossed_finish:
                break
        rankings = sim_board.get_rankings()
        win_counts[rankings[0]] += 1
        lose_counts[rankings[-1]] += 1

    return (
        {c: win_counts[c] / simulations for c in CAMELS},
        {c: lose_counts[c] / simulations for c in CAMELS},
    )


def calculate_leg_bet_ev(
    color: CamelColor,
    tile_value: int,
    rankings: list[CamelColor],
    unrolled: list[CamelColor],
) -> float:
    """
    Expected coins from taking ``color``'s top leg tile, using the fixed
    odds table for the camel's current rank and whether its die is still
    in the pyramid.

    Example:
        >>> # Leader with its die unrolled: 0.7 * 5 + 0.2 * 1 - 0.1 * 1
        >>> round(calculate_leg_bet_ev(CamelColor.BLUE, 5, [CamelColor.BLUE], [CamelColor.BLUE]), 2)
        3.6
    """
    if color not in rankings:
        return -1.0
    bucket = min(rankings.index(color), 3)
    p_first, p_second = SMART_AI_LEG_ODDS[(bucket, color in unrolled)]
    p_other = 1.0 - p_first - p_second
    return p_first * tile_value + p_second * LEG_SECOND_PLACE_PAYOUT - p_other * LEG_WRONG_BET_PENALTY


# =============================================================================
# Policies
# =============================================================================

def choose_random_action(actions: list[Intent], rng: np.random.Generator) -> Intent:
    """Pick any legal action uniformly."""
    return actions[int(rng.integers(len(actions)))]


def choose_basic_action(game: CamelUpGame, actions: list[Intent], rng: np.random.Generator) -> Intent:
    """Leader-chasing heuristics, rolling when nothing stands out."""
    leader = game.leader()
    take_leader = TakeLegBet(leader)
    top = game.leg_tiles.top_tile(leader)

    if top is not None and top.value == LEG_BET_TILE_VALUES[0] and take_leader in actions:
        return take_leader

    if rng.random() < BASIC_AI_LEADER_BET_CHANCE and take_leader in actions:
        return take_leader

    if game.pyramid.remaining_dice_count() <= BASIC_AI_LATE_LEG_DICE:
        winner_bet = PlaceRaceBet(leader, True)
        if winner_bet in actions and rng.random() < BASIC_AI_WINNER_BET_CHANCE:
            return winner_bet

    if RollPyramid() in actions:
        return RollPyramid()

    return choose_random_action(actions, rng)


def choose_smart_action(
    game: CamelUpGame,
    player_id: int,
    actions: list[Intent],
    rng: np.random.Generator,
) -> Intent:
    """Leg bets by expected value, race bets on clear gaps, oasis ahead of the leader."""
    player = game.players.get(player_id)
    rankings = game.rankings()
    positions = game.board.positions()
    unrolled = game.pyramid.remaining_regular_colors()

    best_bet: Optional[TakeLegBet] = None
    best_ev = SMART_AI_CONSIDER_EV
    for color in CAMELS:
        tile = game.leg_tiles.top_tile(color)
        if tile is None or TakeLegBet(color) not in actions:
            continue
        ev = calculate_leg_bet_ev(color, tile.value, rankings, unrolled)
        if ev > best_ev:
            best_bet, best_ev = TakeLegBet(color), ev

    if best_bet is not None and best_ev > SMART_AI_TAKE_EV:
        return best_bet

    progress = len(game.pyramid.rolled_dice) / DICE_PER_LEG
    if progress >= SMART_AI_RACE_BET_PROGRESS and player.available_race_cards:
        leader, second = rankings[0], rankings[1]
        lead = positions[leader][0] - positions[second][0]
        winner_bet = PlaceRaceBet(leader, True)
        if lead >= SMART_AI_MIN_GAP and rng.random() < SMART_AI_WINNER_BET_CHANCE and winner_bet in actions:
            return winner_bet

        last, second_last = rankings[-1], rankings[-2]
        behind = positions[second_last][0] - positions[last][0]
        loser_bet = PlaceRaceBet(last, False)
        if behind >= SMART_AI_MIN_GAP and rng.random() < SMART_AI_LOSER_BET_CHANCE and loser_bet in actions:
            return loser_bet

    if best_bet is not None:
        return best_bet

    if player.has_desert_tile:
        target = positions[rankings[0]][0] + SMART_AI_DESERT_LOOKAHEAD
        if target < TRACK_LENGTH:
            for space in (target, target + 1):
                oasis = PlaceDesertTile(space, True)
                if oasis in actions and rng.random() < SMART_AI_DESERT_CHANCE:
                    return oasis

    if RollPyramid() in actions:
        return RollPyramid()

    return choose_random_action(actions, rng)


@dataclass
class AiConfig:
    """
    Difficulty tier and think delay for an AI seat.

    The engine never waits on ``think_delay``: headless callers run
    ``take_ai_turn()`` directly, and a presentation layer reads it to pause
    before asking the policy.
    """
    difficulty: AiDifficulty = AiDifficulty.BASIC
    think_delay: float = AI_THINK_DELAY


@dataclass
class AiPolicy:
    """
    An AI seat's decision maker with its own random generator.

    Attributes:
        config: Difficulty and think delay.
        rng: Generator for the policy's coin flips.
    """
    config: AiConfig = field(default_factory=AiConfig)
    rng: np.random.Generator = field(default_factory=np.random.default_rng)

    def choose_action(self, game: CamelUpGame, player_id: int) -> Optional[Intent]:
        """
        Choose an intent for ``player_id`` from the game's legal actions.

        Returns:
            The intent, or None if the player has nothing legal to do.
        """
        actions = game.legal_actions(player_id)
        if not actions:
            return None

        difficulty = self.config.difficulty
        if difficulty == AiDifficulty.RANDOM:
            return choose_random_action(actions, self.rng)
        if difficulty == AiDifficulty.BASIC:
            return choose_basic_action(game, actions, self.rng)
        return choose_smart_action(game, player_id, actions, self.rng)


def make_policy(difficulty: AiDifficulty = AiDifficulty.BASIC, seed: Optional[int] = None) -> AiPolicy:
    """Create a policy for ``difficulty`` seeded for reproducibility."""
    return AiPolicy(config=AiConfig(difficulty=difficulty), rng=np.random.default_rng(seed))
