"""
The Camel Up rules engine.

CamelUpGame owns the track, pyramid, ledgers and players and runs the
turn state machine. Callers feed it intents with submit() and advance
time with update(); both return the events produced.

Headless callers (tests, simulations, the gym env) use play(), which
submits an intent and immediately expires the post-action delay.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .actions import (
    CrazyRollResult,
    DesertTilePlaced,
    Event,
    GameOver,
    Intent,
    LegBetTaken,
    LegScored,
    MovementComplete,
    PlaceDesertTile,
    PlaceRaceBet,
    PyramidRollResult,
    RaceBetPlaced,
    RollPyramid,
    TakeLegBet,
    TurnAdvanced,
    describe_intent,
)
from .ai import AiPolicy, make_policy
from .betting import LegBettingTiles, PlayerLegBets, RaceBets
from .board import Board, DesertTiles
from .constants import (
    CAMELS,
    DESERT_TILE_DELAY,
    DICE_ROLL_DELAY,
    LAST_SPACE,
    LEG_BET_DELAY,
    MAX_PLAYERS,
    RACE_BET_DELAY,
    ROLL_REWARD,
    AiDifficulty,
    CamelColor,
)
from .movement import apply_roll
from .players import PlayerData, Players
from .pyramid import Pyramid
from .scoring import score_leg, score_race_bets

logger = logging.getLogger(__name__)


@dataclass
class PlayerSetup:
    """Seat configuration for a new match."""
    name: str
    is_ai: bool = False
    difficulty: AiDifficulty = AiDifficulty.BASIC


@dataclass
class TurnState:
    """
    Where the match is in its turn cycle.

    Attributes:
        current_player: Id of the player to act.
        action_taken: The current player has acted and the delay is running.
        leg_number: 1-based leg counter.
        leg_has_started: At least one action happened this leg.
        turn_delay_timer: Seconds left before the turn advances.
        awaiting_action: Waiting for the current player to act.
    """
    current_player: int = 0
    action_taken: bool = False
    leg_number: int = 1
    leg_has_started: bool = False
    turn_delay_timer: float = 0.0
    awaiting_action: bool = True


DEFAULT_PLAYERS = (
    PlayerSetup("Player 1"),
    PlayerSetup("Player 2 (AI)", is_ai=True),
)


class CamelUpGame:
    """
    A full Camel Up match.

    Example:
        >>> game = CamelUpGame(seed=42)
        >>> events = game.play(RollPyramid())
        >>> game.players.get(0).money
        4
    """

    def __init__(
        self,
        players: Optional[list[PlayerSetup]] = None,
        seed: Optional[int] = None,
        use_turn_delays: bool = False,
        rng: Optional[np.random.Generator] = None,
        board: Optional[Board] = None,
    ) -> None:
        """
        Args:
            players: Seats in turn order. Defaults to one human and one AI.
            seed: Seed for the engine's generator (ignored if rng is given).
            use_turn_delays: Hold each turn for the post-action delay so a
                             renderer can animate. Off for headless play.
            rng: Generator to draw every random outcome from.
            board: Starting track. Random setup when omitted.
        """
        setups = list(players) if players is not None else list(DEFAULT_PLAYERS)
        if not 1 <= len(setups) <= MAX_PLAYERS:
            raise ValueError(f"Player count must be between 1 and {MAX_PLAYERS}, got {len(setups)}")

        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.use_turn_delays = use_turn_delays

        self.players = Players([
            PlayerData(id=i, name=s.name, is_ai=s.is_ai) for i, s in enumerate(setups)
        ])
        self.policies: dict[int, AiPolicy] = {
            i: make_policy(s.difficulty, seed=int(self.rng.integers(2**31)))
            for i, s in enumerate(setups)
            if s.is_ai
        }

        self.pyramid = Pyramid()
        self.leg_tiles = LegBettingTiles()
        self.leg_bets = PlayerLegBets()
        self.race_bets = RaceBets()
        self.desert_tiles = DesertTiles()
        self.pyramid_tokens: dict[int, int] = {}
        self.turn = TurnState()

        self.finish_crossed = False
        self.game_over = False
        self.result: Optional[GameOver] = None

        if board is not None:
            board.check_invariants()
            self.board = board
        else:
            self.board = Board()
            self.setup_camels()

    def setup_camels(self) -> None:
        """Place all seven camels for the start of the race."""
        self.board = Board.create_random_start(self.rng)
        self.board.check_invariants()
        logger.info("Starting positions:\n%r", self.board)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def current_player(self) -> PlayerData:
        return self.players.current_player()

    def rankings(self) -> list[CamelColor]:
        return self.board.get_rankings()

    def leader(self) -> CamelColor:
        return self.board.leader()

    def last_place(self) -> CamelColor:
        return self.board.last_place()

    def leg_awaiting_scoring(self) -> bool:
        """Five dice are out and the leg has not been scored yet."""
        return self.turn.leg_has_started and self.pyramid.all_dice_rolled()

    def valid_desert_spaces(self) -> list[int]:
        """Spaces 2-16 that hold neither a camel nor a desert tile."""
        return [
            space for space in range(1, LAST_SPACE + 1)
            if not self.board.has_camel(space) and not self.desert_tiles.is_space_occupied(space)
        ]

    def legal_actions(self, player_id: Optional[int] = None) -> list[Intent]:
        """
        Every intent ``player_id`` could submit right now.

        Order is fixed: roll, leg bets by color, winner cards, loser cards,
        then desert placements by space (oasis before mirage).
        """
        if player_id is None:
            player_id = self.current_player.id
        if self.game_over or self.turn.action_taken or self.leg_awaiting_scoring():
            return []

        player = self.players.get(player_id)
        actions: list[Intent] = []

        if not self.pyramid.all_dice_rolled():
            actions.append(RollPyramid())

        for color in CAMELS:
            if self.leg_tiles.top_tile(color) is not None:
                actions.append(TakeLegBet(color))

        for is_winner in (True, False):
            for color in CAMELS:
                if color in player.available_race_cards:
                    actions.append(PlaceRaceBet(color, is_winner))

        if player.has_desert_tile:
            for space in self.valid_desert_spaces():
                actions.append(PlaceDesertTile(space, True))
                actions.append(PlaceDesertTile(space, False))

        return actions

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def submit(self, intent: Intent) -> list[Event]:
        """
        Validate and apply an intent from the current player.

        Returns:
            Events produced, or an empty list if the intent was rejected.
        """
        if self.game_over:
            return self._reject(intent, "game is over")
        if self.turn.action_taken:
            return self._reject(intent, "already acted this turn")
        if self.leg_awaiting_scoring():
            return self._reject(intent, "leg is over")

        player = self.current_player

        if isinstance(intent, RollPyramid):
            events, delay = self._roll(player), DICE_ROLL_DELAY
        elif isinstance(intent, TakeLegBet):
            events, delay = self._take_leg_bet(player, intent), LEG_BET_DELAY
        elif isinstance(intent, PlaceRaceBet):
            events, delay = self._place_race_bet(player, intent), RACE_BET_DELAY
        elif isinstance(intent, PlaceDesertTile):
            events, delay = self._place_desert_tile(player, intent), DESERT_TILE_DELAY
        else:
            raise ValueError(f"Unknown intent: {intent!r}")

        if not events:
            return events

        self.turn.action_taken = True
        self.turn.awaiting_action = False
        self.turn.leg_has_started = True
        self.turn.turn_delay_timer = delay if self.use_turn_delays else 0.0
        return events

    def _reject(self, intent: Intent, reason: str) -> list[Event]:
        logger.debug("Rejected %s from player %d: %s",
                     describe_intent(intent), self.current_player.id, reason)
        return []

    def _roll(self, player: PlayerData) -> list[Event]:
        if self.pyramid.all_dice_rolled():
            return self._reject(RollPyramid(), "all dice rolled this leg")

        roll = self.pyramid.roll_random_die(self.rng)
        if roll is None:
            return self._reject(RollPyramid(), "pyramid is empty")

        self.players.pay(player.id, ROLL_REWARD)
        if roll.is_crazy:
            roll_event = CrazyRollResult(player.id, roll.color, roll.value)
        else:
            self.pyramid_tokens[player.id] = self.pyramid_tokens.get(player.id, 0) + 1
            roll_event = PyramidRollResult(player.id, roll.color, roll.value)

        move = apply_roll(self.board, roll, self.desert_tiles, self.players)
        logger.info("Player %d rolled %s %d: space %d -> %d",
                    player.id, roll.color.value, roll.value,
                    move.start_space + 1, move.end_space + 1)

        if move.crossed_finish:
            self.finish_crossed = True
            logger.info("%s crossed the finish line", roll.color.value)

        return [roll_event, MovementComplete(move.crossed_finish, move)]

    def _take_leg_bet(self, player: PlayerData, intent: TakeLegBet) -> list[Event]:
        tile = self.leg_tiles.take_tile(intent.color)
        if tile is None:
            return self._reject(intent, "no tiles left")

        self.leg_bets.add_bet(player.id, tile)
        logger.info("Player %d took %s leg tile worth %d",
                    player.id, tile.color.value, tile.value)
        return [LegBetTaken(player.id, tile.color, tile.value)]

    def _place_race_bet(self, player: PlayerData, intent: PlaceRaceBet) -> list[Event]:
        if intent.color not in player.available_race_cards:
            return self._reject(intent, "race card already played")

        player.available_race_cards.discard(intent.color)
        if intent.is_winner:
            self.race_bets.place_winner_bet(intent.color, player.id)
        else:
            self.race_bets.place_loser_bet(intent.color, player.id)

        logger.info("Player %d played a race card", player.id)
        return [RaceBetPlaced(player.id, intent.color, intent.is_winner)]

    def _place_desert_tile(self, player: PlayerData, intent: PlaceDesertTile) -> list[Event]:
        if not player.has_desert_tile:
            return self._reject(intent, "desert tile already placed")
        if not 1 <= intent.space <= LAST_SPACE:
            return self._reject(intent, "space out of range")
        if self.board.has_camel(intent.space):
            return self._reject(intent, "space holds a camel")
        if self.desert_tiles.is_space_occupied(intent.space):
            return self._reject(intent, "space holds a desert tile")

        self.desert_tiles.remove_player_tile(player.id)
        self.desert_tiles.place_tile(intent.space, player.id, intent.is_oasis)
        player.has_desert_tile = False

        logger.info("Player %d: %s", player.id, describe_intent(intent))
        return [DesertTilePlaced(player.id, intent.space, intent.is_oasis)]

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def update(self, dt: float = 0.0) -> list[Event]:
        """
        Advance the clock by ``dt`` seconds.

        Once the post-action delay has run out, the match either ends (a
        camel crossed the finish) or passes to the next player. A leg whose
        five dice are out is then scored and reset.
        """
        events: list[Event] = []
        if self.game_over:
            return events

        if self.turn.action_taken:
            self.turn.turn_delay_timer -= dt
            if self.turn.turn_delay_timer > 0:
                return events
            self.turn.turn_delay_timer = 0.0

            if self.finish_crossed:
                events.extend(self._end_game())
                return events

            self.players.advance_turn()
            self.turn.current_player = self.current_player.id
            self.turn.action_taken = False
            self.turn.awaiting_action = True
            events.append(TurnAdvanced(self.turn.current_player))

        if self.leg_awaiting_scoring() and not self.turn.action_taken:
            events.append(self._end_leg())

        return events

    def play(self, intent: Intent) -> list[Event]:
        """Submit an intent and run the turn to completion."""
        events = self.submit(intent)
        if events:
            events.extend(self.update(math.inf))
        return events

    def take_ai_turn(self) -> list[Event]:
        """Let the current player's AI policy choose and play an intent."""
        player = self.current_player
        policy = self.policies.get(player.id)
        if policy is None or self.game_over:
            return []

        intent = policy.choose_action(self, player.id)
        if intent is None:
            return []
        logger.debug("AI player %d chose %s", player.id, describe_intent(intent))
        return self.play(intent)

    def run_ai_turns(self, max_turns: int = 1000) -> list[Event]:
        """Play AI turns until a human is to act or the match ends."""
        events: list[Event] = []
        for _ in range(max_turns):
            if self.game_over or not self.current_player.is_ai:
                break
            turn_events = self.take_ai_turn()
            if not turn_events:
                break
            events.extend(turn_events)
        return events

    # ------------------------------------------------------------------
    # Leg and game end
    # ------------------------------------------------------------------

    def _end_leg(self) -> LegScored:
        rankings = self.rankings()
        deltas = score_leg(self.board, self.leg_bets, self.players)
        event = LegScored(self.turn.leg_number, rankings[0], rankings[1], deltas)
        logger.info("Leg %d over", self.turn.leg_number)

        self.pyramid.reset()
        self.leg_tiles.reset()
        self.leg_bets.clear_all()
        self.pyramid_tokens.clear()
        self.desert_tiles.clear()
        for player in self.players:
            player.has_desert_tile = True

        self.turn.leg_number += 1
        self.turn.leg_has_started = False
        return event

    def _end_game(self) -> list[Event]:
        rankings = self.rankings()
        deltas = score_leg(self.board, self.leg_bets, self.players)
        leg_event = LegScored(self.turn.leg_number, rankings[0], rankings[1], deltas)

        payouts = score_race_bets(self.board, self.race_bets, self.players)
        self.result = GameOver(
            winner=rankings[0],
            loser=rankings[-1],
            payouts=tuple(payouts),
            standings=tuple(p.id for p in self.players.standings()),
            winning_players=tuple(p.id for p in self.players.winners()),
        )
        self.game_over = True
        self.turn.awaiting_action = False

        logger.info("Game over: %s wins the race, %s comes last; winning players %s",
                    rankings[0].value, rankings[-1].value, list(self.result.winning_players))
        return [leg_event, self.result]

    def __repr__(self) -> str:
        """Pretty print the match."""
        lines = [f"CamelUpGame (leg {self.turn.leg_number}):"]

        lines.append("  Board:")
        for space_idx, stack in enumerate(self.board.stacks):
            tile = self.desert_tiles.get_tile(space_idx)
            if stack:
                names = ", ".join(c.value for c in stack)
                lines.append(f"    Space {space_idx + 1}: [{names}] (bottom→top)")
            elif tile is not None:
                kind = "oasis" if tile.is_oasis else "mirage"
                lines.append(f"    Space {space_idx + 1}: {kind} (player {tile.owner_id})")

        remaining = ["Crazy" if c is None else c.value for c in self._remaining_dice_labels()]
        lines.append(f"  Dice remaining: {remaining}")

        lines.append("  Tiles available:")
        for color in CAMELS:
            lines.append(f"    {color.value}: {self.leg_tiles.available_values(color)}")

        lines.append("  Players:")
        for player in self.players:
            bets = ", ".join(f"{t.color.value}@{t.value}" for t in self.leg_bets.for_player(player.id))
            marker = "*" if player.id == self.current_player.id else " "
            lines.append(f"   {marker}{player.name}: ${player.money}, bets: [{bets}]")

        return "\n".join(lines)

    def _remaining_dice_labels(self) -> list[Optional[CamelColor]]:
        regular = self.pyramid.remaining_regular_colors()
        labels: list[Optional[CamelColor]] = list(regular)
        if len(regular) < self.pyramid.remaining_dice_count():
            labels.append(None)
        return labels
