"""
Gymnasium environment for full Camel Up matches.

The agent holds one seat against AI opponents (random/basic/smart tiers)
until a camel crosses the finish line. Actions are rank-based so the
policy does not have to learn camel colors:

- 0: Roll
- 1-5: Leg bet on the camel in 1st-5th place
- 6/7: Oasis/mirage on the free space nearest two ahead of the leader
- 8-12: Race winner bet on the camel in 1st-5th place
- 13-17: Race loser bet on the camel in 1st-5th place
"""

from __future__ import annotations

from typing import Any, Literal, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .actions import Intent, PlaceDesertTile, PlaceRaceBet, RollPyramid, TakeLegBet, describe_intent
from .constants import (
    ACTION_PLACE_MIRAGE,
    ACTION_PLACE_OASIS,
    ACTION_ROLL,
    CRAZY_CAMELS,
    INVALID_ACTION_PENALTY,
    LAST_SPACE,
    LEG_BET_ACTION_TO_RANK,
    MAX_PLAYERS,
    NUM_ACTIONS,
    NUM_CAMELS,
    RACE_LOSER_ACTION_TO_RANK,
    RACE_WINNER_ACTION_TO_RANK,
    TRACK_LENGTH,
    AiDifficulty,
)
from .game_state import CamelUpGame, PlayerSetup


class CamelUpEnv(gym.Env):
    """
    Gymnasium environment for a full Camel Up match.

    Example:
        >>> env = CamelUpEnv(num_opponents=3, opponent_difficulty="smart", seed=0)
        >>> obs, info = env.reset()
        >>> obs, reward, terminated, truncated, info = env.step(0)  # Roll
    """

    metadata = {"render_modes": ["human"]}

    def __init__(
        self,
        num_opponents: int = 3,
        opponent_difficulty: Literal["random", "basic", "smart", "mixed"] = "basic",
        reward_mode: Literal["win", "coins", "combined"] = "win",
        render_mode: Optional[str] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            num_opponents: Number of AI opponents (1-7).
            opponent_difficulty: AI tier for every opponent, or "mixed".
            reward_mode: "win" for +1/-1, "coins" for final money, "combined".
            render_mode: "human" for text output, None for silent.
            seed: Random seed.
        """
        super().__init__()

        if not 1 <= num_opponents < MAX_PLAYERS:
            raise ValueError(f"num_opponents must be between 1 and {MAX_PLAYERS - 1}")

        self.num_opponents = num_opponents
        self.num_players = num_opponents + 1
        self.opponent_difficulty = opponent_difficulty
        self.reward_mode = reward_mode
        self.render_mode = render_mode

        self._rng = np.random.default_rng(seed)
        self.agent_index = 0

        self.observation_space = spaces.Dict({
            "ranked_positions": spaces.Box(low=0, high=LAST_SPACE, shape=(NUM_CAMELS,), dtype=np.int8),
            "dice_rolled_by_rank": spaces.MultiBinary(NUM_CAMELS),
            "leg_tiles_available_by_rank": spaces.Box(low=0, high=5, shape=(NUM_CAMELS,), dtype=np.int8),
            "crazy_positions": spaces.Box(low=0, high=LAST_SPACE, shape=(len(CRAZY_CAMELS),), dtype=np.int8),
            "crazy_die_rolled": spaces.MultiBinary(1),
            "current_leg": spaces.Box(low=1, high=50, shape=(1,), dtype=np.int8),
            "game_progress": spaces.Box(low=0, high=1, shape=(1,), dtype=np.float32),
            # 0=none, 1=oasis, -1=mirage
            "desert_tiles": spaces.Box(low=-1, high=1, shape=(TRACK_LENGTH,), dtype=np.int8),
            "my_desert_tile_available": spaces.MultiBinary(1),
            "race_winner_bet_count": spaces.Box(low=0, high=40, shape=(1,), dtype=np.int8),
            "race_loser_bet_count": spaces.Box(low=0, high=40, shape=(1,), dtype=np.int8),
            "my_race_cards_by_rank": spaces.MultiBinary(NUM_CAMELS),
            "num_players": spaces.Box(low=2, high=MAX_PLAYERS, shape=(1,), dtype=np.int8),
            "my_rank": spaces.Box(low=1, high=MAX_PLAYERS, shape=(1,), dtype=np.int8),
            "leader_coin_gap": spaces.Box(low=0, high=200, shape=(1,), dtype=np.int16),
        })

        self.action_space = spaces.Discrete(NUM_ACTIONS)

        self.game: Optional[CamelUpGame] = None

    def _opponent_difficulty(self) -> AiDifficulty:
        if self.opponent_difficulty == "mixed":
            tiers = list(AiDifficulty)
            return tiers[int(self._rng.integers(len(tiers)))]
        return AiDifficulty(self.opponent_difficulty)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[dict[str, Any]] = None,
    ) -> tuple[dict[str, np.ndarray], dict[str, Any]]:
        """Start a new match with the agent in a random seat."""
        super().reset(seed=seed)

        if seed is not None:
            self._rng = np.random.default_rng(seed)

        self.agent_index = int(self._rng.integers(0, self.num_players))
        setups = []
        for seat in range(self.num_players):
            if seat == self.agent_index:
                setups.append(PlayerSetup("Agent"))
            else:
                setups.append(PlayerSetup(f"Bot {seat}", is_ai=True, difficulty=self._opponent_difficulty()))

        self.game = CamelUpGame(players=setups, rng=self._rng)
        self._play_opponents()

        if self.render_mode == "human":
            print(f"\n=== NEW GAME (Agent is Player {self.agent_index}) ===")
            print(self.game)

        return self._get_observation(), self._get_info()

    def step(
        self,
        action: int,
    ) -> tuple[dict[str, np.ndarray], float, bool, bool, dict[str, Any]]:
        """Play the agent's action, then every opponent turn up to the agent's next one."""
        assert self.game is not None, "Must call reset() first"

        if not 0 <= action < NUM_ACTIONS:
            raise ValueError(f"Invalid action: {action}")

        if not self.action_masks()[action]:
            if self.render_mode == "human":
                print(f"  [INVALID] Agent tried action {action}")
            return self._get_observation(), float(INVALID_ACTION_PENALTY), False, False, self._get_info()

        intent = self._resolve_action(action)
        if self.render_mode == "human":
            self._render_intent(self.agent_index, intent)
        self.game.play(intent)

        if not self.game.game_over:
            self._play_opponents()

        if self.game.game_over:
            return self._finalize_game()

        return self._get_observation(), 0.0, False, False, self._get_info()

    def _play_opponents(self) -> None:
        """Let AI seats act until it is the agent's turn or the match ends."""
        game = self.game
        while not game.game_over and game.current_player.id != self.agent_index:
            player_id = game.current_player.id
            intent = game.policies[player_id].choose_action(game, player_id)
            if intent is None:
                break
            if self.render_mode == "human":
                self._render_intent(player_id, intent)
            leg = game.turn.leg_number
            game.play(intent)
            if self.render_mode == "human" and game.turn.leg_number != leg:
                print(f"\n=== LEG {leg} COMPLETE ===")

    def _resolve_action(self, action: int) -> Intent:
        """Translate a rank-based action index into an intent for the agent."""
        rankings = self.game.rankings()

        if action == ACTION_ROLL:
            return RollPyramid()
        if action in LEG_BET_ACTION_TO_RANK:
            return TakeLegBet(rankings[LEG_BET_ACTION_TO_RANK[action]])
        if action in (ACTION_PLACE_OASIS, ACTION_PLACE_MIRAGE):
            return PlaceDesertTile(self._best_desert_space(), action == ACTION_PLACE_OASIS)
        if action in RACE_WINNER_ACTION_TO_RANK:
            return PlaceRaceBet(rankings[RACE_WINNER_ACTION_TO_RANK[action]], True)
        return PlaceRaceBet(rankings[RACE_LOSER_ACTION_TO_RANK[action]], False)

    def _best_desert_space(self) -> int:
        """Free space nearest to two ahead of the leader."""
        leader_pos = self.game.board.get_camel_position(self.game.leader())[0]
        return min(self.game.valid_desert_spaces(), key=lambda s: abs(s - leader_pos - 2))

    def _finalize_game(self) -> tuple[dict[str, np.ndarray], float, bool, bool, dict[str, Any]]:
        if self.render_mode == "human":
            print("\n=== GAME COMPLETE ===")
            print(f"  Final rankings: {[c.value for c in self.game.rankings()]}")
            print(f"  Final coins: {[p.money for p in self.game.players]}")

        return self._get_observation(), self._calculate_reward(), True, False, self._get_info()

    def _calculate_reward(self) -> float:
        """Final reward based on reward mode."""
        my_coins = self.game.players.get(self.agent_index).money
        max_coins = max(p.money for p in self.game.players)

        if self.reward_mode == "win":
            return 1.0 if my_coins == max_coins else -1.0

        elif self.reward_mode == "coins":
            return float(my_coins)

        else:  # combined
            won = 1.0 if my_coins == max_coins else 0.0
            return 0.7 * won + 0.3 * (my_coins / 50.0)

    def action_masks(self) -> np.ndarray:
        """Return boolean mask of valid actions."""
        masks = np.zeros(NUM_ACTIONS, dtype=bool)

        if self.game is None or self.game.current_player.id != self.agent_index:
            return masks

        legal = self.game.legal_actions(self.agent_index)
        if not legal:
            return masks

        rankings = self.game.rankings()

        masks[ACTION_ROLL] = RollPyramid() in legal

        for action, rank_idx in LEG_BET_ACTION_TO_RANK.items():
            masks[action] = TakeLegBet(rankings[rank_idx]) in legal

        can_place = any(isinstance(a, PlaceDesertTile) for a in legal)
        masks[ACTION_PLACE_OASIS] = can_place
        masks[ACTION_PLACE_MIRAGE] = can_place

        for action, rank_idx in RACE_WINNER_ACTION_TO_RANK.items():
            masks[action] = PlaceRaceBet(rankings[rank_idx], True) in legal
        for action, rank_idx in RACE_LOSER_ACTION_TO_RANK.items():
            masks[action] = PlaceRaceBet(rankings[rank_idx], False) in legal

        return masks

    def _get_observation(self) -> dict[str, np.ndarray]:
        """Build observation dictionary."""
        game = self.game
        rankings = game.rankings()
        positions = game.board.positions()
        unrolled = game.pyramid.remaining_regular_colors()
        me = game.players.get(self.agent_index)

        ranked_positions = np.array([positions[c][0] for c in rankings], dtype=np.int8)
        dice_rolled = np.array([0 if c in unrolled else 1 for c in rankings], dtype=np.int8)
        tiles = np.array([
            (game.leg_tiles.available_values(c) or [0])[0] for c in rankings
        ], dtype=np.int8)

        desert_arr = np.zeros(TRACK_LENGTH, dtype=np.int8)
        for space, tile in game.desert_tiles.tiles.items():
            desert_arr[space] = 1 if tile.is_oasis else -1

        coins = sorted((p.money for p in game.players), reverse=True)
        my_rank = coins.index(me.money) + 1
        leader_gap = max(0, coins[0] - me.money)

        return {
            "ranked_positions": ranked_positions,
            "dice_rolled_by_rank": dice_rolled,
            "leg_tiles_available_by_rank": tiles,
            "crazy_positions": np.array([positions[c][0] for c in CRAZY_CAMELS], dtype=np.int8),
            "crazy_die_rolled": np.array([int(game.pyramid.crazy_die_rolled())], dtype=np.int8),
            "current_leg": np.array([min(game.turn.leg_number, 50)], dtype=np.int8),
            "game_progress": np.array([ranked_positions[0] / LAST_SPACE], dtype=np.float32),
            "desert_tiles": desert_arr,
            "my_desert_tile_available": np.array([int(me.has_desert_tile)], dtype=np.int8),
            "race_winner_bet_count": np.array([len(game.race_bets.winner_bets)], dtype=np.int8),
            "race_loser_bet_count": np.array([len(game.race_bets.loser_bets)], dtype=np.int8),
            "my_race_cards_by_rank": np.array(
                [int(c in me.available_race_cards) for c in rankings], dtype=np.int8
            ),
            "num_players": np.array([self.num_players], dtype=np.int8),
            "my_rank": np.array([my_rank], dtype=np.int8),
            "leader_coin_gap": np.array([leader_gap], dtype=np.int16),
        }

    def _get_info(self) -> dict[str, Any]:
        if self.game is None:
            return {}

        return {
            "rankings": self.game.rankings(),
            "agent_index": self.agent_index,
            "current_leg": self.game.turn.leg_number,
            "player_coins": [p.money for p in self.game.players],
        }

    def _render_intent(self, player_id: int, intent: Intent) -> None:
        name = "Agent" if player_id == self.agent_index else f"Bot {player_id}"
        print(f"  {name}: {describe_intent(intent)}")

    def render(self) -> None:
        """Render current state."""
        if self.render_mode == "human" and self.game is not None:
            print(f"\n=== Current State (Leg {self.game.turn.leg_number}) ===")
            print(self.game)

    def close(self) -> None:
        pass
