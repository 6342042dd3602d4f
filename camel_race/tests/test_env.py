"""
Integration tests for the Gymnasium environment.
"""

import numpy as np
import pytest

from camel_race.constants import (
    ACTION_PLACE_OASIS,
    ACTION_ROLL,
    INVALID_ACTION_PENALTY,
    NUM_ACTIONS,
    NUM_CAMELS,
    TRACK_LENGTH,
)
from camel_race.env import CamelUpEnv


class TestEnvBasics:
    """Basic environment functionality tests."""

    def test_env_reset_returns_valid_obs(self):
        """Reset returns an observation inside the declared space."""
        env = CamelUpEnv(num_opponents=2, opponent_difficulty="random")
        obs, info = env.reset(seed=42)

        assert env.observation_space.contains(obs)
        assert info["agent_index"] == env.agent_index

    def test_obs_shapes_correct(self):
        """Observation shapes match space definition."""
        env = CamelUpEnv(num_opponents=3)
        obs, _ = env.reset(seed=42)

        assert obs["ranked_positions"].shape == (NUM_CAMELS,)
        assert obs["leg_tiles_available_by_rank"].shape == (NUM_CAMELS,)
        assert obs["desert_tiles"].shape == (TRACK_LENGTH,)
        assert obs["num_players"][0] == 4

    def test_ranked_positions_descend(self):
        """Camels are listed leader first."""
        env = CamelUpEnv(num_opponents=1)
        obs, _ = env.reset(seed=7)

        positions = list(obs["ranked_positions"])
        assert positions == sorted(positions, reverse=True)

    def test_bad_opponent_count(self):
        """At most seven opponents fit at the table."""
        with pytest.raises(ValueError):
            CamelUpEnv(num_opponents=8)


class TestActionMasking:
    """Tests for action masks."""

    def test_mask_length(self):
        """One entry per discrete action."""
        env = CamelUpEnv(num_opponents=2)
        env.reset(seed=1)

        assert env.action_masks().shape == (NUM_ACTIONS,)

    def test_roll_always_valid_on_agent_turn(self):
        """Rolling is legal whenever the agent is to act."""
        env = CamelUpEnv(num_opponents=2)
        env.reset(seed=1)

        assert env.action_masks()[ACTION_ROLL]

    def test_mask_empty_off_turn(self):
        """No action is valid while an opponent is to act."""
        env = CamelUpEnv(num_opponents=2)
        env.reset(seed=1)
        env.agent_index = (env.game.current_player.id + 1) % env.num_players

        assert not env.action_masks().any()

    def test_invalid_action_penalized(self):
        """A masked-out action costs the penalty and changes nothing."""
        env = CamelUpEnv(num_opponents=2)
        env.reset(seed=3)
        env.game.players.get(env.agent_index).has_desert_tile = False
        before = env.game.turn.current_player

        _, reward, terminated, _, _ = env.step(ACTION_PLACE_OASIS)

        assert reward == INVALID_ACTION_PENALTY
        assert not terminated
        assert env.game.turn.current_player == before

    def test_out_of_range_action(self):
        """Indices outside the action space raise."""
        env = CamelUpEnv(num_opponents=2)
        env.reset(seed=3)

        with pytest.raises(ValueError):
            env.step(NUM_ACTIONS)


class TestEpisodes:
    """Tests for complete episodes."""

    @pytest.mark.parametrize("difficulty", ["random", "basic", "smart", "mixed"])
    def test_masked_random_play_terminates(self, difficulty):
        """Choosing uniformly among valid actions finishes the match."""
        env = CamelUpEnv(num_opponents=3, opponent_difficulty=difficulty)
        env.reset(seed=0)
        rng = np.random.default_rng(0)

        terminated = False
        reward = 0.0
        for _ in range(1000):
            valid = np.flatnonzero(env.action_masks())
            _, reward, terminated, _, info = env.step(int(rng.choice(valid)))
            if terminated:
                break

        assert terminated
        assert env.game.game_over
        assert reward in (1.0, -1.0)
        assert len(info["player_coins"]) == 4

    def test_coin_reward(self):
        """Coin reward equals the agent's final money."""
        env = CamelUpEnv(num_opponents=1, reward_mode="coins")
        env.reset(seed=5)

        terminated = False
        while not terminated:
            _, reward, terminated, _, info = env.step(ACTION_ROLL)

        assert reward == info["player_coins"][env.agent_index]
