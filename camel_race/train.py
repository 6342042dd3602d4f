"""
Command line entry point for Camel Up.

Commands:
- simulate: headless AI-vs-AI matches with win/money statistics
- serve: JSON API for a human seat against AI seats
- train / eval: MaskablePPO agent on the full-match gymnasium env
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

import numpy as np

from .constants import MAX_PLAYERS, MIN_PLAYERS, AiDifficulty
from .game_state import CamelUpGame, PlayerSetup

logger = logging.getLogger(__name__)


def simulate_matches(
    difficulties: list[AiDifficulty],
    num_games: int = 100,
    seed: Optional[int] = None,
    max_turns: int = 2000,
    render: bool = False,
) -> dict[str, list[float]]:
    """
    Play all-AI matches and collect per-seat statistics.

    Args:
        difficulties: AI tier for each seat, in turn order.
        num_games: Matches to play.
        seed: Random seed.
        max_turns: Safety cap on turns per match.
        render: Print the final table of every match.

    Returns:
        Dict with "wins" (shared wins count for every tied seat) and
        "avg_money" per seat, plus "avg_legs".
    """
    rng = np.random.default_rng(seed)
    wins = [0] * len(difficulties)
    money = [0] * len(difficulties)
    legs = 0

    for _ in range(num_games):
        game = CamelUpGame(
            players=[
                PlayerSetup(f"{d.value.title()} {i + 1}", is_ai=True, difficulty=d)
                for i, d in enumerate(difficulties)
            ],
            rng=rng,
        )
        game.run_ai_turns(max_turns=max_turns)
        if not game.game_over:
            logger.warning("Match hit the %d turn cap without finishing", max_turns)
            continue

        for player_id in game.result.winning_players:
            wins[player_id] += 1
        for player in game.players:
            money[player.id] += player.money
        legs += game.turn.leg_number

        if render:
            print(game)

    return {
        "wins": [float(w) for w in wins],
        "avg_money": [m / num_games for m in money],
        "avg_legs": [legs / num_games],
    }


def train(
    total_timesteps: int = 500_000,
    num_opponents: int = 3,
    opponent_difficulty: str = "basic",
    reward_mode: str = "win",
    save_path: str = "camel_up_agent",
    load_path: str = None,
    seed: int = None,
    log_dir: str = "./logs",
    render: bool = False,
):
    """
    Train a MaskablePPO agent for full Camel Up matches.

    Args:
        total_timesteps: Total training timesteps.
        num_opponents: Number of opponents (1-7).
        opponent_difficulty: "random", "basic", "smart" or "mixed".
        reward_mode: "win", "coins", or "combined".
        save_path: Path to save the trained model.
        load_path: Path to existing model to continue training.
        seed: Random seed.
        log_dir: TensorBoard log directory.
        render: Whether to render during training.
    """
    try:
        from sb3_contrib import MaskablePPO
        from sb3_contrib.common.wrappers import ActionMasker
        from stable_baselines3.common.monitor import Monitor
    except ImportError:
        print("Error: sb3-contrib and stable-baselines3 are required for training.")
        print("Install with: pip install -e .[train]")
        return

    from .env import CamelUpEnv

    print("Creating full game environment...")
    print(f"  Opponents: {num_opponents} ({opponent_difficulty})")
    print(f"  Reward mode: {reward_mode}")

    env = CamelUpEnv(
        num_opponents=num_opponents,
        opponent_difficulty=opponent_difficulty,
        reward_mode=reward_mode,
        seed=seed,
        render_mode="human" if render else None,
    )

    def mask_fn(env):
        return env.action_masks()

    env = ActionMasker(env, mask_fn)
    env = Monitor(env)

    print(f"Training for {total_timesteps} timesteps...")

    if load_path and Path(load_path).exists():
        print(f"Loading existing model from {load_path}...")
        model = MaskablePPO.load(load_path, env=env)
        if log_dir:
            model.tensorboard_log = log_dir
    else:
        if load_path:
            print(f"Warning: Model path {load_path} not found. Starting fresh.")

        model = MaskablePPO(
            "MultiInputPolicy",
            env,
            verbose=1,
            tensorboard_log=log_dir,
            seed=seed,
            learning_rate=3e-4,
            n_steps=2048,
            batch_size=64,
            n_epochs=10,
            gamma=0.99,
            gae_lambda=0.95,
            clip_range=0.2,
            ent_coef=0.01,
        )

    try:
        model.learn(total_timesteps=total_timesteps, progress_bar=True)
    except KeyboardInterrupt:
        print("\nTraining interrupted. Saving...")

    model.save(save_path)
    print(f"Model saved to {save_path}")

    return model


def evaluate(
    model_path: str,
    num_episodes: int = 100,
    num_opponents: int = 3,
    opponent_difficulty: str = "basic",
    seed: int = None,
    render: bool = False,
):
    """Evaluate a trained model against AI opponents."""
    try:
        from sb3_contrib import MaskablePPO
        from sb3_contrib.common.wrappers import ActionMasker
    except ImportError:
        print("Error: sb3-contrib is required for evaluation.")
        return

    from .env import CamelUpEnv

    model = MaskablePPO.load(model_path)

    env = CamelUpEnv(
        num_opponents=num_opponents,
        opponent_difficulty=opponent_difficulty,
        reward_mode="win",
        seed=seed,
        render_mode="human" if render else None,
    )

    def mask_fn(env):
        return env.action_masks()

    env = ActionMasker(env, mask_fn)

    wins = 0
    total_coins = 0

    for _ in range(num_episodes):
        obs, _ = env.reset()
        done = False

        while not done:
            action_masks = env.unwrapped.action_masks()
            action, _ = model.predict(obs, deterministic=True, action_masks=action_masks)
            action = int(action)
            obs, reward, terminated, truncated, info = env.step(action)
            done = terminated or truncated

        if reward > 0:
            wins += 1
        total_coins += info["player_coins"][env.unwrapped.agent_index]

    print(f"\nFull Game Evaluation ({num_episodes} games):")
    print(f"  Win rate: {wins / num_episodes * 100:.1f}%")
    print(f"  Avg coins: {total_coins / num_episodes:.1f}")

    return wins, total_coins


def _difficulties(names: list[str], players: int) -> list[AiDifficulty]:
    """Expand --difficulty values to one tier per seat, cycling if short."""
    tiers = [AiDifficulty(n) for n in names]
    return [tiers[i % len(tiers)] for i in range(players)]


def main(argv: Optional[list[str]] = None):
    """Main entry point with CLI."""
    parser = argparse.ArgumentParser(description="Camel Up rules engine, AI and training tools")
    parser.add_argument(
        "--log-level", type=str, default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    difficulty_choices = [d.value for d in AiDifficulty]

    # Simulate command
    sim_parser = subparsers.add_parser("simulate", help="Play AI-vs-AI matches")
    sim_parser.add_argument(
        "--players", type=int, default=4,
        help=f"Number of seats ({MIN_PLAYERS}-{MAX_PLAYERS})"
    )
    sim_parser.add_argument(
        "--difficulty", type=str, nargs="+", default=["basic"], choices=difficulty_choices,
        help="AI tier per seat (cycled if fewer than --players)"
    )
    sim_parser.add_argument(
        "--games", type=int, default=100,
        help="Number of matches"
    )
    sim_parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed"
    )
    sim_parser.add_argument(
        "--render", action="store_true",
        help="Print the final table of every match"
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the JSON API server")
    serve_parser.add_argument(
        "--port", type=int, default=5000,
        help="Port to run server on"
    )
    serve_parser.add_argument(
        "--players", type=int, default=2,
        help="Seats; seat 1 is human, the rest are AI"
    )
    serve_parser.add_argument(
        "--difficulty", type=str, default="basic", choices=difficulty_choices,
        help="AI tier for the AI seats"
    )
    serve_parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed"
    )

    # Train command
    train_parser = subparsers.add_parser("train", help="Train an agent for full matches")
    train_parser.add_argument(
        "--timesteps", type=int, default=500_000,
        help="Total training timesteps"
    )
    train_parser.add_argument(
        "--opponents", type=int, default=3,
        help="Number of opponents (1-7)"
    )
    train_parser.add_argument(
        "--opponent", type=str, default="basic", choices=difficulty_choices + ["mixed"],
        help="Opponent AI tier"
    )
    train_parser.add_argument(
        "--reward", type=str, default="win", choices=["win", "coins", "combined"],
        help="Reward mode"
    )
    train_parser.add_argument(
        "--save", type=str, default="camel_up_agent",
        help="Save path"
    )
    train_parser.add_argument(
        "--load", type=str, default=None,
        help="Load existing model"
    )
    train_parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed"
    )
    train_parser.add_argument(
        "--render", action="store_true",
        help="Render during training"
    )

    # Eval command
    eval_parser = subparsers.add_parser("eval", help="Evaluate a trained agent")
    eval_parser.add_argument(
        "model", type=str,
        help="Path to saved model"
    )
    eval_parser.add_argument(
        "--episodes", type=int, default=100,
        help="Number of games"
    )
    eval_parser.add_argument(
        "--opponents", type=int, default=3,
        help="Number of opponents"
    )
    eval_parser.add_argument(
        "--opponent", type=str, default="basic", choices=difficulty_choices + ["mixed"],
        help="Opponent AI tier"
    )
    eval_parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed"
    )
    eval_parser.add_argument(
        "--render", action="store_true",
        help="Render games"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "simulate":
        if not MIN_PLAYERS <= args.players <= MAX_PLAYERS:
            parser.error(f"--players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")
        tiers = _difficulties(args.difficulty, args.players)
        stats = simulate_matches(tiers, num_games=args.games, seed=args.seed, render=args.render)
        print(f"\nSimulation Results ({args.games} games, avg {stats['avg_legs'][0]:.1f} legs):")
        for seat, tier in enumerate(tiers):
            print(f"  Seat {seat + 1} ({tier.value}): "
                  f"wins {stats['wins'][seat]:.0f}, avg money {stats['avg_money'][seat]:.1f}")
    elif args.command == "serve":
        from .server import run_server
        if not MIN_PLAYERS <= args.players <= MAX_PLAYERS:
            parser.error(f"--players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")
        tier = AiDifficulty(args.difficulty)
        players = [PlayerSetup("Player 1")] + [
            PlayerSetup(f"AI {i}", is_ai=True, difficulty=tier) for i in range(2, args.players + 1)
        ]
        run_server(port=args.port, players=players, seed=args.seed)
    elif args.command == "train":
        train(
            total_timesteps=args.timesteps,
            num_opponents=args.opponents,
            opponent_difficulty=args.opponent,
            reward_mode=args.reward,
            save_path=args.save,
            load_path=args.load,
            seed=args.seed,
            render=args.render,
        )
    elif args.command == "eval":
        evaluate(
            model_path=args.model,
            num_episodes=args.episodes,
            num_opponents=args.opponents,
            opponent_difficulty=args.opponent,
            seed=args.seed,
            render=args.render,
        )
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
