"""
JSON API for playing Camel Up against AI seats.

A Flask app holding one match in memory. Clients read snapshots, submit
intents for the human seat, and may ask an AI tier what it would play.
After every accepted human intent the server plays AI turns until a
human is to act again.
"""

from __future__ import annotations

import dataclasses
import logging
from enum import Enum
from typing import Any, Optional

import numpy as np
from flask import Flask, jsonify, request

from .actions import describe_intent
from .ai import estimate_leg_probabilities, estimate_race_probabilities, make_policy
from .constants import CAMELS, AiDifficulty
from .game_state import CamelUpGame, PlayerSetup
from .snapshot import SnapshotPublisher, intent_from_dict, intent_to_dict

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Each odds request runs two Monte Carlo loops inline
MAX_SIMULATIONS = 5000


# Global state
_game: Optional[CamelUpGame] = None
_publisher: Optional[SnapshotPublisher] = None
_rng = np.random.default_rng(None)


def new_game(players: Optional[list[PlayerSetup]] = None, seed: Optional[int] = None) -> CamelUpGame:
    """Replace the current match and let AI seats play up to the first human turn."""
    global _game, _publisher
    rng = np.random.default_rng(seed) if seed is not None else _rng
    _game = CamelUpGame(players=players, rng=rng)
    _publisher = SnapshotPublisher(_game)
    _game.run_ai_turns()
    logger.info("New match with %d players", len(_game.players))
    return _game


def _current_game() -> CamelUpGame:
    if _game is None:
        new_game()
    return _game


def to_jsonable(value: Any) -> Any:
    """Convert events (dataclasses holding enums and tuples) to plain JSON values."""
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        data = {"type": type(value).__name__}
        for f in dataclasses.fields(value):
            data[f.name] = to_jsonable(getattr(value, f.name))
        return data
    if isinstance(value, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def state_payload(game: CamelUpGame) -> dict[str, Any]:
    """Snapshot plus the derived views a client needs to draw the table."""
    return {
        "state": _publisher.publish(),
        "rankings": [c.value for c in game.rankings()],
        "legalActions": [
            {**intent_to_dict(a), "name": describe_intent(a)}
            for a in game.legal_actions()
        ],
        "result": to_jsonable(game.result) if game.result is not None else None,
    }


def _parse_players(raw: Any) -> list[PlayerSetup]:
    if not isinstance(raw, list) or not raw:
        raise ValueError("'players' must be a non-empty list")
    setups = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ValueError(f"Player {i} must be an object")
        setups.append(PlayerSetup(
            name=str(entry.get("name", f"Player {i + 1}")),
            is_ai=bool(entry.get("is_ai", False)),
            difficulty=AiDifficulty(entry.get("difficulty", AiDifficulty.BASIC.value)),
        ))
    return setups


def _bad_request(message: str):
    return jsonify({"error": message}), 400


# Routes

@app.route('/api/state', methods=['GET'])
def get_state():
    """Get the current match."""
    return jsonify(state_payload(_current_game()))


@app.route('/api/new', methods=['POST'])
def start_game():
    """Start a new match: {"players": [{"name", "is_ai", "difficulty"}], "seed"}."""
    data = request.get_json(silent=True) or {}
    try:
        players = _parse_players(data["players"]) if "players" in data else None
        seed = int(data["seed"]) if data.get("seed") is not None else None
        game = new_game(players, seed)
    except (ValueError, TypeError) as e:
        return _bad_request(str(e))
    return jsonify(state_payload(game))


@app.route('/api/action', methods=['POST'])
def submit_action():
    """Submit an intent for the current (human) player."""
    game = _current_game()
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _bad_request("Expected a JSON object")

    try:
        intent = intent_from_dict(data)
    except ValueError as e:
        return _bad_request(str(e))

    if game.current_player.is_ai:
        return jsonify({"accepted": False, "events": [], **state_payload(game)})

    events = game.play(intent)
    accepted = bool(events)
    if accepted:
        events.extend(game.run_ai_turns())

    return jsonify({
        "accepted": accepted,
        "events": to_jsonable(events),
        **state_payload(game),
    })


@app.route('/api/recommend', methods=['GET'])
def recommend():
    """What an AI tier would play for the current player."""
    game = _current_game()
    try:
        difficulty = AiDifficulty(request.args.get("difficulty", AiDifficulty.SMART.value))
    except ValueError as e:
        return _bad_request(str(e))

    policy = make_policy(difficulty, seed=int(_rng.integers(2**31)))
    intent = policy.choose_action(game, game.current_player.id)
    if intent is None:
        return jsonify({"action": None})
    return jsonify({"action": intent_to_dict(intent), "actionName": describe_intent(intent)})


@app.route('/api/probabilities', methods=['GET'])
def probabilities():
    """Monte Carlo odds for the current leg and the whole race."""
    game = _current_game()
    try:
        simulations = int(request.args.get("simulations", 500))
    except ValueError:
        return _bad_request("'simulations' must be an integer")
    if not 0 < simulations <= MAX_SIMULATIONS:
        return _bad_request(f"'simulations' must be between 1 and {MAX_SIMULATIONS}")

    leg = estimate_leg_probabilities(game.board, game.pyramid, simulations, _rng)
    race_win, race_lose = estimate_race_probabilities(game.board, game.pyramid, simulations, _rng)

    return jsonify({
        "simulations": simulations,
        "results": [
            {
                "camel": c.value,
                "legFirst": round(leg[c][0], 3),
                "legSecond": round(leg[c][1], 3),
                "raceWin": round(race_win[c], 3),
                "raceLose": round(race_lose[c], 3),
            }
            for c in CAMELS
        ],
    })


def run_server(port: int = 5000, debug: bool = False, players: Optional[list[PlayerSetup]] = None,
               seed: Optional[int] = None):
    """Run the API server."""
    new_game(players, seed)

    print("\nCamel Up table server")
    print(f"   API at http://localhost:{port}/api/state\n")

    app.run(host='0.0.0.0', port=port, debug=debug)
