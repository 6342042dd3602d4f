"""
JSON-friendly snapshots of a match, for renderers and network sync.

A snapshot carries the whole authoritative state with colors as strings
and positions as integers. Peers apply snapshots wholesale, and only when
the snapshot's version is newer than the last one applied.
"""

from __future__ import annotations

import logging
from typing import Any

from .actions import Intent, PlaceDesertTile, PlaceRaceBet, RollPyramid, TakeLegBet
from .betting import LegBetTile, RaceBet
from .board import Board, DesertTile
from .constants import (
    CAMELS,
    CRAZY_CAMELS,
    DICE_PER_LEG,
    DICE_VALUES,
    TRACK_LENGTH,
    CamelColor,
    CrazyCamelColor,
)
from .pyramid import CrazyDie, Pyramid, RegularDie

logger = logging.getLogger(__name__)


def _camel_color(name: str) -> CamelColor:
    try:
        return CamelColor(name)
    except ValueError:
        raise ValueError(f"Unknown camel color: {name!r}") from None


def _crazy_color(name: str) -> CrazyCamelColor:
    try:
        return CrazyCamelColor(name)
    except ValueError:
        raise ValueError(f"Unknown crazy camel color: {name!r}") from None


# =============================================================================
# Intents
# =============================================================================

def intent_to_dict(intent: Intent) -> dict[str, Any]:
    """Encode an intent as a tagged dict."""
    if isinstance(intent, RollPyramid):
        return {"type": "RollPyramid"}
    if isinstance(intent, TakeLegBet):
        return {"type": "TakeLegBet", "color": intent.color.value}
    if isinstance(intent, PlaceRaceBet):
        return {"type": "PlaceRaceBet", "color": intent.color.value, "is_winner_bet": intent.is_winner}
    if isinstance(intent, PlaceDesertTile):
        return {"type": "PlaceDesertTile", "space_index": intent.space, "is_oasis": intent.is_oasis}
    raise ValueError(f"Unknown intent: {intent!r}")


def intent_from_dict(data: dict[str, Any]) -> Intent:
    """
    Decode a tagged intent dict.

    Raises:
        ValueError: If the type tag, a color, or a field is missing or bad.
    """
    kind = data.get("type")
    try:
        if kind == "RollPyramid":
            return RollPyramid()
        if kind == "TakeLegBet":
            return TakeLegBet(_camel_color(data["color"]))
        if kind == "PlaceRaceBet":
            return PlaceRaceBet(_camel_color(data["color"]), bool(data["is_winner_bet"]))
        if kind == "PlaceDesertTile":
            return PlaceDesertTile(int(data["space_index"]), bool(data["is_oasis"]))
    except KeyError as e:
        raise ValueError(f"Missing field {e.args[0]!r} for {kind}") from None
    raise ValueError(f"Unknown intent type: {kind!r}")


# =============================================================================
# Snapshots
# =============================================================================

def snapshot(game, version: int = 0) -> dict[str, Any]:
    """
    Serialize every piece of authoritative match state.

    Args:
        game: The CamelUpGame to capture.
        version: Monotonic version number stamped on the snapshot.
    """
    positions = game.board.positions()
    turn = game.turn

    return {
        "version": version,
        "turn_state": {
            "current_player": turn.current_player,
            "action_taken": turn.action_taken,
            "leg_number": turn.leg_number,
            "awaiting_action": turn.awaiting_action,
            "leg_has_started": turn.leg_has_started,
        },
        "players": [
            {
                "id": p.id,
                "name": p.name,
                "money": p.money,
                "has_desert_tile": p.has_desert_tile,
                "available_race_cards": [c.value for c in CAMELS if c in p.available_race_cards],
                "is_ai": p.is_ai,
            }
            for p in game.players
        ],
        "camels": [
            {"color": c.value, "space_index": positions[c][0], "stack_position": positions[c][1]}
            for c in CAMELS
        ],
        "crazy_camels": [
            {"color": c.value, "space_index": positions[c][0], "stack_position": positions[c][1]}
            for c in CRAZY_CAMELS
        ],
        "pyramid": {
            "remaining_dice": [
                d.color.value if isinstance(d, RegularDie) else "Crazy" for d in game.pyramid.dice
            ],
            "rolled_dice": [
                {"color": r.color.value, "value": r.value, "is_crazy": r.is_crazy}
                for r in game.pyramid.rolled_results()
            ],
        },
        "leg_betting_tiles": {
            c.value: game.leg_tiles.available_values(c) for c in CAMELS
        },
        "winner_bets": [
            {"camel_color": b.color.value, "player_id": b.player_id}
            for b in game.race_bets.winner_bets
        ],
        "loser_bets": [
            {"camel_color": b.color.value, "player_id": b.player_id}
            for b in game.race_bets.loser_bets
        ],
        "desert_tiles": [
            {"space_index": space, "owner_id": tile.owner_id, "is_oasis": tile.is_oasis}
            for space, tile in sorted(game.desert_tiles.tiles.items())
        ],
        "player_leg_bets": [
            [{"camel_color": t.color.value, "value": t.value} for t in game.leg_bets.for_player(p.id)]
            for p in game.players
        ],
        "player_pyramid_tokens": [game.pyramid_tokens.get(p.id, 0) for p in game.players],
        "finish_crossed": game.finish_crossed,
        "game_over": game.game_over,
    }


def _board_from_snapshot(data: dict[str, Any]) -> Board:
    placed = []
    for entry in data["camels"]:
        placed.append((entry["space_index"], entry["stack_position"], _camel_color(entry["color"])))
    for entry in data["crazy_camels"]:
        placed.append((entry["space_index"], entry["stack_position"], _crazy_color(entry["color"])))

    board = Board()
    for space, _, camel in sorted(placed, key=lambda p: (p[0], p[1])):
        if not 0 <= int(space) < TRACK_LENGTH:
            raise ValueError(f"Space {space} is off the track")
        board.place_camel(camel, int(space))
    try:
        board.check_invariants()
    except AssertionError as e:
        raise ValueError(f"Invalid board: {e}") from None
    return board


def _pyramid_from_snapshot(data: dict[str, Any]) -> Pyramid:
    rolled = data["rolled_dice"]
    if len(rolled) > DICE_PER_LEG:
        raise ValueError(f"Snapshot has {len(rolled)} rolled dice, at most {DICE_PER_LEG} per leg")

    pyramid = Pyramid()
    for entry in rolled:
        value = int(entry["value"])
        if value not in DICE_VALUES:
            raise ValueError(f"Die value {value} outside {DICE_VALUES[0]}-{DICE_VALUES[-1]}")
        if entry["is_crazy"]:
            crazy = _crazy_color(entry["color"])
            die = next((d for d in pyramid.dice if isinstance(d, CrazyDie)), None)
            if die is None:
                raise ValueError("Crazy die rolled twice")
            die.rolled = (crazy, value)
        else:
            color = _camel_color(entry["color"])
            die = next((d for d in pyramid.dice if isinstance(d, RegularDie) and d.color == color), None)
            if die is None:
                raise ValueError(f"Die {color.value} rolled twice")
            die.value = value
        pyramid.dice.remove(die)
        pyramid.rolled_dice.append(die)
    return pyramid


def _race_bets_from_snapshot(entries: list[dict[str, Any]]) -> list[RaceBet]:
    return [RaceBet(_camel_color(b["camel_color"]), int(b["player_id"])) for b in entries]


def apply_snapshot(game, data: dict[str, Any]) -> None:
    """
    Overwrite ``game``'s state with a snapshot.

    Everything is decoded before anything is assigned, so a snapshot that
    fails to decode leaves ``game`` as it was.

    Raises:
        ValueError: On unknown colors, bad dice, missing fields or a
            player count mismatch.
    """
    if len(data["players"]) != len(game.players):
        raise ValueError(
            f"Snapshot has {len(data['players'])} players, game has {len(game.players)}"
        )

    try:
        board = _board_from_snapshot(data)
        pyramid = _pyramid_from_snapshot(data["pyramid"])

        tile_stacks = {
            color: [LegBetTile(color, int(v)) for v in reversed(data["leg_betting_tiles"].get(color.value, []))]
            for color in CAMELS
        }
        winner_bets = _race_bets_from_snapshot(data["winner_bets"])
        loser_bets = _race_bets_from_snapshot(data["loser_bets"])
        desert = {
            int(t["space_index"]): DesertTile(int(t["owner_id"]), bool(t["is_oasis"]))
            for t in data["desert_tiles"]
        }

        players = []
        for entry, bets, tokens in zip(
            data["players"], data["player_leg_bets"], data["player_pyramid_tokens"]
        ):
            players.append({
                "name": str(entry["name"]),
                "money": int(entry["money"]),
                "has_desert_tile": bool(entry["has_desert_tile"]),
                "available_race_cards": {_camel_color(c) for c in entry["available_race_cards"]},
                "is_ai": bool(entry["is_ai"]),
                "leg_bets": [LegBetTile(_camel_color(b["camel_color"]), int(b["value"])) for b in bets],
                "tokens": int(tokens),
            })
        if len(players) != len(game.players):
            raise ValueError("Per-player lists do not match the player count")

        turn = data["turn_state"]
        current_player = int(turn["current_player"])
        if not 0 <= current_player < len(game.players):
            raise ValueError(f"Current player {current_player} out of range")
        turn_fields = {
            "current_player": current_player,
            "action_taken": bool(turn["action_taken"]),
            "leg_number": int(turn["leg_number"]),
            "awaiting_action": bool(turn["awaiting_action"]),
            "leg_has_started": bool(turn["leg_has_started"]),
        }
    except KeyError as e:
        raise ValueError(f"Snapshot missing field {e.args[0]!r}") from None

    game.board = board
    game.pyramid = pyramid
    game.leg_tiles.stacks = tile_stacks
    game.race_bets.winner_bets = winner_bets
    game.race_bets.loser_bets = loser_bets
    game.desert_tiles.tiles = desert

    for player, decoded in zip(game.players, players):
        player.name = decoded["name"]
        player.money = decoded["money"]
        player.has_desert_tile = decoded["has_desert_tile"]
        player.available_race_cards = decoded["available_race_cards"]
        player.is_ai = decoded["is_ai"]
        game.leg_bets.bets[player.id] = decoded["leg_bets"]
        game.pyramid_tokens[player.id] = decoded["tokens"]

    for name, value in turn_fields.items():
        setattr(game.turn, name, value)
    game.players.current_player_index = game.turn.current_player

    game.finish_crossed = bool(data.get("finish_crossed", False))
    game.game_over = bool(data.get("game_over", False))


class SnapshotReceiver:
    """
    Applies incoming snapshots to a local game, skipping stale ones.

    Attributes:
        game: Local copy kept in sync.
        last_version: Version of the last snapshot applied (-1 before any).
    """

    def __init__(self, game) -> None:
        self.game = game
        self.last_version = -1

    def receive(self, data: dict[str, Any]) -> bool:
        """
        Apply ``data`` if it is newer than anything seen so far.

        Returns:
            True if applied, False if the snapshot was stale.

        Raises:
            ValueError: If the snapshot cannot be decoded. Nothing is applied
                and ``last_version`` is unchanged.
        """
        version = int(data["version"])
        if version <= self.last_version:
            logger.warning("Ignoring stale snapshot v%d (have v%d)", version, self.last_version)
            return False

        apply_snapshot(self.game, data)
        self.last_version = version
        logger.debug("Applied snapshot v%d", version)
        return True


class SnapshotPublisher:
    """Stamps outgoing snapshots with an increasing version number."""

    def __init__(self, game) -> None:
        self.game = game
        self.version = 0

    def publish(self) -> dict[str, Any]:
        self.version += 1
        return snapshot(self.game, self.version)
