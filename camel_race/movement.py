"""
Camel movement: carrying stacks, desert tile diversion and finish detection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .board import Board, Camel, DesertTile, DesertTiles
from .constants import (
    DESERT_TILE_PAYOUT,
    FINISH_LINE,
    LAST_SPACE,
    CamelColor,
    CrazyCamelColor,
)
from .players import Players
from .pyramid import RollResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveResult:
    """
    What happened when a camel moved.

    Attributes:
        camel: The camel whose die was rolled.
        start_space: Space the group left.
        end_space: Space the group landed on (after any desert tile).
        moved: The moving group, bottom to top.
        crossed_finish: A racing camel reached the finish line.
        desert_tile: The tile the group hit, if any.
        landed_underneath: The group went under the existing stack (mirage).
    """
    camel: Camel
    start_space: int
    end_space: int
    moved: tuple[Camel, ...]
    crossed_finish: bool = False
    desert_tile: Optional[DesertTile] = None
    landed_underneath: bool = False


def _lift_group(board: Board, camel: Camel) -> tuple[int, list[Camel]]:
    """Remove ``camel`` and everything above it from its space."""
    space, height = board.get_camel_position(camel)
    group = board.stacks[space][height:]
    board.stacks[space] = board.stacks[space][:height]
    return space, group


def move_camel(
    board: Board,
    color: CamelColor,
    spaces: int,
    desert_tiles: Optional[DesertTiles] = None,
    players: Optional[Players] = None,
) -> MoveResult:
    """
    Move a racing camel forward, carrying every camel stacked on it.

    If the group would land on a desert tile, the tile owner earns a coin.
    An oasis pushes the group one space further (landing on top); a mirage
    pulls it back one space and the group slides under whatever is there.
    The finish check uses the space after diversion.

    Args:
        board: Track to mutate.
        color: Racing camel whose die was rolled.
        spaces: Die value (1-3).
        desert_tiles: Placed desert tiles, if any.
        players: Receives desert tile payouts when given.

    Returns:
        A MoveResult describing the move.
    """
    start_space, group = _lift_group(board, color)

    target = start_space + spaces
    crossed_finish = target >= FINISH_LINE
    land_underneath = False
    tile = None

    if not crossed_finish and desert_tiles is not None:
        tile = desert_tiles.get_tile(target)
        if tile is not None:
            if players is not None:
                players.pay(tile.owner_id, DESERT_TILE_PAYOUT)
            logger.info("Player %d earned $%d from desert tile on space %d",
                        tile.owner_id, DESERT_TILE_PAYOUT, target + 1)
            if tile.is_oasis:
                target += 1
                crossed_finish = target >= FINISH_LINE
            else:
                target = max(0, target - 1)
                land_underneath = True

    final_space = min(target, LAST_SPACE)

    if land_underneath:
        board.stacks[final_space] = group + board.stacks[final_space]
    else:
        board.stacks[final_space].extend(group)

    return MoveResult(
        camel=color,
        start_space=start_space,
        end_space=final_space,
        moved=tuple(group),
        crossed_finish=crossed_finish,
        desert_tile=tile,
        landed_underneath=land_underneath,
    )


def move_crazy_camel(board: Board, color: CrazyCamelColor, spaces: int) -> MoveResult:
    """
    Move a crazy camel backwards, carrying every camel stacked on it.

    Crazy camels ignore desert tiles, stop at space 0, never cross the
    finish and always land on top of the destination stack.
    """
    start_space, group = _lift_group(board, color)
    final_space = max(0, start_space - spaces)
    board.stacks[final_space].extend(group)

    return MoveResult(
        camel=color,
        start_space=start_space,
        end_space=final_space,
        moved=tuple(group),
    )


def apply_roll(
    board: Board,
    roll: RollResult,
    desert_tiles: Optional[DesertTiles] = None,
    players: Optional[Players] = None,
) -> MoveResult:
    """Move whichever camel a pyramid roll selected."""
    if roll.is_crazy:
        return move_crazy_camel(board, roll.color, roll.value)
    return move_camel(board, roll.color, roll.value, desert_tiles, players)
