"""
Track and stack model for Camel Up, plus the desert tile ledger.

The track is 16 stacks, one per space. Each stack is a list of camels
ordered bottom to top, so stack positions are contiguous by construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np

from .constants import (
    CAMELS,
    CRAZY_CAMELS,
    CRAZY_START_SPACES,
    START_SPACES,
    TRACK_LENGTH,
    CamelColor,
    CrazyCamelColor,
)

Camel = Union[CamelColor, CrazyCamelColor]


@dataclass
class Board:
    """
    Positions of all seven camels.

    Attributes:
        stacks: List of 16 stacks (one per space). Each stack is a list of
                camels, ordered bottom to top. Empty spaces have [].
    """

    stacks: list[list[Camel]] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Initialize an empty track if not provided."""
        if not self.stacks:
            self.stacks = [[] for _ in range(TRACK_LENGTH)]

    @classmethod
    def create_random_start(cls, rng: Optional[np.random.Generator] = None) -> Board:
        """
        Place camels for a new match.

        Racing camels are taken in random order and each rolls 1-3 for
        spaces 1-3. Crazy camels do the same but start near the finish:
        a roll of 1 puts them on space 16, 2 on space 15, 3 on space 14.
        Camels landing on an occupied space go on top.

        Args:
            rng: NumPy random generator for reproducibility.

        Returns:
            A new Board with every camel placed.
        """
        if rng is None:
            rng = np.random.default_rng()

        board = cls()

        racing_order = list(CAMELS)
        rng.shuffle(racing_order)
        for camel in racing_order:
            board.place_camel(camel, START_SPACES[int(rng.integers(3))])

        crazy_order = list(CRAZY_CAMELS)
        rng.shuffle(crazy_order)
        for camel in crazy_order:
            board.place_camel(camel, CRAZY_START_SPACES[int(rng.integers(3))])

        return board

    def place_camel(self, camel: Camel, space: int) -> None:
        """Put a camel on top of the stack at ``space``."""
        self.stacks[space].append(camel)

    def get_camel_position(self, camel: Camel) -> tuple[int, int]:
        """
        Get the space and stack position of a camel.

        Returns:
            Tuple of (space_index, stack_position) where 0 is the bottom.

        Raises:
            ValueError: If the camel is not on the board.
        """
        for space_idx, stack in enumerate(self.stacks):
            if camel in stack:
                return (space_idx, stack.index(camel))
        raise ValueError(f"Camel {camel.value} not found on board")

    def positions(self) -> dict[Camel, tuple[int, int]]:
        """Map every camel on the board to its (space, stack_position)."""
        return {
            camel: (space_idx, height)
            for space_idx, stack in enumerate(self.stacks)
            for height, camel in enumerate(stack)
        }

    def has_camel(self, space: int) -> bool:
        """True if any camel, racing or crazy, stands on ``space``."""
        return bool(self.stacks[space])

    def get_rankings(self) -> list[CamelColor]:
        """
        Racing camels from 1st to 5th place.

        Furthest space wins; on a shared space the camel higher in the stack
        is ahead. Crazy camels take up stack positions but are never ranked.
        """
        positions = self.positions()
        return sorted(CAMELS, key=lambda c: positions[c], reverse=True)

    def leader(self) -> CamelColor:
        return self.get_rankings()[0]

    def last_place(self) -> CamelColor:
        return self.get_rankings()[-1]

    def check_invariants(self) -> None:
        """Fail fast if any camel is missing, duplicated or unknown."""
        tokens = [camel for stack in self.stacks for camel in stack]
        assert len(self.stacks) == TRACK_LENGTH, "track must have 16 spaces"
        for camel in (*CAMELS, *CRAZY_CAMELS):
            count = tokens.count(camel)
            assert count == 1, f"{camel.value} camel appears {count} times"
        assert len(tokens) == len(CAMELS) + len(CRAZY_CAMELS), "unknown token on track"

    def copy(self) -> Board:
        return Board(stacks=[list(stack) for stack in self.stacks])

    def __repr__(self) -> str:
        lines = []
        for space_idx, stack in enumerate(self.stacks):
            if stack:
                names = ", ".join(c.value for c in stack)
                lines.append(f"Space {space_idx + 1}: [{names}]")
        return "\n".join(lines)


@dataclass(frozen=True)
class DesertTile:
    """A placed oasis (+1) or mirage (-1) tile."""
    owner_id: int
    is_oasis: bool


@dataclass
class DesertTiles:
    """
    Ledger of placed desert tiles keyed by space index.

    At most one tile per space and one tile per owner.
    """

    tiles: dict[int, DesertTile] = field(default_factory=dict)

    def place_tile(self, space: int, owner_id: int, is_oasis: bool) -> None:
        self.tiles[space] = DesertTile(owner_id, is_oasis)

    def remove_player_tile(self, owner_id: int) -> Optional[int]:
        """Remove ``owner_id``'s tile and return the space it was on."""
        space = self.player_tile_space(owner_id)
        if space is not None:
            del self.tiles[space]
        return space

    def player_tile_space(self, owner_id: int) -> Optional[int]:
        for space, tile in self.tiles.items():
            if tile.owner_id == owner_id:
                return space
        return None

    def get_tile(self, space: int) -> Optional[DesertTile]:
        return self.tiles.get(space)

    def is_space_occupied(self, space: int) -> bool:
        return space in self.tiles

    def clear(self) -> None:
        self.tiles.clear()

    def copy(self) -> DesertTiles:
        return DesertTiles(tiles=dict(self.tiles))
