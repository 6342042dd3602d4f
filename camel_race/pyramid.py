"""
The dice pyramid.

Holds one die per racing camel plus a single grey die shared by the two
crazy camels. Dice are drawn without replacement; a leg ends once five of
the six dice have left the pyramid, so one die always stays inside.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from .constants import (
    CAMELS,
    DICE_PER_LEG,
    DICE_VALUES,
    CamelColor,
    CrazyCamelColor,
)


@dataclass
class RegularDie:
    """Die bound to one racing camel. ``value`` is set once rolled."""
    color: CamelColor
    value: Optional[int] = None


@dataclass
class CrazyDie:
    """The grey die. Rolling it picks a crazy camel as well as a value."""
    rolled: Optional[tuple[CrazyCamelColor, int]] = None


PyramidDie = Union[RegularDie, CrazyDie]


@dataclass(frozen=True)
class RollResult:
    """Outcome of drawing one die from the pyramid."""
    color: Union[CamelColor, CrazyCamelColor]
    value: int

    @property
    def is_crazy(self) -> bool:
        return isinstance(self.color, CrazyCamelColor)


class Pyramid:
    """
    Dice pyramid for one leg.

    Attributes:
        dice: Dice still inside the pyramid.
        rolled_dice: Dice drawn this leg, in draw order.
    """

    def __init__(self) -> None:
        self.dice: list[PyramidDie] = [RegularDie(color) for color in CAMELS]
        self.dice.append(CrazyDie())
        self.rolled_dice: list[PyramidDie] = []

    def roll_random_die(
        self, rng: Optional[np.random.Generator] = None
    ) -> Optional[RollResult]:
        """
        Draw a die uniformly from those remaining and roll it.

        The crazy die is just one more candidate. When it is drawn, the
        crazy camel (black or white, 50/50) and the value are both random.

        Args:
            rng: NumPy random generator for reproducibility.

        Returns:
            The roll result, or None if the pyramid is empty.
        """
        if not self.dice:
            return None

        if rng is None:
            rng = np.random.default_rng()

        index = int(rng.integers(len(self.dice)))
        die = self.dice.pop(index)
        value = int(rng.choice(DICE_VALUES))

        if isinstance(die, RegularDie):
            die.value = value
            result = RollResult(die.color, value)
        else:
            crazy_color = CrazyCamelColor.WHITE if rng.random() < 0.5 else CrazyCamelColor.BLACK
            die.rolled = (crazy_color, value)
            result = RollResult(crazy_color, value)

        self.rolled_dice.append(die)
        return result

    def all_dice_rolled(self) -> bool:
        """True once five dice have been drawn this leg (the leg-end condition)."""
        return len(self.rolled_dice) >= DICE_PER_LEG

    def remaining_dice_count(self) -> int:
        return len(self.dice)

    def remaining_regular_colors(self) -> list[CamelColor]:
        """Racing camels whose die is still in the pyramid."""
        return [d.color for d in self.dice if isinstance(d, RegularDie)]

    def crazy_die_rolled(self) -> bool:
        return any(isinstance(d, CrazyDie) for d in self.rolled_dice)

    def rolled_results(self) -> list[RollResult]:
        """Results of the dice drawn this leg, in draw order."""
        results = []
        for die in self.rolled_dice:
            if isinstance(die, RegularDie):
                results.append(RollResult(die.color, die.value))
            else:
                color, value = die.rolled
                results.append(RollResult(color, value))
        return results

    def reset(self) -> None:
        """Return every drawn die to the pyramid and clear rolled values."""
        for die in self.rolled_dice:
            if isinstance(die, RegularDie):
                die.value = None
            else:
                die.rolled = None
            self.dice.append(die)
        self.rolled_dice = []

    def copy(self) -> Pyramid:
        clone = Pyramid.__new__(Pyramid)
        clone.dice = [_copy_die(d) for d in self.dice]
        clone.rolled_dice = [_copy_die(d) for d in self.rolled_dice]
        return clone

    def __repr__(self) -> str:
        remaining = [
            d.color.value if isinstance(d, RegularDie) else "Crazy" for d in self.dice
        ]
        rolled = [f"{r.color.value}={r.value}" for r in self.rolled_results()]
        return f"Pyramid(remaining={remaining}, rolled={rolled})"


def _copy_die(die: PyramidDie) -> PyramidDie:
    if isinstance(die, RegularDie):
        return RegularDie(die.color, die.value)
    return CrazyDie(die.rolled)
