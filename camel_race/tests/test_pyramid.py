"""
Unit tests for the dice pyramid.
"""

import numpy as np

from camel_race.constants import CAMELS, CamelColor, CrazyCamelColor
from camel_race.pyramid import CrazyDie, Pyramid, RegularDie

from conftest import ScriptedRng


class TestPyramidContents:
    """Tests for a fresh pyramid."""

    def test_new_pyramid_has_six_dice(self):
        """Five racing dice plus the shared crazy die."""
        pyramid = Pyramid()

        assert pyramid.remaining_dice_count() == 6
        assert sum(isinstance(d, CrazyDie) for d in pyramid.dice) == 1
        assert pyramid.remaining_regular_colors() == list(CAMELS)

    def test_nothing_rolled_at_start(self):
        """No dice have left the pyramid."""
        pyramid = Pyramid()

        assert pyramid.rolled_dice == []
        assert not pyramid.all_dice_rolled()
        assert not pyramid.crazy_die_rolled()


class TestRolling:
    """Tests for drawing dice."""

    def test_roll_removes_die(self):
        """Each roll moves one die out of the pyramid."""
        pyramid = Pyramid()
        rng = np.random.default_rng(42)

        result = pyramid.roll_random_die(rng)

        assert result is not None
        assert result.value in (1, 2, 3)
        assert pyramid.remaining_dice_count() == 5
        assert len(pyramid.rolled_dice) == 1

    def test_leg_ends_after_five_rolls(self):
        """Five rolls end the leg and leave exactly one die inside."""
        pyramid = Pyramid()
        rng = np.random.default_rng(0)

        for _ in range(5):
            pyramid.roll_random_die(rng)

        assert pyramid.all_dice_rolled()
        assert pyramid.remaining_dice_count() == 1

    def test_each_die_rolls_at_most_once(self):
        """Dice are drawn without replacement."""
        pyramid = Pyramid()
        rng = np.random.default_rng(7)

        results = [pyramid.roll_random_die(rng) for _ in range(6)]
        regular = [r.color for r in results if not r.is_crazy]

        assert len(regular) == len(set(regular)) == 5
        assert sum(r.is_crazy for r in results) == 1

    def test_empty_pyramid_returns_none(self):
        """Rolling an empty pyramid yields no result."""
        pyramid = Pyramid()
        rng = np.random.default_rng(1)
        for _ in range(6):
            pyramid.roll_random_die(rng)

        assert pyramid.roll_random_die(rng) is None

    def test_scripted_regular_roll(self):
        """The drawn die index and value come from the generator."""
        pyramid = Pyramid()
        rng = ScriptedRng(integers=[2], choices=[3])

        result = pyramid.roll_random_die(rng)

        assert result.color == CamelColor.RED
        assert result.value == 3
        assert not result.is_crazy
        assert CamelColor.RED not in pyramid.remaining_regular_colors()

    def test_crazy_die_picks_white_or_black(self):
        """The crazy die picks white below 0.5 and black otherwise."""
        white = Pyramid().roll_random_die(ScriptedRng(integers=[5], choices=[1], randoms=[0.2]))
        black = Pyramid().roll_random_die(ScriptedRng(integers=[5], choices=[2], randoms=[0.7]))

        assert white.color == CrazyCamelColor.WHITE
        assert black.color == CrazyCamelColor.BLACK
        assert white.is_crazy and black.is_crazy

    def test_rolled_results_keep_draw_order(self):
        """Rolled results list dice in the order they were drawn."""
        pyramid = Pyramid()
        rng = ScriptedRng(integers=[4, 0], choices=[1, 2])

        pyramid.roll_random_die(rng)
        pyramid.roll_random_die(rng)

        results = pyramid.rolled_results()
        assert [(r.color, r.value) for r in results] == [
            (CamelColor.PURPLE, 1),
            (CamelColor.BLUE, 2),
        ]


class TestPyramidReset:
    """Tests for returning dice at the end of a leg."""

    def test_reset_restores_all_dice(self):
        """Reset returns every die and clears values."""
        pyramid = Pyramid()
        rng = np.random.default_rng(3)
        for _ in range(5):
            pyramid.roll_random_die(rng)

        pyramid.reset()

        assert pyramid.remaining_dice_count() == 6
        assert pyramid.rolled_dice == []
        for die in pyramid.dice:
            if isinstance(die, RegularDie):
                assert die.value is None
            else:
                assert die.rolled is None

    def test_copy_is_independent(self):
        """Rolling a copy leaves the original untouched."""
        pyramid = Pyramid()
        clone = pyramid.copy()

        clone.roll_random_die(np.random.default_rng(0))

        assert pyramid.remaining_dice_count() == 6
        assert clone.remaining_dice_count() == 5
