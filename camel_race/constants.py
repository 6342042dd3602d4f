"""
Game constants for Camel Up (2nd Edition rules with crazy camels).

Colors are enums so they can be used as dict keys and serialized by name.
"""

from enum import Enum
from typing import Final


class CamelColor(Enum):
    """Racing camel colors."""
    BLUE = "Blue"
    GREEN = "Green"
    RED = "Red"
    YELLOW = "Yellow"
    PURPLE = "Purple"


class CrazyCamelColor(Enum):
    """Crazy camels share one pyramid die and run backwards."""
    BLACK = "Black"
    WHITE = "White"


class AiDifficulty(Enum):
    """AI policy tiers."""
    RANDOM = "random"
    BASIC = "basic"
    SMART = "smart"


# Convenience collections
CAMELS: Final[tuple[CamelColor, ...]] = tuple(CamelColor)
CRAZY_CAMELS: Final[tuple[CrazyCamelColor, ...]] = tuple(CrazyCamelColor)
NUM_CAMELS: Final[int] = 5

# Board configuration
TRACK_LENGTH: Final[int] = 16  # Spaces 1-16 (0-indexed internally: 0-15)
LAST_SPACE: Final[int] = TRACK_LENGTH - 1
FINISH_LINE: Final[int] = 16  # Reaching index 16 means the camel crossed the line
START_SPACES: Final[tuple[int, ...]] = (0, 1, 2)
CRAZY_START_SPACES: Final[tuple[int, ...]] = (15, 14, 13)  # Roll 1, 2, 3

# Dice configuration
DICE_VALUES: Final[tuple[int, ...]] = (1, 2, 3)
DICE_PER_LEG: Final[int] = 5  # 5 of the 6 pyramid dice are rolled each leg

# Leg betting tiles, top of the stack first
LEG_BET_TILE_VALUES: Final[tuple[int, ...]] = (5, 3, 2)
LEG_SECOND_PLACE_PAYOUT: Final[int] = 1
LEG_WRONG_BET_PENALTY: Final[int] = 1

# Race (game end) bets: first correct bettor gets 8, second 5, ...
RACE_BET_PAYOUTS: Final[tuple[int, ...]] = (8, 5, 3, 2, 1)
RACE_BET_OVERFLOW_PAYOUT: Final[int] = 1
RACE_BET_PENALTY: Final[int] = 1

# Economy
STARTING_MONEY: Final[int] = 3
ROLL_REWARD: Final[int] = 1
DESERT_TILE_PAYOUT: Final[int] = 1

# Players
MIN_PLAYERS: Final[int] = 2
MAX_PLAYERS: Final[int] = 8

# Post-action delays in seconds (presentation pacing, zero when headless)
DICE_ROLL_DELAY: Final[float] = 1.5
LEG_BET_DELAY: Final[float] = 0.8
RACE_BET_DELAY: Final[float] = 0.8
DESERT_TILE_DELAY: Final[float] = 1.0
AI_THINK_DELAY: Final[float] = 1.0

# =============================================================================
# AI policy
# =============================================================================

# (P(1st), P(2nd)) keyed by rank bucket (0=1st, 1=2nd, 2=3rd, 3=4th or worse)
# and whether the camel's die is still in the pyramid.
SMART_AI_LEG_ODDS: Final[dict[tuple[int, bool], tuple[float, float]]] = {
    (0, True): (0.70, 0.20),
    (0, False): (0.50, 0.30),
    (1, True): (0.35, 0.35),
    (1, False): (0.25, 0.35),
    (2, True): (0.15, 0.25),
    (2, False): (0.10, 0.20),
    (3, True): (0.08, 0.15),
    (3, False): (0.05, 0.10),
}
SMART_AI_TAKE_EV: Final[float] = 1.5
SMART_AI_CONSIDER_EV: Final[float] = 0.5
SMART_AI_RACE_BET_PROGRESS: Final[float] = 0.4
SMART_AI_MIN_GAP: Final[int] = 2
SMART_AI_WINNER_BET_CHANCE: Final[float] = 0.4
SMART_AI_LOSER_BET_CHANCE: Final[float] = 0.3
SMART_AI_DESERT_CHANCE: Final[float] = 0.3
SMART_AI_DESERT_LOOKAHEAD: Final[int] = 2

BASIC_AI_LEADER_BET_CHANCE: Final[float] = 0.5
BASIC_AI_WINNER_BET_CHANCE: Final[float] = 0.3
BASIC_AI_LATE_LEG_DICE: Final[int] = 2

# =============================================================================
# Gymnasium action space (18 actions)
# =============================================================================
# 0: Roll
# 1-5: Leg bet on ranked camel
# 6-7: Place oasis/mirage near the leader
# 8-12: Race winner bet on ranked camel
# 13-17: Race loser bet on ranked camel

ACTION_ROLL: Final[int] = 0
ACTION_LEG_BET_1ST: Final[int] = 1
ACTION_PLACE_OASIS: Final[int] = 6
ACTION_PLACE_MIRAGE: Final[int] = 7
ACTION_RACE_WINNER_1ST: Final[int] = 8
ACTION_RACE_LOSER_1ST: Final[int] = 13
NUM_ACTIONS: Final[int] = 18

LEG_BET_ACTION_TO_RANK: Final[dict[int, int]] = {
    ACTION_LEG_BET_1ST + i: i for i in range(NUM_CAMELS)
}
RACE_WINNER_ACTION_TO_RANK: Final[dict[int, int]] = {
    ACTION_RACE_WINNER_1ST + i: i for i in range(NUM_CAMELS)
}
RACE_LOSER_ACTION_TO_RANK: Final[dict[int, int]] = {
    ACTION_RACE_LOSER_1ST + i: i for i in range(NUM_CAMELS)
}

INVALID_ACTION_PENALTY: Final[int] = -10
