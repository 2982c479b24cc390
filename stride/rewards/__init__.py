"""Rewards - sprint, passive, pet-catch and loot rewards."""

from stride.rewards.types import (
    Rarity,
    SprintResult,
    SprintRewards,
    RewardsConfig,
)
from stride.rewards.loot import (
    rarity_weights,
    roll_rarity,
    roll_loot_box,
)
from stride.rewards.calculator import (
    ProfileContext,
    RewardsCalculator,
)

__all__ = [
    "Rarity",
    "SprintResult",
    "SprintRewards",
    "RewardsConfig",
    "rarity_weights",
    "roll_rarity",
    "roll_loot_box",
    "ProfileContext",
    "RewardsCalculator",
]
