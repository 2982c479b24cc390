"""Loot box rolls."""

import logging
import random
from typing import Optional

from stride.rewards.types import Rarity, RewardsConfig


logger = logging.getLogger(__name__)


def rarity_weights(config: RewardsConfig, luck: float = 0.0) -> dict[Rarity, float]:
    """
    Normalized rarity distribution.

    Luck multiplies the weight of every rarity above common by (1 + luck).
    """
    weights = {}
    for rarity in Rarity:
        weight = config.rarity_weight(rarity)
        if rarity != Rarity.COMMON:
            weight *= 1.0 + max(0.0, luck)
        weights[rarity] = weight

    total = sum(weights.values())
    if total <= 0:
        return {r: (1.0 if r == Rarity.COMMON else 0.0) for r in Rarity}
    return {r: w / total for r, w in weights.items()}


def roll_rarity(rng: random.Random, config: RewardsConfig, luck: float = 0.0) -> Rarity:
    """Pick a rarity from the weighted distribution."""
    roll = rng.random()
    cumulative = 0.0
    weights = rarity_weights(config, luck)
    for rarity in Rarity:
        cumulative += weights[rarity]
        if roll < cumulative:
            return rarity
    # Float rounding can leave roll just above the last cumulative sum
    return Rarity.LEGENDARY if weights[Rarity.LEGENDARY] > 0 else Rarity.COMMON


def roll_loot_box(
    rng: random.Random,
    config: RewardsConfig,
    luck: float = 0.0,
) -> Optional[Rarity]:
    """Roll for a loot box drop. Returns None when nothing drops."""
    if rng.random() >= config.loot_drop_chance:
        return None
    rarity = roll_rarity(rng, config, luck)
    logger.debug(f"Loot box dropped: {rarity.value}")
    return rarity
