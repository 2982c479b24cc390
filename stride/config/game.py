"""
Game configuration bundle.

Collects every tunable table of the game from the config directory:

    configs/
        progression/levels.yaml     LevelConfig
        progression/ranks.yaml      rank ladder (``ranks`` list)
        abilities/player_tree.yaml  ability tree (``nodes`` list)
        pets/catalog.yaml           pet definitions (``pets`` list)
        pets/tuning.yaml            PetConfig
        rewards/economy.yaml        RewardsConfig

A missing file falls back to the built-in table. A present but invalid
file raises.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from stride.abilities.tree import AbilityTree, load_ability_node
from stride.config.loader import get_config_dir, load_config
from stride.pets.catalog import PetCatalog, PetConfig, load_pet_definition
from stride.progression.levels import LevelConfig
from stride.progression.ranks import RankLadder, load_rank
from stride.rewards.types import RewardsConfig


logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    """All static game tables."""
    levels: LevelConfig = field(default_factory=LevelConfig)
    ranks: RankLadder = field(default_factory=RankLadder)
    ability_tree: AbilityTree = field(default_factory=AbilityTree)
    pets: PetCatalog = field(default_factory=PetCatalog)
    pet: PetConfig = field(default_factory=PetConfig)
    rewards: RewardsConfig = field(default_factory=RewardsConfig)


def load_game_config(config_dir: Optional[Path | str] = None) -> GameConfig:
    """
    Load the game tables from a config directory.

    Args:
        config_dir: Directory to read; defaults to get_config_dir()

    Raises:
        RankConfigError, AbilityTreeError: If a table is invalid
    """
    base = Path(config_dir) if config_dir is not None else get_config_dir()
    config = GameConfig()

    levels = load_config("progression", "levels", LevelConfig, config_dir=base, required=False)
    if levels is not None:
        config.levels = levels

    ranks = load_config("progression", "ranks", config_dir=base, required=False)
    if ranks is not None:
        config.ranks = RankLadder([load_rank(r) for r in ranks.get("ranks", [])])

    tree = load_config("abilities", "player_tree", config_dir=base, required=False)
    if tree is not None:
        config.ability_tree = AbilityTree([load_ability_node(n) for n in tree.get("nodes", [])])

    catalog = load_config("pets", "catalog", config_dir=base, required=False)
    if catalog is not None:
        config.pets = PetCatalog([load_pet_definition(p) for p in catalog.get("pets", [])])

    pet = load_config("pets", "tuning", PetConfig, config_dir=base, required=False)
    if pet is not None:
        config.pet = pet

    rewards = load_config("rewards", "economy", RewardsConfig, config_dir=base, required=False)
    if rewards is not None:
        config.rewards = rewards

    logger.debug(f"Loaded game config from {base}")
    return config
