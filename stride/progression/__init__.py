"""
Progression - levels, ranks and the player profile.

Usage:
    from stride.progression import level_for_experience, rank_for_points

    level_for_experience(1500)   # 12
    rank_for_points(4200).name   # "Gold"
"""

from stride.progression.levels import (
    LevelBand,
    LevelConfig,
    LevelCalculator,
    get_level_calculator,
    reset_level_calculator,
    init_level_calculator,
    level_for_experience,
    experience_for_level,
)
from stride.progression.ranks import (
    RankConfigError,
    PerkType,
    Perk,
    Rank,
    RankLadder,
    DEFAULT_RANKS,
    load_rank,
    get_rank_ladder,
    reset_rank_ladder,
    init_rank_ladder,
    rank_for_points,
    progress_to_next,
)
from stride.progression.types import (
    PlayerProfile,
    CompletedRun,
)

__all__ = [
    # Levels
    "LevelBand",
    "LevelConfig",
    "LevelCalculator",
    "get_level_calculator",
    "reset_level_calculator",
    "init_level_calculator",
    "level_for_experience",
    "experience_for_level",
    # Ranks
    "RankConfigError",
    "PerkType",
    "Perk",
    "Rank",
    "RankLadder",
    "DEFAULT_RANKS",
    "load_rank",
    "get_rank_ladder",
    "reset_rank_ladder",
    "init_rank_ladder",
    "rank_for_points",
    "progress_to_next",
    # Profile
    "PlayerProfile",
    "CompletedRun",
]
