"""
Stride - progression and rewards engine for a running game.

The engine provides:
- Progression: levels from experience, rank tiers from rank points
- Abilities: the player ability tree and pet ability levels
- Pets: the companion catalog and owned pet state
- Rewards: sprint, passive and pet-catch rewards, loot boxes
- Daily: the seven-day login reward cycle
- Tasks: to-do items with daily, weekly and monthly recurrence
- Profile: the player aggregate, its persistence and the manager facade
- Sync: device message envelopes and dispatch

Quick Start:
    import stride

    manager = stride.ProfileManager(
        stride.ProfilePersistence(stride.FileBlobStore("state"))
    )
    manager.claim_daily_reward()
    manager.record_sprint(stride.SprintResult(is_valid=True, duration_seconds=32))
    manager.unlock_ability("xp_1")
"""

__version__ = "0.1.0"

# Progression
from stride.progression import (
    LevelConfig,
    LevelCalculator,
    RankLadder,
    Rank,
    PlayerProfile,
    CompletedRun,
    level_for_experience,
    rank_for_points,
)

# Abilities
from stride.abilities import (
    AbilityEngine,
    AbilityTree,
    UserAbilities,
    ActionResult,
    RejectionReason,
)

# Pets
from stride.pets import (
    PetCatalog,
    PetConfig,
    OwnedPet,
)

# Rewards
from stride.rewards import (
    Rarity,
    SprintResult,
    SprintRewards,
    RewardsConfig,
    RewardsCalculator,
    ProfileContext,
)

# Daily rewards
from stride.daily import (
    DailyRewardState,
    DailyRewardTracker,
)

# Tasks
from stride.tasks import (
    TaskItem,
    TaskRecurrence,
    TaskBoard,
)

# Config
from stride.config.game import GameConfig, load_game_config

# Profile
from stride.profile import (
    GameRules,
    PlayerAggregate,
    ClaimResult,
    BlobStore,
    MemoryBlobStore,
    FileBlobStore,
    ProfilePersistence,
    ProfileManager,
)

# Sync
from stride.sync import (
    MessageType,
    SyncMessage,
    RunSummaryPayload,
    ProfileSnapshot,
)
from stride.sync.handler import SyncHandler

__all__ = [
    "__version__",
    # Progression
    "LevelConfig",
    "LevelCalculator",
    "RankLadder",
    "Rank",
    "PlayerProfile",
    "CompletedRun",
    "level_for_experience",
    "rank_for_points",
    # Abilities
    "AbilityEngine",
    "AbilityTree",
    "UserAbilities",
    "ActionResult",
    "RejectionReason",
    # Pets
    "PetCatalog",
    "PetConfig",
    "OwnedPet",
    # Rewards
    "Rarity",
    "SprintResult",
    "SprintRewards",
    "RewardsConfig",
    "RewardsCalculator",
    "ProfileContext",
    # Daily
    "DailyRewardState",
    "DailyRewardTracker",
    # Tasks
    "TaskItem",
    "TaskRecurrence",
    "TaskBoard",
    # Config
    "GameConfig",
    "load_game_config",
    # Profile
    "GameRules",
    "PlayerAggregate",
    "ClaimResult",
    "BlobStore",
    "MemoryBlobStore",
    "FileBlobStore",
    "ProfilePersistence",
    "ProfileManager",
    # Sync
    "MessageType",
    "SyncMessage",
    "RunSummaryPayload",
    "ProfileSnapshot",
    "SyncHandler",
]
