"""
Player profile - aggregate state, persistence and the managing facade.

Usage:
    from stride.profile import FileBlobStore, ProfilePersistence, ProfileManager

    manager = ProfileManager(ProfilePersistence(FileBlobStore("state")))
    manager.claim_daily_reward()
"""

from stride.profile.aggregate import (
    SNAPSHOT_VERSION,
    GameRules,
    ClaimResult,
    PlayerAggregate,
)
from stride.profile.persistence import (
    DEFAULT_KEY,
    BlobStore,
    MemoryBlobStore,
    FileBlobStore,
    ProfilePersistence,
)
from stride.profile.manager import ProfileManager

__all__ = [
    "SNAPSHOT_VERSION",
    "GameRules",
    "ClaimResult",
    "PlayerAggregate",
    "DEFAULT_KEY",
    "BlobStore",
    "MemoryBlobStore",
    "FileBlobStore",
    "ProfilePersistence",
    "ProfileManager",
]
