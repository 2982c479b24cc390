"""Daily login rewards."""

from stride.daily.tracker import (
    CYCLE_LENGTH,
    DEFAULT_DAILY_REWARDS,
    DailyRewardState,
    DailyReward,
    ClaimPreview,
    DailyRewardTracker,
)

__all__ = [
    "CYCLE_LENGTH",
    "DEFAULT_DAILY_REWARDS",
    "DailyRewardState",
    "DailyReward",
    "ClaimPreview",
    "DailyRewardTracker",
]
