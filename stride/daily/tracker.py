"""
Daily reward tracker - seven-day claim cycle.

Claiming on consecutive calendar days advances the cycle day
(1 -> 2 -> ... -> 7 -> 1). Missing a day resets to day 1.

All calendar comparisons go through ``calendar_day`` so that a tracker
built with a timezone compares local dates.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional

from stride.types import calendar_day, datetime_to_iso, iso_to_datetime


logger = logging.getLogger(__name__)


CYCLE_LENGTH = 7


@dataclass
class DailyRewardState:
    """Persisted claim state."""
    last_claim_date: Optional[datetime] = None
    current_day: int = 1
    streak_count: int = 0

    def to_dict(self) -> dict:
        return {
            "last_claim_date": datetime_to_iso(self.last_claim_date),
            "current_day": self.current_day,
            "streak_count": self.streak_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DailyRewardState":
        day = int(data.get("current_day", 1))
        return cls(
            last_claim_date=iso_to_datetime(data.get("last_claim_date")),
            current_day=day if 1 <= day <= CYCLE_LENGTH else 1,
            streak_count=int(data.get("streak_count", 0)),
        )


@dataclass(frozen=True)
class DailyReward:
    coins: int
    gems: int = 0

    def to_dict(self) -> dict:
        return {"coins": self.coins, "gems": self.gems}


@dataclass(frozen=True)
class ClaimPreview:
    """What a claim made now would grant."""
    day: int
    streak_count: int
    reward: DailyReward

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "streak_count": self.streak_count,
            "reward": self.reward.to_dict(),
        }


DEFAULT_DAILY_REWARDS: tuple[DailyReward, ...] = (
    DailyReward(coins=50),
    DailyReward(coins=75),
    DailyReward(coins=100),
    DailyReward(coins=125),
    DailyReward(coins=150),
    DailyReward(coins=200),
    DailyReward(coins=300, gems=5),
)


class DailyRewardTracker:
    """Pure claim rules over a DailyRewardState."""

    def __init__(
        self,
        tz: Optional[tzinfo] = None,
        rewards: Optional[tuple[DailyReward, ...]] = None,
    ):
        self.tz = tz
        self.rewards = tuple(rewards) if rewards else DEFAULT_DAILY_REWARDS
        if len(self.rewards) != CYCLE_LENGTH:
            raise ValueError(f"Daily reward table needs {CYCLE_LENGTH} entries, got {len(self.rewards)}")

    def _day_gap(self, state: DailyRewardState, now: datetime) -> Optional[int]:
        if state.last_claim_date is None:
            return None
        last = calendar_day(state.last_claim_date, self.tz)
        today = calendar_day(now, self.tz)
        return (today - last).days

    def can_claim_today(self, state: DailyRewardState, now: datetime) -> bool:
        """True unless a claim was already made on now's calendar day."""
        return self._day_gap(state, now) != 0

    def next_claim_day(self, state: DailyRewardState, now: datetime) -> int:
        """
        Cycle day a claim made at ``now`` would land on.

        gap 0 keeps the current day, gap 1 advances (wrapping 7 -> 1), any
        other gap (including a clock moved backwards) resets to day 1.
        """
        gap = self._day_gap(state, now)
        if gap is None:
            return 1
        if gap == 0:
            return state.current_day
        if gap == 1:
            return state.current_day % CYCLE_LENGTH + 1
        return 1

    def next_streak_count(self, state: DailyRewardState, now: datetime) -> int:
        gap = self._day_gap(state, now)
        if gap == 0:
            return state.streak_count
        if gap == 1:
            return state.streak_count + 1
        return 1

    def reward_for_day(self, day: int) -> DailyReward:
        day = min(max(day, 1), CYCLE_LENGTH)
        return self.rewards[day - 1]

    def preview_claim(self, state: DailyRewardState, now: datetime) -> ClaimPreview:
        day = self.next_claim_day(state, now)
        return ClaimPreview(
            day=day,
            streak_count=self.next_streak_count(state, now),
            reward=self.reward_for_day(day),
        )

    def claimed_state(self, state: DailyRewardState, now: datetime) -> DailyRewardState:
        """State after a claim at ``now``. Does not check eligibility."""
        preview = self.preview_claim(state, now)
        return DailyRewardState(
            last_claim_date=now,
            current_day=preview.day,
            streak_count=preview.streak_count,
        )
