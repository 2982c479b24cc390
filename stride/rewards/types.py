"""Reward type definitions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Rarity(Enum):
    """Loot box rarity, lowest to highest."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"

    @classmethod
    def parse(cls, value) -> Optional["Rarity"]:
        """Rarity for a wire string, None when unknown."""
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class SprintResult:
    """Outcome of one sprint as reported by the tracker."""
    is_valid: bool
    duration_seconds: float = 0.0


@dataclass
class SprintRewards:
    """Rewards granted for a single sprint."""
    rank_points: int = 0
    experience: int = 0
    coins: int = 0
    loot_box: Optional[Rarity] = None
    bonuses: dict[str, float] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "SprintRewards":
        return cls()

    @property
    def is_empty(self) -> bool:
        return (
            self.rank_points == 0
            and self.experience == 0
            and self.coins == 0
            and self.loot_box is None
        )

    def to_dict(self) -> dict:
        return {
            "rank_points": self.rank_points,
            "experience": self.experience,
            "coins": self.coins,
            "loot_box": self.loot_box.value if self.loot_box else None,
            "bonuses": dict(self.bonuses),
        }


def _default_rarity_weights() -> dict[str, float]:
    return {
        "common": 0.55,
        "uncommon": 0.25,
        "rare": 0.12,
        "epic": 0.06,
        "legendary": 0.02,
    }


def _default_streak_bands() -> list[list[float]]:
    return [[1, 0.05], [4, 0.10], [8, 0.15], [15, 0.20]]


@dataclass
class RewardsConfig:
    """
    Economy tuning. Loadable from configs/rewards/economy.yaml.

    Streak bands are ``[min_streak_days, bonus]`` pairs; the highest band
    whose minimum is reached applies.
    """
    sprint_rank_points: int = 15
    sprint_experience: int = 25
    sprint_coins: int = 10

    passive_rank_points_min: int = 1
    passive_rank_points_max: int = 3
    passive_experience_min: int = 2
    passive_experience_max: int = 5

    pet_catch_coins: int = 50
    pet_catch_rank_points: int = 25
    pet_catch_experience: int = 50

    streak_bands: list[list[float]] = field(default_factory=_default_streak_bands)

    loot_drop_chance: float = 0.70
    rarity_weights: dict[str, float] = field(default_factory=_default_rarity_weights)

    ability_points_per_level: int = 1
    pet_points_per_level: int = 1
    run_history_cap: int = 50

    def streak_bonus(self, streak_days: int) -> float:
        """Bonus fraction for a run streak, 0.0 for no streak."""
        bonus = 0.0
        for min_days, value in sorted(self.streak_bands, key=lambda b: b[0]):
            if streak_days >= min_days:
                bonus = float(value)
        return bonus

    def rarity_weight(self, rarity: Rarity) -> float:
        return float(self.rarity_weights.get(rarity.value, 0.0))
