"""
Rank ladder - tiers unlocked by accumulated rank points.

Each tier has a rank point floor, a cap (the point just below the next
tier's floor) and a set of perks. A profile's rank is the highest tier
whose floor is <= its rank points.

Usage:
    from stride.progression.ranks import get_rank_ladder

    ladder = get_rank_ladder()
    rank = ladder.rank_for_points(4200)   # Gold
    ladder.progress_to_next(4200, rank)   # 0.3
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from stride.config.loader import load_yaml


logger = logging.getLogger(__name__)


class RankConfigError(Exception):
    """Raised when a rank ladder definition is invalid."""
    pass


class PerkType(Enum):
    """What a rank perk boosts."""
    COIN_BONUS = "coin_bonus"
    XP_BONUS = "xp_bonus"
    CATCH_RATE = "catch_rate"
    SPECIAL = "special"


@dataclass(frozen=True)
class Perk:
    type: PerkType
    value: float
    description: str = ""

    def to_dict(self) -> dict:
        return {"type": self.type.value, "value": self.value, "description": self.description}


@dataclass(frozen=True)
class Rank:
    """A single tier of the ladder. ``cap`` is None for the top tier."""
    id: str
    name: str
    tier: int
    floor: int
    cap: Optional[int]
    perks: tuple[Perk, ...] = field(default_factory=tuple)
    icon: str = ""

    def perk_total(self, perk_type: PerkType) -> float:
        """Sum of this tier's perks of one type."""
        return sum(p.value for p in self.perks if p.type == perk_type)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "tier": self.tier,
            "floor": self.floor,
            "cap": self.cap,
            "perks": [p.to_dict() for p in self.perks],
            "icon": self.icon,
        }


def load_rank(data: dict) -> Rank:
    """Load a rank from dict."""
    perks = tuple(
        Perk(
            type=PerkType(p.get("type", "special")),
            value=float(p.get("value", 0.0)),
            description=p.get("description", ""),
        )
        for p in data.get("perks", [])
    )
    return Rank(
        id=data["id"],
        name=data.get("name", data["id"].title()),
        tier=int(data["tier"]),
        floor=int(data["floor"]),
        cap=data.get("cap"),
        perks=perks,
        icon=data.get("icon", ""),
    )


DEFAULT_RANKS: tuple[Rank, ...] = (
    Rank("bronze", "Bronze", 1, 0, 999, (
        Perk(PerkType.COIN_BONUS, 0.0, "Base rewards"),
    ), icon="shield.fill"),
    Rank("silver", "Silver", 2, 1000, 2999, (
        Perk(PerkType.COIN_BONUS, 0.05, "+5% coin bonus"),
    ), icon="shield.lefthalf.filled"),
    Rank("gold", "Gold", 3, 3000, 6999, (
        Perk(PerkType.COIN_BONUS, 0.10, "+10% coin bonus"),
        Perk(PerkType.XP_BONUS, 0.05, "+5% XP bonus"),
    ), icon="shield.fill"),
    Rank("platinum", "Platinum", 4, 7000, 14999, (
        Perk(PerkType.COIN_BONUS, 0.15, "+15% coin bonus"),
        Perk(PerkType.XP_BONUS, 0.10, "+10% XP bonus"),
        Perk(PerkType.CATCH_RATE, 0.05, "+5% catch rate"),
    ), icon="crown.fill"),
    Rank("diamond", "Diamond", 5, 15000, None, (
        Perk(PerkType.COIN_BONUS, 0.25, "+25% coin bonus"),
        Perk(PerkType.XP_BONUS, 0.15, "+15% XP bonus"),
        Perk(PerkType.CATCH_RATE, 0.10, "+10% catch rate"),
    ), icon="diamond.fill"),
)


class RankLadder:
    """
    Ordered, immutable ladder of rank tiers.

    Validated at construction: floors start at 0, strictly increase, and
    each cap sits exactly one point below the next floor.
    """

    def __init__(self, ranks: Optional[list[Rank] | tuple[Rank, ...]] = None):
        self._ranks: tuple[Rank, ...] = tuple(
            sorted(ranks if ranks is not None else DEFAULT_RANKS, key=lambda r: r.floor)
        )
        self._validate()

    def _validate(self):
        if not self._ranks:
            raise RankConfigError("Rank ladder has no tiers")
        if self._ranks[0].floor != 0:
            raise RankConfigError(
                f"Lowest tier '{self._ranks[0].id}' must start at 0 rank points"
            )
        for lower, upper in zip(self._ranks, self._ranks[1:]):
            if upper.floor <= lower.floor:
                raise RankConfigError(
                    f"Tier '{upper.id}' floor {upper.floor} is not above '{lower.id}'"
                )
            if lower.cap is not None and lower.cap != upper.floor - 1:
                raise RankConfigError(
                    f"Tier '{lower.id}' cap {lower.cap} leaves a gap before '{upper.id}'"
                )

    @classmethod
    def from_yaml(cls, path: Path) -> "RankLadder":
        """Load a ladder from a YAML file with a top-level ``ranks`` list."""
        data = load_yaml(path)
        ranks = [load_rank(r) for r in data.get("ranks", [])]
        logger.debug(f"Loaded {len(ranks)} ranks from {path}")
        return cls(ranks)

    @property
    def ranks(self) -> tuple[Rank, ...]:
        return self._ranks

    @property
    def lowest(self) -> Rank:
        return self._ranks[0]

    @property
    def highest(self) -> Rank:
        return self._ranks[-1]

    def get(self, rank_id: str) -> Optional[Rank]:
        for rank in self._ranks:
            if rank.id == rank_id:
                return rank
        return None

    def rank_for_points(self, points: int) -> Rank:
        """Highest tier whose floor is <= points; lowest tier otherwise."""
        for rank in reversed(self._ranks):
            if points >= rank.floor:
                return rank
        return self._ranks[0]

    def next_rank(self, current: Rank) -> Optional[Rank]:
        """Tier after ``current``, or None at the top of the ladder."""
        for i, rank in enumerate(self._ranks):
            if rank.id == current.id:
                return self._ranks[i + 1] if i + 1 < len(self._ranks) else None
        return None

    def progress_to_next(self, points: int, current: Rank) -> float:
        """
        Progress from ``current`` toward the next tier (0.0 to 1.0).

        Max rank is terminal and reports 1.0.
        """
        following = self.next_rank(current)
        if following is None:
            return 1.0

        span = following.floor - current.floor
        if span <= 0:
            return 1.0
        return min(1.0, max(0.0, (points - current.floor) / span))

    def rank_points_to_next(self, points: int) -> Optional[int]:
        """Rank points missing for the next tier, None at max rank."""
        following = self.next_rank(self.rank_for_points(points))
        if following is None:
            return None
        return following.floor - points


# Global ladder
_ladder: Optional[RankLadder] = None


def get_rank_ladder() -> RankLadder:
    """Get the global rank ladder."""
    global _ladder
    if _ladder is None:
        _ladder = RankLadder()
    return _ladder


def reset_rank_ladder():
    """Reset the global ladder (for testing)."""
    global _ladder
    _ladder = None


def init_rank_ladder(ranks: Optional[list[Rank]] = None) -> RankLadder:
    """Initialize the global ladder."""
    global _ladder
    _ladder = RankLadder(ranks)
    return _ladder


# Convenience functions

def rank_for_points(points: int) -> Rank:
    """Get the rank tier for an amount of rank points."""
    return get_rank_ladder().rank_for_points(points)


def progress_to_next(points: int, current: Rank) -> float:
    """Get progress toward the tier after ``current``."""
    return get_rank_ladder().progress_to_next(points, current)
