"""Ability tree type definitions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from stride.types import RewardCategory


class EffectKind(Enum):
    """Kinds of ability effects."""
    RP_BONUS = "rp_bonus"
    XP_BONUS = "xp_bonus"
    COIN_BONUS = "coin_bonus"
    SPRINT_BONUS = "sprint_bonus"
    PET_XP_BONUS = "pet_xp_bonus"
    CATCH_RATE_BONUS = "catch_rate_bonus"
    PASSIVE_BONUS = "passive_bonus"
    EVOLUTION_DISCOUNT = "evolution_discount"
    ALL_BONUS = "all_bonus"
    LOOT_LUCK_BONUS = "loot_luck_bonus"


# Which sprint reward categories each effect kind feeds
_CATEGORY_TARGETS: dict[EffectKind, frozenset[RewardCategory]] = {
    EffectKind.RP_BONUS: frozenset({RewardCategory.RANK_POINTS}),
    EffectKind.XP_BONUS: frozenset({RewardCategory.EXPERIENCE}),
    EffectKind.COIN_BONUS: frozenset({RewardCategory.COINS}),
    EffectKind.SPRINT_BONUS: frozenset(RewardCategory),
    EffectKind.ALL_BONUS: frozenset(RewardCategory),
}


@dataclass(frozen=True)
class Effect:
    """A percentage bonus attached to an ability node (0.05 = +5%)."""
    kind: EffectKind
    value: float

    def applies_to(self, category: RewardCategory) -> bool:
        """Whether this effect feeds the given sprint reward category."""
        return category in _CATEGORY_TARGETS.get(self.kind, frozenset())

    @property
    def description(self) -> str:
        pct = int(round(self.value * 100))
        return {
            EffectKind.RP_BONUS: f"+{pct}% RP",
            EffectKind.XP_BONUS: f"+{pct}% XP",
            EffectKind.COIN_BONUS: f"+{pct}% Coins",
            EffectKind.SPRINT_BONUS: f"+{pct}% Sprint Rewards",
            EffectKind.PET_XP_BONUS: f"+{pct}% Pet XP",
            EffectKind.CATCH_RATE_BONUS: f"+{pct}% Catch Rate",
            EffectKind.PASSIVE_BONUS: f"+{pct}% Passive Rewards",
            EffectKind.EVOLUTION_DISCOUNT: f"-{pct}% Evolution XP",
            EffectKind.ALL_BONUS: f"+{pct}% All Rewards",
            EffectKind.LOOT_LUCK_BONUS: f"+{pct}% Rare Loot",
        }[self.kind]

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Effect":
        return cls(kind=EffectKind(data["kind"]), value=float(data["value"]))


@dataclass(frozen=True)
class AbilityNode:
    """
    A node of the player ability tree.

    ``tree_x``/``tree_y`` are layout hints for the presentation layer and
    are never read by the engine.
    """
    id: str
    name: str
    tier: int
    cost: int
    effect: Effect
    prerequisites: tuple[str, ...] = ()
    description: str = ""
    icon: str = ""
    tree_x: float = 0.0
    tree_y: float = 0.0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "tier": self.tier,
            "cost": self.cost,
            "effect": self.effect.to_dict(),
            "prerequisites": list(self.prerequisites),
            "description": self.description,
            "icon": self.icon,
            "tree_x": self.tree_x,
            "tree_y": self.tree_y,
        }


class NodeState(Enum):
    """Unlock state of a player ability node."""
    LOCKED = "locked"
    UNLOCKABLE = "unlockable"
    UNLOCKED = "unlocked"


class RejectionReason(Enum):
    """Why a guarded operation was refused."""
    UNKNOWN_ABILITY = "unknown_ability"
    ALREADY_UNLOCKED = "already_unlocked"
    INSUFFICIENT_POINTS = "insufficient_points"
    PREREQUISITE_NOT_MET = "prerequisite_not_met"
    MAX_LEVEL = "max_level"
    ALREADY_CLAIMED = "already_claimed"
    UNKNOWN_PET = "unknown_pet"

    @property
    def message(self) -> str:
        return {
            RejectionReason.UNKNOWN_ABILITY: "unknown ability",
            RejectionReason.ALREADY_UNLOCKED: "already unlocked",
            RejectionReason.INSUFFICIENT_POINTS: "insufficient points",
            RejectionReason.PREREQUISITE_NOT_MET: "prerequisite not met",
            RejectionReason.MAX_LEVEL: "already at max level",
            RejectionReason.ALREADY_CLAIMED: "already claimed today",
            RejectionReason.UNKNOWN_PET: "unknown pet",
        }[self]


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a guarded mutation. Truthy iff it succeeded."""
    success: bool
    reason: Optional[RejectionReason] = None

    def __bool__(self) -> bool:
        return self.success

    @property
    def message(self) -> Optional[str]:
        return self.reason.message if self.reason else None

    @classmethod
    def ok(cls) -> "ActionResult":
        return cls(success=True)

    @classmethod
    def rejected(cls, reason: RejectionReason) -> "ActionResult":
        return cls(success=False, reason=reason)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
        }


@dataclass
class UserAbilities:
    """
    Player-owned ability state.

    ``pet_ability_levels`` is keyed by pet definition id; a missing entry
    means level 1.
    """
    ability_points: int = 0
    pet_points: int = 0
    unlocked_player_abilities: set[str] = field(default_factory=set)
    pet_ability_levels: dict[str, int] = field(default_factory=dict)

    def pet_ability_level(self, pet_id: str) -> int:
        return self.pet_ability_levels.get(pet_id, 1)

    def is_unlocked(self, node_id: str) -> bool:
        return node_id in self.unlocked_player_abilities

    def to_dict(self) -> dict:
        return {
            "ability_points": self.ability_points,
            "pet_points": self.pet_points,
            "unlocked_player_abilities": sorted(self.unlocked_player_abilities),
            "pet_ability_levels": dict(self.pet_ability_levels),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserAbilities":
        return cls(
            ability_points=int(data.get("ability_points", 0)),
            pet_points=int(data.get("pet_points", 0)),
            unlocked_player_abilities=set(data.get("unlocked_player_abilities", [])),
            pet_ability_levels={
                k: int(v) for k, v in data.get("pet_ability_levels", {}).items()
            },
        )
