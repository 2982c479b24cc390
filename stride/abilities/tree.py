"""
Player ability tree - static node definitions and validation.

The tree is a tiered DAG: every prerequisite of a node must exist and sit
in a strictly lower tier, which rules out cycles. A bad tree is a
configuration error and is rejected when the tree is built.

The default tree has three starting branches (XP, RP, coins) that merge
into specialised tier 3 nodes and end in the tier 5 Champion node. A
replacement tree can be loaded from configs/abilities/player_tree.yaml.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from stride.config.loader import load_yaml
from stride.abilities.types import AbilityNode, Effect, EffectKind


logger = logging.getLogger(__name__)


class AbilityTreeError(Exception):
    """Raised when an ability tree definition is invalid."""
    pass


def _node(node_id, name, tier, cost, kind, value, prerequisites, description,
          icon, x, y) -> AbilityNode:
    return AbilityNode(
        id=node_id,
        name=name,
        tier=tier,
        cost=cost,
        effect=Effect(kind, value),
        prerequisites=tuple(prerequisites),
        description=description,
        icon=icon,
        tree_x=x,
        tree_y=y,
    )


DEFAULT_PLAYER_NODES: tuple[AbilityNode, ...] = (
    # Tier 1 - starting branches
    _node("xp_1", "XP Boost I", 1, 1, EffectKind.XP_BONUS, 0.05, [],
          "+5% XP from all sources", "arrow.up.circle.fill", 0.20, 0.10),
    _node("rp_1", "RP Boost I", 1, 1, EffectKind.RP_BONUS, 0.05, [],
          "+5% RP from all sources", "star.fill", 0.50, 0.10),
    _node("coin_1", "Coin Boost I", 1, 1, EffectKind.COIN_BONUS, 0.05, [],
          "+5% coins from all sources", "bitcoinsign.circle.fill", 0.80, 0.10),

    # Tier 2
    _node("xp_2", "XP Boost II", 2, 2, EffectKind.XP_BONUS, 0.10, ["xp_1"],
          "+10% XP from all sources", "arrow.up.circle.fill", 0.20, 0.25),
    _node("rp_2", "RP Boost II", 2, 2, EffectKind.RP_BONUS, 0.10, ["rp_1"],
          "+10% RP from all sources", "star.fill", 0.50, 0.25),
    _node("coin_2", "Coin Boost II", 2, 2, EffectKind.COIN_BONUS, 0.10, ["coin_1"],
          "+10% coins from all sources", "bitcoinsign.circle.fill", 0.80, 0.25),

    # Tier 3 - specialised
    _node("pet_lover", "Pet Lover", 3, 3, EffectKind.PET_XP_BONUS, 0.25, ["xp_2"],
          "+25% pet evolution XP", "heart.fill", 0.15, 0.45),
    _node("lucky_runner", "Lucky Runner", 3, 3, EffectKind.CATCH_RATE_BONUS, 0.02, ["rp_2"],
          "+2% pet catch rate", "leaf.fill", 0.38, 0.45),
    _node("sprint_master", "Sprint Master", 3, 3, EffectKind.SPRINT_BONUS, 0.15,
          ["rp_2", "xp_2", "coin_2"],
          "+15% to all sprint rewards", "bolt.fill", 0.62, 0.45),
    _node("loot_luck", "Loot Luck", 3, 3, EffectKind.LOOT_LUCK_BONUS, 0.15, ["coin_2"],
          "+15% chance of rare loot boxes", "gift.fill", 0.85, 0.45),

    # Tier 4
    _node("evolution_accelerator", "Evolution Accelerator", 4, 4,
          EffectKind.EVOLUTION_DISCOUNT, 0.20, ["pet_lover"],
          "-20% XP needed for pet evolution", "sparkles", 0.15, 0.65),
    _node("passive_income", "Passive Income", 4, 4, EffectKind.PASSIVE_BONUS, 0.50,
          ["sprint_master"],
          "+50% passive rewards while running", "hourglass", 0.50, 0.65),
    _node("treasure_hunter", "Treasure Hunter", 4, 4, EffectKind.COIN_BONUS, 0.25,
          ["loot_luck"],
          "+25% coins", "star.circle.fill", 0.85, 0.65),

    # Tier 5 - ultimate
    _node("champion", "Champion", 5, 5, EffectKind.ALL_BONUS, 0.25,
          ["passive_income", "evolution_accelerator"],
          "+25% RP, +25% XP, +25% Coins", "crown.fill", 0.33, 0.85),
)


def load_ability_node(data: dict) -> AbilityNode:
    """Load an ability node from dict."""
    effect_data = data.get("effect", {})
    return AbilityNode(
        id=data["id"],
        name=data.get("name", data["id"]),
        tier=int(data["tier"]),
        cost=int(data["cost"]),
        effect=Effect(
            kind=EffectKind(effect_data["kind"]),
            value=float(effect_data.get("value", 0.0)),
        ),
        prerequisites=tuple(data.get("prerequisites", [])),
        description=data.get("description", ""),
        icon=data.get("icon", ""),
        tree_x=float(data.get("tree_x", 0.0)),
        tree_y=float(data.get("tree_y", 0.0)),
    )


class AbilityTree:
    """Validated, immutable collection of player ability nodes."""

    def __init__(self, nodes: Optional[Iterable[AbilityNode]] = None):
        node_list = list(nodes if nodes is not None else DEFAULT_PLAYER_NODES)
        self._nodes: dict[str, AbilityNode] = {}
        for node in node_list:
            if node.id in self._nodes:
                raise AbilityTreeError(f"Duplicate ability id '{node.id}'")
            self._nodes[node.id] = node
        self._validate()

    def _validate(self):
        for node in self._nodes.values():
            if node.cost < 0:
                raise AbilityTreeError(f"Ability '{node.id}' has a negative cost")
            for prereq_id in node.prerequisites:
                prereq = self._nodes.get(prereq_id)
                if prereq is None:
                    raise AbilityTreeError(
                        f"Ability '{node.id}' requires unknown ability '{prereq_id}'"
                    )
                if prereq.tier >= node.tier:
                    raise AbilityTreeError(
                        f"Ability '{node.id}' (tier {node.tier}) requires "
                        f"'{prereq_id}' (tier {prereq.tier}); prerequisites "
                        f"must be in a lower tier"
                    )

    @classmethod
    def from_yaml(cls, path: Path) -> "AbilityTree":
        """Load a tree from a YAML file with a top-level ``nodes`` list."""
        data = load_yaml(path)
        nodes = [load_ability_node(n) for n in data.get("nodes", [])]
        logger.debug(f"Loaded {len(nodes)} ability nodes from {path}")
        return cls(nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, node_id: str) -> Optional[AbilityNode]:
        return self._nodes.get(node_id)

    @property
    def nodes(self) -> list[AbilityNode]:
        return list(self._nodes.values())

    def nodes_by_tier(self, tier: int) -> list[AbilityNode]:
        return [n for n in self._nodes.values() if n.tier == tier]

    def edges(self) -> list[tuple[str, str]]:
        """(prerequisite, node) pairs, for drawing the tree."""
        return [
            (prereq, node.id)
            for node in self._nodes.values()
            for prereq in node.prerequisites
        ]
