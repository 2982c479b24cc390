"""Ability unlock engine - validates and applies unlocks and pet upgrades."""

import logging
from typing import Optional

from stride.abilities.tree import AbilityTree
from stride.abilities.types import (
    AbilityNode,
    ActionResult,
    Effect,
    EffectKind,
    NodeState,
    RejectionReason,
    UserAbilities,
)


logger = logging.getLogger(__name__)


class AbilityEngine:
    """
    Applies unlock and upgrade operations to a player's ability state.

    Node lifecycle: LOCKED -> UNLOCKABLE -> UNLOCKED (terminal).

    Guards are evaluated on every call against the state passed in; nothing
    read earlier is trusted. A rejected operation leaves the state untouched.
    """

    def __init__(self, tree: Optional[AbilityTree] = None, max_pet_level: int = 5):
        self.tree = tree or AbilityTree()
        self.max_pet_level = max_pet_level

    # -------------------------------------------------------------------------
    # Player ability nodes
    # -------------------------------------------------------------------------

    def _check_unlock(
        self,
        abilities: UserAbilities,
        node: Optional[AbilityNode],
    ) -> Optional[RejectionReason]:
        if node is None:
            return RejectionReason.UNKNOWN_ABILITY
        if abilities.is_unlocked(node.id):
            return RejectionReason.ALREADY_UNLOCKED
        if not all(abilities.is_unlocked(p) for p in node.prerequisites):
            return RejectionReason.PREREQUISITE_NOT_MET
        if abilities.ability_points < node.cost:
            return RejectionReason.INSUFFICIENT_POINTS
        return None

    def node_state(self, abilities: UserAbilities, node_id: str) -> NodeState:
        """Current state of a node for this player."""
        if abilities.is_unlocked(node_id):
            return NodeState.UNLOCKED
        if self._check_unlock(abilities, self.tree.get(node_id)) is None:
            return NodeState.UNLOCKABLE
        return NodeState.LOCKED

    def can_unlock(self, abilities: UserAbilities, node_id: str) -> ActionResult:
        reason = self._check_unlock(abilities, self.tree.get(node_id))
        return ActionResult.ok() if reason is None else ActionResult.rejected(reason)

    def unlock(self, abilities: UserAbilities, node_id: str) -> ActionResult:
        """
        Unlock a node, paying its cost in ability points.

        Returns:
            ActionResult; on rejection nothing is deducted or inserted
        """
        node = self.tree.get(node_id)
        reason = self._check_unlock(abilities, node)
        if reason is not None:
            logger.debug(f"Unlock of '{node_id}' rejected: {reason.message}")
            return ActionResult.rejected(reason)

        abilities.ability_points -= node.cost
        abilities.unlocked_player_abilities.add(node.id)
        logger.info(
            f"Unlocked ability '{node.id}' for {node.cost} AP "
            f"({abilities.ability_points} AP left)"
        )
        return ActionResult.ok()

    def unlockable_nodes(self, abilities: UserAbilities) -> list[AbilityNode]:
        return [
            n for n in self.tree.nodes
            if self.node_state(abilities, n.id) == NodeState.UNLOCKABLE
        ]

    def unlocked_effects(self, abilities: UserAbilities) -> list[Effect]:
        """Effects of every unlocked node, resolved through the tree."""
        effects = []
        for node_id in sorted(abilities.unlocked_player_abilities):
            node = self.tree.get(node_id)
            if node is None:
                logger.warning(f"Unlocked ability '{node_id}' is not in the tree; ignored")
                continue
            effects.append(node.effect)
        return effects

    def bonus_total(self, abilities: UserAbilities, kind: EffectKind) -> float:
        """Sum of unlocked effect values of one kind."""
        return sum(e.value for e in self.unlocked_effects(abilities) if e.kind == kind)

    # -------------------------------------------------------------------------
    # Pet ability levels
    # -------------------------------------------------------------------------

    def pet_upgrade_cost(self, abilities: UserAbilities, pet_id: str) -> Optional[int]:
        """Pet points needed for the next level, None at max level."""
        level = abilities.pet_ability_level(pet_id)
        if level >= self.max_pet_level:
            return None
        return level + 1

    def upgrade_pet(self, abilities: UserAbilities, pet_id: str) -> ActionResult:
        """
        Raise a pet's ability level by exactly one.

        Upgrading from level n costs n + 1 pet points.
        """
        level = abilities.pet_ability_level(pet_id)
        cost = self.pet_upgrade_cost(abilities, pet_id)
        if cost is None:
            return ActionResult.rejected(RejectionReason.MAX_LEVEL)
        if abilities.pet_points < cost:
            return ActionResult.rejected(RejectionReason.INSUFFICIENT_POINTS)

        abilities.pet_points -= cost
        abilities.pet_ability_levels[pet_id] = level + 1
        logger.info(f"Upgraded pet '{pet_id}' ability to level {level + 1} for {cost} PP")
        return ActionResult.ok()
