"""
Ability system - player ability tree and pet ability levels.

Usage:
    from stride.abilities import AbilityEngine, UserAbilities

    engine = AbilityEngine()
    abilities = UserAbilities(ability_points=3)

    result = engine.unlock(abilities, "xp_1")
    if not result:
        print(result.message)  # "insufficient points", ...
"""

from stride.abilities.types import (
    EffectKind,
    Effect,
    AbilityNode,
    NodeState,
    RejectionReason,
    ActionResult,
    UserAbilities,
)
from stride.abilities.tree import (
    AbilityTree,
    AbilityTreeError,
    DEFAULT_PLAYER_NODES,
    load_ability_node,
)
from stride.abilities.engine import AbilityEngine

__all__ = [
    "EffectKind",
    "Effect",
    "AbilityNode",
    "NodeState",
    "RejectionReason",
    "ActionResult",
    "UserAbilities",
    "AbilityTree",
    "AbilityTreeError",
    "DEFAULT_PLAYER_NODES",
    "load_ability_node",
    "AbilityEngine",
]
