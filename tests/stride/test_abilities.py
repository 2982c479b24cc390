"""Tests for the ability tree and unlock engine."""

import sys
from pathlib import Path

# Ensure project root is in sys.path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest

from stride.abilities import (
    AbilityEngine,
    AbilityNode,
    AbilityTree,
    AbilityTreeError,
    ActionResult,
    DEFAULT_PLAYER_NODES,
    Effect,
    EffectKind,
    NodeState,
    RejectionReason,
    UserAbilities,
)
from stride.types import RewardCategory


@pytest.fixture
def engine():
    return AbilityEngine()


def _node(node_id, tier, prerequisites=(), cost=1):
    return AbilityNode(
        id=node_id,
        name=node_id,
        tier=tier,
        cost=cost,
        effect=Effect(EffectKind.XP_BONUS, 0.05),
        prerequisites=tuple(prerequisites),
    )


# =============================================================================
# Tree
# =============================================================================

class TestAbilityTree:
    """Tests for tree construction and validation."""

    def test_default_tree(self):
        tree = AbilityTree()

        assert len(tree) == 14
        assert "champion" in tree
        assert len(tree.nodes_by_tier(1)) == 3
        assert ("passive_income", "champion") in tree.edges()

    def test_default_prerequisites_are_lower_tier(self):
        tree = AbilityTree()
        for node in DEFAULT_PLAYER_NODES:
            for prereq in node.prerequisites:
                assert tree.get(prereq).tier < node.tier

    def test_duplicate_id_rejected(self):
        with pytest.raises(AbilityTreeError):
            AbilityTree([_node("a", 1), _node("a", 2)])

    def test_unknown_prerequisite_rejected(self):
        with pytest.raises(AbilityTreeError):
            AbilityTree([_node("a", 2, ["missing"])])

    def test_same_tier_prerequisite_rejected(self):
        with pytest.raises(AbilityTreeError):
            AbilityTree([_node("a", 1), _node("b", 1, ["a"])])

    def test_cycle_rejected(self):
        with pytest.raises(AbilityTreeError):
            AbilityTree([_node("a", 2, ["b"]), _node("b", 2, ["a"])])

    def test_negative_cost_rejected(self):
        with pytest.raises(AbilityTreeError):
            AbilityTree([_node("a", 1, cost=-1)])

    def test_from_yaml(self, temp_dir):
        path = temp_dir / "player_tree.yaml"
        path.write_text("""
nodes:
  - id: start
    tier: 1
    cost: 1
    effect: {kind: rp_bonus, value: 0.1}
  - id: next
    tier: 2
    cost: 2
    prerequisites: [start]
    effect: {kind: loot_luck_bonus, value: 0.2}
""")
        tree = AbilityTree.from_yaml(path)

        assert len(tree) == 2
        assert tree.get("next").prerequisites == ("start",)
        assert tree.get("next").effect == Effect(EffectKind.LOOT_LUCK_BONUS, 0.2)


class TestEffect:
    """Tests for effect category routing."""

    def test_own_category(self):
        effect = Effect(EffectKind.RP_BONUS, 0.05)

        assert effect.applies_to(RewardCategory.RANK_POINTS)
        assert not effect.applies_to(RewardCategory.COINS)

    @pytest.mark.parametrize("kind", [EffectKind.SPRINT_BONUS, EffectKind.ALL_BONUS])
    def test_broad_effects_apply_everywhere(self, kind):
        effect = Effect(kind, 0.15)
        assert all(effect.applies_to(c) for c in RewardCategory)

    def test_non_sprint_effects_apply_nowhere(self):
        effect = Effect(EffectKind.PASSIVE_BONUS, 0.5)
        assert not any(effect.applies_to(c) for c in RewardCategory)

    def test_description(self):
        assert Effect(EffectKind.XP_BONUS, 0.05).description == "+5% XP"


# =============================================================================
# Unlocks
# =============================================================================

class TestUnlock:
    """Tests for the unlock state machine."""

    def test_unlock_deducts_and_inserts(self, engine):
        abilities = UserAbilities(ability_points=3)

        result = engine.unlock(abilities, "xp_1")

        assert result
        assert result == ActionResult.ok()
        assert abilities.ability_points == 2
        assert abilities.is_unlocked("xp_1")

    def test_unknown_ability(self, engine):
        abilities = UserAbilities(ability_points=3)

        result = engine.unlock(abilities, "nope")

        assert not result
        assert result.reason == RejectionReason.UNKNOWN_ABILITY
        assert abilities.ability_points == 3

    def test_already_unlocked(self, engine):
        abilities = UserAbilities(ability_points=3, unlocked_player_abilities={"xp_1"})

        result = engine.unlock(abilities, "xp_1")

        assert result.reason == RejectionReason.ALREADY_UNLOCKED
        assert abilities.ability_points == 3

    def test_prerequisite_not_met(self, engine):
        abilities = UserAbilities(ability_points=10)

        result = engine.unlock(abilities, "xp_2")

        assert result.reason == RejectionReason.PREREQUISITE_NOT_MET
        assert result.message == "prerequisite not met"
        assert abilities.ability_points == 10
        assert not abilities.unlocked_player_abilities

    def test_insufficient_points(self, engine):
        abilities = UserAbilities(ability_points=1, unlocked_player_abilities={"xp_1"})

        result = engine.unlock(abilities, "xp_2")

        assert result.reason == RejectionReason.INSUFFICIENT_POINTS
        assert result.message == "insufficient points"
        assert abilities.ability_points == 1
        assert abilities.unlocked_player_abilities == {"xp_1"}

    def test_all_prerequisites_required(self, engine):
        abilities = UserAbilities(ability_points=10, unlocked_player_abilities={"rp_2", "xp_2"})

        assert engine.unlock(abilities, "sprint_master").reason == RejectionReason.PREREQUISITE_NOT_MET

        abilities.unlocked_player_abilities.add("coin_2")
        assert engine.unlock(abilities, "sprint_master")

    def test_node_states(self, engine):
        abilities = UserAbilities(ability_points=1)

        assert engine.node_state(abilities, "xp_1") == NodeState.UNLOCKABLE
        assert engine.node_state(abilities, "xp_2") == NodeState.LOCKED

        engine.unlock(abilities, "xp_1")
        assert engine.node_state(abilities, "xp_1") == NodeState.UNLOCKED
        # Prerequisite met but no points left
        assert engine.node_state(abilities, "xp_2") == NodeState.LOCKED

    def test_can_unlock_does_not_mutate(self, engine):
        abilities = UserAbilities(ability_points=1)

        assert engine.can_unlock(abilities, "xp_1")
        assert abilities.ability_points == 1
        assert not abilities.unlocked_player_abilities

    def test_unlockable_nodes(self, engine):
        abilities = UserAbilities(ability_points=1)
        ids = {n.id for n in engine.unlockable_nodes(abilities)}

        assert ids == {"xp_1", "rp_1", "coin_1"}

    def test_effect_totals(self, engine):
        abilities = UserAbilities(unlocked_player_abilities={"coin_1", "coin_2", "treasure_hunter"})

        assert engine.bonus_total(abilities, EffectKind.COIN_BONUS) == pytest.approx(0.40)
        assert engine.bonus_total(abilities, EffectKind.XP_BONUS) == 0.0

    def test_unknown_unlocked_id_ignored(self, engine):
        abilities = UserAbilities(unlocked_player_abilities={"xp_1", "retired_node"})

        assert engine.unlocked_effects(abilities) == [Effect(EffectKind.XP_BONUS, 0.05)]


# =============================================================================
# Pet upgrades
# =============================================================================

class TestPetUpgrade:
    """Tests for pet ability level upgrades."""

    def test_upgrade_cost_grows_with_level(self, engine):
        abilities = UserAbilities(pet_points=100)
        costs = []
        for _ in range(4):
            costs.append(engine.pet_upgrade_cost(abilities, "pet_01"))
            assert engine.upgrade_pet(abilities, "pet_01")

        assert costs == [2, 3, 4, 5]
        assert abilities.pet_ability_level("pet_01") == 5
        assert abilities.pet_points == 100 - 14

    def test_max_level(self, engine):
        abilities = UserAbilities(pet_points=100, pet_ability_levels={"pet_01": 5})

        result = engine.upgrade_pet(abilities, "pet_01")

        assert result.reason == RejectionReason.MAX_LEVEL
        assert engine.pet_upgrade_cost(abilities, "pet_01") is None
        assert abilities.pet_points == 100

    def test_insufficient_pet_points(self, engine):
        abilities = UserAbilities(pet_points=1)

        result = engine.upgrade_pet(abilities, "pet_02")

        assert result.reason == RejectionReason.INSUFFICIENT_POINTS
        assert abilities.pet_ability_level("pet_02") == 1
        assert abilities.pet_points == 1


class TestUserAbilities:
    def test_dict_round_trip(self):
        abilities = UserAbilities(
            ability_points=2,
            pet_points=4,
            unlocked_player_abilities={"xp_1", "rp_1"},
            pet_ability_levels={"pet_03": 3},
        )

        data = abilities.to_dict()

        assert data["unlocked_player_abilities"] == ["rp_1", "xp_1"]
        assert UserAbilities.from_dict(data) == abilities
