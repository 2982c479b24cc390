"""Tests for the player aggregate and profile manager."""

import sys
from pathlib import Path

# Ensure project root is in sys.path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from datetime import timedelta

import pytest

from stride.abilities.types import RejectionReason
from stride.config.game import GameConfig
from stride.profile import (
    GameRules,
    MemoryBlobStore,
    PlayerAggregate,
    ProfileManager,
    ProfilePersistence,
)
from stride.progression.levels import LevelBand, LevelConfig
from stride.progression.types import CompletedRun
from stride.rewards.types import Rarity, RewardsConfig, SprintResult
from stride.sync.messages import RunSummaryPayload


def _payload(**overrides) -> RunSummaryPayload:
    data = dict(
        duration_seconds=1830,
        distance_meters=5000.0,
        sprints_completed=3,
        sprints_total=4,
        rank_points_earned=60,
        experience_earned=120,
        coins_earned=40,
        pet_caught=None,
        loot_boxes_earned=(Rarity.COMMON, Rarity.RARE),
    )
    data.update(overrides)
    return RunSummaryPayload(**data)


# =============================================================================
# Profile types
# =============================================================================

class TestPlayerProfile:
    def test_level_is_derived(self, player):
        player.profile.experience = 250

        assert player.level == 3
        player.profile.experience = 1500
        assert player.level == 12

    def test_stored_level_ignored_on_load(self, player, rules):
        player.add_experience(250)
        data = player.to_dict()
        data["profile"]["level"] = 99

        restored = PlayerAggregate.from_dict(data, rules)

        assert restored.level == 3
        assert restored.to_dict()["profile"]["level"] == 3

    def test_level_follows_configured_bands(self, rng):
        levels = LevelConfig(bands=[LevelBand(first_level=1, base=0, offset=1, per_level=50)])
        player = PlayerAggregate(GameRules.from_config(GameConfig(levels=levels), rng=rng))
        player.profile.experience = 250

        assert player.level == 6
        assert player.profile.to_dict(player.rules.level_calculator)["level"] == 6

    @pytest.mark.parametrize("streak,bonus", [(0, 0.0), (2, 0.05), (5, 0.10), (9, 0.15), (30, 0.20)])
    def test_streak_bonus(self, rules, streak, bonus):
        assert rules.rewards_config.streak_bonus(streak) == bonus

    def test_rank(self, player):
        player.add_rank_points(3500)

        assert player.rank.id == "gold"


class TestCompletedRun:
    def test_derived_fields(self, now):
        run = CompletedRun(date=now, duration_seconds=1830, distance_meters=5000,
                           sprints_completed=3, sprints_total=4)

        assert run.formatted_duration == "30:30"
        assert run.sprint_success_rate == 0.75

    def test_no_sprints(self, now):
        run = CompletedRun(date=now, duration_seconds=65, distance_meters=100)

        assert run.sprint_success_rate == 0.0
        assert run.formatted_duration == "1:05"


# =============================================================================
# Aggregate
# =============================================================================

class TestProgression:
    """Tests for experience and rank point mutations."""

    def test_level_up_grants_points(self, player):
        levels = player.add_experience(250)

        assert levels == [2, 3]
        assert player.level == 3
        assert player.abilities.ability_points == 2
        assert player.abilities.pet_points == 2

    def test_no_level_up(self, player):
        assert player.add_experience(50) == []
        assert player.abilities.ability_points == 0

    def test_non_positive_amounts_ignored(self, player):
        player.add_experience(-100)
        player.add_rank_points(0)
        player.add_coins(-5)

        assert player.profile.experience == 0
        assert player.profile.rank_points == 0
        assert player.coins == 0

    def test_rank_from_points(self, player):
        player.add_rank_points(1000)

        assert player.rank.id == "silver"


class TestPets:
    """Tests for pet ownership and equipping."""

    def test_first_pet_auto_equipped(self, player):
        pet = player.add_pet("pet_01")

        assert pet.is_equipped
        assert player.equipped_pet is pet
        assert player.profile.equipped_pet_id == "pet_01"

    def test_duplicate_and_unknown_rejected(self, player):
        player.add_pet("pet_01")

        assert player.add_pet("pet_01") is None
        assert player.add_pet("pet_99") is None
        assert len(player.owned_pets) == 1

    def test_equip_unequips_others(self, player):
        player.add_pet("pet_01")
        player.add_pet("pet_02")
        player.add_pet("pet_03")

        assert player.equip_pet("pet_03")
        assert [p.pet_definition_id for p in player.owned_pets if p.is_equipped] == ["pet_03"]
        assert player.profile.equipped_pet_id == "pet_03"

    def test_equip_unknown(self, player):
        result = player.equip_pet("pet_05")

        assert result.reason == RejectionReason.UNKNOWN_PET

    def test_catch_pet_grants_bonus(self, player):
        pet = player.catch_pet("pet_04")

        assert pet is not None
        assert player.coins == 50
        assert player.profile.rank_points == 25
        assert player.profile.experience == 50

    def test_catch_duplicate_grants_nothing(self, player):
        player.catch_pet("pet_04")

        assert player.catch_pet("pet_04") is None
        assert player.coins == 50

    def test_upgrade_pet_ability(self, player):
        player.add_pet("pet_01")
        player.abilities.pet_points = 5

        assert player.upgrade_pet_ability("pet_01")
        assert player.abilities.pet_ability_level("pet_01") == 2
        assert player.upgrade_pet_ability("pet_02").reason == RejectionReason.UNKNOWN_PET


class TestSprints:
    """Tests for record_sprint and reward application."""

    def test_valid_sprint(self, player):
        rewards = player.record_sprint(SprintResult(is_valid=True, duration_seconds=38))

        assert player.profile.total_sprints == 1
        assert player.profile.total_sprints_valid == 1
        assert player.profile.rank_points == rewards.rank_points == 15
        assert player.profile.experience == rewards.experience == 25
        assert player.coins == rewards.coins == 10
        if rewards.loot_box is not None:
            assert player.inventory[rewards.loot_box] == 1

    def test_invalid_sprint(self, player):
        rewards = player.record_sprint(SprintResult(is_valid=False, duration_seconds=12))

        assert rewards.is_empty
        assert player.profile.total_sprints == 1
        assert player.profile.total_sprints_valid == 0
        assert player.profile.experience == 0

    def test_equipped_pet_earns_xp(self, player):
        pet = player.add_pet("pet_03")

        player.record_sprint(SprintResult(is_valid=True, duration_seconds=38))

        assert pet.experience == 12

    def test_unlocked_abilities_boost_rewards(self, player):
        player.abilities.ability_points = 1
        assert player.unlock_ability("rp_1")

        context = player.reward_context()
        rewards = player.record_sprint(SprintResult(is_valid=True, duration_seconds=38))

        assert len(context.ability_effects) == 1
        assert rewards.rank_points == 16
        assert rewards.bonuses["rank_points"] == pytest.approx(0.05)

    def test_apply_passive(self, player):
        rp, xp = player.apply_passive(5)

        assert player.profile.rank_points == rp
        assert player.profile.experience == xp
        assert 5 <= rp <= 15


class TestCompleteRun:
    """Tests for applying a device run summary."""

    def test_applies_payload(self, player, now):
        run = player.complete_run(_payload(pet_caught="pet_02"), now)

        assert player.run_history == [run]
        assert player.profile.total_runs == 1
        assert player.profile.total_distance_meters == 5000.0
        assert player.profile.rank_points == 60
        assert player.profile.experience == 120
        assert player.coins == 40
        assert player.inventory == {Rarity.COMMON: 1, Rarity.RARE: 1}
        assert player.owns_pet("pet_02")
        assert player.profile.current_streak == 1

    @pytest.mark.parametrize("gap_days,expected", [(0, 3), (1, 4), (2, 1), (10, 1)])
    def test_streak_rules(self, player, now, gap_days, expected):
        player.profile.current_streak = 3
        player.profile.longest_streak = 3
        player.profile.last_run_date = now - timedelta(days=gap_days)

        player.complete_run(_payload(), now)

        assert player.profile.current_streak == expected
        assert player.profile.longest_streak == max(3, expected)
        assert player.profile.last_run_date == now

    def test_history_capped(self, player, now):
        for i in range(55):
            player.complete_run(_payload(duration_seconds=i), now + timedelta(days=i))

        assert len(player.run_history) == 50
        assert player.run_history[0].duration_seconds == 5
        assert player.run_history[-1].duration_seconds == 54

    def test_zero_history_cap_keeps_nothing(self, player, rng, now):
        for i in range(3):
            player.complete_run(_payload(duration_seconds=i), now + timedelta(days=i))
        rules = GameRules.from_config(GameConfig(rewards=RewardsConfig(run_history_cap=0)), rng=rng)
        forgetful = PlayerAggregate(rules)

        for i in range(3):
            forgetful.complete_run(_payload(duration_seconds=i), now + timedelta(days=i))

        assert forgetful.run_history == []
        assert forgetful.profile.total_runs == 3
        assert PlayerAggregate.from_dict(player.to_dict(), rules).run_history == []


class TestSnapshots:
    """Tests for aggregate snapshots."""

    def test_profile_snapshot(self, player):
        player.add_pet("pet_01")
        player.add_experience(150)
        player.add_coins(30)

        snapshot = player.profile_snapshot()

        assert snapshot.to_dict() == {
            "equippedPetId": "pet_01",
            "level": 2,
            "experience": 150,
            "coins": 30,
            "rankPoints": 0,
        }

    def test_round_trip(self, player, rules, now):
        player.add_experience(1200)
        player.abilities.ability_points = 2
        player.unlock_ability("xp_1")
        player.add_pet("pet_01")
        player.complete_run(_payload(), now)
        player.claim_daily_reward(now)
        player.tasks.create_task("Easy run")

        restored = PlayerAggregate.from_dict(player.to_dict(), rules)

        assert restored.to_dict() == player.to_dict()
        assert restored.abilities.ability_points == player.abilities.ability_points
        assert restored.abilities.unlocked_player_abilities == {"xp_1"}
        assert restored.profile.rank_points == player.profile.rank_points
        assert restored.run_history == player.run_history

    def test_reset(self, player):
        player.add_coins(100)
        player.add_pet("pet_01")

        player.reset()

        assert player.coins == 0
        assert player.owned_pets == []


# =============================================================================
# Manager
# =============================================================================

class TestProfileManager:
    """Tests for the persisting facade."""

    def test_fresh_player_when_nothing_stored(self, memory_persistence):
        manager = ProfileManager(memory_persistence)

        assert manager.player.profile.experience == 0

    def test_saves_after_mutation(self, memory_persistence):
        manager = ProfileManager(memory_persistence)
        manager.catch_pet("pet_01")

        reloaded = ProfileManager(memory_persistence)

        assert reloaded.player.owns_pet("pet_01")
        assert reloaded.player.coins == 50

    def test_rejected_operation_not_saved(self, memory_persistence):
        manager = ProfileManager(memory_persistence)

        assert not manager.unlock_ability("xp_1")
        assert memory_persistence.export_data() is None

    def test_subscribers_notified(self, memory_persistence, now):
        manager = ProfileManager(memory_persistence)
        events = []
        unsubscribe = manager.subscribe(lambda op, player: events.append(op))

        manager.claim_daily_reward(now)
        manager.claim_daily_reward(now)
        unsubscribe()
        manager.complete_run(_payload(), now)

        assert events == ["claim_daily_reward"]

    def test_corrupt_blob_yields_fresh_player(self, rules):
        store = MemoryBlobStore()
        store.set("stride.player", b"{not json")
        manager = ProfileManager(ProfilePersistence(store, rules_factory=lambda: rules))

        assert manager.player.coins == 0
        assert manager.player.owned_pets == []

    def test_reset_clears_store(self, memory_persistence):
        manager = ProfileManager(memory_persistence)
        manager.catch_pet("pet_01")

        manager.reset()

        assert ProfileManager(memory_persistence).player.owned_pets == []

    def test_tasks(self, memory_persistence, now):
        manager = ProfileManager(memory_persistence)
        task = manager.create_task("Stretch")

        assert manager.complete_task(task.id[:8], now)
        assert ProfileManager(memory_persistence).player.tasks.get(task.id).is_completed
