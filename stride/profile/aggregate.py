"""
Player aggregate - the single point of mutation for player state.

Every change to the profile, pets, abilities, currencies, run history,
daily reward state or tasks goes through a PlayerAggregate method. The
aggregate delegates the math to its collaborators (GameRules) and
applies the resulting deltas.

Usage:
    import random
    from stride.profile import GameRules, PlayerAggregate

    player = PlayerAggregate(GameRules.from_config(rng=random.Random(7)))
    rewards = player.record_sprint(SprintResult(is_valid=True, duration_seconds=30))
    player.unlock_ability("xp_1")
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Optional

from stride.abilities.engine import AbilityEngine
from stride.abilities.types import ActionResult, RejectionReason, UserAbilities
from stride.config.game import GameConfig
from stride.daily.tracker import DailyReward, DailyRewardState, DailyRewardTracker
from stride.pets.catalog import PetCatalog, PetConfig
from stride.pets.types import OwnedPet
from stride.progression.levels import LevelCalculator
from stride.progression.ranks import Rank, RankLadder
from stride.progression.types import CompletedRun, PlayerProfile
from stride.rewards.calculator import ProfileContext, RewardsCalculator
from stride.rewards.types import Rarity, RewardsConfig, SprintResult, SprintRewards
from stride.sync.messages import ProfileSnapshot, RunSummaryPayload
from stride.tasks.board import TaskBoard
from stride.types import calendar_day


logger = logging.getLogger(__name__)


SNAPSHOT_VERSION = 1


@dataclass
class GameRules:
    """Collaborators the aggregate delegates to."""
    level_calculator: LevelCalculator = field(default_factory=LevelCalculator)
    rank_ladder: RankLadder = field(default_factory=RankLadder)
    ability_engine: AbilityEngine = field(default_factory=AbilityEngine)
    rewards_calculator: RewardsCalculator = field(default_factory=RewardsCalculator)
    pet_catalog: PetCatalog = field(default_factory=PetCatalog)
    daily_tracker: DailyRewardTracker = field(default_factory=DailyRewardTracker)

    @property
    def rewards_config(self) -> RewardsConfig:
        return self.rewards_calculator.config

    @property
    def pet_config(self) -> PetConfig:
        return self.rewards_calculator.pet_config

    @classmethod
    def from_config(
        cls,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        tz: Optional[tzinfo] = None,
    ) -> "GameRules":
        config = config or GameConfig()
        return cls(
            level_calculator=LevelCalculator(config.levels),
            rank_ladder=config.ranks,
            ability_engine=AbilityEngine(config.ability_tree, config.pet.max_ability_level),
            rewards_calculator=RewardsCalculator(config.rewards, config.pet, rng),
            pet_catalog=config.pets,
            daily_tracker=DailyRewardTracker(tz),
        )


@dataclass(frozen=True)
class ClaimResult:
    """Outcome of a daily reward claim."""
    success: bool
    reason: Optional[RejectionReason] = None
    day: int = 0
    reward: Optional[DailyReward] = None

    def __bool__(self) -> bool:
        return self.success

    @property
    def message(self) -> Optional[str]:
        return self.reason.message if self.reason else None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "reason": self.reason.value if self.reason else None,
            "day": self.day,
            "reward": self.reward.to_dict() if self.reward else None,
        }


class PlayerAggregate:
    """All mutable player state plus the operations that change it."""

    def __init__(self, rules: Optional[GameRules] = None):
        self.rules = rules or GameRules()
        self.reset()

    def reset(self):
        """Discard all state and start a fresh profile."""
        self.profile = PlayerProfile()
        self.owned_pets: list[OwnedPet] = []
        self.abilities = UserAbilities()
        self.inventory: dict[Rarity, int] = {}
        self.coins: int = 0
        self.gems: int = 0
        self.run_history: list[CompletedRun] = []
        self.daily_reward = DailyRewardState()
        self.tasks = TaskBoard()

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def level(self) -> int:
        return self.rules.level_calculator.level_for_experience(self.profile.experience)

    @property
    def rank(self) -> Rank:
        return self.rules.rank_ladder.rank_for_points(self.profile.rank_points)

    def rank_progress(self) -> float:
        return self.rules.rank_ladder.progress_to_next(self.profile.rank_points, self.rank)

    def level_progress(self) -> float:
        return self.rules.level_calculator.level_progress(self.profile.experience)

    # -------------------------------------------------------------------------
    # Currencies and progression
    # -------------------------------------------------------------------------

    def add_rank_points(self, amount: int):
        if amount <= 0:
            return
        old_rank = self.rank
        self.profile.rank_points += amount
        new_rank = self.rank
        if new_rank.tier > old_rank.tier:
            logger.info(f"Rank up! {old_rank.name} -> {new_rank.name}")

    def add_experience(self, amount: int) -> list[int]:
        """
        Add experience and grant points for every level gained.

        Returns:
            The levels reached, in order (empty when no level up)
        """
        if amount <= 0:
            return []
        old_xp = self.profile.experience
        self.profile.experience += amount
        levels = self.rules.level_calculator.levels_gained(old_xp, self.profile.experience)
        if levels:
            cfg = self.rules.rewards_config
            self.abilities.ability_points += cfg.ability_points_per_level * len(levels)
            self.abilities.pet_points += cfg.pet_points_per_level * len(levels)
            for lvl in levels:
                logger.info(f"LEVEL UP! Now level {lvl}")
        return levels

    def add_coins(self, amount: int):
        if amount > 0:
            self.coins += amount

    def add_gems(self, amount: int):
        if amount > 0:
            self.gems += amount

    def add_loot_box(self, rarity: Rarity):
        self.inventory[rarity] = self.inventory.get(rarity, 0) + 1

    # -------------------------------------------------------------------------
    # Pets
    # -------------------------------------------------------------------------

    def get_pet(self, pet_id: str) -> Optional[OwnedPet]:
        """Owned pet by instance id or definition id."""
        for pet in self.owned_pets:
            if pet.id == pet_id or pet.pet_definition_id == pet_id:
                return pet
        return None

    def owns_pet(self, definition_id: str) -> bool:
        return any(p.pet_definition_id == definition_id for p in self.owned_pets)

    @property
    def equipped_pet(self) -> Optional[OwnedPet]:
        for pet in self.owned_pets:
            if pet.is_equipped:
                return pet
        return None

    def equip_pet(self, pet_id: str) -> ActionResult:
        """Equip one owned pet, unequipping every other."""
        target = self.get_pet(pet_id)
        if target is None:
            return ActionResult.rejected(RejectionReason.UNKNOWN_PET)
        for pet in self.owned_pets:
            pet.is_equipped = pet is target
        self.profile.equipped_pet_id = target.pet_definition_id
        logger.info(f"Equipped pet {target.pet_definition_id}")
        return ActionResult.ok()

    def add_pet(self, definition_id: str, now: Optional[datetime] = None) -> Optional[OwnedPet]:
        """
        Add a caught pet. The first pet is equipped automatically.

        Returns:
            The new OwnedPet, or None for an unknown or already owned definition
        """
        if definition_id not in self.rules.pet_catalog:
            logger.warning(f"Ignoring unknown pet '{definition_id}'")
            return None
        if self.owns_pet(definition_id):
            logger.debug(f"Pet '{definition_id}' already owned")
            return None

        pet = OwnedPet(pet_definition_id=definition_id, caught_at=now or datetime.now())
        self.owned_pets.append(pet)
        logger.info(f"Caught pet {definition_id}")
        if self.equipped_pet is None:
            self.equip_pet(pet.id)
        return pet

    def add_pet_experience(self, pet_id: str, amount: int) -> bool:
        pet = self.get_pet(pet_id)
        if pet is None or amount <= 0:
            return False
        pet.experience += amount
        return True

    # -------------------------------------------------------------------------
    # Rewards
    # -------------------------------------------------------------------------

    def reward_context(self) -> ProfileContext:
        """Snapshot of the state reward math reads."""
        engine = self.rules.ability_engine
        equipped = self.equipped_pet
        definition = None
        pet_level = 1
        if equipped is not None:
            definition = self.rules.pet_catalog.get(equipped.pet_definition_id)
            pet_level = self.abilities.pet_ability_level(equipped.pet_definition_id)
        return ProfileContext(
            ability_effects=tuple(engine.unlocked_effects(self.abilities)),
            equipped_pet=definition,
            pet_ability_level=pet_level,
            streak_days=self.profile.current_streak,
        )

    def apply_rewards(self, rewards: SprintRewards):
        """Grant a sprint's rewards, including pet XP for the equipped pet."""
        if rewards.is_empty:
            return
        self.add_rank_points(rewards.rank_points)
        self.add_experience(rewards.experience)
        self.add_coins(rewards.coins)
        if rewards.loot_box is not None:
            self.add_loot_box(rewards.loot_box)

        equipped = self.equipped_pet
        if equipped is not None:
            pet_xp = self.rules.rewards_calculator.pet_xp_for_sprint(self.reward_context())
            self.add_pet_experience(equipped.id, pet_xp)

    def record_sprint(self, result: SprintResult) -> SprintRewards:
        """Count a sprint, then compute and grant its rewards."""
        self.profile.total_sprints += 1
        if not result.is_valid:
            return SprintRewards.empty()

        self.profile.total_sprints_valid += 1
        rewards = self.rules.rewards_calculator.compute_sprint_rewards(
            result, self.reward_context()
        )
        self.apply_rewards(rewards)
        return rewards

    def apply_passive(self, minutes: int) -> tuple[int, int]:
        rp, xp = self.rules.rewards_calculator.compute_passive_rewards(
            minutes, self.reward_context()
        )
        self.add_rank_points(rp)
        self.add_experience(xp)
        return rp, xp

    def catch_pet(self, definition_id: str, now: Optional[datetime] = None) -> Optional[OwnedPet]:
        """Add a caught pet and grant the catch bonus. Nothing is granted for a duplicate."""
        pet = self.add_pet(definition_id, now)
        if pet is None:
            return None
        coins, rp, xp = self.rules.rewards_calculator.pet_catch_rewards()
        self.add_coins(coins)
        self.add_rank_points(rp)
        self.add_experience(xp)
        return pet

    def catch_rate_bonus(self) -> float:
        return self.rules.rewards_calculator.catch_rate_bonus(self.reward_context(), self.rank)

    # -------------------------------------------------------------------------
    # Runs
    # -------------------------------------------------------------------------

    def _update_streak(self, now: datetime):
        profile = self.profile
        tz = self.rules.daily_tracker.tz
        today = calendar_day(now, tz)
        if profile.last_run_date is None:
            profile.current_streak = 1
        else:
            gap = (today - calendar_day(profile.last_run_date, tz)).days
            if gap == 0:
                profile.current_streak = max(profile.current_streak, 1)
            elif gap == 1:
                profile.current_streak += 1
            else:
                profile.current_streak = 1
        profile.longest_streak = max(profile.longest_streak, profile.current_streak)
        profile.last_run_date = now

    def complete_run(self, payload: RunSummaryPayload, now: Optional[datetime] = None) -> CompletedRun:
        """
        Apply a finished run reported by the device.

        The payload's earnings were computed on the device and are granted
        as-is. A caught pet is added without the catch bonus.
        """
        now = now or datetime.now()
        run = CompletedRun(
            date=now,
            duration_seconds=payload.duration_seconds,
            distance_meters=payload.distance_meters,
            sprints_completed=payload.sprints_completed,
            sprints_total=payload.sprints_total,
            rank_points_earned=payload.rank_points_earned,
            experience_earned=payload.experience_earned,
            coins_earned=payload.coins_earned,
            pet_caught=payload.pet_caught,
            loot_boxes_earned=payload.loot_boxes_earned,
        )

        self.run_history.append(run)
        cap = self.rules.rewards_config.run_history_cap
        if len(self.run_history) > cap:
            self.run_history = self.run_history[-cap:] if cap > 0 else []

        profile = self.profile
        profile.total_runs += 1
        profile.total_sprints += payload.sprints_total
        profile.total_sprints_valid += payload.sprints_completed
        profile.total_distance_meters += payload.distance_meters
        profile.total_duration_seconds += payload.duration_seconds
        self._update_streak(now)

        self.add_rank_points(payload.rank_points_earned)
        self.add_experience(payload.experience_earned)
        self.add_coins(payload.coins_earned)
        for rarity in payload.loot_boxes_earned:
            self.add_loot_box(rarity)
        if payload.pet_caught:
            self.add_pet(payload.pet_caught, now)

        logger.info(
            f"Run applied: {run.formatted_duration}, "
            f"{payload.sprints_completed}/{payload.sprints_total} sprints, "
            f"streak {profile.current_streak}"
        )
        return run

    # -------------------------------------------------------------------------
    # Abilities
    # -------------------------------------------------------------------------

    def unlock_ability(self, node_id: str) -> ActionResult:
        return self.rules.ability_engine.unlock(self.abilities, node_id)

    def upgrade_pet_ability(self, pet_id: str) -> ActionResult:
        """Upgrade an owned pet's ability level; pet_id may be instance or definition id."""
        pet = self.get_pet(pet_id)
        if pet is None:
            return ActionResult.rejected(RejectionReason.UNKNOWN_PET)
        return self.rules.ability_engine.upgrade_pet(self.abilities, pet.pet_definition_id)

    # -------------------------------------------------------------------------
    # Daily rewards
    # -------------------------------------------------------------------------

    def claim_daily_reward(self, now: Optional[datetime] = None) -> ClaimResult:
        now = now or datetime.now()
        tracker = self.rules.daily_tracker
        if not tracker.can_claim_today(self.daily_reward, now):
            return ClaimResult(success=False, reason=RejectionReason.ALREADY_CLAIMED)

        preview = tracker.preview_claim(self.daily_reward, now)
        self.daily_reward = tracker.claimed_state(self.daily_reward, now)
        self.add_coins(preview.reward.coins)
        self.add_gems(preview.reward.gems)
        logger.info(
            f"Claimed daily reward day {preview.day}: "
            f"{preview.reward.coins} coins, {preview.reward.gems} gems"
        )
        return ClaimResult(success=True, day=preview.day, reward=preview.reward)

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def complete_task(self, task_id: str, now: Optional[datetime] = None) -> bool:
        task = self.tasks.get(task_id) or self.tasks.find_by_prefix(task_id)
        if task is None or task.is_completed:
            return False
        self.tasks.complete_task(task.id, now or datetime.now())
        return True

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def profile_snapshot(self) -> ProfileSnapshot:
        """Reduced view sent to the device."""
        return ProfileSnapshot(
            equipped_pet_id=self.profile.equipped_pet_id,
            level=self.level,
            experience=self.profile.experience,
            coins=self.coins,
            rank_points=self.profile.rank_points,
        )

    def to_dict(self) -> dict:
        return {
            "version": SNAPSHOT_VERSION,
            "profile": self.profile.to_dict(self.rules.level_calculator),
            "owned_pets": [p.to_dict() for p in self.owned_pets],
            "abilities": self.abilities.to_dict(),
            "inventory": {r.value: n for r, n in self.inventory.items() if n > 0},
            "coins": self.coins,
            "gems": self.gems,
            "run_history": [r.to_dict() for r in self.run_history],
            "daily_reward": self.daily_reward.to_dict(),
            "tasks": self.tasks.to_list(),
        }

    @classmethod
    def from_dict(cls, data: dict, rules: Optional[GameRules] = None) -> "PlayerAggregate":
        """
        Rebuild an aggregate from a snapshot.

        Raises:
            KeyError, ValueError, TypeError, OverflowError: On a malformed snapshot
        """
        if not isinstance(data, dict):
            raise TypeError(f"Snapshot must be a dict, got {type(data).__name__}")

        player = cls(rules)
        player.profile = PlayerProfile.from_dict(data.get("profile", {}))
        player.owned_pets = [OwnedPet.from_dict(p) for p in data.get("owned_pets", [])]
        player.abilities = UserAbilities.from_dict(data.get("abilities", {}))

        for key, count in data.get("inventory", {}).items():
            rarity = Rarity.parse(key)
            if rarity is None:
                logger.debug(f"Dropping unknown inventory rarity {key!r}")
                continue
            player.inventory[rarity] = int(count)

        player.coins = int(data.get("coins", 0))
        player.gems = int(data.get("gems", 0))

        cap = player.rules.rewards_config.run_history_cap
        history = [CompletedRun.from_dict(r) for r in data.get("run_history", [])]
        player.run_history = history[-cap:] if cap > 0 else []

        player.daily_reward = DailyRewardState.from_dict(data.get("daily_reward", {}))
        player.tasks = TaskBoard.from_list(data.get("tasks", []))

        # At most one equipped pet
        equipped = [p for p in player.owned_pets if p.is_equipped]
        for extra in equipped[1:]:
            extra.is_equipped = False
        return player
