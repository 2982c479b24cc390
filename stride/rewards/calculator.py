"""
Rewards calculator - sprint, passive and pet-catch rewards.

All reward math lives here. The calculator never touches player state:
it reads a ProfileContext built by the profile aggregate and returns
the amounts to grant.

Usage:
    import random
    from stride.rewards import RewardsCalculator, ProfileContext, SprintResult

    calc = RewardsCalculator(rng=random.Random(42))
    rewards = calc.compute_sprint_rewards(
        SprintResult(is_valid=True, duration_seconds=32),
        ProfileContext(streak_days=3),
    )
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from stride.abilities.types import Effect, EffectKind
from stride.pets.catalog import PetConfig
from stride.pets.types import PetDefinition, PetTrigger
from stride.progression.ranks import PerkType, Rank
from stride.rewards.loot import roll_loot_box
from stride.rewards.types import RewardsConfig, SprintResult, SprintRewards
from stride.types import RewardCategory


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileContext:
    """Read-only view of the player state that reward math depends on."""
    ability_effects: tuple[Effect, ...] = ()
    equipped_pet: Optional[PetDefinition] = None
    pet_ability_level: int = 1
    streak_days: int = 0

    def effect_total(self, kind: EffectKind) -> float:
        return sum(e.value for e in self.ability_effects if e.kind == kind)

    def category_bonus(self, category: RewardCategory) -> float:
        return sum(e.value for e in self.ability_effects if e.applies_to(category))


class RewardsCalculator:
    """Computes reward amounts from a ProfileContext."""

    def __init__(
        self,
        config: Optional[RewardsConfig] = None,
        pet_config: Optional[PetConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or RewardsConfig()
        self.pet_config = pet_config or PetConfig()
        self.rng = rng or random.Random()

    def _pet_bonus(self, context: ProfileContext, trigger: PetTrigger) -> float:
        pet = context.equipped_pet
        if pet is None or pet.ability.trigger != trigger:
            return 0.0
        return pet.ability.base_value * self.pet_config.effectiveness(context.pet_ability_level)

    def pet_sprint_bonus(
        self,
        context: ProfileContext,
        duration_seconds: float,
        category: RewardCategory,
    ) -> float:
        """Equipped pet's sprint bonus for one category, 0.0 when not triggered."""
        pet = context.equipped_pet
        if pet is None or pet.ability.category != category:
            return 0.0
        if not pet.ability.matches_sprint(duration_seconds):
            return 0.0
        return pet.ability.base_value * self.pet_config.effectiveness(context.pet_ability_level)

    # -------------------------------------------------------------------------
    # Sprint rewards
    # -------------------------------------------------------------------------

    def compute_sprint_rewards(
        self,
        result: SprintResult,
        context: ProfileContext,
    ) -> SprintRewards:
        """
        Rewards for one sprint.

        An invalid sprint earns nothing and does not roll for loot.

        Per category:
            bonus = ability effects + triggered pet bonus + streak bonus
            amount = round(base * (1 + bonus))
        """
        if not result.is_valid:
            return SprintRewards.empty()

        streak = self.config.streak_bonus(context.streak_days)
        bases = {
            RewardCategory.RANK_POINTS: self.config.sprint_rank_points,
            RewardCategory.EXPERIENCE: self.config.sprint_experience,
            RewardCategory.COINS: self.config.sprint_coins,
        }

        amounts = {}
        bonuses = {}
        for category, base in bases.items():
            bonus = (
                context.category_bonus(category)
                + self.pet_sprint_bonus(context, result.duration_seconds, category)
                + streak
            )
            bonuses[category.value] = bonus
            amounts[category] = max(0, int(round(base * (1.0 + bonus))))

        luck = context.effect_total(EffectKind.LOOT_LUCK_BONUS)
        loot_box = roll_loot_box(self.rng, self.config, luck)

        rewards = SprintRewards(
            rank_points=amounts[RewardCategory.RANK_POINTS],
            experience=amounts[RewardCategory.EXPERIENCE],
            coins=amounts[RewardCategory.COINS],
            loot_box=loot_box,
            bonuses=bonuses,
        )
        logger.debug(
            f"Sprint rewards ({result.duration_seconds:.0f}s): "
            f"{rewards.rank_points} RP, {rewards.experience} XP, {rewards.coins} coins"
        )
        return rewards

    # -------------------------------------------------------------------------
    # Passive rewards
    # -------------------------------------------------------------------------

    def compute_passive_rewards(
        self,
        minutes: int,
        context: ProfileContext,
    ) -> tuple[int, int]:
        """
        Rewards for time spent running outside sprints.

        Each whole minute draws base RP and XP from the configured inclusive
        ranges. The passive effect total multiplies both; the pet's passive
        bonus multiplies XP only. Each minute is truncated before summing.

        Returns:
            (rank_points, experience)
        """
        if minutes <= 0:
            return 0, 0

        passive = context.effect_total(EffectKind.PASSIVE_BONUS)
        pet_passive = self._pet_bonus(context, PetTrigger.PASSIVE)
        cfg = self.config

        total_rp = 0
        total_xp = 0
        for _ in range(int(minutes)):
            rp = self.rng.randint(cfg.passive_rank_points_min, cfg.passive_rank_points_max)
            xp = self.rng.randint(cfg.passive_experience_min, cfg.passive_experience_max)
            total_rp += int(rp * (1.0 + passive))
            total_xp += int(xp * (1.0 + passive + pet_passive))

        return total_rp, total_xp

    # -------------------------------------------------------------------------
    # Pets
    # -------------------------------------------------------------------------

    def pet_catch_rewards(self) -> tuple[int, int, int]:
        """(coins, rank_points, experience) granted for catching a pet."""
        cfg = self.config
        return cfg.pet_catch_coins, cfg.pet_catch_rank_points, cfg.pet_catch_experience

    def pet_xp_for_sprint(self, context: ProfileContext) -> int:
        """XP the equipped pet earns for a completed sprint."""
        bonus = (
            context.effect_total(EffectKind.PET_XP_BONUS)
            + self._pet_bonus(context, PetTrigger.PET_GROWTH)
        )
        return int(round(self.pet_config.xp_per_completed_sprint * (1.0 + bonus)))

    def catch_rate_bonus(self, context: ProfileContext, rank: Optional[Rank] = None) -> float:
        """Total catch-rate bonus from abilities, rank perks and the equipped pet."""
        bonus = context.effect_total(EffectKind.CATCH_RATE_BONUS)
        if rank is not None:
            bonus += rank.perk_total(PerkType.CATCH_RATE)
        bonus += self._pet_bonus(context, PetTrigger.CATCH_RATE)
        return bonus
