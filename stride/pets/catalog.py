"""Pet catalog and pet tuning."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from stride.config.loader import load_yaml
from stride.types import RewardCategory
from stride.pets.types import PetAbility, PetDefinition, PetTrigger


logger = logging.getLogger(__name__)


@dataclass
class PetConfig:
    """Pet tuning values."""
    xp_per_completed_sprint: int = 10
    effectiveness_per_level: float = 0.25
    max_ability_level: int = 5

    def effectiveness(self, ability_level: int) -> float:
        """Ability effectiveness multiplier for a pet ability level (1 -> 1.0)."""
        return 1.0 + self.effectiveness_per_level * (max(1, ability_level) - 1)


DEFAULT_PETS: tuple[PetDefinition, ...] = (
    PetDefinition(
        "pet_01", "Astravyrn", "A celestial dragon that burns brightest in short bursts",
        PetAbility("Ignite", "+15% RP on sprints under 35 seconds", 0.15,
                   PetTrigger.SPRINT_SHORTER_THAN, RewardCategory.RANK_POINTS, 35),
        emoji="🐉",
    ),
    PetDefinition(
        "pet_02", "Solarok", "An aquatic titan that rewards steady effort",
        PetAbility("Flow", "+10% passive XP during runs", 0.10,
                   PetTrigger.PASSIVE, RewardCategory.EXPERIENCE),
        emoji="🌊",
    ),
    PetDefinition(
        "pet_03", "Azyrith", "A verdant spirit that helps all pets grow faster",
        PetAbility("Growth", "+20% evolution XP gains", 0.20, PetTrigger.PET_GROWTH),
        emoji="🌿",
    ),
    PetDefinition(
        "pet_04", "Cosmoose", "A celestial moose that attracts more sprint opportunities",
        PetAbility("Tailwind", "+10% encounter chance", 0.10),
        emoji="🦌",
    ),
    PetDefinition(
        "pet_05", "Nebulyth", "An abyssal creature that stays content longer",
        PetAbility("Fortitude", "-15% mood decay when inactive", 0.15),
        emoji="🌑",
    ),
    PetDefinition(
        "pet_06", "Lumirith", "A radiant being that amplifies rewards",
        PetAbility("Energize", "+25% coins from loot boxes", 0.25),
        emoji="✨",
    ),
    PetDefinition(
        "pet_07", "Flitfoal", "An abyssal creature that helps find others",
        PetAbility("Stealth", "+5% catch rate for new pets", 0.05, PetTrigger.CATCH_RATE),
        emoji="🦄",
    ),
    PetDefinition(
        "pet_08", "Kryonith", "A verdant beast that maximizes care rewards",
        PetAbility("Preserve", "Feeding gives +50% XP", 0.50),
        emoji="🦎",
    ),
    PetDefinition(
        "pet_09", "Emberhart", "An infernal stag that rewards sustained effort",
        PetAbility("Intensity", "+30% RP on sprints over 40 seconds", 0.30,
                   PetTrigger.SPRINT_LONGER_THAN, RewardCategory.RANK_POINTS, 40),
        emoji="🔥",
    ),
    PetDefinition(
        "pet_10", "Aurivern", "A radiant phoenix that enhances everything",
        PetAbility("Blessing", "+5% to ALL other pet bonuses", 0.05),
        emoji="🦅",
    ),
)


def load_pet_definition(data: dict) -> PetDefinition:
    """Load a pet definition from dict."""
    ability = data.get("ability", {})
    category = ability.get("category")
    return PetDefinition(
        id=data["id"],
        name=data.get("name", data["id"]),
        description=data.get("description", ""),
        ability=PetAbility(
            name=ability.get("name", ""),
            description=ability.get("description", ""),
            base_value=float(ability.get("base_value", 0.0)),
            trigger=PetTrigger(ability.get("trigger", "none")),
            category=RewardCategory(category) if category else None,
            threshold_seconds=float(ability.get("threshold_seconds", 0.0)),
        ),
        emoji=data.get("emoji", ""),
    )


class PetCatalog:
    """Lookup of pet definitions by id or name."""

    def __init__(self, pets: Optional[Iterable[PetDefinition]] = None):
        self._pets: dict[str, PetDefinition] = {
            p.id: p for p in (pets if pets is not None else DEFAULT_PETS)
        }

    @classmethod
    def from_yaml(cls, path: Path) -> "PetCatalog":
        data = load_yaml(path)
        pets = [load_pet_definition(p) for p in data.get("pets", [])]
        logger.debug(f"Loaded {len(pets)} pet definitions from {path}")
        return cls(pets)

    def __contains__(self, pet_id: str) -> bool:
        return pet_id in self._pets

    def __len__(self) -> int:
        return len(self._pets)

    def get(self, pet_id: str) -> Optional[PetDefinition]:
        return self._pets.get(pet_id)

    def by_name(self, name: str) -> Optional[PetDefinition]:
        lowered = name.lower()
        for pet in self._pets.values():
            if pet.name.lower() == lowered:
                return pet
        return None

    @property
    def pets(self) -> list[PetDefinition]:
        return list(self._pets.values())

    def unowned(self, owned_ids: Iterable[str]) -> list[PetDefinition]:
        owned = set(owned_ids)
        return [p for p in self._pets.values() if p.id not in owned]
