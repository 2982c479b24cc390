"""Pet type definitions."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from stride.types import RewardCategory, datetime_to_iso, iso_to_datetime, generate_id


class PetTrigger(Enum):
    """When a pet's ability contributes a bonus."""
    SPRINT_SHORTER_THAN = "sprint_shorter_than"
    SPRINT_LONGER_THAN = "sprint_longer_than"
    PASSIVE = "passive"
    PET_GROWTH = "pet_growth"
    CATCH_RATE = "catch_rate"
    NONE = "none"


class PetMood(Enum):
    HAPPY = "happy"
    CONTENT = "content"
    SAD = "sad"


@dataclass(frozen=True)
class PetAbility:
    """
    A pet's unique bonus.

    ``base_value`` is scaled by the pet's ability effectiveness. Sprint
    triggers compare the sprint duration against ``threshold_seconds``
    strictly.
    """
    name: str
    description: str
    base_value: float
    trigger: PetTrigger = PetTrigger.NONE
    category: Optional[RewardCategory] = None
    threshold_seconds: float = 0.0

    def matches_sprint(self, duration_seconds: float) -> bool:
        if self.trigger == PetTrigger.SPRINT_SHORTER_THAN:
            return duration_seconds < self.threshold_seconds
        if self.trigger == PetTrigger.SPRINT_LONGER_THAN:
            return duration_seconds > self.threshold_seconds
        return False


@dataclass(frozen=True)
class PetDefinition:
    id: str
    name: str
    description: str
    ability: PetAbility
    emoji: str = ""


@dataclass
class OwnedPet:
    """A caught companion. ``pet_definition_id`` points into the catalog."""
    pet_definition_id: str
    id: str = field(default_factory=lambda: generate_id("pet"))
    experience: int = 0
    evolution_stage: int = 1
    mood: PetMood = PetMood.HAPPY
    is_equipped: bool = False
    caught_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pet_definition_id": self.pet_definition_id,
            "experience": self.experience,
            "evolution_stage": self.evolution_stage,
            "mood": self.mood.value,
            "is_equipped": self.is_equipped,
            "caught_at": datetime_to_iso(self.caught_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OwnedPet":
        return cls(
            id=data.get("id") or generate_id("pet"),
            pet_definition_id=data["pet_definition_id"],
            experience=int(data.get("experience", 0)),
            evolution_stage=int(data.get("evolution_stage", 1)),
            mood=PetMood(data.get("mood", "happy")),
            is_equipped=bool(data.get("is_equipped", False)),
            caught_at=iso_to_datetime(data.get("caught_at")) or datetime.now(),
        )
