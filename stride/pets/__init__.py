"""Companion pets - definitions, catalog and owned pet state."""

from stride.pets.types import (
    PetTrigger,
    PetMood,
    PetAbility,
    PetDefinition,
    OwnedPet,
)
from stride.pets.catalog import (
    PetConfig,
    PetCatalog,
    DEFAULT_PETS,
    load_pet_definition,
)

__all__ = [
    "PetTrigger",
    "PetMood",
    "PetAbility",
    "PetDefinition",
    "OwnedPet",
    "PetConfig",
    "PetCatalog",
    "DEFAULT_PETS",
    "load_pet_definition",
]
