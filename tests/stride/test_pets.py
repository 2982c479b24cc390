"""Tests for pet definitions and the catalog."""

import sys
from pathlib import Path

# Ensure project root is in sys.path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from datetime import datetime

import pytest

from stride.pets import OwnedPet, PetCatalog, PetConfig, PetMood, PetTrigger


class TestPetAbility:
    def test_short_sprint_threshold_is_strict(self):
        ability = PetCatalog().get("pet_01").ability

        assert ability.matches_sprint(34.9)
        assert not ability.matches_sprint(35)

    def test_long_sprint_threshold_is_strict(self):
        ability = PetCatalog().get("pet_09").ability

        assert ability.matches_sprint(40.5)
        assert not ability.matches_sprint(40)

    def test_non_sprint_trigger_never_matches(self):
        assert not PetCatalog().get("pet_02").ability.matches_sprint(1)


class TestPetConfig:
    @pytest.mark.parametrize("level,expected", [(0, 1.0), (1, 1.0), (2, 1.25), (5, 2.0)])
    def test_effectiveness(self, level, expected):
        assert PetConfig().effectiveness(level) == expected


class TestPetCatalog:
    """Tests for catalog lookups."""

    def test_default_catalog(self):
        catalog = PetCatalog()

        assert len(catalog) == 10
        assert "pet_10" in catalog
        assert catalog.get("pet_11") is None
        assert catalog.get("pet_07").ability.trigger == PetTrigger.CATCH_RATE

    def test_by_name(self):
        assert PetCatalog().by_name("emberhart").id == "pet_09"
        assert PetCatalog().by_name("nobody") is None

    def test_unowned(self):
        unowned = PetCatalog().unowned(["pet_01", "pet_02"])

        assert len(unowned) == 8
        assert all(p.id not in ("pet_01", "pet_02") for p in unowned)

    def test_from_yaml(self, temp_dir):
        path = temp_dir / "catalog.yaml"
        path.write_text("""
pets:
  - id: pebble
    ability:
      name: Steady
      base_value: 0.1
      trigger: passive
      category: experience
""")

        catalog = PetCatalog.from_yaml(path)

        assert catalog.get("pebble").name == "pebble"
        assert catalog.get("pebble").ability.trigger == PetTrigger.PASSIVE


class TestOwnedPet:
    def test_dict_round_trip(self):
        pet = OwnedPet(
            pet_definition_id="pet_03",
            experience=40,
            mood=PetMood.CONTENT,
            is_equipped=True,
            caught_at=datetime(2026, 10, 1, 6, 45),
        )

        assert OwnedPet.from_dict(pet.to_dict()) == pet

    def test_missing_definition_id(self):
        with pytest.raises(KeyError):
            OwnedPet.from_dict({"id": "pet_x"})
