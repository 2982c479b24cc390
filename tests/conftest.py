"""
Shared pytest fixtures.

All fixtures use temporary directories - no hardcoded paths.
"""

import sys
from pathlib import Path

# Add project root to sys.path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import random
import shutil
import tempfile
from datetime import datetime
from typing import Generator

import pytest

from stride.config.loader import set_config_dir
from stride.profile import GameRules, MemoryBlobStore, PlayerAggregate, ProfilePersistence
from stride.progression.levels import reset_level_calculator
from stride.progression.ranks import reset_rank_ladder


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Provides a temporary directory for tests.

    Automatically cleaned up after test completes.
    """
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture(autouse=True)
def reset_globals():
    """Reset global calculators and config dir before and after each test."""
    reset_level_calculator()
    reset_rank_ladder()
    set_config_dir(None)
    yield
    reset_level_calculator()
    reset_rank_ladder()
    set_config_dir(None)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible reward rolls."""
    return random.Random(1234)


@pytest.fixture
def rules(rng) -> GameRules:
    """Default game rules with a seeded random source."""
    return GameRules.from_config(rng=rng)


@pytest.fixture
def player(rules) -> PlayerAggregate:
    """A fresh player aggregate."""
    return PlayerAggregate(rules)


@pytest.fixture
def memory_persistence(rules) -> ProfilePersistence:
    """Persistence over an in-memory blob store."""
    return ProfilePersistence(MemoryBlobStore(), rules_factory=lambda: rules)


@pytest.fixture
def now() -> datetime:
    """A fixed mid-morning timestamp."""
    return datetime(2026, 10, 18, 9, 30)
