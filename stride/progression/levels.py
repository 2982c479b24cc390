"""Player level thresholds and experience progression."""

import logging
from dataclasses import dataclass, field
from typing import Optional


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelBand:
    """
    A run of levels sharing the same per-level experience increment.

    The cumulative threshold of a level L inside the band is
    ``base + (L - offset) * per_level``.
    """
    first_level: int
    base: int
    offset: int
    per_level: int

    def threshold(self, level: int) -> int:
        return self.base + (level - self.offset) * self.per_level


def _default_bands() -> list[LevelBand]:
    return [
        LevelBand(first_level=1, base=0, offset=1, per_level=100),
        LevelBand(first_level=11, base=1000, offset=10, per_level=200),
        LevelBand(first_level=21, base=3000, offset=20, per_level=400),
        LevelBand(first_level=31, base=7000, offset=30, per_level=800),
        LevelBand(first_level=41, base=15000, offset=40, per_level=1600),
        LevelBand(first_level=51, base=31000, offset=50, per_level=3200),
    ]


@dataclass
class LevelConfig:
    """Configuration for the leveling system."""
    bands: list[LevelBand] = field(default_factory=_default_bands)
    max_level: int = 100

    def __post_init__(self):
        self.bands = sorted(
            (b if isinstance(b, LevelBand) else LevelBand(**b) for b in self.bands),
            key=lambda b: b.first_level,
        )

    def experience_for_level(self, level: int) -> int:
        """Cumulative experience required to reach a level."""
        if level <= 1:
            return 0
        band = self.bands[0]
        for candidate in self.bands:
            if candidate.first_level <= level:
                band = candidate
            else:
                break
        return band.threshold(level)


class LevelCalculator:
    """
    Maps accumulated experience to a level and progress fraction.

    Thresholds grow by a flat increment per level, with larger increments
    in higher bands. Levels are capped at ``max_level``.
    """

    def __init__(self, config: Optional[LevelConfig] = None):
        self.config = config or LevelConfig()

    @property
    def max_level(self) -> int:
        return self.config.max_level

    def experience_for_level(self, level: int) -> int:
        return self.config.experience_for_level(level)

    def level_for_experience(self, experience: int) -> int:
        """Highest level whose cumulative threshold is <= experience."""
        level = 1
        while (
            level < self.config.max_level
            and self.config.experience_for_level(level + 1) <= experience
        ):
            level += 1
        return level

    def experience_to_next_level(self, experience: int) -> int:
        """Experience still needed for the next level (0 at max level)."""
        level = self.level_for_experience(experience)
        if level >= self.config.max_level:
            return 0
        return max(0, self.config.experience_for_level(level + 1) - experience)

    def level_progress(self, experience: int) -> float:
        """
        Progress to next level (0.0 to 1.0).

        Returns 1.0 at the level cap.
        """
        level = self.level_for_experience(experience)
        if level >= self.config.max_level:
            return 1.0

        current = self.config.experience_for_level(level)
        following = self.config.experience_for_level(level + 1)
        needed = following - current
        if needed <= 0:
            return 1.0

        return min(1.0, max(0.0, (experience - current) / needed))

    def levels_gained(self, old_experience: int, new_experience: int) -> list[int]:
        """
        Levels crossed when experience moves from old to new.

        Returns:
            The list of newly reached levels, in order (empty if none)
        """
        old_level = self.level_for_experience(old_experience)
        new_level = self.level_for_experience(new_experience)
        return list(range(old_level + 1, new_level + 1))


# Global calculator
_calculator: Optional[LevelCalculator] = None


def get_level_calculator() -> LevelCalculator:
    """Get the global level calculator."""
    global _calculator
    if _calculator is None:
        _calculator = LevelCalculator()
    return _calculator


def reset_level_calculator():
    """Reset the global calculator (for testing)."""
    global _calculator
    _calculator = None


def init_level_calculator(config: Optional[LevelConfig] = None) -> LevelCalculator:
    """Initialize the global calculator."""
    global _calculator
    _calculator = LevelCalculator(config)
    return _calculator


# Convenience functions

def level_for_experience(experience: int) -> int:
    """Get level from total experience."""
    return get_level_calculator().level_for_experience(experience)


def experience_for_level(level: int) -> int:
    """Get cumulative experience required for a level."""
    return get_level_calculator().experience_for_level(level)
