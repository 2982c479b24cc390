"""Profile and run history type definitions."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from stride.progression.levels import LevelCalculator
from stride.rewards.types import Rarity
from stride.types import datetime_to_iso, generate_id, iso_to_datetime


@dataclass
class PlayerProfile:
    """
    The player's persistent progression record.

    Level and rank are not stored here; the player aggregate derives them
    from ``experience`` and ``rank_points`` with its configured rules.
    Snapshots carry the level for readers and ignore it when loading.
    """
    id: str = field(default_factory=lambda: generate_id("player"))
    display_name: str = "Runner"
    rank_points: int = 0
    experience: int = 0
    equipped_pet_id: Optional[str] = None

    total_runs: int = 0
    total_sprints: int = 0
    total_sprints_valid: int = 0

    created_at: datetime = field(default_factory=datetime.now)
    last_run_date: Optional[datetime] = None
    current_streak: int = 0
    longest_streak: int = 0

    total_distance_meters: float = 0.0
    total_duration_seconds: float = 0.0

    @property
    def sprint_success_rate(self) -> float:
        if self.total_sprints == 0:
            return 0.0
        return self.total_sprints_valid / self.total_sprints

    def to_dict(self, calculator: LevelCalculator) -> dict:
        """Serialize to dict. ``level`` is informational only."""
        return {
            "id": self.id,
            "display_name": self.display_name,
            "rank_points": self.rank_points,
            "experience": self.experience,
            "level": calculator.level_for_experience(self.experience),
            "equipped_pet_id": self.equipped_pet_id,
            "total_runs": self.total_runs,
            "total_sprints": self.total_sprints,
            "total_sprints_valid": self.total_sprints_valid,
            "created_at": datetime_to_iso(self.created_at),
            "last_run_date": datetime_to_iso(self.last_run_date),
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "total_distance_meters": self.total_distance_meters,
            "total_duration_seconds": self.total_duration_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PlayerProfile":
        """Deserialize from dict. A stored ``level`` is ignored."""
        return cls(
            id=data.get("id") or generate_id("player"),
            display_name=data.get("display_name", "Runner"),
            rank_points=int(data.get("rank_points", 0)),
            experience=int(data.get("experience", 0)),
            equipped_pet_id=data.get("equipped_pet_id"),
            total_runs=int(data.get("total_runs", 0)),
            total_sprints=int(data.get("total_sprints", 0)),
            total_sprints_valid=int(data.get("total_sprints_valid", 0)),
            created_at=iso_to_datetime(data.get("created_at")) or datetime.now(),
            last_run_date=iso_to_datetime(data.get("last_run_date")),
            current_streak=int(data.get("current_streak", 0)),
            longest_streak=int(data.get("longest_streak", 0)),
            total_distance_meters=float(data.get("total_distance_meters", 0.0)),
            total_duration_seconds=float(data.get("total_duration_seconds", 0.0)),
        )


@dataclass(frozen=True)
class CompletedRun:
    """One finished run in the player's history."""
    date: datetime
    duration_seconds: float
    distance_meters: float
    sprints_completed: int = 0
    sprints_total: int = 0
    rank_points_earned: int = 0
    experience_earned: int = 0
    coins_earned: int = 0
    pet_caught: Optional[str] = None
    loot_boxes_earned: tuple[Rarity, ...] = ()
    id: str = field(default_factory=lambda: generate_id("run"))

    @property
    def sprint_success_rate(self) -> float:
        if self.sprints_total == 0:
            return 0.0
        return self.sprints_completed / self.sprints_total

    @property
    def formatted_duration(self) -> str:
        """Duration as m:ss."""
        total = int(self.duration_seconds)
        return f"{total // 60}:{total % 60:02d}"

    @property
    def calendar_date(self) -> date:
        return self.date.date()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": datetime_to_iso(self.date),
            "duration_seconds": self.duration_seconds,
            "distance_meters": self.distance_meters,
            "sprints_completed": self.sprints_completed,
            "sprints_total": self.sprints_total,
            "rank_points_earned": self.rank_points_earned,
            "experience_earned": self.experience_earned,
            "coins_earned": self.coins_earned,
            "pet_caught": self.pet_caught,
            "loot_boxes_earned": [r.value for r in self.loot_boxes_earned],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CompletedRun":
        loot = tuple(
            r for r in (Rarity.parse(v) for v in data.get("loot_boxes_earned", []))
            if r is not None
        )
        return cls(
            id=data.get("id") or generate_id("run"),
            date=iso_to_datetime(data.get("date")) or datetime.now(),
            duration_seconds=float(data.get("duration_seconds", 0.0)),
            distance_meters=float(data.get("distance_meters", 0.0)),
            sprints_completed=int(data.get("sprints_completed", 0)),
            sprints_total=int(data.get("sprints_total", 0)),
            rank_points_earned=int(data.get("rank_points_earned", 0)),
            experience_earned=int(data.get("experience_earned", 0)),
            coins_earned=int(data.get("coins_earned", 0)),
            pet_caught=data.get("pet_caught"),
            loot_boxes_earned=loot,
        )
