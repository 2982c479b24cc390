"""Task type definitions."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from stride.types import datetime_to_iso, generate_id, iso_to_datetime


class TaskRecurrence(Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def display_name(self) -> str:
        return {
            TaskRecurrence.NONE: "One-time",
            TaskRecurrence.DAILY: "Daily",
            TaskRecurrence.WEEKLY: "Weekly",
            TaskRecurrence.MONTHLY: "Monthly",
        }[self]


@dataclass
class TaskItem:
    """A to-do item, optionally recurring."""
    title: str
    notes: str = ""
    due_date: Optional[datetime] = None
    is_completed: bool = False
    completed_date: Optional[datetime] = None
    recurrence: TaskRecurrence = TaskRecurrence.NONE
    created_at: datetime = field(default_factory=datetime.now)
    last_recurred_at: Optional[datetime] = None
    id: str = field(default_factory=lambda: generate_id())

    @property
    def is_recurring(self) -> bool:
        return self.recurrence != TaskRecurrence.NONE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "notes": self.notes,
            "due_date": datetime_to_iso(self.due_date),
            "is_completed": self.is_completed,
            "completed_date": datetime_to_iso(self.completed_date),
            "recurrence": self.recurrence.value,
            "created_at": datetime_to_iso(self.created_at),
            "last_recurred_at": datetime_to_iso(self.last_recurred_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TaskItem":
        return cls(
            id=data.get("id") or generate_id(),
            title=data["title"],
            notes=data.get("notes", ""),
            due_date=iso_to_datetime(data.get("due_date")),
            is_completed=bool(data.get("is_completed", False)),
            completed_date=iso_to_datetime(data.get("completed_date")),
            recurrence=TaskRecurrence(data.get("recurrence", "none")),
            created_at=iso_to_datetime(data.get("created_at")) or datetime.now(),
            last_recurred_at=iso_to_datetime(data.get("last_recurred_at")),
        )
