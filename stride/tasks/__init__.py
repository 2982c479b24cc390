"""Tasks - to-do items with daily, weekly and monthly recurrence."""

from stride.tasks.types import TaskRecurrence, TaskItem
from stride.tasks.scheduler import (
    next_due_date,
    spawn_next,
    period_elapsed,
    is_overdue,
    is_due_today,
    days_until_due,
)
from stride.tasks.board import TaskBoard

__all__ = [
    "TaskRecurrence",
    "TaskItem",
    "next_due_date",
    "spawn_next",
    "period_elapsed",
    "is_overdue",
    "is_due_today",
    "days_until_due",
    "TaskBoard",
]
