"""Recurrence date math for tasks."""

from datetime import datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from stride.tasks.types import TaskItem, TaskRecurrence


_STEPS = {
    TaskRecurrence.DAILY: relativedelta(days=1),
    TaskRecurrence.WEEKLY: relativedelta(weeks=1),
    TaskRecurrence.MONTHLY: relativedelta(months=1),
}


def next_due_date(due: Optional[datetime], recurrence: TaskRecurrence) -> Optional[datetime]:
    """
    Due date of the next generation.

    Monthly steps clamp to the last day of a shorter month
    (Jan 31 -> Feb 28). Each generation steps from the previous one, so a
    clamped day carries forward (Feb 28 -> Mar 28).
    """
    if due is None or recurrence == TaskRecurrence.NONE:
        return None
    return due + _STEPS[recurrence]


def spawn_next(task: TaskItem, now: datetime) -> Optional[TaskItem]:
    """New open instance of a recurring task, None for one-time tasks."""
    if not task.is_recurring:
        return None
    return TaskItem(
        title=task.title,
        notes=task.notes,
        due_date=next_due_date(task.due_date, task.recurrence),
        recurrence=task.recurrence,
        created_at=now,
        last_recurred_at=now,
    )


def period_elapsed(task: TaskItem, now: datetime) -> bool:
    """True once the calendar day of the next generation's due date has arrived."""
    upcoming = next_due_date(task.due_date, task.recurrence)
    if upcoming is None:
        return False
    return upcoming.date() <= now.date()


def is_overdue(task: TaskItem, now: datetime) -> bool:
    return task.due_date is not None and not task.is_completed and task.due_date < now


def is_due_today(task: TaskItem, now: datetime) -> bool:
    if task.due_date is None or task.is_completed:
        return False
    return task.due_date.date() == now.date()


def days_until_due(task: TaskItem, now: datetime) -> Optional[int]:
    if task.due_date is None:
        return None
    return (task.due_date.date() - now.date()) // timedelta(days=1)
