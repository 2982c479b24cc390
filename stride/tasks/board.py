"""
Task board - the player's task list with recurrence handling.

Completing a recurring task appends its next generation. Tasks are kept
in insertion order; the filtered views sort as the task list shows them.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from stride.tasks.scheduler import is_due_today, is_overdue, period_elapsed, spawn_next
from stride.tasks.types import TaskItem, TaskRecurrence


logger = logging.getLogger(__name__)


class TaskBoard:
    """Ordered collection of TaskItems."""

    def __init__(self, tasks: Optional[Iterable[TaskItem]] = None):
        self._tasks: list[TaskItem] = list(tasks or [])

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self):
        return iter(self._tasks)

    @property
    def tasks(self) -> list[TaskItem]:
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[TaskItem]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def find_by_prefix(self, prefix: str) -> Optional[TaskItem]:
        """First task whose id starts with ``prefix`` (case-insensitive)."""
        prefix = prefix.lower()
        if not prefix:
            return None
        for task in self._tasks:
            if task.id.lower().startswith(prefix):
                return task
        return None

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def add_task(self, task: TaskItem) -> TaskItem:
        self._tasks.append(task)
        return task

    def create_task(
        self,
        title: str,
        notes: str = "",
        due_date: Optional[datetime] = None,
        recurrence: TaskRecurrence = TaskRecurrence.NONE,
        now: Optional[datetime] = None,
    ) -> TaskItem:
        task = TaskItem(
            title=title,
            notes=notes,
            due_date=due_date,
            recurrence=recurrence,
            created_at=now or datetime.now(),
        )
        logger.debug(f"Created task '{title}' ({recurrence.value})")
        return self.add_task(task)

    def update_task(self, task: TaskItem) -> bool:
        """Replace the task with the same id. Returns False if absent."""
        for i, existing in enumerate(self._tasks):
            if existing.id == task.id:
                self._tasks[i] = task
                return True
        return False

    def delete_task(self, task_id: str) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        return len(self._tasks) < before

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    def complete_task(self, task_id: str, now: datetime) -> Optional[TaskItem]:
        """
        Mark a task completed.

        Returns:
            The spawned next generation for a recurring task, else None.
            Completing an unknown or already completed task does nothing.
        """
        task = self.get(task_id)
        if task is None or task.is_completed:
            return None

        task.is_completed = True
        task.completed_date = now

        successor = spawn_next(task, now)
        if successor is not None:
            self.add_task(successor)
            logger.info(
                f"Task '{task.title}' recurs {task.recurrence.value}; "
                f"next due {successor.due_date}"
            )
        return successor

    def reopen_task(self, task_id: str) -> bool:
        task = self.get(task_id)
        if task is None or not task.is_completed:
            return False
        task.is_completed = False
        task.completed_date = None
        return True

    @staticmethod
    def _generation_key(task: TaskItem) -> tuple:
        return (
            task.due_date or datetime.min,
            task.completed_date or datetime.min,
            task.created_at,
        )

    def _latest_generations(self) -> list[TaskItem]:
        """
        The newest completed task of each recurring chain with nothing open.

        A chain is every task sharing a title and recurrence.
        """
        latest: dict[tuple, TaskItem] = {}
        open_chains = set()
        for task in self._tasks:
            if not task.is_recurring:
                continue
            chain = (task.title, task.recurrence)
            if not task.is_completed:
                open_chains.add(chain)
                continue
            current = latest.get(chain)
            if current is None or self._generation_key(task) > self._generation_key(current):
                latest[chain] = task
        return [task for chain, task in latest.items() if chain not in open_chains]

    def check_recurring(self, now: datetime) -> list[TaskItem]:
        """
        Spawn generations missing for completed recurring tasks.

        Only the latest completed generation of a chain counts, so a chain
        spawns at most one task however many generations were completed.
        Chains that still have an open task are left alone. Returns the
        spawned tasks.
        """
        spawned = []
        for task in self._latest_generations():
            if not period_elapsed(task, now):
                continue
            successor = spawn_next(task, now)
            self.add_task(successor)
            spawned.append(successor)

        if spawned:
            logger.info(f"Spawned {len(spawned)} recurring task(s)")
        return spawned

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def pending_tasks(self) -> list[TaskItem]:
        """Open tasks, soonest due first; undated last."""
        pending = [t for t in self._tasks if not t.is_completed]
        return sorted(pending, key=lambda t: (t.due_date is None, t.due_date or datetime.max))

    def completed_tasks(self) -> list[TaskItem]:
        """Completed tasks, most recently completed first."""
        done = [t for t in self._tasks if t.is_completed]
        return sorted(done, key=lambda t: t.completed_date or datetime.min, reverse=True)

    def today_tasks(self, now: datetime) -> list[TaskItem]:
        return [t for t in self._tasks if is_due_today(t, now)]

    def overdue_tasks(self, now: datetime) -> list[TaskItem]:
        return [t for t in self._tasks if is_overdue(t, now)]

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_list(self) -> list[dict]:
        return [t.to_dict() for t in self._tasks]

    @classmethod
    def from_list(cls, data: list[dict]) -> "TaskBoard":
        tasks = []
        for item in data or []:
            try:
                tasks.append(TaskItem.from_dict(item))
            except (KeyError, ValueError, TypeError) as e:
                logger.debug(f"Dropping malformed task entry: {e}")
        return cls(tasks)
