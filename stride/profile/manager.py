"""Player state management and persistence."""

import logging
from datetime import datetime
from typing import Callable, Optional

from stride.abilities.types import ActionResult
from stride.pets.types import OwnedPet
from stride.profile.aggregate import ClaimResult, GameRules, PlayerAggregate
from stride.profile.persistence import ProfilePersistence
from stride.progression.types import CompletedRun
from stride.rewards.types import SprintResult, SprintRewards
from stride.sync.messages import ProfileSnapshot, RunSummaryPayload
from stride.tasks.types import TaskItem, TaskRecurrence


logger = logging.getLogger(__name__)


Listener = Callable[[str, PlayerAggregate], None]


class ProfileManager:
    """
    Owns the live PlayerAggregate.

    Responsibilities:
    - Load the aggregate from persistence (fresh default on missing or bad data)
    - Forward operations to the aggregate
    - Save after every successful mutation
    - Notify subscribers with the operation name
    """

    def __init__(
        self,
        persistence: ProfilePersistence,
        aggregate_factory: Optional[Callable[[], PlayerAggregate]] = None,
    ):
        self.persistence = persistence
        self.aggregate_factory = aggregate_factory or (
            lambda: PlayerAggregate(persistence.rules_factory())
        )
        self._player: Optional[PlayerAggregate] = None
        self._listeners: list[Listener] = []

    @property
    def player(self) -> PlayerAggregate:
        """The live aggregate, loading it on first access."""
        if self._player is None:
            self._player = self.persistence.load()
            if self._player is None:
                logger.info("No saved player, starting fresh")
                self._player = self.aggregate_factory()
        return self._player

    @property
    def rules(self) -> GameRules:
        return self.player.rules

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _commit(self, operation: str):
        self.persistence.save(self.player)
        for callback in list(self._listeners):
            callback(operation, self.player)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def record_sprint(self, result: SprintResult) -> SprintRewards:
        rewards = self.player.record_sprint(result)
        self._commit("record_sprint")
        return rewards

    def apply_passive(self, minutes: int) -> tuple[int, int]:
        rp, xp = self.player.apply_passive(minutes)
        if rp or xp:
            self._commit("apply_passive")
        return rp, xp

    def complete_run(self, payload: RunSummaryPayload, now: Optional[datetime] = None) -> CompletedRun:
        run = self.player.complete_run(payload, now)
        self._commit("complete_run")
        return run

    def catch_pet(self, definition_id: str, now: Optional[datetime] = None) -> Optional[OwnedPet]:
        pet = self.player.catch_pet(definition_id, now)
        if pet is not None:
            self._commit("catch_pet")
        return pet

    def equip_pet(self, pet_id: str) -> ActionResult:
        result = self.player.equip_pet(pet_id)
        if result:
            self._commit("equip_pet")
        return result

    def unlock_ability(self, node_id: str) -> ActionResult:
        result = self.player.unlock_ability(node_id)
        if result:
            self._commit("unlock_ability")
        return result

    def upgrade_pet_ability(self, pet_id: str) -> ActionResult:
        result = self.player.upgrade_pet_ability(pet_id)
        if result:
            self._commit("upgrade_pet_ability")
        return result

    def claim_daily_reward(self, now: Optional[datetime] = None) -> ClaimResult:
        result = self.player.claim_daily_reward(now)
        if result:
            self._commit("claim_daily_reward")
        return result

    def create_task(
        self,
        title: str,
        notes: str = "",
        due_date: Optional[datetime] = None,
        recurrence: TaskRecurrence = TaskRecurrence.NONE,
    ) -> TaskItem:
        task = self.player.tasks.create_task(title, notes, due_date, recurrence)
        self._commit("create_task")
        return task

    def complete_task(self, task_id: str, now: Optional[datetime] = None) -> bool:
        done = self.player.complete_task(task_id, now)
        if done:
            self._commit("complete_task")
        return done

    def check_recurring_tasks(self, now: Optional[datetime] = None) -> list[TaskItem]:
        spawned = self.player.tasks.check_recurring(now or datetime.now())
        if spawned:
            self._commit("check_recurring_tasks")
        return spawned

    def profile_snapshot(self) -> ProfileSnapshot:
        return self.player.profile_snapshot()

    def reset(self):
        """Wipe stored and live state."""
        self.persistence.clear()
        self._player = self.aggregate_factory()
        self._commit("reset")
        logger.info("Player reset")
