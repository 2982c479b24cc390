"""Dispatch of incoming device messages to the profile manager."""

import logging
from datetime import datetime
from typing import Callable, Optional

from stride.profile.manager import ProfileManager
from stride.sync.messages import (
    MessageDecodeError,
    MessageType,
    RunSummaryPayload,
    SyncMessage,
    pet_id_from_payload,
    sprint_result_from_dict,
)


logger = logging.getLogger(__name__)


class SyncHandler:
    """
    Routes device messages to ProfileManager operations.

    run_ended     -> complete_run
    pet_caught    -> catch_pet
    sprint_result -> record_sprint
    sync_request  -> reply with sync_response carrying the profile snapshot

    Malformed messages are logged and dropped. Other message types are
    accepted and ignored.
    """

    def __init__(self, manager: ProfileManager, clock: Callable[[], datetime] = datetime.now):
        self.manager = manager
        self.clock = clock
        self.last_sync: Optional[datetime] = None
        self._handlers = {
            MessageType.RUN_ENDED: self._on_run_ended,
            MessageType.PET_CAUGHT: self._on_pet_caught,
            MessageType.SPRINT_RESULT: self._on_sprint_result,
            MessageType.SYNC_REQUEST: self._on_sync_request,
        }

    def handle(self, raw: str | bytes) -> Optional[SyncMessage]:
        """
        Handle one raw JSON envelope.

        Returns:
            A reply message to send back, or None
        """
        try:
            message = SyncMessage.decode(raw)
        except MessageDecodeError as e:
            logger.error(f"Dropping undecodable sync message: {e}")
            return None
        return self.handle_message(message)

    def handle_message(self, message: SyncMessage) -> Optional[SyncMessage]:
        handler = self._handlers.get(message.type)
        if handler is None:
            logger.debug(f"Ignoring sync message type {message.type.value}")
            return None

        try:
            reply = handler(message)
        except MessageDecodeError as e:
            logger.error(f"Dropping malformed {message.type.value} payload: {e}")
            return None

        self.last_sync = self.clock()
        return reply

    def profile_update(self) -> SyncMessage:
        """Unsolicited profile push for the device."""
        return SyncMessage(
            type=MessageType.PROFILE_UPDATE,
            payload=self.manager.profile_snapshot().to_dict(),
            timestamp=self.clock(),
        )

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def _on_run_ended(self, message: SyncMessage) -> None:
        payload = RunSummaryPayload.from_dict(message.payload)
        self.manager.complete_run(payload, self.clock())

    def _on_pet_caught(self, message: SyncMessage) -> None:
        self.manager.catch_pet(pet_id_from_payload(message.payload), self.clock())

    def _on_sprint_result(self, message: SyncMessage) -> None:
        self.manager.record_sprint(sprint_result_from_dict(message.payload))

    def _on_sync_request(self, message: SyncMessage) -> SyncMessage:
        return SyncMessage(
            type=MessageType.SYNC_RESPONSE,
            payload=self.manager.profile_snapshot().to_dict(),
            timestamp=self.clock(),
        )
