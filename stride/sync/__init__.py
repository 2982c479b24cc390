"""
Device sync - message envelope and payload shapes.

The dispatcher lives in stride.sync.handler:

    from stride.sync.handler import SyncHandler

    handler = SyncHandler(manager)
    reply = handler.handle(raw_json)
"""

from stride.sync.messages import (
    MessageDecodeError,
    MessageType,
    RunSummaryPayload,
    ProfileSnapshot,
    SyncMessage,
    sprint_result_from_dict,
    pet_id_from_payload,
)

__all__ = [
    "MessageDecodeError",
    "MessageType",
    "RunSummaryPayload",
    "ProfileSnapshot",
    "SyncMessage",
    "sprint_result_from_dict",
    "pet_id_from_payload",
]
