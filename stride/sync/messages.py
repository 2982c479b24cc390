"""
Device sync message shapes.

The watch and the phone exchange JSON envelopes:

    {"type": "run_ended", "payload": {...}, "timestamp": "2026-10-18T07:30:00"}

Payload keys are camelCase on the wire. Decoding is lenient: unknown keys
are ignored and unknown loot rarities are dropped.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from stride.rewards.types import Rarity, SprintResult
from stride.types import datetime_to_iso, iso_to_datetime


logger = logging.getLogger(__name__)


class MessageDecodeError(ValueError):
    """Raised when a wire message cannot be decoded."""
    pass


class MessageType(Enum):
    RUN_STARTED = "run_started"
    RUN_ENDED = "run_ended"
    SPRINT_RESULT = "sprint_result"
    PET_CAUGHT = "pet_caught"
    SYNC_REQUEST = "sync_request"
    SYNC_RESPONSE = "sync_response"
    PROFILE_UPDATE = "profile_update"

    @classmethod
    def parse(cls, value: str) -> "MessageType":
        """Accept snake_case or the watch's camelCase names."""
        try:
            return cls(value)
        except ValueError:
            pass
        for member in cls:
            if member.value.replace("_", "") == str(value).lower():
                return member
        raise MessageDecodeError(f"Unknown message type: {value!r}")


def _first(data: dict, *keys, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class RunSummaryPayload:
    """Run-completion summary sent by the device when a run ends."""
    duration_seconds: int = 0
    distance_meters: float = 0.0
    sprints_completed: int = 0
    sprints_total: int = 0
    rank_points_earned: int = 0
    experience_earned: int = 0
    coins_earned: int = 0
    pet_caught: Optional[str] = None
    loot_boxes_earned: tuple[Rarity, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "RunSummaryPayload":
        """
        Decode from wire keys.

        Both the short (``rpEarned``, ``xpEarned``) and long
        (``rankPointsEarned``, ``experienceEarned``) names are accepted.

        Raises:
            MessageDecodeError: If a numeric field is not a finite number or
                ``lootBoxesEarned`` is not a list of strings
        """
        if not isinstance(data, dict):
            raise MessageDecodeError(f"Run summary must be an object, got {type(data).__name__}")

        raw_loot = _first(data, "lootBoxesEarned", "loot_boxes_earned", default=[])
        if isinstance(raw_loot, str):
            raw_loot = [raw_loot]
        if not isinstance(raw_loot, list):
            raise MessageDecodeError(f"lootBoxesEarned must be a list, got {type(raw_loot).__name__}")

        loot = []
        for raw in raw_loot:
            rarity = Rarity.parse(raw)
            if rarity is None:
                logger.debug(f"Dropping unknown loot rarity {raw!r}")
                continue
            loot.append(rarity)

        pet_caught = _first(data, "petCaught", "pet_caught")
        if pet_caught is not None and not isinstance(pet_caught, str):
            raise MessageDecodeError(f"petCaught must be a string, got {type(pet_caught).__name__}")

        try:
            payload = cls(
                duration_seconds=int(_first(data, "durationSeconds", "duration_seconds", default=0)),
                distance_meters=float(_first(data, "distanceMeters", "distance_meters", default=0.0)),
                sprints_completed=int(_first(data, "sprintsCompleted", "sprints_completed", default=0)),
                sprints_total=int(_first(data, "sprintsTotal", "sprints_total", default=0)),
                rank_points_earned=int(_first(
                    data, "rpEarned", "rankPointsEarned", "rank_points_earned", default=0)),
                experience_earned=int(_first(
                    data, "xpEarned", "experienceEarned", "experience_earned", default=0)),
                coins_earned=int(_first(data, "coinsEarned", "coins_earned", default=0)),
                pet_caught=pet_caught or None,
                loot_boxes_earned=tuple(loot),
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise MessageDecodeError(f"Invalid run summary: {e}") from e

        if not math.isfinite(payload.distance_meters):
            raise MessageDecodeError(f"Invalid run summary: distance {payload.distance_meters}")
        return payload

    def to_dict(self) -> dict:
        return {
            "durationSeconds": self.duration_seconds,
            "distanceMeters": self.distance_meters,
            "sprintsCompleted": self.sprints_completed,
            "sprintsTotal": self.sprints_total,
            "rankPointsEarned": self.rank_points_earned,
            "experienceEarned": self.experience_earned,
            "coinsEarned": self.coins_earned,
            "petCaught": self.pet_caught,
            "lootBoxesEarned": [r.value for r in self.loot_boxes_earned],
        }


@dataclass(frozen=True)
class ProfileSnapshot:
    """Reduced profile view sent back to the device."""
    equipped_pet_id: Optional[str]
    level: int
    experience: int
    coins: int
    rank_points: int

    def to_dict(self) -> dict:
        return {
            "equippedPetId": self.equipped_pet_id,
            "level": self.level,
            "experience": self.experience,
            "coins": self.coins,
            "rankPoints": self.rank_points,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProfileSnapshot":
        return cls(
            equipped_pet_id=data.get("equippedPetId") or None,
            level=int(data.get("level", 1)),
            experience=int(data.get("experience", 0)),
            coins=int(data.get("coins", 0)),
            rank_points=int(data.get("rankPoints", 0)),
        )


def sprint_result_from_dict(data: dict) -> SprintResult:
    """Decode a sprint_result payload."""
    if not isinstance(data, dict):
        raise MessageDecodeError("Sprint result must be an object")
    try:
        result = SprintResult(
            is_valid=bool(_first(data, "isValid", "is_valid", default=False)),
            duration_seconds=float(_first(data, "durationSeconds", "duration_seconds", default=0.0)),
        )
    except (TypeError, ValueError, OverflowError) as e:
        raise MessageDecodeError(f"Invalid sprint result: {e}") from e
    if not math.isfinite(result.duration_seconds):
        raise MessageDecodeError(f"Invalid sprint duration: {result.duration_seconds}")
    return result


def pet_id_from_payload(payload: Any) -> str:
    """pet_caught payloads carry the definition id, bare or as {"petId": ...}."""
    if isinstance(payload, str) and payload:
        return payload
    if isinstance(payload, dict):
        pet_id = _first(payload, "petId", "pet_id", "petDefinitionId")
        if isinstance(pet_id, str) and pet_id:
            return pet_id
    raise MessageDecodeError(f"pet_caught payload has no pet id: {payload!r}")


@dataclass
class SyncMessage:
    """Envelope for every message on the device channel."""
    type: MessageType
    payload: Optional[Any] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "payload": self.payload,
            "timestamp": datetime_to_iso(self.timestamp),
        }

    def encode(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "SyncMessage":
        if not isinstance(data, dict) or "type" not in data:
            raise MessageDecodeError("Envelope must be an object with a 'type'")

        timestamp = data.get("timestamp")
        if isinstance(timestamp, (int, float)):
            try:
                when = datetime.fromtimestamp(timestamp)
            except (ValueError, OverflowError, OSError) as e:
                raise MessageDecodeError(f"Invalid timestamp {timestamp!r}: {e}") from e
        else:
            when = iso_to_datetime(timestamp) or datetime.now()

        return cls(
            type=MessageType.parse(data["type"]),
            payload=data.get("payload"),
            timestamp=when,
        )

    @classmethod
    def decode(cls, raw: str | bytes) -> "SyncMessage":
        """
        Decode a JSON envelope.

        Raises:
            MessageDecodeError: On invalid JSON or envelope shape
        """
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
            raise MessageDecodeError(f"Invalid JSON: {e}") from e
        return cls.from_dict(data)
