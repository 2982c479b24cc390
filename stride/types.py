"""Common types used across the stride package."""

from enum import Enum
from typing import Optional
from datetime import date, datetime
from uuid import uuid4


class RewardCategory(Enum):
    """Reward currencies a sprint can pay out."""
    RANK_POINTS = "rank_points"
    EXPERIENCE = "experience"
    COINS = "coins"


def generate_id(prefix: str = "") -> str:
    """Generate a unique ID with optional prefix."""
    uid = str(uuid4())
    return f"{prefix}_{uid}" if prefix else uid


def datetime_to_iso(dt: Optional[datetime]) -> Optional[str]:
    """Convert datetime to ISO string for JSON serialization."""
    return dt.isoformat() if dt else None


def iso_to_datetime(s: Optional[str]) -> Optional[datetime]:
    """Convert ISO string to datetime."""
    if not s:
        return None
    try:
        return datetime.fromisoformat(s)
    except (ValueError, TypeError):
        return None


def calendar_day(dt: datetime, tz=None) -> date:
    """
    Calendar date of a datetime.

    Aware datetimes are converted into ``tz`` first when one is given;
    naive datetimes are taken as already local.
    """
    if tz is not None and dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return dt.date()

