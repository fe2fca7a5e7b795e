"""Base domain event of the ordering core."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict
from uuid import UUID


@dataclass(frozen=True)
class DomainEvent:
    """Immutable record of something that happened to an order.

    Subclasses add their payload fields and a ``create()`` constructor
    that stamps a fresh ``event_id`` and the current UTC time.

    Attributes:
        event_id: Unique identifier of this occurrence.
        occurred_at: When it happened (timezone-aware, UTC).

    Raises:
        ValueError: If occurred_at is naive.
    """

    event_id: UUID
    occurred_at: datetime

    def __post_init__(self) -> None:
        if self.occurred_at.tzinfo is None:
            raise ValueError("occurred_at must be timezone-aware (use UTC)")

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def log_fields(self) -> Dict[str, Any]:
        """Identity fields for structured log ``extra`` dicts."""
        return {
            "event_type": self.event_type,
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
        }
