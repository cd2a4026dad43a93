"""Data models for URL shortener."""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class MappingStatus(str, Enum):
    """Lifecycle state of a mapping."""

    ACTIVE = "ACTIVE"
    DEACTIVATED = "DEACTIVATED"


@dataclass(frozen=True)
class ShortMapping:
    """Represents a short code -> URL mapping in the database."""

    code: str
    original_url: str
    status: MappingStatus
    created_at: datetime
    deactivated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == MappingStatus.ACTIVE

    def deactivated(self, when: Optional[datetime] = None) -> "ShortMapping":
        """Return a DEACTIVATED copy of this mapping (no-op if already deactivated)."""
        if not self.is_active:
            return self
        return replace(
            self,
            status=MappingStatus.DEACTIVATED,
            deactivated_at=when or datetime.now(timezone.utc),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "original_url": self.original_url,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "deactivated_at": self.deactivated_at.isoformat() if self.deactivated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShortMapping":
        """Create from dictionary or database row."""
        created_at = data["created_at"]
        if not isinstance(created_at, datetime):
            created_at = datetime.fromisoformat(created_at)

        deactivated_at = data.get("deactivated_at")
        if deactivated_at is not None and not isinstance(deactivated_at, datetime):
            deactivated_at = datetime.fromisoformat(deactivated_at)

        return cls(
            code=data["code"],
            original_url=data["original_url"],
            status=MappingStatus(data["status"]),
            created_at=created_at,
            deactivated_at=deactivated_at,
        )
