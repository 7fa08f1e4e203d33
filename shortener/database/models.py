"""Data models for URL shortener."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class URLRecord:
    """Represents a row of the urls table."""

    id: int
    url: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "URLRecord":
        """Create from a database row or mapping."""
        return cls(
            id=row["id"],
            url=row["url"],
            created_at=row["created_at"],
        )
