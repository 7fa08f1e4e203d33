"""Abstract base class for URL shortener store implementations."""

from abc import ABC, abstractmethod
from typing import Optional

from .models import URLRecord


class URLStoreBase(ABC):
    """Abstract base class for the durable URL store.

    Implementations own id assignment and url uniqueness. Every failure of
    the underlying store must be raised as ``StoreError``.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Open connections to the store.

        Raises:
            StoreError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def upsert_url(self, url: str) -> int:
        """Insert url, or refresh created_at of its existing row.

        Must be a single atomic operation so that concurrent calls with the
        same url leave exactly one row.

        Args:
            url: The original long URL

        Returns:
            The id of the inserted or existing row
        """
        pass

    @abstractmethod
    async def get_url_by_id(self, record_id: int) -> Optional[URLRecord]:
        """Get the record with the given id.

        Args:
            record_id: The id to lookup

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass
