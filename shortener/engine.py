"""Shortening engine for URL shortener."""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from . import codec
from .database.base import URLStoreBase
from .errors import (
    CodecError,
    DeadlineExceededError,
    InvalidCodeError,
    NotFoundError,
    StoreError,
)

T = TypeVar("T")


class ShortenerEngine:
    """Create and resolve short codes against the durable store.

    The engine keeps no state of its own: ids come from the store and codes
    are recomputed from ids on every call. Serialization of concurrent
    submissions of the same URL is left to the store's atomic upsert.
    """

    def __init__(
        self,
        store: URLStoreBase,
        logger: Optional[logging.Logger] = None,
        default_timeout: Optional[float] = None,
    ):
        """Initialize shortening engine.

        Args:
            store: Durable store instance, shared by all calls
            logger: Optional logger
            default_timeout: Deadline in seconds for store calls when the
                caller passes none (None means no deadline)
        """
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        self.default_timeout = default_timeout

    async def shorten(self, url: str, timeout: Optional[float] = None) -> str:
        """Return the short code for url, creating its record if needed.

        Repeated calls with the same url return the same code. The caller is
        responsible for validating url.

        Args:
            url: The original long URL
            timeout: Optional deadline in seconds for the store call

        Returns:
            The short code

        Raises:
            StoreError: If the store fails
            DeadlineExceededError: If the store does not answer in time
        """
        try:
            record_id = await self._with_deadline(self.store.upsert_url(url), timeout, "shorten")
        except StoreError as e:
            self.logger.error(f"shorten url({url[:50]}): {e}")
            raise StoreError(f"shorten url({url[:50]}): {e}") from e

        code = codec.encode(record_id)
        self.logger.info(f"Shortened URL: {url[:50]} -> {code}")
        return code

    async def expand(self, code: str, timeout: Optional[float] = None) -> str:
        """Return the original URL for a short code.

        Args:
            code: The short code to resolve
            timeout: Optional deadline in seconds for the store call

        Returns:
            The original URL

        Raises:
            InvalidCodeError: If code cannot be decoded (store is not queried)
            NotFoundError: If no record has the decoded id
            StoreError: If the store fails
            DeadlineExceededError: If the store does not answer in time
        """
        try:
            record_id = codec.decode(code)
        except CodecError as e:
            self.logger.warning(f"Invalid short code: {code}: {e}")
            raise InvalidCodeError(f"validation code({code}): {e}") from e

        try:
            record = await self._with_deadline(self.store.get_url_by_id(record_id), timeout, "expand")
        except StoreError as e:
            self.logger.error(f"expand code({code}): {e}")
            raise StoreError(f"expand code({code}): {e}") from e

        if record is None:
            self.logger.warning(f"Short code not found: {code}")
            raise NotFoundError(f"not found code({code})")

        self.logger.debug(f"Expanded code: {code} -> {record.url}")
        return record.url

    async def health_check(self, timeout: Optional[float] = None) -> bool:
        """Check that the store answers within timeout seconds."""
        try:
            return await self._with_deadline(self.store.health_check(), timeout, "health check")
        except DeadlineExceededError as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close the store."""
        await self.store.close()

    async def _with_deadline(self, awaitable: Awaitable[T], timeout: Optional[float], operation: str) -> T:
        """Await a store call, cancelling it once the deadline passes."""
        if timeout is None:
            timeout = self.default_timeout
        if timeout is None:
            return await awaitable

        try:
            return await asyncio.wait_for(awaitable, timeout)
        except asyncio.TimeoutError as e:
            self.logger.warning(f"{operation}: deadline of {timeout}s exceeded")
            raise DeadlineExceededError(f"{operation}: deadline of {timeout}s exceeded") from e
