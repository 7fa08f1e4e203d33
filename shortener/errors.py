"""Error types for URL shortener.

Every failure the codec, engine or store can report is a ``ShortenerError``
carrying an ``ErrorKind``. The web layer maps the kind to an HTTP status
with a lookup table instead of inspecting messages.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""

    VALIDATION = "validation"
    CODEC = "codec"
    RANGE = "range"
    INVALID_CODE = "invalid_code"
    NOT_FOUND = "not_found"
    STORE = "store"
    DEADLINE_EXCEEDED = "deadline_exceeded"


class ShortenerError(Exception):
    """Base exception for all URL shortener errors."""

    kind: ErrorKind = ErrorKind.STORE

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message or self.kind.value


class ValidationError(ShortenerError):
    """Raised when caller-supplied input fails a precondition."""

    kind = ErrorKind.VALIDATION


class CodecError(ShortenerError):
    """Raised when a code contains characters outside the base-62 alphabet."""

    kind = ErrorKind.CODEC


class RangeError(CodecError):
    """Raised when a code decodes to a value no issued id can produce."""

    kind = ErrorKind.RANGE


class InvalidCodeError(ShortenerError):
    """Raised by the engine when a code cannot be decoded."""

    kind = ErrorKind.INVALID_CODE


class NotFoundError(ShortenerError):
    """Raised when a well-formed code has no record."""

    kind = ErrorKind.NOT_FOUND


class StoreError(ShortenerError):
    """Raised when the durable store fails (connectivity, timeout, constraints)."""

    kind = ErrorKind.STORE


class DeadlineExceededError(ShortenerError):
    """Raised when a store operation does not finish before its deadline."""

    kind = ErrorKind.DEADLINE_EXCEEDED
