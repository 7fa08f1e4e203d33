"""Core business logic for URL shortener."""

from .engine import ShortenerEngine
from .errors import ErrorKind, ShortenerError

__all__ = ["ShortenerEngine", "ErrorKind", "ShortenerError"]
