"""Database layer for URL shortener."""

from .base import URLStoreBase
from .postgres import PostgresURLStore
from .models import URLRecord

__all__ = ["URLStoreBase", "PostgresURLStore", "URLRecord"]
