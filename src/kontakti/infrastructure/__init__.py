"""Infrastructure layer: concrete implementations of application ports."""

from kontakti.infrastructure.memory_repository import InMemoryContactStore
from kontakti.infrastructure.persistence.sqlite_repository import (
    DATABASE_FILENAME,
    SqliteContactStore,
    default_database_path,
)

__all__ = [
    "DATABASE_FILENAME",
    "InMemoryContactStore",
    "SqliteContactStore",
    "default_database_path",
]
