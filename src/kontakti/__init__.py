"""
Kontakti core: clean-architecture layout.

- domain: entities (Contact, SearchCriteria) and errors. No outer dependencies.
- application: ports (ContactRepository).
- infrastructure: adapters (SqliteContactStore, InMemoryContactStore).
"""

from kontakti.application import ContactRepository
from kontakti.domain import (
    Contact,
    InvalidArgumentError,
    SearchCriteria,
    StorageError,
)
from kontakti.infrastructure import InMemoryContactStore, SqliteContactStore

# The core data-access component.
ContactStore = SqliteContactStore

__all__ = [
    "Contact",
    "ContactRepository",
    "ContactStore",
    "InMemoryContactStore",
    "InvalidArgumentError",
    "SearchCriteria",
    "SqliteContactStore",
    "StorageError",
]
