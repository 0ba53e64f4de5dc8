"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Protocol

from kontakti.domain import Contact, SearchCriteria


class ContactRepository(Protocol):
    """Persists and queries Contact records."""

    def create(self, contact: Contact) -> int:
        """Store a new contact and return its assigned id. Any id on the input is ignored."""
        ...

    def get_all(self) -> list[Contact]:
        """Return all contacts in insertion order."""
        ...

    def get_by_id(self, contact_id: int) -> Contact | None:
        """Return the contact with the given id, or None."""
        ...

    def update(self, contact: Contact) -> bool:
        """Overwrite every field of the contact with contact.id. Returns False if not found."""
        ...

    def delete(self, contact_id: int) -> bool:
        """Remove the contact. Returns False if not found."""
        ...

    def search(
        self, criteria: SearchCriteria | None = None, **filters
    ) -> list[Contact]:
        """Return matching contacts ordered by name (case-insensitive), then id."""
        ...
