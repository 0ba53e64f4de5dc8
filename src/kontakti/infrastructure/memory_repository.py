"""In-memory implementation of ContactRepository (no DB)."""

import dataclasses
import string

from kontakti.domain import (
    Contact,
    InvalidArgumentError,
    SearchCriteria,
    resolve_criteria,
)

# Case folding as SQLite NOCASE and LIKE do it: ASCII letters only.
_ASCII_FOLD = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _fold(value: str) -> str:
    return value.translate(_ASCII_FOLD)


def _matches(value: str | None, needle: str, exact: bool) -> bool:
    if value is None:
        return False
    if exact:
        return _fold(value) == _fold(needle)
    return _fold(needle) in _fold(value)


class InMemoryContactStore:
    """Stores contacts in memory. Order preserved by insertion.
    Ids come from a counter that only moves forward, so deleted ids are never reused.
    """

    def __init__(self) -> None:
        self._by_id: dict[int, Contact] = {}
        self._last_id = 0

    def create(self, contact: Contact) -> int:
        if contact is None:
            raise InvalidArgumentError("contact is required.")
        self._last_id += 1
        self._by_id[self._last_id] = dataclasses.replace(contact, id=self._last_id)
        return self._last_id

    def get_all(self) -> list[Contact]:
        return list(self._by_id.values())

    def get_by_id(self, contact_id: int) -> Contact | None:
        return self._by_id.get(contact_id)

    def update(self, contact: Contact) -> bool:
        if contact is None:
            raise InvalidArgumentError("contact is required.")
        if contact.id not in self._by_id:
            return False
        self._by_id[contact.id] = contact
        return True

    def delete(self, contact_id: int) -> bool:
        return self._by_id.pop(contact_id, None) is not None

    def search(
        self, criteria: SearchCriteria | None = None, **filters
    ) -> list[Contact]:
        criteria = resolve_criteria(criteria, filters)
        needles = criteria.filters()
        results = [
            contact
            for contact in self._by_id.values()
            if all(
                _matches(_field(contact, key), needle, criteria.exact)
                for key, needle in needles.items()
            )
        ]
        results.sort(key=lambda c: (_fold(c.name), c.id))
        if criteria.limit is None:
            return results
        start = 0
        if criteria.offset is not None and criteria.offset >= 0:
            start = criteria.offset
        # Negative limit means no cap, as in SQLite.
        if criteria.limit < 0:
            return results[start:]
        return results[start : start + criteria.limit]


def _field(contact: Contact, key: str) -> str | None:
    if key == "phone":
        return contact.phone_number
    return getattr(contact, key)
