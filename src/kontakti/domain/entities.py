"""Domain entities: Contact and SearchCriteria."""

from dataclasses import dataclass

from kontakti.domain.errors import InvalidArgumentError

# Signed 64-bit range of a stored INTEGER (ids, limit, offset).
INTEGER_MIN = -(2**63)
INTEGER_MAX = 2**63 - 1


def in_integer_range(value: int) -> bool:
    return INTEGER_MIN <= value <= INTEGER_MAX


@dataclass(frozen=True)
class Contact:
    """
    One address-book entry.
    id is None until the store assigns one; optional fields are None when absent.
    """

    name: str
    email: str
    phone_number: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    id: int | None = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise InvalidArgumentError("Contact name must be non-empty.")
        if not self.email or not self.email.strip():
            raise InvalidArgumentError("Contact email must be non-empty.")


@dataclass(frozen=True)
class SearchCriteria:
    """
    Filters for ContactRepository.search.
    Blank filters are ignored. offset only applies when limit is set.
    """

    name: str | None = None
    phone: str | None = None
    email: str | None = None
    exact: bool = False
    limit: int | None = None
    offset: int | None = None

    def __post_init__(self):
        for key in ("limit", "offset"):
            value = getattr(self, key)
            if value is not None and not in_integer_range(value):
                raise InvalidArgumentError(f"{key} is out of range: {value}")

    def filters(self) -> dict[str, str]:
        """Return the supplied filters, trimmed, keyed by field name."""
        out = {}
        for key in ("name", "phone", "email"):
            value = getattr(self, key)
            if value is not None and value.strip():
                out[key] = value.strip()
        return out


def resolve_criteria(
    criteria: SearchCriteria | None, filters: dict
) -> SearchCriteria:
    """Accept either a SearchCriteria or keyword filters (name=, exact=, limit=, ...)."""
    if criteria is None:
        return SearchCriteria(**filters)
    if filters:
        raise InvalidArgumentError(
            "Pass either a SearchCriteria or keyword filters, not both."
        )
    return criteria
