"""Domain layer: entities and errors. No dependencies on outer layers."""

from kontakti.domain.entities import (
    Contact,
    SearchCriteria,
    in_integer_range,
    resolve_criteria,
)
from kontakti.domain.errors import InvalidArgumentError, StorageError

__all__ = [
    "Contact",
    "InvalidArgumentError",
    "SearchCriteria",
    "StorageError",
    "in_integer_range",
    "resolve_criteria",
]
