"""Error taxonomy shared by every ContactRepository implementation."""


class InvalidArgumentError(ValueError):
    """An operation received an absent or blank required value."""


class StorageError(Exception):
    """The storage engine failed. The engine's exception is kept as __cause__."""
