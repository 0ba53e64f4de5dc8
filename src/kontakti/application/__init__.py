"""Application layer: ports. Depends only on domain."""

from kontakti.application.ports import ContactRepository

__all__ = ["ContactRepository"]
