"""Exceptions raised by twee-bridge."""

from typing import Optional


class TweeBridgeError(Exception):
    """Base class for all twee-bridge errors."""


class PassageNotFoundError(TweeBridgeError, LookupError):
    """The passage header does not exist in the document text.

    Usually means the registry is stale or the document was edited externally.
    """

    def __init__(self, name: str, origin: Optional[str] = None):
        self.name = name
        self.origin = origin
        where = f" in {origin}" if origin else ""
        super().__init__(f"Cannot find passage title '{name}'{where}")


class DocumentStoreError(TweeBridgeError):
    """A document could not be resolved by the document store."""
