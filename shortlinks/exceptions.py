"""Errors raised by the link store.

All of them are local to a single operation: the store is left unchanged
when one is raised.
"""

__all__ = [
    "LinkStoreError",
    "CodeAlreadyExists",
    "NotFound",
    "GenerationExhausted",
]


class LinkStoreError(Exception):
    """Base class for link store failures."""


class CodeAlreadyExists(LinkStoreError):
    """Raised when a custom code is held by a live record."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Custom code '{code}' already exists")
        self.code = code


class NotFound(LinkStoreError):
    """Raised when a code is absent or its record has expired."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Short code '{code}' not found")
        self.code = code


class GenerationExhausted(LinkStoreError):
    """Raised when no free generated code was found within the attempt bound."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Failed to generate a unique short code after {attempts} attempts")
        self.attempts = attempts
