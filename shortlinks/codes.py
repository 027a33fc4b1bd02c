"""Short code generation.

Candidate codes are drawn uniformly from the 62-symbol base62 alphabet using
nanoid's cryptographic randomness. A single call is not guaranteed to be
unique; the link store retries until it finds a free slot.
"""

import re
from collections.abc import Callable

from nanoid import generate

__all__ = [
    "ALPHABET",
    "CUSTOM_CODE_PATTERN",
    "RESERVED_CODES",
    "CodeGenerator",
    "generate_short_code",
    "make_code_generator",
]

ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

CUSTOM_CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

# Path segments already taken by the HTTP routes.
RESERVED_CODES = frozenset({"api", "health", "metrics", "docs", "redoc", "openapi.json"})

CodeGenerator = Callable[[], str]


def generate_short_code(length: int = 6) -> str:
    assert isinstance(length, int) and length > 0, f"length must be a positive integer, got {length!r}"
    return generate(ALPHABET, length)


def make_code_generator(length: int) -> CodeGenerator:
    """Bind a code length into a zero-argument generator for the store."""
    assert isinstance(length, int) and length > 0, f"length must be a positive integer, got {length!r}"

    def _generate() -> str:
        return generate_short_code(length)

    return _generate
