"""Conversation identifiers and their on-disk file names."""

from __future__ import annotations

import uuid

FILE_PREFIX = "convo-"
FILE_SUFFIX = ".txt"


class FormatError(ValueError):
    """A file name does not follow the ``convo-<uuid>.txt`` convention."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Malformed conversation file name {name!r}: {reason}")
        self.name = name


def new_identifier() -> uuid.UUID:
    return uuid.uuid4()


def encode(identifier: uuid.UUID) -> str:
    return f"{FILE_PREFIX}{identifier}{FILE_SUFFIX}"


def decode(name: str) -> uuid.UUID:
    """Recover the identifier from a conversation file name.

    Raises FormatError when either affix is missing or the middle is not a
    canonical UUID. Never falls back to a default identifier.
    """
    if not name.startswith(FILE_PREFIX):
        raise FormatError(name, f"missing {FILE_PREFIX!r} prefix")
    if not name.endswith(FILE_SUFFIX):
        raise FormatError(name, f"missing {FILE_SUFFIX!r} suffix")
    middle = name[len(FILE_PREFIX) : len(name) - len(FILE_SUFFIX)]
    try:
        identifier = uuid.UUID(middle)
    except ValueError as e:
        raise FormatError(name, f"{middle!r} is not a valid UUID") from e
    # Simple, braced, urn and uppercase forms would re-encode to a different name
    if str(identifier) != middle:
        raise FormatError(name, f"{middle!r} is not a canonical UUID")
    return identifier
