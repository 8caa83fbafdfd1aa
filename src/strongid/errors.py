"""Errors raised when building, formatting or parsing strong IDs."""

from __future__ import annotations

from typing import Self


class StrongIdError(ValueError):
    """Raised when strong ID parsing or validation fails."""


class InvalidCharacterError(StrongIdError):
    """A suffix contains a character outside the base32 alphabet."""

    def __init__(self, char: str, position: int | None = None) -> None:
        self.char = char
        self.position = position
        where = "" if position is None else f" at position {position}"
        super().__init__(f"Invalid base32 character {char!r}{where}")

    def __reduce__(self) -> tuple[type[Self], tuple[str, int | None]]:
        return (type(self), (self.char, self.position))


class LengthMismatchError(StrongIdError):
    """A suffix does not have the fixed length of its width."""

    def __init__(self, expected: int, found: int) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"Suffix must be {expected} characters, got {found}")

    def __reduce__(self) -> tuple[type[Self], tuple[int, int]]:
        return (type(self), (self.expected, self.found))


class SuffixOverflowError(StrongIdError):
    """A value does not fit the bit width it is encoded or decoded with."""


class InvalidPrefixError(StrongIdError):
    """A prefix is empty, too long or contains non-lowercase letters."""


class MalformedDelimiterError(StrongIdError):
    """The delimiter between prefix and suffix is misplaced or repeated."""


class PrefixMismatchError(StrongIdError):
    """The parsed prefix differs from the prefix the caller expected."""

    def __init__(self, expected: str | None, found: str | None, message: str | None = None) -> None:
        self.expected = expected
        self.found = found
        super().__init__(message or f"Expected prefix {expected!r}, got {found!r}")

    def __reduce__(self) -> tuple[type[Self], tuple[str | None, ...]]:
        return (type(self), (self.expected, self.found, str(self)))


class MissingPrefixError(PrefixMismatchError):
    """A prefix was expected but the text has none."""

    def __init__(self, expected: str) -> None:
        super().__init__(expected, None, f"Expected prefix {expected!r}, found none")

    def __reduce__(self) -> tuple[type[Self], tuple[str | None]]:
        return (type(self), (self.expected,))


class UnexpectedPrefixError(PrefixMismatchError):
    """The text has a prefix but none was expected."""

    def __init__(self, found: str) -> None:
        super().__init__(None, found, f"Found prefix {found!r}, none expected")

    def __reduce__(self) -> tuple[type[Self], tuple[str | None]]:
        return (type(self), (self.found,))


class UnsupportedVersionError(StrongIdError):
    """A UUID generation strategy is not enabled by the active profile."""


__all__ = [
    "InvalidCharacterError",
    "InvalidPrefixError",
    "LengthMismatchError",
    "MalformedDelimiterError",
    "MissingPrefixError",
    "PrefixMismatchError",
    "StrongIdError",
    "SuffixOverflowError",
    "UnexpectedPrefixError",
    "UnsupportedVersionError",
]
