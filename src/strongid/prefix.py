"""Prefix validation and the ``<prefix>_<suffix>`` split grammar."""

from __future__ import annotations

import re
from typing import Any, Self

from strongid.errors import InvalidPrefixError, MalformedDelimiterError
from strongid.profile import DEFAULT_PROFILE, DELIMITER, PREFIX_MAX_LENGTH, Profile


_PREFIX_PATTERN = re.compile(r"[a-z]+")


class Prefix(str):
    """A validated prefix: one or more lowercase ASCII letters.

    Invalid strings never produce a ``Prefix``.

    Example:
        >>> Prefix("user")
        Prefix('user')
    """

    __slots__ = ()

    def __new__(cls, value: str, *, max_length: int = PREFIX_MAX_LENGTH) -> Self:
        if isinstance(value, Prefix) and len(value) <= max_length:
            return value  # type: ignore[return-value]
        if not isinstance(value, str):
            raise InvalidPrefixError(f"Prefix must be a string, got {type(value).__name__}")
        if not value:
            raise InvalidPrefixError("Prefix must not be empty")
        if len(value) > max_length:
            raise InvalidPrefixError(
                f"Prefix must be at most {max_length} characters, got {len(value)}"
            )
        if not _PREFIX_PATTERN.fullmatch(value):
            raise InvalidPrefixError(f"Prefix must be lowercase ASCII letters only, got {value!r}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Prefix({str(self)!r})"

    def __reduce__(self) -> tuple[Any, tuple[type[Self], str]]:
        """Restore without revalidating; the value was valid when pickled."""
        return (str.__new__, (type(self), str(self)))


def validate_prefix(text: str, profile: Profile = DEFAULT_PROFILE) -> Prefix:
    """Validate ``text`` as a prefix under ``profile``.

    Raises:
        InvalidPrefixError: If the prefix is empty, too long, contains anything
            but lowercase letters, or the profile does not allow prefixes.
    """
    if not profile.delimited:
        raise InvalidPrefixError(f"Prefixes are not allowed without a delimiter, got {str(text)!r}")
    return Prefix(text, max_length=profile.max_prefix_length)


def split_identifier(text: str, profile: Profile = DEFAULT_PROFILE) -> tuple[str | None, str]:
    """Split identifier text into its candidate prefix and suffix.

    The split is deterministic: with a delimited profile there must be at most
    one delimiter, and it may not open or close the text.

    Returns:
        ``(prefix, suffix)``, where ``prefix`` is None if there is no delimiter.

    Raises:
        MalformedDelimiterError: If the delimiter is misplaced or repeated, or
            present at all under a non-delimited profile.
    """
    count = text.count(DELIMITER)
    if count == 0:
        return None, text
    if not profile.delimited:
        raise MalformedDelimiterError(f"No delimiter is allowed, got {text!r}")
    if text.startswith(DELIMITER) or text.endswith(DELIMITER):
        raise MalformedDelimiterError(
            f"Delimiter {DELIMITER!r} cannot start or end an identifier, got {text!r}"
        )
    if count > 1:
        raise MalformedDelimiterError(
            f"Identifier must contain a single {DELIMITER!r} delimiter, found {count}"
        )
    prefix, _, suffix = text.partition(DELIMITER)
    return prefix, suffix


__all__ = ["Prefix", "split_identifier", "validate_prefix"]
