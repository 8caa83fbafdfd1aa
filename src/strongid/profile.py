"""Compatibility profiles: which grammar and UUID strategies are enabled."""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


# Matches the TypeID convention: prefixes of 64 characters or more are rejected
PREFIX_MAX_LENGTH = 63

DELIMITER = "_"


class UuidVersion(IntEnum):
    """UUID generation strategies, keyed by RFC 9562 version number."""

    V1 = 1
    V3 = 3
    V4 = 4
    V5 = 5
    V6 = 6
    V7 = 7
    V8 = 8


class Profile(BaseModel):
    """Configuration of the identifier grammar.

    Attributes:
        delimited: Recognise ``_`` between prefix and suffix. When disabled no
            delimiter is accepted and identifiers are bare suffixes.
        max_prefix_length: Longest accepted prefix.
        uuid_versions: UUID versions that may be generated.
    """

    model_config = ConfigDict(frozen=True)

    delimited: bool = True
    max_prefix_length: int = Field(default=PREFIX_MAX_LENGTH, ge=1)
    uuid_versions: frozenset[UuidVersion] = Field(default_factory=lambda: frozenset(UuidVersion))


DEFAULT_PROFILE = Profile()

# Bare TypeID-style suffixes: no prefixes, time-ordered UUIDs only
STRICT_PROFILE = Profile(delimited=False, uuid_versions=frozenset({UuidVersion.V7}))


__all__ = [
    "DEFAULT_PROFILE",
    "DELIMITER",
    "PREFIX_MAX_LENGTH",
    "STRICT_PROFILE",
    "Profile",
    "UuidVersion",
]
