"""Strongly typed, base32 encoded IDs with optional prefixes."""

from __future__ import annotations

from strongid.base32 import ALPHABET, Width, encoded_length
from strongid.capability import U8, U16, U32, U64, U128, Id, UInt, USize, Uuid
from strongid.dynamic import DynamicStrongId, StrongIdType
from strongid.errors import (
    InvalidCharacterError,
    InvalidPrefixError,
    LengthMismatchError,
    MalformedDelimiterError,
    MissingPrefixError,
    PrefixMismatchError,
    StrongIdError,
    SuffixOverflowError,
    UnexpectedPrefixError,
    UnsupportedVersionError,
)
from strongid.prefix import Prefix, split_identifier, validate_prefix
from strongid.profile import (
    DEFAULT_PROFILE,
    DELIMITER,
    PREFIX_MAX_LENGTH,
    STRICT_PROFILE,
    Profile,
    UuidVersion,
)
from strongid.strongid import StrongId, StrongUuid, factory, parse, strong_id, strong_uuid


__all__ = [
    "ALPHABET",
    "DEFAULT_PROFILE",
    "DELIMITER",
    "PREFIX_MAX_LENGTH",
    "STRICT_PROFILE",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "DynamicStrongId",
    "Id",
    "InvalidCharacterError",
    "InvalidPrefixError",
    "LengthMismatchError",
    "MalformedDelimiterError",
    "MissingPrefixError",
    "Prefix",
    "PrefixMismatchError",
    "Profile",
    "StrongId",
    "StrongIdError",
    "StrongIdType",
    "StrongUuid",
    "SuffixOverflowError",
    "UInt",
    "USize",
    "UnexpectedPrefixError",
    "UnsupportedVersionError",
    "Uuid",
    "UuidVersion",
    "Width",
    "encoded_length",
    "factory",
    "parse",
    "split_identifier",
    "strong_id",
    "strong_uuid",
    "validate_prefix",
]
