"""Payload capabilities: what a type must provide to be used as a suffix.

A capability is a class, never instantiated, that fixes a bit width and converts
payload values to and from unsigned integers of that width. ``Uuid`` also knows
how to generate fresh values through the standard library ``uuid`` module.

Example:
    >>> U16.encode(3203)
    '0343'
    >>> Uuid.decode("01h455vb4pex5vsknk084sn02q")
    UUID('01890a5d-ac96-774b-bcce-b302099a8057')
"""

from __future__ import annotations

from datetime import UTC
from datetime import datetime as dt_datetime
from typing import Any, ClassVar
from uuid import UUID, uuid1, uuid3, uuid4, uuid5, uuid6, uuid7, uuid8

from strongid import base32
from strongid.base32 import Width
from strongid.errors import SuffixOverflowError, UnsupportedVersionError
from strongid.profile import DEFAULT_PROFILE, Profile, UuidVersion


# UUIDv7 timestamp extraction (RFC 9562):
# Bits 0-47 contain 48-bit Unix timestamp in milliseconds
_UUIDV7_TIMESTAMP_SHIFT = 80
_MS_PER_SECOND = 1000


class Id:
    """Base capability for suffix payloads.

    Subclasses set ``width`` and ``value_type`` and implement ``to_int`` and
    ``from_int``. ``from_int`` is only called with values already known to fit
    the width, so it cannot fail.
    """

    __slots__ = ()

    width: ClassVar[Width]
    value_type: ClassVar[type]

    def __new__(cls, *args: Any, **kwargs: Any) -> Id:  # noqa: ANN401
        raise TypeError(f"{cls.__name__} is a capability and cannot be instantiated")

    @classmethod
    def to_int(cls, value: Any) -> int:  # noqa: ANN401
        raise NotImplementedError

    @classmethod
    def from_int(cls, value: int) -> Any:  # noqa: ANN401
        raise NotImplementedError

    @classmethod
    def validate(cls, value: Any) -> Any:  # noqa: ANN401
        """Check that ``value`` is a payload of this capability.

        Raises:
            TypeError: If ``value`` is not of ``value_type``.
            SuffixOverflowError: If ``value`` does not fit ``width``.
        """
        if not isinstance(value, cls.value_type) or isinstance(value, bool):
            raise TypeError(
                f"{cls.__name__} expects {cls.value_type.__name__}, got {type(value).__name__}"
            )
        return value

    @classmethod
    def encode(cls, value: Any) -> str:  # noqa: ANN401
        return base32.encode(cls.to_int(value), cls.width)

    @classmethod
    def decode(cls, text: str) -> Any:  # noqa: ANN401
        return cls.from_int(base32.decode(text, cls.width))


class UInt(Id):
    """Unsigned integer payload of a fixed width."""

    __slots__ = ()

    value_type = int

    @classmethod
    def to_int(cls, value: int) -> int:
        return value

    @classmethod
    def from_int(cls, value: int) -> int:
        return value

    @classmethod
    def validate(cls, value: int) -> int:
        super().validate(value)
        if not 0 <= value <= cls.width.max_value:
            raise SuffixOverflowError(
                f"{cls.__name__} value must be in 0..{cls.width.max_value}, got {value}"
            )
        return value


class U8(UInt):
    __slots__ = ()
    width = Width.W8


class U16(UInt):
    __slots__ = ()
    width = Width.W16


class U32(UInt):
    __slots__ = ()
    width = Width.W32


class U64(UInt):
    __slots__ = ()
    width = Width.W64


class U128(UInt):
    __slots__ = ()
    width = Width.W128


class USize(UInt):
    """Unsigned integer as wide as a native pointer."""

    __slots__ = ()
    width = Width.NATIVE


_GENERATORS = {
    UuidVersion.V1: uuid1,
    UuidVersion.V3: uuid3,
    UuidVersion.V4: uuid4,
    UuidVersion.V5: uuid5,
    UuidVersion.V6: uuid6,
    UuidVersion.V7: uuid7,
    UuidVersion.V8: uuid8,
}


class Uuid(Id):
    """128-bit UUID payload, encoded from its big-endian integer value."""

    __slots__ = ()

    width = Width.W128
    value_type = UUID

    @classmethod
    def to_int(cls, value: UUID) -> int:
        return value.int

    @classmethod
    def from_int(cls, value: int) -> UUID:
        return UUID(int=value)

    @classmethod
    def generate(
        cls,
        version: UuidVersion = UuidVersion.V7,
        *args: Any,  # noqa: ANN401
        profile: Profile = DEFAULT_PROFILE,
        **kwargs: Any,  # noqa: ANN401
    ) -> UUID:
        """Generate a fresh UUID with the given strategy.

        Extra arguments are passed to the matching ``uuid.uuidN`` function, e.g.
        ``Uuid.generate(UuidVersion.V5, NAMESPACE_DNS, "example.com")``.

        Raises:
            UnsupportedVersionError: If ``profile`` does not enable ``version``.
        """
        version = UuidVersion(version)
        if version not in profile.uuid_versions:
            enabled = ", ".join(f"v{v.value}" for v in sorted(profile.uuid_versions))
            raise UnsupportedVersionError(
                f"UUID v{version.value} is not enabled (enabled: {enabled or 'none'})"
            )
        return _GENERATORS[version](*args, **kwargs)

    @classmethod
    def timestamp(cls, value: UUID) -> float:
        """The Unix timestamp (seconds) carried by a UUIDv7.

        Note:
            For UUIDs of other versions the result is meaningless.
        """
        ms = value.int >> _UUIDV7_TIMESTAMP_SHIFT
        return ms / _MS_PER_SECOND

    @classmethod
    def datetime(cls, value: UUID) -> dt_datetime:
        """The UTC datetime carried by a UUIDv7."""
        return dt_datetime.fromtimestamp(cls.timestamp(value), tz=UTC)


def is_capability(obj: object) -> bool:
    """Return True if ``obj`` is a concrete payload capability class."""
    return isinstance(obj, type) and issubclass(obj, Id) and hasattr(obj, "width")


__all__ = [
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "Id",
    "UInt",
    "USize",
    "Uuid",
    "UuidVersion",
    "is_capability",
]
