"""Generated strong ID types: one distinct class per kind of identifier.

A generated type binds a payload capability and an optional literal prefix.
Two generated types never compare equal and never parse each other's text,
even when they share a payload capability.

Example:
    >>> class UserId(StrongId, id_type=U16, prefix="user"):
    ...     pass
    >>> str(UserId(3203))
    'user_0343'
    >>> UserId.from_string("user_0343").id
    3203
"""

from __future__ import annotations

import sys
import types
from typing import TYPE_CHECKING, Any, ClassVar, Self, cast, get_origin

from pydantic_core import CoreSchema, core_schema

from strongid.capability import Id, Uuid, is_capability
from strongid.dynamic import DynamicStrongId, check_prefix, format_id, get_id_type, parse_text
from strongid.errors import StrongIdError, SuffixOverflowError
from strongid.log import get_logger
from strongid.prefix import validate_prefix
from strongid.profile import DEFAULT_PROFILE, Profile, UuidVersion


if TYPE_CHECKING:
    import datetime as dt
    from collections.abc import Callable
    from uuid import UUID

    from strongid.prefix import Prefix


logger = get_logger(__name__)


class StrongId:
    """Base class for generated strong ID types.

    Subclass it with class keywords to declare a new identifier kind:

        class OrderId(StrongId, id_type=U64, prefix="order"):
            pass

    Every instance of ``OrderId`` reports the prefix ``'order'``, and parsing
    text with any other prefix (or none) fails with ``PrefixMismatchError``.
    """

    __slots__ = ("_suffix", "_value")

    id_type: ClassVar[type[Id]]
    prefix: ClassVar[str | None] = None
    profile: ClassVar[Profile] = DEFAULT_PROFILE

    def __init_subclass__(
        cls,
        *,
        id_type: type[Id] | None = None,
        prefix: str | None = None,
        profile: Profile | None = None,
        **kwargs: Any,  # noqa: ANN401
    ) -> None:
        """Bind the payload capability, prefix and profile of a generated type.

        Raises:
            TypeError: If no payload capability is given or inherited.
            InvalidPrefixError: If the prefix is invalid under the profile.
        """
        super().__init_subclass__(**kwargs)
        if profile is not None:
            cls.profile = profile
        if id_type is not None:
            if not is_capability(id_type):
                raise TypeError(f"id_type must be a payload capability, got {id_type!r}")
            cls.id_type = id_type
        elif not hasattr(cls, "id_type"):
            raise TypeError(f"{cls.__name__} must be declared with an id_type, e.g. id_type=U64")
        if prefix is not None:
            cls.prefix = prefix
        if cls.prefix is not None:
            cls.prefix = validate_prefix(cls.prefix, cls.profile)

        logger.debug(
            "strongid.type_defined",
            type_name=cls.__qualname__,
            prefix=cls.prefix,
            id_type=cls.id_type.__name__,
            delimited=cls.profile.delimited,
        )

    def __init__(self, value: Any) -> None:  # noqa: ANN401
        """Wrap a payload value.

        Raises:
            TypeError: If ``value`` is not of the payload type.
            SuffixOverflowError: If ``value`` does not fit the payload width.
        """
        self._value = self.id_type.validate(value)
        self._suffix: str | None = None

    @classmethod
    def _from_parts(cls, value: Any, suffix: str | None = None) -> Self:  # noqa: ANN401
        instance = cls.__new__(cls)
        instance._value = value  # noqa: SLF001
        instance._suffix = suffix  # noqa: SLF001
        return instance

    @classmethod
    def from_string(cls, string: str) -> Self:
        """Parse an ID of this type from its string representation.

        Raises:
            MalformedDelimiterError: If the delimiter is misplaced or repeated.
            InvalidPrefixError: If the prefix is invalid.
            PrefixMismatchError: If the prefix is not this type's prefix.
            LengthMismatchError: If the suffix has the wrong length.
            InvalidCharacterError: If the suffix has a non-alphabet character.
            SuffixOverflowError: If the suffix overflows the payload width.
        """
        _, value, suffix = parse_text(
            string,
            cls.id_type,
            cls.profile,
            expected_prefix=cls.prefix,
            check=True,
        )
        return cls._from_parts(value, suffix)

    @classmethod
    def from_int(cls, value: int) -> Self:
        """Create an ID from the unsigned integer form of its payload."""
        if not 0 <= value <= cls.id_type.width.max_value:
            raise SuffixOverflowError(
                f"Value {value} does not fit in {cls.id_type.width.value} bits"
            )
        return cls(cls.id_type.from_int(value))

    @classmethod
    def from_dynamic(cls, dynamic: DynamicStrongId[Any]) -> Self:
        """Convert a dynamic ID, checking its payload type and prefix."""
        if dynamic.id_type is not cls.id_type:
            raise StrongIdError(
                f"Expected {cls.id_type.__name__} payload, got {dynamic.id_type.__name__}"
            )
        check_prefix(dynamic.prefix, cls.prefix)
        return cls(dynamic.id)

    def to_dynamic(self) -> DynamicStrongId[Any]:
        """Return the equivalent dynamic ID."""
        prefix = cast("Prefix | None", self.prefix)
        return DynamicStrongId._from_parts(prefix, self._value, self.id_type, self._suffix)  # noqa: SLF001

    @property
    def id(self) -> Any:  # noqa: ANN401
        """The payload value."""
        return self._value

    @property
    def suffix(self) -> str:
        """The base32-encoded payload."""
        if self._suffix is None:
            self._suffix = self.id_type.encode(self._value)
        return self._suffix

    def __str__(self) -> str:
        return format_id(self.prefix, self.suffix)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    def __int__(self) -> int:
        return self.id_type.to_int(self._value)

    def __hash__(self) -> int:
        return hash((type(self), self._value))

    def __eq__(self, other: object) -> bool:
        """Equal only to IDs of the same generated type with the same payload."""
        if isinstance(other, StrongId):
            return type(self) is type(other) and self._value == other._value
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        """Compare for sorting (by suffix, within one generated type)."""
        if type(other) is type(self):
            return self.suffix < other.suffix  # type: ignore[attr-defined]
        return NotImplemented

    def __le__(self, other: object) -> bool:
        if type(other) is type(self):
            return self.suffix <= other.suffix  # type: ignore[attr-defined]
        return NotImplemented

    def __gt__(self, other: object) -> bool:
        if type(other) is type(self):
            return self.suffix > other.suffix  # type: ignore[attr-defined]
        return NotImplemented

    def __ge__(self, other: object) -> bool:
        if type(other) is type(self):
            return self.suffix >= other.suffix  # type: ignore[attr-defined]
        return NotImplemented

    def __copy__(self) -> Self:
        """Return self (IDs are immutable)."""
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        """Return self (IDs are immutable)."""
        return self

    def __reduce__(self) -> tuple[type[Self], tuple[Any]]:
        """Support pickling for multiprocessing, caching, etc."""
        return (type(self), (self._value,))

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,  # noqa: ANN401
        handler: Any,  # noqa: ANN401
    ) -> CoreSchema:
        """Pydantic integration: validate through ``from_string``, serialize to text."""
        if cls is StrongId or not hasattr(cls, "id_type"):
            raise StrongIdError(f"{cls.__name__} is not a generated strong ID type")

        def validate(v: StrongId | str) -> StrongId:
            if isinstance(v, str):
                return cls.from_string(v)
            if type(v) is cls:
                return v
            if isinstance(v, StrongId):
                raise StrongIdError(f"Expected {cls.__name__}, got {type(v).__name__}")
            raise StrongIdError(f"Expected {cls.__name__} or str, got {type(v).__name__}")

        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema(
                [
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(validate),
                ]
            ),
            python_schema=core_schema.no_info_plain_validator_function(validate),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


class StrongUuid(StrongId, id_type=Uuid):
    """Base class for generated strong IDs backed by a UUID.

    Example:
        class UserId(StrongUuid, prefix="user"):
            pass

        user_id = UserId.now_v7()
        print(user_id)  # user_01h455vb4pex5vsknk084sn02q
    """

    __slots__ = ()

    @classmethod
    def generate(
        cls,
        version: UuidVersion = UuidVersion.V7,
        *args: Any,  # noqa: ANN401
        **kwargs: Any,  # noqa: ANN401
    ) -> Self:
        """Generate a new ID with the given UUID strategy.

        Raises:
            UnsupportedVersionError: If this type's profile does not enable ``version``.
        """
        return cls(Uuid.generate(version, *args, profile=cls.profile, **kwargs))

    @classmethod
    def now_v1(cls, node: int | None = None, clock_seq: int | None = None) -> Self:
        return cls.generate(UuidVersion.V1, node, clock_seq)

    @classmethod
    def new_v3(cls, namespace: UUID, name: str | bytes) -> Self:
        return cls.generate(UuidVersion.V3, namespace, name)

    @classmethod
    def new_v4(cls) -> Self:
        return cls.generate(UuidVersion.V4)

    @classmethod
    def new_v5(cls, namespace: UUID, name: str | bytes) -> Self:
        return cls.generate(UuidVersion.V5, namespace, name)

    @classmethod
    def now_v6(cls, node: int | None = None, clock_seq: int | None = None) -> Self:
        return cls.generate(UuidVersion.V6, node, clock_seq)

    @classmethod
    def now_v7(cls) -> Self:
        return cls.generate(UuidVersion.V7)

    @classmethod
    def new_v8(cls, a: int | None = None, b: int | None = None, c: int | None = None) -> Self:
        return cls.generate(UuidVersion.V8, a, b, c)

    @property
    def uid(self) -> UUID:
        """The underlying UUID."""
        return self._value

    @property
    def datetime(self) -> dt.datetime:
        """The timestamp extracted from a UUIDv7 payload.

        Note:
            This assumes the UUID is a valid UUIDv7. For other versions the
            returned datetime is meaningless.
        """
        return Uuid.datetime(self._value)

    @property
    def timestamp(self) -> float:
        """The Unix timestamp (seconds) from a UUIDv7 payload."""
        return Uuid.timestamp(self._value)


def strong_id(
    name: str,
    id_type: type[Id],
    prefix: str | None = None,
    *,
    profile: Profile | None = None,
    module: str | None = None,
) -> type[StrongId]:
    """Create a generated strong ID type without a class statement.

    UUID-backed types derive from ``StrongUuid`` and get its generators.

    Example:
        UserId = strong_id("UserId", U16, "user")
    """
    # Same approach as collections.namedtuple, so instances can be pickled
    module = module or sys._getframemodulename(1) or "__main__"  # noqa: SLF001
    base = StrongUuid if id_type is Uuid else StrongId
    keywords: dict[str, Any] = {"id_type": id_type, "prefix": prefix}
    if profile is not None:
        keywords["profile"] = profile

    def body(ns: dict[str, Any]) -> None:
        ns["__slots__"] = ()
        ns["__module__"] = module
        ns["__qualname__"] = name

    return types.new_class(name, (base,), keywords, body)


def strong_uuid(
    name: str,
    prefix: str | None = None,
    *,
    profile: Profile | None = None,
    module: str | None = None,
) -> type[StrongUuid]:
    """Create a generated UUID-backed strong ID type.

    Example:
        UserId = strong_uuid("UserId", "user")
        user_id = UserId.now_v7()
    """
    return strong_id(  # type: ignore[return-value]
        name,
        Uuid,
        prefix,
        profile=profile,
        module=module or sys._getframemodulename(1),  # noqa: SLF001
    )


def factory[S: StrongUuid](
    id_class: type[S],
    version: UuidVersion = UuidVersion.V7,
) -> Callable[[], S]:
    """Create a factory function for generating new IDs of a UUID-backed type.

    This is useful with Pydantic's Field(default_factory=...).

    Example:
        class UserId(StrongUuid, prefix="user"):
            pass

        class User(BaseModel):
            id: UserId = Field(default_factory=factory(UserId))
    """
    if not (isinstance(id_class, type) and issubclass(id_class, StrongUuid)):
        raise StrongIdError(f"factory requires a UUID-backed strong ID type, got {id_class!r}")

    def _factory() -> S:
        return id_class.generate(version)

    return _factory


def parse(id_class: Any) -> Callable[[str], Any]:  # noqa: ANN401
    """Create a parse function for converting strings to IDs.

    Accepts a generated type or a parameterized ``DynamicStrongId[...]``.
    The parser raises StrongIdError on invalid input.

    Example:
        parse_user_id = parse(UserId)

        try:
            user_id = parse_user_id("user_0343")
        except StrongIdError as e:
            print(f"Invalid ID: {e}")
    """
    if isinstance(id_class, type) and issubclass(id_class, StrongId):
        if not hasattr(id_class, "id_type"):
            raise StrongIdError(f"{id_class.__name__} is not a generated strong ID type")
        return id_class.from_string

    is_dynamic = isinstance(id_class, type) and issubclass(id_class, DynamicStrongId)
    if is_dynamic or get_origin(id_class) is DynamicStrongId:
        id_type = get_id_type(id_class)

        def _parse(v: str) -> DynamicStrongId[Any]:
            return DynamicStrongId[id_type].from_string(v)

        return _parse

    raise StrongIdError(f"Cannot build a parser for {id_class!r}")


__all__ = ["StrongId", "StrongUuid", "factory", "parse", "strong_id", "strong_uuid"]
