"""Strong IDs validated at runtime, with the prefix carried per instance."""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Protocol,
    Self,
    get_args,
    get_origin,
    runtime_checkable,
)

from pydantic_core import CoreSchema, core_schema

from strongid.capability import Id, Uuid, is_capability
from strongid.errors import (
    MissingPrefixError,
    PrefixMismatchError,
    StrongIdError,
    SuffixOverflowError,
    UnexpectedPrefixError,
)
from strongid.prefix import Prefix, split_identifier, validate_prefix
from strongid.profile import DEFAULT_PROFILE, DELIMITER, Profile, UuidVersion


if TYPE_CHECKING:
    import datetime as dt
    from uuid import UUID


@runtime_checkable
class StrongIdType(Protocol):
    """Protocol for any strong ID, dynamic or generated.

    Example:
        def log_entity(entity_id: StrongIdType) -> None:
            print(f"{entity_id.prefix} -> {entity_id.id}")
    """

    __slots__ = ()

    @property
    def prefix(self) -> str | None:
        """The prefix (e.g. 'user'), or None for bare IDs."""
        ...

    @property
    def id(self) -> Any:  # noqa: ANN401
        """The decoded payload value."""
        ...

    @property
    def suffix(self) -> str:
        """The base32-encoded payload."""
        ...

    def __str__(self) -> str:
        """String representation as '<prefix>_<suffix>' or '<suffix>'."""
        ...


def format_id(prefix: str | None, suffix: str) -> str:
    """Join a prefix and an encoded suffix into identifier text."""
    if prefix is None:
        return suffix
    return f"{prefix}{DELIMITER}{suffix}"


def check_prefix(found: str | None, expected: str | None) -> None:
    """Require the parsed prefix to equal the expected one.

    Raises:
        MissingPrefixError: If a prefix was expected and none was found.
        UnexpectedPrefixError: If no prefix was expected and one was found.
        PrefixMismatchError: If both are present and differ.
    """
    if found == expected:
        return
    # Errors carry plain strings, not Prefix instances
    if found is None:
        raise MissingPrefixError(str(expected))
    if expected is None:
        raise UnexpectedPrefixError(str(found))
    raise PrefixMismatchError(str(expected), str(found))


def parse_text(
    text: str,
    id_type: type[Id],
    profile: Profile = DEFAULT_PROFILE,
    *,
    expected_prefix: str | None = None,
    check: bool = False,
) -> tuple[Prefix | None, Any, str]:
    """Parse identifier text into ``(prefix, value, suffix)``.

    The text is split, the prefix validated, compared to ``expected_prefix``
    when ``check`` is set, and only then is the suffix decoded.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected str, got {type(text).__name__}")

    raw_prefix, suffix = split_identifier(text, profile)
    prefix = None if raw_prefix is None else validate_prefix(raw_prefix, profile)
    if check:
        check_prefix(prefix, expected_prefix)
    return prefix, id_type.decode(suffix), suffix


class DynamicStrongId[T: Id]:
    """A strong ID whose prefix is chosen at runtime.

    Pairs an optional validated prefix with a payload of capability ``T``.
    Text round-trips exactly: ``str(DynamicStrongId.from_string(s, T)) == s``
    for any canonical ``s``.

    Example:
        >>> user_id = DynamicStrongId("user", 3203, U16)
        >>> str(user_id)
        'user_0343'
        >>> DynamicStrongId.from_string("user_0343", U16).id
        3203

    Subscripting binds the payload capability, so it no longer has to be
    passed explicitly:

        >>> DynamicStrongId[U16].from_string("user_0343").id
        3203

    Note:
        Ordering compares the text form. It agrees with numeric order only
        between IDs of the same width and prefix.
    """

    __slots__ = ("_id_type", "_prefix", "_suffix", "_value")

    # Set on the subclasses created by DynamicStrongId[<capability>]
    bound_id_type: ClassVar[type[Id] | None] = None
    _bound_types: ClassVar[dict[tuple[type, type[Id]], type[DynamicStrongId[Any]]]] = {}

    def __class_getitem__(cls, item: Any) -> Any:  # noqa: ANN401
        if not is_capability(item):
            # Type variables and the like keep plain typing semantics
            return super().__class_getitem__(item)  # type: ignore[misc]
        if cls.bound_id_type is not None:
            raise TypeError(f"{cls.__name__} is already bound to a payload capability")
        bound = cls._bound_types.get((cls, item))
        if bound is None:
            name = f"{cls.__name__}[{item.__name__}]"
            namespace = {
                "__slots__": (),
                "__module__": cls.__module__,
                "__qualname__": name,
                "bound_id_type": item,
            }
            bound = cls._bound_types.setdefault((cls, item), type(name, (cls,), namespace))
        return bound

    @classmethod
    def _resolve_id_type(cls, id_type: type[Id] | None) -> type[Id]:
        """Pick the payload capability: explicit, bound by subscripting, or Uuid."""
        bound = cls.bound_id_type
        if id_type is None:
            return bound or Uuid
        if not is_capability(id_type):
            raise TypeError(f"id_type must be a payload capability, got {id_type!r}")
        if bound is not None and id_type is not bound:
            raise TypeError(f"{cls.__name__} carries {bound.__name__}, got {id_type.__name__}")
        return id_type

    def __init__(
        self,
        prefix: str | None,
        value: Any,  # noqa: ANN401
        id_type: type[T] | None = None,
        *,
        profile: Profile = DEFAULT_PROFILE,
    ) -> None:
        """Initialize from a prefix and a payload value.

        Args:
            prefix: The prefix, or None for a bare ID.
            value: The payload, an ``int`` or ``UUID`` depending on ``id_type``.
            id_type: The payload capability (``U8`` ... ``U128``, ``USize``, ``Uuid``).
                Defaults to the subscripted capability, or ``Uuid``.
            profile: Grammar profile used to validate the prefix.

        Raises:
            InvalidPrefixError: If ``prefix`` is not valid under ``profile``.
            SuffixOverflowError: If ``value`` does not fit ``id_type``.
            TypeError: If ``id_type`` conflicts with the subscripted capability.
        """
        id_type = self._resolve_id_type(id_type)
        self._prefix = None if prefix is None else validate_prefix(prefix, profile)
        self._value = id_type.validate(value)
        self._id_type = id_type
        self._suffix: str | None = None

    @classmethod
    def _from_parts(
        cls,
        prefix: Prefix | None,
        value: Any,  # noqa: ANN401
        id_type: type[T],
        suffix: str | None = None,
    ) -> Self:
        instance = cls.__new__(cls)
        instance._prefix = prefix  # noqa: SLF001
        instance._value = value  # noqa: SLF001
        instance._id_type = id_type  # noqa: SLF001
        instance._suffix = suffix  # noqa: SLF001
        return instance

    @classmethod
    def plain(cls, value: Any, id_type: type[T] | None = None) -> Self:  # noqa: ANN401
        """Create an ID without a prefix."""
        return cls(None, value, id_type)

    @classmethod
    def from_int(
        cls,
        prefix: str | None,
        value: int,
        id_type: type[T] | None = None,
        *,
        profile: Profile = DEFAULT_PROFILE,
    ) -> Self:
        """Create an ID from the unsigned integer form of its payload.

        Raises:
            SuffixOverflowError: If ``value`` does not fit ``id_type``.
        """
        id_type = cls._resolve_id_type(id_type)
        if not 0 <= value <= id_type.width.max_value:
            raise SuffixOverflowError(
                f"Value {value} does not fit in {id_type.width.value} bits"
            )
        return cls(prefix, id_type.from_int(value), id_type, profile=profile)

    @classmethod
    def generate(
        cls,
        prefix: str | None = None,
        version: UuidVersion = UuidVersion.V7,
        *args: Any,  # noqa: ANN401
        profile: Profile = DEFAULT_PROFILE,
        **kwargs: Any,  # noqa: ANN401
    ) -> DynamicStrongId[Uuid]:
        """Generate a UUID-backed ID with the given strategy.

        Extra arguments are passed to the UUID generator.

        Raises:
            InvalidPrefixError: If ``prefix`` is not valid under ``profile``.
            UnsupportedVersionError: If ``profile`` does not enable ``version``.
            TypeError: If the class is bound to a non-UUID capability.
        """
        id_type = cls._resolve_id_type(Uuid)
        value = Uuid.generate(version, *args, profile=profile, **kwargs)
        return cls(prefix, value, id_type, profile=profile)  # type: ignore[return-value]

    @classmethod
    def now_v7(cls, prefix: str | None = None) -> DynamicStrongId[Uuid]:
        """Generate a time-ordered UUIDv7-backed ID."""
        return cls.generate(prefix, UuidVersion.V7)

    @classmethod
    def new_v4(cls, prefix: str | None = None) -> DynamicStrongId[Uuid]:
        """Generate a random UUIDv4-backed ID."""
        return cls.generate(prefix, UuidVersion.V4)

    @classmethod
    def from_string(
        cls,
        string: str,
        id_type: type[T] | None = None,
        *,
        expected_prefix: str | None = None,
        profile: Profile = DEFAULT_PROFILE,
    ) -> Self:
        """Parse an ID from its string representation.

        Args:
            string: The text to parse (format: '<prefix>_<suffix>' or '<suffix>').
            id_type: The payload capability of the suffix.
            expected_prefix: If given, the parsed prefix must equal it.
            profile: Grammar profile.

        Raises:
            MalformedDelimiterError: If the delimiter is misplaced or repeated.
            InvalidPrefixError: If the prefix is invalid.
            PrefixMismatchError: If the prefix differs from ``expected_prefix``.
            LengthMismatchError: If the suffix has the wrong length.
            InvalidCharacterError: If the suffix has a non-alphabet character.
            SuffixOverflowError: If the suffix overflows the payload width.
        """
        id_type = cls._resolve_id_type(id_type)
        prefix, value, suffix = parse_text(
            string,
            id_type,
            profile,
            expected_prefix=expected_prefix,
            check=expected_prefix is not None,
        )
        return cls._from_parts(prefix, value, id_type, suffix)

    @property
    def prefix(self) -> str | None:
        """The prefix, or None for a bare ID."""
        return self._prefix

    @property
    def id(self) -> Any:  # noqa: ANN401
        """The payload value."""
        return self._value

    @property
    def id_type(self) -> type[T]:
        """The payload capability."""
        return self._id_type

    @property
    def suffix(self) -> str:
        """The base32-encoded payload."""
        if self._suffix is None:
            self._suffix = self._id_type.encode(self._value)
        return self._suffix

    @property
    def datetime(self) -> dt.datetime:
        """The timestamp of a UUIDv7 payload.

        Raises:
            TypeError: If the payload is not a UUID.
        """
        return Uuid.datetime(self._uuid())

    @property
    def timestamp(self) -> float:
        """The Unix timestamp (seconds) of a UUIDv7 payload."""
        return Uuid.timestamp(self._uuid())

    def _uuid(self) -> UUID:
        if self._id_type is not Uuid:
            raise TypeError(f"{self._id_type.__name__} payloads carry no timestamp")
        return self._value

    def __str__(self) -> str:
        """Return '<prefix>_<suffix>', or '<suffix>' without a prefix."""
        return format_id(self._prefix, self.suffix)

    def __repr__(self) -> str:
        return f"DynamicStrongId[{self._id_type.__name__}]({str(self)!r})"

    def _key(self) -> tuple[type[Id], str | None, Any]:
        return (self._id_type, self._prefix, self._value)

    def __hash__(self) -> int:
        return hash(self._key())

    def __eq__(self, other: object) -> bool:
        """Equal when id type, prefix and payload are all equal."""
        if isinstance(other, DynamicStrongId):
            return self._key() == other._key()
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        """Compare for sorting (by text form)."""
        if isinstance(other, DynamicStrongId):
            return str(self) < str(other)
        return NotImplemented

    def __le__(self, other: object) -> bool:
        if isinstance(other, DynamicStrongId):
            return str(self) <= str(other)
        return NotImplemented

    def __gt__(self, other: object) -> bool:
        if isinstance(other, DynamicStrongId):
            return str(self) > str(other)
        return NotImplemented

    def __ge__(self, other: object) -> bool:
        if isinstance(other, DynamicStrongId):
            return str(self) >= str(other)
        return NotImplemented

    def __copy__(self) -> Self:
        """Return self (IDs are immutable)."""
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        """Return self (IDs are immutable)."""
        return self

    def __reduce__(self) -> tuple[Any, tuple[Any, ...]]:
        """Support pickling for multiprocessing, caching, etc."""
        return (_restore, (self._prefix, self._value, self._id_type))

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,  # noqa: ANN401
        handler: Any,  # noqa: ANN401
    ) -> CoreSchema:
        """Pydantic integration: validate from text, serialize to text."""
        id_type = get_id_type(source_type)

        def validate(v: DynamicStrongId[Any] | str) -> DynamicStrongId[Any]:
            if isinstance(v, str):
                return cls.from_string(v, id_type)
            if isinstance(v, DynamicStrongId):
                if v.id_type is not id_type:
                    raise StrongIdError(
                        f"Expected {id_type.__name__} payload, got {v.id_type.__name__}"
                    )
                return v
            raise StrongIdError(f"Expected DynamicStrongId or str, got {type(v).__name__}")

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


def _restore(prefix: Prefix | None, value: Any, id_type: type[Id]) -> DynamicStrongId[Any]:  # noqa: ANN401
    return DynamicStrongId[id_type]._from_parts(prefix, value, id_type)  # noqa: SLF001


def get_id_type(source_type: Any) -> type[Id]:  # noqa: ANN401
    """Extract the capability from a parameterized type like ``DynamicStrongId[U16]``."""
    bound = getattr(source_type, "bound_id_type", None)
    if bound is not None:
        return bound
    if get_origin(source_type) is None:
        raise StrongIdError(
            "DynamicStrongId must be parameterized with a payload capability, "
            "e.g. DynamicStrongId[U16]"
        )
    args = get_args(source_type)
    id_type = args[0] if args else None
    if not is_capability(id_type):
        raise StrongIdError(f"Could not extract a payload capability from {source_type}")
    return id_type  # type: ignore[return-value]


__all__ = [
    "DynamicStrongId",
    "StrongIdType",
    "check_prefix",
    "format_id",
    "get_id_type",
    "parse_text",
]
