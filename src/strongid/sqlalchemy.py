"""SQLAlchemy integration for strong IDs.

Provides a TypeDecorator and helpers for using generated strong ID types as
typed columns that store their text form as TEXT in the database.

Example:
    from sqlalchemy.orm import DeclarativeBase, Mapped
    from strongid import StrongUuid
    from strongid.sqlalchemy import strong_id_column

    class UserId(StrongUuid, prefix="user"):
        pass

    class OrgId(StrongUuid, prefix="org"):
        pass

    class Base(DeclarativeBase):
        pass

    class User(Base):
        __tablename__ = "users"

        id: Mapped[UserId] = strong_id_column(UserId, primary_key=True)
        org_id: Mapped[OrgId | None] = strong_id_column(OrgId)
        name: Mapped[str]
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypedDict, Unpack, cast

from sqlalchemy import Text
from sqlalchemy.orm import mapped_column
from sqlalchemy.types import TypeDecorator

from strongid.errors import StrongIdError
from strongid.log import get_logger
from strongid.strongid import StrongId


if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Dialect
    from sqlalchemy.orm import MappedColumn


logger = get_logger(__name__)


class StrongIdColumnKwargs(TypedDict, total=False):
    """Keyword arguments for strong_id_column, matching mapped_column's common options."""

    primary_key: bool
    nullable: bool
    default: object
    default_factory: Callable[[], object]
    index: bool
    unique: bool
    insert_default: object
    onupdate: object


class StrongIdColumn(TypeDecorator[StrongId]):
    """SQLAlchemy TypeDecorator storing a generated strong ID as TEXT.

    Serializes IDs to their text form on write and parses them back into
    instances of the generated type on read.

    Args:
        id_class: The generated strong ID type stored in this column.

    Example:
        id: Mapped[UserId] = mapped_column(StrongIdColumn(UserId), primary_key=True)
    """

    impl = Text
    cache_ok = True

    def __init__(self, id_class: type[StrongId]) -> None:
        """Initialize with the generated type stored in the column."""
        self.id_class = id_class
        super().__init__()

    def process_bind_param(
        self,
        value: StrongId | str | None,
        dialect: Dialect,  # noqa: ARG002
    ) -> str | None:
        """Convert an ID to text for database storage.

        Strings are parsed before storing, so a wrong prefix or a malformed
        suffix is caught at write time rather than read time.
        """
        if value is None:
            return None
        if isinstance(value, StrongId):
            if type(value) is not self.id_class:
                logger.debug(
                    "strongid.column.rejected",
                    expected=self.id_class.__name__,
                    got=type(value).__name__,
                )
                msg = f"Expected {self.id_class.__name__}, got {type(value).__name__}"
                raise StrongIdError(msg)
            return str(value)
        return str(self.id_class.from_string(value))

    def process_result_value(
        self,
        value: str | None,
        dialect: Dialect,  # noqa: ARG002
    ) -> StrongId | None:
        """Convert database text to an instance of the generated type."""
        if value is None:
            return None
        return self.id_class.from_string(value)


def _check_id_class(id_class: Any) -> type[StrongId]:  # noqa: ANN401
    """Require a generated type; raise TypeError for anything else in SQLAlchemy context."""
    if not (
        isinstance(id_class, type) and issubclass(id_class, StrongId) and hasattr(id_class, "id_type")
    ):
        msg = f"Column type must be a generated strong ID type, got {id_class!r}"
        raise TypeError(msg)
    return id_class


def strong_id_column[T: StrongId](
    id_class: type[T],
    **kwargs: Unpack[StrongIdColumnKwargs],
) -> MappedColumn[T]:
    """Create a mapped_column for a generated strong ID type (pure SQLAlchemy).

    Args:
        id_class: A generated type such as ``UserId``.
        **kwargs: Additional arguments passed to mapped_column.
            Supports: primary_key, nullable, default, default_factory,
            index, unique, insert_default, onupdate.

    Returns:
        A mapped_column configured with the appropriate StrongIdColumn.
    """
    return mapped_column(StrongIdColumn(_check_id_class(id_class)), **kwargs)


class StrongIdFieldKwargs(TypedDict, total=False):
    """Keyword arguments for strong_id_field, matching SQLModel Field's common options."""

    default: object
    default_factory: Callable[[], object]
    primary_key: bool
    index: bool
    unique: bool


def strong_id_field[T: StrongId](
    id_class: type[T],
    **kwargs: Unpack[StrongIdFieldKwargs],
) -> Any:  # noqa: ANN401 - return type matches SQLModel's Field
    """Create a SQLModel Field for a generated strong ID type.

    Example:
        from sqlmodel import SQLModel
        from strongid import factory
        from strongid.sqlalchemy import strong_id_field

        class User(SQLModel, table=True):
            id: UserId = strong_id_field(UserId, default_factory=factory(UserId), primary_key=True)
            org_id: OrgId | None = strong_id_field(OrgId, default=None)
    """
    # Import here to avoid hard dependency on sqlmodel
    from sqlmodel import Field

    # SQLModel's sa_type is typed as type[Any] but accepts TypeEngine instances.
    sa_type = cast("type[Any]", StrongIdColumn(_check_id_class(id_class)))
    return Field(sa_type=sa_type, **kwargs)


__all__ = ["StrongIdColumn", "strong_id_column", "strong_id_field"]
