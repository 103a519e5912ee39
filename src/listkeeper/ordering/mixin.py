"""Host-side interface for orderable entities.

Example:

    class TodoItem(OrderableMixin, Base):
        __tablename__ = "todo_item"
        __list_config__ = ListConfig(scope="todo_list")

        id: Mapped[int] = mapped_column(Integer, primary_key=True)
        todo_list_id: Mapped[int] = mapped_column(ForeignKey("todo_list.id"))
        position: Mapped[int | None] = mapped_column(Integer, nullable=True)
        updated_at: Mapped[datetime] = mapped_column(
            DateTime(timezone=True), default=write_stamp, onupdate=write_stamp
        )

    item.set_list_position(1)
    item.lower_item()
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import func, select
from sqlalchemy.orm import Session, object_session
from sqlalchemy.sql.elements import ColumnElement

from .config import ListBinding
from .lifecycle import register


@runtime_checkable
class Orderable(Protocol):
    """Capabilities the ordering engine needs from a host entity."""

    @property
    def list_position(self) -> int | None: ...

    @list_position.setter
    def list_position(self, value: int | None) -> None: ...

    def scope_values(self) -> dict[str, Any]: ...

    @property
    def last_modified(self) -> datetime | None: ...


class OrderableMixin:
    """Declarative mixin keeping a mapped class's rows in ordered lists.

    Subclasses declare ``__list_config__``; the configuration is bound and
    the flush listeners are registered when the class is created. Place the
    mixin before the declarative base in the class bases.
    """

    def __init_subclass__(cls, **kw: Any) -> None:
        super().__init_subclass__(**kw)
        if "__list_config__" not in cls.__dict__ or cls.__dict__.get("__abstract__", False):
            return
        binding = ListBinding.bind(cls, cls.__list_config__)
        cls.__list_binding__ = binding
        register(cls, binding)

    # --- Orderable -------------------------------------------------------------------
    @property
    def list_position(self) -> int | None:
        return getattr(self, self.__list_binding__.position_key)

    @list_position.setter
    def list_position(self, value: int | None) -> None:
        setattr(self, self.__list_binding__.position_key, value)

    def scope_values(self) -> dict[str, Any]:
        return self.__list_binding__.scope.values(self)

    @property
    def last_modified(self) -> datetime | None:
        return getattr(self, self.__list_binding__.timestamp_key)

    # --- Query helpers ---------------------------------------------------------------
    @classmethod
    def in_list(cls) -> ColumnElement[bool]:
        """Criterion matching rows that have a position."""
        return cls.__list_binding__.position_column.is_not(None)

    @classmethod
    def list_order(cls) -> list[ColumnElement[Any]]:
        """Ordering clauses for displaying a list."""
        return cls.__list_binding__.display_order()

    def _list_session(self) -> Session:
        session = object_session(self)
        if session is None:
            raise ValueError(f"{self!r} is not attached to a session")
        return session

    def _siblings(self):
        binding = self.__list_binding__
        return select(binding.table).where(binding.scope_condition(self))

    def _load_siblings(self, stmt) -> list[Any]:
        # from_statement loads the rows as-is; loader criteria are not added.
        cls = self.__list_binding__.mapper.class_
        return list(self._list_session().scalars(select(cls).from_statement(stmt)))

    def is_first(self) -> bool:
        return self.list_position == self.__list_binding__.top_of_list

    def is_last(self) -> bool:
        position = self.list_position
        return position is not None and position == self.bottom_position_in_list()

    def bottom_position_in_list(self) -> int | None:
        """Return the largest position in this row's list."""
        binding = self.__list_binding__
        return self._list_session().execute(
            select(func.max(binding.position_column)).where(binding.scope_condition(self))
        ).scalar()

    def higher_items(self, limit: int | None = None) -> list[Any]:
        """Return up to ``limit`` items above this one, nearest last.

        All higher items are returned when ``limit`` is None.
        """
        position = self.list_position
        if position is None:
            return []
        column = self.__list_binding__.position_column
        stmt = self._siblings().where(column < position)
        if limit is not None:
            stmt = stmt.where(column >= position - limit).limit(limit)
        return self._load_siblings(stmt.order_by(column.asc()))

    def higher_item(self) -> Any | None:
        items = self.higher_items(1)
        return items[0] if items else None

    def lower_items(self, limit: int | None = None) -> list[Any]:
        """Return up to ``limit`` items below this one, nearest first.

        All lower items are returned when ``limit`` is None.
        """
        position = self.list_position
        if position is None:
            return []
        column = self.__list_binding__.position_column
        stmt = self._siblings().where(column > position)
        if limit is not None:
            stmt = stmt.where(column <= position + limit).limit(limit)
        return self._load_siblings(stmt.order_by(column.asc()))

    def lower_item(self) -> Any | None:
        items = self.lower_items(1)
        return items[0] if items else None

    def default_position(self) -> int | None:
        """Return the scalar default of the position column, if any."""
        default = self.__list_binding__.position_column.default
        if default is None or not default.is_scalar:
            return None
        return default.arg

    def is_default_position(self) -> bool:
        default = self.default_position()
        return default is not None and int(default) == self.list_position

    # --- Mutations -------------------------------------------------------------------
    def set_list_position(self, position: int | None) -> None:
        """Write ``position``, flush, and load the normalized value."""
        session = self._list_session()
        self.list_position = position
        session.flush()
        self.reload_position()

    def reload_position(self) -> None:
        self._list_session().refresh(self, [self.__list_binding__.position_key])
