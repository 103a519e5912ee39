"""Orderable models used by the ordering tests.

Each model gets its own table built from the shared ``MixinColumns``.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from listkeeper.db.time import utcnow, write_stamp
from listkeeper.ordering import ListConfig, OrderableMixin, PredicateScope


class ListTestBase(DeclarativeBase):
    """Declarative base for test-only models."""


class MixinColumns:
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    pos: Mapped[int | None] = mapped_column(Integer, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    parent_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    parent_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=write_stamp, onupdate=write_stamp
    )


class ListMixin(OrderableMixin, MixinColumns, ListTestBase):
    __tablename__ = "list_mixin"
    __list_config__ = ListConfig(column="pos", scope="parent")


class StringScopeMixin(OrderableMixin, MixinColumns, ListTestBase):
    __tablename__ = "string_scope_mixin"
    __list_config__ = ListConfig(column="pos", scope="parent_id = :parent_id")


class ArrayScopeMixin(OrderableMixin, MixinColumns, ListTestBase):
    __tablename__ = "array_scope_mixin"
    __list_config__ = ListConfig(column="pos", scope=["parent_id", "parent_type"])


class CallableScopeMixin(OrderableMixin, MixinColumns, ListTestBase):
    __tablename__ = "callable_scope_mixin"
    __list_config__ = ListConfig(
        column="pos",
        scope=PredicateScope(
            lambda item: CallableScopeMixin.__table__.c.parent_id == item.parent_id,
            ("parent_id",),
        ),
    )


class ZeroBasedMixin(OrderableMixin, MixinColumns, ListTestBase):
    __tablename__ = "zero_based_mixin"
    __list_config__ = ListConfig(column="pos", top_of_list=0, scope=["parent_id"])


class WholeTableMixin(OrderableMixin, MixinColumns, ListTestBase):
    __tablename__ = "whole_table_mixin"
    __list_config__ = ListConfig(column="pos")


class TopAdditionMixin(OrderableMixin, MixinColumns, ListTestBase):
    __tablename__ = "top_addition_mixin"
    __list_config__ = ListConfig(column="pos", add_new_at="top", scope="parent_id")


class NoAdditionMixin(OrderableMixin, MixinColumns, ListTestBase):
    __tablename__ = "no_addition_mixin"
    __list_config__ = ListConfig(column="pos", add_new_at=None, scope="parent_id")


class DefaultPositionMixin(OrderableMixin, MixinColumns, ListTestBase):
    __tablename__ = "default_position_mixin"
    __list_config__ = ListConfig(column="pos", scope="parent_id")

    pos: Mapped[int | None] = mapped_column(Integer, nullable=True, default=0)


def create_items(session: Session, model: type, count: int, **values) -> list:
    """Insert ``count`` rows one flush at a time, like separate saves."""
    items = []
    for _ in range(count):
        item = model(**values)
        session.add(item)
        session.flush()
        items.append(item)
    return items


def positions(session: Session, model: type, **filters) -> list[int | None]:
    """Return stored positions ordered by id, read straight from the table."""
    table = model.__table__
    stmt = select(table.c.pos).order_by(table.c.id)
    for name, value in filters.items():
        stmt = stmt.where(table.c[name] == value)
    session.flush()
    return list(session.connection().execute(stmt).scalars())
