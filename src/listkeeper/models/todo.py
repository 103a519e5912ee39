"""SQLAlchemy models for todo lists and their reorderable items."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from listkeeper.db.session import Base
from listkeeper.db.time import utcnow, write_stamp
from listkeeper.ordering import ListConfig, OrderableMixin


class TodoList(Base):
    """A named list grouping todo items."""

    __tablename__ = "todo_list"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    items: Mapped[list["TodoItem"]] = relationship(
        back_populates="todo_list",
        cascade="all, delete-orphan",
        order_by="TodoItem.position",
    )


class TodoItem(OrderableMixin, Base):
    """A todo entry kept in a dense, manually reorderable order per list."""

    __tablename__ = "todo_item"
    __list_config__ = ListConfig(scope="todo_list")

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    todo_list_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("todo_list.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # NULL while the item is not part of the ordering.
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    # Tie-break signal for colliding positions.
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=write_stamp, onupdate=write_stamp
    )

    todo_list: Mapped[TodoList] = relationship(back_populates="items")
