"""List configuration and its binding to a mapped class."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import Column, Table, inspect
from sqlalchemy.orm import Mapper
from sqlalchemy.sql.elements import ColumnElement

from listkeeper.core.settings import settings

from .scopes import ListConfigurationError, Scope, build_scope, resolve_attribute

__all__ = ["Direction", "InsertionPolicy", "ListBinding", "ListConfig"]


class InsertionPolicy(str, Enum):
    """End of the list that receives new rows."""

    TOP = "top"
    BOTTOM = "bottom"


class Direction(str, Enum):
    """Order applied to the last-modified timestamp when positions tie."""

    ASC = "asc"
    DESC = "desc"


class ListConfig(BaseModel):
    """Per-entity list options.

    Attributes:
        column (str): Position attribute or column name.
        timestamp_column (str): Last-modified attribute or column name.
        scope (Scope): Sibling selection rule. Accepts anything
            ``build_scope`` does.
        top_of_list (int): Position of the first row of every list.
        add_new_at (InsertionPolicy | None): Where new rows without a
            position go; None leaves them out of the list.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    column: str = Field(default_factory=lambda: settings.list_position_column, min_length=1)
    timestamp_column: str = Field(
        default_factory=lambda: settings.list_timestamp_column,
        min_length=1,
    )
    scope: Scope = Field(default=None, validate_default=True)
    top_of_list: int = Field(default_factory=lambda: settings.list_top_of_list)
    add_new_at: InsertionPolicy | None = Field(
        default_factory=lambda: settings.list_add_new_at,
        validate_default=True,
    )

    @field_validator("scope", mode="before")
    @classmethod
    def _coerce_scope(cls, value: Any) -> Scope:
        return build_scope(value)


@dataclass(frozen=True)
class ListBinding:
    """A ``ListConfig`` resolved against the columns of a mapped class."""

    config: ListConfig
    mapper: Mapper[Any]
    position_key: str
    timestamp_key: str
    scope: Scope

    @classmethod
    def bind(cls, mapped_class: type, config: ListConfig) -> ListBinding:
        """Resolve ``config`` for ``mapped_class``.

        Raises:
            ListConfigurationError: If a configured name does not exist on the
                class or the class has a composite primary key.
        """
        mapper = inspect(mapped_class, raiseerr=False)
        if not isinstance(mapper, Mapper):
            raise ListConfigurationError(f"{mapped_class.__name__} is not a mapped class")
        if len(mapper.primary_key) != 1:
            raise ListConfigurationError(
                f"{mapped_class.__name__} must have a single-column primary key"
            )

        position_key = resolve_attribute(mapper, config.column)
        if position_key is None:
            raise ListConfigurationError(
                f"{mapped_class.__name__} has no position column {config.column!r}"
            )
        timestamp_key = resolve_attribute(mapper, config.timestamp_column)
        if timestamp_key is None:
            raise ListConfigurationError(
                f"{mapped_class.__name__} has no timestamp column {config.timestamp_column!r}"
            )

        return cls(
            config=config,
            mapper=mapper,
            position_key=position_key,
            timestamp_key=timestamp_key,
            scope=config.scope.resolve(mapper),
        )

    @property
    def position_column(self) -> Column[Any]:
        return self.mapper.columns[self.position_key]

    @property
    def timestamp_column(self) -> Column[Any]:
        return self.mapper.columns[self.timestamp_key]

    @property
    def primary_key(self) -> Column[Any]:
        return self.mapper.primary_key[0]

    @property
    def table(self) -> Table:
        return self.position_column.table

    @property
    def top_of_list(self) -> int:
        return self.config.top_of_list

    @property
    def add_new_at(self) -> InsertionPolicy | None:
        return self.config.add_new_at

    def scope_condition(
        self,
        item: Any,
        overrides: Mapping[str, Any] | None = None,
    ) -> ColumnElement[bool] | None:
        return self.scope.condition(self.mapper, item, overrides)

    def ranking_order(self, direction: Direction) -> list[ColumnElement[Any]]:
        """Order used to rank in-list rows during normalization."""
        timestamp = self.timestamp_column
        return [
            self.position_column.asc(),
            timestamp.asc() if direction is Direction.ASC else timestamp.desc(),
            self.primary_key.asc(),
        ]

    def display_order(self) -> list[ColumnElement[Any]]:
        """Order for listing rows; unlisted rows go to the insertion end."""
        position = self.position_column.asc()
        if self.add_new_at is InsertionPolicy.TOP:
            position = position.nulls_first()
        else:
            position = position.nulls_last()
        return [position, self.primary_key.asc()]
