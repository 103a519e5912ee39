"""Scope resolution: selecting the rows that share a list with an item.

A scope partitions a table into independent lists. Three forms exist:

- ``FieldScope("todo_list_id")``: rows with the same value of one field.
- ``CompositeScope(("parent_id", "parent_type"))``: rows agreeing on every
  listed field.
- ``PredicateScope(...)``: an arbitrary condition, either raw SQL text with
  ``:name`` bind parameters filled from the item's attributes, or a
  callable returning a SQL expression for the item.

Conditions are plain table-column expressions. They are executed as Core
statements, so ORM-level default filters (``with_loader_criteria`` and the
like) never narrow the sibling set.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import and_, inspect, text
from sqlalchemy.orm import Mapper
from sqlalchemy.sql.elements import ColumnElement

__all__ = [
    "CompositeScope",
    "FieldScope",
    "ListConfigurationError",
    "PredicateScope",
    "Scope",
    "build_scope",
    "resolve_attribute",
]

# Same rule SQLAlchemy's text() uses to find named bind parameters.
_BIND_PARAM = re.compile(r"(?<![:\w\x5c]):(\w+)(?!:)")

WHOLE_TABLE = "1 = 1"


class ListConfigurationError(ValueError):
    """Raised when a list configuration does not match the mapped class."""


def resolve_attribute(mapper: Mapper[Any], name: str) -> str | None:
    """Return the mapped attribute key for ``name``.

    ``name`` may be an attribute key or a column name. Returns None when
    neither matches a column-based attribute of the mapper. Only
    ``mapper.columns`` is read, so the registry is not configured while the
    class is still being declared.
    """
    if name in mapper.columns:
        return name
    for key, column in mapper.columns.items():
        if getattr(column, "name", None) == name:
            return key
    return None


def _require_attribute(mapper: Mapper[Any], name: str) -> str:
    key = resolve_attribute(mapper, name)
    if key is None:
        raise ListConfigurationError(
            f"{mapper.class_.__name__} has no column attribute named {name!r}"
        )
    return key


class Scope:
    """Base class for the scope variants.

    ``fields`` lists the attribute keys the scope depends on; they drive
    change detection, the condition for the scope a row left, and the
    grouping of deferred batch normalizations.
    """

    fields: tuple[str, ...] = ()

    def resolve(self, mapper: Mapper[Any]) -> Scope:
        """Return a copy whose field names are mapped attribute keys."""
        raise NotImplementedError

    def condition(
        self,
        mapper: Mapper[Any],
        item: Any,
        overrides: Mapping[str, Any] | None = None,
    ) -> ColumnElement[bool] | None:
        """Return the SQL condition selecting ``item`` and its siblings.

        ``overrides`` replaces the item's current value for some fields, which
        is how the scope a row has just left is addressed. Returns None when
        the scope cannot be expressed for the overridden values.
        """
        raise NotImplementedError

    def values(self, item: Any, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Return the scope field values of ``item``."""
        overrides = overrides or {}
        return {
            name: overrides[name] if name in overrides else getattr(item, name)
            for name in self.fields
        }

    def changed(self, item: Any) -> bool:
        """Return True if any scope field was altered in the pending mutation."""
        state = inspect(item)
        return any(state.attrs[name].history.has_changes() for name in self.fields)

    def key(self, item: Any) -> tuple[Any, ...] | None:
        """Return a hashable identity for the item's list, or None if unknown."""
        return tuple(getattr(item, name) for name in self.fields)


@dataclass(frozen=True)
class FieldScope(Scope):
    """Rows sharing one field value form a list."""

    name: str

    @property
    def fields(self) -> tuple[str, ...]:  # type: ignore[override]
        return (self.name,)

    def resolve(self, mapper: Mapper[Any]) -> FieldScope:
        key = resolve_attribute(mapper, self.name)
        if key is None and not self.name.endswith("_id"):
            # scope="todo_list" names the foreign key todo_list_id
            key = resolve_attribute(mapper, f"{self.name}_id")
        if key is None:
            raise ListConfigurationError(
                f"{mapper.class_.__name__} has no scope column {self.name!r}"
            )
        return FieldScope(key)

    def condition(self, mapper, item, overrides=None):
        value = self.values(item, overrides)[self.name]
        return mapper.columns[self.name] == value


@dataclass(frozen=True)
class CompositeScope(Scope):
    """Rows agreeing on every listed field form a list."""

    names: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.names:
            raise ListConfigurationError("CompositeScope needs at least one field")
        object.__setattr__(self, "names", tuple(self.names))

    @property
    def fields(self) -> tuple[str, ...]:  # type: ignore[override]
        return self.names

    def resolve(self, mapper: Mapper[Any]) -> CompositeScope:
        return CompositeScope(tuple(_require_attribute(mapper, name) for name in self.names))

    def condition(self, mapper, item, overrides=None):
        values = self.values(item, overrides)
        return and_(*(mapper.columns[name] == value for name, value in values.items()))


@dataclass(frozen=True)
class PredicateScope(Scope):
    """Rows matching an arbitrary condition form a list.

    ``expression`` is either SQL text, e.g. ``"parent_id = :parent_id AND
    active = 1"``, whose bind parameters name attributes of the item, or a
    callable ``item -> SQL expression``. For callables, ``declared_fields``
    names the attributes the condition depends on; without it, moving a row
    out of the scope is not detected.
    """

    expression: str | Callable[[Any], ColumnElement[bool]]
    declared_fields: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "declared_fields", tuple(self.declared_fields))

    @property
    def fields(self) -> tuple[str, ...]:  # type: ignore[override]
        if isinstance(self.expression, str):
            return tuple(dict.fromkeys(_BIND_PARAM.findall(self.expression)))
        return self.declared_fields

    def resolve(self, mapper: Mapper[Any]) -> PredicateScope:
        if isinstance(self.expression, str):
            for name in self.fields:
                if name not in mapper.columns:
                    raise ListConfigurationError(
                        f"{mapper.class_.__name__} has no attribute {name!r} "
                        f"used in scope {self.expression!r}"
                    )
            return self
        return PredicateScope(
            self.expression,
            tuple(_require_attribute(mapper, name) for name in self.declared_fields),
        )

    def condition(self, mapper, item, overrides=None):
        if isinstance(self.expression, str):
            clause = text(self.expression)
            if self.fields:
                clause = clause.bindparams(**self.values(item, overrides))
            return clause
        if overrides:
            return None
        return self.expression(item)

    def key(self, item: Any) -> tuple[Any, ...] | None:
        if not isinstance(self.expression, str) and not self.declared_fields:
            return None
        return super().key(item)


def build_scope(value: Any) -> Scope:
    """Turn a loose scope description into a ``Scope`` variant.

    Accepts a ``Scope``, None (the whole table), a field name, SQL text,
    a list or tuple of field names, or a callable.
    """
    if isinstance(value, Scope):
        return value
    if value is None:
        return PredicateScope(WHOLE_TABLE)
    if isinstance(value, str):
        if value.isidentifier():
            return FieldScope(value)
        return PredicateScope(value)
    if isinstance(value, Sequence):
        return CompositeScope(tuple(value))
    if callable(value):
        return PredicateScope(value)
    raise ListConfigurationError(f"Unsupported scope: {value!r}")
