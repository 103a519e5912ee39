"""Flush-time wiring between orderable entities and the ordering engine.

Mapper events drive the engine:

- ``before_insert`` assigns an initial position;
- ``after_insert`` normalizes the new row's list unless the session is in a
  ``suppress_normalization`` block;
- ``after_update`` normalizes when the position was assigned or a scope
  field changed, including the list the row left;
- ``after_delete`` normalizes the list the row was removed from.

All SQL runs on the flush connection. Positions rewritten during the flush
are expired from the session once the flush completes.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Connection
from sqlalchemy.orm import Mapper, Session, object_session
from sqlalchemy.sql.elements import ColumnElement

from .assigner import assign_initial_position
from .batch import defer, is_suppressed
from .changes import (
    clear_marks,
    mark_position_touched,
    needs_normalization_after_update,
    position_change,
    previous_scope,
    remember_previous_scope,
    tie_break_direction,
)
from .config import Direction, ListBinding
from .normalizer import expire_positions, normalize_scope

logger = logging.getLogger(__name__)

_STALE_KEY = "listkeeper.stale_positions"


def register(cls: type, binding: ListBinding) -> None:
    """Attach the ordering listeners to ``cls`` and its subclasses."""
    event.listen(cls, "before_insert", _before_insert, propagate=True)
    event.listen(cls, "after_insert", _after_insert, propagate=True)
    event.listen(cls, "after_update", _after_update, propagate=True)
    event.listen(cls, "after_delete", _after_delete, propagate=True)
    event.listen(
        getattr(cls, binding.position_key),
        "set",
        _on_position_set,
        propagate=True,
        active_history=True,
    )
    for name in binding.scope.fields:
        event.listen(
            getattr(cls, name),
            "set",
            _make_scope_listener(name),
            propagate=True,
            active_history=True,
        )


def _binding(target: Any) -> ListBinding:
    return type(target).__list_binding__


def _on_position_set(target: Any, value: Any, oldvalue: Any, initiator: Any) -> None:
    mark_position_touched(target)


def _make_scope_listener(name: str):
    def _on_scope_set(target: Any, value: Any, oldvalue: Any, initiator: Any) -> None:
        remember_previous_scope(target, name, oldvalue)

    return _on_scope_set


def _normalize_during_flush(
    connection: Connection,
    binding: ListBinding,
    target: Any,
    condition: ColumnElement[bool],
    direction: Direction,
) -> None:
    changes = normalize_scope(connection, binding, condition, direction)
    session = object_session(target)
    if changes and session is not None:
        session.info.setdefault(_STALE_KEY, []).append((binding, list(changes)))


def _before_insert(mapper: Mapper[Any], connection: Connection, target: Any) -> None:
    assign_initial_position(connection, _binding(target), target)


def _after_insert(mapper: Mapper[Any], connection: Connection, target: Any) -> None:
    binding = _binding(target)
    clear_marks(target)
    session = object_session(target)
    if is_suppressed(session):
        defer(session, binding, target)
        return
    _normalize_during_flush(
        connection,
        binding,
        target,
        binding.scope_condition(target),
        tie_break_direction(binding.add_new_at),
    )


def _after_update(mapper: Mapper[Any], connection: Connection, target: Any) -> None:
    binding = _binding(target)
    if not needs_normalization_after_update(binding, target):
        clear_marks(target)
        return

    direction = tie_break_direction(binding.add_new_at, position_change(binding, target))
    left_condition = None
    if binding.scope.changed(target):
        left_condition = binding.scope_condition(target, previous_scope(target))
    clear_marks(target)

    _normalize_during_flush(
        connection,
        binding,
        target,
        binding.scope_condition(target),
        direction,
    )
    if left_condition is not None:
        _normalize_during_flush(
            connection,
            binding,
            target,
            left_condition,
            tie_break_direction(binding.add_new_at),
        )


def _after_delete(mapper: Mapper[Any], connection: Connection, target: Any) -> None:
    binding = _binding(target)
    clear_marks(target)
    _normalize_during_flush(
        connection,
        binding,
        target,
        binding.scope_condition(target),
        tie_break_direction(binding.add_new_at),
    )


@event.listens_for(Session, "after_flush_postexec")
def _expire_stale_positions(session: Session, flush_context: Any) -> None:
    for binding, idents in session.info.pop(_STALE_KEY, []):
        expire_positions(session, binding, idents)
