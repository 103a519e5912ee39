"""Position normalization: dense, gapless ranks for one list.

A pass reads every in-list row of a scope, ranks the rows by raw position
and then by last-modified timestamp (direction chosen by the caller), and
rewrites only the rows whose rank differs from their stored position, in a
single UPDATE statement. Rows without a position are not ranked.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import case, select, update
from sqlalchemy.engine import Connection
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from .changes import tie_break_direction
from .config import Direction, ListBinding

logger = logging.getLogger(__name__)


def normalize_scope(
    connection: Connection,
    binding: ListBinding,
    condition: ColumnElement[bool],
    direction: Direction,
) -> dict[Any, int]:
    """Rank the rows matching ``condition`` and persist changed positions.

    Args:
        connection: Connection to read and write on; normally the one the
            current flush or transaction runs on.
        binding: The list the rows belong to.
        condition: Scope condition selecting the sibling rows.
        direction: Timestamp order among rows sharing a raw position.

    Returns:
        Mapping of primary key to new position for every rewritten row. An
        empty mapping means the list was already normalized and nothing was
        written.
    """
    position = binding.position_column
    primary_key = binding.primary_key
    rows = connection.execute(
        select(primary_key, position)
        .where(condition, position.is_not(None))
        .order_by(*binding.ranking_order(direction))
    ).all()

    changes: dict[Any, int] = {}
    for rank, (ident, current) in enumerate(rows, start=binding.top_of_list):
        if current != rank:
            changes[ident] = rank

    if changes:
        timestamp = binding.timestamp_column
        # Writing the timestamp back to itself keeps onupdate defaults from firing.
        connection.execute(
            update(binding.table)
            .where(primary_key.in_(list(changes)))
            .values(
                {
                    position: case(changes, value=primary_key, else_=position),
                    timestamp: timestamp,
                }
            )
        )

    logger.debug(
        "Normalized %s list (%s ties): %d of %d rows rewritten",
        binding.table.name,
        direction.value,
        len(changes),
        len(rows),
    )
    return changes


def expire_positions(session: Session, binding: ListBinding, idents: Iterable[Any]) -> None:
    """Expire the position of rewritten rows loaded in ``session``."""
    for ident in idents:
        key = binding.mapper.identity_key_from_primary_key((ident,))
        item = session.identity_map.get(key)
        if item is not None:
            session.expire(item, [binding.position_key])


def normalize(session: Session, item: Any) -> int:
    """Run a normalization pass over the list ``item`` belongs to.

    Pending changes are flushed first. Returns the number of rows rewritten,
    so a second call without intervening mutations returns 0.
    """
    binding: ListBinding = type(item).__list_binding__
    session.flush()
    changes = normalize_scope(
        session.connection(),
        binding,
        binding.scope_condition(item),
        tie_break_direction(binding.add_new_at),
    )
    expire_positions(session, binding, changes)
    return len(changes)
