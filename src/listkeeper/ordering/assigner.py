"""Initial positions for rows entering a list on insert."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from .config import InsertionPolicy, ListBinding

logger = logging.getLogger(__name__)


def assign_initial_position(connection: Connection, binding: ListBinding, item: Any) -> int | None:
    """Give a new row a position according to the insertion policy.

    Rows that already carry a position, and lists configured without an
    insertion policy, are left alone. The ``top`` policy reuses the current
    minimum position on purpose; the collision is resolved by the
    normalization pass that follows the insert.

    Returns:
        The assigned position, or None when nothing was assigned.
    """
    policy = binding.add_new_at
    if policy is None or getattr(item, binding.position_key) is not None:
        return None

    position_column = binding.position_column
    condition = binding.scope_condition(item)
    if policy is InsertionPolicy.TOP:
        current = connection.execute(select(func.min(position_column)).where(condition)).scalar()
        position = binding.top_of_list if current is None else current
    else:
        current = connection.execute(select(func.max(position_column)).where(condition)).scalar()
        position = (binding.top_of_list - 1 if current is None else current) + 1

    setattr(item, binding.position_key, position)
    logger.debug(
        "Assigned %s position %d to new %s row",
        policy.value,
        position,
        binding.table.name,
    )
    return position
