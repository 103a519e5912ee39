"""Change detection for orderable rows.

Decides whether a flushed mutation requires a normalization pass, and which
way position ties are broken in that pass.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect

from .config import Direction, InsertionPolicy, ListBinding

_TOUCHED_KEY = "listkeeper.position_touched"
_PREVIOUS_SCOPE_KEY = "listkeeper.previous_scope"

PositionChange = tuple[int | None, int | None]


def _marks(item: Any) -> dict[Any, Any]:
    return inspect(item).info


def mark_position_touched(item: Any) -> None:
    """Record that the position attribute was assigned, even to its own value."""
    _marks(item)[_TOUCHED_KEY] = True


def position_touched(item: Any) -> bool:
    return bool(_marks(item).get(_TOUCHED_KEY, False))


def remember_previous_scope(item: Any, name: str, old_value: Any) -> None:
    """Keep the first pre-mutation value of a scope field."""
    previous = _marks(item).setdefault(_PREVIOUS_SCOPE_KEY, {})
    previous.setdefault(name, old_value)


def previous_scope(item: Any) -> dict[str, Any]:
    return dict(_marks(item).get(_PREVIOUS_SCOPE_KEY, {}))


def clear_marks(item: Any) -> None:
    marks = _marks(item)
    marks.pop(_TOUCHED_KEY, None)
    marks.pop(_PREVIOUS_SCOPE_KEY, None)


def position_change(binding: ListBinding, item: Any) -> PositionChange | None:
    """Return ``(old, new)`` raw position values if the position changed."""
    history = inspect(item).attrs[binding.position_key].history
    if not history.added and not history.deleted:
        return None
    old = history.deleted[0] if history.deleted else None
    new = history.added[0] if history.added else None
    return old, new


def needs_normalization_after_update(binding: ListBinding, item: Any) -> bool:
    """A pass is due when the scope changed or the position was touched."""
    if binding.scope.changed(item):
        return True
    if position_touched(item):
        return True
    return position_change(binding, item) is not None


def tie_break_direction(
    policy: InsertionPolicy | None,
    change: PositionChange | None = None,
) -> Direction:
    """Pick the timestamp order used among rows sharing a raw position.

    A row moved to a larger position ranks after the rows it collides with
    (older writes first), a row moved to a smaller position ranks before
    them (newest write first). A row entering the list from no position is
    placed ahead of the row it collides with. Without a move, new rows land
    in front of ties only for the ``top`` policy.
    """
    if change is not None:
        old, new = change
        if new is not None:
            if old is None:
                return Direction.DESC
            if new > old:
                return Direction.ASC
            if new < old:
                return Direction.DESC
    if policy is InsertionPolicy.TOP:
        return Direction.DESC
    return Direction.ASC
