"""Suppressing per-row normalization during bulk inserts.

Inside ``suppress_normalization(session)`` rows inserted through ``session``
skip their post-insert normalization pass. The lists they went into are
remembered and, when the outermost block exits cleanly, each of them is
normalized once. The guard lives in ``session.info``, so other sessions
(and other threads using their own sessions) are unaffected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.orm import Session

from .changes import tie_break_direction
from .config import ListBinding
from .normalizer import expire_positions, normalize_scope

logger = logging.getLogger(__name__)

_DEPTH_KEY = "listkeeper.suppress_depth"
_DEFERRED_KEY = "listkeeper.deferred_scopes"


def is_suppressed(session: Session | None) -> bool:
    """Return True while ``session`` is inside ``suppress_normalization``."""
    return session is not None and session.info.get(_DEPTH_KEY, 0) > 0


def defer(session: Session, binding: ListBinding, item: Any) -> None:
    """Remember the list ``item`` was inserted into for the end of the batch."""
    scope_key = binding.scope.key(item)
    token = (id(binding), scope_key if scope_key is not None else ("item", id(item)))
    deferred = session.info.setdefault(_DEFERRED_KEY, {})
    if token not in deferred:
        deferred[token] = (binding, binding.scope_condition(item))
        logger.debug("Deferred normalization of %s list %r", binding.table.name, scope_key)


@contextmanager
def suppress_normalization(session: Session, *, normalize: bool = True) -> Iterator[None]:
    """Skip post-insert normalization for rows inserted inside the block.

    Args:
        session: Session the bulk inserts go through.
        normalize: Normalize every list that received rows once the
            outermost block exits without an error. Pass False to leave the
            lists as inserted, e.g. when positions were supplied explicitly.

    Blocks nest; only the outermost one flushes and normalizes.
    """
    depth = session.info.get(_DEPTH_KEY, 0)
    session.info[_DEPTH_KEY] = depth + 1
    try:
        yield
        if depth == 0:
            session.flush()
    except BaseException:
        if depth == 0:
            session.info.pop(_DEFERRED_KEY, None)
        raise
    finally:
        session.info[_DEPTH_KEY] = depth

    if depth:
        return
    deferred = session.info.pop(_DEFERRED_KEY, {})
    if not normalize or not deferred:
        return
    logger.info("Normalizing %d list(s) after bulk insert", len(deferred))
    connection = session.connection()
    for binding, condition in deferred.values():
        changes = normalize_scope(
            connection,
            binding,
            condition,
            tie_break_direction(binding.add_new_at),
        )
        expire_positions(session, binding, changes)
