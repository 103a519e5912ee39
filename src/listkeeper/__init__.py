"""Listkeeper: dense, gapless positions for reorderable database rows."""

from listkeeper.ordering import (
    CompositeScope,
    Direction,
    FieldScope,
    InsertionPolicy,
    ListConfig,
    ListConfigurationError,
    Orderable,
    OrderableMixin,
    PredicateScope,
    normalize,
    suppress_normalization,
)

__version__ = "0.1.0"

__all__ = [
    "CompositeScope",
    "Direction",
    "FieldScope",
    "InsertionPolicy",
    "ListConfig",
    "ListConfigurationError",
    "Orderable",
    "OrderableMixin",
    "PredicateScope",
    "normalize",
    "suppress_normalization",
]
