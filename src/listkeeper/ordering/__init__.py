"""Ordering engine: scopes, insertion, change detection and normalization."""

from .batch import suppress_normalization
from .config import Direction, InsertionPolicy, ListBinding, ListConfig
from .mixin import Orderable, OrderableMixin
from .normalizer import normalize
from .scopes import (
    CompositeScope,
    FieldScope,
    ListConfigurationError,
    PredicateScope,
    Scope,
    build_scope,
)

__all__ = [
    "CompositeScope",
    "Direction",
    "FieldScope",
    "InsertionPolicy",
    "ListBinding",
    "ListConfig",
    "ListConfigurationError",
    "Orderable",
    "OrderableMixin",
    "PredicateScope",
    "Scope",
    "build_scope",
    "normalize",
    "suppress_normalization",
]
