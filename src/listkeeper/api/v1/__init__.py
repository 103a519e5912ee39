"""Version 1 API endpoints."""

from .endpoints import items_router, lists_router

__all__ = ["items_router", "lists_router"]
