"""API endpoint modules for version 1."""

from .items import router as items_router
from .lists import router as lists_router

__all__ = ["items_router", "lists_router"]
