"""Pydantic schemas for the Listkeeper API."""

from .todo import (
    TodoItemBulkCreate,
    TodoItemCreate,
    TodoItemResponse,
    TodoItemUpdate,
    TodoListCreate,
    TodoListResponse,
)

__all__ = [
    "TodoItemBulkCreate",
    "TodoItemCreate",
    "TodoItemResponse",
    "TodoItemUpdate",
    "TodoListCreate",
    "TodoListResponse",
]
