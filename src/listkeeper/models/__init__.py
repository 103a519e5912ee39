"""SQLAlchemy models for the Listkeeper example application."""

from .todo import TodoItem, TodoList

__all__ = ["TodoItem", "TodoList"]
