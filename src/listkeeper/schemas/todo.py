"""Todo list and item Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TodoListCreate(BaseModel):
    """Schema for creating a todo list."""

    name: str = Field(..., min_length=1, max_length=200)


class TodoListResponse(BaseModel):
    """Schema for todo list information returned by the API."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class TodoItemCreate(BaseModel):
    """Schema for adding an item to a list.

    Without ``position`` the item goes to the list's configured insertion
    end. An explicit position may collide with an existing item; the list is
    renumbered right after the insert.
    """

    title: str = Field(..., min_length=1, max_length=500)
    completed: bool = False
    position: int | None = Field(None, description="Requested position in the list")


class TodoItemBulkCreate(BaseModel):
    """Schema for adding many items to a list at once."""

    items: list[TodoItemCreate] = Field(..., min_length=1, max_length=1000)


class TodoItemUpdate(BaseModel):
    """Schema for a partial item update.

    Only fields present in the request body are applied, so sending
    ``"position": null`` takes the item out of the ordering.
    """

    title: str | None = Field(None, min_length=1, max_length=500)
    completed: bool | None = None
    position: int | None = None
    todo_list_id: int | None = Field(None, description="Move the item to another list")


class TodoItemResponse(BaseModel):
    """Schema for item information returned by the API."""

    id: int
    todo_list_id: int
    title: str
    completed: bool
    position: int | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
