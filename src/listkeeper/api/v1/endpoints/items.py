"""Todo item endpoints for the Listkeeper API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from listkeeper.db.session import get_db
from listkeeper.models import TodoItem
from listkeeper.schemas.todo import TodoItemResponse, TodoItemUpdate

from .lists import get_list_or_404

router = APIRouter(prefix="/items", tags=["items"])
SessionDep = Annotated[Session, Depends(get_db)]


def get_item_or_404(db: Session, item_id: int) -> TodoItem:
    """Return the item with ``item_id`` or raise a 404."""
    item = db.query(TodoItem).filter(TodoItem.id == item_id).first()
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Todo item not found"
        )
    return item


@router.get("/{item_id}", response_model=TodoItemResponse)
async def get_item(item_id: int, db: SessionDep) -> TodoItem:
    """Get a specific item by ID."""
    return get_item_or_404(db, item_id)


@router.patch("/{item_id}", response_model=TodoItemResponse)
async def update_item(item_id: int, payload: TodoItemUpdate, db: SessionDep) -> TodoItem:
    """Update an item; position and list changes renumber the affected lists."""
    item = get_item_or_404(db, item_id)
    changes = payload.model_dump(exclude_unset=True)

    if changes.get("todo_list_id") is not None:
        get_list_or_404(db, changes["todo_list_id"])
        item.todo_list_id = changes["todo_list_id"]
    if changes.get("title") is not None:
        item.title = changes["title"]
    if changes.get("completed") is not None:
        item.completed = changes["completed"]
    if "position" in changes:
        # Assigned even when unchanged so the list is renumbered.
        item.position = changes["position"]

    db.commit()
    db.refresh(item)
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: int, db: SessionDep) -> Response:
    """Remove an item; the items below it move up."""
    item = get_item_or_404(db, item_id)
    db.delete(item)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
