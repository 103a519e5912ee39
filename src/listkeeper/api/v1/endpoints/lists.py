"""Todo list endpoints for the Listkeeper API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from listkeeper.db.session import get_db
from listkeeper.models import TodoItem, TodoList
from listkeeper.ordering import suppress_normalization
from listkeeper.schemas.todo import (
    TodoItemBulkCreate,
    TodoItemCreate,
    TodoItemResponse,
    TodoListCreate,
    TodoListResponse,
)

router = APIRouter(prefix="/lists", tags=["lists"])
SessionDep = Annotated[Session, Depends(get_db)]


def get_list_or_404(db: Session, list_id: int) -> TodoList:
    """Return the todo list with ``list_id`` or raise a 404."""
    todo_list = db.query(TodoList).filter(TodoList.id == list_id).first()
    if not todo_list:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Todo list not found"
        )
    return todo_list


def ordered_items(db: Session, list_id: int) -> list[TodoItem]:
    """Return a list's items in display order."""
    return (
        db.query(TodoItem)
        .filter(TodoItem.todo_list_id == list_id)
        .order_by(*TodoItem.list_order())
        .all()
    )


@router.get("/", response_model=list[TodoListResponse])
async def list_todo_lists(db: SessionDep) -> list[TodoList]:
    """List all todo lists."""
    return db.query(TodoList).order_by(TodoList.id).all()


@router.post("/", response_model=TodoListResponse, status_code=status.HTTP_201_CREATED)
async def create_todo_list(payload: TodoListCreate, db: SessionDep) -> TodoList:
    """Create a new todo list."""
    todo_list = TodoList(name=payload.name)
    db.add(todo_list)
    db.commit()
    db.refresh(todo_list)
    return todo_list


@router.get("/{list_id}", response_model=TodoListResponse)
async def get_todo_list(list_id: int, db: SessionDep) -> TodoList:
    """Get a specific todo list by ID."""
    return get_list_or_404(db, list_id)


@router.get("/{list_id}/items", response_model=list[TodoItemResponse])
async def list_items(list_id: int, db: SessionDep) -> list[TodoItem]:
    """List the items of a todo list in order."""
    get_list_or_404(db, list_id)
    return ordered_items(db, list_id)


@router.post(
    "/{list_id}/items",
    response_model=TodoItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_item(list_id: int, payload: TodoItemCreate, db: SessionDep) -> TodoItem:
    """Add an item to a todo list."""
    get_list_or_404(db, list_id)
    item = TodoItem(todo_list_id=list_id, **payload.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@router.post(
    "/{list_id}/items/bulk",
    response_model=list[TodoItemResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_items_bulk(
    list_id: int,
    payload: TodoItemBulkCreate,
    db: SessionDep,
) -> list[TodoItem]:
    """Add many items to a todo list, renumbering the list once."""
    get_list_or_404(db, list_id)
    with suppress_normalization(db):
        for entry in payload.items:
            db.add(TodoItem(todo_list_id=list_id, **entry.model_dump()))
    db.commit()
    return ordered_items(db, list_id)
