# tests/v1/conftest.py
"""Fixtures shared by the API tests."""

from collections.abc import Callable

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from listkeeper.models import TodoList


@pytest.fixture()
def add_items(client: TestClient) -> Callable[..., list[dict]]:
    """Return a helper that appends items with the given titles to a list."""

    def _add_items(todo_list: TodoList, *titles: str) -> list[dict]:
        created = []
        for title in titles:
            response = client.post(f"/api/v1/lists/{todo_list.id}/items", json={"title": title})
            assert response.status_code == status.HTTP_201_CREATED
            created.append(response.json())
        return created

    return _add_items


@pytest.fixture()
def read_list(client: TestClient) -> Callable[[TodoList], list[tuple[str, int | None]]]:
    """Return a helper listing ``(title, position)`` pairs in display order."""

    def _read_list(todo_list: TodoList) -> list[tuple[str, int | None]]:
        response = client.get(f"/api/v1/lists/{todo_list.id}/items")
        assert response.status_code == status.HTTP_200_OK
        return [(item["title"], item["position"]) for item in response.json()]

    return _read_list


@pytest.fixture()
def other_list(db_session) -> TodoList:
    """Create a second todo list."""
    todo_list = TodoList(name="Hardware store")
    db_session.add(todo_list)
    db_session.commit()
    return todo_list
