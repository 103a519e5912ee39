"""Tests for scope forms and sibling selection."""

import pytest
from sqlalchemy import event, select
from sqlalchemy.orm import with_loader_criteria

from listkeeper.ordering import (
    CompositeScope,
    FieldScope,
    ListConfigurationError,
    PredicateScope,
    build_scope,
)

from tests.list_models import (
    ArrayScopeMixin,
    CallableScopeMixin,
    ListMixin,
    StringScopeMixin,
    create_items,
    positions,
)


def test_build_scope_none_is_whole_table() -> None:
    scope = build_scope(None)
    assert isinstance(scope, PredicateScope)
    assert scope.fields == ()


def test_build_scope_identifier_is_field_scope() -> None:
    assert build_scope("todo_list") == FieldScope("todo_list")


def test_build_scope_sql_text_collects_bind_params() -> None:
    scope = build_scope("parent_id = :parent_id AND parent_type = :parent_type")
    assert isinstance(scope, PredicateScope)
    assert scope.fields == ("parent_id", "parent_type")


def test_bind_params_are_listed_once() -> None:
    scope = build_scope("(parent_id = :parent_id OR pos = :parent_id) AND note::text = 'a'")
    assert scope.fields == ("parent_id",)


def test_build_scope_sequence_is_composite() -> None:
    assert build_scope(["parent_id", "parent_type"]) == CompositeScope(("parent_id", "parent_type"))


def test_build_scope_callable_is_predicate() -> None:
    def condition(item):
        return ListMixin.__table__.c.parent_id == item.parent_id

    scope = build_scope(condition)
    assert isinstance(scope, PredicateScope)
    assert scope.fields == ()


def test_build_scope_passes_scopes_through() -> None:
    scope = FieldScope("parent_id")
    assert build_scope(scope) is scope


def test_build_scope_rejects_unknown_forms() -> None:
    with pytest.raises(ListConfigurationError):
        build_scope(42)


def test_empty_composite_scope_is_rejected() -> None:
    with pytest.raises(ListConfigurationError):
        CompositeScope(())


def test_association_name_resolves_to_foreign_key() -> None:
    assert ListMixin.__list_binding__.scope == FieldScope("parent_id")


def test_scope_values(db_session) -> None:
    (item,) = create_items(db_session, ArrayScopeMixin, 1, parent_id=3, parent_type="Post")
    assert item.scope_values() == {"parent_id": 3, "parent_type": "Post"}


def test_string_scope(db_session) -> None:
    create_items(db_session, StringScopeMixin, 3, parent_id=1)
    create_items(db_session, StringScopeMixin, 2, parent_id=2)
    assert positions(db_session, StringScopeMixin) == [1, 2, 3, 1, 2]

    first = db_session.get(StringScopeMixin, 1)
    first.parent_id = 2
    db_session.flush()

    assert positions(db_session, StringScopeMixin, parent_id=1) == [1, 2]
    assert positions(db_session, StringScopeMixin, parent_id=2) == [2, 1, 3]


def test_array_scope_requires_every_field_to_match(db_session) -> None:
    create_items(db_session, ArrayScopeMixin, 2, parent_id=1, parent_type="Post")
    create_items(db_session, ArrayScopeMixin, 2, parent_id=1, parent_type="Page")
    create_items(db_session, ArrayScopeMixin, 1, parent_id=2, parent_type="Post")

    assert positions(db_session, ArrayScopeMixin) == [1, 2, 1, 2, 1]

    moving = db_session.get(ArrayScopeMixin, 3)
    moving.parent_type = "Post"
    db_session.flush()

    assert positions(db_session, ArrayScopeMixin, parent_type="Post", parent_id=1) == [1, 3, 2]
    assert positions(db_session, ArrayScopeMixin, parent_type="Page") == [1]


def test_callable_scope(db_session) -> None:
    create_items(db_session, CallableScopeMixin, 3, parent_id=1)
    create_items(db_session, CallableScopeMixin, 2, parent_id=2)

    item = db_session.get(CallableScopeMixin, 5)
    item.pos = 1
    db_session.flush()

    assert positions(db_session, CallableScopeMixin) == [1, 2, 3, 2, 1]


def test_callable_scope_change_normalizes_new_list(db_session) -> None:
    create_items(db_session, CallableScopeMixin, 3, parent_id=1)
    create_items(db_session, CallableScopeMixin, 2, parent_id=2)

    moving = db_session.get(CallableScopeMixin, 1)
    moving.parent_id = 2
    moving.pos = 3
    db_session.flush()

    assert positions(db_session, CallableScopeMixin, parent_id=2) == [3, 1, 2]
    # The list the row left cannot be addressed through a callable.
    assert positions(db_session, CallableScopeMixin, parent_id=1) == [2, 3]


def test_default_filters_do_not_hide_siblings(db_session) -> None:
    create_items(db_session, ListMixin, 3, parent_id=5)
    db_session.get(ListMixin, 2).active = False
    db_session.flush()

    def _only_active(execute_state):
        if execute_state.is_select:
            execute_state.statement = execute_state.statement.options(
                with_loader_criteria(ListMixin, ListMixin.active.is_(True))
            )

    event.listen(db_session, "do_orm_execute", _only_active)
    try:
        visible = db_session.scalars(select(ListMixin)).all()
        assert len(visible) == 2

        newest = ListMixin(parent_id=5)
        db_session.add(newest)
        db_session.flush()
        assert newest.pos == 4

        db_session.delete(db_session.get(ListMixin, 1))
        db_session.flush()
    finally:
        event.remove(db_session, "do_orm_execute", _only_active)

    assert positions(db_session, ListMixin) == [1, 2, 3]


def test_default_filters_do_not_hide_neighbours(db_session) -> None:
    items = create_items(db_session, ListMixin, 4, parent_id=5)
    items[1].active = False
    db_session.flush()

    def _only_active(execute_state):
        if execute_state.is_select:
            execute_state.statement = execute_state.statement.options(
                with_loader_criteria(ListMixin, ListMixin.active.is_(True))
            )

    event.listen(db_session, "do_orm_execute", _only_active)
    try:
        assert len(db_session.scalars(select(ListMixin)).all()) == 3

        assert [item.id for item in items[2].higher_items()] == [1, 2]
        assert items[2].higher_item().id == 2
        assert [item.id for item in items[0].lower_items()] == [2, 3, 4]
        assert items[0].lower_item().id == 2
    finally:
        event.remove(db_session, "do_orm_execute", _only_active)
