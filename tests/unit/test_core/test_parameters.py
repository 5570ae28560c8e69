"""Tests for bind types, type inference and the binding queue."""

import datetime
from decimal import Decimal

import pytest

from sqlmark.core.parameters import (
    DEFAULT_BIND_TYPE_COERCIONS,
    BindEntry,
    BindingQueue,
    BindType,
    coerce_bind_value,
    infer_bind_type,
)
from sqlmark.exceptions import ParameterError


@pytest.mark.parametrize(
    "value,expected",
    [
        (1, BindType.INTEGER),
        (0, BindType.INTEGER),
        (-7, BindType.INTEGER),
        (True, BindType.BOOLEAN),
        (False, BindType.BOOLEAN),
        (None, BindType.NULL),
        ("text", BindType.STRING),
        ("", BindType.STRING),
        (1.5, BindType.STRING),
        (Decimal("2.50"), BindType.STRING),
        (datetime.date(2024, 1, 1), BindType.STRING),
        (b"raw", BindType.STRING),
    ],
)
def test_infer_bind_type(value: object, expected: BindType) -> None:
    """Integers, booleans and None get their own type, everything else is a string."""
    assert infer_bind_type(value) is expected


def test_infer_bind_type_bool_is_not_integer() -> None:
    """bool subclasses int but must never infer as INTEGER."""
    assert infer_bind_type(True) is not BindType.INTEGER


@pytest.mark.parametrize(
    "value,bind_type,expected",
    [
        ("5", BindType.INTEGER, 5),
        (True, BindType.INTEGER, 1),
        (5, BindType.STRING, "5"),
        (1.25, BindType.STRING, "1.25"),
        ("x", BindType.STRING, "x"),
        (1, BindType.BOOLEAN, True),
        (0, BindType.BOOLEAN, False),
        ("anything", BindType.NULL, None),
        (None, BindType.INTEGER, None),
        (None, BindType.STRING, None),
    ],
)
def test_coerce_bind_value(value: object, bind_type: BindType, expected: object) -> None:
    assert coerce_bind_value(value, bind_type) == expected


def test_coerce_bind_value_invalid_integer() -> None:
    with pytest.raises(ParameterError, match="Cannot bind"):
        coerce_bind_value("abc", BindType.INTEGER)


def test_coerce_bind_value_custom_coercions() -> None:
    """Custom coercion maps replace the defaults for the types they name."""
    coercions = {**DEFAULT_BIND_TYPE_COERCIONS, BindType.BOOLEAN: lambda value: int(bool(value))}

    assert coerce_bind_value(True, BindType.BOOLEAN, coercions) == 1
    assert coerce_bind_value("7", BindType.INTEGER, coercions) == 7


def test_bind_entry_equality() -> None:
    entry = BindEntry("foo", BindType.STRING)

    assert entry == BindEntry("foo", BindType.STRING)
    assert entry == ("foo", BindType.STRING)
    assert entry == ("foo", BindType.STRING, None)
    assert entry != ("foo", BindType.INTEGER)
    assert BindEntry(1, BindType.INTEGER, ":id") == (1, BindType.INTEGER, ":id")
    assert BindEntry(1, BindType.INTEGER, ":id") != (1, BindType.INTEGER)


def test_bind_entry_unpacks() -> None:
    value, bind_type, name = BindEntry(3, BindType.INTEGER, ":n")

    assert (value, bind_type, name) == (3, BindType.INTEGER, ":n")


def test_binding_queue_preserves_order() -> None:
    queue = BindingQueue()
    queue.enqueue_string("a")
    queue.enqueue_integer(2)
    queue.enqueue_boolean(True)
    queue.enqueue_null(None)
    queue.enqueue_inferred(5)

    assert len(queue) == 5
    assert queue.entries == (
        ("a", BindType.STRING),
        (2, BindType.INTEGER),
        (True, BindType.BOOLEAN),
        (None, BindType.NULL),
        (5, BindType.INTEGER),
    )
    assert not queue.is_named


def test_binding_queue_drain_yields_positions_and_empties() -> None:
    """Draining yields 1-based positions and leaves the queue empty."""
    queue = BindingQueue()
    queue.enqueue_string("x")
    queue.enqueue_integer(1)

    drained = list(queue.drain())

    assert [position for position, _ in drained] == [1, 2]
    assert [entry.value for _, entry in drained] == ["x", 1]
    assert len(queue) == 0
    assert not queue
    assert list(queue.drain()) == []


def test_binding_queue_named() -> None:
    queue = BindingQueue()
    queue.enqueue_named({":id": 1, ":name": "bob", ":flag": False})

    assert queue.is_named
    assert queue.entries == (
        (1, BindType.INTEGER, ":id"),
        ("bob", BindType.STRING, ":name"),
        (False, BindType.BOOLEAN, ":flag"),
    )
