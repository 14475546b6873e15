"""Tests for the tagged Value variant."""

from datetime import datetime

import pytest

from sqlmapper.services.sql_conversion.dialects import get_descriptor
from sqlmapper.services.sql_conversion.types import Value, ValueKind


@pytest.mark.parametrize(
    ("literal", "expected"),
    [
        ("NULL", Value.null()),
        ("true", Value.boolean(True)),
        ("42", Value.integer(42)),
        ("-7", Value.integer(-7)),
        ("(0)", Value.integer(0)),
        ("((1.5))", Value.floating(1.5)),
        ("'it''s'", Value.text("it's")),
        ("N'abc'", Value.text("abc")),
        ("X'0AFF'", Value.binary(b"\x0a\xff")),
        ("0x01", Value.binary(b"\x01")),
    ],
)
def test_from_sql_literal(literal: str, expected: Value) -> None:
    """Literal defaults become typed values."""
    assert Value.from_sql_literal(literal) == expected


@pytest.mark.parametrize("expression", ["CURRENT_TIMESTAMP", "now()", "nextval('s')", "a + 1"])
def test_expressions_are_not_literals(expression: str) -> None:
    """Function calls and expressions are left to the default-value rules."""
    assert Value.from_sql_literal(expression) is None


def test_from_python_checks_bool_before_int() -> None:
    """``True`` is a boolean, not the integer 1."""
    assert Value.from_python(True).kind == ValueKind.BOOLEAN
    assert Value.from_python(1).kind == ValueKind.INTEGER
    assert Value.from_python(b"x").kind == ValueKind.BYTES
    assert Value.from_python(datetime(2024, 1, 1)).kind == ValueKind.TIMESTAMP
    with pytest.raises(TypeError):
        Value.from_python(object())


def test_boolean_literal_depends_on_dialect() -> None:
    """Engines without a boolean type get 1/0."""
    assert Value.boolean(True).to_sql_literal(get_descriptor("postgres")) == "TRUE"
    assert Value.boolean(True).to_sql_literal(get_descriptor("mysql")) == "1"
    assert Value.boolean(False).to_sql_literal(get_descriptor("sqlserver")) == "0"


def test_bytes_literal_per_dialect() -> None:
    """Binary literals use each engine's hex syntax."""
    value = Value.binary(b"\xab")
    assert value.to_sql_literal(get_descriptor("sqlserver")) == "0xAB"
    assert value.to_sql_literal(get_descriptor("oracle")) == "HEXTORAW('AB')"
    assert value.to_sql_literal(get_descriptor("mysql")) == "X'AB'"


def test_text_and_timestamp_literals() -> None:
    """Text is quoted for the target and timestamps are rendered ISO style."""
    assert Value.text("o'k").to_sql_literal(get_descriptor("oracle")) == "'o''k'"
    stamp = Value.timestamp(datetime(2024, 5, 1, 12, 30))
    assert stamp.to_sql_literal(get_descriptor("postgres")) == "'2024-05-01 12:30:00'"
