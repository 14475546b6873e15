"""Tests for dialect descriptors and tag normalisation."""

import pytest

from sqlmapper.services.sql_conversion.dialects import DIALECTS, get_descriptor, normalize_dialect
from sqlmapper.services.sql_conversion.errors import ErrorKind, UnknownDialectError
from sqlmapper.services.sql_conversion.types import Version


@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ("mysql", "mysql"),
        ("MySQL", "mysql"),
        ("postgresql", "postgres"),
        ("pg", "postgres"),
        (" sqlite3 ", "sqlite"),
        ("mssql", "sqlserver"),
        ("tsql", "sqlserver"),
        ("oracle", "oracle"),
    ],
)
def test_normalize_dialect(tag: str, expected: str) -> None:
    """Aliases and case variants resolve to canonical tags."""
    assert normalize_dialect(tag) == expected


@pytest.mark.parametrize("tag", ["", "db2", "postgres9"])
def test_unknown_dialect(tag: str) -> None:
    """Unknown tags raise an UnknownDialect error."""
    with pytest.raises(UnknownDialectError) as excinfo:
        normalize_dialect(tag)
    assert excinfo.value.kind == ErrorKind.UNKNOWN_DIALECT


def test_descriptor_facts() -> None:
    """Static capabilities that generators rely on."""
    assert get_descriptor("mysql").max_identifier_length == 64
    assert get_descriptor("postgres").max_identifier_length == 63
    assert get_descriptor("oracle").max_identifier_length == 30
    assert get_descriptor("sqlserver").max_identifier_length == 128
    assert get_descriptor("sqlite").max_identifier_length == 0
    assert get_descriptor("postgres").default_schema == "public"
    assert get_descriptor("sqlserver").default_schema == "dbo"
    assert not get_descriptor("mysql").supports_sequences
    assert not get_descriptor("oracle").supports_fk_on_update
    assert not get_descriptor("sqlserver").supports_before_triggers
    assert get_descriptor("oracle").batch_separator == "/"
    assert get_descriptor("sqlserver").batch_separator == "GO"


def test_every_dialect_has_reserved_words() -> None:
    """Each descriptor carries a non-empty lower-case reserved word set."""
    for descriptor in DIALECTS.values():
        assert descriptor.reserved_words
        assert all(word == word.lower() for word in descriptor.reserved_words)


def test_quoting() -> None:
    """Identifiers are quoted with the dialect's characters and closers doubled."""
    assert get_descriptor("mysql").quote("order") == "`order`"
    assert get_descriptor("postgres").quote('a"b') == '"a""b"'
    assert get_descriptor("sqlserver").quote("x]y") == "[x]]y]"


def test_needs_quoting() -> None:
    """Reserved words and non-plain identifiers need quotes; plain names do not."""
    postgres = get_descriptor("postgres")
    assert postgres.needs_quoting("order")
    assert postgres.needs_quoting("USER")
    assert postgres.needs_quoting("my col")
    assert not postgres.needs_quoting("users")
    assert get_descriptor("sqlserver").needs_quoting("identity")


def test_string_quoting() -> None:
    """String literals double the quote; MySQL also escapes backslashes."""
    assert get_descriptor("postgres").quote_string("it's") == "'it''s'"
    assert get_descriptor("mysql").quote_string("a\\b") == "'a\\\\b'"


def test_fits_identifier() -> None:
    """Length limits apply per dialect; zero means unlimited."""
    long_name = "x" * 31
    assert not get_descriptor("oracle").fits_identifier(long_name)
    assert get_descriptor("postgres").fits_identifier(long_name)
    assert get_descriptor("sqlite").fits_identifier("x" * 500)


def test_oracle_identifier_limit_depends_on_version() -> None:
    """Oracle allows 30 characters before 12.2 and 128 from 12.2 on."""
    oracle = get_descriptor("oracle")
    assert oracle.identifier_limit() == 30
    assert oracle.identifier_limit(Version.parse("12.1")) == 30
    assert oracle.identifier_limit(Version.parse("12.2")) == 128
    assert oracle.identifier_limit(Version.parse("21c")) == 128
    assert oracle.fits_identifier("x" * 128, Version.parse("19"))
    assert not oracle.fits_identifier("x" * 129, Version.parse("19"))
    assert get_descriptor("postgres").identifier_limit(Version.parse("16")) == 63
