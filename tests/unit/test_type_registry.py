"""Tests for value-level type conversions."""

from datetime import datetime, timezone

import pytest

from sqlmapper.services.sql_conversion.errors import ErrorKind, NoTypeMappingFoundError
from sqlmapper.services.sql_conversion.types import (
    DEFAULT_REGISTRY,
    TypeMapping,
    TypeRegistry,
    Value,
    Version,
    convert_type,
)
from sqlmapper.services.sql_conversion.types.registry import identity


def test_tinyint_one_becomes_boolean() -> None:
    """MySQL ``tinyint(1)`` 1/0 becomes a PostgreSQL boolean."""
    assert convert_type(1, "tinyint(1)", "boolean") == Value.boolean(True)
    assert convert_type(Value.integer(0), "TINYINT(1)", "BOOLEAN") == Value.boolean(False)


def test_boolean_to_integer_targets() -> None:
    """Booleans become 1/0 on engines without a boolean type."""
    assert convert_type(True, "boolean", "tinyint(1)") == Value.integer(1)
    assert convert_type(False, "boolean", "bit") == Value.integer(0)
    assert convert_type("yes", "boolean", "number(1)") == Value.integer(1)


def test_null_passes_through() -> None:
    """NULL is preserved by every conversion."""
    assert convert_type(None, "tinyint(1)", "boolean") == Value.null()
    assert convert_type(None, "datetime", "timestamp") == Value.null()


def test_text_to_timestamp() -> None:
    """ISO strings are parsed into timestamps."""
    result = convert_type("2024-03-01 10:15:00", "datetime", "timestamp")
    assert result == Value.timestamp(datetime(2024, 3, 1, 10, 15))


def test_timestamp_normalised_to_utc() -> None:
    """Offset-aware timestamps are moved to UTC."""
    result = convert_type("2024-03-01 10:15:00+02:00", "timestamp with time zone", "datetime")
    assert result.payload == datetime(2024, 3, 1, 8, 15, tzinfo=timezone.utc)


def test_missing_pair_raises() -> None:
    """An unregistered pair raises NoTypeMappingFound."""
    with pytest.raises(NoTypeMappingFoundError) as excinfo:
        convert_type(1, "geometry", "boolean")
    assert excinfo.value.kind == ErrorKind.NO_TYPE_MAPPING_FOUND


def test_version_constraint_selects_mapping() -> None:
    """Oracle 23 has a native boolean; older targets do not match the identity mapping."""
    assert convert_type(True, "boolean", "boolean", target_version="23.4") == Value.boolean(True)
    with pytest.raises(NoTypeMappingFoundError):
        convert_type(True, "boolean", "boolean", target_version="19")
    with pytest.raises(NoTypeMappingFoundError):
        convert_type(True, "boolean", "boolean")


def test_invalid_boolean_text() -> None:
    """Text that is not a recognised boolean spelling is rejected."""
    with pytest.raises(ValueError):
        convert_type("maybe", "tinyint(1)", "boolean")


def test_version_parse() -> None:
    """Versions parse from common spellings."""
    assert Version.parse("8.0") == Version(8, 0)
    assert Version.parse("19c") == Version(19)
    assert Version.parse("16.2.1") == Version(16, 2)
    assert Version.parse(None) is None
    assert Version(23, 4).satisfies(Version(23, 0))
    assert not Version(24, 0).satisfies(Version(23, 0))
    with pytest.raises(ValueError):
        Version.parse("latest")


def test_custom_registry_first_match_wins() -> None:
    """Registration order decides between mappings whose constraints both hold."""
    registry = TypeRegistry()
    registry.register(TypeMapping("a", "b", lambda v: Value.text("first")))
    registry.register(TypeMapping("a", "b", identity))
    assert registry.convert_type(Value.integer(1), "a", "b") == Value.text("first")
    assert ("a", "b") in registry.pairs()


def test_default_registry_is_populated() -> None:
    """The default registry covers the MySQL to PostgreSQL basics."""
    assert DEFAULT_REGISTRY.find("int", "integer") is not None
    assert DEFAULT_REGISTRY.find("json", "jsonb") is not None
