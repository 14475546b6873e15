"""Behaviour that must hold for every source/target dialect pair."""

from concurrent.futures import ThreadPoolExecutor
from itertools import product

import pytest

from sqlmapper.services.sql_conversion import convert, get_dialect
from sqlmapper.services.sql_conversion.converters import create_generator
from sqlmapper.services.sql_conversion.errors import EmptyInputError, ErrorKind, NilSchemaError
from sqlmapper.services.sql_conversion.schema import ConstraintKind

DIALECTS = ["mysql", "postgres", "sqlite", "oracle", "sqlserver"]

SAME_DIALECT_SCRIPTS = {
    "mysql": "CREATE TABLE t (id INT NOT NULL, name VARCHAR(50) DEFAULT 'x', PRIMARY KEY (id));",
    "postgres": "CREATE TABLE t (id INTEGER NOT NULL, name VARCHAR(50) DEFAULT 'x', PRIMARY KEY (id));",
    "sqlite": "CREATE TABLE t (id INTEGER NOT NULL, name VARCHAR(50) DEFAULT 'x', PRIMARY KEY (id));",
    "oracle": "CREATE TABLE t (id NUMBER(10) NOT NULL, name VARCHAR2(50) DEFAULT 'x', PRIMARY KEY (id));",
    "sqlserver": "CREATE TABLE t (id INT NOT NULL, name VARCHAR(50) DEFAULT 'x', PRIMARY KEY (id));",
}

PEOPLE = "CREATE TABLE people (age INT, CONSTRAINT chk CHECK (age >= 18));"

USERS_ORDERS = (
    "CREATE TABLE users (id INT PRIMARY KEY);\n"
    "CREATE TABLE orders (id INT PRIMARY KEY, user_id INT, "
    "CONSTRAINT fk_orders_user FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE);"
)


def column_facts(schema):
    return [
        (c.name, c.data_type.base_name, c.nullable, c.default)
        for table in schema.tables
        for c in table.columns
    ]


@pytest.mark.parametrize("dialect", DIALECTS)
def test_same_dialect_round_trip(dialect: str) -> None:
    """Generating a schema in its own dialect and parsing it back keeps every column."""
    capability = get_dialect(dialect)
    schema = capability.parser.parse(SAME_DIALECT_SCRIPTS[dialect])
    reparsed = capability.parser.parse(capability.generator.generate(schema))
    assert column_facts(reparsed) == column_facts(schema)
    assert reparsed.tables[0].primary_key.columns == ["id"]


@pytest.mark.parametrize("dialect", DIALECTS)
def test_empty_input(dialect: str) -> None:
    """Blank or comment-only scripts are rejected by every parser."""
    for text in ("", "   \n", "-- nothing here\n/* or here */"):
        with pytest.raises(EmptyInputError) as excinfo:
            get_dialect(dialect).parser.parse(text)
        assert excinfo.value.kind == ErrorKind.EMPTY_INPUT


@pytest.mark.parametrize("dialect", DIALECTS)
def test_nil_schema(dialect: str) -> None:
    """Every generator refuses a missing schema."""
    with pytest.raises(NilSchemaError):
        get_dialect(dialect).generator.generate(None)


@pytest.mark.parametrize(("source", "target"), list(product(DIALECTS, DIALECTS)))
def test_check_constraint_survives(source: str, target: str) -> None:
    """A named CHECK constraint keeps its name and expression."""
    text = convert(PEOPLE, source, target)
    schema = get_dialect(target).parser.parse(text)
    checks = [c for c in schema.tables[0].constraints if c.kind == ConstraintKind.CHECK]
    assert [(c.name, c.expression) for c in checks] == [("chk", "age >= 18")]


@pytest.mark.parametrize(("source", "target"), list(product(DIALECTS, DIALECTS)))
def test_cascading_foreign_key_survives(source: str, target: str) -> None:
    """ON DELETE CASCADE is supported everywhere and must not be dropped."""
    text = convert(USERS_ORDERS, source, target)
    schema = get_dialect(target).parser.parse(text)
    orders = schema.get_table("orders")
    (fk,) = [c for c in orders.constraints if c.kind == ConstraintKind.FOREIGN_KEY]
    assert fk.name == "fk_orders_user"
    assert fk.columns == ["user_id"]
    assert fk.ref_table == "users"
    assert fk.ref_columns == ["id"]
    assert fk.on_delete == "CASCADE"


def test_mysql_users_to_postgres(mysql_users: str) -> None:
    """The reference conversion from MySQL to PostgreSQL."""
    assert convert(mysql_users, "mysql", "postgres") == (
        "CREATE TABLE users (\n"
        "  id SERIAL NOT NULL PRIMARY KEY,\n"
        "  name VARCHAR(50) NOT NULL\n"
        ");\n"
    )


def test_identity_like_names_are_plain_columns() -> None:
    """Columns merely named like identity or serial types stay ordinary columns."""
    text = convert("CREATE TABLE t (identity_code VARCHAR(10), serial_no INT)", "sqlserver", "postgres")
    assert "identity_code VARCHAR(10)" in text
    assert "serial_no INTEGER" in text
    assert "SERIAL" not in text
    assert "IDENTITY" not in text


def test_concurrent_conversions_match_sequential(mysql_shop: str) -> None:
    """Shared parsers and generators give the same output from many threads."""
    expected = {target: convert(mysql_shop, "mysql", target) for target in DIALECTS}
    jobs = DIALECTS * 8
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda target: (target, convert(mysql_shop, "mysql", target)), jobs))
    for target, text in results:
        assert text == expected[target]


def test_fresh_generator_matches_shared_one(mysql_shop: str) -> None:
    """Per-call option overrides build a generator equivalent to the shared default."""
    schema = get_dialect("mysql").parser.parse(mysql_shop)
    assert create_generator("postgres", on_unsupported="review").generate(schema) == \
        get_dialect("postgres").generator.generate(schema)
