"""Tests for the per-dialect DDL generators and their policies."""

from typing import List, Tuple

import pytest

from sqlmapper.services.sql_conversion.converters import create_generator, get_dialect
from sqlmapper.services.sql_conversion.errors import (
    IdentifierTooLongError,
    NilSchemaError,
    ReservedWordCollisionError,
    UnsupportedConstructError,
)
from sqlmapper.services.sql_conversion.schema import (
    Column,
    DataType,
    Schema,
    Sequence,
    Table,
    Trigger,
    TriggerEvent,
    TriggerTiming,
)


def render(sql: str, source: str, target: str, **options) -> Tuple[str, List[dict]]:
    """Parse *sql* as *source* and generate it for *target*."""
    schema = get_dialect(source).parser.parse(sql)
    review: List[dict] = []
    text = create_generator(target, **options).generate(schema, review=review)
    return text, review


def issue_types(review: List[dict]) -> List[str]:
    return [item["issue_type"] for item in review]


def test_mysql_users_to_postgres(mysql_users: str) -> None:
    """An AUTO_INCREMENT integer key becomes SERIAL and nothing needs review."""
    text, review = render(mysql_users, "mysql", "postgres")
    assert text == (
        "CREATE TABLE users (\n"
        "  id SERIAL NOT NULL PRIMARY KEY,\n"
        "  name VARCHAR(50) NOT NULL\n"
        ");\n"
    )
    assert review == []


def test_postgres_boolean_default_to_mysql() -> None:
    """Boolean defaults are rewritten as integers for TINYINT(1)."""
    text, _ = render("CREATE TABLE f (active BOOLEAN DEFAULT TRUE);", "postgres", "mysql")
    assert text.strip() == "CREATE TABLE f (\n  active TINYINT(1) DEFAULT 1\n) ENGINE=InnoDB;"


def test_mysql_to_sqlserver_identity_and_bit() -> None:
    """AUTO_INCREMENT becomes IDENTITY and every statement closes its batch."""
    text, _ = render(
        "CREATE TABLE t (id INT AUTO_INCREMENT PRIMARY KEY, flag TINYINT(1) DEFAULT 1);", "mysql", "sqlserver"
    )
    assert "id INT IDENTITY(1,1) NOT NULL PRIMARY KEY" in text
    assert "flag BIT DEFAULT 1" in text
    assert text.endswith(";\nGO\n")


def test_mysql_to_sqlite_autoincrement(mysql_users: str) -> None:
    """The single integer key becomes INTEGER PRIMARY KEY AUTOINCREMENT."""
    text, _ = render(mysql_users, "mysql", "sqlite")
    assert "id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL" in text
    assert "PRIMARY KEY (id)" not in text


@pytest.mark.parametrize(
    ("seed", "increment", "target", "expected"),
    [
        (0, 1, "sqlserver", "IDENTITY(0,1)"),
        (100, 5, "sqlserver", "IDENTITY(100,5)"),
        (0, 1, "postgres", "GENERATED BY DEFAULT AS IDENTITY (START WITH 0 INCREMENT BY 1)"),
        (-10, 2, "postgres", "GENERATED BY DEFAULT AS IDENTITY (START WITH -10 INCREMENT BY 2)"),
        (0, 1, "oracle", "GENERATED BY DEFAULT AS IDENTITY (START WITH 0 INCREMENT BY 1)"),
        (1000, 10, "oracle", "GENERATED BY DEFAULT AS IDENTITY (START WITH 1000 INCREMENT BY 10)"),
    ],
)
def test_identity_seed_and_increment_are_kept(seed: int, increment: int, target: str, expected: str) -> None:
    """Explicit identity options, zero included, survive the conversion."""
    text, review = render(f"CREATE TABLE t (id INT IDENTITY({seed},{increment}) PRIMARY KEY);", "sqlserver", target)
    assert expected in text
    assert review == []


def test_identity_with_only_an_increment() -> None:
    """A missing seed starts at 1 while a given increment is kept."""
    column = Column("id", DataType("INT"), nullable=False, auto_increment=True, identity_increment=5)
    schema = Schema(tables=[Table("t", columns=[column])], dialect="sqlserver")
    assert "IDENTITY(1,5)" in create_generator("sqlserver").generate(schema)


def test_enum_becomes_check_outside_mysql() -> None:
    """ENUM members turn into a CHECK constraint where the type does not exist."""
    sql = "CREATE TABLE t (status ENUM('a','b'));"
    for target in ("postgres", "sqlite", "oracle", "sqlserver"):
        text, _ = render(sql, "mysql", target)
        assert "CHECK (status IN ('a', 'b'))" in text, target
    text, _ = render(sql, "mysql", "mysql")
    assert "ENUM('a','b')" in text
    assert "CHECK" not in text


def test_oracle_drops_update_rules() -> None:
    """Oracle keeps no ON UPDATE rule and spells RESTRICT as its default."""
    sql = (
        "CREATE TABLE a (id INT PRIMARY KEY);\n"
        "CREATE TABLE b (a_id INT, CONSTRAINT fk_b FOREIGN KEY (a_id) REFERENCES a (id) "
        "ON UPDATE CASCADE ON DELETE RESTRICT);"
    )
    text, review = render(sql, "mysql", "oracle")
    assert "CONSTRAINT fk_b FOREIGN KEY (a_id) REFERENCES a (id)\n" in text
    assert "ON UPDATE" not in text
    assert "RESTRICT" not in text
    assert issue_types(review) == ["FK_RULE_UNSUPPORTED"]
    assert "-- REVIEW [FK_RULE_UNSUPPORTED] fk_b:" in text


def test_sqlserver_default_expression_to_postgres() -> None:
    """GETDATE() defaults are rewritten to CURRENT_TIMESTAMP."""
    text, _ = render("CREATE TABLE t (created DATETIME DEFAULT (GETDATE()))", "sqlserver", "postgres")
    assert "created TIMESTAMP DEFAULT CURRENT_TIMESTAMP" in text


def test_sequence_without_target_support() -> None:
    """A sequence becomes a review note on MySQL, or an error when asked."""
    schema = Schema(sequences=[Sequence("s")], dialect="postgres")
    review: List[dict] = []
    text = create_generator("mysql").generate(schema, review=review)
    assert text.startswith("-- REVIEW [SEQUENCE_UNSUPPORTED] s:")
    assert issue_types(review) == ["SEQUENCE_UNSUPPORTED"]
    assert review[0]["severity"] == "ERROR"

    with pytest.raises(UnsupportedConstructError):
        create_generator("mysql", on_unsupported="error").generate(schema)


def test_sequence_on_postgres() -> None:
    """Sequences are written with their options where they are supported."""
    schema = Schema(sequences=[Sequence("s", start=10, increment=2, cycle=True)], dialect="oracle")
    text = create_generator("postgres").generate(schema)
    assert text == "CREATE SEQUENCE s START WITH 10 INCREMENT BY 2 CYCLE;\n"


def test_empty_and_nil_schema() -> None:
    """An empty schema yields empty text; a missing one is an error."""
    assert create_generator("postgres").generate(Schema()) == ""
    with pytest.raises(NilSchemaError):
        create_generator("postgres").generate(None)


def test_quote_policies() -> None:
    """Reserved names are quoted unless quoting is disabled, which then fails."""
    schema = Schema(tables=[Table("order", columns=[Column("id", DataType("INT"))])], dialect="mysql")
    assert 'CREATE TABLE "order"' in create_generator("postgres").generate(schema)
    assert '"id" INTEGER' in create_generator("postgres", quote_identifiers="always").generate(schema)
    with pytest.raises(ReservedWordCollisionError):
        create_generator("postgres", quote_identifiers="never").generate(schema)


def test_invalid_policy_value() -> None:
    """Unknown policy values are rejected when the generator is built."""
    with pytest.raises(ValueError):
        create_generator("postgres", quote_identifiers="sometimes")
    with pytest.raises(ValueError):
        create_generator("postgres", on_unsupported="ignore")


@pytest.mark.parametrize(("version", "length"), [("11.2", 31), ("12.1", 31), ("12.2", 129), ("19", 129)])
def test_identifier_too_long_for_oracle(version: str, length: int) -> None:
    """Names beyond the Oracle release's limit are rejected instead of truncated."""
    schema = Schema(tables=[Table("a" * length, columns=[Column("id", DataType("INT"))])], dialect="mysql")
    with pytest.raises(IdentifierTooLongError):
        create_generator("oracle", version=version).generate(schema)


@pytest.mark.parametrize(("version", "length"), [("12.1", 30), ("12.2", 128), ("19", 31)])
def test_identifier_within_oracle_limit(version: str, length: int) -> None:
    """Oracle 12.2 and later accept identifiers up to 128 characters."""
    schema = Schema(tables=[Table("a" * length, columns=[Column("id", DataType("INT"))])], dialect="mysql")
    assert f"CREATE TABLE {'a' * length} (" in create_generator("oracle", version=version).generate(schema)


def test_default_oracle_version_allows_long_identifiers() -> None:
    """The configured default Oracle release (19) uses the 128 character limit."""
    schema = Schema(tables=[Table("a" * 64, columns=[Column("id", DataType("INT"))])], dialect="mysql")
    assert "a" * 64 in create_generator("oracle").generate(schema)


def test_mysql_splits_multi_event_trigger() -> None:
    """MySQL needs one trigger per event."""
    trigger = Trigger("trg", "t", TriggerTiming.BEFORE, [TriggerEvent.INSERT, TriggerEvent.UPDATE],
                      body="SET NEW.x = 1")
    review: List[dict] = []
    text = create_generator("mysql").generate(Schema(triggers=[trigger], dialect="mysql"), review=review)
    assert "CREATE TRIGGER trg_insert BEFORE INSERT ON t FOR EACH ROW\nSET NEW.x = 1;" in text
    assert "CREATE TRIGGER trg_update BEFORE UPDATE ON t FOR EACH ROW\nSET NEW.x = 1;" in text
    assert issue_types(review) == ["TRIGGER_SCOPE_CHANGED"]


def test_sqlserver_skips_before_trigger() -> None:
    """BEFORE triggers have no SQL Server form."""
    trigger = Trigger("trg", "t", TriggerTiming.BEFORE, [TriggerEvent.INSERT], body="SET NEW.x = 1")
    review: List[dict] = []
    text = create_generator("sqlserver").generate(Schema(triggers=[trigger], dialect="mysql"), review=review)
    assert "CREATE TRIGGER" not in text
    assert issue_types(review) == ["TRIGGER_TIMING_UNSUPPORTED"]


def test_postgres_wraps_trigger_body_in_function() -> None:
    """A body that is not EXECUTE FUNCTION gets its own trigger function."""
    trigger = Trigger("trg", "t", TriggerTiming.BEFORE, [TriggerEvent.INSERT], body="NEW.x := 1")
    text = create_generator("postgres").generate(Schema(triggers=[trigger], dialect="postgres"))
    assert "CREATE OR REPLACE FUNCTION trg_fn() RETURNS trigger AS $$" in text
    assert "RETURN NEW;" in text
    assert "EXECUTE FUNCTION trg_fn()" in text


def test_oracle_trigger_block() -> None:
    """Oracle triggers end with the slash batch separator."""
    trigger = Trigger("trg", "t", TriggerTiming.BEFORE, [TriggerEvent.INSERT], body=":NEW.x := 1")
    text = create_generator("oracle").generate(Schema(triggers=[trigger], dialect="oracle"))
    assert text == (
        "CREATE OR REPLACE TRIGGER trg BEFORE INSERT ON t FOR EACH ROW\n"
        "BEGIN\n  :NEW.x := 1;\nEND;\n/\n"
    )


def test_comments_per_dialect() -> None:
    """Comments become COMMENT ON, extended properties or SQL comments."""
    table = Table("t", columns=[Column("id", DataType("INT"), comment="key")], comment="things")
    schema = Schema(tables=[table], dialect="postgres")

    assert "COMMENT ON TABLE t IS 'things';" in create_generator("oracle").generate(schema)
    assert "COMMENT ON COLUMN t.id IS 'key';" in create_generator("postgres").generate(schema)

    sqlserver = create_generator("sqlserver").generate(schema)
    assert "EXEC sp_addextendedproperty @name = N'MS_Description', @value = N'things'" in sqlserver
    assert "@level2type = N'COLUMN', @level2name = N'id'" in sqlserver

    review: List[dict] = []
    sqlite = create_generator("sqlite").generate(schema, review=review)
    assert "-- t: things" in sqlite
    assert "-- t.id: key" in sqlite
    assert issue_types(review) == ["COMMENT_UNSUPPORTED"]

    mysql = create_generator("mysql").generate(schema)
    assert "id INT COMMENT 'key'" in mysql
    assert "COMMENT='things'" in mysql


def test_generator_keeps_no_state_between_calls(mysql_shop: str) -> None:
    """Repeated calls on one generator give identical output and separate review lists."""
    schema = get_dialect("mysql").parser.parse(mysql_shop)
    generator = get_dialect("oracle").generator
    first: List[dict] = []
    second: List[dict] = []
    assert generator.generate(schema, review=first) == generator.generate(schema, review=second)
    assert len(first) == len(second)
