"""Tests for the MySQL parser."""

import pytest

from sqlmapper.services.sql_conversion.converters import MySQLParser
from sqlmapper.services.sql_conversion.errors import EmptyInputError, MalformedStatementError
from sqlmapper.services.sql_conversion.schema import ConstraintKind


@pytest.fixture(name="parser")
def create_parser() -> MySQLParser:
    """A fresh MySQL parser."""
    return MySQLParser()


def test_parse_shop_schema(parser: MySQLParser, mysql_shop: str) -> None:
    """Columns, keys, inline indexes and table options are captured."""
    schema = parser.parse(mysql_shop)
    assert schema.dialect == "mysql"
    assert [t.name for t in schema.tables] == ["users", "orders"]

    users = schema.get_table("users")
    assert users.engine == "InnoDB"
    assert users.charset == "utf8mb4"
    identifier = users.get_column("id")
    assert identifier.auto_increment
    assert not identifier.nullable
    active = users.get_column("active")
    assert str(active.data_type) == "TINYINT(1)"
    assert active.default == "1"
    assert users.get_column("created_at").default == "CURRENT_TIMESTAMP"
    assert users.primary_key.columns == ["id"]
    unique = [c for c in users.constraints if c.kind == ConstraintKind.UNIQUE]
    assert unique[0].name == "uq_users_email"
    assert unique[0].columns == ["email"]

    orders = schema.get_table("orders")
    assert orders.get_column("total").data_type.precision == 10
    assert orders.get_column("total").data_type.scale == 2
    assert orders.get_column("total").default == "0.00"
    assert [i.name for i in orders.indexes] == ["idx_orders_user"]
    fk = next(c for c in orders.constraints if c.kind == ConstraintKind.FOREIGN_KEY)
    assert fk.name == "fk_orders_user"
    assert fk.ref_table == "users"
    assert fk.ref_columns == ["id"]
    assert fk.on_delete == "CASCADE"


def test_inline_primary_key_is_not_null(parser: MySQLParser, mysql_users: str) -> None:
    """A column-level PRIMARY KEY implies NOT NULL."""
    table = parser.parse(mysql_users).tables[0]
    assert not table.get_column("id").nullable
    assert table.primary_key.inline
    assert not table.get_column("name").nullable


def test_serial_expands(parser: MySQLParser) -> None:
    """SERIAL is BIGINT UNSIGNED NOT NULL AUTO_INCREMENT UNIQUE."""
    column = parser.parse("CREATE TABLE s (id SERIAL PRIMARY KEY);").tables[0].get_column("id")
    assert column.data_type.name == "BIGINT"
    assert column.data_type.unsigned
    assert column.auto_increment
    assert column.unique


def test_column_extras(parser: MySQLParser) -> None:
    """ENUM values, ON UPDATE, collation and escaped comments are kept."""
    schema = parser.parse(
        "CREATE TABLE t ("
        " status ENUM('new','done') NOT NULL DEFAULT 'new',"
        " updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,"
        " title VARCHAR(20) COLLATE utf8mb4_unicode_ci COMMENT 'it\\'s'"
        ") COMMENT='Tasks';"
    )
    table = schema.tables[0]
    status = table.get_column("status")
    assert status.data_type.values == ["'new'", "'done'"]
    assert status.default == "'new'"
    updated = table.get_column("updated_at")
    assert updated.default == "CURRENT_TIMESTAMP"
    assert updated.on_update == "CURRENT_TIMESTAMP"
    title = table.get_column("title")
    assert title.collation == "utf8mb4_unicode_ci"
    assert title.comment == "it's"
    assert table.comment == "Tasks"


def test_unsigned_and_backtick_names(parser: MySQLParser) -> None:
    """Backtick quoting is removed and UNSIGNED is recorded on the type."""
    column = parser.parse("CREATE TABLE `order` (`user id` INT(10) UNSIGNED);").tables[0].columns[0]
    assert column.name == "user id"
    assert column.data_type.unsigned
    assert column.data_type.length == 10


def test_non_ddl_statements_are_skipped(parser: MySQLParser) -> None:
    """DROP, SET and INSERT statements do not produce objects."""
    schema = parser.parse(
        "SET FOREIGN_KEY_CHECKS=0; DROP TABLE IF EXISTS t; CREATE TABLE t (a INT); INSERT INTO t VALUES (1);"
    )
    assert [t.name for t in schema.tables] == ["t"]


def test_trigger_with_delimiter(parser: MySQLParser) -> None:
    """Trigger bodies are kept verbatim and MySQL triggers are row triggers."""
    schema = parser.parse(
        "CREATE TABLE t (a INT, b INT);\n"
        "DELIMITER $$\n"
        "CREATE TRIGGER trg BEFORE INSERT ON t FOR EACH ROW BEGIN SET NEW.b = NEW.a * 2; END$$\n"
        "DELIMITER ;\n"
    )
    trigger = schema.triggers[0]
    assert trigger.name == "trg"
    assert trigger.table == "t"
    assert trigger.timing.value == "BEFORE"
    assert [e.value for e in trigger.events] == ["INSERT"]
    assert trigger.for_each_row
    assert trigger.body.startswith("BEGIN")
    assert trigger.body.endswith("END")


@pytest.mark.parametrize("text", ["", "   \n", "-- just a comment\n/* and another */"])
def test_empty_input(parser: MySQLParser, text: str) -> None:
    """Blank or comment-only input is an EmptyInput error."""
    with pytest.raises(EmptyInputError):
        parser.parse(text)


def test_constraint_on_unknown_column(parser: MySQLParser) -> None:
    """Key columns must exist in the table."""
    with pytest.raises(MalformedStatementError):
        parser.parse("CREATE TABLE t (id INT, PRIMARY KEY (missing));")


def test_create_table_without_body(parser: MySQLParser) -> None:
    """CREATE TABLE needs a column list."""
    with pytest.raises(MalformedStatementError):
        parser.parse("CREATE TABLE t;")


def test_create_table_as_select_is_skipped(parser: MySQLParser) -> None:
    """CTAS has no column definitions to convert."""
    schema = parser.parse("CREATE TABLE a (x INT); CREATE TABLE b AS SELECT * FROM a;")
    assert [t.name for t in schema.tables] == ["a"]
