"""Tests for the PostgreSQL parser."""

import pytest

from sqlmapper.services.sql_conversion.converters import PostgresParser
from sqlmapper.services.sql_conversion.schema import ConstraintKind


@pytest.fixture(name="parser")
def create_parser() -> PostgresParser:
    """A fresh PostgreSQL parser."""
    return PostgresParser()


def test_serial_and_multiword_types(parser: PostgresParser) -> None:
    """SERIAL becomes auto-increment INTEGER; array and zone types keep their names."""
    table = parser.parse(
        "CREATE TABLE public.items ("
        " id SERIAL PRIMARY KEY,"
        " price NUMERIC(10,2) DEFAULT 0,"
        " tags TEXT[],"
        " created TIMESTAMP WITH TIME ZONE DEFAULT now()"
        ");"
    ).tables[0]
    assert table.schema == "public"
    identifier = table.get_column("id")
    assert identifier.data_type.name == "INTEGER"
    assert identifier.auto_increment
    assert table.get_column("price").data_type.precision == 10
    assert table.get_column("tags").data_type.name == "TEXT[]"
    created = table.get_column("created")
    assert created.data_type.name == "TIMESTAMP WITH TIME ZONE"
    assert created.default == "now()"


def test_owned_sequence_is_folded(parser: PostgresParser) -> None:
    """pg_dump's expanded SERIAL turns back into an auto-increment column."""
    schema = parser.parse(
        "CREATE SEQUENCE t_id_seq START WITH 100 INCREMENT BY 1;"
        "CREATE TABLE t (id integer DEFAULT nextval('t_id_seq'::regclass) NOT NULL, name text);"
    )
    column = schema.tables[0].get_column("id")
    assert column.auto_increment
    assert column.default is None
    assert column.identity_seed == 100
    assert schema.sequences == []


def test_shared_sequence_is_kept(parser: PostgresParser) -> None:
    """A sequence feeding two columns stays a sequence."""
    schema = parser.parse(
        "CREATE SEQUENCE shared_seq;"
        "CREATE TABLE a (id INT DEFAULT nextval('shared_seq'));"
        "CREATE TABLE b (id INT DEFAULT nextval('shared_seq'));"
    )
    assert [s.name for s in schema.sequences] == ["shared_seq"]
    assert not schema.tables[0].get_column("id").auto_increment


def test_comments_and_alter_table(parser: PostgresParser) -> None:
    """COMMENT ON and ALTER TABLE ADD CONSTRAINT attach to earlier tables."""
    schema = parser.parse(
        "CREATE TABLE public.t (id integer NOT NULL, name text);"
        "ALTER TABLE ONLY public.t ADD CONSTRAINT t_pkey PRIMARY KEY (id);"
        "ALTER TABLE public.t ALTER COLUMN name SET DEFAULT 'x';"
        "COMMENT ON TABLE public.t IS 'Things';"
        "COMMENT ON COLUMN public.t.name IS 'Display name';"
    )
    table = schema.tables[0]
    assert table.primary_key.name == "t_pkey"
    assert table.get_column("name").default == "'x'"
    assert table.comment == "Things"
    assert table.get_column("name").comment == "Display name"


def test_create_index(parser: PostgresParser) -> None:
    """Method, expression keys and partial-index filters are captured."""
    schema = parser.parse(
        "CREATE TABLE t (name text);"
        "CREATE UNIQUE INDEX idx_t_name ON t USING btree (lower(name)) WHERE name IS NOT NULL;"
    )
    index = schema.tables[0].indexes[0]
    assert index.unique
    assert index.method == "BTREE"
    assert index.columns == ["lower(name)"]
    assert index.where == "name IS NOT NULL"


def test_index_on_undefined_table(parser: PostgresParser) -> None:
    """Indexes on tables outside the script are kept at schema level."""
    schema = parser.parse("CREATE INDEX idx_ext ON other_table (a, b DESC);")
    assert schema.indexes[0].columns == ["a", "b DESC"]
    assert schema.indexes[0].table == "other_table"


def test_function_body_and_trigger(parser: PostgresParser) -> None:
    """Dollar-quoted functions are skipped; the trigger keeps its EXECUTE clause."""
    schema = parser.parse(
        "CREATE FUNCTION touch() RETURNS trigger AS $$ BEGIN NEW.updated := now(); RETURN NEW; END; $$ LANGUAGE plpgsql;"
        "CREATE TRIGGER trg BEFORE UPDATE OF name ON t FOR EACH ROW EXECUTE FUNCTION touch();"
    )
    trigger = schema.triggers[0]
    assert trigger.for_each_row
    assert trigger.update_columns == ["name"]
    assert trigger.body == "EXECUTE FUNCTION touch()"


def test_check_and_foreign_key(parser: PostgresParser) -> None:
    """Named CHECK constraints and inline REFERENCES are captured."""
    table = parser.parse(
        "CREATE TABLE people (age INT CONSTRAINT chk_age CHECK (age >= 18),"
        " parent_id INT REFERENCES people (id) ON DELETE SET NULL, id INT PRIMARY KEY);"
    ).tables[0]
    check = next(c for c in table.constraints if c.kind == ConstraintKind.CHECK)
    assert check.name == "chk_age"
    assert check.expression == "age >= 18"
    fk = next(c for c in table.constraints if c.kind == ConstraintKind.FOREIGN_KEY)
    assert fk.columns == ["parent_id"]
    assert fk.on_delete == "SET NULL"
