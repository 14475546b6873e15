"""PostgreSQL DDL generator."""
import re
from typing import Optional

from ...dialects.descriptor import POSTGRES
from ...schema import Column, Index, Schema, Table, Trigger
from .base_generator import BaseGenerator, _Output

_SERIAL_TYPES = {"INTEGER": "SERIAL", "INT": "SERIAL", "BIGINT": "BIGSERIAL", "SMALLINT": "SMALLSERIAL"}
_EXECUTE = re.compile(r"^EXECUTE\s+(?:FUNCTION|PROCEDURE)\s+(.+)$", re.IGNORECASE | re.DOTALL)
_BLOCK_START = re.compile(r"^(?:BEGIN|DECLARE)\b", re.IGNORECASE)


class PostgresGenerator(BaseGenerator):
    VIEW_CREATE = "CREATE OR REPLACE VIEW"
    INDEX_METHODS = frozenset({"BTREE", "HASH", "GIN", "GIST", "BRIN", "SPGIST"})

    def __init__(self, descriptor=POSTGRES, **kwargs):
        super().__init__(descriptor, **kwargs)

    def _column_definition(self, column: Column, table: Table, out: _Output) -> str:
        mapped = self._column_type(column, table, out)
        type_sql = mapped.sql
        identity = None
        if self._is_auto_increment(column, table):
            serial = _SERIAL_TYPES.get(type_sql.upper())
            if serial and column.identity_seed is None and column.identity_increment is None:
                type_sql = serial
            else:
                identity = "GENERATED BY DEFAULT AS IDENTITY"
                if column.identity_seed is not None or column.identity_increment is not None:
                    seed, increment = self._identity_options(column)
                    identity += f" (START WITH {seed} INCREMENT BY {increment})"

        parts = [self.quote_identifier(column.name), type_sql]
        if identity:
            parts.append(identity)

        self._check_charset(column.charset, f"{table.name}.{column.name}", "COLUMN", out)
        generated = self._generated_clause(column, table, out)
        if generated:
            parts.append(generated)
        collate = self._collate_clause(column, table, out)
        if collate:
            parts.append(collate)
        if not column.nullable:
            parts.append("NOT NULL")
        if not generated and not identity:
            default = self._render_default(column, mapped, table, out)
            if default is not None:
                parts.append(f"DEFAULT {default}")
        self._on_update_clause(column, table, out)
        if column.unique:
            parts.append("UNIQUE")
        if self._is_inline_primary_key(column, table):
            parts.append("PRIMARY KEY")
        return " ".join(parts)

    def _collate_clause(self, column: Column, table: Table, out: _Output) -> Optional[str]:
        collation = self._resolve_collation(column.collation, f"{table.name}.{column.name}", "COLUMN", out)
        return f'COLLATE "{collation}"' if collation else None

    def _generated_clause(self, column: Column, table: Table, out: _Output) -> Optional[str]:
        if not column.generated:
            return None
        if not column.generated_stored and (self.version is None or self.version.major < 18):
            self._review(out, f"{table.name}.{column.name}", "COMPUTED_COLUMN_UNSUPPORTED",
                         "virtual generated column emitted as STORED", "COLUMN")
        return f"GENERATED ALWAYS AS ({self._translate_identifiers(column.generated, out)}) STORED"

    def _nextval(self, sequence: str) -> str:
        return f"nextval('{self.quote_identifier(sequence)}')"

    def _index_body(self, index: Index, out: _Output) -> str:
        method = self._index_method(index, out)
        using = f" USING {method}" if method else ""
        return f"{using} ({self._index_keys(index, out)})"

    def _emit_trigger(self, trigger: Trigger, schema: Schema, out: _Output) -> None:
        if not self._check_trigger(trigger, out):
            return
        body = trigger.body.strip().rstrip(";").rstrip()
        m = _EXECUTE.match(body)
        if m:
            call = m.group(1).strip()
        else:
            function = self.qualified_name(trigger.schema, f"{trigger.name}_fn", out)
            if not _BLOCK_START.match(body):
                body = f"BEGIN\n  {body};\n  RETURN NEW;\nEND"
            self._emit(out, f"CREATE OR REPLACE FUNCTION {function}() RETURNS trigger AS $$\n{body};\n$$ LANGUAGE plpgsql")
            call = f"{function}()"

        scope = "ROW" if trigger.for_each_row else "STATEMENT"
        sql = (f"CREATE TRIGGER {self.quote_identifier(trigger.name)} {trigger.timing.value} "
               f"{self._trigger_events(trigger)} ON {self.qualified_name(trigger.schema, trigger.table, out)} "
               f"FOR EACH {scope}")
        if trigger.when:
            sql += f" WHEN ({trigger.when})"
        self._emit(out, f"{sql}\nEXECUTE FUNCTION {call}")
