"""SQL Server (T-SQL) DDL generator."""
import re
from typing import Optional

from ...dialects.descriptor import SQLSERVER
from ...schema import Column, Index, Schema, Table, Trigger
from .base_generator import BaseGenerator, _Output

_BLOCK_START = re.compile(r"^BEGIN\b", re.IGNORECASE)


class SQLServerGenerator(BaseGenerator):
    FK_ACTION_ALIASES = {"RESTRICT": "NO ACTION"}

    def __init__(self, descriptor=SQLSERVER, **kwargs):
        super().__init__(descriptor, **kwargs)

    def _emit(self, out: _Output, sql: str, terminate: bool = True) -> None:
        # CREATE VIEW / CREATE TRIGGER must start a batch, so every statement gets its own.
        super()._emit(out, sql, terminate)
        out.statements[-1] += f"\n{self.descriptor.batch_separator}"

    def _column_definition(self, column: Column, table: Table, out: _Output) -> str:
        name = self.quote_identifier(column.name)
        if column.generated:
            sql = f"{name} AS ({self._translate_identifiers(column.generated, out)})"
            if column.generated_stored:
                sql += " PERSISTED"
                if not column.nullable:
                    sql += " NOT NULL"
            return sql

        mapped = self._column_type(column, table, out)
        parts = [name, mapped.sql]
        self._check_charset(column.charset, f"{table.name}.{column.name}", "COLUMN", out)
        collate = self._collate_clause(column, table, out)
        if collate:
            parts.append(collate)
        identity = self._is_auto_increment(column, table)
        if identity:
            seed, increment = self._identity_options(column)
            parts.append(f"IDENTITY({seed},{increment})")
        if not column.nullable:
            parts.append("NOT NULL")
        if not identity:
            default = self._render_default(column, mapped, table, out)
            if default is not None:
                parts.append(f"DEFAULT {default}")
        self._on_update_clause(column, table, out)
        if column.unique:
            parts.append("UNIQUE")
        if self._is_inline_primary_key(column, table):
            parts.append("PRIMARY KEY")
        return " ".join(parts)

    def _table_header(self, table: Table, out: _Output) -> str:
        if table.if_not_exists:
            self.logger.debug(f"IF NOT EXISTS dropped for {table.name}")
        if table.temporary:
            return f"CREATE TABLE {self.quote_identifier('#' + table.name)}"
        return f"CREATE TABLE {self.qualified_name(table.schema, table.name, out)}"

    def _nextval(self, sequence: str) -> str:
        return f"NEXT VALUE FOR {self.quote_identifier(sequence)}"

    def _index_prefix(self, index: Index, out: _Output) -> str:
        prefix = super()._index_prefix(index, out)
        if index.clustered is not None:
            prefix += "CLUSTERED " if index.clustered else "NONCLUSTERED "
        return prefix

    def _emit_trigger(self, trigger: Trigger, schema: Schema, out: _Output) -> None:
        if not self._check_trigger(trigger, out):
            return
        if trigger.for_each_row:
            self._review(out, trigger.name, "TRIGGER_SCOPE_CHANGED",
                         "row-level trigger emitted as statement-level; rewrite NEW/OLD references "
                         "against the inserted/deleted tables", "TRIGGER")
        if trigger.update_columns:
            self._review(out, trigger.name, "TRIGGER_SCOPE_CHANGED",
                         f"UPDATE OF {', '.join(trigger.update_columns)} widened to every UPDATE; "
                         "test UPDATE(column) in the body", "TRIGGER")
        if trigger.when:
            self._review(out, trigger.name, "TRIGGER_SCOPE_CHANGED",
                         f"WHEN ({trigger.when}) dropped; move the condition into the body", "TRIGGER")

        body = trigger.body.strip().rstrip(";").rstrip()
        if not _BLOCK_START.match(body):
            body = f"BEGIN\n  {body};\nEND"
        events = ", ".join(event.value for event in trigger.events)
        self._emit(out, f"CREATE TRIGGER {self.qualified_name(trigger.schema, trigger.name, out)} "
                        f"ON {self.qualified_name(trigger.schema, trigger.table, out)} "
                        f"{trigger.timing.value} {events} AS\n{body}")

    def _emit_comments(self, table: Table, out: _Output) -> None:
        """``MS_Description`` extended properties."""
        if table.comment:
            self._emit(out, self._description(table, table.comment, out))
        for column in table.columns:
            if column.comment:
                self._emit(out, self._description(table, column.comment, out, column.name))

    def _description(self, table: Table, text: str, out: _Output, column: Optional[str] = None) -> str:
        def literal(value: str) -> str:
            return "N" + self.descriptor.quote_string(value)

        schema_name = self.descriptor.default_schema
        if table.schema and not self._is_default_schema(table.schema, out):
            schema_name = table.schema
        sql = (f"EXEC sp_addextendedproperty @name = N'MS_Description', @value = {literal(text)}, "
               f"@level0type = N'SCHEMA', @level0name = {literal(schema_name)}, "
               f"@level1type = N'TABLE', @level1name = {literal(table.name)}")
        if column:
            sql += f", @level2type = N'COLUMN', @level2name = {literal(column)}"
        return sql
