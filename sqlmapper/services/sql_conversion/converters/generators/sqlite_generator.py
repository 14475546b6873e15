"""SQLite DDL generator."""
import re

from ...dialects.descriptor import SQLITE
from ...schema import Column, Constraint, ConstraintKind, Schema, Table, Trigger
from ...types import MappedType
from .base_generator import BaseGenerator, _Output

_BARE_DEFAULT = re.compile(r"^CURRENT_(?:TIMESTAMP|DATE|TIME)$", re.IGNORECASE)
_BLOCK_START = re.compile(r"^BEGIN\b", re.IGNORECASE)


class SQLiteGenerator(BaseGenerator):

    def __init__(self, descriptor=SQLITE, **kwargs):
        super().__init__(descriptor, **kwargs)

    def _column_type(self, column: Column, table: Table, out: _Output) -> MappedType:
        if not column.data_type.name:
            return MappedType("", "")
        return super()._column_type(column, table, out)

    def _autoincrement_key(self, column: Column, table: Table) -> bool:
        return self._is_auto_increment(column, table) and table.is_single_primary_key(column.name)

    def _column_definition(self, column: Column, table: Table, out: _Output) -> str:
        mapped = self._column_type(column, table, out)
        name = self.quote_identifier(column.name)
        autoincrement = self._autoincrement_key(column, table)
        if autoincrement:
            parts = [name, "INTEGER", "PRIMARY KEY AUTOINCREMENT"]
        else:
            parts = [name, mapped.sql] if mapped.sql else [name]
            if self._is_auto_increment(column, table):
                self._unsupported(out, f"{table.name}.{column.name}", "AUTO_INCREMENT_UNSUPPORTED",
                                  "AUTOINCREMENT needs the column to be the single INTEGER PRIMARY KEY", "COLUMN")
            if self._is_inline_primary_key(column, table):
                parts.append("PRIMARY KEY")

        self._check_charset(column.charset, f"{table.name}.{column.name}", "COLUMN", out)
        if not column.nullable:
            parts.append("NOT NULL")
        generated = self._generated_clause(column, table, out)
        if not generated and not autoincrement:
            default = self._render_default(column, mapped, table, out)
            if default is not None:
                parts.append(f"DEFAULT {default}")
        if column.unique:
            parts.append("UNIQUE")
        collate = self._collate_clause(column, table, out)
        if collate:
            parts.append(collate)
        if generated:
            parts.append(generated)
        self._on_update_clause(column, table, out)
        return " ".join(parts)

    def _skip_constraint(self, constraint: Constraint, table: Table) -> bool:
        if constraint.kind == ConstraintKind.PRIMARY_KEY and len(constraint.columns) == 1:
            column = table.get_column(constraint.columns[0])
            if column is not None and self._autoincrement_key(column, table):
                return True
        return super()._skip_constraint(constraint, table)

    def _expression_default(self, expression: str) -> str:
        if _BARE_DEFAULT.match(expression) or expression.startswith("("):
            return expression
        return f"({expression})"

    def _emit_trigger(self, trigger: Trigger, schema: Schema, out: _Output) -> None:
        if not self._check_trigger(trigger, out):
            return
        if not trigger.for_each_row:
            self._review(out, trigger.name, "TRIGGER_SCOPE_CHANGED",
                         "statement-level trigger emitted as FOR EACH ROW", "TRIGGER")
        if len(trigger.events) > 1:
            self._review(out, trigger.name, "TRIGGER_SCOPE_CHANGED", "split into one trigger per event", "TRIGGER")

        body = trigger.body.strip().rstrip(";").rstrip()
        if not _BLOCK_START.match(body):
            body = f"BEGIN\n  {body};\nEND"
        table = self.quote_identifier(trigger.table)
        for event in trigger.events:
            name = trigger.name if len(trigger.events) == 1 else f"{trigger.name}_{event.value.lower()}"
            event_sql = event.value
            if event.value == "UPDATE" and trigger.update_columns:
                event_sql += f" OF {self._column_list(trigger.update_columns)}"
            sql = f"CREATE TRIGGER {self.quote_identifier(name)} {trigger.timing.value} {event_sql} ON {table} FOR EACH ROW"
            if trigger.when:
                sql += f" WHEN {trigger.when}"
            self._emit(out, f"{sql}\n{body}")

    def _emit_comments(self, table: Table, out: _Output) -> None:
        lines = []
        if table.comment:
            lines.append(f"-- {table.name}: {table.comment}")
        lines.extend(f"-- {table.name}.{c.name}: {c.comment}" for c in table.columns if c.comment)
        if lines:
            self._review(out, table.name, "COMMENT_UNSUPPORTED", "table and column comments kept as SQL comments", "TABLE")
            self._emit(out, "\n".join(" ".join(line.split()) for line in lines), terminate=False)
