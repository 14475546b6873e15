"""MySQL DDL generator."""
import re
from typing import Optional

from sqlmapper.config import config
from ...dialects.descriptor import MYSQL
from ...schema import Column, Index, Schema, Table, Trigger
from ...types import MappedType
from ...utils.regex_utils import apply_regex_rules
from .base_generator import BaseGenerator, _Output

# Expressions MySQL accepts as a bare DEFAULT; anything else needs parentheses.
_BARE_DEFAULT = re.compile(
    r"^(?:CURRENT_TIMESTAMP|NOW|LOCALTIME|LOCALTIMESTAMP)(?:\s*\(\s*\d*\s*\))?$", re.IGNORECASE
)
# Column types that only take expression defaults.
_EXPRESSION_DEFAULT_TYPES = ("TEXT", "BLOB", "JSON", "GEOMETRY", "POINT", "LINESTRING", "POLYGON")


class MySQLGenerator(BaseGenerator):
    VIEW_CREATE = "CREATE OR REPLACE VIEW"
    UNSUPPORTED_FK_ACTIONS = frozenset({"SET DEFAULT"})
    INDEX_KINDS = frozenset({"FULLTEXT", "SPATIAL"})
    INDEX_METHODS = frozenset({"BTREE", "HASH"})

    def __init__(self, descriptor=MYSQL, **kwargs):
        super().__init__(descriptor, **kwargs)
        self.default_engine = (config.get('mysql') or {}).get('default_engine', 'InnoDB')

    def _column_definition(self, column: Column, table: Table, out: _Output) -> str:
        mapped = self._column_type(column, table, out)
        parts = [self.quote_identifier(column.name), mapped.sql]

        if self._check_charset(column.charset, f"{table.name}.{column.name}", "COLUMN", out):
            parts.append(f"CHARACTER SET {column.charset}")
        collate = self._collate_clause(column, table, out)
        if collate:
            parts.append(collate)

        generated = self._generated_clause(column, table, out)
        if generated:
            parts.append(generated)
        if not column.nullable:
            parts.append("NOT NULL")
        if not generated:
            default = self._render_default(column, mapped, table, out)
            if default is not None:
                parts.append(f"DEFAULT {self._wrap_text_default(default, mapped)}")
        on_update = self._on_update_clause(column, table, out)
        if on_update:
            parts.append(on_update)
        if self._is_auto_increment(column, table):
            parts.append("AUTO_INCREMENT")
        if column.unique:
            parts.append("UNIQUE")
        if self._is_inline_primary_key(column, table):
            parts.append("PRIMARY KEY")
        if column.comment:
            parts.append(f"COMMENT {self.descriptor.quote_string(column.comment)}")
        return " ".join(parts)

    def _wrap_text_default(self, default: str, mapped: MappedType) -> str:
        upper = mapped.sql.upper()
        if default.upper() != "NULL" and not default.startswith("(") \
                and any(word in upper for word in _EXPRESSION_DEFAULT_TYPES):
            return f"({default})"
        return default

    def _expression_default(self, expression: str) -> str:
        if _BARE_DEFAULT.match(expression) or expression.startswith("("):
            return expression
        return f"({expression})"

    def _on_update_clause(self, column: Column, table: Table, out: _Output) -> Optional[str]:
        if not column.on_update:
            return None
        expression = column.on_update
        if out.source != self.dialect:
            expression = apply_regex_rules(expression, self._syntax_fixes, self.logger, 'default_values[mysql]')
        return f"ON UPDATE {expression}"

    def _table_options(self, table: Table, out: _Output) -> str:
        engine = table.engine if table.engine and out.source == self.dialect else self.default_engine
        options = [f"ENGINE={engine}"]
        if table.charset and self.charsets.is_charset_supported(table.charset, self.dialect):
            options.append(f"DEFAULT CHARSET={table.charset}")
        collation = self._resolve_collation(table.collation, table.name, "TABLE", out)
        if collation:
            options.append(f"COLLATE={collation}")
        if table.comment:
            options.append(f"COMMENT={self.descriptor.quote_string(table.comment)}")
        return " " + " ".join(options)

    def _index_body(self, index: Index, out: _Output) -> str:
        body = f" ({self._index_keys(index, out)})"
        method = self._index_method(index, out)
        if method:
            body += f" USING {method}"
        return body

    def _emit_trigger(self, trigger: Trigger, schema: Schema, out: _Output) -> None:
        if not self._check_trigger(trigger, out):
            return
        if not trigger.for_each_row:
            self._review(out, trigger.name, "TRIGGER_SCOPE_CHANGED",
                         "statement-level trigger emitted as FOR EACH ROW", "TRIGGER")
        if trigger.update_columns:
            self._review(out, trigger.name, "TRIGGER_SCOPE_CHANGED",
                         f"UPDATE OF {', '.join(trigger.update_columns)} widened to every UPDATE", "TRIGGER")
        if trigger.when:
            self._review(out, trigger.name, "TRIGGER_SCOPE_CHANGED",
                         f"WHEN ({trigger.when}) dropped; move the condition into the body", "TRIGGER")
        if len(trigger.events) > 1:
            self._review(out, trigger.name, "TRIGGER_SCOPE_CHANGED",
                         "split into one trigger per event", "TRIGGER")

        table = self.qualified_name(trigger.schema, trigger.table, out)
        body = trigger.body.strip().rstrip(";").rstrip()
        for event in trigger.events:
            name = trigger.name if len(trigger.events) == 1 else f"{trigger.name}_{event.value.lower()}"
            sql = (f"CREATE TRIGGER {self.quote_identifier(name)} {trigger.timing.value} {event.value} "
                   f"ON {table} FOR EACH ROW\n{body}")
            if ";" in body:
                self._emit(out, f"DELIMITER //\n{sql}//\nDELIMITER ;", terminate=False)
            else:
                self._emit(out, sql)

    def _emit_comments(self, table: Table, out: _Output) -> None:
        # Written inline as COMMENT clauses.
        return None
