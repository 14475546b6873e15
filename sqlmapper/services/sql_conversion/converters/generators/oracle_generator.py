"""Oracle DDL generator."""
import re
from typing import Optional

from ...dialects.descriptor import ORACLE
from ...schema import Column, Schema, Table, Trigger
from .base_generator import BaseGenerator, _Output

_BLOCK_START = re.compile(r"^(?:BEGIN|DECLARE)\b", re.IGNORECASE)


class OracleGenerator(BaseGenerator):
    VIEW_CREATE = "CREATE OR REPLACE VIEW"
    # Oracle's default rule already behaves as NO ACTION and has no keyword for it.
    FK_ACTION_ALIASES = {"RESTRICT": None, "NO ACTION": None}
    UNSUPPORTED_FK_ACTIONS = frozenset({"SET DEFAULT"})
    INDEX_KINDS = frozenset({"BITMAP"})

    def __init__(self, descriptor=ORACLE, **kwargs):
        super().__init__(descriptor, **kwargs)

    @property
    def _has_identity(self) -> bool:
        return self.version is None or self.version.major >= 12

    def _column_definition(self, column: Column, table: Table, out: _Output) -> str:
        mapped = self._column_type(column, table, out)
        parts = [self.quote_identifier(column.name), mapped.sql]
        self._check_charset(column.charset, f"{table.name}.{column.name}", "COLUMN", out)
        collate = self._collate_clause(column, table, out)
        if collate:
            parts.append(collate)

        generated = self._generated_clause(column, table, out)
        identity = False
        if self._is_auto_increment(column, table):
            if self._has_identity:
                identity = True
                clause = "GENERATED BY DEFAULT AS IDENTITY"
                if column.identity_seed is not None or column.identity_increment is not None:
                    seed, increment = self._identity_options(column)
                    clause += f" (START WITH {seed} INCREMENT BY {increment})"
                parts.append(clause)
            else:
                self._unsupported(out, f"{table.name}.{column.name}", "AUTO_INCREMENT_UNSUPPORTED",
                                  f"identity columns need Oracle 12c or later (target {self.version})", "COLUMN")
        if not generated and not identity:
            default = self._render_default(column, mapped, table, out)
            if default is not None:
                parts.append(f"DEFAULT {default}")
        if generated:
            parts.append(generated)
        if not column.nullable:
            parts.append("NOT NULL")
        self._on_update_clause(column, table, out)
        if column.unique:
            parts.append("UNIQUE")
        if self._is_inline_primary_key(column, table):
            parts.append("PRIMARY KEY")
        return " ".join(parts)

    def _generated_clause(self, column: Column, table: Table, out: _Output) -> Optional[str]:
        if not column.generated:
            return None
        if column.generated_stored:
            self._review(out, f"{table.name}.{column.name}", "COMPUTED_COLUMN_UNSUPPORTED",
                         "stored generated column emitted as VIRTUAL", "COLUMN")
        return f"GENERATED ALWAYS AS ({self._translate_identifiers(column.generated, out)}) VIRTUAL"

    def _table_header(self, table: Table, out: _Output) -> str:
        head = "CREATE GLOBAL TEMPORARY TABLE" if table.temporary else "CREATE TABLE"
        if table.if_not_exists:
            if self.version is not None and self.version.major >= 23:
                head += " IF NOT EXISTS"
            else:
                self.logger.debug(f"IF NOT EXISTS dropped for {table.name}: needs Oracle 23")
        return f"{head} {self.qualified_name(table.schema, table.name, out)}"

    def _table_options(self, table: Table, out: _Output) -> str:
        return " ON COMMIT PRESERVE ROWS" if table.temporary else ""

    def _nextval(self, sequence: str) -> str:
        return f"{self.quote_identifier(sequence)}.NEXTVAL"

    def _emit_trigger(self, trigger: Trigger, schema: Schema, out: _Output) -> None:
        if not self._check_trigger(trigger, out):
            return
        body = trigger.body.strip().rstrip(";").rstrip()
        if not _BLOCK_START.match(body):
            body = f"BEGIN\n  {body};\nEND"
        sql = (f"CREATE OR REPLACE TRIGGER {self.qualified_name(trigger.schema, trigger.name, out)} "
               f"{trigger.timing.value} {self._trigger_events(trigger)} "
               f"ON {self.qualified_name(trigger.schema, trigger.table, out)}")
        if trigger.for_each_row:
            sql += " FOR EACH ROW"
        if trigger.when:
            sql += f" WHEN ({trigger.when})"
        self._emit(out, f"{sql}\n{body};\n/", terminate=False)
