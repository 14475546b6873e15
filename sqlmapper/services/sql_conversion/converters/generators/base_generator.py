"""
Shared DDL back end.

``BaseGenerator.generate`` walks a ``Schema`` in a fixed order (sequences,
tables, indexes, views, triggers, comments) and renders each object through
hooks that the dialect generators override where their syntax differs.

Everything a call produces (the statement list, pending review notes and the
manual-review items) lives in a per-call ``_Output``; generator instances keep
only configuration loaded at construction.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from sqlmapper.config import config
from ...dialects import DialectDescriptor, get_descriptor
from ...errors import (
    IdentifierTooLongError,
    NilSchemaError,
    ReservedWordCollisionError,
    UnsupportedConstructError,
)
from ...schema import (
    Column,
    Constraint,
    ConstraintKind,
    Index,
    Schema,
    Sequence,
    Table,
    Trigger,
    TriggerTiming,
    View,
)
from ...types import (
    DEFAULT_REGISTRY,
    MappedType,
    TypeMapper,
    Value,
    ValueKind,
    Version,
    get_charset_registry,
    source_key,
)
from ...utils.config_loader import load_json_from_conversion_config
from ...utils.manual_review_logger import ManualReviewLogger
from ...utils.regex_utils import apply_regex_rules
from ...utils.sequence_utils import sequence_reference, strip_outer_parens
from ...utils.sql_splitter import SplitterOptions
from ...utils.tokenizer import TokenKind, tokenize, unquote_identifier
from ..base_converter import BaseConverter

QUOTE_POLICIES = ("needed", "always", "never")
UNSUPPORTED_POLICIES = ("review", "error")

_INTEGER_TYPES = {
    "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "INTEGER", "BIGINT", "INT2", "INT4", "INT8",
}
_PLAIN_KEY = re.compile(r"^([A-Za-z_][A-Za-z0-9_$]*)(?:\s+(ASC|DESC))?$", re.IGNORECASE)
_PARAMS = re.compile(r"\(.*\)$")


@dataclass
class _Output:
    """Scratch state owned by one ``generate`` call."""
    source: Optional[str]
    review: ManualReviewLogger
    label: str = "-"
    statements: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)


def is_integer_column(column: Column) -> bool:
    data_type = column.data_type
    if data_type.base_name in _INTEGER_TYPES:
        return True
    # Oracle NUMBER(p) / NUMBER(p,0)
    return data_type.base_name in ("NUMBER", "NUMERIC", "DECIMAL") and data_type.precision is not None \
        and not data_type.scale


class BaseGenerator(BaseConverter):
    """``Schema`` -> DDL text for one dialect."""

    STATEMENT_TERMINATOR = ";"
    VIEW_CREATE = "CREATE VIEW"
    # Referential actions the target spells differently; None drops the clause.
    FK_ACTION_ALIASES: Dict[str, Optional[str]] = {}
    # Referential actions the target rejects.
    UNSUPPORTED_FK_ACTIONS = frozenset()
    # Index kinds (FULLTEXT, SPATIAL, BITMAP) the target can create.
    INDEX_KINDS = frozenset()
    # Index methods the target accepts after USING.
    INDEX_METHODS = frozenset()

    def __init__(self, descriptor: DialectDescriptor | str, quote_identifiers: Optional[str] = None,
                 on_unsupported: Optional[str] = None, version=None):
        super().__init__(descriptor)
        conversion_cfg = config.get('conversion') or {}

        self.quote_policy = (quote_identifiers or conversion_cfg.get('quote_identifiers') or 'needed').lower()
        if self.quote_policy not in QUOTE_POLICIES:
            raise ValueError(f"quote_identifiers must be one of {QUOTE_POLICIES}, got '{self.quote_policy}'")
        self.on_unsupported = (on_unsupported or conversion_cfg.get('on_unsupported') or 'review').lower()
        if self.on_unsupported not in UNSUPPORTED_POLICIES:
            raise ValueError(f"on_unsupported must be one of {UNSUPPORTED_POLICIES}, got '{self.on_unsupported}'")

        default_version = (conversion_cfg.get('default_versions') or {}).get(self.dialect)
        self.version = Version.parse(version or default_version) if (version or default_version) else None
        self.type_mapper = TypeMapper(self.dialect, self.version)
        self.charsets = get_charset_registry()

        common_rules = load_json_from_conversion_config(self.logger, 'common', 'default_values.json')
        target_rules = load_json_from_conversion_config(self.logger, self.dialect, 'default_values.json')
        self._preprocessing = tuple(common_rules.get('preprocessing', []))
        self._syntax_fixes = tuple(target_rules.get('syntax_fixes', []))

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def generate(self, schema: Optional[Schema], review=None, label: str = "-") -> str:
        """
        Render *schema* as a DDL script in this generator's dialect.

        Args:
            schema: The canonical schema. It is never modified.
            review: Optional list or ``ManualReviewLogger`` that receives the
                manual-review items recorded during this call.
            label: File name recorded on review items.

        Returns:
            The script; statements are separated by blank lines.

        Raises:
            NilSchemaError: *schema* is None.
            UnsupportedConstructError: A construct has no target form and
                ``on_unsupported`` is ``error``.
            IdentifierTooLongError / ReservedWordCollisionError: An
                identifier cannot be written in the target.
        """
        if schema is None:
            raise NilSchemaError("generate() requires a schema")

        out = _Output(source=schema.dialect, review=ManualReviewLogger(logger=self.logger), label=label)

        for sequence in schema.sequences:
            self._emit_sequence(sequence, out)
        for table in schema.tables:
            self._emit_table(table, schema, out)
        for table in schema.tables:
            for index in table.indexes:
                self._emit_index(index, table.schema, out)
        for index in schema.indexes:
            self._emit_index(index, index.schema, out)
        for view in schema.views:
            self._emit_view(view, out)
        for trigger in schema.triggers:
            self._emit_trigger(trigger, schema, out)
        for table in schema.tables:
            self._emit_comments(table, out)
        self._flush_notes(out)

        if review is not None:
            review.extend(out.review.review_items)
        self.logger.debug(f"Generated {len(out.statements)} statement(s) for {self.descriptor.display_name}")
        return "\n\n".join(out.statements) + "\n" if out.statements else ""

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------

    def _emit(self, out: _Output, sql: str, terminate: bool = True) -> None:
        text = sql.rstrip()
        if terminate:
            text += self.STATEMENT_TERMINATOR
        if out.notes:
            text = "\n".join(out.notes) + "\n" + text
            out.notes.clear()
        out.statements.append(text)

    def _flush_notes(self, out: _Output) -> None:
        if out.notes:
            out.statements.append("\n".join(out.notes))
            out.notes.clear()

    def _review(self, out: _Output, object_name: str, issue_type: str, message: str, object_type: str) -> None:
        """Record a manual-review item and a SQL comment in front of the next statement."""
        out.review.log_manual_review_item(
            file_path=out.label,
            object_name=object_name,
            issue_type=issue_type,
            message=message,
            object_type=object_type,
        )
        out.notes.append(f"-- REVIEW [{issue_type}] {object_name}: {' '.join(message.split())}")

    def _unsupported(self, out: _Output, object_name: str, issue_type: str, message: str, object_type: str) -> None:
        if self.on_unsupported == "error":
            raise UnsupportedConstructError(f"{self.descriptor.display_name}: {message}", object_name)
        self._review(out, object_name, issue_type, message, object_type)

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def quote_identifier(self, name: str) -> str:
        if not self.descriptor.fits_identifier(name, self.version):
            raise IdentifierTooLongError(
                f"identifier '{name}' has {len(name)} characters; {self.descriptor.display_name} "
                f"(version {self.version or 'unspecified'}) allows {self.descriptor.identifier_limit(self.version)}"
            )
        if self.quote_policy == "always":
            return self.descriptor.quote(name)
        if self.quote_policy == "never":
            if self.descriptor.is_reserved(name):
                raise ReservedWordCollisionError(
                    f"'{name}' is reserved in {self.descriptor.display_name} and identifier quoting is disabled"
                )
            return name
        return self.descriptor.quote(name) if self.descriptor.needs_quoting(name) else name

    def qualified_name(self, schema_name: Optional[str], name: str, out: _Output) -> str:
        if schema_name and self.descriptor.supports_schemas and not self._is_default_schema(schema_name, out):
            return f"{self.quote_identifier(schema_name)}.{self.quote_identifier(name)}"
        return self.quote_identifier(name)

    def _is_default_schema(self, schema_name: str, out: _Output) -> bool:
        defaults = {self.descriptor.default_schema}
        if out.source:
            defaults.add(get_descriptor(out.source).default_schema)
        return schema_name.lower() in {d.lower() for d in defaults if d}

    def _column_list(self, names: List[str]) -> str:
        return ", ".join(self.quote_identifier(n) for n in names)

    def _translate_identifiers(self, expression: str, out: _Output) -> str:
        """Re-quote quoted identifiers of the source dialect inside an opaque expression."""
        if not expression or not out.source or out.source == self.dialect:
            return expression
        options = SplitterOptions.for_dialect(get_descriptor(out.source))
        pieces, last = [], 0
        for token in tokenize(expression, options):
            if token.kind == TokenKind.QUOTED_IDENT:
                pieces.append(expression[last:token.start])
                pieces.append(self.descriptor.quote(unquote_identifier(token.text)))
                last = token.end
        pieces.append(expression[last:])
        return "".join(pieces)

    # ------------------------------------------------------------------
    # Types and defaults
    # ------------------------------------------------------------------

    def _column_type(self, column: Column, table: Table, out: _Output) -> MappedType:
        if not column.data_type.name:
            fallback = self.type_mapper.fallback()
            self._review(out, f"{table.name}.{column.name}", "TYPE_FALLBACK",
                         f"column has no declared type; using {fallback.sql}", "COLUMN")
            return fallback
        mapped = self.type_mapper.map_type(column.data_type, out.source)
        if mapped.fallback:
            self._review(out, f"{table.name}.{column.name}", "TYPE_FALLBACK",
                         f"type {column.data_type} has no {self.descriptor.display_name} mapping; using {mapped.sql}",
                         "COLUMN")
        return mapped

    def _is_auto_increment(self, column: Column, table: Table) -> bool:
        """Auto-increment as declared, or a sequence default the target can only express as one."""
        if column.auto_increment:
            return True
        if self.descriptor.supports_sequences or not column.default:
            return False
        return bool(sequence_reference(column.default)) and is_integer_column(column) \
            and table.is_single_primary_key(column.name)

    def _identity_options(self, column: Column) -> Tuple[int, int]:
        """Seed and increment of an identity column; only missing values default to 1."""
        seed = 1 if column.identity_seed is None else column.identity_seed
        increment = 1 if column.identity_increment is None else column.identity_increment
        return seed, increment

    def _render_default(self, column: Column, mapped: MappedType, table: Table, out: _Output) -> Optional[str]:
        default = column.default
        if default is None or not default.strip():
            return None

        sequence = sequence_reference(default)
        if sequence:
            return self._sequence_default(sequence, column, table, out)

        same_dialect = out.source == self.dialect
        text = default.strip()
        if not same_dialect:
            text = apply_regex_rules(text, self._preprocessing, self.logger, 'default_values[common]')

        value = Value.from_sql_literal(text)
        if value is not None:
            if same_dialect:
                return text
            return self._literal_default(value, text, column, mapped)

        if same_dialect:
            return text
        expression = apply_regex_rules(strip_outer_parens(text), self._syntax_fixes, self.logger,
                                       f'default_values[{self.dialect}]')
        return self._expression_default(self._translate_identifiers(expression, out))

    def _literal_default(self, value: Value, text: str, column: Column, mapped: MappedType) -> str:
        converted = self._convert_value(value, column, mapped)
        if converted == value and value.kind in (ValueKind.INTEGER, ValueKind.FLOAT):
            return strip_outer_parens(text)
        return converted.to_sql_literal(self.descriptor)

    def _convert_value(self, value: Value, column: Column, mapped: MappedType) -> Value:
        source_full = source_key(column.data_type)
        source_bare = _PARAMS.sub("", source_full)
        target_bare = _PARAMS.sub("", mapped.key)
        for src in dict.fromkeys((source_full, source_bare)):
            for tgt in dict.fromkeys((mapped.key, target_bare)):
                mapping = DEFAULT_REGISTRY.find(src, tgt, target_version=self.version)
                if mapping is None:
                    continue
                try:
                    return mapping.converter(value)
                except (ValueError, TypeError) as e:
                    self.logger.debug(f"Default {value.payload!r} kept as written ({src} -> {tgt}): {e}")
                    return value
        return value

    def _expression_default(self, expression: str) -> str:
        return expression

    def _sequence_default(self, sequence: str, column: Column, table: Table, out: _Output) -> Optional[str]:
        if self._is_auto_increment(column, table):
            return None
        if not self.descriptor.supports_sequences:
            self._unsupported(out, f"{table.name}.{column.name}", "AUTO_INCREMENT_UNSUPPORTED",
                              f"default draws from sequence {sequence}; {self.descriptor.display_name} has no "
                              "sequences and the column is not a single integer primary key, so the default was dropped",
                              "COLUMN")
            return None
        return self._nextval(sequence)

    def _nextval(self, sequence: str) -> str:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Charset / collation / column extras
    # ------------------------------------------------------------------

    def _check_charset(self, charset: Optional[str], object_name: str, object_type: str, out: _Output) -> bool:
        """True when *charset* can be kept; unsupported ones are reported."""
        if not charset:
            return False
        if self.charsets.is_charset_supported(charset, self.dialect):
            return True
        self._unsupported(out, object_name, "CHARSET_UNSUPPORTED",
                          f"character set {charset} is not available in {self.descriptor.display_name}", object_type)
        return False

    def _resolve_collation(self, collation: Optional[str], object_name: str, object_type: str,
                           out: _Output) -> Optional[str]:
        if not collation:
            return None
        if out.source == self.dialect:
            return collation
        resolved = self.charsets.resolve_collation(collation, self.dialect)
        if resolved is None:
            self._unsupported(out, object_name, "COLLATION_UNSUPPORTED",
                              f"collation {collation} has no {self.descriptor.display_name} equivalent", object_type)
        return resolved

    def _collate_clause(self, column: Column, table: Table, out: _Output) -> Optional[str]:
        collation = self._resolve_collation(column.collation, f"{table.name}.{column.name}", "COLUMN", out)
        return f"COLLATE {collation}" if collation else None

    def _on_update_clause(self, column: Column, table: Table, out: _Output) -> Optional[str]:
        if column.on_update:
            self._unsupported(out, f"{table.name}.{column.name}", "ON_UPDATE_UNSUPPORTED",
                              f"ON UPDATE {column.on_update} cannot be declared on a "
                              f"{self.descriptor.display_name} column", "COLUMN")
        return None

    def _generated_clause(self, column: Column, table: Table, out: _Output) -> Optional[str]:
        if not column.generated:
            return None
        storage = "STORED" if column.generated_stored else "VIRTUAL"
        return f"GENERATED ALWAYS AS ({self._translate_identifiers(column.generated, out)}) {storage}"

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def _emit_table(self, table: Table, schema: Schema, out: _Output) -> None:
        self._check_charset(table.charset, table.name, "TABLE", out)
        definitions = [self._column_definition(column, table, out) for column in table.columns]
        for constraint in table.constraints:
            if self._skip_constraint(constraint, table):
                continue
            rendered = self._constraint_definition(constraint, table, schema, out)
            if rendered:
                definitions.append(rendered)
        definitions.extend(self._enum_checks(table, out))

        body = ",\n  ".join(definitions)
        self._emit(out, f"{self._table_header(table, out)} (\n  {body}\n){self._table_options(table, out)}")

    def _table_header(self, table: Table, out: _Output) -> str:
        head = "CREATE TEMPORARY TABLE" if table.temporary else "CREATE TABLE"
        if table.if_not_exists:
            head += " IF NOT EXISTS"
        return f"{head} {self.qualified_name(table.schema, table.name, out)}"

    def _table_options(self, table: Table, out: _Output) -> str:
        return ""

    def _column_definition(self, column: Column, table: Table, out: _Output) -> str:
        raise NotImplementedError

    def _inline_primary_key(self, table: Table) -> Optional[str]:
        """Column whose unnamed single-column primary key is written on the column itself."""
        pk = table.primary_key
        if pk and pk.inline and not pk.name and len(pk.columns) == 1:
            return pk.columns[0]
        return None

    def _is_inline_primary_key(self, column: Column, table: Table) -> bool:
        name = self._inline_primary_key(table)
        return bool(name and name.lower() == column.name.lower())

    def _skip_constraint(self, constraint: Constraint, table: Table) -> bool:
        return constraint.kind == ConstraintKind.PRIMARY_KEY and self._inline_primary_key(table) is not None

    def _constraint_definition(self, constraint: Constraint, table: Table, schema: Schema,
                               out: _Output) -> Optional[str]:
        prefix = f"CONSTRAINT {self.quote_identifier(constraint.name)} " if constraint.name else ""
        kind = constraint.kind
        if kind == ConstraintKind.PRIMARY_KEY:
            body = f"PRIMARY KEY ({self._column_list(constraint.columns)})"
        elif kind == ConstraintKind.UNIQUE:
            body = f"UNIQUE ({self._column_list(constraint.columns)})"
        elif kind == ConstraintKind.CHECK:
            body = f"CHECK ({self._translate_identifiers(constraint.expression, out)})"
        else:
            body = self._foreign_key(constraint, table, schema, out)
        return prefix + body

    def _foreign_key(self, constraint: Constraint, table: Table, schema: Schema, out: _Output) -> str:
        ref_columns = constraint.ref_columns
        if not ref_columns:
            referenced = schema.get_table(constraint.ref_table, constraint.ref_schema)
            if referenced is not None and referenced.primary_key is not None:
                ref_columns = referenced.primary_key.columns
        sql = (f"FOREIGN KEY ({self._column_list(constraint.columns)}) "
               f"REFERENCES {self.qualified_name(constraint.ref_schema, constraint.ref_table, out)}")
        if ref_columns:
            sql += f" ({self._column_list(ref_columns)})"
        on_delete = self._fk_action("DELETE", constraint.on_delete, constraint, table, out)
        if on_delete:
            sql += f" ON DELETE {on_delete}"
        on_update = self._fk_action("UPDATE", constraint.on_update, constraint, table, out)
        if on_update:
            sql += f" ON UPDATE {on_update}"
        return sql

    def _fk_action(self, event: str, action: Optional[str], constraint: Constraint, table: Table,
                   out: _Output) -> Optional[str]:
        if not action:
            return None
        action = self.FK_ACTION_ALIASES.get(action, action)
        if action is None:
            return None
        unsupported = action in self.UNSUPPORTED_FK_ACTIONS
        if event == "UPDATE" and not self.descriptor.supports_fk_on_update and action not in ("NO ACTION", "RESTRICT"):
            unsupported = True
        if unsupported:
            name = constraint.name or f"{table.name}({', '.join(constraint.columns)})"
            self._unsupported(out, name, "FK_RULE_UNSUPPORTED",
                              f"ON {event} {action} is not supported by {self.descriptor.display_name}; clause dropped",
                              "CONSTRAINT")
            return None
        return action

    def _enum_checks(self, table: Table, out: _Output) -> List[str]:
        """CHECK (col IN (...)) for ENUM columns on targets without an ENUM type."""
        checks = []
        for column in table.columns:
            data_type = column.data_type
            if data_type.base_name != "ENUM" or not data_type.values or self.dialect == "mysql":
                continue
            values = ", ".join(data_type.values)
            checks.append(f"CHECK ({self.quote_identifier(column.name)} IN ({values}))")
        return checks

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    def _emit_index(self, index: Index, schema_name: Optional[str], out: _Output) -> None:
        sql = f"CREATE {self._index_prefix(index, out)}INDEX {self.quote_identifier(index.name)} " \
              f"ON {self.qualified_name(schema_name, index.table, out)}"
        sql += self._index_body(index, out)
        if index.include:
            if self.descriptor.supports_include_columns:
                sql += f" INCLUDE ({self._column_list(index.include)})"
            else:
                self._unsupported(out, index.name, "INDEX_EXTENSION_UNSUPPORTED",
                                  f"INCLUDE ({', '.join(index.include)}) dropped", "INDEX")
        if index.where:
            if self.descriptor.supports_filtered_indexes:
                sql += f" WHERE {self._translate_identifiers(index.where, out)}"
            else:
                self._unsupported(out, index.name, "INDEX_EXTENSION_UNSUPPORTED",
                                  f"filter WHERE {index.where} dropped; the index now covers every row", "INDEX")
        self._emit(out, sql)

    def _index_prefix(self, index: Index, out: _Output) -> str:
        prefix = "UNIQUE " if index.unique else ""
        if index.kind:
            if index.kind.upper() in self.INDEX_KINDS:
                prefix += f"{index.kind.upper()} "
            else:
                self._unsupported(out, index.name, "INDEX_EXTENSION_UNSUPPORTED",
                                  f"{index.kind} index created as a regular index", "INDEX")
        return prefix

    def _index_body(self, index: Index, out: _Output) -> str:
        return f" ({self._index_keys(index, out)})"

    def _index_method(self, index: Index, out: _Output) -> Optional[str]:
        if not index.method:
            return None
        if index.method.upper() in self.INDEX_METHODS:
            return index.method.upper() if self.dialect == "mysql" else index.method.lower()
        if index.method.upper() != "BTREE":
            self._unsupported(out, index.name, "INDEX_EXTENSION_UNSUPPORTED",
                              f"index method {index.method} dropped", "INDEX")
        return None

    def _index_keys(self, index: Index, out: _Output) -> str:
        keys = []
        for key in index.columns:
            m = _PLAIN_KEY.match(key)
            if m:
                keys.append(self.quote_identifier(m.group(1)) + (f" {m.group(2).upper()}" if m.group(2) else ""))
            else:
                keys.append(self._translate_identifiers(key, out))
        return ", ".join(keys)

    # ------------------------------------------------------------------
    # Sequences, views, triggers, comments
    # ------------------------------------------------------------------

    def _emit_sequence(self, sequence: Sequence, out: _Output) -> None:
        if not self.descriptor.supports_sequences:
            self._unsupported(out, sequence.name, "SEQUENCE_UNSUPPORTED",
                              f"{self.descriptor.display_name} has no sequences; CREATE SEQUENCE "
                              f"{sequence.name} was not converted", "SEQUENCE")
            return
        parts = [f"CREATE SEQUENCE {self.qualified_name(sequence.schema, sequence.name, out)}"]
        parts.extend(self._sequence_options(sequence))
        self._emit(out, " ".join(parts))

    def _sequence_options(self, sequence: Sequence) -> List[str]:
        options = [f"START WITH {sequence.start}", f"INCREMENT BY {sequence.increment}"]
        if sequence.min_value is not None:
            options.append(f"MINVALUE {sequence.min_value}")
        if sequence.max_value is not None:
            options.append(f"MAXVALUE {sequence.max_value}")
        if sequence.cache is not None:
            options.append(f"CACHE {sequence.cache}")
        if sequence.cycle:
            options.append("CYCLE")
        return options

    def _emit_view(self, view: View, out: _Output) -> None:
        materialized = view.materialized
        if materialized and not self.descriptor.supports_materialized_views:
            self._unsupported(out, view.name, "MATERIALIZED_VIEW_UNSUPPORTED",
                              f"materialized view {view.name} created as a plain view", "VIEW")
            materialized = False
        head = "CREATE MATERIALIZED VIEW" if materialized else self.VIEW_CREATE
        sql = f"{head} {self.qualified_name(view.schema, view.name, out)}"
        if view.columns:
            sql += f" ({self._column_list(view.columns)})"
        definition = view.definition.strip().rstrip(";").rstrip()
        self._emit(out, f"{sql} AS\n{definition}")

    def _emit_trigger(self, trigger: Trigger, schema: Schema, out: _Output) -> None:
        raise NotImplementedError

    def _check_trigger(self, trigger: Trigger, out: _Output) -> bool:
        """Report what the target cannot keep; False when the trigger must be skipped."""
        timing = trigger.timing
        if (timing == TriggerTiming.BEFORE and not self.descriptor.supports_before_triggers) or \
                (timing == TriggerTiming.INSTEAD_OF and not self.descriptor.supports_instead_of_triggers):
            self._unsupported(out, trigger.name, "TRIGGER_TIMING_UNSUPPORTED",
                              f"{timing.value} triggers are not supported by {self.descriptor.display_name}; "
                              f"trigger {trigger.name} on {trigger.table} was not converted", "TRIGGER")
            return False
        if out.source and out.source != self.dialect:
            self._review(out, trigger.name, "TRIGGER_BODY_COPIED",
                         f"body copied from {get_descriptor(out.source).display_name}", "TRIGGER")
        return True

    def _trigger_events(self, trigger: Trigger, separator: str = " OR ") -> str:
        events = []
        for event in trigger.events:
            text = event.value
            if event.value == "UPDATE" and trigger.update_columns:
                text += f" OF {self._column_list(trigger.update_columns)}"
            events.append(text)
        return separator.join(events)

    def _emit_comments(self, table: Table, out: _Output) -> None:
        """``COMMENT ON TABLE`` / ``COMMENT ON COLUMN`` statements."""
        name = self.qualified_name(table.schema, table.name, out)
        if table.comment:
            self._emit(out, f"COMMENT ON TABLE {name} IS {self.descriptor.quote_string(table.comment)}")
        for column in table.columns:
            if column.comment:
                self._emit(out, f"COMMENT ON COLUMN {name}.{self.quote_identifier(column.name)} "
                                f"IS {self.descriptor.quote_string(column.comment)}")
