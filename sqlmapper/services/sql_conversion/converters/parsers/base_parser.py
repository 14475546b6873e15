"""
Shared DDL front end.

``BaseParser.parse`` splits a script into statements, classifies each one by
its leading keywords and builds the canonical ``Schema``. Every dialect parser
is a subclass that only adjusts the hooks where its grammar differs (table
options, inline index definitions, trigger headers, serial type names ...).

Statement and definition splitting go through the single splitter in
``utils.sql_splitter``; column and constraint definitions are read from the
token stream produced by ``utils.tokenizer``, so keywords are only recognised
in keyword positions, never inside names, strings or default expressions.
"""
import re
from typing import Dict, List, Optional, Tuple, Union

from ...errors import EmptyInputError, MalformedStatementError
from ...schema import (
    Column,
    Constraint,
    ConstraintKind,
    DataType,
    Index,
    Schema,
    Sequence,
    Table,
    Trigger,
    TriggerEvent,
    TriggerTiming,
    View,
)
from ...utils.sql_splitter import split_statements, split_top_level
from ...utils.tokenizer import Token, TokenKind, slice_between, tokenize, unquote_identifier, unquote_string
from ..base_converter import BaseConverter

# Object keywords that end the CREATE prefix (OR REPLACE, TEMPORARY, UNIQUE ...).
_OBJECT_WORDS = {
    "TABLE", "VIEW", "TRIGGER", "INDEX", "SEQUENCE", "FUNCTION", "PROCEDURE", "PACKAGE", "TYPE",
    "SCHEMA", "DATABASE", "EXTENSION", "SYNONYM", "USER", "ROLE", "DOMAIN", "EVENT", "TABLESPACE",
}

# Words allowed to follow a given word inside a multi-word type name.
_TYPE_FOLLOWERS = {
    "DOUBLE": {"PRECISION"},
    "CHARACTER": {"VARYING", "LARGE"},
    "CHAR": {"VARYING", "LARGE"},
    "NCHAR": {"VARYING"},
    "NATIONAL": {"CHARACTER", "CHAR"},
    "BIT": {"VARYING"},
    "BINARY": {"VARYING", "LARGE"},
    "LARGE": {"OBJECT"},
    "TIMESTAMP": {"WITH", "WITHOUT"},
    "TIME": {"WITH", "WITHOUT", "ZONE"},
    "WITH": {"TIME", "LOCAL"},
    "WITHOUT": {"TIME"},
    "LOCAL": {"TIME"},
    "LONG": {"RAW", "VARCHAR"},
    "INTERVAL": {"DAY", "YEAR"},
    "DAY": {"TO"},
    "YEAR": {"TO"},
    "TO": {"SECOND", "MONTH"},
}

# Words that end a DEFAULT or ON UPDATE expression in a column definition.
_COLUMN_KEYWORDS = {
    "NOT", "NULL", "PRIMARY", "UNIQUE", "CHECK", "REFERENCES", "CONSTRAINT", "COLLATE", "COMMENT",
    "ON", "AUTO_INCREMENT", "AUTOINCREMENT", "IDENTITY", "GENERATED", "CHARACTER", "CHARSET",
    "DEFAULT", "KEY", "ENABLE", "DISABLE", "VISIBLE", "INVISIBLE", "SPARSE", "ROWGUIDCOL", "AS",
    "STORED", "VIRTUAL", "PERSISTED", "UNSIGNED", "ZEROFILL",
}

# Column modifiers that carry no meaning for the canonical model.
_IGNORED_COLUMN_WORDS = {
    "ASC", "DESC", "ENABLE", "DISABLE", "VISIBLE", "INVISIBLE", "SPARSE", "ROWGUIDCOL", "FILESTREAM",
    "CLUSTERED", "NONCLUSTERED", "VALIDATE", "NOVALIDATE", "RELY", "NORELY", "DEFERRABLE",
    "IMMEDIATE", "DEFERRED", "INITIALLY", "SIGNED",
}

_TABLE_CONSTRAINT_WORDS = {"CONSTRAINT", "PRIMARY", "FOREIGN", "UNIQUE", "CHECK"}

_FK_ACTIONS = {"CASCADE", "RESTRICT"}
_PARAM = re.compile(r"^\s*(-?\d+)")

ElementResult = Union[Column, Constraint, Index, None]


class BaseParser(BaseConverter):
    """Text -> ``Schema`` for one dialect."""

    # Type names that stand for an auto-increment column of another type.
    SERIAL_TYPES: Dict[str, str] = {}
    # Leading words of inline (table-body) index definitions.
    INLINE_INDEX_WORDS: Tuple[str, ...] = ()
    # SQLite accepts column definitions without a type.
    ALLOW_TYPELESS_COLUMNS = False
    # Triggers without FOR EACH ROW/STATEMENT are row triggers.
    ROW_TRIGGERS_BY_DEFAULT = False

    def parse(self, text: str) -> Schema:
        """
        Parse a DDL script into a ``Schema``.

        Args:
            text: The script in this parser's dialect.

        Returns:
            A new Schema holding every recognised object in script order.

        Raises:
            EmptyInputError: The text is empty or holds only comments.
            MalformedStatementError: A recognised statement does not have the
                expected shape. Nothing parsed so far is returned.
        """
        if text is None or not text.strip():
            raise EmptyInputError("input text is empty")

        statements = split_statements(text, self.options)
        if not statements:
            raise EmptyInputError("input text contains no statements")

        schema = Schema(dialect=self.dialect)
        for statement in statements:
            self._parse_statement(statement, schema)

        self.logger.debug(
            f"Parsed {len(schema.tables)} table(s), {len(schema.views)} view(s), "
            f"{len(schema.triggers)} trigger(s), {len(schema.sequences)} sequence(s)"
        )
        return schema

    # ------------------------------------------------------------------
    # Statement classification
    # ------------------------------------------------------------------

    def _parse_statement(self, statement: str, schema: Schema) -> None:
        tokens = tokenize(statement, self.options)
        if not tokens:
            return
        head = tokens[0].upper

        if head == "CREATE":
            index, modifiers = self._find_object_word(tokens)
            if index is None:
                self.logger.debug(f"Skipping unrecognised CREATE statement: {_preview(statement)}")
                return
            kind = tokens[index].upper
            if kind == "TABLE":
                self._parse_create_table(statement, tokens, index, modifiers, schema)
            elif kind == "VIEW":
                self._parse_create_view(statement, tokens, index, modifiers, schema)
            elif kind == "TRIGGER":
                self._parse_create_trigger(statement, tokens, index, modifiers, schema)
            elif kind == "INDEX":
                self._parse_create_index(statement, tokens, index, modifiers, schema)
            elif kind == "SEQUENCE":
                self._parse_create_sequence(statement, tokens, index, schema)
            else:
                self.logger.debug(f"Skipping CREATE {kind}: {_preview(statement)}")
            return

        if head == "COMMENT" and len(tokens) > 2 and tokens[1].is_word("ON"):
            self._parse_comment_on(statement, tokens, schema)
            return

        if head == "ALTER" and len(tokens) > 1 and tokens[1].is_word("TABLE"):
            self._parse_alter_table(statement, tokens, schema)
            return

        if not self._parse_other_statement(statement, tokens, schema):
            self.logger.debug(f"Skipping statement: {_preview(statement)}")

    def _parse_other_statement(self, statement: str, tokens: List[Token], schema: Schema) -> bool:
        """Hook for dialect-specific statements. Return True when handled."""
        return False

    @staticmethod
    def _find_object_word(tokens: List[Token]) -> Tuple[Optional[int], set]:
        modifiers = set()
        for i, token in enumerate(tokens[1:], start=1):
            if token.kind == TokenKind.GROUP:
                break
            if token.kind == TokenKind.WORD:
                if token.upper in _OBJECT_WORDS:
                    return i, modifiers
                modifiers.add(token.upper)
        return None, modifiers

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def _parse_name_parts(self, tokens: List[Token], i: int, statement: str) -> Tuple[List[str], int]:
        if i >= len(tokens) or not tokens[i].is_identifier:
            raise MalformedStatementError("expected an object name", _preview(statement))
        parts = [unquote_identifier(tokens[i].text)]
        i += 1
        while i + 1 < len(tokens) and tokens[i].text == "." and tokens[i + 1].is_identifier:
            parts.append(unquote_identifier(tokens[i + 1].text))
            i += 2
        return parts, i

    def _parse_qualified(self, tokens: List[Token], i: int, statement: str) -> Tuple[Optional[str], str, int]:
        """``[catalog.][schema.]name`` starting at ``tokens[i]``."""
        parts, i = self._parse_name_parts(tokens, i, statement)
        schema_name = parts[-2] if len(parts) >= 2 else None
        return schema_name, parts[-1], i

    def _parse_name_list(self, group: Token, statement: str) -> List[str]:
        names = []
        for part in split_top_level(group.inner, ",", self.options):
            part_tokens = tokenize(part, self.options)
            if not part_tokens or not part_tokens[0].is_identifier:
                raise MalformedStatementError(f"invalid column list '{group.text}'", _preview(statement))
            names.append(unquote_identifier(part_tokens[0].text))
        return names

    def _parse_index_columns(self, group: Token) -> List[str]:
        """Index keys: plain column names (with ASC/DESC) or verbatim expressions."""
        columns = []
        for part in split_top_level(group.inner, ",", self.options):
            part_tokens = tokenize(part, self.options)
            if not part_tokens:
                continue
            first = part_tokens[0]
            rest = part_tokens[1:]
            # MySQL prefix lengths: name(10)
            if first.is_identifier and rest and rest[0].kind == TokenKind.GROUP and rest[0].inner.strip().isdigit():
                rest = rest[1:]
            if first.is_identifier and not rest:
                columns.append(unquote_identifier(first.text))
            elif first.is_identifier and len(rest) == 1 and rest[0].is_word("ASC", "DESC"):
                columns.append(f"{unquote_identifier(first.text)} {rest[0].upper}")
            else:
                columns.append(part.strip())
        return columns

    # ------------------------------------------------------------------
    # CREATE TABLE
    # ------------------------------------------------------------------

    def _parse_create_table(self, statement: str, tokens: List[Token], start: int, modifiers: set, schema: Schema) -> None:
        i = start + 1
        if_not_exists = False
        if _words_at(tokens, i, "IF", "NOT", "EXISTS"):
            if_not_exists = True
            i += 3
        schema_name, name, i = self._parse_qualified(tokens, i, statement)

        if i < len(tokens) and tokens[i].is_word("AS", "PARTITION", "OF", "LIKE"):
            self.logger.warning(f"Skipping CREATE TABLE {name}: only column-list definitions are converted")
            return
        if i >= len(tokens) or tokens[i].kind != TokenKind.GROUP:
            raise MalformedStatementError(f"CREATE TABLE {name} has no column list", _preview(statement))

        table = Table(
            name=name,
            schema=schema_name,
            temporary=bool(modifiers & {"TEMPORARY", "TEMP"}),
            if_not_exists=if_not_exists,
        )
        body = tokens[i]
        for definition in split_top_level(body.inner, ",", self.options):
            self._add_table_element(table, definition, statement)

        self._parse_table_options(table, tokens[i + 1:], statement)
        self._validate_table(table, statement)
        schema.tables.append(table)

    def _add_table_element(self, table: Table, definition: str, statement: str) -> None:
        element = self._parse_table_element(definition, table, statement)
        if isinstance(element, Column):
            table.columns.append(element)
        elif isinstance(element, Constraint):
            table.constraints.append(element)
        elif isinstance(element, Index):
            table.indexes.append(element)

    def _parse_table_element(self, definition: str, table: Table, statement: str) -> ElementResult:
        tokens = tokenize(definition, self.options)
        if not tokens:
            raise MalformedStatementError(f"empty definition in table {table.name}", _preview(statement))
        first = tokens[0]
        if first.kind == TokenKind.WORD:
            if first.upper in _TABLE_CONSTRAINT_WORDS or (first.upper == "DEFAULT" and _find_word(tokens, 1, ("FOR",)) < len(tokens)):
                return self._parse_table_constraint(tokens, definition, table, statement)
            if first.upper in self.INLINE_INDEX_WORDS:
                return self._parse_inline_index(tokens, table, statement)
            if first.upper in ("LIKE", "EXCLUDE", "PERIOD"):
                self.logger.debug(f"Ignoring table element in {table.name}: {definition.strip()}")
                return None
        column = self._parse_column(tokens, definition, table, statement)
        return column

    def _parse_table_options(self, table: Table, tokens: List[Token], statement: str) -> None:
        """Hook for trailing table options. Ignored by default."""
        if tokens:
            self.logger.debug(f"Ignoring table options on {table.name}: {slice_between(statement, tokens[0], tokens[-1])}")

    def _validate_table(self, table: Table, statement: str) -> None:
        for constraint in table.constraints:
            for column_name in constraint.columns:
                if not table.has_column(column_name):
                    raise MalformedStatementError(
                        f"{constraint.kind.value} constraint on table {table.name} references "
                        f"unknown column '{column_name}'",
                        _preview(statement),
                    )

    # ------------------------------------------------------------------
    # Column definitions
    # ------------------------------------------------------------------

    def _parse_column(self, tokens: List[Token], definition: str, table: Table, statement: str) -> Column:
        if not tokens[0].is_identifier:
            raise MalformedStatementError(f"invalid column definition '{definition.strip()}'", _preview(statement))
        name = unquote_identifier(tokens[0].text)
        n = len(tokens)
        i = 1

        if i < n and tokens[i].is_word("AS") and i + 1 < n and tokens[i + 1].kind == TokenKind.GROUP:
            # Computed column without a declared type.
            data_type = DataType("")
        elif i < n and tokens[i].kind == TokenKind.WORD and (
                tokens[i].upper not in _COLUMN_KEYWORDS
                or (tokens[i].upper == "CHARACTER" and not _words_at(tokens, i + 1, "SET"))):
            data_type, i = self._parse_data_type(tokens, i, statement)
        elif self.ALLOW_TYPELESS_COLUMNS:
            data_type = DataType("")
        else:
            raise MalformedStatementError(f"column '{name}' in table {table.name} has no data type", _preview(statement))

        column = Column(name=name, data_type=data_type)
        self._apply_serial_type(column)
        self._parse_column_modifiers(column, tokens, i, definition, table, statement)
        return column

    def _apply_serial_type(self, column: Column) -> None:
        replacement = self.SERIAL_TYPES.get(column.data_type.base_name)
        if replacement:
            column.data_type = DataType(replacement)
            column.auto_increment = True

    def _parse_data_type(self, tokens: List[Token], i: int, statement: str) -> Tuple[DataType, int]:
        words = [tokens[i].text]
        params: Optional[Token] = None
        i += 1
        n = len(tokens)
        while i < n:
            token = tokens[i]
            if token.kind == TokenKind.GROUP and params is None:
                params = token
                i += 1
                continue
            if token.kind == TokenKind.WORD and token.upper in _TYPE_FOLLOWERS.get(words[-1].upper(), ()):
                words.append(token.text)
                i += 1
                continue
            if token.text == "[" and i + 1 < n and tokens[i + 1].text == "]":
                words[-1] += "[]"
                i += 2
                continue
            break

        data_type = DataType(" ".join(words))
        if params is not None:
            self._apply_type_params(data_type, params, statement)

        while i < n and tokens[i].is_word("UNSIGNED", "SIGNED", "ZEROFILL"):
            if tokens[i].upper in ("UNSIGNED", "ZEROFILL"):
                data_type.unsigned = True
            i += 1
        return data_type, i

    def _apply_type_params(self, data_type: DataType, params: Token, statement: str) -> None:
        parts = [p.strip() for p in split_top_level(params.inner, ",", self.options)]
        if data_type.base_name in ("ENUM", "SET"):
            data_type.values = parts
            return
        values = [self._parse_type_param(p, data_type, statement) for p in parts if p]
        if not values:
            return
        if data_type.is_fixed_point or len(values) > 1:
            data_type.precision = values[0]
            data_type.scale = values[1] if len(values) > 1 else None
        else:
            data_type.length = values[0]

    @staticmethod
    def _parse_type_param(text: str, data_type: DataType, statement: str) -> int:
        upper = text.upper()
        if upper == "MAX":
            return -1
        if upper == "*":
            return 38
        m = _PARAM.match(text)
        if not m:
            raise MalformedStatementError(f"invalid parameter '{text}' for type {data_type.name}", _preview(statement))
        # Oracle length semantics (10 CHAR / 10 BYTE) are dropped.
        return int(m.group(1))

    def _parse_column_modifiers(self, column: Column, tokens: List[Token], i: int,
                                definition: str, table: Table, statement: str) -> None:
        n = len(tokens)
        constraint_name: Optional[str] = None
        while i < n:
            token = tokens[i]
            word = token.upper

            if word == "CONSTRAINT":
                if i + 1 >= n or not tokens[i + 1].is_identifier:
                    raise MalformedStatementError(f"CONSTRAINT without a name on column {column.name}", _preview(statement))
                constraint_name = unquote_identifier(tokens[i + 1].text)
                i += 2
                continue

            if word == "NOT":
                if _words_at(tokens, i, "NOT", "NULL"):
                    column.nullable = False
                    i += 2
                elif _words_at(tokens, i, "NOT", "FOR", "REPLICATION"):
                    i += 3
                else:
                    i += 1
                continue

            if word == "NULL":
                column.nullable = True
                i += 1
                continue

            if word == "DEFAULT":
                column.default, i = self._collect_expression(tokens, i + 1, definition, statement, "DEFAULT")
                constraint_name = None
                continue

            if word == "PRIMARY" and _words_at(tokens, i, "PRIMARY", "KEY"):
                table.constraints.append(Constraint(
                    kind=ConstraintKind.PRIMARY_KEY, name=constraint_name, columns=[column.name], inline=True,
                ))
                column.nullable = False
                constraint_name = None
                i += 2
                continue

            if word == "UNIQUE":
                i += 1
                if i < n and tokens[i].is_word("KEY"):
                    i += 1
                if constraint_name:
                    table.constraints.append(Constraint(
                        kind=ConstraintKind.UNIQUE, name=constraint_name, columns=[column.name], inline=True,
                    ))
                    constraint_name = None
                else:
                    column.unique = True
                continue

            if word == "CHECK":
                if i + 1 >= n or tokens[i + 1].kind != TokenKind.GROUP:
                    raise MalformedStatementError(f"CHECK without an expression on column {column.name}", _preview(statement))
                table.constraints.append(Constraint(
                    kind=ConstraintKind.CHECK, name=constraint_name, columns=[column.name],
                    expression=tokens[i + 1].inner.strip(), inline=True,
                ))
                constraint_name = None
                i += 2
                continue

            if word == "REFERENCES":
                fk, i = self._parse_references(tokens, i + 1, statement)
                fk.name = constraint_name
                fk.columns = [column.name]
                fk.inline = True
                table.constraints.append(fk)
                constraint_name = None
                continue

            if word == "COLLATE" and i + 1 < n:
                column.collation = _unquote_any(tokens[i + 1].text)
                i += 2
                continue

            if word == "CHARACTER" and _words_at(tokens, i, "CHARACTER", "SET") and i + 2 < n:
                column.charset = _unquote_any(tokens[i + 2].text)
                i += 3
                continue

            if word == "CHARSET" and i + 1 < n:
                column.charset = _unquote_any(tokens[i + 1].text)
                i += 2
                continue

            if word == "COMMENT" and i + 1 < n and tokens[i + 1].kind == TokenKind.STRING:
                column.comment = unquote_string(tokens[i + 1].text, self.descriptor.backslash_escapes)
                i += 2
                continue

            if word == "ON" and _words_at(tokens, i, "ON", "UPDATE"):
                column.on_update, i = self._collect_expression(tokens, i + 2, definition, statement, "ON UPDATE")
                continue

            if word == "ON" and _words_at(tokens, i, "ON", "CONFLICT"):
                i += 3
                continue

            if word in ("AUTO_INCREMENT", "AUTOINCREMENT"):
                column.auto_increment = True
                i += 1
                continue

            if word == "IDENTITY":
                column.auto_increment = True
                i += 1
                if i < n and tokens[i].kind == TokenKind.GROUP:
                    seeds = [p.strip() for p in split_top_level(tokens[i].inner, ",", self.options)]
                    if len(seeds) == 2:
                        column.identity_seed = _to_int(seeds[0], statement)
                        column.identity_increment = _to_int(seeds[1], statement)
                    i += 1
                continue

            if word == "GENERATED":
                i = self._parse_generated(column, tokens, i + 1, statement)
                continue

            if word == "AS" and i + 1 < n and tokens[i + 1].kind == TokenKind.GROUP:
                column.generated = tokens[i + 1].inner.strip()
                i += 2
                continue

            if word in ("STORED", "PERSISTED"):
                column.generated_stored = True
                i += 1
                continue

            if word == "VIRTUAL":
                column.generated_stored = False
                i += 1
                continue

            if word in _IGNORED_COLUMN_WORDS or word == "KEY":
                i += 1
                continue

            self.logger.debug(f"Ignoring token '{token.text}' in column {table.name}.{column.name}")
            i += 1

    def _collect_expression(self, tokens: List[Token], i: int, definition: str,
                            statement: str, clause: str) -> Tuple[str, int]:
        """Tokens from *i* up to the next column keyword, as the original text."""
        start = i
        n = len(tokens)
        while i < n:
            token = tokens[i]
            if (i > start and token.kind == TokenKind.WORD and token.upper in _COLUMN_KEYWORDS
                    and tokens[i - 1].text != "::"):
                break
            i += 1
        if i == start:
            raise MalformedStatementError(f"{clause} without a value", _preview(statement))
        return slice_between(definition, tokens[start], tokens[i - 1]), i

    def _parse_generated(self, column: Column, tokens: List[Token], i: int, statement: str) -> int:
        """``GENERATED {ALWAYS | BY DEFAULT [ON NULL]} AS {IDENTITY [(...)] | (expr) [STORED|VIRTUAL]}``"""
        n = len(tokens)
        if _words_at(tokens, i, "ALWAYS"):
            i += 1
        elif _words_at(tokens, i, "BY", "DEFAULT"):
            i += 2
            if _words_at(tokens, i, "ON", "NULL"):
                i += 2
        if not _words_at(tokens, i, "AS"):
            raise MalformedStatementError(f"GENERATED without AS on column {column.name}", _preview(statement))
        i += 1
        if _words_at(tokens, i, "IDENTITY"):
            column.auto_increment = True
            i += 1
            if i < n and tokens[i].kind == TokenKind.GROUP:
                self._parse_identity_options(column, tokens[i], statement)
                i += 1
            return i
        if i < n and tokens[i].kind == TokenKind.GROUP:
            column.generated = tokens[i].inner.strip()
            return i + 1
        raise MalformedStatementError(f"GENERATED AS without an expression on column {column.name}", _preview(statement))

    def _parse_identity_options(self, column: Column, group: Token, statement: str) -> None:
        inner = tokenize(group.inner, self.options)
        j = 0
        while j < len(inner):
            if inner[j].is_word("START"):
                j += 2 if _words_at(inner, j + 1, "WITH") else 1
                column.identity_seed, j = _signed_number(inner, j, statement)
                continue
            if inner[j].is_word("INCREMENT"):
                j += 2 if _words_at(inner, j + 1, "BY") else 1
                column.identity_increment, j = _signed_number(inner, j, statement)
                continue
            j += 1

    def _parse_references(self, tokens: List[Token], i: int, statement: str) -> Tuple[Constraint, int]:
        ref_schema, ref_table, i = self._parse_qualified(tokens, i, statement)
        fk = Constraint(kind=ConstraintKind.FOREIGN_KEY, ref_table=ref_table, ref_schema=ref_schema)
        n = len(tokens)
        if i < n and tokens[i].kind == TokenKind.GROUP:
            fk.ref_columns = self._parse_name_list(tokens[i], statement)
            i += 1
        while i < n:
            if _words_at(tokens, i, "ON", "DELETE") or _words_at(tokens, i, "ON", "UPDATE"):
                action, j = _fk_action(tokens, i + 2)
                if action is None:
                    break
                if tokens[i + 1].upper == "DELETE":
                    fk.on_delete = action
                else:
                    fk.on_update = action
                i = j
                continue
            if tokens[i].is_word("MATCH") and i + 1 < n:
                i += 2
                continue
            if tokens[i].is_word("NOT") and _words_at(tokens, i + 1, "DEFERRABLE"):
                i += 2
                continue
            if tokens[i].is_word("DEFERRABLE", "INITIALLY", "IMMEDIATE", "DEFERRED", "ENABLE", "DISABLE",
                                 "VALIDATE", "NOVALIDATE", "RELY", "NORELY"):
                i += 1
                continue
            break
        return fk, i

    # ------------------------------------------------------------------
    # Table-level constraints and inline indexes
    # ------------------------------------------------------------------

    def _parse_table_constraint(self, tokens: List[Token], definition: str, table: Table, statement: str) -> Optional[Constraint]:
        n = len(tokens)
        i = 0
        name = None
        if tokens[0].is_word("CONSTRAINT"):
            if n < 2 or not tokens[1].is_identifier:
                raise MalformedStatementError(f"CONSTRAINT without a name in table {table.name}", _preview(statement))
            name = unquote_identifier(tokens[1].text)
            i = 2
        if i >= n:
            raise MalformedStatementError(f"empty constraint {name} in table {table.name}", _preview(statement))

        keyword = tokens[i].upper
        if keyword == "PRIMARY":
            if not _words_at(tokens, i, "PRIMARY", "KEY"):
                raise MalformedStatementError(f"expected PRIMARY KEY in table {table.name}", _preview(statement))
            group = _next_group(tokens, i + 2)
            if group is None:
                raise MalformedStatementError(f"PRIMARY KEY without columns in table {table.name}", _preview(statement))
            return Constraint(kind=ConstraintKind.PRIMARY_KEY, name=name, columns=self._parse_name_list(group, statement))

        if keyword == "UNIQUE":
            i += 1
            while i < n and tokens[i].is_word("KEY", "INDEX", "CLUSTERED", "NONCLUSTERED"):
                i += 1
            if i + 1 < n and tokens[i].is_identifier and tokens[i + 1].kind == TokenKind.GROUP:
                name = name or unquote_identifier(tokens[i].text)
                i += 1
            group = _next_group(tokens, i)
            if group is None:
                raise MalformedStatementError(f"UNIQUE without columns in table {table.name}", _preview(statement))
            return Constraint(kind=ConstraintKind.UNIQUE, name=name, columns=self._parse_name_list(group, statement))

        if keyword == "FOREIGN":
            if not _words_at(tokens, i, "FOREIGN", "KEY"):
                raise MalformedStatementError(f"expected FOREIGN KEY in table {table.name}", _preview(statement))
            i += 2
            if i + 1 < n and tokens[i].is_identifier and tokens[i + 1].kind == TokenKind.GROUP:
                i += 1
            if i >= n or tokens[i].kind != TokenKind.GROUP:
                raise MalformedStatementError(f"FOREIGN KEY without columns in table {table.name}", _preview(statement))
            columns = self._parse_name_list(tokens[i], statement)
            i += 1
            if not _words_at(tokens, i, "REFERENCES"):
                raise MalformedStatementError(f"FOREIGN KEY without REFERENCES in table {table.name}", _preview(statement))
            fk, _ = self._parse_references(tokens, i + 1, statement)
            fk.name = name
            fk.columns = columns
            return fk

        if keyword == "CHECK":
            if i + 1 >= n or tokens[i + 1].kind != TokenKind.GROUP:
                raise MalformedStatementError(f"CHECK without an expression in table {table.name}", _preview(statement))
            return Constraint(kind=ConstraintKind.CHECK, name=name, expression=tokens[i + 1].inner.strip())

        if keyword == "DEFAULT":
            # CONSTRAINT df DEFAULT (expr) FOR column
            j = _find_word(tokens, i + 1, ("FOR",))
            if i + 1 < j < n - 1:
                expression = slice_between(definition, tokens[i + 1], tokens[j - 1])
                column = table.get_column(unquote_identifier(tokens[j + 1].text))
                if column is not None:
                    column.default = expression
                    return None
            raise MalformedStatementError(f"DEFAULT constraint without a target column in table {table.name}", _preview(statement))

        raise MalformedStatementError(f"unrecognised constraint '{definition.strip()}' in table {table.name}", _preview(statement))

    def _parse_inline_index(self, tokens: List[Token], table: Table, statement: str) -> Index:
        """``[FULLTEXT|SPATIAL] {KEY|INDEX} [name] [USING m] (cols) [USING m]``"""
        i = 0
        kind = None
        if tokens[0].is_word("FULLTEXT", "SPATIAL"):
            kind = tokens[0].upper
            i += 1
        while i < len(tokens) and tokens[i].is_word("KEY", "INDEX"):
            i += 1
        name = None
        if i < len(tokens) and tokens[i].is_identifier and not tokens[i].is_word("USING"):
            name = unquote_identifier(tokens[i].text)
            i += 1
        group = _next_group(tokens, i)
        if group is None:
            raise MalformedStatementError(f"index definition without columns in table {table.name}", _preview(statement))
        columns = self._parse_index_columns(group)
        method = None
        for j, token in enumerate(tokens):
            if token.is_word("USING") and j + 1 < len(tokens):
                method = tokens[j + 1].text.upper()
        return Index(
            name=name or _index_name(table.name, columns),
            table=table.name,
            columns=columns,
            schema=table.schema,
            kind=kind,
            method=method,
        )

    # ------------------------------------------------------------------
    # CREATE INDEX
    # ------------------------------------------------------------------

    def _parse_create_index(self, statement: str, tokens: List[Token], start: int, modifiers: set, schema: Schema) -> None:
        n = len(tokens)
        i = start + 1
        if i < n and tokens[i].is_word("CONCURRENTLY"):
            i += 1
        if _words_at(tokens, i, "IF", "NOT", "EXISTS"):
            i += 3
        name = None
        if i < n and not tokens[i].is_word("ON"):
            _, name, i = self._parse_qualified(tokens, i, statement)
        if not _words_at(tokens, i, "ON"):
            raise MalformedStatementError("CREATE INDEX without ON <table>", _preview(statement))
        i += 1
        if i < n and tokens[i].is_word("ONLY"):
            i += 1
        table_schema, table_name, i = self._parse_qualified(tokens, i, statement)

        method = None
        if _words_at(tokens, i, "USING") and i + 1 < n:
            method = tokens[i + 1].text.upper()
            i += 2
        if i >= n or tokens[i].kind != TokenKind.GROUP:
            raise MalformedStatementError(f"CREATE INDEX on {table_name} without a column list", _preview(statement))
        columns = self._parse_index_columns(tokens[i])
        i += 1

        index = Index(
            name=name or _index_name(table_name, columns),
            table=table_name,
            columns=columns,
            unique="UNIQUE" in modifiers,
            schema=table_schema,
            kind=next((k for k in ("FULLTEXT", "SPATIAL", "BITMAP") if k in modifiers), None),
            clustered=True if "CLUSTERED" in modifiers else (False if "NONCLUSTERED" in modifiers else None),
            method=method,
        )

        while i < n:
            token = tokens[i]
            if token.is_word("INCLUDE") and i + 1 < n and tokens[i + 1].kind == TokenKind.GROUP:
                index.include = self._parse_name_list(tokens[i + 1], statement)
                i += 2
                continue
            if token.is_word("WHERE") and i + 1 < n:
                end = _find_word(tokens, i + 1, ("WITH", "TABLESPACE", "ON"))
                last = tokens[end - 1] if end > i + 1 else tokens[i + 1]
                index.where = slice_between(statement, tokens[i + 1], last)
                i = end
                continue
            if token.is_word("USING") and i + 1 < n and index.method is None:
                index.method = tokens[i + 1].text.upper()
                i += 2
                continue
            i += 1

        table = schema.get_table(table_name, table_schema)
        if table is not None:
            table.indexes.append(index)
        else:
            schema.indexes.append(index)

    # ------------------------------------------------------------------
    # CREATE SEQUENCE
    # ------------------------------------------------------------------

    def _parse_create_sequence(self, statement: str, tokens: List[Token], start: int, schema: Schema) -> None:
        i = start + 1
        if _words_at(tokens, i, "IF", "NOT", "EXISTS"):
            i += 3
        schema_name, name, i = self._parse_qualified(tokens, i, statement)
        sequence = Sequence(name=name, schema=schema_name)
        n = len(tokens)
        while i < n:
            token = tokens[i]
            if token.is_word("START"):
                i += 2 if _words_at(tokens, i + 1, "WITH") else 1
                sequence.start, i = _signed_number(tokens, i, statement)
            elif token.is_word("INCREMENT"):
                i += 2 if _words_at(tokens, i + 1, "BY") else 1
                sequence.increment, i = _signed_number(tokens, i, statement)
            elif token.is_word("MINVALUE"):
                sequence.min_value, i = _signed_number(tokens, i + 1, statement)
            elif token.is_word("MAXVALUE"):
                sequence.max_value, i = _signed_number(tokens, i + 1, statement)
            elif token.is_word("CACHE"):
                sequence.cache, i = _signed_number(tokens, i + 1, statement)
            elif token.is_word("CYCLE"):
                sequence.cycle = True
                i += 1
            elif _words_at(tokens, i, "NO", "CYCLE") or token.is_word("NOCYCLE"):
                sequence.cycle = False
                i += 2 if token.is_word("NO") else 1
            elif token.is_word("NO") and i + 1 < n:
                i += 2
            elif token.is_word("AS") and i + 1 < n:
                i += 2
            else:
                i += 1
        schema.sequences.append(sequence)

    # ------------------------------------------------------------------
    # CREATE VIEW
    # ------------------------------------------------------------------

    def _parse_create_view(self, statement: str, tokens: List[Token], start: int, modifiers: set, schema: Schema) -> None:
        i = start + 1
        if _words_at(tokens, i, "IF", "NOT", "EXISTS"):
            i += 3
        schema_name, name, i = self._parse_qualified(tokens, i, statement)
        columns: List[str] = []
        if i < len(tokens) and tokens[i].kind == TokenKind.GROUP:
            columns = self._parse_name_list(tokens[i], statement)
            i += 1
        as_index = _find_word(tokens, i, ("AS",))
        if as_index >= len(tokens) - 1:
            raise MalformedStatementError(f"CREATE VIEW {name} without AS <query>", _preview(statement))
        definition = statement[tokens[as_index + 1].start:].strip()
        schema.views.append(View(
            name=name,
            definition=definition,
            schema=schema_name,
            columns=columns,
            materialized="MATERIALIZED" in modifiers,
        ))

    # ------------------------------------------------------------------
    # CREATE TRIGGER
    # ------------------------------------------------------------------

    def _parse_create_trigger(self, statement: str, tokens: List[Token], start: int, modifiers: set, schema: Schema) -> None:
        n = len(tokens)
        i = start + 1
        if _words_at(tokens, i, "IF", "NOT", "EXISTS"):
            i += 3
        schema_name, name, i = self._parse_qualified(tokens, i, statement)

        timing, i = self._parse_trigger_timing(tokens, i, name, statement)
        events, update_columns, i = self._parse_trigger_events(tokens, i, name, statement)
        if not _words_at(tokens, i, "ON"):
            raise MalformedStatementError(f"trigger {name} has no ON <table>", _preview(statement))
        _, table_name, i = self._parse_qualified(tokens, i + 1, statement)

        trigger = Trigger(
            name=name, table=table_name, timing=timing, events=events, schema=schema_name,
            update_columns=update_columns, for_each_row=self.ROW_TRIGGERS_BY_DEFAULT,
        )
        while i < n:
            token = tokens[i]
            if token.is_word("REFERENCING"):
                i = _find_word(tokens, i + 1, ("FOR", "WHEN", "BEGIN", "DECLARE", "EXECUTE", "FOLLOWS", "PRECEDES", "CALL"))
                continue
            if token.is_word("FOR") and _words_at(tokens, i + 1, "EACH"):
                trigger.for_each_row = _words_at(tokens, i + 2, "ROW")
                i += 3
                continue
            if token.is_word("FOLLOWS", "PRECEDES"):
                i += 2
                continue
            if token.is_word("ENABLE", "DISABLE"):
                i += 1
                continue
            if token.is_word("WHEN"):
                if i + 1 < n and tokens[i + 1].kind == TokenKind.GROUP:
                    trigger.when = tokens[i + 1].inner.strip()
                    i += 2
                else:
                    end = _find_word(tokens, i + 1, ("BEGIN",))
                    if end <= i + 1:
                        raise MalformedStatementError(f"trigger {name} has an empty WHEN clause", _preview(statement))
                    trigger.when = slice_between(statement, tokens[i + 1], tokens[end - 1])
                    i = end
                continue
            break

        if i >= n:
            raise MalformedStatementError(f"trigger {name} has no body", _preview(statement))
        trigger.body = statement[tokens[i].start:].strip()
        schema.triggers.append(trigger)

    def _parse_trigger_timing(self, tokens: List[Token], i: int, name: str, statement: str) -> Tuple[TriggerTiming, int]:
        if _words_at(tokens, i, "BEFORE"):
            return TriggerTiming.BEFORE, i + 1
        if _words_at(tokens, i, "AFTER") or _words_at(tokens, i, "FOR"):
            return TriggerTiming.AFTER, i + 1
        if _words_at(tokens, i, "INSTEAD", "OF"):
            return TriggerTiming.INSTEAD_OF, i + 2
        raise MalformedStatementError(f"trigger {name} has no BEFORE/AFTER/INSTEAD OF timing", _preview(statement))

    def _parse_trigger_events(self, tokens: List[Token], i: int, name: str,
                              statement: str) -> Tuple[List[TriggerEvent], List[str], int]:
        events: List[TriggerEvent] = []
        update_columns: List[str] = []
        n = len(tokens)
        while i < n:
            token = tokens[i]
            if token.is_word("INSERT", "UPDATE", "DELETE"):
                events.append(TriggerEvent(token.upper))
                i += 1
                if token.upper == "UPDATE" and _words_at(tokens, i, "OF"):
                    i += 1
                    while i < n and not tokens[i].is_word("ON", "OR"):
                        if tokens[i].is_identifier:
                            update_columns.append(unquote_identifier(tokens[i].text))
                        i += 1
                continue
            if token.is_word("OR") or token.text == ",":
                i += 1
                continue
            break
        if not events:
            raise MalformedStatementError(f"trigger {name} has no INSERT/UPDATE/DELETE event", _preview(statement))
        return events, update_columns, i

    # ------------------------------------------------------------------
    # COMMENT ON / ALTER TABLE
    # ------------------------------------------------------------------

    def _parse_comment_on(self, statement: str, tokens: List[Token], schema: Schema) -> None:
        target = tokens[2].upper
        if target not in ("TABLE", "COLUMN"):
            self.logger.debug(f"Skipping COMMENT ON {target}")
            return
        parts, i = self._parse_name_parts(tokens, 3, statement)
        if not _words_at(tokens, i, "IS") or i + 1 >= len(tokens):
            raise MalformedStatementError("COMMENT ON without IS <text>", _preview(statement))
        value = tokens[i + 1]
        text = None if value.is_word("NULL") else unquote_string(value.text)

        if target == "TABLE":
            table = schema.get_table(parts[-1], parts[-2] if len(parts) > 1 else None)
            if table is not None:
                table.comment = text
            return
        if len(parts) < 2:
            raise MalformedStatementError("COMMENT ON COLUMN needs <table>.<column>", _preview(statement))
        table = schema.get_table(parts[-2], parts[-3] if len(parts) > 2 else None)
        column = table.get_column(parts[-1]) if table else None
        if column is not None:
            column.comment = text
        else:
            self.logger.debug(f"COMMENT ON COLUMN {'.'.join(parts)}: column not defined in this script")

    def _parse_alter_table(self, statement: str, tokens: List[Token], schema: Schema) -> None:
        i = 2
        while i < len(tokens) and tokens[i].is_word("ONLY", "IF", "EXISTS"):
            i += 1
        schema_name, name, i = self._parse_qualified(tokens, i, statement)
        table = schema.get_table(name, schema_name)
        if table is None or i >= len(tokens):
            self.logger.debug(f"Skipping ALTER TABLE {name}: table not defined in this script")
            return

        rest = statement[tokens[i].start:]
        for clause in split_top_level(rest, ",", self.options):
            clause_tokens = tokenize(clause, self.options)
            j = 0
            while j < len(clause_tokens) and clause_tokens[j].is_word("WITH", "CHECK", "NOCHECK"):
                j += 1
            if j < len(clause_tokens) and clause_tokens[j].is_word("ALTER", "MODIFY"):
                self._apply_alter_column(table, clause, clause_tokens, j + 1, statement)
                continue
            if j >= len(clause_tokens) or not clause_tokens[j].is_word("ADD"):
                self.logger.debug(f"Skipping ALTER TABLE {name} clause: {clause.strip()}")
                continue
            j += 1
            if j < len(clause_tokens) and clause_tokens[j].kind == TokenKind.GROUP:
                for definition in split_top_level(clause_tokens[j].inner, ",", self.options):
                    self._add_table_element(table, definition, statement)
                continue
            if j < len(clause_tokens) and clause_tokens[j].is_word("COLUMN"):
                j += 1
                if _words_at(clause_tokens, j, "IF", "NOT", "EXISTS"):
                    j += 3
            if j >= len(clause_tokens):
                raise MalformedStatementError(f"ALTER TABLE {name} ADD without a definition", _preview(statement))
            self._add_table_element(table, clause[clause_tokens[j].start:], statement)
        self._validate_table(table, statement)

    def _apply_alter_column(self, table: Table, clause: str, tokens: List[Token], j: int, statement: str) -> None:
        """``ALTER [COLUMN] c SET DEFAULT expr | DROP DEFAULT | SET NOT NULL | DROP NOT NULL``"""
        if _words_at(tokens, j, "COLUMN"):
            j += 1
        if j >= len(tokens) or not tokens[j].is_identifier:
            self.logger.debug(f"Skipping ALTER TABLE {table.name} clause: {clause.strip()}")
            return
        column = table.get_column(unquote_identifier(tokens[j].text))
        if column is None:
            raise MalformedStatementError(
                f"ALTER TABLE {table.name} references unknown column '{tokens[j].text}'", _preview(statement)
            )
        j += 1
        if _words_at(tokens, j, "SET", "DEFAULT") and j + 2 < len(tokens):
            column.default = slice_between(clause, tokens[j + 2], tokens[-1])
        elif _words_at(tokens, j, "DROP", "DEFAULT"):
            column.default = None
        elif _words_at(tokens, j, "SET", "NOT", "NULL"):
            column.nullable = False
        elif _words_at(tokens, j, "DROP", "NOT", "NULL"):
            column.nullable = True
        else:
            self.logger.debug(f"Skipping ALTER TABLE {table.name} clause: {clause.strip()}")


# ----------------------------------------------------------------------
# Token helpers
# ----------------------------------------------------------------------

def _preview(statement: str, limit: int = 200) -> str:
    flat = " ".join(statement.split())
    return flat if len(flat) <= limit else flat[:limit] + "..."


def _words_at(tokens: List[Token], i: int, *words: str) -> bool:
    if i + len(words) > len(tokens):
        return False
    return all(tokens[i + k].is_word(w) for k, w in enumerate(words))


def _find_word(tokens: List[Token], i: int, words: Tuple[str, ...]) -> int:
    """Index of the first token at or after *i* that is one of *words*, else ``len(tokens)``."""
    while i < len(tokens):
        if tokens[i].is_word(*words):
            return i
        i += 1
    return len(tokens)


def _next_group(tokens: List[Token], i: int) -> Optional[Token]:
    """First GROUP token at or after *i*, skipping option words (CLUSTERED, USING BTREE ...)."""
    while i < len(tokens):
        if tokens[i].kind == TokenKind.GROUP:
            return tokens[i]
        if tokens[i].kind not in (TokenKind.WORD, TokenKind.QUOTED_IDENT):
            return None
        i += 1
    return None


def _fk_action(tokens: List[Token], i: int) -> Tuple[Optional[str], int]:
    if i < len(tokens) and tokens[i].upper in _FK_ACTIONS:
        return tokens[i].upper, i + 1
    if _words_at(tokens, i, "NO", "ACTION"):
        return "NO ACTION", i + 2
    if _words_at(tokens, i, "SET", "NULL"):
        return "SET NULL", i + 2
    if _words_at(tokens, i, "SET", "DEFAULT"):
        return "SET DEFAULT", i + 2
    return None, i


def _signed_number(tokens: List[Token], i: int, statement: str) -> Tuple[int, int]:
    sign = 1
    if i < len(tokens) and tokens[i].text in ("-", "+"):
        sign = -1 if tokens[i].text == "-" else 1
        i += 1
    if i >= len(tokens) or tokens[i].kind != TokenKind.NUMBER:
        raise MalformedStatementError("expected a number", _preview(statement))
    text = tokens[i].text
    value = int(text) if text.isdigit() else int(float(text))
    return sign * value, i + 1


def _to_int(text: str, statement: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise MalformedStatementError(f"expected an integer, got '{text}'", _preview(statement))


def _unquote_any(text: str) -> str:
    if text.startswith("'"):
        return unquote_string(text)
    return unquote_identifier(text)


def _index_name(table: str, columns: List[str]) -> str:
    parts = [re.sub(r"\W+", "_", c.split(" ")[0]).strip("_") for c in columns]
    return f"idx_{table}_{'_'.join(p for p in parts if p)}"
