"""SQL Server (T-SQL) DDL parser."""
from typing import Dict, List

from ...dialects.descriptor import SQLSERVER
from ...errors import MalformedStatementError
from ...schema import Schema, Trigger
from ...utils.tokenizer import Token, TokenKind, unquote_string
from .base_parser import BaseParser, _preview, _unquote_any, _words_at

# Positional order of sp_addextendedproperty arguments.
_PROPERTY_ARGS = (
    "@name", "@value", "@level0type", "@level0name",
    "@level1type", "@level1name", "@level2type", "@level2name",
)


class SQLServerParser(BaseParser):
    INLINE_INDEX_WORDS = ("INDEX",)

    def __init__(self, descriptor=SQLSERVER):
        super().__init__(descriptor)

    def _parse_create_trigger(self, statement: str, tokens: List[Token], start: int, modifiers: set, schema: Schema) -> None:
        """
        ``CREATE TRIGGER t ON tbl [WITH ...] {FOR | AFTER | INSTEAD OF} events
        [WITH APPEND] [NOT FOR REPLICATION] AS body``

        T-SQL triggers are statement-level; the body sees the ``inserted`` and
        ``deleted`` pseudo tables instead of per-row NEW/OLD.
        """
        n = len(tokens)
        schema_name, name, i = self._parse_qualified(tokens, start + 1, statement)
        if not _words_at(tokens, i, "ON"):
            raise MalformedStatementError(f"trigger {name} has no ON <table>", _preview(statement))
        _, table_name, i = self._parse_qualified(tokens, i + 1, statement)

        if _words_at(tokens, i, "WITH"):
            i += 1
            while i < n and not tokens[i].is_word("FOR", "AFTER", "INSTEAD"):
                i += 1

        timing, i = self._parse_trigger_timing(tokens, i, name, statement)
        events, update_columns, i = self._parse_trigger_events(tokens, i, name, statement)
        while i < n and not tokens[i].is_word("AS"):
            if not tokens[i].is_word("WITH", "APPEND", "NOT", "FOR", "REPLICATION") and tokens[i].text != ",":
                raise MalformedStatementError(f"unexpected '{tokens[i].text}' in trigger {name}", _preview(statement))
            i += 1
        if i + 1 >= n:
            raise MalformedStatementError(f"trigger {name} has no body", _preview(statement))

        schema.triggers.append(Trigger(
            name=name,
            table=table_name,
            timing=timing,
            events=events,
            schema=schema_name,
            update_columns=update_columns,
            for_each_row=False,
            body=statement[tokens[i + 1].start:].strip(),
        ))

    def _parse_other_statement(self, statement: str, tokens: List[Token], schema: Schema) -> bool:
        i = 0
        if tokens[0].is_word("EXEC", "EXECUTE"):
            i = 1
        if i >= len(tokens):
            return False
        procedure = tokens[i].text.split(".")[-1].lower()
        if _words_at(tokens, i, "SYS") and i + 2 < len(tokens) and tokens[i + 1].text == ".":
            i += 2
            procedure = tokens[i].text.lower()
        if procedure != "sp_addextendedproperty":
            return False
        self._apply_extended_property(self._property_args(tokens[i + 1:]), schema)
        return True

    @staticmethod
    def _property_args(tokens: List[Token]) -> Dict[str, str]:
        """Named (``@name = N'x'``) or positional argument values."""
        args: Dict[str, str] = {}
        position = 0
        i, n = 0, len(tokens)
        while i < n:
            token = tokens[i]
            if token.text == ",":
                i += 1
                continue
            key = None
            if token.kind == TokenKind.WORD and token.text.startswith("@") and i + 1 < n and tokens[i + 1].text == "=":
                key = token.text.lower()
                i += 2
                if i >= n:
                    break
                token = tokens[i]
            elif position < len(_PROPERTY_ARGS):
                key = _PROPERTY_ARGS[position]
            position += 1
            if token.kind == TokenKind.STRING:
                value = unquote_string(token.text)
            elif token.is_word("NULL"):
                value = None
            else:
                value = _unquote_any(token.text)
            if key:
                args[key] = value
            i += 1
        return args

    def _apply_extended_property(self, args: Dict[str, str], schema: Schema) -> None:
        if (args.get("@name") or "").lower() != "ms_description":
            self.logger.debug(f"Skipping extended property {args.get('@name')}")
            return
        if (args.get("@level1type") or "").upper() != "TABLE":
            return
        table = schema.get_table(args.get("@level1name") or "", args.get("@level0name"))
        if table is None:
            self.logger.debug(f"MS_Description for unknown table {args.get('@level1name')}")
            return
        level2 = (args.get("@level2type") or "").upper()
        if not level2:
            table.comment = args.get("@value")
            return
        if level2 == "COLUMN":
            column = table.get_column(args.get("@level2name") or "")
            if column is not None:
                column.comment = args.get("@value")
