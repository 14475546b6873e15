"""MySQL / MariaDB DDL parser."""
from typing import List

from ...dialects.descriptor import MYSQL
from ...schema import Column, DataType, Table
from ...utils.tokenizer import Token, TokenKind, unquote_string
from .base_parser import BaseParser, _unquote_any

# Table option name -> Table attribute. CHARACTER SET is folded into CHARSET.
_TABLE_OPTIONS = {
    "ENGINE": "engine",
    "TYPE": "engine",
    "CHARSET": "charset",
    "COLLATE": "collation",
    "COMMENT": "comment",
}


class MySQLParser(BaseParser):
    INLINE_INDEX_WORDS = ("KEY", "INDEX", "FULLTEXT", "SPATIAL")
    ROW_TRIGGERS_BY_DEFAULT = True

    def __init__(self, descriptor=MYSQL):
        super().__init__(descriptor)

    def _apply_serial_type(self, column: Column) -> None:
        # SERIAL = BIGINT UNSIGNED NOT NULL AUTO_INCREMENT UNIQUE
        if column.data_type.base_name == "SERIAL":
            column.data_type = DataType("BIGINT", unsigned=True)
            column.nullable = False
            column.auto_increment = True
            column.unique = True

    def _parse_table_options(self, table: Table, tokens: List[Token], statement: str) -> None:
        """``ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci COMMENT='...'``"""
        i, n = 0, len(tokens)
        while i < n:
            token = tokens[i]
            if token.kind != TokenKind.WORD:
                i += 1
                continue
            option = token.upper
            if option == "CHARACTER" and i + 1 < n and tokens[i + 1].is_word("SET"):
                option = "CHARSET"
                i += 1
            i += 1
            attribute = _TABLE_OPTIONS.get(option)
            if attribute is None:
                continue
            if i < n and tokens[i].text == "=":
                i += 1
            if i >= n:
                break
            raw = tokens[i].text
            if attribute == "comment":
                value = unquote_string(raw, self.descriptor.backslash_escapes)
            else:
                value = _unquote_any(raw)
            setattr(table, attribute, value)
            i += 1
