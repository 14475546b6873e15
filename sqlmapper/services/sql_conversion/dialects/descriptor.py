"""
Static, per-dialect facts.

One immutable ``DialectDescriptor`` exists per dialect tag. The registry is
built once at import and handed to parsers and generators through their
constructors.
"""
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from ..errors import UnknownDialectError
from .reserved_words import (
    MYSQL_RESERVED_WORDS,
    ORACLE_RESERVED_WORDS,
    POSTGRES_RESERVED_WORDS,
    SQLITE_RESERVED_WORDS,
    SQLSERVER_RESERVED_WORDS,
)

_PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")


@dataclass(frozen=True)
class DialectDescriptor:
    name: str
    display_name: str
    quote_open: str
    quote_close: str
    default_schema: Optional[str]
    max_identifier_length: int  # 0 means unlimited
    reserved_words: frozenset
    sqlglot_dialect: str
    string_quote: str = "'"
    batch_separator: Optional[str] = None
    backslash_escapes: bool = False
    supports_sequences: bool = True
    supports_schemas: bool = True
    supports_materialized_views: bool = False
    supports_before_triggers: bool = True
    supports_instead_of_triggers: bool = True
    supports_statement_triggers: bool = True
    supports_filtered_indexes: bool = False
    supports_include_columns: bool = False
    supports_fk_on_update: bool = True
    supports_boolean: bool = False
    # Lexical features used by the shared splitter.
    bracket_identifiers: bool = False
    dollar_quotes: bool = False
    hash_comments: bool = False
    delimiter_directive: bool = False
    aliases: tuple = ()
    # Longer identifiers allowed from a given (major, minor) release on.
    long_identifier_length: int = 0
    long_identifiers_since: Optional[tuple] = None

    def is_reserved(self, word: str) -> bool:
        return word.lower() in self.reserved_words

    def is_plain_identifier(self, word: str) -> bool:
        return bool(_PLAIN_IDENTIFIER.match(word))

    def needs_quoting(self, word: str) -> bool:
        return self.is_reserved(word) or not self.is_plain_identifier(word)

    def quote(self, word: str) -> str:
        escaped = word.replace(self.quote_close, self.quote_close * 2)
        return f"{self.quote_open}{escaped}{self.quote_close}"

    def quote_string(self, text: str) -> str:
        if self.backslash_escapes:
            text = text.replace("\\", "\\\\")
        return f"{self.string_quote}{text.replace(self.string_quote, self.string_quote * 2)}{self.string_quote}"

    def identifier_limit(self, version=None) -> int:
        """Maximum identifier length on *version* (a ``Version`` or None for the oldest supported release)."""
        if version is not None and self.long_identifiers_since \
                and (version.major, version.minor) >= self.long_identifiers_since:
            return self.long_identifier_length
        return self.max_identifier_length

    def fits_identifier(self, word: str, version=None) -> bool:
        limit = self.identifier_limit(version)
        return limit == 0 or len(word) <= limit


MYSQL = DialectDescriptor(
    name="mysql",
    display_name="MySQL",
    quote_open="`",
    quote_close="`",
    default_schema=None,
    max_identifier_length=64,
    reserved_words=MYSQL_RESERVED_WORDS,
    sqlglot_dialect="mysql",
    backslash_escapes=True,
    hash_comments=True,
    delimiter_directive=True,
    supports_sequences=False,
    supports_instead_of_triggers=False,
    supports_statement_triggers=False,
    supports_boolean=False,
)

POSTGRES = DialectDescriptor(
    name="postgres",
    display_name="PostgreSQL",
    quote_open='"',
    quote_close='"',
    default_schema="public",
    max_identifier_length=63,
    reserved_words=POSTGRES_RESERVED_WORDS,
    sqlglot_dialect="postgres",
    supports_materialized_views=True,
    supports_filtered_indexes=True,
    supports_include_columns=True,
    dollar_quotes=True,
    supports_boolean=True,
    aliases=("postgresql", "pg"),
)

SQLITE = DialectDescriptor(
    name="sqlite",
    display_name="SQLite",
    quote_open='"',
    quote_close='"',
    default_schema="main",
    max_identifier_length=0,
    reserved_words=SQLITE_RESERVED_WORDS,
    sqlglot_dialect="sqlite",
    supports_sequences=False,
    supports_schemas=False,
    supports_statement_triggers=False,
    bracket_identifiers=True,
    supports_filtered_indexes=True,
    aliases=("sqlite3",),
)

ORACLE = DialectDescriptor(
    name="oracle",
    display_name="Oracle",
    quote_open='"',
    quote_close='"',
    default_schema=None,
    max_identifier_length=30,
    reserved_words=ORACLE_RESERVED_WORDS,
    long_identifier_length=128,
    long_identifiers_since=(12, 2),
    sqlglot_dialect="oracle",
    batch_separator="/",
    supports_materialized_views=True,
    supports_fk_on_update=False,
)

SQLSERVER = DialectDescriptor(
    name="sqlserver",
    display_name="SQL Server",
    quote_open="[",
    quote_close="]",
    default_schema="dbo",
    max_identifier_length=128,
    reserved_words=SQLSERVER_RESERVED_WORDS,
    sqlglot_dialect="tsql",
    batch_separator="GO",
    supports_before_triggers=False,
    supports_statement_triggers=True,
    supports_filtered_indexes=True,
    bracket_identifiers=True,
    supports_include_columns=True,
    aliases=("mssql", "tsql"),
)


DIALECTS: Mapping[str, DialectDescriptor] = MappingProxyType({
    d.name: d for d in (MYSQL, POSTGRES, SQLITE, ORACLE, SQLSERVER)
})

_ALIASES = MappingProxyType({
    alias: d.name for d in DIALECTS.values() for alias in d.aliases
})

SUPPORTED_DIALECTS = tuple(DIALECTS)


def normalize_dialect(tag: str) -> str:
    """Return the canonical tag for *tag* (``postgresql`` -> ``postgres``)."""
    if not tag:
        raise UnknownDialectError("dialect tag is empty")
    key = tag.strip().lower()
    key = _ALIASES.get(key, key)
    if key not in DIALECTS:
        raise UnknownDialectError(
            f"unsupported dialect '{tag}' (expected one of: {', '.join(SUPPORTED_DIALECTS)})"
        )
    return key


def get_descriptor(tag: str) -> DialectDescriptor:
    return DIALECTS[normalize_dialect(tag)]
