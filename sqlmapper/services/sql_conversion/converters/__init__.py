"""
Per-dialect capabilities.

``get_dialect(tag)`` returns the descriptor together with a parser and a
generator for that dialect. Capabilities are built once per tag and shared;
parsers and generators keep no per-call state, so sharing is safe across
threads.
"""
from dataclasses import dataclass
from functools import lru_cache

from ..dialects import DialectDescriptor, get_descriptor, normalize_dialect
from .generators import (
    BaseGenerator,
    MySQLGenerator,
    OracleGenerator,
    PostgresGenerator,
    SQLiteGenerator,
    SQLServerGenerator,
)
from .parsers import (
    BaseParser,
    MySQLParser,
    OracleParser,
    PostgresParser,
    SQLiteParser,
    SQLServerParser,
)

_PARSERS = {
    "mysql": MySQLParser,
    "postgres": PostgresParser,
    "sqlite": SQLiteParser,
    "oracle": OracleParser,
    "sqlserver": SQLServerParser,
}

_GENERATORS = {
    "mysql": MySQLGenerator,
    "postgres": PostgresGenerator,
    "sqlite": SQLiteGenerator,
    "oracle": OracleGenerator,
    "sqlserver": SQLServerGenerator,
}


@dataclass(frozen=True)
class DialectCapability:
    descriptor: DialectDescriptor
    parser: BaseParser
    generator: BaseGenerator

    @property
    def name(self) -> str:
        return self.descriptor.name


@lru_cache(maxsize=None)
def _build(name: str) -> DialectCapability:
    descriptor = get_descriptor(name)
    return DialectCapability(
        descriptor=descriptor,
        parser=_PARSERS[name](descriptor),
        generator=_GENERATORS[name](descriptor),
    )


def get_dialect(tag: str) -> DialectCapability:
    """
    Capability for *tag* (``mysql``, ``postgres``/``postgresql``, ``sqlite``,
    ``oracle``, ``sqlserver``/``mssql``/``tsql``).

    Raises:
        UnknownDialectError: *tag* names no supported dialect.
    """
    return _build(normalize_dialect(tag))


def create_generator(tag: str, **options) -> BaseGenerator:
    """A fresh generator with per-call overrides (``quote_identifiers``, ``on_unsupported``, ``version``)."""
    name = normalize_dialect(tag)
    if not options:
        return _build(name).generator
    return _GENERATORS[name](get_descriptor(name), **options)


__all__ = [
    'DialectCapability', 'get_dialect', 'create_generator',
    'BaseParser', 'MySQLParser', 'PostgresParser', 'SQLiteParser', 'OracleParser', 'SQLServerParser',
    'BaseGenerator', 'MySQLGenerator', 'PostgresGenerator', 'SQLiteGenerator', 'OracleGenerator',
    'SQLServerGenerator',
]
