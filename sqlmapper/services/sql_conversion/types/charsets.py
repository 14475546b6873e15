"""
Character set and collation capability tables.

Both are by-name registries loaded from ``common/charsets.json``. Generators
use them to decide whether a charset or collation carried on a source column
can be expressed in the target dialect.
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, FrozenSet, Optional

from sqlmapper.utils.logger import setup_logger
from ..utils.config_loader import load_json_from_conversion_config

logger = setup_logger('charsets')

ALL_DIALECTS = frozenset({"mysql", "postgres", "sqlite", "oracle", "sqlserver"})


@dataclass(frozen=True)
class CharSet:
    name: str
    description: str
    max_len: int
    dialects: FrozenSet[str]

    def supported_by(self, dialect: str) -> bool:
        return dialect in self.dialects


@dataclass(frozen=True)
class Collation:
    name: str
    charset: str
    description: str
    dialects: FrozenSet[str]

    def supported_by(self, dialect: str) -> bool:
        return dialect in self.dialects


# Used when the JSON file is missing or unreadable.
_BUILTIN_CHARSETS = (
    CharSet("utf8mb4", "UTF-8 Unicode", 4, ALL_DIALECTS),
    CharSet("latin1", "cp1252 West European", 1, ALL_DIALECTS),
)
_BUILTIN_COLLATIONS = (
    Collation("utf8mb4_unicode_ci", "utf8mb4", "Unicode, case-insensitive", frozenset({"mysql"})),
    Collation("utf8mb4_bin", "utf8mb4", "Binary comparison", frozenset({"mysql"})),
)


class CharsetRegistry:
    def __init__(self, data: Optional[dict] = None):
        if data is None:
            data = load_json_from_conversion_config(logger, 'common', 'charsets.json')
        self._charsets: Dict[str, CharSet] = {}
        self._collations: Dict[str, Collation] = {}
        self._equivalents: Dict[str, Dict[str, str]] = {}

        for name, entry in (data.get('charsets') or {}).items():
            self.register_charset(CharSet(
                name=name,
                description=entry.get('description', ''),
                max_len=int(entry.get('max_len', 1)),
                dialects=frozenset(entry.get('dialects', [])),
            ))
        for name, entry in (data.get('collations') or {}).items():
            self.register_collation(Collation(
                name=name,
                charset=entry.get('charset', ''),
                description=entry.get('description', ''),
                dialects=frozenset(entry.get('dialects', [])),
            ))
        for name, targets in (data.get('equivalent_collations') or {}).items():
            self._equivalents[name.lower()] = dict(targets)

        if not self._charsets:
            logger.warning("No charset definitions loaded; using built-in defaults.")
            for charset in _BUILTIN_CHARSETS:
                self.register_charset(charset)
        if not self._collations:
            for collation in _BUILTIN_COLLATIONS:
                self.register_collation(collation)

    def register_charset(self, charset: CharSet) -> None:
        self._charsets[charset.name.lower()] = charset

    def register_collation(self, collation: Collation) -> None:
        self._collations[collation.name.lower()] = collation

    def get_charset(self, name: str) -> Optional[CharSet]:
        return self._charsets.get(name.lower()) if name else None

    def get_collation(self, name: str) -> Optional[Collation]:
        return self._collations.get(name.lower()) if name else None

    def is_charset_supported(self, name: str, dialect: str) -> bool:
        charset = self.get_charset(name)
        return bool(charset and charset.supported_by(dialect))

    def resolve_collation(self, name: str, dialect: str) -> Optional[str]:
        """Collation to emit on *dialect* for source collation *name*, or None when there is none."""
        collation = self.get_collation(name)
        if collation and collation.supported_by(dialect):
            return name
        return self._equivalents.get(name.lower(), {}).get(dialect)


@lru_cache(maxsize=None)
def get_charset_registry() -> CharsetRegistry:
    return CharsetRegistry()
