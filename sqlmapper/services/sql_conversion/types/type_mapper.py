"""
Type-name mapping driven by ``<dialect>/data_types.json``.

Each target dialect owns one rule file. Source type names from any dialect
vocabulary are looked up in lower case, first with their parameters
(``tinyint(1)``) and then bare (``tinyint``); the matched target spelling is
then rendered with the source parameters unless the rule file says the
target takes none.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlmapper.utils.logger import setup_logger
from ..schema import DataType
from ..utils.config_loader import load_json_from_conversion_config
from .registry import Version

logger = setup_logger('type_mapper')

_BINARY_MARKERS = ("BLOB", "BINARY", "BYTEA", "RAW", "IMAGE")
_VALUE_LIST_TYPES = ("ENUM", "SET")


@dataclass(frozen=True)
class MappedType:
    sql: str
    # Lower-case target spelling used to look up value conversions.
    key: str
    fallback: bool = False


def _normalize(name: str) -> str:
    return " ".join(name.lower().split())


def source_key(data_type: DataType) -> str:
    """``tinyint(1)`` style key for *data_type*; bare name when it has no parameters."""
    name = _normalize(data_type.name)
    params = data_type.params()
    if not params:
        return name
    return f"{name}({','.join('max' if p == -1 else str(p) for p in params)})"


class TypeMapper:
    """Maps source ``DataType`` values onto one target dialect's type names."""

    def __init__(self, dialect: str, version=None, rules: Optional[Dict] = None):
        self.dialect = dialect
        self.version = Version.parse(version) if version else None
        if rules is None:
            rules = load_json_from_conversion_config(logger, dialect, 'data_types.json')
        if not rules:
            logger.warning(f"No type rules loaded for '{dialect}'; every type will use the fallback.")
        self._types = {_normalize(k): v for k, v in (rules.get('types') or {}).items()}
        self._source_overrides = {
            src: {_normalize(k): v for k, v in table.items()}
            for src, table in (rules.get('source_overrides') or {}).items()
        }
        self._unsigned = {_normalize(k): v for k, v in (rules.get('unsigned_types') or {}).items()}
        self._version_types = self._select_version_overrides(rules.get('version_overrides') or {})
        self._paramless = {t.upper() for t in rules.get('paramless_targets', [])}
        self._dynamic = {k.upper(): v for k, v in (rules.get('dynamic_rules') or {}).items()}
        self._default_lengths = {k.upper(): v for k, v in (rules.get('default_lengths') or {}).items()}
        fallback = rules.get('fallback') or {}
        self._fallback_text = fallback.get('text', 'TEXT')
        self._fallback_binary = fallback.get('binary', 'BLOB')

    def _select_version_overrides(self, overrides: Dict) -> Dict[str, str]:
        """Overrides for the highest listed major version not above the target's."""
        if self.version is None or not overrides:
            return {}
        eligible = [int(major) for major in overrides if int(major) <= self.version.major]
        if not eligible:
            return {}
        chosen = overrides[str(max(eligible))]
        return {_normalize(k): v for k, v in (chosen.get('types') or {}).items()}

    def _lookup_tables(self, data_type: DataType, source_dialect: Optional[str]) -> List[Dict[str, str]]:
        tables = []
        if source_dialect and source_dialect in self._source_overrides:
            tables.append(self._source_overrides[source_dialect])
        if self._version_types:
            tables.append(self._version_types)
        if data_type.unsigned:
            tables.append(self._unsigned)
        tables.append(self._types)
        return tables

    def lookup(self, data_type: DataType, source_dialect: Optional[str] = None) -> Optional[str]:
        """Target spelling for *data_type*, or None when no rule matches."""
        full, bare = source_key(data_type), _normalize(data_type.name)
        for table in self._lookup_tables(data_type, source_dialect):
            for key in (full, bare):
                if key in table:
                    return table[key]
        return None

    def map_type(self, data_type: DataType, source_dialect: Optional[str] = None) -> MappedType:
        """
        Render *data_type* as a target type.

        Args:
            data_type: The parsed source type.
            source_dialect: Tag of the dialect *data_type* was parsed from.
                Types from the target's own dialect pass through unchanged.

        Returns:
            The rendered type; ``fallback`` is set when no rule matched.
        """
        if source_dialect == self.dialect:
            rendered = self._with_values(str(data_type), data_type)
            if data_type.unsigned:
                rendered += " UNSIGNED"
            return MappedType(rendered, source_key(data_type))

        target = self.lookup(data_type, source_dialect)
        if target is None:
            fallback = self.fallback(binary=any(m in data_type.base_name for m in _BINARY_MARKERS))
            logger.debug(f"No {self.dialect} mapping for type '{data_type}'; using {fallback.sql}")
            return fallback

        rendered = self._with_values(self._render(target, data_type), data_type)
        return MappedType(rendered, _normalize(rendered))

    def fallback(self, binary: bool = False) -> MappedType:
        """The generic text (or binary) type of the target."""
        generic = self._fallback_binary if binary else self._fallback_text
        return MappedType(generic, _normalize(generic), fallback=True)

    def _render(self, target: str, data_type: DataType) -> str:
        # A target with its own parameters is final.
        if "(" in target:
            return target
        upper = _normalize(target).upper()
        if upper in self._paramless:
            return target

        params = data_type.params()
        if not params:
            length = self._default_lengths.get(upper)
            return f"{target}({length})" if length else target

        rule = self._dynamic.get(upper)
        size = params[0]
        if rule and (size == -1 or size > rule.get('max_size', size)):
            return rule['overflow_type']
        if size == -1:
            if self.dialect == 'sqlserver':
                return f"{target}(MAX)"
            length = self._default_lengths.get(upper)
            return f"{target}({length})" if length else target

        rendered_params = ",".join(str(p) for p in params)
        if " WITH " in upper:
            first, rest = target.split(" ", 1)
            return f"{first}({rendered_params}) {rest}"
        return f"{target}({rendered_params})"

    @staticmethod
    def _with_values(rendered: str, data_type: DataType) -> str:
        if data_type.values and rendered.upper() in _VALUE_LIST_TYPES:
            return f"{rendered}({','.join(data_type.values)})"
        return rendered
