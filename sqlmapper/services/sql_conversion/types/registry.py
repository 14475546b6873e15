"""
Value-level type mappings.

Schema conversion alone is not enough when stored data must be re-encoded
(a MySQL ``tinyint(1)`` holding ``1`` becomes PostgreSQL ``true``). A
``TypeMapping`` pairs a source and target type name with a conversion
function over ``Value``; the registry selects one by name pair and version
constraints.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..errors import NoTypeMappingFoundError
from .values import Value, ValueKind

Converter = Callable[[Value], Value]


@dataclass(frozen=True, order=True)
class Version:
    major: int
    minor: int = 0

    @classmethod
    def parse(cls, text: Union[str, "Version", None]) -> Optional["Version"]:
        """``"8.0"``, ``"19"`` or ``"16.2.1"`` -> Version. Suffixes like ``19c`` are ignored."""
        if text is None or isinstance(text, Version):
            return text
        parts = []
        for piece in str(text).strip().split(".")[:2]:
            digits = "".join(ch for ch in piece if ch.isdigit())
            if not digits:
                break
            parts.append(int(digits))
        if not parts:
            raise ValueError(f"invalid version '{text}'")
        return cls(*parts)

    def satisfies(self, required: Optional["Version"]) -> bool:
        """Same major version and at least the required minor version."""
        if required is None:
            return True
        return self.major == required.major and self.minor >= required.minor

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class TypeMapping:
    source_type: str
    target_type: str
    converter: Converter
    source_version: Optional[Version] = None
    target_version: Optional[Version] = None
    description: str = ""

    def matches(self, source_version: Optional[Version], target_version: Optional[Version]) -> bool:
        if self.source_version is not None and (source_version is None or not source_version.satisfies(self.source_version)):
            return False
        if self.target_version is not None and (target_version is None or not target_version.satisfies(self.target_version)):
            return False
        return True


# ---------------------------------------------------------------------------
# Conversion functions
# ---------------------------------------------------------------------------

_TRUE_STRINGS = {"1", "t", "true", "y", "yes", "on"}
_FALSE_STRINGS = {"0", "f", "false", "n", "no", "off"}


def identity(value: Value) -> Value:
    return value


def to_boolean(value: Value) -> Value:
    match value.kind:
        case ValueKind.NULL | ValueKind.BOOLEAN:
            return value
        case ValueKind.INTEGER | ValueKind.FLOAT:
            return Value.boolean(value.payload != 0)
        case ValueKind.TEXT:
            lowered = value.payload.strip().lower()
            if lowered in _TRUE_STRINGS:
                return Value.boolean(True)
            if lowered in _FALSE_STRINGS:
                return Value.boolean(False)
            raise ValueError(f"cannot interpret {value.payload!r} as a boolean")
    raise TypeError(f"unsupported value kind for boolean conversion: {value.kind.value}")


def boolean_to_integer(value: Value) -> Value:
    match value.kind:
        case ValueKind.NULL | ValueKind.INTEGER:
            return value
        case ValueKind.BOOLEAN:
            return Value.integer(1 if value.payload else 0)
        case ValueKind.TEXT:
            return Value.integer(1 if to_boolean(value).payload else 0)
    raise TypeError(f"value is not a boolean: {value.kind.value}")


def _parse_timestamp(text: str) -> datetime:
    candidate = text.strip().replace("T", " ", 1)
    # "-07" style offsets are not accepted by fromisoformat on every interpreter.
    if len(candidate) > 3 and candidate[-3] in "+-" and candidate[-2:].isdigit() and ":" in candidate[:-3]:
        candidate = candidate + ":00"
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return datetime.strptime(candidate, "%Y-%m-%d %H:%M:%S")


def text_to_timestamp(value: Value) -> Value:
    match value.kind:
        case ValueKind.NULL | ValueKind.TIMESTAMP:
            return value
        case ValueKind.TEXT:
            return Value.timestamp(_parse_timestamp(value.payload))
    raise TypeError(f"unsupported value kind for timestamp conversion: {value.kind.value}")


def timestamp_to_utc(value: Value) -> Value:
    """Parse (if needed) and normalise an offset-aware timestamp to UTC."""
    converted = text_to_timestamp(value)
    if converted.kind != ValueKind.TIMESTAMP:
        return converted
    ts = converted.payload
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return Value.timestamp(ts)


def to_text(value: Value) -> Value:
    match value.kind:
        case ValueKind.NULL | ValueKind.TEXT:
            return value
        case ValueKind.BYTES:
            return Value.text(value.payload.decode("utf-8"))
        case ValueKind.TIMESTAMP:
            return Value.text(value.payload.isoformat(sep=" "))
        case ValueKind.BOOLEAN:
            return Value.text("true" if value.payload else "false")
        case _:
            return Value.text(str(value.payload))


def to_bytes(value: Value) -> Value:
    match value.kind:
        case ValueKind.NULL | ValueKind.BYTES:
            return value
        case ValueKind.TEXT:
            return Value.binary(value.payload.encode("utf-8"))
    raise TypeError(f"unsupported value kind for binary conversion: {value.kind.value}")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def _key(name: str) -> str:
    return " ".join(name.lower().split())


class TypeRegistry:
    """Lookup of value conversions keyed by (source type, target type)."""

    def __init__(self):
        self._mappings: Dict[Tuple[str, str], List[TypeMapping]] = {}

    def register(self, mapping: TypeMapping) -> None:
        key = (_key(mapping.source_type), _key(mapping.target_type))
        self._mappings.setdefault(key, []).append(mapping)

    def find(self, source_type: str, target_type: str,
             source_version=None, target_version=None) -> Optional[TypeMapping]:
        """First registered mapping for the pair whose version constraints hold."""
        candidates = self._mappings.get((_key(source_type), _key(target_type)), [])
        src_v, tgt_v = Version.parse(source_version), Version.parse(target_version)
        for mapping in candidates:
            if mapping.matches(src_v, tgt_v):
                return mapping
        return None

    def convert_type(self, value: Value, source_type: str, target_type: str,
                     source_version=None, target_version=None) -> Value:
        """
        Convert *value* stored as *source_type* into its *target_type* encoding.

        Raises:
            NoTypeMappingFoundError: no entry for the pair satisfies the versions.
        """
        mapping = self.find(source_type, target_type, source_version, target_version)
        if mapping is None:
            raise NoTypeMappingFoundError(
                f"no value mapping from '{source_type}' to '{target_type}'"
                + (f" (source {source_version}, target {target_version})" if source_version or target_version else "")
            )
        return mapping.converter(value)

    def pairs(self) -> List[Tuple[str, str]]:
        return sorted(self._mappings)


_DEFAULT_MAPPINGS = (
    # MySQL -> PostgreSQL
    TypeMapping("int", "integer", identity),
    TypeMapping("varchar", "character varying", identity),
    TypeMapping("datetime", "timestamp", text_to_timestamp),
    TypeMapping("tinyint(1)", "boolean", to_boolean),
    TypeMapping("json", "jsonb", identity),
    # PostgreSQL -> MySQL
    TypeMapping("integer", "int", identity),
    TypeMapping("character varying", "varchar", identity),
    TypeMapping("timestamp", "datetime", timestamp_to_utc),
    TypeMapping("timestamp with time zone", "datetime", timestamp_to_utc),
    TypeMapping("boolean", "tinyint(1)", boolean_to_integer),
    TypeMapping("jsonb", "json", identity),
    TypeMapping("uuid", "char(36)", to_text),
    TypeMapping("bytea", "blob", to_bytes),
    TypeMapping("blob", "bytea", to_bytes),
    # SQLite storage classes
    TypeMapping("integer", "integer", identity),
    TypeMapping("text", "text", identity),
    TypeMapping("real", "real", identity),
    TypeMapping("blob", "blob", identity),
    TypeMapping("boolean", "integer", boolean_to_integer),
    TypeMapping("tinyint(1)", "integer", identity),
    # Booleans on engines without a boolean type
    TypeMapping("boolean", "bit", boolean_to_integer),
    TypeMapping("bit", "boolean", to_boolean),
    TypeMapping("tinyint(1)", "bit", to_boolean),
    TypeMapping("bit", "tinyint(1)", boolean_to_integer),
    TypeMapping("number(1)", "boolean", to_boolean),
    TypeMapping("boolean", "boolean", identity, target_version=Version(23, 0)),
    TypeMapping("boolean", "number(1)", boolean_to_integer),
    TypeMapping("tinyint(1)", "number(1)", boolean_to_integer),
    TypeMapping("number(1)", "tinyint(1)", boolean_to_integer),
    # SQL Server
    TypeMapping("uniqueidentifier", "uuid", to_text),
    TypeMapping("uuid", "uniqueidentifier", to_text),
    TypeMapping("datetime2", "timestamp", text_to_timestamp),
    TypeMapping("timestamp", "datetime2", timestamp_to_utc),
    TypeMapping("datetime", "datetime2", text_to_timestamp),
    TypeMapping("money", "decimal(19,4)", identity),
    # Oracle
    TypeMapping("date", "timestamp", text_to_timestamp),
    TypeMapping("clob", "text", to_text),
    TypeMapping("text", "clob", to_text),
    TypeMapping("json", "clob", to_text),
    TypeMapping("raw", "bytea", to_bytes),
)


def build_default_registry() -> TypeRegistry:
    registry = TypeRegistry()
    for mapping in _DEFAULT_MAPPINGS:
        registry.register(mapping)
    return registry


DEFAULT_REGISTRY = build_default_registry()


def convert_type(value, source_type: str, target_type: str, source_version=None, target_version=None) -> Value:
    """Module-level shortcut over ``DEFAULT_REGISTRY``; plain Python values are wrapped first."""
    if not isinstance(value, Value):
        value = Value.from_python(value)
    return DEFAULT_REGISTRY.convert_type(value, source_type, target_type, source_version, target_version)
