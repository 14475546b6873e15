from .values import Value, ValueKind
from .registry import (
    DEFAULT_REGISTRY,
    TypeMapping,
    TypeRegistry,
    Version,
    build_default_registry,
    convert_type,
)
from .charsets import CharSet, Collation, CharsetRegistry, get_charset_registry
from .type_mapper import MappedType, TypeMapper, source_key

__all__ = [
    'Value', 'ValueKind',
    'DEFAULT_REGISTRY', 'TypeMapping', 'TypeRegistry', 'Version', 'build_default_registry', 'convert_type',
    'CharSet', 'Collation', 'CharsetRegistry', 'get_charset_registry',
    'MappedType', 'TypeMapper', 'source_key',
]
