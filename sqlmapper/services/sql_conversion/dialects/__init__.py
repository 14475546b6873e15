from .descriptor import (
    DIALECTS,
    SUPPORTED_DIALECTS,
    DialectDescriptor,
    get_descriptor,
    normalize_dialect,
)

__all__ = ["DIALECTS", "SUPPORTED_DIALECTS", "DialectDescriptor", "get_descriptor", "normalize_dialect"]
