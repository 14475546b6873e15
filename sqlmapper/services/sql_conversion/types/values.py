"""
Closed tagged value variant used by value conversions.

``Value`` carries one of a fixed set of kinds with a payload of the matching
Python type. Conversion functions match over ``ValueKind`` rather than
inspecting arbitrary Python objects.
"""
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from ..utils.tokenizer import unquote_string

Payload = Union[None, int, float, str, bool, bytes, datetime]

_INTEGER = re.compile(r"^[+-]?\d+$")
_FLOAT = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?$")
_STRING = re.compile(r"^(?:[Nn]|_[A-Za-z0-9]+)?'(?:[^']|'')*'$", re.DOTALL)
_HEX = re.compile(r"^(?:[Xx]'([0-9A-Fa-f]*)'|0x([0-9A-Fa-f]*))$")


class ValueKind(str, Enum):
    NULL = "NULL"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    TEXT = "TEXT"
    BOOLEAN = "BOOLEAN"
    BYTES = "BYTES"
    TIMESTAMP = "TIMESTAMP"


@dataclass(frozen=True)
class Value:
    kind: ValueKind
    payload: Payload = None

    @classmethod
    def null(cls) -> "Value":
        return cls(ValueKind.NULL)

    @classmethod
    def integer(cls, v: int) -> "Value":
        return cls(ValueKind.INTEGER, int(v))

    @classmethod
    def floating(cls, v: float) -> "Value":
        return cls(ValueKind.FLOAT, float(v))

    @classmethod
    def text(cls, v: str) -> "Value":
        return cls(ValueKind.TEXT, str(v))

    @classmethod
    def boolean(cls, v: bool) -> "Value":
        return cls(ValueKind.BOOLEAN, bool(v))

    @classmethod
    def binary(cls, v: bytes) -> "Value":
        return cls(ValueKind.BYTES, bytes(v))

    @classmethod
    def timestamp(cls, v: datetime) -> "Value":
        return cls(ValueKind.TIMESTAMP, v)

    @classmethod
    def from_python(cls, obj: Any) -> "Value":
        """Wrap a plain Python object. ``bool`` is checked before ``int``."""
        if obj is None:
            return cls.null()
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.floating(obj)
        if isinstance(obj, (bytes, bytearray)):
            return cls.binary(bytes(obj))
        if isinstance(obj, datetime):
            return cls.timestamp(obj)
        if isinstance(obj, str):
            return cls.text(obj)
        raise TypeError(f"cannot wrap {type(obj).__name__} as a Value")

    @classmethod
    def from_sql_literal(cls, literal: str) -> Optional["Value"]:
        """Parse a default-value literal. Returns None for anything that is not a literal."""
        text = literal.strip()
        while text.startswith("(") and text.endswith(")") and text.count("(") == text.count(")"):
            text = text[1:-1].strip()
        upper = text.upper()
        if upper == "NULL":
            return cls.null()
        if upper in ("TRUE", "FALSE"):
            return cls.boolean(upper == "TRUE")
        if _INTEGER.match(text):
            return cls.integer(int(text))
        if _FLOAT.match(text):
            return cls.floating(float(text))
        m = _HEX.match(text)
        if m:
            return cls.binary(bytes.fromhex(m.group(1) if m.group(1) is not None else m.group(2)))
        if _STRING.match(text):
            return cls.text(unquote_string(text))
        return None

    def to_python(self) -> Payload:
        return self.payload

    def to_sql_literal(self, descriptor) -> str:
        """Render as a literal in the dialect described by *descriptor*."""
        match self.kind:
            case ValueKind.NULL:
                return "NULL"
            case ValueKind.BOOLEAN:
                if descriptor.supports_boolean:
                    return "TRUE" if self.payload else "FALSE"
                return "1" if self.payload else "0"
            case ValueKind.INTEGER:
                return str(self.payload)
            case ValueKind.FLOAT:
                return repr(self.payload)
            case ValueKind.TEXT:
                return descriptor.quote_string(self.payload)
            case ValueKind.BYTES:
                hex_text = self.payload.hex().upper()
                if descriptor.name == "sqlserver":
                    return f"0x{hex_text}"
                if descriptor.name == "oracle":
                    return f"HEXTORAW('{hex_text}')"
                if descriptor.name == "postgres":
                    return f"'\\x{hex_text}'::bytea"
                return f"X'{hex_text}'"
            case ValueKind.TIMESTAMP:
                return descriptor.quote_string(self.payload.isoformat(sep=" "))
        raise ValueError(f"unknown value kind {self.kind}")
