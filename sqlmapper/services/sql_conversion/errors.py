"""
Error taxonomy for the conversion core.

Every failure raised by a parser, generator or the type registry is a
``SQLMapperError`` carrying an ``ErrorKind``. Callers that only care about
the category can switch on ``err.kind``; callers that want a specific case
can catch the subclass.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    EMPTY_INPUT = "EmptyInput"
    MALFORMED_STATEMENT = "MalformedStatement"
    UNSUPPORTED_CONSTRUCT = "UnsupportedConstruct"
    IDENTIFIER_TOO_LONG = "IdentifierTooLong"
    RESERVED_WORD_COLLISION = "ReservedWordCollision"
    NO_TYPE_MAPPING_FOUND = "NoTypeMappingFound"
    NIL_SCHEMA = "NilSchema"
    UNKNOWN_DIALECT = "UnknownDialect"


class SQLMapperError(Exception):
    """Base class for all conversion errors."""

    kind: ErrorKind = ErrorKind.MALFORMED_STATEMENT

    def __init__(self, message: str, statement: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.statement = statement

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"

    def to_dict(self) -> dict:
        """Serialisable form used by the API and the batch summary."""
        payload = {"kind": self.kind.value, "message": self.message}
        if self.statement:
            payload["statement"] = self.statement
        return payload


class EmptyInputError(SQLMapperError):
    kind = ErrorKind.EMPTY_INPUT


class MalformedStatementError(SQLMapperError):
    kind = ErrorKind.MALFORMED_STATEMENT


class UnsupportedConstructError(SQLMapperError):
    kind = ErrorKind.UNSUPPORTED_CONSTRUCT


class IdentifierTooLongError(SQLMapperError):
    kind = ErrorKind.IDENTIFIER_TOO_LONG


class ReservedWordCollisionError(SQLMapperError):
    kind = ErrorKind.RESERVED_WORD_COLLISION


class NoTypeMappingFoundError(SQLMapperError):
    kind = ErrorKind.NO_TYPE_MAPPING_FOUND


class NilSchemaError(SQLMapperError):
    kind = ErrorKind.NIL_SCHEMA


class UnknownDialectError(SQLMapperError):
    kind = ErrorKind.UNKNOWN_DIALECT
