"""
Dialect utilities for SQL conversion.
Handles mapping between dialect tags and their sqlglot dialects, and sniffing
the source dialect of a DDL script.
"""
import re
from typing import Optional

from ..dialects import get_descriptor

# Checked in order; the first match wins.
_DETECTION_RULES = [
    (re.compile(r"ENGINE\s*=\s*INNODB|\bAUTO_INCREMENT\b", re.IGNORECASE), 'mysql'),
    (re.compile(r"AUTOINCREMENT", re.IGNORECASE), 'sqlite'),
    (re.compile(r"IDENTITY", re.IGNORECASE), 'sqlserver'),
    (re.compile(r"SERIAL", re.IGNORECASE), 'postgres'),
    (re.compile(r"NUMBER\s*\(", re.IGNORECASE), 'oracle'),
]


def get_sqlglot_dialect(dialect: str) -> str:
    """
    Get the sqlglot dialect name used to validate output for *dialect*.

    Args:
        dialect: Dialect tag or alias (e.g., 'mysql', 'postgresql', 'mssql')

    Returns:
        sqlglot dialect string
    """
    return get_descriptor(dialect).sqlglot_dialect


def detect_source_dialect(content: str) -> Optional[str]:
    """
    Guess the dialect of a DDL script by keyword sniffing.

    Returns:
        The dialect tag, or None when no rule matches.
    """
    for pattern, dialect in _DETECTION_RULES:
        if pattern.search(content):
            return dialect
    return None
