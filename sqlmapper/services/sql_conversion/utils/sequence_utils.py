"""
Recognition of default expressions that draw from a sequence.

Each dialect spells "next value of sequence s" differently; generators and
the PostgreSQL parser need the bare sequence name regardless of spelling.
"""
import re
from typing import Optional

from .sql_splitter import find_closing_paren

_NEXTVAL_PATTERNS = (
    # PostgreSQL: nextval('s'), nextval('public.s'::regclass)
    re.compile(r"^nextval\s*\(\s*'([^']+)'\s*(?:::\s*regclass)?\s*\)$", re.IGNORECASE),
    # Oracle: s.NEXTVAL, owner.s.NEXTVAL
    re.compile(r"^((?:\"?[A-Za-z_][\w$#]*\"?\.)?\"?[A-Za-z_][\w$#]*\"?)\.NEXTVAL$", re.IGNORECASE),
    # SQL Server: NEXT VALUE FOR [dbo].[s]
    re.compile(r"^NEXT\s+VALUE\s+FOR\s+(\S+)$", re.IGNORECASE),
)


def strip_outer_parens(text: str) -> str:
    """``((0))`` -> ``0``; ``(a) + (b)`` is left alone."""
    text = text.strip()
    while text.startswith("(") and find_closing_paren(text, 0) == len(text) - 1:
        text = text[1:-1].strip()
    return text


def sequence_reference(default: Optional[str]) -> Optional[str]:
    """Name of the sequence *default* takes its next value from, without schema or quotes."""
    if not default:
        return None
    text = strip_outer_parens(default)
    for pattern in _NEXTVAL_PATTERNS:
        m = pattern.match(text)
        if m:
            last = m.group(1).split(".")[-1]
            return last.strip('"[]`')
    return None
