"""
Tokenizer for definition-level SQL text (column definitions, constraint
clauses, statement headers).

Quoted strings, quoted identifiers and balanced parenthesised groups are
single tokens, and every token keeps its offsets so callers can slice the
original text verbatim (default expressions, CHECK bodies).
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .sql_splitter import (
    DEFAULT_OPTIONS,
    SplitterOptions,
    dollar_quote_end,
    find_closing_paren,
    quoted_end,
)

_WORD = re.compile(r"[A-Za-z_@#][A-Za-z0-9_$#@]*")
_NUMBER = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_STRING_PREFIX = re.compile(r"(?:[NnEeXxBb]|_[A-Za-z0-9]+)'")


class TokenKind(str, Enum):
    WORD = "WORD"
    QUOTED_IDENT = "QUOTED_IDENT"
    STRING = "STRING"
    NUMBER = "NUMBER"
    GROUP = "GROUP"
    SYMBOL = "SYMBOL"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    start: int
    end: int

    @property
    def upper(self) -> str:
        return self.text.upper() if self.kind == TokenKind.WORD else ""

    def is_word(self, *words: str) -> bool:
        return self.kind == TokenKind.WORD and self.text.upper() in words

    @property
    def is_identifier(self) -> bool:
        return self.kind in (TokenKind.WORD, TokenKind.QUOTED_IDENT)

    @property
    def inner(self) -> str:
        """Content of a GROUP token without its outer parentheses."""
        if self.kind == TokenKind.GROUP:
            return self.text[1:-1]
        return self.text


def tokenize(text: str, options: SplitterOptions = DEFAULT_OPTIONS) -> List[Token]:
    tokens: List[Token] = []
    i, n = 0, len(text)
    while i < n:
        c = text[i]
        if c.isspace():
            i += 1
            continue

        m = _STRING_PREFIX.match(text, i)
        if m:
            end = quoted_end(text, m.end() - 1, options)
            tokens.append(Token(TokenKind.STRING, text[i:end], i, end))
            i = end
            continue

        if c == "'":
            end = quoted_end(text, i, options)
            tokens.append(Token(TokenKind.STRING, text[i:end], i, end))
            i = end
            continue

        if c in ('"', "`") or (c == "[" and options.bracket_identifiers):
            end = quoted_end(text, i, options)
            tokens.append(Token(TokenKind.QUOTED_IDENT, text[i:end], i, end))
            i = end
            continue

        if c == "$" and options.dollar_quotes:
            end = dollar_quote_end(text, i)
            if end is not None:
                tokens.append(Token(TokenKind.STRING, text[i:end], i, end))
                i = end
                continue

        if c == "(":
            close = find_closing_paren(text, i, options)
            end = n if close == -1 else close + 1
            tokens.append(Token(TokenKind.GROUP, text[i:end], i, end))
            i = end
            continue

        m = _NUMBER.match(text, i)
        if m and m.group(0) != ".":
            tokens.append(Token(TokenKind.NUMBER, m.group(0), i, m.end()))
            i = m.end()
            continue

        m = _WORD.match(text, i)
        if m:
            tokens.append(Token(TokenKind.WORD, m.group(0), i, m.end()))
            i = m.end()
            continue

        if text.startswith("::", i):
            tokens.append(Token(TokenKind.SYMBOL, "::", i, i + 2))
            i += 2
            continue

        tokens.append(Token(TokenKind.SYMBOL, c, i, i + 1))
        i += 1
    return tokens


def unquote_identifier(text: str) -> str:
    """Strip identifier quotes (``"x"``, ```x```, ``[x]``) and undo doubled closers."""
    if len(text) >= 2:
        opener, closer = text[0], text[-1]
        if (opener, closer) in (('"', '"'), ("`", "`"), ("[", "]")):
            return text[1:-1].replace(closer * 2, closer)
    return text


def unquote_string(text: str, backslash_escapes: bool = False) -> str:
    """Value of a string literal token (``'it''s'`` -> ``it's``)."""
    start = text.find("'")
    if start == -1 or len(text) - start < 2:
        return text
    body = text[start + 1:-1]
    if backslash_escapes:
        body = re.sub(r"\\(.)", lambda m: {"n": "\n", "t": "\t", "0": "\0"}.get(m.group(1), m.group(1)), body)
    return body.replace("''", "'")


def slice_between(text: str, first: Token, last: Optional[Token]) -> str:
    """Original text from the start of *first* to the end of *last* (inclusive)."""
    if last is None:
        return text[first.start:].strip()
    return text[first.start:last.end].strip()
