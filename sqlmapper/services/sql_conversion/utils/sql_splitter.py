"""
Quote-, comment- and depth-aware splitting of SQL text.

The same scanner splits a script into statements and a CREATE TABLE body
into definitions, so every parser treats commas and semicolons inside
string literals, quoted identifiers, nested parentheses and procedural
blocks the same way.
"""
import re
from dataclasses import dataclass
from typing import List, Optional

_DOLLAR_TAG = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)?\$")
_WORD_START = re.compile(r"[A-Za-z_]")
_WORD = re.compile(r"[A-Za-z0-9_$#]*")

# A BEGIN followed by one of these is a transaction statement, not a block.
_TRANSACTION_WORDS = {"TRANSACTION", "TRAN", "WORK", "DEFERRED", "IMMEDIATE", "EXCLUSIVE"}
# END IF / END LOOP ... close a construct that never opened a block.
_NON_BLOCK_END_WORDS = {"IF", "LOOP", "WHILE", "REPEAT"}
# The first of these after CREATE names the kind of object being created.
_OBJECT_KINDS = {
    "TABLE", "VIEW", "INDEX", "SEQUENCE", "SCHEMA", "DATABASE", "DOMAIN", "EXTENSION", "SYNONYM",
    "TRIGGER", "PROCEDURE", "FUNCTION", "PACKAGE", "TYPE", "EVENT",
}
# Objects whose bodies may hold BEGIN/CASE/DECLARE ... END blocks.
_PROCEDURAL_KINDS = {"TRIGGER", "PROCEDURE", "FUNCTION", "PACKAGE", "TYPE", "EVENT"}
_HEADER_WORDS = 8


@dataclass(frozen=True)
class SplitterOptions:
    backslash_escapes: bool = False
    bracket_identifiers: bool = False
    dollar_quotes: bool = False
    hash_comments: bool = False
    batch_separator: Optional[str] = None
    delimiter_directive: bool = False

    @classmethod
    def for_dialect(cls, descriptor) -> "SplitterOptions":
        return cls(
            backslash_escapes=descriptor.backslash_escapes,
            bracket_identifiers=descriptor.bracket_identifiers,
            dollar_quotes=descriptor.dollar_quotes,
            hash_comments=descriptor.hash_comments,
            batch_separator=descriptor.batch_separator,
            delimiter_directive=descriptor.delimiter_directive,
        )


DEFAULT_OPTIONS = SplitterOptions()


# ---------------------------------------------------------------------------
# Lexical helpers
# ---------------------------------------------------------------------------

def quoted_end(text: str, i: int, options: SplitterOptions = DEFAULT_OPTIONS) -> int:
    """Index just past the quoted token starting at ``text[i]``.

    Handles ``'...'`` (doubled quotes, optional backslash escapes), ``"..."``,
    backticks and ``[...]``. An unterminated token runs to the end of text.
    """
    n = len(text)
    opener = text[i]
    if opener == "'":
        j = i + 1
        while j < n:
            c = text[j]
            if c == "\\" and options.backslash_escapes:
                j += 2
                continue
            if c == "'":
                if j + 1 < n and text[j + 1] == "'":
                    j += 2
                    continue
                return j + 1
            j += 1
        return n

    closer = "]" if opener == "[" else opener
    j = i + 1
    while j < n:
        j = text.find(closer, j)
        if j == -1:
            return n
        if j + 1 < n and text[j + 1] == closer:
            j += 2
            continue
        return j + 1
    return n


def dollar_quote_end(text: str, i: int) -> Optional[int]:
    """Index just past a ``$tag$ ... $tag$`` literal at *i*, or None if *i* does not open one."""
    m = _DOLLAR_TAG.match(text, i)
    if not m:
        return None
    tag = m.group(0)
    end = text.find(tag, m.end())
    return len(text) if end == -1 else end + len(tag)


def is_quote_start(text: str, i: int, options: SplitterOptions) -> bool:
    c = text[i]
    return c in ("'", '"', "`") or (c == "[" and options.bracket_identifiers)


def comment_end(text: str, i: int, options: SplitterOptions) -> Optional[int]:
    """Index just past a comment starting at *i*, or None if there is none."""
    if text.startswith("--", i) or (options.hash_comments and text[i] == "#"):
        end = text.find("\n", i)
        return len(text) if end == -1 else end
    if text.startswith("/*", i):
        end = text.find("*/", i + 2)
        return len(text) if end == -1 else end + 2
    return None


def find_closing_paren(text: str, open_index: int, options: SplitterOptions = DEFAULT_OPTIONS) -> int:
    """Return the index of the ``)`` matching ``text[open_index] == '('``, or -1."""
    depth = 0
    i, n = open_index, len(text)
    while i < n:
        c = text[i]
        if is_quote_start(text, i, options):
            i = quoted_end(text, i, options)
            continue
        if c == "$" and options.dollar_quotes:
            end = dollar_quote_end(text, i)
            if end is not None:
                i = end
                continue
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _next_word(text: str, i: int) -> str:
    n = len(text)
    while i < n and text[i].isspace():
        i += 1
    if i < n and text[i] == ";":
        return ";"
    m = _WORD.match(text, i)
    if m and m.group(0):
        return m.group(0).upper()
    return text[i] if i < n else ""


def _opens_blocks(header: List[str]) -> bool:
    """Whether a statement starting with the words *header* can hold BEGIN/CASE ... END blocks."""
    if not header:
        return False
    if header[0] in ("BEGIN", "DECLARE"):
        return True
    if header[0] != "CREATE":
        return False
    kind = next((word for word in header[1:] if word in _OBJECT_KINDS), None)
    return kind in _PROCEDURAL_KINDS


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------

def _split(text: str, options: SplitterOptions, separator: str, statements: bool) -> List[str]:
    pieces: List[str] = []
    buf: List[str] = []
    depth = 0
    block = 0
    pending_declare = False
    header: List[str] = []
    delimiter = separator
    at_line_start = True
    i, n = 0, len(text)

    def flush():
        piece = "".join(buf).strip()
        if piece:
            pieces.append(piece)
        buf.clear()
        header.clear()

    while i < n:
        if statements and at_line_start:
            line_end = text.find("\n", i)
            line_end = n if line_end == -1 else line_end
            line = text[i:line_end].strip()
            upper_line = line.upper()
            if options.delimiter_directive and (upper_line.startswith("DELIMITER ") or upper_line.startswith("DELIMITER\t")):
                flush()
                delimiter = line.split(None, 1)[1].strip() or separator
                i = line_end + 1
                continue
            sep = options.batch_separator
            if sep and (upper_line == sep.upper() or (sep.upper() == "GO" and re.fullmatch(r"GO\s+\d+", upper_line))):
                flush()
                depth = block = 0
                pending_declare = False
                i = line_end + 1
                continue
        at_line_start = False

        c = text[i]

        if c == "\n":
            buf.append(c)
            at_line_start = True
            i += 1
            continue

        end = comment_end(text, i, options)
        if end is not None:
            buf.append(" ")
            i = end
            continue

        if is_quote_start(text, i, options):
            end = quoted_end(text, i, options)
            buf.append(text[i:end])
            i = end
            continue

        if c == "$" and options.dollar_quotes:
            end = dollar_quote_end(text, i)
            if end is not None:
                buf.append(text[i:end])
                i = end
                continue

        if depth == 0 and (block == 0 or delimiter != separator) and text.startswith(delimiter, i):
            flush()
            if delimiter != separator:
                block = 0
                pending_declare = False
            i += len(delimiter)
            continue

        if c == "(":
            depth += 1
        elif c == ")":
            depth = max(depth - 1, 0)
        elif statements and _WORD_START.match(c) and (i == 0 or not (text[i - 1].isalnum() or text[i - 1] in "_$.")):
            m = _WORD.match(text, i)
            word = m.group(0)
            # A custom delimiter may be glued to the word (END$$).
            cut = word.find(delimiter) if delimiter != separator else -1
            if cut > 0:
                word = word[:cut]
            upper = word.upper()
            end = i + len(word)
            if depth == 0 and len(header) < _HEADER_WORDS:
                header.append(upper)
            if depth == 0 and _opens_blocks(header):
                if upper == "BEGIN":
                    nxt = _next_word(text, end)
                    if nxt not in _TRANSACTION_WORDS and nxt not in (";", ""):
                        if pending_declare:
                            pending_declare = False
                        else:
                            block += 1
                elif upper == "DECLARE" and block == 0 and _next_word(text, end) != "@":
                    block += 1
                    pending_declare = True
                elif upper == "CASE":
                    block += 1
                elif upper == "END" and block > 0:
                    if _next_word(text, end) not in _NON_BLOCK_END_WORDS:
                        block -= 1
            buf.append(word)
            i = end
            continue

        buf.append(c)
        i += 1

    flush()
    return pieces


def split_statements(text: str, options: SplitterOptions = DEFAULT_OPTIONS) -> List[str]:
    """
    Split a DDL script into top-level statements.

    Comments are removed. Terminators inside string literals, quoted
    identifiers, parentheses and the BEGIN/CASE ... END blocks of trigger,
    routine and anonymous block bodies are not boundaries. Elsewhere those
    words are ordinary identifiers. A line holding only the dialect's batch
    separator (``/`` or ``GO``) also ends a statement, and MySQL ``DELIMITER``
    directives change the terminator.

    Args:
        text: The SQL script.
        options: Lexical options of the source dialect.

    Returns:
        The statements without their terminators, in order.
    """
    return _split(text, options, ";", statements=True)


def split_top_level(text: str, separator: str = ",", options: SplitterOptions = DEFAULT_OPTIONS) -> List[str]:
    """Split *text* on *separator* wherever it is not nested in quotes or parentheses."""
    return _split(text, options, separator, statements=False)
