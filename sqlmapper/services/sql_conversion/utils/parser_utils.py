import sqlglot
from sqlglot import exp
from typing import List
import logging

logger = logging.getLogger(__name__)


def safe_parse_one(sql: str, dialect: str) -> tuple[exp.Expression | None, str | None]:
    """
    Safely parses a single SQL statement into an AST.

    Args:
        sql: The SQL statement string to parse.
        dialect: The sqlglot dialect to use for parsing.

    Returns:
        A tuple containing (ast, error_message).
        If successful, ast is the parsed expression and error_message is None.
        If fails, ast is None and error_message is a formatted error string.
    """
    try:
        ast = sqlglot.parse_one(sql, read=dialect)
        return ast, None
    except sqlglot.errors.SqlglotError as e:
        logger.debug(f"sqlglot could not parse statement in dialect '{dialect}': {e}")
        first_line = sql.strip().splitlines()[0] if sql.strip() else ''
        return None, f"{first_line[:80]}: {str(e).splitlines()[0]}"


def validate_statements(statements: List[str], dialect: str) -> List[str]:
    """
    Re-parse generated CREATE TABLE / CREATE INDEX statements with sqlglot.

    Only table and index DDL is checked: view, trigger and sequence bodies
    carry opaque text sqlglot is not expected to understand in every dialect.

    Returns:
        A list of warning strings, empty when every statement parsed.
    """
    warnings = []
    for stmt in statements:
        head = stmt.lstrip().upper()
        if not (head.startswith('CREATE TABLE') or head.startswith('CREATE UNIQUE INDEX')
                or head.startswith('CREATE INDEX') or head.startswith('CREATE TEMPORARY TABLE')):
            continue
        _, error = safe_parse_one(stmt.strip().rstrip(';'), dialect)
        if error:
            warnings.append(error)
    return warnings
