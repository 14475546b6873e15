"""
Conversion driver: parse with the source dialect, generate with the target.

``convert`` is the whole pipeline in one call. ``convert_with_report`` also
returns the manual-review items the generator recorded and, when asked, the
warnings from re-parsing the output with sqlglot.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlmapper.config import config
from sqlmapper.utils.logger import setup_logger
from .converters import create_generator, get_dialect
from .utils.dialect_utils import get_sqlglot_dialect
from .utils.parser_utils import validate_statements
from .utils.sql_splitter import SplitterOptions, split_statements

logger = setup_logger(__name__)


@dataclass
class ConversionReport:
    sql: str
    source_dialect: str
    target_dialect: str
    review_items: List[Dict] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "sql": self.sql,
            "source_dialect": self.source_dialect,
            "target_dialect": self.target_dialect,
            "review_items": self.review_items,
            "warnings": self.warnings,
        }


def convert(text: str, source_dialect: str, target_dialect: str) -> str:
    """
    Convert a DDL script from *source_dialect* to *target_dialect*.

    The first error raised by the parser or the generator propagates
    unchanged.
    """
    source = get_dialect(source_dialect)
    target = get_dialect(target_dialect)
    return target.generator.generate(source.parser.parse(text))


def convert_with_report(text: str, source_dialect: str, target_dialect: str,
                        validate: Optional[bool] = None, label: str = "-",
                        **generator_options) -> ConversionReport:
    """
    Like ``convert`` but returns a ``ConversionReport``.

    Args:
        validate: Re-parse the generated table and index DDL with sqlglot.
            Defaults to ``conversion.validate_output``. Validation only
            produces warnings.
        label: File name recorded on review items.
        generator_options: ``quote_identifiers``, ``on_unsupported`` or
            ``version`` overrides for this call.
    """
    source = get_dialect(source_dialect)
    target = get_dialect(target_dialect)
    generator = create_generator(target.name, **{k: v for k, v in generator_options.items() if v is not None})

    schema = source.parser.parse(text)
    review_items: List[Dict] = []
    sql = generator.generate(schema, review=review_items, label=label)

    if validate is None:
        validate = bool((config.get('conversion') or {}).get('validate_output', False))
    warnings = validate_output(sql, target.name) if validate else []

    logger.debug(f"{source.name} -> {target.name}: {len(review_items)} review item(s), {len(warnings)} warning(s)")
    return ConversionReport(sql, source.name, target.name, review_items, warnings)


def validate_output(sql: str, dialect: str) -> List[str]:
    """sqlglot warnings for the CREATE TABLE / CREATE INDEX statements in *sql*."""
    descriptor = get_dialect(dialect).descriptor
    statements = split_statements(sql, SplitterOptions.for_dialect(descriptor))
    warnings = validate_statements(statements, get_sqlglot_dialect(dialect))
    for warning in warnings:
        logger.warning(f"Validation ({dialect}): {warning}")
    return warnings
