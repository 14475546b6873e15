"""
SQL Conversion Package - DDL conversion between MySQL, PostgreSQL, SQLite,
Oracle and SQL Server.

Main Components:
    - Parsers: dialect DDL text -> canonical ``Schema``
    - Generators: ``Schema`` -> dialect DDL text
    - Driver: ``convert`` / ``convert_with_report`` (parse + generate)
    - ConversionOrchestrator: converts whole directories of scripts
    - Types: type name mapping, value conversion, charsets and collations

Usage:
    from sqlmapper.services.sql_conversion import convert

    postgres_sql = convert(mysql_sql, "mysql", "postgres")
"""

from .converters import DialectCapability, get_dialect
from .driver import ConversionReport, convert, convert_with_report
from .errors import ErrorKind, SQLMapperError
from .orchestrator import ConversionOrchestrator

__all__ = [
    'ConversionOrchestrator', 'ConversionReport', 'DialectCapability', 'ErrorKind', 'SQLMapperError',
    'convert', 'convert_with_report', 'get_dialect',
]
