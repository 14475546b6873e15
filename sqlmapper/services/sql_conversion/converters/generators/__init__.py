from .base_generator import BaseGenerator
from .mysql_generator import MySQLGenerator
from .postgres_generator import PostgresGenerator
from .sqlite_generator import SQLiteGenerator
from .oracle_generator import OracleGenerator
from .sqlserver_generator import SQLServerGenerator

__all__ = [
    'BaseGenerator', 'MySQLGenerator', 'PostgresGenerator', 'SQLiteGenerator', 'OracleGenerator', 'SQLServerGenerator',
]
