from .base_parser import BaseParser
from .mysql_parser import MySQLParser
from .postgres_parser import PostgresParser
from .sqlite_parser import SQLiteParser
from .oracle_parser import OracleParser
from .sqlserver_parser import SQLServerParser

__all__ = ['BaseParser', 'MySQLParser', 'PostgresParser', 'SQLiteParser', 'OracleParser', 'SQLServerParser']
