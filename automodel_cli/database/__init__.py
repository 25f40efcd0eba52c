"""Database introspection module for automodel-cli.

This module provides the raw metadata collaborators (one client per
engine), the per-engine foreign key strategies, and the introspection and
foreign key resolution steps built on top of them.
"""

from .models import RawColumn, ForeignKeyRef
from .base import DatabaseClient
from .sqlite import SQLiteClient
from .postgres import PostgresClient
from .mysql import MySQLClient
from .mssql import MSSQLClient
from .duckdb import DuckDBClient
from .factory import create_client, SUPPORTED_DIALECTS
from .dialects import (
    DialectAdapter,
    MySQLDialect,
    PostgresDialect,
    SQLiteDialect,
    MSSQLDialect,
    DuckDBDialect,
    get_dialect,
)
from .introspector import SchemaIntrospector
from .foreign_keys import ForeignKeyResolver

__all__ = [
    # Data models
    "RawColumn",
    "ForeignKeyRef",
    # Clients
    "DatabaseClient",
    "SQLiteClient",
    "PostgresClient",
    "MySQLClient",
    "MSSQLClient",
    "DuckDBClient",
    "create_client",
    "SUPPORTED_DIALECTS",
    # Dialect adapters
    "DialectAdapter",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "MSSQLDialect",
    "DuckDBDialect",
    "get_dialect",
    # Introspection
    "SchemaIntrospector",
    "ForeignKeyResolver",
]
