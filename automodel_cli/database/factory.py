"""Client selection by engine identifier."""

from typing import Optional

from ..errors import DatabaseConnectionError
from .base import DatabaseClient
from .duckdb import DuckDBClient
from .mssql import MSSQLClient
from .mysql import MySQLClient
from .postgres import PostgresClient
from .sqlite import SQLiteClient

SUPPORTED_DIALECTS = ("sqlite", "postgres", "mysql", "mssql", "duckdb")

_ALIASES = {
    "postgresql": "postgres",
    "mariadb": "mysql",
    "sqlserver": "mssql",
}


def create_client(
    dialect: str,
    database: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    path: Optional[str] = None,
    schema: Optional[str] = None,
) -> DatabaseClient:
    """Create a client for an engine.

    Args:
        dialect: Engine identifier (sqlite, postgres, mysql, mssql, duckdb)
        database: Database name for server engines
        host: Server host
        port: Server port
        user: Login user
        password: Login password
        path: Database file for sqlite / duckdb
        schema: Schema to introspect, where the engine has schemas

    Raises:
        DatabaseConnectionError: Unknown engine or missing connection details
    """
    name = _ALIASES.get(dialect.lower(), dialect.lower())

    if name == "sqlite":
        return SQLiteClient(path or database or ":memory:")
    if name == "duckdb":
        return DuckDBClient(path or database, schema=schema or "main")

    if name not in SUPPORTED_DIALECTS:
        raise DatabaseConnectionError(
            f"Unsupported database engine: {dialect}",
            details={"supported": list(SUPPORTED_DIALECTS)},
        )
    if not database:
        raise DatabaseConnectionError(f"A database name is required for {name}")

    if name == "postgres":
        return PostgresClient(
            database,
            host=host or "localhost",
            port=port or 5432,
            user=user,
            password=password,
            schema=schema or "public",
        )
    if name == "mssql":
        return MSSQLClient(
            database,
            host=host or "localhost",
            port=port or 1433,
            user=user,
            password=password,
            schema=schema or "dbo",
        )
    return MySQLClient(
        database,
        host=host or "localhost",
        port=port or 3306,
        user=user,
        password=password,
    )
