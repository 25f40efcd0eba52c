"""DuckDB database client."""

from typing import Any, Dict, List, Optional, Sequence
from pathlib import Path

from .base import DatabaseClient
from .models import RawColumn


class DuckDBClient(DatabaseClient):
    """Client for introspecting a DuckDB database."""

    dialect = "duckdb"

    def __init__(
        self,
        database_path: Optional[str] = None,
        schema: str = "main",
        read_only: bool = True,
    ):
        """Initialize DuckDB client.

        Args:
            database_path: Path to .duckdb file (None or :memory: for in-memory)
            schema: Schema to introspect
            read_only: Open database in read-only mode (default True for introspection)
        """
        super().__init__()
        self.database_path = database_path or ":memory:"
        self.schema = schema
        self.read_only = read_only

    @property
    def database_name(self) -> str:
        if self.database_path == ":memory:":
            return "memory"
        return Path(self.database_path).stem

    @property
    def schema_name(self) -> str:
        return self.schema

    def connect(self):
        """Connect directly to the DuckDB database file."""
        if self._connection is not None:
            return self._connection

        try:
            import duckdb
        except ImportError:
            raise ImportError(
                "duckdb is required. "
                "Install it with: pip install duckdb"
            )

        if self.database_path == ":memory:":
            self._connection = duckdb.connect(":memory:")
        else:
            self._connection = duckdb.connect(self.database_path, read_only=self.read_only)
        return self._connection

    def _execute(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        result = self._connection.execute(sql, list(params))
        return self._rows_to_dicts(result)

    def _list_tables(self) -> List[str]:
        rows = self._execute(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = ?
              AND table_type = 'BASE TABLE'
            ORDER BY table_name
            """,
            (self.schema,),
        )
        return [row["table_name"] for row in rows]

    def _primary_keys(self, table: str) -> List[str]:
        rows = self._execute(
            """
            SELECT constraint_column_names
            FROM duckdb_constraints()
            WHERE schema_name = ?
              AND table_name = ?
              AND constraint_type = 'PRIMARY KEY'
            """,
            (self.schema, table),
        )
        keys = []
        for row in rows:
            names = row["constraint_column_names"]
            keys.extend(names if isinstance(names, list) else [names])
        return keys

    def _describe_table(self, table: str) -> Dict[str, RawColumn]:
        rows = self._execute(
            """
            SELECT column_name, data_type, is_nullable, column_default
            FROM information_schema.columns
            WHERE table_schema = ?
              AND table_name = ?
            ORDER BY ordinal_position
            """,
            (self.schema, table),
        )
        if not rows:
            raise LookupError(f"No such table: {self.schema}.{table}")

        primary_keys = set(self._primary_keys(table))
        columns = {}
        for row in rows:
            default = row["column_default"]
            if isinstance(default, str) and len(default) >= 2 and default[0] == default[-1] == "'":
                default = default[1:-1].replace("''", "'")
            columns[row["column_name"]] = RawColumn(
                name=row["column_name"],
                type=row["data_type"] or "",
                allow_null=row["is_nullable"] == "YES",
                default_value=default,
                primary_key=row["column_name"] in primary_keys,
            )
        return columns
