"""SQLite database client."""

import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .base import DatabaseClient
from .models import RawColumn


def _clean_default(value: Any) -> Any:
    """Turn a stored default expression into the value sequelize would report.

    SQLite keeps the literal text of the DEFAULT clause, so string defaults
    arrive wrapped in quotes and an explicit NULL arrives as the word NULL.
    """
    if not isinstance(value, str):
        return value
    if value.upper() == "NULL":
        return None
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1].replace("''", "'")
    return value


class SQLiteClient(DatabaseClient):
    """Client for introspecting a SQLite database file."""

    dialect = "sqlite"

    def __init__(self, database_path: str = ":memory:"):
        """Initialize SQLite client.

        Args:
            database_path: Path to the database file (or :memory:)
        """
        super().__init__()
        self.database_path = database_path

    @property
    def database_name(self) -> str:
        if self.database_path == ":memory:":
            return "memory"
        return Path(self.database_path).stem

    @property
    def schema_name(self) -> str:
        return "main"

    def connect(self):
        """Connect to the SQLite database."""
        if self._connection is None:
            self._connection = sqlite3.connect(
                self.database_path,
                check_same_thread=False,
            )
        return self._connection

    def _execute(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        cursor = self._connection.execute(sql, tuple(params))
        try:
            return self._rows_to_dicts(cursor)
        finally:
            cursor.close()

    def _list_tables(self) -> List[str]:
        rows = self._execute(
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name",
            (),
        )
        return [row["name"] for row in rows]

    def _describe_table(self, table: str) -> Dict[str, RawColumn]:
        rows = self._execute("SELECT * FROM pragma_table_info(?) ORDER BY cid", (table,))
        if not rows:
            raise LookupError(f"No such table: {table}")

        columns = {}
        for row in rows:
            columns[row["name"]] = RawColumn(
                name=row["name"],
                type=row["type"] or "",
                allow_null=row["notnull"] == 0,
                default_value=_clean_default(row["dflt_value"]),
                primary_key=row["pk"] != 0,
            )
        return columns
