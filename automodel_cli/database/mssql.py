"""Microsoft SQL Server database client."""

from typing import Any, Dict, List, Optional, Sequence

from .base import DatabaseClient
from .models import RawColumn

DESCRIBE_TABLE_SQL = """
    SELECT
        c.COLUMN_NAME AS name,
        c.DATA_TYPE AS data_type,
        c.CHARACTER_MAXIMUM_LENGTH AS length,
        c.IS_NULLABLE AS is_nullable,
        c.COLUMN_DEFAULT AS column_default,
        pk.CONSTRAINT_TYPE AS constraint_type
    FROM INFORMATION_SCHEMA.COLUMNS c
    LEFT JOIN (
        SELECT tc.TABLE_SCHEMA, tc.TABLE_NAME, cu.COLUMN_NAME, tc.CONSTRAINT_TYPE
        FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc
        JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE cu
          ON tc.CONSTRAINT_NAME = cu.CONSTRAINT_NAME
         AND tc.TABLE_SCHEMA = cu.TABLE_SCHEMA
        WHERE tc.CONSTRAINT_TYPE = 'PRIMARY KEY'
    ) pk
      ON pk.TABLE_SCHEMA = c.TABLE_SCHEMA
     AND pk.TABLE_NAME = c.TABLE_NAME
     AND pk.COLUMN_NAME = c.COLUMN_NAME
    WHERE c.TABLE_NAME = %s AND c.TABLE_SCHEMA = %s
    ORDER BY c.ORDINAL_POSITION
"""


def _native_type(data_type: str, length: Optional[int]) -> str:
    """Append the character length SQL Server reports separately.

    A length of -1 means the column was declared with ``(MAX)``.
    """
    native_type = (data_type or "").upper()
    if "CHAR" in native_type and length:
        native_type += "(MAX)" if length == -1 else f"({length})"
    return native_type


class MSSQLClient(DatabaseClient):
    """Client for introspecting a SQL Server schema.

    Column defaults are kept exactly as the server stores them, parentheses
    included (``((0))``, ``(getdate())``, ``(newid())``).
    """

    dialect = "mssql"

    # Created by SQL Server Management Studio inside user schemas
    EXCLUDED_TABLES = {"sysdiagrams"}

    def __init__(
        self,
        database: str,
        host: str = "localhost",
        port: Optional[int] = 1433,
        user: Optional[str] = None,
        password: Optional[str] = None,
        schema: str = "dbo",
    ):
        super().__init__()
        self.database = database
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.schema = schema

    @property
    def database_name(self) -> str:
        return self.database

    @property
    def schema_name(self) -> str:
        return self.schema

    def connect(self):
        """Connect to SQL Server."""
        if self._connection is not None:
            return self._connection

        try:
            import pymssql
        except ImportError:
            raise ImportError(
                "pymssql is required for SQL Server connections. "
                "Install it with: pip install pymssql"
            )

        self._connection = pymssql.connect(
            server=self.host,
            port=str(self.port or 1433),
            user=self.user,
            password=self.password,
            database=self.database,
            autocommit=True,
        )
        return self._connection

    def _execute(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        cursor = self._connection.cursor()
        try:
            cursor.execute(sql, tuple(params) or None)
            return self._rows_to_dicts(cursor)
        finally:
            cursor.close()

    def _list_tables(self) -> List[str]:
        rows = self._execute(
            """
            SELECT TABLE_NAME AS table_name
            FROM INFORMATION_SCHEMA.TABLES
            WHERE TABLE_SCHEMA = %s
              AND TABLE_TYPE = 'BASE TABLE'
            ORDER BY TABLE_NAME
            """,
            (self.schema,),
        )
        return [row["table_name"] for row in rows]

    def _describe_table(self, table: str) -> Dict[str, RawColumn]:
        rows = self._execute(DESCRIBE_TABLE_SQL, (table, self.schema))
        if not rows:
            raise LookupError(f"No such table: {self.schema}.{table}")

        columns = {}
        for row in rows:
            columns[row["name"]] = RawColumn(
                name=row["name"],
                type=_native_type(row["data_type"], row["length"]),
                allow_null=row["is_nullable"] == "YES",
                default_value=row["column_default"],
                primary_key=row["constraint_type"] == "PRIMARY KEY",
            )
        return columns
