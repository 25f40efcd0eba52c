"""MySQL / MariaDB database client."""

from typing import Any, Dict, List, Optional, Sequence

from .base import DatabaseClient
from .models import RawColumn


class MySQLClient(DatabaseClient):
    """Client for introspecting a MySQL schema."""

    dialect = "mysql"

    def __init__(
        self,
        database: str,
        host: str = "localhost",
        port: Optional[int] = 3306,
        user: Optional[str] = None,
        password: Optional[str] = None,
    ):
        super().__init__()
        self.database = database
        self.host = host
        self.port = port
        self.user = user
        self.password = password

    @property
    def database_name(self) -> str:
        return self.database

    @property
    def schema_name(self) -> str:
        # MySQL schemas and databases are the same thing
        return self.database

    def connect(self):
        """Connect to MySQL."""
        if self._connection is not None:
            return self._connection

        try:
            import pymysql
        except ImportError:
            raise ImportError(
                "pymysql is required for MySQL connections. "
                "Install it with: pip install pymysql"
            )

        self._connection = pymysql.connect(
            host=self.host,
            port=self.port or 3306,
            user=self.user,
            password=self.password or "",
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
            (self.database,),
        )
        return [row["table_name"] for row in rows]

    def _describe_table(self, table: str) -> Dict[str, RawColumn]:
        quoted = table.replace("`", "``")
        rows = self._execute(f"SHOW FULL COLUMNS FROM `{quoted}`", ())

        columns = {}
        for row in rows:
            native_type = row["Type"]
            if isinstance(native_type, bytes):
                native_type = native_type.decode("utf-8")
            # Keep enum and set member literals intact; everything else is upper-cased
            if not native_type.lower().startswith(("enum(", "set(")):
                native_type = native_type.upper()
            columns[row["Field"]] = RawColumn(
                name=row["Field"],
                type=native_type,
                allow_null=row["Null"] == "YES",
                default_value=row["Default"],
                primary_key=row["Key"] == "PRI",
            )
        return columns
