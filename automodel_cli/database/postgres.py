"""PostgreSQL database client."""

import re
from typing import Any, Dict, List, Optional, Sequence

from .base import DatabaseClient
from .models import RawColumn

DESCRIBE_TABLE_SQL = """
    SELECT
        pk.constraint_type AS "Constraint",
        c.column_name AS "Field",
        c.column_default AS "Default",
        c.is_nullable AS "Null",
        (CASE WHEN c.udt_name = 'hstore' THEN c.udt_name ELSE c.data_type END)
          || (CASE WHEN c.character_maximum_length IS NOT NULL
                   THEN '(' || c.character_maximum_length || ')' ELSE '' END) AS "Type",
        (SELECT array_agg(e.enumlabel::text ORDER BY e.enumsortorder)
           FROM pg_catalog.pg_type t
           JOIN pg_catalog.pg_enum e ON t.oid = e.enumtypid
          WHERE t.typname = c.udt_name) AS "special"
    FROM information_schema.columns c
    LEFT JOIN (
        SELECT tc.table_schema, tc.table_name, cu.column_name, tc.constraint_type
        FROM information_schema.table_constraints tc
        JOIN information_schema.key_column_usage cu
          ON tc.table_schema = cu.table_schema
         AND tc.table_name = cu.table_name
         AND tc.constraint_name = cu.constraint_name
         AND tc.constraint_type = 'PRIMARY KEY'
    ) pk
      ON pk.table_schema = c.table_schema
     AND pk.table_name = c.table_name
     AND pk.column_name = c.column_name
    WHERE c.table_name = %s AND c.table_schema = %s
    ORDER BY c.ordinal_position
"""

_CAST = re.compile(r"^(.*?)::[\w\s\"\[\]]+$", re.DOTALL)


def _clean_default(value: Any, data_type: str) -> Any:
    """Strip postgres casts and quoting from a column default.

    ``'abc'::character varying`` becomes ``abc``; sequence defaults
    (``nextval('x_seq'::regclass)``) are left untouched.
    """
    if not isinstance(value, str):
        return value
    if data_type.upper() == "BOOLEAN" and value in ("true", "false"):
        return value == "true"
    if "::regclass" not in value:
        match = _CAST.match(value)
        if match:
            value = match.group(1)
    if len(value) >= 2 and value[0] == value[-1] == "'":
        value = value[1:-1].replace("''", "'")
    return value


class PostgresClient(DatabaseClient):
    """Client for introspecting a PostgreSQL schema."""

    dialect = "postgres"

    def __init__(
        self,
        database: str,
        host: str = "localhost",
        port: Optional[int] = 5432,
        user: Optional[str] = None,
        password: Optional[str] = None,
        schema: str = "public",
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
        """Connect to PostgreSQL."""
        if self._connection is not None:
            return self._connection

        try:
            import psycopg2
        except ImportError:
            raise ImportError(
                "psycopg2 is required for PostgreSQL connections. "
                "Install it with: pip install psycopg2-binary"
            )

        self._connection = psycopg2.connect(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password,
        )
        # Introspection only reads; avoid holding a transaction open
        self._connection.autocommit = True
        return self._connection

    def _execute(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        cursor = self._connection.cursor()
        try:
            cursor.execute(sql, tuple(params))
            return self._rows_to_dicts(cursor)
        finally:
            cursor.close()

    def _list_tables(self) -> List[str]:
        rows = self._execute(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = %s
              AND table_type = 'BASE TABLE'
            ORDER BY table_name
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
            data_type = (row["Type"] or "").upper()
            columns[row["Field"]] = RawColumn(
                name=row["Field"],
                type=data_type,
                allow_null=row["Null"] == "YES",
                default_value=_clean_default(row["Default"], data_type),
                primary_key=row["Constraint"] == "PRIMARY KEY",
                special=list(row["special"] or []),
            )
        return columns
