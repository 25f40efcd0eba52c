"""Per-engine foreign key discovery strategies.

Each adapter knows how to ask its engine which columns of a table take part
in primary or foreign key constraints, and how to recognise primary and
auto-increment keys in the rows that query returns. Field names in those rows
are engine-specific; the resolver normalizes them.
"""

from typing import Any, Dict, Optional, Tuple

from .models import ForeignKeyRef, RawColumn

Query = Tuple[str, Tuple[Any, ...]]


class DialectAdapter:
    """Foreign key strategy for one database engine."""

    name: str = ""

    def foreign_keys_query(self, table: str, schema: Optional[str]) -> Query:
        """Build the foreign key discovery query for a table.

        Args:
            table: Table name
            schema: Schema (or database) the table lives in

        Returns:
            Tuple of SQL text and its positional parameters
        """
        raise NotImplementedError

    def is_primary_key(self, ref: ForeignKeyRef) -> bool:
        return False

    def is_serial_key(self, ref: ForeignKeyRef) -> bool:
        return False

    def is_disabled_default(self, column: RawColumn, value: Any) -> bool:
        """Whether a default is an engine sentinel that must not be emitted."""
        return False


class MySQLDialect(DialectAdapter):
    name = "mysql"

    def foreign_keys_query(self, table: str, schema: Optional[str]) -> Query:
        sql = """
            SELECT
                K.CONSTRAINT_NAME AS constraint_name,
                K.CONSTRAINT_SCHEMA AS source_schema,
                K.TABLE_NAME AS source_table,
                K.COLUMN_NAME AS source_column,
                K.REFERENCED_TABLE_SCHEMA AS target_schema,
                K.REFERENCED_TABLE_NAME AS target_table,
                K.REFERENCED_COLUMN_NAME AS target_column,
                C.EXTRA AS extra,
                C.COLUMN_KEY AS column_key
            FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE AS K
            LEFT JOIN INFORMATION_SCHEMA.COLUMNS AS C
              ON C.TABLE_SCHEMA = K.TABLE_SCHEMA
             AND C.TABLE_NAME = K.TABLE_NAME
             AND C.COLUMN_NAME = K.COLUMN_NAME
            WHERE K.TABLE_NAME = %s
              AND K.CONSTRAINT_SCHEMA = %s
              AND (K.CONSTRAINT_NAME = 'PRIMARY' OR K.REFERENCED_TABLE_NAME IS NOT NULL)
            ORDER BY K.REFERENCED_TABLE_NAME IS NOT NULL, K.CONSTRAINT_NAME
        """
        return sql, (table, schema)

    def is_primary_key(self, ref: ForeignKeyRef) -> bool:
        return ref.get("constraint_name") == "PRIMARY"

    def is_serial_key(self, ref: ForeignKeyRef) -> bool:
        return ref.get("extra") == "auto_increment"


class PostgresDialect(DialectAdapter):
    name = "postgres"

    def foreign_keys_query(self, table: str, schema: Optional[str]) -> Query:
        sql = """
            SELECT
                o.conname AS constraint_name,
                (SELECT nspname FROM pg_catalog.pg_namespace WHERE oid = m.relnamespace) AS source_schema,
                m.relname AS source_table,
                (SELECT a.attname FROM pg_catalog.pg_attribute a
                  WHERE a.attrelid = m.oid AND a.attnum = o.conkey[1] AND a.attisdropped = false) AS source_column,
                (SELECT nspname FROM pg_catalog.pg_namespace WHERE oid = f.relnamespace) AS target_schema,
                f.relname AS target_table,
                (SELECT a.attname FROM pg_catalog.pg_attribute a
                  WHERE a.attrelid = f.oid AND a.attnum = o.confkey[1] AND a.attisdropped = false) AS target_column,
                o.contype,
                (SELECT pg_get_expr(d.adbin, d.adrelid)
                   FROM pg_catalog.pg_attrdef d
                  WHERE d.adrelid = o.conrelid AND d.adnum = o.conkey[1]
                  LIMIT 1) AS extra
            FROM pg_catalog.pg_constraint o
            LEFT JOIN pg_catalog.pg_class f ON f.oid = o.confrelid
            LEFT JOIN pg_catalog.pg_class m ON m.oid = o.conrelid
            WHERE m.relname = %s
              AND m.relnamespace = (SELECT oid FROM pg_catalog.pg_namespace WHERE nspname = %s)
              AND o.contype IN ('p', 'f')
            ORDER BY o.contype = 'f', o.conname
        """
        return sql, (table, schema or "public")

    def is_primary_key(self, ref: ForeignKeyRef) -> bool:
        return ref.get("contype") == "p"

    def is_serial_key(self, ref: ForeignKeyRef) -> bool:
        extra = ref.get("extra")
        return (
            self.is_primary_key(ref)
            and isinstance(extra, str)
            and extra.startswith("nextval(")
            and "_seq" in extra
            and "::regclass" in extra
        )


class SQLiteDialect(DialectAdapter):
    """SQLite only reports real foreign keys; no primary or serial tags."""

    name = "sqlite"

    def foreign_keys_query(self, table: str, schema: Optional[str]) -> Query:
        return "SELECT * FROM pragma_foreign_key_list(?)", (table,)


class MSSQLDialect(DialectAdapter):
    name = "mssql"

    def foreign_keys_query(self, table: str, schema: Optional[str]) -> Query:
        sql = """
            SELECT
                ccu.TABLE_NAME AS source_table,
                ccu.CONSTRAINT_NAME AS constraint_name,
                ccu.COLUMN_NAME AS source_column,
                kcu.TABLE_NAME AS target_table,
                kcu.COLUMN_NAME AS target_column,
                tc.CONSTRAINT_TYPE AS constraint_type,
                c.is_identity AS is_identity
            FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc
            JOIN INFORMATION_SCHEMA.CONSTRAINT_COLUMN_USAGE ccu
              ON ccu.CONSTRAINT_NAME = tc.CONSTRAINT_NAME
             AND ccu.TABLE_SCHEMA = tc.TABLE_SCHEMA
            LEFT JOIN INFORMATION_SCHEMA.REFERENTIAL_CONSTRAINTS rc
              ON rc.CONSTRAINT_NAME = tc.CONSTRAINT_NAME
             AND rc.CONSTRAINT_SCHEMA = tc.CONSTRAINT_SCHEMA
            LEFT JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE kcu
              ON kcu.CONSTRAINT_NAME = rc.UNIQUE_CONSTRAINT_NAME
             AND kcu.CONSTRAINT_SCHEMA = rc.UNIQUE_CONSTRAINT_SCHEMA
            LEFT JOIN sys.columns c
              ON c.object_id = OBJECT_ID(QUOTENAME(tc.TABLE_SCHEMA) + '.' + QUOTENAME(tc.TABLE_NAME))
             AND c.name = ccu.COLUMN_NAME
            WHERE tc.TABLE_NAME = %s
              AND tc.CONSTRAINT_TYPE IN ('PRIMARY KEY', 'FOREIGN KEY')
            ORDER BY tc.CONSTRAINT_TYPE DESC, ccu.CONSTRAINT_NAME
        """
        return sql, (table,)

    def is_primary_key(self, ref: ForeignKeyRef) -> bool:
        return ref.get("constraint_type") == "PRIMARY KEY"

    def is_serial_key(self, ref: ForeignKeyRef) -> bool:
        return bool(ref.get("is_identity"))

    def is_disabled_default(self, column: RawColumn, value: Any) -> bool:
        # GUID identifiers are generated by the server
        return isinstance(value, str) and value.lower() == "(newid())"


class DuckDBDialect(DialectAdapter):
    name = "duckdb"

    def foreign_keys_query(self, table: str, schema: Optional[str]) -> Query:
        sql = """
            SELECT k.*, col.column_default AS extra
            FROM (
                SELECT
                    c.constraint_type,
                    c.schema_name AS source_schema,
                    c.table_name AS source_table,
                    unnest(c.constraint_column_names) AS source_column,
                    c.referenced_table AS target_table,
                    unnest(c.referenced_column_names) AS target_column
                FROM duckdb_constraints() c
                WHERE c.schema_name = ?
                  AND c.table_name = ?
                  AND c.constraint_type IN ('PRIMARY KEY', 'FOREIGN KEY')
            ) k
            LEFT JOIN information_schema.columns col
              ON col.table_schema = k.source_schema
             AND col.table_name = k.source_table
             AND col.column_name = k.source_column
            ORDER BY k.constraint_type DESC
        """
        return sql, (schema or "main", table)

    def is_primary_key(self, ref: ForeignKeyRef) -> bool:
        return ref.get("constraint_type") == "PRIMARY KEY"

    def is_serial_key(self, ref: ForeignKeyRef) -> bool:
        extra = ref.get("extra")
        return self.is_primary_key(ref) and isinstance(extra, str) and extra.startswith("nextval(")


DIALECTS: Dict[str, DialectAdapter] = {
    "mysql": MySQLDialect(),
    "mariadb": MySQLDialect(),
    "postgres": PostgresDialect(),
    "postgresql": PostgresDialect(),
    "sqlite": SQLiteDialect(),
    "mssql": MSSQLDialect(),
    "duckdb": DuckDBDialect(),
}


def get_dialect(name: Optional[str]) -> Optional[DialectAdapter]:
    """Look up the adapter for an engine.

    An unknown engine is not an error: it returns None and foreign key
    enrichment is skipped.
    """
    if not name:
        return None
    return DIALECTS.get(name.lower())
