"""Abstract base class for database clients."""

import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from .models import RawColumn


class DatabaseClient(ABC):
    """Abstract base class for the raw metadata collaborator.

    Subclasses wrap a single driver connection. Calls may arrive from
    several executor threads at once, so every driver round-trip goes
    through ``_run`` which serializes access to the connection.
    """

    # Engine identifier used to pick a dialect adapter
    dialect: str = ""

    # Override in subclasses to exclude system tables
    EXCLUDED_TABLES: set = set()

    def __init__(self):
        self._connection = None
        self._lock = threading.Lock()

    @property
    @abstractmethod
    def database_name(self) -> str:
        """Database (catalog) name used as the default foreign key schema."""
        pass

    @property
    def schema_name(self) -> Optional[str]:
        """Schema the tables live in, when the engine has one."""
        return None

    @abstractmethod
    def connect(self):
        """Establish the connection if needed and return it."""
        pass

    def close(self):
        """Close the connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    @abstractmethod
    def _list_tables(self) -> List[str]:
        """Return all table names, unserialized."""
        pass

    @abstractmethod
    def _describe_table(self, table: str) -> Dict[str, RawColumn]:
        """Return column metadata for a table, unserialized."""
        pass

    @abstractmethod
    def _execute(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        """Execute a query and return rows as dictionaries, unserialized."""
        pass

    def _run(self, func, *args):
        with self._lock:
            self.connect()
            return func(*args)

    def list_tables(self) -> List[str]:
        """Get all user tables in the database.

        Returns:
            List of table names (excluding system tables)
        """
        tables = self._run(self._list_tables)
        return [t for t in tables if t not in self.EXCLUDED_TABLES]

    def describe_table(self, table: str) -> Dict[str, RawColumn]:
        """Get column metadata for a table, in ordinal order.

        Args:
            table: Table name

        Returns:
            Mapping of column name to RawColumn
        """
        return self._run(self._describe_table, table)

    def execute(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Execute a raw query.

        Args:
            sql: Query text using the driver's placeholder style
            params: Positional query parameters

        Returns:
            Result rows as dictionaries keyed by column label
        """
        return self._run(self._execute, sql, params)

    @staticmethod
    def _rows_to_dicts(cursor) -> List[Dict[str, Any]]:
        """Convert a DB-API cursor's pending results into dictionaries."""
        if cursor.description is None:
            return []
        names = [col[0] for col in cursor.description]
        return [dict(zip(names, row)) for row in cursor.fetchall()]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
