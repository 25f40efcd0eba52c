"""Table enumeration and column description."""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from ..errors import IntrospectionError
from .base import DatabaseClient
from .models import RawColumn

logger = logging.getLogger(__name__)


class SchemaIntrospector:
    """Reads raw table and column metadata through a database client."""

    def __init__(self, client: DatabaseClient):
        self.client = client

    def list_tables(self, table_filter: Optional[Iterable[str]] = None) -> List[str]:
        """Get table names, optionally restricted to an allow-list.

        Args:
            table_filter: Table names to keep; None keeps everything

        Returns:
            Table names known to the database (intersected with the filter)
        """
        tables = self.client.list_tables()
        if table_filter is None:
            return tables

        allowed = set(table_filter)
        missing = allowed.difference(tables)
        if missing:
            logger.warning("Ignoring unknown tables: %s", ", ".join(sorted(missing)))
        return [t for t in tables if t in allowed]

    def describe_table(self, table: str) -> Dict[str, RawColumn]:
        """Get raw column metadata for a table.

        Raises:
            IntrospectionError: If the metadata call fails for any reason
        """
        try:
            return self.client.describe_table(table)
        except Exception as e:
            raise IntrospectionError(table, e) from e

    async def list_tables_async(self, table_filter: Optional[Iterable[str]] = None) -> List[str]:
        """Async wrapper for table enumeration."""
        return await asyncio.get_event_loop().run_in_executor(
            None, lambda: self.list_tables(table_filter)
        )

    async def describe_table_async(self, table: str) -> Dict[str, RawColumn]:
        """Async wrapper for table description."""
        return await asyncio.get_event_loop().run_in_executor(
            None, lambda: self.describe_table(table)
        )
