"""Foreign key discovery and normalization."""

import asyncio
import logging
from typing import Any, Dict, Optional

from ..errors import ForeignKeyQueryError
from .base import DatabaseClient
from .dialects import DialectAdapter
from .models import ForeignKeyRef, normalize_row_keys

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


class ForeignKeyResolver:
    """Resolves per-column key references for tables.

    Discovery is best-effort: a failing query degrades the table to "no
    reference information" instead of aborting the run.
    """

    def __init__(self, client: DatabaseClient, dialect: Optional[DialectAdapter]):
        self.client = client
        self.dialect = dialect

    def build_ref(self, table: str, row: Dict[str, Any]) -> ForeignKeyRef:
        """Normalize and classify one result row."""
        row = normalize_row_keys(row)
        defaults = {
            "source_table": table,
            "source_schema": self.client.database_name,
            "target_schema": self.client.database_name,
        }
        for key, value in defaults.items():
            if row.get(key) is None:
                row[key] = value

        for key in ("source_column", "target_column"):
            if isinstance(row.get(key), str):
                row[key] = row[key].strip()

        ref = ForeignKeyRef.from_row(row)
        ref.is_foreign_key = not _is_blank(ref.source_column) and not _is_blank(ref.target_column)
        ref.is_primary_key = self.dialect.is_primary_key(ref)
        ref.is_serial_key = self.dialect.is_serial_key(ref)
        return ref

    def resolve(self, table: str) -> Dict[str, ForeignKeyRef]:
        """Get key references for a table, keyed by source column.

        Args:
            table: Table name

        Returns:
            Mapping of column name to ForeignKeyRef (empty when discovery
            is unavailable or fails)
        """
        if self.dialect is None:
            return {}

        sql, params = self.dialect.foreign_keys_query(
            table, self.client.schema_name or self.client.database_name
        )
        try:
            rows = self.client.execute(sql, params)
        except Exception as e:
            error = ForeignKeyQueryError(table, e)
            logger.warning("%s; continuing without references", error.message)
            return {}

        refs: Dict[str, ForeignKeyRef] = {}
        for row in rows:
            ref = self.build_ref(table, row)
            existing = refs.get(ref.source_column)
            refs[ref.source_column] = existing.merged_with(ref) if existing else ref

        logger.debug("Resolved %d key references for %s", len(refs), table)
        return refs

    async def resolve_async(self, table: str) -> Dict[str, ForeignKeyRef]:
        """Async wrapper for reference resolution."""
        return await asyncio.get_event_loop().run_in_executor(
            None, lambda: self.resolve(table)
        )
