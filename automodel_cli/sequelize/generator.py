"""Orchestrates introspection, mapping, rendering and writing."""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Awaitable, Dict, Iterable, List, Mapping, Optional

from ..config import GeneratorOptions
from ..database.base import DatabaseClient
from ..database.dialects import DialectAdapter, get_dialect
from ..database.foreign_keys import ForeignKeyResolver
from ..database.introspector import SchemaIntrospector
from ..database.models import ForeignKeyRef, RawColumn
from .attributes import AttributeMapper
from .renderer import DescriptorRenderer
from .writer import OutputWriter

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of one generation pass."""
    models: Mapping[str, str]
    paths: List[Path] = field(default_factory=list)
    columns_count: int = 0
    references_count: int = 0

    @property
    def tables_count(self) -> int:
        return len(self.models)


async def _settle(tasks: Iterable[Awaitable]) -> None:
    """Await every task, then re-raise the first failure if any."""
    results = await asyncio.gather(*tasks, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result


class ModelGenerator:
    """Generates one Sequelize model descriptor per table.

    The generator owns the two accumulation maps of a run. Each table key is
    written by exactly one worker, so the concurrent phases need no locking.

    Example usage:
        with SQLiteClient("app.db") as client:
            generator = ModelGenerator(client, GeneratorOptions(directory="models"))
            result = asyncio.run(generator.run())
    """

    def __init__(
        self,
        client: DatabaseClient,
        options: Optional[GeneratorOptions] = None,
        dialect: Optional[DialectAdapter] = None,
    ):
        self.client = client
        self.options = options or GeneratorOptions()
        self.dialect = dialect or get_dialect(client.dialect)
        if self.dialect is None:
            logger.info("No foreign key support for %r; references are skipped", client.dialect)

        self.introspector = SchemaIntrospector(client)
        self.resolver = ForeignKeyResolver(client, self.dialect)
        self.mapper = AttributeMapper(self.dialect)
        self.renderer = DescriptorRenderer(self.options)
        self.writer = OutputWriter(self.options.directory, self.options.extension)

        self.tables: Dict[str, Dict[str, RawColumn]] = {}
        self.foreign_keys: Dict[str, Dict[str, ForeignKeyRef]] = {}

    async def _map_foreign_keys(self, table: str) -> None:
        self.foreign_keys[table] = await self.resolver.resolve_async(table)

    async def _map_table(self, table: str) -> None:
        self.tables[table] = await self.introspector.describe_table_async(table)

    async def build(self) -> List[str]:
        """Fetch raw metadata for every selected table.

        Foreign keys are resolved for all tables first, then all tables are
        described. A description failure is raised once the other workers
        of that phase have finished.

        Returns:
            Names of the tables that were introspected

        Raises:
            IntrospectionError: If any table could not be described
        """
        table_names = await self.introspector.list_tables_async(self.options.tables)
        logger.info("Introspecting %d tables", len(table_names))

        await _settle(self._map_foreign_keys(table) for table in table_names)
        await _settle(self._map_table(table) for table in table_names)

        # Workers finish in any order; keep the database's table order
        self.tables = {table: self.tables[table] for table in table_names}
        return table_names

    def generate(self) -> Mapping[str, str]:
        """Render a descriptor for every introspected table."""
        models = {}
        for table, columns in self.tables.items():
            attributes = self.mapper.map_table(columns, self.foreign_keys.get(table))
            models[table] = self.renderer.render(table, attributes)
        return MappingProxyType(models)

    async def run(self, write: bool = True) -> GenerationResult:
        """Introspect, render and (optionally) write all models.

        Args:
            write: Persist the models; False renders them only

        Returns:
            GenerationResult with the rendered text and written paths
        """
        await self.build()
        models = self.generate()

        paths: List[Path] = []
        if write:
            paths = await self.writer.write_all(dict(models))

        return GenerationResult(
            models=models,
            paths=paths,
            columns_count=sum(len(columns) for columns in self.tables.values()),
            references_count=sum(
                1 for refs in self.foreign_keys.values() for ref in refs.values() if ref.is_foreign_key
            ),
        )
