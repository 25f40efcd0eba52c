"""Persists rendered models, one file per table."""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List

from ..errors import WriteError

logger = logging.getLogger(__name__)


class OutputWriter:
    """Writes ``<directory>/<table><extension>`` files."""

    def __init__(self, directory: str, extension: str = ".js"):
        self.directory = Path(directory)
        self.extension = extension

    def path_for(self, table: str) -> Path:
        return self.directory / f"{table}{self.extension}"

    def write(self, table: str, text: str) -> Path:
        """Write one model.

        Raises:
            WriteError: If the file cannot be written
        """
        path = self.path_for(table)
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise WriteError(str(path), e) from e
        logger.debug("Wrote %s", path)
        return path

    async def write_all(self, models: Dict[str, str]) -> List[Path]:
        """Write every model concurrently.

        Files already written when one write fails are left in place.
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteError(str(self.directory), e) from e

        loop = asyncio.get_event_loop()
        tasks = [
            loop.run_in_executor(None, self.write, table, text)
            for table, text in models.items()
        ]
        return list(await asyncio.gather(*tasks))
