"""Records generate runs in the run history.

A history that cannot be opened or written is reported as a warning; it
never fails the run being recorded.
"""

import logging
import sqlite3
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from ..config import settings
from .store import GenerationHistory

logger = logging.getLogger(__name__)

_recorder: Optional["RunRecorder"] = None


def get_recorder() -> "RunRecorder":
    """Get or create the recorder configured from settings."""
    global _recorder
    if _recorder is None:
        _recorder = RunRecorder(
            db_path=settings.history_db_path,
            enabled=settings.history_enabled,
            retention_days=settings.history_retention_days,
        )
    return _recorder


@dataclass
class GenerationRun:
    """Handle for the run in progress; filled in once models are generated."""
    run_id: str
    models_count: int = 0
    columns_count: int = 0
    references_count: int = 0

    def record(self, result) -> None:
        """Copy the counts of a GenerationResult."""
        self.models_count = result.tables_count
        self.columns_count = result.columns_count
        self.references_count = result.references_count


class RunRecorder:
    """Wraps generate runs and writes their outcome to the history."""

    def __init__(self, db_path: Optional[str] = None, enabled: bool = True, retention_days: int = 30):
        self.history: Optional[GenerationHistory] = None
        if enabled:
            try:
                self.history = GenerationHistory(db_path)
                purged = self.history.purge(retention_days)
                if purged:
                    logger.debug("Purged %d runs older than %d days", purged, retention_days)
            except (OSError, sqlite3.Error) as e:
                logger.warning("Run history disabled, could not open %s: %s", db_path, e)
                self.history = None

    @property
    def enabled(self) -> bool:
        return self.history is not None

    def _write(self, method, *args, **kwargs):
        if self.history is None:
            return
        try:
            method(*args, **kwargs)
        except sqlite3.Error as e:
            logger.warning("Could not update run history: %s", e)

    @contextmanager
    def record(
        self,
        dialect: Optional[str],
        database: Optional[str],
        output_directory: Optional[str] = None,
        tables: Optional[List[str]] = None,
        dry_run: bool = False,
    ) -> Iterator[GenerationRun]:
        """Record the run executed inside the block.

        Exceptions raised in the block are stored and re-raised.
        """
        run = GenerationRun(run_id=uuid.uuid4().hex[:8])
        started = time.monotonic()
        if self.history is not None:
            self._write(
                self.history.start,
                run.run_id,
                dialect,
                database,
                output_directory=output_directory,
                tables=tables,
                dry_run=dry_run,
            )

        try:
            yield run
        except Exception as e:
            if self.history is not None:
                self._write(self.history.fail, run.run_id, _elapsed_ms(started), e)
            raise

        if self.history is not None:
            self._write(
                self.history.finish,
                run.run_id,
                _elapsed_ms(started),
                run.models_count,
                run.columns_count,
                run.references_count,
            )

    def recent(self, **filters: Any) -> List[Dict[str, Any]]:
        if self.history is None:
            return []
        return self.history.recent(**filters)

    def summary(self, since_hours: int = 24) -> Optional[Dict[str, Any]]:
        if self.history is None:
            return None
        return self.history.summary(since_hours)

    def get(self, run_id: str) -> Optional[Dict[str, Any]]:
        if self.history is None:
            return None
        return self.history.get(run_id)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
