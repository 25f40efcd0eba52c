"""History of generate runs, kept in a local SQLite file."""

from .store import GenerationHistory, default_history_path
from .recorder import GenerationRun, RunRecorder, get_recorder

__all__ = [
    "GenerationHistory",
    "default_history_path",
    "GenerationRun",
    "RunRecorder",
    "get_recorder",
]
