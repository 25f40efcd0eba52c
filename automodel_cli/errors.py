"""Error types for automodel-cli."""

from typing import Optional, Dict, Any


class AutoModelError(Exception):
    """Base exception for automodel errors."""

    def __init__(self, message: str, code: str = "AUTOMODEL_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for run logging and CLI output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class DatabaseConnectionError(AutoModelError):
    """Error connecting to the database."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONNECTION_ERROR", details=details)


class IntrospectionError(AutoModelError):
    """Column metadata for a table could not be retrieved.

    Fatal to the run: a table without a description cannot be mapped.
    """

    def __init__(self, table: str, cause: Optional[BaseException] = None):
        message = f"Failed to describe table '{table}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(
            message,
            code="INTROSPECTION_ERROR",
            details={"table": table, "cause": type(cause).__name__ if cause else None},
        )
        self.table = table


class ForeignKeyQueryError(AutoModelError):
    """Foreign-key discovery failed for a table.

    Never raised out of the resolver; it is logged and the table proceeds
    without reference information.
    """

    def __init__(self, table: str, cause: Optional[BaseException] = None):
        message = f"Foreign key query failed for table '{table}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(
            message,
            code="FOREIGN_KEY_QUERY_ERROR",
            details={"table": table, "cause": type(cause).__name__ if cause else None},
        )
        self.table = table


class GenerationError(AutoModelError):
    """Error during descriptor synthesis."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="GENERATION_ERROR", details=details)


class WriteError(AutoModelError):
    """A generated model could not be written to disk."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        message = f"Failed to write {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, code="WRITE_ERROR", details={"path": path})
        self.path = path
