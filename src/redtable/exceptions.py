"""
Exception classes for redtable.
"""

from typing import Any, Dict, Optional


class RedtableError(Exception):
    """Base exception for all redtable errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        result = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            result += f" [{details_str}]"
        if self.cause:
            result += f" (caused by: {self.cause})"
        return result


class ConfigurationError(RedtableError):
    """Raised when there's an error in configuration."""

    pass


class ValidationError(RedtableError):
    """Raised when there's a validation error."""

    pass


class MalformedSchemaError(ValidationError):
    """Raised when a declared table schema is internally inconsistent."""

    def __init__(self, table_name: str, reason: str) -> None:
        super().__init__(
            f"Malformed schema for table '{table_name}': {reason}",
            {"table": table_name},
        )
        self.table_name = table_name
        self.reason = reason


class EventError(RedtableError):
    """Raised when a lifecycle event cannot be handled."""

    pass


class UnrecognizedEventKindError(EventError):
    """Raised when a lifecycle event is not Create, Update or Delete."""

    def __init__(self, kind: Any) -> None:
        super().__init__(f"Unrecognized event type: {kind}")
        self.kind = kind


class MalformedEventError(EventError):
    """Raised when a lifecycle event is missing fields its kind requires."""

    pass


class SchemaError(RedtableError):
    """Raised when there's an error with table schema operations."""

    pass


class UnsupportedAlterationError(SchemaError):
    """Raised when a schema change has no ALTER TABLE form."""

    pass


class DatabaseError(RedtableError):
    """Raised when there's an error with database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when there's an error establishing or maintaining database connections."""

    pass


class DatabaseConfigurationError(DatabaseError):
    """Raised when there's an error in database configuration."""

    pass


class StatementExecutionError(DatabaseError):
    """Raised when the remote engine rejects or fails a statement."""

    def __init__(
        self,
        statement: str,
        cause: Optional[Exception] = None,
        cluster: Optional[str] = None,
    ) -> None:
        details = {}
        if cluster:
            details["cluster"] = cluster

        super().__init__(f"Statement failed: {statement}", details, cause)
        self.statement = statement
        self.cluster = cluster
