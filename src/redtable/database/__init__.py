"""
Database package for redtable.

This package provides:
- asyncpg connection pools per cluster database
- Statement executors (pool-backed and dry-run)
- Concurrent batch execution
"""

from .connection import ConnectionConfig, ConnectionPool, DatabaseManager
from .executor import (
    StatementExecutor,
    PoolStatementExecutor,
    RecordingExecutor,
    execute_batch,
)

__all__ = [
    "ConnectionConfig",
    "ConnectionPool",
    "DatabaseManager",
    "StatementExecutor",
    "PoolStatementExecutor",
    "RecordingExecutor",
    "execute_batch",
]
