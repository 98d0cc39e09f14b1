"""
Database connection management for redtable.

Redshift speaks the PostgreSQL wire protocol, so connections are asyncpg
pools. One pool is kept per (cluster, database) pair and created on first use.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional, Any, AsyncIterator, Tuple

import asyncpg
from pydantic import BaseModel, Field, field_validator

from ..config import ClusterConnection
from ..exceptions import DatabaseConnectionError, DatabaseConfigurationError
from ..schema.models import ClusterIdentity


logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Connection configuration for one database on one cluster."""

    host: str = Field(..., description="Cluster endpoint host")
    port: int = Field(5439, description="Cluster port")
    database: str = Field(..., description="Database name")
    user: str = Field(..., description="Database user")
    password: str = Field(..., description="Database password")

    # Connection pool settings
    min_size: int = Field(1, description="Minimum connections in pool")
    max_size: int = Field(5, description="Maximum connections in pool")

    command_timeout: float = Field(300.0, description="Command timeout in seconds")
    ssl_mode: Optional[str] = Field("require", description="SSL mode")

    @field_validator("database")
    @classmethod
    def validate_database(cls, v):
        if not v or not v.strip():
            raise ValueError("Database name is required")
        return v

    @classmethod
    def from_cluster(cls, cluster: ClusterConnection, database: str) -> "ConnectionConfig":
        """Build the connection settings for `database` on a configured cluster."""
        return cls(
            host=cluster.host,
            port=cluster.port,
            database=database,
            user=cluster.user,
            password=cluster.password,
            min_size=cluster.min_size,
            max_size=cluster.max_size,
            command_timeout=cluster.command_timeout,
            ssl_mode=cluster.ssl_mode,
        )

    def to_connection_kwargs(self) -> Dict[str, Any]:
        """Convert to asyncpg connection kwargs."""
        kwargs = {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.user,
            "password": self.password,
            "command_timeout": self.command_timeout,
        }

        if self.ssl_mode:
            kwargs["ssl"] = self.ssl_mode

        return kwargs


class ConnectionPool:
    """Async connection pool wrapper."""

    def __init__(self, config: ConnectionConfig):
        self.config = config
        self._pool: Optional[asyncpg.Pool] = None
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Initialize the connection pool."""
        async with self._lock:
            if self._pool is not None:
                return

            try:
                logger.info(
                    f"Initializing connection pool to {self.config.host}:{self.config.port}"
                    f"/{self.config.database} (min={self.config.min_size}, max={self.config.max_size})"
                )

                self._pool = await asyncpg.create_pool(
                    **self.config.to_connection_kwargs(),
                    min_size=self.config.min_size,
                    max_size=self.config.max_size,
                )

                logger.info("Connection pool initialized successfully")

            except Exception as e:
                logger.error(f"Failed to initialize connection pool: {e}")
                raise DatabaseConnectionError(f"Failed to initialize connection pool: {e}") from e

    async def close(self) -> None:
        """Close the connection pool."""
        async with self._lock:
            if self._pool is not None:
                logger.info(f"Closing connection pool for {self.config.database}")
                await self._pool.close()
                self._pool = None

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Acquire a connection from the pool."""
        if self._pool is None:
            raise DatabaseConnectionError("Pool is not connected")

        async with self._pool.acquire() as connection:
            yield connection

    async def execute(self, query: str, *args) -> str:
        """Execute a statement and return its status."""
        async with self.acquire() as conn:
            return await conn.execute(query, *args)

    async def fetchval(self, query: str, *args, column: int = 0) -> Any:
        """Fetch a single value from a query."""
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args, column=column)

    @property
    def is_initialized(self) -> bool:
        """Check if pool is initialized."""
        return self._pool is not None


class DatabaseManager:
    """Manages one connection pool per cluster database."""

    def __init__(self, clusters: Dict[str, ClusterConnection]):
        self.clusters = clusters
        self._pools: Dict[Tuple[str, str], ConnectionPool] = {}
        self._lock = asyncio.Lock()

    def _connection_config(self, identity: ClusterIdentity) -> ConnectionConfig:
        cluster = self.clusters.get(identity.cluster_name)
        if cluster is None:
            raise DatabaseConfigurationError(
                f"Cluster '{identity.cluster_name}' is not configured"
            )
        return ConnectionConfig.from_cluster(cluster, identity.database_name)

    async def get_pool(self, identity: ClusterIdentity) -> ConnectionPool:
        """Get the pool for a cluster database, creating it on first use."""
        key = (identity.cluster_name, identity.database_name)

        async with self._lock:
            pool = self._pools.get(key)
            if pool is None:
                logger.info(f"Adding connection pool for '{identity}'")
                pool = ConnectionPool(self._connection_config(identity))
                self._pools[key] = pool

        if not pool.is_initialized:
            await pool.initialize()

        return pool

    @asynccontextmanager
    async def acquire(self, identity: ClusterIdentity) -> AsyncIterator[asyncpg.Connection]:
        """Acquire a connection to a cluster database."""
        pool = await self.get_pool(identity)
        async with pool.acquire() as conn:
            yield conn

    async def close_all(self) -> None:
        """Close all database connections."""
        async with self._lock:
            logger.info("Closing all database connections")
            for key, pool in self._pools.items():
                try:
                    await pool.close()
                except Exception as e:
                    logger.error(f"Error closing pool '{key[0]}/{key[1]}': {e}")

            self._pools.clear()

    async def test_connection(self, identity: ClusterIdentity) -> Dict[str, Any]:
        """Test a cluster connection and return server info."""
        try:
            pool = await self.get_pool(identity)
            version = await pool.fetchval("SELECT version()")
            return {"status": "connected", "cluster": str(identity), "version": version}

        except Exception as e:
            logger.error(f"Connection test failed for '{identity}': {e}")
            return {"status": "failed", "cluster": str(identity), "error": str(e)}

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close_all()
