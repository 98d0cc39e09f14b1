"""
Statement executors for redtable.

The lifecycle dispatcher hands every rendered statement to a
StatementExecutor. Executors run each statement independently; batches are
fanned out concurrently and awaited as a whole.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Protocol, Sequence, Tuple

from .connection import DatabaseManager
from ..exceptions import StatementExecutionError
from ..schema.models import ClusterIdentity


logger = logging.getLogger(__name__)


class StatementExecutor(Protocol):
    """Runs one SQL statement against a cluster database."""

    async def execute(self, statement: str, cluster: ClusterIdentity) -> None:
        ...


class PoolStatementExecutor:
    """Executes statements through asyncpg pools managed per cluster database."""

    def __init__(self, manager: DatabaseManager):
        self.manager = manager

    async def execute(self, statement: str, cluster: ClusterIdentity) -> None:
        start_time = time.time()
        pool = await self.manager.get_pool(cluster)

        try:
            status = await pool.execute(statement)
        except Exception as e:
            logger.error(f"Statement failed on {cluster}: {statement} ({e})")
            raise StatementExecutionError(statement, e, str(cluster)) from e

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(f"Executed on {cluster} in {elapsed_ms:.1f}ms: {statement} -> {status}")


@dataclass
class RecordingExecutor:
    """
    Dry-run executor that records statements instead of running them.

    Statements containing any of `fail_on` raise StatementExecutionError,
    which lets callers rehearse failure handling without a cluster.
    """

    fail_on: Sequence[str] = ()
    executed: List[Tuple[ClusterIdentity, str]] = field(default_factory=list)

    async def execute(self, statement: str, cluster: ClusterIdentity) -> None:
        # Yield so concurrently dispatched statements interleave.
        await asyncio.sleep(0)

        for marker in self.fail_on:
            if marker in statement:
                raise StatementExecutionError(
                    statement, RuntimeError(f"simulated failure on '{marker}'"), str(cluster)
                )

        logger.info(f"DRY RUN: Would execute on {cluster}: {statement}")
        self.executed.append((cluster, statement))

    @property
    def statements(self) -> List[str]:
        return [statement for _, statement in self.executed]


async def execute_batch(
    executor: StatementExecutor,
    statements: Sequence[str],
    cluster: ClusterIdentity,
) -> None:
    """
    Run statements concurrently and wait for all of them.

    Every statement runs to completion even when another one fails. The
    failure of the earliest statement in the batch is then raised; statements
    that succeeded stay applied.
    """
    if not statements:
        return

    logger.info(f"Dispatching {len(statements)} statement(s) to {cluster}")
    results = await asyncio.gather(
        *(executor.execute(statement, cluster) for statement in statements),
        return_exceptions=True,
    )

    failures = [result for result in results if isinstance(result, BaseException)]
    if failures:
        logger.error(
            f"{len(failures)} of {len(statements)} statement(s) failed on {cluster}"
        )
        raise failures[0]
