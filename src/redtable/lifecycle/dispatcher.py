"""
Lifecycle dispatcher for redtable.

Routes Create, Update and Delete events for a table resource to the
statement builder and schema differ, runs the resulting statements through a
StatementExecutor and reports the table's physical name back to the caller.
"""

import logging
from typing import Awaitable, Callable, Dict

from .events import EventKind, LifecycleAction, LifecycleEvent, LifecycleResult
from ..database.executor import StatementExecutor, execute_batch
from ..exceptions import MalformedEventError, UnrecognizedEventKindError
from ..schema.differ import Replace, diff
from ..schema.models import TableSchema
from ..schema.statements import build_create, build_drop
from ..schema.validation import validate_schema


logger = logging.getLogger(__name__)


class TableLifecycleHandler:
    """
    Handles table resource lifecycle events.

    No state is kept between events; every call works on the schemas the
    event carries.
    """

    def __init__(
        self,
        executor: StatementExecutor,
        validate_schemas: bool = True,
        strict_validation: bool = False,
    ):
        self.executor = executor
        self.validate_schemas = validate_schemas
        self.strict_validation = strict_validation

        self._handlers: Dict[
            EventKind, Callable[[LifecycleEvent], Awaitable[LifecycleResult]]
        ] = {
            EventKind.CREATE: self._on_create,
            EventKind.UPDATE: self._on_update,
            EventKind.DELETE: self._on_delete,
        }

    async def handle(self, event: LifecycleEvent) -> LifecycleResult:
        """
        Handle a single lifecycle event.

        Returns:
            LifecycleResult carrying the physical name for Create and Update
            and no name for Delete

        Raises:
            UnrecognizedEventKindError: For an event kind outside Create/Update/Delete
            MalformedEventError: When the event lacks fields its kind requires
            MalformedSchemaError: When validation is enabled and the desired
                schema is inconsistent
            StatementExecutionError: When the cluster rejects a statement
        """
        handler = self._handlers.get(event.kind)
        if handler is None:
            raise UnrecognizedEventKindError(event.kind)

        logger.info(f"Handling {event.kind.value} event (request {event.request_id})")
        return await handler(event)

    async def _on_create(self, event: LifecycleEvent) -> LifecycleResult:
        self._validate(event.desired)
        return await self._create(event.desired, LifecycleAction.CREATED)

    async def _on_delete(self, event: LifecycleEvent) -> LifecycleResult:
        table_name = event.physical_resource_id
        if not table_name:
            raise MalformedEventError("Delete event is missing PhysicalResourceId")

        statement = build_drop(table_name)
        await self.executor.execute(statement, event.desired.cluster)

        logger.info(f"Dropped table {table_name}")
        return LifecycleResult(action=LifecycleAction.DROPPED, statements=[statement])

    async def _on_update(self, event: LifecycleEvent) -> LifecycleResult:
        table_name = event.physical_resource_id
        if not table_name:
            raise MalformedEventError("Update event is missing PhysicalResourceId")
        if event.prior is None:
            raise MalformedEventError("Update event is missing OldResourceProperties")

        self._validate(event.desired)

        result = diff(table_name, event.prior, event.desired)
        if isinstance(result, Replace):
            logger.info(f"Replacing table {table_name}: {result.reason.value}")
            return await self._create(event.desired, LifecycleAction.REPLACED)

        statements = list(result.statements)
        await execute_batch(self.executor, statements, event.desired.cluster)

        logger.info(f"Altered table {table_name} with {len(statements)} statement(s)")
        return LifecycleResult(
            action=LifecycleAction.ALTERED,
            physical_resource_id=table_name,
            statements=statements,
        )

    async def _create(
        self, schema: TableSchema, action: LifecycleAction
    ) -> LifecycleResult:
        statement = build_create(schema)
        await self.executor.execute(statement, schema.cluster)

        logger.info(f"Created table {schema.physical_name} on {schema.cluster}")
        return LifecycleResult(
            action=action,
            physical_resource_id=schema.physical_name,
            statements=[statement],
        )

    def _validate(self, schema: TableSchema) -> None:
        if self.validate_schemas:
            validate_schema(schema, strict=self.strict_validation)


async def handle_event(
    event: LifecycleEvent,
    executor: StatementExecutor,
    validate_schemas: bool = True,
) -> LifecycleResult:
    """Handle one event with a throwaway TableLifecycleHandler."""
    return await TableLifecycleHandler(executor, validate_schemas).handle(event)
