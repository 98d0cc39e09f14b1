"""
Lifecycle event and result types for the table custom resource.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..exceptions import MalformedEventError, UnrecognizedEventKindError
from ..schema.models import TableSchema


class EventKind(str, Enum):
    """Custom resource request types."""

    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"

    @classmethod
    def parse(cls, value: Any) -> "EventKind":
        try:
            return cls(value)
        except ValueError:
            raise UnrecognizedEventKindError(value) from None


class LifecycleAction(str, Enum):
    """What the dispatcher did with an event."""

    CREATED = "created"
    REPLACED = "replaced"
    ALTERED = "altered"
    DROPPED = "dropped"


@dataclass(frozen=True)
class LifecycleEvent:
    """A parsed lifecycle event for one table resource."""

    kind: EventKind
    request_id: str
    desired: TableSchema
    physical_resource_id: Optional[str] = None
    prior: Optional[TableSchema] = None

    @classmethod
    def from_request(cls, payload: Mapping[str, Any]) -> "LifecycleEvent":
        """
        Parse a custom resource request payload.

        Expects RequestType, RequestId and ResourceProperties; Update and
        Delete requests also carry PhysicalResourceId, and Update requests
        carry OldResourceProperties.

        Raises:
            UnrecognizedEventKindError: If RequestType is not Create, Update or Delete
            MalformedEventError: If required fields are missing
        """
        kind = EventKind.parse(payload.get("RequestType"))

        request_id = payload.get("RequestId")
        if not request_id:
            raise MalformedEventError("Event is missing RequestId")

        properties = payload.get("ResourceProperties")
        if properties is None:
            raise MalformedEventError("Event is missing ResourceProperties")

        desired = TableSchema.from_properties(properties, request_id)

        prior = None
        old_properties = payload.get("OldResourceProperties")
        if old_properties is not None:
            prior = TableSchema.from_properties(old_properties, request_id)

        return cls(
            kind=kind,
            request_id=request_id,
            desired=desired,
            physical_resource_id=payload.get("PhysicalResourceId"),
            prior=prior,
        )


@dataclass
class LifecycleResult:
    """Outcome of handling one lifecycle event."""

    action: LifecycleAction
    physical_resource_id: Optional[str] = None
    statements: List[str] = field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        """Response payload for the provider framework."""
        if self.physical_resource_id is None:
            return {}
        return {"PhysicalResourceId": self.physical_resource_id}
