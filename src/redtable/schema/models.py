"""
Declared table schema models for redtable.

A TableSchema is built fresh for every lifecycle event from the resource
properties the provider receives and is never mutated afterwards.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import MalformedEventError, MalformedSchemaError


SUFFIX_LENGTH = 8


class DistStyle(str, Enum):
    """Row distribution strategy across cluster nodes."""

    AUTO = "AUTO"
    EVEN = "EVEN"
    KEY = "KEY"
    ALL = "ALL"


class SortStyle(str, Enum):
    """On-disk sort key strategy."""

    AUTO = "AUTO"
    COMPOUND = "COMPOUND"
    INTERLEAVED = "INTERLEAVED"


class Column(BaseModel):
    """A single declared column."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Column name")
    data_type: str = Field(..., alias="dataType", description="Declared data type")
    dist_key: bool = Field(False, alias="distKey", description="Distribution key flag")
    sort_key_position: Optional[int] = Field(
        None, alias="sortKeyPosition", description="Ordinal within the sort key"
    )

    @property
    def is_sort_key(self) -> bool:
        return self.sort_key_position is not None


class ClusterIdentity(BaseModel):
    """The cluster and database a table lives in."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cluster_name: str = Field(..., alias="clusterName", description="Cluster name")
    database_name: str = Field(..., alias="databaseName", description="Database name")

    def __str__(self) -> str:
        return f"{self.cluster_name}/{self.database_name}"


class TableSchema(BaseModel):
    """Declared state of one table."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name_prefix: str = Field(..., description="Declared table name prefix")
    name_suffix: str = Field("", description="Generated suffix, empty when disabled")
    columns: Tuple[Column, ...] = Field(..., description="Ordered column definitions")
    dist_style: Optional[DistStyle] = Field(None, description="Distribution style")
    sort_style: SortStyle = Field(SortStyle.AUTO, description="Sort key style")
    cluster: ClusterIdentity = Field(..., description="Owning cluster and database")

    @property
    def physical_name(self) -> str:
        """Table name as created in the database."""
        return self.name_prefix + self.name_suffix

    @property
    def dist_key_column(self) -> Optional[Column]:
        """
        The distribution key column, or None when no column is flagged.

        Raises:
            MalformedSchemaError: If more than one column is flagged
        """
        flagged = [column for column in self.columns if column.dist_key]
        if len(flagged) > 1:
            raise MalformedSchemaError(
                self.physical_name,
                f"only one column can be a distribution key, got {[c.name for c in flagged]}",
            )
        return flagged[0] if flagged else None

    @property
    def sort_key_columns(self) -> List[Column]:
        """Sort key columns ordered by position; ties keep declaration order."""
        keyed = [column for column in self.columns if column.is_sort_key]
        return sorted(keyed, key=lambda column: column.sort_key_position)

    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    @classmethod
    def from_properties(
        cls, properties: Mapping[str, Any], request_id: str = ""
    ) -> "TableSchema":
        """
        Build a schema from custom resource properties.

        Args:
            properties: Resource properties with tableName, tableColumns,
                distStyle, sortStyle, clusterName and databaseName keys
            request_id: Request id of the event; its first 8 characters form
                the name suffix when tableName.generateSuffix is set

        Raises:
            MalformedEventError: If a required property is missing
        """
        try:
            table_name = properties["tableName"]
            prefix = table_name["prefix"]
            columns = _parse_columns(properties["tableColumns"])
            cluster_name = properties["clusterName"]
            database_name = properties["databaseName"]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedEventError(
                f"Resource properties are missing or have an invalid field: {e}"
            ) from e

        suffix = ""
        if _is_true(table_name.get("generateSuffix")):
            suffix = request_id[:SUFFIX_LENGTH]

        sort_style = properties.get("sortStyle")
        if not sort_style:
            has_sort_key = any(column.is_sort_key for column in columns)
            sort_style = SortStyle.COMPOUND if has_sort_key else SortStyle.AUTO

        try:
            return cls(
                name_prefix=prefix,
                name_suffix=suffix,
                columns=columns,
                dist_style=properties.get("distStyle") or None,
                sort_style=sort_style,
                cluster=ClusterIdentity(
                    cluster_name=cluster_name, database_name=database_name
                ),
            )
        except PydanticValidationError as e:
            raise MalformedEventError(f"Invalid resource properties: {e}") from e


def _is_true(value: Any) -> bool:
    # Template engines deliver booleans as strings.
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _parse_columns(raw_columns: List[Dict[str, Any]]) -> Tuple[Column, ...]:
    """Parse column properties, assigning positions to bare sortKey flags."""
    explicit = [
        int(raw["sortKeyPosition"])
        for raw in raw_columns
        if raw.get("sortKeyPosition") is not None
    ]
    next_position = max(explicit, default=-1) + 1

    columns = []
    for raw in raw_columns:
        position = raw.get("sortKeyPosition")
        if position is None and _is_true(raw.get("sortKey")):
            position = next_position
            next_position += 1

        columns.append(
            Column(
                name=raw["name"],
                data_type=raw["dataType"],
                dist_key=_is_true(raw.get("distKey", False)),
                sort_key_position=position,
            )
        )
    return tuple(columns)
