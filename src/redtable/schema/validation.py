"""
Defensive consistency checks for declared table schemas.

The differ and statement builder assume well-formed input; these checks let
callers reject a malformed schema before any statement reaches the cluster.
"""

from collections import Counter

from .models import DistStyle, SortStyle, TableSchema
from ..exceptions import MalformedSchemaError


def validate_schema(schema: TableSchema, strict: bool = False) -> None:
    """
    Validate a table schema.

    Structural checks always run: at least one column, unique column names,
    at most one distribution key and unique sort key positions. Strict mode
    additionally requires the distribution and sort styles to agree with the
    key columns.

    Raises:
        MalformedSchemaError: On the first inconsistency found
    """
    table = schema.physical_name

    if not schema.name_prefix:
        raise MalformedSchemaError(table, "table name prefix is empty")

    if not schema.columns:
        raise MalformedSchemaError(table, "at least one column is required")

    duplicates = _duplicates(schema.column_names())
    if duplicates:
        raise MalformedSchemaError(
            table, f"duplicate column names: {', '.join(duplicates)}"
        )

    dist_keys = [column.name for column in schema.columns if column.dist_key]
    if len(dist_keys) > 1:
        raise MalformedSchemaError(
            table, f"only one column can be a distribution key, got {dist_keys}"
        )

    positions = _duplicates(
        [str(column.sort_key_position) for column in schema.sort_key_columns]
    )
    if positions:
        raise MalformedSchemaError(
            table, f"duplicate sort key positions: {', '.join(positions)}"
        )

    if strict:
        _validate_styles(schema)


def _validate_styles(schema: TableSchema) -> None:
    table = schema.physical_name
    dist_key = schema.dist_key_column

    if dist_key and schema.dist_style is not DistStyle.KEY:
        raise MalformedSchemaError(
            table,
            f"distribution key '{dist_key.name}' requires distribution style KEY",
        )
    if not dist_key and schema.dist_style is DistStyle.KEY:
        raise MalformedSchemaError(
            table, "distribution style KEY requires a distribution key column"
        )

    has_sort_key = bool(schema.sort_key_columns)
    if not has_sort_key and schema.sort_style is not SortStyle.AUTO:
        raise MalformedSchemaError(
            table,
            f"sort style {schema.sort_style.value} requires sort key columns",
        )
    if has_sort_key and schema.sort_style is SortStyle.AUTO:
        raise MalformedSchemaError(
            table, "sort style AUTO cannot be combined with sort key columns"
        )


def _duplicates(values):
    return sorted(value for value, count in Counter(values).items() if count > 1)
