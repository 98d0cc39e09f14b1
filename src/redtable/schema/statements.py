"""
SQL statement builders for Redshift table DDL.

All functions are side-effect free and return a single statement string.
Input validity (non-empty column lists and the like) is the caller's concern.
"""

from typing import Iterable, Optional

from .models import Column, DistStyle, SortStyle, TableSchema
from ..exceptions import UnsupportedAlterationError


def _join_names(columns: Iterable[Column]) -> str:
    return ",".join(column.name for column in columns)


def build_create(schema: TableSchema) -> str:
    """CREATE TABLE with optional DISTSTYLE, DISTKEY and SORTKEY clauses."""
    column_defs = ",".join(
        f"{column.name} {column.data_type}" for column in schema.columns
    )
    statement = f"CREATE TABLE {schema.physical_name} ({column_defs})"

    if schema.dist_style:
        statement += f" DISTSTYLE {schema.dist_style.value}"

    dist_key = schema.dist_key_column
    if dist_key:
        statement += f" DISTKEY({dist_key.name})"

    sort_keys = schema.sort_key_columns
    if sort_keys:
        statement += f" {schema.sort_style.value} SORTKEY({_join_names(sort_keys)})"

    return statement


def build_drop(table_name: str) -> str:
    return f"DROP TABLE {table_name}"


def build_alter_add_column(table_name: str, column: Column) -> str:
    return f"ALTER TABLE {table_name} ADD {column.name} {column.data_type}"


def build_alter_drop_column(table_name: str, column: Column) -> str:
    return f"ALTER TABLE {table_name} DROP COLUMN {column.name}"


def build_alter_dist_style(table_name: str, dist_style: DistStyle) -> str:
    return f"ALTER TABLE {table_name} ALTER DISTSTYLE {dist_style.value}"


def build_alter_dist_key(table_name: str, column: Column) -> str:
    return f"ALTER TABLE {table_name} ALTER DISTKEY {column.name}"


def build_alter_sort_key(
    table_name: str,
    sort_style: SortStyle,
    columns: Optional[Iterable[Column]] = None,
) -> str:
    """
    ALTER TABLE ... ALTER [COMPOUND] SORTKEY.

    Raises:
        UnsupportedAlterationError: For INTERLEAVED, which the engine only
            accepts at CREATE time
    """
    if sort_style is SortStyle.COMPOUND:
        return (
            f"ALTER TABLE {table_name} ALTER COMPOUND "
            f"SORTKEY({_join_names(columns or [])})"
        )
    if sort_style is SortStyle.AUTO:
        return f"ALTER TABLE {table_name} ALTER SORTKEY AUTO"

    raise UnsupportedAlterationError(
        f"Sort style {sort_style.value} cannot be applied with ALTER TABLE",
        {"table": table_name},
    )
