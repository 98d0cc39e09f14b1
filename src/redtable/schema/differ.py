"""
Schema differ for redtable.

Compares the last-applied schema of a table with its newly declared schema
and decides whether the table can be migrated with ALTER TABLE statements or
has to be replaced by a freshly created table.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Sequence, Tuple, Union

from .models import Column, SortStyle, TableSchema
from .statements import (
    build_alter_add_column,
    build_alter_dist_key,
    build_alter_dist_style,
    build_alter_drop_column,
    build_alter_sort_key,
)


logger = logging.getLogger(__name__)


class ReplaceReason(str, Enum):
    """Why an update cannot be applied in place."""

    CLUSTER_CHANGED = "cluster_changed"
    PREFIX_CHANGED = "prefix_changed"
    DIST_STYLE_TOGGLED = "dist_style_toggled"
    DIST_KEY_TOGGLED = "dist_key_toggled"
    INTERLEAVED_SORT_KEY = "interleaved_sort_key"


@dataclass(frozen=True)
class Replace:
    """The table must be dropped and recreated under a new name."""

    reason: ReplaceReason


@dataclass(frozen=True)
class AlterBatch:
    """Independent ALTER TABLE statements migrating the table in place."""

    statements: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.statements


DiffResult = Union[Replace, AlterBatch]


def sort_keys_equal(old: Sequence[Column], new: Sequence[Column]) -> bool:
    """Positional comparison of sort key column names."""
    if len(old) != len(new):
        return False
    return all(a.name == b.name for a, b in zip(old, new))


def _sort_key_changed(old: TableSchema, new: TableSchema) -> bool:
    return old.sort_style != new.sort_style or not sort_keys_equal(
        old.sort_key_columns, new.sort_key_columns
    )


def _cluster_changed(old: TableSchema, new: TableSchema) -> bool:
    return (
        old.cluster.cluster_name != new.cluster.cluster_name
        or old.cluster.database_name != new.cluster.database_name
    )


def _prefix_changed(old: TableSchema, new: TableSchema) -> bool:
    return old.name_prefix != new.name_prefix


def _dist_style_toggled(old: TableSchema, new: TableSchema) -> bool:
    return (old.dist_style is None) != (new.dist_style is None)


def _dist_key_toggled(old: TableSchema, new: TableSchema) -> bool:
    return (old.dist_key_column is None) != (new.dist_key_column is None)


def _interleaved_sort_key(old: TableSchema, new: TableSchema) -> bool:
    return new.sort_style is SortStyle.INTERLEAVED and _sort_key_changed(old, new)


# Evaluated in order; the first match decides.
REPLACEMENT_CHECKS: Tuple[
    Tuple[ReplaceReason, Callable[[TableSchema, TableSchema], bool]], ...
] = (
    (ReplaceReason.CLUSTER_CHANGED, _cluster_changed),
    (ReplaceReason.PREFIX_CHANGED, _prefix_changed),
    (ReplaceReason.DIST_STYLE_TOGGLED, _dist_style_toggled),
    (ReplaceReason.DIST_KEY_TOGGLED, _dist_key_toggled),
    (ReplaceReason.INTERLEAVED_SORT_KEY, _interleaved_sort_key),
)


def _column_deletions(name: str, old: TableSchema, new: TableSchema) -> List[str]:
    new_names = set(new.column_names())
    return [
        build_alter_drop_column(name, column)
        for column in old.columns
        if column.name not in new_names
    ]


def _column_additions(name: str, old: TableSchema, new: TableSchema) -> List[str]:
    # A changed data type counts as an addition; there is no modify path.
    old_pairs = {(column.name, column.data_type) for column in old.columns}
    return [
        build_alter_add_column(name, column)
        for column in new.columns
        if (column.name, column.data_type) not in old_pairs
    ]


def _dist_style_change(name: str, old: TableSchema, new: TableSchema) -> List[str]:
    if old.dist_style and new.dist_style and old.dist_style != new.dist_style:
        return [build_alter_dist_style(name, new.dist_style)]
    return []


def _dist_key_change(name: str, old: TableSchema, new: TableSchema) -> List[str]:
    old_key = old.dist_key_column
    new_key = new.dist_key_column
    if old_key and new_key and old_key.name != new_key.name:
        return [build_alter_dist_key(name, new_key)]
    return []


def _sort_key_change(name: str, old: TableSchema, new: TableSchema) -> List[str]:
    if not _sort_key_changed(old, new):
        return []
    if new.sort_style is SortStyle.INTERLEAVED:
        return []
    return [build_alter_sort_key(name, new.sort_style, new.sort_key_columns)]


ALTERATIONS: Tuple[Callable[[str, TableSchema, TableSchema], List[str]], ...] = (
    _column_deletions,
    _column_additions,
    _dist_style_change,
    _dist_key_change,
    _sort_key_change,
)


def diff(name: str, old: TableSchema, new: TableSchema) -> DiffResult:
    """
    Decide how to migrate table `name` from `old` to `new`.

    Args:
        name: Physical name of the existing table
        old: Last-applied declared schema
        new: Newly declared schema

    Returns:
        Replace if any replacement check triggers, otherwise an AlterBatch
        (possibly empty) of statements that can run in any order
    """
    for reason, check in REPLACEMENT_CHECKS:
        if check(old, new):
            logger.debug(f"Table {name} requires replacement: {reason.value}")
            return Replace(reason)

    statements: List[str] = []
    for alteration in ALTERATIONS:
        statements.extend(alteration(name, old, new))

    logger.debug(f"Table {name} can be altered with {len(statements)} statement(s)")
    return AlterBatch(tuple(statements))
