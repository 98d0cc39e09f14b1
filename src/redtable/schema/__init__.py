"""
Schema package for redtable.

This package provides:
- Declared table schema models
- Defensive schema validation
- CREATE / DROP / ALTER statement builders
- The differ deciding between ALTER and replacement
"""

from .models import Column, ClusterIdentity, TableSchema, DistStyle, SortStyle
from .validation import validate_schema
from .statements import (
    build_create,
    build_drop,
    build_alter_add_column,
    build_alter_drop_column,
    build_alter_dist_style,
    build_alter_dist_key,
    build_alter_sort_key,
)
from .differ import diff, AlterBatch, Replace, ReplaceReason, DiffResult

__all__ = [
    "Column",
    "ClusterIdentity",
    "TableSchema",
    "DistStyle",
    "SortStyle",
    "validate_schema",
    "build_create",
    "build_drop",
    "build_alter_add_column",
    "build_alter_drop_column",
    "build_alter_dist_style",
    "build_alter_dist_key",
    "build_alter_sort_key",
    "diff",
    "AlterBatch",
    "Replace",
    "ReplaceReason",
    "DiffResult",
]
