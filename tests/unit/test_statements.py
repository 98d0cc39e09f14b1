"""
Unit tests for SQL statement builders.
"""

import random
import re

import pytest

from redtable.exceptions import MalformedSchemaError, UnsupportedAlterationError
from redtable.schema.models import Column, DistStyle, SortStyle
from redtable.schema.statements import (
    build_alter_add_column,
    build_alter_dist_key,
    build_alter_dist_style,
    build_alter_drop_column,
    build_alter_sort_key,
    build_create,
    build_drop,
)


def _split_top_level(text):
    """Split on commas outside parentheses."""
    parts, depth, current = [], 0, ""
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    parts.append(current)
    return parts


def _parse_create_columns(statement):
    """Recover (name, type) pairs from a CREATE TABLE column list."""
    start = statement.index("(") + 1
    depth = 1
    end = start
    while depth:
        if statement[end] == "(":
            depth += 1
        elif statement[end] == ")":
            depth -= 1
        end += 1
    column_list = statement[start:end - 1]
    return [tuple(part.split(" ", 1)) for part in _split_top_level(column_list)]


class TestBuildCreate:
    """Test CREATE TABLE rendering."""

    def test_minimal_create(self, make_schema):
        schema = make_schema(
            columns=[
                Column(name="id", data_type="int"),
                Column(name="email", data_type="varchar(64)"),
            ]
        )

        assert build_create(schema) == "CREATE TABLE events (id int,email varchar(64))"

    def test_create_uses_physical_name(self, make_schema):
        schema = make_schema(name_prefix="events", name_suffix="a1b2c3d4")
        assert build_create(schema).startswith("CREATE TABLE eventsa1b2c3d4 (")

    def test_create_with_dist_style(self, make_schema):
        schema = make_schema(dist_style=DistStyle.EVEN)
        assert build_create(schema) == "CREATE TABLE events (id int) DISTSTYLE EVEN"

    def test_create_with_all_clauses(self, make_schema):
        schema = make_schema(
            columns=[
                Column(name="id", data_type="int", dist_key=True, sort_key_position=1),
                Column(name="ts", data_type="timestamp", sort_key_position=0),
                Column(name="body", data_type="varchar(max)"),
            ],
            dist_style=DistStyle.KEY,
            sort_style=SortStyle.INTERLEAVED,
        )

        assert build_create(schema) == (
            "CREATE TABLE events (id int,ts timestamp,body varchar(max))"
            " DISTSTYLE KEY DISTKEY(id) INTERLEAVED SORTKEY(ts,id)"
        )

    def test_dist_key_without_dist_style(self, make_schema):
        schema = make_schema(columns=[Column(name="id", data_type="int", dist_key=True)])
        assert build_create(schema) == "CREATE TABLE events (id int) DISTKEY(id)"

    def test_multiple_dist_keys_rejected(self, make_schema):
        """Two flagged columns never render a DISTKEY clause for just one of them."""
        schema = make_schema(
            columns=[
                Column(name="a", data_type="int", dist_key=True),
                Column(name="b", data_type="int", dist_key=True),
            ],
            dist_style=DistStyle.KEY,
        )

        with pytest.raises(MalformedSchemaError, match="only one column"):
            build_create(schema)

    def test_no_sortkey_clause_without_sort_columns(self, make_schema):
        schema = make_schema(sort_style=SortStyle.COMPOUND)
        assert "SORTKEY" not in build_create(schema)

    @pytest.mark.parametrize("seed", range(20))
    def test_column_list_is_reconstructable(self, make_schema, seed):
        """Parsing the column list recovers names and types in order."""
        rng = random.Random(seed)
        types = ["int", "bigint", "varchar(256)", "decimal(12,2)", "timestamp", "boolean"]
        columns = [
            Column(name=f"col_{i}", data_type=rng.choice(types))
            for i in range(rng.randint(1, 12))
        ]
        schema = make_schema(columns=columns, dist_style=DistStyle.ALL)

        parsed = _parse_create_columns(build_create(schema))

        assert parsed == [(c.name, c.data_type) for c in columns]


class TestBuildDrop:
    def test_drop(self):
        assert build_drop("eventsa1b2c3d4") == "DROP TABLE eventsa1b2c3d4"


class TestBuildAlter:
    """Test ALTER TABLE rendering."""

    def test_add_column(self):
        column = Column(name="email", data_type="varchar")
        assert build_alter_add_column("t", column) == "ALTER TABLE t ADD email varchar"

    def test_drop_column(self):
        column = Column(name="email", data_type="varchar")
        assert build_alter_drop_column("t", column) == "ALTER TABLE t DROP COLUMN email"

    @pytest.mark.parametrize("style", list(DistStyle))
    def test_dist_style(self, style):
        assert build_alter_dist_style("t", style) == f"ALTER TABLE t ALTER DISTSTYLE {style.value}"

    def test_dist_key(self):
        column = Column(name="account_id", data_type="int", dist_key=True)
        assert build_alter_dist_key("t", column) == "ALTER TABLE t ALTER DISTKEY account_id"

    def test_compound_sort_key(self):
        columns = [Column(name="a", data_type="int"), Column(name="b", data_type="int")]
        assert (
            build_alter_sort_key("t", SortStyle.COMPOUND, columns)
            == "ALTER TABLE t ALTER COMPOUND SORTKEY(a,b)"
        )

    def test_auto_sort_key_ignores_columns(self):
        columns = [Column(name="a", data_type="int")]
        assert build_alter_sort_key("t", SortStyle.AUTO, columns) == "ALTER TABLE t ALTER SORTKEY AUTO"

    def test_interleaved_sort_key_unsupported(self):
        with pytest.raises(UnsupportedAlterationError):
            build_alter_sort_key("t", SortStyle.INTERLEAVED, [Column(name="a", data_type="int")])

    def test_alter_statements_target_table(self):
        column = Column(name="c", data_type="int")
        statements = [
            build_alter_add_column("orders", column),
            build_alter_drop_column("orders", column),
            build_alter_dist_style("orders", DistStyle.EVEN),
            build_alter_dist_key("orders", column),
            build_alter_sort_key("orders", SortStyle.AUTO),
        ]

        assert all(re.match(r"^ALTER TABLE orders ", s) for s in statements)
