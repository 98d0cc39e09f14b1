"""
Pytest configuration and shared fixtures for redtable tests.
"""

import json
import os
import tempfile
from typing import Any, Callable, Dict, List, Optional

import pytest

from redtable.database.executor import RecordingExecutor
from redtable.schema.models import (
    ClusterIdentity,
    Column,
    DistStyle,
    SortStyle,
    TableSchema,
)


# ============================================================================
# Schema Fixtures
# ============================================================================

@pytest.fixture
def cluster() -> ClusterIdentity:
    """Default cluster identity."""
    return ClusterIdentity(cluster_name="analytics", database_name="dev")


@pytest.fixture
def make_schema(cluster) -> Callable[..., TableSchema]:
    """Factory building a TableSchema with sensible defaults."""

    def _make(
        columns: Optional[List[Column]] = None,
        name_prefix: str = "events",
        name_suffix: str = "",
        dist_style: Optional[DistStyle] = None,
        sort_style: SortStyle = SortStyle.AUTO,
        cluster_identity: Optional[ClusterIdentity] = None,
    ) -> TableSchema:
        if columns is None:
            columns = [Column(name="id", data_type="int")]
        return TableSchema(
            name_prefix=name_prefix,
            name_suffix=name_suffix,
            columns=columns,
            dist_style=dist_style,
            sort_style=sort_style,
            cluster=cluster_identity or cluster,
        )

    return _make


@pytest.fixture
def table_properties() -> Dict[str, Any]:
    """Resource properties as delivered by the provider framework."""
    return {
        "tableName": {"prefix": "events", "generateSuffix": "true"},
        "tableColumns": [
            {"name": "id", "dataType": "int", "distKey": "true", "sortKey": "true"},
            {"name": "created_at", "dataType": "timestamp", "sortKey": "true"},
            {"name": "payload", "dataType": "varchar(256)"},
        ],
        "distStyle": "KEY",
        "sortStyle": "COMPOUND",
        "clusterName": "analytics",
        "databaseName": "dev",
    }


@pytest.fixture
def make_request(table_properties) -> Callable[..., Dict[str, Any]]:
    """Factory building a custom resource request payload."""

    def _make(
        request_type: str = "Create",
        request_id: str = "a1b2c3d4-0000-1111-2222-333344445555",
        physical_resource_id: Optional[str] = None,
        properties: Optional[Dict[str, Any]] = None,
        old_properties: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        payload = {
            "RequestType": request_type,
            "RequestId": request_id,
            "ResourceProperties": properties or table_properties,
        }
        if physical_resource_id is not None:
            payload["PhysicalResourceId"] = physical_resource_id
        if old_properties is not None:
            payload["OldResourceProperties"] = old_properties
        return payload

    return _make


# ============================================================================
# Executor and File Fixtures
# ============================================================================

@pytest.fixture
def recording_executor() -> RecordingExecutor:
    """Dry-run executor capturing statements."""
    return RecordingExecutor()


@pytest.fixture
def sample_config_data() -> Dict[str, Any]:
    """Configuration data with one cluster."""
    return {
        "service_name": "redtable-test",
        "clusters": {
            "analytics": {
                "host": "analytics.example.us-east-1.redshift.amazonaws.com",
                "port": 5439,
                "user": "admin",
                "password": "secret",
            }
        },
        "validation": {"enabled": True, "strict": False},
        "logging": {"level": "INFO"},
    }


@pytest.fixture
def temp_json_file():
    """Write JSON documents to temporary files, removed after the test."""
    paths = []

    def _write(data: Dict[str, Any]) -> str:
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump(data, f)
            paths.append(f.name)
            return f.name

    yield _write

    for path in paths:
        os.unlink(path)
