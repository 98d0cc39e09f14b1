"""
Configuration system for redtable using Pydantic.
"""

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class ClusterConnection(BaseModel):
    """Connection details for one Redshift cluster."""

    host: str = Field(..., description="Cluster endpoint host")
    port: int = Field(5439, description="Cluster port")
    user: str = Field(..., description="Database user")
    password: str = Field(..., description="Database password")
    default_database: str = Field("dev", description="Database used for connection tests")
    ssl_mode: Optional[str] = Field("require", description="SSL mode")
    min_size: int = Field(1, description="Minimum connections per pool")
    max_size: int = Field(5, description="Maximum connections per pool")
    command_timeout: float = Field(300.0, description="Statement timeout in seconds")

    @field_validator("max_size")
    @classmethod
    def validate_pool_size(cls, v, info):
        min_size = info.data.get("min_size", 1)
        if v < min_size:
            raise ValueError(f"max_size ({v}) must be >= min_size ({min_size})")
        return v


class ValidationConfig(BaseModel):
    """Declared schema validation settings."""

    enabled: bool = Field(True, description="Validate desired schemas before acting")
    strict: bool = Field(
        False, description="Also require dist/sort styles to match key columns"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Log level"
    )
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    file: Optional[str] = Field(None, description="Log file path")
    max_size: int = Field(10485760, description="Max log file size in bytes")  # 10MB
    backup_count: int = Field(5, description="Number of backup log files")


class RedtableConfig(BaseSettings):
    """Main redtable configuration."""

    service_name: str = Field("redtable", description="Service name")
    debug: bool = Field(False, description="Enable debug mode")
    dry_run: bool = Field(False, description="Record statements instead of executing them")

    clusters: Dict[str, ClusterConnection] = Field(
        default_factory=dict, description="Cluster connections keyed by cluster name"
    )
    validation: ValidationConfig = Field(
        default_factory=ValidationConfig, description="Schema validation settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="REDTABLE_",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "RedtableConfig":
        """Load configuration from a YAML file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            # Expand environment variables in the data
            data = cls._expand_env_vars(data)

            return cls(**data)
        except FileNotFoundError:
            raise ConfigurationError(f"Configuration file not found: {path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    @classmethod
    def _expand_env_vars(cls, data: Any) -> Any:
        """Recursively expand environment variables in configuration data."""
        if isinstance(data, dict):
            return {k: cls._expand_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [cls._expand_env_vars(item) for item in data]
        elif isinstance(data, str):
            return os.path.expandvars(data)
        else:
            return data

    def get_cluster(self, name: str) -> ClusterConnection:
        """Get cluster connection by name."""
        if name not in self.clusters:
            raise ConfigurationError(f"Cluster configuration '{name}' not found")
        return self.clusters[name]

    def validate_config(self) -> None:
        """Validate the entire configuration for consistency."""
        if not self.clusters and not self.dry_run:
            raise ConfigurationError(
                "No clusters configured; add one under 'clusters' or enable dry_run"
            )

        for name, cluster in self.clusters.items():
            if not cluster.host.strip():
                raise ConfigurationError(f"Cluster '{name}' has an empty host")

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(mode="json", exclude_none=True),
                f,
                default_flow_style=False,
                indent=2,
                sort_keys=False,
            )
