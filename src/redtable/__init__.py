"""
redtable: Declarative Redshift table schema reconciliation.

redtable keeps a Redshift table in sync with its declared schema across the
Create, Update and Delete events of an infrastructure-as-code custom
resource, altering the table in place where possible and replacing it where
ALTER TABLE cannot express the change.
"""

__version__ = "0.1.0"

from .config import RedtableConfig
from .exceptions import (
    RedtableError,
    ConfigurationError,
    DatabaseError,
    MalformedSchemaError,
    StatementExecutionError,
    UnrecognizedEventKindError,
)

__all__ = [
    "__version__",
    "RedtableConfig",
    "RedtableError",
    "ConfigurationError",
    "DatabaseError",
    "MalformedSchemaError",
    "StatementExecutionError",
    "UnrecognizedEventKindError",
]
