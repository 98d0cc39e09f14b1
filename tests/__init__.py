"""
Test suite for redtable.

This package contains tests for all redtable components:
- Unit tests for schema models, validation, statements and the differ
- Unit tests for executors, the lifecycle dispatcher and the CLI
"""
