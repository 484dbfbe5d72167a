"""DuckDB executor module."""

from sql_doctester.executors.duckdb.config import DuckDBConfig
from sql_doctester.executors.duckdb.executor import DuckDBExecutor
from sql_doctester.executors.duckdb.manifest import duckdb_manifest

__all__ = ["DuckDBConfig", "DuckDBExecutor", "duckdb_manifest"]
