"""DuckDB executor manifest."""

from sql_doctester.executors.duckdb.config import DuckDBConfig
from sql_doctester.executors.duckdb.executor import DuckDBExecutor
from sql_doctester.executors.manifest import ExecutorManifest

duckdb_manifest = ExecutorManifest(
    config_cls=DuckDBConfig,
    executor_factory=DuckDBExecutor.from_config,
)
