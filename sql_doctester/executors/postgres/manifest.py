"""PostgreSQL executor manifest."""

from sql_doctester.executors.manifest import ExecutorManifest
from sql_doctester.executors.postgres.config import PostgresConfig
from sql_doctester.executors.postgres.executor import PostgresExecutor

postgres_manifest = ExecutorManifest(
    config_cls=PostgresConfig,
    executor_factory=PostgresExecutor.from_config,
)
