"""SQLite executor manifest."""

from sql_doctester.executors.manifest import ExecutorManifest
from sql_doctester.executors.sqlite.config import SQLiteConfig
from sql_doctester.executors.sqlite.executor import SQLiteExecutor

sqlite_manifest = ExecutorManifest(
    config_cls=SQLiteConfig,
    executor_factory=SQLiteExecutor.from_config,
)
