"""PostgreSQL executor module."""

from sql_doctester.executors.postgres.config import PostgresConfig
from sql_doctester.executors.postgres.executor import PostgresExecutor
from sql_doctester.executors.postgres.manifest import postgres_manifest

__all__ = ["PostgresConfig", "PostgresExecutor", "postgres_manifest"]
