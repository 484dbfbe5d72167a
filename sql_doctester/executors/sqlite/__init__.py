"""SQLite executor module."""

from sql_doctester.executors.sqlite.config import SQLiteConfig
from sql_doctester.executors.sqlite.executor import SQLiteExecutor
from sql_doctester.executors.sqlite.manifest import sqlite_manifest

__all__ = ["SQLiteConfig", "SQLiteExecutor", "sqlite_manifest"]
