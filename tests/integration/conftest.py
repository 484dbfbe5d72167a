"""Fixtures for integration tests against embedded engines."""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Protocol

import pytest

from sql_doctester.executors.duckdb import DuckDBConfig, DuckDBExecutor
from sql_doctester.executors.sqlite import SQLiteConfig, SQLiteExecutor


class WriteSource(Protocol):
    """Protocol for host file creation function."""

    def __call__(self, name: str, text: str) -> Path:
        """Write a host file and return its path."""


@pytest.fixture
async def sqlite_executor() -> AsyncGenerator[SQLiteExecutor, None]:
    """Open an in-memory SQLite executor."""
    async with SQLiteExecutor.from_config(SQLiteConfig()) as executor:
        yield executor


@pytest.fixture
async def duckdb_executor() -> AsyncGenerator[DuckDBExecutor, None]:
    """Open an in-memory DuckDB executor."""
    async with DuckDBExecutor.from_config(DuckDBConfig()) as executor:
        yield executor


@pytest.fixture
def write_source(tmp_path: Path) -> WriteSource:
    """Return a function to write host files into a project directory."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path

    return _write
