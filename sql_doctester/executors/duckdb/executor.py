"""DuckDB executor implementation."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import duckdb

from sql_doctester.executors.base import ConnectionExecutor
from sql_doctester.executors.duckdb.config import DuckDBConfig
from sql_doctester.models.result import QueryFailure, QueryOutcome, QuerySuccess
from sql_doctester.rendering import render_grid

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class DuckDBExecutor(ConnectionExecutor):
    """Executor running queries on a single DuckDB connection.

    DuckDB runs every statement of a multi-statement query and returns the
    result of the last one.
    """

    config: DuckDBConfig
    connection: duckdb.DuckDBPyConnection = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: DuckDBConfig
    ) -> AsyncGenerator["DuckDBExecutor", None]:
        """Create executor with managed connection lifecycle."""
        connection = duckdb.connect(config.database, read_only=config.read_only)
        try:
            for statement in config.setup:
                connection.execute(statement)
            log.info("Opened DuckDB database %s", config.database)
            yield cls(config=config, connection=connection)
        finally:
            connection.close()

    def run_query(self, query: str, *, transactional: bool) -> QueryOutcome:
        """Run the query and render its result set."""
        try:
            if transactional:
                self.connection.begin()
            try:
                self.connection.execute(query)
                description = self.connection.description
                if description is None:
                    return QuerySuccess(grid="")
                columns = [column[0] for column in description]
                return QuerySuccess(grid=render_grid(columns, self.connection.fetchall()))
            finally:
                if transactional:
                    self.connection.rollback()
        except duckdb.Error as e:
            return QueryFailure(reason=str(e))
