"""SQLite executor implementation."""

import logging
import re
import sqlite3
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from sql_doctester.executors.base import ConnectionExecutor
from sql_doctester.executors.sqlite.config import SQLiteConfig
from sql_doctester.models.result import QueryFailure, QueryOutcome, QuerySuccess
from sql_doctester.rendering import render_grid

log = logging.getLogger(__name__)

_STATEMENT_END = re.compile(";")


def split_statements(query: str) -> Sequence[str]:
    """Split a query into complete SQLite statements.

    Semicolons inside literals or comments do not end a statement. Trailing
    text without a terminating semicolon is kept as a final statement.
    """
    statements: list[str] = []
    start = 0
    for match in _STATEMENT_END.finditer(query):
        candidate = query[start : match.end()]
        if sqlite3.complete_statement(candidate):
            if candidate.strip(" \t\r\n;"):
                statements.append(candidate.strip())
            start = match.end()
    if tail := query[start:].strip():
        statements.append(tail)
    return statements


@dataclass(frozen=True, kw_only=True)
class SQLiteExecutor(ConnectionExecutor):
    """Executor running queries on a single SQLite connection.

    The connection is in autocommit mode. Transactional queries are wrapped in
    an explicit ``BEGIN`` and always rolled back.
    """

    config: SQLiteConfig
    connection: sqlite3.Connection = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: SQLiteConfig
    ) -> AsyncGenerator["SQLiteExecutor", None]:
        """Create executor with managed connection lifecycle."""
        connection = sqlite3.connect(
            config.database, isolation_level=None, check_same_thread=False
        )
        try:
            for statement in config.setup:
                connection.execute(statement)
            log.info("Opened SQLite database %s", config.database)
            yield cls(config=config, connection=connection)
        finally:
            connection.close()

    def run_query(self, query: str, *, transactional: bool) -> QueryOutcome:
        """Run every statement and render the last result set."""
        try:
            if transactional:
                self.connection.execute("BEGIN")
            try:
                grid = ""
                for statement in split_statements(query):
                    cursor = self.connection.execute(statement)
                    if cursor.description is not None:
                        columns = [column[0] for column in cursor.description]
                        grid = render_grid(columns, cursor.fetchall())
                return QuerySuccess(grid=grid)
            finally:
                if transactional and self.connection.in_transaction:
                    self.connection.execute("ROLLBACK")
        except sqlite3.Error as e:
            return QueryFailure(reason=str(e))
