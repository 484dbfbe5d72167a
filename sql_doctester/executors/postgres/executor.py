"""PostgreSQL executor implementation."""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import psycopg2
import psycopg2.extensions

from sql_doctester.executors.base import ConnectionExecutor
from sql_doctester.executors.postgres.config import PostgresConfig
from sql_doctester.models.result import QueryFailure, QueryOutcome, QuerySuccess
from sql_doctester.rendering import render_grid

log = logging.getLogger(__name__)


def connect(config: PostgresConfig) -> psycopg2.extensions.connection:
    """Open a connection described by the configuration."""
    return psycopg2.connect(
        host=config.host,
        port=config.port,
        dbname=config.dbname,
        user=config.user,
        password=config.password.get_secret_value() if config.password else None,
        application_name=config.application_name,
        connect_timeout=config.connect_timeout,
    )


@dataclass(frozen=True, kw_only=True)
class PostgresExecutor(ConnectionExecutor):
    """Executor running queries on a single PostgreSQL connection.

    Transactional queries are rolled back, the others committed. A
    multi-statement query renders the result of its last statement.
    """

    config: PostgresConfig
    connection: psycopg2.extensions.connection = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: PostgresConfig
    ) -> AsyncGenerator["PostgresExecutor", None]:
        """Create executor with managed connection lifecycle."""
        connection = await asyncio.to_thread(connect, config)
        try:
            log.info(
                "Connected to PostgreSQL at %s:%d/%s",
                config.host,
                config.port,
                config.dbname,
            )
            yield cls(config=config, connection=connection)
        finally:
            connection.close()

    def run_query(self, query: str, *, transactional: bool) -> QueryOutcome:
        """Run the query and render its result set."""
        try:
            with self.connection.cursor() as cursor:
                cursor.execute(query)
                if cursor.description is None:
                    grid = ""
                else:
                    columns = [column.name for column in cursor.description]
                    grid = render_grid(columns, cursor.fetchall())
        except psycopg2.Error as e:
            self.connection.rollback()
            return QueryFailure(reason=str(e).strip())

        if transactional:
            self.connection.rollback()
        else:
            self.connection.commit()
        return QuerySuccess(grid=grid)
