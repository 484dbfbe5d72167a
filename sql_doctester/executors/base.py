"""Abstract base classes for SQL engine adapters."""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from sql_doctester.models.result import QueryFailure, QueryOutcome

log = logging.getLogger(__name__)

TIMEOUT_REASON = "timeout"


@dataclass(frozen=True, kw_only=True)
class QueryExecutor(ABC):
    """Abstract adapter around an external SQL engine.

    Implementations pass the query text through untouched and report engine
    errors as ``QueryFailure`` rather than raising them.
    """

    @abstractmethod
    async def execute(self, query: str, *, transactional: bool = True) -> QueryOutcome:
        """Run a query and render its result.

        Args:
            query: Query text, possibly holding several statements
            transactional: Roll back every change once the query has run

        Returns:
            The rendered result grid, or the engine's failure reason

        """

    async def execute_with_timeout(
        self,
        query: str,
        *,
        transactional: bool = True,
        timeout: float | None = None,
    ) -> QueryOutcome:
        """Run a query, giving up once the timeout elapses.

        Args:
            query: Query text passed to ``execute``
            transactional: Passed to ``execute``
            timeout: Seconds to wait (None waits forever)

        Returns:
            The query outcome, or a failure with reason ``"timeout"``

        """
        try:
            async with asyncio.timeout(timeout):
                return await self.execute(query, transactional=transactional)
        except TimeoutError:
            log.warning("Query did not complete within %s seconds", timeout)
            return QueryFailure(reason=TIMEOUT_REASON)


@dataclass(frozen=True, kw_only=True)
class ConnectionExecutor(QueryExecutor):
    """Executor backed by one blocking DB-API connection.

    Queries run in a worker thread, one at a time. The lock is taken inside
    the worker so a query abandoned by a timeout still blocks the next one
    until the engine is done with it.
    """

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @abstractmethod
    def run_query(self, query: str, *, transactional: bool) -> QueryOutcome:
        """Run a query on the connection from a worker thread."""

    async def execute(self, query: str, *, transactional: bool = True) -> QueryOutcome:
        """Run the query in a worker thread while holding the connection lock."""
        return await asyncio.to_thread(self._locked_run, query, transactional)

    def _locked_run(self, query: str, transactional: bool) -> QueryOutcome:
        with self._lock:
            return self.run_query(query, transactional=transactional)
