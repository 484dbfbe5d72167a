"""Tests for QueryExecutor base classes."""

import asyncio
import threading
from dataclasses import dataclass, field

from sql_doctester.executors.base import ConnectionExecutor, QueryExecutor
from sql_doctester.models.result import QueryFailure, QueryOutcome, QuerySuccess


@dataclass(frozen=True, kw_only=True)
class DelayedExecutor(QueryExecutor):
    """Test executor answering after a fixed delay."""

    delay: float = 0.0

    async def execute(self, query: str, *, transactional: bool = True) -> QueryOutcome:
        """Echo the query after the delay."""
        await asyncio.sleep(self.delay)
        return QuerySuccess(grid=f"{query} ({transactional})")


@dataclass(frozen=True, kw_only=True)
class RecordingExecutor(ConnectionExecutor):
    """Test executor recording the threads its queries ran on."""

    threads: list[str] = field(default_factory=list)

    def run_query(self, query: str, *, transactional: bool) -> QueryOutcome:
        """Record the current thread and echo the query."""
        self.threads.append(threading.current_thread().name)
        return QuerySuccess(grid=query)


class TestExecuteWithTimeout:
    """Tests for execute_with_timeout method."""

    async def test_returns_outcome_within_timeout(self) -> None:
        """Returns the outcome of a query that finishes in time."""
        executor = DelayedExecutor()

        outcome = await executor.execute_with_timeout(
            "SELECT 1;", transactional=False, timeout=1.0
        )

        assert outcome == QuerySuccess(grid="SELECT 1; (False)")

    async def test_waits_without_timeout(self) -> None:
        """A missing timeout waits for the query."""
        executor = DelayedExecutor(delay=0.01)

        outcome = await executor.execute_with_timeout("SELECT 1;")

        assert outcome == QuerySuccess(grid="SELECT 1; (True)")

    async def test_reports_timeout_as_failure(self) -> None:
        """A query past the timeout fails with reason timeout."""
        executor = DelayedExecutor(delay=10)

        outcome = await executor.execute_with_timeout("SELECT 1;", timeout=0.01)

        assert outcome == QueryFailure(reason="timeout")


class TestConnectionExecutor:
    """Tests for ConnectionExecutor."""

    async def test_runs_query_in_worker_thread(self) -> None:
        """Blocking queries do not run on the event loop thread."""
        executor = RecordingExecutor()

        outcome = await executor.execute("SELECT 1;")

        assert outcome == QuerySuccess(grid="SELECT 1;")
        assert executor.threads != [threading.current_thread().name]

    async def test_serializes_concurrent_queries(self) -> None:
        """Concurrent calls all complete on the shared connection."""
        executor = RecordingExecutor()

        outcomes = await asyncio.gather(
            *(executor.execute(f"SELECT {i};") for i in range(5))
        )

        assert [o.grid for o in outcomes] == [f"SELECT {i};" for i in range(5)]  # type: ignore[union-attr]
        assert len(executor.threads) == 5
