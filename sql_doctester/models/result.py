"""Models for query execution outcomes and per-test verdicts."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, TypeAlias

from sql_doctester.models.case import TestCase, TestCaseId

VerdictStatus: TypeAlias = Literal["passed", "failed", "skipped", "error"]


@dataclass(frozen=True, kw_only=True)
class QuerySuccess:
    """The engine ran the query and rendered its result grid."""

    grid: str


@dataclass(frozen=True, kw_only=True)
class QueryFailure:
    """The engine rejected the query or could not run it."""

    reason: str


QueryOutcome: TypeAlias = QuerySuccess | QueryFailure


@dataclass(frozen=True, kw_only=True)
class ExecutionResult:
    """Outcome of running one test case's query."""

    test_case_id: TestCaseId
    outcome: QueryOutcome


@dataclass(frozen=True, kw_only=True)
class LineMismatch:
    """One differing line between expected and actual output.

    A side is None when that text has no line at ``line_number``.
    """

    line_number: int
    expected: str | None
    actual: str | None


@dataclass(frozen=True, kw_only=True)
class Verdict:
    """Result of a single test case after execution and comparison.

    ``diff`` is only populated for ``failed`` verdicts and ``reason`` only for
    ``error`` verdicts.
    """

    test_case: TestCase
    status: VerdictStatus
    diff: Sequence[LineMismatch] = ()
    reason: str | None = None

    @property
    def test_case_id(self) -> TestCaseId:
        """Identifier of the judged test case."""
        return self.test_case.id

    @property
    def file_id(self) -> str:
        """Host file the judged test case came from."""
        return self.test_case.id.file_id
