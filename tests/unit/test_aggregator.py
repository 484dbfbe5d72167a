"""Tests for the run aggregator."""

import pytest

from sql_doctester.aggregator import RunAggregator, RunSummary
from sql_doctester.lexer import LexicalError
from sql_doctester.models.case import TestCaseId
from sql_doctester.models.result import Verdict, VerdictStatus
from sql_doctester.testing.factories import TestCaseFactory


def make_verdict(file_id: str, offset: int, status: VerdictStatus) -> Verdict:
    """Create a verdict for a test case at the given position."""
    test_case = TestCaseFactory.build(id=TestCaseId(file_id=file_id, offset=offset))
    return Verdict(test_case=test_case, status=status)


def test_summary_counts_each_status() -> None:
    """Counts verdicts per status and in total."""
    aggregator = RunAggregator()
    for offset, status in enumerate(["passed", "passed", "failed", "skipped", "error"]):
        aggregator.record(make_verdict("a.md", offset, status))  # type: ignore[arg-type]

    report = aggregator.finalize()

    assert report.summary == RunSummary(
        total=5, passed=2, failed=1, skipped=1, errors=1
    )


def test_empty_run() -> None:
    """A run without tests has all counts at zero and succeeds."""
    report = RunAggregator().finalize()

    assert report.verdicts == ()
    assert report.summary == RunSummary()
    assert report.succeeded
    assert report.exit_code == 0


def test_orders_files_by_registration() -> None:
    """Files appear in registration order, whatever order verdicts arrive in."""
    aggregator = RunAggregator()
    aggregator.register_file("a.rs")
    aggregator.register_file("b.rs")

    aggregator.record(make_verdict("b.rs", 10, "passed"))
    aggregator.record(make_verdict("a.rs", 30, "passed"))
    aggregator.record(make_verdict("a.rs", 5, "failed"))

    report = aggregator.finalize()

    assert [(v.file_id, v.test_case_id.offset) for v in report.verdicts] == [
        ("a.rs", 30),
        ("a.rs", 5),
        ("b.rs", 10),
    ]


def test_unregistered_files_follow_registered_ones() -> None:
    """A file first seen through a verdict is appended to the report."""
    aggregator = RunAggregator()
    aggregator.register_file("a.rs")
    aggregator.record(make_verdict("z.rs", 0, "passed"))
    aggregator.record(make_verdict("a.rs", 0, "passed"))

    report = aggregator.finalize()

    assert [v.file_id for v in report.verdicts] == ["a.rs", "z.rs"]


@pytest.mark.parametrize(
    ("status", "exit_code"),
    [("passed", 0), ("skipped", 0), ("failed", 1), ("error", 1)],
)
def test_exit_code(status: VerdictStatus, exit_code: int) -> None:
    """Only failed and error verdicts make the run fail."""
    aggregator = RunAggregator()
    aggregator.record(make_verdict("a.c", 0, status))

    assert aggregator.finalize().exit_code == exit_code


def test_failures_lists_failed_and_errors() -> None:
    """Returns failing verdicts in report order."""
    aggregator = RunAggregator()
    aggregator.record(make_verdict("a.c", 0, "error"))
    aggregator.record(make_verdict("a.c", 1, "passed"))
    aggregator.record(make_verdict("a.c", 2, "failed"))

    failures = aggregator.finalize().failures()

    assert [(v.test_case_id.offset, v.status) for v in failures] == [
        (0, "error"),
        (2, "failed"),
    ]


def test_keeps_diagnostics_and_file_errors() -> None:
    """Diagnostics and file errors are reported without affecting the outcome."""
    aggregator = RunAggregator()
    aggregator.record_diagnostic(LexicalError("a.c", 3, "unterminated tagged comment"))
    aggregator.record_file_error("missing.rs", "No such file or directory")

    report = aggregator.finalize()

    assert [d.offset for d in report.diagnostics] == [3]
    assert [e.file_id for e in report.file_errors] == ["missing.rs"]
    assert report.summary.total == 0
    assert report.exit_code == 0


def test_file_error_discards_recorded_verdicts() -> None:
    """A file that fails midway is reported only as a file error."""
    aggregator = RunAggregator()
    aggregator.register_file("a.rs")
    aggregator.register_file("b.rs")
    aggregator.record(make_verdict("a.rs", 0, "failed"))
    aggregator.record(make_verdict("b.rs", 0, "passed"))
    aggregator.record(make_verdict("a.rs", 40, "passed"))

    aggregator.record_file_error("a.rs", "connection lost")
    report = aggregator.finalize()

    assert [v.file_id for v in report.verdicts] == ["b.rs"]
    assert report.summary == RunSummary(total=1, passed=1)
    assert [e.file_id for e in report.file_errors] == ["a.rs"]
    assert report.exit_code == 0


def test_finalize_is_idempotent() -> None:
    """Finalizing twice returns the same report."""
    aggregator = RunAggregator()
    aggregator.record(make_verdict("a.c", 0, "passed"))

    assert aggregator.finalize() is aggregator.finalize()


def test_record_after_finalize_raises() -> None:
    """The aggregator rejects verdicts once the report exists."""
    aggregator = RunAggregator()
    aggregator.finalize()

    with pytest.raises(RuntimeError, match="already been finalized"):
        aggregator.record(make_verdict("a.c", 0, "passed"))
