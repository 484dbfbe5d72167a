"""Run aggregator: collect verdicts across files into the final report."""

import logging
import threading
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from sql_doctester.lexer import LexicalError
from sql_doctester.models.result import Verdict, VerdictStatus

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class FileError:
    """A host file that could not be processed at all."""

    file_id: str
    reason: str


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Verdict counts of a run."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    errors: int = 0


@dataclass(frozen=True, kw_only=True)
class Report:
    """Ordered verdicts of a finished run with their summary."""

    verdicts: Sequence[Verdict]
    summary: RunSummary
    diagnostics: Sequence[LexicalError] = ()
    file_errors: Sequence[FileError] = ()

    @property
    def succeeded(self) -> bool:
        """True when no test failed or errored."""
        return self.summary.failed + self.summary.errors == 0

    @property
    def exit_code(self) -> int:
        """Process exit status: 0 on success, 1 otherwise."""
        return 0 if self.succeeded else 1

    def failures(self) -> Sequence[Verdict]:
        """Verdicts that make the run fail, in report order."""
        return [v for v in self.verdicts if v.status in {"failed", "error"}]


@dataclass(kw_only=True)
class RunAggregator:
    """Thread-safe collector of verdicts for a single run.

    Files are reported in the order they were registered, so concurrent file
    pipelines do not reorder the report. Verdicts of one file keep the order
    they were recorded in.
    """

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _by_file: dict[str, list[Verdict]] = field(default_factory=dict)
    _counts: Counter[VerdictStatus] = field(default_factory=Counter)
    _diagnostics: list[LexicalError] = field(default_factory=list)
    _file_errors: list[FileError] = field(default_factory=list)
    _report: Report | None = None

    def register_file(self, file_id: str) -> None:
        """Reserve the report position of a file."""
        with self._lock:
            self._check_open()
            self._by_file.setdefault(file_id, [])

    def record(self, verdict: Verdict) -> None:
        """Append a verdict and update the running counts."""
        with self._lock:
            self._check_open()
            self._by_file.setdefault(verdict.file_id, []).append(verdict)
            self._counts[verdict.status] += 1

    def record_diagnostic(self, diagnostic: LexicalError) -> None:
        """Keep a lexical diagnostic for the report."""
        with self._lock:
            self._check_open()
            self._diagnostics.append(diagnostic)

    def record_file_error(self, file_id: str, reason: str) -> None:
        """Note a file that could not be processed.

        Verdicts already recorded for the file are discarded, so a file shows
        up either with its verdicts or as a file error.
        """
        log.warning("Skipping %s: %s", file_id, reason)
        with self._lock:
            self._check_open()
            dropped = self._by_file.get(file_id, [])
            self._counts.subtract(v.status for v in dropped)
            dropped.clear()
            self._file_errors.append(FileError(file_id=file_id, reason=reason))

    def finalize(self) -> Report:
        """Freeze the collected verdicts into a report.

        Repeated calls return the same report.
        """
        with self._lock:
            if self._report is None:
                self._report = Report(
                    verdicts=tuple(
                        verdict
                        for verdicts in self._by_file.values()
                        for verdict in verdicts
                    ),
                    summary=RunSummary(
                        total=sum(self._counts.values()),
                        passed=self._counts["passed"],
                        failed=self._counts["failed"],
                        skipped=self._counts["skipped"],
                        errors=self._counts["error"],
                    ),
                    diagnostics=tuple(self._diagnostics),
                    file_errors=tuple(self._file_errors),
                )
            return self._report

    def _check_open(self) -> None:
        if self._report is not None:
            raise RuntimeError("Run aggregator has already been finalized")
