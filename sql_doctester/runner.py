"""Test runner coordinating extraction, execution and comparison per file."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sql_doctester.aggregator import Report, RunAggregator
from sql_doctester.builder import extract_test_cases
from sql_doctester.comparator import compare
from sql_doctester.config import RunConfig, ScanConfig
from sql_doctester.discovery import SourceFile
from sql_doctester.executors.base import QueryExecutor
from sql_doctester.models.result import ExecutionResult

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestRunner:
    """Runs the tests of many host files against a single executor."""

    __test__ = False

    executor: QueryExecutor
    scan_config: ScanConfig = field(default_factory=ScanConfig)
    run_config: RunConfig = field(default_factory=RunConfig)

    async def run(self, sources: Sequence[SourceFile]) -> Report:
        """Run every test found in the given files.

        Files are processed concurrently, at most ``max_concurrency`` at a
        time. Test cases of one file run in order.

        Args:
            sources: Host files in traversal order

        Returns:
            The finalized report, with files in the order given

        """
        aggregator = RunAggregator()
        if not sources:
            log.info("No files to scan")
            return aggregator.finalize()

        for source in sources:
            aggregator.register_file(source.file_id)

        semaphore = asyncio.Semaphore(self.run_config.max_concurrency)
        log.info("Running tests from %d file(s)...", len(sources))
        tasks = [self._run_file(source, aggregator, semaphore) for source in sources]

        results = await asyncio.gather(*tasks, return_exceptions=True)
        self._process_results(sources, results, aggregator)

        report = aggregator.finalize()
        log.info("Test execution completed: %d test(s)", report.summary.total)
        return report

    def _process_results(
        self,
        sources: Sequence[SourceFile],
        results: Sequence[None | BaseException],
        aggregator: RunAggregator,
    ) -> None:
        """Record file pipelines that crashed instead of completing."""
        for source, result in zip(sources, results):
            if isinstance(result, Exception):
                log.error(
                    "Test execution failed for %s: %s",
                    source.file_id,
                    result,
                    exc_info=result,
                )
                aggregator.record_file_error(source.file_id, str(result))
            elif isinstance(result, BaseException):
                raise result

    async def _run_file(
        self,
        source: SourceFile,
        aggregator: RunAggregator,
        semaphore: asyncio.Semaphore,
    ) -> None:
        """Extract, execute and compare all tests of one file."""
        async with semaphore:
            try:
                text = await asyncio.to_thread(source.path.read_text, encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                aggregator.record_file_error(source.file_id, str(e))
                return

            test_cases, diagnostics = extract_test_cases(
                text, source.dialect, source.file_id, self.scan_config.markers
            )
            for diagnostic in diagnostics:
                log.warning("Dropped region: %s", diagnostic)
                aggregator.record_diagnostic(diagnostic)

            log.info("Running %d test(s) from %s", len(test_cases), source.file_id)
            for test_case in test_cases:
                outcome = await self.executor.execute_with_timeout(
                    test_case.query,
                    transactional=test_case.transactional,
                    timeout=self.run_config.query_timeout,
                )
                verdict = compare(
                    test_case,
                    ExecutionResult(test_case_id=test_case.id, outcome=outcome),
                )
                log.debug("Test %s: %s", test_case.label, verdict.status)
                aggregator.record(verdict)
