"""CLI entry point for running SQL examples as tests."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from sql_doctester.aggregator import Report
from sql_doctester.config import CommentMarkers, RunConfig, ScanConfig
from sql_doctester.discovery import discover_sources
from sql_doctester.executors.loading import available_executors, load_executor_manifest
from sql_doctester.models.result import Verdict
from sql_doctester.runner import TestRunner

STATUS_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
    "skipped": "⏭️",
    "error": "❗",
}


def log_failure_details(log: logging.Logger, verdict: Verdict) -> None:
    """Log why a test failed: the engine's reason or a line diff."""
    if verdict.reason:
        log.info("  Reason: %s", verdict.reason)
    for mismatch in verdict.diff:
        log.info("  line %d:", mismatch.line_number)
        if mismatch.expected is not None:
            log.info("    - %s", mismatch.expected)
        if mismatch.actual is not None:
            log.info("    + %s", mismatch.actual)


def log_results_summary(log: logging.Logger, report: Report) -> None:
    """Log a formatted summary of test results with failure details."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for verdict in report.verdicts:
        symbol = STATUS_SYMBOLS.get(verdict.status, "?")
        log.info("%s %s: %s", symbol, verdict.test_case.label, verdict.status)
        log_failure_details(log, verdict)

    for diagnostic in report.diagnostics:
        log.info("⚠️ %s", diagnostic)
    for file_error in report.file_errors:
        log.info("⚠️ %s: %s", file_error.file_id, file_error.reason)

    summary = report.summary
    log.info(
        "test result: %s. %d passed; %d failed; %d skipped; %d errors",
        "ok" if report.succeeded else "FAILED",
        summary.passed,
        summary.failed,
        summary.skipped,
        summary.errors,
    )


def format_output(report: Report) -> dict[str, Any]:
    """Format a report for JSON output."""
    results: list[dict[str, Any]] = [
        {
            "file": verdict.file_id,
            "id": str(verdict.test_case_id),
            "name": verdict.test_case.name,
            "line": verdict.test_case.line,
            "status": verdict.status,
            "reason": verdict.reason,
            "diff": [
                {
                    "line": mismatch.line_number,
                    "expected": mismatch.expected,
                    "actual": mismatch.actual,
                }
                for mismatch in verdict.diff
            ],
        }
        for verdict in report.verdicts
    ]

    return {
        "total": report.summary.total,
        "passed": report.summary.passed,
        "failed": report.summary.failed,
        "skipped": report.summary.skipped,
        "errors": report.summary.errors,
        "results": results,
        "diagnostics": [
            {"file": d.file_id, "offset": d.offset, "message": d.message}
            for d in report.diagnostics
        ],
        "file_errors": [
            {"file": e.file_id, "reason": e.reason} for e in report.file_errors
        ],
    }


async def run(
    paths: Sequence[Path],
    executor_key: str,
    executor_config_json: str = "{}",
    scan_config: ScanConfig | None = None,
    run_config: RunConfig | None = None,
) -> int:
    """Run the SQL tests found under the given paths and return exit code."""
    log = logging.getLogger("sql_doctester")
    scan_config = scan_config or ScanConfig()

    log.info("Loading executor: %s", executor_key)
    manifest = load_executor_manifest(executor_key)

    config_dict = json.loads(executor_config_json)
    config = manifest.config_cls(**config_dict)

    sources = discover_sources(paths, scan_config)
    if not sources:
        log.info("No files to test")
        print(json.dumps({"total": 0, "results": []}))
        return 0

    async with manifest.executor_factory(config) as executor:
        runner = TestRunner(
            executor=executor,
            scan_config=scan_config,
            run_config=run_config or RunConfig(),
        )
        report = await runner.run(sources)

    log_results_summary(log, report)

    print(json.dumps(format_output(report), indent=2))

    return report.exit_code


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run SQL examples from comments and Markdown as tests"
    )
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files or directories to scan",
    )
    parser.add_argument(
        "--executor",
        default="sqlite",
        help=f"Executor key (installed: {', '.join(available_executors())})",
    )
    parser.add_argument(
        "--executor-config",
        default="{}",
        help="JSON configuration for the executor",
    )
    parser.add_argument(
        "--tag",
        default=CommentMarkers().tag,
        help="Marker that opens a tagged test comment",
    )
    parser.add_argument(
        "--comment-open",
        default=CommentMarkers().comment_open,
        help="Opening delimiter of a comment",
    )
    parser.add_argument(
        "--comment-close",
        default=CommentMarkers().comment_close,
        help="Closing delimiter of a comment",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds before a query is reported as timed out",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=RunConfig().max_concurrency,
        help="Number of files processed at the same time",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            paths=args.paths,
            executor_key=args.executor,
            executor_config_json=args.executor_config,
            scan_config=ScanConfig(
                markers=CommentMarkers(
                    comment_open=args.comment_open,
                    comment_close=args.comment_close,
                    tag=args.tag,
                )
            ),
            run_config=RunConfig(
                query_timeout=args.timeout, max_concurrency=args.concurrency
            ),
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
