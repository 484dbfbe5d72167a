"""Result comparator: normalize rendered grids and decide verdicts."""

from collections.abc import Sequence
from itertools import zip_longest

from sql_doctester.block_parser import trim_blank_lines
from sql_doctester.models.case import TestCase
from sql_doctester.models.result import (
    ExecutionResult,
    LineMismatch,
    QueryFailure,
    Verdict,
)


def normalize(text: str) -> str:
    """Canonicalize line endings and surrounding whitespace of a text block.

    Trailing whitespace is removed from every line, ``\\r\\n`` and ``\\r``
    become ``\\n``, and blank lines at either end of the block are dropped.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return trim_blank_lines("\n".join(line.rstrip() for line in text.split("\n")))


def line_diff(expected: str, actual: str) -> Sequence[LineMismatch]:
    """List the lines that differ between two normalized texts."""
    expected_lines = expected.split("\n") if expected else []
    actual_lines = actual.split("\n") if actual else []
    return [
        LineMismatch(line_number=number, expected=left, actual=right)
        for number, (left, right) in enumerate(
            zip_longest(expected_lines, actual_lines), start=1
        )
        if left != right
    ]


def compare(test_case: TestCase, execution_result: ExecutionResult) -> Verdict:
    """Turn an execution result into a verdict for its test case."""
    outcome = execution_result.outcome
    if isinstance(outcome, QueryFailure):
        return Verdict(test_case=test_case, status="error", reason=outcome.reason)

    if test_case.expected_output is None:
        return Verdict(test_case=test_case, status="skipped")

    expected = normalize(test_case.expected_output)
    actual = normalize(outcome.grid)
    if expected == actual:
        return Verdict(test_case=test_case, status="passed")

    return Verdict(
        test_case=test_case, status="failed", diff=line_diff(expected, actual)
    )
