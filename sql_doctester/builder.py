"""Turn parsed regions into identified test cases."""

import logging
from collections.abc import Sequence

from sql_doctester.block_parser import ParsedBlock, parse
from sql_doctester.config import CommentMarkers
from sql_doctester.lexer import LexicalError, scan
from sql_doctester.models.case import TestCase, TestCaseId
from sql_doctester.models.region import AnnotatedRegion, Dialect

log = logging.getLogger(__name__)


def build(region: AnnotatedRegion, parsed: ParsedBlock, file_id: str) -> TestCase:
    """Create the test case for a parsed region, keyed by file and offset."""
    return TestCase(
        id=TestCaseId(file_id=file_id, offset=region.start_offset),
        query=parsed.query,
        expected_output=parsed.expected,
        name=parsed.name,
        line=parsed.line,
        transactional=parsed.transactional,
    )


def extract_test_cases(
    text: str,
    dialect: Dialect,
    file_id: str,
    markers: CommentMarkers | None = None,
) -> tuple[Sequence[TestCase], Sequence[LexicalError]]:
    """Scan, parse and build every test case of one file.

    Returns:
        Test cases in file order, and the lexical diagnostics of dropped regions

    """
    test_cases: list[TestCase] = []
    diagnostics: list[LexicalError] = []

    for item in scan(text, dialect, file_id, markers=markers):
        if isinstance(item, LexicalError):
            diagnostics.append(item)
            continue
        if (parsed := parse(item, text)) is None:
            log.debug("No query in region %s@%d", file_id, item.start_offset)
            continue
        test_cases.append(build(item, parsed, file_id))

    return test_cases, diagnostics
