"""Block parser: pull a query and its expected output out of a region."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from sql_doctester.lexer import (
    OUTPUT_LANGUAGE,
    QUERY_LANGUAGE,
    Fence,
    LexicalError,
    iter_fences,
)
from sql_doctester.models.region import AnnotatedRegion

IGNORE_FLAG = "ignore"
IGNORE_OUTPUT_FLAG = "ignore-output"
NON_TRANSACTIONAL_FLAGS = frozenset(["non-transactional", "stateful"])
HEADING_SEPARATOR = " / "


@dataclass(frozen=True, kw_only=True)
class ParsedBlock:
    """Query and expected output found in one region."""

    query: str
    expected: str | None
    query_offset: int
    line: int
    name: str = ""
    transactional: bool = True


def trim_blank_lines(text: str) -> str:
    """Drop leading and trailing lines that hold only whitespace."""
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines)


def is_query_fence(fence: Fence) -> bool:
    """Check whether a fence holds a runnable query."""
    return (
        fence.language == QUERY_LANGUAGE
        and IGNORE_FLAG not in fence.flags
        and bool(fence.content.strip())
    )


def _first_fence(
    items: Iterator[Fence | LexicalError], predicate: Callable[[Fence], bool]
) -> Fence | None:
    return next(
        (item for item in items if isinstance(item, Fence) and predicate(item)), None
    )


def parse(region: AnnotatedRegion, text: str) -> ParsedBlock | None:
    """Extract at most one query and its expected output from a region.

    In a tagged comment the first non-empty, non-ignored ``sql`` fence is the
    query. A ``fenced-code`` region only ever offers its own fence. The
    expected output is the ``output`` fence directly after the query fence,
    with nothing but whitespace between them. When an unterminated fence sits
    there instead, the block is dropped.

    Args:
        region: Region produced by the lexer
        text: Full text of the file the region belongs to

    Returns:
        The parsed block, or None when the region holds no usable query

    """
    match region.kind:
        case "tagged-comment":
            items = iter_fences(text, region.content_start, region.content_end)
            query_fence = _first_fence(items, is_query_fence)
        case "fenced-code":
            # Scanning from the top keeps the heading path of the fence.
            items = iter_fences(text)
            first = _first_fence(items, lambda f: f.start >= region.start_offset)
            query_fence = (
                first
                if first is not None
                and first.start == region.start_offset
                and is_query_fence(first)
                else None
            )

    if query_fence is None:
        return None

    expected: str | None = None
    follower = next(items, None)
    if isinstance(follower, LexicalError):
        # An unterminated fence right after the query may be its output.
        if not text[query_fence.end : follower.offset].strip():
            return None
        follower = None
    if (
        follower is not None
        and follower.language == OUTPUT_LANGUAGE
        and not text[query_fence.end : follower.start].strip()
        and IGNORE_OUTPUT_FLAG not in query_fence.flags
    ):
        expected = trim_blank_lines(follower.content)

    return ParsedBlock(
        query=trim_blank_lines(query_fence.content),
        expected=expected,
        query_offset=query_fence.start,
        line=text.count("\n", 0, query_fence.start) + 1,
        name=HEADING_SEPARATOR.join(h for h in query_fence.headings if h),
        transactional=not (query_fence.flags & NON_TRANSACTIONAL_FLAGS),
    )
