"""Dialect lexer: locate tagged comments and fenced code blocks in host files.

Two independent passes are composed here. ``iter_tagged_comments`` finds
comment spans that start with the test tag, and ``iter_fences`` recognizes
Markdown-style fenced code blocks in any span of text. The ``c-comment``
dialect runs the fence pass over the body of every tagged comment, the
``markdown`` dialect runs it over the whole file.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from sql_doctester.config import CommentMarkers
from sql_doctester.models.region import AnnotatedRegion, Dialect

FENCE = "```"
QUERY_LANGUAGE = "sql"
OUTPUT_LANGUAGE = "output"

_HEADING = re.compile(r"(#{1,6})(?:\s+(.*?))?\s*$")
_INFO_SEPARATOR = re.compile(r"[\s,]+")


class LexicalError(Exception):
    """An unterminated comment or fence. The region it opened is dropped."""

    def __init__(self, file_id: str, offset: int, message: str) -> None:
        super().__init__(f"{file_id}@{offset}: {message}")
        self.file_id = file_id
        self.offset = offset
        self.message = message


@dataclass(frozen=True, kw_only=True)
class Fence:
    """A complete fenced code block.

    ``start`` is the offset of the opening line, ``end`` the offset just past
    the closing line. ``headings`` is the Markdown heading path in force where
    the fence opens.
    """

    start: int
    end: int
    info: str
    content: str
    headings: tuple[str, ...] = ()

    @property
    def tokens(self) -> tuple[str, ...]:
        """Info string split on whitespace and commas, lowercased."""
        return tuple(
            token.lower() for token in _INFO_SEPARATOR.split(self.info) if token
        )

    @property
    def language(self) -> str:
        """Language tag, lowercased (empty for a bare fence)."""
        tokens = self.tokens
        return tokens[0] if tokens else ""

    @property
    def flags(self) -> frozenset[str]:
        """Info string tokens after the language tag."""
        return frozenset(self.tokens[1:])


@dataclass(kw_only=True)
class _OpenFence:
    start: int
    indent: str
    ticks: int
    info: str
    headings: tuple[str, ...]
    lines: list[str] = field(default_factory=list)

    def close(self, end: int) -> Fence:
        return Fence(
            start=self.start,
            end=end,
            info=self.info,
            content="\n".join(self.lines),
            headings=self.headings,
        )


def _iter_lines(text: str, start: int, end: int) -> Iterator[tuple[int, int, str]]:
    """Yield ``(offset, next_offset, line)`` with line endings removed."""
    position = start
    while position < end:
        newline = text.find("\n", position, end)
        next_position = end if newline == -1 else newline + 1
        line = text[position:next_position].rstrip("\n").removesuffix("\r")
        yield position, next_position, line
        position = next_position


def iter_fences(
    text: str,
    start: int = 0,
    end: int | None = None,
    *,
    file_id: str = "",
) -> Iterator[Fence | LexicalError]:
    """Recognize fenced code blocks in ``text[start:end]``.

    A fence opens on a line of optional indentation, at least three backticks
    and an info string. It closes on a line holding only backticks (at least as
    many as the opener). Inside an open fence, a shorter backtick run is
    content even when it carries an info string. The opener's indentation is
    removed from every content line. A fence still open at ``end``, or interrupted by another opening
    fence, is reported as a ``LexicalError`` and scanning carries on from the
    interrupting fence.
    """
    end = len(text) if end is None else end
    headings: list[str] = []
    opening: _OpenFence | None = None

    for offset, next_offset, line in _iter_lines(text, start, end):
        stripped = line.lstrip()
        if stripped.startswith(FENCE):
            ticks = len(stripped) - len(stripped.lstrip("`"))
            info = stripped[ticks:].strip()
            if opening is not None and ticks < opening.ticks:
                opening.lines.append(line.removeprefix(opening.indent))
                continue
            if opening is not None and not info:
                yield opening.close(next_offset)
                opening = None
                continue
            if opening is not None:
                yield LexicalError(
                    file_id,
                    opening.start,
                    f"fence interrupted by a new fence at offset {offset}",
                )
            opening = _OpenFence(
                start=offset,
                indent=line[: len(line) - len(stripped)],
                ticks=ticks,
                info=info,
                headings=tuple(headings),
            )
        elif opening is not None:
            opening.lines.append(line.removeprefix(opening.indent))
        elif match := _HEADING.match(stripped):
            level = len(match.group(1))
            del headings[level - 1 :]
            headings.append(match.group(2) or "")

    if opening is not None:
        yield LexicalError(file_id, opening.start, "unterminated fence")


def iter_tagged_comments(
    text: str,
    *,
    file_id: str = "",
    markers: CommentMarkers | None = None,
) -> Iterator[AnnotatedRegion | LexicalError]:
    """Find comments whose body starts with the test tag.

    Only openers directly followed by the tag are looked at, so untagged
    comments and stray openers in strings never hide a later test. A tagged
    comment is unterminated when no closer follows it, or when another tagged
    comment opens before its closer. It is then reported and scanning resumes
    at the next opener.
    """
    markers = markers or CommentMarkers()
    tagged_opener = re.compile(
        re.escape(markers.comment_open) + r"\s*" + re.escape(markers.tag)
    )
    position = 0

    while (tagged := tagged_opener.search(text, position)) is not None:
        start = tagged.start()
        close = text.find(markers.comment_close, tagged.end())
        following = tagged_opener.search(text, tagged.end())

        if close == -1 or (following is not None and following.start() < close):
            yield LexicalError(file_id, start, "unterminated tagged comment")
            position = following.start() if following is not None else len(text)
            continue

        yield AnnotatedRegion(
            file_id=file_id,
            start_offset=start,
            end_offset=close + len(markers.comment_close),
            kind="tagged-comment",
            dialect_hint="c-comment",
            content_start=tagged.end(),
            content_end=close,
        )
        position = close + len(markers.comment_close)


def _scan_comments(
    text: str, file_id: str, markers: CommentMarkers
) -> Iterator[AnnotatedRegion | LexicalError]:
    for item in iter_tagged_comments(text, file_id=file_id, markers=markers):
        if isinstance(item, LexicalError):
            yield item
            continue
        errors = [
            fence
            for fence in iter_fences(
                text, item.content_start, item.content_end, file_id=file_id
            )
            if isinstance(fence, LexicalError)
        ]
        # A comment with a broken fence is dropped whole.
        yield from errors
        if not errors:
            yield item


def _scan_markdown(text: str, file_id: str) -> Iterator[AnnotatedRegion | LexicalError]:
    for item in iter_fences(text, file_id=file_id):
        if isinstance(item, LexicalError):
            yield item
        elif item.language == QUERY_LANGUAGE:
            yield AnnotatedRegion(
                file_id=file_id,
                start_offset=item.start,
                end_offset=item.end,
                kind="fenced-code",
                dialect_hint="markdown",
                content_start=item.start,
                content_end=item.end,
            )


def scan(
    text: str,
    dialect: Dialect,
    file_id: str,
    *,
    markers: CommentMarkers | None = None,
) -> Iterator[AnnotatedRegion | LexicalError]:
    """Lazily yield the annotated regions of one file, with diagnostics mixed in.

    Args:
        text: Full text of the host file
        dialect: Syntax family to scan with
        file_id: Identifier recorded on every region and diagnostic
        markers: Tagged comment delimiters (``c-comment`` dialect only)

    Returns:
        Iterator over regions in file order, interleaved with ``LexicalError``
        instances for dropped regions

    """
    match dialect:
        case "c-comment":
            yield from _scan_comments(text, file_id, markers or CommentMarkers())
        case "markdown":
            yield from _scan_markdown(text, file_id)
        case _:
            raise ValueError(f"Unknown dialect: {dialect!r}")
