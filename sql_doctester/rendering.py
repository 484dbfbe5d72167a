"""Render result sets as psql-style aligned text grids.

The output is what someone would paste into an ``output`` fence::

     a | b
    ---+---
     5 | 6
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

COLUMN_SEPARATOR = "|"
JUNCTION = "+"

_NUMERIC_TYPES = (int, float, Decimal)


def format_value(value: Any) -> str:
    """Render a single value the way psql prints it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "t" if value else "f"
    if isinstance(value, bytes | bytearray | memoryview):
        return "\\x" + bytes(value).hex()
    return str(value)


def _is_numeric(value: Any) -> bool:
    return isinstance(value, _NUMERIC_TYPES) and not isinstance(value, bool)


def _center(text: str, width: int) -> str:
    left = (width - len(text)) // 2
    return " " * left + text.ljust(width - left)


def render_grid(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    """Render column names and rows as an aligned grid.

    Headers are centered, numbers right-aligned and everything else
    left-aligned. A result without columns renders as the empty string.
    """
    if not columns:
        return ""

    cells = [[format_value(value) for value in row] for row in rows]
    widths = [
        max([len(name)] + [len(row[index]) for row in cells])
        for index, name in enumerate(columns)
    ]

    def join(parts: Sequence[str]) -> str:
        return COLUMN_SEPARATOR.join(f" {part} " for part in parts).rstrip()

    lines = [join([_center(name, width) for name, width in zip(columns, widths)])]
    lines.append(JUNCTION.join("-" * (width + 2) for width in widths))
    for row, text_row in zip(rows, cells):
        lines.append(
            join(
                [
                    text.rjust(width) if _is_numeric(value) else text.ljust(width)
                    for value, text, width in zip(row, text_row, widths)
                ]
            )
        )
    return "\n".join(lines)
