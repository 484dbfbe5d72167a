"""Configuration for the SQLite executor."""

from collections.abc import Sequence

from pydantic import BaseModel


class SQLiteConfig(BaseModel):
    """Configuration for the SQLite executor.

    ``setup`` statements run once, committed, right after connecting.
    """

    database: str = ":memory:"
    setup: Sequence[str] = ()
