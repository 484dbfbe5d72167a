"""Configuration for the DuckDB executor."""

from collections.abc import Sequence

from pydantic import BaseModel


class DuckDBConfig(BaseModel):
    """Configuration for the DuckDB executor."""

    database: str = ":memory:"
    setup: Sequence[str] = ()
    read_only: bool = False
