"""Configuration for scanning host files and running their tests."""

from collections.abc import Mapping

from pydantic import BaseModel, Field

from sql_doctester.models.region import Dialect

DEFAULT_EXTENSIONS: Mapping[str, Dialect] = {
    ".c": "c-comment",
    ".h": "c-comment",
    ".rs": "c-comment",
    ".md": "markdown",
    ".markdown": "markdown",
}


class CommentMarkers(BaseModel):
    """Delimiters of a tagged test comment.

    The tag must be the first non-whitespace content after ``comment_open``.
    """

    comment_open: str = Field(default="/*", min_length=1)
    comment_close: str = Field(default="*/", min_length=1)
    tag: str = Field(default="--[sql-tests]", min_length=1)


class ScanConfig(BaseModel):
    """How host files are discovered and scanned."""

    markers: CommentMarkers = Field(default_factory=CommentMarkers)
    extensions: Mapping[str, Dialect] = Field(
        default_factory=lambda: dict(DEFAULT_EXTENSIONS)
    )
    fallback_dialect: Dialect = "c-comment"

    def dialect_for(self, suffix: str) -> Dialect | None:
        """Return the dialect registered for a file suffix, if any."""
        return self.extensions.get(suffix.lower())


class RunConfig(BaseModel):
    """Execution limits for a test run."""

    query_timeout: float | None = Field(
        default=None, gt=0, description="Seconds before a query counts as hung"
    )
    max_concurrency: int = Field(
        default=4, ge=1, description="Files processed at the same time"
    )
