"""Models for test cases extracted from host files."""

from pydantic import Field, field_validator

from sql_doctester.models.base import Model


class TestCaseId(Model):
    """Stable identifier of a test case: host file plus region offset."""

    __test__ = False

    file_id: str = Field(..., description="Identifier of the host file")
    offset: int = Field(..., ge=0, description="Start offset of the region")

    def __str__(self) -> str:
        return f"{self.file_id}@{self.offset}"


class TestCase(Model):
    """A query paired with its optional expected output.

    An absent ``expected_output`` means the query only has to run without an
    engine error.
    """

    __test__ = False

    id: TestCaseId = Field(..., description="Stable identifier")
    query: str = Field(..., description="Query text passed verbatim to the engine")
    expected_output: str | None = Field(
        default=None, description="Expected rendered grid (None means unchecked)"
    )
    name: str = Field(default="", description="Heading path the query sits under")
    line: int = Field(default=1, ge=1, description="Line of the query fence")
    transactional: bool = Field(
        default=True, description="Run inside a transaction that is rolled back"
    )

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must not be empty")
        return value

    @property
    def label(self) -> str:
        """Human-readable name for reports."""
        return f"{self.id.file_id}:{self.line} {self.name}".rstrip()
