"""Models for regions of a host file recognized by the dialect lexer."""

from typing import Literal, TypeAlias

from pydantic import Field, model_validator

from sql_doctester.models.base import Model

Dialect: TypeAlias = Literal["c-comment", "markdown"]

RegionKind: TypeAlias = Literal["tagged-comment", "fenced-code"]


class AnnotatedRegion(Model):
    """A span of a host file that may hold one SQL test.

    Offsets are character offsets into the file's text. ``content_start`` and
    ``content_end`` bound the part the block parser searches for fences: the
    body of a tagged comment (after the marker, before the closer) or the
    whole fence for ``fenced-code`` regions.
    """

    file_id: str = Field(..., description="Identifier of the host file")
    start_offset: int = Field(..., ge=0, description="Offset of the region start")
    end_offset: int = Field(..., ge=0, description="Offset just past the region")
    kind: RegionKind = Field(..., description="How the region was recognized")
    dialect_hint: Dialect = Field(..., description="Dialect the file was scanned with")
    content_start: int = Field(..., ge=0, description="Start of the searchable body")
    content_end: int = Field(..., ge=0, description="End of the searchable body")

    @model_validator(mode="after")
    def _check_bounds(self) -> "AnnotatedRegion":
        if not (
            self.start_offset
            <= self.content_start
            <= self.content_end
            <= self.end_offset
        ):
            raise ValueError("region content must lie within the region")
        return self
