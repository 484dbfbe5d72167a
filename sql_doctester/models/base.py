"""Base model configuration for the pipeline's value objects."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable value object that rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")
