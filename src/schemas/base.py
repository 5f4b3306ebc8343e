"""Shared pydantic configuration for wire schemas."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InputModel(CamelModel):
    """Request body; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")


class OutputModel(CamelModel):
    model_config = ConfigDict(from_attributes=True)
