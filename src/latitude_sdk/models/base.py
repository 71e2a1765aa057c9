"""Shared pydantic base for wire models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Frozen model that reads and writes the API's camelCase field names.

    Unknown fields are kept (``extra="allow"``) so payloads from newer
    platform versions survive a round trip through the SDK.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    def to_wire(self) -> dict:
        """Dump the model as a JSON-ready dict using the API field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
