"""Shared pydantic building blocks for finpath models."""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


# Decimals stay exact in Python and become plain JSON numbers on the wire
Number = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]
Money = Number


class FinpathModel(BaseModel):
    """Base model: snake_case attributes, lowerCamelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json(self) -> dict:
        """Return the JSON-compatible, camelCase representation."""
        return self.model_dump(mode="json", by_alias=True)
