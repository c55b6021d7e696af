"""Shared model configuration and the Money field type."""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def _float_to_decimal(value: Any) -> Any:
    if isinstance(value, float):
        return Decimal(repr(value))
    return value


# Decimal in Python, plain JSON number on the wire (the back office sends and
# expects numbers, not strings).
Money = Annotated[
    Decimal,
    BeforeValidator(_float_to_decimal),
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


class WireModel(BaseModel):
    """Base for models exchanged with the back-office API (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        """JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
