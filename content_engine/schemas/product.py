"""Product record schemas."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Loosely-typed external record, before normalization.
RawProductInput = Mapping[str, Any]

REQUIRED_PRODUCT_FIELDS: tuple[str, ...] = (
    "name",
    "ingredients",
    "benefits",
    "skin_types",
    "usage_instructions",
    "price",
)


class Product(BaseModel):
    """Normalized, immutable product record."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    brand: str = ""
    description: str = ""
    concentration: str = ""
    ingredients: tuple[str, ...] = Field(min_length=1)
    benefits: tuple[str, ...] = Field(min_length=1)
    skin_types: tuple[str, ...] = Field(min_length=1)
    usage_instructions: str = Field(min_length=1)
    safety_notes: tuple[str, ...] = ()
    size_options: tuple[str, ...] = ()
    price: float = Field(ge=0)
    currency: str = Field(default="INR", min_length=1)

    @field_validator(
        "name",
        "brand",
        "description",
        "concentration",
        "usage_instructions",
        "currency",
    )
    @classmethod
    def _require_trimmed(cls, value: str) -> str:
        if value != value.strip():
            raise ValueError("must not carry surrounding whitespace")
        return value

    @field_validator("ingredients", "benefits", "skin_types", "safety_notes", "size_options")
    @classmethod
    def _require_clean_items(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        seen: set[str] = set()
        for item in value:
            if not item or item != item.strip():
                raise ValueError("items must be non-empty and trimmed")
            key = item.lower()
            if key in seen:
                raise ValueError(f"duplicate item: {item}")
            seen.add(key)
        return value

    @field_validator("price")
    @classmethod
    def _round_price(cls, value: float) -> float:
        return round(value, 2)
