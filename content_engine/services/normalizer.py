"""Normalize loosely-typed raw product records into strict Product records."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from content_engine.config import settings
from content_engine.core.exceptions import ValidationError
from content_engine.schemas.product import REQUIRED_PRODUCT_FIELDS, Product, RawProductInput

logger = logging.getLogger(__name__)

_FIELD_ALIASES: dict[str, str] = {
    "name": "name",
    "product_name": "name",
    "title": "name",
    "brand": "brand",
    "description": "description",
    "product_description": "description",
    "concentration": "concentration",
    "ingredients": "ingredients",
    "key_ingredients": "ingredients",
    "benefits": "benefits",
    "key_benefits": "benefits",
    "skin_types": "skin_types",
    "skin_type": "skin_types",
    "usage_instructions": "usage_instructions",
    "how_to_use": "usage_instructions",
    "usage": "usage_instructions",
    "directions": "usage_instructions",
    "safety_notes": "safety_notes",
    "side_effects": "safety_notes",
    "warnings": "safety_notes",
    "size_options": "size_options",
    "sizes": "size_options",
    "size": "size_options",
    "price": "price",
    "currency": "currency",
}

_TEXT_FIELDS = ("name", "brand", "description", "concentration", "usage_instructions", "currency")
_MULTILINE_FIELDS = frozenset({"usage_instructions"})

_LIST_DELIMITERS: dict[str, str] = {
    "ingredients": r"[,\n]",
    "benefits": r"[,\n]",
    "skin_types": r"[,/\n]",
    "safety_notes": r"[;\n]",
    "size_options": r"[,/|\n]",
}

_CURRENCY_SYMBOLS: dict[str, str] = {
    "₹": "INR",
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
}

_CURRENCY_CODES = frozenset({"AED", "AUD", "CAD", "CHF", "CNY", "EUR", "GBP", "INR", "JPY", "SGD", "USD"})
_CURRENCY_CODE_PATTERN = re.compile(r"\b([A-Za-z]{3})\b")

_PRICE_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NON_WORD = re.compile(r"[^a-z0-9]+")


def _canonical_key(key: Any) -> str:
    snake = _CAMEL_BOUNDARY.sub("_", str(key).strip())
    return _NON_WORD.sub("_", snake.lower()).strip("_")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list | tuple | set | frozenset):
        return len(value) == 0
    return False


def _coerce_text(field: str, value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, str | int | float):
        raise ValidationError(field, "expected text")
    if field in _MULTILINE_FIELDS:
        lines = (" ".join(line.split()) for line in str(value).splitlines())
        return "\n".join(line for line in lines if line)
    return " ".join(str(value).split())


def _split_items(field: str, value: Any) -> tuple[str, ...]:
    """Split a list or delimiter-joined string into trimmed, unique items."""
    if isinstance(value, str):
        raw_items: list[Any] = re.split(_LIST_DELIMITERS[field], value)
    elif isinstance(value, list | tuple):
        raw_items = list(value)
    else:
        raise ValidationError(field, "expected a list or delimited text")

    items: list[str] = []
    seen: set[str] = set()
    for raw_item in raw_items:
        if isinstance(raw_item, bool) or not isinstance(raw_item, str | int | float):
            raise ValidationError(field, "list items must be text")
        item = " ".join(str(raw_item).split())
        if not item or item.lower() in seen:
            continue
        seen.add(item.lower())
        items.append(item)
    return tuple(items)


def _currency_hint(value: str) -> str | None:
    for symbol, code in _CURRENCY_SYMBOLS.items():
        if symbol in value:
            return code
    for match in _CURRENCY_CODE_PATTERN.finditer(value):
        code = match.group(1).upper()
        if code in _CURRENCY_CODES:
            return code
    return None


def _coerce_price(value: Any) -> tuple[float, str | None]:
    """Coerce a numeric-looking price, returning the amount and any currency hint."""
    currency_hint: str | None = None
    if isinstance(value, bool):
        raise ValidationError("price", "expected a number")
    if isinstance(value, int | float):
        try:
            amount = float(value)
        except OverflowError as exc:
            raise ValidationError("price", "must be a non-negative number") from exc
    elif isinstance(value, str):
        currency_hint = _currency_hint(value)
        match = _PRICE_PATTERN.search(value.replace(",", ""))
        if match is None:
            raise ValidationError("price", f"not a number: {value.strip()!r}")
        amount = float(match.group())
    else:
        raise ValidationError("price", "expected a number")

    if not math.isfinite(amount) or amount < 0:
        raise ValidationError("price", "must be a non-negative number")
    return amount, currency_hint


def _collect_fields(raw: RawProductInput) -> dict[str, Any]:
    collected: dict[str, Any] = {}
    for key, value in raw.items():
        field = _FIELD_ALIASES.get(_canonical_key(key))
        if field is None:
            logger.debug("Ignoring unknown product key", extra={"key": str(key)})
            continue
        if field in collected and not _is_blank(collected[field]):
            logger.debug(
                "Ignoring duplicate product key",
                extra={"key": str(key), "field": field},
            )
            continue
        collected[field] = value
    return collected


def normalize(raw: RawProductInput) -> Product:
    """Convert a raw product record into a validated Product.

    Raises:
        ValidationError: If a required field is missing or any field fails
            coercion. No partial Product is returned.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError("record", "expected a mapping of product fields")

    collected = _collect_fields(raw)

    for field in REQUIRED_PRODUCT_FIELDS:
        if _is_blank(collected.get(field)):
            raise ValidationError(field)

    cleaned: dict[str, Any] = {}
    for field in _TEXT_FIELDS:
        value = collected.get(field)
        if not _is_blank(value):
            cleaned[field] = _coerce_text(field, value)

    for field in _LIST_DELIMITERS:
        value = collected.get(field)
        if _is_blank(value):
            continue
        items = _split_items(field, value)
        if field in REQUIRED_PRODUCT_FIELDS and not items:
            raise ValidationError(field, "no usable items")
        cleaned[field] = items

    price, currency_hint = _coerce_price(collected["price"])
    cleaned["price"] = price
    currency = cleaned.get("currency") or currency_hint or settings.default_currency
    cleaned["currency"] = currency.upper()

    try:
        product = Product.model_validate(cleaned)
    except PydanticValidationError as exc:
        first_error = exc.errors()[0]
        location = first_error.get("loc") or ("record",)
        raise ValidationError(str(location[0]), first_error.get("msg", "invalid value")) from exc

    logger.info(
        "Product normalized",
        extra={
            "product": product.name,
            "ingredients": len(product.ingredients),
            "benefits": len(product.benefits),
            "skin_types": len(product.skin_types),
        },
    )
    return product
