"""Validation for manually entered (or repaired) price-tag fields."""

from __future__ import annotations

import math

from .models import ProductInfo


class ManualEntryError(ValueError):
    """A manual entry field is missing or malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def _parse_number(field: str, value: str | float | int) -> float:
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ManualEntryError(field, "required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ManualEntryError(field, f"not a number: {value!r}") from None
    if not math.isfinite(number):
        raise ManualEntryError(field, f"not a finite number: {value!r}")
    return number


def parse_manual_entry(
    name: str,
    price: str | float,
    quantity: str | float,
    unit: str,
    brand: str | None = None,
) -> ProductInfo:
    """Validate form fields and return a ProductInfo ready for normalization.

    Name, brand and unit are upper-cased the way tags are displayed.

    Raises:
        ManualEntryError: If any field is invalid. Nothing is mutated.
    """
    name = (name or "").strip()
    if not name:
        raise ManualEntryError("name", "required")

    unit = (unit or "").strip()
    if not unit:
        raise ManualEntryError("unit", "required")

    price_value = _parse_number("price", price)
    if price_value < 0:
        raise ManualEntryError("price", "must not be negative")

    qty_value = _parse_number("quantity", quantity)
    if qty_value <= 0:
        raise ManualEntryError("quantity", "must be greater than zero")

    brand = (brand or "").strip()

    return ProductInfo(
        name=name.upper(),
        brand=brand.upper() or None,
        price=price_value,
        quantity=qty_value,
        unit=unit.upper(),
    )
