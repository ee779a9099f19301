"""Unit normalization: turn (price, quantity, unit) into comparable rates."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from .models import Scale, UnitCategory

GRAMS_PER_OUNCE = 28.3495
GRAMS_PER_POUND = 453.592
ML_PER_FLUID_OUNCE = 29.5735

# Weight synonyms → grams
_WEIGHT_UNITS: dict[str, float] = {
    "g": 1.0,
    "gram": 1.0,
    "grams": 1.0,
    "kg": 1000.0,
    "kilogram": 1000.0,
    "kilograms": 1000.0,
    "kilo": 1000.0,
    "oz": GRAMS_PER_OUNCE,
    "ounce": GRAMS_PER_OUNCE,
    "ounces": GRAMS_PER_OUNCE,
    "lb": GRAMS_PER_POUND,
    "lbs": GRAMS_PER_POUND,
    "pound": GRAMS_PER_POUND,
    "pounds": GRAMS_PER_POUND,
}

# Volume synonyms → millilitres
_VOLUME_UNITS: dict[str, float] = {
    "ml": 1.0,
    "milliliter": 1.0,
    "milliliters": 1.0,
    "millilitre": 1.0,
    "millilitres": 1.0,
    "l": 1000.0,
    "liter": 1000.0,
    "liters": 1000.0,
    "litre": 1000.0,
    "litres": 1000.0,
    "fl oz": ML_PER_FLUID_OUNCE,
    "floz": ML_PER_FLUID_OUNCE,
    "fluid ounce": ML_PER_FLUID_OUNCE,
    "fluid ounces": ML_PER_FLUID_OUNCE,
}

# Denomination label → size in base units
_WEIGHT_DENOMINATIONS: dict[str, float] = {
    "100G": 100.0,
    "1KG": 1000.0,
    "1LB": GRAMS_PER_POUND,
}

_VOLUME_DENOMINATIONS: dict[str, float] = {
    "100ML": 100.0,
    "1L": 1000.0,
    "FL OZ": ML_PER_FLUID_OUNCE,
}

UNIT = "UNIT"
DOZEN = "DOZEN"

_DISPLAY_LABELS: dict[tuple[UnitCategory, Scale], str] = {
    (UnitCategory.WEIGHT, Scale.LARGE): "1KG",
    (UnitCategory.WEIGHT, Scale.SMALL): "100G",
    (UnitCategory.VOLUME, Scale.LARGE): "1L",
    (UnitCategory.VOLUME, Scale.SMALL): "100ML",
}


@dataclass(frozen=True)
class NormalizedRates:
    category: UnitCategory
    base_unit: str  # "G", "ML" or "UNIT"
    rates: dict[str, float]


@dataclass(frozen=True)
class DisplayRate:
    rate: float | None
    label: str


def canonical_unit(unit: str) -> str:
    """Lower-case a unit string and collapse its whitespace."""
    return " ".join(unit.lower().split())


def resolve_unit(unit: str) -> tuple[UnitCategory, float]:
    """Return the category of *unit* and its factor to the base unit.

    Unrecognized units resolve to ``(COUNT, 1.0)``.
    """
    u = canonical_unit(unit)
    if u in _WEIGHT_UNITS:
        return (UnitCategory.WEIGHT, _WEIGHT_UNITS[u])
    if u in _VOLUME_UNITS:
        return (UnitCategory.VOLUME, _VOLUME_UNITS[u])
    return (UnitCategory.COUNT, 1.0)


def normalize(price: float, quantity: float, unit: str) -> NormalizedRates:
    """Derive per-denomination rates for a priced quantity.

    Args:
        price: Total shelf price, >= 0.
        quantity: Amount in *unit*. Callers must reject quantity <= 0.
        unit: Free-text unit, e.g. "g", "Litre", "fl oz", "each".

    Returns:
        NormalizedRates. Unknown units fall back to the count category
        instead of failing. Rates are not rounded.
    """
    category, factor = resolve_unit(unit)

    if category is UnitCategory.WEIGHT:
        grams = quantity * factor
        return NormalizedRates(
            category=category,
            base_unit="G",
            rates={
                label: price / grams * size
                for label, size in _WEIGHT_DENOMINATIONS.items()
            },
        )

    if category is UnitCategory.VOLUME:
        ml = quantity * factor
        return NormalizedRates(
            category=category,
            base_unit="ML",
            rates={
                label: price / ml * size
                for label, size in _VOLUME_DENOMINATIONS.items()
            },
        )

    unit_rate = price / quantity
    return NormalizedRates(
        category=UnitCategory.COUNT,
        base_unit=UNIT,
        rates={UNIT: unit_rate, DOZEN: unit_rate * 12},
    )


def display_label(scale: Scale, category: UnitCategory) -> str:
    return _DISPLAY_LABELS.get((category, scale), UNIT)


def select_display_rate(
    rates: Mapping[str, float], scale: Scale, category: UnitCategory
) -> DisplayRate:
    """Pick the rate shown (and ranked) for the current comparison scale.

    Only looks the rate up; ``rate`` is None when the table lacks it.
    """
    label = display_label(scale, category)
    return DisplayRate(rate=rates.get(label), label=label)
