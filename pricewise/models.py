"""Data models for scanned grocery items."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType


class ItemStatus(str, Enum):
    PENDING = "pending"  # awaiting analysis
    FAILED = "failed"
    READY = "ready"


class UnitCategory(str, Enum):
    WEIGHT = "weight"
    VOLUME = "volume"
    COUNT = "count"


class Scale(str, Enum):
    """Comparison scale for weight and volume items.

    Count items always compare per single unit, whatever the scale.
    """

    SMALL = "small"  # per 100g / 100ml
    LARGE = "large"  # per 1kg / 1L

    def toggled(self) -> Scale:
        return Scale.LARGE if self is Scale.SMALL else Scale.SMALL


@dataclass(frozen=True)
class ProductInfo:
    """Structured product fields read from a price tag or typed by hand."""

    name: str
    price: float
    quantity: float
    unit: str
    brand: str | None = None
    category: UnitCategory | None = None


def new_item_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class Item:
    """One scanned or manually entered product.

    Items are immutable snapshots; every change produces a new Item via
    ``dataclasses.replace``.
    """

    id: str
    status: ItemStatus = ItemStatus.PENDING
    image_path: str | None = None
    name: str | None = None
    brand: str | None = None
    price: float | None = None
    quantity: float | None = None
    unit: str | None = None
    category: UnitCategory | None = None
    rates: Mapping[str, float] | None = None  # read-only view
    error_reason: str | None = None

    @classmethod
    def pending(cls, image_path: str | None = None) -> Item:
        return cls(id=new_item_id(), image_path=image_path)

    def as_ready(
        self, info: ProductInfo, category: UnitCategory, rates: Mapping[str, float]
    ) -> Item:
        return replace(
            self,
            status=ItemStatus.READY,
            name=info.name,
            brand=info.brand,
            price=info.price,
            quantity=info.quantity,
            unit=info.unit.upper(),
            category=category,
            rates=MappingProxyType(dict(rates)),
            error_reason=None,
        )

    def as_failed(self, reason: str) -> Item:
        # Rates never survive a transition into FAILED.
        return replace(
            self,
            status=ItemStatus.FAILED,
            name=None,
            brand=None,
            price=None,
            quantity=None,
            unit=None,
            category=None,
            rates=None,
            error_reason=reason,
        )
