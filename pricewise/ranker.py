"""Rank items by normalized unit price for the current comparison scale."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from .models import Item, ItemStatus, Scale, UnitCategory
from .normalizer import UNIT, DisplayRate, display_label, select_display_rate

BEST_TOLERANCE = 1e-4

# Lower band sorts first; pending scans always stay at the bottom.
_STATUS_BAND: dict[ItemStatus, int] = {
    ItemStatus.READY: 0,
    ItemStatus.FAILED: 1,
    ItemStatus.PENDING: 2,
}


@dataclass(frozen=True)
class RankedEntry:
    item: Item
    key: float
    display: DisplayRate | None
    is_best: bool = False
    excess_pct: float | None = None


@dataclass(frozen=True)
class Ranking:
    scale: Scale
    entries: tuple[RankedEntry, ...]
    best_rate: float | None

    @property
    def items(self) -> list[Item]:
        return [e.item for e in self.entries]

    @property
    def best(self) -> list[RankedEntry]:
        return [e for e in self.entries if e.is_best]


def sort_key(item: Item, scale: Scale) -> float:
    """Return the rate an item is ranked by, or +inf if it has none."""
    if item.status is not ItemStatus.READY or not item.rates:
        return math.inf

    category = item.category or UnitCategory.COUNT
    rate = item.rates.get(display_label(scale, category))
    if rate is None:
        rate = item.rates.get(UNIT)
    if rate is None:
        return math.inf
    return rate


def best_rate(items: Iterable[Item], scale: Scale) -> float | None:
    """Lowest finite sort key among READY items, or None."""
    keys = [
        k
        for k in (sort_key(i, scale) for i in items if i.status is ItemStatus.READY)
        if math.isfinite(k)
    ]
    return min(keys) if keys else None


def excess_percentage(key: float, best: float) -> float | None:
    """Percentage by which *key* exceeds *best*; None when not meaningful."""
    if not math.isfinite(key) or best <= 0 or key <= best:
        return None
    return (key - best) / best * 100


def rank(items: Iterable[Item], scale: Scale) -> Ranking:
    """Order *items* cheapest first and annotate them against the best rate.

    READY items come first by ascending key, then FAILED, then PENDING.
    Items with equal keys keep their collection order.
    """
    items = list(items)
    keyed = [(item, sort_key(item, scale)) for item in items]
    keyed.sort(key=lambda pair: (_STATUS_BAND[pair[0].status], pair[1]))

    best = best_rate(items, scale)

    entries: list[RankedEntry] = []
    for item, key in keyed:
        display = None
        is_best = False
        excess = None
        if item.status is ItemStatus.READY and item.rates:
            display = select_display_rate(
                item.rates, scale, item.category or UnitCategory.COUNT
            )
            if best is not None and math.isfinite(key):
                if abs(key - best) < BEST_TOLERANCE:
                    is_best = True
                else:
                    excess = excess_percentage(key, best)
        entries.append(
            RankedEntry(
                item=item,
                key=key,
                display=display,
                is_best=is_best,
                excess_pct=excess,
            )
        )

    return Ranking(scale=scale, entries=tuple(entries), best_rate=best)
