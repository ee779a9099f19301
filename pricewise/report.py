"""Text and JSON rendering of a ranking."""

from __future__ import annotations

import math

from .models import ItemStatus
from .ranker import RankedEntry, Ranking


def format_rate(rate: float | None, label: str, currency: str = "$") -> str:
    if rate is None or not math.isfinite(rate):
        return f"-- / {label}"
    return f"{currency}{rate:.2f} / {label}"


def format_excess(pct: float | None) -> str:
    if pct is None:
        return ""
    return f"+{pct:.0f}% vs best"


def _describe(entry: RankedEntry, currency: str) -> str:
    item = entry.item
    if item.status is ItemStatus.PENDING:
        return "analyzing..."
    if item.status is ItemStatus.FAILED:
        return f"scan failed: {item.error_reason or 'Unreadable price tag.'}"

    parts = [item.name or "?"]
    if item.brand:
        parts.append(f"({item.brand})")
    parts.append(f"{currency}{item.price:.2f} for {item.quantity:g} {item.unit}")
    if entry.display is not None:
        parts.append("=")
        parts.append(format_rate(entry.display.rate, entry.display.label, currency))
    excess = format_excess(entry.excess_pct)
    if excess:
        parts.append(f"[{excess}]")
    return " ".join(parts)


def render_ranking(ranking: Ranking, currency: str = "$") -> str:
    """Render the ranking as a numbered, cheapest-first list."""
    if not ranking.entries:
        return "No items yet. Scan a price tag to begin."

    lines = [f"Comparing per {ranking.scale.value} scale:"]
    for n, entry in enumerate(ranking.entries, start=1):
        mark = "★" if entry.is_best else " "
        lines.append(f"{mark} {n:>2}. {_describe(entry, currency)}")
    return "\n".join(lines)


def ranking_to_dict(ranking: Ranking) -> dict:
    """JSON-ready view of a ranking."""
    entries = []
    for entry in ranking.entries:
        item = entry.item
        entries.append(
            {
                "id": item.id,
                "status": item.status.value,
                "name": item.name,
                "brand": item.brand,
                "price": item.price,
                "quantity": item.quantity,
                "unit": item.unit,
                "category": item.category.value if item.category else None,
                "rates": dict(item.rates) if item.rates is not None else None,
                "display_rate": entry.display.rate if entry.display else None,
                "display_label": entry.display.label if entry.display else None,
                "is_best": entry.is_best,
                "excess_pct": entry.excess_pct,
                "error_reason": item.error_reason,
                "image_path": item.image_path,
            }
        )
    return {
        "scale": ranking.scale.value,
        "best_rate": ranking.best_rate,
        "items": entries,
    }
