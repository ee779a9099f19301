"""Session state container and the commands that mutate it.

Every command replaces the whole snapshot; the ranking is recomputed from
the current snapshot on demand and never cached.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from .models import Item, ItemStatus, ProductInfo, Scale
from .normalizer import normalize
from .ranker import Ranking, rank
from .vision import AnalysisError

if TYPE_CHECKING:
    from .vision import VisionBackend

logger = logging.getLogger(__name__)

UNREADABLE_REASON = "Could not find price or unit in this image."
NETWORK_REASON = "Network error or unreadable tag."


@dataclass(frozen=True)
class SessionState:
    items: tuple[Item, ...] = ()
    scale: Scale = Scale.SMALL
    last_added: tuple[str, ...] = ()  # ids created by the latest add command

    def get(self, item_id: str) -> Item | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


@dataclass(frozen=True)
class AddBatch:
    """Start one pending item per captured or uploaded image."""

    image_paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class AddEntry:
    """Add a READY item straight from a validated manual entry."""

    entry: ProductInfo


@dataclass(frozen=True)
class UpdateItem:
    """Replace an item's fields with a validated manual entry."""

    item_id: str
    entry: ProductInfo


@dataclass(frozen=True)
class RemoveItem:
    item_id: str


@dataclass(frozen=True)
class ToggleScale:
    pass


@dataclass(frozen=True)
class Reset:
    """Erase all scans."""


Command = AddBatch | AddEntry | UpdateItem | RemoveItem | ToggleScale | Reset


def ready_item(item: Item, info: ProductInfo) -> Item:
    """Normalize *info* and return *item* transitioned to READY."""
    norm = normalize(info.price, info.quantity, info.unit)
    return item.as_ready(info, norm.category, norm.rates)


def _patch(state: SessionState, item_id: str, new_item: Item) -> SessionState:
    return replace(
        state,
        items=tuple(new_item if it.id == item_id else it for it in state.items),
    )


@dataclass
class Session:
    """Holds the item collection and comparison scale for one user session."""

    state: SessionState = field(default_factory=SessionState)

    @classmethod
    def with_scale(cls, scale: Scale) -> Session:
        return cls(state=SessionState(scale=scale))

    @property
    def items(self) -> tuple[Item, ...]:
        return self.state.items

    @property
    def scale(self) -> Scale:
        return self.state.scale

    @property
    def last_batch(self) -> tuple[str, ...]:
        """Item IDs created by the most recent AddBatch or AddEntry."""
        return self.state.last_added

    def ranking(self) -> Ranking:
        return rank(self.state.items, self.state.scale)

    def dispatch(self, command: Command) -> Ranking:
        """Apply one command atomically and return the fresh ranking."""
        state = self.state

        match command:
            case AddBatch(image_paths=paths):
                new_items = tuple(Item.pending(image_path=p) for p in paths)
                state = replace(
                    state,
                    items=state.items + new_items,
                    last_added=tuple(i.id for i in new_items),
                )
                logger.info("Added %d pending item(s)", len(new_items))
            case AddEntry(entry=entry):
                item = ready_item(Item.pending(), entry)
                state = replace(
                    state, items=state.items + (item,), last_added=(item.id,)
                )
                logger.info("Added item %s manually", item.id)
            case UpdateItem(item_id=item_id, entry=entry):
                item = state.get(item_id)
                if item is None:
                    raise KeyError(item_id)
                state = _patch(state, item_id, ready_item(item, entry))
                logger.info("Updated item %s manually", item_id)
            case RemoveItem(item_id=item_id):
                state = replace(
                    state,
                    items=tuple(it for it in state.items if it.id != item_id),
                )
                logger.info("Removed item %s", item_id)
            case ToggleScale():
                state = replace(state, scale=state.scale.toggled())
                logger.info("Comparison scale: %s", state.scale.value)
            case Reset():
                state = replace(state, items=(), last_added=())
                logger.info("Erased all scans")
            case _:
                raise TypeError(f"Unknown command: {command!r}")

        self.state = state
        return self.ranking()

    # Shortcuts used by the CLI and tests.

    def add_batch(self, image_paths: list[str]) -> tuple[str, ...]:
        self.dispatch(AddBatch(tuple(image_paths)))
        return self.state.last_added

    def add_manual(self, entry: ProductInfo) -> str:
        """Add an item straight from a validated manual entry."""
        self.dispatch(AddEntry(entry))
        return self.state.last_added[0]

    def update_item(self, item_id: str, entry: ProductInfo) -> Ranking:
        return self.dispatch(UpdateItem(item_id, entry))

    def remove_item(self, item_id: str) -> Ranking:
        return self.dispatch(RemoveItem(item_id))

    def toggle_scale(self) -> Ranking:
        return self.dispatch(ToggleScale())

    def reset(self) -> Ranking:
        return self.dispatch(Reset())

    # Completion patches from asynchronous analyses.

    def complete(self, item_id: str, info: ProductInfo) -> bool:
        """Mark an item READY with analysed fields.

        Returns False when the item has been removed in the meantime.
        """
        item = self.state.get(item_id)
        if item is None:
            logger.debug("Dropping result for removed item %s", item_id)
            return False
        self.state = _patch(self.state, item_id, ready_item(item, info))
        return True

    def fail(self, item_id: str, reason: str) -> bool:
        """Mark an item FAILED; clears any rates it had."""
        item = self.state.get(item_id)
        if item is None:
            logger.debug("Dropping failure for removed item %s", item_id)
            return False
        self.state = _patch(self.state, item_id, item.as_failed(reason))
        return True

    async def analyze(
        self,
        backend: VisionBackend,
        item_ids: list[str] | tuple[str, ...] | None = None,
        max_concurrency: int = 0,
    ) -> Ranking:
        """Analyse pending items concurrently, one vision call per item.

        Each result patches only its own item; a failure marks that item
        FAILED and leaves the rest of the batch alone. Results for items
        that were edited or removed meanwhile are dropped.
        """
        if item_ids is None:
            item_ids = self.state.last_added
        targets = [
            item
            for item in (self.state.get(i) for i in item_ids)
            if item is not None
            and item.status is ItemStatus.PENDING
            and item.image_path
        ]
        semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None

        def _still_pending(item_id: str) -> bool:
            current = self.state.get(item_id)
            if current is None or current.status is not ItemStatus.PENDING:
                logger.debug("Dropping late result for item %s", item_id)
                return False
            return True

        async def _run(item: Item) -> None:
            try:
                if semaphore is None:
                    info = await backend.analyze_tag(item.image_path)
                else:
                    async with semaphore:
                        info = await backend.analyze_tag(item.image_path)
            except AnalysisError as e:
                logger.warning("Unreadable tag %s: %s", item.image_path, e)
                if _still_pending(item.id):
                    self.fail(item.id, UNREADABLE_REASON)
            except Exception:
                logger.exception("Analysis failed for %s", item.image_path)
                if _still_pending(item.id):
                    self.fail(item.id, NETWORK_REASON)
            else:
                if _still_pending(item.id):
                    self.complete(item.id, info)

        await asyncio.gather(*(_run(item) for item in targets))
        return self.ranking()
