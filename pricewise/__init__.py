"""Grocery price-tag comparison: unit normalization and ranking."""

from .camera import CameraCapture, TagCamera, collect_uploads
from .config import (
    CameraConfig,
    CompareConfig,
    PriceWiseConfig,
    VisionConfig,
    load_config,
)
from .entry import ManualEntryError, parse_manual_entry
from .models import Item, ItemStatus, ProductInfo, Scale, UnitCategory
from .normalizer import DisplayRate, NormalizedRates, normalize, select_display_rate
from .ranker import RankedEntry, Ranking, rank, sort_key
from .session import (
    AddBatch,
    AddEntry,
    RemoveItem,
    Reset,
    Session,
    SessionState,
    ToggleScale,
    UpdateItem,
)
from .vision import AnalysisError, VisionBackend, create_backend

__all__ = [
    "TagCamera",
    "CameraCapture",
    "collect_uploads",
    "VisionBackend",
    "AnalysisError",
    "create_backend",
    "Item",
    "ItemStatus",
    "ProductInfo",
    "Scale",
    "UnitCategory",
    "normalize",
    "select_display_rate",
    "NormalizedRates",
    "DisplayRate",
    "rank",
    "sort_key",
    "Ranking",
    "RankedEntry",
    "Session",
    "SessionState",
    "AddBatch",
    "AddEntry",
    "UpdateItem",
    "RemoveItem",
    "ToggleScale",
    "Reset",
    "ManualEntryError",
    "parse_manual_entry",
    "PriceWiseConfig",
    "CameraConfig",
    "VisionConfig",
    "CompareConfig",
    "load_config",
]
