"""Shared type aliases for the core and domain layers."""
from typing import Literal

ViewMode = Literal["available", "finished", "future"]
PartitionMode = Literal["by_map", "by_trader"]
RankingMode = Literal["prestige", "completion"]
ItemCategory = Literal["keys", "markers", "jammers", "cameras", "fir"]
Severity = Literal["WARN", "ERROR"]

VIEW_MODES: tuple[ViewMode, ...] = ("available", "finished", "future")
PARTITION_MODES: tuple[PartitionMode, ...] = ("by_map", "by_trader")
ITEM_CATEGORIES: tuple[ItemCategory, ...] = ("keys", "markers", "jammers", "cameras", "fir")

__all__ = [
    "ITEM_CATEGORIES",
    "ItemCategory",
    "PARTITION_MODES",
    "PartitionMode",
    "RankingMode",
    "Severity",
    "VIEW_MODES",
    "ViewMode",
]
