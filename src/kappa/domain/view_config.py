"""Immutable view configuration threaded through partition queries."""
from __future__ import annotations

from dataclasses import dataclass, replace

from kappa.core.types import PartitionMode, ViewMode
from kappa.domain.defs import ANY_LOCATION

DEFAULT_TRADER = "Prapor"


@dataclass(frozen=True, slots=True)
class ViewConfig:
    """Which quests are visible (``view_mode``) and how they are grouped.

    Only one of ``active_map``/``active_trader`` is meaningful at a time;
    switching the partition axis resets the other selection to its default.
    """

    view_mode: ViewMode = "available"
    partition_mode: PartitionMode = "by_map"
    active_map: str = ANY_LOCATION
    active_trader: str = DEFAULT_TRADER

    @property
    def active_partition(self) -> str:
        if self.partition_mode == "by_trader":
            return self.active_trader
        return self.active_map

    def with_view_mode(self, view_mode: ViewMode) -> "ViewConfig":
        return replace(self, view_mode=view_mode)

    def select_map(self, map_name: str) -> "ViewConfig":
        return replace(
            self,
            partition_mode="by_map",
            active_map=map_name,
            active_trader=DEFAULT_TRADER,
        )

    def select_trader(self, trader: str) -> "ViewConfig":
        return replace(
            self,
            partition_mode="by_trader",
            active_trader=trader,
            active_map=ANY_LOCATION,
        )

    def with_partition_mode(self, partition_mode: PartitionMode) -> "ViewConfig":
        if partition_mode == self.partition_mode:
            return self
        if partition_mode == "by_trader":
            return self.select_trader(DEFAULT_TRADER)
        return self.select_map(ANY_LOCATION)
