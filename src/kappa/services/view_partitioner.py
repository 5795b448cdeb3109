"""Map/trader partitioning, per-partition counts and required-item overviews."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from kappa.core.types import PartitionMode, ViewMode
from kappa.domain.defs import ANY_LOCATION, QuestDef
from kappa.domain.progress_state import UserProgressState
from kappa.domain.view_config import ViewConfig
from kappa.services.availability_service import AvailabilityResolver

TRADER_ORDER: tuple[str, ...] = (
    "Prapor",
    "Therapist",
    "Fence",
    "Skier",
    "Peacekeeper",
    "Mechanic",
    "Ragman",
    "Jaeger",
    "Lightkeeper",
    "Ref",
)


@dataclass(slots=True)
class PartitionStats:
    total: int
    completed: int
    available: int


@dataclass(slots=True)
class PartitionTab:
    value: str
    stats: PartitionStats
    active: bool


@dataclass(slots=True)
class ItemTally:
    name: str
    count: int


@dataclass(slots=True)
class RequiredItemsOverview:
    markers: int = 0
    jammers: int = 0
    cameras: int = 0
    keys: int = 0
    fir: int = 0
    key_list: List[ItemTally] = field(default_factory=list)
    fir_list: List[ItemTally] = field(default_factory=list)


class ViewPartitioner:
    """Groups Kappa quests by map or trader and counts them per view mode."""

    def __init__(self, resolver: AvailabilityResolver) -> None:
        self._resolver = resolver

    def stats_for(
        self,
        partition_value: str,
        state: UserProgressState,
        view_mode: ViewMode,
        *,
        partition_mode: PartitionMode = "by_map",
    ) -> PartitionStats:
        quests = self._resolver.partition_quests(partition_mode, partition_value)
        completed = sum(1 for quest in quests if state.is_completed(quest.id))
        if view_mode == "finished":
            available = completed
        elif view_mode == "future":
            available = len(quests) - completed
        else:
            available = sum(
                1
                for quest in quests
                if not state.is_completed(quest.id) and self._resolver.is_unlocked(quest, state)
            )
        return PartitionStats(total=len(quests), completed=completed, available=available)

    def map_partitions(self, state: UserProgressState, view_mode: ViewMode) -> list[str]:
        """Maps ordered by descending ``available`` with Any Location pinned first."""
        maps = self._distinct(quest.map_name for quest in self._resolver.graph.kappa_quests())
        counts = {map_name: self.stats_for(map_name, state, view_mode).available for map_name in maps}
        ordered = sorted(
            (map_name for map_name in maps if map_name != ANY_LOCATION),
            key=lambda map_name: -counts[map_name],
        )
        if ANY_LOCATION in counts:
            ordered.insert(0, ANY_LOCATION)
        return ordered

    def trader_partitions(self) -> list[str]:
        """Traders in canonical order; unlisted traders follow in catalog order."""
        traders = self._distinct(
            quest.trader for quest in self._resolver.graph.kappa_quests() if quest.trader
        )
        rank = {trader: index for index, trader in enumerate(TRADER_ORDER)}
        return sorted(traders, key=lambda trader: rank.get(trader, len(TRADER_ORDER)))

    def partitions(self, state: UserProgressState, config: ViewConfig) -> list[PartitionTab]:
        if config.partition_mode == "by_trader":
            values = self.trader_partitions()
        else:
            values = self.map_partitions(state, config.view_mode)
        return [
            PartitionTab(
                value=value,
                stats=self.stats_for(value, state, config.view_mode, partition_mode=config.partition_mode),
                active=value == config.active_partition,
            )
            for value in values
        ]

    def required_items(self, state: UserProgressState, config: ViewConfig) -> RequiredItemsOverview:
        """Tally required items across the quests visible under ``config``."""
        return tally_required_items(self._resolver.quests_for_view(state, config))

    @staticmethod
    def _distinct(values: Iterable[str]) -> list[str]:
        seen: Dict[str, None] = {}
        for value in values:
            seen.setdefault(value, None)
        return list(seen)


def tally_required_items(quests: Sequence[QuestDef]) -> RequiredItemsOverview:
    overview = RequiredItemsOverview()
    keys: Dict[str, int] = {}
    fir_items: Dict[str, int] = {}
    for quest in quests:
        for item in quest.required_items:
            if item.category == "markers":
                overview.markers += item.count
            elif item.category == "jammers":
                overview.jammers += item.count
            elif item.category == "cameras":
                overview.cameras += item.count
            elif item.category == "keys":
                overview.keys += 1
                keys[item.label] = max(keys.get(item.label, 0), item.count)
            elif item.category == "fir":
                overview.fir += item.count
                fir_items[item.name] = max(fir_items.get(item.name, 0), item.count)
    overview.key_list = _sorted_tallies(keys)
    overview.fir_list = _sorted_tallies(fir_items)
    return overview


def _sorted_tallies(counts: Dict[str, int]) -> List[ItemTally]:
    return [ItemTally(name=name, count=counts[name]) for name in sorted(counts, key=str.casefold)]
