"""Quest unlock resolution and per-view quest classification."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from kappa.core.types import PartitionMode, ViewMode
from kappa.domain.defs import QuestDef
from kappa.domain.progress_state import UserProgressState
from kappa.domain.view_config import ViewConfig
from kappa.services.quest_graph import QuestGraph

NAME_PREVIEW_LIMIT = 2


@dataclass(slots=True)
class LockReason:
    """Why a not-yet-completed quest cannot be started."""

    quest_id: str
    required_level: int | None
    missing_quests: List[QuestDef] = field(default_factory=list)

    @property
    def missing_level(self) -> bool:
        return self.required_level is not None

    def summary(self) -> str:
        if self.missing_level:
            return f"Requires Level {self.required_level}"
        if self.missing_quests:
            return f"Complete: {preview_names([quest.name for quest in self.missing_quests])}"
        return ""


def preview_names(names: Sequence[str], limit: int = NAME_PREVIEW_LIMIT) -> str:
    """Join the first ``limit`` names and count the rest, e.g. ``"A, B (+3 more)"``."""
    shown = ", ".join(names[:limit])
    hidden = len(names) - limit
    return f"{shown} (+{hidden} more)" if hidden > 0 else shown


def matches_partition(quest: QuestDef, partition_mode: PartitionMode, partition_value: str) -> bool:
    if partition_mode == "by_trader":
        return quest.trader == partition_value
    return quest.map_name == partition_value


class AvailabilityResolver:
    """Classifies Kappa quests as available, finished or future for a snapshot.

    Every query takes the state and view configuration explicitly and returns
    new lists; nothing is cached between calls.
    """

    def __init__(self, graph: QuestGraph) -> None:
        self._graph = graph

    @property
    def graph(self) -> QuestGraph:
        return self._graph

    def is_unlocked(self, quest: QuestDef, state: UserProgressState) -> bool:
        if state.pmc_level < quest.level:
            return False
        return all(
            prerequisite_id in state.completed_quests
            for prerequisite_id in self._graph.prerequisites_of(quest.id)
        )

    def partition_quests(self, partition_mode: PartitionMode, partition_value: str) -> list[QuestDef]:
        """Return the Kappa quests in one partition, in catalog order."""
        return [
            quest
            for quest in self._graph.kappa_quests()
            if matches_partition(quest, partition_mode, partition_value)
        ]

    def available(self, state: UserProgressState, config: ViewConfig) -> list[QuestDef]:
        return [
            quest
            for quest in self._scoped(config)
            if not state.is_completed(quest.id) and self.is_unlocked(quest, state)
        ]

    def finished(self, state: UserProgressState, config: ViewConfig) -> list[QuestDef]:
        return [quest for quest in self._scoped(config) if state.is_completed(quest.id)]

    def future(self, state: UserProgressState, config: ViewConfig) -> list[QuestDef]:
        return [quest for quest in self._scoped(config) if not state.is_completed(quest.id)]

    def quests_for_view(self, state: UserProgressState, config: ViewConfig) -> list[QuestDef]:
        """Dispatch on ``config.view_mode``."""
        view_mode: ViewMode = config.view_mode
        if view_mode == "finished":
            return self.finished(state, config)
        if view_mode == "future":
            return self.future(state, config)
        return self.available(state, config)

    def missing_prerequisites(self, quest: QuestDef, state: UserProgressState) -> list[QuestDef]:
        missing_ids = [
            prerequisite_id
            for prerequisite_id in self._graph.prerequisites_of(quest.id)
            if prerequisite_id not in state.completed_quests
        ]
        return self._graph.resolve(missing_ids)

    def lock_reason(self, quest: QuestDef, state: UserProgressState) -> LockReason | None:
        """Return why ``quest`` is locked, or None when it is unlocked or done."""
        if state.is_completed(quest.id) or self.is_unlocked(quest, state):
            return None
        required_level = quest.level if state.pmc_level < quest.level else None
        return LockReason(
            quest_id=quest.id,
            required_level=required_level,
            missing_quests=self.missing_prerequisites(quest, state),
        )

    def unlocks(self, quest: QuestDef) -> list[QuestDef]:
        """Kappa quests that list ``quest`` as a prerequisite."""
        return self._graph.dependents_of(quest.id, kappa_only=True)

    def _scoped(self, config: ViewConfig) -> list[QuestDef]:
        return self.partition_quests(config.partition_mode, config.active_partition)
