"""Prerequisite graph over the quest catalog."""
from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Sequence, Tuple

from kappa.data.repositories import QuestsRepository
from kappa.domain.defs import QuestDef

Edge = Tuple[str, str]


class QuestGraph:
    """Forward and reverse prerequisite lookups, built once per catalog load.

    Edges are stored as ``(prerequisite_id, quest_id)`` pairs over the catalog
    records. The graph is not checked for cycles; only ``prerequisite_chain``
    walks more than one hop, and it keeps a visited set.
    """

    def __init__(self, quests: Iterable[QuestDef]) -> None:
        self._quests: Dict[str, QuestDef] = {}
        for quest in quests:
            self._quests.setdefault(quest.id, quest)
        self._edges: List[Edge] = []
        self._dependents: Dict[str, List[str]] = {}
        for quest in self._quests.values():
            for prerequisite_id in quest.prerequisite_ids:
                self._edges.append((prerequisite_id, quest.id))
                self._dependents.setdefault(prerequisite_id, []).append(quest.id)

    @classmethod
    def from_repository(cls, quests_repo: QuestsRepository) -> "QuestGraph":
        return cls(quests_repo.all())

    def __len__(self) -> int:
        return len(self._quests)

    def __contains__(self, quest_id: object) -> bool:
        return quest_id in self._quests

    def get(self, quest_id: str) -> QuestDef | None:
        return self._quests.get(quest_id)

    def quests(self) -> list[QuestDef]:
        """Return every quest in catalog order."""
        return list(self._quests.values())

    def kappa_quests(self) -> list[QuestDef]:
        return [quest for quest in self._quests.values() if quest.required_for_kappa]

    def edges(self) -> list[Edge]:
        return list(self._edges)

    def prerequisites_of(self, quest_id: str) -> Tuple[str, ...]:
        """Return the parsed prerequisite ids; unknown quests have none."""
        quest = self._quests.get(quest_id)
        if quest is None:
            return ()
        return quest.prerequisite_ids

    def has_readable_prerequisites(self, quest_id: str) -> bool:
        quest = self._quests.get(quest_id)
        return quest is None or quest.prerequisites_valid

    def dependents_of(self, quest_id: str, *, kappa_only: bool = False) -> list[QuestDef]:
        """Return quests that list ``quest_id`` as a prerequisite, in catalog order."""
        dependents = [self._quests[dependent_id] for dependent_id in self._dependents.get(quest_id, ())]
        if kappa_only:
            return [quest for quest in dependents if quest.required_for_kappa]
        return dependents

    def resolve(self, quest_ids: Sequence[str]) -> list[QuestDef]:
        """Map ids to records, silently dropping ids the catalog does not hold."""
        return [self._quests[quest_id] for quest_id in quest_ids if quest_id in self._quests]

    def dangling_references(self) -> list[Edge]:
        """Return edges whose prerequisite id is missing from the catalog."""
        return [edge for edge in self._edges if edge[0] not in self._quests]

    def prerequisite_chain(self, quest_id: str) -> list[str]:
        """Return all transitive prerequisite ids, nearest first.

        Each id appears once even when the data contains a cycle.
        """
        visited: set[str] = {quest_id}
        chain: List[str] = []
        queue = deque(self.prerequisites_of(quest_id))
        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            chain.append(current)
            queue.extend(self.prerequisites_of(current))
        return chain
