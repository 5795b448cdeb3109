"""Progress persistence orchestration, summaries and activity tracking."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List

from kappa.data.repositories import ProgressRepository
from kappa.domain.activity import ActivityEvent, ProgressSummary, UserIdentity
from kappa.domain.progress_state import (
    UserProgressState,
    mark_completed,
    mark_uncompleted,
    set_pmc_level,
    set_prestige,
)
from kappa.services.quest_graph import QuestGraph
from kappa.services.statistics_service import StatisticsAggregator, UserStatistics

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class ProgressUpdate:
    state: UserProgressState
    events: List[ActivityEvent]


def summarize_progress(identity: UserIdentity, state: UserProgressState, graph: QuestGraph) -> ProgressSummary:
    """Build the ranking summary for one user.

    ``total_completed`` counts raw ids, including ones the catalog no longer
    holds; the rate is relative to the current number of Kappa quests.
    """
    total_kappa = len(graph.kappa_quests())
    total_completed = len(state.completed_quests)
    completion_rate = total_completed / total_kappa * 100 if total_kappa > 0 else 0.0
    return ProgressSummary(
        identity=identity,
        pmc_level=state.pmc_level,
        prestige=state.prestige,
        total_completed=total_completed,
        completion_rate=completion_rate,
    )


def diff_progress(
    previous: UserProgressState,
    current: UserProgressState,
    graph: QuestGraph,
    *,
    user_id: str,
    at: datetime,
) -> list[ActivityEvent]:
    """Return activity records for quests completed or uncompleted between snapshots.

    Ids the catalog does not hold produce no record.
    """
    added = current.completed_quests - previous.completed_quests
    removed = previous.completed_quests - current.completed_quests
    events: List[ActivityEvent] = []
    for quest in graph.quests():
        if quest.id in added:
            action = "completed"
        elif quest.id in removed:
            action = "uncompleted"
        else:
            continue
        events.append(
            ActivityEvent(
                user_id=user_id,
                quest_id=quest.id,
                quest_name=quest.name,
                trader=quest.trader,
                completed_at=at,
                action=action,
            )
        )
    return events


class ProgressService:
    """Applies progress transforms and persists the resulting snapshots.

    Every change loads the stored snapshot, derives a new one, replaces it
    wholesale in the store and appends activity for the quests it touched.
    """

    def __init__(
        self,
        *,
        progress_repo: ProgressRepository,
        graph: QuestGraph,
        statistics: StatisticsAggregator | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._progress_repo = progress_repo
        self._graph = graph
        self._statistics = statistics or StatisticsAggregator()
        self._clock = clock

    def load(self, user_id: str) -> UserProgressState:
        return self._progress_repo.load(user_id)

    def replace(self, user_id: str, new_state: UserProgressState) -> ProgressUpdate:
        previous = self._progress_repo.load(user_id)
        events = diff_progress(previous, new_state, self._graph, user_id=user_id, at=self._clock())
        self._progress_repo.save(user_id, new_state)
        self._progress_repo.append_activities(events)
        if events:
            logger.info("User '%s' progress saved with %d activity record(s).", user_id, len(events))
        return ProgressUpdate(state=new_state, events=events)

    def complete_quest(self, user_id: str, quest_id: str) -> ProgressUpdate:
        return self.replace(user_id, mark_completed(self.load(user_id), quest_id))

    def uncomplete_quest(self, user_id: str, quest_id: str) -> ProgressUpdate:
        return self.replace(user_id, mark_uncompleted(self.load(user_id), quest_id))

    def set_level(self, user_id: str, level: int) -> ProgressUpdate:
        return self.replace(user_id, set_pmc_level(self.load(user_id), level))

    def set_prestige(self, user_id: str, prestige: int) -> ProgressUpdate:
        return self.replace(user_id, set_prestige(self.load(user_id), prestige))

    def reset(self, user_id: str) -> UserProgressState:
        state = self._progress_repo.reset(user_id)
        logger.info("User '%s' progress reset.", user_id)
        return state

    def public_activities(self) -> list[ActivityEvent]:
        """Stored activity of users who opted into rankings, in insertion order."""
        public_ids = {identity.user_id for identity, _ in self._progress_repo.public_snapshots()}
        return [event for event in self._progress_repo.activities() if event.user_id in public_ids]

    def summaries(self) -> list[ProgressSummary]:
        return [
            summarize_progress(identity, state, self._graph)
            for identity, state in self._progress_repo.public_snapshots()
        ]

    def statistics(self) -> list[UserStatistics]:
        """Per public user: identity, recent activity and downsampled series."""
        activities = self._progress_repo.activities()
        return [
            self._statistics.user_statistics(identity, activities)
            for identity, _ in self._progress_repo.public_snapshots()
        ]
