"""Deterministic leaderboards over user progress summaries."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from kappa.core.types import RankingMode
from kappa.domain.activity import ProgressSummary, RankingEntry, UserIdentity
from kappa.domain.defs import QuestDef
from kappa.domain.progress_state import PVE_PRESTIGE, UserProgressState

DEFAULT_RANKINGS_LIMIT = 50

SortKey = Tuple[int, float, float, float]


@dataclass(slots=True)
class MapRankingEntry:
    rank: int
    identity: UserIdentity
    pmc_level: int
    map_completed: int
    map_total: int
    map_completion_rate: float


def _prestige_weighted(summary: ProgressSummary) -> SortKey:
    return (_pve_bucket(summary), -summary.prestige, -summary.completion_rate, -summary.pmc_level)


def _completion_weighted(summary: ProgressSummary) -> SortKey:
    return (_pve_bucket(summary), -summary.completion_rate, -summary.prestige, -summary.pmc_level)


def _pve_bucket(summary: ProgressSummary) -> int:
    return 1 if summary.prestige == PVE_PRESTIGE else 0


_SORT_KEYS: dict[RankingMode, Callable[[ProgressSummary], SortKey]] = {
    "prestige": _prestige_weighted,
    "completion": _completion_weighted,
}


class RankingsAggregator:
    """Orders user summaries into a leaderboard.

    PVE users (prestige -1) always rank below everyone else. Within that split,
    ``"prestige"`` mode orders by prestige, completion rate, then PMC level and
    ``"completion"`` mode by completion rate, prestige, then PMC level, all
    descending. The sort is stable and ranks are never shared.
    """

    def rank(self, summaries: Sequence[ProgressSummary], mode: RankingMode = "prestige") -> list[RankingEntry]:
        try:
            sort_key = _SORT_KEYS[mode]
        except KeyError as exc:
            raise ValueError(f"Unknown ranking mode '{mode}'.") from exc
        ordered = sorted(summaries, key=sort_key)
        return [
            RankingEntry(
                rank=index + 1,
                identity=summary.identity,
                pmc_level=summary.pmc_level,
                prestige=summary.prestige,
                total_completed=summary.total_completed,
                completion_rate=summary.completion_rate,
            )
            for index, summary in enumerate(ordered)
        ]

    def leaderboard(
        self,
        summaries: Sequence[ProgressSummary],
        mode: RankingMode = "prestige",
        *,
        limit: int | None = DEFAULT_RANKINGS_LIMIT,
        offset: int = 0,
    ) -> list[RankingEntry]:
        """Rank users with at least one completed quest and return one page."""
        active = [summary for summary in summaries if summary.total_completed > 0]
        ranked = self.rank(active, mode)
        start = max(0, offset)
        if limit is None:
            return ranked[start:]
        return ranked[start : start + max(0, limit)]


def map_rankings(
    snapshots: Sequence[Tuple[UserIdentity, UserProgressState]],
    quests: Sequence[QuestDef],
    map_name: str,
    *,
    limit: int = DEFAULT_RANKINGS_LIMIT,
) -> list[MapRankingEntry]:
    """Rank users by completion of the Kappa quests on a single map."""
    map_quest_ids = {quest.id for quest in quests if quest.required_for_kappa and quest.map_name == map_name}
    map_total = len(map_quest_ids)
    rows: List[Tuple[UserIdentity, UserProgressState, int, float]] = []
    for identity, state in snapshots:
        map_completed = len(state.completed_quests & map_quest_ids)
        if map_completed == 0:
            continue
        rate = map_completed / map_total * 100 if map_total else 0.0
        rows.append((identity, state, map_completed, rate))
    rows.sort(key=lambda row: -row[3])
    return [
        MapRankingEntry(
            rank=index + 1,
            identity=identity,
            pmc_level=state.pmc_level,
            map_completed=map_completed,
            map_total=map_total,
            map_completion_rate=rate,
        )
        for index, (identity, state, map_completed, rate) in enumerate(rows[: max(0, limit)])
    ]
