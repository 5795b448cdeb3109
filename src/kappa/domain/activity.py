"""Activity, summary and ranking records shared by the aggregators."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

ActivityAction = Literal["completed", "uncompleted"]


@dataclass(frozen=True, slots=True)
class UserIdentity:
    user_id: str
    display_name: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.user_id


@dataclass(frozen=True, slots=True)
class ActivityEvent:
    """Append-only record of a quest state change."""

    user_id: str
    quest_id: str
    quest_name: str
    trader: str
    completed_at: datetime
    action: ActivityAction = "completed"


@dataclass(frozen=True, slots=True)
class ProgressPoint:
    timestamp: datetime
    cumulative_count: int


@dataclass(frozen=True, slots=True)
class ProgressSummary:
    """Ranking input for one user; ``completion_rate`` is a 0-100 percentage."""

    identity: UserIdentity
    pmc_level: int
    prestige: int
    total_completed: int
    completion_rate: float


@dataclass(frozen=True, slots=True)
class RankingEntry:
    rank: int
    identity: UserIdentity
    pmc_level: int
    prestige: int
    total_completed: int
    completion_rate: float
