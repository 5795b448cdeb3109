"""Activity timelines and chart series for quest completion statistics."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterable, List, Sequence

from kappa.domain.activity import ActivityEvent, ProgressPoint, ProgressSummary, UserIdentity

ALL_USERS = "all"
DEFAULT_DOWNSAMPLE_WINDOW = timedelta(hours=1)
DEFAULT_ACTIVITY_LIMIT = 100
RECENT_ACTIVITY_LIMIT = 20


@dataclass(slots=True)
class UserStatistics:
    identity: UserIdentity
    activities: List[ActivityEvent] = field(default_factory=list)
    series: List[ProgressPoint] = field(default_factory=list)


@dataclass(slots=True)
class GlobalStats:
    total_users: int
    active_users: int
    avg_completion: float
    total_quests_completed: int
    recent_activities: List[ActivityEvent] = field(default_factory=list)


class StatisticsAggregator:
    """Merges per-user activity and reduces per-user chart series."""

    def __init__(self, *, window: timedelta = DEFAULT_DOWNSAMPLE_WINDOW) -> None:
        self._window = window

    def merge_timeline(
        self,
        activity_lists: Iterable[Sequence[ActivityEvent]],
        *,
        user_id: str = ALL_USERS,
        limit: int | None = None,
    ) -> list[ActivityEvent]:
        """Flatten per-user completions into one list, newest first.

        ``user_id`` narrows the result to a single user; ``"all"`` keeps
        everyone. Events sharing a timestamp keep their input order.
        """
        merged = [
            event
            for events in activity_lists
            for event in events
            if event.action == "completed" and (user_id == ALL_USERS or event.user_id == user_id)
        ]
        merged.sort(key=lambda event: event.completed_at, reverse=True)
        return merged if limit is None else merged[: max(0, limit)]

    def downsample(self, points: Sequence[ProgressPoint], window: timedelta | None = None) -> list[ProgressPoint]:
        """Collapse points that fall within ``window`` of their group's first point.

        Each group contributes only its last point, so the value at the end of
        every bucket survives and the final input point is always kept.
        """
        if not points:
            return []
        span = self._window if window is None else window
        reduced: List[ProgressPoint] = []
        group_start = points[0]
        group_last = points[0]
        for point in points[1:]:
            if point.timestamp - group_start.timestamp <= span:
                group_last = point
                continue
            reduced.append(group_last)
            group_start = point
            group_last = point
        reduced.append(group_last)
        return reduced

    def cumulative_series(self, events: Sequence[ActivityEvent]) -> list[ProgressPoint]:
        """Running completed-quest count after each event, oldest first."""
        total = 0
        series: List[ProgressPoint] = []
        for event in sorted(events, key=lambda item: item.completed_at):
            total = total + 1 if event.action == "completed" else max(0, total - 1)
            series.append(ProgressPoint(timestamp=event.completed_at, cumulative_count=total))
        return series

    def user_statistics(
        self,
        identity: UserIdentity,
        events: Sequence[ActivityEvent],
        *,
        activity_limit: int | None = DEFAULT_ACTIVITY_LIMIT,
    ) -> UserStatistics:
        """Bundle one user's recent activity with their downsampled chart series."""
        own_events = [event for event in events if event.user_id == identity.user_id]
        return UserStatistics(
            identity=identity,
            activities=self.merge_timeline([own_events], limit=activity_limit),
            series=self.downsample(self.cumulative_series(own_events)),
        )

    def global_stats(
        self,
        summaries: Sequence[ProgressSummary],
        activities: Sequence[ActivityEvent],
        *,
        recent_limit: int = RECENT_ACTIVITY_LIMIT,
    ) -> GlobalStats:
        total_completed = sum(summary.total_completed for summary in summaries)
        avg_completion = (
            sum(summary.completion_rate for summary in summaries) / len(summaries) if summaries else 0.0
        )
        return GlobalStats(
            total_users=len(summaries),
            active_users=sum(1 for summary in summaries if summary.total_completed > 0),
            avg_completion=math.floor(avg_completion * 10 + 0.5) / 10,
            total_quests_completed=total_completed,
            recent_activities=self.merge_timeline([activities], limit=recent_limit),
        )
