"""Service layer exports."""

from .availability_service import AvailabilityResolver, LockReason
from .progress_service import ProgressService, diff_progress, summarize_progress
from .quest_graph import QuestGraph
from .rankings_service import RankingsAggregator, map_rankings
from .statistics_service import StatisticsAggregator
from .view_partitioner import ViewPartitioner

__all__ = [
    "AvailabilityResolver",
    "LockReason",
    "ProgressService",
    "QuestGraph",
    "RankingsAggregator",
    "StatisticsAggregator",
    "ViewPartitioner",
    "diff_progress",
    "map_rankings",
    "summarize_progress",
]
