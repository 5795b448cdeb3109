"""Repository exports."""

from .progress_repo import ProgressRepository
from .quests_repo import QuestsRepository

__all__ = [
    "ProgressRepository",
    "QuestsRepository",
]
