"""Per-user progress snapshot and its pure transforms."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable

DEFAULT_PMC_LEVEL = 1
DEFAULT_PRESTIGE = 0
PVE_PRESTIGE = -1


@dataclass(frozen=True, slots=True)
class UserProgressState:
    """Snapshot of one user's progress.

    Instances are never mutated; every transform below returns a new state so
    the progress store stays the only writer.
    """

    pmc_level: int = DEFAULT_PMC_LEVEL
    prestige: int = DEFAULT_PRESTIGE
    completed_quests: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        *,
        pmc_level: int = DEFAULT_PMC_LEVEL,
        prestige: int = DEFAULT_PRESTIGE,
        completed_quests: Iterable[str] = (),
    ) -> "UserProgressState":
        return cls(
            pmc_level=max(DEFAULT_PMC_LEVEL, pmc_level),
            prestige=max(PVE_PRESTIGE, prestige),
            completed_quests=frozenset(completed_quests),
        )

    @property
    def is_pve(self) -> bool:
        return self.prestige == PVE_PRESTIGE

    def is_completed(self, quest_id: str) -> bool:
        return quest_id in self.completed_quests


def mark_completed(state: UserProgressState, quest_id: str) -> UserProgressState:
    if quest_id in state.completed_quests:
        return state
    return replace(state, completed_quests=state.completed_quests | {quest_id})


def mark_uncompleted(state: UserProgressState, quest_id: str) -> UserProgressState:
    if quest_id not in state.completed_quests:
        return state
    return replace(state, completed_quests=state.completed_quests - {quest_id})


def set_pmc_level(state: UserProgressState, level: int) -> UserProgressState:
    return replace(state, pmc_level=max(DEFAULT_PMC_LEVEL, level))


def set_prestige(state: UserProgressState, prestige: int) -> UserProgressState:
    return replace(state, prestige=max(PVE_PRESTIGE, prestige))


def reset_progress() -> UserProgressState:
    """Return the default snapshot (level 1, prestige 0, nothing completed)."""
    return UserProgressState()
