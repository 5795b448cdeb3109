"""UI-agnostic two-step confirmation for quest completion."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ConfirmPhase = Literal["idle", "armed", "committed"]

DEFAULT_CONFIRM_TIMEOUT_SECONDS = 3.0


@dataclass(slots=True)
class ConfirmResult:
    phase: ConfirmPhase
    quest_id: str

    @property
    def committed(self) -> bool:
        return self.phase == "committed"


class ConfirmController:
    """
    Arm-then-commit state machine for destructive quest actions.

    The first ``press`` for a quest arms it. A second ``press`` on the same
    quest within ``timeout_seconds`` commits it. ``tick`` disarms an armed
    quest once the timeout passes, and pressing a different quest re-arms on
    that quest instead.

    Time is passed in explicitly (any monotonic seconds value), so the
    controller owns no timers and never touches progress state. Callers apply
    ``mark_completed`` themselves when a press reports ``committed``.
    """

    def __init__(self, *, timeout_seconds: float = DEFAULT_CONFIRM_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout_seconds
        self._phase: ConfirmPhase = "idle"
        self._pending_quest_id: str | None = None
        self._armed_at = 0.0

    @property
    def phase(self) -> ConfirmPhase:
        return self._phase

    @property
    def pending_quest_id(self) -> str | None:
        return self._pending_quest_id if self._phase == "armed" else None

    def press(self, quest_id: str, now: float) -> ConfirmResult:
        self.tick(now)
        if self._phase == "armed" and self._pending_quest_id == quest_id:
            self._phase = "committed"
            self._pending_quest_id = None
            return ConfirmResult(phase="committed", quest_id=quest_id)
        self._phase = "armed"
        self._pending_quest_id = quest_id
        self._armed_at = now
        return ConfirmResult(phase="armed", quest_id=quest_id)

    def tick(self, now: float) -> bool:
        """Disarm when the confirmation window has elapsed; True if it did."""
        if self._phase == "armed" and now - self._armed_at > self._timeout:
            self.cancel()
            return True
        return False

    def cancel(self) -> None:
        self._phase = "idle"
        self._pending_quest_id = None
