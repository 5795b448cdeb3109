"""UI-agnostic controllers for tracker flow orchestration."""
from __future__ import annotations

from .confirm_controller import ConfirmController, ConfirmPhase, ConfirmResult

__all__ = [
    "ConfirmController",
    "ConfirmPhase",
    "ConfirmResult",
]
