"""Helpers for resolving data file locations."""
from __future__ import annotations

import os
from pathlib import Path

QUESTS_FILENAME = "quests.json"
DEFINITIONS_ENV_VAR = "KAPPA_DEFINITIONS_PATH"


def get_repo_root() -> Path:
    """Return the repository root."""
    return Path(__file__).resolve().parents[3]


def get_definitions_path(base_path: Path | str | None = None) -> Path:
    """Return the directory holding the quest catalog.

    An explicit ``base_path`` wins, then ``KAPPA_DEFINITIONS_PATH``, then the
    bundled ``data/definitions`` directory.
    """
    if base_path is not None:
        return Path(base_path)
    override = os.environ.get(DEFINITIONS_ENV_VAR)
    if override:
        return Path(override)
    return get_repo_root() / "data" / "definitions"
