"""File-backed store for per-user progress snapshots and activity history."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from kappa.data.errors import DataLoadError, DataReferenceError, ProgressStoreError
from kappa.data.json_loader import load_json, write_json
from kappa.domain.activity import ActivityEvent, UserIdentity
from kappa.domain.progress_state import (
    DEFAULT_PMC_LEVEL,
    DEFAULT_PRESTIGE,
    UserProgressState,
    reset_progress,
)

logger = logging.getLogger(__name__)

StorePayload = Dict[str, Any]


class ProgressRepository:
    """Owns every ``UserProgressState`` and is their only writer.

    Snapshots are replaced wholesale on ``save``; there is no partial-field
    update. Reads never fail: a missing user or an unreadable store yields the
    default snapshot and a logged warning.
    """

    STORE_VERSION = 1

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self, user_id: str) -> UserProgressState:
        payload = self._read_store(strict=False)
        record = payload["users"].get(user_id)
        if record is None:
            return reset_progress()
        return self._deserialize_state(record, user_id)

    def save(self, user_id: str, state: UserProgressState) -> None:
        payload = self._read_store(strict=True)
        record = payload["users"].setdefault(user_id, {"isPublic": True})
        record.update(self._serialize_state(state))
        self._write_store(payload)

    def reset(self, user_id: str) -> UserProgressState:
        state = reset_progress()
        self.save(user_id, state)
        return state

    def register_user(self, user_id: str, *, display_name: str | None = None, is_public: bool = True) -> None:
        payload = self._read_store(strict=True)
        record = payload["users"].setdefault(user_id, self._serialize_state(reset_progress()))
        record["displayName"] = display_name
        record["isPublic"] = is_public
        self._write_store(payload)

    def identity(self, user_id: str) -> UserIdentity:
        record = self._read_store(strict=False)["users"].get(user_id)
        if record is None:
            raise DataReferenceError(f"Unknown user '{user_id}'.")
        return self._build_identity(user_id, record)

    def user_ids(self) -> list[str]:
        return sorted(self._read_store(strict=False)["users"].keys())

    def public_snapshots(self) -> list[tuple[UserIdentity, UserProgressState]]:
        """Return ``(identity, state)`` for every user who opted into rankings."""
        users = self._read_store(strict=False)["users"]
        snapshots: list[tuple[UserIdentity, UserProgressState]] = []
        for user_id in sorted(users.keys()):
            record = users[user_id]
            if record.get("isPublic", True) is not True:
                continue
            snapshots.append((self._build_identity(user_id, record), self._deserialize_state(record, user_id)))
        return snapshots

    def append_activities(self, events: Iterable[ActivityEvent]) -> int:
        new_rows = [self._serialize_event(event) for event in events]
        if not new_rows:
            return 0
        payload = self._read_store(strict=True)
        payload["activities"].extend(new_rows)
        self._write_store(payload)
        return len(new_rows)

    def activities(self, user_id: str | None = None) -> list[ActivityEvent]:
        """Return stored activity in insertion order, optionally for one user."""
        events: List[ActivityEvent] = []
        for index, row in enumerate(self._read_store(strict=False)["activities"]):
            event = self._deserialize_event(row, index)
            if event is None:
                continue
            if user_id is not None and event.user_id != user_id:
                continue
            events.append(event)
        return events

    def _read_store(self, *, strict: bool) -> StorePayload:
        empty: StorePayload = {"store_version": self.STORE_VERSION, "users": {}, "activities": []}
        if not self._path.exists():
            return empty
        try:
            raw = load_json(self._path)
        except DataLoadError as exc:
            if strict:
                raise ProgressStoreError(f"Refusing to overwrite unreadable store: {exc}") from exc
            logger.warning("Progress store unreadable, using defaults: %s", exc)
            return empty
        if not isinstance(raw, dict) or not isinstance(raw.get("users"), dict):
            if strict:
                raise ProgressStoreError(f"Progress store {self._path} has an unexpected layout.")
            logger.warning("Progress store %s has an unexpected layout, using defaults.", self._path)
            return empty
        activities = raw.get("activities")
        return {
            "store_version": self.STORE_VERSION,
            "users": {key: value for key, value in raw["users"].items() if isinstance(value, dict)},
            "activities": activities if isinstance(activities, list) else [],
        }

    def _write_store(self, payload: StorePayload) -> None:
        try:
            write_json(self._path, payload)
        except OSError as exc:
            raise ProgressStoreError(f"Unable to write progress store {self._path}: {exc}") from exc

    @staticmethod
    def _serialize_state(state: UserProgressState) -> Dict[str, Any]:
        return {
            "pmcLevel": state.pmc_level,
            "prestige": state.prestige,
            "completedQuests": sorted(state.completed_quests),
        }

    @staticmethod
    def _deserialize_state(record: Mapping[str, Any], user_id: str) -> UserProgressState:
        pmc_level = record.get("pmcLevel", DEFAULT_PMC_LEVEL)
        prestige = record.get("prestige", DEFAULT_PRESTIGE)
        completed = record.get("completedQuests", [])
        if isinstance(pmc_level, bool) or not isinstance(pmc_level, int):
            logger.warning("User '%s' has invalid pmcLevel %r; using default.", user_id, pmc_level)
            pmc_level = DEFAULT_PMC_LEVEL
        if isinstance(prestige, bool) or not isinstance(prestige, int):
            logger.warning("User '%s' has invalid prestige %r; using default.", user_id, prestige)
            prestige = DEFAULT_PRESTIGE
        if not isinstance(completed, list):
            logger.warning("User '%s' has invalid completedQuests; treating as empty.", user_id)
            completed = []
        return UserProgressState.build(
            pmc_level=pmc_level,
            prestige=prestige,
            completed_quests=[entry for entry in completed if isinstance(entry, str)],
        )

    @staticmethod
    def _build_identity(user_id: str, record: Mapping[str, Any]) -> UserIdentity:
        display_name = record.get("displayName")
        return UserIdentity(user_id=user_id, display_name=display_name if isinstance(display_name, str) else None)

    @staticmethod
    def _serialize_event(event: ActivityEvent) -> Dict[str, Any]:
        return {
            "userId": event.user_id,
            "questId": event.quest_id,
            "questName": event.quest_name,
            "trader": event.trader,
            "completedAt": event.completed_at.isoformat(),
            "action": event.action,
        }

    @staticmethod
    def _deserialize_event(row: object, index: int) -> ActivityEvent | None:
        if not isinstance(row, dict):
            logger.warning("Skipping malformed activity row %d.", index)
            return None
        try:
            completed_at = datetime.fromisoformat(str(row["completedAt"]))
            user_id = str(row["userId"])
            quest_id = str(row["questId"])
        except (KeyError, ValueError) as exc:
            logger.warning("Skipping malformed activity row %d: %s", index, exc)
            return None
        if completed_at.tzinfo is None:
            completed_at = completed_at.replace(tzinfo=timezone.utc)
        action = "uncompleted" if row.get("action") == "uncompleted" else "completed"
        return ActivityEvent(
            user_id=user_id,
            quest_id=quest_id,
            quest_name=str(row.get("questName", quest_id)),
            trader=str(row.get("trader", "")),
            completed_at=completed_at,
            action=action,
        )
