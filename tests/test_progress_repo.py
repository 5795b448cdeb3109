import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from kappa.data.errors import DataReferenceError, ProgressStoreError
from kappa.data.repositories import ProgressRepository
from kappa.domain.activity import ActivityEvent, UserIdentity
from kappa.domain.progress_state import UserProgressState


def _store(tmp_path: Path) -> ProgressRepository:
    return ProgressRepository(tmp_path / "progress.json")


def test_missing_user_gets_default_snapshot(tmp_path: Path) -> None:
    repo = _store(tmp_path)

    assert repo.load("nobody") == UserProgressState()
    assert not repo.path.exists()


def test_save_replaces_snapshot_wholesale(tmp_path: Path) -> None:
    repo = _store(tmp_path)
    repo.save("u1", UserProgressState.build(pmc_level=20, prestige=1, completed_quests=["a", "b"]))
    repo.save("u1", UserProgressState.build(pmc_level=21, completed_quests=["c"]))

    state = repo.load("u1")
    assert state == UserProgressState.build(pmc_level=21, prestige=0, completed_quests=["c"])

    raw = json.loads(repo.path.read_text(encoding="utf-8"))
    assert raw["store_version"] == ProgressRepository.STORE_VERSION
    assert raw["users"]["u1"]["completedQuests"] == ["c"]


def test_reset_stores_defaults(tmp_path: Path) -> None:
    repo = _store(tmp_path)
    repo.save("u1", UserProgressState.build(pmc_level=30, completed_quests=["a"]))

    assert repo.reset("u1") == UserProgressState()
    assert repo.load("u1") == UserProgressState()


def test_corrupt_store_reads_as_defaults_but_refuses_writes(tmp_path: Path) -> None:
    repo = _store(tmp_path)
    repo.path.write_text("{not json", encoding="utf-8")

    assert repo.load("u1") == UserProgressState()
    assert repo.public_snapshots() == []
    with pytest.raises(ProgressStoreError):
        repo.save("u1", UserProgressState())
    assert repo.path.read_text(encoding="utf-8") == "{not json"


def test_invalid_fields_fall_back_per_field(tmp_path: Path) -> None:
    repo = _store(tmp_path)
    repo.path.write_text(
        json.dumps({"users": {"u1": {"pmcLevel": "ten", "prestige": 2, "completedQuests": ["a", 5]}}}),
        encoding="utf-8",
    )

    assert repo.load("u1") == UserProgressState.build(pmc_level=1, prestige=2, completed_quests=["a"])


def test_public_snapshots_skip_private_users(tmp_path: Path) -> None:
    repo = _store(tmp_path)
    repo.register_user("b_user", display_name="Bee")
    repo.register_user("a_user", is_public=False)
    repo.save("c_user", UserProgressState.build(pmc_level=5))

    snapshots = repo.public_snapshots()

    assert [identity.user_id for identity, _ in snapshots] == ["b_user", "c_user"]
    assert snapshots[0][0].label == "Bee"
    assert repo.user_ids() == ["a_user", "b_user", "c_user"]


def test_identity_of_unknown_user_raises(tmp_path: Path) -> None:
    repo = _store(tmp_path)
    repo.register_user("u1", display_name="Tagilla")

    assert repo.identity("u1") == UserIdentity("u1", "Tagilla")
    with pytest.raises(DataReferenceError):
        repo.identity("ghost")


def test_activities_append_and_filter(tmp_path: Path) -> None:
    repo = _store(tmp_path)
    at = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    events = [
        ActivityEvent(user_id="u1", quest_id="a", quest_name="A", trader="Prapor", completed_at=at),
        ActivityEvent(
            user_id="u2", quest_id="b", quest_name="B", trader="Skier", completed_at=at, action="uncompleted"
        ),
    ]

    assert repo.append_activities(events) == 2
    assert repo.append_activities([]) == 0
    assert repo.activities() == events
    assert [event.quest_id for event in repo.activities("u2")] == ["b"]


def test_malformed_activity_rows_are_skipped(tmp_path: Path) -> None:
    repo = _store(tmp_path)
    repo.path.write_text(
        json.dumps(
            {
                "users": {},
                "activities": [
                    "junk",
                    {"userId": "u1", "questId": "a"},
                    {"userId": "u1", "questId": "a", "completedAt": "2024-05-01T12:00:00"},
                ],
            }
        ),
        encoding="utf-8",
    )

    events = repo.activities()

    assert len(events) == 1
    assert events[0].completed_at.tzinfo == timezone.utc
    assert events[0].action == "completed"
