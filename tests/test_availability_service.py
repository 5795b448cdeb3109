from kappa.domain.defs import QuestDef
from kappa.domain.view_config import ViewConfig
from kappa.services.availability_service import LockReason, preview_names

from tests.helpers.quest_builders import abc_catalog, make_quest, make_resolver, make_state


def _ids(quests) -> list[str]:
    return [quest.id for quest in quests]


def test_fresh_user_sees_only_root_quest_available() -> None:
    resolver = make_resolver(abc_catalog())
    state = make_state(level=1)
    config = ViewConfig()

    assert _ids(resolver.available(state, config)) == ["A"]
    assert _ids(resolver.future(state, config)) == ["A", "B", "C"]
    assert _ids(resolver.finished(state, config)) == []
    assert _ids(resolver.missing_prerequisites(resolver.graph.get("C"), state)) == ["B"]


def test_level_gate_blocks_quest_with_completed_prerequisites() -> None:
    resolver = make_resolver(abc_catalog())
    state = make_state(level=4, completed=["A"])

    assert _ids(resolver.available(state, ViewConfig())) == []

    levelled = make_state(level=5, completed=["A"])
    assert _ids(resolver.available(levelled, ViewConfig())) == ["B"]


def test_available_and_finished_are_disjoint_and_future_is_complement() -> None:
    resolver = make_resolver(abc_catalog())
    state = make_state(level=10, completed=["A"])
    config = ViewConfig()

    available = set(_ids(resolver.available(state, config)))
    finished = set(_ids(resolver.finished(state, config)))
    future = set(_ids(resolver.future(state, config)))

    assert available.isdisjoint(finished)
    assert available <= future
    assert future | finished == {"A", "B", "C"}
    assert future.isdisjoint(finished)


def test_views_ignore_non_kappa_quests() -> None:
    resolver = make_resolver([make_quest("A"), make_quest("side", kappa=False)])

    assert _ids(resolver.future(make_state(), ViewConfig())) == ["A"]


def test_dangling_prerequisite_keeps_quest_locked_but_unnamed() -> None:
    resolver = make_resolver([make_quest("B", prerequisites=["ghost"])])
    quest = resolver.graph.get("B")
    state = make_state(level=10)

    assert not resolver.is_unlocked(quest, state)
    assert resolver.missing_prerequisites(quest, state) == []


def test_views_are_scoped_to_active_partition() -> None:
    resolver = make_resolver(
        [
            make_quest("customs", map_name="Customs", trader="Prapor"),
            make_quest("woods", map_name="Woods", trader="Therapist"),
        ]
    )
    state = make_state()

    assert _ids(resolver.available(state, ViewConfig().select_map("Woods"))) == ["woods"]
    assert _ids(resolver.available(state, ViewConfig().select_trader("Prapor"))) == ["customs"]
    assert _ids(resolver.available(state, ViewConfig())) == []


def test_quests_for_view_dispatches_on_view_mode() -> None:
    resolver = make_resolver(abc_catalog())
    state = make_state(completed=["A"])

    assert _ids(resolver.quests_for_view(state, ViewConfig(view_mode="finished"))) == ["A"]
    assert _ids(resolver.quests_for_view(state, ViewConfig(view_mode="future"))) == ["B", "C"]
    assert _ids(resolver.quests_for_view(state, ViewConfig())) == []


def test_lock_reason_prefers_level_over_missing_quests() -> None:
    resolver = make_resolver(abc_catalog())
    state = make_state(level=1)

    level_lock = resolver.lock_reason(resolver.graph.get("B"), state)
    assert level_lock is not None
    assert level_lock.missing_level
    assert level_lock.summary() == "Requires Level 5"

    quest_lock = resolver.lock_reason(resolver.graph.get("C"), state)
    assert quest_lock is not None
    assert quest_lock.summary() == "Complete: B"


def test_lock_reason_is_none_for_unlocked_or_finished_quests() -> None:
    resolver = make_resolver(abc_catalog())
    state = make_state(completed=["A"])

    assert resolver.lock_reason(resolver.graph.get("A"), state) is None
    assert resolver.lock_reason(resolver.graph.get("A"), make_state()) is None


def test_unlocks_lists_kappa_dependents_only() -> None:
    resolver = make_resolver(
        [make_quest("A"), make_quest("B", prerequisites=["A"]), make_quest("side", prerequisites=["A"], kappa=False)]
    )

    assert _ids(resolver.unlocks(resolver.graph.get("A"))) == ["B"]


def test_preview_names_counts_hidden_names() -> None:
    assert preview_names(["A"]) == "A"
    assert preview_names(["A", "B"]) == "A, B"
    assert preview_names(["A", "B", "C", "D"]) == "A, B (+2 more)"


def test_lock_reason_summary_truncates_long_lists() -> None:
    quests = [make_quest(name) for name in ("One", "Two", "Three")]
    reason = LockReason(quest_id="X", required_level=None, missing_quests=quests)

    assert reason.summary() == "Complete: One, Two (+1 more)"


def test_unreadable_prerequisites_do_not_block() -> None:
    quest = QuestDef(id="B", name="B", trader="Prapor", level=3, prerequisites_valid=False, required_for_kappa=True)
    resolver = make_resolver([quest])

    assert resolver.is_unlocked(quest, make_state(level=3))
    assert not resolver.graph.has_readable_prerequisites("B")
