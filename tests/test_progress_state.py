from kappa.domain.progress_state import (
    UserProgressState,
    mark_completed,
    mark_uncompleted,
    reset_progress,
    set_pmc_level,
    set_prestige,
)


def test_mark_completed_is_idempotent() -> None:
    state = UserProgressState()

    once = mark_completed(state, "debut")
    twice = mark_completed(once, "debut")

    assert once.completed_quests == frozenset({"debut"})
    assert twice is once
    assert state.completed_quests == frozenset()


def test_mark_uncompleted_absent_id_is_noop() -> None:
    state = UserProgressState.build(completed_quests=["debut"])

    assert mark_uncompleted(state, "checking") is state
    assert mark_uncompleted(state, "debut").completed_quests == frozenset()


def test_build_clamps_level_and_prestige() -> None:
    state = UserProgressState.build(pmc_level=0, prestige=-5, completed_quests=["a", "a"])

    assert state.pmc_level == 1
    assert state.prestige == -1
    assert state.is_pve
    assert state.completed_quests == frozenset({"a"})


def test_level_and_prestige_setters_return_new_states() -> None:
    state = UserProgressState()

    levelled = set_pmc_level(state, 42)
    prestiged = set_prestige(levelled, 2)

    assert (levelled.pmc_level, levelled.prestige) == (42, 0)
    assert (prestiged.pmc_level, prestiged.prestige) == (42, 2)
    assert state.pmc_level == 1
    assert set_pmc_level(state, -3).pmc_level == 1


def test_reset_progress_returns_defaults() -> None:
    state = reset_progress()

    assert state == UserProgressState(pmc_level=1, prestige=0, completed_quests=frozenset())
    assert not state.is_pve
