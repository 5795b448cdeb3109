from kappa.services.controllers import ConfirmController


def test_second_press_within_window_commits() -> None:
    controller = ConfirmController()

    first = controller.press("debut", now=10.0)
    second = controller.press("debut", now=12.5)

    assert first.phase == "armed"
    assert controller.phase == "committed"
    assert second.committed
    assert second.quest_id == "debut"


def test_press_after_timeout_rearms() -> None:
    controller = ConfirmController()

    controller.press("debut", now=0.0)
    result = controller.press("debut", now=3.5)

    assert result.phase == "armed"
    assert controller.pending_quest_id == "debut"


def test_tick_disarms_after_timeout() -> None:
    controller = ConfirmController(timeout_seconds=3.0)
    controller.press("debut", now=0.0)

    assert controller.tick(now=3.0) is False
    assert controller.tick(now=3.1) is True
    assert controller.phase == "idle"
    assert controller.pending_quest_id is None


def test_pressing_another_quest_moves_the_arm() -> None:
    controller = ConfirmController()

    controller.press("debut", now=0.0)
    result = controller.press("checking", now=1.0)

    assert result.phase == "armed"
    assert controller.pending_quest_id == "checking"
    assert controller.press("checking", now=2.0).committed


def test_cancel_returns_to_idle() -> None:
    controller = ConfirmController()
    controller.press("debut", now=0.0)

    controller.cancel()

    assert controller.phase == "idle"
    assert not controller.press("debut", now=0.5).committed
