from datetime import datetime, timezone

from kappa.domain.activity import ActivityEvent, RankingEntry, UserIdentity
from kappa.presentation.cli.render import (
    format_activity,
    format_item_overview,
    format_partition_tab,
    format_prestige,
    format_quest_line,
    format_ranking_row,
    render_menu,
)
from kappa.services.availability_service import LockReason
from kappa.services.view_partitioner import ItemTally, PartitionStats, PartitionTab, RequiredItemsOverview


def test_render_menu_numbers_options(capsys) -> None:
    render_menu("Main Menu", ["Show Quests", "Quit"])

    out = capsys.readouterr().out
    assert "=== Main Menu ===" in out
    assert "1. Show Quests" in out
    assert "2. Quit" in out


def test_partition_tab_marks_active() -> None:
    tab = PartitionTab(value="Customs", stats=PartitionStats(total=12, completed=5, available=3), active=True)

    assert format_partition_tab(tab) == "* Customs (3) 5/12"


def test_quest_line_with_lock_and_unlocks() -> None:
    lock = LockReason(quest_id="b", required_level=5)

    line = format_quest_line("Checking", "Prapor", 5, lock, ["Shootout Picnic", "Delivery", "Bad Rep"])

    assert line == (
        "Checking [Prapor, lvl 5] - locked: Requires Level 5 - unlocks: Shootout Picnic, Delivery (+1 more)"
    )


def test_prestige_labels() -> None:
    assert format_prestige(-1) == "PVE"
    assert format_prestige(0) == "-"
    assert format_prestige(3) == "3"


def test_ranking_row_uses_display_name() -> None:
    entry = RankingEntry(
        rank=1,
        identity=UserIdentity("u1", "Tagilla"),
        pmc_level=42,
        prestige=2,
        total_completed=120,
        completion_rate=87.456,
    )

    row = format_ranking_row(entry)
    assert row.startswith("#1")
    assert "Tagilla" in row
    assert "(87.5%)" in row


def test_activity_line() -> None:
    event = ActivityEvent(
        user_id="u1",
        quest_id="debut",
        quest_name="Debut",
        trader="Prapor",
        completed_at=datetime(2024, 5, 1, 9, 5, tzinfo=timezone.utc),
    )

    assert format_activity(event) == "2024-05-01 09:05 u1: Debut (Prapor)"


def test_item_overview_skips_empty_counts() -> None:
    overview = RequiredItemsOverview(
        markers=2,
        key_list=[ItemTally("Dorm 303", 1)],
        fir_list=[ItemTally("Salewa", 3)],
    )

    assert format_item_overview(overview) == ["Markers: 2", "Keys: Dorm 303", "Found in raid: Salewa x3"]
    assert format_item_overview(RequiredItemsOverview()) == []


def test_quest_line_flags_unreadable_prerequisites() -> None:
    line = format_quest_line("Debut", "Prapor", 1, None, [], gating_unreadable=True)

    assert line == "Debut [Prapor, lvl 1] - prerequisites unreadable"
