"""Shared CLI rendering helpers."""
from __future__ import annotations

from typing import Iterable, Sequence

from kappa.domain.activity import ActivityEvent, RankingEntry
from kappa.domain.progress_state import PVE_PRESTIGE
from kappa.services.availability_service import LockReason, preview_names
from kappa.services.view_partitioner import PartitionTab, RequiredItemsOverview


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")


def format_partition_tab(tab: PartitionTab) -> str:
    """Tab label in the form ``Customs (3) 5/12``; the active tab is starred."""
    marker = "*" if tab.active else " "
    return f"{marker} {tab.value} ({tab.stats.available}) {tab.stats.completed}/{tab.stats.total}"


def format_quest_line(
    name: str,
    trader: str,
    level: int,
    lock: LockReason | None,
    unlocks: Sequence[str],
    *,
    gating_unreadable: bool = False,
) -> str:
    line = f"{name} [{trader}, lvl {level}]"
    if gating_unreadable:
        line += " - prerequisites unreadable"
    if lock is not None and lock.summary():
        line += f" - locked: {lock.summary()}"
    if unlocks:
        line += f" - unlocks: {preview_names(list(unlocks))}"
    return line


def format_prestige(prestige: int) -> str:
    if prestige == PVE_PRESTIGE:
        return "PVE"
    return str(prestige) if prestige > 0 else "-"


def format_ranking_row(entry: RankingEntry) -> str:
    return (
        f"#{entry.rank:<3} {entry.identity.label:<20} lvl {entry.pmc_level:<3} "
        f"prestige {format_prestige(entry.prestige):<4} {entry.total_completed:>4} "
        f"({entry.completion_rate:.1f}%)"
    )


def format_activity(event: ActivityEvent) -> str:
    stamp = event.completed_at.strftime("%Y-%m-%d %H:%M")
    return f"{stamp} {event.user_id}: {event.quest_name} ({event.trader})"


def format_item_overview(overview: RequiredItemsOverview) -> list[str]:
    lines = [
        f"{label}: {count}"
        for label, count in (
            ("Markers", overview.markers),
            ("Jammers", overview.jammers),
            ("Cameras", overview.cameras),
        )
        if count > 0
    ]
    if overview.key_list:
        lines.append("Keys: " + ", ".join(tally.name for tally in overview.key_list))
    if overview.fir_list:
        lines.append("Found in raid: " + ", ".join(f"{tally.name} x{tally.count}" for tally in overview.fir_list))
    return lines
