"""Console-driven UI loop for the Kappa tracker."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple

from kappa.core.types import VIEW_MODES, ViewMode
from kappa.data.errors import DataLoadError, DataValidationError, ProgressStoreError
from kappa.data.repositories import ProgressRepository, QuestsRepository
from kappa.domain.defs import QuestDef
from kappa.domain.view_config import ViewConfig
from kappa.presentation.cli.config import (
    configure_logging,
    get_default_config_path,
    get_progress_store_path,
    load_config,
    save_config,
)
from kappa.presentation.cli.render import (
    format_activity,
    format_item_overview,
    format_partition_tab,
    format_quest_line,
    format_ranking_row,
    render_bullet_lines,
    render_heading,
    render_menu,
)
from kappa.services import (
    AvailabilityResolver,
    ProgressService,
    QuestGraph,
    RankingsAggregator,
    StatisticsAggregator,
    ViewPartitioner,
)
from kappa.services.controllers import ConfirmController

logger = logging.getLogger(__name__)

MenuEntry = Tuple[str, Callable[["TrackerSession"], bool]]


@dataclass
class TrackerSession:
    """Everything one CLI run needs: services, the user and the current view."""

    user_id: str
    graph: QuestGraph
    resolver: AvailabilityResolver
    partitioner: ViewPartitioner
    progress: ProgressService
    rankings: RankingsAggregator
    statistics: StatisticsAggregator
    config: Dict[str, Any]
    view: ViewConfig = field(default_factory=ViewConfig)
    confirm: ConfirmController = field(default_factory=ConfirmController)
    config_path: Path | None = None


def main() -> None:
    """Start the interactive CLI session."""
    config = load_config()
    configure_logging(config)
    session = build_session(config)
    session.config_path = get_default_config_path()
    print("=== Kappa Quest Tracker ===")
    running = True
    while running:
        entries = _main_menu_entries()
        render_menu("Main Menu", [label for label, _ in entries])
        choice = _prompt_index(len(entries))
        if choice is None:
            print(f"Invalid selection. Please enter 1-{len(entries)}.")
            continue
        running = entries[choice][1](session)
    print("Goodbye!")


def build_session(config: Dict[str, Any], *, store: ProgressRepository | None = None) -> TrackerSession:
    """Wire repositories and services; an unreadable catalog yields an empty one."""
    quests_repo = QuestsRepository(config.get("definitions_path"))
    try:
        graph = QuestGraph.from_repository(quests_repo)
    except (DataLoadError, DataValidationError) as exc:
        logger.error("Quest catalog unavailable, continuing with an empty catalog: %s", exc)
        graph = QuestGraph([])
    resolver = AvailabilityResolver(graph)
    statistics = StatisticsAggregator(window=timedelta(minutes=config["downsample_window_minutes"]))
    progress = ProgressService(
        progress_repo=store or ProgressRepository(get_progress_store_path()),
        graph=graph,
        statistics=statistics,
    )
    return TrackerSession(
        user_id=config["user_id"],
        graph=graph,
        resolver=resolver,
        partitioner=ViewPartitioner(resolver),
        progress=progress,
        rankings=RankingsAggregator(),
        statistics=statistics,
        config=config,
    )


def _main_menu_entries() -> List[MenuEntry]:
    return [
        ("Show Quests", _show_quests),
        ("Change View Mode", _change_view_mode),
        ("Switch Map/Trader", _switch_partition),
        ("Complete Quest", _complete_quest),
        ("Uncomplete Quest", _uncomplete_quest),
        ("Set PMC Level", _set_level),
        ("Set Prestige", _set_prestige),
        ("Rankings", _show_rankings),
        ("Recent Activity", _show_activity),
        ("Reset Progress", _reset_progress),
        ("Change User", _change_user),
        ("Quit", lambda session: False),
    ]


def _visible_quests(session: TrackerSession) -> List[QuestDef]:
    state = session.progress.load(session.user_id)
    return session.resolver.quests_for_view(state, session.view)


def _show_quests(session: TrackerSession) -> bool:
    state = session.progress.load(session.user_id)
    view = session.view
    render_heading(f"Level {state.pmc_level} - {view.view_mode} quests")
    for tab in session.partitioner.partitions(state, view):
        print(format_partition_tab(tab))
    quests = session.resolver.quests_for_view(state, view)
    render_heading(view.active_partition)
    if not quests:
        print("No quests in this view.")
    for index, quest in enumerate(quests, start=1):
        lock = session.resolver.lock_reason(quest, state) if view.view_mode == "future" else None
        unlocks = [dependent.name for dependent in session.resolver.unlocks(quest)]
        line = format_quest_line(
            quest.name,
            quest.trader,
            quest.level,
            lock,
            unlocks,
            gating_unreadable=not session.graph.has_readable_prerequisites(quest.id),
        )
        print(f"{index}. {line}")
    render_bullet_lines(format_item_overview(session.partitioner.required_items(state, view)))
    return True


def _change_view_mode(session: TrackerSession) -> bool:
    render_menu("View Mode", list(VIEW_MODES))
    choice = _prompt_index(len(VIEW_MODES))
    if choice is not None:
        view_mode: ViewMode = VIEW_MODES[choice]
        session.view = session.view.with_view_mode(view_mode)
    return True


def _switch_partition(session: TrackerSession) -> bool:
    render_menu("Group By", ["Map", "Trader"])
    axis = _prompt_index(2)
    if axis is None:
        return True
    state = session.progress.load(session.user_id)
    if axis == 0:
        values = session.partitioner.map_partitions(state, session.view.view_mode)
    else:
        values = session.partitioner.trader_partitions()
    if not values:
        print("No quests to group.")
        return True
    render_menu("Select", values)
    choice = _prompt_index(len(values))
    if choice is not None:
        if axis == 0:
            session.view = session.view.select_map(values[choice])
        else:
            session.view = session.view.select_trader(values[choice])
    return True


def _complete_quest(session: TrackerSession) -> bool:
    quest = _prompt_quest(session)
    if quest is None:
        return True
    armed_id = quest.id
    result = session.confirm.press(quest.id, time.monotonic())
    if not result.committed:
        print(f"Are you sure? Select '{quest.name}' again within 3 seconds to confirm.")
        quest = _prompt_quest(session)
        if quest is None:
            session.confirm.cancel()
            return True
        result = session.confirm.press(quest.id, time.monotonic())
    if result.committed:
        _persist(lambda: session.progress.complete_quest(session.user_id, result.quest_id))
        print("Quest completed.")
        return True
    session.confirm.cancel()
    if result.quest_id != armed_id:
        print("Selection changed; confirmation cancelled.")
    else:
        print("Confirmation expired.")
    return True


def _uncomplete_quest(session: TrackerSession) -> bool:
    quest = _prompt_quest(session)
    if quest is not None:
        _persist(lambda: session.progress.uncomplete_quest(session.user_id, quest.id))
    return True


def _set_level(session: TrackerSession) -> bool:
    level = _prompt_int("PMC level: ")
    if level is not None:
        _persist(lambda: session.progress.set_level(session.user_id, level))
    return True


def _set_prestige(session: TrackerSession) -> bool:
    prestige = _prompt_int("Prestige (-1 for PVE): ")
    if prestige is not None:
        _persist(lambda: session.progress.set_prestige(session.user_id, prestige))
    return True


def _show_rankings(session: TrackerSession) -> bool:
    render_menu("Sort By", ["Prestige first", "Completion first"])
    choice = _prompt_index(2)
    mode = "completion" if choice == 1 else "prestige"
    entries = session.rankings.leaderboard(
        session.progress.summaries(), mode, limit=session.config["rankings_limit"]
    )
    render_heading("Rankings")
    if not entries:
        print("No ranked players yet.")
    for entry in entries:
        print(format_ranking_row(entry))
    return True


def _show_activity(session: TrackerSession) -> bool:
    render_heading("Recent Activity")
    timeline = session.statistics.merge_timeline(
        [session.progress.public_activities()], limit=session.config["activity_limit"]
    )
    if not timeline:
        print("No quest completions yet.")
    for event in timeline:
        print(format_activity(event))
    return True


def _reset_progress(session: TrackerSession) -> bool:
    answer = input("Reset all progress? Type 'yes' to confirm: ").strip().lower()
    if answer == "yes":
        _persist(lambda: session.progress.reset(session.user_id))
        print("Progress reset.")
    return True


def _change_user(session: TrackerSession) -> bool:
    user_id = input(f"User id [{session.user_id}]: ").strip()
    if not user_id or user_id == session.user_id:
        return True
    session.user_id = user_id
    session.config["user_id"] = user_id
    session.confirm.cancel()
    try:
        save_config(session.config, session.config_path)
    except OSError as exc:
        logger.error("Could not save config: %s", exc)
        print("Switched user for this session only; config was not saved.")
        return True
    print(f"Now tracking progress for '{user_id}'.")
    return True


def _persist(action: Callable[[], object]) -> None:
    try:
        action()
    except ProgressStoreError as exc:
        logger.error("Could not save progress: %s", exc)
        print("Could not save progress; see log for details.")


def _prompt_quest(session: TrackerSession) -> QuestDef | None:
    quests = _visible_quests(session)
    if not quests:
        print("No quests in this view.")
        return None
    for index, quest in enumerate(quests, start=1):
        print(f"{index}. {quest.name}")
    choice = _prompt_index(len(quests))
    return quests[choice] if choice is not None else None


def _prompt_index(option_count: int) -> int | None:
    value = _prompt_int("Select an option: ")
    if value is None or not 1 <= value <= option_count:
        return None
    return value - 1


def _prompt_int(prompt: str) -> int | None:
    raw_value = input(prompt).strip()
    try:
        return int(raw_value)
    except ValueError:
        return None
