from kappa.services.quest_graph import QuestGraph

from tests.helpers.quest_builders import abc_catalog, make_quest


def test_prerequisites_and_dependents_follow_catalog_edges() -> None:
    graph = QuestGraph(abc_catalog())

    assert graph.prerequisites_of("C") == ("B",)
    assert graph.prerequisites_of("A") == ()
    assert [quest.id for quest in graph.dependents_of("A")] == ["B"]
    assert graph.edges() == [("A", "B"), ("B", "C")]


def test_unknown_quest_has_no_prerequisites() -> None:
    graph = QuestGraph(abc_catalog())

    assert graph.prerequisites_of("missing") == ()
    assert graph.get("missing") is None
    assert "missing" not in graph


def test_first_record_wins_on_duplicate_ids() -> None:
    graph = QuestGraph([make_quest("A", name="First"), make_quest("A", name="Second")])

    assert len(graph) == 1
    assert graph.get("A").name == "First"


def test_resolve_drops_dangling_ids_and_reports_them() -> None:
    graph = QuestGraph([make_quest("A"), make_quest("B", prerequisites=["A", "ghost"])])

    assert [quest.id for quest in graph.resolve(["ghost", "A"])] == ["A"]
    assert graph.dangling_references() == [("ghost", "B")]


def test_dependents_can_be_limited_to_kappa_quests() -> None:
    graph = QuestGraph(
        [
            make_quest("A"),
            make_quest("B", prerequisites=["A"]),
            make_quest("side", prerequisites=["A"], kappa=False),
        ]
    )

    assert [quest.id for quest in graph.dependents_of("A")] == ["B", "side"]
    assert [quest.id for quest in graph.dependents_of("A", kappa_only=True)] == ["B"]


def test_kappa_quests_keep_catalog_order() -> None:
    graph = QuestGraph([make_quest("Z"), make_quest("x", kappa=False), make_quest("M")])

    assert [quest.id for quest in graph.kappa_quests()] == ["Z", "M"]


def test_prerequisite_chain_is_breadth_first() -> None:
    graph = QuestGraph(
        [
            make_quest("root"),
            make_quest("left", prerequisites=["root"]),
            make_quest("right", prerequisites=["root"]),
            make_quest("top", prerequisites=["left", "right"]),
        ]
    )

    assert graph.prerequisite_chain("top") == ["left", "right", "root"]


def test_prerequisite_chain_terminates_on_cycles() -> None:
    graph = QuestGraph(
        [
            make_quest("A", prerequisites=["C"]),
            make_quest("B", prerequisites=["A"]),
            make_quest("C", prerequisites=["B"]),
        ]
    )

    assert graph.prerequisite_chain("A") == ["C", "B"]
