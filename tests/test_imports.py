def test_import_kappa_package() -> None:
    import importlib

    module = importlib.import_module("kappa")
    assert module is not None


def test_import_services_no_side_effects() -> None:
    from kappa.services import QuestGraph

    graph = QuestGraph([])
    assert len(graph) == 0
