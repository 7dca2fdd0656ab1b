import pytest
from svcat import critical_impact, detailed_impact, find_impact
from svcat.GRAPH.dependency_graph import DependencyGraph
from svcat.MODELS.service_record import DependencySpec
from svcat.RUNNERS.impact_analyzer import ImpactAnalyzer
from svcat.config import CriticalityMode
from svcat.errors import ServiceNotFoundError


def chain(*links):
    graph = DependencyGraph()
    for src, dst, required in links:
        graph.add_edge(src, dst, DependencySpec(target=dst, required=required))
    return graph


def test_find_impact_nearest_first():
    graph = chain(("A", "B", True), ("B", "D", True))
    assert find_impact(graph, "D") == ["B", "A"]
    assert find_impact(graph, "A") == []


def test_critical_impact_required_chain():
    graph = chain(("A", "B", True), ("B", "D", True))
    assert critical_impact(graph, "D") == ["B", "A"]


def test_optional_edge_is_not_critical():
    graph = chain(("A", "B", True), ("A", "C", False), ("B", "D", True))
    assert find_impact(graph, "C") == ["A"]
    assert critical_impact(graph, "C") == []


def test_detailed_impact_paths():
    graph = chain(("A", "B", True), ("B", "D", False))
    infos = detailed_impact(graph, "D")
    assert [i.service for i in infos] == ["B", "A"]
    assert infos[0].path == ["D", "B"]
    assert infos[0].is_required is False
    assert infos[1].path == ["D", "B", "A"]
    assert infos[1].is_required is True
    assert "'D'" in infos[1].description


def test_detailed_impact_first_path_wins():
    # A reaches D both directly and through B; the direct hop is found first.
    graph = chain(("A", "D", False), ("B", "D", True), ("A", "B", True))
    infos = {i.service: i for i in detailed_impact(graph, "D")}
    assert infos["A"].path == ["D", "A"]
    assert infos["A"].is_required is False


def test_transitive_and_local_modes_differ():
    # A requires B, B only optionally uses D.
    graph = chain(("A", "B", True), ("B", "D", False))
    assert ImpactAnalyzer(CriticalityMode.TRANSITIVE).critical_impact(graph, "D") == []
    assert ImpactAnalyzer(CriticalityMode.LOCAL).critical_impact(graph, "D") == ["A"]


def test_mode_accepts_plain_string():
    assert ImpactAnalyzer("local").criticality == CriticalityMode.LOCAL


def test_unknown_service():
    graph = chain(("A", "B", True))
    analyzer = ImpactAnalyzer()
    with pytest.raises(ServiceNotFoundError):
        analyzer.detailed_impact(graph, "nope")
    with pytest.raises(ServiceNotFoundError):
        analyzer.find_impact(graph, "nope")
    with pytest.raises(ServiceNotFoundError):
        analyzer.critical_impact(graph, "nope")
