from svcat.GRAPH.dependency_graph import DependencyGraph, build_graph
from svcat.MODELS.service_record import DependencySpec, ServiceRecord


def make_record(name, version="1.0.0", deps=()):
    return ServiceRecord(
        name=name,
        declared_version=version,
        dependencies=[DependencySpec(target=t, required=r) for t, r in deps],
    )


def test_add_node_is_idempotent():
    graph = DependencyGraph()
    first = graph.add_node("db", "1.0.0")
    second = graph.add_node("db")
    assert first == second
    assert graph.node_count() == 1
    assert graph.version_of("db") == "1.0.0"


def test_add_edge_creates_missing_nodes():
    graph = DependencyGraph()
    graph.add_edge("api", "db", DependencySpec(target="db"))
    assert "api" in graph
    assert "db" in graph
    assert graph.neighbors("api") == ["db"]
    assert graph.neighbors("db") == []
    assert graph.edge_count() == 1


def test_build_graph_skips_missing_targets():
    graph = build_graph([
        make_record("api", deps=[("db", True), ("cache", False)]),
        make_record("db", version="2.1.0"),
    ])
    assert graph.nodes() == ["api", "db"]
    assert graph.neighbors("api") == ["db"]
    assert not graph.has_node("cache")
    assert graph.version_of("db") == "2.1.0"
    assert graph.version_of("missing") is None


def test_edges_carry_dependency_metadata():
    graph = build_graph([
        make_record("a", deps=[("b", True), ("c", False)]),
        make_record("b"),
        make_record("c"),
    ])
    edges = {(src, dst): spec.required for src, dst, spec in graph.edges()}
    assert edges == {("a", "b"): True, ("a", "c"): False}


def test_reverse_adjacency():
    graph = build_graph([
        make_record("a", deps=[("c", True)]),
        make_record("b", deps=[("c", False)]),
        make_record("c"),
    ])
    reverse = graph.reverse_adjacency()
    dependents = [(graph.name_of(src), spec.required) for src, spec in reverse[graph.index_of("c")]]
    assert dependents == [("a", True), ("b", False)]


def test_subgraph_keeps_only_internal_edges():
    graph = build_graph([
        make_record("a", deps=[("b", True), ("d", True)]),
        make_record("b", deps=[("c", True)]),
        make_record("c"),
        make_record("d"),
    ])
    sub = graph.subgraph(["b", "a", "c"])
    assert sub.nodes() == ["a", "b", "c"]
    assert sub.neighbors("a") == ["b"]
    assert sub.neighbors("b") == ["c"]
    assert len(sub) == 3


def test_repr():
    graph = build_graph([make_record("a", deps=[("b", True)]), make_record("b")])
    assert repr(graph) == "DependencyGraph(nodes=2, edges=1)"
