import json
import threading
import time
from svcat.GRAPH.algorithms import detect_cycles, resolve_order, reverse_reachable
from svcat.GRAPH.dependency_graph import DependencyGraph
from svcat.MANAGERS.service_registry import ServiceRegistry
from svcat.MODELS.service_record import DependencySpec


def test_deep_chain_does_not_recurse():
    """
    A 20k-long dependency chain is far beyond the default recursion limit;
    every traversal must still complete.
    """
    depth = 20000
    graph = DependencyGraph()
    for i in range(depth - 1):
        graph.add_edge(f"s{i}", f"s{i + 1}", DependencySpec(target=f"s{i + 1}"))

    start_time = time.time()
    assert detect_cycles(graph) is None
    order = resolve_order(graph, ["s0"])
    impacted = reverse_reachable(graph, f"s{depth - 1}")
    print(f"Traversed a {depth}-deep chain in {time.time() - start_time:.2f}s")

    assert len(order) == depth
    assert order[0] == f"s{depth - 1}"
    assert order[-1] == "s0"
    assert len(impacted) == depth - 1


def test_deep_cycle_is_found():
    depth = 20000
    graph = DependencyGraph()
    for i in range(depth):
        nxt = f"s{(i + 1) % depth}"
        graph.add_edge(f"s{i}", nxt, DependencySpec(target=nxt))
    cycle = detect_cycles(graph)
    assert len(cycle.path) == depth + 1


def test_wide_fan_in():
    graph = DependencyGraph()
    for i in range(5000):
        graph.add_edge(f"client{i}", "core", DependencySpec(target="core", required=i % 2 == 0))
    assert len(reverse_reachable(graph, "core")) == 5000
    assert len(reverse_reachable(graph, "core", required_only=True)) == 2500


def test_concurrent_registration_and_validation():
    """
    Writers keep re-registering services while readers run analyses; no
    analysis may fail and every pass must see a consistent snapshot.
    """
    registry = ServiceRegistry()

    def config(name, deps):
        return json.dumps({
            'name': name,
            'version': '1.0.0',
            'service_type': {'type': 'rest'},
            'endpoints': [{'name': 'health', 'path': '/health', 'method': 'GET'}],
            'dependencies': [{'service': d} for d in deps],
        })

    for i in range(20):
        registry.register_service(f"svc{i}", config(f"svc{i}", [f"svc{i - 1}"] if i else []))

    errors = []

    def writer():
        try:
            for _ in range(20):
                for i in range(1, 20):
                    registry.register_service(f"svc{i}", config(f"svc{i}", [f"svc{i - 1}"]))
        except Exception as e:
            errors.append(e)

    def reader():
        try:
            for _ in range(20):
                summary = registry.validate_all_services()
                assert summary.total_count == 20
                assert registry.start_order(["svc19"])[0] == "svc0"
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=writer) for _ in range(2)]
    threads += [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(60)

    assert errors == []
    final = registry.validate_all_services()
    assert final.is_successful()
    assert all(registry.get_service(f"svc{i}").status.state.value == "Active" for i in range(20))
