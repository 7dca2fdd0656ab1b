# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Graph algorithms over a DependencyGraph: cycle detection, transitive closure,
topological ordering and reverse reachability.

Dependency graphs are user-supplied, so every traversal here uses an explicit
stack or queue instead of recursion.
"""
import logging
from collections import deque
from typing import Dict, List, Optional, Sequence

from .dependency_graph import DependencyGraph
from ..MODELS.analysis import CycleInfo
from ..errors import CycleError, InternalInvariantError, ServiceNotFoundError

logger = logging.getLogger(__name__)

WHITE, GRAY, BLACK = 0, 1, 2


def detect_cycles(graph: DependencyGraph) -> Optional[CycleInfo]:
    """
    Finds a dependency cycle using a three-colour depth-first search.

    Every node is tried as a root, in insertion order, so cycles that are not
    reachable from the first node are still found.

    :param graph: Graph to inspect.
    :return: The first cycle found, or None if the graph is acyclic.
    """
    color = [WHITE] * graph.node_count()
    for root in range(graph.node_count()):
        if color[root] != WHITE:
            continue

        # Each frame is [node, next edge cursor]; path mirrors the frames.
        stack: List[List[int]] = [[root, 0]]
        path: List[int] = [root]
        position: Dict[int, int] = {root: 0}
        color[root] = GRAY

        while stack:
            frame = stack[-1]
            node, cursor = frame
            edges = graph.out_edges(node)
            if cursor < len(edges):
                frame[1] = cursor + 1
                nxt = edges[cursor][0]
                if color[nxt] == GRAY:
                    cycle = path[position[nxt]:] + [nxt]
                    info = CycleInfo.from_path([graph.name_of(i) for i in cycle])
                    logger.debug("Cycle found: %s", info.description)
                    return info
                if color[nxt] == WHITE:
                    color[nxt] = GRAY
                    position[nxt] = len(path)
                    path.append(nxt)
                    stack.append([nxt, 0])
            else:
                color[node] = BLACK
                stack.pop()
                path.pop()
                del position[node]
    return None


def _check_roots(graph: DependencyGraph, roots: Sequence[str]) -> None:
    for name in roots:
        if not graph.has_node(name):
            raise ServiceNotFoundError(name)


def transitive_closure(graph: DependencyGraph, roots: Sequence[str]) -> List[str]:
    """
    Collects every service reachable from ``roots`` by following dependency edges.

    :param graph: Graph to traverse.
    :param roots: Starting services. Each must be in the graph.
    :return: Roots and everything they depend on, each once, in discovery order.
    :raises ServiceNotFoundError: If a root is not in the graph.
    """
    _check_roots(graph, roots)
    seen = set()
    order: List[int] = []
    for name in roots:
        start = graph.index_of(name)
        if start in seen:
            continue
        seen.add(start)
        order.append(start)
        stack = [start]
        while stack:
            node = stack.pop()
            for nxt, _ in graph.out_edges(node):
                if nxt not in seen:
                    seen.add(nxt)
                    order.append(nxt)
                    stack.append(nxt)
    return [graph.name_of(i) for i in order]


def extract_subgraph(graph: DependencyGraph, roots: Sequence[str]) -> DependencyGraph:
    """
    Returns the subgraph induced by the transitive closure of ``roots``.
    """
    return graph.subgraph(transitive_closure(graph, roots))


def topological_sort(graph: DependencyGraph) -> List[str]:
    """
    Orders all nodes of ``graph`` so that dependencies come before dependents.

    Uses Kahn's algorithm. Since edges point from dependent to dependency, the
    natural Kahn output lists dependents first and is reversed before returning.

    :param graph: An acyclic graph.
    :return: Node names, dependencies first.
    :raises InternalInvariantError: If the graph turns out to contain a cycle.
    """
    count = graph.node_count()
    in_degree = [0] * count
    for node in range(count):
        for nxt, _ in graph.out_edges(node):
            in_degree[nxt] += 1

    queue = deque(i for i in range(count) if in_degree[i] == 0)
    ordered: List[int] = []
    while queue:
        node = queue.popleft()
        ordered.append(node)
        for nxt, _ in graph.out_edges(node):
            in_degree[nxt] -= 1
            if in_degree[nxt] == 0:
                queue.append(nxt)

    if len(ordered) != count:
        raise InternalInvariantError(
            f"Topological sort produced {len(ordered)} of {count} services; "
            "cycle detection should have rejected this graph"
        )

    ordered.reverse()
    return [graph.name_of(i) for i in ordered]


def resolve_order(graph: DependencyGraph, roots: Sequence[str]) -> List[str]:
    """
    Resolves the order in which ``roots`` and everything they depend on must be started.

    :param graph: Full dependency graph.
    :param roots: Services to resolve.
    :return: The transitive closure of ``roots``, dependencies before dependents.
    :raises ServiceNotFoundError: If a root is not in the graph.
    :raises CycleError: If the closure contains a cycle.
    """
    if not roots:
        return []
    sub = extract_subgraph(graph, roots)
    cycle = detect_cycles(sub)
    if cycle is not None:
        raise CycleError(cycle)
    order = topological_sort(sub)
    logger.debug("Resolved order for %s: %s", list(roots), order)
    return order


def reverse_reachable(graph: DependencyGraph, target: str, required_only: bool = False) -> List[str]:
    """
    Finds every service from which ``target`` is reachable, i.e. everything
    that depends on it directly or transitively.

    :param graph: Graph to traverse.
    :param target: The service being changed.
    :param required_only: Follow only edges whose dependency is required.
    :return: Dependents in breadth-first order. ``target`` itself is never included.
    :raises ServiceNotFoundError: If ``target`` is not in the graph.
    """
    _check_roots(graph, [target])
    reverse = graph.reverse_adjacency()
    start = graph.index_of(target)
    seen = {start}
    found: List[int] = []
    queue = deque([start])
    while queue:
        node = queue.popleft()
        for src, spec in reverse[node]:
            if required_only and not spec.required:
                continue
            if src not in seen:
                seen.add(src)
                found.append(src)
                queue.append(src)
    return [graph.name_of(i) for i in found]
