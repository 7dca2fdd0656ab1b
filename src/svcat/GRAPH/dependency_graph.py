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
Service dependency graph.

Edges point from a dependent service to the service it depends on. Service
names are interned to integer indices when they are added; the traversal
code in ``algorithms`` works on indices and only the public methods here
deal in names.
"""
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..MODELS.service_record import DependencySpec, ServiceRecord


class DependencyGraph:
    """
    Adjacency-list graph over service names with per-edge dependency metadata.
    """

    def __init__(self):
        self._names: List[str] = []
        self._index: Dict[str, int] = {}
        self._versions: List[Optional[str]] = []
        self._adjacency: List[List[Tuple[int, DependencySpec]]] = []

    def add_node(self, name: str, version: Optional[str] = None) -> int:
        """
        Adds a node if it is not present yet.

        :param name: Service name.
        :param version: Declared version of the service, if known.
        :return: The node's index.
        """
        idx = self._index.get(name)
        if idx is None:
            idx = len(self._names)
            self._index[name] = idx
            self._names.append(name)
            self._versions.append(version)
            self._adjacency.append([])
        elif version is not None:
            self._versions[idx] = version
        return idx

    def add_edge(self, source: str, target: str, spec: DependencySpec) -> None:
        """
        Adds a dependency edge, creating both endpoints if needed.
        """
        src = self.add_node(source)
        dst = self.add_node(target)
        self._adjacency[src].append((dst, spec))

    def has_node(self, name: str) -> bool:
        return name in self._index

    def node_count(self) -> int:
        return len(self._names)

    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._adjacency)

    def nodes(self) -> List[str]:
        """Node names in insertion order."""
        return list(self._names)

    def version_of(self, name: str) -> Optional[str]:
        idx = self._index.get(name)
        return None if idx is None else self._versions[idx]

    def neighbors(self, name: str) -> List[str]:
        """
        Services ``name`` depends on, in declaration order.
        """
        return [self._names[dst] for dst, _ in self._adjacency[self._index[name]]]

    def edges(self) -> Iterator[Tuple[str, str, DependencySpec]]:
        """Yields (dependent, dependency, spec) for every edge."""
        for src, edges in enumerate(self._adjacency):
            for dst, spec in edges:
                yield self._names[src], self._names[dst], spec

    def subgraph(self, names: Iterable[str]) -> "DependencyGraph":
        """
        Builds the graph induced by ``names``: those nodes and the edges between them.

        Nodes keep their relative insertion order from this graph.
        """
        keep = {self._index[n] for n in names}
        sub = DependencyGraph()
        for idx in sorted(keep):
            sub.add_node(self._names[idx], self._versions[idx])
        for idx in sorted(keep):
            for dst, spec in self._adjacency[idx]:
                if dst in keep:
                    sub.add_edge(self._names[idx], self._names[dst], spec)
        return sub

    # Index-level access for the traversal algorithms.

    def index_of(self, name: str) -> int:
        return self._index[name]

    def name_of(self, idx: int) -> str:
        return self._names[idx]

    def out_edges(self, idx: int) -> List[Tuple[int, DependencySpec]]:
        return self._adjacency[idx]

    def reverse_adjacency(self) -> List[List[Tuple[int, DependencySpec]]]:
        """
        For every node, the (dependent, spec) pairs of edges that point at it,
        in edge insertion order.
        """
        reverse: List[List[Tuple[int, DependencySpec]]] = [[] for _ in self._names]
        for src, edges in enumerate(self._adjacency):
            for dst, spec in edges:
                reverse[dst].append((src, spec))
        return reverse

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def __repr__(self) -> str:
        return f"DependencyGraph(nodes={self.node_count()}, edges={self.edge_count()})"


def build_graph(records: Iterable[ServiceRecord]) -> DependencyGraph:
    """
    Builds a dependency graph from a set of service records.

    Every record becomes a node. A declared dependency becomes an edge only when
    its target is one of the given records; dependencies on absent services are
    left for the dependency validator to report.

    :param records: The current service records.
    :return: A freshly built graph.
    """
    records = list(records)
    graph = DependencyGraph()
    for record in records:
        graph.add_node(record.name, record.declared_version)
    for record in records:
        for dep in record.dependencies:
            if graph.has_node(dep.target):
                graph.add_edge(record.name, dep.target, dep)
    return graph
