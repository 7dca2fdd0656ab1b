"""
Dependency resolution for services to determine startup, shutdown and deletion order.
"""
from typing import List, Sequence

from ..GRAPH.algorithms import resolve_order
from ..GRAPH.dependency_graph import DependencyGraph


class DependencyResolver:
    """
    Resolves the startup and shutdown order of services based on their dependencies.
    """
    def resolve_order(self, graph: DependencyGraph, roots: Sequence[str]) -> List[str]:
        """
        Determines the correct order to start services using topological sort.

        :param graph: The dependency graph of the catalog.
        :param roots: Services to resolve; their dependencies are pulled in transitively.
        :return: Service names in the order they should be started.
        :raises CycleError: If a circular dependency is reachable from ``roots``.
        :raises ServiceNotFoundError: If a root is not registered.
        """
        return resolve_order(graph, roots)

    def start_order(self, graph: DependencyGraph, roots: Sequence[str]) -> List[str]:
        """
        Order in which to start ``roots``: dependencies first.
        """
        return self.resolve_order(graph, roots)

    def stop_order(self, graph: DependencyGraph, roots: Sequence[str]) -> List[str]:
        """
        Order in which to stop ``roots``: dependents first.
        """
        return list(reversed(self.start_order(graph, roots)))
