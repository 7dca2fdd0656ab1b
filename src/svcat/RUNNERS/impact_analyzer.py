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
Impact analysis: which services are affected when a service changes or goes away.
"""
import logging
from collections import deque
from typing import Dict, List

from ..GRAPH.algorithms import reverse_reachable
from ..GRAPH.dependency_graph import DependencyGraph
from ..MODELS.analysis import ImpactInfo
from ..config import CriticalityMode
from ..errors import ServiceNotFoundError

logger = logging.getLogger(__name__)


class ImpactAnalyzer:
    """
    Computes forward and reverse dependency impact over a DependencyGraph.
    """

    def __init__(self, criticality: CriticalityMode = CriticalityMode.TRANSITIVE):
        """
        :param criticality: How critical_impact decides whether a dependent is critical.
        """
        self.criticality = CriticalityMode(criticality)

    def find_impact(self, graph: DependencyGraph, target: str) -> List[str]:
        """
        Lists every service that depends on ``target``, directly or transitively.

        :param graph: Graph built from the current catalog.
        :param target: The service being changed.
        :return: Affected services, nearest first.
        """
        return reverse_reachable(graph, target)

    def detailed_impact(self, graph: DependencyGraph, target: str) -> List[ImpactInfo]:
        """
        Like find_impact, but records how each service was reached.

        Breadth-first, so direct dependents are reported before transitive ones
        and every path is a shortest one. A service appears once, with the first
        path that reached it; ``is_required`` reflects the last hop of that path.

        :param graph: Graph built from the current catalog.
        :param target: The service being changed.
        :return: One ImpactInfo per affected service.
        """
        if not graph.has_node(target):
            raise ServiceNotFoundError(target)

        reverse = graph.reverse_adjacency()
        start = graph.index_of(target)
        paths: Dict[int, List[int]] = {start: [start]}
        impacts: List[ImpactInfo] = []
        queue = deque([start])

        while queue:
            node = queue.popleft()
            for src, spec in reverse[node]:
                if src in paths:
                    continue
                paths[src] = paths[node] + [src]
                name = graph.name_of(src)
                kind = "Required" if spec.required else "Optional"
                impacts.append(ImpactInfo(
                    service=name,
                    is_required=spec.required,
                    path=[graph.name_of(i) for i in paths[src]],
                    description=f"{kind} dependency chain from '{target}' to '{name}'",
                ))
                queue.append(src)

        logger.debug("Impact of '%s': %d services", target, len(impacts))
        return impacts

    def critical_impact(self, graph: DependencyGraph, target: str) -> List[str]:
        """
        Lists the dependents that would break if ``target`` went away.

        In transitive mode a service is critical only when it reaches ``target``
        through required edges all the way. In local mode only the edge that
        discovered the service is inspected.

        :param graph: Graph built from the current catalog.
        :param target: The service being changed.
        :return: Critically impacted services.
        """
        if self.criticality == CriticalityMode.LOCAL:
            return [info.service for info in self.detailed_impact(graph, target) if info.is_required]
        return reverse_reachable(graph, target, required_only=True)
