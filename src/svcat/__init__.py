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
svcat - Service Catalog

A registry of versioned services and their dependencies that checks the
dependency graph, orders start/stop/delete operations and reports the blast
radius of a change.
"""

__version__ = "0.1.0"
__author__ = "Michael Maillet, Damien Davison, Sacha Davison"
__license__ = "Apache-2.0"

from .GRAPH.dependency_graph import DependencyGraph, build_graph
from .GRAPH.algorithms import detect_cycles, resolve_order
from .RUNNERS.impact_analyzer import ImpactAnalyzer
from .VALIDATION.version import VersionCompatibility, classify
from .VALIDATION.dependency_validator import validate_dependencies
from .MANAGERS.validation_orchestrator import ValidationOrchestrator, run_catalog_validation
from .MANAGERS.service_registry import ServiceRegistry

_default_analyzer = ImpactAnalyzer()


def find_impact(graph, target):
    """Every service that depends on ``target``, directly or transitively."""
    return _default_analyzer.find_impact(graph, target)


def detailed_impact(graph, target):
    """find_impact with the discovering path and edge kind of each service."""
    return _default_analyzer.detailed_impact(graph, target)


def critical_impact(graph, target):
    """Services that reach ``target`` through required dependencies only."""
    return _default_analyzer.critical_impact(graph, target)


__all__ = [
    "DependencyGraph",
    "ImpactAnalyzer",
    "ServiceRegistry",
    "ValidationOrchestrator",
    "VersionCompatibility",
    "build_graph",
    "classify",
    "critical_impact",
    "detailed_impact",
    "detect_cycles",
    "find_impact",
    "resolve_order",
    "run_catalog_validation",
    "validate_dependencies",
]
