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
Dependency policy: decides which declared dependencies are hard failures and
which are only warnings.
"""
import logging
from typing import List, Tuple

from ..GRAPH.dependency_graph import DependencyGraph
from ..MODELS.service_record import ServiceRecord
from .version import VersionCompatibility, classify

logger = logging.getLogger(__name__)


def validate_dependencies(record: ServiceRecord, graph: DependencyGraph) -> Tuple[List[str], List[str]]:
    """
    Checks every dependency a service declares against the current graph.

    A missing dependency, or a major version mismatch, is a hard error when the
    dependency is required and a warning otherwise. A minor version mismatch is
    always a warning. Dependencies without a version constraint are only checked
    for presence.

    :param record: The service whose dependencies are checked.
    :param graph: Graph built from the current catalog.
    :return: (hard errors, warnings).
    """
    errors: List[str] = []
    warnings: List[str] = []

    for dep in record.dependencies:
        target = dep.target

        if not graph.has_node(target):
            if dep.required:
                errors.append(f"Required dependency '{target}' not found")
            else:
                warnings.append(f"Optional dependency '{target}' not found")
            continue

        if dep.version_constraint is None:
            continue

        actual = graph.version_of(target) or ""
        compatibility = classify(actual, dep.version_constraint)

        if compatibility == VersionCompatibility.MINOR_INCOMPATIBLE:
            warnings.append(
                f"Minor version incompatibility for dependency '{target}': "
                f"expected {dep.version_constraint} but found {actual}"
            )
        elif compatibility == VersionCompatibility.MAJOR_INCOMPATIBLE:
            msg = (
                f"Major version incompatibility for dependency '{target}': "
                f"expected {dep.version_constraint} but found {actual or '<none>'}"
            )
            if dep.required:
                errors.append(msg)
            else:
                warnings.append(f"Optional dependency '{target}' has incompatible version: {msg}")

    if errors:
        logger.debug("Service '%s' has %d dependency errors", record.name, len(errors))
    return errors, warnings
