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
Exceptions raised by the service catalog.

Domain errors (graph, dependency policy, schema) derive from CatalogError.
Storage and parsing failures derive from InfrastructureError and are only
mixed with domain errors at the registry boundary.
"""
from typing import List, Optional


class CatalogError(Exception):
    """Base exception for all catalog domain errors."""
    pass


class CycleError(CatalogError):
    """Raised when an ordering is requested over services that form a cycle."""
    def __init__(self, cycle):
        super().__init__(f"Circular dependency detected: {cycle.description}")
        self.cycle = cycle
        self.path = list(cycle.path)


class ServiceNotFoundError(CatalogError):
    """Raised when a requested service is not registered."""
    def __init__(self, name: str):
        super().__init__(f"Service '{name}' not found")
        self.name = name


class DependencyPolicyError(CatalogError):
    """Raised when a service breaks the required-dependency policy."""
    def __init__(self, service: str, errors: List[str], message: Optional[str] = None):
        if not message:
            message = f"Dependency validation failed for '{service}': " + "; ".join(errors)
        super().__init__(message)
        self.service = service
        self.errors = list(errors)


class DeletionBlockedError(DependencyPolicyError):
    """Raised when deleting a service would break services that require it."""
    def __init__(self, service: str, dependents: List[str]):
        blockers = ", ".join(dependents)
        super().__init__(
            service,
            [f"Required by '{name}'" for name in dependents],
            f"Cannot delete '{service}': required by {blockers} (use force to override)",
        )
        self.dependents = list(dependents)


class SchemaStructuralError(CatalogError):
    """Raised by a schema validator when a payload has the wrong shape."""
    def __init__(self, errors: List[str]):
        super().__init__("Schema validation failed: " + ", ".join(errors))
        self.errors = list(errors)


class InternalInvariantError(CatalogError):
    """Raised when an algorithm produces a result that breaks its own contract."""
    pass


class InfrastructureError(Exception):
    """Base exception for storage and parsing failures."""
    pass


class ConfigStoreError(InfrastructureError):
    """Raised when a configuration cannot be read from or written to the store."""
    pass


class ConfigParseError(InfrastructureError):
    """Raised when configuration text cannot be turned into a service record."""
    def __init__(self, name: str, reason: str):
        super().__init__(f"Invalid service config for '{name}': {reason}")
        self.name = name
        self.reason = reason
