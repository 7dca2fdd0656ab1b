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
The service registry: owns the catalog's records and answers dependency
questions about them.

All analyses run on a snapshot. The read lock is held only while records are
copied out; graphs are then built and traversed without any lock held.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..GRAPH.algorithms import detect_cycles
from ..GRAPH.dependency_graph import DependencyGraph, build_graph
from ..MODELS.analysis import CycleInfo, ImpactInfo, ValidationSummary
from ..MODELS.service_record import ServiceRecord
from ..PARSERS.service_parser import ServiceConfigParser
from ..REGISTRY.config_store import ConfigStore
from ..RUNNERS.dependency_resolver import DependencyResolver
from ..RUNNERS.impact_analyzer import ImpactAnalyzer
from ..UTILS.rwlock import ReadWriteLock
from ..VALIDATION.dependency_validator import validate_dependencies
from ..VALIDATION.schema_validator import SchemaValidator, ServiceSchemaValidator
from ..config import CatalogSettings
from ..errors import DeletionBlockedError, ServiceNotFoundError
from .validation_orchestrator import ValidationOrchestrator

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """
    Thread-safe registry of service records.
    """

    def __init__(
        self,
        store: Optional[ConfigStore] = None,
        schema_validator: Optional[SchemaValidator] = None,
        settings: Optional[CatalogSettings] = None,
    ):
        """
        Initializes the registry.

        :param store: Where configurations are persisted. None keeps everything in memory.
        :param schema_validator: Structural validator; defaults to ServiceSchemaValidator.
        :param settings: Catalog settings; defaults are used when omitted.
        """
        self.settings = settings or CatalogSettings()
        self.store = store
        self.parser = ServiceConfigParser()
        self.resolver = DependencyResolver()
        self.impact = ImpactAnalyzer(self.settings.criticality)
        self.orchestrator = ValidationOrchestrator(
            schema_validator or ServiceSchemaValidator(self.settings.schema_version),
            strict_cycles=self.settings.strict_cycles,
        )
        self._lock = ReadWriteLock()
        self._services: Dict[str, ServiceRecord] = {}

    # Registration

    def register_service(self, name: str, config: str) -> ServiceRecord:
        """
        Registers a service from its configuration text.

        Registering a name that already exists updates it.

        :param name: Service name.
        :param config: JSON or YAML configuration.
        :return: A copy of the stored record.
        :raises ConfigParseError: If the configuration cannot be parsed.
        :raises ConfigStoreError: If the configuration cannot be persisted.
        """
        record = self.parser.parse_from_string(name, config)
        if self.store is not None:
            self.store.save(name, config)

        with self._lock.write_lock():
            current = self._services.get(name)
            if current is not None:
                record = current.updated_with(record)
            self._services[name] = record
            stored = record.model_copy(deep=True)

        logger.info("Registered service '%s' (revision %d)", name, stored.revision)
        return stored

    def update_service(self, name: str, config: str) -> ServiceRecord:
        """
        Replaces the configuration of an existing service and resets it to Validating.

        :raises ServiceNotFoundError: If the service is not registered.
        """
        record = self.parser.parse_from_string(name, config)
        with self._lock.read_lock():
            if name not in self._services:
                raise ServiceNotFoundError(name)
        if self.store is not None:
            self.store.save(name, config)

        with self._lock.write_lock():
            current = self._services.get(name)
            if current is None:
                raise ServiceNotFoundError(name)
            updated = current.updated_with(record)
            self._services[name] = updated
            stored = updated.model_copy(deep=True)

        logger.info("Updated service '%s' (revision %d)", name, stored.revision)
        return stored

    def load_services(self) -> List[str]:
        """
        Registers every configuration the store holds.

        :return: Names of the loaded services.
        """
        if self.store is None:
            return []
        names = self.store.list()
        for name in names:
            self.register_service(name, self.store.load(name))
        return names

    def get_service(self, name: str) -> ServiceRecord:
        """
        Returns a copy of a registered record.

        :raises ServiceNotFoundError: If the service is not registered.
        """
        with self._lock.read_lock():
            record = self._services.get(name)
            if record is None:
                raise ServiceNotFoundError(name)
            return record.model_copy(deep=True)

    def list_services(self) -> List[str]:
        with self._lock.read_lock():
            return sorted(self._services)

    def snapshot(self) -> List[ServiceRecord]:
        """
        Copies out every record under the read lock.
        """
        with self._lock.read_lock():
            return [record.model_copy(deep=True) for record in self._services.values()]

    # Analysis

    def build_graph(self) -> DependencyGraph:
        """
        Builds a fresh dependency graph from the current records.
        """
        return build_graph(self.snapshot())

    def check_circular_dependencies(self) -> Optional[CycleInfo]:
        return detect_cycles(self.build_graph())

    def resolve_dependencies(self, names: Sequence[str]) -> List[str]:
        """
        Resolves ``names`` and everything they depend on, dependencies first.

        :raises ServiceNotFoundError: If a name is not registered.
        :raises CycleError: If the requested services reach a cycle.
        """
        return self.resolver.resolve_order(self.build_graph(), names)

    def start_order(self, names: Sequence[str]) -> List[str]:
        return self.resolver.start_order(self.build_graph(), names)

    def stop_order(self, names: Sequence[str]) -> List[str]:
        return self.resolver.stop_order(self.build_graph(), names)

    def analyze_impact(self, name: str) -> List[str]:
        return self.impact.find_impact(self.build_graph(), name)

    def analyze_impact_detailed(self, name: str) -> List[ImpactInfo]:
        return self.impact.detailed_impact(self.build_graph(), name)

    def analyze_critical_impact(self, name: str) -> List[str]:
        return self.impact.critical_impact(self.build_graph(), name)

    # Validation

    def validate_dependencies(self, name: str) -> Tuple[List[str], List[str]]:
        """
        Runs the dependency policy for one service without changing its status.

        :return: (hard errors, warnings)
        :raises ServiceNotFoundError: If the service is not registered.
        """
        records = self.snapshot()
        graph = build_graph(records)
        for record in records:
            if record.name == name:
                return validate_dependencies(record, graph)
        raise ServiceNotFoundError(name)

    def validate_all_dependencies(self) -> Dict[str, Tuple[List[str], List[str]]]:
        """
        Runs the dependency policy for every service.

        :return: Service name to (hard errors, warnings), for services with any finding.
        """
        records = self.snapshot()
        graph = build_graph(records)
        findings = {}
        for record in records:
            errors, warnings = validate_dependencies(record, graph)
            if errors or warnings:
                findings[record.name] = (errors, warnings)
        return findings

    def validate_all_services(self) -> ValidationSummary:
        """
        Runs a full validation pass and stores each service's resulting status.

        The pass runs on a snapshot. A status is written back only if the
        service was not updated or removed while the pass was running.
        """
        records = self.snapshot()
        summary = self.orchestrator.run_catalog_validation(records)

        with self._lock.write_lock():
            for record in records:
                live = self._services.get(record.name)
                if live is None or live.revision != record.revision:
                    logger.debug("Discarding stale status for '%s'", record.name)
                    continue
                live.status = record.status
        return summary

    # Deletion

    def delete_service(self, name: str, force: bool = False) -> List[str]:
        """
        Removes a service unless services that require it would break.

        :param name: Service to delete.
        :param force: Delete even if other services require it.
        :return: Every service impacted by the deletion.
        :raises ServiceNotFoundError: If the service is not registered.
        :raises DeletionBlockedError: If critical dependents exist and ``force`` is False.
        :raises ConfigStoreError: If the stored configuration cannot be removed; the service stays registered.
        """
        graph = self.build_graph()
        if not graph.has_node(name):
            raise ServiceNotFoundError(name)

        critical = self.impact.critical_impact(graph, name)
        if critical and not force:
            raise DeletionBlockedError(name, critical)
        impacted = self.impact.find_impact(graph, name)

        # Stored file first: a store failure leaves the record registered.
        if self.store is not None:
            self.store.delete(name)
        with self._lock.write_lock():
            if self._services.pop(name, None) is None:
                raise ServiceNotFoundError(name)

        if impacted:
            logger.warning("Deleted service '%s'; impacted services: %s", name, ", ".join(impacted))
        else:
            logger.info("Deleted service '%s'", name)
        return impacted
