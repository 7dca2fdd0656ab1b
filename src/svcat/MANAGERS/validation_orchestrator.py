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
Catalog-wide validation: dependency policy, cycles, structural schema checks
and the per-service status state machine.
"""
import logging
from typing import Iterable, List, Optional

from ..GRAPH.algorithms import detect_cycles
from ..GRAPH.dependency_graph import DependencyGraph, build_graph
from ..MODELS.analysis import SYSTEM_SCOPE, CycleInfo, ValidationSummary
from ..MODELS.service_record import ServiceRecord, ServiceState, ServiceStatus
from ..VALIDATION.dependency_validator import validate_dependencies
from ..VALIDATION.schema_validator import SchemaValidator, ServiceSchemaValidator
from ..VALIDATION.service_heuristics import check_service_type
from ..errors import SchemaStructuralError

logger = logging.getLogger(__name__)


class ValidationOrchestrator:
    """
    Runs validation passes over a set of service records.
    """
    def __init__(self, schema_validator: Optional[SchemaValidator] = None, strict_cycles: bool = False):
        """
        Initializes the orchestrator.

        :param schema_validator: Structural validator for configuration payloads.
        :param strict_cycles: Mark services on a dependency cycle as Error instead of warning.
        """
        self.schema_validator = schema_validator or ServiceSchemaValidator()
        self.strict_cycles = strict_cycles

    def run_catalog_validation(self, records: Iterable[ServiceRecord]) -> ValidationSummary:
        """
        Validates every record and sets its status.

        The records' ``status`` fields are updated in place: each goes to
        Validating, then to Active or Error. One service failing never stops
        the others from being validated.

        :param records: The records to validate, normally a registry snapshot.
        :return: A fresh summary of the pass.
        """
        records = list(records)
        summary = ValidationSummary()
        graph = build_graph(records)

        for record in records:
            record.status = ServiceStatus.new(ServiceState.VALIDATING)

        cycle = detect_cycles(graph)
        cycle_members = set()
        if cycle is not None:
            logger.warning("Circular dependency detected: %s", cycle.description)
            summary.add_warning(SYSTEM_SCOPE, f"Circular dependency detected: {cycle.description}")
            cycle_members = set(cycle.members)

        for record in records:
            try:
                errors, warnings = self._validate_record(record, graph, cycle if record.name in cycle_members else None)
            except Exception as e:
                # A broken check fails only the service it was checking.
                logger.exception("Unexpected error while validating service '%s'", record.name)
                errors, warnings = [f"Validation failed unexpectedly: {type(e).__name__}: {e}"], []
            self._finish(record, errors, warnings, summary)

        logger.info(
            "Validated %d services: %d successful, %d failed, %d warnings",
            summary.total_count, summary.successful_count, summary.failed_count, summary.warning_count,
        )
        return summary

    def _validate_record(self, record: ServiceRecord, graph: DependencyGraph, cycle: Optional[CycleInfo]):
        """
        Runs every check for one service.

        :param cycle: The detected cycle, when this service is on it.
        :return: (errors, warnings)
        """
        errors, warnings = validate_dependencies(record, graph)

        if cycle is not None:
            msg = f"Service is part of a dependency cycle: {cycle.description}"
            if self.strict_cycles:
                errors.append(msg)
            else:
                warnings.append(msg)

        # Services that already failed the dependency policy skip the structural checks.
        if not errors:
            errors, structural_warnings = self._check_structure(record)
            warnings.extend(structural_warnings)
        return errors, warnings

    def _check_structure(self, record: ServiceRecord):
        """
        Runs the structural schema validator and the service-type heuristics.

        :return: (errors, warnings)
        """
        try:
            warnings = list(self.schema_validator.validate(record.config_payload))
        except SchemaStructuralError as e:
            return [str(e)], []
        warnings.extend(check_service_type(record.name, record.config_payload))
        return [], warnings

    def _finish(self, record: ServiceRecord, errors: List[str], warnings: List[str], summary: ValidationSummary):
        """
        Moves a record to its terminal state and records the outcome in the summary.
        """
        for warning in warnings:
            logger.warning("Service '%s' validation warning: %s", record.name, warning)
            summary.add_warning(record.name, warning)

        if errors:
            reason = "; ".join(errors)
            logger.warning("Service '%s' validation failed: %s", record.name, reason)
            summary.failed.append((record.name, reason))
            record.status = ServiceStatus.new(ServiceState.ERROR).with_error(reason).with_warnings(warnings)
        else:
            summary.successful.append(record.name)
            record.status = ServiceStatus.new(ServiceState.ACTIVE).with_warnings(warnings)


def run_catalog_validation(records: Iterable[ServiceRecord],
                           schema_validator: Optional[SchemaValidator] = None) -> ValidationSummary:
    """
    Validates ``records`` with a default orchestrator. See ValidationOrchestrator.
    """
    return ValidationOrchestrator(schema_validator).run_catalog_validation(records)
