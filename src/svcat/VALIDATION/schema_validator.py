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
Structural validation of service configuration payloads.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol
from enum import Enum

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..MODELS.service_record import DependencySpec, normalize_service_kind
from ..errors import SchemaStructuralError
from .version import VersionCompatibility, classify

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = "1.0.0"


class ServiceKind(str, Enum):
    """
    Kinds of service a payload can declare.
    """
    REST = "rest"
    GRPC = "grpc"
    GRAPHQL = "graphql"
    EVENT_DRIVEN = "eventdriven"
    OTHER = "other"


class ServiceTypeSpec(BaseModel):
    """
    The ``service_type`` block. ``custom_type`` names the kind when ``type`` is ``other``.
    """
    type: ServiceKind
    custom_type: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize(cls, value):
        if isinstance(value, str) and value.strip():
            return normalize_service_kind(value)
        return value


class Endpoint(BaseModel):
    """
    An endpoint exposed by a service.
    """
    name: str
    path: str
    method: Optional[str] = None
    description: Optional[str] = None


class ServiceSchema(BaseModel):
    """
    Expected shape of a service configuration payload.
    """
    model_config = ConfigDict(extra="allow")

    name: str
    version: str
    description: Optional[str] = None
    owner: Optional[str] = None
    documentation_url: Optional[str] = None
    service_type: ServiceTypeSpec
    endpoints: List[Endpoint]
    dependencies: Optional[List[DependencySpec]] = None
    metadata: Dict[str, Any] = {}
    schema_version: str = CURRENT_SCHEMA_VERSION
    namespace: Optional[str] = None

    @field_validator("service_type", mode="before")
    @classmethod
    def _accept_bare_type(cls, value):
        # "service_type": "rest" is shorthand for {"type": "rest"}
        if isinstance(value, str):
            return {"type": value}
        return value


class SchemaValidator(Protocol):
    """
    Contract for structural payload validators.

    ``validate`` returns advisory warnings and raises SchemaStructuralError
    when the payload is unusable.
    """

    def validate(self, payload: Dict[str, Any]) -> List[str]:
        ...


def format_validation_errors(error: ValidationError) -> List[str]:
    """
    Flattens a pydantic ValidationError into 'field.path: message' strings.
    """
    messages = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        messages.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return messages


class ServiceSchemaValidator:
    """
    Validates payloads against ServiceSchema and checks their schema_version.
    """

    def __init__(self, current_version: str = CURRENT_SCHEMA_VERSION):
        """
        :param current_version: Schema version this catalog understands.
        """
        self.current_version = current_version

    def parse(self, payload: Dict[str, Any]) -> ServiceSchema:
        """
        Parses a payload into a ServiceSchema.

        :raises SchemaStructuralError: If the payload does not match the schema.
        """
        if not isinstance(payload, dict):
            raise SchemaStructuralError(["<root>: configuration must be a mapping"])
        try:
            return ServiceSchema.model_validate(payload)
        except ValidationError as e:
            raise SchemaStructuralError(format_validation_errors(e)) from e

    def validate(self, payload: Dict[str, Any]) -> List[str]:
        """
        Validates a payload.

        :param payload: Parsed service configuration.
        :return: Warnings, e.g. a minor schema version drift.
        :raises SchemaStructuralError: On structural errors or a major schema version mismatch.
        """
        schema = self.parse(payload)
        warnings: List[str] = []

        compatibility = classify(schema.schema_version, self.current_version)
        if compatibility == VersionCompatibility.MAJOR_INCOMPATIBLE:
            raise SchemaStructuralError([
                f"Schema version {schema.schema_version} is incompatible "
                f"with current version {self.current_version}"
            ])
        if compatibility == VersionCompatibility.MINOR_INCOMPATIBLE:
            logger.warning(
                "Minor schema version incompatibility: config version %s vs current %s",
                schema.schema_version, self.current_version,
            )
            warnings.append(
                f"Minor schema version incompatibility: config version "
                f"{schema.schema_version} vs current {self.current_version}"
            )
        return warnings
