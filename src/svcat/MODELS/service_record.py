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
Models for catalog entries: declared dependencies, service status and the service record.
"""
from typing import List, Dict, Optional, Any
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


_KIND_ALIASES = {"event-driven": "eventdriven", "event_driven": "eventdriven"}


def normalize_service_kind(value: Any) -> str:
    """
    Canonical service type tag for a raw ``service_type`` value.

    Accepts a bare string or a ``{"type": ...}`` mapping. Tags are lower-cased
    and the event-driven spellings collapse to ``eventdriven``.

    :param value: The raw service_type value.
    :return: The tag, 'other' when absent or not a string.
    """
    if isinstance(value, dict):
        value = value.get("type")
    if not isinstance(value, str) or not value.strip():
        return "other"
    kind = value.strip().lower()
    return _KIND_ALIASES.get(kind, kind)


class ServiceState(str, Enum):
    """
    States of the per-service validation state machine.
    """
    INACTIVE = "Inactive"
    VALIDATING = "Validating"
    ACTIVE = "Active"
    ERROR = "Error"


class DependencySpec(BaseModel):
    """
    A dependency one service declares on another.

    Configuration payloads spell the target as ``service``.
    """
    model_config = ConfigDict(populate_by_name=True)

    target: str = Field(alias="service")
    version_constraint: Optional[str] = None
    required: bool = True


class ServiceStatus(BaseModel):
    """
    Outcome of the most recent validation of a service.
    """
    state: ServiceState = ServiceState.INACTIVE
    error_message: Optional[str] = None
    warnings: List[str] = []
    last_checked: datetime = Field(default_factory=_utcnow)

    @classmethod
    def new(cls, state: ServiceState) -> "ServiceStatus":
        return cls(state=state)

    def with_error(self, message: str) -> "ServiceStatus":
        """
        Returns a copy moved to the Error state with the given message.
        """
        return self.model_copy(update={
            "state": ServiceState.ERROR,
            "error_message": message,
            "last_checked": _utcnow(),
        })

    def with_warnings(self, warnings: List[str]) -> "ServiceStatus":
        return self.model_copy(update={"warnings": list(warnings), "last_checked": _utcnow()})


class ServiceRecord(BaseModel):
    """
    A registered service. Owned by the registry and replaced only through
    registration or update.
    """
    name: str
    declared_version: str = ""
    dependencies: List[DependencySpec] = []
    service_type: str = "other"
    config_payload: Dict[str, Any] = {}

    # Lifecycle
    status: ServiceStatus = Field(default_factory=ServiceStatus)
    revision: int = 0
    last_updated: datetime = Field(default_factory=_utcnow)

    def updated_with(self, other: "ServiceRecord") -> "ServiceRecord":
        """
        Builds the record that replaces this one after a configuration update.

        The new record keeps the name, bumps the revision and is reset to Validating.

        :param other: Freshly parsed record carrying the new configuration.
        :return: The replacement record.
        """
        return other.model_copy(update={
            "name": self.name,
            "revision": self.revision + 1,
            "last_updated": _utcnow(),
            "status": ServiceStatus.new(ServiceState.VALIDATING),
        })
