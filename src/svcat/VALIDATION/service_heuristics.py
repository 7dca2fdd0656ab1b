"""
Service-type specific checks that produce warnings, never failures.
"""
from typing import Any, Dict, List

from ..MODELS.service_record import normalize_service_kind
from .version import SemanticVersion

GRAPHQL_SCHEMA_KEY = "schema_ref"
GRPC_PROTO_KEY = "proto_files"
EVENT_TOPICS_KEY = "topics"


def check_service_type(name: str, payload: Dict[str, Any]) -> List[str]:
    """
    Looks for gaps that are legal but usually a mistake for the declared service type.

    Fields of an unexpected type are skipped, since a lenient schema validator
    may let them through.

    :param name: Registered service name.
    :param payload: Configuration payload that passed the schema validator.
    :return: Warnings.
    """
    warnings: List[str] = []
    if not isinstance(payload, dict):
        return warnings
    metadata = payload.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    endpoints = payload.get("endpoints")
    if not isinstance(endpoints, list):
        endpoints = []
    description = payload.get("description")
    kind = normalize_service_kind(payload.get("service_type"))

    if kind == "rest":
        for endpoint in endpoints:
            if isinstance(endpoint, dict) and not endpoint.get("method"):
                warnings.append(
                    f"REST endpoint '{endpoint.get('name', '?')}' does not declare an HTTP method"
                )
    elif kind == "graphql":
        if not metadata.get(GRAPHQL_SCHEMA_KEY):
            warnings.append(f"GraphQL service should declare metadata.{GRAPHQL_SCHEMA_KEY}")
    elif kind == "grpc":
        if not metadata.get(GRPC_PROTO_KEY):
            warnings.append(f"gRPC service should declare metadata.{GRPC_PROTO_KEY}")
    elif kind == "eventdriven":
        if not metadata.get(EVENT_TOPICS_KEY):
            warnings.append(f"Event-driven service should declare metadata.{EVENT_TOPICS_KEY}")
    elif not (isinstance(description, str) and description.strip()):
        warnings.append(f"Service of type '{kind}' should carry a description")

    declared_name = payload.get("name")
    if declared_name and declared_name != name:
        warnings.append(f"Configuration name '{declared_name}' differs from registered name '{name}'")

    version = payload.get("version")
    if isinstance(version, str):
        try:
            SemanticVersion.parse(version)
        except ValueError:
            warnings.append(
                f"Declared version '{version}' is not a semantic version; "
                "dependents with a version constraint will treat it as incompatible"
            )

    return warnings
