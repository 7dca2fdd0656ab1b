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
Parsers for service configuration files (JSON or YAML).
"""
import yaml
from typing import Dict, Any, List
from pydantic import ValidationError
from ..MODELS.service_record import ServiceRecord, DependencySpec, normalize_service_kind
from ..errors import ConfigParseError


class ServiceConfigParser:
    """
    Parser for service configuration documents.

    Only the fields the catalog needs for its graph are interpreted here; the
    full payload is kept on the record for structural validation later.
    """

    def parse(self, name: str, config_path: str) -> ServiceRecord:
        """
        Parses a service configuration from a path.

        :param name: The name to register the service under.
        :param config_path: Path to the configuration file.
        :return: Parsed record.
        """
        with open(config_path, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_from_string(name, content)

    def parse_from_string(self, name: str, content: str) -> ServiceRecord:
        """
        Parses a service configuration from a string.

        JSON documents are valid YAML, so one loader handles both formats.

        :param name: The name to register the service under.
        :param content: JSON or YAML text.
        :return: Parsed record in the Inactive state.
        :raises ConfigParseError: If the text is not a mapping or its dependencies are malformed.
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigParseError(name, f"not valid JSON or YAML ({e})") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigParseError(name, "top level must be a mapping")

        version = data.get('version', '')
        return ServiceRecord(
            name=name,
            declared_version=str(version) if version is not None else '',
            dependencies=self._parse_dependencies(name, data.get('dependencies')),
            service_type=normalize_service_kind(data.get('service_type')),
            config_payload=data,
        )

    def _parse_dependencies(self, name: str, deps: Any) -> List[DependencySpec]:
        """
        Parses the dependency list of {service, version_constraint, required} mappings.
        """
        if deps is None:
            return []
        if not isinstance(deps, list):
            raise ConfigParseError(name, "dependencies must be a list")

        parsed = []
        for entry in deps:
            if not isinstance(entry, dict):
                raise ConfigParseError(name, f"invalid dependency entry: {entry!r}")
            entry = dict(entry)
            if entry.get('version_constraint') is not None:
                entry['version_constraint'] = str(entry['version_constraint'])
            try:
                parsed.append(DependencySpec.model_validate(entry))
            except ValidationError as e:
                raise ConfigParseError(name, f"invalid dependency entry {entry!r}: {e.errors()[0]['msg']}") from e
        return parsed
