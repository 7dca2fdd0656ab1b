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
Local storage for service configuration files.
One file per service, named after the service, in JSON or YAML.
"""

import re
import logging
from pathlib import Path
from typing import List, Optional, Protocol

from ..errors import ConfigStoreError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".json", ".yaml", ".yml")
_VALID_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class ConfigStore(Protocol):
    """Contract for configuration storage used by the registry."""

    def load(self, name: str) -> str:
        ...

    def save(self, name: str, content: str) -> None:
        ...

    def list(self) -> List[str]:
        ...

    def delete(self, name: str) -> None:
        ...


class FileConfigStore:
    """
    Stores service configurations as files in a single directory.
    """

    def __init__(self, config_dir: str, default_extension: str = ".json"):
        """
        Initialize the store, creating the directory if needed.

        Args:
            config_dir: Directory holding the configuration files.
            default_extension: Extension used when saving a service that has no file yet.
        """
        if default_extension not in SUPPORTED_EXTENSIONS:
            raise ValueError(f"Unsupported extension: {default_extension}")
        self.config_dir = Path(config_dir)
        self.default_extension = default_extension
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigStoreError(f"Failed to create config directory {self.config_dir}: {e}") from e

    def _check_name(self, name: str) -> None:
        if not name or not _VALID_NAME.match(name) or ".." in name:
            raise ConfigStoreError(f"Invalid service name for storage: {name!r}")

    def _find(self, name: str) -> Optional[Path]:
        for ext in SUPPORTED_EXTENSIONS:
            path = self.config_dir / f"{name}{ext}"
            if path.is_file():
                return path
        return None

    def path_for(self, name: str) -> Path:
        """
        Path of the file holding ``name``, existing or to be created.
        """
        self._check_name(name)
        return self._find(name) or self.config_dir / f"{name}{self.default_extension}"

    def load(self, name: str) -> str:
        """
        Load a service configuration.

        Args:
            name: Service name.

        Returns:
            The raw configuration text.
        """
        self._check_name(name)
        path = self._find(name)
        if path is None:
            raise ConfigStoreError(f"Configuration file not found for service '{name}' in {self.config_dir}")
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigStoreError(f"Failed to read configuration file {path}: {e}") from e

    def save(self, name: str, content: str) -> None:
        """
        Save a service configuration, replacing any existing file for it.
        """
        path = self.path_for(name)
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ConfigStoreError(f"Failed to write configuration file {path}: {e}") from e
        logger.debug("Saved configuration for '%s' to %s", name, path)

    def list(self) -> List[str]:
        """
        List the names of all stored services, sorted.
        """
        try:
            entries = list(self.config_dir.iterdir())
        except OSError as e:
            raise ConfigStoreError(f"Failed to read config directory {self.config_dir}: {e}") from e
        names = {
            p.stem for p in entries
            if p.is_file() and p.suffix in SUPPORTED_EXTENSIONS and _VALID_NAME.match(p.stem)
        }
        return sorted(names)

    def delete(self, name: str) -> None:
        """
        Remove a service configuration. Missing files are ignored.
        """
        self._check_name(name)
        path = self._find(name)
        if path is None:
            return
        try:
            path.unlink()
        except OSError as e:
            raise ConfigStoreError(f"Failed to delete configuration file {path}: {e}") from e
