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
Semantic version parsing and compatibility classification.
Parses versions like '1.4.2', '2.0.0-rc.1' or '1.0.0+build.7'.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VersionCompatibility(str, Enum):
    """How a declared version relates to the version a dependent expects."""

    COMPATIBLE = "Compatible"
    MINOR_INCOMPATIBLE = "MinorIncompatible"
    MAJOR_INCOMPATIBLE = "MajorIncompatible"


# https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
_SEMVER = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@dataclass(frozen=True)
class SemanticVersion:
    """
    A parsed MAJOR.MINOR.PATCH version with optional pre-release and build parts.
    """

    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None
    build: Optional[str] = None

    @classmethod
    def parse(cls, version: str) -> "SemanticVersion":
        """
        Parse a semantic version string.

        Args:
            version: Version string such as '1.2.3'.

        Returns:
            Parsed SemanticVersion.

        Raises:
            ValueError: If the string is not a valid semantic version.
        """
        if not isinstance(version, str):
            raise ValueError(f"Invalid semantic version: {version!r}")
        match = _SEMVER.match(version)
        if not match:
            raise ValueError(f"Invalid semantic version: {version!r}")
        major, minor, patch, prerelease, build = match.groups()
        return cls(int(major), int(minor), int(patch), prerelease, build)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


def classify(actual: str, constraint: str) -> VersionCompatibility:
    """
    Compares a declared version against the version a dependent expects.

    Only major and minor are compared; patch, pre-release and build never affect
    the result. Anything that does not parse is treated as a major incompatibility.

    :param actual: The dependency's declared version.
    :param constraint: The version the dependent expects.
    :return: The compatibility class.
    """
    try:
        have = SemanticVersion.parse(actual)
        want = SemanticVersion.parse(constraint)
    except ValueError:
        return VersionCompatibility.MAJOR_INCOMPATIBLE

    if have.major != want.major:
        return VersionCompatibility.MAJOR_INCOMPATIBLE
    if have.minor != want.minor:
        return VersionCompatibility.MINOR_INCOMPATIBLE
    return VersionCompatibility.COMPATIBLE
