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
Unit tests for the dependency policy.
"""
from svcat.GRAPH.dependency_graph import build_graph
from svcat.MODELS.service_record import DependencySpec, ServiceRecord
from svcat.VALIDATION.dependency_validator import validate_dependencies


def check(version, constraint, required=True, present=True):
    deps = [DependencySpec(target="db", version_constraint=constraint, required=required)]
    api = ServiceRecord(name="api", declared_version="1.0.0", dependencies=deps)
    records = [api]
    if present:
        records.append(ServiceRecord(name="db", declared_version=version))
    return validate_dependencies(api, build_graph(records))


class TestDependencyPolicy:
    """Tests for validate_dependencies."""

    def test_compatible(self):
        assert check("1.2.5", "1.2.0") == ([], [])

    def test_no_constraint_only_checks_presence(self):
        assert check("9.9.9", None) == ([], [])

    def test_missing_required(self):
        errors, warnings = check("1.0.0", "1.0.0", present=False)
        assert errors == ["Required dependency 'db' not found"]
        assert warnings == []

    def test_missing_optional(self):
        errors, warnings = check("1.0.0", "1.0.0", required=False, present=False)
        assert errors == []
        assert warnings == ["Optional dependency 'db' not found"]

    def test_minor_mismatch_is_warning(self):
        for required in (True, False):
            errors, warnings = check("1.3.0", "1.2.0", required=required)
            assert errors == []
            assert warnings == [
                "Minor version incompatibility for dependency 'db': expected 1.2.0 but found 1.3.0"
            ]

    def test_major_mismatch_required(self):
        errors, warnings = check("2.0.0", "1.0.0")
        assert errors == [
            "Major version incompatibility for dependency 'db': expected 1.0.0 but found 2.0.0"
        ]
        assert warnings == []

    def test_major_mismatch_optional(self):
        errors, warnings = check("1.0.0", "2.0.0", required=False)
        assert errors == []
        assert len(warnings) == 1
        assert warnings[0].startswith("Optional dependency 'db' has incompatible version")

    def test_unparsable_version_is_major(self):
        errors, _ = check("latest", "1.0.0")
        assert len(errors) == 1
        assert "Major version incompatibility" in errors[0]

    def test_empty_declared_version(self):
        errors, _ = check("", "1.0.0")
        assert errors[0].endswith("found <none>")

    def test_collects_every_finding(self):
        api = ServiceRecord(name="api", dependencies=[
            DependencySpec(target="db"),
            DependencySpec(target="cache", required=False),
            DependencySpec(target="queue"),
        ])
        errors, warnings = validate_dependencies(api, build_graph([api]))
        assert len(errors) == 2
        assert len(warnings) == 1
