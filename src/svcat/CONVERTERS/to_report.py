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
Converters for rendering validation summaries as text or JSON reports.
"""
import json
import os
from jinja2 import Template
from ..MODELS.analysis import ValidationSummary

SUMMARY_TEMPLATE = """Validation Summary:
------------------
Total services: {{ total }}
Successful: {{ successful | length }}
Failed: {{ failed | length }}
Warnings: {{ warning_count }}
Timestamp: {{ timestamp }}
{% if successful %}
Successful services:
{% for name in successful %}  [ok] {{ name }}
{% endfor %}{% endif %}{% if warnings %}
Warnings:
{% for name, items in warnings %}{% for w in items %}  [warn] {{ name }}: {{ w }}
{% endfor %}{% endfor %}{% endif %}{% if failed %}
Failed services:
{% for name, reason in failed %}  [fail] {{ name }}: {{ reason }}
{% endfor %}{% endif %}"""


class SummaryReportConverter:
    """
    Renders a ValidationSummary for people (text) or tools (JSON).
    """

    def __init__(self, summary: ValidationSummary):
        """
        Initializes the converter.

        :param summary: The validation summary to render.
        """
        self.summary = summary
        self.template = Template(SUMMARY_TEMPLATE)

    def render_text(self) -> str:
        summary = self.summary
        return self.template.render(
            total=summary.total_count,
            successful=sorted(summary.successful),
            failed=sorted(summary.failed),
            warnings=sorted(summary.warnings.items()),
            warning_count=summary.warning_count,
            timestamp=summary.timestamp.strftime("%Y-%m-%d %H:%M:%S UTC"),
        )

    def render_json(self) -> str:
        return json.dumps(self.summary.to_dict(), indent=2, sort_keys=True)

    def render(self, fmt: str = "text") -> str:
        if fmt == "json":
            return self.render_json()
        if fmt == "text":
            return self.render_text()
        raise ValueError(f"Unknown report format: {fmt}")

    def convert(self, output_path: str, fmt: str = "text") -> str:
        """
        Writes the report to a file.

        :param output_path: File to write.
        :param fmt: 'text' or 'json'.
        :return: The path written.
        """
        parent = os.path.dirname(output_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.render(fmt))
        return output_path
