"""JSON formatter for Code Insight."""

import json

from ..models import AnalysisReport
from .base import SECTIONS, BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the report as JSON.

    With every section selected the output is exactly ``report.to_json()``
    and can be loaded back with ``AnalysisReport.from_json``.
    """

    def render(self, report: AnalysisReport) -> None:
        print(self.format(report))

    def format(self, report: AnalysisReport) -> str:
        if self.sections == SECTIONS:
            return report.to_json()

        data = report.to_dict()
        selected = {"projectPath": data["projectPath"], "timestamp": data["timestamp"]}
        for section in self.sections:
            selected[section] = data[section]
        selected["recommendations"] = data["recommendations"]
        return json.dumps(selected, indent=2)
