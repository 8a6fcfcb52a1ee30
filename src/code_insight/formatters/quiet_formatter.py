"""Quiet formatter: recommendations only."""

from ..models import AnalysisReport
from .base import BaseFormatter


class QuietFormatter(BaseFormatter):
    """Render just the recommendations, one per line."""

    def render(self, report: AnalysisReport) -> None:
        print(self.format(report))

    def format(self, report: AnalysisReport) -> str:
        return "\n".join(report.recommendations)
