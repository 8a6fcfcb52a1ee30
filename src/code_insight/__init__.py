"""
Code Insight - Static Code Analysis Engine

Scores cyclomatic complexity, flags insecure code patterns, detects
near-duplicate fragments and summarizes dependency risk, then turns the
results into prioritized recommendations.
"""

__version__ = "0.1.0"

from .aggregator import ReportAggregator
from .api import analyze_project
from .corpus import FileCorpus, FilesystemCorpus
from .models import AnalysisReport, SourceFile

__all__ = [
    "analyze_project",  # Main entry point
    "ReportAggregator",  # Advanced usage (custom corpus or auditor)
    "FileCorpus",
    "FilesystemCorpus",
    "AnalysisReport",
    "SourceFile",
]
