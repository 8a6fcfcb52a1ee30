"""Public API for Code Insight.

Example:
    >>> from code_insight import analyze_project
    >>>
    >>> report = analyze_project("/path/to/project")
    >>> report.summary.total_files
    42
    >>>
    >>> # Skip the npm audit and look for outdated packages instead
    >>> report = analyze_project(
    ...     "/path/to/project",
    ...     audit_enabled=False,
    ...     outdated_enabled=True,
    ... )
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .aggregator import ReportAggregator
from .config import load_config
from .corpus import FilesystemCorpus
from .logging_config import get_logger
from .models import AnalysisReport

logger = get_logger(__name__)


def analyze_project(
    path: str = ".",
    config_file: Optional[Path] = None,
    **overrides,
) -> AnalysisReport:
    """Analyze a project directory and return its report.

    A fresh corpus and aggregator are built for every call, so concurrent
    calls never share state.

    Args:
        path: Project root (default: current directory)
        config_file: Optional explicit config file path
        **overrides: Configuration overrides (e.g. workers=2, audit_enabled=False)

    Returns:
        AnalysisReport for the project

    Raises:
        CodeInsightError: If configuration is invalid
        InvalidPathError: If ``path`` is not a readable directory
    """
    config = load_config(config_file=config_file, **overrides)
    logger.debug("Configuration loaded: %s mode", config.verbosity)

    aggregator = ReportAggregator(FilesystemCorpus(config), config=config)
    return aggregator.analyze_project(path)
