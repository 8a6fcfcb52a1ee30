"""Report aggregation: one snapshot, four concurrent analyses, one report.

The aggregator asks its corpus for the project files exactly once, filters
them down to analyzable sources and hands the same immutable snapshot to
the complexity, security, duplication and dependency analyses, which run
on a thread pool. Results are merged only after every analysis finished.

Each aggregator owns its collaborators. There is no module-level state, so
independent aggregators can run side by side.
"""

from __future__ import annotations

import concurrent.futures
import time
from typing import List, Optional, Sequence

from .analysis import (
    ComplexityScorer,
    DependencyAuditor,
    DuplicationDetector,
    NpmAuditClient,
    NpmOutdatedClient,
    SecurityScanner,
    generate_recommendations,
)
from .config import AnalysisConfig
from .corpus import FileCorpus, is_source_file
from .logging_config import get_logger
from .models import (
    HIGH_RATINGS,
    AnalysisReport,
    ComplexityResult,
    DuplicationResult,
    ReportSummary,
    SecurityResult,
    SourceFile,
)

logger = get_logger(__name__)


def build_summary(
    complexity: Sequence[ComplexityResult],
    security: Sequence[SecurityResult],
    duplication: DuplicationResult,
) -> ReportSummary:
    return ReportSummary(
        total_files=len(complexity),
        high_complexity_files=sum(1 for c in complexity if c.rating in HIGH_RATINGS),
        security_issues=sum(len(s.issues) for s in security),
        critical_security_issues=sum(s.count("critical") for s in security),
        duplication_rate=duplication.duplication_percentage,
    )


def default_auditor(config: AnalysisConfig) -> DependencyAuditor:
    """Build the npm-backed auditor the configuration asks for."""
    audit_client = (
        NpmAuditClient(timeout=config.audit_timeout_seconds) if config.audit_enabled else None
    )
    outdated_client = (
        NpmOutdatedClient(timeout=config.outdated_timeout_seconds)
        if config.outdated_enabled
        else None
    )
    return DependencyAuditor(audit_client=audit_client, outdated_client=outdated_client)


class ReportAggregator:
    """Runs every analysis over a project and assembles the report.

    Args:
        corpus: Supplies the project files
        auditor: Dependency auditor; built from ``config`` when omitted
        config: Analysis configuration (defaults when omitted)
    """

    def __init__(
        self,
        corpus: FileCorpus,
        auditor: Optional[DependencyAuditor] = None,
        config: Optional[AnalysisConfig] = None,
    ):
        self.config = config or AnalysisConfig()
        self.corpus = corpus
        self.auditor = auditor if auditor is not None else default_auditor(self.config)
        self.complexity_scorer = ComplexityScorer()
        self.security_scanner = SecurityScanner()
        self.duplication_detector = DuplicationDetector.from_thresholds(self.config.thresholds)

    def analyze_project(self, project_path: str) -> AnalysisReport:
        """Analyze ``project_path`` and return the full report.

        Raises:
            InvalidPathError: If the corpus cannot read the project
        """
        logger.info("Analyzing project %s", project_path)
        files = self._snapshot(project_path)
        logger.debug("%d analyzable files in snapshot", len(files))

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            complexity_future = executor.submit(self.complexity_scorer.score_all, files)
            security_future = executor.submit(self.security_scanner.scan_all, files)
            duplication_future = executor.submit(self.duplication_detector.detect, files)
            dependency_future = executor.submit(self.auditor.audit, project_path)

            complexity = complexity_future.result()
            security = security_future.result()
            duplication = duplication_future.result()
            dependencies = dependency_future.result()

        summary = build_summary(complexity, security, duplication)
        recommendations = generate_recommendations(
            complexity,
            security,
            duplication,
            dependencies,
            duplication_warning_pct=self.config.thresholds.duplication_warning_pct,
        )

        logger.info(
            "Analysis complete: %d files, %d security issues, %.1f%% duplication",
            summary.total_files,
            summary.security_issues,
            summary.duplication_rate,
        )

        return AnalysisReport(
            project_path=str(project_path),
            timestamp=int(time.time() * 1000),
            complexity=complexity,
            security=security,
            duplication=duplication,
            dependencies=dependencies,
            summary=summary,
            recommendations=recommendations,
        )

    def _snapshot(self, project_path: str) -> List[SourceFile]:
        return [f for f in self.corpus.enumerate(project_path) if is_source_file(f.path)]
