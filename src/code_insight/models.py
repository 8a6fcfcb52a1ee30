"""Data models for Code Insight.

Every report entity serializes to a plain dict with camelCase keys through
``to_dict()`` and is rebuilt by ``from_dict()``; ``AnalysisReport`` adds
``to_json()`` / ``from_json()`` on top.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

Severity = Literal["low", "medium", "high", "critical"]
Rating = Literal["low", "medium", "high", "very-high"]
DependencyType = Literal["prod", "dev"]

SEVERITY_ORDER: Dict[str, int] = {"low": 0, "medium": 1, "high": 2, "critical": 3}
HIGH_RATINGS = frozenset({"high", "very-high"})


@dataclass(frozen=True)
class SourceFile:
    """Immutable snapshot of one project file."""

    path: str
    content: str

    @property
    def lines(self) -> List[str]:
        return self.content.split("\n")


@dataclass(frozen=True)
class FunctionSpan:
    """A function-like region found by the heuristic extractor."""

    name: str
    start_line: int
    text: str


# ---------------------------------------------------------------------------
# Complexity
# ---------------------------------------------------------------------------


@dataclass
class FunctionComplexity:
    name: str
    complexity: int
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "complexity": self.complexity, "line": self.line}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FunctionComplexity":
        return cls(name=d["name"], complexity=d["complexity"], line=d["line"])


@dataclass
class ComplexityResult:
    """Per-file complexity score.

    ``complexity`` and ``average_complexity`` carry the same value; both keys
    are kept in the serialized form for consumers of either.
    """

    file: str
    average_complexity: float
    functions: List[FunctionComplexity]
    rating: Rating

    @property
    def complexity(self) -> float:
        return self.average_complexity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "complexity": self.average_complexity,
            "averageComplexity": self.average_complexity,
            "functions": [f.to_dict() for f in self.functions],
            "rating": self.rating,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ComplexityResult":
        return cls(
            file=d["file"],
            average_complexity=d["averageComplexity"],
            functions=[FunctionComplexity.from_dict(f) for f in d.get("functions", [])],
            rating=d["rating"],
        )


# ---------------------------------------------------------------------------
# Security
# ---------------------------------------------------------------------------


@dataclass
class SecurityIssue:
    type: str
    severity: Severity
    message: str
    line: Optional[int] = None
    rule: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "severity": self.severity,
            "line": self.line,
            "message": self.message,
            "rule": self.rule,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SecurityIssue":
        return cls(
            type=d["type"],
            severity=d["severity"],
            message=d["message"],
            line=d.get("line"),
            rule=d.get("rule"),
        )


@dataclass
class SecurityResult:
    file: str
    issues: List[SecurityIssue]
    score: int

    def count(self, severity: str) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "issues": [i.to_dict() for i in self.issues],
            "score": self.score,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SecurityResult":
        return cls(
            file=d["file"],
            issues=[SecurityIssue.from_dict(i) for i in d.get("issues", [])],
            score=d["score"],
        )


# ---------------------------------------------------------------------------
# Duplication
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FragmentLocation:
    """1-based, inclusive line range within one file."""

    file: str
    start_line: int
    end_line: int

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "startLine": self.start_line, "endLine": self.end_line}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FragmentLocation":
        return cls(file=d["file"], start_line=d["startLine"], end_line=d["endLine"])


@dataclass(frozen=True)
class DuplicateFragment:
    fragment1: FragmentLocation
    fragment2: FragmentLocation
    lines: int
    similarity: float

    @property
    def value(self) -> float:
        return self.lines * self.similarity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fragment1": self.fragment1.to_dict(),
            "fragment2": self.fragment2.to_dict(),
            "lines": self.lines,
            "similarity": self.similarity,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DuplicateFragment":
        return cls(
            fragment1=FragmentLocation.from_dict(d["fragment1"]),
            fragment2=FragmentLocation.from_dict(d["fragment2"]),
            lines=d["lines"],
            similarity=d["similarity"],
        )


@dataclass
class DuplicationResult:
    duplicates: List[DuplicateFragment] = field(default_factory=list)
    total_duplicate_lines: int = 0
    duplication_percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "duplicates": [d.to_dict() for d in self.duplicates],
            "totalDuplicateLines": self.total_duplicate_lines,
            "duplicationPercentage": self.duplication_percentage,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DuplicationResult":
        return cls(
            duplicates=[DuplicateFragment.from_dict(f) for f in d.get("duplicates", [])],
            total_duplicate_lines=d.get("totalDuplicateLines", 0),
            duplication_percentage=d.get("duplicationPercentage", 0.0),
        )


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


@dataclass
class DependencyRecord:
    """One manifest dependency.

    ``vulnerabilities`` and ``outdated`` stay ``None`` until an audit has
    actually answered for this package; ``None`` means unknown.
    """

    name: str
    version: str
    type: DependencyType
    vulnerabilities: Optional[int] = None
    outdated: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "type": self.type,
            "vulnerabilities": self.vulnerabilities,
            "outdated": self.outdated,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DependencyRecord":
        return cls(
            name=d["name"],
            version=d["version"],
            type=d["type"],
            vulnerabilities=d.get("vulnerabilities"),
            outdated=d.get("outdated"),
        )


@dataclass
class DependencyResult:
    dependencies: List[DependencyRecord] = field(default_factory=list)
    has_package_lock: bool = False

    @property
    def dependency_count(self) -> int:
        return len(self.dependencies)

    @property
    def vulnerable(self) -> List[DependencyRecord]:
        return [d for d in self.dependencies if (d.vulnerabilities or 0) > 0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dependencies": [d.to_dict() for d in self.dependencies],
            "dependencyCount": self.dependency_count,
            "hasPackageLock": self.has_package_lock,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DependencyResult":
        return cls(
            dependencies=[DependencyRecord.from_dict(r) for r in d.get("dependencies", [])],
            has_package_lock=d.get("hasPackageLock", False),
        )


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


@dataclass
class ReportSummary:
    total_files: int = 0
    high_complexity_files: int = 0
    security_issues: int = 0
    critical_security_issues: int = 0
    duplication_rate: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "highComplexityFiles": self.high_complexity_files,
            "securityIssues": self.security_issues,
            "criticalSecurityIssues": self.critical_security_issues,
            "duplicationRate": self.duplication_rate,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ReportSummary":
        return cls(
            total_files=d.get("totalFiles", 0),
            high_complexity_files=d.get("highComplexityFiles", 0),
            security_issues=d.get("securityIssues", 0),
            critical_security_issues=d.get("criticalSecurityIssues", 0),
            duplication_rate=d.get("duplicationRate", 0.0),
        )


@dataclass
class AnalysisReport:
    """Root aggregate returned by ``ReportAggregator.analyze_project``."""

    project_path: str
    timestamp: int
    complexity: List[ComplexityResult]
    security: List[SecurityResult]
    duplication: DuplicationResult
    dependencies: DependencyResult
    summary: ReportSummary
    recommendations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectPath": self.project_path,
            "timestamp": self.timestamp,
            "complexity": [c.to_dict() for c in self.complexity],
            "security": [s.to_dict() for s in self.security],
            "duplication": self.duplication.to_dict(),
            "dependencies": self.dependencies.to_dict(),
            "summary": self.summary.to_dict(),
            "recommendations": list(self.recommendations),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AnalysisReport":
        return cls(
            project_path=d["projectPath"],
            timestamp=d["timestamp"],
            complexity=[ComplexityResult.from_dict(c) for c in d.get("complexity", [])],
            security=[SecurityResult.from_dict(s) for s in d.get("security", [])],
            duplication=DuplicationResult.from_dict(d.get("duplication", {})),
            dependencies=DependencyResult.from_dict(d.get("dependencies", {})),
            summary=ReportSummary.from_dict(d.get("summary", {})),
            recommendations=list(d.get("recommendations", [])),
        )

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "AnalysisReport":
        return cls.from_dict(json.loads(text))
