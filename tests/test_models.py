"""Tests for report models and their serialized form."""

import json

from code_insight.models import (
    AnalysisReport,
    ComplexityResult,
    DependencyRecord,
    DependencyResult,
    DuplicateFragment,
    DuplicationResult,
    FragmentLocation,
    FunctionComplexity,
    ReportSummary,
    SecurityIssue,
    SecurityResult,
    SourceFile,
)


def _report():
    return AnalysisReport(
        project_path="/work/demo",
        timestamp=1700000000123,
        complexity=[
            ComplexityResult(
                file="src/a.js",
                average_complexity=2.5,
                functions=[FunctionComplexity("a", 2, 1), FunctionComplexity("b", 3, 7)],
                rating="low",
            )
        ],
        security=[
            SecurityResult(
                file="src/a.js",
                issues=[
                    SecurityIssue(
                        type="code-injection",
                        severity="critical",
                        message="Use of eval() allows arbitrary code execution at line 3",
                        line=3,
                        rule="no-eval",
                    ),
                    SecurityIssue(type="custom", severity="low", message="no line"),
                ],
                score=50,
            )
        ],
        duplication=DuplicationResult(
            duplicates=[
                DuplicateFragment(
                    fragment1=FragmentLocation("src/a.js", 2, 9),
                    fragment2=FragmentLocation("src/b.js", 4, 11),
                    lines=8,
                    similarity=6 / 7,
                )
            ],
            total_duplicate_lines=8,
            duplication_percentage=12.5,
        ),
        dependencies=DependencyResult(
            dependencies=[
                DependencyRecord("lodash", "4.17.20", "prod", vulnerabilities=0, outdated=False),
                DependencyRecord("jest", "^29.0.0", "dev"),
            ],
            has_package_lock=True,
        ),
        summary=ReportSummary(
            total_files=1,
            high_complexity_files=0,
            security_issues=2,
            critical_security_issues=1,
            duplication_rate=12.5,
        ),
        recommendations=["Address 1 critical security issue(s) immediately."],
    )


class TestSourceFile:
    def test_lines_split_on_newline(self):
        assert SourceFile("a.js", "a\nb\n").lines == ["a", "b", ""]


class TestSerialization:
    def test_camel_case_keys(self):
        data = _report().to_dict()
        assert set(data) == {
            "projectPath",
            "timestamp",
            "complexity",
            "security",
            "duplication",
            "dependencies",
            "summary",
            "recommendations",
        }
        assert data["complexity"][0]["averageComplexity"] == 2.5
        assert data["complexity"][0]["complexity"] == 2.5
        assert data["duplication"]["duplicates"][0]["fragment1"] == {
            "file": "src/a.js",
            "startLine": 2,
            "endLine": 9,
        }
        assert data["dependencies"]["dependencyCount"] == 2
        assert data["summary"]["criticalSecurityIssues"] == 1

    def test_unknown_differs_from_zero(self):
        deps = _report().to_dict()["dependencies"]["dependencies"]
        assert deps[0]["vulnerabilities"] == 0
        assert deps[0]["outdated"] is False
        assert deps[1]["vulnerabilities"] is None
        assert deps[1]["outdated"] is None

    def test_dict_round_trip(self):
        report = _report()
        assert AnalysisReport.from_dict(report.to_dict()) == report

    def test_json_round_trip(self):
        report = _report()
        assert AnalysisReport.from_json(report.to_json()) == report
        assert AnalysisReport.from_dict(json.loads(json.dumps(report.to_dict()))) == report


class TestDerivedFields:
    def test_fragment_value(self):
        fragment = _report().duplication.duplicates[0]
        assert fragment.value == 8 * (6 / 7)

    def test_security_count(self):
        result = _report().security[0]
        assert result.count("critical") == 1
        assert result.count("high") == 0

    def test_vulnerable_dependencies(self):
        deps = DependencyResult(
            dependencies=[
                DependencyRecord("a", "1", "prod", vulnerabilities=2),
                DependencyRecord("b", "1", "prod", vulnerabilities=0),
                DependencyRecord("c", "1", "dev"),
            ]
        )
        assert [d.name for d in deps.vulnerable] == ["a"]
