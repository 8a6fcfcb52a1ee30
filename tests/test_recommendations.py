"""Tests for recommendation generation."""

from code_insight.analysis.recommendations import NO_ISSUES_MESSAGE, generate_recommendations
from code_insight.models import (
    ComplexityResult,
    DependencyRecord,
    DependencyResult,
    DuplicationResult,
    SecurityIssue,
    SecurityResult,
)


def _complexity(rating, path="a.js"):
    return ComplexityResult(file=path, average_complexity=1.0, functions=[], rating=rating)


def _security(*severities):
    issues = [SecurityIssue(type="x", severity=s, message="m") for s in severities]
    return SecurityResult(file="s.js", issues=issues, score=0)


LOCKED = DependencyResult(dependencies=[], has_package_lock=True)


class TestGenerateRecommendations:
    def test_clean_project(self):
        recs = generate_recommendations([_complexity("low")], [], DuplicationResult(), LOCKED)
        assert recs == [NO_ISSUES_MESSAGE]

    def test_missing_lockfile_alone(self):
        recs = generate_recommendations([], [], DuplicationResult(), DependencyResult())
        assert recs == [
            "Lock dependency versions using package-lock.json or yarn.lock "
            "to ensure reproducible builds."
        ]

    def test_fixed_order_and_texts(self):
        deps = DependencyResult(
            dependencies=[
                DependencyRecord("lodash", "1.0.0", "prod", vulnerabilities=3),
                DependencyRecord("left-pad", "1.0.0", "dev", vulnerabilities=0),
                DependencyRecord("qs", "1.0.0", "prod", vulnerabilities=1),
                DependencyRecord("ms", "1.0.0", "prod"),
            ],
            has_package_lock=False,
        )
        recs = generate_recommendations(
            [_complexity("high"), _complexity("very-high"), _complexity("medium")],
            [_security("critical", "high", "high", "low")],
            DuplicationResult(duplication_percentage=12.345),
            deps,
        )

        assert recs == [
            "Refactor 2 file(s) with high complexity. Consider breaking down large "
            "functions into smaller, more manageable ones.",
            "Address 1 critical security issue(s) immediately, focusing on code "
            "injection and XSS vulnerabilities.",
            "Review 2 high-severity security issue(s), particularly hardcoded secrets "
            "and weak cryptography.",
            "Reduce code duplication (12.3% of codebase). Extract common logic into "
            "shared utilities or modules.",
            "Update 2 dependenc(y/ies) with known vulnerabilities: lodash, qs",
            "Lock dependency versions using package-lock.json or yarn.lock to ensure "
            "reproducible builds.",
        ]

    def test_duplication_threshold_is_exclusive(self):
        at_limit = generate_recommendations([], [], DuplicationResult(duplication_percentage=10.0), LOCKED)
        assert at_limit == [NO_ISSUES_MESSAGE]

        above = generate_recommendations([], [], DuplicationResult(duplication_percentage=10.04), LOCKED)
        assert above[0].startswith("Reduce code duplication (10.0% of codebase)")

    def test_custom_duplication_threshold(self):
        recs = generate_recommendations(
            [], [], DuplicationResult(duplication_percentage=6.0), LOCKED, duplication_warning_pct=5.0
        )
        assert recs[0].startswith("Reduce code duplication (6.0%")
