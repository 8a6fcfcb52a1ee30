"""Turn the four analysis results into an ordered list of recommendations."""

from typing import List, Sequence

from ..models import (
    HIGH_RATINGS,
    ComplexityResult,
    DependencyResult,
    DuplicationResult,
    SecurityResult,
)

DEFAULT_DUPLICATION_WARNING_PCT = 10.0

NO_ISSUES_MESSAGE = "Great job! No major issues found. Continue following best practices."


def _count_issues(security: Sequence[SecurityResult], severity: str) -> int:
    return sum(result.count(severity) for result in security)


def generate_recommendations(
    complexity: Sequence[ComplexityResult],
    security: Sequence[SecurityResult],
    duplication: DuplicationResult,
    dependencies: DependencyResult,
    duplication_warning_pct: float = DEFAULT_DUPLICATION_WARNING_PCT,
) -> List[str]:
    """Build recommendations in a fixed order.

    Each check appends at most one message. When none fires the list holds
    exactly the "no major issues" message, so the result is never empty.
    """
    recommendations: List[str] = []

    high_complexity = [c for c in complexity if c.rating in HIGH_RATINGS]
    if high_complexity:
        recommendations.append(
            f"Refactor {len(high_complexity)} file(s) with high complexity. "
            "Consider breaking down large functions into smaller, more manageable ones."
        )

    critical = _count_issues(security, "critical")
    if critical > 0:
        recommendations.append(
            f"Address {critical} critical security issue(s) immediately, "
            "focusing on code injection and XSS vulnerabilities."
        )

    high = _count_issues(security, "high")
    if high > 0:
        recommendations.append(
            f"Review {high} high-severity security issue(s), "
            "particularly hardcoded secrets and weak cryptography."
        )

    if duplication.duplication_percentage > duplication_warning_pct:
        recommendations.append(
            f"Reduce code duplication ({duplication.duplication_percentage:.1f}% of codebase). "
            "Extract common logic into shared utilities or modules."
        )

    vulnerable = dependencies.vulnerable
    if vulnerable:
        names = ", ".join(d.name for d in vulnerable)
        recommendations.append(
            f"Update {len(vulnerable)} dependenc(y/ies) with known vulnerabilities: {names}"
        )

    if not dependencies.has_package_lock:
        recommendations.append(
            "Lock dependency versions using package-lock.json or yarn.lock "
            "to ensure reproducible builds."
        )

    if not recommendations:
        recommendations.append(NO_ISSUES_MESSAGE)

    return recommendations
