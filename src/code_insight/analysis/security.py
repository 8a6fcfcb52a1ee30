"""Line-level security heuristics.

Every rule in ``SECURITY_RULES`` is tested against every line of a file.
Rules are independent, so one line can produce several issues
(``eval(query + "'")`` trips both the eval and the SQL injection rule).
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence

from ..logging_config import get_logger
from ..models import SecurityIssue, SecurityResult, Severity, SourceFile

logger = get_logger(__name__)

ISSUE_PENALTY = 10
CRITICAL_PENALTY = 30


@dataclass(frozen=True)
class SecurityRule:
    pattern: Pattern[str]
    type: str
    severity: Severity
    message: str
    rule: str


def _rule(pattern: str, type: str, severity: Severity, message: str, rule: str,
          flags: int = 0) -> SecurityRule:
    return SecurityRule(re.compile(pattern, flags), type, severity, message, rule)


SECURITY_RULES: Sequence[SecurityRule] = (
    # Code execution and markup injection
    _rule(r"eval\s*\(", "code-injection", "critical",
          "Use of eval() allows arbitrary code execution", "no-eval"),
    _rule(r"innerHTML\s*=", "xss", "high",
          "Direct innerHTML assignment can lead to XSS", "no-inner-html"),
    _rule(r"document\.write\s*\(", "xss", "high",
          "document.write() can lead to XSS", "no-document-write"),
    _rule(r"dangerouslySetInnerHTML", "xss", "high",
          "dangerouslySetInnerHTML can lead to XSS", "react-dangerously-set-inner-html"),
    _rule(r"\.exec\s*\(\s*\$\{", "code-injection", "high",
          "Dynamic code execution with template literals", "no-dynamic-injection"),
    _rule(r"new\s+Function\s*\(", "code-injection", "high",
          "Function constructor allows arbitrary code execution", "no-new-func"),
    _rule(r"setTimeout\s*\(\s*[\"']|setInterval\s*\(\s*[\"']", "code-injection", "medium",
          "setTimeout/setInterval with string can execute code", "no-implied-eval"),
    # Information exposure
    _rule(r"console\.(log|debug|info)", "information-leak", "low",
          "Console logging can leak sensitive information", "no-console"),
    _rule(r"process\.env\.", "env-config", "low",
          "Environment variable usage", "no-process-env"),
    # Hardcoded credentials
    _rule(r"password\s*[:=]", "sensitive-data", "medium",
          "Possible hardcoded password", "no-hardcoded-passwords", re.IGNORECASE),
    _rule(r"api[_-]?key\s*[:=]", "sensitive-data", "high",
          "Possible hardcoded API key", "no-hardcoded-secrets", re.IGNORECASE),
    _rule(r"secret\s*[:=]", "sensitive-data", "high",
          "Possible hardcoded secret", "no-hardcoded-secrets", re.IGNORECASE),
    _rule(r"token\s*[:=]", "sensitive-data", "medium",
          "Possible hardcoded token", "no-hardcoded-secrets", re.IGNORECASE),
    # Weak hashing
    _rule(r"md5\s*\(", "weak-crypto", "medium",
          "MD5 is a weak hash algorithm", "no-md5", re.IGNORECASE),
    _rule(r"sha1\s*\(", "weak-crypto", "medium",
          "SHA1 is a weak hash algorithm", "no-sha1", re.IGNORECASE),
    # Injection through string building
    _rule(r"query\s*\+\s*[\"']|[\"']\s*\+\s*query", "sql-injection", "critical",
          "Possible SQL injection via string concatenation", "no-sql-injection", re.IGNORECASE),
    _rule(r"path\s*\+\s*\$\{|path\s*\+=.*req", "path-traversal", "high",
          "Possible path traversal vulnerability", "no-path-traversal", re.IGNORECASE),
)


def compute_security_score(issues: Sequence[SecurityIssue]) -> int:
    """``100 - 10 per issue - 30 per critical issue``, clamped to [0, 100]."""
    critical = sum(1 for issue in issues if issue.severity == "critical")
    score = 100 - ISSUE_PENALTY * len(issues) - CRITICAL_PENALTY * critical
    return max(0, min(100, score))


class SecurityScanner:
    """Applies the rule table to a file, line by line."""

    def __init__(self, rules: Sequence[SecurityRule] = SECURITY_RULES):
        self.rules = tuple(rules)

    def find_issues(self, content: str) -> List[SecurityIssue]:
        issues: List[SecurityIssue] = []
        for index, line in enumerate(content.split("\n")):
            line_number = index + 1
            for rule in self.rules:
                if rule.pattern.search(line):
                    issues.append(
                        SecurityIssue(
                            type=rule.type,
                            severity=rule.severity,
                            line=line_number,
                            message=f"{rule.message} at line {line_number}",
                            rule=rule.rule,
                        )
                    )
        return issues

    def scan(self, file: SourceFile) -> Optional[SecurityResult]:
        """Return the file's issues, or None when the file is clean."""
        issues = self.find_issues(file.content)
        if not issues:
            return None
        return SecurityResult(file=file.path, issues=issues, score=compute_security_score(issues))

    def scan_all(self, files: Sequence[SourceFile]) -> List[SecurityResult]:
        results = []
        for f in files:
            result = self.scan(f)
            if result is not None:
                results.append(result)
        logger.debug("Security scan flagged %d of %d files", len(results), len(files))
        return results
