"""Analysis-related exceptions: file access, manifests, external audits."""

from pathlib import Path

from .base import CodeInsightError


class AnalysisError(CodeInsightError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ManifestParseError(AnalysisError):
    """Raised when a dependency manifest cannot be parsed."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Failed to parse manifest: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class AuditError(AnalysisError):
    """Raised when an external audit tool fails, times out or returns garbage."""

    def __init__(self, tool: str, reason: str):
        super().__init__(
            f"Dependency audit failed: {tool}",
            details={"tool": tool, "reason": reason},
        )
        self.tool = tool
        self.reason = reason
