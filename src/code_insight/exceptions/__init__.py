"""Exception hierarchy for Code Insight."""

from .analysis import (
    AnalysisError,
    AuditError,
    FileAccessError,
    ManifestParseError,
)
from .base import CodeInsightError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "CodeInsightError",
    "AnalysisError",
    "FileAccessError",
    "ManifestParseError",
    "AuditError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
