"""The four analyses run over a project snapshot, plus recommendations."""

from .complexity import ComplexityScorer, calculate_complexity, rate_complexity
from .dependencies import (
    AuditClient,
    DependencyAuditor,
    NpmAuditClient,
    NpmOutdatedClient,
    OutdatedClient,
    parse_manifest,
)
from .duplication import DuplicationDetector, normalize_line
from .functions import FunctionExtractor, find_block_end
from .recommendations import generate_recommendations
from .security import SECURITY_RULES, SecurityRule, SecurityScanner, compute_security_score

__all__ = [
    "FunctionExtractor",
    "find_block_end",
    "ComplexityScorer",
    "calculate_complexity",
    "rate_complexity",
    "SecurityScanner",
    "SecurityRule",
    "SECURITY_RULES",
    "compute_security_score",
    "DuplicationDetector",
    "normalize_line",
    "DependencyAuditor",
    "AuditClient",
    "OutdatedClient",
    "NpmAuditClient",
    "NpmOutdatedClient",
    "parse_manifest",
    "generate_recommendations",
]
