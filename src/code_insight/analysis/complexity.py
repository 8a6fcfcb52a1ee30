"""Cyclomatic complexity scoring.

Complexity of a span is ``1 + number of decision points``. Decision points
are counted with plain regexes over the span text, nested spans included,
so a function containing a callback is charged for the callback's branches
as well.
"""

import re
from typing import List, Optional, Pattern, Sequence

import numpy as np

from ..logging_config import get_logger
from ..models import ComplexityResult, FunctionComplexity, Rating, SourceFile
from .functions import FunctionExtractor

logger = get_logger(__name__)

DECISION_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"\bif\b"),
    re.compile(r"\belse\b"),
    re.compile(r"\bfor\b"),
    re.compile(r"\bwhile\b"),
    re.compile(r"\bswitch\b"),
    re.compile(r"\bcase\b"),
    re.compile(r"\bcatch\b"),
    re.compile(r"&&"),
    re.compile(r"\|\|"),
    re.compile(r"\?"),
)


def calculate_complexity(text: str) -> int:
    """Return ``1 + Σ occurrences`` of every decision pattern in ``text``."""
    return 1 + sum(len(pattern.findall(text)) for pattern in DECISION_PATTERNS)


def rate_complexity(average: float) -> Rating:
    """Map an average complexity onto the four-step rating scale."""
    if average <= 5:
        return "low"
    if average <= 10:
        return "medium"
    if average <= 20:
        return "high"
    return "very-high"


class ComplexityScorer:
    """Scores every function span of a file and rates the file average."""

    def __init__(self, extractor: Optional[FunctionExtractor] = None):
        self.extractor = extractor or FunctionExtractor()

    def score(self, file: SourceFile) -> ComplexityResult:
        functions = [
            FunctionComplexity(
                name=span.name,
                complexity=calculate_complexity(span.text),
                line=span.start_line,
            )
            for span in self.extractor.extract(file.content)
        ]

        if functions:
            average = float(np.mean([f.complexity for f in functions]))
        else:
            average = 0.0

        return ComplexityResult(
            file=file.path,
            average_complexity=average,
            functions=functions,
            rating=rate_complexity(average),
        )

    def score_all(self, files: Sequence[SourceFile]) -> List[ComplexityResult]:
        results = [self.score(f) for f in files]
        logger.debug("Scored complexity for %d files", len(results))
        return results
