"""Base formatter interface for Code Insight output rendering."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Tuple

from ..models import AnalysisReport

SECTIONS: Tuple[str, ...] = ("summary", "complexity", "security", "duplication", "dependencies")


def resolve_sections(sections: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """Expand ``all`` and validate section names, keeping canonical order.

    Raises:
        ValueError: If a section name is not recognized
    """
    requested = set(sections or ("all",))
    if "all" in requested:
        return SECTIONS
    unknown = requested - set(SECTIONS)
    if unknown:
        raise ValueError(
            f"Unknown section(s): {', '.join(sorted(unknown))}. "
            f"Choose from: all, {', '.join(SECTIONS)}"
        )
    return tuple(s for s in SECTIONS if s in requested)


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    def __init__(self, sections: Optional[Iterable[str]] = None):
        self.sections = resolve_sections(sections)

    @abstractmethod
    def render(self, report: AnalysisReport) -> None:
        """Write the report to the terminal."""

    @abstractmethod
    def format(self, report: AnalysisReport) -> str:
        """Return formatted string representation of the report."""
