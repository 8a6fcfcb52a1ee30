"""Output formatters for Code Insight."""

from typing import Iterable, Optional

from .base import SECTIONS, BaseFormatter, resolve_sections
from .json_formatter import JsonFormatter
from .quiet_formatter import QuietFormatter
from .rich_formatter import RichFormatter


def get_formatter(name: str, sections: Optional[Iterable[str]] = None) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "rich", "json", "quiet"
        sections: Report sections to include (default: all)

    Returns:
        Formatter instance

    Raises:
        ValueError: If name or a section is not recognized
    """
    formatters = {
        "rich": RichFormatter,
        "json": JsonFormatter,
        "quiet": QuietFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(formatters))}")
    return cls(sections=sections)


__all__ = [
    "BaseFormatter",
    "RichFormatter",
    "JsonFormatter",
    "QuietFormatter",
    "SECTIONS",
    "get_formatter",
    "resolve_sections",
]
