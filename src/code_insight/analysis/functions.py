"""Heuristic function extraction.

Function-like regions are located with a small table of regexes and closed
off by brace matching. This is an approximation tier: there is no grammar,
matches from different patterns are not merged, and the same function can
show up more than once (e.g. ``export function foo() {`` matches both the
declaration and the export pattern).
"""

import re
from typing import Iterator, Pattern, Sequence

from ..models import FunctionSpan

FUNCTION_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"function\s+(\w+)"),
    re.compile(r"const\s+(\w+)\s*=\s*(?:async\s+)?\(.*\)\s*=>"),
    re.compile(r"(\w+)\s*\([^)]*\)\s*{"),
    re.compile(r"export\s+(?:const|function)\s+(\w+)"),
)


def find_block_end(text: str, start: int) -> int:
    """Return the offset just past the brace block that begins at or after ``start``.

    The scan counts ``{`` up and ``}`` down and stops at the first closing
    brace that brings the count back to zero after at least one opening
    brace. Returns ``start`` when no balanced block is found.
    """
    depth = 0
    opened = False
    for pos in range(start, len(text)):
        char = text[pos]
        if char == "{":
            depth += 1
            opened = True
        elif char == "}":
            depth -= 1
            if opened and depth == 0:
                return pos + 1
    return start


class FunctionExtractor:
    """Splits source text into ``FunctionSpan`` objects.

    Swap in a parser-backed subclass for higher fidelity; downstream code
    only relies on ``extract`` yielding spans.
    """

    def __init__(self, patterns: Sequence[Pattern[str]] = FUNCTION_PATTERNS):
        self.patterns = tuple(patterns)

    def extract(self, text: str) -> Iterator[FunctionSpan]:
        """Yield spans pattern by pattern, each pattern in match order."""
        for pattern in self.patterns:
            for match in pattern.finditer(text):
                start = match.start()
                end = find_block_end(text, start)
                yield FunctionSpan(
                    name=match.group(1),
                    start_line=text.count("\n", 0, start) + 1,
                    text=text[start:end],
                )
