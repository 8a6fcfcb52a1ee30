"""Near-duplicate fragment detection across files.

Algorithm, for every pair of distinct files (A, B) in corpus order:

1. Normalize each line: strip, lower-case, collapse whitespace runs.
2. Every line ``A[i]`` of at least ``min_anchor_length`` characters that
   equals some ``B[j]`` is an anchor.
3. From each anchor, walk forward in lockstep until either file ends or the
   window reaches ``max_window`` lines, counting lines that are equal and
   longer than ``min_match_length``.
4. ``similarity = matches / lines walked`` (the anchor itself is not part of
   the ratio). Windows of at least ``min_fragment_size`` lines with
   similarity at or above ``similarity_threshold`` are emitted.

Anchors are visited i-ascending then j-ascending inside a pair, pairs in
corpus order, and that scan order decides which fragments survive the output
cap. Overlapping fragments from neighbouring anchors are not merged.

Cost is O(F² · L · W) for F files, L lines per file and window W; anchors
are looked up through a per-file line index so non-matching (i, j) pairs are
never visited.
"""

from __future__ import annotations

import heapq
import re
from collections import defaultdict
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..logging_config import get_logger
from ..models import DuplicateFragment, DuplicationResult, FragmentLocation, SourceFile

logger = get_logger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_line(line: str) -> str:
    return _WHITESPACE_RUN.sub(" ", line.strip().lower())


class DuplicationDetector:
    """Pairwise sliding-window clone detector.

    Args:
        min_fragment_size: Minimum window length for an emitted fragment
        similarity_threshold: Minimum share of matching lines in a window
        max_window: Hard cap on window expansion per anchor
        max_duplicates: Fragments kept in the result
        min_anchor_length: Anchor lines shorter than this are ignored
        min_match_length: Matching lines must be longer than this to count
        ranking: "scan" keeps the first fragments in scan order,
            "value" keeps the largest ``lines * similarity``
    """

    def __init__(
        self,
        min_fragment_size: int = 6,
        similarity_threshold: float = 0.85,
        max_window: int = 50,
        max_duplicates: int = 50,
        min_anchor_length: int = 5,
        min_match_length: int = 3,
        ranking: str = "scan",
    ):
        if ranking not in ("scan", "value"):
            raise ValueError(f"Unknown ranking: {ranking!r}")
        self.min_fragment_size = min_fragment_size
        self.similarity_threshold = similarity_threshold
        self.max_window = max_window
        self.max_duplicates = max_duplicates
        self.min_anchor_length = min_anchor_length
        self.min_match_length = min_match_length
        self.ranking = ranking

    @classmethod
    def from_thresholds(cls, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS) -> "DuplicationDetector":
        return cls(
            min_fragment_size=thresholds.min_fragment_size,
            similarity_threshold=thresholds.similarity_threshold,
            max_window=thresholds.max_fragment_window,
            max_duplicates=thresholds.max_duplicates,
            min_anchor_length=thresholds.min_anchor_length,
            min_match_length=thresholds.min_match_length,
            ranking=thresholds.duplicate_ranking,
        )

    def detect(self, files: Sequence[SourceFile]) -> DuplicationResult:
        normalized = [(f.path, [normalize_line(line) for line in f.lines]) for f in files]
        total_lines = sum(len(lines) for _, lines in normalized)

        duplicate_lines: Set[Tuple[str, int]] = set()
        kept: List[DuplicateFragment] = []
        heap: List[Tuple[float, int, DuplicateFragment]] = []
        emitted = 0

        for fragment in self.iter_fragments(normalized):
            # Only the first side of each fragment counts toward duplicate lines.
            first = fragment.fragment1
            for line in range(first.start_line, first.end_line + 1):
                duplicate_lines.add((first.file, line))

            if self.ranking == "scan":
                if len(kept) < self.max_duplicates:
                    kept.append(fragment)
            else:
                entry = (fragment.value, -emitted, fragment)
                if len(heap) < self.max_duplicates:
                    heapq.heappush(heap, entry)
                elif entry[:2] > heap[0][:2]:
                    heapq.heapreplace(heap, entry)
            emitted += 1

        if self.ranking == "value":
            kept = [entry[2] for entry in sorted(heap, key=lambda e: (-e[0], -e[1]))]

        if emitted > len(kept):
            logger.debug("Duplicate fragments capped: %d found, %d kept", emitted, len(kept))

        percentage = (len(duplicate_lines) / total_lines) * 100 if total_lines > 0 else 0.0
        return DuplicationResult(
            duplicates=kept,
            total_duplicate_lines=len(duplicate_lines),
            duplication_percentage=percentage,
        )

    def iter_fragments(
        self, normalized: Sequence[Tuple[str, List[str]]]
    ) -> Iterator[DuplicateFragment]:
        """Yield fragments for every file pair, in scan order."""
        for a in range(len(normalized)):
            path_a, lines_a = normalized[a]
            for b in range(a + 1, len(normalized)):
                path_b, lines_b = normalized[b]
                if path_a == path_b:
                    continue
                yield from self.compare(path_a, lines_a, path_b, lines_b)

    def compare(
        self,
        path_a: str,
        lines_a: List[str],
        path_b: str,
        lines_b: List[str],
        index_b: Optional[Dict[str, List[int]]] = None,
    ) -> Iterator[DuplicateFragment]:
        """Yield fragments shared by two normalized files, i then j ascending."""
        if path_a == path_b:
            return

        min_size = self.min_fragment_size
        if index_b is None:
            index_b = self._index(lines_b, len(lines_b) - min_size + 1)

        for i in range(len(lines_a) - min_size + 1):
            anchor = lines_a[i]
            if len(anchor) < self.min_anchor_length:
                continue
            for j in index_b.get(anchor, ()):
                fragment = self._expand(path_a, lines_a, i, path_b, lines_b, j)
                if fragment is not None:
                    yield fragment

    def _expand(
        self,
        path_a: str,
        lines_a: List[str],
        i: int,
        path_b: str,
        lines_b: List[str],
        j: int,
    ) -> Optional[DuplicateFragment]:
        match_size = 1
        match_count = 0
        total = 0
        while (
            i + match_size < len(lines_a)
            and j + match_size < len(lines_b)
            and match_size < self.max_window
        ):
            total += 1
            line = lines_a[i + match_size]
            if line == lines_b[j + match_size] and len(line) > self.min_match_length:
                match_count += 1
            match_size += 1

        similarity = match_count / total if total else 0.0
        if match_size < self.min_fragment_size or similarity < self.similarity_threshold:
            return None

        return DuplicateFragment(
            fragment1=FragmentLocation(path_a, i + 1, i + match_size),
            fragment2=FragmentLocation(path_b, j + 1, j + match_size),
            lines=match_size,
            similarity=similarity,
        )

    @staticmethod
    def _index(lines: List[str], limit: int) -> Dict[str, List[int]]:
        """Map each normalized line to its ascending positions below ``limit``."""
        index: Dict[str, List[int]] = defaultdict(list)
        for j in range(max(0, limit)):
            index[lines[j]].append(j)
        return index
