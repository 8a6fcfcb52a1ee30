"""Tests for pairwise near-duplicate detection."""

import pytest

from code_insight.analysis.duplication import DuplicationDetector, normalize_line
from code_insight.config import ThresholdConfig
from code_insight.models import SourceFile

DUPLICATED_BLOCK = [
    "function foo() {",
    "  const total = x + 1;",
    "  logger.info(total);",
    "  return total;",
]


def _file(path, first_line, block=DUPLICATED_BLOCK):
    return SourceFile(path, "\n".join([first_line] + list(block)))


BIG_BLOCK = [
    "for (const item of items) {",
    "  const price = item.price;",
    "  const qty = item.quantity;",
    "  subtotal += price * qty;",
    "  audit.push(item.id);",
    "  counter += 1;",
]


class TestNormalizeLine:
    def test_trims_lowers_and_collapses(self):
        assert normalize_line("   Const   X =\t 1;  ") == "const x = 1;"


class TestDuplicationDetector:
    def test_shared_block_detected(self, duplicated_pair):
        result = DuplicationDetector(min_fragment_size=4).detect(duplicated_pair)

        assert len(result.duplicates) == 1
        fragment = result.duplicates[0]
        assert fragment.fragment1.file == "a.js"
        assert fragment.fragment2.file == "b.js"
        assert (fragment.fragment1.start_line, fragment.fragment1.end_line) == (2, 5)
        assert (fragment.fragment2.start_line, fragment.fragment2.end_line) == (2, 5)
        assert fragment.lines == 4
        assert fragment.similarity == pytest.approx(1.0)
        assert result.total_duplicate_lines == 4
        assert result.duplication_percentage == pytest.approx(40.0)

    def test_default_fragment_size_is_too_large(self, duplicated_pair):
        result = DuplicationDetector().detect(duplicated_pair)
        assert result.duplicates == []
        assert result.total_duplicate_lines == 0
        assert result.duplication_percentage == 0.0

    def test_same_path_never_paired(self):
        a = _file("a.js", "const x = 1;")
        again = _file("a.js", "let y = 2;")
        result = DuplicationDetector(min_fragment_size=4).detect([a, again])
        assert result.duplicates == []

    def test_similarity_threshold_both_sides(self):
        changed = list(DUPLICATED_BLOCK)
        changed[2] = "  metrics.record(total);"
        files = [_file("a.js", "const x = 1;"), _file("b.js", "let y = 2;", changed)]

        strict = DuplicationDetector(min_fragment_size=4).detect(files)
        assert strict.duplicates == []

        lenient = DuplicationDetector(min_fragment_size=4, similarity_threshold=0.6).detect(files)
        assert len(lenient.duplicates) == 1
        assert lenient.duplicates[0].similarity == pytest.approx(2 / 3)

    def test_short_lines_never_count_as_matches(self):
        block = ["function foo() {", "}", "}", "}"]
        files = [_file("a.js", "const x = 1;", block), _file("b.js", "let y = 2;", block)]
        result = DuplicationDetector(min_fragment_size=4).detect(files)
        assert result.duplicates == []

    def test_only_first_fragment_side_counts(self):
        files = [
            _file("a.js", "const x = 1;"),
            _file("b.js", "let y = 2;"),
            _file("c.js", "var z = 3;"),
        ]
        result = DuplicationDetector(min_fragment_size=4, max_duplicates=2).detect(files)

        # pairs (a, b), (a, c), (b, c); scan order decides what is kept
        assert [(d.fragment1.file, d.fragment2.file) for d in result.duplicates] == [
            ("a.js", "b.js"),
            ("a.js", "c.js"),
        ]
        # all three fragments count, but c.js only ever appears as fragment2
        assert result.total_duplicate_lines == 8
        assert result.duplication_percentage == pytest.approx(8 / 15 * 100)

    def test_output_capped_at_fifty(self):
        files = [_file(f"f{i:02d}.js", f"const v{i} = {i};") for i in range(11)]
        result = DuplicationDetector(min_fragment_size=4).detect(files)

        assert len(result.duplicates) == 50
        assert result.duplicates[0].fragment1.file == "f00.js"
        assert result.duplicates[0].fragment2.file == "f01.js"
        # every file but the last is fragment1 of some emitted fragment
        assert result.total_duplicate_lines == 10 * 4

    def test_value_ranking_keeps_largest(self):
        files = [
            _file("a.js", "const x = 1;"),
            _file("b.js", "let y = 2;"),
            _file("c.js", "var q = 9;", BIG_BLOCK),
            _file("d.js", "var w = 8;", BIG_BLOCK),
        ]

        scan = DuplicationDetector(min_fragment_size=4, max_duplicates=1).detect(files)
        assert scan.duplicates[0].fragment1.file == "a.js"
        assert scan.duplicates[0].lines == 4

        ranked = DuplicationDetector(
            min_fragment_size=4, max_duplicates=2, ranking="value"
        ).detect(files)
        assert [d.lines for d in ranked.duplicates] == [6, 5]
        assert all(d.fragment1.file == "c.js" for d in ranked.duplicates)
        # ranking never changes the line accounting
        assert ranked.total_duplicate_lines == scan.total_duplicate_lines

    def test_unknown_ranking_rejected(self):
        with pytest.raises(ValueError):
            DuplicationDetector(ranking="best")

    def test_from_thresholds(self):
        detector = DuplicationDetector.from_thresholds(
            ThresholdConfig(min_fragment_size=4, similarity_threshold=0.9, max_duplicates=7)
        )
        assert detector.min_fragment_size == 4
        assert detector.similarity_threshold == 0.9
        assert detector.max_duplicates == 7
        assert detector.ranking == "scan"

    def test_empty_corpus(self):
        result = DuplicationDetector().detect([])
        assert result.duplicates == []
        assert result.duplication_percentage == 0.0
