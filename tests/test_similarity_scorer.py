# -*- coding: utf-8 -*-
"""Tests for title normalization and edit-distance similarity."""

import pytest

from regintel.data_quality.similarity_scorer import (
    SimilarityScorer,
    levenshtein_distance,
    normalize_text,
)


class TestNormalizeText:
    """Tests for normalize_text."""

    def test_lowercases_and_strips_punctuation(self):
        """Punctuation is removed and case folded."""
        assert normalize_text("FDA: Recall!") == "fda recall"

    def test_trims_but_keeps_inner_whitespace(self):
        """Only outer whitespace is trimmed."""
        assert normalize_text("  a  b  ") == "a  b"

    def test_keeps_unicode_letters(self):
        """Accented letters count as word characters."""
        assert normalize_text("Zürich Ärzte") == "zürich ärzte"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_input(self, value):
        """Missing values normalize to the empty string."""
        assert normalize_text(value) == ""


class TestLevenshteinDistance:
    """Tests for levenshtein_distance."""

    def test_classic_example(self):
        """Test kitten/sitting."""
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_identical(self):
        """Test identical strings."""
        assert levenshtein_distance("recall", "recall") == 0

    def test_against_empty(self):
        """Distance to the empty string is the other length."""
        assert levenshtein_distance("", "pump") == 4
        assert levenshtein_distance("pump", "") == 4

    def test_symmetric(self):
        """Test distance is symmetric."""
        assert levenshtein_distance("guidance", "guideline") == \
            levenshtein_distance("guideline", "guidance")


class TestSimilarityScorer:
    """Tests for SimilarityScorer.similarity."""

    def test_double_space_title(self):
        """One extra space over twenty characters scores 0.95."""
        scorer = SimilarityScorer()
        score = scorer.similarity("FDA Recall of Pumps", "FDA  Recall of Pumps")
        assert score == pytest.approx(0.95)

    def test_equal_after_normalization(self):
        """Case and punctuation differences score a perfect match."""
        scorer = SimilarityScorer()
        assert scorer.similarity("FDA Recall!", "fda recall") == 1.0
        assert scorer.is_normalized_equal("FDA Recall!", "fda recall")

    def test_both_empty(self):
        """Test two empty strings are identical."""
        assert SimilarityScorer().similarity("", None) == 1.0

    def test_one_empty(self):
        """Test one empty string scores zero."""
        assert SimilarityScorer().similarity(None, "abc") == 0.0

    def test_range_and_symmetry(self):
        """Scores stay within [0, 1] and ignore argument order."""
        scorer = SimilarityScorer()
        a, b = "EU MDR transition extended", "Swissmedic vigilance forms"
        score = scorer.similarity(a, b)
        assert 0.0 <= score <= 1.0
        assert score == scorer.similarity(b, a)

    def test_statistics(self):
        """Comparisons and short circuits are counted."""
        scorer = SimilarityScorer()
        scorer.similarity("a", "a")
        scorer.similarity("a", "b")
        stats = scorer.get_statistics()
        assert stats["comparisons"] == 2
        assert stats["short_circuits"] == 1

        scorer.reset_statistics()
        assert scorer.get_statistics()["comparisons"] == 0
