"""Tests for key estimation by frequency matching and known plaintext."""

import pytest

from vigenere_analyzer.services.analysis.key_estimator import KeyEstimator, PartialKey
from vigenere_analyzer.services.engines.vigenere import encrypt


class TestFrequencyMatching:
    """Test suite for find_likely_key."""

    @pytest.fixture
    def estimator(self, alphabet, model):
        return KeyEstimator(alphabet, model.letter_frequencies)

    def test_recovers_key(self, estimator, english_text, alphabet):
        """Test recovery of a short key from English ciphertext."""
        ciphertext = encrypt(english_text, "key", alphabet)
        assert estimator.find_likely_key(ciphertext, 3) == "key"

    def test_multiple_of_key_length(self, estimator, english_text, alphabet):
        """A multiple of the true length repeats the key."""
        ciphertext = encrypt(english_text, "key", alphabet)
        assert estimator.find_likely_key(ciphertext, 6) == "keykey"

    def test_key_has_requested_length(self, estimator, english_text, alphabet):
        """Test that every key length yields a key of that length."""
        ciphertext = encrypt(english_text, "lemon", alphabet)
        for key_length in range(1, 8):
            assert len(estimator.find_likely_key(ciphertext, key_length)) == key_length

    def test_deterministic(self, estimator, english_text, alphabet):
        """Same input, same key."""
        ciphertext = encrypt(english_text, "cipher", alphabet)
        first = estimator.find_likely_key(ciphertext, 6)
        assert all(estimator.find_likely_key(ciphertext, 6) == first for _ in range(3))

    def test_empty_columns_pick_first_shift(self, estimator):
        """Columns without alphabet characters tie on every shift."""
        assert estimator.find_likely_key("1234 5678", 2) == "aa"


class TestKnownPlaintext:
    """Test suite for crib-based key deduction."""

    @pytest.fixture
    def estimator(self, alphabet, model):
        return KeyEstimator(alphabet, model.letter_frequencies)

    def test_exact_shifts(self, estimator, alphabet):
        """A consistent crib settles every position."""
        ciphertext = encrypt("attackatdawn", "key", alphabet)
        partial = estimator.find_partial_key(ciphertext, "attack", 3)

        assert partial.shifts == (10, 4, 24)
        assert partial.is_resolved
        assert partial.render(alphabet) == "key"

    def test_conflict_leaves_position_unresolved(self, estimator, alphabet):
        """Disagreeing shifts clear the position."""
        partial = estimator.find_partial_key("aa", "ab", 1)

        assert partial.shifts == (None,)
        assert partial.unresolved_positions == [0]
        assert partial.render(alphabet) == "?"

    def test_conflict_is_sticky(self, estimator):
        """A later agreeing shift does not restore a conflicting position."""
        partial = estimator.find_partial_key("aaa", "aba", 1)
        assert partial.shifts == (None,)

    def test_crib_shorter_than_key(self, estimator):
        """A crib shorter than the key length yields nothing."""
        assert estimator.find_partial_key("kxrkgikxbkal", "at", 3) is None

    def test_separators_leave_gaps(self, estimator, alphabet):
        """Characters outside the alphabet do not contribute shifts."""
        ciphertext = encrypt("a b", "xyz", alphabet)
        partial = estimator.find_partial_key(ciphertext, "a b", 3)

        assert partial.shifts == (23, None, 25)
        assert partial.render(alphabet) == "x?z"

    def test_crib_longer_than_ciphertext(self, estimator):
        """Crib characters past the end of the ciphertext are ignored."""
        partial = estimator.find_partial_key("b", "aaaa", 2)
        assert partial.shifts == (1, None)


class TestCandidateExpansion:
    """Test suite for generate_key_candidates."""

    def test_expansion_order(self):
        """The first unresolved position varies fastest."""
        estimator = KeyEstimator("abc", {})
        candidates = estimator.generate_key_candidates(PartialKey((None, 1, None)))

        assert candidates == [
            "aba", "bba", "cba",
            "abb", "bbb", "cbb",
            "abc", "bbc", "cbc",
        ]

    def test_resolved_key_yields_itself(self):
        """Test that a fully resolved key expands to one candidate."""
        estimator = KeyEstimator("abc", {})
        assert estimator.generate_key_candidates(PartialKey((2, 0))) == ["ca"]

    def test_three_unknowns_fully_expanded(self, alphabet):
        """Up to three unknown positions are enumerated exhaustively."""
        estimator = KeyEstimator(alphabet, {})
        candidates = estimator.generate_key_candidates(PartialKey((None, None, 4, None)))

        assert len(candidates) == 26 ** 3
        assert len(set(candidates)) == 26 ** 3
        assert all(candidate[2] == "e" for candidate in candidates)

    def test_fallback_over_three_unknowns(self):
        """More than three unknowns fall back to the first alphabet character."""
        estimator = KeyEstimator("xyz", {})
        candidates = estimator.generate_key_candidates(
            PartialKey((None, None, 1, None, None))
        )
        assert candidates == ["xxyxx"]
