"""
Candidate scorer.

Computes the three signals used to judge a decrypted candidate:
- Index of Coincidence over the alphabet
- Mean n-gram log-likelihood (1- to 4-grams)
- Dictionary coverage
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import ClassVar

from vigenere_analyzer.services.analysis.language_model import LanguageModel


@dataclass(frozen=True)
class RawScores:
    """Raw, un-normalized scores of one candidate plaintext."""

    ic: float
    ngram_score: float
    dict_score: float


class CandidateScorer:
    """
    Scores plaintext candidates against a language model.

    Each metric can be switched off; a disabled metric is reported as 0.0
    rather than computed.
    """

    WORD_SEPARATOR: ClassVar[re.Pattern[str]] = re.compile(r"[^a-z]+")

    def __init__(self, model: LanguageModel):
        self.model = model

    def score(
        self,
        plaintext: str,
        alphabet: str,
        use_ic: bool = True,
        use_ngrams: bool = True,
        use_dict: bool = True,
    ) -> RawScores:
        """
        Score a candidate plaintext.

        Args:
            plaintext: The decrypted plaintext
            alphabet: Alphabet the IC is counted over
            use_ic, use_ngrams, use_dict: Which metrics to compute

        Returns:
            RawScores with disabled metrics set to 0.0
        """
        return RawScores(
            ic=self.index_of_coincidence(plaintext, alphabet) if use_ic else 0.0,
            ngram_score=self.ngram_score(plaintext) if use_ngrams else 0.0,
            dict_score=self.dictionary_score(plaintext) if use_dict else 0.0,
        )

    @staticmethod
    def index_of_coincidence(text: str, alphabet: str) -> float:
        """
        Calculate Index of Coincidence over the alphabet characters of text.

        IOC measures how likely two randomly chosen letters are the same.
        - English text: ~0.0667
        - Random text over 26 letters: ~0.0385
        """
        members = set(alphabet)
        counter = Counter(c for c in (ch.lower() for ch in text) if c in members)
        n = sum(counter.values())
        if n < 2:
            return 0.0

        numerator = sum(f * (f - 1) for f in counter.values())
        return numerator / (n * (n - 1))

    def ngram_score(self, text: str) -> float:
        """
        Mean log10 likelihood over every 1-, 2-, 3- and 4-character window.

        Windows slide by one over the whole text, separators included.
        """
        text = text.lower()
        score = 0.0
        windows = 0

        for order in range(1, self.model.MAX_ORDER + 1):
            table = self.model.log_probabilities[order - 1]
            floor = self.model.floor(order)
            for i in range(len(text) - order + 1):
                score += table.get(text[i:i + order], floor)
                windows += 1

        return score / windows if windows > 0 else 0.0

    def dictionary_score(self, text: str) -> float:
        """Fraction of tokens longer than one character found in the word list."""
        words = [w for w in self.WORD_SEPARATOR.split(text.lower()) if len(w) > 1]
        if not words:
            return 0.0

        known = sum(1 for word in words if self.model.is_word(word))
        return known / len(words)
