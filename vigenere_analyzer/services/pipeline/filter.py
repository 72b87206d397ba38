"""
Candidate filter for threshold gating.

A candidate is kept only if every enabled metric clears its minimum.
Rejected candidates are dropped silently.
"""

from typing import ClassVar

from vigenere_analyzer.services.pipeline.scorer import RawScores


class CandidateFilter:
    """
    Hard filters (binary pass/fail) on raw scores.

    - IC must exceed 0.06
    - Mean n-gram log-likelihood must exceed -3.5
    - Dictionary coverage must exceed 0.1

    Disabled metrics are not checked.
    """

    MIN_IC: ClassVar[float] = 0.06
    MIN_NGRAM_SCORE: ClassVar[float] = -3.5
    MIN_DICT_SCORE: ClassVar[float] = 0.1

    def __init__(self, use_ic: bool = True, use_ngrams: bool = True, use_dict: bool = True):
        self.use_ic = use_ic
        self.use_ngrams = use_ngrams
        self.use_dict = use_dict

    def passes(self, scores: RawScores) -> bool:
        """Return True if the scores clear every enabled threshold."""
        return self.reject_reason(scores) is None

    def reject_reason(self, scores: RawScores) -> str | None:
        """Name the first failing metric, or None if the scores pass."""
        if self.use_ic and not scores.ic > self.MIN_IC:
            return "low_ic"
        if self.use_ngrams and not scores.ngram_score > self.MIN_NGRAM_SCORE:
            return "low_ngram_score"
        if self.use_dict and not scores.dict_score > self.MIN_DICT_SCORE:
            return "low_dict_score"
        return None
