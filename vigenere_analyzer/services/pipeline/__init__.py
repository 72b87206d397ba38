"""
Pipeline services for Vigenère key search.

This module implements the parallel key search:
1. Partitions candidate key lengths across a pool of workers
2. Estimates keys per length (frequency matching or known plaintext)
3. Scores candidates (IC, n-grams, dictionary) and gates them by threshold
4. Ranks the merged candidates on a normalized 0-100 scale
"""

from vigenere_analyzer.services.pipeline.filter import CandidateFilter
from vigenere_analyzer.services.pipeline.orchestrator import SearchOrchestrator
from vigenere_analyzer.services.pipeline.ranker import ResultRanker
from vigenere_analyzer.services.pipeline.scorer import CandidateScorer

__all__ = [
    "CandidateFilter",
    "SearchOrchestrator",
    "ResultRanker",
    "CandidateScorer",
]
