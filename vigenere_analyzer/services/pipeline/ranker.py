"""
Result ranker.

Normalizes raw scores to 0-100 per metric across one job, blends them into
a weighted composite and sorts by the selected metric.
"""

from typing import ClassVar

from vigenere_analyzer.models.schemas import SortMetric
from vigenere_analyzer.services.pipeline.models import CandidateResult


class ResultRanker:
    """
    Ranks the merged candidates of a job.

    When every candidate shares the same raw value for a metric, that
    metric normalizes to a neutral 50 for all of them.
    """

    NEUTRAL_SCORE: ClassVar[float] = 50.0

    # Composite weights; n-gram evidence dominates
    IC_WEIGHT: ClassVar[float] = 0.3
    NGRAM_WEIGHT: ClassVar[float] = 0.5
    DICT_WEIGHT: ClassVar[float] = 0.2

    SORT_ATTRIBUTES: ClassVar[dict[SortMetric, str]] = {
        SortMetric.IC: "ic_norm",
        SortMetric.NGRAM: "ngram_score_norm",
        SortMetric.DICT: "dict_score_norm",
        SortMetric.TOTAL: "total_score",
    }

    def rank(
        self,
        results: list[CandidateResult],
        sort_by: SortMetric = SortMetric.TOTAL,
    ) -> list[CandidateResult]:
        """
        Normalize, score and sort results.

        Args:
            results: Candidates of a single job, in merge order
            sort_by: Metric to sort on (descending)

        Returns:
            A new list, sorted; ties keep their merge order
        """
        self.normalize(results)
        attribute = self.SORT_ATTRIBUTES[sort_by]
        return sorted(results, key=lambda r: getattr(r, attribute), reverse=True)

    def normalize(self, results: list[CandidateResult]) -> None:
        """Fill in the normalized scores and the composite total in place."""
        if not results:
            return

        ic_norms = self._rescale([r.ic for r in results])
        ngram_norms = self._rescale([r.ngram_score for r in results])
        dict_norms = self._rescale([r.dict_score for r in results])

        for result, ic_norm, ngram_norm, dict_norm in zip(
            results, ic_norms, ngram_norms, dict_norms
        ):
            result.ic_norm = ic_norm
            result.ngram_score_norm = ngram_norm
            result.dict_score_norm = dict_norm
            result.total_score = (
                ic_norm * self.IC_WEIGHT
                + ngram_norm * self.NGRAM_WEIGHT
                + dict_norm * self.DICT_WEIGHT
            )

    def _rescale(self, values: list[float]) -> list[float]:
        low = min(values)
        high = max(values)
        if high == low:
            return [self.NEUTRAL_SCORE] * len(values)
        return [100 * (v - low) / (high - low) for v in values]
