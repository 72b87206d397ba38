from dataclasses import dataclass

from vigenere_analyzer.models.schemas import SortMetric


@dataclass(frozen=True)
class AnalysisOptions:
    """Everything a key search needs; shipped unchanged to every worker."""

    ciphertext: str
    alphabet: str
    min_key_length: int
    max_key_length: int
    known_plaintext: str = ""
    use_ic: bool = True
    use_ngrams: bool = True
    use_dict: bool = True
    sort_by: SortMetric = SortMetric.TOTAL

    @property
    def key_lengths(self) -> list[int]:
        return list(range(self.min_key_length, self.max_key_length + 1))


@dataclass
class CandidateResult:
    """A decrypted candidate that cleared the thresholds."""

    key: str
    plaintext: str
    ic: float
    ngram_score: float
    dict_score: float
    key_length: int
    method: str

    # Filled in by the ranker
    ic_norm: float | None = None
    ngram_score_norm: float | None = None
    dict_score_norm: float | None = None
    total_score: float | None = None
