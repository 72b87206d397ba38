import math
from dataclasses import dataclass
from functools import lru_cache
from typing import ClassVar, Mapping

from vigenere_analyzer.services.analysis import english


@dataclass(frozen=True)
class LanguageModel:
    """
    Log-probability tables for 1..4-gram sequences plus a word list.

    Each order stores log10(count / total) per n-gram and a floor of
    log10(0.01 / total) returned for n-grams never seen. The model is
    immutable once built, so workers share it without synchronization.
    """

    MAX_ORDER: ClassVar[int] = 4
    FLOOR_PSEUDO_COUNT: ClassVar[float] = 0.01

    # Index 0 holds monograms, index 3 quadgrams
    log_probabilities: tuple[dict[str, float], ...]
    floors: tuple[float, ...]
    words: frozenset[str]
    letter_frequencies: dict[str, float]

    @classmethod
    def from_counts(
        cls,
        monograms: Mapping[str, int],
        bigrams: Mapping[str, int],
        trigrams: Mapping[str, int],
        quadgrams: Mapping[str, int],
        words: frozenset[str] | set[str] = frozenset(),
        letter_frequencies: Mapping[str, float] | None = None,
    ) -> "LanguageModel":
        """
        Build a model from raw frequency counts per n-gram order.

        Args:
            monograms..quadgrams: Raw counts keyed by n-gram
            words: Known words for dictionary coverage
            letter_frequencies: Target letter percentages for shift estimation

        Returns:
            An immutable LanguageModel
        """
        tables = []
        floors = []

        for order, counts in enumerate((monograms, bigrams, trigrams, quadgrams), start=1):
            total = sum(counts.values())
            if total <= 0:
                raise ValueError(f"No counts supplied for {order}-grams")

            tables.append({
                gram.lower(): math.log10(count / total)
                for gram, count in counts.items()
            })
            floors.append(math.log10(cls.FLOOR_PSEUDO_COUNT / total))

        return cls(
            log_probabilities=tuple(tables),
            floors=tuple(floors),
            words=frozenset(word.lower() for word in words),
            letter_frequencies=dict(letter_frequencies or {}),
        )

    def lookup(self, gram: str) -> float:
        """Log10 probability of an n-gram, or its order's floor when unseen."""
        order = len(gram)
        if not 1 <= order <= self.MAX_ORDER:
            raise ValueError(f"Unsupported n-gram order: {order}")

        return self.log_probabilities[order - 1].get(gram.lower(), self.floors[order - 1])

    def floor(self, order: int) -> float:
        return self.floors[order - 1]

    def is_word(self, token: str) -> bool:
        return token in self.words


@lru_cache
def get_language_model() -> LanguageModel:
    """Get the cached English language model."""
    return LanguageModel.from_counts(
        english.MONOGRAM_COUNTS,
        english.BIGRAM_COUNTS,
        english.TRIGRAM_COUNTS,
        english.QUADGRAM_COUNTS,
        words=english.WORDS,
        letter_frequencies=english.LETTER_FREQUENCIES,
    )
