import itertools
from dataclasses import dataclass
from typing import ClassVar, Mapping

from vigenere_analyzer.services.engines.vigenere import alphabet_positions


@dataclass(frozen=True)
class PartialKey:
    """
    A key deduced from a known-plaintext crib.

    Each position holds a shift, or None when the crib never reached it
    or produced conflicting shifts for it.
    """

    PLACEHOLDER: ClassVar[str] = "?"

    shifts: tuple[int | None, ...]

    @property
    def unresolved_positions(self) -> list[int]:
        return [i for i, shift in enumerate(self.shifts) if shift is None]

    @property
    def is_resolved(self) -> bool:
        return all(shift is not None for shift in self.shifts)

    def render(self, alphabet: str) -> str:
        return "".join(
            self.PLACEHOLDER if shift is None else alphabet[shift]
            for shift in self.shifts
        )


class KeyEstimator:
    """
    Estimates likely keys for a fixed key length.

    Two strategies:
    1. Frequency matching: break each key position as a Caesar shift by
       correlating its column against English letter frequencies.
    2. Known plaintext: derive shifts directly from an aligned crib, then
       expand the positions the crib could not settle.
    """

    # Above this many unresolved positions only one fallback key is tried
    MAX_EXPANDED_POSITIONS: ClassVar[int] = 3

    def __init__(self, alphabet: str, letter_frequencies: Mapping[str, float]):
        self.alphabet = alphabet
        self.letter_frequencies = letter_frequencies
        self._positions = alphabet_positions(alphabet)

    def find_likely_key(self, ciphertext: str, key_length: int) -> str:
        """
        Find the most likely key of the given length by frequency matching.

        For each position k, the alphabet characters at indices
        k, k + key_length, ... form a column. Every shift is scored by the
        dot product of the column's percentage distribution, shifted by that
        amount, with the target frequencies. The first shift with the highest
        score wins.

        Args:
            ciphertext: The ciphertext to analyze
            key_length: Expected key length

        Returns:
            The most likely key of exactly key_length characters
        """
        alpha_len = len(self.alphabet)
        targets = [self.letter_frequencies.get(char, 0.0) for char in self.alphabet]
        key = []

        for k in range(key_length):
            column = [
                self._positions[char]
                for char in (c.lower() for c in ciphertext[k::key_length])
                if char in self._positions
            ]
            freqs = self._percentages(column)

            best_shift = 0
            best_score = float("-inf")

            for shift in range(alpha_len):
                score = sum(
                    targets[i] * freqs[(i + shift) % alpha_len]
                    for i in range(alpha_len)
                )
                if score > best_score:
                    best_score = score
                    best_shift = shift

            key.append(self.alphabet[best_shift])

        return "".join(key)

    def find_partial_key(
        self,
        ciphertext: str,
        known_plaintext: str,
        key_length: int,
    ) -> PartialKey | None:
        """
        Deduce key shifts from a crib aligned with the start of the ciphertext.

        Returns:
            A PartialKey, or None if the crib is shorter than key_length
        """
        if len(known_plaintext) < key_length:
            return None

        alpha_len = len(self.alphabet)
        shifts: list[int | None] = [None] * key_length
        conflicts: set[int] = set()

        for i, plain_char in enumerate(known_plaintext):
            if i >= len(ciphertext):
                break

            cipher_pos = self._positions.get(ciphertext[i].lower())
            plain_pos = self._positions.get(plain_char.lower())
            if cipher_pos is None or plain_pos is None:
                continue

            key_pos = i % key_length
            shift = (cipher_pos - plain_pos) % alpha_len

            if key_pos in conflicts:
                continue
            if shifts[key_pos] is None:
                shifts[key_pos] = shift
            elif shifts[key_pos] != shift:
                shifts[key_pos] = None
                conflicts.add(key_pos)

        return PartialKey(shifts=tuple(shifts))

    def generate_key_candidates(self, partial_key: PartialKey) -> list[str]:
        """
        Expand the unresolved positions of a partial key into full keys.

        With at most MAX_EXPANDED_POSITIONS unresolved positions every
        combination is returned, in alphabet order with the first unresolved
        position varying fastest. Otherwise a single key is returned with
        each unresolved position set to the first alphabet character.
        """
        unknown = partial_key.unresolved_positions
        base = list(partial_key.render(self.alphabet))

        if len(unknown) > self.MAX_EXPANDED_POSITIONS:
            for pos in unknown:
                base[pos] = self.alphabet[0]
            return ["".join(base)]

        candidates = []
        for combo in itertools.product(self.alphabet, repeat=len(unknown)):
            key = list(base)
            for pos, char in zip(reversed(unknown), combo):
                key[pos] = char
            candidates.append("".join(key))

        return candidates

    def _percentages(self, column: list[int]) -> list[float]:
        """Percentage distribution of alphabet positions in a column."""
        counts = [0] * len(self.alphabet)
        for pos in column:
            counts[pos] += 1

        total = len(column)
        if total == 0:
            return [0.0] * len(self.alphabet)
        return [count / total * 100 for count in counts]
