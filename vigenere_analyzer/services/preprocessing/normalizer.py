from vigenere_analyzer.core.exceptions import CiphertextTooLongError, InvalidAlphabetError


class TextNormalizer:
    """
    Prepares user input before it reaches the cipher engine.

    Handles:
    - Alphabet case folding and deduplication
    - Trimming of ciphertext and cribs
    - Length limits
    """

    def __init__(self, max_length: int = 100_000):
        self.max_length = max_length

    def normalize_alphabet(self, alphabet: str) -> str:
        """
        Lower-case the alphabet and drop repeated characters, keeping order.

        Raises:
            InvalidAlphabetError: If fewer than 2 unique characters remain
        """
        normalized = "".join(dict.fromkeys(alphabet.lower()))
        if len(normalized) < 2:
            raise InvalidAlphabetError(normalized)
        return normalized

    def normalize(self, text: str) -> str:
        """
        Trim surrounding whitespace.

        Raises:
            CiphertextTooLongError: If the text exceeds max_length
        """
        text = text.strip()
        if len(text) > self.max_length:
            raise CiphertextTooLongError(len(text), self.max_length)
        return text
