from dataclasses import dataclass

from vigenere_analyzer.core.exceptions import InvalidAlphabetError, InvalidKeyError


def alphabet_positions(alphabet: str) -> dict[str, int]:
    """Map each alphabet character to its first zero-based position."""
    positions: dict[str, int] = {}
    for idx, char in enumerate(alphabet):
        positions.setdefault(char, idx)
    return positions


def key_shifts(key: str, alphabet: str) -> list[int]:
    """
    Convert a key to its per-position shifts.

    Raises:
        InvalidKeyError: If the key is empty or uses characters outside
            the alphabet.
    """
    if not key:
        raise InvalidKeyError("Key must not be empty")

    positions = alphabet_positions(alphabet)
    shifts = []
    for char in key:
        shift = positions.get(char.lower())
        if shift is None:
            raise InvalidKeyError(
                f"Key character '{char}' is not in the alphabet",
                {"key": key, "alphabet": alphabet},
            )
        shifts.append(shift)
    return shifts


def _shift_text(text: str, key: str, alphabet: str, direction: int) -> str:
    if len(alphabet) < 2:
        raise InvalidAlphabetError(alphabet)

    positions = alphabet_positions(alphabet)
    shifts = key_shifts(key, alphabet)
    alpha_len = len(alphabet)
    key_len = len(shifts)

    result = []
    # The key index follows the raw character index, so characters outside
    # the alphabet still consume a key position.
    for i, char in enumerate(text):
        pos = positions.get(char.lower())
        if pos is None:
            result.append(char)
            continue
        result.append(alphabet[(pos + direction * shifts[i % key_len]) % alpha_len])

    return "".join(result)


def encrypt(plaintext: str, key: str, alphabet: str) -> str:
    """Encrypt: cipherPos = (plainPos + keyPos) mod len(alphabet)."""
    return _shift_text(plaintext, key, alphabet, 1)


def decrypt(ciphertext: str, key: str, alphabet: str) -> str:
    """Decrypt: plainPos = (cipherPos - keyPos) mod len(alphabet)."""
    return _shift_text(ciphertext, key, alphabet, -1)


@dataclass
class DecryptionResult:
    """Result of a decryption operation."""

    plaintext: str
    key: str
    explanation: str


class VigenereEngine:
    """
    Vigenère cipher engine over a configurable alphabet.

    A polyalphabetic substitution cipher that uses a keyword to determine
    the shift for each letter. Each key character's position in the
    alphabet is the shift applied at the matching text position.
    """

    name = "Vigenère Cipher"
    description = (
        "A polyalphabetic cipher where each letter is shifted by a different amount "
        "based on a repeating keyword. Vulnerable to frequency analysis per key "
        "position and to known-plaintext attacks."
    )

    def __init__(self, alphabet: str):
        if len(alphabet) < 2:
            raise InvalidAlphabetError(alphabet)
        self.alphabet = alphabet

    def encrypt(self, plaintext: str, key: str) -> str:
        """Encrypt using the keyword."""
        return encrypt(plaintext, key, self.alphabet)

    def decrypt_with_key(self, ciphertext: str, key: str) -> DecryptionResult:
        """Decrypt with a known keyword."""
        plaintext = decrypt(ciphertext, key, self.alphabet)
        return DecryptionResult(
            plaintext=plaintext,
            key=key.lower(),
            explanation=self.explain(key),
        )

    def explain(self, key: str) -> str:
        """Generate human-readable explanation."""
        shifts = key_shifts(key, self.alphabet)
        shift_desc = ", ".join(f"{char}={shift}" for char, shift in zip(key.lower(), shifts))

        return (
            f"Vigenère cipher with keyword '{key.lower()}' (length {len(key)}) "
            f"over a {len(self.alphabet)}-character alphabet. "
            f"Letter shifts: {shift_desc}. "
            f"Each character of the ciphertext is shifted back by the corresponding "
            f"key character's position in the alphabet."
        )
