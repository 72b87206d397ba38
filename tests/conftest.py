import pytest

from vigenere_analyzer.services.analysis.language_model import LanguageModel, get_language_model

ALPHABET = "abcdefghijklmnopqrstuvwxyz"

# Natural English with a typical letter distribution (IC ~0.0675)
ENGLISH_TEXT = (
    "the history of cryptography is the story of people who wanted to keep their "
    "secrets and of other people who wanted to read them. for many centuries the "
    "vigenere cipher was thought to be unbreakable, and it was called the "
    "indecipherable cipher. that changed when it was shown that the key length "
    "could be found from repeated patterns in the text. once the length is known, "
    "each column of letters can be attacked on its own with simple frequency "
    "counts, because every column is just a caesar cipher. this is why a short key "
    "that repeats many times gives very little protection, and why modern systems "
    "use keys that never repeat. there are many ways to learn about this, and you "
    "can see how the method works if you try it by hand with a pencil and some paper."
)


@pytest.fixture
def alphabet() -> str:
    return ALPHABET


@pytest.fixture
def english_text() -> str:
    return ENGLISH_TEXT


@pytest.fixture
def model() -> LanguageModel:
    return get_language_model()


@pytest.fixture
def toy_model() -> LanguageModel:
    """Model where only runs of 'a' are known; every known n-gram has log10 p = 0."""
    return LanguageModel.from_counts(
        {"a": 1},
        {"aa": 1},
        {"aaa": 1},
        {"aaaa": 1},
        words={"ab", "cd"},
        letter_frequencies={"a": 100.0},
    )
