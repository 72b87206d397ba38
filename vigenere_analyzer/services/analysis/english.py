"""English reference statistics: raw n-gram counts, words and letter frequencies."""

MONOGRAM_COUNTS: dict[str, int] = {
    "a": 8167, "b": 1492, "c": 2782, "d": 4253, "e": 12702,
    "f": 2228, "g": 2015, "h": 6094, "i": 6966, "j": 153,
    "k": 772, "l": 4025, "m": 2406, "n": 6749, "o": 7507,
    "p": 1929, "q": 95, "r": 5987, "s": 6327, "t": 9056,
    "u": 2758, "v": 978, "w": 2360, "x": 150, "y": 1974,
    "z": 74,
}

BIGRAM_COUNTS: dict[str, int] = {
    "th": 152, "he": 128, "in": 94, "er": 94, "an": 82,
    "re": 68, "nd": 63, "at": 59, "on": 57, "nt": 56,
    "ha": 56, "es": 56, "st": 55, "en": 55, "ed": 53,
    "to": 52, "it": 50, "ou": 50, "ea": 47, "hi": 46,
    "is": 46, "or": 43, "ti": 34, "as": 33, "te": 27,
    "et": 19, "ng": 18, "of": 18, "al": 17, "de": 17,
    "se": 16, "le": 16, "sa": 14, "si": 13, "ar": 12,
}

TRIGRAM_COUNTS: dict[str, int] = {
    "the": 100, "and": 42, "ing": 31, "ion": 24, "tio": 23,
    "ent": 21, "ati": 19, "for": 17, "her": 16, "ter": 16,
    "hat": 14, "tha": 14, "ere": 13, "ate": 13, "his": 12,
    "con": 11, "res": 11, "ver": 10, "all": 10, "ons": 10,
    "nce": 9, "men": 9, "ith": 9, "ted": 9, "ers": 9,
    "pro": 8, "thi": 8, "wit": 8, "are": 8, "ess": 8,
    "not": 7, "ive": 7, "was": 7, "ect": 7, "rea": 7,
}

QUADGRAM_COUNTS: dict[str, int] = {
    "tion": 56, "ther": 23, "that": 20, "ting": 7, "with": 15,
    "this": 14, "here": 13, "ment": 7, "them": 12, "thei": 12,
    "ough": 11, "atio": 8, "ever": 10, "from": 10, "ight": 10,
    "hich": 9, "have": 9, "ould": 9, "thin": 9, "hter": 9,
    "ande": 8, "sion": 8, "some": 7, "they": 7, "comp": 6,
    "part": 6, "form": 6,
}

WORDS: frozenset[str] = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "any", "can",
    "her", "was", "one", "our", "out", "day", "get", "has", "him", "his",
    "how", "man", "new", "now", "old", "see", "two", "way", "who", "boy",
    "did", "its", "let", "put", "say", "she", "too", "use", "that", "with",
    "this", "have", "from", "they", "would", "there", "people", "which", "were",
    "about", "other", "into", "your", "could", "their", "some", "time", "more",
})

# Letter frequencies in percent, used as the target for shift estimation
LETTER_FREQUENCIES: dict[str, float] = {
    "a": 8.167, "b": 1.492, "c": 2.782, "d": 4.253, "e": 12.702,
    "f": 2.228, "g": 2.015, "h": 6.094, "i": 6.966, "j": 0.153,
    "k": 0.772, "l": 4.025, "m": 2.406, "n": 6.749, "o": 7.507,
    "p": 1.929, "q": 0.095, "r": 5.987, "s": 6.327, "t": 9.056,
    "u": 2.758, "v": 0.978, "w": 2.360, "x": 0.150, "y": 1.974,
    "z": 0.074,
}
