from typing import Any


class CryptanalysisError(Exception):
    """Base exception for all cryptanalysis errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CryptanalysisError):
    """Raised when input validation fails."""

    pass


class CiphertextTooLongError(ValidationError):
    """Raised when ciphertext exceeds maximum length."""

    def __init__(self, length: int, max_length: int):
        super().__init__(
            f"Ciphertext length {length} exceeds maximum {max_length}",
            {"length": length, "max_length": max_length},
        )


class InvalidAlphabetError(ValidationError):
    """Raised when the alphabet is too short to shift over."""

    def __init__(self, alphabet: str):
        super().__init__(
            f"Alphabet must contain at least 2 unique characters, got {len(alphabet)}",
            {"alphabet": alphabet},
        )


class InvalidKeyError(ValidationError):
    """Raised when a key is empty or uses characters outside the alphabet."""

    pass


class InvalidKeyLengthRangeError(ValidationError):
    """Raised when the key length range is empty or starts below 1."""

    def __init__(self, min_length: int, max_length: int):
        if min_length < 1:
            message = f"Minimum key length must be at least 1, got {min_length}"
        else:
            message = "Minimum key length cannot be greater than maximum"
        super().__init__(
            message,
            {"min_key_length": min_length, "max_key_length": max_length},
        )


class AnalysisError(CryptanalysisError):
    """Raised when a key search fails."""

    pass


class NoCandidatesError(AnalysisError):
    """Raised when no candidate met the scoring thresholds."""

    MESSAGE = (
        "No valid keys found. Try expanding the key length range "
        "or disabling a scoring signal."
    )

    def __init__(self, job_id: int, min_length: int, max_length: int):
        super().__init__(
            self.MESSAGE,
            {
                "job_id": job_id,
                "min_key_length": min_length,
                "max_key_length": max_length,
            },
        )


class JobSupersededError(AnalysisError):
    """Raised when a newer job of the same session replaced a running one."""

    def __init__(self, job_id: int, current_job_id: int):
        super().__init__(
            f"Job {job_id} was superseded by a newer analysis",
            {"job_id": job_id, "current_job_id": current_job_id},
        )
