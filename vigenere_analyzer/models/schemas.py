from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Enums
# ============================================================================


class SortMetric(str, Enum):
    """Metric used to order ranked results."""

    TOTAL = "total"
    IC = "ic"
    NGRAM = "ngram"
    DICT = "dict"


class ResultDisplay(str, Enum):
    """How many ranked results to return."""

    BEST = "best"
    TOP10 = "top10"
    ALL = "all"


class AnalysisStatus(str, Enum):
    """Final state of an analysis job."""

    COMPLETED = "completed"


# ============================================================================
# Result Schemas
# ============================================================================


class CandidateResultSchema(BaseModel):
    """A ranked candidate key with raw and normalized scores."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    plaintext: str
    key_length: int
    method: str

    # Raw scores
    ic: float
    ngram_score: float
    dict_score: float

    # Normalized scores (0-100)
    ic_norm: float
    ngram_score_norm: float
    dict_score_norm: float
    total_score: float


# ============================================================================
# Request Schemas
# ============================================================================


class AnalyzeRequest(BaseModel):
    """Request schema for /analyze endpoints."""

    ciphertext: str = Field(min_length=1, max_length=100_000)
    alphabet: str | None = Field(default=None, min_length=1)
    known_plaintext: str = ""
    min_key_length: int | None = Field(default=None, ge=1)
    max_key_length: int | None = Field(default=None, ge=1)
    use_ic: bool = True
    use_ngrams: bool = True
    use_dict: bool = True
    sort_by: SortMetric = SortMetric.TOTAL
    display: ResultDisplay = ResultDisplay.TOP10


class DecryptRequest(BaseModel):
    """Request schema for /decrypt endpoint."""

    ciphertext: str = Field(min_length=1, max_length=100_000)
    key: str = Field(min_length=1)
    alphabet: str | None = Field(default=None, min_length=1)


class EncryptRequest(BaseModel):
    """Request schema for /encrypt endpoint."""

    plaintext: str = Field(min_length=1, max_length=100_000)
    key: str = Field(min_length=1)
    alphabet: str | None = Field(default=None, min_length=1)


# ============================================================================
# Response Schemas
# ============================================================================


class AnalyzeResponse(BaseModel):
    """Response schema for /analyze endpoint."""

    job_id: int
    status: AnalysisStatus
    results: list[CandidateResultSchema]
    total_results: int
    explanations: list[str] = Field(default_factory=list)


class DecryptResponse(BaseModel):
    """Response schema for /decrypt endpoint."""

    plaintext: str
    key_used: str
    ic: float
    ngram_score: float
    dict_score: float
    explanation: str


class EncryptResponse(BaseModel):
    """Response schema for /encrypt endpoint."""

    ciphertext: str
    key_used: str
    alphabet: str


class HealthResponse(BaseModel):
    """Response schema for /health endpoint."""

    status: str
    app_name: str
    version: str


# ============================================================================
# Stream Event Schemas
# ============================================================================


class ProgressEventSchema(BaseModel):
    """A progress line of the analysis stream."""

    type: Literal["progress"] = "progress"
    job_id: int
    progress: float = Field(ge=0.0, le=100.0)


class CompletedEventSchema(BaseModel):
    """Final line of a successful analysis stream."""

    type: Literal["completed"] = "completed"
    job_id: int
    results: list[CandidateResultSchema]
    total_results: int


class FailedEventSchema(BaseModel):
    """Final line of an analysis stream that produced no ranking."""

    type: Literal["failed"] = "failed"
    job_id: int
    reason: str
    message: str


# ============================================================================
# Error Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    message: str
    details: dict = Field(default_factory=dict)
