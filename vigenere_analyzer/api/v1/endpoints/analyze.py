import logging
from typing import AsyncIterator

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse

from vigenere_analyzer.core.config import Settings
from vigenere_analyzer.core.exceptions import (
    AnalysisError,
    JobSupersededError,
    NoCandidatesError,
    ValidationError,
)
from vigenere_analyzer.dependencies import NormalizerDep, OrchestratorDep, SettingsDep
from vigenere_analyzer.models.schemas import (
    AnalysisStatus,
    AnalyzeRequest,
    AnalyzeResponse,
    CandidateResultSchema,
    CompletedEventSchema,
    ErrorResponse,
    FailedEventSchema,
    ProgressEventSchema,
    ResultDisplay,
)
from vigenere_analyzer.services.explanation.generator import ExplanationGenerator
from vigenere_analyzer.services.pipeline.models import AnalysisOptions, CandidateResult
from vigenere_analyzer.services.pipeline.orchestrator import (
    AnalysisFailed,
    ProgressUpdate,
    SearchOrchestrator,
)
from vigenere_analyzer.services.preprocessing.normalizer import TextNormalizer

router = APIRouter()
logger = logging.getLogger(__name__)


def _build_options(
    request: AnalyzeRequest,
    settings: Settings,
    normalizer: TextNormalizer,
) -> AnalysisOptions:
    """Turn a validated request into search options."""
    return AnalysisOptions(
        ciphertext=normalizer.normalize(request.ciphertext),
        alphabet=normalizer.normalize_alphabet(request.alphabet or settings.default_alphabet),
        min_key_length=(
            settings.default_min_key_length
            if request.min_key_length is None
            else request.min_key_length
        ),
        max_key_length=(
            settings.default_max_key_length
            if request.max_key_length is None
            else request.max_key_length
        ),
        known_plaintext=request.known_plaintext.strip(),
        use_ic=request.use_ic,
        use_ngrams=request.use_ngrams,
        use_dict=request.use_dict,
        sort_by=request.sort_by,
    )


def _select(results: list[CandidateResult], display: ResultDisplay) -> list[CandidateResultSchema]:
    """Limit ranked results to the requested display mode."""
    if display == ResultDisplay.BEST:
        results = results[:1]
    elif display == ResultDisplay.TOP10:
        results = results[:10]
    return [CandidateResultSchema.model_validate(r) for r in results]


@router.post(
    "",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        409: {
            "model": ErrorResponse,
            "description": "Superseded by a newer analysis of the same session",
        },
        422: {"model": ErrorResponse, "description": "No candidates met the thresholds"},
        500: {"model": ErrorResponse, "description": "Analysis failed"},
    },
    summary="Break ciphertext",
    description=(
        "Search a range of key lengths for the most likely Vigenère key, "
        "score every candidate and return them ranked."
    ),
)
async def analyze_ciphertext(
    request: AnalyzeRequest,
    settings: SettingsDep,
    normalizer: NormalizerDep,
    orchestrator: OrchestratorDep,
) -> AnalyzeResponse:
    """
    Analyze ciphertext and return ranked key candidates.

    The analysis pipeline:
    1. Normalize the alphabet and ciphertext
    2. Partition key lengths across parallel workers
    3. Estimate a key per length and score its decryption
    4. Normalize and rank the surviving candidates
    """
    try:
        options = _build_options(request, settings, normalizer)
        outcome = await orchestrator.run_analysis(options)

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except JobSupersededError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=e.message,
        )
    except NoCandidatesError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.message,
        )
    except Exception as e:
        logger.exception("Analysis failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Analysis failed: {str(e)}",
        )

    explainer = ExplanationGenerator()
    return AnalyzeResponse(
        job_id=outcome.job_id,
        status=AnalysisStatus.COMPLETED,
        results=_select(outcome.results, request.display),
        total_results=len(outcome.results),
        explanations=explainer.generate(options, outcome.results),
    )


async def _event_lines(
    orchestrator: SearchOrchestrator,
    options: AnalysisOptions,
    display: ResultDisplay,
) -> AsyncIterator[str]:
    """Serialize analysis events as newline-delimited JSON."""
    job_id = orchestrator.current_job_id + 1
    try:
        async for event in orchestrator.start_analysis(options):
            job_id = event.job_id
            if isinstance(event, ProgressUpdate):
                line = ProgressEventSchema(job_id=event.job_id, progress=event.progress)
            elif isinstance(event, AnalysisFailed):
                line = FailedEventSchema(
                    job_id=event.job_id, reason=event.reason, message=event.message
                )
            else:
                line = CompletedEventSchema(
                    job_id=event.job_id,
                    results=_select(event.results, display),
                    total_results=len(event.results),
                )
            yield line.model_dump_json() + "\n"
    except AnalysisError as e:
        logger.exception("Analysis stream failed")
        yield FailedEventSchema(job_id=job_id, reason="error", message=e.message).model_dump_json() + "\n"


@router.post(
    "/stream",
    responses={
        200: {
            "content": {"application/x-ndjson": {}},
            "description": "Progress lines followed by one completed or failed line",
        },
        400: {"model": ErrorResponse, "description": "Invalid input"},
    },
    summary="Break ciphertext with progress",
    description=(
        "Same search as POST /analyze, streamed as newline-delimited JSON: "
        "progress events, then exactly one completed or failed event."
    ),
)
async def analyze_ciphertext_stream(
    request: AnalyzeRequest,
    settings: SettingsDep,
    normalizer: NormalizerDep,
    orchestrator: OrchestratorDep,
) -> StreamingResponse:
    """Stream the progress and outcome of a key search."""
    try:
        options = _build_options(request, settings, normalizer)
        orchestrator.validate(options)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    return StreamingResponse(
        _event_lines(orchestrator, options, request.display),
        media_type="application/x-ndjson",
    )
