from fastapi import APIRouter, HTTPException, status

from vigenere_analyzer.core.exceptions import ValidationError
from vigenere_analyzer.dependencies import LanguageModelDep, NormalizerDep, SettingsDep
from vigenere_analyzer.models.schemas import DecryptRequest, DecryptResponse, ErrorResponse
from vigenere_analyzer.services.engines.vigenere import VigenereEngine
from vigenere_analyzer.services.pipeline.scorer import CandidateScorer

router = APIRouter()


@router.post(
    "",
    response_model=DecryptResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        500: {"model": ErrorResponse, "description": "Decryption failed"},
    },
    summary="Decrypt ciphertext",
    description="Decrypt ciphertext with a known Vigenère key and score the result.",
)
async def decrypt_ciphertext(
    request: DecryptRequest,
    settings: SettingsDep,
    normalizer: NormalizerDep,
    model: LanguageModelDep,
) -> DecryptResponse:
    """
    Decrypt ciphertext with a known key.

    The plaintext is scored with every metric so the caller can judge
    whether the key looks right.
    """
    try:
        alphabet = normalizer.normalize_alphabet(request.alphabet or settings.default_alphabet)
        ciphertext = normalizer.normalize(request.ciphertext)
        key = request.key.strip()

        engine = VigenereEngine(alphabet)
        result = engine.decrypt_with_key(ciphertext, key)
        scores = CandidateScorer(model).score(result.plaintext, alphabet)

        return DecryptResponse(
            plaintext=result.plaintext,
            key_used=result.key,
            ic=scores.ic,
            ngram_score=scores.ngram_score,
            dict_score=scores.dict_score,
            explanation=result.explanation,
        )

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Decryption failed: {str(e)}",
        )
