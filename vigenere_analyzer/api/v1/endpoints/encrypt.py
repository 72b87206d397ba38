from fastapi import APIRouter, HTTPException, status

from vigenere_analyzer.core.exceptions import ValidationError
from vigenere_analyzer.dependencies import NormalizerDep, SettingsDep
from vigenere_analyzer.models.schemas import EncryptRequest, EncryptResponse, ErrorResponse
from vigenere_analyzer.services.engines.vigenere import VigenereEngine

router = APIRouter()


@router.post(
    "",
    response_model=EncryptResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
    },
    summary="Encrypt plaintext",
    description="Encrypt plaintext with a Vigenère key over the given alphabet.",
)
async def encrypt_plaintext(
    request: EncryptRequest,
    settings: SettingsDep,
    normalizer: NormalizerDep,
) -> EncryptResponse:
    """
    Encrypt plaintext with a known key.

    Characters outside the alphabet are copied unchanged.
    """
    try:
        alphabet = normalizer.normalize_alphabet(request.alphabet or settings.default_alphabet)
        plaintext = normalizer.normalize(request.plaintext)
        key = request.key.strip()

        engine = VigenereEngine(alphabet)
        ciphertext = engine.encrypt(plaintext, key)

        return EncryptResponse(
            ciphertext=ciphertext,
            key_used=key.lower(),
            alphabet=alphabet,
        )

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Encryption failed: {str(e)}",
        )
