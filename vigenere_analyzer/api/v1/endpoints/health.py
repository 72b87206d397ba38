from fastapi import APIRouter

from vigenere_analyzer import __version__
from vigenere_analyzer.dependencies import SettingsDep
from vigenere_analyzer.models.schemas import HealthResponse

router = APIRouter()


@router.get(
    "",
    response_model=HealthResponse,
    summary="Service health",
)
async def health(settings: SettingsDep) -> HealthResponse:
    """Report that the service is up."""
    return HealthResponse(status="ok", app_name=settings.app_name, version=__version__)
