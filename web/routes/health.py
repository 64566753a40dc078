"""
헬스 체크 엔드포인트

GET /health - 서버 상태 확인
"""

from fastapi import APIRouter, Depends

from adapters.qbo.session import QboSession
from core.config.loader import Settings
from web.dependencies import get_app_settings, get_session
from web.models.responses import HealthResponse

router = APIRouter(tags=["health"])

VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
    session: QboSession = Depends(get_session),
) -> HealthResponse:
    """서버 상태 확인

    Returns:
        HealthResponse: status, mode, 인증 여부, version 정보
    """
    return HealthResponse(
        status="ok",
        mode=settings.mode.value,
        authenticated=session.is_authenticated,
        version=VERSION,
    )
