"""
헬스 체크 엔드포인트

GET /api/health - 서버 상태 확인
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.config.loader import Settings
from web.dependencies import get_app_settings

API_VERSION = "1.0.0"

router = APIRouter(prefix="/api", tags=["health"])


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str
    primary_currency: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """서버 상태 확인

    Returns:
        HealthResponse: status, primary_currency, version 정보
    """
    return HealthResponse(
        status="ok",
        primary_currency=settings.primary_currency,
        version=API_VERSION,
    )
