"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
서비스 인스턴스는 lifespan에서 생성되어 app.state에 저장됨.
"""

from fastapi import Cookie, Header, HTTPException, Request

from adapters.market.price_oracle import PriceOracle
from core.config.loader import Settings
from core.trading.admin import AdminControl
from core.trading.conversion import ConversionService
from core.trading.settlement import SettlementEngine
from core.trading.wallet import WalletService


def get_app_settings(request: Request) -> Settings:
    """애플리케이션 설정 반환"""
    return request.app.state.settings


def get_current_user(
    user: str | None = Cookie(default=None),
    x_user: str | None = Header(default=None, alias="X-User"),
) -> str:
    """요청 사용자 핸들

    인증은 외부에서 처리되며 user 쿠키 또는 X-User 헤더로 전달됨.

    Raises:
        HTTPException: 401 (사용자 정보 없음)
    """
    username = (user or x_user or "").strip()
    if not username:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return username


def get_price_oracle(request: Request) -> PriceOracle:
    return request.app.state.oracle


def get_wallet_service(request: Request) -> WalletService:
    return request.app.state.wallet


def get_conversion_service(request: Request) -> ConversionService:
    return request.app.state.conversion


def get_settlement_engine(request: Request) -> SettlementEngine:
    return request.app.state.settlement


def get_admin_control(request: Request) -> AdminControl:
    return request.app.state.admin
