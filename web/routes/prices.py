"""
시세 API 라우터

GET /api/prices - 통화별 USDT 시세 (조회 실패 시 고정 시세)
"""

from fastapi import APIRouter, Depends

from adapters.market.price_oracle import PriceOracle
from web.dependencies import get_price_oracle

router = APIRouter(prefix="/api", tags=["Prices"])


@router.get("/prices")
async def get_prices(
    oracle: PriceOracle = Depends(get_price_oracle),
) -> dict[str, float]:
    """현재 시세 조회

    Returns:
        {통화: 시세}
    """
    return await oracle.get_prices()
