"""
거래 API 라우터

- POST /api/convert: 환전
- POST /api/trade: 거래 (즉시 정산)
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from core.errors import LedgerError
from core.trading.conversion import ConversionService
from core.trading.settlement import SettlementEngine
from web.dependencies import (
    get_conversion_service,
    get_current_user,
    get_settlement_engine,
)
from web.models.requests import ConvertRequest, TradeRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Trading"])


@router.post("/convert")
async def convert(
    request: ConvertRequest,
    username: str = Depends(get_current_user),
    service: ConversionService = Depends(get_conversion_service),
) -> dict[str, Any]:
    """환전

    Returns:
        {"success": True, "convertedAmount": 입금 금액, "rate": 적용 비율}
    """
    if request.from_currency is None or request.amount is None:
        raise HTTPException(status_code=400, detail="Missing required fields")

    try:
        result = await service.convert(
            username,
            from_currency=request.from_currency,
            to_currency=request.to_currency,
            amount=request.amount,
        )
        return result.to_dict()
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Failed to convert: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/trade")
async def trade(
    request: TradeRequest,
    username: str = Depends(get_current_user),
    engine: SettlementEngine = Depends(get_settlement_engine),
) -> dict[str, Any]:
    """거래 요청 및 즉시 정산

    Returns:
        {"result": "win" | "lose", "profit": 손익}
    """
    if request.symbol is None or request.side is None or request.amount is None:
        raise HTTPException(status_code=400, detail="Missing required fields")

    try:
        result = await engine.settle_trade(
            username,
            symbol=request.symbol,
            side=request.side,
            amount=request.amount,
            duration=request.duration,
            percent=request.percent,
        )
        return result.to_dict()
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Failed to settle trade: {e}")
        raise HTTPException(status_code=500, detail=str(e))
