"""
계정 API 라우터

요청 사용자 본인의 정보/설정/내역 조회.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from core.errors import LedgerError
from core.trading.wallet import WalletService
from web.dependencies import get_current_user, get_wallet_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Account"])


@router.get("/me")
async def get_me(
    username: str = Depends(get_current_user),
    wallet: WalletService = Depends(get_wallet_service),
) -> dict[str, Any]:
    """사용자 정보 + 통화별 잔고"""
    try:
        return await wallet.profile(username)
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/user/settings")
async def get_user_settings(
    username: str = Depends(get_current_user),
    wallet: WalletService = Depends(get_wallet_service),
) -> dict[str, Any]:
    """거래 설정 조회 (최소 거래 금액, 거래 등급)"""
    try:
        return await wallet.trade_settings(username)
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# =========================================================================
# 내역
# =========================================================================


@router.get("/history/deposits")
async def get_deposit_history(
    username: str = Depends(get_current_user),
    wallet: WalletService = Depends(get_wallet_service),
) -> list[dict[str, Any]]:
    """입금 요청 내역 (최신순)"""
    deposits = await wallet.deposit_history(username)
    return [d.to_dict() for d in deposits]


@router.get("/history/withdrawals")
async def get_withdrawal_history(
    username: str = Depends(get_current_user),
    wallet: WalletService = Depends(get_wallet_service),
) -> list[dict[str, Any]]:
    """출금 요청 내역 (최신순)"""
    withdrawals = await wallet.withdrawal_history(username)
    return [w.to_dict() for w in withdrawals]


@router.get("/history/trades")
async def get_trade_history(
    username: str = Depends(get_current_user),
    wallet: WalletService = Depends(get_wallet_service),
) -> list[dict[str, Any]]:
    """거래/환전 내역 (최신순)"""
    trades = await wallet.trade_history(username)
    return [t.to_dict() for t in trades]
