"""
입출금 API 라우터

사용자 입금/출금 요청 제출.
- POST /api/deposit: 입금 요청 (pending, 관리자 승인 시 입금)
- POST /api/withdraw: 출금 요청 (잔고 즉시 차감)
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from core.errors import LedgerError
from core.trading.wallet import WalletService
from web.dependencies import get_current_user, get_wallet_service
from web.models.requests import DepositCreateRequest, WithdrawCreateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Wallet"])


@router.post("/deposit")
async def submit_deposit(
    request: DepositCreateRequest,
    username: str = Depends(get_current_user),
    wallet: WalletService = Depends(get_wallet_service),
) -> dict[str, Any]:
    """입금 요청 제출

    Returns:
        {"id": 요청 ID, "status": "pending"}
    """
    try:
        deposit = await wallet.submit_deposit(
            username,
            currency=request.currency,
            network=request.network,
            amount=request.amount,
            proof=request.proof,
        )
        return {"id": deposit.id, "status": deposit.status.value}
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Failed to submit deposit: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/withdraw")
async def submit_withdrawal(
    request: WithdrawCreateRequest,
    username: str = Depends(get_current_user),
    wallet: WalletService = Depends(get_wallet_service),
) -> dict[str, Any]:
    """출금 요청 제출

    잔고가 부족하면 400, 요청은 생성되지 않음.

    Returns:
        {"id": 요청 ID, "status": "pending"}
    """
    try:
        withdrawal = await wallet.submit_withdrawal(
            username,
            currency=request.currency,
            network=request.network,
            amount=request.amount,
            address=request.address,
        )
        return {"id": withdrawal.id, "status": withdrawal.status.value}
    except LedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Failed to submit withdrawal: {e}")
        raise HTTPException(status_code=500, detail=str(e))
