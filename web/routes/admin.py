"""
관리자 API 라우터

승리 방향, 정산 정책, 잔고 조정, 사용자 관리, 입출금 요청 처리, 요약 통계.
관리자 인증은 외부(리버스 프록시)에서 처리.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from core.errors import LedgerError
from core.trading.admin import AdminControl
from web.dependencies import get_admin_control
from web.models.requests import (
    AddCoinBalanceRequest,
    AdminBalanceRequest,
    SettlementPolicyRequest,
    StatusUpdateRequest,
    TradeSettingsRequest,
    UserCreateRequest,
    UserStatusRequest,
    WinSideRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Admin"])


def _to_http(e: LedgerError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


# =========================================================================
# 승리 방향
# =========================================================================


@router.get("/admin/winside")
async def get_win_side(
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, str]:
    """현재 승리 방향"""
    return {"winSide": await admin.get_outcome_parameter()}


@router.post("/admin/winside")
async def set_win_side(
    request: WinSideRequest,
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, str]:
    """승리 방향 변경 (long / short)"""
    try:
        side = await admin.set_outcome_parameter(request.side)
        return {"winSide": side}
    except LedgerError as e:
        raise _to_http(e)


# =========================================================================
# 정산 정책
# =========================================================================


@router.get("/admin/config/settlement")
async def get_settlement_policy(
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, Any]:
    """정산 정책 조회"""
    return {"key": "settlement", "value": await admin.get_settlement_policy()}


@router.put("/admin/config/settlement")
async def update_settlement_policy(
    request: SettlementPolicyRequest,
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, Any]:
    """정산 정책 변경

    지정한 필드만 변경 (allow_negative_balance, enforce_frozen).
    다음 정산부터 적용.
    """
    try:
        policy = await admin.update_settlement_policy(request.value)
        return {"key": "settlement", "value": policy}
    except LedgerError as e:
        raise _to_http(e)
    except Exception as e:
        logger.error(f"Failed to update settlement policy: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# =========================================================================
# 잔고
# =========================================================================


@router.post("/admin/users/balance")
async def adjust_balance(
    request: AdminBalanceRequest,
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, str]:
    """잔고 조정 (음수면 차감, 잔고 확인 없음)"""
    if not request.username or request.amount is None:
        raise HTTPException(status_code=400, detail="Missing fields")

    try:
        await admin.adjust_balance(request.username, request.amount, request.currency)
        return {"status": "updated"}
    except LedgerError as e:
        raise _to_http(e)
    except Exception as e:
        logger.error(f"Failed to adjust balance: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/admin/users/add-coin-balance")
async def add_coin_balance(
    request: AddCoinBalanceRequest,
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, str]:
    """통화별 잔고 조정"""
    try:
        await admin.add_coin_balance(request.username, request.currency, request.amount)
        return {"status": "updated"}
    except LedgerError as e:
        raise _to_http(e)
    except Exception as e:
        logger.error(f"Failed to add coin balance: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# =========================================================================
# 사용자
# =========================================================================


@router.get("/admin/users")
async def list_users(
    admin: AdminControl = Depends(get_admin_control),
) -> list[dict[str, Any]]:
    """전체 사용자 목록"""
    return [u.to_dict() for u in await admin.list_users()]


@router.post("/admin/users")
async def create_user(
    request: UserCreateRequest,
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, str]:
    """사용자 생성"""
    try:
        await admin.create_user(request.username, request.balance)
        return {"status": "created"}
    except LedgerError as e:
        raise _to_http(e)


@router.get("/admin/user/{username}/details")
async def get_user_details(
    username: str,
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, Any]:
    """사용자 상세 (입출금 합계, 통화별 잔고)"""
    try:
        return await admin.user_details(username)
    except LedgerError as e:
        raise _to_http(e)


@router.post("/admin/users/freeze")
async def set_user_status(
    request: UserStatusRequest,
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, bool]:
    """계정 동결/해제 (status: active / frozen)"""
    try:
        await admin.set_status(request.username, request.status)
        return {"success": True}
    except LedgerError as e:
        raise _to_http(e)


@router.post("/admin/users/settings")
async def update_trade_settings(
    request: TradeSettingsRequest,
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, bool]:
    """최소 거래 금액 / 거래 등급 변경"""
    try:
        await admin.update_trade_settings(
            request.username,
            request.min_trade_amount,
            request.trade_settings,
        )
        return {"success": True}
    except LedgerError as e:
        raise _to_http(e)


@router.get("/admin/summary")
async def get_summary(
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, Any]:
    """플랫폼 요약 통계"""
    try:
        return await admin.summary()
    except Exception as e:
        logger.error(f"Failed to build summary: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# =========================================================================
# 입출금 요청
# =========================================================================


@router.get("/deposits")
async def list_deposits(
    admin: AdminControl = Depends(get_admin_control),
) -> list[dict[str, Any]]:
    """전체 입금 요청 (최신순)"""
    return [d.to_dict() for d in await admin.list_deposits()]


@router.get("/withdrawals")
async def list_withdrawals(
    admin: AdminControl = Depends(get_admin_control),
) -> list[dict[str, Any]]:
    """전체 출금 요청 (최신순)"""
    return [w.to_dict() for w in await admin.list_withdrawals()]


@router.get("/trades")
async def list_trades(
    admin: AdminControl = Depends(get_admin_control),
) -> list[dict[str, Any]]:
    """전체 거래 기록 (최신순)"""
    return [t.to_dict() for t in await admin.list_trades()]


@router.post("/deposit/{deposit_id}/status")
async def set_deposit_status(
    deposit_id: int,
    request: StatusUpdateRequest,
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, Any]:
    """입금 요청 승인/거절 (승인 시 입금)"""
    try:
        deposit = await admin.set_deposit_status(deposit_id, request.status)
        return {"success": True, "id": deposit.id, "status": deposit.status.value}
    except LedgerError as e:
        raise _to_http(e)
    except Exception as e:
        logger.error(f"Failed to update deposit #{deposit_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/withdraw/{withdrawal_id}/status")
async def set_withdrawal_status(
    withdrawal_id: int,
    request: StatusUpdateRequest,
    admin: AdminControl = Depends(get_admin_control),
) -> dict[str, Any]:
    """출금 요청 승인/거절 (거절 시 환불)"""
    try:
        withdrawal = await admin.set_withdrawal_status(withdrawal_id, request.status)
        return {"success": True, "id": withdrawal.id, "status": withdrawal.status.value}
    except LedgerError as e:
        raise _to_http(e)
    except Exception as e:
        logger.error(f"Failed to update withdrawal #{withdrawal_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
