"""
관리자 제어 (Admin Control Surface)

승리 방향 설정, 잔고 조정, 계정 상태/거래 설정 변경,
입출금 요청 승인/거절, 요약 통계.

입출금 상태 전이:
- 입금 승인: 해당 통화로 credit
- 입금 거절: 잔고 변화 없음
- 출금 승인: 잔고 변화 없음 (이미 차감됨)
- 출금 거절: refund
전이는 pending에서만 가능.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import AlreadyProcessed, InvalidInput, NotFound, UserNotFound
from core.ledger.engine import LedgerEngine, parse_amount
from core.ledger.types import (
    DepositRequest,
    TradeRecord,
    TradeTier,
    User,
    WithdrawalRequest,
)
from core.storage.config_store import ConfigStore
from core.storage.request_store import DepositStore, WithdrawalStore
from core.storage.trade_store import TradeStore
from core.storage.user_store import UserStore
from core.trading.outcome import OutcomeCell, validate_side
from core.types import AccountStatus, RequestStatus

logger = logging.getLogger(__name__)

# 요약 차트 일수
SUMMARY_CHART_DAYS = 7


def parse_decision(status: Any) -> RequestStatus:
    """승인/거절 상태 파싱

    Raises:
        InvalidInput: approved/rejected가 아닌 경우
    """
    if status in (RequestStatus.APPROVED.value, RequestStatus.REJECTED.value):
        return RequestStatus(status)
    raise InvalidInput("Invalid status")


def parse_tiers(raw: Any) -> list[TradeTier]:
    """관리자 입력 거래 등급 검증 (잘못된 항목이 있으면 전체 거절)"""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise InvalidInput("trade_settings must be a list")

    tiers: list[TradeTier] = []
    for item in raw:
        if not isinstance(item, dict):
            raise InvalidInput("Invalid trade setting")
        try:
            tier = TradeTier.from_dict(item)
        except (TypeError, ValueError):
            raise InvalidInput("Invalid trade setting") from None
        if not (math.isfinite(tier.duration) and math.isfinite(tier.percent)):
            raise InvalidInput("Invalid trade setting")
        tiers.append(tier)
    return tiers


class AdminControl:
    """관리자 제어

    Args:
        db: SQLite 어댑터
        ledger: 원장 엔진
        outcome: 승리 방향 셀
        config_store: 런타임 설정 (승리 방향 저장)
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        ledger: LedgerEngine,
        outcome: OutcomeCell,
        config_store: ConfigStore,
    ):
        self.db = db
        self.ledger = ledger
        self.outcome = outcome
        self.config_store = config_store
        self.users = UserStore(db)
        self.deposits = DepositStore(db)
        self.withdrawals = WithdrawalStore(db)
        self.trades = TradeStore(db)

    # -------------------------------------------------------------------------
    # 승리 방향
    # -------------------------------------------------------------------------

    async def set_outcome_parameter(self, side: Any) -> str:
        """승리 방향 변경 (이후 정산부터 적용)

        저장에 성공한 뒤에만 셀을 바꿈 (재시작 후 값과 일치).

        Raises:
            InvalidInput: long/short가 아닌 경우
            StoreFailure: 저장 실패 (셀은 그대로)
        """
        side = validate_side(side)
        await self.config_store.save_win_side(side)
        return await self.outcome.set(side)

    async def get_outcome_parameter(self) -> str:
        return await self.outcome.snapshot()

    # -------------------------------------------------------------------------
    # 정산 정책
    # -------------------------------------------------------------------------

    async def get_settlement_policy(self) -> dict[str, bool]:
        return await self.config_store.get_settlement_policy()

    async def update_settlement_policy(self, changes: Any) -> dict[str, bool]:
        """정산 정책 변경 (allow_negative_balance, enforce_frozen)

        Raises:
            InvalidInput: 알 수 없는 필드 또는 bool이 아닌 값
        """
        policy = await self.config_store.update_settlement_policy(changes, updated_by="admin")
        logger.info(f"Settlement policy updated: {policy}")
        return policy

    # -------------------------------------------------------------------------
    # 잔고
    # -------------------------------------------------------------------------

    async def adjust_balance(
        self,
        username: str,
        amount: Any,
        currency: Any = None,
    ) -> None:
        """잔고 조정 (부호 있는 금액, 잔고 확인 없음)

        Raises:
            InvalidInput: 금액이 숫자가 아닌 경우
            UserNotFound: 사용자 없음
        """
        currency = currency or self.ledger.primary_currency
        await self.ledger.adjust(username, currency, amount)

    async def add_coin_balance(self, username: str, currency: Any, amount: Any) -> None:
        """통화별 잔고 조정 (기본 통화면 레거시 잔고도 함께)"""
        if not username or currency is None or amount is None:
            raise InvalidInput("Missing fields")
        await self.ledger.adjust(username, currency, amount)

    # -------------------------------------------------------------------------
    # 사용자
    # -------------------------------------------------------------------------

    async def create_user(self, username: Any, balance: Any = 0) -> User:
        """사용자 생성

        초기 잔고는 credit으로 반영되어 미러 항목도 생성.

        Raises:
            InvalidInput: username 누락, 중복, 잘못된 잔고
        """
        if not isinstance(username, str) or not username.strip():
            raise InvalidInput("Missing username")
        username = username.strip()
        initial = parse_amount(balance if balance is not None else 0, allow_zero=True)

        async with self.db.transaction():
            if await self.users.get(username) is not None:
                raise InvalidInput("User already exists")
            await self.users.create(username)
            if initial > 0:
                await self.ledger.credit(username, self.ledger.primary_currency, initial)

        return await self.users.get(username)  # type: ignore

    async def list_users(self) -> list[User]:
        return await self.users.list_all()

    async def set_status(self, username: Any, status: Any) -> None:
        """계정 동결/해제

        Raises:
            InvalidInput: 필드 누락 또는 잘못된 상태
            UserNotFound: 사용자 없음
        """
        if not username or not status:
            raise InvalidInput("Missing fields")
        try:
            new_status = AccountStatus(status)
        except ValueError:
            raise InvalidInput("Invalid status") from None

        async with self.db.transaction():
            if not await self.users.set_status(username, new_status):
                raise UserNotFound(username)
        logger.info(f"User status changed: {username} -> {new_status.value}")

    async def update_trade_settings(
        self,
        username: Any,
        min_trade_amount: Any,
        trade_settings: Any,
    ) -> None:
        """최소 거래 금액 / 거래 등급 변경

        Raises:
            InvalidInput: username 누락 또는 잘못된 값
            UserNotFound: 사용자 없음
        """
        if not username:
            raise InvalidInput("Missing username")
        minimum = parse_amount(min_trade_amount, allow_zero=True)
        tiers = parse_tiers(trade_settings)

        async with self.db.transaction():
            if not await self.users.update_trade_settings(username, minimum, tiers):
                raise UserNotFound(username)
        logger.info(
            f"Trade settings updated: {username} min={minimum} tiers={len(tiers)}"
        )

    async def user_details(self, username: str) -> dict[str, Any]:
        """사용자 상세 (승인된 입출금 합계, 통화별 잔고)"""
        user = await self.users.get(username)
        if user is None:
            raise UserNotFound(username)

        return {
            "user": user.to_dict(),
            "total_deposited": await self.deposits.approved_total(username),
            "total_withdrawn": await self.withdrawals.approved_total(username),
            "balances": [b.to_dict() for b in await self.ledger.balances(username)],
        }

    async def summary(self, today: datetime | None = None) -> dict[str, Any]:
        """플랫폼 요약 통계

        Args:
            today: 기준 일자 (테스트용, 기본 UTC 현재)
        """
        now = today or datetime.now(timezone.utc)
        today_str = now.date().isoformat()

        chart: list[dict[str, Any]] = []
        for offset in range(SUMMARY_CHART_DAYS - 1, -1, -1):
            day = (now - timedelta(days=offset)).date().isoformat()
            chart.append({
                "date": day,
                "income": await self._net_deposit(day),
                "newUsers": await self.users.count_created_on(day),
            })

        return {
            "totalUsers": await self.users.count(),
            "frozenUsers": await self.users.count(AccountStatus.FROZEN),
            "platformRechargeUpDown": await self._net_deposit(),
            "todayRechargeUpDown": await self._net_deposit(today_str),
            "chartData": chart,
        }

    async def _net_deposit(self, day: str | None = None) -> float:
        deposited = await self.deposits.approved_total(day=day)
        withdrawn = await self.withdrawals.approved_total(day=day)
        return deposited - withdrawn

    # -------------------------------------------------------------------------
    # 입출금 요청 처리
    # -------------------------------------------------------------------------

    async def set_deposit_status(self, deposit_id: int, status: Any) -> DepositRequest:
        """입금 요청 승인/거절

        Raises:
            InvalidInput: approved/rejected가 아닌 경우
            NotFound: 요청 없음
            AlreadyProcessed: pending이 아닌 경우
        """
        decision = parse_decision(status)

        async with self.db.transaction():
            deposit = await self.deposits.get(deposit_id)
            if deposit is None:
                raise NotFound("Deposit not found")
            if not await self.deposits.mark(deposit_id, decision):
                raise AlreadyProcessed("Deposit already processed")

            if decision == RequestStatus.APPROVED:
                await self.ledger.credit(deposit.username, deposit.currency, deposit.amount)

        logger.info(f"Deposit #{deposit_id} {decision.value}")
        deposit.status = decision
        return deposit

    async def set_withdrawal_status(
        self,
        withdrawal_id: int,
        status: Any,
    ) -> WithdrawalRequest:
        """출금 요청 승인/거절 (거절 시 환불)

        Raises:
            InvalidInput: approved/rejected가 아닌 경우
            NotFound: 요청 없음
            AlreadyProcessed: pending이 아닌 경우
        """
        decision = parse_decision(status)

        async with self.db.transaction():
            withdrawal = await self.withdrawals.get(withdrawal_id)
            if withdrawal is None:
                raise NotFound("Withdrawal not found")
            if not await self.withdrawals.mark(withdrawal_id, decision):
                raise AlreadyProcessed("Withdrawal already processed")

            if decision == RequestStatus.REJECTED:
                await self.ledger.refund(
                    withdrawal.username, withdrawal.currency, withdrawal.amount
                )

        logger.info(f"Withdrawal #{withdrawal_id} {decision.value}")
        withdrawal.status = decision
        return withdrawal

    # -------------------------------------------------------------------------
    # 전체 목록
    # -------------------------------------------------------------------------

    async def list_deposits(self) -> list[DepositRequest]:
        return await self.deposits.list()

    async def list_withdrawals(self) -> list[WithdrawalRequest]:
        return await self.withdrawals.list()

    async def list_trades(self) -> list[TradeRecord]:
        return await self.trades.list()
