"""
지갑 서비스 (입금/출금 요청)

입금: pending 요청만 생성 (잔고 변화 없음, 관리자 승인 시 입금).
출금: 잔고를 먼저 차감(에스크로)한 뒤 pending 요청 생성. 한 작업 단위.
"""

import logging
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import AccountFrozen, InvalidInput, UserNotFound
from core.ledger.engine import LedgerEngine, normalize_currency, parse_amount
from core.ledger.types import (
    DepositRequest,
    TradeRecord,
    User,
    WithdrawalRequest,
)
from core.storage.request_store import DepositStore, WithdrawalStore
from core.storage.trade_store import TradeStore
from core.storage.user_store import UserStore

logger = logging.getLogger(__name__)


def _require_text(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput("Missing required fields")
    return value.strip()


class WalletService:
    """입출금 요청 및 사용자 조회

    Args:
        db: SQLite 어댑터
        ledger: 원장 엔진
    """

    def __init__(self, db: SQLiteAdapter, ledger: LedgerEngine):
        self.db = db
        self.ledger = ledger
        self.users = UserStore(db)
        self.deposits = DepositStore(db)
        self.withdrawals = WithdrawalStore(db)
        self.trades = TradeStore(db)

    async def _active_user(self, username: str) -> User:
        user = await self.users.get(username)
        if user is None:
            raise UserNotFound(username)
        if user.is_frozen:
            raise AccountFrozen("Account frozen. Contact support.")
        return user

    async def submit_deposit(
        self,
        username: str,
        currency: Any,
        network: Any,
        amount: Any,
        proof: str | None = None,
    ) -> DepositRequest:
        """입금 요청 제출

        Raises:
            InvalidInput: 필수 필드 누락 또는 금액 <= 0
            UserNotFound: 사용자 없음
            AccountFrozen: 동결 계정
        """
        if currency is None or network is None or amount is None:
            raise InvalidInput("Missing required fields")
        currency = normalize_currency(currency)
        network = _require_text(network)
        amount = parse_amount(amount)

        await self._active_user(username)

        async with self.db.transaction():
            return await self.deposits.create(username, currency, network, amount, proof)

    async def submit_withdrawal(
        self,
        username: str,
        currency: Any,
        network: Any,
        amount: Any,
        address: Any,
    ) -> WithdrawalRequest:
        """출금 요청 제출 (잔고 즉시 차감)

        Raises:
            InvalidInput: 필수 필드 누락 또는 금액 <= 0
            UserNotFound: 사용자 없음
            AccountFrozen: 동결 계정
            InsufficientFunds: 잔고 부족 (요청 생성 안 됨)
        """
        if currency is None or network is None or amount is None or address is None:
            raise InvalidInput("Missing required fields")
        currency = normalize_currency(currency)
        network = _require_text(network)
        address = _require_text(address)
        amount = parse_amount(amount)

        await self._active_user(username)

        async with self.db.transaction():
            await self.ledger.debit(username, currency, amount)
            return await self.withdrawals.create(
                username, currency, network, amount, address
            )

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def profile(self, username: str) -> dict[str, Any]:
        """사용자 정보 + 통화별 잔고"""
        user = await self.users.get(username)
        if user is None:
            raise UserNotFound(username)

        balances = await self.ledger.balances(username)
        data = user.to_dict()
        data["balances"] = [b.to_dict() for b in balances]
        return data

    async def trade_settings(self, username: str) -> dict[str, Any]:
        """사용자 거래 설정 (최소 금액, 등급)"""
        user = await self.users.get(username)
        if user is None:
            raise UserNotFound(username)
        return {
            "min_trade_amount": user.min_trade_amount,
            "trade_settings": [t.to_dict() for t in user.trade_tiers],
        }

    async def deposit_history(self, username: str) -> list[DepositRequest]:
        return await self.deposits.list(username)

    async def withdrawal_history(self, username: str) -> list[WithdrawalRequest]:
        return await self.withdrawals.list(username)

    async def trade_history(self, username: str) -> list[TradeRecord]:
        return await self.trades.list(username)
