"""
Ledger Engine

잔고 차감/입금의 원자적 처리.

두 가지 잔고 표현:
- users.balance: 기본 통화(USDT)의 레거시 잔고. 기본 통화의 기준값.
- user_balances: 통화별 잔고. 기본 통화 항목은 레거시 잔고의 호환용 미러.

기본 통화에 대한 이중 기록은 모두 _write()에서만 처리.
레거시 필드를 제거할 때는 _write()만 수정하면 됨.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any

from core.constants import Defaults
from core.errors import InsufficientFunds, InvalidInput, UserNotFound
from core.ledger.store import BalanceStore
from core.ledger.types import BalanceEntry

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


def normalize_currency(currency: Any) -> str:
    """통화 코드 정규화 (대문자, 공백 제거)

    Raises:
        InvalidInput: 빈 값 또는 문자열이 아닌 경우
    """
    if not isinstance(currency, str) or not currency.strip():
        raise InvalidInput("Invalid currency")
    return currency.strip().upper()


def parse_amount(value: Any, allow_zero: bool = False) -> float:
    """금액 파싱 및 검증

    Args:
        value: 숫자 또는 숫자 문자열
        allow_zero: 0 허용 여부

    Returns:
        float 금액

    Raises:
        InvalidInput: 숫자가 아니거나, 유한하지 않거나, 범위를 벗어난 경우
    """
    if isinstance(value, bool):
        raise InvalidInput("Invalid amount")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid amount") from None

    if not math.isfinite(amount):
        raise InvalidInput("Invalid amount")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise InvalidInput("Amount must be positive")
    return amount


class LedgerEngine:
    """원장 엔진

    모든 연산은 하나의 작업 단위(SQLiteAdapter.transaction)로 실행.
    호출자가 이미 트랜잭션 안에 있으면 그 작업 단위에 합류하므로
    환전/정산/출금처럼 여러 단계를 하나로 묶을 수 있음.

    Args:
        db: SQLite 어댑터
        primary_currency: 기본 통화 (레거시 잔고 통화)

    사용 예시:
    ```python
    ledger = LedgerEngine(db)

    # 단일 연산
    await ledger.credit("alice", "BTC", 0.5)

    # 다단계 연산
    async with db.transaction():
        await ledger.debit("alice", "USDT", 100)
        await ledger.credit("alice", "BTC", 0.001)
    ```
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        primary_currency: str = Defaults.PRIMARY_CURRENCY,
    ):
        self.db = db
        self.store = BalanceStore(db)
        self.primary_currency = primary_currency.upper()

    def is_primary(self, currency: str) -> bool:
        """기본 통화 여부"""
        return currency == self.primary_currency

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def available(self, username: str, currency: str) -> float:
        """사용 가능 잔고

        기본 통화는 레거시 잔고, 그 외는 통화별 잔고 (없으면 0).
        """
        currency = normalize_currency(currency)

        if self.is_primary(currency):
            balance = await self.store.get_legacy_balance(username)
        else:
            balance = await self.store.get_entry(username, currency)
        return balance or 0.0

    async def balances(self, username: str) -> list[BalanceEntry]:
        """통화별 잔고 목록 (user_balances 그대로)"""
        return await self.store.list_entries(username)

    # -------------------------------------------------------------------------
    # 검증된 연산 (사용자 요청 경로)
    # -------------------------------------------------------------------------

    async def debit(self, username: str, currency: Any, amount: Any) -> float:
        """잔고 차감 (잔고 확인 포함)

        Args:
            username: 사용자
            currency: 통화
            amount: 차감 금액 (> 0)

        Returns:
            차감 후 사용 가능 잔고

        Raises:
            InvalidInput: 금액/통화가 유효하지 않은 경우
            InsufficientFunds: 사용 가능 잔고 < amount
        """
        currency = normalize_currency(currency)
        amount = parse_amount(amount)

        async with self.db.transaction():
            available = await self.available(username, currency)
            if available < amount:
                raise InsufficientFunds(currency, available, amount)

            await self._write(username, currency, -amount)

        logger.info(f"Debit: {username} -{amount} {currency}")
        return available - amount

    async def credit(self, username: str, currency: Any, amount: Any) -> None:
        """잔고 입금 (upsert)

        기본 통화면 레거시 잔고도 같은 금액만큼 증가.

        Raises:
            InvalidInput: 금액이 음수이거나 유효하지 않은 경우
            UserNotFound: 사용자가 없는 경우
        """
        currency = normalize_currency(currency)
        amount = parse_amount(amount, allow_zero=True)

        async with self.db.transaction():
            await self._require_user(username)
            await self._write(username, currency, amount)

        logger.info(f"Credit: {username} +{amount} {currency}")

    async def refund(self, username: str, currency: Any, amount: Any) -> None:
        """출금 거절 환불 (credit과 동일한 효과)"""
        await self.credit(username, currency, amount)

    # -------------------------------------------------------------------------
    # 검증 없는 연산 (관리자/정산 경로)
    # -------------------------------------------------------------------------

    async def adjust(self, username: str, currency: Any, amount: Any) -> None:
        """관리자 잔고 조정 (부호 있는 금액, 잔고 확인 없음)

        잔고를 음수로 만들 수 있음.

        Raises:
            InvalidInput: 금액이 숫자가 아닌 경우
            UserNotFound: 사용자가 없는 경우
        """
        currency = normalize_currency(currency)
        delta = _parse_signed(amount)

        async with self.db.transaction():
            await self._require_user(username)
            await self._write(username, currency, delta)

        logger.info(f"Adjust: {username} {delta:+} {currency}")

    async def apply_settlement(
        self,
        username: str,
        profit: float,
        allow_negative: bool = True,
    ) -> None:
        """거래 정산 손익을 기본 통화에 반영

        Args:
            username: 사용자
            profit: 손익 (음수 = 손실)
            allow_negative: True면 손실이 잔고를 음수로 만들 수 있음.
                False면 손실은 debit 경로로 처리되어 잔고 확인.

        Raises:
            InsufficientFunds: allow_negative=False이고 손실 > 잔고
        """
        if profit >= 0 or allow_negative:
            async with self.db.transaction():
                await self._require_user(username)
                await self._write(username, self.primary_currency, profit)
            return

        await self.debit(username, self.primary_currency, -profit)

    # -------------------------------------------------------------------------
    # 내부
    # -------------------------------------------------------------------------

    async def _require_user(self, username: str) -> None:
        if await self.store.get_legacy_balance(username) is None:
            raise UserNotFound(username)

    async def _write(self, username: str, currency: str, delta: float) -> None:
        """잔고 반영 (이중 기록은 여기서만 처리)

        기본 통화:
        - 레거시 잔고에 delta 반영
        - 증가: 미러 항목 upsert
        - 감소: 미러 항목이 있고 충분할 때만 차감 (불일치는 허용, 보정하지 않음)

        그 외 통화: 통화별 잔고 upsert
        """
        if not self.is_primary(currency):
            await self.store.upsert_entry(username, currency, delta)
            return

        await self.store.add_legacy(username, delta)

        if delta >= 0:
            await self.store.upsert_entry(username, currency, delta)
            return

        synced = await self.store.deduct_entry(username, currency, -delta)
        if not synced:
            logger.debug(f"{currency} 미러 잔고 차감 생략: {username}")


def _parse_signed(value: Any) -> float:
    """부호 있는 금액 파싱"""
    if isinstance(value, bool):
        raise InvalidInput("Invalid amount")
    try:
        delta = float(value)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid amount") from None
    if not math.isfinite(delta):
        raise InvalidInput("Invalid amount")
    return delta
