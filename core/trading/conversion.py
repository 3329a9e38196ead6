"""
환전 서비스 (Conversion Service)

시세 비율로 한 통화를 다른 통화로 교환.
차감, 입금, 거래 기록은 하나의 작업 단위로 처리되어
중간 실패 시 모두 롤백.
"""

import logging
from dataclasses import dataclass
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.market.price_oracle import PriceOracle
from core.constants import Defaults
from core.errors import AccountFrozen, InvalidInput, PriceUnavailable, UserNotFound
from core.ledger.engine import LedgerEngine, normalize_currency, parse_amount
from core.ledger.types import TradeRecord
from core.storage.config_store import ConfigStore
from core.storage.trade_store import TradeStore
from core.storage.user_store import UserStore
from core.types import TradeResult, TradeSide

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    """환전 결과

    Attributes:
        converted_amount: 입금된 대상 통화 금액
        effective_rate: 적용 비율 (from 시세 / to 시세)
    """

    converted_amount: float
    effective_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "convertedAmount": self.converted_amount,
            "rate": self.effective_rate,
        }


class ConversionService:
    """환전 서비스

    Args:
        db: SQLite 어댑터
        ledger: 원장 엔진
        oracle: 시세 조회기
        config_store: 런타임 설정 (동결 계정 차단 정책)
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        ledger: LedgerEngine,
        oracle: PriceOracle,
        config_store: ConfigStore,
    ):
        self.db = db
        self.ledger = ledger
        self.oracle = oracle
        self.config_store = config_store
        self.users = UserStore(db)
        self.trades = TradeStore(db)

    async def convert(
        self,
        username: str,
        from_currency: Any,
        to_currency: Any = Defaults.PRIMARY_CURRENCY,
        amount: Any = None,
    ) -> ConversionResult:
        """환전 실행

        Args:
            username: 사용자
            from_currency: 원 통화
            to_currency: 대상 통화 (기본 USDT)
            amount: 원 통화 금액 (> 0)

        Returns:
            ConversionResult

        Raises:
            InvalidInput: 금액/통화가 유효하지 않거나 같은 통화
            PriceUnavailable: 시세 없음
            UserNotFound: 사용자 없음
            AccountFrozen: 동결 계정
            InsufficientFunds: 원 통화 잔고 부족
        """
        amount = parse_amount(amount)
        from_currency = normalize_currency(from_currency)
        to_currency = normalize_currency(to_currency or Defaults.PRIMARY_CURRENCY)
        if from_currency == to_currency:
            raise InvalidInput("Cannot convert to the same currency")

        prices = await self.oracle.get_prices()
        from_price = prices.get(from_currency)
        to_price = prices.get(to_currency)
        if not from_price:
            raise PriceUnavailable(from_currency)
        if not to_price:
            raise PriceUnavailable(to_currency)

        rate = from_price / to_price
        converted = amount * rate

        user = await self.users.get(username)
        if user is None:
            raise UserNotFound(username)
        policy = await self.config_store.get_settlement_policy()
        if policy["enforce_frozen"] and user.is_frozen:
            raise AccountFrozen()

        async with self.db.transaction():
            await self.ledger.debit(username, from_currency, amount)
            await self.ledger.credit(username, to_currency, converted)
            await self.trades.append(
                TradeRecord(
                    username=username,
                    symbol=f"{from_currency}-{to_currency}",
                    side=TradeSide.CONVERT.value,
                    amount=amount,
                    profit=converted,
                    result=TradeResult.WIN.value,
                )
            )

        logger.info(
            f"Convert: {username} {amount} {from_currency} -> "
            f"{converted} {to_currency} (rate={rate})"
        )
        return ConversionResult(converted_amount=converted, effective_rate=rate)
