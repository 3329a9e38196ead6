"""
정산 엔진 (Settlement Engine)

거래 요청을 관리자 승리 방향으로 즉시 판정하고 손익을 기본 통화에 반영.

판정 규칙:
- 요청 방향 == 승리 방향 스냅샷 → win, profit = amount × percent / 100
- 그 외 → lose, profit = -amount

percent 결정:
- duration이 사용자 거래 등급과 일치하면 등급의 percent
- 아니면 요청의 percent
- 둘 다 유효하지 않으면 0
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import AccountFrozen, BelowMinimum, InvalidInput, UserNotFound
from core.ledger.engine import LedgerEngine, parse_amount
from core.ledger.types import TradeRecord, User
from core.storage.config_store import ConfigStore
from core.storage.trade_store import TradeStore
from core.storage.user_store import UserStore
from core.trading.outcome import OutcomeCell, validate_side
from core.types import TradeResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettlementResult:
    """정산 결과"""

    result: str
    profit: float

    def to_dict(self) -> dict[str, Any]:
        return {"result": self.result, "profit": self.profit}


def resolve_percent(user: User, duration: Any, percent: Any) -> float:
    """적용할 수익 비율 결정"""
    if duration is not None:
        tier = user.find_tier(duration)
        if tier is not None:
            return tier.percent

    if percent is None or isinstance(percent, bool):
        return 0.0
    try:
        value = float(percent)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


class SettlementEngine:
    """정산 엔진

    Args:
        db: SQLite 어댑터
        ledger: 원장 엔진
        outcome: 승리 방향 셀
        config_store: 런타임 설정 (정산 정책)

    사용 예시:
    ```python
    engine = SettlementEngine(db, ledger, OutcomeCell("long"), ConfigStore(db))
    result = await engine.settle_trade("alice", "BTCUSDT", "long", 100, percent=50)
    # SettlementResult(result="win", profit=50.0)
    ```
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
        self.trades = TradeStore(db)

    async def settle_trade(
        self,
        username: str,
        symbol: Any,
        side: Any,
        amount: Any,
        duration: Any = None,
        percent: Any = None,
    ) -> SettlementResult:
        """거래 정산

        Args:
            username: 사용자
            symbol: 거래 심볼 (기록용)
            side: long / short
            amount: 거래 금액 (기본 통화)
            duration: 거래 기간 (초, 등급 조회용)
            percent: 요청 수익 비율 (등급 없을 때 사용)

        Returns:
            SettlementResult

        Raises:
            InvalidInput: 금액/방향/심볼이 유효하지 않음
            UserNotFound: 사용자 없음
            BelowMinimum: 최소 거래 금액 미만
            AccountFrozen: 동결 계정 (enforce_frozen 정책)
            InsufficientFunds: 음수 잔고 불허 정책에서 손실 > 잔고
        """
        win_side = await self.outcome.snapshot()

        amount = parse_amount(amount)
        side = validate_side(side)
        if not isinstance(symbol, str) or not symbol.strip():
            raise InvalidInput("Missing required fields")
        symbol = symbol.strip()

        user = await self.users.get(username)
        if user is None:
            raise UserNotFound(username)

        policy = await self.config_store.get_settlement_policy()
        if policy["enforce_frozen"] and user.is_frozen:
            raise AccountFrozen()

        if amount < user.min_trade_amount:
            raise BelowMinimum(amount, user.min_trade_amount)

        rate = resolve_percent(user, duration, percent)
        if side == win_side:
            result = TradeResult.WIN.value
            profit = amount * rate / 100
        else:
            result = TradeResult.LOSE.value
            profit = -amount

        async with self.db.transaction():
            await self.trades.append(
                TradeRecord(
                    username=username,
                    symbol=symbol,
                    side=side,
                    amount=amount,
                    profit=profit,
                    result=result,
                )
            )
            await self.ledger.apply_settlement(
                username,
                profit,
                allow_negative=policy["allow_negative_balance"],
            )

        logger.info(
            f"Trade settled: {username} {symbol} {side} {amount} "
            f"-> {result} ({profit:+})"
        )
        return SettlementResult(result=result, profit=profit)
