"""
잔고 원장 (Balance Ledger)

레거시 단일 통화 잔고(users.balance)와 통화별 잔고(user_balances)를
일관되게 유지하는 원장.

사용 예시:
```python
from core.ledger import LedgerEngine

ledger = LedgerEngine(db, primary_currency="USDT")

await ledger.credit("alice", "USDT", 100)      # 레거시 + 미러 모두 증가
await ledger.debit("alice", "USDT", 40)        # 잔고 확인 후 차감
available = await ledger.available("alice", "USDT")
```
"""

from core.ledger.engine import LedgerEngine, normalize_currency, parse_amount
from core.ledger.store import BalanceStore
from core.ledger.types import (
    BalanceEntry,
    DepositRequest,
    TradeRecord,
    TradeTier,
    User,
    WithdrawalRequest,
)

__all__ = [
    "LedgerEngine",
    "BalanceStore",
    "normalize_currency",
    "parse_amount",
    "BalanceEntry",
    "DepositRequest",
    "TradeRecord",
    "TradeTier",
    "User",
    "WithdrawalRequest",
]
